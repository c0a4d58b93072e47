"""Batched, paced, concurrent resolution of many remote items."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Sequence, TypeVar

from tqdm import tqdm

from ..config import BatchConfig
from ..models.remote import RemoteItemReference, ResolutionFailure, ResolvedRemoteItem
from ..models.results import Err, Result, summarize
from ..services.resolver import RemoteItemResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BatchResolutionOrchestrator:
    """Runs work in fixed-size concurrent batches with a pause between batches.

    Output always has one result per input, in input order.
    """

    def __init__(
        self,
        resolver: RemoteItemResolver,
        config: BatchConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._resolver = resolver
        self._config = config or BatchConfig()
        self._sleep = sleep

    def map_batched(
        self,
        items: Sequence[T],
        worker: Callable[[T], Result],
        on_error: Callable[[T, Exception], Result],
        batch_size: int | None = None,
        inter_batch_delay: float | None = None,
        desc: str = "Resolving",
    ) -> list[Result]:
        """Apply worker to every item in paced batches.

        Args:
            items: Inputs to process
            worker: Function returning an Ok/Err result for one input
            on_error: Converts an exception escaping worker into a result
            batch_size: Items run concurrently per batch (default from config)
            inter_batch_delay: Seconds between batches (default from config)
            desc: Progress bar label

        Returns:
            One result per input, in input order
        """
        size = batch_size if batch_size is not None else self._config.batch_size
        delay = inter_batch_delay if inter_batch_delay is not None else self._config.inter_batch_delay
        if size < 1:
            raise ValueError("batch_size must be at least 1")

        total = len(items)
        # Pre-sized so workers finishing out of order land in their input slot
        slots: list[Result | None] = [None] * total

        with tqdm(total=total, desc=desc, unit="item", disable=not self._config.show_progress) as progress:
            with ThreadPoolExecutor(max_workers=size) as executor:
                for start in range(0, total, size):
                    if start > 0 and delay > 0:
                        self._sleep(delay)

                    futures = {
                        executor.submit(worker, items[index]): index
                        for index in range(start, min(start + size, total))
                    }
                    for future in as_completed(futures):
                        index = futures[future]
                        try:
                            slots[index] = future.result()
                        except Exception as e:
                            logger.error(f"Unexpected error processing item {index}: {e}")
                            slots[index] = on_error(items[index], e)
                        progress.update(1)

        return slots  # type: ignore[return-value]

    def resolve_all(
        self,
        refs: Sequence[RemoteItemReference],
        batch_size: int | None = None,
        inter_batch_delay: float | None = None,
    ) -> list[Result[ResolvedRemoteItem, ResolutionFailure]]:
        """Resolve references, never letting one failure abort the rest."""
        if not refs:
            return []

        logger.info(f"Resolving {len(refs)} remote items")
        results = self.map_batched(
            refs,
            self._resolver.resolve_safe,
            lambda ref, e: Err(ResolutionFailure.from_exception(ref, e)),
            batch_size=batch_size,
            inter_batch_delay=inter_batch_delay,
            desc="Resolving",
        )

        summary = summarize(results)
        logger.info(f"Resolved {summary.success}/{summary.total} remote items")
        if summary.failures_by_reason:
            logger.info(f"Resolution failures by reason: {summary.failures_by_reason}")
        return results
