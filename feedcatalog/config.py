"""Configuration management for the feed catalog."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_USER_AGENT = "FeedCatalog/1.0"

# Words that make description-mined matches unreliable
DEFAULT_DESCRIPTION_BLOCKLIST = ("unknown", "volume")


@dataclass
class DirectoryConfig:
    """Podcast Index directory API configuration."""

    api_key: str = ""
    api_secret: str = ""
    api_url: str = "https://api.podcastindex.org/api/1.0"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Check if both API credentials are present."""
        return bool(self.api_key) and bool(self.api_secret)


@dataclass
class RetryPolicy:
    """Exponential backoff settings for retryable failures."""

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows the given 0-based attempt."""
        return self.base_delay * (self.multiplier**attempt)


@dataclass
class FetchConfig:
    """Feed fetching configuration."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    large_feed_timeout: float = 120.0
    large_feed_urls: set[str] = field(default_factory=set)

    def timeout_for(self, url: str) -> float:
        """Timeout budget for a URL, longer for feeds known to be large."""
        if url in self.large_feed_urls:
            return self.large_feed_timeout
        return self.timeout


@dataclass
class BatchConfig:
    """Batching and pacing for bulk resolution."""

    batch_size: int = 5
    inter_batch_delay: float = 0.5
    show_progress: bool = False


@dataclass
class DescriptionConfig:
    """Acceptance thresholds for description-mined tracks."""

    min_length: int = 3
    max_length: int = 120
    blocklist: tuple[str, ...] = DEFAULT_DESCRIPTION_BLOCKLIST


@dataclass
class Config:
    """Main configuration container."""

    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    batch: BatchConfig = field(default_factory=BatchConfig)
    description: DescriptionConfig = field(default_factory=DescriptionConfig)

    @classmethod
    def from_environment(cls, env_path: Path | None = None) -> "Config":
        """Load configuration from environment variables."""
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        user_agent = os.getenv("FEED_USER_AGENT", DEFAULT_USER_AGENT)

        large_feed_urls = {
            url.strip()
            for url in os.getenv("LARGE_FEED_URLS", "").split(",")
            if url.strip()
        }

        blocklist_env = os.getenv("DESCRIPTION_BLOCKLIST")
        if blocklist_env is not None:
            blocklist = tuple(w.strip().lower() for w in blocklist_env.split(",") if w.strip())
        else:
            blocklist = DEFAULT_DESCRIPTION_BLOCKLIST

        return cls(
            directory=DirectoryConfig(
                api_key=os.getenv("PODCAST_INDEX_API_KEY", ""),
                api_secret=os.getenv("PODCAST_INDEX_API_SECRET", ""),
                api_url=os.getenv("PODCAST_INDEX_API_URL", "https://api.podcastindex.org/api/1.0"),
                user_agent=user_agent,
                timeout=float(os.getenv("DIRECTORY_TIMEOUT", "10")),
            ),
            fetch=FetchConfig(
                user_agent=user_agent,
                timeout=float(os.getenv("FEED_TIMEOUT", "30")),
                large_feed_timeout=float(os.getenv("LARGE_FEED_TIMEOUT", "120")),
                large_feed_urls=large_feed_urls,
            ),
            retry=RetryPolicy(
                max_attempts=int(os.getenv("FETCH_MAX_ATTEMPTS", "3")),
            ),
            batch=BatchConfig(
                batch_size=int(os.getenv("BATCH_SIZE", "5")),
                inter_batch_delay=float(os.getenv("BATCH_DELAY", "0.5")),
            ),
            description=DescriptionConfig(
                min_length=int(os.getenv("DESCRIPTION_MIN_LENGTH", "3")),
                max_length=int(os.getenv("DESCRIPTION_MAX_LENGTH", "120")),
                blocklist=blocklist,
            ),
        )

    def validate(self) -> None:
        """Validate the configuration."""
        if self.batch.batch_size < 1:
            raise ValueError("BATCH_SIZE must be at least 1")
        if self.batch.inter_batch_delay < 0:
            raise ValueError("BATCH_DELAY cannot be negative")
        if self.retry.max_attempts < 1:
            raise ValueError("FETCH_MAX_ATTEMPTS must be at least 1")
        if self.fetch.timeout <= 0 or self.fetch.large_feed_timeout <= 0:
            raise ValueError("Feed timeouts must be positive")
        if self.description.min_length > self.description.max_length:
            raise ValueError("DESCRIPTION_MIN_LENGTH cannot exceed DESCRIPTION_MAX_LENGTH")
        self._validate_directory()

    def _validate_directory(self) -> None:
        """Warn when directory lookups will be unavailable."""
        logger = logging.getLogger(__name__)

        if not self.directory.is_configured:
            logger.warning(
                "Podcast Index credentials not set. "
                "Set PODCAST_INDEX_API_KEY and PODCAST_INDEX_API_SECRET to resolve feedGuid references"
            )


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
