"""Value-for-value payment models."""

from __future__ import annotations

from dataclasses import dataclass, field

from .remote import RemoteItemReference
from .track import PaymentInfo


@dataclass(frozen=True)
class ValueRecipient:
    """One payment recipient inside a value block or time split."""

    name: str | None = None
    type: str = "local"  # local or remote
    address: str | None = None
    percentage: float = 0.0
    amount: float | None = None
    custom_key: str | None = None
    custom_value: str | None = None
    fee: bool = False

    @property
    def is_remote(self) -> bool:
        return self.type == "remote"

    def to_payment_info(self, suggested_amount: float | None = None) -> PaymentInfo:
        """Payment info routed to this recipient."""
        amount = self.amount if self.amount is not None else suggested_amount
        return PaymentInfo(
            lightning_address=self.address or "",
            suggested_amount=amount or 0.0,
            custom_key=self.custom_key,
            custom_value=self.custom_value,
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "name": self.name,
            "type": self.type,
            "address": self.address,
            "percentage": self.percentage,
            "amount": self.amount,
            "custom_key": self.custom_key,
            "custom_value": self.custom_value,
            "fee": self.fee,
        }


@dataclass(frozen=True)
class ValueTimeSplit:
    """A time-bounded payment routing segment within an episode."""

    start_time: float
    duration: float
    remote_percentage: float = 0.0
    recipients: list[ValueRecipient] = field(default_factory=list)
    remote_item: RemoteItemReference | None = None

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    @property
    def remote_recipients(self) -> list[ValueRecipient]:
        """Remote recipients with a positive share."""
        return [r for r in self.recipients if r.is_remote and r.percentage > 0]

    @property
    def is_music_candidate(self) -> bool:
        """Whether this split plausibly marks a played song.

        A split that only pays local recipients (the host) is not a
        music reference.
        """
        return self.start_time > 0 and self.duration > 0 and bool(self.remote_recipients)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "start_time": self.start_time,
            "duration": self.duration,
            "remote_percentage": self.remote_percentage,
            "recipients": [r.to_dict() for r in self.recipients],
            "remote_item": self.remote_item.to_dict() if self.remote_item else None,
        }


@dataclass(frozen=True)
class ValueBlock:
    """A podcast:value block at channel or item level."""

    type: str | None = None
    method: str | None = None
    suggested: float | None = None
    recipients: list[ValueRecipient] = field(default_factory=list)
    time_splits: list[ValueTimeSplit] = field(default_factory=list)

    def primary_recipient(self) -> ValueRecipient | None:
        """The largest non-fee recipient, first one on ties."""
        candidates = [r for r in self.recipients if not r.fee]
        if not candidates:
            return None
        return max(candidates, key=lambda r: r.percentage)

    def payment_info(self) -> PaymentInfo | None:
        recipient = self.primary_recipient()
        if recipient is None:
            return None
        return recipient.to_payment_info(self.suggested)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "type": self.type,
            "method": self.method,
            "suggested": self.suggested,
            "recipients": [r.to_dict() for r in self.recipients],
            "time_splits": [s.to_dict() for s in self.time_splits],
        }
