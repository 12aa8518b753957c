"""Errors raised while fetching, reconciling and exporting rewards."""

from datetime import date
from pathlib import Path
from typing import Self


class RewardsError(Exception):
    """Base class for every error that aborts an export run."""


class FetchError(RewardsError):
    """A reward or price fetch failed after retries."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"Failed to fetch {stage}: {message}")


class CurrencyNotSupported(RewardsError):
    """The requested fiat currency is missing from a price snapshot."""

    def __init__(self, currency: str, available: list[str]) -> None:
        self.currency = currency
        self.available = sorted(available)
        super().__init__(
            f"Specified fiat currency '{currency}' not supported: {self.available}"
        )


class SerializationError(RewardsError):
    """Writing a row to the output sink failed."""


class SinkCreationError(RewardsError):
    """The output destination could not be opened."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to create output {path}: {reason}")


class AlignmentMismatch(RewardsError):
    """Rewards and price snapshots do not line up."""

    @classmethod
    def for_lengths(cls, n_rewards: int, n_prices: int) -> Self:
        return cls(f"Got {n_rewards} rewards but {n_prices} price snapshots")

    @classmethod
    def for_day(cls, index: int, reward_day: date, price_day: date) -> Self:
        return cls(
            f"Reward {index} is from {reward_day} but its price snapshot is for {price_day}"
        )


__all__ = [
    "AlignmentMismatch",
    "CurrencyNotSupported",
    "FetchError",
    "RewardsError",
    "SerializationError",
    "SinkCreationError",
]
