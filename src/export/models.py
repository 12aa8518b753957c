"""Pydantic models for rewards, prices, exported rows and run configuration."""

from datetime import date, datetime
from enum import StrEnum
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from src.helpers.constants import OUTPUT_DATE_FORMAT
from src.helpers.parsers import to_timestamp


NETWORK_ALIASES = {
    "polkadot": "polkadot",
    "dot": "polkadot",
    "kusama": "kusama",
    "ksm": "kusama",
}

NETWORK_DIVISORS = {
    "polkadot": 10**10,
    "kusama": 10**12,
}


class Network(StrEnum):
    """Supported relay chains."""

    POLKADOT = "polkadot"
    KUSAMA = "kusama"

    @property
    def id(self) -> str:
        """Identifier used in output file names."""
        return self.value

    @property
    def divisor(self) -> int:
        """Plancks per display unit (DOT or KSM)."""
        return NETWORK_DIVISORS[self.value]

    @classmethod
    def from_str(cls, value: str) -> Self:
        """Parse a network name or ticker, case-insensitively.

        Raises:
            ValueError: If value names no supported network
        """
        name = NETWORK_ALIASES.get(value.strip().lower())
        if name is None:
            msg = "Network must be one of: 'kusama', 'polkadot', 'dot', 'ksm'"
            raise ValueError(msg)
        return cls(name)


class RewardEvent(BaseModel):
    """A staking reward paid out at a block."""

    block_num: int = Field(..., description="Block the reward event was emitted in")
    day: date = Field(..., description="UTC calendar day of the block")
    amount: int = Field(..., ge=0, description="Reward in plancks")

    model_config = ConfigDict(frozen=True)


class PriceSnapshot(BaseModel):
    """Fiat prices of the network token on one day."""

    market_data: dict[str, float] = Field(
        ..., description="Price per currency code, case-sensitive"
    )
    day: date | None = Field(
        default=None, description="Day the prices are for, when known"
    )

    model_config = ConfigDict(frozen=True)


class ExportRecord(BaseModel):
    """One exported row. Field order is the column order."""

    block_num: int
    block_time: str
    amount: float
    price: float

    model_config = ConfigDict(frozen=True)


class ExportConfig(BaseModel):
    """Everything an export run needs, resolved once before it starts."""

    address: str
    network: Network = Network.POLKADOT
    currency: str
    start: datetime
    end: datetime
    date_format: str = OUTPUT_DATE_FORMAT
    folder: Path = Field(default_factory=Path.cwd)
    stdout: bool = False
    verbose: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def start_timestamp(self) -> int:
        return to_timestamp(self.start)

    @property
    def end_timestamp(self) -> int:
        return to_timestamp(self.end)

    @property
    def file_name(self) -> str:
        """File name in the form `polkadot-<address>-<from>-<to>-rewards.csv`."""
        return (
            f"{self.network.id}-{self.address}-"
            f"{self.start.strftime(OUTPUT_DATE_FORMAT)}-"
            f"{self.end.strftime(OUTPUT_DATE_FORMAT)}-rewards.csv"
        )

    @property
    def output_path(self) -> Path:
        return self.folder / self.file_name


__all__ = [
    "ExportConfig",
    "ExportRecord",
    "Network",
    "PriceSnapshot",
    "RewardEvent",
]
