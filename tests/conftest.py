"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from datetime import date

import pytest

from src.export.models import PriceSnapshot, RewardEvent
from src.helpers.logging import set_log_level


@pytest.fixture(autouse=True)
def reset_log_level() -> Generator[None]:
    """Undo log level changes made by the CLI between tests."""
    yield
    set_log_level("INFO")


@pytest.fixture
def reward() -> RewardEvent:
    """A 5 DOT reward paid on 2021-06-01."""
    return RewardEvent(block_num=100, day=date(2021, 6, 1), amount=50_000_000_000)


@pytest.fixture
def snapshot() -> PriceSnapshot:
    """A USD-only price snapshot without a day."""
    return PriceSnapshot(market_data={"USD": 15.23})


@pytest.fixture
def rewards() -> list[RewardEvent]:
    """Three rewards on consecutive days."""
    return [
        RewardEvent(block_num=100, day=date(2021, 6, 1), amount=50_000_000_000),
        RewardEvent(block_num=250, day=date(2021, 6, 2), amount=12_345_678_900),
        RewardEvent(block_num=175, day=date(2021, 6, 3), amount=10_000_000_000),
    ]


@pytest.fixture
def prices() -> list[PriceSnapshot]:
    """Snapshots matching the rewards fixture day by day."""
    return [
        PriceSnapshot(market_data={"usd": 15.23, "eur": 12.5}, day=date(2021, 6, 1)),
        PriceSnapshot(market_data={"usd": 16.0, "eur": 13.1}, day=date(2021, 6, 2)),
        PriceSnapshot(market_data={"usd": 14.5, "eur": 11.9}, day=date(2021, 6, 3)),
    ]
