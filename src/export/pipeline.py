"""Reconcile rewards with daily prices and export them row by row."""

from collections.abc import Sequence

from src.export.errors import AlignmentMismatch
from src.export.models import Network, PriceSnapshot, RewardEvent
from src.export.records import build_record
from src.export.sinks import Sink
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def run(
    rewards: Sequence[RewardEvent],
    prices: Sequence[PriceSnapshot],
    network: Network,
    currency: str,
    date_format: str,
    sink: Sink,
    *,
    strict: bool = False,
) -> int:
    """Write one row per reward, priced with the snapshot at the same index.

    Rewards and prices are paired by position. When a snapshot knows which
    day it is for, that day must match the reward's day. Unequal lengths are
    truncated to the shorter sequence with a warning, or rejected up front
    when strict is set.

    The first failing row aborts the run; rows already written are kept.

    Args:
        rewards: Rewards in occurrence order
        prices: One snapshot per reward, same order
        network: Network the rewards were paid on
        currency: Fiat currency code to price rewards in
        date_format: strftime pattern for the block_time column
        sink: Destination for the rows
        strict: Fail instead of truncating when the lengths differ

    Returns:
        int: Number of rows written

    Raises:
        AlignmentMismatch: If rewards and prices do not correspond
        CurrencyNotSupported: If a snapshot lacks currency
        SerializationError: If the sink fails to write a row
    """
    if len(rewards) != len(prices):
        if strict:
            raise AlignmentMismatch.for_lengths(len(rewards), len(prices))
        logger.warning(
            "Got %d rewards but %d price snapshots, dropping the last %d",
            len(rewards),
            len(prices),
            abs(len(rewards) - len(prices)),
        )

    rows = 0
    for index, (reward, snapshot) in enumerate(zip(rewards, prices, strict=False)):
        if snapshot.day is not None and snapshot.day != reward.day:
            raise AlignmentMismatch.for_day(index, reward.day, snapshot.day)

        record = build_record(reward, snapshot, network, currency, date_format)
        sink.serialize(record)
        rows += 1
        logger.debug("Wrote block %d (%s)", record.block_num, record.block_time)

    logger.info("Exported %d %s rewards to %s", rows, network.id, sink.destination)
    return rows


__all__ = ["run"]
