"""Build exported rows from a reward and its price snapshot."""

from src.export.currency import resolve_price
from src.export.models import ExportRecord, Network, PriceSnapshot, RewardEvent
from src.export.units import to_display_amount


def build_record(
    reward: RewardEvent,
    snapshot: PriceSnapshot,
    network: Network,
    currency: str,
    date_format: str,
) -> ExportRecord:
    """Combine one reward and one price snapshot into an exported row.

    Args:
        reward: Reward event from the crawler
        snapshot: Price snapshot for the reward's day
        network: Network the reward was paid on
        currency: Fiat currency code to price the reward in
        date_format: strftime pattern for block_time, passed through unchecked

    Returns:
        ExportRecord: The row to serialize

    Raises:
        CurrencyNotSupported: If the snapshot has no price in currency
    """
    return ExportRecord(
        block_num=reward.block_num,
        block_time=reward.day.strftime(date_format),
        amount=to_display_amount(network, reward.amount),
        price=resolve_price(snapshot, currency),
    )


__all__ = ["build_record"]
