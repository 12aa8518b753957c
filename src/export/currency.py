"""Fiat currency lookup in price snapshots."""

from src.export.errors import CurrencyNotSupported
from src.export.models import PriceSnapshot


def resolve_price(snapshot: PriceSnapshot, currency: str) -> float:
    """Return the snapshot's price in currency.

    The lookup is exact and case-sensitive.

    Raises:
        CurrencyNotSupported: If currency is not a key of the snapshot
    """
    try:
        return snapshot.market_data[currency]
    except KeyError:
        raise CurrencyNotSupported(currency, list(snapshot.market_data)) from None


__all__ = ["resolve_price"]
