"""Conversion from plancks to display units."""

from src.export.models import Network


def to_display_amount(network: Network, raw_amount: int) -> float:
    """Scale a raw planck amount to DOT or KSM.

    Example:
        >>> to_display_amount(Network.POLKADOT, 50_000_000_000)
        5.0
        >>> to_display_amount(Network.KUSAMA, 1_500_000_000_000)
        1.5
    """
    return raw_amount / network.divisor


__all__ = ["to_display_amount"]
