"""Tests for planck to display unit conversion."""

import pytest

from src.export.models import Network
from src.export.units import to_display_amount


class TestToDisplayAmount:
    """Tests for to_display_amount."""

    def test_polkadot(self) -> None:
        """Test 10 decimals on Polkadot."""
        assert to_display_amount(Network.POLKADOT, 50_000_000_000) == 5.0

    def test_kusama(self) -> None:
        """Test 12 decimals on Kusama."""
        assert to_display_amount(Network.KUSAMA, 50_000_000_000) == 0.05

    def test_zero(self) -> None:
        """Test that zero stays zero."""
        assert to_display_amount(Network.POLKADOT, 0) == 0.0

    @pytest.mark.parametrize("network", list(Network))
    @pytest.mark.parametrize("raw", [1, 12_345_678_901, 10**20, 2**128 - 1])
    def test_is_raw_over_divisor(self, network: Network, raw: int) -> None:
        """Test that the result is exactly raw / divisor."""
        assert to_display_amount(network, raw) == raw / network.divisor
