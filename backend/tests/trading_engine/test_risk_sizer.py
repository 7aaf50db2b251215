"""
Tests for backend/autotrader/trading_engine/risk_sizer.py
"""

import pytest

from autotrader.exceptions import DataError
from autotrader.trading_engine.risk_sizer import calculate_volume, round_lots, stop_distance


class TestStopDistance:
    def test_uses_signal_stop_loss(self):
        assert stop_distance(1.1000, 1.0950) == pytest.approx(0.0050)

    def test_defaults_to_half_percent(self):
        assert stop_distance(1.1000) == pytest.approx(0.0055)

    def test_zero_distance_falls_back_to_default(self):
        assert stop_distance(1.1000, 1.1000) == pytest.approx(0.0055)


class TestCalculateVolume:
    def test_default_stop_scenario_caps_at_one_lot(self):
        """$100k balance, 1% risk, no stop at 1.1000 -> 1000 / 550 = 1.82 -> capped 1.00."""
        assert calculate_volume(100000, 0.01, 1.1000) == 1.0

    def test_small_account_below_cap(self):
        """$10k, 1% risk, 50 pip stop -> 100 / 500 = 0.20 lots."""
        assert calculate_volume(10000, 0.01, 1.1000, stop_loss=1.0950) == 0.2

    def test_rounds_to_two_decimals(self):
        volume = calculate_volume(12345, 0.013, 1.2345, stop_loss=1.2301)
        assert volume == round(volume, 2)
        assert volume == pytest.approx(0.36)

    def test_tiny_risk_rounds_to_zero(self):
        """A 0.00 volume is returned as-is for the gateway to reject."""
        assert calculate_volume(100, 0.001, 1.1000) == 0.0

    @pytest.mark.parametrize(
        "balance,risk,price,stop",
        [
            (1_000_000, 0.05, 1.1, None),
            (500, 0.02, 150.0, 149.0),
            (250_000, 0.01, 0.6652, 0.6600),
            (75_000, 0.015, 1.3578, 1.3600),
        ],
    )
    def test_never_exceeds_one_lot_and_two_decimals(self, balance, risk, price, stop):
        volume = calculate_volume(balance, risk, price, stop)
        assert 0.0 <= volume <= 1.0
        assert volume == round(volume, 2)

    def test_non_positive_price_is_data_error(self):
        with pytest.raises(DataError):
            calculate_volume(100000, 0.01, 0.0)


def test_round_lots_half_up():
    assert round_lots(0.125) == 0.13
    assert round_lots(0.124999) == 0.12
