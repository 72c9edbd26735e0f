"""Tests for currency pair parsing and risk settings validation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from entry_risk.sizing.currency import (
    CURRENCY_PAIRS,
    parse_pair,
    pip_multiplier,
    pip_size,
    price_decimals,
)


class TestParsePair:
    @pytest.mark.parametrize("symbol", ["USD/JPY", "USDJPY", "usd_jpy", " usd/jpy "])
    def test_formats(self, symbol):
        pair = parse_pair(symbol)
        assert pair.code == "USD/JPY"
        assert pair.base == "USD"
        assert pair.quote == "JPY"
        assert pair.is_jpy_quote

    def test_empty_defaults_to_usdjpy(self):
        assert parse_pair(None).code == "USD/JPY"
        assert parse_pair("").code == "USD/JPY"

    def test_non_jpy(self):
        pair = parse_pair("EUR/USD")
        assert pair.quote == "USD"
        assert not pair.is_jpy_quote

    def test_catalogue_round_trips(self):
        for pair in CURRENCY_PAIRS:
            assert parse_pair(pair.code) == pair


class TestPipConventions:
    def test_jpy_quote(self):
        assert pip_multiplier("GBP/JPY") == 100
        assert pip_size("GBP/JPY") == pytest.approx(0.01)
        assert price_decimals("GBP/JPY") == 3

    def test_other_quote(self):
        assert pip_multiplier("AUD/USD") == 10000
        assert pip_size("AUD/USD") == pytest.approx(0.0001)
        assert price_decimals("AUD/USD") == 5


class TestRiskSettingsValidate:
    def test_defaults_are_valid(self, risk_settings):
        risk_settings.validate()

    @pytest.mark.parametrize(
        "field_name",
        [
            "account_balance",
            "risk_percentage",
            "pips_value_per_lot",
            "min_lot",
            "lot_step",
            "min_risk_reward_ratio",
        ],
    )
    def test_non_positive_rejected(self, risk_settings, field_name):
        with pytest.raises(ValueError, match=field_name):
            replace(risk_settings, **{field_name: 0}).validate()

    def test_nan_rejected(self, risk_settings):
        with pytest.raises(ValueError, match="finite"):
            replace(risk_settings, account_balance=float("nan")).validate()

    def test_risk_over_100_rejected(self, risk_settings):
        with pytest.raises(ValueError, match="<= 100"):
            replace(risk_settings, risk_percentage=150.0).validate()
