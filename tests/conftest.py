"""Shared fixtures for entry_risk tests.

Record factories (make_record, etc.) are in tests/helpers.py.
"""

from __future__ import annotations

import logging

import pytest

from entry_risk.sizing.models import RiskSettings


@pytest.fixture()
def risk_settings() -> RiskSettings:
    """100k balance, 2% risk, 1000/pip per lot, 0.01 lot step, RR >= 1.5."""
    return RiskSettings(
        account_balance=100_000.0,
        risk_percentage=2.0,
        pips_value_per_lot=1000.0,
        min_lot=0.01,
        lot_step=0.01,
        min_risk_reward_ratio=1.5,
    )


@pytest.fixture()
def isolated_logging(tmp_path, monkeypatch):
    """Redirect log files to tmp and reset root handlers afterwards."""
    monkeypatch.setattr("entry_risk.logging_config.LOG_DIR", tmp_path / "logs")
    root = logging.getLogger()
    level = root.level
    yield tmp_path / "logs"
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(level)
