"""Shared test helpers — import in test files: from tests.helpers import make_record."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from entry_risk.journal.models import TradeRecord, TradeResult
from entry_risk.sizing.models import TradeType

# 2026-01-05 は月曜日
BASE_TS = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


def make_record(**overrides) -> TradeRecord:
    """Finished USD/JPY winner with sensible defaults. Override any field via kwargs."""
    defaults = dict(
        id=uuid.uuid4().hex,
        timestamp=BASE_TS,
        trade_type=TradeType.LONG,
        entry_price=150.0,
        currency_pair="USD/JPY",
        stop_loss_price=149.8,
        take_profit_price=150.4,
        stop_pips=20.0,
        take_pips=40.0,
        planned_lot=0.1,
        planned_profit=4000.0,
        planned_loss=2000.0,
        risk_reward_ratio=2.0,
        trade_result=TradeResult.WIN,
    )
    defaults.update(overrides)
    return TradeRecord(**defaults)


def make_sequence(results: list[TradeResult | None], start: datetime = BASE_TS) -> list[TradeRecord]:
    """One record per result, exiting one hour apart in list order."""
    return [
        make_record(
            timestamp=start + timedelta(hours=i),
            exit_timestamp=start + timedelta(hours=i, minutes=30),
            trade_result=result,
        )
        for i, result in enumerate(results)
    ]
