"""Trade journal data models.

Dataclasses only, no storage access. A TradeRecord is created once at entry
time from a sizing result, then updated once at exit with the actual outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum

from entry_risk.sizing.currency import DEFAULT_CURRENCY_PAIR
from entry_risk.sizing.models import TradeType


def as_utc(dt: datetime | None) -> datetime | None:
    """Naive timestamps are taken as UTC, matching the JSON export."""
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


class TradeResult(StrEnum):
    WIN = "WIN"
    LOSS = "LOSS"


class ExitType(StrEnum):
    TP = "TP"  # 利確到達
    SL = "SL"  # 損切り到達
    MANUAL = "MANUAL"  # 手動決済


class RuleCompliance(StrEnum):
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    VIOLATED = "VIOLATED"


class MarketTrend(StrEnum):
    UPTREND = "UPTREND"
    DOWNTREND = "DOWNTREND"
    RANGE = "RANGE"


@dataclass
class TradeRecord:
    id: str
    timestamp: datetime  # エントリー日時
    trade_type: TradeType
    entry_price: float
    currency_pair: str = DEFAULT_CURRENCY_PAIR
    # 計画値 (エントリー時に確定、以後変更しない)
    stop_loss_price: float = 0.0
    take_profit_price: float = 0.0
    stop_pips: float = 0.0
    take_pips: float = 0.0
    planned_lot: float = 0.0
    planned_profit: float = 0.0
    planned_loss: float = 0.0
    risk_reward_ratio: float = 0.0
    # ジャーナル
    scenario: str = ""
    entry_basis: list[str] = field(default_factory=list)
    market_trend: MarketTrend | None = None
    rule_compliance: RuleCompliance | None = None
    violated_rules: list[str] = field(default_factory=list)
    note: str = ""
    # 実績 (決済時に記録、未決済なら None)
    trade_result: TradeResult | None = None
    exit_timestamp: datetime | None = None
    exit_price: float | None = None
    exit_type: ExitType | None = None
    actual_lot: float | None = None
    actual_profit: float | None = None
    actual_loss: float | None = None

    def __post_init__(self) -> None:
        # naive / aware 混在の比較で落ちないよう UTC に揃える
        self.timestamp = as_utc(self.timestamp)
        self.exit_timestamp = as_utc(self.exit_timestamp)

    @property
    def is_finished(self) -> bool:
        return self.trade_result is not None
