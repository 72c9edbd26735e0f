"""Sizing data models: settings, trade input and calculation result."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum


class TradeType(StrEnum):
    LONG = "LONG"
    SHORT = "SHORT"


class RiskStatus(StrEnum):
    ENTRY_OK = "ENTRY_OK"
    CONDITIONS_NG = "CONDITIONS_NG"  # サイズは取れるが RR 不足
    ENTRY_FORBIDDEN = "ENTRY_FORBIDDEN"  # エントリー不可


@dataclass(frozen=True)
class PriceLevel:
    """Stop / take expressed as an absolute price."""

    value: float


@dataclass(frozen=True)
class PipDistance:
    """Stop / take expressed as a distance in pips from entry."""

    value: float


Distance = PriceLevel | PipDistance


@dataclass(frozen=True)
class RiskSettings:
    """User risk configuration. All fields > 0, risk_percentage <= 100."""

    account_balance: float  # 口座残高 (例: 100000)
    risk_percentage: float  # 許容リスク% (例: 2.0)
    pips_value_per_lot: float  # 1 lot あたりの 1 pip 損益 (JPY 建てペア基準)
    min_lot: float
    lot_step: float
    min_risk_reward_ratio: float

    def validate(self) -> None:
        """Raise ValueError unless every field is a finite positive number."""
        for name in (
            "account_balance",
            "risk_percentage",
            "pips_value_per_lot",
            "min_lot",
            "lot_step",
            "min_risk_reward_ratio",
        ):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if self.risk_percentage > 100:
            raise ValueError(f"risk_percentage must be <= 100, got {self.risk_percentage}")


@dataclass(frozen=True)
class TradeInput:
    """One sizing request."""

    currency_pair: str
    trade_type: TradeType
    entry_price: float
    stop_loss: Distance | None = None
    take_profit: Distance | None = None
    current_jpy_rate: float | None = None  # quote→JPY, non-JPY quote のみ必要


@dataclass
class CalculationResult:
    """Sizing outcome with display rounding already applied."""

    status: RiskStatus
    recommended_lot: float = 0.0
    stop_pips: float = 0.0
    take_pips: float = 0.0
    actual_loss: float = 0.0  # 想定損失額
    actual_risk_percent: float = 0.0
    potential_profit: float = 0.0  # 想定利益額
    risk_reward_ratio: float = 0.0
    messages: list[str] = field(default_factory=list)
