"""Trade record lifecycle helpers and JSON export conversion.

All functions are stateless. The storage layer owns persistence; these
helpers only build, update and (de)serialize TradeRecord values.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from entry_risk.journal.models import (
    ExitType,
    MarketTrend,
    RuleCompliance,
    TradeRecord,
    TradeResult,
    as_utc,
)
from entry_risk.sizing.currency import DEFAULT_CURRENCY_PAIR, pip_size, price_decimals
from entry_risk.sizing.models import (
    CalculationResult,
    Distance,
    PipDistance,
    PriceLevel,
    TradeInput,
    TradeType,
)

logger = logging.getLogger(__name__)


def derive_price(trade: TradeInput, distance: Distance | None, is_take_profit: bool) -> float:
    """Absolute price for a stop / take, converting pip distances from entry.

    LONG: TP は上、SL は下。SHORT はその逆。
    """
    if isinstance(distance, PriceLevel):
        return distance.value
    if not isinstance(distance, PipDistance) or distance.value <= 0:
        return 0.0

    diff = distance.value * pip_size(trade.currency_pair)
    upward = is_take_profit == (trade.trade_type == TradeType.LONG)
    price = trade.entry_price + diff if upward else trade.entry_price - diff
    return round(price, price_decimals(trade.currency_pair))


def new_trade_record(
    trade: TradeInput,
    result: CalculationResult,
    record_id: str | None = None,
    timestamp: datetime | None = None,
    scenario: str = "",
    entry_basis: list[str] | None = None,
    note: str = "",
) -> TradeRecord:
    """Create a journal entry from a sizing request and its result."""
    return TradeRecord(
        id=record_id or uuid.uuid4().hex,
        timestamp=timestamp or datetime.now(timezone.utc),
        trade_type=trade.trade_type,
        entry_price=trade.entry_price,
        currency_pair=trade.currency_pair or DEFAULT_CURRENCY_PAIR,
        stop_loss_price=derive_price(trade, trade.stop_loss, is_take_profit=False),
        take_profit_price=derive_price(trade, trade.take_profit, is_take_profit=True),
        stop_pips=result.stop_pips,
        take_pips=result.take_pips,
        planned_lot=result.recommended_lot,
        planned_profit=result.potential_profit,
        planned_loss=result.actual_loss,
        risk_reward_ratio=result.risk_reward_ratio,
        scenario=scenario,
        entry_basis=list(entry_basis or []),
        note=note,
    )


def record_exit(
    record: TradeRecord,
    trade_result: TradeResult,
    exit_timestamp: datetime | None = None,
    exit_price: float | None = None,
    exit_type: ExitType | None = None,
    actual_lot: float | None = None,
    actual_profit: float | None = None,
    actual_loss: float | None = None,
) -> TradeRecord:
    """Return a copy of record with the actual outcome filled in.

    Planned fields are carried over untouched.

    Raises:
        ValueError: exit_timestamp is before the entry timestamp.
    """
    exit_timestamp = as_utc(exit_timestamp)
    if exit_timestamp is not None and exit_timestamp < record.timestamp:
        raise ValueError(
            f"exit {exit_timestamp.isoformat()} is before entry {record.timestamp.isoformat()}"
        )
    return replace(
        record,
        trade_result=trade_result,
        exit_timestamp=exit_timestamp,
        exit_price=exit_price,
        exit_type=exit_type,
        actual_lot=actual_lot,
        actual_profit=actual_profit,
        actual_loss=actual_loss,
    )


def remove_record(history: list[TradeRecord], record_id: str) -> list[TradeRecord]:
    """History without the record of the given id."""
    return [r for r in history if r.id != record_id]


# ---------------------------------------------------------------------------
# JSON export (camelCase, epoch milliseconds)
# ---------------------------------------------------------------------------
def _parse_timestamp(value: Any) -> datetime | None:
    """Epoch milliseconds or ISO8601 (trailing Z allowed) → aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value!r}") from e
    return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def _to_epoch_ms(dt: datetime | None) -> int | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _parse_tags(value: Any) -> list[str]:
    """"MA反発, 水平線" or ["MA反発", "水平線"] → ["MA反発", "水平線"]."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [s.strip() for s in items if s and s.strip()]


def record_from_dict(data: dict[str, Any]) -> TradeRecord:
    """Build a TradeRecord from an exported JSON object.

    Legacy exports have no plannedLoss key. There, potentialProfit and
    actualLoss hold the planned figures from the calculator, and no actual
    outcome amounts exist.

    Raises:
        ValueError: missing id/timestamp or an unknown enum value.
    """
    record_id = data.get("id")
    if not record_id:
        raise ValueError("trade record without id")
    timestamp = _parse_timestamp(data.get("timestamp"))
    if timestamp is None:
        raise ValueError(f"trade record {record_id} without timestamp")

    legacy = "plannedLoss" not in data and "potentialProfit" in data
    if legacy:
        planned_profit = float(data.get("potentialProfit") or 0.0)
        planned_loss = float(data.get("actualLoss") or 0.0)
        actual_profit = None
        actual_loss = None
    else:
        planned_profit = float(data.get("plannedProfit") or 0.0)
        planned_loss = float(data.get("plannedLoss") or 0.0)
        actual_profit = _optional_float(data.get("actualProfit"))
        actual_loss = _optional_float(data.get("actualLoss"))

    def enum_or_none(enum_cls, key):
        raw = data.get(key)
        return enum_cls(raw) if raw else None

    return TradeRecord(
        id=str(record_id),
        timestamp=timestamp,
        trade_type=TradeType(data.get("tradeType") or TradeType.LONG),
        entry_price=float(data.get("entryPrice") or 0.0),
        currency_pair=data.get("currencyPair") or DEFAULT_CURRENCY_PAIR,
        stop_loss_price=float(data.get("stopLossPrice") or 0.0),
        take_profit_price=float(data.get("takeProfitPrice") or 0.0),
        stop_pips=float(data.get("stopPips") or 0.0),
        take_pips=float(data.get("takePips") or 0.0),
        planned_lot=float(data.get("plannedLot") or 0.0),
        planned_profit=planned_profit,
        planned_loss=planned_loss,
        risk_reward_ratio=float(data.get("riskRewardRatio") or 0.0),
        scenario=data.get("scenario") or "",
        entry_basis=_parse_tags(data.get("entryBasis")),
        market_trend=enum_or_none(MarketTrend, "marketTrend"),
        rule_compliance=enum_or_none(RuleCompliance, "ruleCompliance"),
        violated_rules=_parse_tags(data.get("violatedRules")),
        note=data.get("note") or "",
        trade_result=enum_or_none(TradeResult, "tradeResult"),
        exit_timestamp=_parse_timestamp(data.get("exitTimestamp")),
        exit_price=_optional_float(data.get("exitPrice")),
        exit_type=enum_or_none(ExitType, "exitType"),
        actual_lot=_optional_float(data.get("actualLot")),
        actual_profit=actual_profit,
        actual_loss=actual_loss,
    )


def record_to_dict(record: TradeRecord) -> dict[str, Any]:
    """Serialize a TradeRecord to the JSON export layout."""
    return {
        "id": record.id,
        "timestamp": _to_epoch_ms(record.timestamp),
        "currencyPair": record.currency_pair,
        "tradeType": str(record.trade_type),
        "entryPrice": record.entry_price,
        "stopLossPrice": record.stop_loss_price,
        "takeProfitPrice": record.take_profit_price,
        "stopPips": record.stop_pips,
        "takePips": record.take_pips,
        "plannedLot": record.planned_lot,
        "plannedProfit": record.planned_profit,
        "plannedLoss": record.planned_loss,
        "riskRewardRatio": record.risk_reward_ratio,
        "scenario": record.scenario,
        "entryBasis": ",".join(record.entry_basis),
        "marketTrend": str(record.market_trend) if record.market_trend else None,
        "ruleCompliance": str(record.rule_compliance) if record.rule_compliance else None,
        "violatedRules": list(record.violated_rules),
        "note": record.note,
        "tradeResult": str(record.trade_result) if record.trade_result else None,
        "exitTimestamp": _to_epoch_ms(record.exit_timestamp),
        "exitPrice": record.exit_price,
        "exitType": str(record.exit_type) if record.exit_type else None,
        "actualLot": record.actual_lot,
        "actualProfit": record.actual_profit,
        "actualLoss": record.actual_loss,
    }


def load_history(path: Path | str) -> list[TradeRecord]:
    """Load a JSON history export (a list of record objects).

    Records that fail to parse are skipped with a warning.

    Raises:
        ValueError: the file does not contain a JSON list.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of trade records")

    records: list[TradeRecord] = []
    for i, item in enumerate(raw):
        try:
            records.append(record_from_dict(item))
        except (ValueError, TypeError) as e:
            logger.warning("Skipping record #%d in %s: %s", i, path, e)
    logger.info("Loaded %d/%d trade records from %s", len(records), len(raw), path)
    return records
