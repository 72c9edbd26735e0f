"""Grouped performance breakdowns over the trade journal.

Every breakdown is group_stats() with a key function. Profit order is the
default; buckets with a natural order (weekday, hour, RR, holding time,
exit type) keep that order instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo

from entry_risk.analysis.summary import GroupedStats, finished_trades, group_stats
from entry_risk.journal.models import ExitType, RuleCompliance, TradeRecord
from entry_risk.sizing.currency import parse_pair

UNLABELED = "Unlabeled"
DAYS_OF_WEEK = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

COMPLIANCE_FULL = "完全遵守"
COMPLIANCE_UNRECORDED = "未記録"

RR_BUCKETS = ["<1.0", "1.0-1.5", "1.5-2.0", "2.0+"]
HOLDING_OPEN = "未決済"
HOLDING_BUCKETS = [HOLDING_OPEN, "<1h", "1-4h", "4-12h", "12-24h", ">24h"]

EXIT_TYPE_LABELS = {
    ExitType.TP: "TP到達",
    ExitType.SL: "SL到達",
    ExitType.MANUAL: "手動決済",
}
EXIT_UNKNOWN = "不明"
EXIT_BUCKETS = [*EXIT_TYPE_LABELS.values(), EXIT_UNKNOWN]

_VIOLATION_LEVELS = (RuleCompliance.PARTIAL, RuleCompliance.VIOLATED)


def _local(dt: datetime, tz: tzinfo | None) -> datetime:
    """Convert to tz. Record timestamps are always aware (naive → UTC)."""
    if tz is not None:
        return dt.astimezone(tz)
    return dt


def calculate_by_currency(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    return group_stats(history, lambda r: [parse_pair(r.currency_pair).code])


def calculate_by_entry_basis(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    """One group per entry-basis tag; a multi-tag trade counts in each."""
    return group_stats(history, lambda r: r.entry_basis or [UNLABELED])


def calculate_by_day_of_week(
    history: Iterable[TradeRecord], tz: tzinfo | None = None
) -> list[GroupedStats]:
    """Group by entry weekday, ordered Sunday → Saturday."""

    def day_key(r: TradeRecord) -> list[str]:
        # weekday(): Mon=0 → Sunday 起点に変換
        return [DAYS_OF_WEEK[(_local(r.timestamp, tz).weekday() + 1) % 7]]

    return group_stats(history, day_key, order=lambda g: DAYS_OF_WEEK.index(g.key))


def calculate_by_time_of_day(
    history: Iterable[TradeRecord], tz: tzinfo | None = None
) -> list[GroupedStats]:
    """Group by entry hour as "HH:00"."""
    return group_stats(
        history,
        lambda r: [f"{_local(r.timestamp, tz).hour:02d}:00"],
        order=lambda g: g.key,
    )


def compliance_bucket(record: TradeRecord) -> str:
    if record.rule_compliance == RuleCompliance.FULL:
        return COMPLIANCE_FULL
    if record.rule_compliance in _VIOLATION_LEVELS:
        return f"違反{len(record.violated_rules)}件"
    return COMPLIANCE_UNRECORDED


def calculate_by_rule_compliance(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    """完全遵守 first, then violation-count buckets alphabetically."""
    return group_stats(
        history,
        lambda r: [compliance_bucket(r)],
        order=lambda g: (g.key != COMPLIANCE_FULL, g.key),
    )


def rr_bucket(rr: float | None) -> str:
    rr = rr or 0.0
    if rr < 1.0:
        return "<1.0"
    if rr < 1.5:
        return "1.0-1.5"
    if rr < 2.0:
        return "1.5-2.0"
    return "2.0+"


def calculate_by_risk_reward(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    return group_stats(
        history,
        lambda r: [rr_bucket(r.risk_reward_ratio)],
        order=lambda g: RR_BUCKETS.index(g.key),
    )


def holding_bucket(record: TradeRecord) -> str:
    if record.exit_timestamp is None:
        return HOLDING_OPEN
    hours = max((record.exit_timestamp - record.timestamp).total_seconds() / 3600.0, 0.0)
    if hours < 1:
        return "<1h"
    if hours < 4:
        return "1-4h"
    if hours < 12:
        return "4-12h"
    if hours < 24:
        return "12-24h"
    return ">24h"


def calculate_by_holding_time(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    return group_stats(
        history,
        lambda r: [holding_bucket(r)],
        order=lambda g: HOLDING_BUCKETS.index(g.key),
    )


def calculate_by_exit_type(history: Iterable[TradeRecord]) -> list[GroupedStats]:
    return group_stats(
        history,
        lambda r: [EXIT_TYPE_LABELS.get(r.exit_type, EXIT_UNKNOWN)],
        order=lambda g: EXIT_BUCKETS.index(g.key),
    )


def calculate_top_violated_rules(
    history: Iterable[TradeRecord], limit: int = 3
) -> list[GroupedStats]:
    """Most frequently violated rules with per-rule win rate and P&L.

    Only trades marked PARTIAL / VIOLATED count. Ties keep first-seen order.
    """
    violating = [r for r in finished_trades(history) if r.rule_compliance in _VIOLATION_LEVELS]
    ranked = group_stats(violating, lambda r: r.violated_rules, order=lambda g: -g.count)
    return ranked[:limit]
