"""Markdown analytics report for the trade journal."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone, tzinfo

from entry_risk.analysis.breakdowns import (
    calculate_by_currency,
    calculate_by_day_of_week,
    calculate_by_entry_basis,
    calculate_by_exit_type,
    calculate_by_holding_time,
    calculate_by_risk_reward,
    calculate_by_rule_compliance,
    calculate_by_time_of_day,
    calculate_top_violated_rules,
)
from entry_risk.analysis.streaks import calculate_streaks
from entry_risk.analysis.summary import GroupedStats, calculate_summary
from entry_risk.journal.models import TradeRecord


def _grouped_table(title: str, rows: Sequence[GroupedStats]) -> list[str]:
    lines = [f"## {title}\n"]
    if not rows:
        lines.append("No finished trades.\n")
        return lines
    lines.append("| Group | Trades | Wins | Win rate | Net P&L |")
    lines.append("|-------|--------|------|----------|---------|")
    for g in rows:
        lines.append(
            f"| {g.key} | {g.count} | {g.win_count} | {g.win_rate:.1f}% | {g.net_profit:+,.0f} |"
        )
    lines.append("")
    return lines


def build_report(
    history: Sequence[TradeRecord],
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> str:
    """Render summary, breakdowns and streaks as a markdown document."""
    now = now or datetime.now(timezone.utc)
    s = calculate_summary(history)
    open_count = sum(1 for r in history if r.trade_result is None)

    lines: list[str] = []
    lines.append("# Trade Journal Report")
    lines.append(f"Generated: {now.strftime('%Y-%m-%d %H:%M %Z').strip()}\n")

    lines.append("## Summary\n")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Finished trades | {s.total_trades} |")
    lines.append(f"| Open trades | {open_count} |")
    lines.append(f"| Wins / Losses | {s.win_count} / {s.loss_count} |")
    lines.append(f"| Win rate | {s.win_rate:.1f}% |")
    lines.append(f"| Total profit | {s.total_profit:+,.0f} |")
    lines.append(f"| Total loss | {s.total_loss:+,.0f} |")
    lines.append(f"| Net P&L | {s.net_profit:+,.0f} |")
    lines.append(f"| Avg profit / loss | {s.average_profit:,.0f} / {s.average_loss:,.0f} |")
    lines.append(f"| Profit factor | {s.profit_factor:.2f} |")
    lines.append(f"| Max win / loss | {s.max_win:,.0f} / {s.max_loss:,.0f} |")
    lines.append(f"| RR avg / max / min | {s.average_rr:.2f} / {s.max_rr:.2f} / {s.min_rr:.2f} |")
    lines.append("")

    st = calculate_streaks(history)
    lines.append("## Streaks\n")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Current streak | {st.current_streak:+d} |")
    lines.append(f"| Max win streak | {st.max_win_streak} |")
    lines.append(f"| Max loss streak | {st.max_loss_streak} |")
    lines.append(f"| Avg win streak | {st.average_win_streak:.1f} |")
    lines.append(f"| Avg loss streak | {st.average_loss_streak:.1f} |")
    lines.append("")

    lines += _grouped_table("By Currency Pair", calculate_by_currency(history))
    lines += _grouped_table("By Entry Basis", calculate_by_entry_basis(history))
    lines += _grouped_table("By Day of Week", calculate_by_day_of_week(history, tz))
    lines += _grouped_table("By Time of Day", calculate_by_time_of_day(history, tz))
    lines += _grouped_table("By Rule Compliance", calculate_by_rule_compliance(history))
    lines += _grouped_table("Top Violated Rules", calculate_top_violated_rules(history))
    lines += _grouped_table("By Risk-Reward", calculate_by_risk_reward(history))
    lines += _grouped_table("By Holding Time", calculate_by_holding_time(history))
    lines += _grouped_table("By Exit Type", calculate_by_exit_type(history))

    return "\n".join(lines)
