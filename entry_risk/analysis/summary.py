"""Trade journal summary statistics and the shared grouping primitive.

Only finished trades (trade_result set) count. Actual outcome amounts are
preferred over planned ones when present.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from entry_risk.journal.models import TradeRecord, TradeResult

# 損失ゼロで利益ありの場合の profit factor
PROFIT_FACTOR_NO_LOSS = 999.0


@dataclass(frozen=True)
class AnalyticsSummary:
    total_trades: int
    win_count: int
    loss_count: int
    win_rate: float  # %
    total_profit: float
    total_loss: float  # 負値
    net_profit: float
    average_profit: float
    average_loss: float  # 絶対値
    profit_factor: float
    max_win: float
    max_loss: float  # 絶対値
    average_rr: float
    max_rr: float
    min_rr: float


@dataclass(frozen=True)
class GroupedStats:
    key: str
    count: int
    win_count: int
    win_rate: float  # %
    net_profit: float


EMPTY_SUMMARY = AnalyticsSummary(
    total_trades=0,
    win_count=0,
    loss_count=0,
    win_rate=0.0,
    total_profit=0.0,
    total_loss=0.0,
    net_profit=0.0,
    average_profit=0.0,
    average_loss=0.0,
    profit_factor=0.0,
    max_win=0.0,
    max_loss=0.0,
    average_rr=0.0,
    max_rr=0.0,
    min_rr=0.0,
)


def finished_trades(history: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Trades with a recorded result. Open trades are excluded everywhere."""
    return [r for r in history if r.trade_result is not None]


def trade_profit(record: TradeRecord) -> float:
    """Profit of a winning trade (actual if recorded, else planned)."""
    if record.actual_profit is not None:
        return record.actual_profit
    return record.planned_profit


def trade_loss(record: TradeRecord) -> float:
    """Loss of a losing trade as a negative amount."""
    amount = record.actual_loss if record.actual_loss is not None else record.planned_loss
    return -abs(amount)


def calculate_summary(history: Iterable[TradeRecord]) -> AnalyticsSummary:
    """Aggregate win rate, P&L, profit factor and RR over finished trades."""
    trades = finished_trades(history)
    total = len(trades)
    if total == 0:
        return EMPTY_SUMMARY

    total_profit = 0.0
    total_loss = 0.0
    max_win = 0.0
    max_loss = 0.0
    win_count = 0
    loss_count = 0

    for r in trades:
        if r.trade_result == TradeResult.WIN:
            win_count += 1
            profit = trade_profit(r)
            total_profit += profit
            max_win = max(max_win, profit)
        elif r.trade_result == TradeResult.LOSS:
            loss_count += 1
            loss = trade_loss(r)
            total_loss += loss
            max_loss = max(max_loss, abs(loss))

    if total_loss != 0:
        profit_factor = total_profit / abs(total_loss)
    elif total_profit > 0:
        profit_factor = PROFIT_FACTOR_NO_LOSS
    else:
        profit_factor = 0.0

    rr_values = [r.risk_reward_ratio or 0.0 for r in trades]

    return AnalyticsSummary(
        total_trades=total,
        win_count=win_count,
        loss_count=loss_count,
        win_rate=win_count / total * 100,
        total_profit=total_profit,
        total_loss=total_loss,
        net_profit=total_profit + total_loss,
        average_profit=total_profit / win_count if win_count > 0 else 0.0,
        average_loss=abs(total_loss) / loss_count if loss_count > 0 else 0.0,
        profit_factor=profit_factor,
        max_win=max_win,
        max_loss=max_loss,
        average_rr=sum(rr_values) / total,
        max_rr=max(rr_values),
        min_rr=min(rr_values),
    )


def group_stats(
    history: Iterable[TradeRecord],
    key_fn: Callable[[TradeRecord], Iterable[str]],
    order: Callable[[GroupedStats], object] | None = None,
) -> list[GroupedStats]:
    """Partition finished trades by key_fn and summarize each partition.

    key_fn returns zero or more keys per trade; the trade is counted in
    every group it names (multi-tag entry basis, multiple violated rules).
    Duplicate keys from one trade count once.

    Args:
        history: Trade records (open trades are ignored).
        key_fn: Record → group keys.
        order: Sort key for the output. Defaults to net profit descending.
    """
    groups: dict[str, list[TradeRecord]] = {}
    for r in finished_trades(history):
        for key in dict.fromkeys(key_fn(r)):
            groups.setdefault(key, []).append(r)

    stats = []
    for key, trades in groups.items():
        s = calculate_summary(trades)
        stats.append(
            GroupedStats(
                key=key,
                count=s.total_trades,
                win_count=s.win_count,
                win_rate=s.win_rate,
                net_profit=s.net_profit,
            )
        )

    if order is None:
        return sorted(stats, key=lambda g: -g.net_profit)
    return sorted(stats, key=order)


def format_summary(s: AnalyticsSummary) -> str:
    """One-line summary for logs."""
    return (
        f"Trades: {s.total_trades} (W{s.win_count}/L{s.loss_count}) "
        f"| Win rate: {s.win_rate:.1f}% "
        f"| Net: {s.net_profit:+,.0f} "
        f"| PF: {s.profit_factor:.2f} "
        f"| Avg RR: {s.average_rr:.2f}"
    )
