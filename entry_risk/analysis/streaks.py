"""Win / loss streak statistics in exit-time order."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from entry_risk.analysis.summary import finished_trades
from entry_risk.journal.models import TradeRecord, TradeResult


@dataclass(frozen=True)
class StreakStats:
    current_streak: int  # 正 = 連勝中, 負 = 連敗中, 0 = 対象なし
    max_win_streak: int
    max_loss_streak: int
    average_win_streak: float
    average_loss_streak: float


def calculate_streaks(history: Iterable[TradeRecord]) -> StreakStats:
    """Walk finished trades by exit time, tracking a signed streak counter.

    Trades without an exit timestamp cannot be ordered and are skipped.
    """
    trades = sorted(
        (r for r in finished_trades(history) if r.exit_timestamp is not None),
        key=lambda r: r.exit_timestamp,
    )

    streak = 0
    max_win = 0
    max_loss = 0
    win_streaks: list[int] = []
    loss_streaks: list[int] = []

    for r in trades:
        if r.trade_result == TradeResult.WIN:
            if streak < 0:
                loss_streaks.append(-streak)
                streak = 0
            streak += 1
            max_win = max(max_win, streak)
        else:
            if streak > 0:
                win_streaks.append(streak)
                streak = 0
            streak -= 1
            max_loss = max(max_loss, -streak)

    # 進行中の streak も履歴に含める
    if streak > 0:
        win_streaks.append(streak)
    elif streak < 0:
        loss_streaks.append(-streak)

    return StreakStats(
        current_streak=streak,
        max_win_streak=max_win,
        max_loss_streak=max_loss,
        average_win_streak=sum(win_streaks) / len(win_streaks) if win_streaks else 0.0,
        average_loss_streak=sum(loss_streaks) / len(loss_streaks) if loss_streaks else 0.0,
    )


def format_streaks(s: StreakStats) -> str:
    if s.current_streak > 0:
        current = f"{s.current_streak}連勝中"
    elif s.current_streak < 0:
        current = f"{-s.current_streak}連敗中"
    else:
        current = "-"
    return (
        f"Current: {current} "
        f"| Max W/L: {s.max_win_streak}/{s.max_loss_streak} "
        f"| Avg W/L: {s.average_win_streak:.1f}/{s.average_loss_streak:.1f}"
    )
