"""Position sizing from account risk budget and stop distance.

recommended_lot = floor_to_step(budget / (stop_pips * pip_value), lot_step)

The calculator is pure and never raises: every invalid input maps to an
ENTRY_FORBIDDEN result carrying the reason.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext

from entry_risk.sizing.currency import parse_pair, pip_multiplier
from entry_risk.sizing.models import (
    CalculationResult,
    Distance,
    PipDistance,
    PriceLevel,
    RiskSettings,
    RiskStatus,
    TradeInput,
)

logger = logging.getLogger(__name__)

EPSILON = 1e-6
# floor 時の許容誤差 (lot_step 単位)
_FLOOR_TOLERANCE = Decimal("1e-9")

MSG_STOP_MISSING = "損切り幅を正しく入力してください。"
MSG_TAKE_MISSING = "利確幅を正しく入力してください。"
MSG_RATE_MISSING = "決済通貨の円換算レートを入力してください。"
MSG_LOT_TOO_SMALL = "推奨ロットが最小ロットを下回っています。"
MSG_RISK_EXCEEDED = "丸め後のリスクが許容%を超えています。"
MSG_OK = "リスク許容範囲内です。"


def step_decimals(step: float) -> int:
    """Number of decimal places in a lot step (0.01 -> 2, 1 -> 0)."""
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return max(-int(exponent), 0)


def _quantize(value: Decimal, digits: int, rounding: str) -> Decimal:
    # 28 桁を超える値でも InvalidOperation にならない精度で丸める
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + digits + 12)
        return value.quantize(Decimal(1).scaleb(-digits), rounding=rounding)


def floor_to_step(value: float, step: float) -> float:
    """Floor value to a multiple of step, never rounding up.

    Uses Decimal so that e.g. 0.1 / 0.01 floors to 10 steps, not 9.
    Non-finite values floor to 0.
    """
    if step <= 0 or not value > 0 or not math.isfinite(value):
        return 0.0
    step_d = Decimal(str(step))
    value_d = Decimal(repr(value))
    digits = step_decimals(step)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, (value_d / step_d).adjusted() + 24)
        units = _quantize(value_d / step_d + _FLOOR_TOLERANCE, 0, ROUND_FLOOR)
        return float(_quantize(units * step_d, digits, ROUND_HALF_UP))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator (0.5 away from zero), not banker's rounding."""
    if not math.isfinite(value):
        return value
    return float(_quantize(Decimal(repr(value)), digits, ROUND_HALF_UP))


def to_pips(distance: Distance | None, entry_price: float, multiplier: int) -> float:
    """Normalize a stop / take distance to pips. Absent or invalid → 0."""
    if isinstance(distance, PipDistance):
        return distance.value if distance.value > 0 else 0.0
    if isinstance(distance, PriceLevel):
        # pips は小数 1 桁扱い
        return round(abs(entry_price - distance.value) * multiplier, 1)
    return 0.0


def effective_pip_value(
    pips_value_per_lot: float,
    currency_pair: str | None,
    current_jpy_rate: float | None,
) -> float:
    """Per-lot, per-pip value in account currency (JPY).

    pips_value_per_lot is calibrated on a JPY-quoted pair, where one pip is
    0.01 JPY per unit. For other quotes one pip is 0.0001 quote units, worth
    0.0001 * rate JPY, i.e. rate / 100 times the JPY-pair pip value.
    Returns 0.0 when a required rate is missing.
    """
    if parse_pair(currency_pair).is_jpy_quote:
        return pips_value_per_lot
    if current_jpy_rate is None or current_jpy_rate <= 0:
        return 0.0
    return pips_value_per_lot * (current_jpy_rate / 100)


def _forbidden(message: str, stop_pips: float = 0.0, take_pips: float = 0.0) -> CalculationResult:
    return CalculationResult(
        status=RiskStatus.ENTRY_FORBIDDEN,
        stop_pips=stop_pips,
        take_pips=take_pips,
        messages=[message],
    )


def calculate_risk(trade: TradeInput, settings: RiskSettings) -> CalculationResult:
    """Size a position and classify whether the entry is allowed.

    Args:
        trade: Pair, direction, entry and stop / take distances.
        settings: Account balance, risk % and lot constraints.

    Returns:
        CalculationResult with lot, realized loss/profit and status.
    """
    # Step 1: 許容損失額
    max_loss_budget = settings.account_balance * settings.risk_percentage / 100

    # Step 2: pips 換算
    multiplier = pip_multiplier(trade.currency_pair)
    stop_pips = to_pips(trade.stop_loss, trade.entry_price, multiplier)
    take_pips = to_pips(trade.take_profit, trade.entry_price, multiplier)

    if stop_pips <= 0:
        return _forbidden(MSG_STOP_MISSING, take_pips=take_pips)
    if take_pips <= 0:
        return _forbidden(MSG_TAKE_MISSING, stop_pips=stop_pips)

    pip_value = effective_pip_value(
        settings.pips_value_per_lot, trade.currency_pair, trade.current_jpy_rate
    )
    if pip_value <= 0:
        return _forbidden(MSG_RATE_MISSING, stop_pips, take_pips)

    # Step 3: 理論ロット
    loss_per_lot = stop_pips * pip_value
    raw_lot = max_loss_budget / loss_per_lot if loss_per_lot > 0 else 0.0

    # Step 4: lot_step で切り捨て
    lot = floor_to_step(raw_lot, settings.lot_step)

    # Step 5: 丸め後の実数値
    actual_loss = lot * loss_per_lot
    actual_risk_percent = (
        actual_loss / settings.account_balance * 100 if settings.account_balance > 0 else 0.0
    )
    potential_profit = lot * take_pips * pip_value
    rr = potential_profit / actual_loss if actual_loss > 0 else 0.0

    # Step 6: 判定 (優先度順)
    status = RiskStatus.ENTRY_OK
    messages: list[str] = []

    if lot < settings.min_lot - EPSILON or lot == 0:
        status = RiskStatus.ENTRY_FORBIDDEN
        messages.append(MSG_LOT_TOO_SMALL)
    elif actual_risk_percent > settings.risk_percentage + EPSILON:
        status = RiskStatus.ENTRY_FORBIDDEN
        messages.append(MSG_RISK_EXCEEDED)
    elif rr < settings.min_risk_reward_ratio - EPSILON:
        status = RiskStatus.CONDITIONS_NG
        messages.append(
            f"RR比 {rr:.2f} が最低基準 {settings.min_risk_reward_ratio:.2f} を下回っています。"
        )

    if not messages:
        messages.append(MSG_OK)

    logger.debug(
        "Risk calc: pair=%s stop=%.1fp take=%.1fp raw_lot=%.4f lot=%s status=%s",
        trade.currency_pair,
        stop_pips,
        take_pips,
        raw_lot,
        lot,
        status,
    )

    return CalculationResult(
        status=status,
        recommended_lot=round(lot, step_decimals(settings.lot_step)),
        stop_pips=stop_pips,
        take_pips=take_pips,
        actual_loss=round_half_up(actual_loss),
        actual_risk_percent=round_half_up(actual_risk_percent, 2),
        potential_profit=round_half_up(potential_profit),
        risk_reward_ratio=round_half_up(rr, 2),
        messages=messages,
    )
