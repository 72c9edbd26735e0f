#!/usr/bin/env python3
"""Size a trade from the command line.

Usage:
    # 20 pip stop / 40 pip target on USD/JPY with .env risk settings
    python scripts/calc_risk.py --type LONG --entry 150.000 --sl-price 149.800 --tp-price 150.400

    # Non-JPY quote needs the quote→JPY rate
    python scripts/calc_risk.py --pair EUR/USD --type SHORT --entry 1.08500 \
        --sl-pips 15 --tp-pips 30 --rate 150.2

    # Override risk settings for one run
    python scripts/calc_risk.py --entry 150 --sl-pips 20 --tp-pips 40 --balance 500000 --risk-pct 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Position size / entry risk check")
    parser.add_argument("--pair", default=None, help="Currency pair (default: settings)")
    parser.add_argument("--type", dest="trade_type", default="LONG", choices=["LONG", "SHORT"])
    parser.add_argument("--entry", type=float, required=True, help="Entry price")

    sl = parser.add_mutually_exclusive_group(required=True)
    sl.add_argument("--sl-price", type=float, help="Stop loss price")
    sl.add_argument("--sl-pips", type=float, help="Stop loss distance in pips")

    tp = parser.add_mutually_exclusive_group(required=True)
    tp.add_argument("--tp-price", type=float, help="Take profit price")
    tp.add_argument("--tp-pips", type=float, help="Take profit distance in pips")

    parser.add_argument("--rate", type=float, default=None, help="Quote→JPY rate (non-JPY quotes)")
    parser.add_argument("--balance", type=float, default=None, help="Override account balance")
    parser.add_argument("--risk-pct", type=float, default=None, help="Override risk %%")
    parser.add_argument("--min-rr", type=float, default=None, help="Override minimum RR")
    return parser


def run(argv: list[str] | None = None) -> int:
    from entry_risk.config import settings
    from entry_risk.logging_config import setup_logging
    from entry_risk.sizing.models import PipDistance, PriceLevel, TradeInput, TradeType
    from entry_risk.sizing.risk_calculator import calculate_risk

    args = build_parser().parse_args(argv)
    setup_logging()

    risk = settings.risk_settings()
    overrides = {
        "account_balance": args.balance,
        "risk_percentage": args.risk_pct,
        "min_risk_reward_ratio": args.min_rr,
    }
    risk = replace(risk, **{k: v for k, v in overrides.items() if v is not None})
    try:
        risk.validate()
    except ValueError as e:
        log.error("Invalid risk settings: %s", e)
        return 1

    trade = TradeInput(
        currency_pair=args.pair or settings.default_currency_pair,
        trade_type=TradeType(args.trade_type),
        entry_price=args.entry,
        stop_loss=PriceLevel(args.sl_price) if args.sl_price is not None else PipDistance(args.sl_pips),
        take_profit=(
            PriceLevel(args.tp_price) if args.tp_price is not None else PipDistance(args.tp_pips)
        ),
        current_jpy_rate=args.rate,
    )
    result = calculate_risk(trade, risk)

    print(f"Status:          {result.status}")
    print(f"Recommended lot: {result.recommended_lot}")
    print(f"Stop / Take:     {result.stop_pips:.1f} / {result.take_pips:.1f} pips")
    print(f"Loss:            {result.actual_loss:,.0f} ({result.actual_risk_percent:.2f}%)")
    print(f"Profit:          {result.potential_profit:,.0f}")
    print(f"RR:              1 : {result.risk_reward_ratio:.2f}")
    for msg in result.messages:
        print(f"- {msg}")

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
