#!/usr/bin/env python3
"""Trade journal analytics report.

Usage:
    python scripts/report_journal.py                       # history from settings
    python scripts/report_journal.py --history export.json
    python scripts/report_journal.py --save                # also save markdown
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

log = logging.getLogger(__name__)


def generate_report(history_path: Path, save: bool = False) -> str:
    """Load a JSON history export and render the markdown report."""
    from entry_risk.analysis.report import build_report
    from entry_risk.analysis.streaks import calculate_streaks, format_streaks
    from entry_risk.analysis.summary import calculate_summary, format_summary
    from entry_risk.config import settings
    from entry_risk.journal.records import load_history

    history = load_history(history_path)
    log.info("Summary: %s", format_summary(calculate_summary(history)))
    log.info("Streaks: %s", format_streaks(calculate_streaks(history)))

    report = build_report(history, tz=settings.analysis_tz())

    if save:
        report_dir = Path(__file__).resolve().parent.parent / "data" / "reports"
        report_dir.mkdir(parents=True, exist_ok=True)
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        path = report_dir / f"journal-{today}.md"
        path.write_text(report, encoding="utf-8")
        print(f"Report saved: {path}")

    return report


def main() -> None:
    from entry_risk.config import settings
    from entry_risk.logging_config import setup_logging

    parser = argparse.ArgumentParser(description="Trade journal analytics report")
    parser.add_argument("--history", type=Path, default=None, help="JSON history export")
    parser.add_argument("--save", action="store_true", help="Save report as markdown file")
    args = parser.parse_args()

    setup_logging()
    history_path = args.history or settings.history_path
    try:
        report = generate_report(history_path, save=args.save)
    except (OSError, ValueError) as e:
        log.error("Cannot build report from %s: %s", history_path, e)
        sys.exit(1)
    print(report)


if __name__ == "__main__":
    main()
