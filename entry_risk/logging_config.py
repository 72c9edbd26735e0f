"""Logging setup for script runs.

Console gets a plain format, the daily-rotated file gets plain or JSON lines.
Every record passing through the root handlers is stamped with the run_id
of the current invocation, so library loggers are tagged too.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import uuid
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "data" / "logs"
LOG_FILE = "entry_risk.log"

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(run_id)s] %(name)s: %(message)s"


class RunIdFilter(logging.Filter):
    """Attach run_id to records that do not carry one already."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "run_id", None):
            record.run_id = self.run_id
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, run_id (+ exc)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "run_id": getattr(record, "run_id", ""),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _structured_from_env() -> bool:
    return os.environ.get("STRUCTURED_LOGGING", "").lower() in ("true", "1")


def setup_logging(
    structured: bool = False,
    log_dir: Path | str | None = None,
    level: int = logging.INFO,
) -> str:
    """Configure the root logger for one script run and return its run_id.

    Args:
        structured: JSON lines in the log file. STRUCTURED_LOGGING=1 also enables it.
        log_dir: Override log directory. Defaults to data/logs/.
        level: Root log level.
    """
    run_id = uuid.uuid4().hex[:12]
    log_path = Path(log_dir) if log_dir else LOG_DIR
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    # 再呼び出し時にハンドラが重複しないよう閉じてから外す
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    plain = logging.Formatter(PLAIN_FORMAT)
    run_filter = RunIdFilter(run_id)

    console = logging.StreamHandler()
    console.setFormatter(plain)

    # 日次ローテーション、30 日保持
    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_path / LOG_FILE,
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setFormatter(JSONFormatter() if structured or _structured_from_env() else plain)

    for handler in (console, file_handler):
        handler.addFilter(run_filter)
        root.addHandler(handler)

    return run_id
