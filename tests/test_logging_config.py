"""Tests for logging setup: run_id stamping, JSON lines, handler reset."""

from __future__ import annotations

import json
import logging
import sys

from entry_risk.logging_config import LOG_FILE, JSONFormatter, RunIdFilter, setup_logging


def _record(msg: str = "ロット %s", args: tuple = ("0.10",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="entry_risk.sizing",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def _flush_root() -> None:
    for h in logging.getLogger().handlers:
        h.flush()


class TestRunIdFilter:
    def test_stamps_missing_run_id(self):
        record = _record()
        assert RunIdFilter("abc123").filter(record) is True
        assert record.run_id == "abc123"

    def test_keeps_explicit_run_id(self):
        record = _record(run_id="fromextra")
        RunIdFilter("abc123").filter(record)
        assert record.run_id == "fromextra"


class TestJSONFormatter:
    def test_fields(self):
        data = json.loads(JSONFormatter().format(_record(run_id="abc123")))
        assert data["level"] == "INFO"
        assert data["logger"] == "entry_risk.sizing"
        assert data["msg"] == "ロット 0.10"
        assert data["run_id"] == "abc123"
        assert "exc" not in data

    def test_exception_included(self):
        try:
            raise ValueError("bad rate")
        except ValueError:
            record = _record(msg="failed", args=())
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad rate" in data["exc"]


class TestSetupLogging:
    def test_json_file_lines_carry_run_id(self, isolated_logging):
        run_id = setup_logging(structured=True, log_dir=isolated_logging)
        logging.getLogger("entry_risk.journal.records").info("Loaded %d records", 3)
        _flush_root()

        lines = (isolated_logging / LOG_FILE).read_text(encoding="utf-8").splitlines()
        data = json.loads(lines[-1])
        assert len(run_id) == 12
        assert data["run_id"] == run_id
        assert data["msg"] == "Loaded 3 records"

    def test_plain_file_includes_run_id(self, isolated_logging, monkeypatch):
        monkeypatch.delenv("STRUCTURED_LOGGING", raising=False)
        run_id = setup_logging(log_dir=isolated_logging)
        logging.getLogger("entry_risk").warning("plain line")
        _flush_root()

        text = (isolated_logging / LOG_FILE).read_text(encoding="utf-8")
        assert f"[{run_id}]" in text
        assert "plain line" in text

    def test_env_enables_json(self, isolated_logging, monkeypatch):
        monkeypatch.setenv("STRUCTURED_LOGGING", "true")
        setup_logging(log_dir=isolated_logging)
        file_handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(file_handlers) == 1
        assert isinstance(file_handlers[0].formatter, JSONFormatter)

    def test_repeated_setup_replaces_handlers(self, isolated_logging):
        first = setup_logging(log_dir=isolated_logging)
        second = setup_logging(log_dir=isolated_logging / "nested")
        assert first != second
        assert (isolated_logging / "nested").exists()
        assert len(logging.getLogger().handlers) == 2

    def test_level(self, isolated_logging):
        setup_logging(log_dir=isolated_logging, level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG
