"""Tests for logging setup and structured events."""

import json
import logging
import tempfile
from pathlib import Path

from rich.logging import RichHandler

from pickpocket.config import LoggingConfig
from pickpocket.utils.logging import log_event, setup_logging


def _close(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()
        handler.close()
    logger.handlers = []


def test_setup_logging_console_only():
    logger = setup_logging(LoggingConfig(level="DEBUG"), None)

    assert logger.name == "pickpocket"
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    _close(logger)


def test_setup_logging_writes_jsonl_file():
    """File logger should write JSONL with extra fields"""
    with tempfile.TemporaryDirectory() as tmpdir:
        cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
        logger = setup_logging(cfg, Path(tmpdir))

        log_event(logger, "Renew complete", event="renew_complete", count=3)
        _close(logger)

        lines = (Path(tmpdir) / "run.jsonl").read_text(encoding="utf-8").strip().split("\n")
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["message"] == "Renew complete"
        assert entry["event"] == "renew_complete"
        assert entry["count"] == 3
        assert entry["level"] == "INFO"
        assert "timestamp" in entry


def test_setup_logging_plain_file_respects_level():
    with tempfile.TemporaryDirectory() as tmpdir:
        cfg = LoggingConfig(level="WARNING", console=False, file=True, filename="run.log")
        logger = setup_logging(cfg, Path(tmpdir))

        log_event(logger, "quiet", event="debug_only", level=logging.INFO)
        log_event(logger, "loud", event="warned", level=logging.WARNING)
        _close(logger)

        content = (Path(tmpdir) / "run.log").read_text(encoding="utf-8")
        assert "loud" in content
        assert "quiet" not in content


def test_log_event_without_logger_is_noop():
    log_event(None, "nothing", event="ignored")
