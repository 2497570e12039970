"""Tests for JSONL logging."""

import json
import sys
from pathlib import Path

import platformdirs
import pytest
from loguru import logger

from iterm2_tab_width.logging_config import LOG_FILE_NAME, json_sink, setup_logger, trace_id_var


def _last_entry(err: str) -> dict:
    """Last JSONL entry on stderr, skipping any plain-text handler output."""
    for line in reversed(err.strip().splitlines()):
        if line.startswith("{"):
            return json.loads(line)
    raise AssertionError("no JSON log line written")


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestJsonSink:
    """Tests for json_sink."""

    def test_structured_fields(self, capsys) -> None:
        handler_id = logger.add(json_sink, level="INFO")
        try:
            logger.info(
                "Tab titles recomputed",
                operation="recompute",
                status="success",
                trace_id="abc",
                tab_id="7",
                metrics={"tab_count": 3}
            )
        finally:
            logger.remove(handler_id)

        entry = _last_entry(capsys.readouterr().err)

        assert entry["level"] == "info"
        assert entry["operation"] == "recompute"
        assert entry["operation_status"] == "success"
        assert entry["trace_id"] == "abc"
        assert entry["context"] == {"tab_id": "7"}
        assert entry["metrics"] == {"tab_count": 3}
        assert entry["error"] is None

    def test_trace_id_from_context_var(self, capsys) -> None:
        handler_id = logger.add(json_sink, level="INFO")
        token = trace_id_var.set("from-context")
        try:
            logger.info("hello")
        finally:
            trace_id_var.reset(token)
            logger.remove(handler_id)

        entry = _last_entry(capsys.readouterr().err)

        assert entry["trace_id"] == "from-context"
        assert entry["operation"] == "unknown"

    def test_exception_details(self, capsys) -> None:
        handler_id = logger.add(json_sink, level="INFO")
        try:
            try:
                raise ValueError("bad width")
            except ValueError:
                logger.exception("failed", operation="recompute")
        finally:
            logger.remove(handler_id)

        entry = _last_entry(capsys.readouterr().err)

        assert entry["error"]["type"] == "ValueError"
        assert entry["error"]["message"] == "bad width"
        assert entry["error"]["traceback_lines"]


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_writes_file_in_log_dir(self, tmp_path: Path, monkeypatch, restore_logger) -> None:
        monkeypatch.setattr(platformdirs, "user_log_dir", lambda **kwargs: str(tmp_path))

        setup_logger()
        logger.debug("file only", operation="test")
        logger.complete()

        log_file = tmp_path / LOG_FILE_NAME
        assert log_file.exists()
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["record"]["message"] == "file only"
