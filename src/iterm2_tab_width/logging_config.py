# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

LOG_APP_NAME = "iterm2-tab-width"
LOG_FILE_NAME = "tab-width.jsonl"

# Correlation ID for one refresh pass across windows
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)


def json_sink(message):
    """JSONL sink for machine-readable analysis - writes to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                   if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def setup_logger(level: str = "INFO"):
    """Configure Loguru for machine-readable JSONL output."""
    logger.remove()

    logger.add(
        json_sink,
        level=level
    )

    # macOS: ~/Library/Logs/iterm2-tab-width/
    # Linux: ~/.local/state/iterm2-tab-width/log/
    log_dir = Path(platformdirs.user_log_dir(
        appname=LOG_APP_NAME,
        ensure_exists=True
    ))

    logger.add(
        str(log_dir / LOG_FILE_NAME),
        format="{message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
        compression="gz",
        level="DEBUG"
    )

    return logger
