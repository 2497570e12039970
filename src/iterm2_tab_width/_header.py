#!/usr/bin/env python3
# ruff: noqa: F401
# /// script
# requires-python = ">=3.11"
# dependencies = ["iterm2", "loguru", "platformdirs"]
# ///
"""
iTerm2 Fixed-Width Tab Titles
Pads or truncates every tab title so the tabs of a window share its width
evenly, bounded by a minimum and maximum tab width.

Configuration: ~/.config/iterm2/tab-width.toml (XDG standard)

Features:
- Equal division of the window's columns among its tabs
- Symmetric space padding, truncation with an ellipsis
- Original labels kept on the tab itself, so re-padding never compounds
- Recomputes on tab switch, tab create/close and window resize
- Structured JSONL logging (machine-readable)
"""

import asyncio
import json
import math
import re
import subprocess
import sys
import time
import tomllib
import traceback
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar
from uuid import uuid4


def show_import_error_dialog(package: str, error_msg: str) -> None:
    """
    Show visible osascript dialog when imports fail.

    Uses osascript directly so it works without any external dependencies.

    Args:
        package: Name of the missing package
        error_msg: The actual error message
    """
    message = (
        f"Missing Python package: {package}\\n\\n"
        f"Run this command to install:\\n"
        f"uv pip install {package}\\n\\n"
        f"Error: {error_msg}"
    )
    title = "iTerm2 Tab Width - Import Error"

    applescript = f'''
    display dialog "{message}" with title "{title}" buttons {{"OK"}} default button "OK" with icon stop
    '''

    try:
        subprocess.run(
            ["osascript", "-e", applescript],
            capture_output=True,
            timeout=30,
            check=False
        )
    except (OSError, subprocess.TimeoutExpired, subprocess.SubprocessError) as e:
        # If even osascript fails, at least print to stderr
        sys.stderr.write(f"ERROR: {message.replace(chr(92) + 'n', chr(10))}\n")
        sys.stderr.write(f"(osascript also failed: {e})\n")


# Import external packages with visible error dialogs
try:
    import iterm2
except ImportError as e:
    show_import_error_dialog("iterm2", str(e))
    sys.exit(1)

try:
    import platformdirs
except ImportError as e:
    show_import_error_dialog("platformdirs", str(e))
    sys.exit(1)

try:
    from loguru import logger
except ImportError as e:
    show_import_error_dialog("loguru", str(e))
    sys.exit(1)
