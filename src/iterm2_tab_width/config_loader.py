# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Configuration Loading
# =============================================================================

import re
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .errors import Error, ErrorReport, ErrorType, Result

CONFIG_DIR = Path("~/.config/iterm2").expanduser()
CONFIG_PATH = CONFIG_DIR / "tab-width.toml"
CONFIG_TABLE = "tab_width"

# Defaults apply to any key missing from the user's [tab_width] table
DEFAULT_CONFIG = {
    "tab_width": {
        "min_width": 20,
        "max_width": 300,
        "fixed_overhead": 1,
        "per_tab_overhead": 1,
    },
}


@dataclass
class LayoutConfig:
    """Width bounds and overhead for one recompute.

    No relation between the fields is enforced: the layout engine tolerates
    degenerate combinations such as an overhead larger than the window.
    """

    min_width: int = 20
    max_width: int = 300
    fixed_overhead: int = 1
    per_tab_overhead: int = 1


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            with open(file_path, "r") as f:
                lines = f.readlines()
                if 0 < line_number <= len(lines):
                    line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
        "raw_error": error_str
    }


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def layout_config_from_dict(config: dict) -> Result[LayoutConfig]:
    """
    Build a LayoutConfig from a merged configuration dict.

    Only the value types are checked. Bounds and overheads are taken as
    given, however inconsistent.

    Args:
        config: Configuration dict containing a [tab_width] table

    Returns:
        Result[LayoutConfig]: Ok with the config, or Err(VALIDATION_ERROR)
    """
    table = config.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        return Result.err(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message=f"[{CONFIG_TABLE}] must be a table",
            context={"value_type": type(table).__name__}
        ))

    values = {}
    for key in DEFAULT_CONFIG[CONFIG_TABLE]:
        value = table.get(key)
        # bool is an int subclass; `min_width = true` is still a mistake
        if isinstance(value, bool) or not isinstance(value, int):
            return Result.err(Error(
                error_type=ErrorType.VALIDATION_ERROR,
                message=f"{CONFIG_TABLE}.{key} must be an integer",
                context={"key": key, "value": repr(value)}
            ))
        values[key] = value

    return Result.ok(LayoutConfig(**values))


def load_layout_config(config_path: Path = CONFIG_PATH) -> Result[LayoutConfig]:
    """
    Load layout configuration from a TOML file with defaults fallback.

    A missing file is not an error: the defaults are returned.

    Args:
        config_path: Path to the tab-width TOML file

    Returns:
        Result[LayoutConfig]: Ok with merged config, or Err with error details
    """
    start_time = time.perf_counter()

    if not config_path.exists():
        logger.debug(
            "Config file does not exist, using defaults",
            operation="load_layout_config",
            status="default",
            config_path=str(config_path)
        )
        return layout_config_from_dict(DEFAULT_CONFIG)

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_layout_config",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
            error=error_context["formatted_message"]
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))
    except OSError as e:
        return Result.err(Error(
            error_type=ErrorType.PERMISSION_ERROR,
            message=f"Cannot read config file: {config_path}",
            context={"config_path": str(config_path), "reason": str(e)},
            original_exception=e
        ))

    result = layout_config_from_dict(deep_merge(DEFAULT_CONFIG, user_config))
    duration_ms = int((time.perf_counter() - start_time) * 1000)

    if result.is_ok():
        logger.debug(
            "Config loaded successfully",
            operation="load_layout_config",
            status="success",
            config_path=str(config_path),
            metrics={"duration_ms": duration_ms}
        )
    return result


def current_layout_config(
    config_path: Path = CONFIG_PATH,
    report: ErrorReport | None = None,
) -> LayoutConfig:
    """
    Read the layout config for one recompute, falling back to defaults.

    Called on every refresh so edits to the file take effect immediately.

    Args:
        config_path: Path to the tab-width TOML file
        report: Optional ErrorReport collecting a failed load

    Returns:
        The loaded LayoutConfig, or the defaults when loading failed
    """
    result = load_layout_config(config_path)
    if result.is_ok():
        return result.value

    if report is not None:
        report.collect_result(result)
    else:
        logger.warning(
            "Falling back to default layout config",
            operation="current_layout_config",
            status="fallback",
            error_type=result.error.error_type.value,
            reason=result.error.message
        )
    return LayoutConfig()
