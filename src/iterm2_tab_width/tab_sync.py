# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# iTerm2 Tab Sync
# =============================================================================
# Maps iTerm2 windows onto Tab records and writes padded titles back. The
# label marker and the last title written are kept in user variables on the
# iTerm2 tab itself, so they disappear together with the tab.

from pathlib import Path
from uuid import uuid4

import iterm2
from loguru import logger

from .config_loader import CONFIG_PATH, current_layout_config
from .errors import Error, ErrorReport, ErrorType
from .label_registry import embedded_label, visible_text
from .layout_engine import pad_label
from .logging_config import trace_id_var
from .orchestrator import recompute, rename_tab
from .tab_model import DisplayName, Tab, TabKind

LABEL_VARIABLE = "user.tabWidthLabel"
VISIBLE_VARIABLE = "user.tabWidthVisible"
EXPLICIT_VARIABLE = "user.tabWidthExplicit"


def frame_columns(node) -> int:
    """
    Columns spanned by a tab's split-pane tree.

    Side-by-side panes (vertical splitter) add up, with one divider column
    between neighbours; stacked panes share the widest one.

    Args:
        node: iterm2.Splitter or iterm2.Session

    Returns:
        Width in columns, 0 for an empty tree
    """
    children = getattr(node, "children", None)
    if children is None:
        grid = getattr(node, "grid_size", None)
        return grid.width if grid is not None else 0

    widths = [frame_columns(child) for child in children]
    if not widths:
        return 0
    if node.vertical:
        return sum(widths) + len(widths) - 1
    return max(widths)


async def session_label(session) -> str:
    """Live name of a session, used as the current tab's label."""
    if session is None:
        return ""
    name = await session.async_get_variable("name")
    return name or ""


def escape_title(text: str) -> str:
    """Escape backslashes; iTerm2 evaluates titles as interpolated strings."""
    return text.replace("\\", "\\\\")


def own_title(title: str, written: str | None, marker: str | None) -> str | None:
    """
    Return the padded text this script wrote if title is one of its titles.

    Besides the last title recorded, any padding of the marker counts, so
    a write that stopped halfway is not mistaken for a user rename.

    Args:
        title: titleOverride as read back from iTerm2
        written: Last title recorded in user.tabWidthVisible
        marker: Label recorded in user.tabWidthLabel

    Returns:
        The unescaped padded text, or None for a title set by the user
    """
    if written is not None and title in (written, escape_title(written)):
        return written
    if marker is None:
        return None
    for text in (title, title.replace("\\\\", "\\")):
        padded = pad_label(marker, len(text)).visible
        if title in (padded, escape_title(padded)):
            return padded
    return None


async def read_tab(tab, is_current: bool) -> Tab:
    """
    Build a Tab record from an iTerm2 tab.

    A title that is not one this script wrote was set by the user, so it
    becomes an explicit rename and the old marker is dropped.

    Args:
        tab: iterm2.Tab
        is_current: Whether this is the window's current tab

    Returns:
        Tab record referencing the iTerm2 tab
    """
    kind = TabKind.CURRENT if is_current else TabKind.TAB
    title = await tab.async_get_variable("titleOverride")
    marker = await tab.async_get_variable(LABEL_VARIABLE)
    written = await tab.async_get_variable(VISIBLE_VARIABLE)
    explicit = await tab.async_get_variable(EXPLICIT_VARIABLE)

    own = own_title(title, written, marker) if title else None

    if title and own is None:
        logger.debug(
            "Tab title changed outside tab-width",
            operation="read_tab",
            status="explicit_rename",
            tab_id=tab.tab_id
        )
        return rename_tab(Tab(kind=kind, host_ref=tab), title)

    if title and marker is not None:
        return Tab(
            kind=kind,
            displayed_name=DisplayName(visible=own, original=marker),
            explicit_name=marker if explicit else None,
            host_ref=tab,
        )

    return Tab(
        kind=kind,
        displayed_name=await session_label(tab.current_session),
        host_ref=tab,
    )


async def write_tab(record: Tab) -> None:
    """
    Remember the marker, then set the padded title on the iTerm2 tab.

    The title goes last: if a variable write fails the tab keeps its old,
    consistent title and marker.
    """
    tab = record.host_ref
    display = record.displayed_name
    await tab.async_set_variable(LABEL_VARIABLE, display.original)
    await tab.async_set_variable(EXPLICIT_VARIABLE, bool(record.explicit_name))
    await tab.async_set_variable(VISIBLE_VARIABLE, display.visible)
    await tab.async_set_title(escape_title(display.visible))


def _stored_state(record: Tab) -> tuple[str, str | None, bool]:
    return (
        visible_text(record.displayed_name),
        embedded_label(record.displayed_name),
        bool(record.explicit_name),
    )


async def refresh_window(
    window,
    config_path: Path = CONFIG_PATH,
    report: ErrorReport | None = None,
) -> str | None:
    """
    Recompute and apply the titles of every tab in a window.

    The layout config is read on every call. A tab whose RPC fails is left
    as it is; the rest of the window is still updated.

    Args:
        window: iterm2.Window
        config_path: Path to the tab-width TOML file
        report: Optional ErrorReport collecting warnings

    Returns:
        The current tab's new title, or None if the window has no current tab
    """
    report = report if report is not None else ErrorReport()
    config = current_layout_config(config_path, report)
    current = window.current_tab
    current_id = current.tab_id if current is not None else None

    records: list[Tab] = []
    for tab in window.tabs:
        try:
            records.append(await read_tab(tab, is_current=(tab.tab_id == current_id)))
        except (iterm2.RPCException, AttributeError, TypeError) as e:
            report.add_warning(Error(
                error_type=ErrorType.RPC_ERROR,
                message=f"Could not read tab: {e}",
                context={"tab_id": tab.tab_id},
                original_exception=e
            ))

    if not records:
        return None

    width = frame_columns(current.root) if current is not None else 0
    live_label = ""
    if current is not None:
        try:
            live_label = await session_label(current.current_session)
        except (iterm2.RPCException, AttributeError, TypeError) as e:
            report.add_warning(Error(
                error_type=ErrorType.RPC_ERROR,
                message=f"Could not read current session name: {e}",
                context={"tab_id": current_id},
                original_exception=e
            ))

    previous = [_stored_state(record) for record in records]
    _, current_title = recompute(records, width, config, current_label=lambda: live_label)

    written = 0
    for record, before in zip(records, previous):
        # Title, marker and flag must all match before a write can be skipped
        if _stored_state(record) == before:
            continue
        try:
            await write_tab(record)
            written += 1
        except (iterm2.RPCException, AttributeError, TypeError) as e:
            report.add_warning(Error(
                error_type=ErrorType.RPC_ERROR,
                message=f"Could not set tab title: {e}",
                context={"tab_id": record.host_ref.tab_id},
                original_exception=e
            ))

    logger.debug(
        "Window titles refreshed",
        operation="refresh_window",
        status="success",
        window_id=window.window_id,
        metrics={"tab_count": len(records), "width": width, "written": written}
    )
    return current_title


async def refresh_all_windows(app, config_path: Path = CONFIG_PATH, reason: str = "manual") -> None:
    """Refresh every terminal window under one trace id."""
    op_trace_id = str(uuid4())
    token = trace_id_var.set(op_trace_id)
    report = ErrorReport()
    try:
        logger.debug(
            "Refreshing tab titles",
            operation="refresh_all_windows",
            status="started",
            reason=reason
        )
        for window in app.terminal_windows:
            await refresh_window(window, config_path, report)
        if report.has_errors() or report.warnings:
            report.log_summary(op_trace_id)
    finally:
        trace_id_var.reset(token)
