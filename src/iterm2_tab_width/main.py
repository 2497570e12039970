# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Entry Point
# =============================================================================

import asyncio
from uuid import uuid4

import iterm2
from loguru import logger

from .logging_config import setup_logger
from .tab_sync import refresh_all_windows


async def watch_layout(connection, refresh):
    """Tabs created, closed or moved."""
    async with iterm2.LayoutChangeMonitor(connection) as monitor:
        while True:
            await monitor.async_get()
            await refresh("layout_change")


async def watch_focus(connection, refresh):
    """Tab switches."""
    async with iterm2.FocusMonitor(connection) as monitor:
        while True:
            update = await monitor.async_get_next_update()
            if update.selected_tab_changed or update.window_changed:
                await refresh("focus_change")


async def watch_columns(connection, refresh):
    """Window resizes, seen as a change of any session's column count."""
    async with iterm2.VariableMonitor(
        connection, iterm2.VariableScopes.SESSION, "columns", "all"
    ) as monitor:
        while True:
            await monitor.async_get()
            await refresh("resize")


async def watch_names(connection, refresh):
    """Session renames, e.g. a new command or directory."""
    async with iterm2.VariableMonitor(
        connection, iterm2.VariableScopes.SESSION, "name", "all"
    ) as monitor:
        while True:
            await monitor.async_get()
            await refresh("session_name")


async def main(connection):
    """
    Keep tab titles at a fixed share of the window width.

    Flow:
    1. Pad every window's tabs once at startup
    2. Re-pad on tab create/close/move, tab switch, resize and session rename
    """
    main_trace_id = str(uuid4())
    logger.info(
        "Tab width starting",
        operation="main",
        status="started",
        trace_id=main_trace_id
    )

    app = await iterm2.async_get_app(connection)

    # Monitors fire independently; a refresh must never overlap another
    lock = asyncio.Lock()

    async def refresh(reason: str) -> None:
        async with lock:
            await refresh_all_windows(app, reason=reason)

    await refresh("startup")

    await asyncio.gather(
        watch_layout(connection, refresh),
        watch_focus(connection, refresh),
        watch_columns(connection, refresh),
        watch_names(connection, refresh),
    )


if __name__ == "__main__":
    setup_logger()
    iterm2.run_forever(main)
