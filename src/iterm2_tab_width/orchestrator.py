# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Recompute Orchestrator
# =============================================================================

from typing import Callable

from loguru import logger

from .config_loader import LayoutConfig
from .label_registry import true_label
from .layout_engine import allocate_width, pad_label
from .tab_model import Tab


def recompute(
    tabs: list[Tab],
    width: int,
    config: LayoutConfig,
    current_label: Callable[[], str | None] | None = None,
) -> tuple[list[Tab], str | None]:
    """
    Re-pad every tab to share width evenly.

    All labels are resolved before any tab is overwritten, and one target
    width is shared by all tabs. Each tab's displayed_name is replaced by
    its new DisplayName. Calling this again with the same input gives the
    same titles.

    Args:
        tabs: Tab records; an empty list means just the untracked current tab
        width: Columns available to the tab bar
        config: Width bounds and overheads, read fresh by the caller
        current_label: Live name provider for the current tab

    Returns:
        (tabs, title of the first current tab or None if there is none)
    """
    if not tabs:
        tabs = [Tab.synthetic_current()]

    labels = [true_label(tab, current_label) for tab in tabs]
    target = allocate_width(width, len(tabs), config)

    current_display = None
    for tab, label in zip(tabs, labels):
        tab.displayed_name = pad_label(label, target)
        if tab.is_current and current_display is None:
            current_display = tab.displayed_name.visible

    logger.debug(
        "Tab titles recomputed",
        operation="recompute",
        status="success",
        metrics={"tab_count": len(tabs), "width": width, "target_width": target}
    )
    return tabs, current_display


def recompute_all(
    tabs: list[Tab],
    width: int,
    config: LayoutConfig,
    current_label: Callable[[], str | None] | None = None,
) -> list[Tab]:
    """Re-pad every tab; entry point for resize, rename and tab events."""
    updated, _ = recompute(tabs, width, config, current_label)
    return updated


def compute_current_tab_name(
    tabs: list[Tab],
    width: int,
    config: LayoutConfig,
    current_label: Callable[[], str | None] | None = None,
) -> str:
    """Re-pad every tab and return the current tab's title for the naming hook."""
    _, current_display = recompute(tabs, width, config, current_label)
    return current_display or ""


def rename_tab(tab: Tab, name: str) -> Tab:
    """
    Apply an explicit rename.

    The plain new name replaces the padded one, dropping the old marker, so
    the next recompute pads the name as typed.
    """
    tab.explicit_name = name
    tab.displayed_name = name
    logger.info(
        "Tab renamed",
        operation="rename_tab",
        status="success",
        name=name
    )
    return tab
