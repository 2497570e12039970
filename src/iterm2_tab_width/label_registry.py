# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Label Registry
# =============================================================================
# A tab's name has three possible sources: the user's explicit rename, the
# live session name of the focused tab, and the host-derived name of any
# other tab. Re-padding must always start from the right one, never from a
# previously padded title.

from typing import Callable

from .tab_model import DisplayName, Tab, TabKind


def embedded_label(displayed: DisplayName | str | None) -> str | None:
    """Return the marker carried by a padded name, or None for plain text."""
    if isinstance(displayed, DisplayName):
        return displayed.original
    return None


def visible_text(displayed: DisplayName | str | None) -> str:
    """Return the text the host shows; an unnamed tab reads as empty."""
    if displayed is None:
        return ""
    if isinstance(displayed, DisplayName):
        return displayed.visible
    return str(displayed)


def _marker_or_displayed(tab: Tab) -> str:
    marker = embedded_label(tab.displayed_name)
    if marker is not None:
        return marker
    return visible_text(tab.displayed_name)


def true_label(tab: Tab, current_label: Callable[[], str | None] | None = None) -> str:
    """
    Recover the unpadded label of a tab.

    Resolution order:
    1. Explicitly renamed tab: marker, else the displayed name as typed
    2. Current tab: the live label from current_label, fetched every call
    3. Any other tab: marker, else the displayed name

    Args:
        tab: Tab record from the host
        current_label: Callable returning the focused session's live name.
            Without it the current tab resolves like any other tab.

    Returns:
        The label to pad, never None
    """
    if tab.explicit_name:
        marker = embedded_label(tab.displayed_name)
        if marker is not None:
            return marker
        if tab.displayed_name is None:
            return tab.explicit_name
        return visible_text(tab.displayed_name)

    if tab.kind is TabKind.CURRENT and current_label is not None:
        return current_label() or ""

    return _marker_or_displayed(tab)
