# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Layout Engine
# =============================================================================
# Pure width arithmetic: no iTerm2 calls, no logging. One display column per
# character is assumed throughout.

import math

from .config_loader import LayoutConfig
from .tab_model import DisplayName

PAD_CHAR = " "
ELLIPSIS = "…"


def allocate_width(total_width: int, tab_count: int, config: LayoutConfig) -> int:
    """
    Compute the shared target width of every tab.

    The columns left after the fixed overhead are split evenly, the share is
    clamped to [min_width, max_width], then the per-tab overhead is removed.

    Args:
        total_width: Columns available to the whole tab bar
        tab_count: Number of tabs; anything below 1 counts as 1
        config: Width bounds and overheads

    Returns:
        Target width per tab. May be zero or negative when the per-tab
        overhead exceeds the bounds; pad_label copes with that.
    """
    available = max(total_width - config.fixed_overhead, 1)
    computed = available // max(tab_count, 1)

    if computed < config.min_width:
        clamped = config.min_width
    elif computed > config.max_width:
        clamped = config.max_width
    else:
        clamped = computed

    return clamped - config.per_tab_overhead


def pad_label(label: str | None, target_width: int) -> DisplayName:
    """
    Fit a label into target_width columns.

    A label that leaves no room for one column of padding on each side is
    truncated to ``target_width - 2`` characters, prefixed by a single pad
    and followed by an ellipsis. Otherwise it is centered with spaces; the
    right side takes the odd column.

    The leftmost pad always carries the label as the marker, and padding is
    literal spaces so a width change always changes the title text.

    Args:
        label: The true, unpadded label (None is treated as empty)
        target_width: Width from allocate_width; may be tiny or negative

    Returns:
        DisplayName with the padded text and the original label
    """
    label = label or ""

    if len(label) + 2 > target_width:
        kept = label[:max(target_width - 2, 0)]
        return DisplayName(
            visible=PAD_CHAR + kept + ELLIPSIS,
            original=label,
            left_pad=1,
            right_pad=0,
        )

    padding_total = (target_width - len(label)) / 2
    left = math.floor(padding_total)
    right = math.ceil(padding_total)
    return DisplayName(
        visible=PAD_CHAR * left + label + PAD_CHAR * right,
        original=label,
        left_pad=left,
        right_pad=right,
    )
