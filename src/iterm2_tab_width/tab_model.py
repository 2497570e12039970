# Concatenated into tab-width.py by build.py
# Imports below are stripped by build.py; _header.py provides them

# =============================================================================
# Tab Model
# =============================================================================
# Centralized tab record shared by the layout engine, the label registry and
# the iTerm2 adapter, so every module agrees on what a "display name" is.

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TabKind(Enum):
    CURRENT = "current"
    TAB = "tab"


@dataclass
class DisplayName:
    """A padded tab title plus the label it was padded from.

    ``original`` is the marker: the true label the padding was computed
    from, or None for a plain name that has never been padded. The pad
    widths record how many literal space columns sit on either side.
    """

    visible: str
    original: str | None = None
    left_pad: int = 0
    right_pad: int = 0

    def __str__(self) -> str:
        return self.visible


@dataclass
class Tab:
    """One tab as seen by the host.

    Args:
        kind: CURRENT for the focused (or synthetic) tab, TAB otherwise.
        displayed_name: What the host shows now: a DisplayName after the
            first recompute, a plain string before it, None if unnamed.
        explicit_name: Name typed by the user on rename, None if the name
            is derived by the host.
        host_ref: The host's own tab object (an iterm2.Tab), untouched here.
    """

    kind: TabKind
    displayed_name: DisplayName | str | None = None
    explicit_name: str | None = None
    host_ref: Any = None

    @classmethod
    def synthetic_current(cls) -> "Tab":
        """Entry standing in for the current tab when the host lists none."""
        return cls(kind=TabKind.CURRENT)

    @property
    def is_current(self) -> bool:
        return self.kind is TabKind.CURRENT
