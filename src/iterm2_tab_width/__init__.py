"""Fixed-width tab titles for iTerm2."""

from .config_loader import LayoutConfig, load_layout_config
from .label_registry import true_label
from .layout_engine import allocate_width, pad_label
from .orchestrator import compute_current_tab_name, recompute, recompute_all, rename_tab
from .tab_model import DisplayName, Tab, TabKind

__all__ = [
    "DisplayName",
    "LayoutConfig",
    "Tab",
    "TabKind",
    "allocate_width",
    "compute_current_tab_name",
    "load_layout_config",
    "pad_label",
    "recompute",
    "recompute_all",
    "rename_tab",
    "true_label",
]
