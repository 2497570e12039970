"""Shared fixtures."""

from pathlib import Path

import pytest

from iterm2_tab_width.config_loader import LayoutConfig
from iterm2_tab_width.tab_model import Tab, TabKind


@pytest.fixture
def config() -> LayoutConfig:
    """The configuration from the 80-column, three-tab example."""
    return LayoutConfig(min_width=20, max_width=300, fixed_overhead=1, per_tab_overhead=1)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Path for a tab-width.toml that tests may write."""
    return tmp_path / "tab-width.toml"


@pytest.fixture
def make_tab():
    """Factory for plain tab records."""

    def _make(name=None, kind=TabKind.TAB, explicit_name=None) -> Tab:
        return Tab(kind=kind, displayed_name=name, explicit_name=explicit_name)

    return _make
