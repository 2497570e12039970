"""Tests for layout configuration loading."""

from pathlib import Path

from iterm2_tab_width.config_loader import (
    DEFAULT_CONFIG,
    LayoutConfig,
    current_layout_config,
    deep_merge,
    extract_toml_error_context,
    layout_config_from_dict,
    load_layout_config,
)
from iterm2_tab_width.errors import ErrorReport, ErrorType


class TestLayoutConfig:
    """Tests for the LayoutConfig dataclass."""

    def test_default_values(self) -> None:
        config = LayoutConfig()

        assert config.min_width == 20
        assert config.max_width == 300
        assert config.fixed_overhead == 1
        assert config.per_tab_overhead == 1

    def test_defaults_match_default_config(self) -> None:
        result = layout_config_from_dict(DEFAULT_CONFIG)

        assert result.is_ok()
        assert result.value == LayoutConfig()


class TestLayoutConfigFromDict:
    """Tests for layout_config_from_dict."""

    def test_degenerate_bounds_accepted(self) -> None:
        """min above max is the engine's problem, not a load error."""
        data = {"tab_width": {"min_width": 50, "max_width": 10,
                              "fixed_overhead": 500, "per_tab_overhead": 0}}

        result = layout_config_from_dict(data)

        assert result.is_ok()
        assert result.value.min_width == 50
        assert result.value.max_width == 10

    def test_non_integer_rejected(self) -> None:
        data = deep_merge(DEFAULT_CONFIG, {"tab_width": {"max_width": "wide"}})

        result = layout_config_from_dict(data)

        assert result.is_err()
        assert result.error.error_type is ErrorType.VALIDATION_ERROR
        assert result.error.context["key"] == "max_width"

    def test_bool_rejected(self) -> None:
        data = deep_merge(DEFAULT_CONFIG, {"tab_width": {"min_width": True}})

        result = layout_config_from_dict(data)

        assert result.is_err()
        assert result.error.error_type is ErrorType.VALIDATION_ERROR

    def test_table_must_be_a_table(self) -> None:
        result = layout_config_from_dict({"tab_width": 5})

        assert result.is_err()
        assert result.error.error_type is ErrorType.VALIDATION_ERROR


class TestLoadLayoutConfig:
    """Tests for load_layout_config."""

    def test_missing_file_gives_defaults(self, config_path: Path) -> None:
        result = load_layout_config(config_path)

        assert result.is_ok()
        assert result.value == LayoutConfig()

    def test_partial_file_merged_with_defaults(self, config_path: Path) -> None:
        config_path.write_text("[tab_width]\nmin_width = 12\nper_tab_overhead = 3\n")

        result = load_layout_config(config_path)

        assert result.is_ok()
        assert result.value == LayoutConfig(min_width=12, max_width=300,
                                            fixed_overhead=1, per_tab_overhead=3)

    def test_unrelated_tables_ignored(self, config_path: Path) -> None:
        config_path.write_text("[other]\nkey = 'value'\n")

        result = load_layout_config(config_path)

        assert result.is_ok()
        assert result.value == LayoutConfig()

    def test_invalid_toml(self, config_path: Path) -> None:
        config_path.write_text("[tab_width]\nmin_width = \n")

        result = load_layout_config(config_path)

        assert result.is_err()
        assert result.error.error_type is ErrorType.PARSE_ERROR
        assert result.error.context["line_number"] == 2
        assert result.error.original_exception is not None

    def test_wrong_type_in_file(self, config_path: Path) -> None:
        config_path.write_text("[tab_width]\nfixed_overhead = 1.5\n")

        result = load_layout_config(config_path)

        assert result.is_err()
        assert result.error.error_type is ErrorType.VALIDATION_ERROR

    def test_unreadable_path(self, tmp_path: Path) -> None:
        """A directory where the file should be cannot be opened."""
        result = load_layout_config(tmp_path)

        assert result.is_err()
        assert result.error.error_type is ErrorType.PERMISSION_ERROR


class TestCurrentLayoutConfig:
    """Tests for current_layout_config."""

    def test_reads_file_each_call(self, config_path: Path) -> None:
        config_path.write_text("[tab_width]\nmax_width = 40\n")
        assert current_layout_config(config_path).max_width == 40

        config_path.write_text("[tab_width]\nmax_width = 60\n")
        assert current_layout_config(config_path).max_width == 60

    def test_falls_back_to_defaults(self, config_path: Path) -> None:
        config_path.write_text("not toml at all [")

        assert current_layout_config(config_path) == LayoutConfig()

    def test_collects_error_into_report(self, config_path: Path) -> None:
        config_path.write_text("[tab_width]\nmin_width = 'x'\n")
        report = ErrorReport()

        config = current_layout_config(config_path, report)

        assert config == LayoutConfig()
        assert report.has_errors()
        assert report.errors[0].error_type is ErrorType.VALIDATION_ERROR


class TestHelpers:
    """Tests for deep_merge and TOML error context."""

    def test_deep_merge_nested(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        merged = deep_merge(base, {"a": {"y": 20}, "c": 4})

        assert merged == {"a": {"x": 1, "y": 20}, "b": 3, "c": 4}
        assert base == {"a": {"x": 1, "y": 2}, "b": 3}

    def test_error_context_includes_line(self, config_path: Path) -> None:
        import tomllib

        config_path.write_text("[tab_width]\nmin_width = \n")
        try:
            tomllib.loads(config_path.read_text())
        except tomllib.TOMLDecodeError as e:
            context = extract_toml_error_context(e, config_path)

        assert context["line_number"] == 2
        assert context["line_content"] == "min_width ="
        assert context["formatted_message"].startswith("Error on line 2: min_width =")
