"""Tests for board configuration loading and validation."""

import math

import pytest

from piboard.board.exceptions import ConfigError
from piboard.layout.config import (
    BoardConfig,
    Detection,
    Geometry,
    SprintResolution,
    config_from_dict,
    load_config,
)


class TestBoardConfigDefaults:
    def test_defaults(self):
        c = BoardConfig(sprint_resolution=SprintResolution.LATEST)
        assert c.max_cards_per_column == 5
        assert c.num_future_sprints == 6
        assert c.future_sprint_columns == 6
        assert c.sprint_length_days == 14
        assert c.warn_unresolved_sprint is True
        assert isinstance(c.geometry, Geometry)
        assert isinstance(c.detection, Detection)

    def test_sprint_resolution_has_no_default(self):
        with pytest.raises(TypeError):
            BoardConfig()

    def test_unit_width(self):
        g = Geometry(element_width=400, element_spacing=10)
        assert g.unit_width == 410

    def test_tracker_url_trailing_slash_removed(self):
        c = BoardConfig(sprint_resolution=SprintResolution.FIRST, tracker_base_url="https://jira.example/")
        assert c.tracker_base_url == "https://jira.example"


class TestBoardConfigValidation:
    def test_non_finite_rejected(self):
        with pytest.raises(ConfigError, match="element_width"):
            Geometry(element_width=math.inf)

    def test_nan_rejected(self):
        with pytest.raises(ConfigError, match="must be finite"):
            Detection(team_cluster_tolerance=math.nan)

    def test_zero_cards_per_column_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            BoardConfig(sprint_resolution=SprintResolution.FIRST, max_cards_per_column=0)
        assert exc_info.value.field == "max_cards_per_column"

    def test_fractional_count_rejected(self):
        with pytest.raises(ConfigError, match="whole number"):
            BoardConfig(sprint_resolution=SprintResolution.FIRST, num_future_sprints=2.5)

    def test_string_mode_rejected_on_dataclass(self):
        with pytest.raises(ConfigError, match="sprint_resolution"):
            BoardConfig(sprint_resolution="first")

    def test_bool_is_not_a_number(self):
        with pytest.raises(ConfigError, match="must be a number"):
            Geometry(column_gap=True)


class TestConfigFromDict:
    def test_mode_parsed_from_string(self):
        c = config_from_dict({"sprint_resolution": "Latest"})
        assert c.sprint_resolution is SprintResolution.LATEST

    def test_mode_required(self):
        with pytest.raises(ConfigError, match="is required"):
            config_from_dict({"max_cards_per_column": 4})

    def test_invalid_mode(self):
        with pytest.raises(ConfigError, match="'first' or 'latest'"):
            config_from_dict({"sprint_resolution": "middle"})

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="unknown setting"):
            config_from_dict({"sprint_resolution": "first", "colour": "red"})

    def test_unknown_nested_key(self):
        with pytest.raises(ConfigError, match="geometry.depth"):
            config_from_dict({"sprint_resolution": "first", "geometry": {"depth": 3}})

    def test_nested_geometry(self):
        c = config_from_dict({"sprint_resolution": "first", "geometry": {"element_width": 300}})
        assert c.geometry.element_width == 300
        assert c.geometry.element_height == 300.0

    def test_overrides_win_and_none_is_ignored(self):
        c = config_from_dict(
            {"sprint_resolution": "first", "max_cards_per_column": 4},
            sprint_resolution="latest",
            max_cards_per_column=None,
        )
        assert c.sprint_resolution is SprintResolution.LATEST
        assert c.max_cards_per_column == 4


class TestLoadConfig:
    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "piboard.yaml"
        path.write_text("sprint_resolution: first\nnum_future_sprints: 2\ndetection:\n  fallback_half_width: 500\n")
        c = load_config(path)
        assert c.num_future_sprints == 2
        assert c.detection.fallback_half_width == 500

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="config"):
            load_config(tmp_path / "nope.yaml")

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "piboard.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_empty_file_needs_mode(self, tmp_path):
        path = tmp_path / "piboard.yaml"
        path.write_text("")
        with pytest.raises(ConfigError, match="sprint_resolution"):
            load_config(path)
        assert load_config(path, sprint_resolution="first").sprint_resolution is SprintResolution.FIRST
