"""Board configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from ..board.exceptions import ConfigError
from ..tracker.sprints import SprintResolution


def _check_number(name: str, value, minimum: float = 0.0, integer: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(name, value, "must be a number")
    if not math.isfinite(value):
        raise ConfigError(name, value, "must be finite")
    if integer and not float(value).is_integer():
        raise ConfigError(name, value, "must be a whole number")
    if value < minimum:
        raise ConfigError(name, value, f"must be >= {minimum:g}")


@dataclass
class Geometry:
    """Fixed element metrics used by the layout synthesizer."""

    element_width: float = 500.0
    element_height: float = 300.0
    element_spacing: float = 20.0
    column_gap: float = 100.0
    team_spacing: float = 400.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    team_label_offset: float = 120.0
    header_height: float = 160.0
    capacity_row_height: float = 30.0
    capacity_header_spacing: float = 10.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name.startswith("origin_"):
                _check_number(f.name, value, minimum=-math.inf)
            else:
                _check_number(f.name, value)
        if self.element_width <= 0 or self.element_height <= 0:
            raise ConfigError("element_width/element_height", self.element_width, "must be > 0")

    @property
    def unit_width(self) -> float:
        return self.element_width + self.element_spacing


@dataclass
class Detection:
    """Tolerances for reconstructing boundaries from placed geometry."""

    team_cluster_tolerance: float = 50.0
    label_row_tolerance: float = 50.0
    header_min_font_size: float = 48.0
    header_line_max_height: float = 5.0
    header_line_min_width: float = 100.0
    header_line_max_gap: float = 200.0
    separator_max_width: float = 20.0
    separator_min_height: float = 200.0
    separator_search_distance: float = 4000.0
    fallback_half_width: float = 1000.0

    def __post_init__(self) -> None:
        for f in fields(self):
            _check_number(f.name, getattr(self, f.name))


@dataclass
class BoardConfig:
    """Configuration for one import/reconcile session.

    ``sprint_resolution`` has no default: callers must say whether the first
    or the latest qualifying sprint column wins.
    """

    sprint_resolution: SprintResolution
    max_cards_per_column: int = 5
    num_future_sprints: int = 6
    future_sprint_columns: int = 6
    sprint_length_days: int = 14
    backlog_min_columns: int = 6
    batch_size: int = 10
    warn_unresolved_sprint: bool = True
    tracker_base_url: str | None = None
    geometry: Geometry = field(default_factory=Geometry)
    detection: Detection = field(default_factory=Detection)

    def __post_init__(self) -> None:
        if not isinstance(self.sprint_resolution, SprintResolution):
            raise ConfigError(
                "sprint_resolution", self.sprint_resolution, "must be 'first' or 'latest'"
            )
        _check_number("max_cards_per_column", self.max_cards_per_column, minimum=2, integer=True)
        _check_number("num_future_sprints", self.num_future_sprints, integer=True)
        _check_number("future_sprint_columns", self.future_sprint_columns, minimum=1, integer=True)
        _check_number("sprint_length_days", self.sprint_length_days, minimum=1, integer=True)
        _check_number("backlog_min_columns", self.backlog_min_columns, minimum=1, integer=True)
        _check_number("batch_size", self.batch_size, minimum=1, integer=True)
        if self.tracker_base_url is not None:
            self.tracker_base_url = self.tracker_base_url.rstrip("/")


_NESTED = {"geometry": Geometry, "detection": Detection}


def config_from_dict(data: dict, **overrides) -> BoardConfig:
    """Build a BoardConfig from a plain mapping (e.g. parsed YAML)."""
    merged = {**(data or {}), **{k: v for k, v in overrides.items() if v is not None}}
    known = {f.name for f in fields(BoardConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigError(unknown[0], merged[unknown[0]], "unknown setting")

    kwargs = {}
    for key, value in merged.items():
        if key in _NESTED:
            nested_cls = _NESTED[key]
            if isinstance(value, nested_cls):
                kwargs[key] = value
                continue
            if not isinstance(value, dict):
                raise ConfigError(key, value, "must be a mapping")
            allowed = {f.name for f in fields(nested_cls)}
            extra = sorted(set(value) - allowed)
            if extra:
                raise ConfigError(f"{key}.{extra[0]}", value[extra[0]], "unknown setting")
            kwargs[key] = nested_cls(**value)
        elif key == "sprint_resolution" and isinstance(value, str):
            try:
                kwargs[key] = SprintResolution(value.strip().lower())
            except ValueError:
                raise ConfigError(key, value, "must be 'first' or 'latest'") from None
        else:
            kwargs[key] = value

    if "sprint_resolution" not in kwargs:
        raise ConfigError("sprint_resolution", None, "is required; choose 'first' or 'latest'")
    return BoardConfig(**kwargs)


def read_config_file(path: Path) -> dict:
    """Raw mapping from a YAML config file."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError("config", str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError("config", str(path), "top level must be a mapping")
    return data


def load_config(path: Path, **overrides) -> BoardConfig:
    """Load a YAML config file; keyword overrides win over file values."""
    return config_from_dict(read_config_file(path), **overrides)
