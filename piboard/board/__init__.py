from .exceptions import BoardError, Condition, ConfigError, RecordFormatError, UnknownElementError
from .models import (
    BACKLOG,
    NO_EPIC,
    UNKNOWN_TEAM,
    BoardLayout,
    Epic,
    EpicSlot,
    ImportStats,
    Placement,
    PlacementKind,
    SprintColumn,
    TeamGrouping,
    Ticket,
)
from .templates import CardKind

__all__ = [
    "BACKLOG",
    "NO_EPIC",
    "UNKNOWN_TEAM",
    "BoardError",
    "BoardLayout",
    "CardKind",
    "Condition",
    "ConfigError",
    "Epic",
    "EpicSlot",
    "ImportStats",
    "Placement",
    "PlacementKind",
    "RecordFormatError",
    "SprintColumn",
    "TeamGrouping",
    "Ticket",
    "UnknownElementError",
]
