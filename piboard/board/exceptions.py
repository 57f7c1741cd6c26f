"""Board exception types and the non-fatal condition taxonomy."""

from __future__ import annotations

from enum import Enum


class Condition(Enum):
    """Recoverable conditions. Counted in stats, never raised."""

    MALFORMED_RECORD = "malformed_record"
    UNRESOLVED_SPRINT = "unresolved_sprint"
    UNRESOLVED_TEAM = "unresolved_team"
    BOUNDARY_AMBIGUOUS = "boundary_ambiguous"
    DUPLICATE_GROUP_EMPTY = "duplicate_group_empty"


class BoardError(Exception):
    """Base class for errors raised by piboard."""


class ConfigError(BoardError):
    """Raised when a configuration value is structurally invalid."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for {field}: {value!r} ({reason})")


class RecordFormatError(BoardError):
    """Raised when tabular input cannot be read as records at all."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read records from {source}: {reason}")


class UnknownElementError(BoardError, KeyError):
    """Raised when a host is asked about an element id it does not hold."""

    def __init__(self, element_id: str):
        self.element_id = element_id
        super().__init__(f"Element not found: {element_id}")

    def __str__(self) -> str:
        return self.args[0]
