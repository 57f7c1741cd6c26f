"""Domain models for work items, epics, and board placement."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import Condition
from .templates import CardKind

BACKLOG = "Backlog"
NO_EPIC = "No Epic"
UNKNOWN_TEAM = "Unknown"


@dataclass(frozen=True)
class Ticket:
    issue_key: str
    title: str
    team_name: str
    sprint_key: str
    epic_key: str
    kind: CardKind = CardKind.USER_STORY
    story_points: float | None = None
    priority_rank: str | None = None
    status_raw: str = ""
    assignee: str | None = None
    sprint_label: str = ""
    sprint_dates: str = ""
    description: str = ""

    @property
    def is_epic(self) -> bool:
        return self.kind is CardKind.EPIC

    @property
    def fill_order(self) -> tuple:
        """Descending points, unestimated last, then ascending issue key."""
        if self.story_points is None:
            return (1, 0.0, self.issue_key)
        return (0, -self.story_points, self.issue_key)


@dataclass
class Epic:
    epic_key: str
    title: str
    status_raw: str = ""
    priority_rank: str | None = None
    designated_sprint_key: str | None = None
    first_sprint_key: str = BACKLOG
    tickets: list[Ticket] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.epic_key == NO_EPIC


@dataclass
class EpicSlot:
    """One epic's share of a single (team, sprint) cell."""

    epic: Epic
    tickets: list[Ticket] = field(default_factory=list)
    is_full: bool = False
    columns_needed: int = 1


@dataclass
class SprintColumn:
    sprint_key: str
    team_name: str
    epics: list[EpicSlot] = field(default_factory=list)
    columns_needed: int = 1

    @property
    def ticket_count(self) -> int:
        return sum(len(slot.tickets) for slot in self.epics)


@dataclass
class TeamGrouping:
    team_name: str
    columns: dict[str, SprintColumn] = field(default_factory=dict)
    epics: dict[str, Epic] = field(default_factory=dict)


class PlacementKind(Enum):
    TEAM_LABEL = "team_label"
    SPRINT_HEADER = "sprint_header"
    SPRINT_DATES = "sprint_dates"
    HEADER_LINE = "header_line"
    SEPARATOR = "separator"
    EPIC = "epic"
    EPIC_LABEL = "epic_label"
    CARD = "card"
    CAPACITY = "capacity"


@dataclass(frozen=True)
class Placement:
    """A logical slot plus the absolute box the renderer should draw into."""

    kind: PlacementKind
    team_name: str
    sprint_key: str
    column_start: int
    column_span: int
    row: int
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    issue_key: str | None = None
    epic_key: str | None = None
    card_kind: CardKind | None = None
    link: str | None = None
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class ImportStats:
    records: int = 0
    tickets: int = 0
    conditions: dict[Condition, int] = field(default_factory=dict)

    def note(self, condition: Condition) -> None:
        self.conditions[condition] = self.conditions.get(condition, 0) + 1

    def count(self, condition: Condition) -> int:
        return self.conditions.get(condition, 0)

    @property
    def skipped(self) -> int:
        return self.count(Condition.MALFORMED_RECORD)


@dataclass
class BoardLayout:
    teams: list[str] = field(default_factory=list)
    sprint_keys: list[str] = field(default_factory=list)
    column_widths: dict[str, float] = field(default_factory=dict)
    column_x: dict[str, float] = field(default_factory=dict)
    placements: list[Placement] = field(default_factory=list)

    def for_team(self, team_name: str) -> list[Placement]:
        return [p for p in self.placements if p.team_name == team_name]

    def cards(self) -> list[Placement]:
        return [p for p in self.placements if p.kind is PlacementKind.CARD]
