"""Scan a board file and regroup its elements by position."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from piboard.adapters.boardfile import BoardFile
from piboard.board.models import NO_EPIC, UNKNOWN_TEAM
from piboard.canvas.boundaries import classify_element, detect_boundaries
from piboard.canvas.elements import CanvasElement
from piboard.layout.config import Detection
from piboard.tracker.sprints import sprint_sort_key


@dataclass
class CardInfo:
    element_id: str
    issue_key: str
    title: str
    kind: str
    is_copy: bool = False
    fields: dict[str, str] = field(default_factory=dict)


@dataclass
class EpicInfo:
    epic_key: str
    title: str
    is_label: bool
    cards: list[CardInfo] = field(default_factory=list)


@dataclass
class TeamSection:
    name: str
    epics: list[EpicInfo] = field(default_factory=list)

    @property
    def card_count(self) -> int:
        return sum(len(e.cards) for e in self.epics)


@dataclass
class ColumnInfo:
    name: str
    teams: list[TeamSection] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def card_count(self) -> int:
        return sum(t.card_count for t in self.teams)


def _card(element: CanvasElement) -> CardInfo:
    return CardInfo(
        element_id=element.id,
        issue_key=element.issue_key,
        title=element.text,
        kind=element.template_type,
        is_copy=element.is_copy,
        fields=dict(element.fields),
    )


def scan_elements(elements: list[CanvasElement], detection: Detection | None = None) -> list[ColumnInfo]:
    """Columns of team sections, each listing its epics and their cards."""
    detection = detection or Detection()
    teams = detect_boundaries(elements, detection)
    # (sprint, team) -> epic_key -> EpicInfo
    cells: dict[tuple[str, str], dict[str, EpicInfo]] = {}

    frames = [e for e in elements if e.is_card or e.is_epic_label]
    for element in sorted(frames, key=lambda e: (e.y, e.x, e.id)):
        team, sprint = classify_element(element, teams)
        if sprint is None:
            continue
        epics = cells.setdefault((sprint, team or UNKNOWN_TEAM), {})
        epic_key = element.epic_key or NO_EPIC
        is_summary = element.is_epic_label or element.template_type == "Epic"
        if is_summary:
            info = epics.get(epic_key)
            if info is None:
                epics[epic_key] = EpicInfo(epic_key, element.text, is_label=element.is_epic_label)
            elif not element.is_epic_label:
                info.title, info.is_label = element.text, False
            continue
        info = epics.setdefault(epic_key, EpicInfo(epic_key, epic_key, is_label=True))
        info.cards.append(_card(element))

    columns: dict[str, ColumnInfo] = {}
    for (sprint, team), epics in cells.items():
        column = columns.setdefault(sprint, ColumnInfo(name=sprint))
        column.teams.append(TeamSection(name=team, epics=list(epics.values())))
    for column in columns.values():
        column.teams.sort(key=lambda t: (t.name == UNKNOWN_TEAM, t.name))
    return [columns[k] for k in sorted(columns, key=sprint_sort_key)]


def scan_board(path: Path, detection: Detection | None = None) -> list[ColumnInfo]:
    return scan_elements(BoardFile(Path(path)).snapshot(), detection)
