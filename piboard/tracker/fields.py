"""Field extraction rules for tracker records.

Each logical field can come from several source columns; the alias tuples
below list them in priority order.
"""

from __future__ import annotations

import math
import re

from ..board.models import BACKLOG, NO_EPIC, UNKNOWN_TEAM
from .records import RawRecord
from .sprints import SprintResolution, is_sprint_date_column, parse_sprint_label

STUDIO_COLUMNS = ("Custom field (Studio)", "Studio")
TEAM_COLUMNS = ("Custom field (Team)", "Team")
EPIC_COLUMNS = ("Custom field (Epic Link)", "Epic Link", "Epic")
POINTS_COLUMNS = ("Custom field (Story Points)", "Story Points", "Story point estimate")
RANK_COLUMNS = ("Custom field (Priority Rank)", "Priority Rank", "Priority")
KEY_COLUMNS = ("Issue key", "Key")
TITLE_COLUMNS = ("Summary", "Title")
TYPE_COLUMNS = ("Issue Type", "Type")
STATUS_COLUMNS = ("Status",)
ASSIGNEE_COLUMNS = ("Assignee",)
DESCRIPTION_COLUMNS = ("Description",)
DUE_DATE_COLUMNS = ("Due Date", "Due date", "Fix Version/s", "Fix versions")

DISPLAY_ABBREVIATIONS = {"Gadget Hackwrench": "GH"}

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_CHECKLIST_RE = re.compile(r"^Checklist\(.*\)$", re.IGNORECASE | re.DOTALL)
_CUSTOM_RE = re.compile(r"^custom field\s*\(", re.IGNORECASE)


def is_integer_text(value: str) -> bool:
    return bool(_INTEGER_RE.match(value.strip()))


def display_team_name(team_name: str) -> str:
    """Short form used wherever a team name is part of a composite label."""
    return DISPLAY_ABBREVIATIONS.get(team_name, team_name)


def is_valid_sprint_value(value: str) -> bool:
    text = value.strip()
    return bool(text) and text != "[]" and not _CHECKLIST_RE.match(text)


def _is_secondary_sprint_column(column: str) -> bool:
    lower = column.strip().lower()
    if "sprint" not in lower or lower == "sprint":
        return False
    return not _CUSTOM_RE.match(column.strip()) and not is_sprint_date_column(column)


def sprint_candidates(record: RawRecord) -> tuple[list[str], list[str]]:
    """Valid sprint values from exact ``Sprint`` columns and from other sprint columns."""
    exact, secondary = [], []
    for column, value in record:
        if not is_valid_sprint_value(value):
            continue
        if column.strip().lower() == "sprint":
            exact.append(value.strip())
        elif _is_secondary_sprint_column(column):
            secondary.append(value.strip())
    return exact, secondary


def extract_sprint_value(record: RawRecord, mode: SprintResolution) -> str:
    """Raw sprint label for a record, or ``"Backlog"`` when none qualifies."""
    for values in sprint_candidates(record):
        if values:
            return values[0] if mode is SprintResolution.FIRST else values[-1]
    return BACKLOG


def extract_team(record: RawRecord, sprint_value: str = "") -> tuple[str, bool]:
    """Resolve the team name. Returns ``(team, resolved)``.

    Studio wins; a non-numeric team field comes next; then the team token of
    the sprint label. Numeric values are opaque ids and never become names.
    """
    studio = record.get(*STUDIO_COLUMNS)
    if studio:
        return studio, True
    for value in (record.get(column) for column in TEAM_COLUMNS):
        if value and not is_integer_text(value):
            return value, True
    label = parse_sprint_label(sprint_value) if sprint_value else None
    if label is not None and label.team and not is_integer_text(label.team):
        return label.team, True
    return UNKNOWN_TEAM, False


def extract_epic_link(record: RawRecord) -> str:
    return record.get(*EPIC_COLUMNS) or NO_EPIC


def parse_points(value: str) -> float | None:
    """Permissive numeric parse; placeholders and junk become None."""
    text = value.strip()
    if not text or text in ("?", "#"):
        return None
    try:
        points = float(text)
    except ValueError:
        return None
    if not math.isfinite(points):
        return None
    return points


def extract_story_points(record: RawRecord) -> float | None:
    return parse_points(record.get(*POINTS_COLUMNS))


def extract_priority_rank(record: RawRecord) -> str | None:
    rank = record.get(*RANK_COLUMNS)
    if not rank or rank == "#":
        return None
    return rank


def rank_sort_key(rank: str | None) -> tuple:
    """Numeric ranks ascending, then text ranks, then unranked."""
    if rank is None:
        return (2, 0.0, "")
    points = parse_points(rank)
    if points is None:
        return (1, 0.0, rank)
    return (0, points, "")
