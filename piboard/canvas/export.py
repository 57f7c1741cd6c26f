"""Serialize placed cards back to tracker CSV."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from ..board.models import BACKLOG, NO_EPIC, UNKNOWN_TEAM
from ..board.templates import CardKind, is_placeholder, kind_from_display_name
from ..layout.config import Detection
from ..tracker.fields import display_team_name
from .boundaries import classify_element, detect_boundaries
from .elements import CanvasElement

EXPORT_COLUMNS = [
    "Summary",
    "Issue key",
    "Issue Type",
    "Sprint",
    "Custom field (Studio)",
    "Custom field (Epic Link)",
    "Custom field (Story Points)",
    "Custom field (Priority Rank)",
    "Assignee",
]

_ISSUE_TYPES = {CardKind.USER_STORY: "Story"}


def _field(kind: CardKind, element: CanvasElement, label: str) -> str:
    value = element.fields.get(label, "")
    return "" if is_placeholder(kind, label, value) else value.strip()


def export_rows(
    snapshot: Iterable[CanvasElement], detection: Detection, filter_new: bool = False
) -> list[dict[str, str]]:
    """One row per exportable card, in raster order.

    Team and sprint come from the element's current position; milestones and
    epic labels are never exported.
    """
    snapshot = list(snapshot)
    teams = detect_boundaries(snapshot, detection)
    rows = []
    for element in sorted(snapshot, key=lambda e: (e.y, e.x, e.id)):
        if not element.is_card:
            continue
        kind = kind_from_display_name(element.template_type) or CardKind.USER_STORY
        if kind is CardKind.MILESTONE:
            continue
        if filter_new and element.issue_key.strip():
            continue

        team, sprint_key = classify_element(element, teams)
        if not team or team == UNKNOWN_TEAM:
            team = element.team or UNKNOWN_TEAM
        studio = "" if team == UNKNOWN_TEAM else team
        sprint = ""
        if sprint_key and sprint_key != BACKLOG:
            sprint = f"{display_team_name(studio)} {sprint_key}" if studio else sprint_key

        epic_link = element.epic_key
        if kind is CardKind.EPIC or epic_link == NO_EPIC:
            epic_link = ""

        rows.append(
            {
                "Summary": element.text,
                "Issue key": element.issue_key.strip(),
                "Issue Type": _ISSUE_TYPES.get(kind, kind.display_name),
                "Sprint": sprint,
                "Custom field (Studio)": studio,
                "Custom field (Epic Link)": epic_link,
                "Custom field (Story Points)": _field(kind, element, "Story Points"),
                "Custom field (Priority Rank)": _field(kind, element, "Priority Rank"),
                "Assignee": _field(kind, element, "Assignee"),
            }
        )
    return rows


def render_csv(rows: list[dict[str, str]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def write_csv(rows: list[dict[str, str]], path: Path) -> None:
    Path(path).write_text(render_csv(rows), encoding="utf-8")
