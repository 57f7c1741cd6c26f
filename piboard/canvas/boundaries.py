"""Boundary detection: recover team bands and sprint columns from geometry.

Nothing is cached between calls. Each call works on the snapshot it is
given, so repeated calls on an unchanged snapshot return equal results.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ..board.exceptions import Condition
from ..board.models import BACKLOG, UNKNOWN_TEAM
from ..layout.config import Detection
from ..tracker.sprints import parse_sprint_label
from .elements import CanvasElement, ElementKind, SprintBoundary, TeamBoundary

logger = structlog.get_logger(__name__)

_HEADER_RE = re.compile(r"^(?:Backlog|(?:.+\s)?\d{4}-\d{1,2})$", re.IGNORECASE)


@dataclass
class DetectionResult:
    teams: tuple[TeamBoundary, ...] = ()
    conditions: dict[Condition, int] = field(default_factory=dict)

    def note(self, condition: Condition) -> None:
        self.conditions[condition] = self.conditions.get(condition, 0) + 1


def _sorted(elements: Iterable[CanvasElement]) -> list[CanvasElement]:
    return sorted(elements, key=lambda e: (e.y, e.x, e.id))


def cluster_bands(cards: list[CanvasElement], tolerance: float) -> list[list[CanvasElement]]:
    """Greedy vertical clustering of card frames into team bands."""
    clusters: list[list[CanvasElement]] = []
    top = bottom = 0.0
    for element in _sorted(cards):
        if clusters and element.y <= bottom + tolerance and element.bottom >= top - tolerance:
            clusters[-1].append(element)
            top = min(top, element.y)
            bottom = max(bottom, element.bottom)
        else:
            clusters.append([element])
            top, bottom = element.y, element.bottom
    return clusters


def plurality_team(members: Iterable[CanvasElement]) -> str:
    """Most common team label; ties and unlabeled clusters are Unknown."""
    votes = Counter(e.team for e in members if e.team.strip())
    ranked = votes.most_common(2)
    if not ranked:
        return UNKNOWN_TEAM
    if len(ranked) > 1 and ranked[1][1] == ranked[0][1]:
        return UNKNOWN_TEAM
    return ranked[0][0]


def header_name(text: str) -> str | None:
    """Canonical column name for a header label, or None if it is not one."""
    text = text.strip()
    if not _HEADER_RE.match(text):
        return None
    if text.lower() == BACKLOG.lower():
        return BACKLOG
    label = parse_sprint_label(text)
    return str(label.key) if label else None


def _header_labels(snapshot: list[CanvasElement], detection: Detection) -> list[tuple[CanvasElement, str]]:
    labels = []
    for element in snapshot:
        if element.kind is not ElementKind.TEXT or element.font_size < detection.header_min_font_size:
            continue
        name = header_name(element.text)
        if name is not None:
            labels.append((element, name))
    return labels


def _label_rows(labels, tolerance: float) -> list[list[tuple[CanvasElement, str]]]:
    rows: list[list[tuple[CanvasElement, str]]] = []
    for element, name in sorted(labels, key=lambda pair: (pair[0].center_y, pair[0].x, pair[0].id)):
        if rows and abs(element.center_y - rows[-1][0][0].center_y) <= tolerance:
            rows[-1].append((element, name))
        else:
            rows.append([(element, name)])
    return rows


def _is_header_line(element: CanvasElement, detection: Detection) -> bool:
    return (
        element.kind in (ElementKind.LINE, ElementKind.RECTANGLE)
        and element.height <= detection.header_line_max_height
        and element.width >= detection.header_line_min_width
    )


def _is_separator(element: CanvasElement, detection: Detection) -> bool:
    return (
        element.kind in (ElementKind.LINE, ElementKind.RECTANGLE)
        and element.width <= detection.separator_max_width
        and element.height >= detection.separator_min_height
    )


def sprint_range(
    label: CanvasElement,
    snapshot: list[CanvasElement],
    detection: Detection,
    result: DetectionResult | None = None,
) -> tuple[float, float]:
    """``[left, right)`` for one header label.

    A header line directly under the label wins. Otherwise the nearest
    separators on either side are used, mirrored around the label center when
    only one side has one. With neither, a fixed half-width is assumed.
    """
    cx = label.center_x
    lines = [
        e
        for e in snapshot
        if _is_header_line(e, detection)
        and e.x <= cx <= e.right
        and 0 <= e.y - label.center_y <= detection.header_line_max_gap
    ]
    if lines:
        line = min(lines, key=lambda e: (e.y - label.center_y, e.id))
        return line.x, line.right

    left = right = None
    for e in snapshot:
        if not _is_separator(e, detection) or not (e.y <= label.center_y <= e.bottom):
            continue
        distance = e.center_x - cx
        if abs(distance) > detection.separator_search_distance:
            continue
        if distance < 0 and (left is None or e.center_x > left):
            left = e.center_x
        elif distance > 0 and (right is None or e.center_x < right):
            right = e.center_x
    if left is not None and right is not None:
        return left, right
    if left is not None:
        return left, cx + (cx - left)
    if right is not None:
        return cx - (right - cx), right

    if result is not None:
        result.note(Condition.BOUNDARY_AMBIGUOUS)
    logger.warning("boundary_ambiguous", label=label.text, element_id=label.id)
    half = detection.fallback_half_width
    return cx - half, cx + half


def detect(snapshot: Iterable[CanvasElement], detection: Detection) -> DetectionResult:
    """Reconstruct team bands and their sprint columns from one snapshot."""
    snapshot = _sorted(snapshot)
    result = DetectionResult()
    cards = [e for e in snapshot if e.is_card]
    bands = cluster_bands(cards, detection.team_cluster_tolerance)
    if not bands:
        return result

    tops = [min(e.y for e in band) for band in bands]
    # Each header row belongs to the nearest band starting below it
    attached: dict[int, list[tuple[CanvasElement, str]]] = {}
    for row in _label_rows(_header_labels(snapshot, detection), detection.label_row_tolerance):
        row_y = min(e.y for e, _ in row)
        below = [(top - row_y, i) for i, top in enumerate(tops) if top >= row_y]
        if not below:
            continue
        _, index = min(below)
        current = attached.get(index)
        if current is None or min(e.y for e, _ in current) < row_y:
            attached[index] = row

    teams = []
    for index, band in enumerate(bands):
        top = tops[index]
        bottom = max(e.bottom for e in band)
        sprints = []
        row = attached.get(index, [])
        for label, name in sorted(row, key=lambda pair: (pair[0].center_x, pair[0].id)):
            left, right = sprint_range(label, snapshot, detection, result)
            sprints.append(SprintBoundary(name=name, left=left, right=right))
        if row:
            top = min(top, min(e.y for e, _ in row))
        team = plurality_team(band)
        if team == UNKNOWN_TEAM:
            result.note(Condition.UNRESOLVED_TEAM)
        teams.append(TeamBoundary(name=team, top=top, bottom=bottom, sprints=tuple(sprints)))
    result.teams = tuple(teams)
    logger.debug("boundaries_detected", teams=[t.name for t in teams])
    return result


def detect_boundaries(snapshot: Iterable[CanvasElement], detection: Detection) -> tuple[TeamBoundary, ...]:
    return detect(snapshot, detection).teams


def _contains(start: float, end: float, low: float, high: float) -> bool:
    """Center, either edge, or a full span of ``[low, high]`` inside the range."""
    center = (low + high) / 2
    return (
        start <= center < end
        or start <= low < end
        or start <= high < end
        or (low <= start and high >= end)
    )


def classify_element(
    element: CanvasElement, teams: Iterable[TeamBoundary]
) -> tuple[str | None, str | None]:
    """``(team, sprint_key)`` for an element; first match in scan order wins."""
    for team in teams:
        if not _contains(team.range_start, team.range_end, element.y, element.bottom):
            continue
        for sprint in team.sprints:
            if _contains(sprint.range_start, sprint.range_end, element.x, element.right):
                return team.name, sprint.name
        return team.name, None
    return None, None
