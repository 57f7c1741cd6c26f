"""Story points per assignee for one (team, sprint) cell."""

from __future__ import annotations

from typing import Iterable

from ..board.models import Ticket
from .config import Geometry


def capacity_rows(tickets: Iterable[Ticket]) -> list[tuple[str, float]] | None:
    """``(assignee, points)`` rows, highest allocation first.

    None when no ticket in the cell is assigned. Unestimated tickets count as
    zero and assignees whose total is zero are omitted.
    """
    totals: dict[str, float] = {}
    for ticket in tickets:
        if not ticket.assignee:
            continue
        totals[ticket.assignee] = totals.get(ticket.assignee, 0.0) + (ticket.story_points or 0.0)
    if not totals:
        return None
    rows = [(name, points) for name, points in totals.items() if points > 0]
    rows.sort(key=lambda row: (-row[1], row[0]))
    return rows


def capacity_height(rows: list[tuple[str, float]] | None, geometry: Geometry) -> float:
    if rows is None:
        return 0.0
    row = geometry.capacity_row_height
    return row + geometry.capacity_header_spacing + len(rows) * row


def format_points(points: float) -> str:
    return str(int(points)) if float(points).is_integer() else f"{points:g}"
