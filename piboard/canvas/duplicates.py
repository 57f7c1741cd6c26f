"""Duplicate reconciliation over a geometry snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ..board.exceptions import Condition
from .elements import CanvasElement, DuplicateGroup, Mutation

logger = structlog.get_logger(__name__)

# Vertical position dominates: one row down outweighs any horizontal offset
RASTER_ROW_WEIGHT = 10000


def raster_order(element: CanvasElement) -> tuple[float, str]:
    return (element.x + element.y * RASTER_ROW_WEIGHT, element.id)


@dataclass
class ReconcileStats:
    scanned: int = 0
    groups: int = 0
    demoted: int = 0
    links_stripped: int = 0
    conditions: dict[Condition, int] = field(default_factory=dict)

    def note(self, condition: Condition) -> None:
        self.conditions[condition] = self.conditions.get(condition, 0) + 1


@dataclass
class ReconcileResult:
    groups: list[DuplicateGroup] = field(default_factory=list)
    mutations: list[Mutation] = field(default_factory=list)
    stats: ReconcileStats = field(default_factory=ReconcileStats)


def pick_canonical(members: list[CanvasElement]) -> CanvasElement:
    """Unmarked members beat copies; then the lowest raster position wins."""
    originals = [e for e in members if not e.is_copy]
    return min(originals or members, key=raster_order)


def reconcile(snapshot: Iterable[CanvasElement]) -> ReconcileResult:
    """Group work items by issue key and demote every non-canonical member.

    Label-only epic elements never take part. Copies that already lost their
    key but still carry a tracker link get the link removed.
    """
    result = ReconcileResult()
    stats = result.stats
    by_key: dict[str, list[CanvasElement]] = {}
    for element in snapshot:
        if not element.is_card:
            continue
        stats.scanned += 1
        key = element.issue_key.strip()
        if key:
            by_key.setdefault(key, []).append(element)
        elif element.is_copy and element.has_link:
            result.mutations.append(Mutation(element.id, strip_link=True))
            stats.links_stripped += 1

    for key in sorted(by_key):
        members = sorted(by_key[key], key=raster_order)
        if len(members) < 2:
            stats.note(Condition.DUPLICATE_GROUP_EMPTY)
            continue
        canonical = pick_canonical(members)
        result.groups.append(
            DuplicateGroup(issue_key=key, canonical_id=canonical.id, members=tuple(e.id for e in members))
        )
        stats.groups += 1
        for member in members:
            if member.id == canonical.id:
                continue
            result.mutations.append(
                Mutation(member.id, strip_issue_key=True, set_copy=True, strip_link=True)
            )
            stats.demoted += 1
            logger.debug("duplicate_demoted", issue_key=key, element_id=member.id, canonical_id=canonical.id)

    if result.groups:
        logger.info("duplicates_reconciled", groups=stats.groups, demoted=stats.demoted)
    return result
