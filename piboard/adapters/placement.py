"""Batched element creation that keeps the host responsive."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Iterable

import structlog

from ..board.interface import CanvasHost
from ..board.models import Placement

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class PlacementReport:
    created: list[str] = field(default_factory=list)
    skipped: int = 0
    batches: int = 0


async def place_in_batches(
    host: CanvasHost,
    placements: Iterable[Placement],
    batch_size: int = 10,
    on_progress: ProgressCallback | None = None,
) -> PlacementReport:
    """Create every placement on ``host``, ``batch_size`` at a time.

    Control returns to the event loop between batches. A host failure on one
    element is logged and counted; the rest still get placed.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    placements = list(placements)
    report = PlacementReport()
    total = len(placements)

    for start in range(0, total, batch_size):
        for placement in placements[start : start + batch_size]:
            try:
                report.created.append(host.create(placement))
            except Exception as e:
                report.skipped += 1
                logger.warning(
                    "placement_failed",
                    kind=placement.kind.value,
                    issue_key=placement.issue_key,
                    error=str(e),
                )
        report.batches += 1
        if on_progress is not None:
            on_progress(min(start + batch_size, total), total)
        await asyncio.sleep(0)

    logger.info("placements_created", created=len(report.created), skipped=report.skipped)
    return report
