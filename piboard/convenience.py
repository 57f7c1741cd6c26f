"""Convenience functions for the common import and reconcile flows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .adapters.placement import PlacementReport, place_in_batches
from .board.interface import CanvasHost
from .board.models import BoardLayout, ImportStats
from .context import BoardContext
from .layout.grouping import group_tickets
from .layout.synthesizer import synthesize
from .tracker.classifier import classify_records
from .tracker.records import RawRecord, read_records


@dataclass
class ImportResult:
    layout: BoardLayout
    stats: ImportStats
    placement: PlacementReport | None = None


def build_layout(records: list[RawRecord], ctx: BoardContext) -> ImportResult:
    """Records to a full board layout, without touching any host."""
    tickets, stats = classify_records(records, ctx)
    groupings = group_tickets(tickets, ctx.config)
    return ImportResult(layout=synthesize(groupings, ctx.config), stats=stats)


async def import_board(
    source: Path | list[RawRecord],
    host: CanvasHost,
    ctx: BoardContext,
    on_progress=None,
) -> ImportResult:
    """Read, classify, lay out and place a board onto ``host``."""
    records = read_records(source) if isinstance(source, (str, Path)) else source
    result = build_layout(records, ctx)
    result.placement = await place_in_batches(
        host, result.layout.placements, batch_size=ctx.config.batch_size, on_progress=on_progress
    )
    return result
