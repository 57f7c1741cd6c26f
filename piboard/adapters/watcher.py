"""Periodic duplicate reconciliation against a live host."""

from __future__ import annotations

import asyncio

import structlog

from ..board.exceptions import UnknownElementError
from ..board.interface import CanvasHost
from ..canvas.duplicates import ReconcileResult, reconcile

logger = structlog.get_logger(__name__)


def reconcile_once(host: CanvasHost) -> ReconcileResult:
    """Reconcile one fresh snapshot and apply the resulting mutations.

    Elements removed between the snapshot and the apply step are skipped.
    """
    result = reconcile(host.snapshot())
    for mutation in result.mutations:
        try:
            host.apply(mutation)
        except UnknownElementError:
            logger.debug("element_vanished", element_id=mutation.element_id)
    return result


async def watch_duplicates(
    host: CanvasHost,
    interval: float,
    stop: asyncio.Event,
    max_ticks: int | None = None,
) -> int:
    """Re-run reconciliation every ``interval`` seconds until ``stop`` is set.

    Returns the number of ticks run.
    """
    ticks = 0
    while not stop.is_set():
        reconcile_once(host)
        ticks += 1
        if max_ticks is not None and ticks >= max_ticks:
            break
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue
    logger.debug("watcher_stopped", ticks=ticks)
    return ticks
