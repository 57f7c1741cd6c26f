from .boardfile import BoardFile
from .memory import InMemoryCanvas
from .placement import PlacementReport, place_in_batches
from .watcher import reconcile_once, watch_duplicates

__all__ = [
    "BoardFile",
    "InMemoryCanvas",
    "PlacementReport",
    "place_in_batches",
    "reconcile_once",
    "watch_duplicates",
]
