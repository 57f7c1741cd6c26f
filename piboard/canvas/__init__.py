from .boundaries import classify_element, detect, detect_boundaries
from .duplicates import ReconcileResult, ReconcileStats, reconcile
from .elements import (
    CanvasElement,
    DuplicateGroup,
    ElementKind,
    Mutation,
    SprintBoundary,
    TeamBoundary,
    apply_mutation,
    element_from_placement,
)
from .export import EXPORT_COLUMNS, export_rows, render_csv, write_csv

__all__ = [
    "EXPORT_COLUMNS",
    "CanvasElement",
    "DuplicateGroup",
    "ElementKind",
    "Mutation",
    "ReconcileResult",
    "ReconcileStats",
    "SprintBoundary",
    "TeamBoundary",
    "apply_mutation",
    "classify_element",
    "detect",
    "detect_boundaries",
    "element_from_placement",
    "export_rows",
    "reconcile",
    "render_csv",
    "write_csv",
]
