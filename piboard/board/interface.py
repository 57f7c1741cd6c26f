"""Abstract host canvas protocol."""

from typing import Protocol

from ..canvas.elements import CanvasElement, Mutation
from .models import Placement


class CanvasHost(Protocol):
    """Interface that any host canvas must implement.

    The host owns element positions and per-element metadata; the core only
    sees value snapshots and hands back placements and mutations.
    """

    def snapshot(self) -> list[CanvasElement]: ...

    def create(self, placement: Placement) -> str: ...

    def apply(self, mutation: Mutation) -> CanvasElement: ...
