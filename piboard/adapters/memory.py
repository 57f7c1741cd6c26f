"""In-memory canvas host for testing."""

from __future__ import annotations

from dataclasses import replace

from ..board.exceptions import UnknownElementError
from ..board.models import Placement
from ..canvas.elements import CanvasElement, Mutation, apply_mutation, element_from_placement


class InMemoryCanvas:
    """CanvasHost backed by a dict. For tests and demos."""

    def __init__(self, elements: list[CanvasElement] | None = None):
        self._elements: dict[str, CanvasElement] = {}
        self._next_id = 1
        for element in elements or []:
            self.add(element)

    def _new_id(self) -> str:
        element_id = f"el-{self._next_id}"
        self._next_id += 1
        return element_id

    def snapshot(self) -> list[CanvasElement]:
        return list(self._elements.values())

    def get(self, element_id: str) -> CanvasElement:
        if element_id not in self._elements:
            raise UnknownElementError(element_id)
        return self._elements[element_id]

    def add(self, element: CanvasElement) -> str:
        self._elements[element.id] = element
        return element.id

    def create(self, placement: Placement) -> str:
        element_id = self._new_id()
        self._elements[element_id] = element_from_placement(element_id, placement)
        return element_id

    def apply(self, mutation: Mutation) -> CanvasElement:
        element = apply_mutation(self.get(mutation.element_id), mutation)
        self._elements[element.id] = element
        return element

    def move(self, element_id: str, x: float, y: float) -> CanvasElement:
        element = replace(self.get(element_id), x=x, y=y)
        self._elements[element_id] = element
        return element

    def duplicate(self, element_id: str, dx: float = 0.0, dy: float = 0.0) -> str:
        """Copy an element the way a user's copy-paste would, metadata included."""
        source = self.get(element_id)
        copy_id = self._new_id()
        self._elements[copy_id] = replace(source, id=copy_id, x=source.x + dx, y=source.y + dy)
        return copy_id

    def remove(self, element_id: str) -> None:
        self.get(element_id)
        del self._elements[element_id]
