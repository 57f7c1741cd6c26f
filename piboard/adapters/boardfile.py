"""YAML board file host.

The scene lives in one YAML document with an ``elements`` list, so a board
survives process restarts and can be edited by hand between passes.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import yaml

from ..board.exceptions import BoardError, UnknownElementError
from ..board.models import Placement
from ..canvas.elements import CanvasElement, ElementKind, Mutation, apply_mutation, element_from_placement

_FIELD_NAMES = [f.name for f in dataclasses.fields(CanvasElement)]


def element_to_dict(element: CanvasElement) -> dict:
    data = {}
    for name in _FIELD_NAMES:
        value = getattr(element, name)
        if name == "kind":
            value = value.value
        elif name == "fields":
            value = dict(value)
        data[name] = value
    return data


def element_from_dict(data: dict) -> CanvasElement:
    unknown = set(data) - set(_FIELD_NAMES)
    if unknown:
        raise BoardError(f"Unknown element attributes: {', '.join(sorted(unknown))}")
    values = dict(data)
    values["id"] = str(values["id"])
    values["kind"] = ElementKind(values["kind"])
    values["fields"] = {str(k): str(v) for k, v in (values.get("fields") or {}).items()}
    for name in ("text", "issue_key", "team", "template_type", "epic_key"):
        if values.get(name) is None:
            values[name] = ""
    return CanvasElement(**values)


class BoardFile:
    """CanvasHost persisted as a YAML scene file.

    With ``load=False`` an existing file is ignored and the first save
    replaces it.
    """

    def __init__(self, path: Path, autosave: bool = True, load: bool = True):
        self.path = Path(path)
        self.autosave = autosave
        self._elements: dict[str, CanvasElement] = {}
        self._next_id = 1
        if load and self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise BoardError(f"Cannot parse board file {self.path}: {e}") from e
        for raw in data.get("elements") or []:
            element = element_from_dict(raw)
            self._elements[element.id] = element
        self._next_id = int(data.get("next_id", len(self._elements) + 1))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "next_id": self._next_id,
            "elements": [element_to_dict(e) for e in self._elements.values()],
        }
        self.path.write_text(
            yaml.safe_dump(document, sort_keys=False, allow_unicode=True), encoding="utf-8"
        )

    def snapshot(self) -> list[CanvasElement]:
        return list(self._elements.values())

    def create(self, placement: Placement) -> str:
        element_id = f"el-{self._next_id}"
        self._next_id += 1
        self._elements[element_id] = element_from_placement(element_id, placement)
        if self.autosave:
            self.save()
        return element_id

    def apply(self, mutation: Mutation) -> CanvasElement:
        if mutation.element_id not in self._elements:
            raise UnknownElementError(mutation.element_id)
        element = apply_mutation(self._elements[mutation.element_id], mutation)
        self._elements[element.id] = element
        if self.autosave:
            self.save()
        return element
