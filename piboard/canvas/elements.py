"""Read-only geometry snapshot types exchanged with the host canvas."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from ..board.models import Placement, PlacementKind

HEADER_FONT_SIZE = 64.0
DATES_FONT_SIZE = 24.0
BODY_FONT_SIZE = 16.0


class ElementKind(Enum):
    FRAME = "frame"
    TEXT = "text"
    LINE = "line"
    RECTANGLE = "rectangle"


@dataclass(frozen=True)
class CanvasElement:
    """One host element: its box plus the metadata attached to it."""

    id: str
    kind: ElementKind
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    font_size: float = 0.0
    issue_key: str = ""
    team: str = ""
    template_type: str = ""
    epic_key: str = ""
    is_epic_label: bool = False
    is_copy: bool = False
    has_link: bool = False
    fields: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def is_card(self) -> bool:
        """Work-item frames; label-only summaries never count."""
        if self.kind is not ElementKind.FRAME or self.is_epic_label:
            return False
        return bool(self.template_type or self.issue_key.strip())


@dataclass(frozen=True)
class SprintBoundary:
    name: str
    left: float
    right: float

    @property
    def range_start(self) -> float:
        return self.left

    @property
    def range_end(self) -> float:
        return self.right


@dataclass(frozen=True)
class TeamBoundary:
    name: str
    top: float
    bottom: float
    sprints: tuple[SprintBoundary, ...] = ()

    @property
    def range_start(self) -> float:
        return self.top

    @property
    def range_end(self) -> float:
        return self.bottom


@dataclass(frozen=True)
class Mutation:
    element_id: str
    strip_issue_key: bool = False
    set_copy: bool = False
    strip_link: bool = False

    @property
    def is_noop(self) -> bool:
        return not (self.strip_issue_key or self.set_copy or self.strip_link)


@dataclass(frozen=True)
class DuplicateGroup:
    issue_key: str
    canonical_id: str
    members: tuple[str, ...] = field(default_factory=tuple)


def apply_mutation(element: CanvasElement, mutation: Mutation) -> CanvasElement:
    changes: dict = {}
    if mutation.strip_issue_key:
        changes["issue_key"] = ""
    if mutation.set_copy:
        changes["is_copy"] = True
    if mutation.strip_link:
        changes["has_link"] = False
    return replace(element, **changes) if changes else element


_PLACEMENT_KINDS: dict[PlacementKind, ElementKind] = {
    PlacementKind.TEAM_LABEL: ElementKind.TEXT,
    PlacementKind.SPRINT_HEADER: ElementKind.TEXT,
    PlacementKind.SPRINT_DATES: ElementKind.TEXT,
    PlacementKind.CAPACITY: ElementKind.TEXT,
    PlacementKind.HEADER_LINE: ElementKind.LINE,
    PlacementKind.SEPARATOR: ElementKind.RECTANGLE,
    PlacementKind.EPIC: ElementKind.FRAME,
    PlacementKind.EPIC_LABEL: ElementKind.FRAME,
    PlacementKind.CARD: ElementKind.FRAME,
}


def element_from_placement(element_id: str, placement: Placement) -> CanvasElement:
    """Build the element a host would hold after drawing ``placement``."""
    kind = _PLACEMENT_KINDS[placement.kind]
    font_size = 0.0
    if placement.kind is PlacementKind.SPRINT_HEADER:
        font_size = HEADER_FONT_SIZE
    elif placement.kind is PlacementKind.SPRINT_DATES:
        font_size = DATES_FONT_SIZE
    elif kind is ElementKind.TEXT:
        font_size = BODY_FONT_SIZE

    is_frame = kind is ElementKind.FRAME
    return CanvasElement(
        id=element_id,
        kind=kind,
        x=placement.x,
        y=placement.y,
        width=placement.width,
        height=placement.height,
        text=placement.text,
        font_size=font_size,
        issue_key=(placement.issue_key or "") if is_frame else "",
        team=placement.team_name if is_frame else "",
        template_type=placement.card_kind.display_name if placement.card_kind else "",
        epic_key=placement.epic_key or "",
        is_epic_label=placement.kind is PlacementKind.EPIC_LABEL,
        has_link=placement.link is not None,
        fields=dict(placement.fields),
    )
