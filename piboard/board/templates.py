"""Card kinds and their field schemas defined as data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CardKind(Enum):
    THEME = "Theme"
    INITIATIVE = "Initiative"
    MILESTONE = "Milestone"
    EPIC = "Epic"
    USER_STORY = "User Story"
    TASK = "Task"
    SPIKE = "Spike"
    TEST = "Test"

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldSpec:
    label: str
    default: str


_CRITERIA = "- Criterion 1\n- Criterion 2\n- Criterion 3"

FIELD_SCHEMAS: dict[CardKind, tuple[FieldSpec, ...]] = {
    CardKind.THEME: (
        FieldSpec("Name", "Theme Name"),
        FieldSpec("Description", "Business objective description..."),
        FieldSpec("Business Value", "High"),
        FieldSpec("Priority Rank", "#"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
    CardKind.MILESTONE: (
        FieldSpec("Name", "Milestone Name"),
        FieldSpec("Target Date", "MM/DD/YYYY"),
        FieldSpec("Description", "Milestone description..."),
    ),
    CardKind.USER_STORY: (
        FieldSpec("Description", "User story description..."),
        FieldSpec("Acceptance Criteria", _CRITERIA),
        FieldSpec("Story Points", "?"),
        FieldSpec("Assignee", "Unassigned"),
    ),
    CardKind.EPIC: (
        FieldSpec("Name", "Epic Name"),
        FieldSpec("Description", "Epic description..."),
        FieldSpec("Business Value", "High"),
        FieldSpec("Team", "Team Name"),
        FieldSpec("Priority Rank", "#"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
    CardKind.INITIATIVE: (
        FieldSpec("Name", "Initiative Name"),
        FieldSpec("Description", "Initiative description..."),
        FieldSpec("Dependencies", "None"),
        FieldSpec("Priority Rank", "#"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
    CardKind.TASK: (
        FieldSpec("Description", "Task description..."),
        FieldSpec("Story Points", "?"),
        FieldSpec("Assignee", "Unassigned"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
    CardKind.SPIKE: (
        FieldSpec("Description", "Spike description..."),
        FieldSpec("Story Points", "?"),
        FieldSpec("Assignee", "Unassigned"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
    CardKind.TEST: (
        FieldSpec("Description", "Test description..."),
        FieldSpec("Test Type", "Manual"),
        FieldSpec("Story Points", "?"),
        FieldSpec("Assignee", "Unassigned"),
        FieldSpec("Acceptance Criteria", _CRITERIA),
    ),
}

# Kinds whose large bottom-right number is the priority rank rather than points
_RANKED_KINDS = frozenset({CardKind.THEME, CardKind.EPIC, CardKind.INITIATIVE})
_POINTED_KINDS = frozenset(
    {CardKind.USER_STORY, CardKind.TASK, CardKind.SPIKE, CardKind.TEST}
)

_ISSUE_TYPE_TO_KIND: dict[str, CardKind] = {
    "epic": CardKind.EPIC,
    "story": CardKind.USER_STORY,
    "user story": CardKind.USER_STORY,
    "task": CardKind.TASK,
    "spike": CardKind.SPIKE,
    "test": CardKind.TEST,
    "theme": CardKind.THEME,
    "milestone": CardKind.MILESTONE,
}

_DISPLAY_TO_KIND = {kind.value: kind for kind in CardKind}


def kind_for_issue_type(issue_type: str, has_due_date: bool = False) -> CardKind:
    """Map a tracker issue type onto a card kind.

    Undated items of an unrecognised type become Initiatives; dated ones
    (due date or fix version) become Milestones.
    """
    kind = _ISSUE_TYPE_TO_KIND.get(issue_type.strip().lower())
    if kind is not None:
        return kind
    if has_due_date:
        return CardKind.MILESTONE
    return CardKind.INITIATIVE


def kind_from_display_name(name: str) -> CardKind | None:
    return _DISPLAY_TO_KIND.get(name)


def large_number_field(kind: CardKind) -> str | None:
    if kind in _RANKED_KINDS:
        return "Priority Rank"
    if kind in _POINTED_KINDS:
        return "Story Points"
    return None


def has_assignee(kind: CardKind) -> bool:
    return kind in _POINTED_KINDS


def default_for(kind: CardKind, label: str) -> str | None:
    for spec in FIELD_SCHEMAS[kind]:
        if spec.label == label:
            return spec.default
    return None


def is_placeholder(kind: CardKind, label: str, value: str) -> bool:
    """True when a field value is still the template's placeholder."""
    text = value.strip()
    if not text or text in ("?", "#"):
        return True
    if text.startswith("[") and text.endswith("]"):
        return True
    default = default_for(kind, label)
    return default is not None and text.lower() == default.strip().lower()
