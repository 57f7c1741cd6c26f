"""Sprint labels, canonical sprint keys, and sprint date ranges."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from ..board.models import BACKLOG

SPRINTS_PER_YEAR = 25

# "Triton 2025-25"; the team token is everything before the year
_LABEL_RE = re.compile(r"^(?P<team>.+?)\s+(?P<year>\d{4})-(?P<number>\d{1,2})$")
_BARE_RE = re.compile(r"^(?P<year>\d{4})-(?P<number>\d{1,2})$")


class SprintResolution(Enum):
    """Which qualifying sprint column wins when a record has several."""

    FIRST = "first"
    LATEST = "latest"


@dataclass(frozen=True, order=True)
class SprintKey:
    year: int
    number: int

    @classmethod
    def normalized(cls, year: int, number: int) -> SprintKey | None:
        """Build a key, rolling numbers past the last sprint into the next year."""
        if number < 1:
            return None
        while number > SPRINTS_PER_YEAR:
            year += 1
            number -= SPRINTS_PER_YEAR
        return cls(year, number)

    @classmethod
    def parse(cls, text: str) -> SprintKey | None:
        match = _BARE_RE.match(text.strip())
        if not match:
            return None
        return cls.normalized(int(match["year"]), int(match["number"]))

    def next(self) -> SprintKey:
        return SprintKey.normalized(self.year, self.number + 1)

    def __str__(self) -> str:
        return f"{self.year}-{self.number}"


@dataclass(frozen=True)
class SprintLabel:
    team: str | None
    key: SprintKey


def parse_sprint_label(label: str) -> SprintLabel | None:
    """Split ``"{Team} {Year}-{Number}"`` or bare ``"{Year}-{Number}"``."""
    text = label.strip()
    match = _LABEL_RE.match(text)
    if match:
        key = SprintKey.normalized(int(match["year"]), int(match["number"]))
        if key is None:
            return None
        return SprintLabel(team=match["team"].strip(), key=key)
    key = SprintKey.parse(text)
    if key is None:
        return None
    return SprintLabel(team=None, key=key)


def sprint_sort_key(sprint_key: str) -> tuple:
    """Backlog first, then ascending (year, number); unknown text last."""
    if sprint_key == BACKLOG:
        return (0, 0, 0, "")
    key = SprintKey.parse(sprint_key)
    if key is None:
        return (2, 0, 0, sprint_key)
    return (1, key.year, key.number, "")


def sort_sprint_keys(keys) -> list[str]:
    return sorted(set(keys), key=sprint_sort_key)


def future_sprint_keys(current: str, count: int) -> list[str]:
    """The ``count`` sprint keys following ``current``."""
    key = SprintKey.parse(current)
    if key is None:
        return []
    result = []
    for _ in range(count):
        key = key.next()
        result.append(str(key))
    return result


def first_wednesday(year: int) -> date:
    jan1 = date(year, 1, 1)
    return jan1 + timedelta(days=(2 - jan1.weekday()) % 7)


def _fmt(day: date) -> str:
    return day.strftime("%m/%d/%Y")


def fallback_date_range(sprint_key: str, sprint_length_days: int = 14) -> str:
    """Computed range for sprints whose records carry no dates."""
    key = SprintKey.parse(sprint_key)
    if key is None:
        return ""
    start = first_wednesday(key.year) + timedelta(days=(key.number - 1) * sprint_length_days)
    end = start + timedelta(days=sprint_length_days - 1)
    return f"{_fmt(start)} - {_fmt(end)}"


def is_sprint_date_column(column: str) -> bool:
    lower = column.lower()
    return "sprint" in lower and any(word in lower for word in ("date", "start", "end"))


def record_sprint_dates(fields) -> str:
    """``"start - end"`` from issue-level sprint date columns, if present."""
    start = end = ""
    for column, value in fields:
        if not value.strip() or not is_sprint_date_column(column):
            continue
        lower = column.lower()
        if "start" in lower:
            start = value.strip()
        elif "end" in lower:
            end = value.strip()
    if start and end:
        return f"{start} - {end}"
    return start or end


def sprint_dates(fields, sprint_key: str, sprint_length_days: int = 14) -> str:
    if sprint_key == BACKLOG:
        return ""
    return record_sprint_dates(fields) or fallback_date_range(sprint_key, sprint_length_days)
