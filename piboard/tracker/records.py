"""Tabular record input.

Tracker exports repeat column names (several ``Sprint`` columns, for
instance), so a record keeps its cells as an ordered sequence of
``(column, value)`` pairs instead of a dict.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from ..board.exceptions import RecordFormatError


@dataclass(frozen=True)
class RawRecord:
    fields: tuple[tuple[str, str], ...]

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> RawRecord:
        return cls(tuple((str(k), "" if v is None else str(v)) for k, v in mapping.items()))

    def columns(self) -> list[str]:
        return [name for name, _ in self.fields]

    def values(self, column: str) -> list[str]:
        """All values stored under ``column`` (case-insensitive), in order."""
        wanted = column.strip().lower()
        return [value for name, value in self.fields if name.strip().lower() == wanted]

    def get(self, *columns: str) -> str:
        """First non-empty value across the candidate columns, else ''."""
        for column in columns:
            for value in self.values(column):
                if value.strip():
                    return value.strip()
        return ""

    def has(self, column: str) -> bool:
        return bool(self.values(column))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.fields)


def _rows_to_records(rows: Iterable[list[str]], source: str) -> list[RawRecord]:
    rows = list(rows)
    if not rows:
        raise RecordFormatError(source, "input is empty")
    header = [h.strip() for h in rows[0]]
    if not any(header):
        raise RecordFormatError(source, "header row is empty")
    records = []
    for row in rows[1:]:
        if not any(cell.strip() for cell in row):
            continue
        padded = row + [""] * (len(header) - len(row))
        records.append(RawRecord(tuple(zip(header, padded))))
    if not records:
        raise RecordFormatError(source, "no data rows after the header")
    return records


def parse_records(text: str, source: str = "<text>") -> list[RawRecord]:
    """Parse CSV text into records, keeping duplicate column names."""
    if not text.strip():
        raise RecordFormatError(source, "input is empty")
    try:
        rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    except csv.Error as e:
        raise RecordFormatError(source, str(e)) from e
    return _rows_to_records(rows, source)


def read_records(path: Path) -> list[RawRecord]:
    """Read a CSV export from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise RecordFormatError(str(path), str(e)) from e
    return parse_records(text, source=str(path))
