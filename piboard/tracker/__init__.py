from .classifier import classify, classify_records, resolve_sprint_key
from .records import RawRecord, parse_records, read_records
from .sprints import SprintKey, SprintResolution, future_sprint_keys, parse_sprint_label, sort_sprint_keys

__all__ = [
    "RawRecord",
    "SprintKey",
    "SprintResolution",
    "classify",
    "classify_records",
    "future_sprint_keys",
    "parse_records",
    "parse_sprint_label",
    "read_records",
    "resolve_sprint_key",
    "sort_sprint_keys",
]
