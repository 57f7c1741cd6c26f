"""Tracker markup cleanup for card text."""

from __future__ import annotations

import re

ASSIGNEE_MAX_LENGTH = 36
RULE = "─" * 25

_SUBSTITUTIONS = (
    (re.compile(r"\[([^\]|]+)\|([^\]]+)\]"), r"\2 (\1)"),
    (re.compile(r"\[([^\]]+)\]"), r"\1"),
    (re.compile(r"\*\*([^*\n]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*\n]+)\*"), r"\1"),
    (re.compile(r"^h[1-6]\.\s+(.+)$", re.MULTILINE), r"\1"),
    (re.compile(r"^#+\s+(.+)$", re.MULTILINE), r"\1"),
    (re.compile(r"^----\s*$", re.MULTILINE), RULE),
    (re.compile(r"^(\s*)[-*]\s+", re.MULTILINE), "\\1• "),
    (re.compile(r"\n{3,}"), "\n\n"),
)


def format_tracker_text(text: str) -> str:
    if not text:
        return ""
    formatted = text.replace("\r\n", "\n")
    for pattern, replacement in _SUBSTITUTIONS:
        formatted = pattern.sub(replacement, formatted)
    return formatted.strip()


def shorten_assignee(assignee: str) -> str:
    """Long e-mail style names keep only the part before ``@``."""
    if len(assignee) > ASSIGNEE_MAX_LENGTH and "@" in assignee:
        return assignee.split("@", 1)[0]
    return assignee

