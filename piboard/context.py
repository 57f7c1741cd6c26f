"""Explicit session context threaded through every entry point."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from .board.models import UNKNOWN_TEAM
from .layout.config import BoardConfig


@dataclass
class BoardContext:
    """Per-session state: configuration, the known-teams set, and the session logger.

    Built once per import or reconcile session and passed explicitly, so no
    module keeps process-wide caches.
    """

    config: BoardConfig
    known_teams: set[str] = field(default_factory=set)
    logger: structlog.stdlib.BoundLogger = field(
        default_factory=lambda: structlog.get_logger("piboard")
    )

    def remember_team(self, team_name: str) -> None:
        if team_name and team_name != UNKNOWN_TEAM:
            self.known_teams.add(team_name)
