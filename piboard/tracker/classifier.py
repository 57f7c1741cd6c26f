"""Record to Ticket classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..board.exceptions import Condition
from ..board.models import BACKLOG, ImportStats, Ticket
from ..board.templates import kind_for_issue_type
from .fields import (
    ASSIGNEE_COLUMNS,
    DESCRIPTION_COLUMNS,
    DUE_DATE_COLUMNS,
    KEY_COLUMNS,
    STATUS_COLUMNS,
    TITLE_COLUMNS,
    TYPE_COLUMNS,
    extract_epic_link,
    extract_priority_rank,
    extract_sprint_value,
    extract_story_points,
    extract_team,
)
from .records import RawRecord
from .sprints import parse_sprint_label, sprint_dates
from .text import format_tracker_text, shorten_assignee

if TYPE_CHECKING:
    from ..context import BoardContext


def resolve_sprint_key(sprint_value: str) -> str | None:
    """Canonical key for a sprint value; None when the label cannot be parsed."""
    if sprint_value.strip().lower() == BACKLOG.lower():
        return BACKLOG
    label = parse_sprint_label(sprint_value)
    return str(label.key) if label else None


def classify(record: RawRecord, ctx: BoardContext, stats: ImportStats | None = None) -> Ticket | None:
    """Resolve one record into a Ticket.

    Returns None for records without a title. Defaults applied along the way
    (Backlog sprint, Unknown team) are noted on ``stats``.
    """
    stats = stats if stats is not None else ImportStats()
    config = ctx.config
    log = ctx.logger
    issue_key = record.get(*KEY_COLUMNS)

    title = record.get(*TITLE_COLUMNS)
    if not title:
        stats.note(Condition.MALFORMED_RECORD)
        log.debug("record_skipped", reason="missing title", issue_key=issue_key or None)
        return None

    sprint_value = extract_sprint_value(record, config.sprint_resolution)
    sprint_key = resolve_sprint_key(sprint_value)
    if sprint_key is None:
        stats.note(Condition.UNRESOLVED_SPRINT)
        if config.warn_unresolved_sprint:
            log.warning("sprint_unresolved", issue_key=issue_key, sprint=sprint_value)
        sprint_key = BACKLOG

    team_name, resolved = extract_team(record, sprint_value)
    if resolved:
        ctx.remember_team(team_name)
    else:
        stats.note(Condition.UNRESOLVED_TEAM)
        log.debug("team_unresolved", issue_key=issue_key)

    assignee = shorten_assignee(record.get(*ASSIGNEE_COLUMNS))
    if assignee.lower() == "unassigned":
        assignee = ""

    return Ticket(
        issue_key=issue_key,
        title=title,
        team_name=team_name,
        sprint_key=sprint_key,
        epic_key=extract_epic_link(record),
        kind=kind_for_issue_type(
            record.get(*TYPE_COLUMNS), has_due_date=bool(record.get(*DUE_DATE_COLUMNS))
        ),
        story_points=extract_story_points(record),
        priority_rank=extract_priority_rank(record),
        status_raw=record.get(*STATUS_COLUMNS),
        assignee=assignee or None,
        sprint_label=sprint_value if sprint_key != BACKLOG else "",
        sprint_dates=sprint_dates(record.fields, sprint_key, config.sprint_length_days),
        description=format_tracker_text(record.get(*DESCRIPTION_COLUMNS)),
    )


def classify_records(records, ctx: BoardContext) -> tuple[list[Ticket], ImportStats]:
    """Classify a whole record set; a bad record never aborts the rest."""
    stats = ImportStats()
    tickets = []
    for record in records:
        stats.records += 1
        ticket = classify(record, ctx, stats)
        if ticket is not None:
            tickets.append(ticket)
    stats.tickets = len(tickets)
    ctx.logger.info(
        "records_classified",
        records=stats.records,
        tickets=stats.tickets,
        skipped=stats.skipped,
        teams=sorted(ctx.known_teams),
    )
    return tickets, stats
