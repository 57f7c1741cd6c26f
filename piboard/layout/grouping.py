"""Epic grouping: per-team, per-sprint epic buckets with column rollover."""

from __future__ import annotations

import math
from typing import Iterable

import structlog

from ..board.models import (
    BACKLOG,
    NO_EPIC,
    UNKNOWN_TEAM,
    Epic,
    EpicSlot,
    SprintColumn,
    TeamGrouping,
    Ticket,
)
from ..tracker.fields import rank_sort_key
from ..tracker.sprints import sort_sprint_keys, sprint_sort_key
from .config import BoardConfig

logger = structlog.get_logger(__name__)


def columns_needed(ticket_count: int, max_cards_per_column: int) -> int:
    """Column slots for an epic; its own summary element takes one slot."""
    return max(1, math.ceil((1 + ticket_count) / max_cards_per_column))


def build_epic_index(tickets: Iterable[Ticket]) -> dict[str, Ticket]:
    """Epic-kind tickets by issue key; the first occurrence wins."""
    index: dict[str, Ticket] = {}
    for ticket in tickets:
        if ticket.is_epic and ticket.issue_key and ticket.issue_key not in index:
            index[ticket.issue_key] = ticket
    return index


def epic_sort_key(epic: Epic) -> tuple:
    return (1 if epic.is_placeholder else 0, rank_sort_key(epic.priority_rank), epic.epic_key)


def team_order(team_names: Iterable[str]) -> list[str]:
    """Alphabetical, with the Unknown team last."""
    return sorted(set(team_names), key=lambda name: (name == UNKNOWN_TEAM, name.lower(), name))


def _new_epic(epic_key: str, epic_index: dict[str, Ticket]) -> Epic:
    if epic_key == NO_EPIC:
        return Epic(epic_key=NO_EPIC, title=NO_EPIC)
    meta = epic_index.get(epic_key)
    if meta is None:
        return Epic(epic_key=epic_key, title=epic_key)
    designated = meta.sprint_key if meta.sprint_key != BACKLOG else None
    return Epic(
        epic_key=epic_key,
        title=meta.title,
        status_raw=meta.status_raw,
        priority_rank=meta.priority_rank,
        designated_sprint_key=designated,
    )


def _first_sprint(epic: Epic) -> str:
    """Earliest sprint among the epic's tickets.

    The epic's own sprint only counts when none of its tickets is in a sprint.
    """
    keys = [t.sprint_key for t in epic.tickets if t.sprint_key != BACKLOG]
    if keys:
        return min(keys, key=sprint_sort_key)
    return epic.designated_sprint_key or BACKLOG


def group_team(
    team_name: str,
    tickets: Iterable[Ticket],
    config: BoardConfig,
    epic_index: dict[str, Ticket] | None = None,
) -> TeamGrouping:
    """Partition one team's tickets into sprint columns of epic slots.

    Epic-kind tickets define epics rather than becoming cards. An epic is
    rendered in full once, in its first sprint bucket; every other bucket it
    appears in gets a label slot.
    """
    tickets = list(tickets)
    if epic_index is None:
        epic_index = build_epic_index(tickets)
    grouping = TeamGrouping(team_name=team_name)

    # Epics owned by this team appear even before any child ticket does
    for ticket in tickets:
        if ticket.is_epic and ticket.issue_key:
            grouping.epics.setdefault(ticket.issue_key, _new_epic(ticket.issue_key, epic_index))

    for ticket in tickets:
        if ticket.is_epic:
            continue
        epic = grouping.epics.get(ticket.epic_key)
        if epic is None:
            epic = grouping.epics[ticket.epic_key] = _new_epic(ticket.epic_key, epic_index)
        epic.tickets.append(ticket)

    buckets: dict[str, dict[str, list[Ticket]]] = {}
    for epic in grouping.epics.values():
        epic.tickets.sort(key=lambda t: t.fill_order)
        epic.first_sprint_key = _first_sprint(epic)
        relocate = epic.designated_sprint_key is not None and not epic.is_placeholder
        per_epic = buckets.setdefault(epic.first_sprint_key, {})
        per_epic.setdefault(epic.epic_key, [])
        for ticket in epic.tickets:
            sprint_key = ticket.sprint_key
            if sprint_key == BACKLOG and relocate:
                sprint_key = epic.first_sprint_key
                logger.debug(
                    "ticket_relocated",
                    issue_key=ticket.issue_key,
                    epic_key=epic.epic_key,
                    sprint_key=sprint_key,
                )
            buckets.setdefault(sprint_key, {}).setdefault(epic.epic_key, []).append(ticket)

    max_cards = config.max_cards_per_column
    for sprint_key in sort_sprint_keys(buckets):
        column = SprintColumn(sprint_key=sprint_key, team_name=team_name)
        for epic_key, epic_tickets in buckets[sprint_key].items():
            epic = grouping.epics[epic_key]
            epic_tickets.sort(key=lambda t: t.fill_order)
            column.epics.append(
                EpicSlot(
                    epic=epic,
                    tickets=epic_tickets,
                    is_full=(not epic.is_placeholder and sprint_key == epic.first_sprint_key),
                    columns_needed=columns_needed(len(epic_tickets), max_cards),
                )
            )
        column.epics.sort(key=lambda slot: epic_sort_key(slot.epic))
        column.columns_needed = max(1, sum(slot.columns_needed for slot in column.epics))
        grouping.columns[sprint_key] = column
    return grouping


def epic_owners(groupings: dict[str, TeamGrouping], epic_index: dict[str, Ticket]) -> dict[str, str]:
    """Team that renders each epic in full.

    That is the team of the epic's own record, else the first team in display
    order whose tickets reference the epic.
    """
    owners: dict[str, str] = {}
    for team, grouping in groupings.items():
        for epic_key, epic in grouping.epics.items():
            if not epic.is_placeholder:
                owners.setdefault(epic_key, team)
    for epic_key, meta in epic_index.items():
        grouping = groupings.get(meta.team_name)
        if grouping is not None and epic_key in grouping.epics:
            owners[epic_key] = meta.team_name
    return owners


def group_tickets(tickets: Iterable[Ticket], config: BoardConfig) -> dict[str, TeamGrouping]:
    """Group every team's tickets; keys follow display order.

    An epic referenced by several teams is full in its owning team only and a
    label everywhere else.
    """
    tickets = list(tickets)
    epic_index = build_epic_index(tickets)
    by_team: dict[str, list[Ticket]] = {}
    for ticket in tickets:
        by_team.setdefault(ticket.team_name, []).append(ticket)
    groupings = {
        team: group_team(team, by_team[team], config, epic_index)
        for team in team_order(by_team)
    }

    owners = epic_owners(groupings, epic_index)
    for team, grouping in groupings.items():
        for column in grouping.columns.values():
            for slot in column.epics:
                if slot.is_full and owners.get(slot.epic.epic_key, team) != team:
                    slot.is_full = False
                    logger.debug("epic_label_only", epic_key=slot.epic.epic_key, team=team)
    return groupings
