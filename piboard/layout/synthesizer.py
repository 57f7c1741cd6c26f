"""Layout synthesis: epic buckets to absolute placements.

Every width is derived from ticket counts before anything is placed, so the
whole board is computed in one forward pass per team.
"""

from __future__ import annotations

import structlog

from ..board.models import (
    BACKLOG,
    BoardLayout,
    EpicSlot,
    Placement,
    PlacementKind,
    TeamGrouping,
    Ticket,
)
from ..board.templates import CardKind, default_for, has_assignee, large_number_field
from ..tracker.fields import display_team_name
from ..tracker.sprints import fallback_date_range, future_sprint_keys, sort_sprint_keys
from .capacity import capacity_height, capacity_rows, format_points
from .config import BoardConfig

logger = structlog.get_logger(__name__)

HEADER_LABEL_HEIGHT = 80.0
DATES_LABEL_HEIGHT = 30.0
HEADER_LINE_THICKNESS = 2.0
SEPARATOR_THICKNESS = 2.0


def board_sprint_keys(groupings: dict[str, TeamGrouping], config: BoardConfig) -> tuple[list[str], set[str]]:
    """All column keys in display order, plus the subset that are future columns."""
    populated = {BACKLOG}
    for grouping in groupings.values():
        populated.update(grouping.columns)
    keys = sort_sprint_keys(populated)
    future: set[str] = set()
    sprints = [k for k in keys if k != BACKLOG]
    if sprints and config.num_future_sprints:
        for key in future_sprint_keys(sprints[-1], config.num_future_sprints):
            keys.append(key)
            future.add(key)
    return keys, future


def column_widths(
    groupings: dict[str, TeamGrouping], keys: list[str], future: set[str], config: BoardConfig
) -> dict[str, float]:
    """Shared width per sprint key: the widest team's cell wins."""
    geometry = config.geometry
    unit = geometry.unit_width
    widths = {}
    for key in keys:
        needed = max(
            (g.columns[key].columns_needed for g in groupings.values() if key in g.columns),
            default=0,
        )
        if key == BACKLOG:
            widths[key] = max(config.backlog_min_columns, needed) * unit
        elif key in future or needed == 0:
            widths[key] = config.future_sprint_columns * unit - geometry.element_spacing
        else:
            widths[key] = needed * unit - geometry.element_spacing
    return widths


def ticket_slot(index: int, max_cards: int) -> tuple[int, int]:
    """``(column, row)`` of the index-th ticket of an epic.

    Row 0 of every column belongs to the epic summary spanning the epic's
    columns, so the first column holds ``max_cards - 1`` tickets and later
    columns hold ``max_cards`` each, filled column-major.
    """
    first = max_cards - 1
    if index < first:
        return 0, index + 1
    rest = index - first
    return 1 + rest // max_cards, 1 + rest % max_cards


def _ticket_fields(ticket: Ticket) -> dict[str, str]:
    fields: dict[str, str] = {}
    number = large_number_field(ticket.kind)
    if number == "Story Points":
        fields[number] = (
            format_points(ticket.story_points)
            if ticket.story_points is not None
            else default_for(ticket.kind, number)
        )
    elif number == "Priority Rank":
        fields[number] = ticket.priority_rank or default_for(ticket.kind, number)
    if has_assignee(ticket.kind):
        fields["Assignee"] = ticket.assignee or default_for(ticket.kind, "Assignee")
    if ticket.status_raw:
        fields["Status"] = ticket.status_raw
    if ticket.description:
        fields["Description"] = ticket.description
    if ticket.sprint_dates:
        fields["Sprint Dates"] = ticket.sprint_dates
    return fields


class LayoutSynthesizer:
    """Converts grouped tickets into placements for one board."""

    def __init__(self, config: BoardConfig):
        self.config = config
        self.geometry = config.geometry

    def _link(self, issue_key: str | None) -> str | None:
        if not issue_key or not self.config.tracker_base_url:
            return None
        return f"{self.config.tracker_base_url}/browse/{issue_key}"

    def _epic_placements(
        self,
        team: str,
        sprint_key: str,
        slot: EpicSlot,
        first_column: int,
        column_x: float,
        content_y: float,
    ) -> list[Placement]:
        g = self.geometry
        unit = g.unit_width
        row_pitch = g.element_height + g.element_spacing
        x0 = column_x + first_column * unit
        epic = slot.epic
        placements = []

        if slot.is_full:
            fields = {"Priority Rank": epic.priority_rank or default_for(CardKind.EPIC, "Priority Rank")}
            if epic.status_raw:
                fields["Status"] = epic.status_raw
            placements.append(
                Placement(
                    kind=PlacementKind.EPIC,
                    team_name=team,
                    sprint_key=sprint_key,
                    column_start=first_column,
                    column_span=slot.columns_needed,
                    row=0,
                    x=x0,
                    y=content_y,
                    width=slot.columns_needed * unit - g.element_spacing,
                    height=g.element_height,
                    text=epic.title,
                    issue_key=epic.epic_key,
                    epic_key=epic.epic_key,
                    card_kind=CardKind.EPIC,
                    link=self._link(epic.epic_key),
                    fields=fields,
                )
            )
        else:
            placements.append(
                Placement(
                    kind=PlacementKind.EPIC_LABEL,
                    team_name=team,
                    sprint_key=sprint_key,
                    column_start=first_column,
                    column_span=slot.columns_needed,
                    row=0,
                    x=x0,
                    y=content_y,
                    width=slot.columns_needed * unit - g.element_spacing,
                    height=g.element_height,
                    text=epic.title if epic.is_placeholder else f"{epic.epic_key}: {epic.title}",
                    epic_key=epic.epic_key,
                )
            )

        for index, ticket in enumerate(slot.tickets):
            column, row = ticket_slot(index, self.config.max_cards_per_column)
            placements.append(
                Placement(
                    kind=PlacementKind.CARD,
                    team_name=team,
                    sprint_key=sprint_key,
                    column_start=first_column + column,
                    column_span=1,
                    row=row,
                    x=x0 + column * unit,
                    y=content_y + row * row_pitch,
                    width=g.element_width,
                    height=g.element_height,
                    text=ticket.title,
                    issue_key=ticket.issue_key or None,
                    epic_key=epic.epic_key,
                    card_kind=ticket.kind,
                    link=self._link(ticket.issue_key),
                    fields=_ticket_fields(ticket),
                )
            )
        return placements

    def _header_placements(
        self, team: str, key: str, x: float, width: float, header_y: float, dates: str
    ) -> list[Placement]:
        g = self.geometry
        title = BACKLOG if key == BACKLOG else f"{display_team_name(team)} {key}"
        common = dict(team_name=team, sprint_key=key, column_start=0, column_span=0, row=0, x=x, width=width)
        placements = [
            Placement(kind=PlacementKind.SPRINT_HEADER, y=header_y, height=HEADER_LABEL_HEIGHT, text=title, **common),
        ]
        if dates:
            placements.append(
                Placement(
                    kind=PlacementKind.SPRINT_DATES,
                    y=header_y + HEADER_LABEL_HEIGHT,
                    height=DATES_LABEL_HEIGHT,
                    text=dates,
                    **common,
                )
            )
        placements.append(
            Placement(
                kind=PlacementKind.HEADER_LINE,
                y=header_y + g.header_height - 2 * HEADER_LINE_THICKNESS,
                height=HEADER_LINE_THICKNESS,
                **common,
            )
        )
        return placements

    def synthesize(self, groupings: dict[str, TeamGrouping]) -> BoardLayout:
        g = self.geometry
        config = self.config
        keys, future = board_sprint_keys(groupings, config)
        widths = column_widths(groupings, keys, future, config)

        layout = BoardLayout(teams=list(groupings), sprint_keys=keys, column_widths=widths)
        x = g.origin_x
        for key in keys:
            layout.column_x[key] = x
            x += widths[key] + g.column_gap

        header_y = g.origin_y + g.team_label_offset
        for team, grouping in groupings.items():
            placements: list[Placement] = [
                Placement(
                    kind=PlacementKind.TEAM_LABEL,
                    team_name=team,
                    sprint_key="",
                    column_start=0,
                    column_span=0,
                    row=0,
                    x=g.origin_x,
                    y=header_y - g.team_label_offset,
                    width=widths[keys[0]],
                    height=HEADER_LABEL_HEIGHT,
                    text=team,
                )
            ]
            content_y = header_y + g.header_height
            cards_bottom = content_y
            capacity_blocks = []

            for key in keys:
                column = grouping.columns.get(key)
                dates = ""
                if key != BACKLOG:
                    if column is not None:
                        dates = next(
                            (t.sprint_dates for s in column.epics for t in s.tickets if t.sprint_dates),
                            "",
                        )
                    dates = dates or fallback_date_range(key, config.sprint_length_days)
                placements.extend(
                    self._header_placements(team, key, layout.column_x[key], widths[key], header_y, dates)
                )
                if column is None:
                    continue

                first_column = 0
                for slot in column.epics:
                    epic_placements = self._epic_placements(
                        team, key, slot, first_column, layout.column_x[key], content_y
                    )
                    placements.extend(epic_placements)
                    cards_bottom = max(cards_bottom, max(p.y + p.height for p in epic_placements))
                    first_column += slot.columns_needed

                rows = capacity_rows(t for s in column.epics for t in s.tickets)
                if rows is not None:
                    capacity_blocks.append((key, rows))

            # Separators sit in the gaps between adjacent columns
            for left, right in zip(keys, keys[1:]):
                placements.append(
                    Placement(
                        kind=PlacementKind.SEPARATOR,
                        team_name=team,
                        sprint_key="",
                        column_start=0,
                        column_span=0,
                        row=0,
                        x=layout.column_x[right] - (g.column_gap + SEPARATOR_THICKNESS) / 2,
                        y=header_y,
                        width=SEPARATOR_THICKNESS,
                        height=cards_bottom - header_y,
                    )
                )

            block_height = 0.0
            for key, rows in capacity_blocks:
                height = capacity_height(rows, g)
                block_height = max(block_height, height)
                lines = ["Allocated\tAssignee"] + [f"{format_points(p)}\t{name}" for name, p in rows]
                placements.append(
                    Placement(
                        kind=PlacementKind.CAPACITY,
                        team_name=team,
                        sprint_key=key,
                        column_start=0,
                        column_span=0,
                        row=0,
                        x=layout.column_x[key],
                        y=cards_bottom + g.element_spacing,
                        width=widths[key],
                        height=height,
                        text="\n".join(lines),
                        fields={name: format_points(p) for name, p in rows},
                    )
                )

            layout.placements.extend(placements)
            logger.debug(
                "team_laid_out",
                team=team,
                header_y=header_y,
                cards_bottom=cards_bottom,
                capacity_height=block_height,
            )
            header_y = cards_bottom + g.team_spacing + block_height

        logger.info(
            "layout_synthesized",
            teams=len(layout.teams),
            columns=len(keys),
            cards=len(layout.cards()),
        )
        return layout


def synthesize(groupings: dict[str, TeamGrouping], config: BoardConfig) -> BoardLayout:
    return LayoutSynthesizer(config).synthesize(groupings)
