"""Tests for layout synthesis."""

import pytest

from piboard.board.models import PlacementKind, Ticket
from piboard.board.templates import CardKind
from piboard.layout.capacity import capacity_height, capacity_rows
from piboard.layout.config import BoardConfig, Geometry, SprintResolution
from piboard.layout.grouping import group_tickets
from piboard.layout.synthesizer import synthesize, ticket_slot


def _ticket(key, sprint="2025-3", epic="EP-1", team="Triton", points=None, assignee=None, kind=CardKind.USER_STORY):
    return Ticket(
        issue_key=key,
        title=f"Ticket {key}",
        team_name=team,
        sprint_key=sprint,
        epic_key=epic,
        kind=kind,
        story_points=points,
        assignee=assignee,
    )


def _layout(config, tickets):
    return synthesize(group_tickets(tickets, config), config)


def _scenario():
    tickets = [_ticket(f"TRI-{i}", points=1, assignee="Ann" if i < 4 else "Bob") for i in range(12)]
    tickets.append(_ticket("TRI-99", sprint="Backlog", epic="No Epic"))
    tickets.append(_ticket("APO-1", sprint="2025-4", epic="EP-2", team="Apollo", points=3, assignee="Cy"))
    return tickets


def _of(layout, kind, team=None, sprint=None):
    return [
        p
        for p in layout.placements
        if p.kind is kind
        and (team is None or p.team_name == team)
        and (sprint is None or p.sprint_key == sprint)
    ]


class TestTicketSlot:
    @pytest.mark.parametrize(
        "index, expected", [(0, (0, 1)), (3, (0, 4)), (4, (1, 1)), (8, (1, 5)), (9, (2, 1))]
    )
    def test_column_major_fill(self, index, expected):
        assert ticket_slot(index, 5) == expected


class TestColumns:
    def test_sprint_keys_include_future(self, config):
        layout = _layout(config, _scenario())
        assert layout.sprint_keys == ["Backlog", "2025-3", "2025-4"] + [f"2025-{n}" for n in range(5, 11)]

    def test_no_future_columns_when_disabled(self):
        config = BoardConfig(sprint_resolution=SprintResolution.FIRST, num_future_sprints=0)
        layout = _layout(config, _scenario())
        assert layout.sprint_keys == ["Backlog", "2025-3", "2025-4"]

    def test_widths(self, config):
        layout = _layout(config, _scenario())
        assert layout.column_widths["Backlog"] == 6 * 520
        assert layout.column_widths["2025-3"] == 3 * 520 - 20
        assert layout.column_widths["2025-4"] == 500
        assert layout.column_widths["2025-5"] == 6 * 520 - 20

    def test_wide_backlog(self, config):
        tickets = [_ticket(f"B-{i}", sprint="Backlog", epic=f"EP-{i}") for i in range(7)]
        layout = _layout(config, tickets)
        assert layout.column_widths["Backlog"] == 7 * 520

    def test_column_x_positions(self, config):
        layout = _layout(config, _scenario())
        assert layout.column_x["Backlog"] == 0
        assert layout.column_x["2025-3"] == 3120 + 100
        assert layout.column_x["2025-4"] == 3220 + 1540 + 100

    def test_widths_shared_across_teams(self, config):
        tickets = [_ticket(f"A-{i}", team="Apollo") for i in range(9)] + [_ticket("T-1")]
        layout = _layout(config, tickets)
        assert layout.column_widths["2025-3"] == 2 * 520 - 20
        apollo = _of(layout, PlacementKind.SPRINT_HEADER, "Apollo", "2025-3")[0]
        triton = _of(layout, PlacementKind.SPRINT_HEADER, "Triton", "2025-3")[0]
        assert apollo.x == triton.x
        assert apollo.width == triton.width


class TestVerticalLayout:
    def test_first_team_header_pinned(self, config):
        layout = _layout(config, _scenario())
        headers = _of(layout, PlacementKind.SPRINT_HEADER, "Apollo")
        assert {p.y for p in headers} == {120}

    def test_next_team_starts_below_cards_and_capacity(self, config):
        layout = _layout(config, _scenario())
        apollo_bottom = max(p.y + p.height for p in layout.for_team("Apollo") if p.kind is PlacementKind.CARD)
        assert apollo_bottom == 900
        capacity = _of(layout, PlacementKind.CAPACITY, "Apollo")[0]
        assert capacity.height == 30 + 10 + 30
        triton_headers = _of(layout, PlacementKind.SPRINT_HEADER, "Triton")
        assert {p.y for p in triton_headers} == {900 + 400 + 70}
        label = _of(layout, PlacementKind.TEAM_LABEL, "Triton")[0]
        assert label.y == 900 + 400 + 70 - 120
        assert label.text == "Triton"


class TestCards:
    def test_epic_summary_spans_its_columns(self, config):
        layout = _layout(config, _scenario())
        epic = _of(layout, PlacementKind.EPIC, "Triton", "2025-3")[0]
        assert epic.column_span == 3
        assert epic.width == 1540
        assert epic.x == layout.column_x["2025-3"]
        assert epic.card_kind is CardKind.EPIC

    def test_ticket_positions(self, config):
        layout = _layout(config, _scenario())
        header_y = 1370
        content_y = header_y + 160
        cards = {p.issue_key: p for p in _of(layout, PlacementKind.CARD, "Triton", "2025-3")}
        x0 = layout.column_x["2025-3"]
        # all points equal, so fill order is by key: TRI-0, TRI-1, TRI-10, TRI-11, TRI-2, ...
        first = cards["TRI-0"]
        assert (first.x, first.y, first.row, first.column_start) == (x0, content_y + 320, 1, 0)
        fifth = cards["TRI-2"]
        assert (fifth.x, fifth.row, fifth.column_start) == (x0 + 520, 1, 1)
        last = cards["TRI-9"]
        assert (last.x, last.row, last.column_start) == (x0 + 1040, 3, 2)

    def test_every_ticket_placed_once(self, config):
        layout = _layout(config, _scenario())
        keys = [p.issue_key for p in layout.cards()]
        assert sorted(keys) == sorted(t.issue_key for t in _scenario())

    def test_card_fields(self, config):
        layout = _layout(config, [_ticket("T-1", points=2, assignee="Ann"), _ticket("T-2")])
        cards = {p.issue_key: p for p in layout.cards()}
        assert cards["T-1"].fields["Story Points"] == "2"
        assert cards["T-1"].fields["Assignee"] == "Ann"
        assert cards["T-2"].fields["Story Points"] == "?"
        assert cards["T-2"].fields["Assignee"] == "Unassigned"

    def test_links_when_tracker_configured(self):
        config = BoardConfig(sprint_resolution=SprintResolution.FIRST, tracker_base_url="https://jira.example")
        layout = _layout(config, [_ticket("T-1")])
        assert layout.cards()[0].link == "https://jira.example/browse/T-1"

    def test_no_links_by_default(self, config):
        assert _layout(config, [_ticket("T-1")]).cards()[0].link is None

    def test_reappearing_epic_is_a_label(self, config):
        layout = _layout(config, [_ticket("T-1", sprint="2025-3"), _ticket("T-2", sprint="2025-5")])
        assert len(_of(layout, PlacementKind.EPIC)) == 1
        labels = _of(layout, PlacementKind.EPIC_LABEL, "Triton", "2025-5")
        assert len(labels) == 1
        assert labels[0].issue_key is None

    def test_epic_shared_by_teams_has_one_full_element(self, config):
        layout = _layout(config, [_ticket("A-1", team="Apollo"), _ticket("T-1")])
        epics = _of(layout, PlacementKind.EPIC)
        assert [(p.team_name, p.issue_key) for p in epics] == [("Apollo", "EP-1")]
        label = _of(layout, PlacementKind.EPIC_LABEL, "Triton")[0]
        assert label.text == "EP-1: EP-1"
        assert label.issue_key is None

    def test_no_epic_label(self, config):
        layout = _layout(config, [_ticket("T-1", epic="No Epic")])
        label = _of(layout, PlacementKind.EPIC_LABEL)[0]
        assert label.text == "No Epic"


class TestDecorations:
    def test_header_text_uses_display_abbreviation(self, config):
        layout = _layout(config, [_ticket("G-1", team="Gadget Hackwrench")])
        texts = {p.sprint_key: p.text for p in _of(layout, PlacementKind.SPRINT_HEADER)}
        assert texts["2025-3"] == "GH 2025-3"
        assert texts["Backlog"] == "Backlog"

    def test_dates_under_sprint_headers(self, config):
        layout = _layout(config, [_ticket("T-1", sprint="2025-1")])
        dates = {p.sprint_key: p.text for p in _of(layout, PlacementKind.SPRINT_DATES)}
        assert dates["2025-1"] == "01/01/2025 - 01/14/2025"
        assert "Backlog" not in dates

    def test_header_line_per_column(self, config):
        layout = _layout(config, _scenario())
        lines = _of(layout, PlacementKind.HEADER_LINE, "Triton")
        assert len(lines) == len(layout.sprint_keys)
        line = [p for p in lines if p.sprint_key == "2025-3"][0]
        assert (line.x, line.width) == (layout.column_x["2025-3"], layout.column_widths["2025-3"])

    def test_separators_between_columns(self, config):
        layout = _layout(config, _scenario())
        separators = _of(layout, PlacementKind.SEPARATOR, "Apollo")
        assert len(separators) == len(layout.sprint_keys) - 1

    def test_capacity_only_with_assignees(self, config):
        layout = _layout(config, [_ticket("T-1", points=3)])
        assert _of(layout, PlacementKind.CAPACITY) == []


class TestCapacity:
    def test_rows_sorted_and_zero_omitted(self):
        tickets = [
            _ticket("A", points=2, assignee="Ann"),
            _ticket("B", points=5, assignee="Bob"),
            _ticket("C", points=1, assignee="Ann"),
            _ticket("D", assignee="Cy"),
            _ticket("E", points=8),
        ]
        assert capacity_rows(tickets) == [("Bob", 5.0), ("Ann", 3.0)]

    def test_absent_without_assignees(self):
        assert capacity_rows([_ticket("A", points=3)]) is None

    def test_height(self):
        g = Geometry()
        assert capacity_height(None, g) == 0
        assert capacity_height([], g) == 40
        assert capacity_height([("Ann", 3.0), ("Bob", 1.0)], g) == 100
