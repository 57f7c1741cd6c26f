"""Tests for the board TUI scanner and app."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("textual")

from board_tui.app import BoardApp, BoardColumn, DetailPanel, EpicCard, TicketCard
from board_tui.scanner import scan_board, scan_elements
from piboard.adapters.boardfile import BoardFile
from piboard.board.models import Ticket
from piboard.board.templates import CardKind
from piboard.canvas.elements import element_from_placement
from piboard.layout.config import BoardConfig, SprintResolution
from piboard.layout.grouping import group_tickets
from piboard.layout.synthesizer import synthesize


def _tickets():
    return [
        Ticket(issue_key="EP-1", title="Checkout", team_name="Triton", sprint_key="Backlog",
               epic_key="No Epic", kind=CardKind.EPIC),
        Ticket(issue_key="TRI-1", title="Login", team_name="Triton", sprint_key="2025-3",
               epic_key="EP-1", story_points=3.0),
        Ticket(issue_key="TRI-2", title="Search", team_name="Triton", sprint_key="Backlog", epic_key="No Epic"),
        Ticket(issue_key="GH-1", title="Gadget", team_name="Gadget Hackwrench", sprint_key="2025-3",
               epic_key="No Epic"),
    ]


def _layout():
    config = BoardConfig(sprint_resolution=SprintResolution.FIRST)
    return synthesize(group_tickets(_tickets(), config), config)


def _write_board(tmp_path: Path) -> Path:
    path = tmp_path / "board.yaml"
    board = BoardFile(path, autosave=False)
    for placement in _layout().placements:
        board.create(placement)
    board.save()
    return path


class TestScanner:
    def test_columns_with_cards_only(self):
        elements = [element_from_placement(f"p-{i}", p) for i, p in enumerate(_layout().placements)]
        columns = scan_elements(elements)
        assert [c.name for c in columns] == ["Backlog", "2025-3"]

    def test_teams_and_epics(self):
        elements = [element_from_placement(f"p-{i}", p) for i, p in enumerate(_layout().placements)]
        sprint = scan_elements(elements)[1]
        assert [t.name for t in sprint.teams] == ["Gadget Hackwrench", "Triton"]
        triton = sprint.teams[1]
        epic = triton.epics[0]
        assert (epic.epic_key, epic.title, epic.is_label) == ("EP-1", "Checkout", False)
        assert [c.issue_key for c in epic.cards] == ["TRI-1"]
        assert epic.cards[0].fields["Story Points"] == "3"
        assert sprint.card_count == 2

    def test_placeholder_epic_is_label(self):
        elements = [element_from_placement(f"p-{i}", p) for i, p in enumerate(_layout().placements)]
        backlog = scan_elements(elements)[0]
        epic = backlog.teams[0].epics[0]
        assert epic.epic_key == "No Epic"
        assert epic.is_label
        assert [c.title for c in epic.cards] == ["Search"]

    def test_scan_board_file(self, tmp_path):
        columns = scan_board(_write_board(tmp_path))
        assert sum(c.card_count for c in columns) == 3

    def test_empty_board(self, tmp_path):
        assert scan_board(tmp_path / "none.yaml") == []


class TestBoardApp:
    async def test_columns_rendered(self, tmp_path):
        app = BoardApp(_write_board(tmp_path))
        async with app.run_test() as pilot:
            await pilot.pause()
            assert len(app.query(BoardColumn)) == 2
            assert app.sub_title.endswith("board.yaml")

    async def test_detail_toggle(self, tmp_path):
        app = BoardApp(_write_board(tmp_path))
        async with app.run_test() as pilot:
            panel = app.query_one("#detail-panel", DetailPanel)
            assert not panel.has_class("visible")
            await pilot.press("d")
            await pilot.pause()
            assert panel.has_class("visible")

    async def test_column_navigation_and_expand(self, tmp_path):
        app = BoardApp(_write_board(tmp_path))
        async with app.run_test() as pilot:
            await pilot.press("right")
            await pilot.pause()
            assert app.active_col_index == 1
            assert isinstance(app.focused, EpicCard)
            epic = app.focused
            await pilot.press("enter")
            await pilot.pause()
            assert epic.expanded
            nested = list(epic.query(TicketCard))
            assert nested
            assert not any(card.has_class("collapsed") for card in nested)
