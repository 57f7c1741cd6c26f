"""Board TUI application: terminal preview of a synthesized board file."""

from __future__ import annotations

from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from board_tui.scanner import CardInfo, ColumnInfo, EpicInfo, scan_board

EPIC_COLORS = ["cyan", "green", "magenta", "yellow", "blue", "red"]
LABEL_COLOR = "white"


def _epic_color(epic_key: str) -> str:
    return EPIC_COLORS[sum(map(ord, epic_key)) % len(EPIC_COLORS)]


def _card_details(card: CardInfo) -> str:
    lines = [f"# {card.issue_key or '(new)'}  {card.title}", "", f"Type: {card.kind or '-'}"]
    if card.is_copy:
        lines.append("Copy of another card")
    for label, value in card.fields.items():
        lines.append(f"{label}: {value}")
    return "\n".join(lines)


class CardSelected(Message):
    def __init__(self, content: str, title: str, col_index: int) -> None:
        super().__init__()
        self.content = content
        self.title = title
        self.col_index = col_index


class EpicExpandToggled(Message):
    """Fired when an epic is expanded or collapsed so all columns can sync."""

    def __init__(self, epic_key: str, expanded: bool) -> None:
        super().__init__()
        self.epic_key = epic_key
        self.expanded = expanded


class TicketCard(Static):
    can_focus = True

    def __init__(self, card: CardInfo, color: str, col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.card = card
        self.color = color
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        c = self.card
        key = c.issue_key or "new"
        copy_badge = " [dim](copy)[/]" if c.is_copy else ""
        points = c.fields.get("Story Points", "")
        points_badge = f" [dim]{points}[/]" if points else ""
        yield Static(f"[{self.color}]{key}[/] {c.title}{points_badge}{copy_badge}")

    def on_focus(self) -> None:
        title = self.card.issue_key or "New card"
        self.post_message(CardSelected(_card_details(self.card), title, self.col_index))


class EpicCard(Static):
    can_focus = True
    expanded: reactive[bool] = reactive(False)

    def __init__(self, epic: EpicInfo, col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.epic = epic
        self.col_index = col_index
        self.color = LABEL_COLOR if epic.is_label else _epic_color(epic.epic_key)

    def _header_text(self, expanded: bool) -> str:
        e = self.epic
        chevron = "v" if expanded else ">"
        style = f"dim {self.color}" if e.is_label else f"bold {self.color}"
        return f"[{style}]{chevron} {e.title}[/] [dim]({len(e.cards)})[/]"

    def compose(self) -> ComposeResult:
        yield Static(self._header_text(self.expanded), classes="epic-header")
        for card in self.epic.cards:
            yield TicketCard(card, color=self.color, col_index=self.col_index, classes="nested-card collapsed")

    def toggle_expanded(self) -> None:
        new_val = not self.expanded
        self.expanded = new_val
        self.post_message(EpicExpandToggled(self.epic.epic_key, new_val))

    def watch_expanded(self, value: bool) -> None:
        for child in self.query(".nested-card"):
            child.set_class(not value, "collapsed")
        headers = self.query(".epic-header")
        if headers:
            headers.first().update(self._header_text(value))

    def on_focus(self) -> None:
        e = self.epic
        kind = "Epic label" if e.is_label else "Epic"
        content = f"# {e.epic_key}\n\n{kind}: {e.title}\nCards here: {len(e.cards)}"
        self.post_message(CardSelected(content, e.epic_key, self.col_index))


class BoardColumn(VerticalScroll):
    # arrow keys belong to the app-level column and card navigation
    can_focus = False

    def __init__(self, column: ColumnInfo, col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.column = column
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        yield Static(
            f"[bold underline]{self.column.display_name}[/] [dim]({self.column.card_count})[/]",
            classes="column-header",
        )
        if not self.column.teams:
            yield Static("[dim]empty[/]", classes="empty-label")
            return
        for team in self.column.teams:
            yield Static(f"[bold]{team.name}[/]", classes="team-header")
            for epic in team.epics:
                yield EpicCard(epic, col_index=self.col_index, classes="card")


class DetailPanel(VerticalScroll):
    content_text: reactive[str] = reactive("")
    title_text: reactive[str] = reactive("Details")

    def compose(self) -> ComposeResult:
        yield Static("[dim]Select a card to view details[/]", id="detail-content")

    def watch_content_text(self, value: str) -> None:
        widgets = self.query("#detail-content")
        if widgets:
            widgets.first().update(value)

    def watch_title_text(self, value: str) -> None:
        self.border_title = value


class BoardApp(App):
    TITLE = "PI Planning Board"

    CSS = """
    #main-layout {
        height: 1fr;
        width: 100%;
    }

    #board {
        width: 1fr;
        height: 100%;
    }

    BoardColumn {
        width: 1fr;
        height: 100%;
        border-right: solid $surface-lighten-2;
        padding: 0;
    }

    BoardColumn.active-col {
        border-right: solid $accent;
        border-left: solid $accent;
    }

    .column-header {
        text-align: center;
        background: $surface-lighten-1;
        margin-bottom: 1;
        height: 1;
    }

    .team-header {
        padding: 0 1;
        color: $text-muted;
    }

    .empty-label {
        text-align: center;
        color: $text-muted;
    }

    .card {
        padding: 0 1;
        margin: 0;
    }

    .card:focus {
        background: $surface-lighten-1;
    }

    .nested-card {
        margin-left: 1;
    }

    .nested-card.collapsed {
        display: none;
    }

    .nested-card:focus {
        background: $surface-lighten-2;
    }

    #detail-panel {
        width: 50;
        height: 100%;
        border-left: solid $primary;
        padding: 1 1;
        display: none;
    }

    #detail-panel.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("d", "toggle_detail", "Detail"),
        Binding("left", "col_left", "< Col", show=True),
        Binding("right", "col_right", "Col >", show=True),
        Binding("up", "card_up", "", show=False),
        Binding("down", "card_down", "", show=False),
        Binding("enter", "toggle_expand", "Expand"),
        Binding("question_mark", "help_screen", "?=Help"),
    ]

    def __init__(self, board_path: Path) -> None:
        super().__init__()
        self.board_path = Path(board_path)
        self.columns: list[ColumnInfo] = []
        self.active_col_index: int = 0

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Horizontal(id="board"):
                self.columns = scan_board(self.board_path)
                for i, col in enumerate(self.columns):
                    yield BoardColumn(col, col_index=i, id=f"col-{i}")
            yield DetailPanel(id="detail-panel")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = str(self.board_path)
        self._highlight_active_column()

    @on(CardSelected)
    def _on_card_selected(self, event: CardSelected) -> None:
        panel = self.query_one("#detail-panel", DetailPanel)
        panel.title_text = event.title
        panel.content_text = event.content
        if event.col_index != self.active_col_index:
            self.active_col_index = event.col_index
            self._highlight_active_column()

    @on(EpicExpandToggled)
    def _on_epic_expand_toggled(self, event: EpicExpandToggled) -> None:
        """Sync expand/collapse state across all columns for the same epic."""
        for card in self.query(EpicCard):
            if card.epic.epic_key == event.epic_key and card.expanded != event.expanded:
                card.expanded = event.expanded

    # -- Column navigation --

    def _get_column_widgets(self) -> list[BoardColumn]:
        return list(self.query(BoardColumn))

    def _highlight_active_column(self) -> None:
        for i, col in enumerate(self._get_column_widgets()):
            col.set_class(i == self.active_col_index, "active-col")

    def _focusable_cards_in_column(self, col_index: int) -> list[TicketCard | EpicCard]:
        cols = self._get_column_widgets()
        if col_index < 0 or col_index >= len(cols):
            return []
        cards: list[TicketCard | EpicCard] = []
        for w in cols[col_index].walk_children():
            if isinstance(w, (TicketCard, EpicCard)) and not w.has_class("collapsed"):
                cards.append(w)
        return cards

    def _move_column(self, step: int) -> None:
        count = len(self._get_column_widgets())
        if not count:
            return
        target = min(max(self.active_col_index + step, 0), count - 1)
        if target != self.active_col_index:
            self.active_col_index = target
            self._highlight_active_column()
            cards = self._focusable_cards_in_column(target)
            if cards:
                cards[0].focus()

    def action_col_left(self) -> None:
        self._move_column(-1)

    def action_col_right(self) -> None:
        self._move_column(1)

    def _move_card(self, step: int) -> None:
        cards = self._focusable_cards_in_column(self.active_col_index)
        if not cards:
            return
        if self.focused in cards:
            idx = cards.index(self.focused) + step
            if 0 <= idx < len(cards):
                cards[idx].focus()
        else:
            cards[0 if step > 0 else -1].focus()

    def action_card_up(self) -> None:
        self._move_card(-1)

    def action_card_down(self) -> None:
        self._move_card(1)

    async def action_refresh(self) -> None:
        board = self.query_one("#board", Horizontal)
        for child in list(board.children):
            await child.remove()
        self.columns = scan_board(self.board_path)
        for i, col in enumerate(self.columns):
            await board.mount(BoardColumn(col, col_index=i, id=f"col-{i}"))
        self.active_col_index = min(self.active_col_index, max(len(self.columns) - 1, 0))
        self._highlight_active_column()
        self.notify("Board refreshed")

    def action_toggle_expand(self) -> None:
        focused = self.focused
        if isinstance(focused, EpicCard):
            focused.toggle_expanded()
        elif isinstance(focused, TicketCard):
            parent = focused.parent
            while parent is not None:
                if isinstance(parent, EpicCard):
                    parent.toggle_expanded()
                    parent.focus()
                    break
                parent = parent.parent

    def action_toggle_detail(self) -> None:
        self.query_one("#detail-panel", DetailPanel).toggle_class("visible")

    def action_help_screen(self) -> None:
        self.notify(
            "[bold]Keys:[/] Left/Right=cols  Up/Down=cards  Enter=expand  d=detail  r=refresh  q=quit",
            timeout=6,
        )
