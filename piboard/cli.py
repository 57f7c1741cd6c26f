"""CLI entry point for board import, reconciliation, and export.

Usage:
  python -m piboard import <csv> --board board.yaml --sprint-mode first|latest [--replace] [--config piboard.yaml]
  python -m piboard reconcile --board board.yaml [--watch SECONDS]
  python -m piboard export --board board.yaml [--out export.csv] [--new-only]
  python -m piboard board <board.yaml>
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
import sys
from pathlib import Path

from .board.exceptions import BoardError
from .log import bind_context, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="piboard", description="PI planning board CLI")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--config", default=None, help="YAML config file")
    subparsers = parser.add_subparsers(dest="command")

    import_parser = subparsers.add_parser("import", help="Lay out a tracker CSV export onto a board")
    import_parser.add_argument("csv", help="CSV export to import")
    import_parser.add_argument("--board", default="board.yaml", help="Board file to write")
    import_parser.add_argument(
        "--sprint-mode",
        choices=["first", "latest"],
        default=None,
        help="Which sprint column wins when a record has several",
    )
    import_parser.add_argument("--max-cards", type=int, default=None, help="Cards per column")
    import_parser.add_argument("--future-sprints", type=int, default=None, help="Future sprint columns")
    import_parser.add_argument(
        "--replace", action="store_true", help="Overwrite the board file if it already exists"
    )

    reconcile_parser = subparsers.add_parser("reconcile", help="Demote duplicated cards")
    reconcile_parser.add_argument("--board", default="board.yaml", help="Board file")
    reconcile_parser.add_argument(
        "--watch", type=float, default=None, metavar="SECONDS", help="Keep re-scanning at this interval"
    )

    export_parser = subparsers.add_parser("export", help="Export cards back to CSV")
    export_parser.add_argument("--board", default="board.yaml", help="Board file")
    export_parser.add_argument("--out", default=None, help="Output CSV (default: stdout)")
    export_parser.add_argument("--new-only", action="store_true", help="Only cards without an issue key")

    board_parser = subparsers.add_parser("board", help="Preview a board file in the terminal")
    board_parser.add_argument("board_file", help="Board file to preview")
    return parser


def _load_config(args, require_mode: bool):
    from .layout.config import SprintResolution, config_from_dict, read_config_file

    data = read_config_file(Path(args.config)) if args.config else {}
    if not require_mode:
        # reconcile and export never classify records
        data.setdefault("sprint_resolution", SprintResolution.FIRST.value)
    return config_from_dict(
        data,
        sprint_resolution=getattr(args, "sprint_mode", None),
        max_cards_per_column=getattr(args, "max_cards", None),
        num_future_sprints=getattr(args, "future_sprints", None),
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level, json=args.log_json)
    bind_context(command=args.command)

    try:
        if args.command == "import":
            asyncio.run(_import_command(args))
        elif args.command == "reconcile":
            asyncio.run(_reconcile_command(args))
        elif args.command == "export":
            _export_command(args)
        elif args.command == "board":
            _board_command(args)
    except BoardError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)


async def _import_command(args) -> None:
    from .adapters.boardfile import BoardFile
    from .context import BoardContext
    from .convenience import import_board

    csv_path = Path(args.csv)
    if not csv_path.exists():
        print(f"Error: CSV file not found: {csv_path}", file=sys.stderr)
        sys.exit(1)
    board_path = Path(args.board)
    if board_path.exists() and not args.replace:
        print(f"Error: board file already exists: {board_path} (use --replace)", file=sys.stderr)
        sys.exit(1)

    ctx = BoardContext(config=_load_config(args, require_mode=True))
    host = BoardFile(board_path, autosave=False, load=False)
    result = await import_board(csv_path, host, ctx)
    host.save()

    stats = result.stats
    print(f"Imported {stats.tickets}/{stats.records} records into {args.board}")
    print(f"Teams: {', '.join(result.layout.teams) or '-'}")
    print(f"Columns: {', '.join(result.layout.sprint_keys)}")
    print(f"Elements: {len(result.placement.created)} created, {result.placement.skipped} skipped")
    for condition, count in sorted(stats.conditions.items(), key=lambda item: item[0].value):
        print(f"  {condition.value}: {count}")


async def _reconcile_command(args) -> None:
    from .adapters.boardfile import BoardFile
    from .adapters.watcher import reconcile_once, watch_duplicates

    host = BoardFile(Path(args.board))
    if args.watch is None:
        result = reconcile_once(host)
        print(f"Groups: {result.stats.groups}, demoted: {result.stats.demoted}")
        return

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # not available on every platform; Ctrl-C still interrupts there
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)
    print(f"Watching {args.board} every {args.watch}s (Ctrl-C to stop)")
    ticks = await watch_duplicates(host, args.watch, stop)
    print(f"Stopped after {ticks} scans")


def _export_command(args) -> None:
    from .adapters.boardfile import BoardFile
    from .canvas.export import export_rows, render_csv

    board_path = Path(args.board)
    if not board_path.exists():
        print(f"Error: board file not found: {board_path}", file=sys.stderr)
        sys.exit(1)
    config = _load_config(args, require_mode=False)
    rows = export_rows(BoardFile(board_path).snapshot(), config.detection, filter_new=args.new_only)
    text = render_csv(rows)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
        print(f"Exported {len(rows)} cards to {args.out}")
    else:
        sys.stdout.write(text)


def _board_command(args) -> None:
    board_path = Path(args.board_file)
    if not board_path.exists():
        print(f"Error: board file not found: {board_path}", file=sys.stderr)
        sys.exit(1)
    from board_tui.app import BoardApp

    BoardApp(board_path).run()


if __name__ == "__main__":
    main()
