"""Command-line interface for inspecting and exercising saved queue state."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import __version__
from .logging_utils import setup_logging
from .paths import log_dir, queue_state_path
from .queue_state import DecodeError, QueueState, delete_state_file, read_state_file
from .runtime_config import DEFAULT_CATALOG_BATCH_SIZE, resolve_log_level
from .services.fake_backend import CatalogTrack, FakePlayerBinding, InMemoryCatalog
from .services.queue_persistence import QueuePersistenceService, RestoreOutcome
from .version import build_help_epilog

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="queue-resume",
        description="Inspect and exercise the saved playback queue.",
        epilog=build_help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    parser.add_argument(
        "--state-file",
        help="Queue state file to use instead of the per-user default.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("show", help="Print the saved queue state.")
    subparsers.add_parser("clear", help="Delete the saved queue state.")
    demo = subparsers.add_parser(
        "demo",
        help="Save a generated queue and restore it against an in-memory catalog.",
    )
    demo.add_argument("--tracks", type=int, default=8, help="Tracks in the queue")
    demo.add_argument(
        "--current", type=int, default=None, help="Index of the current track"
    )
    demo.add_argument(
        "--missing",
        type=int,
        nargs="*",
        default=[],
        help="Indexes the catalog no longer knows about",
    )
    demo.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_CATALOG_BATCH_SIZE,
        help="Catalog lookup batch size",
    )
    return parser


def render_state(state: QueueState, path: Path) -> Table:
    table = Table(title=f"Saved queue ({path})")
    table.add_column("#", justify="right")
    table.add_column("Track id")
    table.add_column("Current", justify="center")
    for index, track_id in enumerate(state.track_ids):
        marker = "*" if index == state.current_index else ""
        table.add_row(str(index), track_id, marker)
    table.caption = (
        f"position {state.playback_time:.1f}s"
        f" | shuffle {_mode_label(state.shuffle_mode)}"
        f" | repeat {_mode_label(state.repeat_mode)}"
    )
    return table


def _mode_label(mode: object) -> str:
    value = getattr(mode, "value", None)
    return value if isinstance(value, str) else "-"


def _cmd_show(console: Console, path: Path) -> int:
    try:
        state = read_state_file(path)
    except (OSError, DecodeError) as exc:
        console.print(f"[red]Cannot read saved queue:[/red] {exc}")
        return 1
    if state is None:
        console.print(f"No saved queue at {path}")
        return 0
    console.print(render_state(state, path))
    return 0


def _cmd_clear(console: Console, path: Path) -> int:
    if delete_state_file(path):
        console.print(f"Removed {path}")
    else:
        console.print(f"No saved queue at {path}")
    return 0


def _cmd_demo(console: Console, path: Path, args: argparse.Namespace) -> int:
    count = max(0, args.tracks)
    track_ids = [f"track-{index:03d}" for index in range(count)]
    current = args.current if args.current is not None and count else None
    if current is not None and not 0 <= current < count:
        console.print(f"[red]--current must be between 0 and {count - 1}[/red]")
        return 2
    missing = {index for index in args.missing if 0 <= index < count}

    source = FakePlayerBinding.with_tracks(
        track_ids, current=current, playback_time=42.0
    )
    catalog = InMemoryCatalog(
        CatalogTrack(track_id=tid, title=f"Song {index}")
        for index, tid in enumerate(track_ids)
        if index not in missing
    )
    target = FakePlayerBinding()
    saver = QueuePersistenceService(
        binding=source, catalog=catalog, state_path=path, batch_size=args.batch_size
    )
    restorer = QueuePersistenceService(
        binding=target, catalog=catalog, state_path=path, batch_size=args.batch_size
    )
    if not saver.save():
        console.print("[red]Save failed; see log for details.[/red]")
        return 1
    outcome = asyncio.run(restorer.restore())
    console.print(f"Restore outcome: [bold]{outcome.value}[/bold]")
    console.print(f"Catalog batches: {len(catalog.calls)}")
    if outcome is RestoreOutcome.RESTORED:
        restored = [track.track_id for track in target.assigned_queues[-1]]
        console.print("Restored order: " + ", ".join(restored))
    return 0 if outcome in {RestoreOutcome.RESTORED, RestoreOutcome.NO_STATE} else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = Console()
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
        path = Path(args.state_file) if args.state_file else queue_state_path()
        command = getattr(args, "command", None) or "show"
        logger.debug("Running %s against %s", command, path)
        if command == "clear":
            return _cmd_clear(console, path)
        if command == "demo":
            return _cmd_demo(console, path, args)
        return _cmd_show(console, path)
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
