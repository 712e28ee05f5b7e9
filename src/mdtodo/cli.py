"""mdtodo command-line interface."""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markdown import Markdown

from .errors import NoteError
from .models import DEFAULT_DIR, format_mtime
from .storage import NoteStore
from .theme import DEFAULT_THEME

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Optional[str], level: str) -> None:
    """Send package logs to log_file. Without one, logs are dropped.

    The terminal belongs to curses while the TUI runs, so there is no
    stream handler.
    """
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pkg_logger = logging.getLogger("mdtodo")
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level.upper())


def cmd_list(args: argparse.Namespace) -> None:
    notes = NoteStore(args.dir).list()
    if not notes:
        print("(no todos yet)")
        return
    width = max(len(n.filename) for n in notes)
    for n in notes:
        print(f"{n.filename:<{width}}  Modified: {format_mtime(n.last_modified)}")


def cmd_show(args: argparse.Namespace) -> None:
    try:
        note = NoteStore(args.dir).load(args.name)
    except NoteError as e:
        sys.exit(str(e))
    if args.raw:
        sys.stdout.write(note.content)
        return
    console = Console()
    console.print(f"{note.name}.md  Modified: {format_mtime(note.last_modified)}", style="dim", markup=False)
    console.print(Markdown(note.content, code_theme=DEFAULT_THEME.code_theme))


def cmd_path(args: argparse.Namespace) -> None:
    print(NoteStore(args.dir).directory)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="mdtodo", description="Markdown todo notes in the terminal."
    )
    p.add_argument(
        "-d",
        "--dir",
        default=DEFAULT_DIR,
        help=f"Notes directory (default: {DEFAULT_DIR})",
    )
    p.add_argument("--log-file", help="Write debug logs to this file")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for --log-file (default: INFO)",
    )
    sub = p.add_subparsers(dest="cmd")

    s_list = sub.add_parser("list", help="List notes with their modification time")
    s_list.set_defaults(func=cmd_list)

    s_show = sub.add_parser("show", help="Print a note rendered as markdown")
    s_show.add_argument("name", help="Note name without the .md extension")
    s_show.add_argument("--raw", action="store_true", help="Print the file unrendered")
    s_show.set_defaults(func=cmd_show)

    s_path = sub.add_parser("path", help="Show the absolute path to the notes directory")
    s_path.set_defaults(func=cmd_path)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point. Launches TUI if no subcommand given."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    if args.cmd is None:
        import curses

        from .tui import main as tui_main

        try:
            tui_main(args.dir)
        except curses.error as e:
            print("Error running program:", e)
            sys.exit(1)
        except KeyboardInterrupt:
            sys.exit(130)
    else:
        args.func(args)


if __name__ == "__main__":
    main()
