"""Styling for the composer and the markdown renderer.

Colors are curses color names ("black", "red", ..., "white") or None for the
terminal default. A Theme is immutable and passed in explicitly.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


@dataclass(frozen=True)
class Style:
    fg: Optional[str] = None
    bg: Optional[str] = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    reverse: bool = False


PLAIN = Style()


@dataclass(frozen=True)
class Theme:
    app_title: Style = Style(fg="white", bg="magenta", bold=True)
    list_title: Style = Style(fg="white", bg="green")
    item_title: Style = PLAIN
    item_desc: Style = Style(dim=True)
    selected_title: Style = Style(fg="magenta", bold=True)
    selected_desc: Style = Style(fg="magenta")
    label: Style = PLAIN
    placeholder: Style = Style(dim=True)
    line_number: Style = Style(dim=True)
    cursor_line: Style = Style(fg="white", bg="blue")
    end_of_buffer: Style = Style(dim=True)
    modified: Style = Style(fg="yellow")
    preview_border: Style = PLAIN
    help: Style = Style(dim=True)
    status_info: Style = Style(fg="green")
    status_error: Style = Style(fg="red", bold=True)
    # Passed to rich for fenced code blocks
    code_theme: str = "monokai"


DEFAULT_THEME = Theme()


class Span(NamedTuple):
    text: str
    style: Style = PLAIN


# One screen row
Line = Tuple[Span, ...]


def text_line(text: str, style: Style = PLAIN) -> Line:
    return (Span(text, style),) if text else ()


def line_text(line: Line) -> str:
    return "".join(span.text for span in line)
