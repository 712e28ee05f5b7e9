"""Markdown preview: render once on entry, then scroll the cached lines."""

import io
import logging
from typing import Callable, List, Optional, Sequence

from rich.color import Color, ColorSystem
from rich.console import Console
from rich.markdown import Markdown
from rich.style import Style as RichStyle

from .errors import RenderError
from .theme import COLOR_NAMES, DEFAULT_THEME, PLAIN, Line, Span, Style, Theme, line_text, text_line

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "# Empty Document\n\nStart typing to see content here."

Renderer = Callable[[str, Theme, int], List[Line]]


def _color_name(color: Optional[Color]) -> Optional[str]:
    if color is None or color.is_default:
        return None
    standard = color.downgrade(ColorSystem.STANDARD)
    if standard.number is None:
        return None
    return COLOR_NAMES[standard.number % 8]


def convert_style(style: Optional[RichStyle]) -> Style:
    """Map a rich Style onto the attributes a curses cell can show."""
    if style is None:
        return PLAIN
    return Style(
        fg=_color_name(style.color),
        bg=_color_name(style.bgcolor),
        bold=bool(style.bold),
        dim=bool(style.dim),
        italic=bool(style.italic),
        underline=bool(style.underline),
        reverse=bool(style.reverse),
    )


def render_markdown(text: str, theme: Theme = DEFAULT_THEME, width: int = 80) -> List[Line]:
    """Render markdown into styled lines of at most width cells.

    Any failure inside rich is raised as RenderError.
    """
    try:
        console = Console(
            file=io.StringIO(),
            width=width,
            color_system="truecolor",
            force_terminal=True,
            legacy_windows=False,
        )
        markdown = Markdown(text, code_theme=theme.code_theme)
        rendered = console.render_lines(markdown, console.options.update(width=width), pad=False)
    except Exception as e:
        raise RenderError(f"could not render markdown: {e}") from e

    lines: List[Line] = []
    for segments in rendered:
        lines.append(
            tuple(Span(seg.text, convert_style(seg.style)) for seg in segments if seg.text and not seg.control)
        )
    # rich ends documents with a blank line; drop trailing blanks
    while lines and not line_text(lines[-1]).strip():
        lines.pop()
    return lines


class PreviewState:
    """Rendered snapshot of a buffer plus a scroll offset of its own."""

    def __init__(self, title: str, lines: Sequence[Line], width: int, height: int, raw: bool = False):
        self.title = title
        self.lines = tuple(lines)
        self.width = max(1, width)
        self.height = max(1, height)
        self.offset = 0
        self.raw = raw

    @classmethod
    def enter(
        cls,
        buffer: str,
        title: str,
        theme: Theme = DEFAULT_THEME,
        width: int = 80,
        height: int = 20,
        renderer: Renderer = render_markdown,
    ) -> "PreviewState":
        """Render the buffer once. Falls back to the raw text if rendering fails."""
        snapshot = buffer or EMPTY_DOCUMENT
        try:
            lines = renderer(snapshot, theme, max(1, width))
            raw = False
        except RenderError as e:
            logger.warning("Preview of %r shown unrendered: %s", title, e)
            lines = [text_line(line) for line in snapshot.split("\n")]
            raw = True
        return cls(title, lines, width, height, raw=raw)

    @property
    def content_height(self) -> int:
        return len(self.lines)

    @property
    def max_offset(self) -> int:
        return max(0, self.content_height - self.height)

    def scroll(self, delta: int) -> None:
        self.offset = max(0, min(self.max_offset, self.offset + delta))

    def page_up(self) -> None:
        self.scroll(-self.height)

    def page_down(self) -> None:
        self.scroll(+self.height)

    def half_page_up(self) -> None:
        self.scroll(-(self.height // 2 or 1))

    def half_page_down(self) -> None:
        self.scroll(+(self.height // 2 or 1))

    def top(self) -> None:
        self.offset = 0

    def bottom(self) -> None:
        self.offset = self.max_offset

    def resize(self, width: int, height: int) -> None:
        """Resize the viewport only; the cached render is kept."""
        self.width = max(1, width)
        self.height = max(1, height)
        self.scroll(0)

    def scroll_percent(self) -> float:
        if self.content_height <= self.height:
            return 1.0
        return self.offset / self.max_offset

    def visible(self) -> Sequence[Line]:
        return self.lines[self.offset: self.offset + self.height]

    def handle(self, key: str) -> bool:
        if key in ("up", "k"):
            self.scroll(-1)
        elif key in ("down", "j"):
            self.scroll(+1)
        elif key in ("pgup", "b"):
            self.page_up()
        elif key in ("pgdn", " ", "f"):
            self.page_down()
        elif key in ("u", "ctrl+u"):
            self.half_page_up()
        elif key in ("d", "ctrl+d", "ctrl+f"):
            self.half_page_down()
        elif key in ("g", "home"):
            self.top()
        elif key in ("G", "end"):
            self.bottom()
        else:
            return False
        return True

    def exit(self) -> None:
        self.lines = ()
        self.offset = 0
