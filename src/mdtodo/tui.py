"""mdtodo curses-based terminal user interface."""

import curses
import logging
import os
from typing import Dict, List, Optional, Tuple, Union

from rich.cells import cell_len

from .compose import FOOTER_ROWS, HEADER_ROWS, MARGIN_X, MARGIN_Y, Frame, body_size, compose, crop_cells
from .core import ViewStateMachine
from .models import DEFAULT_DIR, InputEvent, Resize
from .storage import NoteStore
from .theme import DEFAULT_THEME, Line, Style, Theme

logger = logging.getLogger(__name__)

KEY_NAMES = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "pgup",
    curses.KEY_NPAGE: "pgdn",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_ENTER: "enter",
    curses.KEY_BTAB: "shift+tab",
}

COLORS = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}


def key_name(ch: Union[int, str]) -> Optional[str]:
    """Translate a get_wch() result into a key name, or None to ignore it."""
    if isinstance(ch, int):
        return KEY_NAMES.get(ch)
    if ch in ("\n", "\r"):
        return "enter"
    if ch == "\x1b":
        return "esc"
    if ch in ("\x7f", "\x08"):
        return "backspace"
    if ch == "\t":
        return "tab"
    code = ord(ch)
    if code < 32:
        return "ctrl+" + chr(code + 96)
    return ch


class Painter:
    """Draws Frames onto a curses window."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.has_colors = curses.has_colors()
        self.default_colors = False
        self._pairs: Dict[Tuple[Optional[str], Optional[str]], int] = {}
        if self.has_colors:
            curses.start_color()
            try:
                curses.use_default_colors()
                self.default_colors = True
            except curses.error:
                pass

    def _color(self, name: Optional[str], fallback: int) -> int:
        if name is None:
            return -1 if self.default_colors else fallback
        return COLORS.get(name, fallback)

    def _pair(self, fg: Optional[str], bg: Optional[str]) -> int:
        key = (fg, bg)
        if key not in self._pairs:
            number = len(self._pairs) + 1
            if number >= curses.COLOR_PAIRS:
                return curses.A_NORMAL
            curses.init_pair(number, self._color(fg, curses.COLOR_WHITE), self._color(bg, curses.COLOR_BLACK))
            self._pairs[key] = curses.color_pair(number)
        return self._pairs[key]

    def attr(self, style: Style) -> int:
        a = curses.A_NORMAL
        if style.bold:
            a |= curses.A_BOLD
        if style.dim:
            a |= curses.A_DIM
        if style.italic:
            a |= getattr(curses, "A_ITALIC", curses.A_UNDERLINE)
        if style.underline:
            a |= curses.A_UNDERLINE
        if style.reverse:
            a |= curses.A_REVERSE
        if style.fg or style.bg:
            if self.has_colors:
                a |= self._pair(style.fg, style.bg)
            elif style.bg:
                a |= curses.A_REVERSE
        return a

    def draw_line(self, y: int, line: Line, width: int) -> None:
        x = MARGIN_X
        for span in line:
            room = width - 1 - x
            if room <= 0:
                break
            text = crop_cells(span.text, room)
            try:
                self.stdscr.addstr(y, x, text, self.attr(span.style))
            except curses.error:
                # writing into the last cell of the window raises; nothing to recover
                pass
            x += cell_len(text)

    def paint(self, frame: Frame) -> None:
        """Render title, body, status line and help line."""
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        _, body_h = body_size(width, height)
        top = MARGIN_Y + HEADER_ROWS

        self.draw_line(MARGIN_Y, frame.title, width)
        for i, line in enumerate(frame.body[:body_h]):
            self.draw_line(top + i, line, width)
        footer = height - MARGIN_Y - FOOTER_ROWS
        if footer >= top:
            self.draw_line(footer, frame.status, width)
            self.draw_line(footer + 1, frame.help, width)

        if frame.cursor is None:
            self._cursor(0)
        else:
            row, col = frame.cursor
            self._cursor(1)
            try:
                self.stdscr.move(min(top + row, height - 1), min(MARGIN_X + col, width - 1))
            except curses.error:
                pass
        self.stdscr.refresh()

    @staticmethod
    def _cursor(visibility: int) -> None:
        try:
            curses.curs_set(visibility)
        except curses.error:
            # some terminals cannot hide the cursor
            pass


def _drain(stdscr) -> List[Union[int, str]]:
    """Collect input already queued behind an ESC without blocking."""
    pending: List[Union[int, str]] = []
    stdscr.nodelay(True)
    try:
        while True:
            try:
                pending.append(stdscr.get_wch())
            except curses.error:
                break
    finally:
        stdscr.nodelay(False)
    return pending


def _escape(stdscr) -> Optional[str]:
    """A lone ESC is "esc"; ESC plus one character is alt+key; anything else is dropped."""
    rest = _drain(stdscr)
    if not rest:
        return "esc"
    if len(rest) == 1 and isinstance(rest[0], str) and rest[0].isprintable():
        return "alt+" + rest[0]
    logger.debug("Ignored escape sequence %r", rest)
    return None


def read_event(stdscr) -> Optional[InputEvent]:
    """Block for the next input event."""
    try:
        ch = stdscr.get_wch()
    except curses.error:
        return None
    if ch == curses.KEY_RESIZE:
        height, width = stdscr.getmaxyx()
        return Resize(width, height)
    if ch == "\x1b":
        return _escape(stdscr)
    return key_name(ch)


def run(stdscr, machine: ViewStateMachine, theme: Theme = DEFAULT_THEME) -> None:
    """Main event loop: paint, read one event, let the machine apply it."""
    curses.raw()  # deliver ctrl+s / ctrl+c as keys
    stdscr.keypad(True)
    painter = Painter(stdscr)
    height, width = stdscr.getmaxyx()
    machine.resize(width, height)

    while machine.running:
        painter.paint(compose(machine, theme))
        event = read_event(stdscr)
        if event is None:
            continue
        machine.handle(event)
    logger.debug("Event loop finished on %s", machine.screen.value)


def main(directory: str = DEFAULT_DIR, theme: Theme = DEFAULT_THEME) -> None:
    """TUI entry point."""
    store = NoteStore(directory)
    os.environ.setdefault("ESCDELAY", "25")

    def _main(stdscr):
        run(stdscr, ViewStateMachine(store, theme=theme), theme)

    curses.wrapper(_main)


if __name__ == "__main__":
    main()
