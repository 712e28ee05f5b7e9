"""Input widgets driven by key names: a selectable list, a one-line input
and a multi-line text area.

Widgets keep their own cursor and scroll state. They never draw; the
composer reads their visible window.
"""

from typing import List, Optional, Sequence, Tuple

from .models import ListItem, NAME_CHAR_LIMIT

TAB_WIDTH = 4


def is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class SelectList:
    """Vertical list with a cursor. Each item takes ITEM_ROWS screen rows."""

    ITEM_ROWS = 3  # label, description, spacer

    def __init__(self, items: Sequence[ListItem], title: str = ""):
        self.items: List[ListItem] = list(items)
        self.title = title
        self.cursor = 0
        self.scroll = 0
        self.width = 0
        self.height = 0

    @property
    def page_size(self) -> int:
        return max(1, self.height // self.ITEM_ROWS)

    def set_size(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._follow_cursor()

    def set_items(self, items: Sequence[ListItem]) -> None:
        self.items = list(items)
        self.cursor = max(0, min(self.cursor, len(self.items) - 1))
        self._follow_cursor()

    def selected(self) -> Optional[ListItem]:
        if not self.items:
            return None
        return self.items[self.cursor]

    def move(self, delta: int) -> None:
        if not self.items:
            return
        self.cursor = max(0, min(len(self.items) - 1, self.cursor + delta))
        self._follow_cursor()

    def handle(self, key: str) -> bool:
        """Apply a navigation key. Returns False if the key is not ours."""
        if key in ("up", "k"):
            self.move(-1)
        elif key in ("down", "j"):
            self.move(+1)
        elif key in ("pgup", "left", "h"):
            self.move(-self.page_size)
        elif key in ("pgdn", "right", "l"):
            self.move(+self.page_size)
        elif key in ("home", "g"):
            self.move(-len(self.items))
        elif key in ("end", "G"):
            self.move(+len(self.items))
        else:
            return False
        return True

    def visible(self) -> List[Tuple[int, ListItem]]:
        """(index, item) pairs currently inside the viewport."""
        end = self.scroll + self.page_size
        return [(i, self.items[i]) for i in range(self.scroll, min(end, len(self.items)))]

    def _follow_cursor(self) -> None:
        page = self.page_size
        if self.cursor < self.scroll:
            self.scroll = self.cursor
        elif self.cursor >= self.scroll + page:
            self.scroll = self.cursor - page + 1
        self.scroll = max(0, min(self.scroll, max(0, len(self.items) - page)))


class LineInput:
    """Single-line text input with a character limit."""

    def __init__(self, placeholder: str = "", char_limit: int = NAME_CHAR_LIMIT, width: int = 50):
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.width = width
        self.value = ""
        self.pos = 0
        self.offset = 0

    def set_value(self, value: str) -> None:
        self.value = value[: self.char_limit]
        self.pos = len(self.value)
        self._follow_cursor()

    def reset(self) -> None:
        self.set_value("")

    def set_width(self, width: int) -> None:
        self.width = max(1, width)
        self._follow_cursor()

    def handle(self, key: str) -> bool:
        if is_printable(key):
            if len(self.value) < self.char_limit:
                self.value = self.value[: self.pos] + key + self.value[self.pos:]
                self.pos += 1
        elif key == "backspace":
            if self.pos > 0:
                self.value = self.value[: self.pos - 1] + self.value[self.pos:]
                self.pos -= 1
        elif key == "delete":
            self.value = self.value[: self.pos] + self.value[self.pos + 1:]
        elif key == "left":
            self.pos = max(0, self.pos - 1)
        elif key == "right":
            self.pos = min(len(self.value), self.pos + 1)
        elif key in ("home", "ctrl+a"):
            self.pos = 0
        elif key in ("end", "ctrl+e"):
            self.pos = len(self.value)
        elif key == "ctrl+u":
            self.value = self.value[self.pos:]
            self.pos = 0
        elif key == "ctrl+k":
            self.value = self.value[: self.pos]
        else:
            return False
        self._follow_cursor()
        return True

    def visible(self) -> Tuple[str, int]:
        """Visible slice of the value and the cursor column inside it."""
        return self.value[self.offset: self.offset + self.width], self.pos - self.offset

    def _follow_cursor(self) -> None:
        if self.pos < self.offset:
            self.offset = self.pos
        elif self.pos >= self.offset + self.width:
            self.offset = self.pos - self.width + 1


class TextArea:
    """Multi-line editing buffer with line numbers and a viewport."""

    def __init__(self, text: str = "", width: int = 80, height: int = 10):
        self.width = width
        self.height = height
        self.lines: List[str] = [""]
        self.cy = 0
        self.cx = 0
        self.view_top = 0
        self.view_left = 0
        self.set_value(text)

    @property
    def value(self) -> str:
        return "\n".join(self.lines)

    def set_value(self, text: str) -> None:
        """Replace the buffer; the cursor lands at the end."""
        self.lines = text.split("\n") if text else [""]
        self.cy = len(self.lines) - 1
        self.cx = len(self.lines[self.cy])
        self.view_top = 0
        self.view_left = 0
        self._follow_cursor()

    def reset(self) -> None:
        self.set_value("")

    def set_size(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._follow_cursor()

    @property
    def gutter_width(self) -> int:
        """Columns used by the line number column, including its trailing space."""
        return max(3, len(str(len(self.lines)))) + 1

    @property
    def text_width(self) -> int:
        return max(1, self.width - self.gutter_width)

    def insert_text(self, s: str) -> None:
        cur = self.lines[self.cy]
        before, after = cur[: self.cx], cur[self.cx:]
        parts = s.split("\n")
        if len(parts) == 1:
            self.lines[self.cy] = before + parts[0] + after
            self.cx += len(parts[0])
        else:
            self.lines[self.cy] = before + parts[0]
            for i, p in enumerate(parts[1:], start=1):
                self.lines.insert(self.cy + i, p)
            self.cy += len(parts) - 1
            self.cx = len(parts[-1])
            self.lines[self.cy] += after

    def newline(self) -> None:
        self.insert_text("\n")

    def backspace(self) -> None:
        if self.cx > 0:
            cur = self.lines[self.cy]
            self.lines[self.cy] = cur[: self.cx - 1] + cur[self.cx:]
            self.cx -= 1
        elif self.cy > 0:
            prev = self.lines[self.cy - 1]
            self.cx = len(prev)
            self.lines[self.cy - 1] = prev + self.lines.pop(self.cy)
            self.cy -= 1

    def delete(self) -> None:
        cur = self.lines[self.cy]
        if self.cx < len(cur):
            self.lines[self.cy] = cur[: self.cx] + cur[self.cx + 1:]
        elif self.cy < len(self.lines) - 1:
            self.lines[self.cy] = cur + self.lines.pop(self.cy + 1)

    def move_left(self) -> None:
        if self.cx > 0:
            self.cx -= 1
        elif self.cy > 0:
            self.cy -= 1
            self.cx = len(self.lines[self.cy])

    def move_right(self) -> None:
        if self.cx < len(self.lines[self.cy]):
            self.cx += 1
        elif self.cy < len(self.lines) - 1:
            self.cy += 1
            self.cx = 0

    def move_lines(self, delta: int) -> None:
        self.cy = max(0, min(len(self.lines) - 1, self.cy + delta))
        self.cx = min(self.cx, len(self.lines[self.cy]))

    def handle(self, key: str) -> bool:
        """Apply one key press to the buffer. Returns False if ignored."""
        if is_printable(key):
            self.insert_text(key)
        elif key == "enter":
            self.newline()
        elif key == "tab":
            self.insert_text(" " * TAB_WIDTH)
        elif key == "backspace":
            self.backspace()
        elif key == "delete":
            self.delete()
        elif key == "left":
            self.move_left()
        elif key == "right":
            self.move_right()
        elif key == "up":
            self.move_lines(-1)
        elif key == "down":
            self.move_lines(+1)
        elif key == "pgup":
            self.move_lines(-self.height)
        elif key == "pgdn":
            self.move_lines(+self.height)
        elif key in ("home", "ctrl+a"):
            self.cx = 0
        elif key in ("end", "ctrl+e"):
            self.cx = len(self.lines[self.cy])
        elif key == "ctrl+k":
            self.lines[self.cy] = self.lines[self.cy][: self.cx]
        else:
            return False
        self._follow_cursor()
        return True

    def visible(self) -> List[Tuple[int, str]]:
        """(line number, visible slice) for each row of the viewport."""
        w = self.text_width
        end = min(len(self.lines), self.view_top + self.height)
        return [
            (i + 1, self.lines[i][self.view_left: self.view_left + w])
            for i in range(self.view_top, end)
        ]

    def cursor_position(self) -> Tuple[int, int]:
        """Cursor (row, col) relative to the viewport, gutter included."""
        return self.cy - self.view_top, self.gutter_width + self.cx - self.view_left

    def _follow_cursor(self) -> None:
        if self.cy < self.view_top:
            self.view_top = self.cy
        elif self.cy >= self.view_top + self.height:
            self.view_top = self.cy - self.height + 1
        w = self.text_width
        if self.cx < self.view_left:
            self.view_left = self.cx
        elif self.cx >= self.view_left + w:
            self.view_left = self.cx - w + 1
