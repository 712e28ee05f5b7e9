"""Data models and constants for mdtodo."""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

DEFAULT_DIR = os.path.expanduser("~/todo")
NOTE_EXT = ".md"
NAME_CHAR_LIMIT = 156

NAME_RE = re.compile(r"[^\w\- ]")


class Screen(Enum):
    """The one screen that is active at any time."""

    MAIN_MENU = "main_menu"
    CREATE_PROMPT = "create_prompt"
    EDITOR = "editor"
    PREVIEW = "preview"
    NOTE_LIST = "note_list"


class Origin(Enum):
    """Where an editing session came from."""

    NEW = "new"
    EXISTING = "existing"


class MenuAction(Enum):
    CREATE = "create"
    LIST = "list"


@dataclass(frozen=True)
class Note:
    """A named markdown document."""

    name: str
    content: str
    last_modified: datetime


@dataclass(frozen=True)
class NoteSummary:
    name: str
    last_modified: datetime

    @property
    def filename(self) -> str:
        return self.name + NOTE_EXT


@dataclass(frozen=True)
class MenuItem:
    title: str
    desc: str
    action: MenuAction

    def display_label(self) -> str:
        return self.title

    def description(self) -> str:
        return self.desc


@dataclass(frozen=True)
class NoteItem:
    summary: NoteSummary

    @property
    def name(self) -> str:
        return self.summary.name

    def display_label(self) -> str:
        return self.summary.filename

    def description(self) -> str:
        return "Modified: " + format_mtime(self.summary.last_modified)


ListItem = Union[MenuItem, NoteItem]

MAIN_MENU_ITEMS = (
    MenuItem("Create Todo", "add a new todo item", MenuAction.CREATE),
    MenuItem("List All Todos", "see all your todos", MenuAction.LIST),
)


@dataclass(frozen=True)
class Resize:
    """Terminal size change; carries the new dimensions."""

    width: int
    height: int


InputEvent = Union[str, Resize]

# Key bindings (curses-independent key names, see tui.key_name)
QUIT_KEYS = ("ctrl+c",)
CONFIRM_KEYS = ("enter",)
CANCEL_KEYS = ("esc",)
SAVE_KEYS = ("ctrl+s",)
SAVE_AND_EXIT_KEYS = ("ctrl+d",)
PREVIEW_KEYS = ("ctrl+p",)
PREVIEW_RETURN_KEYS = ("esc", "q", "ctrl+p")
BACK_KEYS = ("esc",)
DELETE_KEYS = ("x", "backspace")


def format_mtime(when: datetime) -> str:
    """Format a timestamp as 'Jan 02, 2006 3:04 PM'."""
    hour = when.hour % 12 or 12
    return f"{when:%b %d, %Y} {hour}:{when:%M %p}"


def normalize_name(raw: str) -> str:
    """Turn user input into a note name, or '' if nothing usable is left.

    A typed extension is dropped ("groceries.md" -> "groceries") and only
    letters, digits, '-', '_' and spaces are kept.
    """
    s = (raw or "").strip()
    base, ext = os.path.splitext(s)
    if ext and base:
        s = base
    return NAME_RE.sub("", s).strip()


@dataclass(frozen=True)
class StatusMessage:
    """Transient message shown until the next key press."""

    text: str
    error: bool = False
