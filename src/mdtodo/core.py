"""View state machine: the active screen, input routing and transitions.

No curses here. The machine consumes key names and Resize events and is
driven one event at a time by tui.run (or directly by tests).
"""

import logging
from typing import Optional

from .compose import body_size, editor_size, preview_size
from .errors import NoteError, NotFound
from .models import (
    BACK_KEYS,
    CANCEL_KEYS,
    CONFIRM_KEYS,
    DELETE_KEYS,
    MAIN_MENU_ITEMS,
    NOTE_EXT,
    PREVIEW_KEYS,
    PREVIEW_RETURN_KEYS,
    QUIT_KEYS,
    SAVE_AND_EXIT_KEYS,
    SAVE_KEYS,
    InputEvent,
    MenuAction,
    MenuItem,
    NoteItem,
    Origin,
    Resize,
    Screen,
    StatusMessage,
    normalize_name,
)
from .preview import PreviewState, Renderer, render_markdown
from .session import EditingSession
from .storage import NoteStore
from .theme import DEFAULT_THEME, Theme
from .widgets import LineInput, SelectList

logger = logging.getLogger(__name__)

PROMPT_PLACEHOLDER = "what would you like to call this file"


class ViewStateMachine:
    """Owns the active screen and every screen's component state.

    Invariant: self.session is not None exactly when the screen is EDITOR or
    PREVIEW, and self.preview is not None exactly when the screen is PREVIEW.
    """

    def __init__(
        self,
        store: NoteStore,
        theme: Theme = DEFAULT_THEME,
        renderer: Renderer = render_markdown,
        width: int = 80,
        height: int = 24,
    ):
        self.store = store
        self.theme = theme
        self.renderer = renderer
        self.width = width
        self.height = height
        self.screen = Screen.MAIN_MENU
        self.main_menu = SelectList(MAIN_MENU_ITEMS, title="Todo App")
        self.note_list = SelectList([], title="All Todos")
        self.prompt = LineInput(placeholder=PROMPT_PLACEHOLDER)
        self.session: Optional[EditingSession] = None
        self.preview: Optional[PreviewState] = None
        self.status: Optional[StatusMessage] = None
        self.running = True
        self._layout()

    # --- Event entry point ---

    def handle(self, event: InputEvent) -> bool:
        """Process one input event completely. Returns False once quit."""
        if not self.running:
            return False
        if isinstance(event, Resize):
            self.resize(event.width, event.height)
            return True
        if event in QUIT_KEYS:
            logger.debug("Quit from %s", self.screen.value)
            self.running = False
            return False

        self.status = None
        handler = {
            Screen.MAIN_MENU: self._on_main_menu,
            Screen.CREATE_PROMPT: self._on_create_prompt,
            Screen.EDITOR: self._on_editor,
            Screen.PREVIEW: self._on_preview,
            Screen.NOTE_LIST: self._on_note_list,
        }[self.screen]
        handler(event)
        return True

    def resize(self, width: int, height: int) -> None:
        """Recompute component sizes; screen and buffers are untouched."""
        self.width = width
        self.height = height
        self._layout()

    # --- Per-screen handlers ---

    def _on_main_menu(self, key: str) -> None:
        if key in CONFIRM_KEYS:
            item = self.main_menu.selected()
            if isinstance(item, MenuItem):
                if item.action is MenuAction.CREATE:
                    self.open_create_prompt()
                elif item.action is MenuAction.LIST:
                    self.open_note_list()
            return
        self.main_menu.handle(key)

    def _on_create_prompt(self, key: str) -> None:
        if key in CONFIRM_KEYS:
            self.confirm_create_prompt()
        elif key in CANCEL_KEYS:
            self.prompt.reset()
            self._go(Screen.MAIN_MENU)
        else:
            self.prompt.handle(key)

    def _on_editor(self, key: str) -> None:
        if key in CANCEL_KEYS:
            self.cancel_editing()
        elif key in SAVE_KEYS:
            self.save()
        elif key in SAVE_AND_EXIT_KEYS:
            self.save_and_exit()
        elif key in PREVIEW_KEYS:
            self.enter_preview()
        else:
            self.session.edit(key)

    def _on_preview(self, key: str) -> None:
        if key in PREVIEW_RETURN_KEYS:
            self.exit_preview()
        else:
            self.preview.handle(key)

    def _on_note_list(self, key: str) -> None:
        if key in BACK_KEYS:
            self._go(Screen.MAIN_MENU)
        elif key in CONFIRM_KEYS:
            self.open_selected(preview=False)
        elif key in PREVIEW_KEYS:
            self.open_selected(preview=True)
        elif key in DELETE_KEYS:
            self.delete_selected()
        else:
            self.note_list.handle(key)

    # --- Transitions ---

    def open_create_prompt(self) -> None:
        self.prompt.reset()
        self._go(Screen.CREATE_PROMPT)

    def open_note_list(self) -> None:
        self.note_list.set_items([NoteItem(s) for s in self.store.list()])
        self._go(Screen.NOTE_LIST)

    def confirm_create_prompt(self) -> None:
        name = normalize_name(self.prompt.value)
        if not name:
            self._error("File name cannot be empty.")
            return
        self.session = EditingSession.begin(
            self.store, Origin.NEW, name, "", size=editor_size(self.width, self.height)
        )
        self.prompt.reset()
        self._go(Screen.EDITOR)

    def save(self) -> bool:
        try:
            self.session.save()
        except NoteError as e:
            self._error(f"Error saving file: {e}")
            return False
        self._info(f"Saved {self.session.target_name}{NOTE_EXT}")
        return True

    def save_and_exit(self) -> None:
        name = self.session.target_name
        try:
            self.session.save_and_exit()
        except NoteError as e:
            self._error(f"Error saving file: {e}")
            return
        self.session = None
        self._go(Screen.MAIN_MENU)
        self._info(f"Saved {name}{NOTE_EXT}")

    def cancel_editing(self) -> None:
        self.session.discard()
        self.session = None
        self._go(Screen.MAIN_MENU)

    def enter_preview(self) -> None:
        width, height = preview_size(self.width, self.height)
        self.preview = PreviewState.enter(
            self.session.buffer,
            self.session.target_name,
            theme=self.theme,
            width=width,
            height=height,
            renderer=self.renderer,
        )
        self._go(Screen.PREVIEW)

    def exit_preview(self) -> None:
        self.preview.exit()
        self.preview = None
        self._go(Screen.EDITOR)

    def open_selected(self, preview: bool) -> None:
        """Open the selected note in the editor, or straight into preview."""
        item = self.note_list.selected()
        if not isinstance(item, NoteItem):
            return
        try:
            content = self.store.read(item.name)
        except NotFound as e:
            self._error(str(e))
            self._refresh_note_list()
            return
        except NoteError as e:
            self._error(f"Error opening file: {e}")
            return
        self.session = EditingSession.begin(
            self.store, Origin.EXISTING, item.name, content, size=editor_size(self.width, self.height)
        )
        self._go(Screen.EDITOR)
        if preview:
            self.enter_preview()

    def delete_selected(self) -> None:
        item = self.note_list.selected()
        if not isinstance(item, NoteItem):
            return
        filename = item.display_label()
        try:
            self.store.delete(item.name)
        except NoteError as e:
            self._error(f"Could not delete {filename}: {e}")
        else:
            self._info(f"Deleted {filename}")
        self._refresh_note_list()

    # --- Helpers ---

    def _go(self, screen: Screen) -> None:
        logger.debug("Transition %s -> %s", self.screen.value, screen.value)
        self.screen = screen

    def _refresh_note_list(self) -> None:
        self.note_list.set_items([NoteItem(s) for s in self.store.list()])

    def _layout(self) -> None:
        w, h = body_size(self.width, self.height)
        self.main_menu.set_size(w, h)
        self.note_list.set_size(w, h)
        self.prompt.set_width(max(1, w - 2))
        if self.session is not None:
            self.session.editor.set_size(*editor_size(self.width, self.height))
        if self.preview is not None:
            self.preview.resize(*preview_size(self.width, self.height))

    def _info(self, text: str) -> None:
        self.status = StatusMessage(text)

    def _error(self, text: str) -> None:
        logger.warning(text)
        self.status = StatusMessage(text, error=True)
