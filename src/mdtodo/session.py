"""Editing session: the buffer for the one note being created or edited."""

import logging
from typing import Optional

from .errors import ValidationError
from .models import Origin, normalize_name
from .storage import NoteStore
from .widgets import TextArea

logger = logging.getLogger(__name__)


class EditingSession:
    """Scratch state for a single note.

    The buffer lives in a TextArea; nothing reaches the store until save().
    """

    def __init__(self, store: NoteStore, origin: Origin, target_name: str = "", initial_content: str = ""):
        self.store = store
        self.origin = origin
        self.target_name = ""
        self.editor = TextArea(initial_content)
        self.saved_content = initial_content
        self.closed = False
        if origin is Origin.EXISTING:
            # already a stored name; keep it verbatim
            self.target_name = target_name
        elif target_name:
            self.set_target_name(target_name)

    @classmethod
    def begin(
        cls,
        store: NoteStore,
        origin: Origin,
        target_name: str = "",
        initial_content: str = "",
        size: Optional[tuple] = None,
    ) -> "EditingSession":
        """Start a fresh session; the buffer holds exactly initial_content."""
        session = cls(store, origin, target_name, initial_content)
        if size:
            session.editor.set_size(*size)
        logger.debug("Session begin: origin=%s name=%r", origin.value, target_name)
        return session

    @property
    def buffer(self) -> str:
        return self.editor.value

    @property
    def dirty(self) -> bool:
        return self.buffer != self.saved_content

    def set_target_name(self, name: str) -> None:
        """Set the name chosen at the creation prompt. Allowed once."""
        if self.target_name:
            raise ValidationError(f"note is already named {self.target_name!r}")
        clean = normalize_name(name)
        if not clean:
            raise ValidationError("file name cannot be empty")
        self.target_name = clean

    def edit(self, key: str) -> bool:
        self._check_open()
        return self.editor.handle(key)

    def save(self) -> None:
        """Write the buffer under target_name; editing continues afterwards."""
        self._check_open()
        if not self.target_name:
            raise ValidationError("cannot save a note without a name")
        content = self.buffer
        self.store.write(self.target_name, content)
        self.saved_content = content

    def discard(self) -> None:
        """Drop the buffer without writing anything."""
        if self.dirty:
            logger.info("Discarding unsaved changes to %r", self.target_name)
        self.editor.reset()
        self.saved_content = ""
        self.closed = True

    def save_and_exit(self) -> None:
        """save() then discard(). A failed save leaves the session open."""
        self.save()
        self.discard()

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("editing session already closed")
