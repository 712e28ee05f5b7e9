"""mdtodo - markdown todo notes in the terminal."""

import logging

__version__ = "1.0.0"

from .models import Note, NoteSummary, Origin, Screen, Resize, DEFAULT_DIR
from .errors import NoteError, NotFound, StorageError, RenderError, ValidationError
from .storage import NoteStore
from .session import EditingSession
from .preview import PreviewState, render_markdown
from .core import ViewStateMachine
from .compose import Frame, compose

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Note",
    "NoteSummary",
    "Origin",
    "Screen",
    "Resize",
    "DEFAULT_DIR",
    "NoteError",
    "NotFound",
    "StorageError",
    "RenderError",
    "ValidationError",
    "NoteStore",
    "EditingSession",
    "PreviewState",
    "render_markdown",
    "ViewStateMachine",
    "Frame",
    "compose",
]
