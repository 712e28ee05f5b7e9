"""Exceptions raised by the store, session and renderer."""


class NoteError(Exception):
    """Base class for recoverable mdtodo errors."""


class NotFound(NoteError):
    def __init__(self, name: str):
        super().__init__(f"file not found: {name}")
        self.name = name


class StorageError(NoteError):
    """Permission or disk failure while touching a note file."""


class RenderError(NoteError):
    pass


class ValidationError(NoteError):
    pass
