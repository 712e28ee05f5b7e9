"""File I/O for mdtodo notes: one markdown file per note."""

import logging
import os
from datetime import datetime
from typing import List

from .errors import NotFound, StorageError, ValidationError
from .models import DEFAULT_DIR, NOTE_EXT, Note, NoteSummary

logger = logging.getLogger(__name__)


def is_safe_name(name: str) -> bool:
    """True if name maps to a file directly inside the notes directory.

    Files created outside the app may use characters normalize_name strips,
    so only separators and relative components are refused here.
    """
    if not name or name.strip() != name or name in (".", ".."):
        return False
    seps = [os.sep, "/", "\0"] + ([os.altsep] if os.altsep else [])
    return not any(s in name for s in seps)


class NoteStore:
    """Notes directory on disk. Nothing is cached; every call hits the filesystem."""

    def __init__(self, directory: str = DEFAULT_DIR):
        self.directory = os.path.abspath(os.path.expanduser(directory))

    def ensure_dir_exists(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, name: str) -> str:
        """Return the full path for a named note: {directory}/{name}.md"""
        if not is_safe_name(name):
            raise ValidationError(f"invalid note name: {name!r}")
        return os.path.join(self.directory, name + NOTE_EXT)

    def list(self) -> List[NoteSummary]:
        """Return summaries of all notes sorted by name.

        Read failures are logged and reported as an empty list.
        """
        try:
            self.ensure_dir_exists()
            entries = sorted(os.scandir(self.directory), key=lambda e: e.name)
        except OSError as e:
            logger.warning("Could not list %s: %s", self.directory, e)
            return []

        notes: List[NoteSummary] = []
        for entry in entries:
            name = entry.name[: -len(NOTE_EXT)]
            if not entry.name.endswith(NOTE_EXT) or not is_safe_name(name):
                continue
            try:
                if not entry.is_file():
                    continue
                mtime = datetime.fromtimestamp(entry.stat().st_mtime)
            except OSError as e:
                logger.warning("Skipping %s: %s", entry.path, e)
                continue
            notes.append(NoteSummary(name=name, last_modified=mtime))
        return notes

    def read(self, name: str) -> str:
        path = self.path_for(name)
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise NotFound(name) from None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"could not read {name}{NOTE_EXT}: {e}") from e

    def load(self, name: str) -> Note:
        """Read a note together with its modification time."""
        content = self.read(name)
        try:
            mtime = os.path.getmtime(self.path_for(name))
        except FileNotFoundError:
            raise NotFound(name) from None
        except OSError as e:
            raise StorageError(f"could not stat {name}{NOTE_EXT}: {e}") from e
        return Note(name, content, datetime.fromtimestamp(mtime))

    def write(self, name: str, content: str) -> None:
        """Write content under name, overwriting any existing note."""
        path = self.path_for(name)
        try:
            self.ensure_dir_exists()
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"could not write {name}{NOTE_EXT}: {e}") from e
        logger.info("Wrote %s (%d chars)", path, len(content))

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        try:
            os.remove(path)
        except FileNotFoundError:
            raise NotFound(name) from None
        except OSError as e:
            raise StorageError(f"could not delete {name}{NOTE_EXT}: {e}") from e
        logger.info("Deleted %s", path)
