import os
import tempfile
import unittest

from mdtodo.errors import StorageError, ValidationError
from mdtodo.models import Origin
from mdtodo.session import EditingSession
from mdtodo.storage import NoteStore


class RecordingStore(NoteStore):
    def __init__(self, directory: str):
        super().__init__(directory)
        self.writes = []

    def write(self, name: str, content: str) -> None:
        self.writes.append((name, content))
        super().write(name, content)


def type_text(session: EditingSession, text: str) -> None:
    for ch in text:
        session.edit("enter" if ch == "\n" else ch)


class TestEditingSession(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = RecordingStore(os.path.join(self._tmp.name, "todo"))

    def test_new_session_starts_empty_and_clean(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries", "")
        self.assertEqual(s.buffer, "")
        self.assertEqual(s.target_name, "groceries")
        self.assertFalse(s.dirty)

    def test_existing_session_holds_initial_content(self) -> None:
        s = EditingSession.begin(self.store, Origin.EXISTING, "groceries", "milk\neggs")
        self.assertEqual(s.buffer, "milk\neggs")
        self.assertIs(s.origin, Origin.EXISTING)
        self.assertFalse(s.dirty)

    def test_existing_name_is_kept_verbatim(self) -> None:
        s = EditingSession.begin(self.store, Origin.EXISTING, "v1.2 plan", "x")
        self.assertEqual(s.target_name, "v1.2 plan")

    def test_edit_marks_dirty_without_touching_storage(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries")
        type_text(s, "milk")
        self.assertTrue(s.dirty)
        self.assertEqual(s.buffer, "milk")
        self.assertEqual(self.store.writes, [])

    def test_save_writes_and_clears_dirty(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries")
        type_text(s, "milk, eggs")
        s.save()
        self.assertFalse(s.dirty)
        self.assertEqual(self.store.read("groceries"), "milk, eggs")
        # editing continues
        type_text(s, "!")
        self.assertEqual(s.buffer, "milk, eggs!")

    def test_save_is_idempotent(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries")
        type_text(s, "milk\neggs")
        s.save()
        first = self.store.read("groceries")
        s.save()
        self.assertEqual(self.store.read("groceries"), first)
        self.assertEqual(self.store.writes[0], self.store.writes[1])

    def test_save_without_name_is_rejected(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW)
        type_text(s, "orphan")
        with self.assertRaises(ValidationError):
            s.save()
        self.assertEqual(self.store.writes, [])

    def test_set_target_name_rules(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW)
        with self.assertRaises(ValidationError):
            s.set_target_name("   ")
        self.assertEqual(s.target_name, "")
        s.set_target_name("plan.md")
        self.assertEqual(s.target_name, "plan")
        with self.assertRaises(ValidationError):
            s.set_target_name("other")

    def test_discard_never_writes(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries")
        type_text(s, "lost")
        s.discard()
        self.assertTrue(s.closed)
        self.assertEqual(s.buffer, "")
        self.assertEqual(self.store.writes, [])
        with self.assertRaises(RuntimeError):
            s.edit("x")

    def test_save_and_exit(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "groceries")
        type_text(s, "milk")
        s.save_and_exit()
        self.assertTrue(s.closed)
        self.assertEqual(self.store.read("groceries"), "milk")

    def test_failed_save_and_exit_keeps_session_open(self) -> None:
        blocker = os.path.join(self._tmp.name, "file")
        with open(blocker, "w") as f:
            f.write("x")
        store = NoteStore(os.path.join(blocker, "todo"))
        s = EditingSession.begin(store, Origin.NEW, "groceries")
        type_text(s, "keep me")
        with self.assertRaises(StorageError):
            s.save_and_exit()
        self.assertFalse(s.closed)
        self.assertEqual(s.buffer, "keep me")
        self.assertTrue(s.dirty)

    def test_begin_applies_size(self) -> None:
        s = EditingSession.begin(self.store, Origin.NEW, "a", size=(40, 7))
        self.assertEqual((s.editor.width, s.editor.height), (40, 7))


if __name__ == "__main__":
    unittest.main()
