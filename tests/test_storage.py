import os
import tempfile
import unittest

from mdtodo.errors import NotFound, StorageError, ValidationError
from mdtodo.models import normalize_name
from mdtodo.storage import NoteStore, is_safe_name


class TestNoteStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dir = os.path.join(self._tmp.name, "todo")
        self.store = NoteStore(self.dir)

    def test_write_then_read_round_trips_exactly(self) -> None:
        for content in ["", "milk, eggs", "# Title\r\n\r\n- a\n- b\n", "ünïcödé ✓\n\ttabbed"]:
            self.store.write("groceries", content)
            self.assertEqual(self.store.read("groceries"), content)

    def test_load_returns_note_with_mtime(self) -> None:
        self.store.write("groceries", "milk")
        path = self.store.path_for("groceries")
        os.utime(path, (1_600_000_000, 1_600_000_000))
        note = self.store.load("groceries")
        self.assertEqual(note.name, "groceries")
        self.assertEqual(note.content, "milk")
        self.assertEqual(note.last_modified.timestamp(), 1_600_000_000)
        with self.assertRaises(NotFound):
            self.store.load("ghost")

    def test_list_creates_missing_directory(self) -> None:
        self.assertFalse(os.path.exists(self.dir))
        self.assertEqual(self.store.list(), [])
        self.assertTrue(os.path.isdir(self.dir))

    def test_list_only_markdown_files_sorted_by_name(self) -> None:
        self.store.write("zeta", "z")
        self.store.write("alpha", "a")
        with open(os.path.join(self.dir, "notes.txt"), "w") as f:
            f.write("ignored")
        os.mkdir(os.path.join(self.dir, "folder.md"))

        names = [n.name for n in self.store.list()]
        self.assertEqual(names, ["alpha", "zeta"])
        self.assertEqual(self.store.list()[0].filename, "alpha.md")

    def test_list_failure_returns_empty(self) -> None:
        os.makedirs(self._tmp.name, exist_ok=True)
        blocker = os.path.join(self._tmp.name, "not-a-dir")
        with open(blocker, "w") as f:
            f.write("x")
        self.assertEqual(NoteStore(blocker).list(), [])

    def test_write_overwrites_existing_note(self) -> None:
        self.store.write("groceries", "first")
        self.store.write("groceries", "second")
        self.assertEqual(self.store.read("groceries"), "second")
        self.assertEqual(len(self.store.list()), 1)

    def test_read_missing_note_is_not_found(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            self.store.read("nope")
        self.assertIn("file not found", str(ctx.exception))

    def test_delete_removes_from_list_and_read(self) -> None:
        self.store.write("groceries", "milk")
        self.store.write("chores", "dishes")
        self.store.delete("groceries")

        self.assertEqual([n.name for n in self.store.list()], ["chores"])
        with self.assertRaises(NotFound):
            self.store.read("groceries")

    def test_delete_missing_note_is_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.store.delete("ghost")

    def test_read_invalid_utf8_is_storage_error(self) -> None:
        os.makedirs(self.dir)
        with open(os.path.join(self.dir, "bin.md"), "wb") as f:
            f.write(b"\xff\xfe\x00bad")
        with self.assertRaises(StorageError):
            self.store.read("bin")

    def test_write_into_unwritable_location_is_storage_error(self) -> None:
        blocker = os.path.join(self._tmp.name, "file")
        with open(blocker, "w") as f:
            f.write("x")
        with self.assertRaises(StorageError):
            NoteStore(os.path.join(blocker, "todo")).write("a", "b")

    def test_unsafe_names_rejected(self) -> None:
        for name in ["", "../escape", "a/b", ".", "..", " padded "]:
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    self.store.path_for(name)

    def test_externally_created_names_are_usable(self) -> None:
        os.makedirs(self.dir)
        with open(os.path.join(self.dir, "v1.2 plan.md"), "w", encoding="utf-8") as f:
            f.write("outside")
        self.assertEqual([n.name for n in self.store.list()], ["v1.2 plan"])
        self.assertEqual(self.store.read("v1.2 plan"), "outside")


class TestNames(unittest.TestCase):
    def test_normalize_name(self) -> None:
        self.assertEqual(normalize_name("groceries"), "groceries")
        self.assertEqual(normalize_name("  groceries.md "), "groceries")
        self.assertEqual(normalize_name("a/b:c"), "abc")
        self.assertEqual(normalize_name("week 42_todo-list"), "week 42_todo-list")
        self.assertEqual(normalize_name("   "), "")
        self.assertEqual(normalize_name("///"), "")

    def test_is_safe_name(self) -> None:
        self.assertTrue(is_safe_name("groceries"))
        self.assertTrue(is_safe_name("v1.2 plan"))
        self.assertFalse(is_safe_name("a/b"))
        self.assertFalse(is_safe_name(""))


if __name__ == "__main__":
    unittest.main()
