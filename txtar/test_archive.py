from __future__ import annotations

import unittest

from txtar import archive as ar
from txtar.archive import Archive
from txtar.errors import (
    ArchiveEncodingError,
    ArchiveFileNotFoundError,
    DuplicateFileError,
    InvalidNameError,
    NilArchiveError,
)
from txtar.options import new, with_comment, with_file
from txtar.parser import parse


class ArchiveStoreTests(unittest.TestCase):
    def test_comment_is_trimmed(self):
        a = Archive()
        self.assertEqual(a.comment, "")
        a.comment = "\n\n  A comment\nover two lines  \n\n"
        self.assertEqual(a.comment, "A comment\nover two lines")

    def test_write_and_read(self):
        a = Archive()
        a.write("file1", "some stuff")
        self.assertEqual(a.read("file1"), "some stuff\n")

    def test_write_overwrites(self):
        a = Archive()
        a.write("file1", "some stuff")
        a.write("file1", "some more stuff")
        self.assertEqual(a.size(), 1)
        self.assertEqual(a.read("file1"), "some more stuff\n")

    def test_add_rejects_duplicate(self):
        a = Archive()
        a.add("file1", "some stuff")
        with self.assertRaises(DuplicateFileError):
            a.add(" file1 ", "different stuff")
        self.assertEqual(a.read("file1"), "some stuff\n")

    def test_whitespace_normalization(self):
        a = Archive()
        a.write("  name.txt  ", "  content  ")
        self.assertTrue(a.has("name.txt"))
        self.assertEqual(a.read("name.txt"), "content\n")
        self.assertEqual(a.read("  name.txt"), "content\n")

    def test_contents_end_in_one_newline(self):
        cases = [
            ("", ""),
            ("   \n\t\n", ""),
            ("x", "x\n"),
            ("x\n", "x\n"),
            ("x\n\n\n", "x\n"),
            ("\n  line one\nline two  \n", "line one\nline two\n"),
        ]
        a = Archive()
        for given, want in cases:
            with self.subTest(given=given):
                a.write("f", given)
                self.assertEqual(a.read("f"), want)

    def test_crlf_is_stored_as_lf(self):
        a = Archive()
        a.write("a.txt", "line1\r\nline2")
        a.add("b.txt", b"one\r\ntwo\r\n")
        a.comment = "first\r\n\r\nsecond\r\n"
        self.assertEqual(a.read("a.txt"), "line1\nline2\n")
        self.assertEqual(a.read("b.txt"), "one\ntwo\n")
        self.assertEqual(a.comment, "first\n\nsecond")
        out = a.serialize()
        self.assertNotIn("\r", out)
        self.assertEqual(parse(out), a)

    def test_crlf_through_options(self):
        a = new(with_comment("c\r\nc"), with_file("f", "x\r\ny\r\n"))
        self.assertNotIn("\r", a.serialize())
        self.assertEqual(parse(a.serialize()), a)

    def test_names_with_line_breaks_rejected(self):
        a = Archive()
        for bad in ("a\nb", "a\r\nb", "a\rb"):
            with self.subTest(name=bad):
                with self.assertRaises(InvalidNameError):
                    a.write(bad, "x")
                with self.assertRaises(InvalidNameError):
                    a.add(bad, "x")
                self.assertFalse(a.has(bad))
        # surrounding newlines are trimmed like any whitespace
        a.write("\nok\n", "x")
        self.assertTrue(a.has("ok"))
        self.assertEqual(a.size(), 1)

    def test_bytes_contents(self):
        a = Archive()
        a.write("b", b"bytes here\n")
        self.assertEqual(a.read("b"), "bytes here\n")
        with self.assertRaises(ArchiveEncodingError):
            a.write("bad", b"\xff\xfe")
        self.assertFalse(a.has("bad"))

    def test_read_missing(self):
        a = new(with_file("exists.txt", "some stuff here"))
        with self.assertRaises(ArchiveFileNotFoundError):
            a.read("missing.txt")
        self.assertIsNone(a.get("missing.txt"))
        self.assertEqual(a.get("missing.txt", "dflt"), "dflt")
        self.assertEqual(a.get("exists.txt"), "some stuff here\n")

    def test_read_empty_file(self):
        a = new(with_file("exists.txt", ""))
        self.assertTrue(a.has("exists.txt"))
        self.assertEqual(a.read("exists.txt"), "")

    def test_has(self):
        a = new(with_file("afile", "some stuff"))
        self.assertTrue(a.has("afile"))
        self.assertFalse(a.has("another"))
        self.assertIn("afile", a)
        self.assertNotIn("another", a)
        self.assertNotIn(42, a)

    def test_delete(self):
        a = Archive()
        a.delete("missing")
        self.assertFalse(a.has("missing"))
        a.write("present", "present stuff")
        self.assertTrue(a.has("present"))
        a.delete(" present ")
        self.assertFalse(a.has("present"))
        self.assertEqual(len(a), 0)

    def test_files_sorted(self):
        a = Archive()
        for name in ("zebra", "mango", "apple"):
            a.write(name, name + " stuff")
        self.assertEqual(a.names(), ["apple", "mango", "zebra"])
        self.assertEqual(list(a), ["apple", "mango", "zebra"])
        self.assertEqual(
            list(a.files()),
            [("apple", "apple stuff\n"), ("mango", "mango stuff\n"), ("zebra", "zebra stuff\n")],
        )
        self.assertEqual(dict(a.files())["mango"], "mango stuff\n")

    def test_files_survive_mutation_during_iteration(self):
        a = new(with_file("a", "1"), with_file("b", "2"), with_file("c", "3"))
        seen = []
        for name, contents in a.files():
            seen.append((name, contents))
            a.delete("c")
            a.write("b", "changed")
        self.assertEqual(seen, [("a", "1\n"), ("b", "2\n"), ("c", "3\n")])
        self.assertEqual(a.names(), ["a", "b"])


class SerializeTests(unittest.TestCase):
    def test_serialize(self):
        cases = [
            ("empty", [], ""),
            ("only comment", [with_comment("A comment")], "A comment\n"),
            (
                "only single file",
                [with_file("file1.txt", "file1 contents")],
                "-- file1.txt --\nfile1 contents\n",
            ),
            (
                "file and comment",
                [with_comment("A comment"), with_file("file1.txt", "file1 contents")],
                "A comment\n\n-- file1.txt --\nfile1 contents\n",
            ),
            (
                "empty file",
                [with_file("empty", ""), with_file("full", "x")],
                "-- empty --\n-- full --\nx\n",
            ),
            (
                "multiple files",
                [
                    with_comment("A slightly longer comment\n\nspanning several\nlines\n"),
                    with_file("afile.txt", "file1 contents"),
                    with_file("bfile.txt", "file2 contents"),
                    with_file("dir/file3.txt", "dir/file3 contents"),
                    with_file("cfile.txt", "file4 contents"),
                    with_file("file.txt", "file contents"),
                ],
                (
                    "A slightly longer comment\n"
                    "\n"
                    "spanning several\n"
                    "lines\n"
                    "\n"
                    "-- afile.txt --\n"
                    "file1 contents\n"
                    "-- bfile.txt --\n"
                    "file2 contents\n"
                    "-- cfile.txt --\n"
                    "file4 contents\n"
                    "-- dir/file3.txt --\n"
                    "dir/file3 contents\n"
                    "-- file.txt --\n"
                    "file contents\n"
                ),
            ),
        ]
        for name, options, want in cases:
            with self.subTest(name=name):
                a = new(*options)
                self.assertEqual(a.serialize(), want)
                self.assertEqual(str(a), want)

    def test_order_ignores_insertion(self):
        a = Archive()
        a.write("zebra", "z")
        a.write("apple", "a")
        out = a.serialize()
        self.assertLess(out.index("-- apple --"), out.index("-- zebra --"))


class EqualTests(unittest.TestCase):
    def test_equal(self):
        base = [with_comment("A comment"), with_file("file1", "file1 contents"), with_file("file2", "file2 contents")]
        cases = [
            ("empty", [], [], True),
            ("this comment", [with_comment("This one")], [], False),
            ("that comment", [], [with_comment("That one")], False),
            ("different comment", [with_comment("This one")], [with_comment("That one")], False),
            ("that empty", base, [], False),
            ("different len", base, base[:2], False),
            (
                "different filenames",
                [with_file("thisfile1", "x"), with_file("file2", "y")],
                [with_file("thatfile1", "x"), with_file("file2", "y")],
                False,
            ),
            (
                "different contents",
                [with_file("file1", "this file1 contents")],
                [with_file("file1", "that file1 contents")],
                False,
            ),
            ("equal", base, list(reversed(base)), True),
            ("normalized equal", [with_file(" f ", "x")], [with_file("f", "  x\n\n")], True),
        ]
        for name, this_opts, that_opts, want in cases:
            with self.subTest(name=name):
                this = new(*this_opts)
                that = new(*that_opts)
                self.assertEqual(ar.equal(this, that), want)
                self.assertEqual(this == that, want)

    def test_equal_none(self):
        self.assertTrue(ar.equal(None, None))
        self.assertFalse(ar.equal(None, Archive()))
        self.assertFalse(ar.equal(Archive(), None))
        self.assertTrue(ar.equal(Archive(), Archive()))
        self.assertNotEqual(Archive(), None)


class NoneSafetyTests(unittest.TestCase):
    def test_accessors_on_missing_archive(self):
        self.assertEqual(ar.comment(None), "")
        self.assertFalse(ar.has(None, "file"))
        self.assertEqual(ar.read(None, "file"), ("", False))
        self.assertEqual(ar.size(None), 0)
        self.assertEqual(list(ar.files(None)), [])
        self.assertEqual(ar.serialize(None), "")
        ar.delete(None, "file")

    def test_mutators_on_missing_archive(self):
        with self.assertRaises(NilArchiveError):
            ar.write(None, "file", "stuff here")
        with self.assertRaises(NilArchiveError):
            ar.add(None, "file", "stuff here")

    def test_helpers_on_present_archive(self):
        a = Archive()
        ar.write(a, "f", "one")
        ar.write(a, "f", "two")
        with self.assertRaises(DuplicateFileError):
            ar.add(a, "f", "three")
        self.assertEqual(ar.read(a, "f"), ("two\n", True))
        self.assertEqual(ar.read(a, "missing"), ("", False))
        self.assertEqual(ar.size(a), 1)
        ar.delete(a, "f")
        self.assertFalse(ar.has(a, "f"))


if __name__ == "__main__":
    unittest.main()
