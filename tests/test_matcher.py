from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazygrep.entries import NOT_UTF8_PLACEHOLDER, GrepMatch, MatchEntry
from lazygrep.search import CaseMode, PatternError, compile_pattern
from lazygrep.search.matcher import search_bytes, search_path


class CompilePatternTests(unittest.TestCase):
    def test_invalid_pattern_raises_pattern_error(self) -> None:
        with self.assertRaises(PatternError):
            compile_pattern("foo(")

    def test_case_modes(self) -> None:
        data = b"Foo\nfoo\n"
        sensitive = compile_pattern("foo", CaseMode.SENSITIVE)
        insensitive = compile_pattern("foo", CaseMode.INSENSITIVE)
        smart_lower = compile_pattern("foo", CaseMode.SMART)
        smart_upper = compile_pattern("Foo", CaseMode.SMART)

        self.assertEqual([m.line_number for m in search_bytes(sensitive, data)], [2])
        self.assertEqual([m.line_number for m in search_bytes(insensitive, data)], [1, 2])
        self.assertEqual([m.line_number for m in search_bytes(smart_lower, data)], [1, 2])
        self.assertEqual([m.line_number for m in search_bytes(smart_upper, data)], [1])

    def test_smart_case_ignores_escape_letters(self) -> None:
        matcher = compile_pattern(r"\Sfoo", CaseMode.SMART)

        self.assertEqual(len(search_bytes(matcher, b"xFOO\n")), 1)

    def test_word_regexp(self) -> None:
        matcher = compile_pattern("cat", word=True)

        found = search_bytes(matcher, b"concat\na cat here\ncats\n")

        self.assertEqual([m.line_number for m in found], [2])


class SearchBytesTests(unittest.TestCase):
    def test_line_numbers_and_byte_spans(self) -> None:
        matcher = compile_pattern("ab")

        found = search_bytes(matcher, b"xx\nab ab\r\nno\n")

        self.assertEqual(found, [GrepMatch(2, "ab ab", ((0, 2), (3, 5)))])

    def test_spans_are_byte_offsets_for_non_ascii_lines(self) -> None:
        matcher = compile_pattern("b")

        (found,) = search_bytes(matcher, "ąb".encode("utf-8"))

        self.assertEqual(found.spans, ((2, 3),))
        self.assertEqual(MatchEntry(found.line_number, found.text, found.spans).segments(), [("ą", False), ("b", True)])

    def test_binary_content_has_no_matches(self) -> None:
        matcher = compile_pattern("a")

        self.assertEqual(search_bytes(matcher, b"a\x00a\n"), [])

    def test_invalid_utf8_line_uses_placeholder(self) -> None:
        matcher = compile_pattern("abc")

        (found,) = search_bytes(matcher, b"abc\xff\n")

        self.assertEqual(found.text, NOT_UTF8_PLACEHOLDER)
        self.assertEqual(found.spans, ())

    def test_empty_matches_do_not_produce_spans(self) -> None:
        matcher = compile_pattern("x*")

        (found,) = search_bytes(matcher, b"abc\n")

        self.assertEqual(found.spans, ())

    def test_last_line_without_newline(self) -> None:
        matcher = compile_pattern("end")

        found = search_bytes(matcher, b"a\nthe end")

        self.assertEqual([m.line_number for m in found], [2])


class SearchPathTests(unittest.TestCase):
    def test_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "a.txt"
            path.write_text("one\ntwo\n", encoding="utf-8")

            found = search_path(compile_pattern("two"), path)

        self.assertEqual(found, [GrepMatch(2, "two", ((0, 3),))])

    def test_missing_file_raises_os_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                search_path(compile_pattern("x"), Path(tmp) / "missing.txt")


if __name__ == "__main__":
    unittest.main()
