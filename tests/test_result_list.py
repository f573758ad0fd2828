"""Behavior tests for the flat header/match result list.

Covers navigation clamping, removal reflow, selection resolution and the
counter invariant between total, filtered and live matches.
"""

from __future__ import annotations

import unittest
from pathlib import Path

from lazygrep.entries import FileEntry, GrepMatch, HeaderEntry, MatchEntry
from lazygrep.result_list import ResultList


def file_entry(name: str, *lines: int) -> FileEntry:
    return FileEntry(Path(name), tuple(GrepMatch(line, f"line {line}") for line in lines))


def sample_list() -> ResultList:
    results = ResultList()
    results.add_entry(file_entry("a.txt", 1, 2))
    results.add_entry(file_entry("b.txt", 1))
    return results


def three_files() -> ResultList:
    results = ResultList()
    results.add_entry(file_entry("a.txt", 1, 2))
    results.add_entry(file_entry("b.txt", 3, 4, 5))
    results.add_entry(file_entry("c.txt", 6))
    return results


class ResultListScenarioTests(unittest.TestCase):
    def test_ingest_two_files_builds_flat_sequence(self) -> None:
        results = sample_list()

        self.assertEqual(
            results.entries,
            [
                HeaderEntry(Path("a.txt")),
                MatchEntry(1, "line 1"),
                MatchEntry(2, "line 2"),
                HeaderEntry(Path("b.txt")),
                MatchEntry(1, "line 1"),
            ],
        )
        self.assertEqual(results.selected_index, 1)

    def test_file_and_boundary_jumps(self) -> None:
        results = sample_list()

        results.next_file()
        self.assertEqual(results.selected_index, 4)
        results.top()
        self.assertEqual(results.selected_index, 1)
        results.bottom()
        self.assertEqual(results.selected_index, 4)
        results.top()
        self.assertEqual(results.selected_index, 1)

    def test_remove_current_file_at_first_match(self) -> None:
        results = sample_list()

        results.remove_current_file()

        self.assertEqual(results.entries, [HeaderEntry(Path("b.txt")), MatchEntry(1, "line 1")])
        self.assertEqual(results.selected_index, 1)
        self.assertEqual(results.get_filtered_matches_count(), 2)


class ResultListNavigationTests(unittest.TestCase):
    def test_empty_list_is_noop_everywhere(self) -> None:
        results = ResultList()
        for action in (
            results.next_match,
            results.previous_match,
            results.next_file,
            results.previous_file,
            results.top,
            results.bottom,
            results.remove_current_entry,
            results.remove_current_file,
        ):
            action()

        self.assertIsNone(results.selected_index)
        self.assertIsNone(results.get_selected_entry())
        self.assertEqual(results.get_current_match_index(), 0)
        self.assertEqual(results.get_current_number_of_matches(), 0)
        self.assertEqual(results.get_total_number_of_matches(), 0)
        self.assertEqual(results.get_total_number_of_file_entries(), 0)
        self.assertEqual(results.get_filtered_matches_count(), 0)

    def test_next_match_skips_headers_and_clamps_at_end(self) -> None:
        results = sample_list()

        results.next_match()
        self.assertEqual(results.selected_index, 2)
        results.next_match()
        self.assertEqual(results.selected_index, 4)
        results.next_match()
        self.assertEqual(results.selected_index, 4)

    def test_previous_match_skips_headers_and_clamps_at_start(self) -> None:
        results = sample_list()
        results.bottom()

        results.previous_match()
        self.assertEqual(results.selected_index, 2)
        results.previous_match()
        self.assertEqual(results.selected_index, 1)
        results.previous_match()
        self.assertEqual(results.selected_index, 1)

    def test_next_then_previous_returns_to_origin(self) -> None:
        results = three_files()
        match_indices = [i for i, e in enumerate(results.entries) if isinstance(e, MatchEntry)]

        for origin in match_indices[:-1]:
            results.top()
            while results.selected_index != origin:
                results.next_match()
            results.next_match()
            results.previous_match()
            self.assertEqual(results.selected_index, origin)

    def test_next_file_stays_in_last_file(self) -> None:
        results = three_files()
        results.bottom()

        results.next_file()

        self.assertEqual(results.selected_index, len(results.entries) - 1)

    def test_previous_file_moves_to_first_match_of_previous_file(self) -> None:
        results = three_files()
        results.bottom()

        results.previous_file()
        self.assertEqual(results.selected_index, 4)
        results.previous_file()
        self.assertEqual(results.selected_index, 1)

    def test_previous_file_from_middle_of_file_goes_to_previous_file(self) -> None:
        results = three_files()
        results.next_file()
        results.next_match()
        self.assertEqual(results.selected_index, 5)

        results.previous_file()

        self.assertEqual(results.selected_index, 1)

    def test_previous_file_stays_in_first_file(self) -> None:
        results = three_files()
        results.next_match()

        results.previous_file()

        self.assertEqual(results.selected_index, 2)


class ResultListRemovalTests(unittest.TestCase):
    def test_remove_entry_keeps_index_pointing_at_next_match(self) -> None:
        results = three_files()
        results.next_file()
        self.assertEqual(results.selected_index, 4)

        results.remove_current_entry()

        self.assertEqual(results.selected_index, 4)
        self.assertEqual(results.selected_match(), MatchEntry(4, "line 4"))
        self.assertEqual(results.get_filtered_matches_count(), 1)

    def test_remove_last_match_of_file_with_siblings_selects_previous(self) -> None:
        results = three_files()
        results.next_file()
        results.next_match()
        results.next_match()
        self.assertEqual(results.selected_match(), MatchEntry(5, "line 5"))

        results.remove_current_entry()

        self.assertEqual(results.selected_match(), MatchEntry(4, "line 4"))
        self.assertNotIsInstance(results.entries[results.selected_index], HeaderEntry)

    def test_remove_match_before_header_selects_previous(self) -> None:
        results = sample_list()
        results.next_match()

        results.remove_current_entry()

        self.assertEqual(results.selected_match(), MatchEntry(1, "line 1"))
        self.assertEqual(results.selected_index, 1)

    def test_remove_final_entry_of_sequence_selects_previous(self) -> None:
        results = ResultList()
        results.add_entry(file_entry("a.txt", 1, 2))
        results.bottom()

        results.remove_current_entry()

        self.assertEqual(results.entries, [HeaderEntry(Path("a.txt")), MatchEntry(1, "line 1")])
        self.assertEqual(results.selected_index, 1)

    def test_removing_only_match_equals_removing_file(self) -> None:
        by_entry = three_files()
        by_file = three_files()
        for results in (by_entry, by_file):
            results.next_file()
            results.next_file()

        by_entry.remove_current_entry()
        by_file.remove_current_file()

        self.assertEqual(by_entry.entries, by_file.entries)
        self.assertEqual(by_entry.selected_index, by_file.selected_index)
        self.assertEqual(by_entry.get_filtered_matches_count(), by_file.get_filtered_matches_count())
        self.assertEqual(by_entry.get_total_number_of_matches(), by_file.get_total_number_of_matches())

    def test_remove_file_in_middle_selects_before_span(self) -> None:
        results = three_files()
        results.next_file()
        results.next_match()

        results.remove_current_file()

        self.assertEqual(
            [type(e).__name__ for e in results.entries],
            ["HeaderEntry", "MatchEntry", "MatchEntry", "HeaderEntry", "MatchEntry"],
        )
        self.assertEqual(results.selected_index, 2)
        self.assertEqual(results.get_filtered_matches_count(), 3)

    def test_removing_everything_clears_selection(self) -> None:
        results = sample_list()

        results.remove_current_file()
        results.remove_current_file()

        self.assertTrue(results.is_empty())
        self.assertIsNone(results.selected_index)
        self.assertIsNone(results.get_selected_entry())

    def test_repeated_deletions_never_land_on_header(self) -> None:
        results = three_files()
        results.next_match()
        while not results.is_empty():
            results.remove_current_entry()
            if results.selected_index is not None:
                self.assertIsInstance(results.entries[results.selected_index], MatchEntry)
            self.assertEqual(
                results.get_total_number_of_matches() - results.get_filtered_matches_count(),
                results.get_current_number_of_matches(),
            )
        self.assertEqual(results.get_filtered_matches_count(), 6)


class ResultListQueryTests(unittest.TestCase):
    def test_selected_entry_resolves_owning_header(self) -> None:
        results = three_files()

        for _ in range(6):
            selected = results.get_selected_entry()
            self.assertIsNotNone(selected)
            path, line = selected
            index = results.selected_index
            header = max(i for i in range(index) if isinstance(results.entries[i], HeaderEntry))
            self.assertEqual(results.entries[header].path, path)
            self.assertEqual(results.entries[index].line_number, line)
            results.next_match()

    def test_rank_and_counts(self) -> None:
        results = three_files()
        results.next_file()
        results.next_match()

        self.assertEqual(results.get_current_match_index(), 4)
        self.assertEqual(results.get_current_number_of_matches(), 6)
        self.assertEqual(results.get_total_number_of_matches(), 6)
        self.assertEqual(results.get_total_number_of_file_entries(), 3)

        results.remove_current_entry()

        self.assertEqual(results.get_current_number_of_matches(), 5)
        self.assertEqual(results.get_total_number_of_matches(), 6)
        self.assertEqual(results.get_total_number_of_file_entries(), 3)

    def test_add_entry_keeps_existing_selection(self) -> None:
        results = ResultList()
        results.add_entry(file_entry("a.txt", 1, 2))
        results.next_match()

        results.add_entry(file_entry("b.txt", 9))

        self.assertEqual(results.selected_index, 2)


if __name__ == "__main__":
    unittest.main()
