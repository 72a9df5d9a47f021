import json
import logging
import unittest

import pytest

from commitai.grouping.group_model import Proposal
from commitai.grouping.normalizer import (
    EmptyBatch,
    InvalidInput,
    ProposalError,
    load_document,
    normalize_entry,
    normalize_proposals,
    require_proposals,
)


class TestLoadDocument(unittest.TestCase):
    def test_parses_json_text(self) -> None:
        self.assertEqual(load_document('{"commits": []}'), {"commits": []})

    def test_parses_bytes(self) -> None:
        self.assertEqual(load_document(b'[{"message": "m", "files": ["a"]}]')[0]["message"], "m")

    def test_passes_parsed_values_through(self) -> None:
        data = [{"message": "m", "files": ["a"]}]
        self.assertIs(load_document(data), data)

    def test_unwraps_code_fence(self) -> None:
        text = '```json\n{"message": "m", "files": ["a"]}\n```'
        self.assertEqual(load_document(text)["files"], ["a"])

    def test_malformed_json_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInput):
            load_document("{not json")

    def test_empty_text_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInput):
            load_document("   ")

    def test_scalar_document_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInput):
            load_document("42")
        with self.assertRaises(InvalidInput):
            load_document('"just a string"')

    def test_invalid_input_is_a_proposal_error(self) -> None:
        self.assertTrue(issubclass(InvalidInput, ProposalError))
        self.assertTrue(issubclass(EmptyBatch, ProposalError))


class TestNormalizeProposals(unittest.TestCase):
    def test_wrapped_list(self) -> None:
        raw = {"commits": [{"message": "a", "files": ["x"]}, {"message": "b", "files": ["y"]}]}
        self.assertEqual(
            normalize_proposals(raw),
            [Proposal(files=("x",), messages=("a",)), Proposal(files=("y",), messages=("b",))],
        )

    def test_bare_list(self) -> None:
        raw = json.dumps([{"message": "a", "files": ["x"]}])
        self.assertEqual(normalize_proposals(raw), [Proposal(files=("x",), messages=("a",))])

    def test_single_object(self) -> None:
        raw = {"message": "a", "files": ["x", "y"]}
        self.assertEqual(normalize_proposals(raw), [Proposal(files=("x", "y"), messages=("a",))])

    def test_commits_must_be_a_list(self) -> None:
        with self.assertRaises(InvalidInput):
            normalize_proposals({"commits": {"message": "a", "files": ["x"]}})

    def test_messages_list_is_kept_in_order(self) -> None:
        raw = {"messages": ["first", "second"], "files": ["x"]}
        self.assertEqual(normalize_proposals(raw)[0].messages, ("first", "second"))

    def test_messages_take_precedence_over_message(self) -> None:
        raw = {"message": "single", "messages": ["one", "two"], "files": ["x"]}
        self.assertEqual(normalize_proposals(raw)[0].messages, ("one", "two"))

    def test_empty_messages_list_falls_back_to_message(self) -> None:
        raw = {"message": "single", "messages": [], "files": ["x"]}
        self.assertEqual(normalize_proposals(raw)[0].messages, ("single",))

    def test_duplicate_files_are_collapsed(self) -> None:
        raw = {"message": "a", "files": ["x", "y", "x"]}
        self.assertEqual(normalize_proposals(raw)[0].files, ("x", "y"))

    def test_single_file_string_is_accepted(self) -> None:
        raw = {"message": "a", "files": "x"}
        self.assertEqual(normalize_proposals(raw)[0].files, ("x",))

    def test_order_of_surviving_entries_is_preserved(self) -> None:
        raw = [
            {"message": "a", "files": ["x"]},
            {"files": ["dropped"]},
            {"message": "c", "files": ["z"]},
        ]
        self.assertEqual([p.messages[0] for p in normalize_proposals(raw)], ["a", "c"])

    def test_empty_commit_list_gives_no_proposals(self) -> None:
        self.assertEqual(normalize_proposals({"commits": []}), [])


def test_entry_without_message_is_dropped(caplog):
    with caplog.at_level(logging.WARNING, logger="commitai.grouping.normalizer"):
        assert normalize_entry({"files": ["x"]}, 3) is None
    assert "no message" in caplog.text


def test_entry_with_blank_message_is_dropped():
    assert normalize_entry({"message": "   ", "files": ["x"]}) is None


def test_entry_without_files_is_dropped(caplog):
    with caplog.at_level(logging.WARNING, logger="commitai.grouping.normalizer"):
        assert normalize_entry({"message": "m", "files": []}) is None
        assert normalize_entry({"message": "m"}) is None
    assert "no files specified" in caplog.text


def test_non_object_entry_is_dropped():
    assert normalize_proposals(["oops", {"message": "m", "files": ["a"]}]) == [
        Proposal(files=("a",), messages=("m",))
    ]


def test_blank_paths_are_ignored():
    assert normalize_entry({"message": "m", "files": ["", "  ", "a"]}).files == ("a",)


def test_paths_keep_surrounding_whitespace():
    entry = normalize_entry({"message": "  m  ", "files": [" lead.txt", "trail.txt ", "a"]})
    assert entry.files == (" lead.txt", "trail.txt ", "a")
    assert entry.messages == ("m",)


def test_require_proposals_raises_on_empty():
    with pytest.raises(EmptyBatch):
        require_proposals([])


def test_require_proposals_returns_list():
    proposals = (Proposal(files=("a",), messages=("m",)),)
    assert require_proposals(proposals) == list(proposals)


if __name__ == "__main__":
    unittest.main()
