from __future__ import annotations

import pytest

from sqlbatch.batch import Batch, has_prefix_fold, normalize_continuations, scan, split
from sqlbatch.constants import MAX_REPEAT_COUNT


@pytest.mark.parametrize(
    "sql, expected",
    [
        (
            "use DB\ngo\nselect 1\ngo\nselect 2\n",
            ["use DB\n", "\nselect 1\n", "\nselect 2\n"],
        ),
        ("go\nuse DB go\n", ["\nuse DB go\n"]),
        (
            "select 'It''s go time'\ngo\nselect top 1 1",
            ["select 'It''s go time'\n", "\nselect top 1 1"],
        ),
        (
            "select 1 /* go */\ngo\nselect top 1 1",
            ["select 1 /* go */\n", "\nselect top 1 1"],
        ),
        (
            "select 1 -- go\ngo\nselect top 1 1",
            ["select 1 -- go\n", "\nselect top 1 1"],
        ),
        ('"0\'"', ['"0\'"']),
        ("0'", ["0'"]),
        ("--", ["--"]),
        ("GO", []),
        ("/*", ["/*"]),
        ("gO\x01\x00O550655490663051008\n", ["\n"]),
        (
            "select 1;\nGO  2\nselect 2;",
            ["select 1;\n", "select 1;\n", "\nselect 2;"],
        ),
        ("select 'hi\\\n-hello';", ["select 'hi-hello';"]),
        ("select 'hi\\\r\n-hello';", ["select 'hi-hello';"]),
        ("select 'hi\\\r-hello';", ["select 'hi-hello';"]),
        ("select 'hi\\\n\nhello';", ["select 'hi\nhello';"]),
    ],
)
def test_split_reference_scripts(sql, expected):
    assert split(sql, "go") == expected


def test_repeat_count_duplicates_previous_batch():
    assert split("A\nGO 2\nB", "GO") == ["A\n", "A\n", "\nB"]


def test_scan_keeps_repeat_count_unexpanded():
    assert scan("A\nGO 3\nB", "go") == [Batch("A\n", 3), Batch("\nB")]


@pytest.mark.parametrize("line", ["GO 0", "GO", "GO   ", "GO\t1", "GO x"])
def test_repeat_count_defaults_to_one(line):
    assert split(f"select 1\n{line}\nselect 2", "go") == ["select 1\n", "\nselect 2"]


def test_repeat_count_out_of_range_runs_once():
    sql = f"select 1\nGO {MAX_REPEAT_COUNT + 1}\n"
    assert scan(sql, "go") == [Batch("select 1\n"), Batch("\n")]


def test_repeat_count_with_thousands_of_digits_runs_once():
    sql = "select 1\nGO " + "9" * 5000 + "\n"
    assert split(sql, "go") == ["select 1\n", "\n"]


def test_repeat_count_leading_zeros():
    sql = "select 1\nGO " + "0" * 20 + "2\n"
    assert scan(sql, "go") == [Batch("select 1\n", 2), Batch("\n")]
    assert scan(f"a\nGO {MAX_REPEAT_COUNT}\n", "go")[0] == Batch("a\n", MAX_REPEAT_COUNT)


def test_repeat_count_followed_by_garbage():
    assert split("select 1\nGO 2 please\n", "go") == ["select 1\n", "select 1\n", "\n"]


def test_empty_separator_disables_splitting():
    assert split("GO", "") == ["GO"]
    assert split("a\ngo\nb\\\nc", "") == ["a\ngo\nb\\\nc"]
    assert split("", "") == []


def test_separator_not_found():
    assert split("GO", "SELECT") == ["GO"]
    assert split("", "go") == []


def test_separator_must_start_the_line():
    assert split("select 1\n  go\nselect 2", "go") == ["select 1\n  go\nselect 2"]
    assert split("select 1 go \n", "go") == ["select 1 go \n"]


def test_separator_must_end_on_word_boundary():
    sql = "select 1\ngoto label\ngo_on\nGOOD\n"
    assert split(sql, "go") == [sql]


@pytest.mark.parametrize("line", ["go;", "go--x", "go/* note */", "go("])
def test_separator_followed_by_punctuation_still_splits(line):
    assert split(f"a\n{line}\nb", "go") == ["a\n", "\nb"]


def test_separator_case_insensitive():
    assert split("a\nGo\nb\ngO\nc", "GO") == ["a\n", "\nb\n", "\nc"]


def test_separator_inside_multiline_string_is_text():
    sql = "select 'a\ngo\nb'\ngo\nselect 2"
    assert split(sql, "go") == ["select 'a\ngo\nb'\n", "\nselect 2"]


def test_separator_inside_multiline_block_comment_is_text():
    sql = "/* start\ngo\nend */\ngo\nselect 2"
    assert split(sql, "go") == ["/* start\ngo\nend */\n", "\nselect 2"]


def test_doubled_quote_stays_inside_literal():
    sql = "select 'x''\ngo\n'\ngo\n"
    assert split(sql, "go") == ["select 'x''\ngo\n'\n", "\n"]


def test_line_comment_ends_at_terminator():
    assert split("-- note\r\ngo\r\nselect 1", "go") == ["-- note\r\n", "\r\nselect 1"]


def test_carriage_return_only_line_endings():
    assert split("select 1\rgo\rselect 2", "go") == ["select 1\r", "\rselect 2"]


def test_unterminated_block_comment_swallows_rest():
    sql = "select 1 /* open\ngo\nselect 2"
    assert split(sql, "go") == [sql]


def test_continuation_joins_separator_onto_previous_line():
    assert split("select 1\\\ngo\nselect 2", "go") == ["select 1go\nselect 2"]


def test_batches_reconstruct_normalized_input():
    sql = "a\ngo\nb 'go'\nGO 3\nc -- go\ngo\n"
    bodies = [b.sql for b in scan(sql, "go")]
    assert "".join(bodies) == "a\n\nb 'go'\n\nc -- go\n\n"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a\\\nb", "ab"),
        ("a\\\r\nb", "ab"),
        ("a\\\rb", "ab"),
        ("a\\\n\nb", "a\nb"),
        ("a\\b\\", "a\\b\\"),
        ("no backslash\n", "no backslash\n"),
        ("\\\n", ""),
    ],
)
def test_normalize_continuations(raw, expected):
    assert normalize_continuations(raw) == expected


@pytest.mark.parametrize(
    "raw", ["x\\\\\n\ny", "\\\\\\\r\n\r\n\n", "a\\\r\\\n\nb", "\\\r\n\\\n"]
)
def test_normalize_continuations_is_idempotent(raw):
    once = normalize_continuations(raw)
    assert normalize_continuations(once) == once


@pytest.mark.parametrize(
    "s, prefix, expected",
    [
        ("h", "H", True),
        ("h", "K", False),
        ("go 5\n", "go", True),
        ("GO", "go", True),
        ("g", "go", False),
        ("anything", "", True),
        ("É", "é", False),
        ("1go", "1GO", True),
    ],
)
def test_has_prefix_fold(s, prefix, expected):
    assert has_prefix_fold(s, prefix) is expected
