"""Matcher engine tests."""
from __future__ import annotations

import pytest
from zxcvbn.matching import L33T_TABLE as ZXCVBN_L33T_TABLE

from guessmeter.data import L33T_TABLE, adjacency_graphs, build_ranked_dictionary
from guessmeter.matching import omnimatch, user_inputs_dictionary
from guessmeter.matching.date import date_match, map_ints_to_dmy, two_to_four_digit_year
from guessmeter.matching.dictionary import (
    dictionary_match,
    enumerate_l33t_subs,
    l33t_match,
    relevant_l33t_subtable,
    reverse_dictionary_match,
)
from guessmeter.matching.regex import regex_match
from guessmeter.matching.repeat import repeat_match
from guessmeter.matching.sequence import sequence_match
from guessmeter.matching.spatial import spatial_match
from guessmeter.patterns import DatePattern, DictionaryPattern, Match


def _spans(matches: list[Match]) -> list[tuple[int, int, str]]:
    return [(m.i, m.j, m.token) for m in matches]


def test_dictionary_match_finds_overlapping_words() -> None:
    words = build_ranked_dictionary("d1", ["motherboard", "mother", "board", "abcd", "cdef"])
    matches = dictionary_match("motherboard", [words])
    assert _spans(matches) == [(0, 5, "mother"), (0, 10, "motherboard"), (6, 10, "board")]
    assert [m.pattern.rank for m in matches] == [2, 1, 3]


def test_dictionary_match_ignores_case_but_keeps_token() -> None:
    words = build_ranked_dictionary("d1", ["board"])
    (match,) = dictionary_match("BoaRd", [words])
    assert match.token == "BoaRd"
    assert match.pattern.matched_word == "board"
    assert match.pattern.dictionary_name == "d1"


def test_ranked_dictionary_keeps_last_duplicate() -> None:
    words = build_ranked_dictionary("d1", ["a", "b", "a"])
    assert words.rank("a") == 3
    assert words.longest == 1
    assert len(words) == 2


def test_reverse_dictionary_match() -> None:
    words = build_ranked_dictionary("d1", ["123", "321", "456", "654"])
    matches = reverse_dictionary_match("0123456789", [words])
    assert _spans(matches) == [(1, 3, "123"), (4, 6, "456")]
    assert [m.pattern.matched_word for m in matches] == ["321", "654"]
    assert all(m.pattern.reversed for m in matches)
    assert all(m.kind == "reverse_dictionary" for m in matches)


def test_l33t_table_comes_from_zxcvbn() -> None:
    assert set(L33T_TABLE) == set(ZXCVBN_L33T_TABLE)
    assert L33T_TABLE["a"] == ("4", "@")
    assert L33T_TABLE["c"] == ("(", "{", "[", "<")


def test_relevant_l33t_subtable() -> None:
    assert relevant_l33t_subtable("abcdefgh") == {}
    assert relevant_l33t_subtable("p4$$w0rd") == {"a": ["4"], "o": ["0"], "s": ["$"]}
    assert relevant_l33t_subtable("1") == {"i": ["1"], "l": ["1"]}


def test_enumerate_l33t_subs_splits_ambiguous_characters() -> None:
    assert enumerate_l33t_subs({}) == [{}]
    assert enumerate_l33t_subs({"a": ["@"], "b": ["8"]}) == [{"@": "a", "8": "b"}]
    assert enumerate_l33t_subs({"i": ["1"], "l": ["1"]}) == [{"1": "i"}, {"1": "l"}]
    assert len(enumerate_l33t_subs({"a": ["4", "@"], "c": ["(", "{", "[", "<"]})) == 8


def test_l33t_match() -> None:
    words = build_ranked_dictionary("passwords", ["password"])
    (match,) = l33t_match("p4ssw0rd", [words])
    assert (match.i, match.j, match.token) == (0, 7, "p4ssw0rd")
    assert match.pattern.l33t
    assert match.pattern.sub == {"4": "a", "0": "o"}
    assert match.pattern.sub_display == "4 -> a, 0 -> o"
    assert match.kind == "l33t"


def test_l33t_match_skips_single_characters_and_plain_words() -> None:
    words = build_ranked_dictionary("d1", ["a", "password"])
    assert l33t_match("4", [words]) == []
    assert l33t_match("password", [words]) == []


def test_spatial_match_straight_row() -> None:
    graphs = {"qwerty": adjacency_graphs()["qwerty"]}
    (match,) = spatial_match("qwerty", graphs)
    assert (match.i, match.j) == (0, 5)
    assert match.pattern.turns == 1
    assert match.pattern.shifted_count == 0


def test_spatial_match_counts_shifted_keys() -> None:
    graphs = {"qwerty": adjacency_graphs()["qwerty"]}
    (match,) = spatial_match("QWERTY", graphs)
    assert match.pattern.shifted_count == 6


def test_spatial_match_requires_three_keys() -> None:
    assert spatial_match("qw") == []
    graphs = {name for name in (m.pattern.graph for m in spatial_match("123"))}
    assert {"qwerty", "keypad"} <= graphs


@pytest.mark.parametrize(
    ("password", "name", "ascending"),
    [
        ("abcdef", "lower", True),
        ("ZYXW", "upper", False),
        ("9753", "digits", False),
        ("ab", "lower", True),
    ],
)
def test_sequence_match(password: str, name: str, ascending: bool) -> None:
    (match,) = sequence_match(password)
    assert (match.i, match.j) == (0, len(password) - 1)
    assert match.pattern.sequence_name == name
    assert match.pattern.ascending is ascending


def test_sequence_match_rejects_short_or_flat_runs() -> None:
    assert sequence_match("ac") == []
    assert sequence_match("aaa") == []
    assert sequence_match("a") == []
    assert sequence_match("agms") == []


def test_regex_match_recent_years() -> None:
    matches = [m for m in regex_match("1922abc2011") if m.pattern.regex_name == "recent_year"]
    assert _spans(matches) == [(0, 3, "1922"), (7, 10, "2011")]


def test_two_to_four_digit_year() -> None:
    assert two_to_four_digit_year(87) == 1987
    assert two_to_four_digit_year(15) == 2015
    assert two_to_four_digit_year(50) == 2050
    assert two_to_four_digit_year(1999) == 1999


def test_map_ints_to_dmy() -> None:
    assert map_ints_to_dmy((31, 12, 1999)) == (31, 12, 1999)
    assert map_ints_to_dmy((1999, 12, 31)) == (31, 12, 1999)
    assert map_ints_to_dmy((1, 32, 1999)) is None
    assert map_ints_to_dmy((1, 0, 1999)) is None
    assert map_ints_to_dmy((40, 40, 2)) is None
    assert map_ints_to_dmy((13, 13, 13)) is None


def test_date_match_with_separator() -> None:
    (match,) = date_match("13/12/1991", 2020)
    assert isinstance(match.pattern, DatePattern)
    assert (match.i, match.j) == (0, 9)
    assert match.pattern.separator == "/"
    assert (match.pattern.day, match.pattern.month, match.pattern.year) == (13, 12, 1991)


def test_date_match_without_separator_drops_submatches() -> None:
    (match,) = date_match("111991", 2020)
    assert (match.i, match.j) == (0, 5)
    assert match.pattern.separator == ""
    assert (match.pattern.day, match.pattern.month, match.pattern.year) == (1, 1, 1991)


def test_date_match_prefers_year_close_to_reference() -> None:
    (match,) = date_match("1119", 2020)
    assert match.pattern.year == 2019


def test_repeat_match_single_character() -> None:
    (match,) = repeat_match("aaa", [])
    assert match.pattern.base_token == "a"
    assert match.pattern.repeat_count == 3
    assert match.pattern.base_guesses == 12


def test_repeat_match_prefers_longer_greedy_unit() -> None:
    (match,) = repeat_match("aabaab", [])
    assert match.pattern.base_token == "aab"
    assert match.pattern.repeat_count == 2
    assert match.pattern.base_matches


def test_repeat_match_finds_every_run() -> None:
    matches = repeat_match("abcabc__xyzxyzxyz", [])
    assert [(m.token, m.pattern.base_token) for m in matches] == [
        ("abcabc", "abc"),
        ("__", "_"),
        ("xyzxyzxyz", "xyz"),
    ]


def test_user_inputs_dictionary() -> None:
    dictionary = user_inputs_dictionary({"alice": 1, "wonderland": 2})
    assert dictionary.name == "user_inputs"
    assert dictionary.longest == len("wonderland")


def test_omnimatch_sorted_and_includes_user_inputs() -> None:
    matches = omnimatch("zqxbrn2010", {"zqxbrn": 1})
    assert matches == sorted(matches, key=lambda m: (m.i, m.j))
    user_matches = [
        m
        for m in matches
        if isinstance(m.pattern, DictionaryPattern) and m.pattern.dictionary_name == "user_inputs"
    ]
    assert _spans(user_matches) == [(0, 5, "zqxbrn")]
    assert any(m.kind == "regex" and m.token == "2010" for m in matches)
