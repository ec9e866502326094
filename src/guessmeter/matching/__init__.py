"""Matcher engine: every weak-pattern explanation of every password substring.

Each matcher runs independently over the same password; results may overlap
and are resolved later by :mod:`guessmeter.scoring`.
"""
from __future__ import annotations

from typing import Mapping, Sequence

from guessmeter import scoring
from guessmeter.data import USER_INPUTS_DICTIONARY, RankedDictionary, frequency_dictionaries
from guessmeter.matching.date import date_match
from guessmeter.matching.dictionary import (
    dictionary_match,
    l33t_match,
    reverse_dictionary_match,
)
from guessmeter.matching.regex import regex_match
from guessmeter.matching.repeat import repeat_match
from guessmeter.matching.sequence import sequence_match
from guessmeter.matching.spatial import spatial_match
from guessmeter.patterns import Match

__all__ = [
    "date_match",
    "dictionary_match",
    "l33t_match",
    "match_with_dictionaries",
    "omnimatch",
    "regex_match",
    "repeat_match",
    "reverse_dictionary_match",
    "sequence_match",
    "spatial_match",
    "user_inputs_dictionary",
]


def user_inputs_dictionary(user_inputs: Mapping[str, int]) -> RankedDictionary:
    """Wrap already-sanitized ``{lowercased input: rank}`` pairs as a dictionary."""

    return RankedDictionary(
        name=USER_INPUTS_DICTIONARY,
        ranks=dict(user_inputs),
        longest=max((len(word) for word in user_inputs), default=0),
    )


def match_with_dictionaries(password: str, dictionaries: Sequence[RankedDictionary]) -> list[Match]:
    matches: list[Match] = []
    matches.extend(dictionary_match(password, dictionaries))
    matches.extend(reverse_dictionary_match(password, dictionaries))
    matches.extend(l33t_match(password, dictionaries))
    matches.extend(spatial_match(password))
    matches.extend(repeat_match(password, dictionaries))
    matches.extend(sequence_match(password))
    matches.extend(regex_match(password))
    matches.extend(date_match(password, scoring.REFERENCE_YEAR))
    return sorted(matches, key=lambda m: (m.i, m.j))


def omnimatch(password: str, user_inputs: Mapping[str, int] | None = None) -> list[Match]:
    """Run every matcher over ``password``.

    ``user_inputs`` maps lower-cased user-supplied strings (name, e-mail...) to
    their 1-based rank and is matched as one more dictionary.
    """
    dictionaries: list[RankedDictionary] = list(frequency_dictionaries())
    if user_inputs:
        dictionaries.append(user_inputs_dictionary(user_inputs))
    return match_with_dictionaries(password, dictionaries)
