"""Repeated-token matcher: aaa, abcabcabc."""
from __future__ import annotations

import re
from typing import Sequence

from guessmeter import scoring
from guessmeter.data import RankedDictionary
from guessmeter.patterns import Match, RepeatPattern

_GREEDY = re.compile(r"(.+)\1+", re.DOTALL)
_LAZY = re.compile(r"(.+?)\1+", re.DOTALL)


def repeat_match(password: str, dictionaries: Sequence[RankedDictionary]) -> list[Match]:
    """Find repeated tokens and cost the repeated unit by analysing it on its own.

    The greedy and lazy searches start at the same offset; whichever covers
    more wins. Greedy beats lazy for 'aabaab' (unit 'aab' rather than 'a').
    """
    from guessmeter.matching import match_with_dictionaries

    matches: list[Match] = []
    last_index = 0
    while last_index < len(password):
        greedy_match = _GREEDY.search(password, last_index)
        if greedy_match is None:
            break
        lazy_match = _LAZY.search(password, last_index)
        if len(greedy_match.group(0)) > len(lazy_match.group(0)):
            rx_match = greedy_match
            base_token = _LAZY.fullmatch(rx_match.group(0)).group(1)
        else:
            rx_match = lazy_match
            base_token = rx_match.group(1)
        token = rx_match.group(0)
        i, j = rx_match.start(), rx_match.end() - 1

        base_analysis = scoring.most_guessable_match_sequence(
            base_token, match_with_dictionaries(base_token, dictionaries)
        )
        matches.append(
            Match(
                i=i,
                j=j,
                token=token,
                pattern=RepeatPattern(
                    base_token=base_token,
                    base_guesses=float(base_analysis.guesses),
                    repeat_count=len(token) / len(base_token),
                    base_matches=base_analysis.sequence,
                ),
            )
        )
        last_index = j + 1
    return matches
