"""Guess estimation per match and the minimum-guesses match sequence search."""
from __future__ import annotations

import datetime
import math
import re
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, cast

from guessmeter.data import layout_stats
from guessmeter.errors import InvalidMatchError
from guessmeter.patterns import (
    BruteforcePattern,
    DatePattern,
    DictionaryPattern,
    Match,
    RegexPattern,
    RepeatPattern,
    SequencePattern,
    SpatialPattern,
)

BRUTEFORCE_CARDINALITY = 10
MIN_GUESSES_BEFORE_GROWING_SEQUENCE = 10000
MIN_SUBMATCH_GUESSES_SINGLE_CHAR = 10
MIN_SUBMATCH_GUESSES_MULTI_CHAR = 50
MIN_YEAR_SPACE = 20
REFERENCE_YEAR = datetime.date.today().year

MAX_GUESSES = 2**64 - 1
_FLOAT_MAX = sys.float_info.max

_CHAR_CLASS_BASES = {
    "alpha_lower": 26,
    "alpha_upper": 26,
    "alpha": 52,
    "alphanumeric": 62,
    "digits": 10,
    "symbols": 33,
}

START_UPPER = re.compile(r"^[A-Z][^A-Z]+$")
END_UPPER = re.compile(r"^[^A-Z]+[A-Z]$")
ALL_UPPER = re.compile(r"^[^a-z]+$")
ALL_LOWER = re.compile(r"^[^A-Z]+$")
_UPPER_RX = re.compile(r"[A-Z]")
_LOWER_RX = re.compile(r"[a-z]")


@dataclass(frozen=True)
class GuessCalculation:
    guesses: int
    guesses_log10: float
    sequence: list[Match]


def _clamp(value: float) -> float:
    return value if value < _FLOAT_MAX else _FLOAT_MAX


def _power(base: float, exponent: int) -> float:
    if base > 1 and exponent * math.log10(base) >= sys.float_info.max_10_exp:
        return _FLOAT_MAX
    return float(base) ** exponent


def _factorial(n: int) -> float:
    if n > 170:
        return _FLOAT_MAX
    return float(math.factorial(n))


def saturate_guesses(value: float) -> int:
    """Convert a guess count to an unsigned 64-bit integer, saturating."""

    if value >= 2.0**64:
        return MAX_GUESSES
    return int(value)


def n_ck(n: int, k: int) -> int:
    if k < 0 or k > n:
        return 0
    return math.comb(n, k)


# ------------------------------------------------------------------------------
# minimum guesses search
# ------------------------------------------------------------------------------


class _Optimal:
    """Sparse DP tables indexed ``[k][l]``: end position, then sequence length.

    ``m`` holds the last match of the best length-l sequence covering the
    k-prefix, ``pi`` the product of its guesses and ``g`` the objective.
    """

    def __init__(self, n: int) -> None:
        self.m: list[dict[int, Match]] = [{} for _ in range(n)]
        self.pi: list[dict[int, float]] = [{} for _ in range(n)]
        self.g: list[dict[int, float]] = [{} for _ in range(n)]


def most_guessable_match_sequence(
    password: str, matches: Iterable[Match], exclude_additive: bool = False
) -> GuessCalculation:
    """Pick the non-overlapping match sequence covering ``password`` that
    needs the fewest guesses.

    The objective for a length-l sequence is ``l! * prod(guesses) +
    MIN_GUESSES_BEFORE_GROWING_SEQUENCE ** (l - 1)``: the attacker has to try
    the l patterns in every order, and long sequences of cheap patterns get an
    additive penalty. Gaps are filled with bruteforce matches, which the DP
    considers at every position, so the result always covers the password.
    """
    n = len(password)
    if n == 0:
        return GuessCalculation(guesses=0, guesses_log10=-math.inf, sequence=[])

    matches_by_j: list[list[Match]] = [[] for _ in range(n)]
    for match in matches:
        if not 0 <= match.i <= match.j < n:
            raise InvalidMatchError(
                f"match [{match.i}, {match.j}] outside password of length {n}"
            )
        matches_by_j[match.j].append(match)
    for bucket in matches_by_j:
        bucket.sort(key=lambda m: m.i)

    optimal = _Optimal(n)

    def update(match: Match, l: int) -> None:
        k = match.j
        pi = estimate_guesses(match, n)
        if l > 1:
            # extend the best length-(l-1) sequence ending just before match
            pi = _clamp(pi * optimal.pi[match.i - 1][l - 1])
        g = _clamp(_factorial(l) * pi)
        if not exclude_additive:
            g = _clamp(g + _power(MIN_GUESSES_BEFORE_GROWING_SEQUENCE, l - 1))
        # a competing sequence with l or fewer matches that is at least as
        # good makes this one useless
        for competing_l, competing_g in optimal.g[k].items():
            if competing_l > l:
                continue
            if competing_g <= g:
                return
        optimal.g[k][l] = g
        optimal.m[k][l] = match
        optimal.pi[k][l] = pi

    def bruteforce_update(k: int) -> None:
        update(make_bruteforce_match(password, 0, k), 1)
        for i in range(1, k + 1):
            match = make_bruteforce_match(password, i, k)
            for l, last_match in list(optimal.m[i - 1].items()):
                # two adjacent bruteforce matches are never optimal: one
                # match spanning both costs the same with a shorter sequence
                if isinstance(last_match.pattern, BruteforcePattern):
                    continue
                update(match, l + 1)

    def unwind() -> list[Match]:
        k = n - 1
        best_l = 0
        best_g = math.inf
        for candidate_l in sorted(optimal.g[k]):
            candidate_g = optimal.g[k][candidate_l]
            if candidate_g < best_g:
                best_l, best_g = candidate_l, candidate_g
        sequence: list[Match] = []
        l = best_l
        while True:
            match = optimal.m[k][l]
            sequence.append(match)
            if match.i == 0:
                break
            k = match.i - 1
            l -= 1
        sequence.reverse()
        return sequence

    for k in range(n):
        for match in matches_by_j[k]:
            if match.i > 0:
                for l in list(optimal.m[match.i - 1]):
                    update(match, l + 1)
            else:
                update(match, 1)
        bruteforce_update(k)

    sequence = unwind()
    raw_guesses = optimal.g[n - 1][len(sequence)]
    return GuessCalculation(
        guesses=saturate_guesses(raw_guesses),
        guesses_log10=math.log10(raw_guesses),
        sequence=sequence,
    )


def make_bruteforce_match(password: str, i: int, j: int) -> Match:
    return Match(i=i, j=j, token=password[i : j + 1], pattern=BruteforcePattern())


# ------------------------------------------------------------------------------
# guess estimation, one function per pattern
# ------------------------------------------------------------------------------


def estimate_guesses(match: Match, password_length: int) -> float:
    """Guesses for ``match`` alone, cached on the match.

    Sub-matches are floored so that a few cheap fragments cannot make a long
    password look trivial.
    """
    if match.guesses is not None:
        return match.guesses
    min_guesses = 1
    if len(match.token) < password_length:
        if len(match.token) == 1:
            min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR
        else:
            min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR
    estimator = _ESTIMATORS[match.pattern.name]
    match.guesses = _clamp(max(float(estimator(match)), float(min_guesses)))
    return match.guesses


def bruteforce_guesses(match: Match) -> float:
    length = len(match.token)
    guesses = _power(BRUTEFORCE_CARDINALITY, length)
    # small bruteforce spans must still cost more than any submatch floor
    if length == 1:
        min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR + 1
    else:
        min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR + 1
    return max(guesses, min_guesses)


def repeat_guesses(match: Match) -> float:
    pattern = cast(RepeatPattern, match.pattern)
    return pattern.base_guesses * pattern.repeat_count


def sequence_guesses(match: Match) -> float:
    pattern = cast(SequencePattern, match.pattern)
    first_chr = match.token[0]
    # lower guesses for obvious starting points
    if first_chr in ("a", "A", "z", "Z", "0", "1", "9"):
        base_guesses = 4
    elif first_chr.isdigit():
        base_guesses = 10
    else:
        # upper case could get a higher base; 26 for both is more conservative
        base_guesses = 26
    if not pattern.ascending:
        base_guesses *= 2
    return base_guesses * len(match.token)


def regex_guesses(match: Match) -> float:
    pattern = cast(RegexPattern, match.pattern)
    if pattern.regex_name in _CHAR_CLASS_BASES:
        return _power(_CHAR_CLASS_BASES[pattern.regex_name], len(match.token))
    if pattern.regex_name == "recent_year":
        year_space = abs(int(pattern.regex_match) - REFERENCE_YEAR)
        return max(year_space, MIN_YEAR_SPACE)
    raise ValueError(f"unknown regex pattern: {pattern.regex_name}")


def date_guesses(match: Match) -> float:
    pattern = cast(DatePattern, match.pattern)
    year_space = max(abs(pattern.year - REFERENCE_YEAR), MIN_YEAR_SPACE)
    guesses = year_space * 365
    # separators add a small multiplier: /, -, ., _ and so on
    if pattern.separator:
        guesses *= 4
    return guesses


def spatial_guesses(match: Match) -> float:
    pattern = cast(SpatialPattern, match.pattern)
    stats = layout_stats(pattern.graph)
    starts = stats.starting_positions
    degree = stats.average_degree
    guesses = 0.0
    length = len(match.token)
    turns = pattern.turns
    # patterns of this length or shorter with this many turns or fewer
    for i in range(2, length + 1):
        possible_turns = min(turns, i - 1)
        for j in range(1, possible_turns + 1):
            guesses += n_ck(i - 1, j - 1) * starts * _power(degree, j)
    guesses = _clamp(guesses)
    # shifted keys: '%' instead of '5', 'A' instead of 'a'
    if pattern.shifted_count:
        shifted = pattern.shifted_count
        unshifted = length - shifted
        if shifted == 0 or unshifted == 0:
            guesses *= 2
        else:
            guesses *= sum(n_ck(shifted + unshifted, i) for i in range(1, min(shifted, unshifted) + 1))
    return _clamp(guesses)


def dictionary_guesses(match: Match) -> float:
    pattern = cast(DictionaryPattern, match.pattern)
    pattern.base_guesses = pattern.rank
    pattern.uppercase_variations = uppercase_variations(match)
    pattern.l33t_variations = l33t_variations(match)
    reversed_variations = 2 if pattern.reversed else 1
    return (
        float(pattern.base_guesses)
        * pattern.uppercase_variations
        * pattern.l33t_variations
        * reversed_variations
    )


def uppercase_variations(match: Match) -> int:
    """Number of capitalisations an attacker tries to reach this token.

    Capitalising the first letter is the most common scheme, so it only
    doubles the space; all-caps and last-letter caps are common enough to get
    the same treatment. Otherwise count the ways to pick up to min(U, L)
    letters to flip.
    """
    word = match.token
    if ALL_LOWER.match(word) or word.lower() == word:
        return 1
    for regex in (START_UPPER, END_UPPER, ALL_UPPER):
        if regex.match(word):
            return 2
    upper = len(_UPPER_RX.findall(word))
    lower = len(_LOWER_RX.findall(word))
    return sum(n_ck(upper + lower, i) for i in range(1, min(upper, lower) + 1))


def l33t_variations(match: Match) -> int:
    pattern = cast(DictionaryPattern, match.pattern)
    if not pattern.l33t:
        return 1
    variations = 1
    chars = match.token.lower()
    for subbed, unsubbed in pattern.sub.items():
        subbed_count = chars.count(subbed)
        unsubbed_count = chars.count(unsubbed)
        if subbed_count == 0 or unsubbed_count == 0:
            # fully substituted or fully unsubstituted: just twice the space
            variations *= 2
        else:
            shortest = min(unsubbed_count, subbed_count)
            variations *= sum(
                n_ck(unsubbed_count + subbed_count, i) for i in range(1, shortest + 1)
            )
    return variations


_ESTIMATORS: dict[str, Callable[[Match], float]] = {
    "bruteforce": bruteforce_guesses,
    "dictionary": dictionary_guesses,
    "spatial": spatial_guesses,
    "repeat": repeat_guesses,
    "sequence": sequence_guesses,
    "regex": regex_guesses,
    "date": date_guesses,
}
