"""Calendar date matcher, with and without separators."""
from __future__ import annotations

import re
from typing import Sequence

from guessmeter.patterns import DatePattern, Match

DATE_MAX_YEAR = 2050
DATE_MIN_YEAR = 1000

# Candidate (k, l) cut points for digit-only dates of each length: the token
# is read as token[:k], token[k:l], token[l:].
DATE_SPLITS: dict[int, tuple[tuple[int, int], ...]] = {
    4: ((1, 2), (2, 3)),  # 1 1 91, 91 1 1
    5: ((1, 3), (2, 3)),  # 1 11 91, 11 1 91
    6: ((1, 2), (2, 4), (4, 5)),  # 1 1 1991, 11 11 91, 1991 1 1
    7: ((1, 3), (2, 3), (4, 5), (4, 6)),  # 1 11 1991, 11 1 1991, 1991 1 11, 1991 11 1
    8: ((2, 4), (4, 6)),  # 11 11 1991, 1991 11 11
}

_MAYBE_DATE_NO_SEPARATOR = re.compile(r"[0-9]{4,8}")
_MAYBE_DATE_WITH_SEPARATOR = re.compile(r"([0-9]{1,4})([\s/\\_.-])([0-9]{1,2})\2([0-9]{1,4})")


def two_to_four_digit_year(year: int) -> int:
    if year > 99:
        return year
    if year > 50:
        # 87 -> 1987
        return year + 1900
    # 15 -> 2015
    return year + 2000


def map_ints_to_dm(ints: Sequence[int]) -> tuple[int, int] | None:
    """Return ``(day, month)`` reading ``ints`` either way round, if plausible."""

    for day, month in (tuple(ints), tuple(reversed(ints))):
        if 1 <= day <= 31 and 1 <= month <= 12:
            return day, month
    return None


def map_ints_to_dmy(ints: Sequence[int]) -> tuple[int, int, int] | None:
    """Return ``(day, month, year)`` for a plausible integer triple, else None.

    Rejected outright: a middle int over 31 or under 1, any int over the max
    year or between 100 and the min year, two ints over 31, two ints under 1,
    and three ints over 12.
    """
    if ints[1] > 31 or ints[1] <= 0:
        return None
    over_12 = over_31 = under_1 = 0
    for value in ints:
        if 99 < value < DATE_MIN_YEAR or value > DATE_MAX_YEAR:
            return None
        if value > 31:
            over_31 += 1
        if value > 12:
            over_12 += 1
        if value <= 0:
            under_1 += 1
    if over_31 >= 2 or over_12 == 3 or under_1 >= 2:
        return None

    # year last, then year first
    possible_year_splits = ((ints[2], ints[0:2]), (ints[0], ints[1:3]))
    for year, rest in possible_year_splits:
        if DATE_MIN_YEAR <= year <= DATE_MAX_YEAR:
            dm = map_ints_to_dm(rest)
            if dm is None:
                # a four-digit year whose remainder is not a day and month
                return None
            return dm[0], dm[1], year

    # no four-digit year: two-digit years are the most flexible part
    for year, rest in possible_year_splits:
        dm = map_ints_to_dm(rest)
        if dm is not None:
            return dm[0], dm[1], two_to_four_digit_year(year)
    return None


def date_match(password: str, reference_year: int) -> list[Match]:
    """Find every plausible date substring.

    Digit-only candidates with several readings keep the one whose year is
    closest to ``reference_year``. Date matches that sit strictly inside
    another date match are dropped: '2015_06_04' would otherwise also yield
    '15_06_04', '5_06_04' and so on.
    """
    matches: list[Match] = []
    length = len(password)

    # without separators: length 4 '1191' up to 8 '11111991'
    for i in range(length - 3):
        for j in range(i + 3, i + 8):
            if j >= length:
                break
            token = password[i : j + 1]
            if not _MAYBE_DATE_NO_SEPARATOR.fullmatch(token):
                continue
            candidates = []
            for k, l in DATE_SPLITS[len(token)]:
                dmy = map_ints_to_dmy((int(token[:k]), int(token[k:l]), int(token[l:])))
                if dmy is not None:
                    candidates.append(dmy)
            if not candidates:
                continue
            day, month, year = min(candidates, key=lambda c: abs(c[2] - reference_year))
            matches.append(
                Match(
                    i=i,
                    j=j,
                    token=token,
                    pattern=DatePattern(separator="", year=year, month=month, day=day),
                )
            )

    # with separators: length 6 '1/1/91' up to 10 '11/11/1991'
    for i in range(length - 5):
        for j in range(i + 5, i + 10):
            if j >= length:
                break
            token = password[i : j + 1]
            rx_match = _MAYBE_DATE_WITH_SEPARATOR.fullmatch(token)
            if rx_match is None:
                continue
            dmy = map_ints_to_dmy(
                (int(rx_match.group(1)), int(rx_match.group(3)), int(rx_match.group(4)))
            )
            if dmy is None:
                continue
            day, month, year = dmy
            matches.append(
                Match(
                    i=i,
                    j=j,
                    token=token,
                    pattern=DatePattern(
                        separator=rx_match.group(2), year=year, month=month, day=day
                    ),
                )
            )

    filtered = [
        match
        for match in matches
        if not any(
            other is not match and other.i <= match.i and other.j >= match.j
            for other in matches
        )
    ]
    return sorted(filtered, key=lambda m: (m.i, m.j))
