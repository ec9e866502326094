"""Constant-step character runs: abcd, 7531, ZYX."""
from __future__ import annotations

import re

from guessmeter.patterns import Match, SequencePattern

MAX_DELTA = 5

_LOWER_RX = re.compile(r"[a-z]+")
_UPPER_RX = re.compile(r"[A-Z]+")
_DIGITS_RX = re.compile(r"[0-9]+")


def _classify(token: str) -> tuple[str, int]:
    if _LOWER_RX.fullmatch(token):
        return "lower", 26
    if _UPPER_RX.fullmatch(token):
        return "upper", 26
    if _DIGITS_RX.fullmatch(token):
        return "digits", 10
    # conservatively stick with the roman alphabet size
    return "unicode", 26


def sequence_match(password: str) -> list[Match]:
    """Split the password wherever the code point delta changes and keep the
    runs that look like a sequence.

    Two-character runs only count when the step is exactly one ('ab', '21').
    """
    if len(password) <= 1:
        return []

    result: list[Match] = []

    def update(i: int, j: int, delta: int) -> None:
        if j - i > 1 or abs(delta) == 1:
            if 0 < abs(delta) <= MAX_DELTA:
                token = password[i : j + 1]
                sequence_name, sequence_space = _classify(token)
                result.append(
                    Match(
                        i=i,
                        j=j,
                        token=token,
                        pattern=SequencePattern(
                            sequence_name=sequence_name,
                            sequence_space=sequence_space,
                            ascending=delta > 0,
                        ),
                    )
                )

    i = 0
    last_delta: int | None = None
    for k in range(1, len(password)):
        delta = ord(password[k]) - ord(password[k - 1])
        if last_delta is None:
            last_delta = delta
        if delta == last_delta:
            continue
        j = k - 1
        update(i, j, last_delta)
        i = j
        last_delta = delta
    update(i, len(password) - 1, last_delta)
    return result
