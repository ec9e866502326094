"""Back-of-the-envelope crack times and the 0-4 score."""
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Literal

Score = Literal[0, 1, 2, 3, 4]

# Score bands are on guesses, not time. Each threshold is widened by DELTA.
DELTA = 5
SCORE_THRESHOLDS: tuple[int, ...] = (10**3, 10**6, 10**8, 10**10)


@dataclass(frozen=True)
class AttackScenario:
    name: str
    guesses_per_second: float


ONLINE_THROTTLING = AttackScenario("online_throttling_100_per_hour", 100 / 3600)
ONLINE_NO_THROTTLING = AttackScenario("online_no_throttling_10_per_second", 10)
OFFLINE_SLOW_HASHING = AttackScenario("offline_slow_hashing_1e4_per_second", 1e4)
OFFLINE_FAST_HASHING = AttackScenario("offline_fast_hashing_1e10_per_second", 1e10)

SCENARIOS: tuple[AttackScenario, ...] = (
    ONLINE_THROTTLING,
    ONLINE_NO_THROTTLING,
    OFFLINE_SLOW_HASHING,
    OFFLINE_FAST_HASHING,
)


@dataclass(frozen=True)
class CrackTimes:
    """Seconds to exhaust the guesses under each attack scenario."""

    online_throttling_100_per_hour: float
    online_no_throttling_10_per_second: float
    offline_slow_hashing_1e4_per_second: float
    offline_fast_hashing_1e10_per_second: float

    @classmethod
    def from_guesses(cls, guesses: int) -> CrackTimes:
        return cls(
            **{scenario.name: guesses / scenario.guesses_per_second for scenario in SCENARIOS}
        )

    def as_dict(self) -> dict[str, float]:
        return {field.name: getattr(self, field.name) for field in fields(self)}

    def display(self) -> dict[str, str]:
        return {name: display_time(seconds) for name, seconds in self.as_dict().items()}


def guesses_to_score(guesses: int) -> Score:
    for score, threshold in enumerate(SCORE_THRESHOLDS):
        if guesses < threshold + DELTA:
            return score  # type: ignore[return-value]
    return 4


def estimate_attack_times(guesses: int) -> tuple[CrackTimes, Score]:
    return CrackTimes.from_guesses(guesses), guesses_to_score(guesses)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def display_time(seconds: float) -> str:
    minute = 60
    hour = minute * 60
    day = hour * 24
    month = day * 31
    year = month * 12
    century = year * 100

    if seconds < 1:
        return "less than a second"
    if seconds >= century:
        return "centuries"
    for unit_name, unit in (("year", year), ("month", month), ("day", day), ("hour", hour), ("minute", minute)):
        if seconds >= unit:
            count = _round_half_up(seconds / unit)
            break
    else:
        unit_name = "second"
        count = _round_half_up(seconds)
    return f"{count} {unit_name}" if count == 1 else f"{count} {unit_name}s"
