"""High-level API: analyse a password and assemble the public result."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable

from guessmeter.feedback import Feedback, get_feedback
from guessmeter.matching import omnimatch
from guessmeter.patterns import Match
from guessmeter.scoring import most_guessable_match_sequence
from guessmeter.time_estimates import CrackTimes, Score, estimate_attack_times

logger = logging.getLogger(__name__)

# Only this many characters are analysed; bounds the cost of hostile input.
MAX_PASSWORD_LENGTH = 100

Clock = Callable[[], float]


@dataclass(frozen=True)
class Entropy:
    guesses: int
    guesses_log10: float
    crack_times: CrackTimes
    # Anything below 3 should be considered too weak.
    score: Score
    # Set only when score <= 2.
    feedback: Feedback | None
    sequence: list[Match]
    calc_time: timedelta

    def crack_times_display(self) -> dict[str, str]:
        return self.crack_times.display()


def sanitize_user_inputs(user_inputs: Iterable[object]) -> dict[str, int]:
    """Lower-case user inputs and rank them 1..n in the order given."""

    return {str(value).lower(): rank for rank, value in enumerate(user_inputs, start=1)}


def analyze(
    password: str,
    user_inputs: Iterable[object] = (),
    *,
    clock: Clock = time.perf_counter,
) -> Entropy:
    """Estimate how many guesses an attacker needs for ``password``.

    ``user_inputs`` (name, e-mail, site name...) are matched as an extra
    dictionary. ``clock`` returns seconds and is only used to report
    ``calc_time``; swap it where ``time.perf_counter`` is unsuitable.
    """
    if not password:
        return Entropy(
            guesses=0,
            guesses_log10=-math.inf,
            crack_times=CrackTimes.from_guesses(0),
            score=0,
            feedback=None,
            sequence=[],
            calc_time=timedelta(0),
        )

    start = clock()
    if len(password) > MAX_PASSWORD_LENGTH:
        logger.debug(
            "password truncated from %d to %d characters", len(password), MAX_PASSWORD_LENGTH
        )
        password = password[:MAX_PASSWORD_LENGTH]

    sanitized_inputs = sanitize_user_inputs(user_inputs)
    matches = omnimatch(password, sanitized_inputs)
    result = most_guessable_match_sequence(password, matches)
    crack_times, score = estimate_attack_times(result.guesses)
    feedback = get_feedback(score, result.sequence)
    calc_time = timedelta(seconds=max(clock() - start, 0.0))
    logger.debug(
        "analysed %d characters: %d candidate matches, %d in sequence, score %d",
        len(password),
        len(matches),
        len(result.sequence),
        score,
    )

    return Entropy(
        guesses=result.guesses,
        guesses_log10=result.guesses_log10,
        crack_times=crack_times,
        score=score,
        feedback=feedback,
        sequence=result.sequence,
        calc_time=calc_time,
    )
