"""JSON encoding of analysis results."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import fields
from datetime import timedelta
from typing import Any, get_origin, get_type_hints

from guessmeter.api import Entropy
from guessmeter.errors import EntropyDecodeError
from guessmeter.feedback import Feedback
from guessmeter.patterns import PATTERN_TYPES, Match, RepeatPattern
from guessmeter.time_estimates import CrackTimes

logger = logging.getLogger(__name__)

_MATCH_KEYS = ("i", "j", "token", "guesses")


def match_to_dict(match: Match) -> dict[str, Any]:
    """Flatten a match and its pattern details into one JSON object."""

    data: dict[str, Any] = {
        "pattern": match.pattern.name,
        "i": match.i,
        "j": match.j,
        "token": match.token,
        "guesses": match.guesses,
    }
    for field in fields(match.pattern):
        value = getattr(match.pattern, field.name)
        if field.name == "base_matches":
            value = [match_to_dict(base) for base in value]
        elif isinstance(value, dict):
            value = dict(value)
        data[field.name] = value
    return data


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_pattern_field(tag: str, name: str, value: Any, hint: Any) -> None:
    expected = get_origin(hint) or hint
    if expected is float:
        valid = _is_number(value)
    elif expected is int:
        valid = _is_int(value)
    elif expected is dict:
        valid = isinstance(value, dict) and all(
            isinstance(key, str) and isinstance(item, str) for key, item in value.items()
        )
    else:
        valid = isinstance(value, expected)
    if not valid:
        raise EntropyDecodeError(f"invalid {tag} field {name!r}: {value!r}")


def _check_contiguous(sequence: list[Match], length: int) -> None:
    """Matches must tile ``[0, length)`` in order."""

    position = 0
    for match in sequence:
        if match.i != position:
            raise EntropyDecodeError(f"match at {match.i} does not start at offset {position}")
        position = match.j + 1
    if position != length:
        raise EntropyDecodeError("match sequence does not cover the password")


def match_from_dict(data: dict[str, Any]) -> Match:
    if not isinstance(data, dict):
        raise EntropyDecodeError("match must be a JSON object")
    tag = data.get("pattern")
    pattern_cls = PATTERN_TYPES.get(tag) if isinstance(tag, str) else None
    if pattern_cls is None:
        raise EntropyDecodeError(f"unknown match pattern: {tag!r}")

    hints = get_type_hints(pattern_cls)
    pattern_kwargs: dict[str, Any] = {}
    for field in fields(pattern_cls):
        if field.name not in data:
            continue
        value = data[field.name]
        if field.name == "base_matches":
            if not isinstance(value, list):
                raise EntropyDecodeError("base_matches must be a list")
            value = [match_from_dict(base) for base in value]
        else:
            _check_pattern_field(tag, field.name, value, hints[field.name])
        pattern_kwargs[field.name] = value
    try:
        pattern = pattern_cls(**pattern_kwargs)
    except TypeError as exc:
        raise EntropyDecodeError(f"invalid {tag} match fields") from exc
    if isinstance(pattern, RepeatPattern) and pattern.base_matches:
        _check_contiguous(pattern.base_matches, len(pattern.base_token))

    i, j, token, guesses = (data.get(key) for key in _MATCH_KEYS)
    if not _is_int(i) or not _is_int(j) or not isinstance(token, str):
        raise EntropyDecodeError("match offsets and token are required")
    if not 0 <= i <= j or len(token) != j - i + 1:
        raise EntropyDecodeError(f"match offsets [{i}, {j}] do not fit token {token!r}")
    if guesses is not None and not _is_number(guesses):
        raise EntropyDecodeError("match guesses must be a number")
    return Match(i=i, j=j, token=token, pattern=pattern, guesses=guesses)


def entropy_to_dict(entropy: Entropy) -> dict[str, Any]:
    feedback = None
    if entropy.feedback is not None:
        feedback = {
            "warning": entropy.feedback.warning,
            "suggestions": list(entropy.feedback.suggestions),
        }
    return {
        "guesses": entropy.guesses,
        # JSON has no infinities; the empty password is the only non-finite case
        "guesses_log10": entropy.guesses_log10 if math.isfinite(entropy.guesses_log10) else None,
        "score": entropy.score,
        "crack_times_seconds": entropy.crack_times.as_dict(),
        "crack_times_display": entropy.crack_times_display(),
        "feedback": feedback,
        "sequence": [match_to_dict(match) for match in entropy.sequence],
        "calc_time_us": entropy.calc_time // timedelta(microseconds=1),
    }


def entropy_from_dict(data: dict[str, Any]) -> Entropy:
    """Rebuild an :class:`Entropy`; ``crack_times_display`` is recomputed, not read."""

    if not isinstance(data, dict):
        raise EntropyDecodeError("analysis result must be a JSON object")
    try:
        guesses = data["guesses"]
        guesses_log10 = data["guesses_log10"]
        score = data["score"]
        raw_crack_times = data["crack_times_seconds"]
        raw_feedback = data["feedback"]
        raw_sequence = data["sequence"]
        calc_time_us = data["calc_time_us"]
    except KeyError as exc:
        raise EntropyDecodeError(f"invalid analysis result: missing {exc}") from exc

    if not _is_int(guesses) or guesses < 0:
        raise EntropyDecodeError("guesses must be a non-negative integer")
    if guesses_log10 is None:
        guesses_log10 = -math.inf
    elif not _is_number(guesses_log10):
        raise EntropyDecodeError("guesses_log10 must be a number or null")
    if not _is_int(score) or not 0 <= score <= 4:
        raise EntropyDecodeError(f"score out of range: {score!r}")
    if not _is_int(calc_time_us) or calc_time_us < 0:
        raise EntropyDecodeError("calc_time_us must be a non-negative integer")

    if not isinstance(raw_crack_times, dict):
        raise EntropyDecodeError("crack_times_seconds must be a JSON object")
    for name, seconds in raw_crack_times.items():
        if not _is_number(seconds) or seconds < 0:
            raise EntropyDecodeError(f"crack time {name!r} must be a non-negative number")
    try:
        crack_times = CrackTimes(**raw_crack_times)
    except TypeError as exc:
        raise EntropyDecodeError(f"invalid crack times: {exc}") from exc

    feedback = None
    if raw_feedback is not None:
        if not isinstance(raw_feedback, dict):
            raise EntropyDecodeError("feedback must be a JSON object or null")
        warning = raw_feedback.get("warning")
        suggestions = raw_feedback.get("suggestions")
        if warning is not None and not isinstance(warning, str):
            raise EntropyDecodeError("feedback warning must be a string or null")
        if not isinstance(suggestions, list) or not all(isinstance(s, str) for s in suggestions):
            raise EntropyDecodeError("feedback suggestions must be a list of strings")
        feedback = Feedback(warning=warning, suggestions=tuple(suggestions))

    if not isinstance(raw_sequence, list):
        raise EntropyDecodeError("sequence must be a list")
    sequence = [match_from_dict(match) for match in raw_sequence]
    if sequence:
        _check_contiguous(sequence, sequence[-1].j + 1)

    return Entropy(
        guesses=guesses,
        guesses_log10=float(guesses_log10),
        crack_times=crack_times,
        score=score,
        feedback=feedback,
        sequence=sequence,
        calc_time=timedelta(microseconds=calc_time_us),
    )


def dumps(entropy: Entropy, *, indent: int | None = None) -> str:
    return json.dumps(entropy_to_dict(entropy), ensure_ascii=False, allow_nan=False, indent=indent)


def loads(text: str | bytes) -> Entropy:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:  # noqa: TRY003
        logger.debug("rejecting malformed analysis JSON: %s", exc)
        raise EntropyDecodeError("Invalid analysis JSON") from exc
    try:
        return entropy_from_dict(data)
    except EntropyDecodeError as exc:
        logger.debug("rejecting analysis JSON: %s", exc)
        raise
