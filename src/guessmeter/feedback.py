"""Verbal feedback for weak passwords."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, cast

from guessmeter.patterns import (
    DatePattern,
    DictionaryPattern,
    Match,
    RegexPattern,
    RepeatPattern,
    SequencePattern,
    SpatialPattern,
)
from guessmeter.scoring import ALL_UPPER, START_UPPER

EXTRA_SUGGESTION = "Add another word or two. Uncommon words are better."

NAME_DICTIONARIES = ("surnames", "male_names", "female_names")


@dataclass(frozen=True)
class Feedback:
    warning: str | None
    suggestions: tuple[str, ...]


DEFAULT_FEEDBACK = Feedback(
    warning=None,
    suggestions=(
        "Use a few words, avoid common phrases",
        "No need for symbols, digits, or uppercase letters",
    ),
)


def get_feedback(score: int, sequence: Sequence[Match]) -> Feedback | None:
    """Feedback for a result; ``None`` once the score is good (3 or 4)."""

    if not sequence:
        return DEFAULT_FEEDBACK
    if score > 2:
        return None

    # tie feedback to the longest match for longer sequences
    longest_match = sequence[0]
    for match in sequence[1:]:
        if len(match.token) > len(longest_match.token):
            longest_match = match

    feedback = get_match_feedback(longest_match, len(sequence) == 1)
    if feedback is None:
        return Feedback(warning=None, suggestions=(EXTRA_SUGGESTION,))
    return Feedback(
        warning=feedback.warning,
        suggestions=(EXTRA_SUGGESTION, *feedback.suggestions),
    )


def get_match_feedback(match: Match, is_sole_match: bool) -> Feedback | None:
    pattern = match.pattern
    if isinstance(pattern, DictionaryPattern):
        return get_dictionary_match_feedback(match, is_sole_match)
    if isinstance(pattern, SpatialPattern):
        if pattern.turns == 1:
            warning = "Straight rows of keys are easy to guess"
        else:
            warning = "Short keyboard patterns are easy to guess"
        return Feedback(warning, ("Use a longer keyboard pattern with more turns",))
    if isinstance(pattern, RepeatPattern):
        if len(pattern.base_token) == 1:
            warning = 'Repeats like "aaa" are easy to guess'
        else:
            warning = 'Repeats like "abcabcabc" are only slightly harder to guess than "abc"'
        return Feedback(warning, ("Avoid repeated words and characters",))
    if isinstance(pattern, SequencePattern):
        return Feedback("Sequences like abc or 6543 are easy to guess", ("Avoid sequences",))
    if isinstance(pattern, RegexPattern):
        if pattern.regex_name == "recent_year":
            return Feedback(
                "Recent years are easy to guess",
                ("Avoid recent years", "Avoid years that are associated with you"),
            )
        return None
    if isinstance(pattern, DatePattern):
        return Feedback(
            "Dates are often easy to guess",
            ("Avoid dates and years that are associated with you",),
        )
    return None


def get_dictionary_match_feedback(match: Match, is_sole_match: bool) -> Feedback:
    pattern = cast(DictionaryPattern, match.pattern)

    warning: str | None = None
    if pattern.dictionary_name == "passwords":
        if is_sole_match and not pattern.l33t and not pattern.reversed:
            if pattern.rank <= 10:
                warning = "This is a top-10 common password"
            elif pattern.rank <= 100:
                warning = "This is a top-100 common password"
            else:
                warning = "This is a very common password"
        elif match.guesses is not None and match.guesses_log10 <= 4:
            warning = "This is similar to a commonly used password"
    elif pattern.dictionary_name == "english_wikipedia":
        if is_sole_match:
            warning = "A word by itself is easy to guess"
    elif pattern.dictionary_name in NAME_DICTIONARIES:
        if is_sole_match:
            warning = "Names and surnames by themselves are easy to guess"
        else:
            warning = "Common names and surnames are easy to guess"

    suggestions = []
    word = match.token
    if START_UPPER.match(word):
        suggestions.append("Capitalization doesn't help very much")
    elif ALL_UPPER.match(word) and word.lower() != word:
        suggestions.append("All-uppercase is almost as easy to guess as all-lowercase")
    if pattern.reversed and len(word) >= 4:
        suggestions.append("Reversed words aren't much harder to guess")
    if pattern.l33t:
        suggestions.append("Predictable substitutions like '@' instead of 'a' don't help very much")
    return Feedback(warning, tuple(suggestions))
