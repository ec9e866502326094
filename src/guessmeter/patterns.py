"""Match types: candidate weak-pattern explanations of a password substring."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass
class DictionaryPattern:
    matched_word: str
    rank: int
    dictionary_name: str
    reversed: bool = False
    l33t: bool = False
    sub: dict[str, str] = field(default_factory=dict)
    # Filled in by scoring, kept for display.
    base_guesses: int = 0
    uppercase_variations: int = 1
    l33t_variations: int = 1

    name: ClassVar[str] = "dictionary"

    @property
    def sub_display(self) -> str:
        return ", ".join(f"{subbed} -> {letter}" for subbed, letter in self.sub.items())


@dataclass
class SpatialPattern:
    graph: str
    turns: int
    shifted_count: int

    name: ClassVar[str] = "spatial"


@dataclass
class RepeatPattern:
    base_token: str
    base_guesses: float
    repeat_count: float
    base_matches: list[Match] = field(default_factory=list)

    name: ClassVar[str] = "repeat"


@dataclass
class SequencePattern:
    sequence_name: str
    sequence_space: int
    ascending: bool

    name: ClassVar[str] = "sequence"


@dataclass
class RegexPattern:
    regex_name: str
    regex_match: str

    name: ClassVar[str] = "regex"


@dataclass
class DatePattern:
    separator: str
    year: int
    month: int
    day: int

    name: ClassVar[str] = "date"


@dataclass
class BruteforcePattern:
    name: ClassVar[str] = "bruteforce"


Pattern = Union[
    DictionaryPattern,
    SpatialPattern,
    RepeatPattern,
    SequencePattern,
    RegexPattern,
    DatePattern,
    BruteforcePattern,
]

PATTERN_TYPES: dict[str, type] = {
    cls.name: cls
    for cls in (
        DictionaryPattern,
        SpatialPattern,
        RepeatPattern,
        SequencePattern,
        RegexPattern,
        DatePattern,
        BruteforcePattern,
    )
}


@dataclass
class Match:
    """Explains ``password[i:j + 1]``; ``i`` and ``j`` are inclusive code point offsets.

    ``guesses`` is populated lazily by :func:`guessmeter.scoring.estimate_guesses`.
    """

    i: int
    j: int
    token: str
    pattern: Pattern
    guesses: float | None = None

    @property
    def kind(self) -> str:
        pattern = self.pattern
        if isinstance(pattern, DictionaryPattern):
            if pattern.l33t:
                return "l33t"
            if pattern.reversed:
                return "reverse_dictionary"
        return pattern.name

    @property
    def guesses_log10(self) -> float:
        if self.guesses is None:
            raise ValueError("guesses have not been estimated for this match")
        return math.log10(self.guesses)
