"""Reference tables shared by every analysis.

Word frequency lists and keyboard adjacency graphs are the ones distributed
with the ``zxcvbn`` package. They are turned into lookup structures once, on
first use, and are never mutated afterwards, so concurrent analyses can share
them without coordination.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from zxcvbn.adjacency_graphs import ADJACENCY_GRAPHS
from zxcvbn.frequency_lists import FREQUENCY_LISTS
from zxcvbn.matching import L33T_TABLE as ZXCVBN_L33T_TABLE

logger = logging.getLogger(__name__)

Graph = Mapping[str, "list[str | None]"]

USER_INPUTS_DICTIONARY = "user_inputs"

KEYBOARD_LAYOUTS = ("qwerty", "dvorak")
KEYPAD_LAYOUTS = ("keypad", "mac_keypad")

L33T_TABLE: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {letter: tuple(subs) for letter, subs in ZXCVBN_L33T_TABLE.items()}
)


@dataclass(frozen=True)
class RankedDictionary:
    """Word -> 1-based frequency rank, plus the longest word length."""

    name: str
    ranks: Mapping[str, int]
    longest: int

    def rank(self, word: str) -> int | None:
        return self.ranks.get(word)

    def __len__(self) -> int:
        return len(self.ranks)


@dataclass(frozen=True)
class LayoutStats:
    starting_positions: int
    average_degree: float


def build_ranked_dictionary(name: str, ordered_words: Iterable[str]) -> RankedDictionary:
    """Rank words by position; a repeated word keeps its last position."""

    ranks: dict[str, int] = {}
    for rank, word in enumerate(ordered_words, start=1):
        ranks[word] = rank
    longest = max((len(word) for word in ranks), default=0)
    return RankedDictionary(name=name, ranks=MappingProxyType(ranks), longest=longest)


@functools.lru_cache(maxsize=None)
def frequency_dictionaries() -> tuple[RankedDictionary, ...]:
    """Return the built-in ranked dictionaries, building them on first call."""

    dictionaries = tuple(
        build_ranked_dictionary(name, words) for name, words in FREQUENCY_LISTS.items()
    )
    logger.debug(
        "loaded %d ranked dictionaries (%d words)",
        len(dictionaries),
        sum(len(d) for d in dictionaries),
    )
    return dictionaries


def adjacency_graphs() -> Mapping[str, Graph]:
    return ADJACENCY_GRAPHS


def calc_average_degree(graph: Graph) -> float:
    """Average number of present neighbours per key.

    On qwerty, 'g' has degree 6, being adjacent to 'ftyhbv', while '\\' has
    degree 1.
    """
    if not graph:
        return 0.0
    total = sum(len([n for n in neighbors if n]) for neighbors in graph.values())
    return total / len(graph)


@functools.lru_cache(maxsize=None)
def layout_stats(graph_name: str) -> LayoutStats:
    """Starting positions and average degree used to cost a spatial pattern.

    Keyboards share the qwerty figures and keypads share the keypad ones;
    the variants are close enough.
    """
    if graph_name in KEYBOARD_LAYOUTS:
        reference = "qwerty"
    elif graph_name in KEYPAD_LAYOUTS:
        reference = "keypad"
    else:
        raise ValueError(f"unknown keyboard layout: {graph_name!r}")
    graph = ADJACENCY_GRAPHS[reference]
    return LayoutStats(
        starting_positions=len(graph),
        average_degree=calc_average_degree(graph),
    )
