"""Dictionary, reversed-dictionary and l33t-substitution matchers."""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from guessmeter.data import L33T_TABLE, RankedDictionary
from guessmeter.patterns import DictionaryPattern, Match


def lower_preserving_length(text: str) -> str:
    """Lower-case character by character, leaving characters whose lower-case
    form is longer than one code point untouched so offsets stay aligned."""

    out = []
    for char in text:
        lowered = char.lower()
        out.append(lowered if len(lowered) == 1 else char)
    return "".join(out)


def dictionary_match(password: str, dictionaries: Iterable[RankedDictionary]) -> list[Match]:
    matches: list[Match] = []
    length = len(password)
    password_lower = lower_preserving_length(password)
    for dictionary in dictionaries:
        for i in range(length):
            for j in range(i, min(length, i + dictionary.longest)):
                word = password_lower[i : j + 1]
                rank = dictionary.rank(word)
                if rank is None:
                    continue
                matches.append(
                    Match(
                        i=i,
                        j=j,
                        token=password[i : j + 1],
                        pattern=DictionaryPattern(
                            matched_word=word,
                            rank=rank,
                            dictionary_name=dictionary.name,
                        ),
                    )
                )
    return sorted(matches, key=lambda m: (m.i, m.j))


def reverse_dictionary_match(password: str, dictionaries: Iterable[RankedDictionary]) -> list[Match]:
    reversed_password = password[::-1]
    last = len(password) - 1
    matches = dictionary_match(reversed_password, dictionaries)
    for match in matches:
        match.token = match.token[::-1]
        match.i, match.j = last - match.j, last - match.i
        match.pattern.reversed = True
    return sorted(matches, key=lambda m: (m.i, m.j))


def relevant_l33t_subtable(
    password: str, table: Mapping[str, Sequence[str]] = L33T_TABLE
) -> dict[str, list[str]]:
    """Prune ``table`` down to the substitutions that occur in ``password``."""

    password_chars = set(password)
    subtable: dict[str, list[str]] = {}
    for letter, subs in table.items():
        relevant = [sub for sub in subs if sub in password_chars]
        if relevant:
            subtable[letter] = relevant
    return subtable


def _dedup(subs: list[list[tuple[str, str]]]) -> list[list[tuple[str, str]]]:
    deduped = []
    seen: set[tuple[tuple[str, str], ...]] = set()
    for sub in subs:
        label = tuple(sorted(sub))
        if label not in seen:
            seen.add(label)
            deduped.append(sub)
    return deduped


def enumerate_l33t_subs(table: Mapping[str, Sequence[str]]) -> list[dict[str, str]]:
    """Every substitution map consistent with ``table``.

    A l33t character may stand for at most one letter within a map, so '1'
    yields one map where it means 'i' and another where it means 'l'.
    """
    subs: list[list[tuple[str, str]]] = [[]]
    for letter, l33t_chars in table.items():
        next_subs = []
        for l33t_chr in l33t_chars:
            for sub in subs:
                dup_index = next(
                    (idx for idx, (chr_, _) in enumerate(sub) if chr_ == l33t_chr), -1
                )
                if dup_index == -1:
                    next_subs.append(sub + [(l33t_chr, letter)])
                else:
                    alternative = sub[:dup_index] + sub[dup_index + 1 :] + [(l33t_chr, letter)]
                    next_subs.append(sub)
                    next_subs.append(alternative)
        subs = _dedup(next_subs)
    return [dict(sub) for sub in subs]


def translate(text: str, chr_map: Mapping[str, str]) -> str:
    return "".join(chr_map.get(char, char) for char in text)


def l33t_match(
    password: str,
    dictionaries: Sequence[RankedDictionary],
    table: Mapping[str, Sequence[str]] = L33T_TABLE,
) -> list[Match]:
    matches: list[Match] = []
    seen: set[tuple] = set()
    for sub in enumerate_l33t_subs(relevant_l33t_subtable(password, table)):
        if not sub:
            # password has no relevant substitutions
            break
        subbed_password = translate(password, sub)
        for match in dictionary_match(subbed_password, dictionaries):
            token = password[match.i : match.j + 1]
            # single characters like '1' -> 'i' are noise
            if len(token) <= 1:
                continue
            pattern = match.pattern
            if lower_preserving_length(token) == pattern.matched_word:
                continue
            match_sub = {subbed: letter for subbed, letter in sub.items() if subbed in token}
            key = (
                match.i,
                match.j,
                pattern.dictionary_name,
                pattern.matched_word,
                tuple(sorted(match_sub.items())),
            )
            if key in seen:
                continue
            seen.add(key)
            match.token = token
            pattern.l33t = True
            pattern.sub = match_sub
            matches.append(match)
    return sorted(matches, key=lambda m: (m.i, m.j))
