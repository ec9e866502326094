"""Keyboard-walk matcher (qwerty, dvorak, keypads)."""
from __future__ import annotations

import re
from typing import Mapping

from guessmeter.data import KEYBOARD_LAYOUTS, Graph, adjacency_graphs
from guessmeter.patterns import Match, SpatialPattern

SHIFTED_RX = re.compile(r'[~!@#$%^&*()_+QWERTYUIOP{}|ASDFGHJKL:"ZXCVBNM<>?]')


def spatial_match(password: str, graphs: Mapping[str, Graph] | None = None) -> list[Match]:
    matches: list[Match] = []
    for graph_name, graph in (graphs if graphs is not None else adjacency_graphs()).items():
        matches.extend(spatial_match_helper(password, graph, graph_name))
    return sorted(matches, key=lambda m: (m.i, m.j))


def spatial_match_helper(password: str, graph: Graph, graph_name: str) -> list[Match]:
    matches: list[Match] = []
    length = len(password)
    i = 0
    while i < length - 1:
        j = i + 1
        last_direction: int | None = None
        turns = 0
        if graph_name in KEYBOARD_LAYOUTS and SHIFTED_RX.match(password[i]):
            shifted_count = 1
        else:
            shifted_count = 0
        while True:
            found = False
            if j < length:
                cur_char = password[j]
                for direction, adjacent in enumerate(graph.get(password[j - 1]) or ()):
                    if not adjacent:
                        continue
                    position = adjacent.find(cur_char)
                    if position == -1:
                        continue
                    found = True
                    # index 1 of a neighbour entry is the shifted key: '@' in '2@'
                    if position == 1:
                        shifted_count += 1
                    # every walk starts with a turn
                    if last_direction != direction:
                        turns += 1
                        last_direction = direction
                    break
            if found:
                j += 1
                continue
            if j - i > 2:
                matches.append(
                    Match(
                        i=i,
                        j=j - 1,
                        token=password[i:j],
                        pattern=SpatialPattern(
                            graph=graph_name,
                            turns=turns,
                            shifted_count=shifted_count,
                        ),
                    )
                )
            i = j
            break
    return matches
