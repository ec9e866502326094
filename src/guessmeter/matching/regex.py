"""Fixed regular-expression matchers: recent years and digit runs."""
from __future__ import annotations

import re
from typing import Mapping

from guessmeter.patterns import Match, RegexPattern

REGEXEN: Mapping[str, re.Pattern[str]] = {
    "recent_year": re.compile(r"19\d\d|200\d|201\d|202\d", re.ASCII),
    "digits": re.compile(r"\d{3,}", re.ASCII),
}


def regex_match(password: str, regexen: Mapping[str, re.Pattern[str]] = REGEXEN) -> list[Match]:
    matches: list[Match] = []
    for name, regex in regexen.items():
        for rx_match in regex.finditer(password):
            token = rx_match.group(0)
            matches.append(
                Match(
                    i=rx_match.start(),
                    j=rx_match.end() - 1,
                    token=token,
                    pattern=RegexPattern(regex_name=name, regex_match=token),
                )
            )
    return sorted(matches, key=lambda m: (m.i, m.j))
