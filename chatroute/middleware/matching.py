"""String / regex predicates used by the built-in filters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

StrOrPattern = Union[str, re.Pattern]

# <@U123|label>, <#C123>, <!here>, <https://example.com|link>
SLACK_LINK = re.compile(r"<(?P<type>[@#!])?(?P<link>[^>|]+)(?:\|(?P<label>[^>]+))?>")


@dataclass(frozen=True)
class PatternMatch:
    """Result of testing a value against a string or regex pattern.

    ``groups`` is the full match followed by the capture groups when the
    pattern is a regex, and ``None`` for plain string patterns.
    """

    matched: bool
    groups: tuple[str | None, ...] | None = None

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = PatternMatch(False)


def _search(value: str, pattern: re.Pattern[str]) -> PatternMatch:
    m = pattern.search(value)
    if m is None:
        return NO_MATCH
    return PatternMatch(True, (m.group(0), *m.groups()))


def match_pattern(value: str | None, pattern: StrOrPattern) -> PatternMatch:
    """Exact equality for strings, first match anywhere for regexes."""
    if value is None:
        return NO_MATCH
    if isinstance(pattern, str):
        return PatternMatch(value == pattern)
    return _search(value, pattern)


def contains_pattern(text: str | None, pattern: StrOrPattern) -> PatternMatch:
    """Substring test for strings, first match anywhere for regexes."""
    if text is None:
        return NO_MATCH
    if isinstance(pattern, str):
        return PatternMatch(pattern in text)
    return _search(text, pattern)


@dataclass(frozen=True)
class Link:
    """A ``<...>`` reference found in message text."""

    type: str | None
    link: str
    label: str | None
    start: int


def parse_link(text: str) -> Link | None:
    """Return the first link token in ``text``, or ``None``."""
    m = SLACK_LINK.search(text)
    if m is None:
        return None
    return Link(m.group("type"), m.group("link"), m.group("label"), m.start())
