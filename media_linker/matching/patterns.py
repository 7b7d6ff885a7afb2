import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence

from ..models import CascadeMatch, Field


@dataclass(frozen=True)
class PatternRule:
    """
    One entry of the cascade: a named, start-anchored regex whose named groups
    are Field values.
    """
    name: str
    priority: int
    regex: Pattern
    absolute: bool = False

    def extract(self, name: str) -> Optional[CascadeMatch]:
        m = self.regex.match(name)
        if not m:
            return None
        # Optional groups that did not take part in the match are dropped
        fields = {Field(k): v for k, v in m.groupdict().items() if v is not None}
        return CascadeMatch(rule=self.name, fields=fields, absolute=self.absolute)


def _rule(name: str, priority: int, pattern: str, absolute: bool = False) -> PatternRule:
    return PatternRule(name, priority, re.compile(pattern, re.IGNORECASE | re.VERBOSE), absolute)


# Ordered most-specific first. Show names are optional everywhere, and lazy,
# so they stop at the first marker that lets the rest of the rule match.
DEFAULT_RULES = (
    # 1. Explicit season + episode markers
    #    The West Wing   S    02   E    03           The Midterms
    _rule('season_episode', 1, r"""
        ^(?P<show_name>.+?)?  S (?P<season_number>\d{1,2}) .*?
        E (?P<episode_number>\d{1,2}(?:E\d{1,2})*)(?!\d)  (?P<episode_name>.+)?
    """),
    #    The West Wing   2   x   03                  The Midterms
    _rule('season_x_episode', 1, r"""
        ^(?P<show_name>.+?)?  (?<!\d)(?P<season_number>\d{1,2})
        x (?P<episode_number>\d{1,2}(?:x\d{1,2})*)(?!\d)  (?P<episode_name>.+)?
    """),
    #    The West Wing   Season 2   Episode 3        The Midterms
    _rule('season_episode_words', 1, r"""
        ^(?P<show_name>.+?)?  Season. (?P<season_number>\d{1,2}) .*?
        Episode. (?P<episode_number>\d{1,2})(?!\d)  (?P<episode_name>.+)?
    """),

    # 2. Movies with a plausible release year that is not part of a longer number
    _rule('movie_year', 2, r"""
        ^(?P<movie_name>.+?)  (?<!\d)(?P<year>19\d\d|20[01]\d)(?!\d)
    """),

    # 3. Compact season digit + two-digit episode: Scrubs 520 My Lunch.
    #    Neighbouring letters/digits rule out x264, H.264, 720p and friends.
    _rule('compact_season_episode', 3, r"""
        ^(?P<show_name>.+?)?  (?<![a-z0-9])(?<!h\.)(?P<season_number>\d)
        (?P<episode_number>\d{2})(?![a-z0-9])  (?P<episode_name>.+)?
    """),

    # 4. Absolute numbering with a marker: Firefly Episode 1 Serenity, Firefly E01
    _rule('absolute_marker', 4, r"""
        ^(?P<show_name>.+?)?  (?:Episode.|E)
        (?P<episode_number>\d{1,2}(?:E\d{1,2})*)(?!\d)  (?P<episode_name>.+)?
    """, absolute=True),

    # 5. Last resort: a bare leading number, then a title: 01 - Serenity
    _rule('absolute_bare', 5, r"""
        ^(?P<episode_number>\d{1,2})(?!\d)  (?P<episode_name>.+)
    """, absolute=True),

    # 6. Season folders: Season 2, The West Wing S2
    _rule('season_folder', 6, r"""
        ^(?P<show_name>.+?)?  (?:Season.|S) (?<!\d)(?P<season_number>\d{1,2})(?!\d)
    """),
)


class PatternCascade:
    """
    Turns a loosely structured name into captured fields.

    Rules are tried in order and the first one that matches wins, so the more
    specific forms (explicit S02E03 markers) always beat the looser fallbacks
    even when both would match.
    """
    def __init__(self, rules: Sequence[PatternRule] = DEFAULT_RULES, logger: Optional[logging.Logger] = None):
        self.rules = tuple(rules)
        self.log = logger or logging.getLogger(__name__)

    def match(self, name: str) -> Optional[CascadeMatch]:
        for rule in self.rules:
            result = rule.extract(name)
            if result is not None:
                self.log.debug(f"  matched rule {rule.name!r}: {name}")
                return result
        return None
