import logging
import re
from typing import Optional

from .. import config
from ..models import Attributes, Field
from .patterns import PatternCascade

# Separator and bracket runs that stand in for whitespace in release names
DIRT_RUN = re.compile(r'[._ \-()\[\]{}]+')
LEADING_DIRT = re.compile(r'^[._ \-()\[\]{}]+')
# Separators and dangling open brackets left where a release tag was cut off
TRAILING_DIRT = re.compile(r'[._ \-(\[{]+$')
WORD_START = re.compile(r'(?<!\S)\S')
# Four or more letters in a row
SHOUTED_WORD = re.compile(r'[^\W\d_]{4,}')
# Two or more single letters in a row: "U S A"
LETTER_RUN = re.compile(r'(?<!\S)[^\W\d_](?: [^\W\d_])+(?!\S)')
TRAILING_YEAR = re.compile(r'(?<!\d)\d{4}$')
OPEN_BRACKET_TAIL = re.compile(r'[(\[{].+')


class AttributeResolver:
    """
    Builds a node's raw attributes: whatever its ancestors captured, overlaid
    with what its own name captures.
    """
    def __init__(self, cascade: Optional[PatternCascade] = None, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger(__name__)
        self.cascade = cascade or PatternCascade(logger=self.log)

    def resolve(self, name: str, parent_raw: Optional[Attributes] = None) -> Attributes:
        attribs = dict(parent_raw) if parent_raw else {}
        own = self.cascade.match(name)
        if own is None:
            return attribs

        # An absolutely numbered episode does not sit in the season its folder names
        if own.absolute:
            attribs.pop(Field.SEASON_NUMBER, None)

        attribs.update(own.fields)
        return attribs


# --- Per-field transforms ---
# Each is a pure function and idempotent: f(f(x)) == f(x)

def clean_title(value: str) -> str:
    """Readable form of a movie or show name: 'the.west_wing' -> 'The West Wing'."""
    name = DIRT_RUN.sub(' ', value).strip()
    name = LETTER_RUN.sub(lambda m: m.group(0).replace(' ', ''), _capitalize_words(name))
    # Checked after acronyms are joined, so THE.WEST.WING and U.S.A.F both settle in one pass
    if name.isupper() and SHOUTED_WORD.search(name):
        name = _capitalize_words(name.lower())
    return name


def _capitalize_words(name: str) -> str:
    return WORD_START.sub(lambda m: m.group(0).upper(), name)


def clean_show_name(value: str) -> str:
    name = clean_title(value)
    return TRAILING_YEAR.sub(lambda m: f"({m.group(0)})", name)


def clean_season_number(value: str) -> str:
    return re.sub(r'^0+(?=\d)', '', value)


def clean_episode_number(value: str) -> str:
    """'3' -> '03'; multi-episode '3E4' -> '03x04'."""
    parts = re.findall(r'\d+', value)
    if not parts:
        return value
    return 'x'.join(p.zfill(2) for p in parts)


def clean_episode_name(value: str) -> str:
    name = LEADING_DIRT.sub('', value)
    stripped = config.RELEASE_TAG_PATTERN.sub('', name)
    if DIRT_RUN.sub('', stripped):
        name = stripped
    name = TRAILING_DIRT.sub('', name)
    # Scene-style dotted names carry no spaces of their own
    if ' ' not in name:
        name = re.sub(r'[._]+', ' ', name)
    return name


def synthesize_movie_name(readable_name: str) -> str:
    """Movie title guessed from a whole file name, minus its release tags."""
    name = config.RELEASE_TAG_PATTERN.sub('', readable_name)
    name = config.SHOUTING_TAIL_PATTERN.sub('', name)
    if not DIRT_RUN.sub('', name):
        return readable_name
    return name


def synthesize_show_name(root_name: str) -> str:
    """Show title guessed from a season pack folder name."""
    name = config.SERIES_SUFFIX_PATTERN.sub('', root_name, count=1)
    name = OPEN_BRACKET_TAIL.sub('', name, count=1)
    if not DIRT_RUN.sub('', name):
        return root_name
    return name


class AttributeCleaner:
    """
    Turns raw captures into display-ready values, filling in movie and show
    names that the name itself did not state.
    """
    def clean(self,
              raw: Attributes,
              readable_name: str,
              root_name: Optional[str] = None) -> Attributes:
        attribs = dict(raw)

        # Anything that is not an episode is treated as a possible movie
        if Field.MOVIE_NAME not in attribs and Field.EPISODE_NUMBER not in attribs:
            attribs[Field.MOVIE_NAME] = synthesize_movie_name(readable_name)

        if Field.MOVIE_NAME in attribs:
            attribs[Field.MOVIE_NAME] = clean_title(attribs[Field.MOVIE_NAME])

        # Episodes with no show name borrow it from the top of the scan
        if (Field.EPISODE_NUMBER in attribs
                and Field.SHOW_NAME not in attribs
                and root_name is not None):
            attribs[Field.SHOW_NAME] = synthesize_show_name(root_name)

        if Field.SHOW_NAME in attribs:
            attribs[Field.SHOW_NAME] = clean_show_name(attribs[Field.SHOW_NAME])

        if Field.SEASON_NUMBER in attribs:
            attribs[Field.SEASON_NUMBER] = clean_season_number(attribs[Field.SEASON_NUMBER])

        if Field.EPISODE_NUMBER in attribs:
            attribs[Field.EPISODE_NUMBER] = clean_episode_number(attribs[Field.EPISODE_NUMBER])

        if Field.EPISODE_NAME in attribs:
            attribs[Field.EPISODE_NAME] = clean_episode_name(attribs[Field.EPISODE_NAME])

        # A name that cleans down to nothing is as good as absent
        return {k: v for k, v in attribs.items() if v != ''}
