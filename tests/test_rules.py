from pathlib import Path

import pytest

from media_linker.models import DestinationTarget, Field, Kind
from media_linker.organization.rules import KindClassifier, PathBuilder

SHOW = Field.SHOW_NAME
SEASON = Field.SEASON_NUMBER
EP = Field.EPISODE_NUMBER
EP_NAME = Field.EPISODE_NAME
MOVIE = Field.MOVIE_NAME
YEAR = Field.YEAR


@pytest.mark.parametrize(
    "ext,fields,expected",
    [
        (".mkv", {SHOW, SEASON, EP}, Kind.EPISODE_SEASONED),
        (".mkv", {SHOW, SEASON, EP, EP_NAME}, Kind.EPISODE_SEASONED),
        (".avi", {SHOW, EP}, Kind.EPISODE_ABSOLUTE),
        (".mkv", {SEASON, EP}, Kind.UNCLASSIFIED),
        (".mkv", {SEASON}, Kind.UNCLASSIFIED),
        (".mkv", {SHOW, MOVIE}, Kind.UNCLASSIFIED),
        (".mkv", {EP, MOVIE, YEAR}, Kind.UNCLASSIFIED),
        (".mp4", {MOVIE, YEAR}, Kind.MOVIE_WITH_YEAR),
        (".m4v", {MOVIE}, Kind.MOVIE_WITHOUT_YEAR),
        (".MKV", {MOVIE}, Kind.MOVIE_WITHOUT_YEAR),
        (".mkv", set(), Kind.UNCLASSIFIED),
        ("", {SHOW, SEASON, EP}, Kind.UNCLASSIFIED),
        (".txt", {MOVIE, YEAR}, Kind.UNCLASSIFIED),
    ],
)
def test_classify(ext, fields, expected):
    attribs = {f: "x" for f in fields}
    assert KindClassifier().classify(ext, attribs) == expected


@pytest.fixture
def builder(tmp_path):
    return PathBuilder({"movies": tmp_path / "Movies", "shows": tmp_path / "TV"})


def test_movie_paths(builder, tmp_path):
    assert builder.build(Kind.MOVIE_WITH_YEAR, {MOVIE: "Serenity", YEAR: "2005"}, ".mkv") == [
        DestinationTarget(tmp_path / "Movies" / "Serenity (2005).mkv", Kind.MOVIE_WITH_YEAR, "movies")
    ]
    [target] = builder.build(Kind.MOVIE_WITHOUT_YEAR, {MOVIE: "Alien"}, ".AVI")
    assert target.path == tmp_path / "Movies" / "Alien.AVI"


def test_seasoned_episode_path(builder, tmp_path):
    attribs = {SHOW: "The West Wing", SEASON: "2", EP: "03", EP_NAME: "The Midterms"}
    [target] = builder.build(Kind.EPISODE_SEASONED, attribs, ".mkv")

    assert target.category == "shows"
    assert target.path == tmp_path / "TV" / "The West Wing" / 'The West Wing 02x03 - "The Midterms".mkv'


def test_two_digit_season_is_not_padded(builder, tmp_path):
    attribs = {SHOW: "Scrubs", SEASON: "12", EP: "05", EP_NAME: "My Lunch"}
    [target] = builder.build(Kind.EPISODE_SEASONED, attribs, ".mkv")
    assert target.path.name == 'Scrubs 12x05 - "My Lunch".mkv'


def test_absolute_episode_path(builder, tmp_path):
    attribs = {SHOW: "Firefly", EP: "01", EP_NAME: "Serenity"}
    [target] = builder.build(Kind.EPISODE_ABSOLUTE, attribs, ".mkv")
    assert target.path == tmp_path / "TV" / "Firefly" / 'Firefly E01 - "Serenity".mkv'


def test_missing_episode_name_renders_empty_quotes(builder):
    [target] = builder.build(Kind.EPISODE_ABSOLUTE, {SHOW: "Firefly", EP: "01"}, ".mkv")
    assert target.path.name == 'Firefly E01 - "".mkv'


def test_unclassified_has_no_targets(builder):
    assert builder.build(Kind.UNCLASSIFIED, {MOVIE: "Alien"}, ".mkv") == []


def test_unconfigured_category_has_no_targets(tmp_path):
    movies_only = PathBuilder({"movies": tmp_path / "Movies"})
    attribs = {SHOW: "Firefly", EP: "01", EP_NAME: "Serenity"}
    assert movies_only.build(Kind.EPISODE_ABSOLUTE, attribs, ".mkv") == []
    assert len(movies_only.build(Kind.MOVIE_WITHOUT_YEAR, {MOVIE: "Alien"}, ".mkv")) == 1
