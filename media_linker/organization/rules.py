import logging
from pathlib import Path
from typing import Dict, List, Optional

from .. import config
from ..models import Attributes, DestinationTarget, Field, Kind


class KindClassifier:
    """
    Decides what a video is from the attributes it ended up with.
    Pure and total: the same (extension, attributes) always gives the same Kind.
    """
    def classify(self, extension: str, attribs: Attributes) -> Kind:
        if extension.lower() not in config.VIDEO_EXTS:
            return Kind.UNCLASSIFIED

        episode = Field.EPISODE_NUMBER in attribs
        season = Field.SEASON_NUMBER in attribs
        show = Field.SHOW_NAME in attribs

        if episode and season and show:
            return Kind.EPISODE_SEASONED
        if episode and show:
            return Kind.EPISODE_ABSOLUTE
        # Half an episode is not a movie either; don't guess
        if episode or season or show:
            return Kind.UNCLASSIFIED
        if Field.MOVIE_NAME in attribs and Field.YEAR in attribs:
            return Kind.MOVIE_WITH_YEAR
        if Field.MOVIE_NAME in attribs:
            return Kind.MOVIE_WITHOUT_YEAR
        return Kind.UNCLASSIFIED


class PathBuilder:
    """
    Renders the destination path(s) for a classified video.

    Layout:
        movies/{movie} ({year}){ext}
        movies/{movie}{ext}
        shows/{show}/{show} {season:02}x{episode} - "{episode name}"{ext}
        shows/{show}/{show} E{episode} - "{episode name}"{ext}
    """
    def __init__(self, dest_dirs: Dict[str, Path], logger: Optional[logging.Logger] = None):
        self.dest_dirs = dest_dirs
        self.log = logger or logging.getLogger(__name__)

    def build(self, kind: Kind, attribs: Attributes, extension: str) -> List[DestinationTarget]:
        if kind == Kind.UNCLASSIFIED:
            return []

        category = config.MOVIES if kind in (Kind.MOVIE_WITH_YEAR, Kind.MOVIE_WITHOUT_YEAR) else config.SHOWS
        root = self.dest_dirs.get(category)
        if root is None:
            self.log.debug(f"  no '{category}' destination configured; {kind.value} not linked")
            return []

        return [DestinationTarget(root / rel, kind, category) for rel in self._relative_paths(kind, attribs, extension)]

    def _relative_paths(self, kind: Kind, attribs: Attributes, ext: str) -> List[Path]:
        movie = attribs.get(Field.MOVIE_NAME, '')
        show = attribs.get(Field.SHOW_NAME, '')
        episode = attribs.get(Field.EPISODE_NUMBER, '')
        episode_name = attribs.get(Field.EPISODE_NAME, '')

        if kind == Kind.MOVIE_WITH_YEAR:
            return [Path(f"{movie} ({attribs[Field.YEAR]}){ext}")]
        if kind == Kind.MOVIE_WITHOUT_YEAR:
            return [Path(f"{movie}{ext}")]
        if kind == Kind.EPISODE_SEASONED:
            season = attribs[Field.SEASON_NUMBER].zfill(2)
            return [Path(show) / f'{show} {season}x{episode} - "{episode_name}"{ext}']
        if kind == Kind.EPISODE_ABSOLUTE:
            return [Path(show) / f'{show} E{episode} - "{episode_name}"{ext}']
        return []
