from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class Field(str, Enum):
    """Attribute names a filename pattern can capture."""
    SHOW_NAME = 'show_name'
    SEASON_NUMBER = 'season_number'
    EPISODE_NUMBER = 'episode_number'
    EPISODE_NAME = 'episode_name'
    MOVIE_NAME = 'movie_name'
    YEAR = 'year'


class Kind(str, Enum):
    MOVIE_WITH_YEAR = 'movie_with_year'
    MOVIE_WITHOUT_YEAR = 'movie_without_year'
    EPISODE_SEASONED = 'episode_seasoned'
    EPISODE_ABSOLUTE = 'episode_absolute'
    UNCLASSIFIED = 'unclassified'


class CullPolicy(str, Enum):
    """What the culler may do with one destination entry."""
    KEEP_NO_WALK = 'keep_no_walk'
    KEEP_AND_WALK = 'keep_and_walk'
    KEEP_IF_PARENT_KEPT = 'keep_if_parent_kept'
    DELETE_IF_EMPTY = 'delete_if_empty'
    DELETE = 'delete'


# Absent fields are left out of the mapping, never stored as ''
Attributes = Dict[Field, str]


@dataclass(frozen=True)
class CascadeMatch:
    """
    Result of a successful pattern cascade lookup.
    """
    rule: str
    fields: Attributes
    absolute: bool = False  # rule numbers episodes without a season


@dataclass(frozen=True)
class DestinationTarget:
    path: Path
    kind: Kind
    category: str           # movies/shows


@dataclass(frozen=True)
class ReconciliationDecision:
    target: Path
    link_value: Path        # source path relative to target.parent
    delete_existing: bool
    create_link: bool

    @property
    def action(self) -> str:
        if self.delete_existing:
            return 'replace'
        if self.create_link:
            return 'create'
        return 'keep'


@dataclass
class TreeNode:
    """
    Represents one entry discovered under a scan root.

    Parent and root are indices into the owning LibraryScan's node list,
    so nodes never hold references to each other.
    """
    path: Path
    readable_name: str      # base name, minus the extension for videos
    extension: str          # recognized video extension or ''
    is_dir: bool = False
    parent_index: Optional[int] = None
    root_index: Optional[int] = None

    # Populated once by the classification pipeline
    raw_attribs: Attributes = field(default_factory=dict)
    clean_attribs: Attributes = field(default_factory=dict)
    kind: Kind = Kind.UNCLASSIFIED
    targets: List[DestinationTarget] = field(default_factory=list)

    @property
    def is_video(self) -> bool:
        return bool(self.extension)


@dataclass
class LibraryScan:
    """
    Arena of TreeNodes for one scan root. Index 0 is the root itself.
    """
    root_path: Path
    nodes: List[TreeNode] = field(default_factory=list)

    def add(self, node: TreeNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def parent_of(self, node: TreeNode) -> Optional[TreeNode]:
        if node.parent_index is None:
            return None
        return self.nodes[node.parent_index]

    def root_of(self, node: TreeNode) -> Optional[TreeNode]:
        if node.root_index is None:
            return None
        return self.nodes[node.root_index]

    def __iter__(self):
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
