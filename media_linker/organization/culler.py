import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .. import config
from ..exceptions import FileOperationError
from ..fileops import LocalFilesystem
from ..models import CullPolicy

PolicyFn = Callable[[Path], CullPolicy]

# policy -> (may delete self, may let parent be deleted, walk children)
POLICY_RULES: Dict[CullPolicy, Tuple[bool, bool, bool]] = {
    CullPolicy.KEEP_NO_WALK: (False, False, False),
    CullPolicy.KEEP_AND_WALK: (False, False, True),
    CullPolicy.KEEP_IF_PARENT_KEPT: (False, True, False),
    CullPolicy.DELETE_IF_EMPTY: (True, True, True),
    CullPolicy.DELETE: (True, True, False),
}


class DirectoryCuller:
    """
    Removes debris (dead links, stray files, emptied folders) from a
    destination tree while sparing anything a live entry depends on.
    """
    def __init__(self,
                 fs: Optional[LocalFilesystem] = None,
                 dry_run: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.fs = fs or LocalFilesystem()
        self.dry_run = dry_run
        self.log = logger or logging.getLogger(__name__)
        self.removed: List[Path] = []

    def cull(self, path: Path, policy: PolicyFn) -> bool:
        """
        Culls `path` and, policy permitting, everything below it.

        Children are culled first. A single surviving child pins `path` and,
        through the return value, every ancestor. Returns True when `path`
        does not stand in the way of deleting its parent.
        """
        report = policy(path)
        can_delete, parent_can_be_deleted, walk = POLICY_RULES[report]
        label = report.value

        if walk and self.fs.is_dir(path):
            for child in self.fs.list_dir(path):
                if not self.cull(child, policy):
                    can_delete = False
                    parent_can_be_deleted = False
                    if report == CullPolicy.DELETE_IF_EMPTY:
                        label = 'spare_not_empty'

        if report == CullPolicy.DELETE_IF_EMPTY and can_delete:
            label = 'delete_empty'
        self.log.debug(f"{label:<20}{path}")

        if not can_delete:
            return parent_can_be_deleted

        if self.dry_run:
            self.log.info(f"[DRY RUN] Remove {path}")
        else:
            try:
                self.fs.remove_tree(path)
            except FileOperationError as e:
                # Still standing, so the parent has to stay as well
                self.log.error(str(e))
                return False
        self.removed.append(path)
        return True


def default_policy(root: Path,
                   kept_targets: Iterable[Path],
                   fs: Optional[LocalFilesystem] = None) -> PolicyFn:
    """
    Policy for a destination root after a linking pass.

    The root and every folder leading to a kept link are walked but never
    removed; kept links themselves are untouchable. OS housekeeping files are
    spared but don't keep a folder alive on their own, and bracket-tagged
    folders such as "[keep]" are left entirely alone. Any other link is stale,
    and anything else goes once it turns out to be empty.
    """
    fs = fs or LocalFilesystem()
    kept: Set[Path] = set(kept_targets)
    kept_ancestors: Set[Path] = {parent for target in kept for parent in target.parents}

    def policy(path: Path) -> CullPolicy:
        if path == root:
            return CullPolicy.KEEP_AND_WALK
        if path in kept:
            return CullPolicy.KEEP_NO_WALK
        if path in kept_ancestors:
            return CullPolicy.KEEP_AND_WALK
        if path.name in config.OS_ARTIFACTS:
            return CullPolicy.KEEP_IF_PARENT_KEPT
        if config.SENTINEL_PATTERN.match(path.name) and fs.is_dir(path):
            return CullPolicy.KEEP_NO_WALK
        if fs.is_link(path):
            return CullPolicy.DELETE
        return CullPolicy.DELETE_IF_EMPTY

    return policy
