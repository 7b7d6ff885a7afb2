import logging
import os
from pathlib import Path
from typing import Callable, Optional, Set, Tuple

from ..fileops import LocalFilesystem
from ..models import ReconciliationDecision

# gate(target, relative_source, delete_existing, create_link) -> go ahead?
Gate = Callable[[Path, Path, bool, bool], bool]


def allow_all(target: Path, link_value: Path, delete_existing: bool, create_link: bool) -> bool:
    return True


class LinkReconciler:
    """
    Makes sure a relative symlink to the source exists at each target path.

    Whatever sits at the target decides the action:
      - a real file/directory: remove it, then link
      - a link (even a dangling one): leave it alone
      - nothing: link
    Existing links are trusted as-is; where they point is not re-checked.
    """
    def __init__(self, fs: Optional[LocalFilesystem] = None, logger: Optional[logging.Logger] = None):
        self.fs = fs or LocalFilesystem()
        self.log = logger or logging.getLogger(__name__)
        # Every target handed to reconcile(); the culler must not touch these
        self.kept_targets: Set[Path] = set()

    def decide(self, target: Path, source: Path) -> ReconciliationDecision:
        link_value = Path(os.path.relpath(source, target.parent))

        if self.fs.is_link(target):
            current = self.fs.read_link(target)
            if current != link_value:
                self.log.debug(f"  existing link points to {current}, expected {link_value}; left alone")
            else:
                self.log.debug("  already linked")
            return ReconciliationDecision(target, link_value, delete_existing=False, create_link=False)

        if self.fs.exists(target):
            self.log.debug("  occupied by a non-link; should replace")
            return ReconciliationDecision(target, link_value, delete_existing=True, create_link=True)

        self.log.debug("  should create")
        return ReconciliationDecision(target, link_value, delete_existing=False, create_link=True)

    def reconcile(self,
                  target: Path,
                  source: Path,
                  gate: Gate = allow_all) -> Tuple[ReconciliationDecision, bool]:
        """
        Decides what to do at `target` and, only if `gate` returns True,
        does it. Returns the decision and whether it was applied.
        """
        decision = self.decide(target, source)
        self.kept_targets.add(target)

        go_ahead = gate(target, decision.link_value, decision.delete_existing, decision.create_link) is True
        if go_ahead:
            self.apply(decision)
        return decision, go_ahead

    def apply(self, decision: ReconciliationDecision):
        self.fs.make_dirs(decision.target.parent)
        if decision.delete_existing:
            self.fs.remove_tree(decision.target)
        if decision.create_link:
            self.fs.make_link(decision.target, decision.link_value)
