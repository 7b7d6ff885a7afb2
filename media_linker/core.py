import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tqdm import tqdm

from . import config
from .exceptions import ConfigError, FileOperationError, ScanError
from .fileops import LocalFilesystem
from .matching.attributes import AttributeCleaner, AttributeResolver
from .models import Kind, LibraryScan, TreeNode
from .organization.culler import DirectoryCuller, default_policy
from .organization.linker import Gate, LinkReconciler
from .organization.rules import KindClassifier, PathBuilder
from .scanning.filesystem import LibraryScanner


@dataclass
class LinkRecord:
    """One line of the run report."""
    source: Path
    kind: Kind
    target: Optional[Path]
    action: str             # create/replace/keep/skipped (sandbox)/failed/unclassified/no destination
    notes: str = ''


@dataclass
class RunSummary:
    entries: int = 0
    videos: int = 0
    targets: int = 0
    created: int = 0
    replaced: int = 0
    kept: int = 0
    skipped: int = 0
    failed: int = 0
    culled: int = 0
    records: List[LinkRecord] = field(default_factory=list)


class MediaLinkerApp:
    def __init__(self,
                 dest_dirs: Dict[str, Path],
                 fs: Optional[LocalFilesystem] = None,
                 logger: Optional[logging.Logger] = None):
        unknown = set(dest_dirs) - set(config.CATEGORIES)
        if unknown:
            raise ConfigError(f"Unknown destination categories: {', '.join(sorted(unknown))} "
                              f"(expected {', '.join(config.CATEGORIES)})")
        if not dest_dirs:
            raise ConfigError("At least one destination directory is required.")

        self.dest_dirs = dest_dirs
        self.fs = fs or LocalFilesystem()
        self.log = logger or logging.getLogger(__name__)

        self.scanner = LibraryScanner(logger=self.log)
        self.resolver = AttributeResolver(logger=self.log)
        self.cleaner = AttributeCleaner()
        self.classifier = KindClassifier()
        self.builder = PathBuilder(dest_dirs, logger=self.log)
        self.reconciler = LinkReconciler(self.fs, logger=self.log)

    def run(self,
            inputs: Iterable[Path],
            creation_sandbox: bool = False,
            deletion_sandbox: bool = False,
            progress: bool = True) -> RunSummary:
        """
        Executes the full pass.
        1. Scan every input root
        2. Classify (attributes -> kind -> targets)
        3. Link (reconcile each target against the destination tree)
        4. Cull (remove whatever the link pass no longer accounts for)
        """
        summary = RunSummary()

        # --- Step 1 & 2: Scanning and classification ---
        scans: List[LibraryScan] = []
        for root in inputs:
            try:
                scan = self.scanner.scan(root)
            except ScanError as e:
                self.log.error(str(e))
                summary.failed += 1
                continue
            self.classify(scan)
            scans.append(scan)

        # --- Step 3: Linking ---
        self.link(scans, summary, self._make_gate(apply_changes=not creation_sandbox), progress)
        self.log.info(f"Linking complete. {summary.targets} targets: created={summary.created} "
                      f"replaced={summary.replaced} kept={summary.kept} skipped={summary.skipped} "
                      f"failed={summary.failed}")

        # --- Step 4: Culling ---
        summary.culled = self.cull(dry_run=deletion_sandbox)
        return summary

    def classify(self, scan: LibraryScan):
        for node in scan:
            self.classify_node(scan, node)

    def classify_node(self, scan: LibraryScan, node: TreeNode):
        """Works out attributes, kind and targets for one node. Never raises."""
        self.log.debug(f"Sorting out {node.path}")
        parent = scan.parent_of(node)
        root = scan.root_of(node)

        node.raw_attribs = self.resolver.resolve(node.readable_name, parent.raw_attribs if parent else None)
        self.log.debug(f"  raw_attribs   = {_fmt(node.raw_attribs)}")

        node.clean_attribs = self.cleaner.clean(node.raw_attribs, node.readable_name,
                                                root.readable_name if root else None)
        self.log.debug(f"  clean_attribs = {_fmt(node.clean_attribs)}")

        node.kind = self.classifier.classify(node.extension, node.clean_attribs)
        node.targets = self.builder.build(node.kind, node.clean_attribs, node.extension)
        self.log.debug(f"  kind          = {node.kind.value}")
        if node.targets:
            self.log.debug(f"  targets[0]    = {node.targets[0].path}")

    def link(self, scans: List[LibraryScan], summary: RunSummary, gate: Gate, progress: bool = True):
        nodes = [node for scan in scans for node in scan]
        summary.entries += len(nodes)

        videos = [node for node in nodes if node.is_video]
        summary.videos += len(videos)

        for node in tqdm(videos, desc="Linking", disable=not progress):
            if node.kind == Kind.UNCLASSIFIED:
                summary.records.append(LinkRecord(node.path, node.kind, None, 'unclassified',
                                                  "Name does not identify a movie or episode"))
                continue
            if not node.targets:
                summary.records.append(LinkRecord(node.path, node.kind, None, 'no destination',
                                                  "No destination configured for this kind"))
                continue

            for target in node.targets:
                summary.targets += 1
                try:
                    decision, applied = self.reconciler.reconcile(target.path, node.path, gate)
                except FileOperationError as e:
                    self.log.error(f"Failed to link {node.path} -> {target.path}: {e}")
                    summary.failed += 1
                    summary.records.append(LinkRecord(node.path, target.kind, target.path, 'failed', str(e)))
                    continue

                action = decision.action
                if action == 'keep':
                    summary.kept += 1
                elif not applied:
                    summary.skipped += 1
                    action = 'skipped (sandbox)'
                elif action == 'replace':
                    summary.replaced += 1
                else:
                    summary.created += 1
                summary.records.append(LinkRecord(node.path, target.kind, target.path, action,
                                                  str(decision.link_value)))

    def cull(self, dry_run: bool = False) -> int:
        """Culls every destination root; returns how many entries went (or would go)."""
        culler = DirectoryCuller(self.fs, dry_run=dry_run, logger=self.log)
        kept = self.reconciler.kept_targets
        self.log.info(f"Culling directory structure ({len(kept)} links to spare)...")

        for root in self.dest_dirs.values():
            if not self.fs.is_dir(root):
                self.log.warning(f"Destination {root} is not a directory; not culled.")
                continue
            culler.cull(root, default_policy(root, kept, self.fs))

        self.log.info(f"Culled {len(culler.removed)} entries.")
        return len(culler.removed)

    def _make_gate(self, apply_changes: bool) -> Gate:
        def gate(target: Path, link_value: Path, delete_existing: bool, create_link: bool) -> bool:
            if not create_link:
                return apply_changes
            verb = 'Replace' if delete_existing else 'Link'
            if apply_changes:
                self.log.info(f"{verb} {target} -> {link_value}")
            else:
                self.log.info(f"[DRY RUN] {verb} {target} -> {link_value}")
            return apply_changes
        return gate


def _fmt(attribs) -> str:
    return '{' + ', '.join(f"{k.value}: {v!r}" for k, v in attribs.items()) + '}'
