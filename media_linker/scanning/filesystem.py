import logging
import os
from pathlib import Path
from typing import List, Optional, Pattern

from .. import config
from ..exceptions import ScanError
from ..models import LibraryScan, TreeNode


class LibraryScanner:
    def __init__(self,
                 junk_words: Optional[List[Pattern]] = None,
                 logger: Optional[logging.Logger] = None):
        self.junk_words = junk_words if junk_words is not None else config.JUNK_WORDS
        self.log = logger or logging.getLogger(__name__)

    def scan(self, root: Path) -> LibraryScan:
        """
        Builds the node arena for one scan root (a directory or a single file).

        Nodes are added parent-first, so walking `scan.nodes` in order always
        visits a node's ancestors before the node itself.
        """
        if not os.path.lexists(root):
            raise ScanError(f"Scan root does not exist: {root}")

        scan = LibraryScan(root_path=root)
        root_index = scan.add(self._make_node(root, root.is_dir(), parent_index=None, root_index=None))

        stack = [root_index] if scan.nodes[root_index].is_dir else []
        while stack:
            current_index = stack.pop()
            current = scan.nodes[current_index]

            try:
                with os.scandir(current.path) as it:
                    entries = list(it)
            except OSError as e:
                self.log.warning(f"Cannot read {current.path}: {e}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            subdirs = []
            for e in entries:
                if self._is_junk(e.name, current.path.name):
                    self.log.debug(f"Skipping junk entry (and anything below it): {e.path}")
                    continue
                # Linked directories are recorded but never descended into
                is_dir = e.is_dir(follow_symlinks=False)
                index = scan.add(self._make_node(Path(e.path), is_dir, current_index, root_index))
                if is_dir:
                    subdirs.append(index)

            # Push dirs to stack (reversed so we process A before Z)
            for index in reversed(subdirs):
                stack.append(index)

        self.log.info(f"Scanned {root}: {len(scan)} entries.")
        return scan

    def _make_node(self,
                   path: Path,
                   is_dir: bool,
                   parent_index: Optional[int],
                   root_index: Optional[int]) -> TreeNode:
        ext = path.suffix
        if not is_dir and ext.lower() in config.VIDEO_EXTS:
            readable_name = path.name[:-len(ext)]
        else:
            readable_name, ext = path.name, ''

        return TreeNode(
            path=path,
            readable_name=readable_name,
            extension=ext,
            is_dir=is_dir,
            parent_index=parent_index,
            root_index=root_index,
        )

    def _is_junk(self, name: str, parent_name: str) -> bool:
        """
        An entry is junk when it mentions a junk word more often than its
        parent does. "Movie/Sample/" goes with everything in it, while
        "Sample Reel/sample.mkv" keeps the file (the counts are equal).
        """
        return any(len(word.findall(name)) > len(word.findall(parent_name)) for word in self.junk_words)
