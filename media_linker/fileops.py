"""
Filesystem adapter.

The classification and culling logic only decide what should happen; every
query and mutation of the destination tree goes through this class so it can
be swapped out (or recorded) in tests.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from .exceptions import FileOperationError


class LocalFilesystem:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger(__name__)

    # --- Queries (never follow the final link) ---

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_link(self, path: Path) -> bool:
        return path.is_symlink()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir() and not path.is_symlink()

    def read_link(self, path: Path) -> Path:
        return Path(os.readlink(path))

    def list_dir(self, path: Path) -> List[Path]:
        # Sorted for a stable cull order (and stable logs)
        return sorted(path.iterdir(), key=lambda p: p.name.lower())

    # --- Mutations ---

    def make_dirs(self, path: Path):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Cannot create directory {path}: {e}") from e

    def make_link(self, path: Path, link_value: Path):
        try:
            path.symlink_to(link_value)
        except OSError as e:
            raise FileOperationError(f"Cannot link {path} -> {link_value}: {e}") from e

    def remove_tree(self, path: Path):
        """Removes a file, link or whole directory, like rm -rf."""
        try:
            if self.is_dir(path):
                shutil.rmtree(path)
            elif self.exists(path):
                path.unlink()
        except OSError as e:
            raise FileOperationError(f"Cannot remove {path}: {e}") from e
