import pytest

from media_linker.core import MediaLinkerApp
from media_linker.exceptions import FileOperationError
from media_linker.fileops import LocalFilesystem


@pytest.fixture
def root(tmp_path):
    """tmp_path with any symlinked prefix resolved, so relative links line up."""
    return tmp_path.resolve()


@pytest.fixture
def dest_dirs(root):
    """Returns existing movies/shows destination roots under a scratch library."""
    dirs = {
        "movies": root / "library" / "Movies",
        "shows": root / "library" / "TV",
    }
    for d in dirs.values():
        d.mkdir(parents=True)
    return dirs


@pytest.fixture
def make_files(root):
    """Creates small placeholder files at the given paths relative to `root`."""
    def _make(*rel_paths):
        created = []
        for rel in rel_paths:
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(b"video")
            created.append(p)
        return created
    return _make


@pytest.fixture
def app(dest_dirs):
    return MediaLinkerApp(dest_dirs)


class FailingFilesystem(LocalFilesystem):
    """Refuses to link or remove the given paths."""
    def __init__(self, *broken):
        super().__init__()
        self.broken = set(broken)

    def make_link(self, path, link_value):
        if path in self.broken:
            raise FileOperationError(f"Cannot link {path}")
        super().make_link(path, link_value)

    def remove_tree(self, path):
        if path in self.broken:
            raise FileOperationError(f"Cannot remove {path}")
        super().remove_tree(path)


@pytest.fixture
def failing_fs():
    return FailingFilesystem
