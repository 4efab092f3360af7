"""Display paths of discovered directories relative to the scan base."""

import os
from pathlib import Path, PurePath
from typing import Set, Tuple, Union

from ..errors import NotASubdirectory

GIT_DIR_NAME = ".git"


def _absolute(path: Union[str, PurePath]) -> PurePath:
    # os.path.abspath normalizes ".." but never follows symbolic links
    return PurePath(os.path.abspath(str(path)))


def relativize(base: Union[str, PurePath], target: Union[str, PurePath]) -> PurePath:
    """
    Return ``target`` relative to ``base`` without resolving symbolic links.

    Symlinked repositories keep their apparent location below ``base``.
    ``relativize(b, b)`` is the empty path. Raises NotASubdirectory when
    ``target`` is not nested under ``base``.
    """
    base_path = _absolute(base)
    left = _absolute(target)
    segments = []

    while left != base_path:
        parent = left.parent
        if parent == left:
            raise NotASubdirectory(f"File {target} is not in a subdirectory of {base}")
        segments.append(left.name)
        left = parent

    return PurePath(*reversed(segments))


def display_path(base: Union[str, PurePath], target: Union[str, PurePath]) -> str:
    relative = relativize(base, target)
    return str(relative) if relative.parts else "."


def is_repository_root(directory: Path) -> bool:
    """A repository root directly contains a ``.git`` directory."""
    return (directory / GIT_DIR_NAME).is_dir()


class TraversalContext:
    """Visited directories of one traversal pass, keyed by device and inode."""

    def __init__(self):
        self.visited: Set[Tuple[int, int]] = set()

    def mark(self, directory: Path) -> bool:
        """Record ``directory``; False if it (or a symlink to it) was seen before."""
        st = os.stat(directory)
        key = (st.st_dev, st.st_ino)
        if key in self.visited:
            return False
        self.visited.add(key)
        return True
