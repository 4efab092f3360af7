"""Discovery of files excluded by ignore rules."""

import logging
import os
from pathlib import Path
from typing import List, Set

from ..config import Config
from ..errors import CommandExecutionError
from .executor import GitExecutor
from .paths import GIT_DIR_NAME, TraversalContext, is_repository_root
from .report import Reporter


def is_non_empty_directory(path: Path) -> bool:
    try:
        with os.scandir(path) as entries:
            return any(True for _ in entries)
    except OSError:
        return False


class IgnoredFilesScanner:
    """
    Lists ignored files and non-empty ignored directories of one repository.

    Ignored directories are reported once and not descended into. Empty
    ignored directories hold nothing worth backing up and are skipped
    silently.
    """

    def __init__(self, config: Config, executor: GitExecutor, reporter: Reporter):
        self.config = config
        self.executor = executor
        self.reporter = reporter
        self.logger = logging.getLogger('gitsync.scan.ignored')

    def scan(self, root: Path, depth: int = 0) -> None:
        """
        Scan the repository at ``root`` with a fresh visited set.

        ``depth`` is the walker depth of ``root``. Nested repositories the
        walker will reach on its own are skipped here, deeper ones are scanned
        as part of this repository.
        """
        self._scan(root, depth, TraversalContext())

    def _scan(self, directory: Path, depth: int, context: TraversalContext) -> None:
        try:
            if not context.mark(directory):
                return
            names = sorted(os.listdir(directory), key=str.lower)
        except OSError as e:
            self.logger.warning(f"Cannot list {directory}: {e}")
            return

        names = [
            name for name in names
            if name != GIT_DIR_NAME and name not in self.config.ignore_excludes
        ]
        ignored = self._ignored_names(directory, names)

        for name in names:
            if name not in ignored:
                continue
            path = directory / name
            if not path.is_dir() or is_non_empty_directory(path):
                self.reporter.info(directory, f"ignored: {name}")

        for name in names:
            child = directory / name
            if name in ignored or not child.is_dir():
                continue
            # nested repositories within reach get their own pass from the walker
            if depth + 1 <= self.config.max_depth and is_repository_root(child):
                continue
            self._scan(child, depth + 1, context)

    def _ignored_names(self, directory: Path, names: List[str]) -> Set[str]:
        if not names:
            return set()

        try:
            result = self.executor.run(directory, ["check-ignore", "-z", "--stdin"], stdin="\0".join(names) + "\0")
        except CommandExecutionError as e:
            self.logger.warning(f"git check-ignore failed in {directory}: {e}")
            self.reporter.info(directory, "fatal error")
            return set()

        if result.status == 0:
            # NUL separated output is never quoted, so names match byte for byte
            return {name for name in result.stdout.split("\0") if name}
        if result.status == 1:
            return set()

        self.logger.debug(f"git check-ignore exited with {result.status} in {directory}: {result.stderr.strip()}")
        self.reporter.info(directory, "fatal error")
        return set()
