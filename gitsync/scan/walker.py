"""Recursive discovery of git repositories below the base directory."""

import logging
import os
from pathlib import Path
from typing import List, Optional

from ..config import Config
from .checker import DivergenceChecker
from .ignored import IgnoredFilesScanner
from .paths import GIT_DIR_NAME, TraversalContext, is_repository_root
from .performance_logger import PerformanceLogger


def list_subdirectories(directory: Path, logger: logging.Logger) -> List[Path]:
    """Child directories except ``.git``, sorted case-insensitively, symlinks included."""
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return []

    children = []
    for entry in entries:
        if entry.name == GIT_DIR_NAME:
            continue
        try:
            if entry.is_dir():
                children.append(directory / entry.name)
        except OSError:
            continue

    return sorted(children, key=lambda p: p.name.lower())


class RepoWalker:
    """
    Depth-first walk from the base directory.

    Every repository root is checked for divergence and, on request, for
    ignored files. The walk continues below repository roots so nested
    repositories are found too.
    """

    def __init__(
        self,
        config: Config,
        checker: DivergenceChecker,
        ignored_scanner: Optional[IgnoredFilesScanner] = None,
        performance_logger: Optional[PerformanceLogger] = None
    ):
        self.config = config
        self.checker = checker
        self.ignored_scanner = ignored_scanner
        self.performance_logger = performance_logger or PerformanceLogger()
        self.logger = logging.getLogger('gitsync.scan.walker')

    def walk(self) -> int:
        """Scan the configured base directory; returns the number of repositories inspected."""
        return self._walk(self.config.base_dir, 0, TraversalContext())

    def _walk(self, directory: Path, depth: int, context: TraversalContext) -> int:
        try:
            if not context.mark(directory):
                self.logger.debug(f"Already visited {directory}")
                return 0
        except OSError as e:
            self.logger.warning(f"Cannot access {directory}: {e}")
            return 0

        inspected = 0
        if is_repository_root(directory):
            self._inspect(directory, depth)
            inspected += 1

        if depth == self.config.max_depth:
            return inspected

        for child in list_subdirectories(directory, self.logger):
            inspected += self._walk(child, depth + 1, context)

        return inspected

    def _inspect(self, directory: Path, depth: int) -> None:
        self.logger.info(f"Inspecting repository {directory}")
        with self.performance_logger.time_operation(f"inspect {directory}", context={'path': str(directory)}):
            self.checker.check(directory)
            if self.config.list_ignored and self.ignored_scanner is not None:
                self.ignored_scanner.scan(directory, depth)
