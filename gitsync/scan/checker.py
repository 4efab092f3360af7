"""Per-repository divergence detection."""

import logging
from pathlib import Path
from typing import List, Optional

from ..config import Config
from ..errors import CommandExecutionError, GitSyncError
from .branches import (
    BranchStatus, ParseFailure, classify_tracking, parse_branch_line,
    parse_remote_branches, select_reference_branches
)
from .executor import CommandResult, GitExecutor
from .report import Reporter


class DivergenceChecker:
    """
    This is the actual algorithm.

    For one repository root:

    - ``git remote update`` to make sure the remote changes are fetched
    - ``git status --porcelain`` must be empty, otherwise the state is dirty
    - ``git branch -vv --no-abbrev --no-color`` lists all local branches with
      their tracking status, see ``gitsync.scan.branches``
    - branches without a tracking branch are compared with ``git rev-list``
      against the remote reference branches
    """

    def __init__(self, config: Config, executor: GitExecutor, reporter: Reporter):
        self.config = config
        self.executor = executor
        self.reporter = reporter
        self.logger = logging.getLogger('gitsync.scan.checker')

    def _git(self, directory: Path, *args: str) -> CommandResult:
        try:
            return self.executor.run(directory, args)
        except CommandExecutionError as e:
            self.logger.warning(f"git {' '.join(args)} failed in {directory}: {e}")
            return CommandResult(status=-1, stderr=str(e))

    def check(self, directory: Path) -> None:
        """Inspect one repository; failures become findings and never propagate."""
        try:
            self._check(directory)
        except (GitSyncError, OSError) as e:
            self.logger.error(f"Inspection of {directory} failed: {e}", exc_info=True)
            self.reporter.info(directory, f"Inspection failed: {e}")

    def _check(self, directory: Path) -> None:
        def info(message: str) -> None:
            self.reporter.info(directory, message)

        if not self._git(directory, "remote", "update").ok:
            info("Could not update remote refs.")
            return

        status = self._git(directory, "status", "--porcelain")
        if not status.ok:
            info("Could not determine status.")
            return
        if status.stdout.strip():
            info("State is dirty")
            return

        listing = self._git(directory, "branch", "-vv", "--no-abbrev", "--no-color")
        if not listing.ok:
            info("Could not determine branches.")
            return

        references: Optional[List[str]] = None

        for line in listing.stdout.split("\n"):
            if not line.strip():
                continue

            parsed = parse_branch_line(line)
            if isinstance(parsed, ParseFailure):
                if parsed.detached:
                    self.logger.debug(f"Skipping detached HEAD in {directory}")
                else:
                    info(f"Cannot parse branch line '{line.strip()}'")
                continue

            comparison = classify_tracking(parsed.tracking)
            if comparison.status == BranchStatus.UNTRACKED:
                if references is None:
                    references = self._reference_branches(directory, info)
                self._compare_with_references(directory, parsed.name, references, info)
            elif comparison.status == BranchStatus.UNDETERMINED:
                info(f"Cannot determine divergence for branch '{parsed.name}'")
            else:
                if comparison.is_ahead and not self.config.behind_only:
                    info(f"Local branch '{parsed.name}' is ahead")
                if comparison.is_behind and not self.config.ahead_only:
                    info(f"Local branch '{parsed.name}' is behind")

    def _reference_branches(self, directory: Path, info) -> List[str]:
        # all will look like "origin/debug", "origin/master", "origin/plus_txn"
        result = self._git(directory, "branch", "-r", "--no-color")
        if not result.ok:
            info("No remote repository found")
            return []

        references = select_reference_branches(
            parse_remote_branches(result.stdout),
            self.config.reference_branches
        )
        self.logger.debug(f"Reference branches in {directory}: {references}")
        return references

    def _compare_with_references(self, directory: Path, branch: str, references: List[str], info) -> None:
        """Compare a local-only branch with each reference until one yields a finding."""
        for ref in references:
            rev_range = f"{branch}...{ref}"
            reported = False

            if not self.config.behind_only:
                ahead = self._git(directory, "rev-list", "--left-only", rev_range)
                if not ahead.ok:
                    # counted as ahead so the problem stays visible
                    info("Cannot determine rev-list")
                    return
                if ahead.stdout.strip():
                    info(f"Local branch '{branch}' is ahead")
                    reported = True

            if not self.config.ahead_only:
                behind = self._git(directory, "rev-list", "--right-only", rev_range)
                if not behind.ok:
                    info("Cannot determine rev-list")
                    return
                if behind.stdout.strip():
                    info(f"Local branch '{branch}' is behind")
                    reported = True

            if reported:
                return
