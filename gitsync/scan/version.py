"""Minimum git version check run once at startup."""

import logging
from typing import Tuple

from ..errors import ToolNotFound, UnsupportedVersion, VersionUndetermined, CommandExecutionError
from .executor import GitExecutor

# minimum acceptable git version
MIN_GIT_VERSION: Tuple[int, int] = (2, 11)

VERSION_PREFIX = "git version "


def parse_git_version(output: str) -> Tuple[int, int]:
    """
    Extract ``(major, minor)`` from ``git --version`` output.

    Accepts vendor suffixes such as ``2.39.3 (Apple Git-145)`` or
    ``2.41.0.windows.1``. Raises VersionUndetermined for anything else.
    """
    text = output.strip()
    if not text.startswith(VERSION_PREFIX):
        raise VersionUndetermined("Cannot determine git version")

    fields = text[len(VERSION_PREFIX):].strip().split(".")
    if len(fields) < 2:
        raise VersionUndetermined("Cannot determine git version")

    # minor may carry trailing text when there is no patch level ("2.11 (foo)")
    minor_text = fields[1].split()[0] if fields[1].split() else ""
    try:
        return int(fields[0]), int(minor_text)
    except ValueError:
        raise VersionUndetermined("Cannot determine git version")


def check_minimum_version(version: Tuple[int, int], minimum: Tuple[int, int] = MIN_GIT_VERSION) -> None:
    if tuple(version) < tuple(minimum):
        raise UnsupportedVersion(
            f"git version {version[0]}.{version[1]} too old, "
            f"requires at least {minimum[0]}.{minimum[1]}"
        )


def verify_git_version(executor: GitExecutor, minimum: Tuple[int, int] = MIN_GIT_VERSION) -> Tuple[int, int]:
    """Fail with ToolNotFound, VersionUndetermined or UnsupportedVersion unless git is usable."""
    logger = logging.getLogger('gitsync.scan.version')

    try:
        result = executor.run(None, ["--version"])
    except CommandExecutionError as e:
        logger.debug(f"git --version could not be started: {e}")
        raise ToolNotFound("git not found")

    if not result.ok:
        logger.debug(f"git --version exited with {result.status}: {result.stderr.strip()}")
        raise ToolNotFound("git not found")

    version = parse_git_version(result.stdout)
    check_minimum_version(version, minimum)
    logger.info(f"Using git {version[0]}.{version[1]}")
    return version
