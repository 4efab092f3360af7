#!/usr/bin/env python3
"""
Unit tests for the startup git version check.

The executor is mocked so no git executable is needed.
"""

import unittest
from unittest.mock import MagicMock

from gitsync.errors import (
    CommandExecutionError, ToolNotFound, UnsupportedVersion, VersionUndetermined
)
from gitsync.scan.executor import CommandResult
from gitsync.scan.version import (
    MIN_GIT_VERSION, check_minimum_version, parse_git_version, verify_git_version
)


def create_executor(stdout: str = "", status: int = 0, error: Exception = None) -> MagicMock:
    """Create an executor mock answering every call with the same result."""
    executor = MagicMock()
    if error is not None:
        executor.run.side_effect = error
    else:
        executor.run.return_value = CommandResult(status=status, stdout=stdout)
    return executor


class TestParseGitVersion(unittest.TestCase):
    """Test cases for parse_git_version()."""

    def test_plain_version(self):
        self.assertEqual(parse_git_version("git version 2.39.2\n"), (2, 39))

    def test_vendor_suffixes(self):
        self.assertEqual(parse_git_version("git version 2.39.3 (Apple Git-145)"), (2, 39))
        self.assertEqual(parse_git_version("git version 2.41.0.windows.1"), (2, 41))

    def test_two_component_version(self):
        self.assertEqual(parse_git_version("git version 2.11"), (2, 11))

    def test_unrecognized_output(self):
        for output in ("", "hg version 6.1", "git version", "git version two.eleven", "git version 2"):
            with self.subTest(output=output):
                with self.assertRaises(VersionUndetermined):
                    parse_git_version(output)


class TestMinimumVersion(unittest.TestCase):
    """Versions are compared on (major, minor)."""

    def test_minimum_is_2_11(self):
        self.assertEqual(MIN_GIT_VERSION, (2, 11))

    def test_older_minor_rejected(self):
        with self.assertRaises(UnsupportedVersion) as ctx:
            check_minimum_version((2, 10))
        self.assertIn("2.10 too old", str(ctx.exception))

    def test_older_major_rejected(self):
        with self.assertRaises(UnsupportedVersion):
            check_minimum_version((1, 99))

    def test_newer_accepted(self):
        check_minimum_version((2, 11))
        check_minimum_version((3, 0))


class TestVerifyGitVersion(unittest.TestCase):
    """Test cases for verify_git_version() against a mocked executor."""

    def test_too_old_version_fails(self):
        executor = create_executor("git version 2.10.1\n")
        with self.assertRaises(UnsupportedVersion):
            verify_git_version(executor)

    def test_supported_version_passes(self):
        executor = create_executor("git version 2.11.0\n")
        self.assertEqual(verify_git_version(executor), (2, 11))
        executor.run.assert_called_once_with(None, ["--version"])

    def test_garbage_output_fails_determinately(self):
        executor = create_executor("something unexpected")
        with self.assertRaises(VersionUndetermined):
            verify_git_version(executor)

    def test_missing_executable(self):
        executor = create_executor(error=CommandExecutionError("No such file"))
        with self.assertRaises(ToolNotFound):
            verify_git_version(executor)

    def test_non_zero_exit(self):
        executor = create_executor(status=127)
        with self.assertRaises(ToolNotFound):
            verify_git_version(executor)


if __name__ == "__main__":
    unittest.main()
