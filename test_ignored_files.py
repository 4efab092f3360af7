#!/usr/bin/env python3
"""
Unit tests for the ignored files pass.

``git check-ignore -z --stdin`` is simulated by a fake executor that knows a
fixed set of ignored paths, so the traversal and reporting rules can be
checked on a real temporary directory tree.
"""

import io
import os
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from gitsync.config import Config
from gitsync.errors import CommandExecutionError
from gitsync.platform import get_git_executable
from gitsync.scan.executor import CommandResult, GitExecutor
from gitsync.scan.ignored import IgnoredFilesScanner, is_non_empty_directory
from gitsync.scan.report import Reporter

GIT = shutil.which(get_git_executable())


class FakeCheckIgnore:
    """Simulates ``git check-ignore -z --stdin`` for a set of ignored paths."""

    def __init__(self, ignored_paths, status_override=None, error=None):
        self.ignored_paths = {Path(p) for p in ignored_paths}
        self.status_override = status_override
        self.error = error
        self.queries = []

    def run(self, directory, args, stdin=None):
        assert list(args) == ["check-ignore", "-z", "--stdin"]
        names = [name for name in (stdin or "").split("\0") if name]
        self.queries.append((Path(directory), names))

        if self.error is not None:
            raise self.error
        if self.status_override is not None:
            return CommandResult(status=self.status_override, stderr="fatal: bad things")

        matched = [name for name in names if Path(directory) / name in self.ignored_paths]
        if not matched:
            return CommandResult(status=1)
        return CommandResult(status=0, stdout="\0".join(matched) + "\0")


class TestIgnoredFilesScanner(unittest.TestCase):
    """Test cases for IgnoredFilesScanner.scan()."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo = self.temp_dir / "repo"
        (self.repo / ".git").mkdir(parents=True)
        (self.repo / "README.md").write_text("readme")
        (self.repo / "src").mkdir()
        (self.repo / "src" / "main.py").write_text("print('hi')")

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def scan(self, executor, **config_values):
        config = Config(base_dir=self.temp_dir, list_ignored=True, **config_values)
        output = io.StringIO()
        IgnoredFilesScanner(config, executor, Reporter(self.temp_dir, output)).scan(self.repo)
        return output.getvalue().splitlines()

    def test_ignored_file_is_reported(self):
        (self.repo / "debug.log").write_text("log")
        executor = FakeCheckIgnore([self.repo / "debug.log"])

        self.assertEqual(self.scan(executor), ["repo - ignored: debug.log"])

    def test_nested_ignored_file_uses_directory_path(self):
        (self.repo / "src" / "cache.pyc").write_text("bytes")
        executor = FakeCheckIgnore([self.repo / "src" / "cache.pyc"])

        self.assertEqual(self.scan(executor), [f"{Path('repo/src')} - ignored: cache.pyc"])

    def test_non_empty_ignored_directory_is_reported_and_pruned(self):
        build = self.repo / "build"
        (build / "lib").mkdir(parents=True)
        (build / "lib" / "out.o").write_text("obj")
        executor = FakeCheckIgnore([build])

        lines = self.scan(executor)

        self.assertEqual(lines, ["repo - ignored: build"])
        queried = [directory for directory, _ in executor.queries]
        self.assertNotIn(build, queried)
        self.assertNotIn(build / "lib", queried)

    def test_empty_ignored_directory_is_silent_and_pruned(self):
        empty = self.repo / "tmp"
        empty.mkdir()
        executor = FakeCheckIgnore([empty])

        self.assertEqual(self.scan(executor), [])
        self.assertNotIn(empty, [directory for directory, _ in executor.queries])

    def test_nothing_ignored(self):
        executor = FakeCheckIgnore([])

        self.assertEqual(self.scan(executor), [])
        self.assertEqual([d for d, _ in executor.queries], [self.repo, self.repo / "src"])

    def test_git_directory_is_never_queried(self):
        executor = FakeCheckIgnore([])
        self.scan(executor)

        for directory, names in executor.queries:
            self.assertNotIn(".git", names)
            self.assertNotEqual(directory.name, ".git")

    def test_excluded_names_are_neither_queried_nor_descended(self):
        (self.repo / "node_modules" / "pkg").mkdir(parents=True)
        (self.repo / "node_modules" / "pkg" / "index.js").write_text("js")
        executor = FakeCheckIgnore([self.repo / "node_modules"])

        lines = self.scan(executor, ignore_excludes=frozenset({"node_modules"}))

        self.assertEqual(lines, [])
        top_names = executor.queries[0][1]
        self.assertNotIn("node_modules", top_names)
        self.assertNotIn(self.repo / "node_modules", [d for d, _ in executor.queries])

    def test_fatal_exit_status(self):
        executor = FakeCheckIgnore([], status_override=128)

        lines = self.scan(executor)

        self.assertEqual(lines, ["repo - fatal error", f"{Path('repo/src')} - fatal error"])

    def test_executor_error_is_fatal_for_directory(self):
        executor = FakeCheckIgnore([], error=CommandExecutionError("cannot start git"))

        lines = self.scan(executor)

        self.assertIn("repo - fatal error", lines)

    def test_nested_repository_is_left_to_its_own_pass(self):
        nested = self.repo / "vendor" / "lib"
        (nested / ".git").mkdir(parents=True)
        (nested / "junk.tmp").write_text("tmp")
        executor = FakeCheckIgnore([nested / "junk.tmp"])

        self.assertEqual(self.scan(executor), [])
        self.assertNotIn(nested, [d for d, _ in executor.queries])

    def test_nested_repository_beyond_walker_depth_is_scanned(self):
        nested = self.repo / "vendor" / "lib"
        (nested / ".git").mkdir(parents=True)
        (nested / "junk.tmp").write_text("tmp")
        executor = FakeCheckIgnore([nested / "junk.tmp"])

        lines = self.scan(executor, max_depth=1)

        self.assertEqual(lines, [f"{Path('repo/vendor/lib')} - ignored: junk.tmp"])

    def test_directory_without_candidates_runs_no_query(self):
        (self.repo / "empty_dir").mkdir()
        executor = FakeCheckIgnore([])

        self.scan(executor)

        self.assertNotIn(self.repo / "empty_dir", [d for d, _ in executor.queries])


@unittest.skipUnless(GIT, "git executable not available")
class TestIgnoredFilesWithGit(unittest.TestCase):
    """Ignored names reported by a real git, including names git would quote."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo = self.temp_dir / "repo"
        self.repo.mkdir()
        env = dict(os.environ, GIT_CONFIG_NOSYSTEM="1")
        subprocess.run([GIT, "init", "-q"], cwd=self.repo, env=env, check=True, capture_output=True)
        (self.repo / ".gitignore").write_text("*.log\n")
        (self.repo / "notes.txt").write_text("kept")

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def scan(self):
        config = Config(base_dir=self.temp_dir, list_ignored=True)
        output = io.StringIO()
        IgnoredFilesScanner(config, GitExecutor(), Reporter(self.temp_dir, output)).scan(self.repo)
        return output.getvalue().splitlines()

    def test_non_ascii_name_is_reported(self):
        (self.repo / "caf\u00e9.log").write_text("log")
        (self.repo / "plain.log").write_text("log")

        self.assertEqual(self.scan(), [
            "repo - ignored: caf\u00e9.log",
            "repo - ignored: plain.log",
        ])

    @unittest.skipIf(os.name == "nt", "quotes are not allowed in Windows file names")
    def test_name_with_quote_and_space_is_reported(self):
        (self.repo / 'say "hi".log').write_text("log")

        self.assertEqual(self.scan(), ['repo - ignored: say "hi".log'])


class TestIsNonEmptyDirectory(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_empty_and_non_empty(self):
        self.assertFalse(is_non_empty_directory(self.temp_dir))
        (self.temp_dir / "file").write_text("x")
        self.assertTrue(is_non_empty_directory(self.temp_dir))

    def test_missing_directory(self):
        self.assertFalse(is_non_empty_directory(self.temp_dir / "missing"))


if __name__ == "__main__":
    unittest.main()
