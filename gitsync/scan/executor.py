"""Git command execution using GitPython."""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from git.cmd import Git
from git.exc import GitCommandNotFound

from ..errors import CommandExecutionError
from ..platform import get_git_executable


@dataclass
class CommandResult:
    """Exit status and captured output of one git invocation."""
    status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


class GitExecutor:
    """
    Runs git inside a directory and captures its output.

    Non-zero exit codes are returned, not raised. Only a process that cannot
    be started raises CommandExecutionError.
    """

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable or get_git_executable()
        self.logger = logging.getLogger('gitsync.scan.executor')

    def run(self, directory: Optional[Path], args: Sequence[str], stdin: Optional[str] = None) -> CommandResult:
        """
        Execute ``git <args>`` with ``directory`` as working directory.

        Args:
            directory: Working directory, or None for the current one
            args: Git arguments, without the executable
            stdin: Text fed to the process on standard input

        Returns:
            CommandResult with exit status and full stdout/stderr
        """
        command = [self.executable, *args]
        git_cmd = Git(str(directory) if directory is not None else None)
        self.logger.debug(f"Running {' '.join(command)} in {directory}")

        try:
            if stdin is None:
                status, stdout, stderr = git_cmd.execute(
                    command,
                    with_extended_output=True,
                    with_exceptions=False
                )
            else:
                # GitPython hands istream straight to Popen, so it needs a real file
                with tempfile.TemporaryFile() as istream:
                    istream.write(stdin.encode("utf-8"))
                    istream.seek(0)
                    status, stdout, stderr = git_cmd.execute(
                        command,
                        istream=istream,
                        with_extended_output=True,
                        with_exceptions=False
                    )
        except GitCommandNotFound as e:
            raise CommandExecutionError(f"Cannot run {command[0]}: {e}")
        except OSError as e:
            raise CommandExecutionError(f"Cannot run {' '.join(command)} in {directory}: {e}")

        self.logger.debug(f"{' '.join(command)} exited with {status}")
        return CommandResult(status=status, stdout=stdout or "", stderr=stderr or "")
