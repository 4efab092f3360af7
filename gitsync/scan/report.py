"""Line-oriented reporting of scan findings."""

import sys
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, TextIO, Union

from .paths import display_path


@dataclass
class Finding:
    """One human-readable finding about a directory."""
    path: str
    message: str

    def format(self) -> str:
        return f"{self.path} - {self.message}"


class Reporter:
    """
    Writes findings to the output stream as soon as they are made.

    Findings are not retained, only counted for the run summary.
    """

    def __init__(self, base_dir: Union[str, PurePath], stream: Optional[TextIO] = None):
        self.base_dir = base_dir
        self.stream = stream if stream is not None else sys.stdout
        self.findings = 0

    def info(self, directory: Union[str, PurePath], message: str) -> Finding:
        """Report ``message`` for ``directory``, shown relative to the base directory."""
        finding = Finding(path=display_path(self.base_dir, directory), message=message)
        print(finding.format(), file=self.stream, flush=True)
        self.findings += 1
        return finding
