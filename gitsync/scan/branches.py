"""
Parsing of ``git branch -vv --no-abbrev --no-color`` output.

Each line looks like ``"<bit> <name> <hash> <remote-info> <message>"`` where

- ``<bit>`` is a space (not current), ``*`` (current branch) or ``+``
  (checked out in another worktree)
- ``<remote-info>`` is empty when no tracking branch is configured, or
  ``[<remote>/<branch><status>]`` where status is empty (in sync) or
  ``: ahead N``, ``: behind N``, ``: ahead N, behind M`` or ``: gone``

Parsing is positional rather than regex based.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class BranchStatus(Enum):
    """Relationship of a local branch to the branch it is compared with."""
    IN_SYNC = "in_sync"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    UNDETERMINED = "undetermined"
    UNTRACKED = "untracked"


@dataclass
class BranchComparison:
    status: BranchStatus
    ahead: Optional[int] = None
    behind: Optional[int] = None

    @property
    def is_ahead(self) -> bool:
        return self.status in (BranchStatus.AHEAD, BranchStatus.DIVERGED)

    @property
    def is_behind(self) -> bool:
        return self.status in (BranchStatus.BEHIND, BranchStatus.DIVERGED)


@dataclass
class ParsedBranch:
    name: str
    commit: str
    is_current: bool = False
    tracking: Optional[str] = None
    subject: str = ""


@dataclass
class ParseFailure:
    line: str
    reason: str
    detached: bool = False


def _split_first(text: str):
    """Split off the first whitespace-delimited token."""
    parts = text.split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def parse_branch_line(line: str) -> Union[ParsedBranch, ParseFailure]:
    """Parse one line of verbose branch output into a tagged result."""
    if len(line.strip()) == 0:
        return ParseFailure(line=line, reason="empty line")

    marker = line[0]
    rest = line[1:].strip()

    if rest.startswith("("):
        # "(HEAD detached at 1a2b3c)" is not a branch
        return ParseFailure(line=line, reason="detached HEAD", detached=True)

    name, rest = _split_first(rest)
    commit, remainder = _split_first(rest)
    if not name or not commit:
        return ParseFailure(line=line, reason="missing branch name or commit")

    tracking = None
    subject = remainder
    if remainder.startswith("["):
        end = remainder.find("]")
        if end < 0:
            return ParseFailure(line=line, reason="unterminated remote annotation")
        tracking = remainder[1:end]
        subject = remainder[end + 1:].strip()

    return ParsedBranch(
        name=name,
        commit=commit,
        is_current=marker == "*",
        tracking=tracking,
        subject=subject,
    )


def _count_after(text: str, token: str) -> Optional[int]:
    index = text.find(token)
    if index < 0:
        return None
    count, _ = _split_first(text[index + len(token):].replace(",", " "))
    return int(count) if count.isdigit() else None


def classify_tracking(tracking: Optional[str]) -> BranchComparison:
    """
    Classify the text between the brackets of a remote annotation.

    ``None`` means no tracking branch. No colon means in sync. A colon
    without ``ahead``/``behind`` (for example ``gone``) is undetermined.
    """
    if tracking is None:
        return BranchComparison(BranchStatus.UNTRACKED)

    colon = tracking.find(":")
    if colon < 0:
        return BranchComparison(BranchStatus.IN_SYNC)

    detail = tracking[colon + 1:]
    has_ahead = "ahead" in detail
    has_behind = "behind" in detail
    ahead = _count_after(detail, "ahead")
    behind = _count_after(detail, "behind")

    if has_ahead and has_behind:
        return BranchComparison(BranchStatus.DIVERGED, ahead=ahead, behind=behind)
    if has_ahead:
        return BranchComparison(BranchStatus.AHEAD, ahead=ahead)
    if has_behind:
        return BranchComparison(BranchStatus.BEHIND, behind=behind)
    return BranchComparison(BranchStatus.UNDETERMINED)


def parse_remote_branches(output: str):
    """Names from ``git branch -r`` output, without symbolic aliases such as ``origin/HEAD -> origin/main``."""
    return [
        line.strip()
        for line in output.split("\n")
        if line.strip() and "->" not in line
    ]


def select_reference_branches(remote_branches, reference_names):
    """Keep remote branches whose name contains any configured reference substring."""
    return [
        ref for ref in remote_branches
        if any(name in ref for name in reference_names)
    ]
