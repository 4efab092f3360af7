"""Repository discovery and divergence detection for gitsync."""

from .branches import BranchStatus, BranchComparison, ParsedBranch, ParseFailure, parse_branch_line, classify_tracking
from .checker import DivergenceChecker
from .executor import CommandResult, GitExecutor
from .ignored import IgnoredFilesScanner
from .paths import relativize, display_path, TraversalContext
from .report import Finding, Reporter
from .version import MIN_GIT_VERSION, verify_git_version
from .walker import RepoWalker

__all__ = [
    'BranchStatus',
    'BranchComparison',
    'ParsedBranch',
    'ParseFailure',
    'parse_branch_line',
    'classify_tracking',
    'DivergenceChecker',
    'CommandResult',
    'GitExecutor',
    'IgnoredFilesScanner',
    'relativize',
    'display_path',
    'TraversalContext',
    'Finding',
    'Reporter',
    'MIN_GIT_VERSION',
    'verify_git_version',
    'RepoWalker'
]
