"""Configuration management for gitsync."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, FrozenSet, Iterable, Optional, Any

from .errors import ConfigurationError
from .platform import get_platform_specific_defaults, get_git_executable, normalize_path

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def split_names(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated list, dropping blanks and surrounding whitespace."""
    if not value:
        return ()
    return tuple(name.strip() for name in value.split(",") if name.strip())


@dataclass(frozen=True)
class Config:
    """Scan configuration, validated on construction and read-only afterwards."""

    # Traversal
    base_dir: Path
    max_depth: int = 2

    # Divergence reporting
    ahead_only: bool = False
    behind_only: bool = False
    reference_branches: Tuple[str, ...] = ("main", "master")

    # Ignored files pass
    list_ignored: bool = False
    ignore_excludes: FrozenSet[str] = field(default_factory=frozenset)

    # Environment
    git_executable: str = field(default_factory=get_git_executable)
    log_level: str = "WARNING"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.base_dir, Path):
            raise ConfigurationError(f"base_dir must be a Path, got {type(self.base_dir).__name__}")

        if not self.base_dir.is_absolute():
            raise ConfigurationError(f"base_dir must be absolute: {self.base_dir}")

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise ConfigurationError("max_depth must be a non-negative integer")

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.log_level}. Must be one of {VALID_LOG_LEVELS}")

        if not self.git_executable:
            raise ConfigurationError("git_executable must not be empty")

        if any(not name for name in self.reference_branches):
            raise ConfigurationError("reference branch names must not be empty")


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def load_configuration(base_dir: Any, **overrides: Any) -> Config:
    """
    Build a Config from platform defaults, GITSYNC_* environment variables
    and explicit overrides, in increasing order of precedence.

    Overrides whose value is None are ignored, so unset command line options
    fall through to the environment.
    """
    defaults = get_platform_specific_defaults()

    values = {
        'max_depth': _int_from_env("GITSYNC_MAX_DEPTH", defaults['max_depth']),
        'reference_branches': split_names(os.getenv("GITSYNC_REF_BRANCHES")) or defaults['reference_branches'],
        'log_level': os.getenv("GITSYNC_LOG_LEVEL", defaults['log_level']).upper(),
        'git_executable': os.getenv("GITSYNC_GIT_EXECUTABLE") or defaults['git_executable'],
    }

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    if 'reference_branches' in values:
        values['reference_branches'] = tuple(values['reference_branches'])
    if 'ignore_excludes' in values:
        values['ignore_excludes'] = frozenset(values['ignore_excludes'])
        # Naming exclusions only makes sense when listing ignored files
        if values['ignore_excludes']:
            values['list_ignored'] = True
    if isinstance(values.get('log_level'), str):
        values['log_level'] = values['log_level'].upper()

    return Config(base_dir=normalize_path(base_dir), **values)


def validate_configuration(config: Config) -> List[str]:
    """Validate a configuration against the file system and return errors and warnings."""
    issues = []

    if not config.base_dir.exists():
        issues.append(f"ERROR: Not a directory: {config.base_dir}")
    elif not config.base_dir.is_dir():
        issues.append(f"ERROR: Not a directory: {config.base_dir}")

    if config.ahead_only and config.behind_only:
        issues.append("WARNING: Both ahead-only and behind-only are set; no divergence will be reported")

    if not config.reference_branches:
        issues.append("WARNING: No reference branches configured; local-only branches are not compared")

    return issues


def format_names(names: Iterable[str]) -> str:
    return ",".join(names)
