"""Cross-platform compatibility utilities for gitsync."""

import os
import platform
from pathlib import Path
from typing import Optional, Dict, Any, Union
from enum import Enum


class PlatformType(Enum):
    """Supported platform types."""
    WINDOWS = "windows"
    OTHER = "other"


class PlatformInfo:
    """Platform information and utilities."""

    def __init__(self):
        """Initialize platform detection."""
        self._platform_type = self._detect_platform()

    def _detect_platform(self) -> PlatformType:
        """Detect the current platform."""
        system = platform.system().lower()

        if system == "windows":
            return PlatformType.WINDOWS
        return PlatformType.OTHER

    @property
    def is_windows(self) -> bool:
        """Check if running on Windows."""
        return self._platform_type == PlatformType.WINDOWS


# Global platform info instance
_platform_info: Optional[PlatformInfo] = None


def get_platform_info() -> PlatformInfo:
    """Get the global platform info instance."""
    global _platform_info
    if _platform_info is None:
        _platform_info = PlatformInfo()
    return _platform_info


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Normalize a user supplied path without resolving symbolic links.

    A symlinked directory must keep its apparent location, so this only
    expands ``~`` and makes the path absolute.

    Args:
        path: Path to normalize

    Returns:
        Absolute, unresolved Path object
    """
    if isinstance(path, str):
        path = Path(path)

    return Path(os.path.abspath(path.expanduser()))


def get_platform_specific_defaults() -> Dict[str, Any]:
    """
    Get platform-specific configuration defaults.

    Returns:
        Dictionary of platform-specific defaults
    """
    return {
        'max_depth': 2,
        'log_level': "WARNING",
        'reference_branches': ("main", "master"),
        'git_executable': get_git_executable(),
    }


def get_git_executable() -> str:
    """
    Get the Git executable name for the current platform.

    Returns:
        Git executable name
    """
    if get_platform_info().is_windows:
        return "git.exe"
    return "git"
