"""
gitsync - find git repositories whose local branches diverge from their remotes.

Scans a directory tree, reports dirty working trees, branches that are ahead
of or behind their remote counterparts and, optionally, ignored files.
"""

__version__ = "1.0.0"
__description__ = "Report git repositories that are out of sync with their remotes"

from .cli import main

__all__ = ["main"]
