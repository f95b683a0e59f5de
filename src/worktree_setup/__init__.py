"""
worktree-setup - first-time setup for new git worktrees.

This package copies untracked local files from the primary worktree into a
newly created linked worktree and launches its setup commands, recording
completion so the work succeeds at most once per worktree.
"""

__version__ = "0.1.0"

from worktree_setup.config import Config, load_config
from worktree_setup.core.setup import WorktreeSetup, run_setup
from worktree_setup.models import SetupResult, SkipReason

__all__ = [
    "__version__",
    "Config",
    "SetupResult",
    "SkipReason",
    "WorktreeSetup",
    "load_config",
    "run_setup",
]
