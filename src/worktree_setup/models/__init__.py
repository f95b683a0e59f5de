"""
Pydantic models for worktree-setup.

This package contains data models for:
- Worktree topology
- The worktreeSetup manifest section
- Setup and init results
"""

from worktree_setup.models.setup_config import SetupConfig
from worktree_setup.models.setup_result import (
    CopyOutcome,
    CopyResult,
    InitResult,
    SetupResult,
    SkipReason,
)
from worktree_setup.models.worktree_info import WorktreeInfo

__all__ = [
    "CopyOutcome",
    "CopyResult",
    "InitResult",
    "SetupConfig",
    "SetupResult",
    "SkipReason",
    "WorktreeInfo",
]
