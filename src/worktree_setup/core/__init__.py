"""
Core modules for worktree-setup.

This package contains the core logic for:
- Worktree topology detection
- Reading the setup descriptor
- The completion ledger
- Background command launching
- Setup orchestration
- Hook installation
"""

from worktree_setup.core.hooks import HookInstaller
from worktree_setup.core.launcher import CommandLauncher
from worktree_setup.core.ledger import SUCCESS_TOKEN, CompletionLedger
from worktree_setup.core.locator import WorktreeLocator, detect_worktree
from worktree_setup.core.manifest import ManifestReader
from worktree_setup.core.setup import WorktreeSetup, run_setup

__all__ = [
    "SUCCESS_TOKEN",
    "CommandLauncher",
    "CompletionLedger",
    "HookInstaller",
    "ManifestReader",
    "WorktreeLocator",
    "WorktreeSetup",
    "detect_worktree",
    "run_setup",
]
