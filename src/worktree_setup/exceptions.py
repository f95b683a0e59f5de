"""Custom exceptions for worktree-setup."""


class WorktreeSetupError(Exception):
    """Base exception for all worktree-setup errors."""


class NotAGitRepositoryError(WorktreeSetupError):
    """Raised when the path is not inside a git checkout, or is inside a submodule."""


class LedgerWriteError(WorktreeSetupError):
    """Raised when the completion ledger cannot be written."""


class CommandLaunchError(WorktreeSetupError):
    """Raised when the background command chain cannot be started."""


class HookInstallError(WorktreeSetupError):
    """Raised when the post-checkout hook cannot be written."""
