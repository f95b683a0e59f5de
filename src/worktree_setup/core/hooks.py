"""Installation of the post-checkout hook that triggers worktree setup."""

import logging
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from worktree_setup.config import Config
from worktree_setup.exceptions import HookInstallError
from worktree_setup.models.setup_result import InitResult
from worktree_setup.utils.io import atomic_write_text

logger = logging.getLogger(__name__)

HOOK_NAME = "post-checkout"


def render_hook(command: str) -> str:
    """Get the hook script body for a command."""
    return f"#!/bin/sh\n{command}\n"


def ensure_ignored(repo_root: Path, entry: str) -> bool:
    """
    Make sure entry is listed in the checkout's .gitignore.

    Args:
        repo_root: Top-level directory of the checkout.
        entry: Exact line to look for and append.

    Returns:
        True if .gitignore was created or changed.
    """
    gitignore = repo_root / ".gitignore"
    if not gitignore.exists():
        gitignore.write_text(f"{entry}\n", encoding="utf-8")
        return True

    content = gitignore.read_text(encoding="utf-8")
    if entry in (line.strip() for line in content.splitlines()):
        return False

    separator = "\n" if content and not content.endswith("\n") else ""
    with open(gitignore, "a", encoding="utf-8") as f:
        f.write(f"{separator}{entry}\n")
    return True


class HookInstaller:
    """Installs the post-checkout hook and ignores the ledger file."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()

    @property
    def hook_script(self) -> str:
        return render_hook(self.config.hook.command)

    def install(
        self,
        working_dir: Optional[str | Path] = None,
        force: bool = False,
    ) -> InitResult:
        """
        Install the hook for the repository containing working_dir.

        The hook goes into the shared hooks directory, so it fires for the
        primary worktree and every linked worktree.

        Args:
            working_dir: Any directory inside the repository. Defaults to cwd.
            force: Overwrite an existing hook with different content.

        Returns:
            InitResult describing what changed.

        Raises:
            HookInstallError: If the hook file cannot be written.
        """
        path = Path(working_dir or Path.cwd())
        try:
            repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return InitResult(performed=False, skipped_reason="Not in a git repository")

        if repo.bare or repo.working_tree_dir is None:
            return InitResult(performed=False, skipped_reason="Repository has no working tree")

        repo_root = Path(repo.working_tree_dir)
        hook_path = Path(repo.common_dir).resolve() / "hooks" / HOOK_NAME
        expected = self.hook_script

        existing = hook_path.read_text(encoding="utf-8") if hook_path.exists() else None
        hook_updated = False

        if existing is not None and existing.replace("\r\n", "\n") == expected:
            logger.info(f"{HOOK_NAME} hook already configured")
        elif existing and not force:
            return InitResult(
                performed=False,
                skipped_reason=(
                    f"{HOOK_NAME} hook already exists at {hook_path} "
                    f"(use --force to overwrite)"
                ),
                hook_path=str(hook_path),
            )
        else:
            try:
                atomic_write_text(hook_path, expected, perms=0o755)
            except OSError as e:
                raise HookInstallError(f"Could not write {hook_path}: {e}") from e
            hook_updated = True
            logger.info(f"Configured hook: {hook_path}")

        ledger_filename = self.config.ledger.filename
        gitignore_updated = ensure_ignored(repo_root, ledger_filename)
        if gitignore_updated:
            logger.info(f"Added {ledger_filename} to .gitignore")

        return InitResult(
            performed=True,
            hook_path=str(hook_path),
            hook_updated=hook_updated,
            gitignore_updated=gitignore_updated,
        )
