"""Git worktree topology detection."""

import logging
from pathlib import Path
from typing import Optional

from git import Git
from git.exc import GitCommandError, GitCommandNotFound

from worktree_setup.exceptions import NotAGitRepositoryError
from worktree_setup.models.worktree_info import WorktreeInfo

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


class WorktreeLocator:
    """Works out which checkout a directory belongs to.

    The locator only runs ``git rev-parse`` queries; it never changes the
    repository or the filesystem.

    Example:
        >>> info = WorktreeLocator().detect("/path/to/worktree/src")
        >>> info.is_linked, info.main_root
    """

    def detect(self, working_dir: Optional[str | Path] = None) -> WorktreeInfo:
        """
        Detect worktree information for a directory.

        Args:
            working_dir: Any directory inside the checkout. Defaults to cwd.

        Returns:
            WorktreeInfo for the checkout containing working_dir.

        Raises:
            NotAGitRepositoryError: If working_dir is not inside a git
                checkout, or is inside a submodule.
        """
        cwd = Path(working_dir or Path.cwd()).resolve()
        if not cwd.is_dir():
            raise NotAGitRepositoryError(f"Not a directory: {cwd}")

        git = Git(str(cwd))

        if self._superproject_root(git):
            raise NotAGitRepositoryError(f"Inside a submodule, skipping: {cwd}")

        try:
            toplevel = git.rev_parse("--show-toplevel").strip()
            common_dir = self._resolve(cwd, git.rev_parse("--git-common-dir"))
            git_dir = self._resolve(cwd, git.rev_parse("--git-dir"))
        except (GitCommandError, GitCommandNotFound) as e:
            raise NotAGitRepositoryError(f"Not a git repository: {cwd}") from e

        # Older git prints an empty top level for bare repositories
        if not toplevel:
            raise NotAGitRepositoryError(f"No working tree at: {cwd}")
        worktree_root = self._resolve(cwd, toplevel)

        main_root = common_dir.parent if common_dir.name == GIT_DIR_NAME else common_dir

        info = WorktreeInfo(
            worktree_root=worktree_root,
            main_root=main_root,
            is_linked=git_dir != common_dir,
        )
        logger.debug(
            f"Detected worktree root={info.worktree_root} main={info.main_root} "
            f"linked={info.is_linked}"
        )
        return info

    def _superproject_root(self, git: Git) -> str:
        """Return the superproject working tree, or '' outside a submodule."""
        try:
            return git.rev_parse("--show-superproject-working-tree").strip()
        except (GitCommandError, GitCommandNotFound):
            return ""

    def _resolve(self, cwd: Path, output: str) -> Path:
        """Resolve a rev-parse path, which may be relative to cwd."""
        return (cwd / output.strip()).resolve()


def detect_worktree(working_dir: Optional[str | Path] = None) -> WorktreeInfo:
    """Detect worktree information using a default locator."""
    return WorktreeLocator().detect(working_dir)
