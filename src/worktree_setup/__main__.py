"""Allow running as ``python -m worktree_setup``."""

from worktree_setup.cli import main

if __name__ == "__main__":
    main()
