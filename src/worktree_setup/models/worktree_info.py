"""Pydantic models for worktree topology."""

from pathlib import Path

from pydantic import BaseModel, Field


class WorktreeInfo(BaseModel):
    """Where the current checkout lives relative to the primary worktree."""

    worktree_root: Path = Field(description="Top-level directory of the current checkout")
    main_root: Path = Field(description="Top-level directory of the primary worktree")
    is_linked: bool = Field(
        default=False,
        description="Whether the current checkout is a linked (secondary) worktree",
    )
