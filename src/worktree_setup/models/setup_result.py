"""Pydantic models for setup and init outcomes."""

from enum import Enum

from pydantic import BaseModel, Field


class CopyOutcome(str, Enum):
    """Outcome of copying one configured path."""

    COPIED = "copied"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_MISSING_SOURCE = "skipped_missing_source"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Why a setup run did not perform (or did not finish) its work."""

    NOT_A_REPO = "not-a-repo"
    NOT_LINKED = "not-linked"
    MAIN_ROOT_MISSING = "main-root-missing"
    NO_CONFIG = "no-config"
    ALREADY_INITIALIZED = "already-initialized"
    COPY_FAILED = "copy-failed"
    SPAWN_FAILED = "spawn-failed"


class CopyResult(BaseModel):
    """Result of attempting to copy a single path."""

    path: str = Field(description="Configured path, relative to the worktree roots")
    outcome: CopyOutcome
    error: str | None = Field(default=None, description="Error message when outcome is failed")


class SetupResult(BaseModel):
    """Result of one setup invocation."""

    performed: bool = Field(description="Whether setup ran to the point of success or launch")
    skipped_reason: SkipReason | None = Field(default=None)
    detail: str | None = Field(default=None, description="Human readable explanation")
    copied_files: list[str] = Field(default_factory=list)
    ran_commands: list[str] = Field(
        default_factory=list,
        description="Commands launched in the background (not necessarily finished)",
    )
    copy_results: list[CopyResult] = Field(default_factory=list)
    pid: int | None = Field(default=None, description="Process id of the background command chain")

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str | None = None, **kwargs) -> "SetupResult":
        """Build a result for a run that stopped at a gate or failed part way."""
        return cls(performed=False, skipped_reason=reason, detail=detail, **kwargs)


class InitResult(BaseModel):
    """Result of installing the post-checkout hook."""

    performed: bool
    skipped_reason: str | None = None
    hook_path: str | None = None
    hook_updated: bool = False
    gitignore_updated: bool = False
