"""Pydantic model for the worktreeSetup manifest section."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SetupConfig(BaseModel):
    """Setup descriptor read from the primary worktree's manifest.

    JSON keys are ``copy`` and ``run``; both are optional and default to an
    empty list, so ``{}`` is a valid no-op configuration.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    copy_paths: list[str] = Field(
        default_factory=list,
        alias="copy",
        description="Files or folders to copy from the primary worktree, relative to its root",
    )
    run_commands: list[str] = Field(
        default_factory=list,
        alias="run",
        description="Shell commands to run, in order, after copying",
    )

    @field_validator("run_commands")
    @classmethod
    def _drop_blank_commands(cls, value: list[str]) -> list[str]:
        return [command for command in value if command.strip()]
