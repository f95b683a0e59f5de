"""
Configuration management for worktree-setup.

Loads tool settings from TOML files in the following priority:
1. Path specified via --config flag
2. .worktree-setup.toml in current directory
3. ~/.config/worktree-setup/config.toml

These settings describe how the tool behaves (file names, shell). What a
project wants copied and run lives in its manifest, see core.manifest.
"""

import logging
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_FILENAME = ".worktree-setup.log"
DEFAULT_MANIFEST_FILENAME = "package.json"
DEFAULT_MANIFEST_KEY = "worktreeSetup"
DEFAULT_HOOK_COMMAND = "worktree-setup"


class LedgerConfig(BaseModel):
    """Configuration for the per-worktree completion ledger."""

    filename: str = Field(
        default=DEFAULT_LEDGER_FILENAME,
        description="Ledger file name, created at the worktree root",
    )


class ManifestConfig(BaseModel):
    """Where setup instructions are read from in the primary worktree."""

    filename: str = Field(
        default=DEFAULT_MANIFEST_FILENAME,
        description="JSON manifest file at the primary worktree root",
    )
    key: str = Field(
        default=DEFAULT_MANIFEST_KEY,
        description="Top-level key holding the copy/run descriptor",
    )


class LauncherConfig(BaseModel):
    """Configuration for background command launching."""

    shell: list[str] = Field(
        default_factory=lambda: ["bash", "-lc"],
        description="Shell argv prefix; the generated script is appended as the last argument",
    )

    @field_validator("shell")
    @classmethod
    def _shell_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("shell must name at least an executable")
        return value


class HookConfig(BaseModel):
    """Configuration for the installed post-checkout hook."""

    command: str = Field(
        default=DEFAULT_HOOK_COMMAND,
        description="Command the post-checkout hook runs",
    )


class Config(BaseModel):
    """Main configuration model for worktree-setup."""

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    launcher: LauncherConfig = Field(default_factory=LauncherConfig)
    hook: HookConfig = Field(default_factory=HookConfig)


def get_search_paths(config_path: Optional[str] = None) -> list[Path]:
    """Get candidate config file locations in priority order."""
    paths = [
        Path(config_path) if config_path else None,
        Path.cwd() / ".worktree-setup.toml",
        Path.home() / ".config" / "worktree-setup" / "config.toml",
    ]
    return [path for path in paths if path is not None]


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        Config instance with loaded or default values.
    """
    for path in get_search_paths(config_path):
        if not path.exists():
            continue
        try:
            data = toml.load(path)
            return Config(**data)
        except (OSError, toml.TomlDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {path}: {e}")
            continue

    return Config()
