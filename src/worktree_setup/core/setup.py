"""Worktree setup orchestration.

This module decides whether a checkout needs setting up and, if so,
copies missing files from the primary worktree and launches the setup
commands. Every attempt is written to the worktree's ledger.

Gates are checked in a fixed order and the first unmet one ends the run
with a SkipReason:

    not a repo -> not linked -> main root missing -> no config
    -> already initialized

There is no lock around the gates: two concurrent invocations on the same
worktree can both launch the command chain, so configured commands must be
safe to run twice. Commands finish after run() returns; their outcome is
only visible in the ledger.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from worktree_setup.config import Config
from worktree_setup.core.launcher import CommandLauncher
from worktree_setup.core.ledger import CompletionLedger
from worktree_setup.core.locator import WorktreeLocator
from worktree_setup.core.manifest import ManifestReader
from worktree_setup.exceptions import CommandLaunchError, NotAGitRepositoryError
from worktree_setup.models.setup_config import SetupConfig
from worktree_setup.models.setup_result import (
    CopyOutcome,
    CopyResult,
    SetupResult,
    SkipReason,
)
from worktree_setup.models.worktree_info import WorktreeInfo

logger = logging.getLogger(__name__)

COPY_LEDGER_MESSAGES = {
    CopyOutcome.COPIED: "copy: copied {path}",
    CopyOutcome.SKIPPED_EXISTS: "copy: skipped (exists) {path}",
    CopyOutcome.SKIPPED_MISSING_SOURCE: "copy: skipped (missing source) {path}",
    CopyOutcome.FAILED: "copy: failed {path} ({error})",
}


def _copy_file_exclusive(source: Path, destination: Path) -> None:
    """Copy a file with metadata, failing if destination already exists."""
    with open(source, "rb") as src:
        with open(destination, "xb") as dst:
            try:
                shutil.copyfileobj(src, dst)
            except OSError:
                dst.close()
                destination.unlink(missing_ok=True)
                raise
    shutil.copystat(source, destination)


def copy_if_missing(source: Path, destination: Path) -> CopyOutcome:
    """
    Copy source to destination unless that would overwrite something.

    Directories are copied recursively with symlinks preserved. Parent
    directories of the destination are created as needed. A destination
    created by another process between the check and the copy is reported
    as SKIPPED_EXISTS and left untouched.

    Returns:
        SKIPPED_MISSING_SOURCE, SKIPPED_EXISTS or COPIED.

    Raises:
        OSError: If the copy itself fails.
    """
    if not source.exists():
        return CopyOutcome.SKIPPED_MISSING_SOURCE
    # A dangling symlink still occupies the destination
    if destination.exists() or destination.is_symlink():
        return CopyOutcome.SKIPPED_EXISTS

    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        if source.is_dir():
            shutil.copytree(source, destination, symlinks=True)
        else:
            _copy_file_exclusive(source, destination)
    except FileExistsError:
        logger.debug(f"{destination} appeared during copy, leaving it in place")
        return CopyOutcome.SKIPPED_EXISTS
    return CopyOutcome.COPIED


class WorktreeSetup:
    """Runs first-time setup for a linked worktree.

    Example:
        >>> from worktree_setup.core import WorktreeSetup
        >>> result = WorktreeSetup().run("/path/to/linked-worktree")
        >>> result.performed, result.skipped_reason
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        locator: Optional[WorktreeLocator] = None,
        manifest_reader: Optional[ManifestReader] = None,
        launcher: Optional[CommandLauncher] = None,
    ) -> None:
        self.config = config or Config()
        self.locator = locator or WorktreeLocator()
        self.manifest_reader = manifest_reader or ManifestReader(self.config)
        self.launcher = launcher or CommandLauncher(self.config)

    def ledger_for(self, worktree_root: str | Path) -> CompletionLedger:
        return CompletionLedger(worktree_root, self.config.ledger.filename)

    def run(
        self,
        working_dir: Optional[str | Path] = None,
        verbose: bool = False,
    ) -> SetupResult:
        """
        Set up the worktree containing working_dir, if it needs it.

        Args:
            working_dir: Any directory inside the worktree. Defaults to cwd.
            verbose: Log progress at INFO instead of DEBUG.

        Returns:
            SetupResult. performed is True once files are copied and either
            success was recorded or the command chain was launched.

        Raises:
            LedgerWriteError: If the ledger cannot be written at all.
        """
        progress = logger.info if verbose else logger.debug

        try:
            info = self.locator.detect(working_dir)
        except NotAGitRepositoryError as e:
            return SetupResult.skipped(SkipReason.NOT_A_REPO, str(e))

        if not info.is_linked:
            return SetupResult.skipped(SkipReason.NOT_LINKED, "Not a linked worktree")

        if not info.main_root.exists():
            return SetupResult.skipped(
                SkipReason.MAIN_ROOT_MISSING,
                f"Main worktree not found at {info.main_root}",
            )

        setup_config = self.manifest_reader.read(info.main_root)
        if setup_config is None:
            return SetupResult.skipped(
                SkipReason.NO_CONFIG,
                f"No {self.manifest_reader.key} config in {self.manifest_reader.filename}",
            )

        ledger = self.ledger_for(info.worktree_root)
        if ledger.has_succeeded():
            return SetupResult.skipped(SkipReason.ALREADY_INITIALIZED, "Already initialized")

        return self._perform(info, setup_config, ledger, progress)

    def _perform(
        self,
        info: WorktreeInfo,
        setup_config: SetupConfig,
        ledger: CompletionLedger,
        progress,
    ) -> SetupResult:
        ledger.record(f"setup start for {info.worktree_root}")
        progress(f"Setting up worktree: {info.worktree_root}")

        copy_results: list[CopyResult] = []
        for rel in setup_config.copy_paths:
            result = self._copy_one(info, rel)
            copy_results.append(result)
            ledger.record(
                COPY_LEDGER_MESSAGES[result.outcome].format(path=rel, error=result.error)
            )

            if result.outcome == CopyOutcome.FAILED:
                logger.error(f"Failed to copy {rel}: {result.error}")
                ledger.record_failure("copy")
                return SetupResult.skipped(
                    SkipReason.COPY_FAILED,
                    f"Failed to copy {rel}: {result.error}",
                    copied_files=_copied(copy_results),
                    copy_results=copy_results,
                )
            progress(f"{result.outcome.value}: {rel}")

        copied_files = _copied(copy_results)
        commands = setup_config.run_commands

        if not commands:
            ledger.record_success()
            progress("Setup complete")
            return SetupResult(
                performed=True,
                copied_files=copied_files,
                copy_results=copy_results,
            )

        ledger.record(f"run: launching {len(commands)} command(s) in background")
        try:
            process = self.launcher.launch(
                commands,
                cwd=info.worktree_root,
                log_sink=ledger.path,
                extra_env={
                    "WORKTREE_SETUP_ROOT": str(info.worktree_root),
                    "WORKTREE_SETUP_MAIN_ROOT": str(info.main_root),
                },
            )
        except CommandLaunchError as e:
            logger.error(f"Failed to spawn run commands: {e}")
            ledger.record_failure("spawn", error=str(e))
            return SetupResult.skipped(
                SkipReason.SPAWN_FAILED,
                str(e),
                copied_files=copied_files,
                copy_results=copy_results,
            )

        ledger.record(f"run: background process started pid={process.pid}")
        progress(
            f"Running {len(commands)} command(s) in background (log: {ledger.path.name})"
        )
        return SetupResult(
            performed=True,
            copied_files=copied_files,
            ran_commands=list(commands),
            copy_results=copy_results,
            pid=process.pid,
        )

    def _copy_one(self, info: WorktreeInfo, rel: str) -> CopyResult:
        source = info.main_root / rel
        destination = info.worktree_root / rel
        try:
            outcome = copy_if_missing(source, destination)
        except OSError as e:
            return CopyResult(path=rel, outcome=CopyOutcome.FAILED, error=str(e))
        return CopyResult(path=rel, outcome=outcome)


def _copied(results: list[CopyResult]) -> list[str]:
    return [r.path for r in results if r.outcome == CopyOutcome.COPIED]


def run_setup(
    working_dir: Optional[str | Path] = None,
    verbose: bool = False,
    config: Optional[Config] = None,
) -> SetupResult:
    """Run worktree setup with default collaborators."""
    return WorktreeSetup(config).run(working_dir, verbose=verbose)


__all__ = [
    "WorktreeSetup",
    "copy_if_missing",
    "run_setup",
]
