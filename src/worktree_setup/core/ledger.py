"""
Append-only completion ledger for a worktree.

The ledger is a plain-text log at the worktree root. Each setup attempt
appends timestamped lines; a worktree counts as initialized once the
success sentinel appears anywhere in the file. Failure tokens stay in the
file for diagnosis but do not block a retry.
"""

import logging
from datetime import datetime
from pathlib import Path

from worktree_setup.config import DEFAULT_LEDGER_FILENAME
from worktree_setup.exceptions import LedgerWriteError
from worktree_setup.utils.io import append_line, shared_file_lock

logger = logging.getLogger(__name__)

STATUS_PREFIX = "WORKTREE_SETUP_STATUS="
SUCCESS_TOKEN = f"{STATUS_PREFIX}success"
FAILED_TOKEN = f"{STATUS_PREFIX}failed"


def failure_token(stage: str, **fields: object) -> str:
    """Build a failure token such as ``WORKTREE_SETUP_STATUS=failed stage=copy``."""
    parts = [FAILED_TOKEN, f"stage={stage}"]
    parts.extend(f"{name}={value}" for name, value in fields.items())
    return " ".join(parts)


def timestamp() -> str:
    """Local time in ISO-8601 with offset, matching the shell's date format."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class CompletionLedger:
    """Reads and appends the setup ledger of one worktree."""

    def __init__(
        self,
        worktree_root: str | Path,
        filename: str = DEFAULT_LEDGER_FILENAME,
    ) -> None:
        self.worktree_root = Path(worktree_root)
        self.path = self.worktree_root / filename

    def read(self) -> str:
        """Return the ledger content, or '' if there is no ledger yet."""
        try:
            with open(self.path, encoding="utf-8", errors="replace") as f:
                with shared_file_lock(f):
                    return f.read()
        except FileNotFoundError:
            return ""

    def has_succeeded(self) -> bool:
        """Whether any attempt, past or present, recorded success."""
        return SUCCESS_TOKEN in self.read()

    def record(self, message: str) -> str:
        """
        Append one timestamped event line.

        Args:
            message: Event text. Line breaks are flattened to spaces.

        Returns:
            The line written, without its trailing newline.

        Raises:
            LedgerWriteError: If the ledger cannot be written.
        """
        flat = " ".join(message.splitlines())
        line = f"[{timestamp()}] {flat}"
        try:
            append_line(self.path, line)
        except OSError as e:
            raise LedgerWriteError(f"Cannot write ledger {self.path}: {e}") from e
        logger.debug(f"ledger: {flat}")
        return line

    def record_success(self) -> str:
        return self.record(SUCCESS_TOKEN)

    def record_failure(self, stage: str, **fields: object) -> str:
        return self.record(failure_token(stage, **fields))

