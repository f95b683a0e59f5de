"""Background launching of setup commands.

The configured commands run as one detached shell chain so that the git
hook which triggered setup can return immediately. The chain's combined
output is appended to the ledger, which is also where it reports its
terminal status.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from worktree_setup.config import Config
from worktree_setup.core.ledger import SUCCESS_TOKEN, failure_token
from worktree_setup.exceptions import CommandLaunchError

logger = logging.getLogger(__name__)

TIMESTAMP = "[$(date '+%Y-%m-%dT%H:%M:%S%z')]"


def build_script(commands: list[str]) -> str:
    """
    Build the shell script for a command chain.

    Commands run in order inside a subshell and the chain stops at the
    first non-zero exit. Each command sits in its own brace group so a
    trailing ``;``, ``&`` or comment does not break the ``&&`` join, and an
    ``exit`` in a command only ends the subshell. The script always prints
    a success or failure status line with the chain's exit code.

    Args:
        commands: Shell command strings, in execution order.

    Returns:
        The script text.
    """
    chain = " && ".join(f"{{\n{command}\n}}" for command in commands)
    lines = [
        f'echo "{TIMESTAMP} command run start ({len(commands)} command(s))"',
        "(",
        chain,
        ")",
        "rc=$?",
        'if [ "$rc" -eq 0 ]; then',
        f'  echo "{TIMESTAMP} {SUCCESS_TOKEN}"',
        "else",
        f'  echo "{TIMESTAMP} {failure_token("run", exit_code="$rc")}"',
        "fi",
        'exit "$rc"',
    ]
    return "\n".join(lines) + "\n"


class CommandLauncher:
    """Starts command chains detached from the calling process."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()

    @property
    def shell(self) -> list[str]:
        return list(self.config.launcher.shell)

    def launch(
        self,
        commands: list[str],
        cwd: str | Path,
        log_sink: str | Path,
        extra_env: Optional[dict[str, str]] = None,
    ) -> subprocess.Popen:
        """
        Launch commands as one background chain.

        The process gets its own session, reads from /dev/null and appends
        stdout and stderr to log_sink. The caller is not expected to wait.

        Args:
            commands: Shell command strings, in execution order.
            cwd: Directory the chain runs in.
            log_sink: File that receives the chain's output and status line.
            extra_env: Variables added to the inherited environment.

        Returns:
            Popen handle of the shell running the chain.

        Raises:
            ValueError: If commands is empty.
            CommandLaunchError: If the shell cannot be started.
        """
        if not commands:
            raise ValueError("At least one command is required")

        argv = [*self.shell, build_script(commands)]
        env = os.environ.copy()
        if extra_env:
            env.update(extra_env)

        logger.debug(f"Launching {len(commands)} command(s) with {self.shell[0]} in {cwd}")

        try:
            with open(log_sink, "ab") as sink:
                process = subprocess.Popen(
                    argv,
                    cwd=str(cwd),
                    stdin=subprocess.DEVNULL,
                    stdout=sink,
                    stderr=subprocess.STDOUT,
                    env=env,
                    close_fds=True,
                    start_new_session=True,
                )
        except OSError as e:
            raise CommandLaunchError(f"Failed to start {self.shell[0]}: {e}") from e

        logger.debug(f"Background chain started pid={process.pid}")
        return process
