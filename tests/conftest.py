"""
Pytest configuration and shared fixtures for worktree-setup tests.
"""

import json
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from worktree_setup.config import Config, LauncherConfig
from worktree_setup.core.ledger import FAILED_TOKEN, SUCCESS_TOKEN


def run_git(cwd: Path, *args: str) -> subprocess.CompletedProcess:
    """Run a git command in cwd, failing the test on error."""
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )


@pytest.fixture
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory for tests (symlinks resolved)."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir).resolve()


@pytest.fixture
def git_repo(temp_directory: Path) -> Path:
    """Create a temporary git repository with one commit."""
    repo_path = temp_directory / "test-repo"
    repo_path.mkdir()

    run_git(repo_path, "init", "-q")
    run_git(repo_path, "config", "user.email", "test@example.com")
    run_git(repo_path, "config", "user.name", "Test User")

    (repo_path / "README.md").write_text("# Test Repository\n")

    run_git(repo_path, "add", ".")
    run_git(repo_path, "commit", "-q", "-m", "Initial commit")

    return repo_path


@pytest.fixture
def git_worktree(git_repo: Path, temp_directory: Path) -> Generator[Path, None, None]:
    """Create a linked worktree of git_repo."""
    worktree_path = temp_directory / "test-worktree"

    run_git(git_repo, "worktree", "add", "-q", "-b", "test-branch", str(worktree_path))

    yield worktree_path

    subprocess.run(
        ["git", "worktree", "remove", "--force", str(worktree_path)],
        cwd=git_repo,
        capture_output=True,
    )


@pytest.fixture
def write_manifest(git_repo: Path) -> Callable[..., Path]:
    """Write package.json with a worktreeSetup section into the primary worktree."""

    def _write(setup: Any = None, raw: str | None = None, **extra: Any) -> Path:
        path = git_repo / "package.json"
        if raw is not None:
            path.write_text(raw)
            return path
        data: dict[str, Any] = {"name": "test-project", "version": "1.0.0", **extra}
        if setup is not None:
            data["worktreeSetup"] = setup
        path.write_text(json.dumps(data, indent=2))
        return path

    return _write


@pytest.fixture
def test_config() -> Config:
    """Config using a plain POSIX shell, so no login profile runs."""
    return Config(launcher=LauncherConfig(shell=["sh", "-c"]))


@pytest.fixture
def wait_for_ledger() -> Callable[..., str]:
    """Poll a ledger file until the background chain writes a terminal status."""

    def _wait(path: Path, chains: int = 1, timeout: float = 15.0) -> str:
        deadline = time.monotonic() + timeout
        content = ""
        while time.monotonic() < deadline:
            if path.exists():
                content = path.read_text()
                finished = [
                    line
                    for line in content.splitlines()
                    if SUCCESS_TOKEN in line or f"{FAILED_TOKEN} stage=run" in line
                ]
                if len(finished) >= chains:
                    return content
            time.sleep(0.05)
        raise AssertionError(f"Command chain did not finish in {path} after {timeout}s:\n{content}")

    return _wait
