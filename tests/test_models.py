"""Tests for Pydantic models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from worktree_setup.models import (
    CopyOutcome,
    CopyResult,
    InitResult,
    SetupConfig,
    SetupResult,
    SkipReason,
    WorktreeInfo,
)


class TestSkipReason:
    """Test suite for SkipReason enum."""

    def test_precondition_values(self):
        assert SkipReason.NOT_A_REPO.value == "not-a-repo"
        assert SkipReason.NOT_LINKED.value == "not-linked"
        assert SkipReason.MAIN_ROOT_MISSING.value == "main-root-missing"
        assert SkipReason.NO_CONFIG.value == "no-config"
        assert SkipReason.ALREADY_INITIALIZED.value == "already-initialized"

    def test_failure_values(self):
        assert SkipReason.COPY_FAILED.value == "copy-failed"
        assert SkipReason.SPAWN_FAILED.value == "spawn-failed"


class TestCopyOutcome:
    """Test suite for CopyOutcome enum."""

    def test_values(self):
        assert [o.value for o in CopyOutcome] == [
            "copied",
            "skipped_exists",
            "skipped_missing_source",
            "failed",
        ]


class TestSetupConfig:
    """Test suite for SetupConfig model."""

    def test_aliases(self):
        config = SetupConfig.model_validate({"copy": [".env"], "run": ["make"]})

        assert config.copy_paths == [".env"]
        assert config.run_commands == ["make"]
        assert config.model_dump(by_alias=True) == {"copy": [".env"], "run": ["make"]}

    def test_field_names_accepted(self):
        config = SetupConfig(copy_paths=["a"], run_commands=["b"])

        assert config.copy_paths == ["a"]
        assert config.run_commands == ["b"]

    def test_defaults_are_empty(self):
        config = SetupConfig()

        assert config.copy_paths == []
        assert config.run_commands == []

    def test_rejects_non_string_entries(self):
        with pytest.raises(ValidationError):
            SetupConfig.model_validate({"copy": [{"from": "a"}]})

    def test_is_frozen(self):
        config = SetupConfig()

        with pytest.raises(ValidationError):
            config.copy_paths = ["x"]


class TestWorktreeInfo:
    """Test suite for WorktreeInfo model."""

    def test_is_linked_default(self):
        info = WorktreeInfo(worktree_root=Path("/a"), main_root=Path("/a"))

        assert info.is_linked is False


class TestSetupResult:
    """Test suite for SetupResult model."""

    def test_skipped_helper(self):
        result = SetupResult.skipped(SkipReason.NO_CONFIG, "nothing to do")

        assert result.performed is False
        assert result.skipped_reason == SkipReason.NO_CONFIG
        assert result.detail == "nothing to do"
        assert result.copied_files == []
        assert result.ran_commands == []
        assert result.pid is None

    def test_skipped_helper_keeps_partial_results(self):
        copy = CopyResult(path="a", outcome=CopyOutcome.FAILED, error="denied")

        result = SetupResult.skipped(SkipReason.COPY_FAILED, copy_results=[copy])

        assert result.copy_results == [copy]

    def test_json_dump(self):
        result = SetupResult(performed=True, copied_files=[".env"], ran_commands=["echo done"])

        data = result.model_dump(mode="json")

        assert data["performed"] is True
        assert data["skipped_reason"] is None
        assert data["copied_files"] == [".env"]
        assert data["ran_commands"] == ["echo done"]


class TestInitResult:
    """Test suite for InitResult model."""

    def test_defaults(self):
        result = InitResult(performed=True)

        assert result.hook_updated is False
        assert result.gitignore_updated is False
        assert result.hook_path is None
