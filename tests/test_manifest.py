"""Tests for reading the worktreeSetup manifest section."""

import json
from pathlib import Path

import pytest

from worktree_setup.config import Config, ManifestConfig
from worktree_setup.core.manifest import ManifestReader
from worktree_setup.models.setup_config import SetupConfig


class TestManifestReader:
    """Test suite for ManifestReader class."""

    @pytest.fixture
    def reader(self) -> ManifestReader:
        return ManifestReader()

    def test_reads_copy_and_run(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest({"copy": [".env", "config/local.json"], "run": ["npm install"]})

        config = reader.read(git_repo)

        assert config == SetupConfig(copy=[".env", "config/local.json"], run=["npm install"])
        assert config.copy_paths == [".env", "config/local.json"]
        assert config.run_commands == ["npm install"]

    def test_missing_manifest_returns_none(self, reader: ManifestReader, git_repo: Path):
        assert reader.read(git_repo) is None

    def test_invalid_json_returns_none(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest(raw="{ not json")

        assert reader.read(git_repo) is None

    def test_non_object_returns_none(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest(raw='["worktreeSetup"]')

        assert reader.read(git_repo) is None

    def test_missing_key_returns_none(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest()

        assert reader.read(git_repo) is None

    def test_null_section_returns_none(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest(raw=json.dumps({"worktreeSetup": None}))

        assert reader.read(git_repo) is None

    def test_wrong_shape_returns_none(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest({"copy": ".env"})

        assert reader.read(git_repo) is None

    def test_empty_section_is_valid_noop(
        self, reader: ManifestReader, git_repo: Path, write_manifest
    ):
        write_manifest({})

        config = reader.read(git_repo)

        assert config is not None
        assert config.copy_paths == []
        assert config.run_commands == []

    def test_blank_commands_are_dropped(
        self, reader: ManifestReader, git_repo: Path, write_manifest
    ):
        write_manifest({"run": ["", "   ", "make setup"]})

        assert reader.read(git_repo).run_commands == ["make setup"]

    def test_unknown_keys_ignored(self, reader: ManifestReader, git_repo: Path, write_manifest):
        write_manifest({"copy": [".env"], "extra": True})

        assert reader.read(git_repo).copy_paths == [".env"]

    def test_does_not_modify_manifest(
        self, reader: ManifestReader, git_repo: Path, write_manifest
    ):
        path = write_manifest({"copy": [".env"]})
        before = path.read_bytes()

        reader.read(git_repo)

        assert path.read_bytes() == before

    def test_custom_manifest_location(self, git_repo: Path):
        config = Config(manifest=ManifestConfig(filename="setup.json", key="setup"))
        (git_repo / "setup.json").write_text(json.dumps({"setup": {"run": ["make"]}}))

        reader = ManifestReader(config)

        assert reader.manifest_path(git_repo) == git_repo / "setup.json"
        assert reader.read(git_repo).run_commands == ["make"]
