"""Reading the worktreeSetup descriptor from the primary worktree's manifest."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from worktree_setup.config import Config
from worktree_setup.models.setup_config import SetupConfig

logger = logging.getLogger(__name__)


class ManifestReader:
    """Loads the setup descriptor from a JSON manifest.

    Every way of not having a usable descriptor (no file, broken JSON, no
    key, wrong shape) yields None: the caller treats all of them as
    "nothing to do". The manifest is only ever read.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()

    @property
    def filename(self) -> str:
        return self.config.manifest.filename

    @property
    def key(self) -> str:
        return self.config.manifest.key

    def manifest_path(self, main_root: str | Path) -> Path:
        """Get the manifest location under the primary worktree root."""
        return Path(main_root) / self.filename

    def read(self, main_root: str | Path) -> Optional[SetupConfig]:
        """
        Read the setup descriptor from the primary worktree.

        Args:
            main_root: Root directory of the primary worktree.

        Returns:
            SetupConfig, or None if there is no usable descriptor.
        """
        path = self.manifest_path(main_root)
        if not path.is_file():
            logger.debug(f"No manifest at {path}")
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Could not parse {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Manifest {path} is not a JSON object")
            return None

        section = data.get(self.key)
        if section is None:
            logger.debug(f"No '{self.key}' section in {path}")
            return None

        try:
            return SetupConfig.model_validate(section)
        except ValidationError as e:
            logger.warning(f"Invalid '{self.key}' section in {path}: {e}")
            return None
