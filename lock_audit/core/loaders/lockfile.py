"""Loader for npm package-lock.json files."""

import json
from pathlib import Path
from typing import Any

from .base import BaseLoader
from ...utils.logging import get_logger


class PackageLockLoader(BaseLoader):
    """Reads a package-lock.json (or npm-shrinkwrap.json) as raw JSON."""

    LOCKFILE_NAMES = ("package-lock.json", "npm-shrinkwrap.json")

    def __init__(self) -> None:
        super().__init__()
        self.descriptor = "package-lock.json"
        self.logger = get_logger("PackageLockLoader")

    def can_load(self, file_path: Path) -> bool:
        return file_path.name in self.LOCKFILE_NAMES

    def load(self, file_path: Path) -> Any:
        """Parse the lockfile.

        The structure is returned as-is; interpreting it is the indexer's job.

        Args:
            file_path: Path to the lockfile

        Returns:
            Parsed JSON document

        Raises:
            json.JSONDecodeError: If the file is not valid JSON
        """
        self.validate_file(file_path)

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, dict):
            self.logger.debug(
                f"Loaded {file_path} (lockfileVersion={data.get('lockfileVersion', 'unknown')})"
            )
        return data
