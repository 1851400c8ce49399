"""Base loader class for LockAudit input files."""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List


class BaseLoader(ABC):
    """Abstract base class for input file loaders."""

    def __init__(self) -> None:
        """Initialize the loader."""
        self.supported_extensions: List[str] = []
        self.descriptor: str = ""

    @abstractmethod
    def can_load(self, file_path: Path) -> bool:
        """Check if this loader can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if loader can handle the file
        """

    @abstractmethod
    def load(self, file_path: Path) -> Any:
        """Load an input file.

        Args:
            file_path: Path to the file to load

        Returns:
            Loaded content
        """

    def validate_file(self, file_path: Path) -> None:
        """Validate that the file exists and is readable.

        Args:
            file_path: Path to validate

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the path is not a regular file
            PermissionError: If file is not readable
        """
        if not file_path.exists():
            raise FileNotFoundError(f"Missing {self.descriptor} at {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")
