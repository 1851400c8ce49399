"""Loader for compromised-package CSV feeds."""

import csv
import io
from pathlib import Path
from typing import Dict, List

from .base import BaseLoader
from ..errors import CompromiseListError
from ..matcher import CompromiseRecord
from ...utils.logging import get_logger


class CompromiseCsvLoader(BaseLoader):
    """Parser for CSV lists of compromised packages.

    The first non-comment line is the header. Header names are trimmed and
    lower-cased, so ``Package,Version`` and ``package,versionRange`` feeds
    are both understood.
    """

    COMMENT_PREFIX = "#"

    def __init__(self) -> None:
        """Initialize the CSV loader."""
        super().__init__()
        self.descriptor = "compromised package CSV"
        self.supported_extensions = [".csv"]
        self.logger = get_logger("CompromiseCsvLoader")

    def can_load(self, file_path: Path) -> bool:
        """Check if this loader can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file has a CSV extension
        """
        return file_path.suffix.lower() in self.supported_extensions

    def load(self, file_path: Path) -> List[CompromiseRecord]:
        """Load compromise records from a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Records in file order, empty for an empty or header-only file

        Raises:
            CompromiseListError: If rows exist but no ``package`` column does
        """
        self.validate_file(file_path)

        # utf-8-sig drops a leading byte order mark
        with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
            content = f.read()

        return self.parse_text(content, source=str(file_path))

    def parse_text(self, content: str, source: str = "<string>") -> List[CompromiseRecord]:
        """Parse CSV text into compromise records.

        Args:
            content: CSV document
            source: Name used in error messages

        Returns:
            Records in document order
        """
        rows = self._parse_rows(content)
        if not rows:
            return []

        if "package" not in rows[0]:
            raise CompromiseListError(f"{source} has no 'package' column")

        records = [CompromiseRecord.from_row(row) for row in rows]
        self.logger.debug(f"Loaded {len(records)} compromise records from {source}")
        return records

    def _parse_rows(self, content: str) -> List[Dict[str, str]]:
        """Split CSV text into header-keyed rows.

        Args:
            content: CSV document

        Returns:
            List of row dictionaries keyed by normalized header
        """
        # Quoted cells may span lines, so blank and comment rows are
        # dropped after csv has joined them
        reader = csv.reader(io.StringIO(content.lstrip("\ufeff")))
        data_rows = [cells for cells in reader if not self._is_skipped(cells)]
        if not data_rows:
            return []

        headers = [header.strip().lower() for header in data_rows[0]]

        rows = []
        for cells in data_rows[1:]:
            rows.append({
                header: cells[idx].strip() if idx < len(cells) else ""
                for idx, header in enumerate(headers)
            })
        return rows

    def _is_skipped(self, cells: List[str]) -> bool:
        if not any(cell.strip() for cell in cells):
            return True
        return cells[0].strip().startswith(self.COMMENT_PREFIX)
