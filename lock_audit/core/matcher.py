"""Core compromise matching logic for LockAudit."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils.logging import get_logger
from .constraints import normalize_range, parse_range
from .indexer import VersionIndex

# Column names accepted for the declared range, in priority order
RANGE_FIELDS: Tuple[str, ...] = ("versionrange", "versionRange", "version")


@dataclass(frozen=True)
class CompromiseRecord:
    """One known-compromised package entry."""

    package: str
    version_range: Optional[str] = None
    notes: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CompromiseRecord":
        """Build a record from a feed row.

        Args:
            row: Mapping with a ``package`` key, a range under one of
                ``RANGE_FIELDS`` and an optional ``notes`` key

        Returns:
            Compromise record
        """
        version_range = None
        for key in RANGE_FIELDS:
            if row.get(key) is not None:
                version_range = str(row[key])
                break

        return cls(
            package=str(row.get("package") or "").strip(),
            version_range=version_range,
            notes=str(row.get("notes") or ""),
        )


@dataclass(frozen=True)
class Finding:
    """Installed versions of a package that fall inside a compromised range."""

    package: str
    matched_range: str
    versions: Tuple[str, ...] = field(default_factory=tuple)
    notes: str = ""

    def __post_init__(self) -> None:
        """Validate finding data."""
        if not self.versions:
            raise ValueError("Finding requires at least one matched version")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package": self.package,
            "matched_range": self.matched_range,
            "versions": list(self.versions),
            "notes": self.notes,
        }


class CompromiseMatcher:
    """Matches compromise records against a lockfile version index."""

    def __init__(self) -> None:
        self.logger = get_logger("CompromiseMatcher")
        self._records_checked = 0
        self._records_skipped = 0

    def match(
        self,
        index: VersionIndex,
        records: Iterable[CompromiseRecord]
    ) -> List[Finding]:
        """Match every record against the index.

        Records without a package name, and records for packages that are
        not installed, are skipped without producing a finding.

        Args:
            index: Version index built from the lockfile
            records: Compromise records in source order

        Returns:
            Findings in the same order as their records
        """
        findings = []
        for record in records:
            finding = self._match_record(index, record)
            if finding:
                findings.append(finding)
        return findings

    def _match_record(self, index: VersionIndex, record: CompromiseRecord) -> Optional[Finding]:
        """Match a single record.

        Args:
            index: Version index
            record: Compromise record to check

        Returns:
            Finding if any installed version matched, None otherwise
        """
        self._records_checked += 1

        if not record.package:
            self._records_skipped += 1
            self.logger.debug("Skipping compromise record without a package name")
            return None

        installed = index.versions(record.package)
        if not installed:
            self.logger.debug(f"{record.package} is not installed")
            return None

        normalized = normalize_range(record.version_range)
        constraints = parse_range(normalized)
        matched = tuple(version for version in installed if constraints.is_satisfied_by(version))

        if not matched:
            self.logger.debug(
                f"NO MATCH: {record.package} {', '.join(installed)} outside {normalized}"
            )
            return None

        self.logger.debug(f"MATCH: {record.package} {', '.join(matched)} within {normalized}")
        return Finding(
            package=record.package,
            matched_range=normalized,
            versions=matched,
            notes=record.notes,
        )

    def get_statistics(self) -> Dict[str, int]:
        """Get matcher statistics.

        Returns:
            Dictionary with counts of records checked and skipped
        """
        return {
            "records_checked": self._records_checked,
            "records_skipped": self._records_skipped,
        }


def find_compromised(index: VersionIndex, records: Iterable[CompromiseRecord]) -> List[Finding]:
    """Convenience wrapper around ``CompromiseMatcher.match``."""
    return CompromiseMatcher().match(index, records)
