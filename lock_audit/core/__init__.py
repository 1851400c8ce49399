"""Core indexing and compromise matching logic for LockAudit."""

from .constraints import Constraint, ConstraintSet, normalize_range, parse_constraint, parse_range
from .errors import CompromiseListError, IndexingError, LockAuditError
from .indexer import VersionIndex, build_version_index, derive_name_from_path
from .matcher import CompromiseMatcher, CompromiseRecord, Finding, find_compromised
from .version import compare_versions

__all__ = [
    "CompromiseListError",
    "CompromiseMatcher",
    "CompromiseRecord",
    "Constraint",
    "ConstraintSet",
    "Finding",
    "IndexingError",
    "LockAuditError",
    "VersionIndex",
    "build_version_index",
    "compare_versions",
    "derive_name_from_path",
    "find_compromised",
    "normalize_range",
    "parse_constraint",
    "parse_range",
]
