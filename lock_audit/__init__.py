"""LockAudit - audit npm lockfiles against known-compromised package lists."""

__version__ = "0.1.0"

from .core.indexer import VersionIndex, build_version_index
from .core.matcher import CompromiseMatcher, CompromiseRecord, Finding, find_compromised
from .core.loaders import CompromiseCsvLoader, PackageLockLoader
from .core.errors import IndexingError
from .output.formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "CompromiseCsvLoader",
    "CompromiseMatcher",
    "CompromiseRecord",
    "ConsoleFormatter",
    "Finding",
    "IndexingError",
    "JSONFormatter",
    "PackageLockLoader",
    "VersionIndex",
    "build_version_index",
    "find_compromised",
]
