"""Build a name -> versions index from an npm lockfile structure."""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .errors import IndexingError
from ..utils.logging import get_logger

logger = get_logger("Indexer")

PACKAGE_DIR_MARKERS: Tuple[str, ...] = ("node_modules",)


class VersionIndex(Mapping):
    """Read-only mapping of package name to the versions installed.

    Versions are kept in discovery order and deduplicated by exact string
    equality, so ``1.0`` and ``1.0.0`` are distinct entries.
    """

    def __init__(self, entries: Optional[Dict[str, Tuple[str, ...]]] = None) -> None:
        self._entries: Dict[str, Tuple[str, ...]] = dict(entries or {})

    def __getitem__(self, name: str) -> Tuple[str, ...]:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"VersionIndex({self._entries!r})"

    def versions(self, name: str) -> Tuple[str, ...]:
        """Return the versions recorded for a package, empty if absent."""
        return self._entries.get(name, ())

    @property
    def version_count(self) -> int:
        """Total number of distinct (name, version) pairs."""
        return sum(len(versions) for versions in self._entries.values())


class VersionIndexBuilder:
    """Accumulates (name, version) pairs before freezing them into an index."""

    def __init__(self) -> None:
        # dict keys double as an insertion-ordered set
        self._entries: Dict[str, Dict[str, None]] = {}

    def add(self, name: Any, version: Any) -> bool:
        """Record a pair, skipping blanks and non-string values.

        Args:
            name: Package name
            version: Installed version

        Returns:
            True if the pair was new
        """
        name = _clean(name)
        version = _clean(version)
        if not name or not version:
            return False

        versions = self._entries.setdefault(name, {})
        if version in versions:
            return False
        versions[version] = None
        return True

    def build(self) -> VersionIndex:
        return VersionIndex({
            name: tuple(versions) for name, versions in self._entries.items()
        })


def derive_name_from_path(package_path: str) -> Optional[str]:
    """Derive a package name from a lockfile ``packages`` key.

    The name is whatever follows the last packages-directory marker, so
    ``node_modules/a/node_modules/@scope/b`` yields ``@scope/b``. Backslash
    separators are accepted.

    Args:
        package_path: Key from the lockfile ``packages`` map

    Returns:
        Package name, or None when no marker is present
    """
    normalized = (package_path or "").replace("\\", "/")

    for marker in PACKAGE_DIR_MARKERS:
        for token in (f"/{marker}/", f"{marker}/"):
            idx = normalized.rfind(token)
            if idx >= 0:
                fragment = normalized[idx + len(token):]
                if fragment:
                    return fragment
    return None


def build_version_index(lockfile: Any) -> VersionIndex:
    """Index every (name, version) pair found in a lockfile.

    Both the flat ``packages`` map (lockfile v2+) and the nested
    ``dependencies`` tree (lockfile v1) are read and merged.

    Args:
        lockfile: Parsed lockfile JSON

    Returns:
        Immutable version index

    Raises:
        IndexingError: If no pairs were discovered
    """
    builder = VersionIndexBuilder()

    if isinstance(lockfile, Mapping):
        _index_packages_map(lockfile.get("packages"), builder)
        _index_dependency_tree(lockfile.get("dependencies"), builder)

    index = builder.build()
    if not index:
        raise IndexingError()

    logger.debug(f"Indexed {index.version_count} versions across {len(index)} packages")
    return index


def _index_packages_map(packages: Any, builder: VersionIndexBuilder) -> None:
    if not isinstance(packages, Mapping):
        return

    for package_path, meta in packages.items():
        if not isinstance(meta, Mapping):
            continue
        name = _clean(meta.get("name")) or derive_name_from_path(package_path)
        if not name:
            logger.debug(f"Skipping package entry without a name: {package_path!r}")
            continue
        builder.add(name, meta.get("version"))


def _index_dependency_tree(dependencies: Any, builder: VersionIndexBuilder) -> None:
    if not isinstance(dependencies, Mapping):
        return

    # Explicit worklist; nodes are expanded once per object identity so
    # self-referential input terminates.
    expanded: Set[int] = {id(dependencies)}
    worklist: List[Mapping] = [dependencies]

    while worklist:
        children = worklist.pop()
        for child_name, child in children.items():
            if not isinstance(child, Mapping):
                continue
            builder.add(child_name, child.get("version"))

            grandchildren = child.get("dependencies")
            if isinstance(grandchildren, Mapping) and id(grandchildren) not in expanded:
                expanded.add(id(grandchildren))
                worklist.append(grandchildren)


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None
