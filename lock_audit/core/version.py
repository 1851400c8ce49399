"""Best-effort version comparison for lockfile version strings."""

import re
from typing import List, Union

Segment = Union[int, str]

_SEPARATOR = re.compile(r"[.\-]")
_NUMERIC = re.compile(r"[0-9]+")


def tokenize_version(version: str) -> List[Segment]:
    """Split a version string into numeric and string segments.

    Args:
        version: Version string such as ``1.2.3-beta.1``

    Returns:
        Segments in order, all-digit segments converted to ``int``
    """
    return [
        int(part) if _NUMERIC.fullmatch(part) else part
        for part in _SEPARATOR.split(str(version))
    ]


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings segment by segment.

    This is deliberately not semver precedence: pre-release and build
    metadata get no special treatment, so strings a strict parser would
    reject still compare.

    Args:
        a: Left version
        b: Right version

    Returns:
        Negative if ``a < b``, zero if equal, positive if ``a > b``
    """
    left = tokenize_version(a)
    right = tokenize_version(b)

    for i in range(max(len(left), len(right))):
        seg_a = _segment_at(left, i, right)
        seg_b = _segment_at(right, i, left)

        if isinstance(seg_a, int) and isinstance(seg_b, int):
            if seg_a != seg_b:
                return seg_a - seg_b
            continue

        str_a = str(seg_a)
        str_b = str(seg_b)
        if str_a == str_b:
            continue
        return 1 if str_a > str_b else -1

    return 0


def _segment_at(segments: List[Segment], index: int, other: List[Segment]) -> Segment:
    if index < len(segments):
        return segments[index]
    # Pad with 0 against a numeric segment, "" otherwise
    if index < len(other) and isinstance(other[index], int):
        return 0
    return ""
