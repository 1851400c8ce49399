"""Version constraint parsing and evaluation.

A compromise feed declares affected versions as a compound range such as
``">=1.0.0 || <0.5.0"`` or ``"= 4.1.1 || = 4.1.2"``. Each side of ``||`` is a
single comparison; the sides are OR-combined. Parsing is permissive: a side
that cannot be parsed is dropped, and a range where nothing survives matches
every version. Over-reporting a possible compromise is preferred to silently
skipping one.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .version import compare_versions

ANY = "*"
EQ = "="
GT = ">"
GTE = ">="
LT = "<"
LTE = "<="

# Longest tokens first so "<" does not swallow "<="
OPERATORS: Tuple[str, ...] = (GTE, LTE, GT, LT, EQ)

RANGE_SEPARATOR = "||"

_OPERATOR_WHITESPACE = re.compile(r"(<=|>=|=|<|>|~|\^)\s+")


@dataclass(frozen=True)
class Constraint:
    """A single version comparison."""

    operator: str
    version: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the operator/version pairing."""
        if self.operator != ANY and self.operator not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator!r}")
        if self.operator != ANY and not self.version:
            raise ValueError("Constraint version cannot be empty")

    @classmethod
    def any(cls) -> "Constraint":
        """Return the match-all constraint."""
        return cls(operator=ANY)

    @property
    def is_any(self) -> bool:
        return self.operator == ANY

    def is_satisfied_by(self, version: str) -> bool:
        """Check whether a concrete version satisfies this comparison.

        Args:
            version: Installed version string

        Returns:
            True if the version satisfies the constraint
        """
        if self.is_any:
            return True
        if not version:
            return False

        cmp = compare_versions(version, self.version)
        if self.operator == EQ:
            return cmp == 0
        if self.operator == GT:
            return cmp > 0
        if self.operator == GTE:
            return cmp >= 0
        if self.operator == LT:
            return cmp < 0
        if self.operator == LTE:
            return cmp <= 0
        return False

    def __str__(self) -> str:
        if self.is_any:
            return ANY
        return f"{self.operator}{self.version}"


@dataclass(frozen=True)
class ConstraintSet:
    """OR-combination of constraints. Never empty."""

    constraints: Tuple[Constraint, ...]

    def __post_init__(self) -> None:
        if not self.constraints:
            raise ValueError("ConstraintSet requires at least one constraint")

    @classmethod
    def any(cls) -> "ConstraintSet":
        """Return the set matching every version."""
        return cls(constraints=(Constraint.any(),))

    @property
    def is_any(self) -> bool:
        return any(constraint.is_any for constraint in self.constraints)

    def is_satisfied_by(self, version: str) -> bool:
        """Return True if any member constraint accepts the version."""
        return any(constraint.is_satisfied_by(version) for constraint in self.constraints)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self.constraints)

    def __len__(self) -> int:
        return len(self.constraints)

    def __str__(self) -> str:
        return f" {RANGE_SEPARATOR} ".join(str(constraint) for constraint in self.constraints)


def parse_constraint(expression: str) -> Optional[Constraint]:
    """Parse a single comparison expression.

    Accepts an optional operator (``>=``, ``<=``, ``>``, ``<``, ``=``),
    optional whitespace after it and an optional leading ``v`` on the
    version. A bare version means ``=``.

    Args:
        expression: Expression such as ``">= v1.2.3"``

    Returns:
        Parsed constraint, or None when no version text remains
    """
    trimmed = (expression or "").strip()
    if not trimmed or trimmed == ANY:
        return Constraint.any()

    operator = EQ
    remainder = trimmed
    for token in OPERATORS:
        if remainder.startswith(token):
            operator = token
            remainder = remainder[len(token):].lstrip()
            break

    if remainder.startswith("v"):
        remainder = remainder[1:]

    if not remainder:
        return None

    return Constraint(operator=operator, version=remainder)


def parse_range(raw_range: Optional[str]) -> ConstraintSet:
    """Parse a compound ``||`` range into a ConstraintSet.

    Sides that fail to parse are dropped. Empty input, or input where every
    side fails, degrades to the match-all set.

    Args:
        raw_range: Range string, possibly empty or None

    Returns:
        ConstraintSet with OR semantics
    """
    if raw_range is None or not raw_range.strip():
        return ConstraintSet.any()

    constraints: List[Constraint] = []
    for side in raw_range.split(RANGE_SEPARATOR):
        constraint = parse_constraint(side)
        if constraint is not None:
            constraints.append(constraint)

    if not constraints:
        return ConstraintSet.any()

    return ConstraintSet(constraints=tuple(constraints))


def normalize_range(raw_range: Optional[str]) -> str:
    """Normalize a declared range before parsing.

    Whitespace directly after an operator token is removed and a leading
    bare ``=`` is dropped, so ``"= 1.2.3"``, ``"=1.2.3"`` and ``"1.2.3"``
    are equivalent.

    Args:
        raw_range: Range as declared in the compromise list

    Returns:
        Normalized range, ``"*"`` when empty
    """
    normalized = (raw_range or "").strip()
    if not normalized:
        return ANY

    normalized = _OPERATOR_WHITESPACE.sub(r"\1", normalized)

    if normalized.startswith(EQ):
        normalized = normalized[len(EQ):].strip()

    return normalized or ANY
