"""Exceptions raised by the LockAudit core."""


class LockAuditError(Exception):
    """Base class for all LockAudit errors."""


class IndexingError(LockAuditError):
    """Raised when a lockfile yields no (name, version) pairs."""

    def __init__(self, message: str = "no dependencies discovered") -> None:
        super().__init__(message)


class CompromiseListError(LockAuditError):
    """Raised when the compromise list cannot be interpreted."""
