"""Command-line interface for LockAudit."""
