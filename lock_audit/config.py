"""Run configuration for LockAudit."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

CSV_ENV_VAR = "COMPROMISED_PACKAGES_CSV"
DEFAULT_LOCK_NAME = "package-lock.json"
DEFAULT_CSV_NAME = "shai-hulud-2-packages.csv"


@dataclass
class AuditConfig:
    """Configuration for a single audit run."""

    lock_path: Path
    csv_path: Path
    output_path: Optional[Path] = None
    warn_only: bool = False
    verbose: bool = False

    @classmethod
    def resolve(
        cls,
        lock_path: Optional[Path] = None,
        csv_path: Optional[Path] = None,
        output_path: Optional[Path] = None,
        warn_only: bool = False,
        verbose: bool = False,
        cwd: Optional[Path] = None,
    ) -> "AuditConfig":
        """Fill in defaults and resolve paths against the working directory.

        Args:
            lock_path: Lockfile path, defaults to ``./package-lock.json``
            csv_path: Compromise CSV path, defaults to ``$COMPROMISED_PACKAGES_CSV``
                and then ``./shai-hulud-2-packages.csv``
            output_path: Optional JSON report path
            warn_only: Report findings without failing
            verbose: Enable debug logging
            cwd: Base directory for relative paths

        Returns:
            Resolved configuration
        """
        base = cwd or Path.cwd()

        if csv_path is None:
            env_csv = os.environ.get(CSV_ENV_VAR, "").strip()
            csv_path = Path(env_csv) if env_csv else Path(DEFAULT_CSV_NAME)

        return cls(
            lock_path=_absolute(lock_path or Path(DEFAULT_LOCK_NAME), base),
            csv_path=_absolute(csv_path, base),
            output_path=_absolute(output_path, base) if output_path else None,
            warn_only=warn_only,
            verbose=verbose,
        )

    def validate(self) -> None:
        """Check that both inputs exist.

        Raises:
            FileNotFoundError: If an input file is missing
        """
        if not self.lock_path.exists():
            raise FileNotFoundError(f"Missing package-lock.json at {self.lock_path}")
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Missing compromised package CSV at {self.csv_path}")


def _absolute(path: Path, base: Path) -> Path:
    path = Path(path).expanduser()
    return path if path.is_absolute() else (base / path).resolve()
