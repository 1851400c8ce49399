"""Input file loaders for lockfiles and compromise lists."""

from .base import BaseLoader
from .compromised import CompromiseCsvLoader
from .lockfile import PackageLockLoader

__all__ = [
    "BaseLoader",
    "CompromiseCsvLoader",
    "PackageLockLoader",
]
