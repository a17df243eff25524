"""
Version helpers for the fairdice package.

Resolution order:
1) importlib.metadata (if the distribution is installed),
2) the static fallback BASE_VERSION (source checkouts).
"""
from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _pkg_version

# Bump this when making intentional, source-level releases.
BASE_VERSION = "0.1.0"

_PKG_NAME = "fairdice"


@lru_cache(maxsize=1)
def get_version() -> str:
    """Installed distribution version, or BASE_VERSION when not installed."""
    try:
        return _pkg_version(_PKG_NAME)
    except PackageNotFoundError:
        return BASE_VERSION


__version__ = get_version()

__all__ = ["BASE_VERSION", "get_version", "__version__"]
