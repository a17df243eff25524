"""
fairdice: provably fair commit→reveal draws and a non-transitive dice game.

The house commits to each random draw with ``HMAC(key, value)`` before the
user acts and reveals the key afterwards, so every outcome can be audited.

Only light, stable exports are surfaced here to avoid import cycles.
"""

from __future__ import annotations

from fairdice.version import __version__

__all__ = ["__version__"]
