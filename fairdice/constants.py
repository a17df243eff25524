"""
Fair-dice constants.

This module centralizes:
- Key sizing for per-round secret keys
- The keyed-hash functions accepted for commitments
- Die geometry and game defaults

Operational knobs may be overridden through `fairdice.config.FairDiceConfig`,
but code that needs stable defaults can import from here.
"""

from __future__ import annotations

# -----------------------------
# Keys & MACs
# -----------------------------
# Minimum secret key length in bytes (256 bits).
MIN_KEY_BYTES: int = 32
DEFAULT_KEY_BYTES: int = MIN_KEY_BYTES

# HMAC digest functions accepted for commitments. Every entry has >= 256-bit
# output. SHA3-256 is the historical default; changing it invalidates
# previously published commitments for auditors that assume the default.
DEFAULT_HASH_FN: str = "sha3_256"
SUPPORTED_HASH_FNS: tuple[str, ...] = ("sha256", "sha3_256", "sha3_512", "blake2b")

# -----------------------------
# Dice & game
# -----------------------------
FACES_PER_DIE: int = 6
DEFAULT_MIN_DICE: int = 3

# Range of the first-move draw (0..1) and of each throw draw (0..5).
FIRST_MOVE_RANGE: int = 2
THROW_RANGE: int = FACES_PER_DIE

HOUSE_STRATEGIES: tuple[str, ...] = ("counter", "random")
DEFAULT_HOUSE_STRATEGY: str = "counter"

__all__ = [
    "MIN_KEY_BYTES",
    "DEFAULT_KEY_BYTES",
    "DEFAULT_HASH_FN",
    "SUPPORTED_HASH_FNS",
    "FACES_PER_DIE",
    "DEFAULT_MIN_DICE",
    "FIRST_MOVE_RANGE",
    "THROW_RANGE",
    "HOUSE_STRATEGIES",
    "DEFAULT_HOUSE_STRATEGY",
]
