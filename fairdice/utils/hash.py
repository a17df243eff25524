# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
fairdice.utils.hash
===================

Key and MAC primitives behind every commitment.

Definition
----------
    commitment = hex( HMAC_H( key, ascii(decimal(value)) ) )

- H is one of :data:`fairdice.constants.SUPPORTED_HASH_FNS` (SHA3-256 by
  default), all with at least 256-bit output.
- The message is the plain decimal string of the integer (``"0"``, ``"5"``,
  ``"-3"``), which is what auditors re-type when checking a round by hand.
- Keys come from :func:`secrets.token_bytes` and are at least 32 bytes.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from fairdice.constants import DEFAULT_HASH_FN, MIN_KEY_BYTES, SUPPORTED_HASH_FNS
from fairdice.utils.bytes import BytesLike, as_bytes

__all__ = [
    "check_hash_fn",
    "new_secret_key",
    "encode_value",
    "mac",
    "mac_hex",
]


def check_hash_fn(hash_fn: str) -> str:
    """Return *hash_fn* if it is a supported HMAC digest, else raise ValueError."""
    if hash_fn not in SUPPORTED_HASH_FNS:
        raise ValueError(
            f"unsupported hash_fn {hash_fn!r}; expected one of {', '.join(SUPPORTED_HASH_FNS)}"
        )
    return hash_fn


def new_secret_key(nbytes: int = MIN_KEY_BYTES) -> bytes:
    """Fresh CSPRNG key of *nbytes* bytes (at least MIN_KEY_BYTES)."""
    if not isinstance(nbytes, int) or nbytes < MIN_KEY_BYTES:
        raise ValueError(f"key length must be an int >= {MIN_KEY_BYTES} bytes")
    return secrets.token_bytes(nbytes)


def encode_value(value: int) -> bytes:
    """Canonical MAC message for an integer: its ASCII decimal string."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("value must be an int")
    return str(value).encode("ascii")


def mac(key: BytesLike, value: int, hash_fn: str = DEFAULT_HASH_FN) -> bytes:
    """Raw HMAC digest over ``encode_value(value)``."""
    digestmod = getattr(hashlib, check_hash_fn(hash_fn))
    return hmac.new(as_bytes(key), encode_value(value), digestmod).digest()


def mac_hex(key: BytesLike, value: int, hash_fn: str = DEFAULT_HASH_FN) -> str:
    """Hex-encoded convenience wrapper for `mac`."""
    return mac(key, value, hash_fn).hex()
