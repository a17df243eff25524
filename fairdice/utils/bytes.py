# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
fairdice.utils.bytes
====================

Small utilities for moving keys and digests between bytes and the hex text
shown to players (``HMAC=…`` / ``KEY=…``). Stdlib only.

- :func:`from_hex` accepts an optional ``0x`` prefix and either case, but is
  otherwise strict (no whitespace, even nibble count).
- :func:`to_hex` always emits bare lowercase hex, the audit format.
- :func:`consteq` timing-safe equality (hmac.compare_digest).
"""

from __future__ import annotations

import hmac
import re
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

__all__ = [
    "BytesLike",
    "is_hex",
    "from_hex",
    "to_hex",
    "as_bytes",
    "consteq",
]

_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]*$")


def is_hex(s: str) -> bool:
    """
    Return True if *s* is a non-empty hex string with an optional ``0x`` prefix
    and an even number of nibbles.
    """
    if not isinstance(s, str) or not _HEX_RE.match(s):
        return False
    body = s[2:] if s.startswith(("0x", "0X")) else s
    return len(body) > 0 and len(body) % 2 == 0


def from_hex(s: str, *, name: str = "value") -> bytes:
    """
    Convert a hex string (with optional ``0x``) to bytes.

    Raises:
        TypeError: if *s* is not a str.
        ValueError: on illegal characters, whitespace, odd length or empty input.
    """
    if not isinstance(s, str):
        raise TypeError(f"{name} must be a hex str")
    if not is_hex(s):
        raise ValueError(f"{name} is not a valid hex string")
    body = s[2:] if s.startswith(("0x", "0X")) else s
    return bytes.fromhex(body)


def to_hex(b: BytesLike) -> str:
    """Encode bytes as bare lowercase hex."""
    return as_bytes(b).hex()


def as_bytes(x: BytesLike) -> bytes:
    """Normalize bytes-like to immutable :class:`bytes`."""
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"expected bytes-like, got {type(x)!r}")


def consteq(a: BytesLike, b: BytesLike) -> bool:
    """Timing-safe equality for two bytes-like values."""
    return hmac.compare_digest(as_bytes(a), as_bytes(b))
