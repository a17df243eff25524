# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Unbiased integer sampling from a CSPRNG.

Definition
----------
For ``range_ > 1`` let ``bits = (range_ - 1).bit_length()``. Draw
``ceil(bits / 8)`` bytes, interpret them big-endian, keep the low ``bits``
bits and accept the result if it is ``< range_``; otherwise draw again.

Because ``2**(bits - 1) < range_ <= 2**bits`` every draw is accepted with
probability above one half, so the expected number of draws is below two and
no value is favoured (unlike ``raw % range_``).
"""

from __future__ import annotations

import secrets
from typing import Callable

from fairdice.errors import InvalidRange

EntropySource = Callable[[int], bytes]
Sampler = Callable[[int], int]

__all__ = ["EntropySource", "Sampler", "uniform_int", "byte_cost"]


def _check_range(range_: int) -> int:
    if isinstance(range_, bool) or not isinstance(range_, int) or range_ <= 0:
        raise InvalidRange(range_)
    return range_


def byte_cost(range_: int) -> int:
    """Number of entropy bytes consumed per draw for *range_* (0 when range_ == 1)."""
    _check_range(range_)
    return ((range_ - 1).bit_length() + 7) // 8


def uniform_int(range_: int, *, entropy: EntropySource = secrets.token_bytes) -> int:
    """
    Return an integer uniformly distributed over ``[0, range_)``.

    Parameters
    ----------
    range_ : int
        Exclusive upper bound, must be > 0.
    entropy : callable, optional
        ``n -> n random bytes``; defaults to :func:`secrets.token_bytes`.
        Tests inject a scripted source to exercise the rejection path.

    Raises
    ------
    InvalidRange
        If ``range_`` is not a positive int.
    """
    _check_range(range_)
    if range_ == 1:
        return 0

    bits = (range_ - 1).bit_length()
    nbytes = (bits + 7) // 8
    mask = (1 << bits) - 1
    while True:
        candidate = int.from_bytes(entropy(nbytes), "big") & mask
        if candidate < range_:
            return candidate
