# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Two-party combination rule.

    combine(house, user, m) = (house + user) mod m

If the house value was committed before the user picked theirs, and the key
is revealed only afterwards, neither side controls the result alone: for any
fixed user value the result is as uniform as the house draw, and the house
cannot change its draw after seeing the user value.
"""

from __future__ import annotations

from fairdice.errors import InvalidModulus

__all__ = ["combine"]


def combine(a: int, b: int, modulus: int) -> int:
    """Return ``(a + b) % modulus``, always in ``[0, modulus)``."""
    if isinstance(modulus, bool) or not isinstance(modulus, int) or modulus <= 0:
        raise InvalidModulus(modulus)
    return (a + b) % modulus
