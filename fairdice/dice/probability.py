# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Exact pairwise win probabilities for a set of dice.

P(i beats j) = #{(x, y) in faces(i) × faces(j) : x > y} / 36

All 36 ordered face pairs are enumerated; nothing is sampled, so results are
exact `Fraction`s and reproducible. The diagonal is undefined (``None``).
"""

from __future__ import annotations

from fractions import Fraction
from itertools import product
from typing import Collection, List, Optional, Sequence

from fairdice.dice.die import Die

__all__ = ["win_probability", "probability_matrix", "best_counter", "is_non_transitive"]


def win_probability(a: Die, b: Die) -> Fraction:
    """Probability that a uniform face of *a* is strictly greater than one of *b*."""
    wins = sum(1 for x, y in product(a.faces, b.faces) if x > y)
    return Fraction(wins, len(a.faces) * len(b.faces))


def probability_matrix(dice: Sequence[Die]) -> List[List[Optional[Fraction]]]:
    """Row i, column j holds P(dice[i] beats dice[j]); None on the diagonal."""
    return [
        [None if i == j else win_probability(a, b) for j, b in enumerate(dice)]
        for i, a in enumerate(dice)
    ]


def best_counter(dice: Sequence[Die], target: int, exclude: Collection[int] = ()) -> int:
    """
    Index of the die with the highest chance of beating ``dice[target]``.

    The target itself and any index in *exclude* are skipped. Ties go to the
    lowest index.
    """
    best_idx: Optional[int] = None
    best_p = Fraction(-1)
    for idx, die in enumerate(dice):
        if idx == target or idx in exclude:
            continue
        p = win_probability(die, dice[target])
        if p > best_p:
            best_idx, best_p = idx, p
    if best_idx is None:
        raise ValueError("no candidate die left to counter with")
    return best_idx


def is_non_transitive(dice: Sequence[Die]) -> bool:
    """True if every die is beaten (p > 1/2) by some other die in the set."""
    if len(dice) < 2:
        return False
    half = Fraction(1, 2)
    return all(
        any(j != i and win_probability(dice[j], dice[i]) > half for j in range(len(dice)))
        for i in range(len(dice))
    )
