"""
fairdice.dice
-------------

Die model, command-line dice parsing and exact win-probability maths.
"""

from __future__ import annotations

from fairdice.dice.die import Die, parse_dice, parse_die
from fairdice.dice.probability import (
    best_counter,
    is_non_transitive,
    probability_matrix,
    win_probability,
)

__all__ = [
    "Die",
    "parse_die",
    "parse_dice",
    "win_probability",
    "probability_matrix",
    "best_counter",
    "is_non_transitive",
]
