# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Die model and parsing of command-line dice specs.

A die is an ordered, immutable tuple of exactly six integer faces; repeats
are allowed (``Die((2, 2, 4, 4, 9, 9))``). Specs on the command line are
comma-separated: ``"2,2,4,4,9,9"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from fairdice.constants import DEFAULT_MIN_DICE, FACES_PER_DIE
from fairdice.errors import InvalidDiceSet, InvalidDieSpec

__all__ = ["Die", "parse_die", "parse_dice"]


@dataclass(frozen=True, slots=True)
class Die:
    """Six integer faces, validated at construction."""

    faces: Tuple[int, ...]

    def __post_init__(self) -> None:
        faces = self.faces
        if isinstance(faces, (str, bytes)) or not isinstance(faces, Iterable):
            raise InvalidDieSpec(faces, "not-a-sequence")
        faces = tuple(faces)
        if len(faces) != FACES_PER_DIE:
            raise InvalidDieSpec(faces, "face-count")
        if any(isinstance(f, bool) or not isinstance(f, int) for f in faces):
            raise InvalidDieSpec(faces, "not-int")
        object.__setattr__(self, "faces", faces)

    def face(self, index: int) -> int:
        """Face at *index* (0..5)."""
        return self.faces[index]

    def __str__(self) -> str:
        return ",".join(str(f) for f in self.faces)


def parse_die(spec: str) -> Die:
    """
    Parse ``"a,b,c,d,e,f"`` into a Die.

    Whitespace around faces is ignored; anything else that is not a base-10
    integer (including empty items such as ``"1,,2"``) is rejected.
    """
    if not isinstance(spec, str):
        raise InvalidDieSpec(spec, "not-a-string")
    items = [s.strip() for s in spec.split(",")]
    faces = []
    for item in items:
        digits = item[1:] if item[:1] in ("-", "+") else item
        if not digits.isascii() or not digits.isdigit():
            raise InvalidDieSpec(spec, f"not-int:{item!r}")
        faces.append(int(item))
    if len(faces) != FACES_PER_DIE:
        raise InvalidDieSpec(spec, "face-count")
    return Die(tuple(faces))


def parse_dice(specs: Sequence[str], *, min_dice: int = DEFAULT_MIN_DICE) -> Tuple[Die, ...]:
    """Parse every spec and require at least *min_dice* dice."""
    if len(specs) < min_dice:
        raise InvalidDiceSet(count=len(specs), minimum=min_dice)
    return tuple(parse_die(s) for s in specs)
