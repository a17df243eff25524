# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Fair-dice errors.

A small, typed hierarchy of exceptions raised by the commit→reveal core and
the dice game built on top of it. Callers can catch the base `FairDiceError`
to handle every failure of this package, or catch the concrete subclasses for
more granular control.

None of these are retryable: they signal a caller bug, bad user input at a
construction boundary, or (for `CommitmentViolation`) tampering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class FairDiceError(Exception):
    """Base class for all fair-dice errors."""
    pass


@dataclass(frozen=True)
class InvalidRange(FairDiceError):
    """
    Raised when a sampler or generator is asked for an empty/negative range.

    Attributes:
        range: The rejected range value, as supplied.
    """
    range: Any

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"InvalidRange: range must be a positive int (got {self.range!r})"


@dataclass(frozen=True)
class InvalidModulus(FairDiceError):
    """Raised when the combiner gets a modulus <= 0."""
    modulus: Any

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"InvalidModulus: modulus must be a positive int (got {self.modulus!r})"


@dataclass(frozen=True)
class InvalidDieSpec(FairDiceError):
    """
    Raised when a die does not have exactly six integer faces.

    Attributes:
        spec: The offending spec (raw string or sequence).
        reason: Optional short explanation (e.g., 'face-count', 'not-int').
    """
    spec: Any
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"InvalidDieSpec: {self.spec!r}"
        return f"{base} reason={self.reason}" if self.reason else base


@dataclass(frozen=True)
class InvalidDiceSet(FairDiceError):
    """Raised when fewer dice than required are supplied to a game."""
    count: int
    minimum: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return (
            f"InvalidDiceSet: at least {self.minimum} dice are required "
            f"(got {self.count})"
        )


@dataclass(frozen=True)
class AlreadyGenerated(FairDiceError):
    """Raised when `generate()` is called a second time on one generator."""
    commitment: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"AlreadyGenerated: value already committed (HMAC={self.commitment})"


@dataclass(frozen=True)
class KeyRevealed(FairDiceError):
    """
    Raised when an operation conflicts with the generator's reveal state:
    generating after the key has been revealed, auditing before it was, or
    answering a draw whose key is already public.
    """
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"KeyRevealed: {self.reason}"


@dataclass(frozen=True)
class CommitmentViolation(FairDiceError):
    """
    Raised when a revealed key does not reproduce the published commitment
    for the claimed value.

    Attributes:
        expected_commitment_hex: The commitment published before the reveal.
        got_commitment_hex: The commitment recomputed from the reveal.
        claimed_value: The value the house claims it committed to.
    """
    expected_commitment_hex: str
    got_commitment_hex: str
    claimed_value: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return (
            f"CommitmentViolation: value={self.claimed_value} "
            f"expected={self.expected_commitment_hex} got={self.got_commitment_hex}"
        )


@dataclass(frozen=True)
class GameOver(FairDiceError):
    """Raised when a terminal game state receives more input."""
    reason: str = "game is over"

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"GameOver: {self.reason}"


__all__ = [
    "FairDiceError",
    "InvalidRange",
    "InvalidModulus",
    "InvalidDieSpec",
    "InvalidDiceSet",
    "AlreadyGenerated",
    "KeyRevealed",
    "CommitmentViolation",
    "GameOver",
]
