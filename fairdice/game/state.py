# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Immutable game-state values for the fair dice game.

A `GameState` is replaced (never mutated) on every transition. The only
mutable object reachable from it is the pending `FairRandomGenerator`, whose
key stays hidden until the transition that consumes the user's input.

Phase layout of one round:

    AWAIT_FIRST_MOVE_GUESS → AWAIT_DICE_CHOICE → AWAIT_THROW_INPUT (house)
        → AWAIT_THROW_INPUT (user) → AWAIT_REPLAY → (next round | TERMINAL)

``X`` from any non-terminal phase jumps to TERMINAL with a `UserCancelled`
result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from fairdice.commit_reveal.generator import AuditRecord, FairRandomGenerator, Generated
from fairdice.dice.die import Die


class Phase(Enum):
    """Which input the game is waiting for."""
    AWAIT_FIRST_MOVE_GUESS = "await_first_move_guess"
    AWAIT_DICE_CHOICE = "await_dice_choice"
    AWAIT_THROW_INPUT = "await_throw_input"
    AWAIT_REPLAY = "await_replay"
    TERMINAL = "terminal"


class Player(Enum):
    USER = "user"
    HOUSE = "house"


@dataclass(frozen=True)
class PendingDraw:
    """A house draw whose commitment has been shown but whose key has not."""
    purpose: str
    generator: FairRandomGenerator
    generated: Generated

    @property
    def commitment(self) -> str:
        return self.generated.commitment

    @property
    def range(self) -> int:
        return self.generator.range


@dataclass(frozen=True)
class Score:
    user: int = 0
    house: int = 0
    ties: int = 0

    def add(self, winner: Optional[Player]) -> "Score":
        if winner is Player.USER:
            return Score(self.user + 1, self.house, self.ties)
        if winner is Player.HOUSE:
            return Score(self.user, self.house + 1, self.ties)
        return Score(self.user, self.house, self.ties + 1)

    @property
    def rounds(self) -> int:
        return self.user + self.house + self.ties


@dataclass(frozen=True)
class RoundResult:
    """
    Outcome of one round: the combined face index and face for each side,
    and the winner (None for a tie).
    """
    house_index: int
    house_face: int
    user_index: int
    user_face: int
    winner: Optional[Player]


@dataclass(frozen=True)
class UserCancelled:
    """Terminal result when the user typed X."""
    phase: Phase
    round_index: int


@dataclass(frozen=True)
class SessionFinished:
    """Terminal result when the user declined to play again."""
    score: Score


GameResult = Union[UserCancelled, SessionFinished]


@dataclass(frozen=True)
class GameState:
    """
    Fields:
      phase       : input currently awaited
      dice        : all dice in the session, in command-line order
      round_index : 1-based index of the current round (0 before start)
      score       : running score across rounds
      pending     : the draw whose commitment is on screen, if any
      first_mover : who won the first-move draw this round
      house_die   : index into `dice` chosen by the house
      user_die    : index into `dice` chosen by the user
      offered     : dice indices listed in the current dice menu
      thrower     : whose throw the pending draw decides
      house_index : combined face index of the house throw (once known)
      last_result : result of the most recently finished round
      audits      : audit records of draws revealed in this round
      result      : terminal result, set only in TERMINAL
    """

    phase: Phase
    dice: Tuple[Die, ...]
    round_index: int = 0
    score: Score = field(default_factory=Score)
    pending: Optional[PendingDraw] = None
    first_mover: Optional[Player] = None
    house_die: Optional[int] = None
    user_die: Optional[int] = None
    offered: Tuple[int, ...] = ()
    thrower: Optional[Player] = None
    house_index: Optional[int] = None
    last_result: Optional[RoundResult] = None
    audits: Tuple[AuditRecord, ...] = ()
    result: Optional[GameResult] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase is Phase.TERMINAL


@dataclass(frozen=True)
class Transition:
    """Next state plus the lines to show; `show_help` asks the UI for help."""
    state: GameState
    messages: Tuple[str, ...] = ()
    show_help: bool = False


__all__ = [
    "Phase",
    "Player",
    "PendingDraw",
    "Score",
    "RoundResult",
    "UserCancelled",
    "SessionFinished",
    "GameResult",
    "GameState",
    "Transition",
]
