"""
fairdice.game
-------------

The non-transitive dice game as a state machine over immutable states.
The blocking console loop lives in `fairdice.cli`.
"""

from __future__ import annotations

from fairdice.game.machine import DiceGame
from fairdice.game.state import (
    GameResult,
    GameState,
    Phase,
    Player,
    RoundResult,
    Score,
    SessionFinished,
    Transition,
    UserCancelled,
)

__all__ = [
    "DiceGame",
    "GameState",
    "GameResult",
    "Phase",
    "Player",
    "RoundResult",
    "Score",
    "SessionFinished",
    "Transition",
    "UserCancelled",
]
