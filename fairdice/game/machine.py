# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Turn-based fair dice game as an explicit state machine.

    game = DiceGame(dice)
    t = game.start()
    while not t.state.is_terminal:
        show(t.messages)
        t = game.step(t.state, read_line())

Every house draw goes through the same commit→input→reveal sequence:

1) The transition that *enters* an input phase creates a fresh
   `FairRandomGenerator`, draws, and shows only ``HMAC=…``.
2) The transition that *consumes* the user's number reveals ``KEY=…``,
   self-verifies the reveal, and combines both numbers modulo the range.

First move: the user moves first iff ``combine(house, user, 2) == 0``, i.e.
they guessed the house bit. Throws: the face index is
``combine(house, user, 6)`` into the thrower's die.

Randomness is injected through ``sampler`` so tests can script every draw.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from fairdice.commit_reveal.combine import combine
from fairdice.commit_reveal.generator import AuditRecord, FairRandomGenerator
from fairdice.commit_reveal.sampler import Sampler, uniform_int
from fairdice.commit_reveal.verify import ensure_verified
from fairdice.config import FairDiceConfig
from fairdice.constants import FIRST_MOVE_RANGE, THROW_RANGE
from fairdice.dice.die import Die
from fairdice.dice.probability import best_counter
from fairdice.errors import CommitmentViolation, GameOver, InvalidDiceSet, KeyRevealed
from fairdice.game.state import (
    GameState,
    PendingDraw,
    Phase,
    Player,
    RoundResult,
    SessionFinished,
    Transition,
    UserCancelled,
)
from fairdice.metrics import METRICS, Metrics

logger = logging.getLogger(__name__)

_EXIT = "X"
_HELP = "?"
_INVALID = "Invalid input. Try again."


class DiceGame:
    """
    Transition functions for one play session.

    The object holds only configuration and injected collaborators; all game
    data lives in the `GameState` values passed in and returned.
    """

    def __init__(
        self,
        dice: Sequence[Die],
        *,
        config: Optional[FairDiceConfig] = None,
        sampler: Sampler = uniform_int,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.config = config or FairDiceConfig()
        self.config.validate()
        self.dice: Tuple[Die, ...] = tuple(dice)
        if len(self.dice) < self.config.min_dice:
            raise InvalidDiceSet(count=len(self.dice), minimum=self.config.min_dice)
        self._sampler = sampler
        self._metrics = metrics or METRICS

    # ---- Entry points ----

    def start(self) -> Transition:
        """Begin the first round."""
        return self._new_round(GameState(phase=Phase.AWAIT_FIRST_MOVE_GUESS, dice=self.dice))

    def step(self, state: GameState, line: str) -> Transition:
        """
        Feed one line of user input.

        ``X`` cancels, ``?`` asks for help; anything else is handled by the
        current phase. Invalid input leaves the state (and any pending
        commitment) unchanged.

        Raises:
            GameOver: if *state* is terminal.
            KeyRevealed: if *state* holds a draw whose key was already shown,
                i.e. a stale state from before a reveal.
            CommitmentViolation: if a house reveal fails its own check.
        """
        if state.is_terminal:
            raise GameOver()
        if state.pending is not None and state.pending.generator.revealed:
            raise KeyRevealed(f"{state.pending.purpose} draw was already revealed")
        text = line.strip()
        if text.upper() == _EXIT:
            return self._cancel(state)
        if text == _HELP:
            return Transition(state, tuple(self.prompt(state)), show_help=True)

        if state.phase is Phase.AWAIT_FIRST_MOVE_GUESS:
            return self._on_first_move(state, text)
        if state.phase is Phase.AWAIT_DICE_CHOICE:
            return self._on_dice_choice(state, text)
        if state.phase is Phase.AWAIT_THROW_INPUT:
            return self._on_throw(state, text)
        return self._on_replay(state, text)

    def prompt(self, state: GameState) -> List[str]:
        """Lines describing the input the current phase expects."""
        if state.phase in (Phase.AWAIT_FIRST_MOVE_GUESS, Phase.AWAIT_THROW_INPUT):
            pending = state.pending
            assert pending is not None
            hi = pending.range - 1
            lines = [f"I selected a random value in the range 0..{hi} (HMAC={pending.commitment})."]
            if state.phase is Phase.AWAIT_FIRST_MOVE_GUESS:
                lines.append("Try to guess my selection.")
            else:
                lines.append(f"Add your number modulo {pending.range}.")
            lines += [f"{i} - {i}" for i in range(pending.range)]
            return lines + ["X - exit", "? - help"]
        if state.phase is Phase.AWAIT_DICE_CHOICE:
            lines = ["Choose your dice:"]
            lines += [f"{k} - {state.dice[i]}" for k, i in enumerate(state.offered)]
            return lines + ["X - exit", "? - help"]
        if state.phase is Phase.AWAIT_REPLAY:
            return ["Do you want to play again? (Y/N)"]
        return []

    # ---- Phase handlers ----

    def _on_first_move(self, state: GameState, text: str) -> Transition:
        guess = _parse_choice(text, FIRST_MOVE_RANGE)
        if guess is None:
            return self._invalid(state)

        value, key, audit = self._reveal(state)
        out = [f"My selection: {value} (KEY={key})."]
        state = replace(state, pending=None, audits=state.audits + (audit,))

        if combine(value, guess, FIRST_MOVE_RANGE) == 0:
            out.append("You guessed correctly! You make the first move.")
            return self._offer_dice(replace(state, first_mover=Player.USER), out)

        out.append("I make the first move.")
        house_die = self._sampler(len(state.dice))
        out.append(f"I choose the [{state.dice[house_die]}] dice.")
        state = replace(state, first_mover=Player.HOUSE, house_die=house_die)
        return self._offer_dice(state, out)

    def _on_dice_choice(self, state: GameState, text: str) -> Transition:
        k = _parse_choice(text, len(state.offered))
        if k is None:
            return self._invalid(state)

        user_die = state.offered[k]
        out = [f"You choose the [{state.dice[user_die]}] dice."]
        house_die = state.house_die
        if house_die is None:
            house_die = self._house_counter_pick(state.dice, user_die)
            out.append(f"I choose the [{state.dice[house_die]}] dice.")
        state = replace(state, user_die=user_die, house_die=house_die, offered=())
        return self._start_throw(state, Player.HOUSE, out)

    def _on_throw(self, state: GameState, text: str) -> Transition:
        number = _parse_choice(text, THROW_RANGE)
        if number is None:
            return self._invalid(state)

        value, key, audit = self._reveal(state)
        index = combine(value, number, THROW_RANGE)
        thrower = state.thrower
        die_idx = state.house_die if thrower is Player.HOUSE else state.user_die
        assert die_idx is not None
        face = state.dice[die_idx].face(index)
        out = [
            f"My number is {value} (KEY={key}).",
            f"The fair number generation result is {value} + {number} = {index} (mod {THROW_RANGE}).",
            f"My throw is {face}." if thrower is Player.HOUSE else f"Your throw is {face}.",
        ]
        state = replace(state, pending=None, audits=state.audits + (audit,))

        if thrower is Player.HOUSE:
            return self._start_throw(replace(state, house_index=index), Player.USER, out)

        assert state.house_index is not None and state.house_die is not None
        house_face = state.dice[state.house_die].face(state.house_index)
        winner: Optional[Player]
        if face > house_face:
            winner = Player.USER
            out.append(f"You win ({face} > {house_face})!")
        elif face < house_face:
            winner = Player.HOUSE
            out.append(f"I win ({house_face} > {face})!")
        else:
            winner = None
            out.append(f"It's a tie ({face} = {house_face})!")

        result = RoundResult(
            house_index=state.house_index,
            house_face=house_face,
            user_index=index,
            user_face=face,
            winner=winner,
        )
        self._metrics.record_round(winner.value if winner else "tie")
        logger.info(
            "round %d finished: house=%d user=%d winner=%s",
            state.round_index, house_face, face, winner.value if winner else "tie",
        )
        state = replace(
            state,
            phase=Phase.AWAIT_REPLAY,
            thrower=None,
            last_result=result,
            score=state.score.add(winner),
        )
        return Transition(state, tuple(out + self.prompt(state)))

    def _on_replay(self, state: GameState, text: str) -> Transition:
        answer = text.upper()
        if answer == "Y":
            return self._new_round(state)
        if answer == "N":
            logger.info("session finished after %d rounds", state.score.rounds)
            state = replace(state, phase=Phase.TERMINAL, result=SessionFinished(state.score))
            return Transition(state, ("Goodbye!",))
        return self._invalid(state)

    # ---- Helpers ----

    def _new_round(self, state: GameState) -> Transition:
        state = replace(
            state,
            phase=Phase.AWAIT_FIRST_MOVE_GUESS,
            round_index=state.round_index + 1,
            pending=self._commit("first_move", FIRST_MOVE_RANGE, state.round_index + 1),
            first_mover=None,
            house_die=None,
            user_die=None,
            offered=(),
            thrower=None,
            house_index=None,
            audits=(),
        )
        return Transition(state, tuple(["Let's determine who makes the first move."] + self.prompt(state)))

    def _offer_dice(self, state: GameState, out: List[str]) -> Transition:
        offered = tuple(i for i in range(len(state.dice)) if i != state.house_die)
        state = replace(state, phase=Phase.AWAIT_DICE_CHOICE, offered=offered)
        return Transition(state, tuple(out + self.prompt(state)))

    def _start_throw(self, state: GameState, thrower: Player, out: List[str]) -> Transition:
        out = out + ["It's time for my throw." if thrower is Player.HOUSE else "It's time for your throw."]
        state = replace(
            state,
            phase=Phase.AWAIT_THROW_INPUT,
            thrower=thrower,
            pending=self._commit("throw", THROW_RANGE, state.round_index),
        )
        return Transition(state, tuple(out + self.prompt(state)))

    def _house_counter_pick(self, dice: Tuple[Die, ...], user_die: int) -> int:
        if self.config.house_strategy == "counter":
            return best_counter(dice, user_die)
        remaining = [i for i in range(len(dice)) if i != user_die]
        return remaining[self._sampler(len(remaining))]

    def _commit(self, purpose: str, range_: int, round_index: int) -> PendingDraw:
        gen = FairRandomGenerator(
            range_,
            key_bytes=self.config.key_bytes,
            hash_fn=self.config.hash_fn,
            sampler=self._sampler,
        )
        generated = gen.generate()
        self._metrics.record_commitment(purpose)
        logger.debug("round %d: %s commitment HMAC=%s", round_index, purpose, generated.commitment)
        return PendingDraw(purpose=purpose, generator=gen, generated=generated)

    def _reveal(self, state: GameState) -> Tuple[int, str, AuditRecord]:
        pending = state.pending
        assert pending is not None
        key = pending.generator.reveal_key()
        audit = pending.generator.audit()
        try:
            ensure_verified(audit.commitment, audit.key, audit.value, hash_fn=audit.hash_fn)
        except CommitmentViolation:
            self._metrics.record_verification("violation")
            logger.error("round %d: %s reveal does not match its commitment", state.round_index, pending.purpose)
            raise
        self._metrics.record_verification("ok")
        logger.debug("round %d: %s revealed value=%d KEY=%s", state.round_index, pending.purpose, audit.value, key)
        return audit.value, key, audit

    def _invalid(self, state: GameState) -> Transition:
        return Transition(state, tuple([_INVALID] + self.prompt(state)))

    def _cancel(self, state: GameState) -> Transition:
        if state.phase is not Phase.AWAIT_REPLAY:
            self._metrics.record_round("cancelled")
        logger.info("user cancelled in %s (round %d)", state.phase.value, state.round_index)
        state = replace(
            state,
            phase=Phase.TERMINAL,
            pending=None,
            result=UserCancelled(phase=state.phase, round_index=state.round_index),
        )
        return Transition(state, ("Goodbye!",))


def _parse_choice(text: str, upper: int) -> Optional[int]:
    """Parse a decimal menu choice in ``[0, upper)``; None if invalid."""
    if not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    return value if value < upper else None


__all__ = ["DiceGame"]
