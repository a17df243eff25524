import pytest

from fairdice.commit_reveal.verify import verify, verify_record
from fairdice.config import FairDiceConfig
from fairdice.dice import Die
from fairdice.errors import CommitmentViolation, GameOver, InvalidDiceSet, KeyRevealed
from fairdice.game import (
    DiceGame,
    Phase,
    Player,
    Score,
    SessionFinished,
    UserCancelled,
)

from .conftest import ScriptedSampler


def play(game, t, *lines):
    for line in lines:
        t = game.step(t.state, line)
    return t


def rounds(registry, outcome):
    return registry.get_sample_value("fairdice_game_rounds_total", {"outcome": outcome}) or 0.0


def test_needs_minimum_dice(cycle_dice, metrics):
    with pytest.raises(InvalidDiceSet):
        DiceGame(cycle_dice[:2], metrics=metrics)
    DiceGame(cycle_dice[:2], config=FairDiceConfig(min_dice=2), metrics=metrics)


def test_start_shows_commitment_only(cycle_dice, metrics):
    sampler = ScriptedSampler([1])
    game = DiceGame(cycle_dice, sampler=sampler, metrics=metrics)
    t = game.start()

    assert t.state.phase is Phase.AWAIT_FIRST_MOVE_GUESS
    assert t.state.round_index == 1
    commitment = t.state.pending.commitment
    assert t.messages == (
        "Let's determine who makes the first move.",
        f"I selected a random value in the range 0..1 (HMAC={commitment}).",
        "Try to guess my selection.",
        "0 - 0",
        "1 - 1",
        "X - exit",
        "? - help",
    )
    assert not any("KEY=" in m for m in t.messages)
    assert sampler.ranges == [2]


def test_user_first_full_round(cycle_dice, metrics, registry):
    sampler = ScriptedSampler([0, 5, 3])
    game = DiceGame(cycle_dice, sampler=sampler, metrics=metrics)
    t = game.start()
    first_commitment = t.state.pending.commitment

    t = game.step(t.state, "0")
    assert t.state.phase is Phase.AWAIT_DICE_CHOICE
    assert t.state.first_mover is Player.USER
    key_line = t.messages[0]
    assert key_line.startswith("My selection: 0 (KEY=")
    key = key_line[len("My selection: 0 (KEY="):-2]
    assert verify(first_commitment, key, 0)
    assert "You guessed correctly! You make the first move." in t.messages
    assert t.state.offered == (0, 1, 2)
    assert "2 - 3,3,5,5,7,7" in t.messages

    # User takes A, the house counters with C.
    t = game.step(t.state, "0")
    assert t.messages[:3] == (
        "You choose the [2,2,4,4,9,9] dice.",
        "I choose the [3,3,5,5,7,7] dice.",
        "It's time for my throw.",
    )
    assert t.state.user_die == 0 and t.state.house_die == 2
    assert t.state.phase is Phase.AWAIT_THROW_INPUT
    assert t.state.thrower is Player.HOUSE
    assert "Add your number modulo 6." in t.messages

    t = game.step(t.state, "0")
    assert t.messages[1] == "The fair number generation result is 5 + 0 = 5 (mod 6)."
    assert t.messages[2] == "My throw is 7."
    assert t.messages[3] == "It's time for your throw."
    assert t.state.thrower is Player.USER

    t = game.step(t.state, "2")
    assert t.messages[1] == "The fair number generation result is 3 + 2 = 5 (mod 6)."
    assert t.messages[2] == "Your throw is 9."
    assert t.messages[3] == "You win (9 > 7)!"
    assert t.messages[-1] == "Do you want to play again? (Y/N)"
    assert t.state.phase is Phase.AWAIT_REPLAY
    assert t.state.score == Score(user=1)

    res = t.state.last_result
    assert (res.house_index, res.house_face, res.user_index, res.user_face) == (5, 7, 5, 9)
    assert res.winner is Player.USER

    assert sampler.ranges == [2, 6, 6]
    assert sampler.remaining == 0
    assert rounds(registry, "user") == 1
    assert registry.get_sample_value(
        "fairdice_game_commitments_total", {"purpose": "throw"}
    ) == 2
    assert registry.get_sample_value(
        "fairdice_game_verifications_total", {"outcome": "ok"}
    ) == 3


def test_round_audits_all_verify(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 5, 0]), metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "0")
    assert len(t.state.audits) == 3
    assert [a.range for a in t.state.audits] == [2, 6, 6]
    assert all(verify_record(a) for a in t.state.audits)


def test_house_first_round(cycle_dice, metrics, registry):
    # First-move bit 1, house picks B, both throws use face index 0 / 4.
    sampler = ScriptedSampler([1, 1, 0, 0])
    game = DiceGame(cycle_dice, sampler=sampler, metrics=metrics)

    t = game.step(game.start().state, "0")
    assert "I make the first move." in t.messages
    assert "I choose the [1,1,6,6,8,8] dice." in t.messages
    assert t.state.first_mover is Player.HOUSE
    assert t.state.offered == (0, 2)
    assert t.messages[-4:-2] == ("0 - 2,2,4,4,9,9", "1 - 3,3,5,5,7,7")

    t = game.step(t.state, "1")
    assert t.messages[0] == "You choose the [3,3,5,5,7,7] dice."
    assert not any(m.startswith("I choose") for m in t.messages)
    assert t.state.user_die == 2 and t.state.house_die == 1

    t = play(game, t, "0", "4")
    assert t.state.last_result.house_face == 1
    assert t.state.last_result.user_face == 7
    assert "You win (7 > 1)!" in t.messages
    assert sampler.ranges == [2, 3, 6, 6]


def test_house_wins(cycle_dice, metrics, registry):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 5, 0]), metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "0")
    assert "I win (7 > 2)!" in t.messages
    assert t.state.score == Score(house=1)
    assert rounds(registry, "house") == 1


def test_tie(metrics, registry):
    d = Die((1, 2, 3, 4, 5, 6))
    game = DiceGame((d, d, d), sampler=ScriptedSampler([0, 2, 2]), metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "0")
    assert "It's a tie (3 = 3)!" in t.messages
    assert t.state.last_result.winner is None
    assert t.state.score == Score(ties=1)
    assert rounds(registry, "tie") == 1


def test_random_house_strategy_draws_from_remaining(cycle_dice, metrics):
    sampler = ScriptedSampler([0, 1, 0])
    cfg = FairDiceConfig(house_strategy="random")
    game = DiceGame(cycle_dice, config=cfg, sampler=sampler, metrics=metrics)
    t = play(game, game.start(), "0", "0")
    # Remaining dice are B and C; draw 1 picks C.
    assert t.state.house_die == 2
    assert sampler.ranges == [2, 2, 6]


@pytest.mark.parametrize("bad", ["2", "", "abc", "-1", "0 1", "١"])
def test_invalid_input_keeps_commitment(cycle_dice, metrics, bad):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([1]), metrics=metrics)
    t0 = game.start()
    t = game.step(t0.state, bad)
    assert t.messages[0] == "Invalid input. Try again."
    assert t.state is t0.state
    assert t.state.pending.commitment == t0.state.pending.commitment
    assert not t.state.pending.generator.revealed


def test_invalid_dice_choice(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0]), metrics=metrics)
    t = play(game, game.start(), "0")
    t2 = game.step(t.state, "3")
    assert t2.messages[0] == "Invalid input. Try again."
    assert t2.state is t.state


def test_help_returns_same_state(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0]), metrics=metrics)
    t0 = game.start()
    t = game.step(t0.state, " ? ")
    assert t.show_help
    assert t.state is t0.state
    assert "Try to guess my selection." in t.messages


@pytest.mark.parametrize("exit_word", ["X", "x", " x "])
def test_cancel_mid_round_does_not_reveal(cycle_dice, metrics, registry, exit_word):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0]), metrics=metrics)
    t0 = game.start()
    gen = t0.state.pending.generator

    t = game.step(t0.state, exit_word)
    assert t.state.is_terminal
    assert t.state.pending is None
    assert t.state.result == UserCancelled(phase=Phase.AWAIT_FIRST_MOVE_GUESS, round_index=1)
    assert t.messages == ("Goodbye!",)
    assert not gen.revealed
    assert rounds(registry, "cancelled") == 1


def test_cancel_during_throw(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 3]), metrics=metrics)
    t = play(game, game.start(), "0", "1", "X")
    assert t.state.result == UserCancelled(phase=Phase.AWAIT_THROW_INPUT, round_index=1)


def test_replay_keeps_score_and_no_ends_session(cycle_dice, metrics, registry):
    sampler = ScriptedSampler([0, 5, 3, 0, 5, 0])
    game = DiceGame(cycle_dice, sampler=sampler, metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "2")
    assert t.state.score == Score(user=1)

    t = game.step(t.state, "y")
    assert t.state.phase is Phase.AWAIT_FIRST_MOVE_GUESS
    assert t.state.round_index == 2
    assert t.state.audits == ()
    assert t.state.house_die is None
    assert t.messages[0] == "Let's determine who makes the first move."

    t = play(game, t, "0", "0", "0", "0")
    assert t.state.score == Score(user=1, house=1)

    t2 = game.step(t.state, "maybe")
    assert t2.messages[0] == "Invalid input. Try again."

    t = game.step(t.state, "N")
    assert t.state.is_terminal
    assert t.state.result == SessionFinished(Score(user=1, house=1))
    assert t.messages == ("Goodbye!",)
    assert rounds(registry, "cancelled") == 0


def test_cancel_at_replay_is_not_counted(cycle_dice, metrics, registry):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 5, 3]), metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "2", "X")
    assert isinstance(t.state.result, UserCancelled)
    assert t.state.result.phase is Phase.AWAIT_REPLAY
    assert rounds(registry, "cancelled") == 0


def test_terminal_state_rejects_input(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0]), metrics=metrics)
    t = play(game, game.start(), "X")
    with pytest.raises(GameOver):
        game.step(t.state, "0")


def test_each_draw_uses_fresh_key(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 5, 3]), metrics=metrics)
    t = play(game, game.start(), "0", "0", "0", "2")
    keys = {a.key for a in t.state.audits}
    commitments = {a.commitment for a in t.state.audits}
    assert len(keys) == 3
    assert len(commitments) == 3


def test_reveal_violation_propagates(cycle_dice, metrics, registry, monkeypatch):
    def broken(commitment, key, value, **_kw):
        raise CommitmentViolation(commitment, "00", value)

    monkeypatch.setattr("fairdice.game.machine.ensure_verified", broken)
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0]), metrics=metrics)
    t = game.start()
    with pytest.raises(CommitmentViolation):
        game.step(t.state, "0")
    assert registry.get_sample_value(
        "fairdice_game_verifications_total", {"outcome": "violation"}
    ) == 1


def test_config_hash_and_key_length_are_used(cycle_dice, metrics):
    cfg = FairDiceConfig(key_bytes=48, hash_fn="sha3_512")
    game = DiceGame(cycle_dice, config=cfg, sampler=ScriptedSampler([0]), metrics=metrics)
    t = play(game, game.start(), "0")
    audit = t.state.audits[0]
    assert audit.hash_fn == "sha3_512"
    assert len(bytes.fromhex(audit.key)) == 48
    assert len(audit.commitment) == 128


def test_stale_state_cannot_answer_revealed_draw(cycle_dice, metrics):
    # House commits bit 1; guessing 0 loses the first move and reveals KEY.
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([1, 0]), metrics=metrics)
    t0 = game.start()
    t1 = game.step(t0.state, "0")
    assert t1.state.first_mover is Player.HOUSE
    assert any("KEY=" in m for m in t1.messages)

    for line in ("1", "?", "X"):
        with pytest.raises(KeyRevealed):
            game.step(t0.state, line)
    # The live state is unaffected.
    assert t1.state.phase is Phase.AWAIT_DICE_CHOICE


def test_stale_throw_state_cannot_be_replayed(cycle_dice, metrics):
    game = DiceGame(cycle_dice, sampler=ScriptedSampler([0, 5, 3]), metrics=metrics)
    before_throw = play(game, game.start(), "0", "0")
    play(game, before_throw, "0")
    with pytest.raises(KeyRevealed):
        game.step(before_throw.state, "1")
