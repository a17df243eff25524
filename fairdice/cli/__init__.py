"""
fairdice.cli
------------

Command-line front end for the fair dice game and its audit tools.

Commands:
  - play    : Play the non-transitive dice game against the house.
  - table   : Show pairwise win probabilities for a set of dice.
  - verify  : Check a revealed key against a published commitment.
  - commit  : Run one commit→reveal draw and print its audit record.

Environment:
  FAIRDICE_* variables configure defaults (see fairdice.config).

Example:
  python -m fairdice.cli play 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3
  python -m fairdice.cli verify --commitment 0x… --key … --value 3
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console

from fairdice.cli.render import probability_json, probability_table, render_audit, render_help
from fairdice.commit_reveal.generator import FairRandomGenerator
from fairdice.commit_reveal.verify import verify
from fairdice.config import FairDiceConfig
from fairdice.dice.die import parse_dice
from fairdice.errors import CommitmentViolation, FairDiceError
from fairdice.game.machine import DiceGame
from fairdice.game.state import SessionFinished, Transition, UserCancelled
from fairdice.metrics import METRICS, serve
from fairdice.version import __version__

__all__ = ["app", "main"]

logger = logging.getLogger(__name__)

_EXAMPLE = "fairdice play 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"

app = typer.Typer(
    name="fairdice",
    help="Provably fair dice: commit→reveal draws and a non-transitive dice game.",
    no_args_is_help=True,
    add_completion=False,
)


def _config(ctx: typer.Context) -> FairDiceConfig:
    return ctx.obj["config"]


@app.callback(invoke_without_command=True)
def _meta(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-V", help="Print version and exit", is_eager=True),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="JSON or YAML config file (default: FAIRDICE_* env vars)."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    if version:
        typer.echo(f"fairdice {__version__}")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    try:
        cfg = FairDiceConfig.from_file(str(config_path)) if config_path else FairDiceConfig.from_env()
        if log_level:
            cfg.log_level = log_level.upper()
            cfg.validate()
    except (OSError, ValueError) as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(2)
    logging.basicConfig(
        level=cfg.log_level_value(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.obj = {"config": cfg}


@app.command("play")
def cmd_play(
    ctx: typer.Context,
    dice: List[str] = typer.Argument(..., help="Dice as comma-separated faces, e.g. 2,2,4,4,9,9"),
    metrics_port: Optional[int] = typer.Option(
        None, "--metrics-port", help="Serve Prometheus metrics on this port while playing."
    ),
) -> None:
    """Play the non-transitive dice game against the house."""
    cfg = _config(ctx)
    try:
        game = DiceGame(parse_dice(dice, min_dice=cfg.min_dice), config=cfg, metrics=METRICS)
    except FairDiceError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Example: {_EXAMPLE}", err=True)
        raise typer.Exit(1)

    port = metrics_port or cfg.metrics_port
    if port:
        try:
            serve(port)
        except OSError as e:
            typer.echo(f"Error: cannot serve metrics on port {port}: {e}", err=True)
            raise typer.Exit(2)
        logger.info("serving metrics on :%d", port)

    console = Console()
    typer.echo("Welcome to the Non-Transitive Dice Game!")
    try:
        t = game.start()
        while True:
            _emit(t)
            if t.show_help:
                render_help(console, game.dice)
            if t.state.is_terminal:
                break
            try:
                line = typer.prompt("Your selection", default="", show_default=False)
            except typer.Abort:
                line = "X"
            t = game.step(t.state, line)
    except CommitmentViolation as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    result = t.state.result
    if isinstance(result, SessionFinished):
        s = result.score
        typer.echo(f"Final score: you {s.user}, me {s.house}, ties {s.ties}.")
    elif isinstance(result, UserCancelled):
        logger.debug("cancelled during %s", result.phase.value)


def _emit(t: Transition) -> None:
    for line in t.messages:
        typer.echo(line)


@app.command("table")
def cmd_table(
    ctx: typer.Context,
    dice: List[str] = typer.Argument(..., help="Dice as comma-separated faces."),
    json_out: bool = typer.Option(False, "--json", help="Print exact fractions as JSON."),
) -> None:
    """Show the probability that each die beats each other die."""
    try:
        parsed = parse_dice(dice, min_dice=2)
    except FairDiceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if json_out:
        typer.echo(json.dumps(probability_json(parsed), indent=2))
        return
    Console().print(probability_table(parsed))


@app.command("verify")
def cmd_verify(
    ctx: typer.Context,
    commitment: str = typer.Option(..., "--commitment", "--hmac", help="Published HMAC (hex)."),
    key: str = typer.Option(..., "--key", "-k", help="Revealed KEY (hex)."),
    value: int = typer.Option(..., "--value", "-v", help="Value the house claims it drew."),
    hash_fn: Optional[str] = typer.Option(None, "--hash", help="HMAC digest (default from config)."),
    json_out: bool = typer.Option(False, "--json", help="Print machine-readable JSON result."),
) -> None:
    """Check that KEY reproduces the published HMAC for VALUE. Exit 1 on mismatch."""
    fn = hash_fn or _config(ctx).hash_fn
    try:
        ok = verify(commitment, key, value, hash_fn=fn)
    except (TypeError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    if json_out:
        typer.echo(json.dumps({"ok": ok, "value": value, "hash_fn": fn}))
    else:
        typer.echo("OK: commitment matches" if ok else "MISMATCH: commitment violation")
    if not ok:
        raise typer.Exit(1)


@app.command("commit")
def cmd_commit(
    ctx: typer.Context,
    range_: int = typer.Option(..., "--range", "-r", min=1, help="Draw from 0..RANGE-1."),
    hash_fn: Optional[str] = typer.Option(None, "--hash", help="HMAC digest (default from config)."),
    json_out: bool = typer.Option(False, "--json", help="Print the audit record as JSON."),
) -> None:
    """Run one commit→reveal draw and print HMAC, value and KEY."""
    cfg = _config(ctx)
    try:
        gen = FairRandomGenerator(range_, key_bytes=cfg.key_bytes, hash_fn=hash_fn or cfg.hash_fn)
    except (FairDiceError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    _, commitment = gen.generate()
    if not json_out:
        typer.echo(f"HMAC={commitment}")
    gen.reveal_key()
    METRICS.record_commitment("other")
    record = gen.audit()
    if json_out:
        typer.echo(json.dumps(record.to_dict(), indent=2, sort_keys=True))
        return
    render_audit(Console(), record)


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the `fairdice` script and `python -m fairdice.cli`."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="fairdice")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
