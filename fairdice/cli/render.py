"""
Human-facing rendering for the fairdice CLI (rich tables and panels).
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Dict, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fairdice.commit_reveal.generator import AuditRecord
from fairdice.dice.die import Die
from fairdice.dice.probability import probability_matrix

HELP_TEXT = (
    "Each player picks one die; the winner of the first-move draw picks first.\n"
    "Both throws are compared and the higher face wins.\n"
    "\n"
    "Every random number I use is committed before you answer: I show\n"
    "HMAC=<hex> first, you enter your number, then I show KEY=<hex>.\n"
    "Recompute the HMAC (SHA3-256 by default) of my number under KEY\n"
    "to check I did not cheat\n"
    "(`fairdice verify --commitment … --key … --value …`).\n"
    "A throw's face index is (my number + your number) mod 6, so neither\n"
    "of us controls it alone.\n"
    "\n"
    "The table below shows the chance that the row die beats the column die."
)


def _fmt(p: Optional[Fraction]) -> str:
    return "-" if p is None else f"{float(p):.4f}"


def probability_table(dice: Sequence[Die]) -> Table:
    """Rich table of P(row beats column); '-' on the diagonal."""
    table = Table(
        title="Probability of the win for the user",
        box=box.SIMPLE_HEAVY,
        show_lines=False,
    )
    table.add_column("User dice v", style="bold", no_wrap=True)
    for die in dice:
        table.add_column(str(die), justify="right", no_wrap=True)
    for die, row in zip(dice, probability_matrix(dice)):
        table.add_row(str(die), *(_fmt(p) for p in row))
    return table


def probability_json(dice: Sequence[Die]) -> Dict[str, Any]:
    matrix: List[List[Optional[str]]] = [
        [None if p is None else f"{p.numerator}/{p.denominator}" for p in row]
        for row in probability_matrix(dice)
    ]
    return {"dice": [str(d) for d in dice], "matrix": matrix}


def render_help(console: Console, dice: Sequence[Die]) -> None:
    console.print(Panel(HELP_TEXT, title="Help", box=box.ROUNDED))
    console.print(probability_table(dice))


def render_audit(console: Console, record: AuditRecord) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value", overflow="fold")
    table.add_row("range", f"0..{record.range - 1}")
    table.add_row("value", str(record.value))
    table.add_row("HMAC", record.commitment)
    table.add_row("KEY", record.key)
    table.add_row("hash", record.hash_fn)
    console.print(table)


__all__ = [
    "HELP_TEXT",
    "probability_table",
    "probability_json",
    "render_help",
    "render_audit",
]
