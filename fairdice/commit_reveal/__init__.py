# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
fairdice.commit_reveal
======================

The provably-fair core: sampling, committing, combining and verifying.

Typical flow (one draw):
    1) ``gen = FairRandomGenerator(range_)`` and ``value, c = gen.generate()``;
       publish ``c``.
    2) Counterparty locks in ``u``.
    3) Publish ``gen.reveal_key()``; the outcome is ``combine(value, u, range_)``.
    4) Anyone can run ``verify(c, key, value)``.

Nothing in this subpackage logs, records metrics or touches the terminal.
"""

from __future__ import annotations

from fairdice.commit_reveal.combine import combine
from fairdice.commit_reveal.generator import AuditRecord, FairRandomGenerator, Generated
from fairdice.commit_reveal.sampler import byte_cost, uniform_int
from fairdice.commit_reveal.verify import (
    ensure_verified,
    normalize_commitment,
    verify,
    verify_record,
)

__all__ = [
    "uniform_int",
    "byte_cost",
    "FairRandomGenerator",
    "Generated",
    "AuditRecord",
    "combine",
    "verify",
    "ensure_verified",
    "verify_record",
    "normalize_commitment",
]
