# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Verify that a revealed key reproduces a prior commitment.

Definition
----------
Given a published commitment C, a revealed key K and the value V the house
claims it drew, recompute

    C' = HMAC_H(K, decimal(V))

and check C' == C using a constant-time comparison.

This module exposes:
- `verify(...)` : returns True/False, or raises CommitmentViolation when
  ``raise_on_fail=True``.
- `ensure_verified(...)` : raising shorthand.
- `verify_record(...)` : checks an :class:`AuditRecord`.
- `normalize_commitment(...)` : hex/bytes → raw digest bytes.

Malformed hex (commitment or key) is a caller error and raises ValueError
rather than counting as a mismatch.
"""

from __future__ import annotations

from typing import Union

from fairdice.commit_reveal.generator import AuditRecord
from fairdice.constants import DEFAULT_HASH_FN
from fairdice.errors import CommitmentViolation
from fairdice.utils.bytes import BytesLike, as_bytes, consteq, from_hex
from fairdice.utils.hash import mac

__all__ = [
    "normalize_commitment",
    "verify",
    "ensure_verified",
    "verify_record",
]


def normalize_commitment(commitment: Union[BytesLike, str]) -> bytes:
    """
    Normalize a commitment into raw digest bytes.

    Accepts raw bytes-like values or hex with/without ``0x`` in either case.
    """
    if isinstance(commitment, str):
        return from_hex(commitment, name="commitment")
    return as_bytes(commitment)


def verify(
    commitment: Union[BytesLike, str],
    revealed_key: Union[BytesLike, str],
    claimed_value: int,
    *,
    hash_fn: str = DEFAULT_HASH_FN,
    raise_on_fail: bool = False,
) -> bool:
    """
    Check a reveal against a prior commitment.

    Parameters
    ----------
    commitment : bytes | hex str
        The commitment published before the counterparty acted.
    revealed_key : bytes | hex str
        The key disclosed after the counterparty acted.
    claimed_value : int
        The value the house says it committed to.
    hash_fn : str
        HMAC digest used when the commitment was made.
    raise_on_fail : bool
        If True, raise CommitmentViolation on mismatch; otherwise return False.

    Raises
    ------
    CommitmentViolation
        On mismatch when ``raise_on_fail=True``.
    TypeError / ValueError
        If inputs are malformed.
    """
    c_given = normalize_commitment(commitment)
    if isinstance(revealed_key, str):
        key = from_hex(revealed_key, name="revealed_key")
    else:
        key = as_bytes(revealed_key)

    c_expected = mac(key, claimed_value, hash_fn)
    if consteq(c_expected, c_given):
        return True

    if raise_on_fail:
        raise CommitmentViolation(
            expected_commitment_hex=c_given.hex(),
            got_commitment_hex=c_expected.hex(),
            claimed_value=claimed_value,
        )
    return False


def ensure_verified(
    commitment: Union[BytesLike, str],
    revealed_key: Union[BytesLike, str],
    claimed_value: int,
    *,
    hash_fn: str = DEFAULT_HASH_FN,
) -> None:
    """Raise CommitmentViolation unless the reveal matches the commitment."""
    verify(commitment, revealed_key, claimed_value, hash_fn=hash_fn, raise_on_fail=True)


def verify_record(record: AuditRecord, *, raise_on_fail: bool = False) -> bool:
    """Verify an audit record, including that its value lies inside its range."""
    if not 0 <= record.value < record.range:
        if raise_on_fail:
            raise CommitmentViolation(
                expected_commitment_hex=record.commitment,
                got_commitment_hex="",
                claimed_value=record.value,
            )
        return False
    return verify(
        record.commitment,
        record.key,
        record.value,
        hash_fn=record.hash_fn,
        raise_on_fail=raise_on_fail,
    )
