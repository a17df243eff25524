# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Fair commitment generator: one house draw per instance.

Lifecycle
---------
    gen = FairRandomGenerator(6)          # fresh 256-bit key
    value, commitment = gen.generate()     # publish `commitment` (HMAC=…)
    ...                                    # counterparty locks in its input
    key_hex = gen.reveal_key()             # publish KEY=…; round is auditable

A generator commits to exactly one value. A second ``generate()`` raises
:class:`~fairdice.errors.AlreadyGenerated`, and generating after the key was
revealed raises :class:`~fairdice.errors.KeyRevealed`. Build a new instance
per round; keys are never reused.

Revealing before the counterparty has seen the commitment voids the fairness
guarantee. This class does not police that ordering; the game machine does.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, NamedTuple, Optional

from fairdice.commit_reveal.sampler import Sampler, uniform_int
from fairdice.constants import DEFAULT_HASH_FN, DEFAULT_KEY_BYTES
from fairdice.errors import AlreadyGenerated, InvalidRange, KeyRevealed
from fairdice.utils.bytes import to_hex
from fairdice.utils.hash import check_hash_fn, mac_hex, new_secret_key

__all__ = ["Generated", "AuditRecord", "FairRandomGenerator"]


class Generated(NamedTuple):
    """A committed house value and its published commitment (hex)."""
    value: int
    commitment: str


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Everything a third party needs to re-check one revealed round."""
    range: int
    value: int
    commitment: str
    key: str
    hash_fn: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class FairRandomGenerator:
    """
    Draws one value in ``[0, range_)`` and commits to it with
    ``HMAC(key, str(value))`` under a per-instance secret key.
    """

    __slots__ = ("_range", "_hash_fn", "_key", "_sampler", "_generated", "_revealed")

    def __init__(
        self,
        range_: int,
        *,
        key_bytes: int = DEFAULT_KEY_BYTES,
        hash_fn: str = DEFAULT_HASH_FN,
        sampler: Sampler = uniform_int,
    ) -> None:
        if isinstance(range_, bool) or not isinstance(range_, int) or range_ <= 0:
            raise InvalidRange(range_)
        self._range = range_
        self._hash_fn = check_hash_fn(hash_fn)
        self._key = new_secret_key(key_bytes)
        self._sampler = sampler
        self._generated: Optional[Generated] = None
        self._revealed = False

    # ---- Read-only views ----

    @property
    def range(self) -> int:
        return self._range

    @property
    def hash_fn(self) -> str:
        return self._hash_fn

    @property
    def value(self) -> Optional[int]:
        return None if self._generated is None else self._generated.value

    @property
    def commitment(self) -> Optional[str]:
        return None if self._generated is None else self._generated.commitment

    @property
    def revealed(self) -> bool:
        return self._revealed

    # ---- Protocol steps ----

    def generate(self) -> Generated:
        """
        Draw the value and compute its commitment.

        Raises:
            AlreadyGenerated: if this instance already committed to a value.
            KeyRevealed: if the key was revealed before any value was drawn.
        """
        if self._generated is not None:
            raise AlreadyGenerated(self._generated.commitment)
        if self._revealed:
            raise KeyRevealed("cannot generate after the key has been revealed")

        value = self._sampler(self._range)
        if not 0 <= value < self._range:
            raise ValueError(f"sampler returned {value!r} outside [0, {self._range})")
        self._generated = Generated(value, mac_hex(self._key, value, self._hash_fn))
        return self._generated

    def reveal_key(self) -> str:
        """Return the secret key as hex and mark the round auditable."""
        self._revealed = True
        return to_hex(self._key)

    def audit(self) -> AuditRecord:
        """
        Snapshot of a finished round.

        Raises:
            KeyRevealed: unless the value was generated and the key revealed.
        """
        if self._generated is None or not self._revealed:
            raise KeyRevealed("audit requires a generated value and a revealed key")
        return AuditRecord(
            range=self._range,
            value=self._generated.value,
            commitment=self._generated.commitment,
            key=to_hex(self._key),
            hash_fn=self._hash_fn,
        )

    def __repr__(self) -> str:
        state = "revealed" if self._revealed else ("committed" if self._generated else "fresh")
        return f"FairRandomGenerator(range={self._range}, hash_fn={self._hash_fn!r}, state={state})"
