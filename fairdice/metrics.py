"""
Prometheus metrics for fair-dice sessions.

Counters for the game layer (the commit→reveal core itself stays
instrument-free):
  • commitments_total  : commitments published, by purpose
  • verifications_total: reveal self-checks, by outcome
  • rounds_total       : finished dice rounds, by outcome

Label vocabularies are small and fixed.

Usage
-----
    from fairdice.metrics import METRICS

    METRICS.record_commitment("throw")
    METRICS.record_verification("ok")
    METRICS.record_round("user")

Tests construct their own `Metrics` with a private `CollectorRegistry`.
"""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter, start_http_server

# --------- Vocabularies ---------

_COMMIT_PURPOSES = (
    "first_move",   # 0..1 draw deciding who picks a die first
    "throw",        # 0..5 draw selecting a face
    "other",        # anything else (CLI one-offs)
)

_VERIFY_OUTCOMES = (
    "ok",           # reveal reproduced the commitment
    "violation",    # mismatch; should never happen
)

_ROUND_OUTCOMES = (
    "user",         # user threw higher
    "house",        # house threw higher
    "tie",
    "cancelled",    # user left mid-round
)


class Metrics:
    """
    Container for all fair-dice Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "fairdice",
        subsystem: str = "game",
        registry=REGISTRY,
    ) -> None:
        self.commitments_total = Counter(
            "commitments_total",
            "Number of commitments published, labeled by purpose.",
            labelnames=("purpose",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verifications_total = Counter(
            "verifications_total",
            "Number of reveal verifications, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.rounds_total = Counter(
            "rounds_total",
            "Number of dice rounds finished, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    def record_commitment(self, purpose: str) -> None:
        if purpose not in _COMMIT_PURPOSES:
            purpose = "other"
        self.commitments_total.labels(purpose=purpose).inc()

    def record_verification(self, outcome: str) -> None:
        if outcome not in _VERIFY_OUTCOMES:
            outcome = "violation"
        self.verifications_total.labels(outcome=outcome).inc()

    def record_round(self, outcome: str) -> None:
        if outcome not in _ROUND_OUTCOMES:
            raise ValueError(f"unknown round outcome {outcome!r}")
        self.rounds_total.labels(outcome=outcome).inc()


def serve(port: int) -> None:
    """Expose the default registry over HTTP on *port* (background thread)."""
    start_http_server(port)


# Singleton used by the game and CLI
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "serve",
    "_COMMIT_PURPOSES",
    "_VERIFY_OUTCOMES",
    "_ROUND_OUTCOMES",
]
