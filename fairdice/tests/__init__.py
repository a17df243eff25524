"""
fairdice.tests
--------------
Test package for the fairdice module.

Notes:
- Game tests script every house draw through an injected sampler, so rounds
  are deterministic while keys stay genuinely random.
- Metrics assertions use a private CollectorRegistry per test.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()
