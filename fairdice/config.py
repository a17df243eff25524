"""
Fair-dice configuration.

Typed, validated settings for:
- Commitment keys and the HMAC digest
- Game rules (minimum number of dice, house dice-choice strategy)
- Operational knobs (log level, Prometheus exporter port)

Loaders:
- `FairDiceConfig.from_env(prefix="FAIRDICE_")`
- `FairDiceConfig.from_file(path)` for JSON or YAML
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import yaml

from fairdice.constants import (
    DEFAULT_HASH_FN,
    DEFAULT_HOUSE_STRATEGY,
    DEFAULT_KEY_BYTES,
    DEFAULT_MIN_DICE,
    HOUSE_STRATEGIES,
    MIN_KEY_BYTES,
    SUPPORTED_HASH_FNS,
)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class FairDiceConfig:
    """
    Commitments:
      - key_bytes: per-round secret key length (>= 32)
      - hash_fn: HMAC digest, one of SUPPORTED_HASH_FNS

    Game:
      - min_dice: fewest dice a game may be started with (>= 2)
      - house_strategy: "counter" (best die against the user's) or "random"

    Operations:
      - log_level: root logging level name used by the CLI
      - metrics_port: if set, the CLI serves Prometheus metrics on this port
    """

    key_bytes: int = DEFAULT_KEY_BYTES
    hash_fn: str = DEFAULT_HASH_FN
    min_dice: int = DEFAULT_MIN_DICE
    house_strategy: str = DEFAULT_HOUSE_STRATEGY
    log_level: str = "WARNING"
    metrics_port: Optional[int] = None

    def validate(self) -> None:
        if isinstance(self.key_bytes, bool) or not isinstance(self.key_bytes, int):
            raise ValueError("key_bytes must be an int")
        if self.key_bytes < MIN_KEY_BYTES:
            raise ValueError(f"key_bytes must be >= {MIN_KEY_BYTES}")
        if self.hash_fn not in SUPPORTED_HASH_FNS:
            raise ValueError(
                f"hash_fn must be one of {{{', '.join(SUPPORTED_HASH_FNS)}}}"
            )
        if isinstance(self.min_dice, bool) or not isinstance(self.min_dice, int):
            raise ValueError("min_dice must be an int")
        if self.min_dice < 2:
            raise ValueError("min_dice must be >= 2")
        if self.house_strategy not in HOUSE_STRATEGIES:
            raise ValueError(
                f"house_strategy must be one of {{{', '.join(HOUSE_STRATEGIES)}}}"
            )
        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {{{', '.join(_LOG_LEVELS)}}}")
        if self.metrics_port is not None and not (0 < int(self.metrics_port) < 65536):
            raise ValueError("metrics_port must be in 1..65535")

    def log_level_value(self) -> int:
        return logging.getLevelName(str(self.log_level).upper())

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "FAIRDICE_") -> "FairDiceConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - FAIRDICE_KEY_BYTES=32
          - FAIRDICE_HASH_FN=sha3_256
          - FAIRDICE_MIN_DICE=3
          - FAIRDICE_HOUSE_STRATEGY=counter
          - FAIRDICE_LOG_LEVEL=INFO
          - FAIRDICE_METRICS_PORT=9109
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = FairDiceConfig(
            key_bytes=_get("KEY_BYTES", int, DEFAULT_KEY_BYTES),
            hash_fn=_get("HASH_FN", str, DEFAULT_HASH_FN),
            min_dice=_get("MIN_DICE", int, DEFAULT_MIN_DICE),
            house_strategy=_get("HOUSE_STRATEGY", str, DEFAULT_HOUSE_STRATEGY),
            log_level=_get("LOG_LEVEL", str, "WARNING").upper(),
            metrics_port=_get("METRICS_PORT", int, None),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "FairDiceConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        fields; unknown keys are rejected. Example (YAML):

            key_bytes: 48
            hash_fn: sha3_512
            house_strategy: random
        """
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")

        known = set(FairDiceConfig.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys in {path!r}: {', '.join(unknown)}")

        cfg = FairDiceConfig(**data)
        if isinstance(cfg.log_level, str):
            cfg.log_level = cfg.log_level.upper()
        cfg.validate()
        return cfg


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


DEFAULT: FairDiceConfig = FairDiceConfig()


__all__ = [
    "FairDiceConfig",
    "DEFAULT",
]
