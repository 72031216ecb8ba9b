"""
Server configuration.

``HokmConfig`` can be built from a dict, a JSON file or ``HOKM_*`` environment
variables. Unknown keys are ignored; bad values raise ValueError.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidTrump
from .play import parse_trump

ENV_PREFIX = "HOKM_"

_ENV_KEYS = {
    "default_target_tricks": "TARGET_TRICKS",
    "default_trump_mode": "TRUMP_MODE",
    "store_dir": "STORE_DIR",
    "log_level": "LOG_LEVEL",
    "seed": "SEED",
}


@dataclass
class HokmConfig:
    """Defaults applied by the request layer and the CLI."""

    default_target_tricks: int = 7
    default_trump_mode: str = "STANDARD"
    store_dir: Optional[str] = None  # None -> in-memory store
    log_level: str = "INFO"
    seed: Optional[int] = None  # fixed RNG seed for reproducible deals

    def __post_init__(self) -> None:
        self.default_target_tricks = int(self.default_target_tricks)
        if self.default_target_tricks < 1:
            raise ValueError(f"default_target_tricks must be positive, got {self.default_target_tricks}")
        try:
            parse_trump(self.default_trump_mode)
        except InvalidTrump as exc:
            raise ValueError(f"Invalid default_trump_mode: {self.default_trump_mode!r}") from exc
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")
        if self.seed is not None:
            self.seed = int(self.seed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "HokmConfig":
        return cls(
            default_target_tricks=int(d.get("default_target_tricks", 7)),
            default_trump_mode=d.get("default_trump_mode", "STANDARD"),
            store_dir=d.get("store_dir"),
            log_level=d.get("log_level", "INFO"),
            seed=d.get("seed"),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HokmConfig":
        """Read ``HOKM_TARGET_TRICKS``, ``HOKM_TRUMP_MODE``, ``HOKM_STORE_DIR``, ``HOKM_LOG_LEVEL``, ``HOKM_SEED``."""
        env = os.environ if environ is None else environ
        d: Dict[str, Any] = {}
        for field_name, suffix in _ENV_KEYS.items():
            value = env.get(ENV_PREFIX + suffix)
            if value not in (None, ""):
                d[field_name] = value
        return cls.from_dict(d)


def load_config(path: Path | str | None = None, environ: Mapping[str, str] | None = None) -> HokmConfig:
    """
    Load configuration: JSON file values first, then ``HOKM_*`` variables on top.
    Without a path only the environment (and defaults) apply.
    """
    d: Dict[str, Any] = {}
    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            d.update(json.load(f))
    env_cfg = HokmConfig.from_env(environ)
    env = os.environ if environ is None else environ
    for field_name, suffix in _ENV_KEYS.items():
        if env.get(ENV_PREFIX + suffix) not in (None, ""):
            d[field_name] = getattr(env_cfg, field_name)
    return HokmConfig.from_dict(d)


__all__ = ["HokmConfig", "load_config"]
