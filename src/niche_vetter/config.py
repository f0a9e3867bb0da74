"""Engine configuration helpers."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from .utils import safe_float

CONFIG_PATH = Path(os.environ.get("NICHE_VETTER_CONFIG", "config/engine.json"))
ENV_PREFIX = "NICHE_VETTER_"


@dataclass(frozen=True)
class EngineConfig:
    """Gate and classification thresholds for market scoring.

    The defaults are the production thresholds; a JSON file or environment
    variables only need to name the values they override.
    """

    max_competitors: int = 35
    bsr_stability_floor: float = 0.30
    price_stability_floor: float = 0.35
    top_competitor_count: int = 5
    neutral_stability: float = 0.5
    auto_fail_ceiling: float = 39
    pass_threshold: float = 70
    risky_threshold: float = 40

    @classmethod
    def load(cls, path: Path | None = None) -> "EngineConfig":
        """Load thresholds from ``path`` or the default config file.

        Falls back to ``NICHE_VETTER_*`` environment variables when the file
        does not exist.

        Raises
        ------
        ValueError
            If the file is not a JSON object, a key is unknown or a value is
            not numeric.
        """

        config_path = path or CONFIG_PATH
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text())
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in config file {config_path}: {exc}") from exc
        else:
            data = cls._load_from_env()
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "EngineConfig":
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration must be a JSON object, got {type(data).__name__}"
            )
        known = {item.name: item for item in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            number = safe_float(raw)
            if number is None:
                raise ValueError(f"Configuration value for {key!r} must be numeric, got {raw!r}")
            values[key] = int(number) if known[key].type in (int, "int") else number
        return cls(**values)

    @staticmethod
    def _load_from_env() -> Dict[str, Any]:
        env_mapping = {
            item.name: os.environ.get(f"{ENV_PREFIX}{item.name.upper()}")
            for item in fields(EngineConfig)
        }
        return {k: v for k, v in env_mapping.items() if v}


DEFAULT_CONFIG = EngineConfig()
