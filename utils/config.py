# utils/config.py
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple

import structlog
import yaml

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ChainConfig:
    """Tunable parameters for a maze chain run."""

    base_size: int = 5
    size_increment: int = 2
    alignment_point: Tuple[int, int] = (1, 1)
    cell_size: float = 2.0
    spacing: float = 10.0
    max_segments: int = 100
    look_ahead: int = 2
    initial_segments: int = 2
    seed: int | None = None
    # Teleport target inside the entrance cell (height above floor, depth nudge).
    teleport_height: float = 0.45
    entrance_depth_offset: float = 0.5
    # Session timer
    start_time: float = 120.0
    crossing_bonus_base: float = 5.0
    crossing_bonus_per_segment: float = 2.0
    max_item_base_count: int = 5

    def __post_init__(self) -> None:
        if self.base_size < 3:
            raise ValueError("base_size must be at least 3")
        if self.size_increment < 0:
            raise ValueError("size_increment must be non-negative")
        if self.max_segments < 1:
            raise ValueError("max_segments must be at least 1")
        if self.look_ahead < 0:
            raise ValueError("look_ahead must be non-negative")
        if self.initial_segments < 1:
            raise ValueError("initial_segments must be at least 1")
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive")
        if len(self.alignment_point) != 2:
            raise ValueError("alignment_point must be an (x, y) pair")

    @property
    def last_index(self) -> int:
        return self.max_segments - 1

    @classmethod
    def from_dict(cls, raw: Dict[str, Any] | None) -> "ChainConfig":
        """Build a config from loosely-typed data, keeping defaults for bad keys."""
        if not isinstance(raw, dict):
            return cls()
        defaults = cls()
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in raw:
                continue
            value = raw[f.name]
            default = getattr(defaults, f.name)
            try:
                kwargs[f.name] = _coerce(value, default)
            except (TypeError, ValueError):
                log.warning(
                    "Ignoring invalid config value",
                    key=f.name,
                    value=value,
                    default=default,
                )
        unknown = sorted(set(raw) - {f.name for f in fields(cls)})
        if unknown:
            log.warning("Unknown chain config keys", keys=unknown)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out["alignment_point"] = list(self.alignment_point)
        return out


def _coerce(value: Any, default: Any) -> Any:
    if value is None:
        if default is None:
            return None
        raise ValueError("null is only allowed for optional keys")
    if isinstance(default, bool):
        return bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, tuple):
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueError("expected a pair")
        return (int(value[0]), int(value[1]))
    # seed defaults to None
    return int(value)


def load_yaml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a generic YAML configuration file."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_chain_config(config_path: Path) -> ChainConfig:
    """Read the ``chain`` section of a YAML file into a :class:`ChainConfig`."""
    data = load_yaml_config(config_path, "Chain")
    return ChainConfig.from_dict(data.get("chain", {}))


__all__ = ["ChainConfig", "load_yaml_config", "load_chain_config"]
