"""Settings for the example network: sizes, seed and weight scale"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass
class NetworkConfig:
    in_dim: int = 4
    hidden_dim: int = 64
    out_dim: int = 2
    seed: int = 0
    weight_scale: float | None = None  # None means 1/sqrt(fan_in)

    def __post_init__(self):
        for name in ("in_dim", "hidden_dim", "out_dim"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if self.weight_scale is not None:
            # YAML 1.1 reads 1e-3 (no dot) as a string
            if isinstance(self.weight_scale, bool) or not isinstance(self.weight_scale, (int, float)):
                raise ValueError(f"weight_scale must be a number, got {self.weight_scale!r}")
            if self.weight_scale <= 0:
                raise ValueError(f"weight_scale must be positive, got {self.weight_scale!r}")


def load_config(path: str | Path | None = None) -> NetworkConfig:
    """Read a NetworkConfig from a YAML file

    Args:
        path (str | Path, optional): YAML file holding a mapping of NetworkConfig fields.
            Defaults to None, which gives the defaults.

    Raises:
        FileNotFoundError: path doesn't exist
        ValueError: the document isn't a mapping or has keys NetworkConfig doesn't know

    Returns:
        NetworkConfig: the settings
    """
    if path is None:
        return NetworkConfig()
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must hold a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(NetworkConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
    logger.debug("loaded network config from %s", path)
    return NetworkConfig(**raw)
