"""Save and load vectorization settings."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass
class VectorizeConfig:
    """Settings for turning a classification mask into polygons."""
    threshold: float = 127
    max_value: int = 255
    kernel_size: int = 3
    close_iterations: int = 1
    min_area: float = 16.0  # pixels; smaller components and contours are dropped
    epsilon_factor: float = 0.01  # simplification tolerance relative to perimeter
    target_size: Optional[Tuple[int, int]] = None  # (width, height)


def save_config(config, filename="vectorize.yaml"):
    """Save settings to YAML."""
    values = dataclasses.asdict(config)
    if values["target_size"] is not None:
        values["target_size"] = list(values["target_size"])
    with open(filename, "w") as f:
        yaml.dump(values, f)


def load_config(filename="vectorize.yaml"):
    """Load settings from YAML; missing keys keep their defaults."""
    with open(filename, "r") as f:
        values = yaml.safe_load(f) or {}
    if not isinstance(values, dict):
        raise TypeError(f"{filename}: expected a mapping of settings, got {type(values).__name__}")
    known = {field.name for field in dataclasses.fields(VectorizeConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", filename, ", ".join(unknown))
    values = {key: value for key, value in values.items() if key in known}
    if values.get("target_size") is not None:
        values["target_size"] = tuple(values["target_size"])
    return VectorizeConfig(**values)
