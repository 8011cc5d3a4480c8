"""Tunable parameters for the Hough spiral cleaner."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError


_INT_FIELDS = (
    "num_angle_bins_to_reduce",
    "hough_space_slice_size",
    "peak_width",
    "min_points_per_line",
    "linear_hough_num_bins",
    "circular_hough_num_bins",
)
_RADIUS_FIELDS = ("linear_hough_max_radius", "circular_hough_max_radius")


@dataclass(slots=True, frozen=True)
class HoughSpiralCleanerConfig:
    """Parameters controlling binning, peak refinement and line pruning."""

    num_angle_bins_to_reduce: int = 10    # top-weighted bins averaged for the dominant angle
    hough_space_slice_size: int = 5       # half-width of the summed angle band
    peak_width: int = 10                  # half-width of the centroid window
    min_points_per_line: int = 40         # lines with fewer points are eliminated
    linear_hough_num_bins: int = 500
    linear_hough_max_radius: float = 2000.0
    circular_hough_num_bins: int = 500
    circular_hough_max_radius: float = 500.0

    def validate(self) -> None:
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}", context=name)
        for name in _RADIUS_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}", context=name)

        if self.linear_hough_num_bins < 1:
            raise ConfigurationError("linear_hough_num_bins must be at least 1")
        if self.circular_hough_num_bins < 1:
            raise ConfigurationError("circular_hough_num_bins must be at least 1")
        if self.linear_hough_max_radius <= 0:
            raise ConfigurationError("linear_hough_max_radius must be positive")
        if self.circular_hough_max_radius <= 0:
            raise ConfigurationError("circular_hough_max_radius must be positive")

        total_bins = self.linear_hough_num_bins ** 2
        if not 1 <= self.num_angle_bins_to_reduce <= total_bins:
            raise ConfigurationError(
                f"num_angle_bins_to_reduce must be in [1, {total_bins}], "
                f"got {self.num_angle_bins_to_reduce}"
            )
        band = 2 * self.hough_space_slice_size
        if not 1 <= band <= self.linear_hough_num_bins:
            raise ConfigurationError(
                f"2 * hough_space_slice_size must be in [1, {self.linear_hough_num_bins}], got {band}"
            )
        if self.peak_width < 0:
            raise ConfigurationError("peak_width must be non-negative")
        if self.min_points_per_line < 0:
            raise ConfigurationError("min_points_per_line must be non-negative")


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(slots=True, frozen=True)
class Config:
    cleaner: HoughSpiralCleanerConfig = HoughSpiralCleanerConfig()
    logging: LoggingConfig = LoggingConfig()


def _read(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _overlay(base, section: Optional[Dict[str, Any]], name: str):
    if not section:
        return base
    if not isinstance(section, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping", context=name)
    known = {f.name for f in fields(base)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {unknown}", context=name)
    return replace(base, **section)


def load_config(path: str | Path | None) -> Config:
    """Load a YAML config file on top of the defaults.

    A missing path or file yields the defaults. The cleaner section is
    validated before it is returned.
    """

    cfg = Config()
    if path is not None and Path(path).is_file():
        data = _read(Path(path))
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the top level", context=str(path))
        unknown = sorted(set(data) - {"cleaner", "logging"})
        if unknown:
            raise ConfigurationError(f"Unknown config sections: {unknown}", context=str(path))
        cfg = Config(
            cleaner=_overlay(cfg.cleaner, data.get("cleaner"), "cleaner"),
            logging=_overlay(cfg.logging, data.get("logging"), "logging"),
        )
    cfg.cleaner.validate()
    return cfg
