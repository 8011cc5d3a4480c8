"""Hough-transform cleaning of spiral particle tracks."""

from __future__ import annotations

from .cleaner import (
    UNASSIGNED,
    HoughSpiralCleaner,
    HoughSpiralCleanerResult,
    SpiralCleaningOutcome,
)
from .config import HoughSpiralCleanerConfig, load_config
from .errors import (
    ConfigurationError,
    DegenerateGeometryError,
    HoughSpaceError,
    SpiralCleanerError,
    ZeroWeightPeakError,
)
from .geometry import find_arc_length
from .hough import CircularHoughTransform, HoughSpace, LinearHoughTransform

__all__ = [
    "UNASSIGNED",
    "CircularHoughTransform",
    "ConfigurationError",
    "DegenerateGeometryError",
    "HoughSpace",
    "HoughSpaceError",
    "HoughSpiralCleaner",
    "HoughSpiralCleanerConfig",
    "HoughSpiralCleanerResult",
    "LinearHoughTransform",
    "SpiralCleanerError",
    "SpiralCleaningOutcome",
    "ZeroWeightPeakError",
    "find_arc_length",
    "load_config",
    "main",
]


def main() -> None:
    """Run the command-line interface."""

    from .cli import app

    app()


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    main()
