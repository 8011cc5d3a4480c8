"""Typer-based CLI for the spiral cleaner."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from .cleaner import HoughSpiralCleaner
from .config import load_config
from .errors import SpiralCleanerError
from .io import LoadedHits, load_hits

app = typer.Typer(name="spiral-cleaner", help="Hough-transform cleaning of spiral particle tracks")


def setup_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_center(center: Optional[str]) -> Optional[tuple[float, float]]:
    if center is None:
        return None
    parts = [p.strip() for p in center.split(",") if p.strip()]
    if len(parts) != 2:
        raise typer.BadParameter("Center must be formatted as 'cx,cy'")
    try:
        return tuple(float(v) for v in parts)  # type: ignore[return-value]
    except ValueError as exc:
        raise typer.BadParameter(f"Center must be numeric: {center}") from exc


def _build_cleaner(config: Optional[Path], log_level: Optional[str]) -> HoughSpiralCleaner:
    try:
        cfg = load_config(config)
    except SpiralCleanerError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    setup_logging(log_level or cfg.logging.level)
    return HoughSpiralCleaner(cfg.cleaner)


def _load(in_path: Path) -> LoadedHits:
    try:
        return load_hits(in_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--in") from exc


@app.command()
def clean(
    in_path: Path = typer.Option(..., "--in", help="Input hits (.ply, .pcd, .xyz, .txt, .npy)"),
    center: Optional[str] = typer.Option(None, help="Spiral center 'cx,cy' (estimated if omitted)"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    view_flag: bool = typer.Option(False, "--view", help="Open Open3D viewer coloured by line"),
    hide_unassigned: bool = typer.Option(False, help="Draw unassigned points in black"),
) -> None:
    """Run one cleaning pass and report the lines found."""

    cleaner = _build_cleaner(config, log_level)
    hits = _load(in_path)

    ctr = _parse_center(center)
    try:
        if ctr is None:
            ctr = tuple(cleaner.find_center(hits.xyz))
            typer.echo(f"Estimated center: {ctr[0]:.3f}, {ctr[1]:.3f}")
        outcome = cleaner.clean(hits.xyz, ctr)
    except SpiralCleanerError as exc:
        typer.echo(f"Cleaning failed [{exc.code}]: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    result = outcome.result
    typer.echo(f"Points: {result.num_points}")
    typer.echo(f"Angle: {outcome.max_angle:.4f} rad (bin {outcome.max_angle_bin})")
    for line_idx, rad in enumerate(outcome.radii):
        n_members = int(np.count_nonzero(result.line_mask(line_idx)))
        status = "kept" if n_members else "eliminated"
        typer.echo(f"Line {line_idx}: radius={rad:.3f} points={n_members} ({status})")
    typer.echo(f"Unassigned: {int(np.count_nonzero(~result.assigned_mask()))}")

    if view_flag:
        from .visualize import build_labeled_cloud, open_viewer

        open_viewer(build_labeled_cloud(hits.xyz, result.labels, show_unassigned=not hide_unassigned))


@app.command()
def center(
    in_path: Path = typer.Option(..., "--in", help="Input hits"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Estimate the spiral center with the circular Hough transform."""

    cleaner = _build_cleaner(config, log_level)
    hits = _load(in_path)
    try:
        ctr = cleaner.find_center(hits.xyz)
    except SpiralCleanerError as exc:
        typer.echo(f"Center search failed [{exc.code}]: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"{ctr[0]:.6f},{ctr[1]:.6f}")


if __name__ == "__main__":  # pragma: no cover - CLI entry
    app()
