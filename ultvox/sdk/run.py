from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config import VoxelizeConfig, load_config
from ..core.voxelizer import SceneVoxelizer
from ..runtime.builders import (
    OUTPUT_SUFFIXES,
    build_transform,
    build_writer,
    load_scene,
)


@dataclass(frozen=True)
class ConfigRunResult:
    """Summary of a voxelization run driven by a configuration file."""

    stats: Dict[str, Any]
    output_path: Path
    config: VoxelizeConfig


def voxelize_from_config(
    config: Union[str, Path, VoxelizeConfig],
    *,
    output: Optional[Path] = None,
    up_to_y: Optional[int] = None,
) -> ConfigRunResult:
    """Voxelize the scene described by a configuration file or object.

    Parameters
    ----------
    config:
        Path to a YAML file or a pre-loaded :class:`~ultvox.config.schema.VoxelizeConfig`.
    output:
        Optional override for the output file. The extension drives the format
        (``.npz``, ``.ply``, ``.las`` or ``.laz``).
    up_to_y:
        Optional override for the highest opaque layer.

    Returns
    -------
    ConfigRunResult
        Run statistics (elements, primitives, voxels, written, y_range), the
        resolved output path and the configuration used for the run.

    Raises
    ------
    ultvox.core.scene.InvalidReferenceError
        If an element names a point id the scene does not define. Nothing is
        written in that case.
    """

    cfg = load_config(config) if not isinstance(config, VoxelizeConfig) else config.model_copy(deep=True)

    if up_to_y is not None:
        cfg.layers.up_to_y = up_to_y

    if output is not None:
        out_path = Path(output).resolve()
        ext = out_path.suffix.lower()
        if ext not in OUTPUT_SUFFIXES:
            raise ValueError(f"Unsupported output extension '{ext}'")
        cfg.output.path = out_path
        cfg.output.format = ext.lstrip(".")
    else:
        cfg.output.path = Path(cfg.output.path).resolve()

    scene = load_scene(cfg.scene.path, cfg.scene.format)
    voxelizer = SceneVoxelizer(build_transform(cfg))
    writer = build_writer(cfg)

    try:
        stats = voxelizer.run_to_writer(
            writer,
            scene,
            up_to_y=cfg.layers.up_to_y,
            transparent_layers=cfg.layers.transparent_layers,
        )
    finally:
        close = getattr(writer, "close", None)
        if callable(close):
            close()

    return ConfigRunResult(stats=stats, output_path=Path(cfg.output.path), config=cfg)
