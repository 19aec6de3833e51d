from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from ..core.scene import InvalidReferenceError
from ..core.transform import Transform
from ..core.voxelizer import SceneVoxelizer
from ..examples.synthetic import write_scene
from ..io.obj import load_obj
from ..io.snapshot import save_snapshot
from ..runtime.builders import OUTPUT_SUFFIXES, load_scene, writer_for_path
from ..sdk.run import voxelize_from_config

app = typer.Typer(help="UltVox surface voxelizer")
scene_app = typer.Typer(help="Scene file helpers")
app.add_typer(scene_app, name="scene")


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("ultvox").setLevel(numeric)


def _format_stats(stats: dict, output: Path) -> str:
    yr = stats.get("y_range")
    y_text = f"y {yr[0]}..{yr[1]}" if yr is not None else "empty"
    return f"Completed {stats['voxels']} voxels ({stats['written']} written, {y_text}) from {stats['elements']} elements → {output}"


def _output_format(output: Path) -> str:
    ext = output.suffix.lower()
    if ext not in OUTPUT_SUFFIXES:
        raise typer.BadParameter("Output must end with .npz, .ply, .las, or .laz", param_hint="--output")
    return ext.lstrip(".")


@app.command("run")
def run(
    config: Path = typer.Argument(..., exists=True, readable=True, help="Path to YAML configuration file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Override output path (extension sets format)."),
    up_to_y: Optional[int] = typer.Option(None, "--up-to-y", help="Highest opaque Y layer."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Voxelize the scene described by a YAML config."""

    _configure_logging(log_level)
    if output is not None:
        _output_format(output)
    try:
        result = voxelize_from_config(config, output=output, up_to_y=up_to_y)
    except (InvalidReferenceError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(_format_stats(result.stats, result.output_path))


@app.command("voxelize")
def voxelize_cli(
    scene: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="Scene snapshot (.yaml) or OBJ file."),
    output: Path = typer.Option(Path("voxels.npz"), "--output", "-o", help="Output voxel file (.npz/.ply/.las/.laz)."),
    yaw: float = typer.Option(0.0, "--yaw", help="Rotation about Y in degrees."),
    pitch: float = typer.Option(0.0, "--pitch", help="Rotation about X in degrees."),
    roll: float = typer.Option(0.0, "--roll", help="Rotation about Z in degrees."),
    scale: float = typer.Option(1.0, "--scale", help="Uniform scale applied after rotation."),
    up_to_y: Optional[int] = typer.Option(None, "--up-to-y", help="Highest opaque Y layer."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Quick voxelization driven entirely from CLI options."""

    if scale <= 0.0:
        raise typer.BadParameter("scale must be positive.", param_hint="--scale")
    fmt = _output_format(output)
    _configure_logging(log_level)

    output = output.resolve()
    voxelizer = SceneVoxelizer(Transform.from_euler_deg(yaw, pitch, roll, scale=scale))
    try:
        loaded = load_scene(scene.resolve())
        stats = voxelizer.run_to_writer(writer_for_path(output, fmt), loaded, up_to_y=up_to_y)
    except (InvalidReferenceError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(_format_stats(stats, output))


@scene_app.command("generate")
def scene_generate(
    output: Path = typer.Argument(..., help="Output snapshot path (.yaml)."),
    preset: str = typer.Option("example", "--preset", help="Example scene preset (example, cube, pyramid, ball)."),
    size: float = typer.Option(10.0, "--size", help="Scene extent scaling factor."),
) -> None:
    """Write an example scene snapshot."""

    out = output.resolve()
    try:
        write_scene(preset=preset, size=size, path=out)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--preset")
    typer.echo(f"Wrote example scene to {out}")


@scene_app.command("import")
def scene_import(
    source: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="Wavefront OBJ file."),
    output: Path = typer.Argument(..., help="Output snapshot path (.yaml)."),
) -> None:
    """Convert an OBJ file into a scene snapshot."""

    try:
        scene = load_obj(source)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    out = save_snapshot(scene, output.resolve())
    typer.echo(f"Imported {len(scene.points)} points and {len(scene.elements)} polygons → {out}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
