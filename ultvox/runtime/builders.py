from __future__ import annotations

from pathlib import Path

from ..config import VoxelizeConfig
from ..core.exporter import LasWriter, NpzWriter, PlyWriter
from ..core.scene import Scene
from ..core.transform import Transform
from ..io.obj import load_obj
from ..io.snapshot import load_snapshot

OUTPUT_SUFFIXES = {".npz", ".ply", ".las", ".laz"}


def build_transform(cfg: VoxelizeConfig) -> Transform:
    rot_cfg = cfg.transform.rotation
    scale = cfg.transform.scale
    if rot_cfg.kind == "euler":
        return Transform.from_euler_deg(rot_cfg.yaw_deg, rot_cfg.pitch_deg, rot_cfg.roll_deg, scale=scale)
    if rot_cfg.kind == "quaternion":
        return Transform.from_quaternion(rot_cfg.wxyz, scale=scale)
    raise ValueError(f"Unsupported rotation kind: {rot_cfg.kind}")


def load_scene(path: Path, fmt: str = "auto") -> Scene:
    if fmt == "auto":
        fmt = "obj" if Path(path).suffix.lower() == ".obj" else "snapshot"
    if fmt == "obj":
        return load_obj(path)
    if fmt == "snapshot":
        return load_snapshot(path)
    raise ValueError(f"Unsupported scene format: {fmt}")


def writer_for_path(path: Path, fmt: str):
    format_lower = fmt.lower()
    if format_lower in {"las", "laz"}:
        return LasWriter(str(path), compress=format_lower == "laz")
    if format_lower == "npz":
        return NpzWriter(str(path))
    if format_lower == "ply":
        return PlyWriter(str(path))
    raise ValueError(f"Unsupported output format: {fmt}")


def build_writer(cfg: VoxelizeConfig):
    return writer_for_path(cfg.output.path, cfg.output.format)
