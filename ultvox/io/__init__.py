"""Scene persistence (YAML snapshots) and Wavefront OBJ import."""

from .snapshot import SnapshotError, load_snapshot, save_snapshot, scene_from_dict, scene_to_dict
from .obj import ObjFormatError, load_obj, parse_obj

__all__ = [
    "SnapshotError",
    "load_snapshot",
    "save_snapshot",
    "scene_from_dict",
    "scene_to_dict",
    "ObjFormatError",
    "load_obj",
    "parse_obj",
]
