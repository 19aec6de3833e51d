from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

from ..core.scene import PolygonElement, Scene
from ..core.utils import get_logger

_log = get_logger()


class ObjFormatError(ValueError):
    def __init__(self, line_no: int, message: str) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no


def _face_index(token: str, line_no: int) -> int:
    head = token.split("/", 1)[0]
    try:
        return int(head)
    except ValueError:
        raise ObjFormatError(line_no, f"bad vertex reference '{token}'") from None


def parse_obj(text: str) -> Scene:
    """Build a scene from Wavefront OBJ text.

    ``v`` records become points numbered from 1 in file order and every ``f``
    record becomes one polygon. Only the vertex index of ``v/vt/vn`` tokens is
    used; other record types are ignored.
    """
    points: Dict[int, Tuple[float, float, float]] = {}
    elements: List[PolygonElement] = []
    next_id = 1
    for line_no, line in enumerate(text.splitlines(), start=1):
        parts = line.split()
        if not parts:
            continue
        if parts[0] == "v":
            if len(parts) < 4:
                raise ObjFormatError(line_no, "vertex needs three coordinates")
            try:
                x, y, z = (float(v) for v in parts[1:4])
            except ValueError:
                raise ObjFormatError(line_no, "vertex coordinates must be numbers") from None
            points[next_id] = (x, y, z)
            next_id += 1
        elif parts[0] == "f":
            elements.append(PolygonElement(tuple(_face_index(t, line_no) for t in parts[1:])))
    return Scene(points=points, elements=list(elements))


def load_obj(path: str | Path) -> Scene:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        scene = parse_obj(f.read())
    _log.info("Imported %s (%d vertices, %d faces)", path.name, len(scene.points), len(scene.elements))
    return scene
