"""YAML snapshots of a scene: the point table plus the ordered element list.

Example::

    points:
      0: [0.0, 1.0, -1.5]
      1: [1.0, -1.0, 0.333]
    elements:
    - {kind: point, id: 0}
    - {kind: triangle, ids: [0, 1, 2]}
    - {kind: polygon, ids: [0, 1, 2, 3]}
    - {kind: sphere, id: 0, radius: 2.1}
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Union

import yaml
from pydantic import BaseModel, Field, FiniteFloat, NonNegativeInt, ValidationError

from ..core.scene import (
    Element,
    PointElement,
    PolygonElement,
    Scene,
    SphereElement,
    TriangleElement,
)
from ..core.utils import get_logger

_log = get_logger()


class SnapshotError(ValueError):
    """A snapshot file could not be parsed or does not describe a scene."""


class PointElementModel(BaseModel):
    kind: Literal["point"]
    id: NonNegativeInt


class TriangleElementModel(BaseModel):
    kind: Literal["triangle"]
    ids: tuple[NonNegativeInt, NonNegativeInt, NonNegativeInt]


class PolygonElementModel(BaseModel):
    kind: Literal["polygon"]
    ids: List[NonNegativeInt] = Field(default_factory=list)


class SphereElementModel(BaseModel):
    kind: Literal["sphere"]
    id: NonNegativeInt
    radius: float = Field(allow_inf_nan=False)


ElementModel = Annotated[
    Union[PointElementModel, TriangleElementModel, PolygonElementModel, SphereElementModel],
    Field(discriminator="kind"),
]


class SnapshotModel(BaseModel):
    points: Dict[NonNegativeInt, tuple[FiniteFloat, FiniteFloat, FiniteFloat]] = Field(default_factory=dict)
    elements: List[ElementModel] = Field(default_factory=list)


def _element_from_model(m: Any) -> Element:
    if m.kind == "point":
        return PointElement(m.id)
    if m.kind == "triangle":
        return TriangleElement(*m.ids)
    if m.kind == "polygon":
        return PolygonElement(tuple(m.ids))
    if m.kind == "sphere":
        return SphereElement(m.id, m.radius)
    raise ValueError(f"Unsupported element kind: {m.kind}")


def _element_to_dict(element: Element) -> Dict[str, Any]:
    if isinstance(element, PointElement):
        return {"kind": "point", "id": element.id}
    if isinstance(element, TriangleElement):
        return {"kind": "triangle", "ids": [element.a, element.b, element.c]}
    if isinstance(element, PolygonElement):
        return {"kind": "polygon", "ids": list(element.ids)}
    if isinstance(element, SphereElement):
        return {"kind": "sphere", "id": element.id, "radius": float(element.radius)}
    raise TypeError(f"Unknown element kind: {type(element).__name__}")


def scene_from_dict(data: Any) -> Scene:
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot root must be a mapping.")
    try:
        model = SnapshotModel.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(str(exc)) from exc
    return Scene(
        points={pid: xyz for pid, xyz in model.points.items()},
        elements=[_element_from_model(m) for m in model.elements],
    )


def scene_to_dict(scene: Scene) -> Dict[str, Any]:
    return {
        "points": {pid: [float(c) for c in scene.points[pid]] for pid in sorted(scene.points)},
        "elements": [_element_to_dict(e) for e in scene.elements],
    }


def load_snapshot(path: str | Path) -> Scene:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise SnapshotError(f"{path.name}: {exc}") from exc
    scene = scene_from_dict(data)
    _log.info("Loaded %s (%d points, %d elements)", path.name, len(scene.points), len(scene.elements))
    return scene


def save_snapshot(scene: Scene, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(scene_to_dict(scene), f, sort_keys=False, default_flow_style=None)
    return path
