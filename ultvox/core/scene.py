from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union
import numpy as np

Position = Tuple[float, float, float]


class InvalidReferenceError(LookupError):
    """An element refers to a point id missing from the scene."""

    def __init__(self, element_index: int, point_id: int) -> None:
        super().__init__(f"Element {element_index} references unknown point id {point_id}")
        self.element_index = element_index
        self.point_id = point_id


@dataclass(frozen=True)
class PointElement:
    id: int
    kind = "point"

    @property
    def point_ids(self) -> Tuple[int, ...]:
        return (self.id,)


@dataclass(frozen=True)
class TriangleElement:
    a: int
    b: int
    c: int
    kind = "triangle"

    @property
    def point_ids(self) -> Tuple[int, ...]:
        return (self.a, self.b, self.c)


@dataclass(frozen=True)
class PolygonElement:
    ids: Tuple[int, ...] = ()
    kind = "polygon"

    def __post_init__(self) -> None:
        object.__setattr__(self, "ids", tuple(int(i) for i in self.ids))

    @property
    def point_ids(self) -> Tuple[int, ...]:
        return self.ids


@dataclass(frozen=True)
class SphereElement:
    id: int
    radius: float
    kind = "sphere"

    @property
    def point_ids(self) -> Tuple[int, ...]:
        return (self.id,)


Element = Union[PointElement, TriangleElement, PolygonElement, SphereElement]


@dataclass
class Scene:
    """Named points plus an ordered list of elements that reference them by id.

    Polygon vertex order and element order are preserved; the fan
    decomposition walks polygons in the stored order.
    """
    points: Dict[int, Position] = field(default_factory=dict)
    elements: List[Element] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.points = {int(k): _position(v) for k, v in self.points.items()}
        self.elements = list(self.elements)

    def resolve(self, element: Element, element_index: int = -1) -> np.ndarray:
        """Positions of every id an element references, as an (K, 3) array."""
        out = np.empty((len(element.point_ids), 3), dtype=np.float64)
        for row, pid in enumerate(element.point_ids):
            try:
                out[row] = self.points[pid]
            except KeyError:
                raise InvalidReferenceError(element_index, pid) from None
        return out

    def validate(self) -> None:
        for index, element in enumerate(self.elements):
            self.resolve(element, index)

    @staticmethod
    def example() -> "Scene":
        return Scene(
            points={
                0: (0.0, 1.0, -1.5),
                1: (1.0, -1.0, 0.333),
                2: (3.0, 0.0, 0.666),
                3: (-2.0, 3.0, 2.0),
            },
            elements=[
                PointElement(0),
                TriangleElement(0, 1, 2),
                SphereElement(0, 2.1),
                PolygonElement((0, 1, 2, 3)),
            ],
        )


def _position(v) -> Position:
    x, y, z = (float(c) for c in v)
    return (x, y, z)
