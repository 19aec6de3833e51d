from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import numpy as np

from ..core.scene import Element, PolygonElement, Scene, SphereElement, TriangleElement
from ..io.snapshot import save_snapshot

Part = Tuple[np.ndarray, List[Element]]


def _box(center: Tuple[float, float, float], size: Tuple[float, float, float]) -> Part:
    cx, cy, cz = center
    sx, sy, sz = size
    hx, hy, hz = sx / 2.0, sy / 2.0, sz / 2.0
    vertices = np.array([
        [cx - hx, cy - hy, cz - hz],
        [cx + hx, cy - hy, cz - hz],
        [cx + hx, cy + hy, cz - hz],
        [cx - hx, cy + hy, cz - hz],
        [cx - hx, cy - hy, cz + hz],
        [cx + hx, cy - hy, cz + hz],
        [cx + hx, cy + hy, cz + hz],
        [cx - hx, cy + hy, cz + hz],
    ], dtype=np.float64)

    faces = [
        (0, 1, 2, 3),  # bottom
        (4, 7, 6, 5),  # top
        (0, 4, 5, 1),  # front
        (1, 5, 6, 2),  # right
        (2, 6, 7, 3),  # back
        (3, 7, 4, 0),  # left
    ]
    return vertices, [PolygonElement(f) for f in faces]


def _pyramid(base: float, height: float) -> Part:
    h = base / 2.0
    vertices = np.array([
        [-h, 0.0, -h],
        [h, 0.0, -h],
        [h, 0.0, h],
        [-h, 0.0, h],
        [0.0, height, 0.0],
    ], dtype=np.float64)
    elements: List[Element] = [PolygonElement((0, 1, 2, 3))]
    for i in range(4):
        elements.append(TriangleElement(i, (i + 1) % 4, 4))
    return vertices, elements


def _merge_parts(parts: Iterable[Part]) -> Scene:
    points: Dict[int, Tuple[float, float, float]] = {}
    elements: List[Element] = []
    offset = 0
    for verts, elems in parts:
        for i, (x, y, z) in enumerate(verts.tolist()):
            points[offset + i] = (x, y, z)
        for e in elems:
            elements.append(_shift(e, offset))
        offset += verts.shape[0]
    return Scene(points=points, elements=elements)


def _shift(element: Element, offset: int) -> Element:
    if isinstance(element, PolygonElement):
        return PolygonElement(tuple(i + offset for i in element.ids))
    if isinstance(element, TriangleElement):
        return TriangleElement(element.a + offset, element.b + offset, element.c + offset)
    if isinstance(element, SphereElement):
        return SphereElement(element.id + offset, element.radius)
    raise TypeError(f"Cannot shift {type(element).__name__}")


def generate_scene(preset: str, size: float = 10.0) -> Scene:
    preset = preset.lower()
    if preset == "example":
        return Scene.example()

    if preset == "cube":
        return _merge_parts([_box(center=(0.0, 0.0, 0.0), size=(size, size, size))])

    if preset == "pyramid":
        return _merge_parts([_pyramid(base=size, height=size * 0.8)])

    if preset == "ball":
        center = np.zeros((1, 3), dtype=np.float64)
        return _merge_parts([(center, [SphereElement(0, size / 2.0)])])

    raise ValueError(f"Unknown example scene preset '{preset}'.")


def write_scene(preset: str, size: float, path: Path) -> Scene:
    scene = generate_scene(preset, size)
    save_snapshot(scene, path)
    return scene
