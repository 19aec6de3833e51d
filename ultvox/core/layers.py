from __future__ import annotations
from typing import Iterable, Optional, Tuple
import numpy as np

from .voxels import VoxelBatch

# Seven opaque bands, two layers each, then the colour used for see-through layers.
PALETTE = np.array([
    [255, 0, 0, 255],       # red
    [255, 128, 0, 255],     # orange
    [255, 255, 0, 255],     # yellow
    [0, 255, 0, 255],       # green
    [0, 128, 255, 255],     # blue
    [77, 0, 204, 255],      # indigo
    [255, 26, 128, 255],    # pink
    [255, 255, 255, 96],    # transparent
], dtype=np.uint8)
TRANSPARENT_INDEX = 7
LAYERS_PER_BAND = 2
N_BANDS = 7


def y_range(voxels: Iterable[Tuple[int, int, int]]) -> Optional[Tuple[int, int]]:
    """``(min_y, max_y)`` over a voxel set, or ``None`` when it is empty."""
    ys = [v[1] for v in voxels]
    if not ys:
        return None
    return (min(ys), max(ys))


def band_index(y: np.ndarray) -> np.ndarray:
    return (np.asarray(y, dtype=np.int64) % (N_BANDS * LAYERS_PER_BAND)) // LAYERS_PER_BAND


def assign_layers(
    voxels: Iterable[Tuple[int, int, int]],
    up_to_y: Optional[int] = None,
    transparent_layers: int = 2,
) -> VoxelBatch:
    """Slice a voxel set at ``up_to_y`` and colour it by layer.

    Voxels more than ``transparent_layers`` above the cut are dropped, the
    layers just above it are marked transparent, everything else gets the
    colour band of its Y level.
    """
    full = VoxelBatch.from_voxels(voxels)
    y = full.ijk[:, 1].astype(np.int64)
    if up_to_y is None:
        up_to_y = int(y.max()) if len(y) else 0
    diff = y - int(up_to_y)
    keep = diff <= transparent_layers
    transparent = diff[keep] > 0
    index = np.where(transparent, TRANSPARENT_INDEX, band_index(y[keep])).astype(np.uint8)
    rgba = PALETTE[index]
    return VoxelBatch(
        ijk=full.ijk[keep],
        attrs={
            "palette_index": index,
            "rgb": rgba[:, :3],
            "alpha": rgba[:, 3],
            "transparent": transparent,
        },
    )
