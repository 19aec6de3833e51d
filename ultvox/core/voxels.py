from __future__ import annotations
from dataclasses import dataclass, field
import numpy as np
from typing import Dict, Iterable, Tuple

@dataclass
class VoxelBatch:
    """A batch of integer voxel coordinates with arbitrary per-voxel attributes."""
    ijk: np.ndarray                       # (N, 3)
    attrs: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.ijk = np.asarray(self.ijk, dtype=np.int32).reshape(-1, 3)
        # Attributes are 1D or 2D with matching length
        n = len(self.ijk)
        for k, v in list(self.attrs.items()):
            v = np.asarray(v)
            if v.ndim == 1 and len(v) != n:
                raise ValueError(f"Attribute '{k}' length {len(v)} != {n}")
            if v.ndim == 2 and v.shape[0] != n:
                raise ValueError(f"Attribute '{k}' first dim {v.shape[0]} != {n}")
            self.attrs[k] = v

    @staticmethod
    def from_voxels(voxels: Iterable[Tuple[int, int, int]]) -> "VoxelBatch":
        """Batch sorted by (x, y, z) so output files are reproducible."""
        return VoxelBatch(ijk=np.asarray(sorted(voxels), dtype=np.int32).reshape(-1, 3))
