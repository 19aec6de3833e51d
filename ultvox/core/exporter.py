from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, List, Tuple
import numpy as np
import pathlib

import laspy  # type: ignore
from .voxels import VoxelBatch
from .utils import get_logger

_log = get_logger()

@dataclass
class LasWriter:
    """Streaming LAS/LAZ writer using laspy (v2+).

    Voxel coordinates are stored at unit scale with a zero offset, so every
    point lands exactly on its integer cell. The header is created lazily on
    the first batch to decide which extra dimensions are needed. Closing a
    writer that never saw a point still leaves a header-only file.
    """
    path: str
    point_format: int = 7
    compress: bool = False

    def __post_init__(self) -> None:
        self._fh: Optional[laspy.LasWriter] = None  # type: ignore
        self._header: Optional[laspy.LasHeader] = None  # type: ignore
        self._closed = False

    # -- public API --
    def write_batch(self, batch: VoxelBatch) -> None:
        if self._fh is None:
            self._init_header_from_batch(batch)
        assert self._fh is not None and self._header is not None
        if len(batch.ijk):
            self._fh.write_points(self._point_record_from_batch(batch, self._header))

    def close(self) -> None:
        if self._closed:
            return
        if self._fh is None:
            self._init_header_from_batch(VoxelBatch(ijk=np.empty((0, 3), dtype=np.int32)))
        assert self._fh is not None
        self._fh.close()
        self._fh = None
        self._closed = True

    # -- internals --
    def _init_header_from_batch(self, batch: VoxelBatch) -> None:
        pf = laspy.PointFormat(self.point_format)
        hdr = laspy.LasHeader(point_format=pf, version="1.4")
        hdr.scales = (1.0, 1.0, 1.0)
        hdr.offsets = (0.0, 0.0, 0.0)
        if "palette_index" in batch.attrs:
            hdr.add_extra_dim(laspy.ExtraBytesParams(name="palette_index", type="uint8"))

        path = pathlib.Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = laspy.open(path, mode="w", header=hdr, do_compress=self.compress)
        self._header = hdr
        _log.info("Opened %s (PF=%d, compress=%s)", path.name, self.point_format, self.compress)

    def _point_record_from_batch(self, batch: VoxelBatch, header: "laspy.LasHeader") -> "laspy.ScaleAwarePointRecord":
        n = len(batch.ijk)
        pts = laspy.ScaleAwarePointRecord.zeros(n, header=header)
        pts.X = batch.ijk[:, 0]
        pts.Y = batch.ijk[:, 1]
        pts.Z = batch.ijk[:, 2]

        names = pts.point_format.dimension_names
        if "rgb" in batch.attrs and all(nm in names for nm in ("red", "green", "blue")):
            rgb = batch.attrs["rgb"].astype(np.uint16) * 257  # 0..255 -> 0..65535
            pts.red = rgb[:, 0]
            pts.green = rgb[:, 1]
            pts.blue = rgb[:, 2]
        if "palette_index" in batch.attrs and "palette_index" in names:
            pts["palette_index"] = batch.attrs["palette_index"].astype(np.uint8, copy=False)
        return pts


def _collect(batches: List[VoxelBatch]) -> Tuple[np.ndarray, Dict[str, np.ndarray]]:
    """Concatenate batches; only attributes carried by every batch are kept."""
    if not batches:
        return np.empty((0, 3), dtype=np.int32), {}
    ijk = np.vstack([b.ijk for b in batches])
    shared = set(batches[0].attrs).intersection(*(b.attrs for b in batches[1:]))
    attrs = {k: np.concatenate([b.attrs[k] for b in batches], axis=0) for k in sorted(shared)}
    return ijk, attrs


class PlyWriter:
    """ASCII PLY of voxel centres, with vertex colours when the batches carry ``rgb``."""
    def __init__(self, path: str) -> None:
        self.path = path
        self._batches: List[VoxelBatch] = []
        self._closed = False

    def write_batch(self, batch: VoxelBatch) -> None:
        self._batches.append(batch)

    def close(self) -> None:
        if self._closed:
            return
        path = pathlib.Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        ijk, attrs = _collect(self._batches)
        rgb = attrs.get("rgb")
        with open(path, "w", encoding="utf-8") as f:
            f.write("ply\nformat ascii 1.0\n")
            f.write(f"element vertex {len(ijk)}\n")
            f.write("property int x\nproperty int y\nproperty int z\n")
            if rgb is not None:
                f.write("property uchar red\nproperty uchar green\nproperty uchar blue\n")
            f.write("end_header\n")
            for row, (x, y, z) in enumerate(ijk):
                if rgb is None:
                    f.write(f"{int(x)} {int(y)} {int(z)}\n")
                else:
                    r, g, b = rgb[row]
                    f.write(f"{int(x)} {int(y)} {int(z)} {int(r)} {int(g)} {int(b)}\n")
        self._batches.clear()
        self._closed = True


class NpzWriter:
    """Compressed ``.npz`` holding ``ijk`` plus one array per voxel attribute."""
    def __init__(self, path: str) -> None:
        self.path = path
        self._batches: List[VoxelBatch] = []
        self._closed = False

    def write_batch(self, batch: VoxelBatch) -> None:
        self._batches.append(batch)

    def close(self) -> None:
        if self._closed:
            return
        path = pathlib.Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        ijk, attrs = _collect(self._batches)
        np.savez_compressed(path, ijk=ijk, **attrs)
        self._batches.clear()
        self._closed = True
