from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, NonNegativeInt, model_validator


class SceneConfig(BaseModel):
    path: Path
    format: Literal["auto", "snapshot", "obj"] = "auto"

    def resolved_format(self) -> str:
        if self.format != "auto":
            return self.format
        return "obj" if self.path.suffix.lower() == ".obj" else "snapshot"


class EulerRotationConfig(BaseModel):
    kind: Literal["euler"] = "euler"
    yaw_deg: float = 0.0
    pitch_deg: float = 0.0
    roll_deg: float = 0.0


class QuaternionRotationConfig(BaseModel):
    kind: Literal["quaternion"]
    wxyz: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)

    @model_validator(mode="after")
    def _validate_norm(self) -> "QuaternionRotationConfig":
        if sum(c * c for c in self.wxyz) < 1e-24:
            raise ValueError("quaternion must be non-zero")
        return self


RotationConfig = Annotated[
    Union[EulerRotationConfig, QuaternionRotationConfig],
    Field(discriminator="kind"),
]


class TransformConfig(BaseModel):
    rotation: RotationConfig = EulerRotationConfig()
    scale: float = Field(1.0, gt=0.0)


class LayerConfig(BaseModel):
    up_to_y: Optional[int] = None
    transparent_layers: NonNegativeInt = 2


class OutputConfig(BaseModel):
    path: Path
    format: Literal["npz", "ply", "las", "laz"] = "npz"


class VoxelizeConfig(BaseModel):
    scene: SceneConfig
    transform: TransformConfig = TransformConfig()
    layers: LayerConfig = LayerConfig()
    output: OutputConfig


def load_config(path: str | Path) -> VoxelizeConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    cfg = VoxelizeConfig.model_validate(data)
    cfg.output.path = (path.parent / cfg.output.path).resolve()
    if not cfg.scene.path.is_absolute():
        cfg.scene.path = (path.parent / cfg.scene.path).resolve()
    return cfg
