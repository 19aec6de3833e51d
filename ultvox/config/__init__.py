"""Configuration loading utilities for UltVox."""

from .schema import (
    VoxelizeConfig,
    load_config,
)

__all__ = ["VoxelizeConfig", "load_config"]
