from .run import ConfigRunResult, voxelize_from_config

__all__ = ["ConfigRunResult", "voxelize_from_config"]
