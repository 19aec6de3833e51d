from __future__ import annotations
import numpy as np
import logging

def get_logger(name: str = "ultvox") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def round_half_away(values: float | np.ndarray) -> np.ndarray:
    """Round to the nearest integer, halves away from zero (``np.round`` rounds halves to even)."""
    v = np.asarray(values, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return np.sign(v) * np.floor(np.abs(v) + 0.5)

def as_vec3(p) -> np.ndarray:
    v = np.asarray(p, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3D position, got shape {v.shape}")
    return v
