"""
Grid extents and packed addressing for the toroidal wave grid.

Logical cells are indexed (r, l, a): radial, section ("level") and angular.
Storage is a 2-D buffer of 4-component samples:

    x = l * angular + a      (width  = section * angular)
    y = r                    (height = radial)

All three logical axes are periodic; every neighbour lookup goes through wrap().
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np
from numba import njit

COMPONENTS = 4  # samples are RGBA-like; only component 0 carries meaning


@dataclass(frozen=True)
class GridDimensions:
    angular: int
    radial: int
    section: int

    def __post_init__(self):
        errs = []
        for name in ("angular", "radial", "section"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                errs.append(f"{name} must be an int (got {v!r})")
            elif v <= 0:
                errs.append(f"{name} must be > 0 (got {v})")
        if errs:
            raise ValueError("invalid grid dimensions: " + "; ".join(errs))
        # numpy integer extents are stored as plain ints (JSON headers, numba args)
        for name in ("angular", "radial", "section"):
            object.__setattr__(self, name, int(getattr(self, name)))

    @property
    def width(self) -> int:
        return self.section * self.angular

    @property
    def height(self) -> int:
        return self.radial

    @property
    def storage_shape(self) -> Tuple[int, int]:
        """(height, width) of one packed buffer."""
        return (self.height, self.width)

    @property
    def logical_shape(self) -> Tuple[int, int, int]:
        return (self.radial, self.section, self.angular)

    @property
    def cells(self) -> int:
        return self.radial * self.section * self.angular

    @property
    def center(self) -> Tuple[int, int, int]:
        return (self.radial // 2, self.section // 2, self.angular // 2)

    def as_dict(self) -> dict:
        return {"angular": self.angular, "radial": self.radial, "section": self.section}


def wrap(index: int, extent: int) -> int:
    """Periodic wraparound into [0, extent), for any integer index."""
    if extent <= 0:
        raise ValueError(f"extent must be > 0 (got {extent})")
    return ((index % extent) + extent) % extent


def pack(dims: GridDimensions, r: int, l: int, a: int) -> Tuple[int, int]:
    """Logical (r, l, a) -> storage (x, y)."""
    return (l * dims.angular + a, r)


def unpack(dims: GridDimensions, x: int, y: int) -> Tuple[int, int, int]:
    """Storage (x, y) -> logical (r, l, a); inverse of pack()."""
    l, a = divmod(x, dims.angular)
    return (y, l, a)


@njit
def wrap_jit(index, extent):
    return ((index % extent) + extent) % extent


@njit
def lookup_jit(buf, angular, radial, section, r, l, a):
    """
    Nearest-neighbour read of component 0 at a (possibly out-of-range) logical
    index. Each axis wraps independently before packing.
    """
    rr = wrap_jit(r, radial)
    ll = wrap_jit(l, section)
    aa = wrap_jit(a, angular)
    return buf[rr, ll * angular + aa, 0]


def to_logical(buffer: np.ndarray, dims: GridDimensions) -> np.ndarray:
    """
    View of component 0 of a packed (height, width, 4) buffer as a
    (radial, section, angular) grid. Shares memory with `buffer`.
    """
    if buffer.shape[:2] != dims.storage_shape:
        raise ValueError(f"buffer shape {buffer.shape} does not match grid {dims.storage_shape}")
    return buffer[:, :, 0].reshape(dims.logical_shape)


def from_logical(grid: np.ndarray, dims: GridDimensions, out: np.ndarray) -> np.ndarray:
    """Write a (radial, section, angular) grid into every component of `out`."""
    if grid.shape != dims.logical_shape:
        raise ValueError(f"grid shape {grid.shape} does not match {dims.logical_shape}")
    flat = grid.reshape(dims.storage_shape)
    out[...] = flat[:, :, None]
    return out
