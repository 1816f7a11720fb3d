# wavegrid/sim/operators.py
"""
Discrete operators on logical (radial, section, angular) grids, periodic BCs.

- axis_term(a, axis):
    five-point 4th-order second-difference numerator along one axis
    (-a[-2] + 16 a[-1] - 30 a + 16 a[+1] - a[+2])

- laplacian(a):
    (axis_term(r) + axis_term(l) + axis_term(a)) / 12

    The three numerators are summed before a single division by 12, so the
    central coefficient is -90/12 rather than the isotropic per-axis form.
    This combination is kept as is; see DESIGN.md.

These are the vectorised (np.roll) counterparts of the per-cell numba kernels
in wavegrid.sim.kernels and serve as their reference.
"""

from __future__ import annotations
import numpy as np

from wavegrid.sim.grid import GridDimensions

STENCIL_OFFSETS = (-2, -1, 0, 1, 2)
STENCIL_WEIGHTS = (-1.0, 16.0, -30.0, 16.0, -1.0)
STENCIL_DENOMINATOR = 12.0

# max over k of |sum_j w_j e^{ikj}| / 12 per axis is 64/12; three axes summed
SPECTRAL_RADIUS = 3.0 * 64.0 / 12.0


def axis_term(a: np.ndarray, axis: int) -> np.ndarray:
    """
    Five-point second-difference numerator along `axis` with periodic wrap.
    Zero for any field that is constant along that axis.
    """
    out = np.zeros_like(a)
    for off, w in zip(STENCIL_OFFSETS, STENCIL_WEIGHTS):
        # np.roll(a, -off)[i] == a[i + off]
        out += w * np.roll(a, -off, axis=axis)
    return out


def laplacian(a: np.ndarray) -> np.ndarray:
    """Combined three-axis stencil on a 3-D logical grid."""
    if a.ndim != 3:
        raise ValueError(f"expected a 3-D logical grid, got shape {a.shape}")
    total = axis_term(a, 0) + axis_term(a, 1) + axis_term(a, 2)
    return total / STENCIL_DENOMINATOR


def impulse_mask(dims: GridDimensions, half_width: int) -> np.ndarray:
    """
    Boolean (radial, section, angular) mask of cells within `half_width` of
    the grid center along every axis (plain distance, no wrap).
    """
    cr, cl, ca = dims.center
    r = np.arange(dims.radial)[:, None, None]
    l = np.arange(dims.section)[None, :, None]
    a = np.arange(dims.angular)[None, None, :]
    return (
        (np.abs(r - cr) <= half_width)
        & (np.abs(l - cl) <= half_width)
        & (np.abs(a - ca) <= half_width)
    )


def mode_eigenvalue(mode: int, extent: int) -> float:
    """
    Eigenvalue of the combined stencil for a single Fourier mode along one
    axis (constant along the other two):

        -(30 - 32 cos θ + 2 cos 2θ) / 12,   θ = 2π mode / extent
    """
    theta = 2.0 * np.pi * mode / extent
    return -(30.0 - 32.0 * np.cos(theta) + 2.0 * np.cos(2.0 * theta)) / STENCIL_DENOMINATOR
