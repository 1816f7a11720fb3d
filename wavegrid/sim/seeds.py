"""
Analytic initial states for the wave grid.

standing_wave() builds a single Fourier mode along one logical axis (constant
along the other two). Under the combined stencil that mode is an exact
eigenvector, so the semi-discrete system x'' = c^2 λ x has the closed form

    x(t) = A cos(ω t) * profile,   v(t) = -A ω sin(ω t) * profile,
    ω^2 = -c^2 λ

which standing_wave_exact() returns; the gap to a simulated run is then pure
time-integration error.
"""
from typing import Tuple
import numpy as np

from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.operators import mode_eigenvalue

AXES = {"radial": 0, "section": 1, "angular": 2}


def _profile(dims: GridDimensions, mode: int, axis: str) -> Tuple[np.ndarray, int]:
    if axis not in AXES:
        raise ValueError(f"axis must be one of {sorted(AXES)} (got {axis!r})")
    ax = AXES[axis]
    extent = dims.logical_shape[ax]
    idx = np.arange(extent, dtype=np.float64)
    line = np.cos(2.0 * np.pi * mode * idx / extent)
    shape = [1, 1, 1]
    shape[ax] = extent
    return np.broadcast_to(line.reshape(shape), dims.logical_shape).copy(), extent


def mode_frequency(dims: GridDimensions, mode: int, axis: str, wave_speed_squared: float) -> float:
    extent = dims.logical_shape[AXES[axis]]
    return float(np.sqrt(-wave_speed_squared * mode_eigenvalue(mode, extent)))


def standing_wave(dims: GridDimensions, mode: int = 1, axis: str = "angular",
                  amplitude: float = 1.0) -> Tuple[np.ndarray, np.ndarray]:
    """(value, derivative) logical grids for a standing wave at rest."""
    profile, _ = _profile(dims, mode, axis)
    return amplitude * profile, np.zeros(dims.logical_shape)


def standing_wave_exact(dims: GridDimensions, t: float, mode: int = 1, axis: str = "angular",
                        amplitude: float = 1.0,
                        wave_speed_squared: float = 343.0) -> Tuple[np.ndarray, np.ndarray]:
    profile, _ = _profile(dims, mode, axis)
    omega = mode_frequency(dims, mode, axis, wave_speed_squared)
    value = amplitude * np.cos(omega * t) * profile
    derivative = -amplitude * omega * np.sin(omega * t) * profile
    return value, derivative
