# wavegrid/sim/kernels.py
"""
Numba-parallel per-cell kernels for the toroidal wave grid.

Two fixed formulas, compiled once by numba and dispatched by a KernelExecutor:

  INITIALIZE (v1)
    value      = magnitude  if the cell is within half_width of the center
                            along every axis, else 0
    derivative = 0

  UPDATE (v1), reading only the back layer:
    lap            = (axis_term(r) + axis_term(l) + axis_term(a)) / 12
    value_out      = x + v * dt
    derivative_out = v + lap * dt * wave_speed_squared

Each cell writes only its own packed sample (all four components); no cell
reads another cell's output, so the prange loop is hazard-free as long as
inputs and outputs are distinct buffers.

Argument convention shared by every kernel (jit and reference):
    (*inputs, *outputs, angular, radial, section, *uniforms)
"""

from __future__ import annotations
import numpy as np
from numba import njit, prange

from wavegrid.sim.executor import KernelSpec
from wavegrid.sim.grid import GridDimensions, lookup_jit, to_logical, from_logical
from wavegrid.sim.operators import laplacian, impulse_mask


@njit(parallel=True)
def initialize_jit(value_out, derivative_out,
                   angular, radial, section,
                   magnitude, half_width):
    cr = radial // 2
    cl = section // 2
    ca = angular // 2
    C = value_out.shape[2]
    for r in prange(radial):
        inside_r = abs(r - cr) <= half_width
        for l in range(section):
            inside_l = abs(l - cl) <= half_width
            for a in range(angular):
                x = l * angular + a
                val = 0.0
                if inside_r and inside_l and abs(a - ca) <= half_width:
                    val = magnitude
                for c in range(C):
                    value_out[r, x, c] = val
                    derivative_out[r, x, c] = 0.0


@njit
def _axis_term(v_m2, v_m1, v_0, v_p1, v_p2):
    return -v_m2 + 16.0 * v_m1 - 30.0 * v_0 + 16.0 * v_p1 - v_p2


@njit(parallel=True)
def update_jit(value_in, derivative_in, value_out, derivative_out,
               angular, radial, section,
               dt, wave_speed_squared):
    C = value_out.shape[2]
    for r in prange(radial):
        for l in range(section):
            for a in range(angular):
                x_here = lookup_jit(value_in, angular, radial, section, r, l, a)

                # --- radial axis ---
                term_r = _axis_term(
                    lookup_jit(value_in, angular, radial, section, r - 2, l, a),
                    lookup_jit(value_in, angular, radial, section, r - 1, l, a),
                    x_here,
                    lookup_jit(value_in, angular, radial, section, r + 1, l, a),
                    lookup_jit(value_in, angular, radial, section, r + 2, l, a),
                )
                # --- section axis ---
                term_l = _axis_term(
                    lookup_jit(value_in, angular, radial, section, r, l - 2, a),
                    lookup_jit(value_in, angular, radial, section, r, l - 1, a),
                    x_here,
                    lookup_jit(value_in, angular, radial, section, r, l + 1, a),
                    lookup_jit(value_in, angular, radial, section, r, l + 2, a),
                )
                # --- angular axis ---
                term_a = _axis_term(
                    lookup_jit(value_in, angular, radial, section, r, l, a - 2),
                    lookup_jit(value_in, angular, radial, section, r, l, a - 1),
                    x_here,
                    lookup_jit(value_in, angular, radial, section, r, l, a + 1),
                    lookup_jit(value_in, angular, radial, section, r, l, a + 2),
                )
                lap = (term_r + term_l + term_a) / 12.0

                v_here = lookup_jit(derivative_in, angular, radial, section, r, l, a)

                x_new = x_here + v_here * dt
                v_new = v_here + lap * dt * wave_speed_squared

                x = l * angular + a
                for c in range(C):
                    value_out[r, x, c] = x_new
                    derivative_out[r, x, c] = v_new


def initialize_reference(value_out, derivative_out,
                         angular, radial, section,
                         magnitude, half_width):
    dims = GridDimensions(angular=angular, radial=radial, section=section)
    grid = np.where(impulse_mask(dims, half_width), float(magnitude), 0.0)
    from_logical(grid, dims, value_out)
    derivative_out[...] = 0.0


def update_reference(value_in, derivative_in, value_out, derivative_out,
                     angular, radial, section,
                     dt, wave_speed_squared):
    dims = GridDimensions(angular=angular, radial=radial, section=section)
    x = to_logical(value_in, dims).astype(np.float64)
    v = to_logical(derivative_in, dims).astype(np.float64)
    lap = laplacian(x)
    from_logical(x + v * dt, dims, value_out)
    from_logical(v + lap * dt * wave_speed_squared, dims, derivative_out)


INITIALIZE = KernelSpec(
    name="initialize",
    version=1,
    inputs=(),
    outputs=("value", "derivative"),
    uniforms=("magnitude", "half_width"),
    jit=initialize_jit,
    reference=initialize_reference,
)

UPDATE = KernelSpec(
    name="update",
    version=1,
    inputs=("value", "derivative"),
    outputs=("value", "derivative"),
    uniforms=("dt", "wave_speed_squared"),
    jit=update_jit,
    reference=update_reference,
)
