# wavegrid/sim/executor.py
"""
Execution substrate for per-cell kernels.

The core only needs three things from it:
  - allocate(width, height)          -> zeroed (height, width, 4) buffer
  - dispatch_over_grid(kernel, ...)  -> run one kernel over every cell
  - sample(buffer, dims, (r, l, a))  -> exact nearest-neighbour read

NumbaExecutor runs the compiled prange kernels; NumpyExecutor runs the
vectorised reference of the same formula.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple
import logging
import numpy as np
import psutil

from wavegrid.sim.errors import AllocationError, ExecutionError
from wavegrid.sim.grid import COMPONENTS, GridDimensions, pack, wrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KernelSpec:
    name: str
    version: int
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]
    uniforms: Tuple[str, ...]
    jit: Callable
    reference: Callable

    @property
    def ident(self) -> str:
        return f"{self.name}@v{self.version}"


class KernelExecutor:
    """Base contract; subclasses pick which kernel implementation runs."""

    name = "base"

    def __init__(self, dtype=np.float32):
        self.dtype = np.dtype(dtype)

    # --- memory ---

    def allocate(self, width: int, height: int) -> np.ndarray:
        if width <= 0 or height <= 0:
            raise ValueError(f"buffer extents must be > 0 (got {width}x{height})")
        nbytes = int(width) * int(height) * COMPONENTS * self.dtype.itemsize
        available = int(psutil.virtual_memory().available)
        if nbytes > available:
            raise AllocationError(
                f"cannot allocate {width}x{height}x{COMPONENTS} {self.dtype.name} buffer "
                f"({nbytes} bytes); only {available} bytes available"
            )
        try:
            buf = np.zeros((height, width, COMPONENTS), dtype=self.dtype)
        except MemoryError as e:
            raise AllocationError(
                f"cannot allocate {width}x{height}x{COMPONENTS} {self.dtype.name} buffer"
            ) from e
        logger.debug("allocated %dx%dx%d %s buffer (%d bytes)",
                     height, width, COMPONENTS, self.dtype.name, nbytes)
        return buf

    # --- reads ---

    def sample(self, buffer: np.ndarray, dims: GridDimensions,
               index: Tuple[int, int, int]) -> np.ndarray:
        """All four components at a logical index; each axis wraps."""
        r, l, a = index
        x, y = pack(dims,
                    wrap(r, dims.radial),
                    wrap(l, dims.section),
                    wrap(a, dims.angular))
        return buffer[y, x, :].copy()

    # --- dispatch ---

    def _select(self, kernel: KernelSpec) -> Callable:
        raise NotImplementedError

    def dispatch_over_grid(self,
                           kernel: KernelSpec,
                           dims: GridDimensions,
                           inputs: Mapping[str, np.ndarray],
                           outputs: Mapping[str, np.ndarray],
                           uniforms: Optional[Mapping[str, float]] = None) -> None:
        """
        Apply `kernel` to every cell of the outputs' domain.

        Raises ValueError if the named buffers do not match the kernel, have the
        wrong shape, or if any input shares memory with an output. Raises
        ExecutionError if the kernel itself fails.
        """
        uniforms = dict(uniforms or {})
        args_in = self._ordered("input", kernel.inputs, inputs)
        args_out = self._ordered("output", kernel.outputs, outputs)
        args_uni = self._ordered("uniform", kernel.uniforms, uniforms)

        expected = (dims.height, dims.width, COMPONENTS)
        for role, bufs in (("input", args_in), ("output", args_out)):
            for name, buf in zip(getattr(kernel, role + "s"), bufs):
                if buf.shape != expected:
                    raise ValueError(
                        f"{kernel.ident}: {role} '{name}' has shape {buf.shape}, expected {expected}"
                    )
        for name, buf in zip(kernel.outputs, args_out):
            if not buf.flags.writeable:
                raise ValueError(f"{kernel.ident}: output '{name}' is read-only")
        for i, o in enumerate(args_out):
            for src in args_in:
                if np.shares_memory(src, o):
                    raise ValueError(
                        f"{kernel.ident}: output '{kernel.outputs[i]}' aliases an input buffer"
                    )
            for other in args_out[i + 1:]:
                if np.shares_memory(other, o):
                    raise ValueError(f"{kernel.ident}: output buffers overlap")

        fn = self._select(kernel)
        logger.debug("dispatch %s on %s over %d cells", kernel.ident, self.name, dims.cells)
        try:
            fn(*args_in, *args_out, dims.angular, dims.radial, dims.section, *args_uni)
        except Exception as e:
            raise ExecutionError(f"{kernel.ident} failed on {self.name}: {e}") from e

    @staticmethod
    def _ordered(role: str, names: Tuple[str, ...], given: Mapping) -> list:
        missing = [n for n in names if n not in given]
        extra = [n for n in given if n not in names]
        if missing or extra:
            raise ValueError(
                f"{role} mismatch: missing={missing} unexpected={extra} (expected {list(names)})"
            )
        return [given[n] for n in names]


class NumbaExecutor(KernelExecutor):
    """Runs the compiled parallel (prange) kernel."""

    name = "numba"

    def _select(self, kernel: KernelSpec) -> Callable:
        return kernel.jit


class NumpyExecutor(KernelExecutor):
    """Runs the vectorised numpy reference of each kernel."""

    name = "numpy"

    def _select(self, kernel: KernelSpec) -> Callable:
        return kernel.reference


_EXECUTORS: Dict[str, type] = {
    NumbaExecutor.name: NumbaExecutor,
    NumpyExecutor.name: NumpyExecutor,
}


def get_executor(name: str = "numba", dtype=np.float32) -> KernelExecutor:
    try:
        cls = _EXECUTORS[name]
    except KeyError:
        raise ValueError(f"unknown executor '{name}' (choose from {sorted(_EXECUTORS)})") from None
    return cls(dtype=dtype)
