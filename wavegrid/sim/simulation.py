from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Optional
import logging
import math
import numpy as np

from wavegrid.sim.executor import KernelExecutor, get_executor
from wavegrid.sim.grid import GridDimensions, from_logical
from wavegrid.sim.kernels import INITIALIZE, UPDATE
from wavegrid.sim.layers import DoubleBuffer, FieldPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaveConfig:
    wave_speed_squared: float = 343.0   # c^2 in the wave equation
    impulse_magnitude: float = 10.0     # value written inside the initial impulse
    impulse_half_width: int = 2         # cells either side of the center, per axis
    dtype: str = "float32"              # storage precision of every buffer

    def as_dict(self) -> dict:
        return asdict(self)


class Simulation:
    """
    Explicit wave integrator over a periodic (radial, section, angular) grid.

    Lifecycle: create() -> initialize() (or seed()) -> step(dt) repeatedly.
    step() reads back(), writes every cell of front(), then advances the
    iteration counter so the roles flip for the next call.
    """

    def __init__(self, dims: GridDimensions, config: WaveConfig,
                 executor: KernelExecutor, buffers: DoubleBuffer):
        self.dims = dims
        self.config = config
        self.executor = executor
        self._buffers = buffers
        self._ready = False
        self._elapsed = 0.0

    @classmethod
    def create(cls, dims: GridDimensions,
               config: Optional[WaveConfig] = None,
               executor: Optional[KernelExecutor] = None) -> "Simulation":
        config = config or WaveConfig()
        executor = executor or get_executor("numba", dtype=config.dtype)

        def _layer() -> FieldPair:
            return FieldPair(
                value=executor.allocate(dims.width, dims.height),
                derivative=executor.allocate(dims.width, dims.height),
            )

        buffers = DoubleBuffer(_layer(), _layer())
        logger.info("created %s grid (angular=%d radial=%d section=%d) on %s executor",
                    "x".join(map(str, dims.storage_shape)),
                    dims.angular, dims.radial, dims.section, executor.name)
        return cls(dims, config, executor, buffers)

    # --- read-only state ---

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def iteration(self) -> int:
        return self._buffers.iteration

    @property
    def elapsed(self) -> float:
        """Sum of dt over completed steps since the last initialize()/seed()."""
        return self._elapsed

    @property
    def front(self) -> FieldPair:
        return self._buffers.front().read_only()

    @property
    def back(self) -> FieldPair:
        return self._buffers.back().read_only()

    @property
    def latest(self) -> FieldPair:
        """The most recently completed time slice (back() after a step)."""
        return self.back

    # --- transitions ---

    def initialize(self) -> None:
        """Write the resting impulse into both slots and reset the counter."""
        uniforms = {
            "magnitude": float(self.config.impulse_magnitude),
            "half_width": int(self.config.impulse_half_width),
        }
        # a dispatch failure below leaves the slots half written: not steppable
        self._ready = False
        for slot in self._buffers.slots():
            self.executor.dispatch_over_grid(
                INITIALIZE, self.dims,
                inputs={},
                outputs={"value": slot.value, "derivative": slot.derivative},
                uniforms=uniforms,
            )
        self._buffers.reset()
        self._elapsed = 0.0
        self._ready = True
        logger.info("initialized impulse (magnitude=%g, half_width=%d) at %s",
                    uniforms["magnitude"], uniforms["half_width"], self.dims.center)

    def seed(self, value: np.ndarray, derivative: Optional[np.ndarray] = None) -> None:
        """
        Load an arbitrary logical (radial, section, angular) state into both
        slots; an alternative to initialize() for analytic initial conditions.
        Shapes are checked before either slot is touched.
        """
        value = np.asarray(value, dtype=np.float64)
        if derivative is None:
            derivative = np.zeros_like(value)
        derivative = np.asarray(derivative, dtype=np.float64)
        expected = self.dims.logical_shape
        if value.shape != expected or derivative.shape != expected:
            raise ValueError(
                f"seed shapes value={value.shape} derivative={derivative.shape}, expected {expected}"
            )
        for slot in self._buffers.slots():
            from_logical(value, self.dims, slot.value)
            from_logical(derivative, self.dims, slot.derivative)
        self._buffers.reset()
        self._elapsed = 0.0
        self._ready = True
        logger.info("seeded state (max |value|=%.3e)", float(np.max(np.abs(value))))

    def step(self, dt: float) -> None:
        if not self._ready:
            raise RuntimeError("step() called before initialize()")
        dt = float(dt)
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f"dt must be finite and >= 0 (got {dt})")

        src = self._buffers.back()
        dst = self._buffers.front()
        self.executor.dispatch_over_grid(
            UPDATE, self.dims,
            inputs={"value": src.value, "derivative": src.derivative},
            outputs={"value": dst.value, "derivative": dst.derivative},
            uniforms={"dt": dt, "wave_speed_squared": float(self.config.wave_speed_squared)},
        )
        # dispatch returned: every cell of dst is written
        self._buffers.advance()
        self._elapsed += dt
        logger.debug("step %d done (dt=%g)", self._buffers.iteration, dt)
