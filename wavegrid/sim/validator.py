# wavegrid/sim/validator.py
"""
Basic stability / sanity checks for wave simulation configs.

This does not prove stability (forward Euler on a pure wave equation slowly
gains energy for any dt > 0), but catches obviously unsafe or nonsensical
combinations of (dims, dt, wave_speed_squared, impulse).
"""

from __future__ import annotations

from typing import List, Optional
import logging
import math

from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.operators import SPECTRAL_RADIUS
from wavegrid.sim.simulation import WaveConfig

logger = logging.getLogger(__name__)

# Forward Euler multiplies the fastest mode by sqrt(1 + (omega dt)^2) every
# step, for any dt > 0. Refuse runs where that factor exceeds 1.1 per step
# (x117 in 50 steps); warn once it exceeds 1.01 per step (x1.6 in 50 steps).
MAX_STEP_GROWTH = 1.1
WARN_STEP_GROWTH = 1.01
MAX_OMEGA_DT = math.sqrt(MAX_STEP_GROWTH ** 2 - 1.0)    # ~0.458
WARN_OMEGA_DT = math.sqrt(WARN_STEP_GROWTH ** 2 - 1.0)  # ~0.142


def max_angular_frequency(wave_cfg: WaveConfig) -> float:
    """Largest ω the combined stencil supports: sqrt(c^2 * spectral radius)."""
    return math.sqrt(max(wave_cfg.wave_speed_squared, 0.0) * SPECTRAL_RADIUS)


def stability_margin(dt: float, wave_cfg: WaveConfig) -> float:
    """ω_max * dt; the smaller, the slower spurious growth per step."""
    return max_angular_frequency(wave_cfg) * float(dt)


def step_growth(dt: float, wave_cfg: WaveConfig) -> float:
    """Per-step amplitude factor of the fastest mode: sqrt(1 + (ω_max dt)^2)."""
    return math.hypot(1.0, stability_margin(dt, wave_cfg))


def validate_sim_config(dims: GridDimensions,
                        wave_cfg: WaveConfig,
                        dt: Optional[float] = None,
                        steps: Optional[int] = None) -> None:
    """
    Raise ValueError if the configuration is obviously unstable or nonsensical.

    Checks:
    - grid dims > 0
    - wave_speed_squared > 0, impulse_magnitude finite, impulse_half_width >= 0
    - dt finite and >= 0 (reverse-time stepping is not supported)
    - steps >= 0
    - step_growth(dt) <= MAX_STEP_GROWTH, with ω_max = sqrt(c^2 * 16);
      warns above WARN_STEP_GROWTH
    """
    errs: List[str] = []

    if dims.angular <= 0 or dims.radial <= 0 or dims.section <= 0:
        errs.append(f"invalid grid {dims}; all dims must be > 0")

    c2 = float(wave_cfg.wave_speed_squared)
    if not math.isfinite(c2) or c2 <= 0.0:
        errs.append(f"wave_speed_squared must be finite and > 0 (got {c2})")
    if not math.isfinite(float(wave_cfg.impulse_magnitude)):
        errs.append(f"impulse_magnitude must be finite (got {wave_cfg.impulse_magnitude})")
    if int(wave_cfg.impulse_half_width) < 0:
        errs.append(f"impulse_half_width must be >= 0 (got {wave_cfg.impulse_half_width})")

    if steps is not None and steps < 0:
        errs.append(f"steps must be >= 0 (got {steps})")

    if dt is not None:
        dt = float(dt)
        if not math.isfinite(dt) or dt < 0.0:
            errs.append(f"dt must be finite and >= 0 (got {dt})")
        elif not errs:
            margin = stability_margin(dt, wave_cfg)
            growth = step_growth(dt, wave_cfg)
            if margin > MAX_OMEGA_DT:
                errs.append(
                    f"fastest mode grows x{growth:.3g} per step (omega_max * dt = {margin:.3g} > {MAX_OMEGA_DT:.3g}); "
                    f"explicit scheme will blow up "
                    f"(wave_speed_squared={c2}, dt={dt:.3g}, dt_max={MAX_OMEGA_DT / max_angular_frequency(wave_cfg):.3g})"
                )
            elif margin > WARN_OMEGA_DT:
                logger.warning("fastest mode grows x%.4f per step (omega_max * dt = %.3g); "
                               "expect visible amplitude growth", growth, margin)

    if errs:
        # Join all errors into a single message so callers can surface it to logs.
        raise ValueError("; ".join(errs))
