#!/usr/bin/env python3
import argparse
from pathlib import Path

from wavegrid.common.logging_setup import setup_logging
from wavegrid.common.paths import DEFAULT_STORE
from wavegrid.sim.executor import get_executor
from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.runner import RunConfig, Runner
from wavegrid.sim.simulation import Simulation, WaveConfig


def main():
    ap = argparse.ArgumentParser(description="Run the impulse wave on a periodic grid and save frames")
    ap.add_argument("--store", default=str(DEFAULT_STORE), help="Root store (env WAVEGRID_STORE)")
    ap.add_argument("--sim", default="DEV_impulse", help="Sim label, e.g. DEV_impulse")
    ap.add_argument("--angular", type=int, default=64)
    ap.add_argument("--radial", type=int, default=64)
    ap.add_argument("--section", type=int, default=8)
    ap.add_argument("--dt", type=float, default=0.001)
    ap.add_argument("--steps", type=int, default=100)
    ap.add_argument("--stride", type=int, default=10, help="save every N steps (0 = first/last only)")
    ap.add_argument("--c2", type=float, default=343.0, help="wave speed squared")
    ap.add_argument("--magnitude", type=float, default=10.0, help="impulse magnitude")
    ap.add_argument("--half-width", type=int, default=2, help="impulse half width in cells")
    ap.add_argument("--dtype", default="float32", choices=["float32", "float64"])
    ap.add_argument("--executor", default="numba", choices=["numba", "numpy"])
    ap.add_argument("--stats", action="store_true", help="write quick stats into frame headers")
    ap.add_argument("--log-file", default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    setup_logging(args.verbose, args.log_file)

    dims = GridDimensions(angular=args.angular, radial=args.radial, section=args.section)
    wave_cfg = WaveConfig(
        wave_speed_squared=args.c2,
        impulse_magnitude=args.magnitude,
        impulse_half_width=args.half_width,
        dtype=args.dtype,
    )
    sim = Simulation.create(dims, wave_cfg, get_executor(args.executor, dtype=args.dtype))
    sim.initialize()

    run_cfg = RunConfig(dt=args.dt, steps=args.steps, save_stride=args.stride,
                        header_stats=args.stats)
    frames = Runner(sim, run_cfg).run(store=Path(args.store), sim_label=args.sim)

    print(f"Done. {frames} frames under {Path(args.store) / args.sim}")


if __name__ == "__main__":
    main()
