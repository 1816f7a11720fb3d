#!/usr/bin/env python3
import argparse
import csv
import sys
from pathlib import Path
import numpy as np

from wavegrid.common.paths import DEFAULT_STORE
from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.saver import load_layer


def main():
    ap = argparse.ArgumentParser(description="Summarise one saved frame (energy-like norms, extrema)")
    ap.add_argument("--store", default=str(DEFAULT_STORE), help="Root store")
    ap.add_argument("--sim", required=True, help="Sim label, e.g. DEV_impulse")
    ap.add_argument("--frame", type=int, required=True, help="Frame number, e.g. 0")
    ap.add_argument("--csv", default=None, help="also write the summary row to this CSV file")
    args = ap.parse_args()

    try:
        layer, info = load_layer(Path(args.store), args.sim, args.frame)
    except FileNotFoundError as e:
        raise SystemExit(f"Missing frame: {e.filename}")

    dims = GridDimensions(**info["dims"])
    value = layer.value_grid(dims).astype(np.float64)
    deriv = layer.derivative_grid(dims).astype(np.float64)

    row = {
        "sim_label": args.sim,
        "frame": args.frame,
        "iteration": info["iteration"],
        "elapsed": info["elapsed"],
        "value_min": float(value.min()),
        "value_max": float(value.max()),
        "value_l2": float(np.sqrt(np.sum(value ** 2))),
        "derivative_l2": float(np.sqrt(np.sum(deriv ** 2))),
        "nonfinite": int(np.sum(~np.isfinite(value)) + np.sum(~np.isfinite(deriv))),
    }

    out = open(args.csv, "w", newline="") if args.csv else sys.stdout
    try:
        w = csv.DictWriter(out, fieldnames=list(row))
        w.writeheader()
        w.writerow(row)
    finally:
        if out is not sys.stdout:
            out.close()


if __name__ == "__main__":
    main()
