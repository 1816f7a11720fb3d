"""
On-disk layout of saved runs:

    <store>/<sim_label>/Frame_NNNN/value.npy
                                   derivative.npy
                                   frame_info.json

The store root defaults to $WAVEGRID_STORE.
"""
import os
from pathlib import Path

DEFAULT_STORE = Path(os.environ.get("WAVEGRID_STORE", "/data/wavegrid"))
FRAME_INFO = "frame_info.json"


def frame_dir(store: Path, sim_label: str, frame: int) -> Path:
    # sim_label may carry subdirectories, e.g. "impulse_64/dt1e-3"
    if frame < 0:
        raise ValueError(f"frame must be >= 0 (got {frame})")
    return Path(store) / sim_label / f"Frame_{frame:04d}"


def make_frame_dir(store: Path, sim_label: str, frame: int) -> Path:
    fdir = frame_dir(store, sim_label, frame)
    fdir.mkdir(parents=True, exist_ok=True)
    return fdir
