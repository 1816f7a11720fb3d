from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple
import json
import numpy as np

from wavegrid.common.paths import FRAME_INFO, frame_dir, make_frame_dir
from wavegrid.common.hashutil import sha256_file, config_digest
from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.layers import FieldPair

FIELDS = ("value", "derivative")


@dataclass
class HeaderOptions:
    write_stats: bool = False  # toggle tiny means/min/max as quick health check


def _stats(a: np.ndarray) -> Dict[str, float]:
    # component 0 only; the other three duplicate it
    a = a[..., 0]
    return {
        "mean": float(np.nanmean(a)),
        "min": float(np.nanmin(a)),
        "max": float(np.nanmax(a)),
        "nonfinite": int(np.sum(~np.isfinite(a))),
    }


def save_layer(store: Path,
               sim_label: str,
               frame: int,
               *,
               layer: FieldPair,
               dims: GridDimensions,
               iteration: int,
               elapsed: float,
               config: Optional[dict] = None,
               header_opts: HeaderOptions = HeaderOptions()) -> Dict[str, str]:
    """
    Writes value.npy, derivative.npy (packed (height, width, 4) buffers) and a
    small frame_info.json. Returns {name: path_str} for the written files.
    """
    fdir = make_frame_dir(store, sim_label, frame)
    files = {}
    arrays = {"value": layer.value, "derivative": layer.derivative}

    for name in FIELDS:
        files[name] = str(fdir / f"{name}.npy")
        np.save(files[name], arrays[name])

    info = {
        "sim_label": sim_label,
        "frame": frame,
        "iteration": iteration,
        "elapsed": elapsed,
        "dims": dims.as_dict(),
        "config": config or {},
        "config_id": config_digest({"dims": dims.as_dict(), "config": config or {}}),
        "files": {},
    }
    for name in FIELDS:
        p = Path(files[name])
        info["files"][name] = {
            "path": files[name],
            "shape": list(arrays[name].shape),
            "dtype": arrays[name].dtype.name,
            "bytes": p.stat().st_size,
            "sha256": sha256_file(p),
        }

    if header_opts.write_stats:
        info["quick_stats"] = {name: _stats(arrays[name]) for name in FIELDS}

    header_path = fdir / FRAME_INFO
    with header_path.open("w") as f:
        json.dump(info, f, indent=2)
    files["frame_info"] = str(header_path)

    return files


def load_layer(store: Path, sim_label: str, frame: int,
               *, verify: bool = True) -> Tuple[FieldPair, dict]:
    """
    Read a snapshot written by save_layer(). With verify=True the sha256 of
    each array file must match the header, otherwise ValueError.
    """
    fdir = frame_dir(store, sim_label, frame)
    with (fdir / FRAME_INFO).open() as f:
        info = json.load(f)

    arrays = {}
    for name in FIELDS:
        meta = info["files"][name]
        p = fdir / f"{name}.npy"
        if verify and sha256_file(p) != meta["sha256"]:
            raise ValueError(f"checksum mismatch for {p}")
        arrays[name] = np.load(p)

    return FieldPair(value=arrays["value"], derivative=arrays["derivative"]), info
