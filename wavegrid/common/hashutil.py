"""Checksums for snapshot files and the run identity stored in frame headers."""
import hashlib
import json
from pathlib import Path

import numpy as np


def sha256_file(path: Path, chunk_size: int = 2**20) -> str:
    h = hashlib.sha256()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def _to_json(o):
    if isinstance(o, (np.generic, np.ndarray)):
        return o.tolist()
    if isinstance(o, Path):
        return str(o)
    raise TypeError(f"cannot digest {type(o).__name__}")


def config_digest(obj) -> str:
    """
    SHA-256 over canonical JSON of a run's dims + wave parameters. Two runs
    with equal settings get the same config_id whatever their key order.
    """
    s = json.dumps(obj, sort_keys=True, separators=(",", ":"), default=_to_json)
    return hashlib.sha256(s.encode("utf-8")).hexdigest()
