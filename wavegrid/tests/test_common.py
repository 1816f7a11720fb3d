# wavegrid/tests/test_common.py
import logging
from pathlib import Path

import numpy as np
import pytest

from wavegrid.common.hashutil import config_digest, sha256_file
from wavegrid.common.logging_setup import setup_logging
from wavegrid.common.paths import frame_dir, make_frame_dir


def test_config_digest_ignores_key_order():
    a = {"dims": {"angular": 8, "radial": 4}, "c2": 343.0}
    b = {"c2": 343.0, "dims": {"radial": 4, "angular": 8}}
    assert config_digest(a) == config_digest(b)
    assert config_digest(a) != config_digest({**a, "c2": 344.0})


def test_config_digest_accepts_numpy_scalars():
    plain = {"dims": {"angular": 8}, "c2": 343.0}
    with_np = {"dims": {"angular": np.int64(8)}, "c2": np.float32(343.0)}
    assert config_digest(with_np) == config_digest(plain)


def test_config_digest_refuses_unknown_objects():
    with pytest.raises(TypeError):
        config_digest({"executor": object()})


def test_sha256_file_matches_known_digest(tmp_path):
    p = tmp_path / "x.bin"
    p.write_bytes(b"abc")
    assert sha256_file(p) == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_frame_dirs(tmp_path):
    assert frame_dir(Path("/s"), "run/a", 7) == Path("/s/run/a/Frame_0007")
    fdir = make_frame_dir(tmp_path, "run/b", 12)
    assert fdir.is_dir()
    assert fdir == tmp_path / "run" / "b" / "Frame_0012"
    # existing directory is fine
    assert make_frame_dir(tmp_path, "run/b", 12) == fdir
    with pytest.raises(ValueError):
        frame_dir(tmp_path, "run/b", -1)


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging()
    logger = setup_logging(verbose=True, log_file=str(log_file))
    try:
        assert logger.name == "wavegrid"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logging.getLogger("wavegrid.sim.simulation").debug("hello from the core")
        for h in logger.handlers:
            h.flush()
        assert "DEBUG   wavegrid.sim.simulation: hello from the core" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            h.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
