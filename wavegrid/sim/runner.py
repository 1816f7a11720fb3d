from dataclasses import dataclass
from pathlib import Path
from queue import Queue
from threading import Thread
from typing import Callable, List, Optional
import logging

from wavegrid.sim.saver import save_layer, HeaderOptions
from wavegrid.sim.simulation import Simulation
from wavegrid.sim.validator import validate_sim_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    dt: float = 0.001
    steps: int = 100
    save_stride: int = 0            # save every N steps (0 = only the first/last frame)
    save_first_frame: bool = True   # snapshot the initial state as frame 0
    save_last_frame: bool = True
    header_stats: bool = False


class Runner:
    """Fixed-count batch stepping with snapshots handed to a writer thread."""

    def __init__(self, sim: Simulation, cfg: RunConfig):
        self.sim = sim
        self.cfg = cfg

    def run(self, *,
            store: Optional[Path] = None,
            sim_label: str = "run",
            on_frame_saved: Optional[Callable[[int, int], None]] = None) -> int:
        """
        Step the (already initialized) simulation cfg.steps times.
        Returns the number of frames written (0 when store is None).
        """
        cfg = self.cfg
        if cfg.save_stride < 0:
            raise ValueError(f"save_stride must be >= 0 (got {cfg.save_stride})")
        validate_sim_config(self.sim.dims, self.sim.config, dt=cfg.dt, steps=cfg.steps)
        if not self.sim.ready:
            raise RuntimeError("simulation must be initialized before run()")

        logger.info("run %s: %d steps, dt=%g, stride=%d", sim_label, cfg.steps, cfg.dt, cfg.save_stride)
        if store is None:
            for _ in range(cfg.steps):
                self.sim.step(cfg.dt)
            return 0

        # Asynchronous writer: queue snapshots for background saving
        write_queue: "Queue[Optional[tuple]]" = Queue(maxsize=2)
        writer_errors: List[BaseException] = []
        config_meta = self.sim.config.as_dict()

        def _writer():
            while True:
                item = write_queue.get()
                if item is None:
                    write_queue.task_done()
                    break
                frame_idx, iteration, elapsed, layer = item
                if not writer_errors:
                    try:
                        save_layer(
                            store, sim_label, frame_idx,
                            layer=layer,
                            dims=self.sim.dims,
                            iteration=iteration,
                            elapsed=elapsed,
                            config=config_meta,
                            header_opts=HeaderOptions(write_stats=cfg.header_stats),
                        )
                        if on_frame_saved is not None:
                            on_frame_saved(frame_idx, iteration)
                    except Exception as e:
                        # keep draining so the producer never blocks; re-raised below
                        writer_errors.append(e)
                write_queue.task_done()

        writer_thread = Thread(target=_writer, daemon=True)
        writer_thread.start()

        frame = 0

        def _enqueue():
            nonlocal frame
            write_queue.put((frame, self.sim.iteration, self.sim.elapsed, self.sim.latest.copy()))
            frame += 1

        try:
            if cfg.save_first_frame:
                _enqueue()
            last_saved = self.sim.iteration if cfg.save_first_frame else -1
            for n in range(1, cfg.steps + 1):
                self.sim.step(cfg.dt)
                if cfg.save_stride > 0 and n % cfg.save_stride == 0:
                    _enqueue()
                    last_saved = self.sim.iteration
            if cfg.save_last_frame and last_saved != self.sim.iteration:
                _enqueue()
        finally:
            write_queue.put(None)
            writer_thread.join()

        if writer_errors:
            raise RuntimeError(f"snapshot writer failed: {writer_errors[0]}") from writer_errors[0]
        logger.info("run %s finished at iteration %d (%d frames)", sim_label, self.sim.iteration, frame)
        return frame
