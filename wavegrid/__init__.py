"""
wavegrid: explicit wave integration on a periodic (radial, section, angular) grid

Modules
-------
- sim.grid: GridDimensions, packed addressing (pack/unpack), periodic wrap
- sim.layers: FieldPair time slices and the front/back DoubleBuffer
- sim.executor: kernel substrate (allocate, dispatch over grid, sample)
- sim.kernels: numba per-cell initialize/update kernels + numpy references
- sim.operators: vectorised stencil operators on logical grids
- sim.simulation: Simulation lifecycle (create, initialize, step)
- sim.validator: config sanity and explicit-scheme stability checks
- sim.seeds: analytic initial states and their exact solutions
- sim.saver / sim.runner: snapshots and fixed-count batch runs
- common: paths, hashing, logging setup
"""

__all__ = [
    "sim",
    "common",
]

__version__ = "0.1.0"
