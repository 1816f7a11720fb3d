class WavegridError(Exception):
    """Base class for failures raised by the wave grid core."""


class AllocationError(WavegridError, MemoryError):
    """Field buffers could not be allocated; the simulation cannot start."""


class ExecutionError(WavegridError, RuntimeError):
    """A kernel dispatch failed; the step did not complete."""
