"""
Field storage: one FieldPair per time slice, two slots in a DoubleBuffer.

Each step reads back() and fully overwrites front(); advance() then flips the
roles. Slot assignment is a pure function of the iteration counter:

    front = slot_a  if iteration is even  else slot_b
    back  = the other slot
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from wavegrid.sim.grid import GridDimensions, to_logical


@dataclass
class FieldPair:
    value: np.ndarray       # (height, width, 4)
    derivative: np.ndarray  # (height, width, 4)

    def __post_init__(self):
        if self.value.shape != self.derivative.shape:
            raise ValueError(
                f"value {self.value.shape} and derivative {self.derivative.shape} must match"
            )

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.value.shape

    def read_only(self) -> "FieldPair":
        """Non-writeable views over the same memory (for diagnostic consumers)."""
        v = self.value.view()
        d = self.derivative.view()
        v.flags.writeable = False
        d.flags.writeable = False
        return FieldPair(value=v, derivative=d)

    def copy(self) -> "FieldPair":
        return FieldPair(value=self.value.copy(), derivative=self.derivative.copy())

    def value_grid(self, dims: GridDimensions) -> np.ndarray:
        return to_logical(self.value, dims)

    def derivative_grid(self, dims: GridDimensions) -> np.ndarray:
        return to_logical(self.derivative, dims)


class DoubleBuffer:
    """Owns two FieldPair slots and the iteration counter that picks front/back."""

    def __init__(self, slot_a: FieldPair, slot_b: FieldPair):
        if slot_a is slot_b:
            raise ValueError("double buffer needs two distinct slots")
        if slot_a.shape != slot_b.shape:
            raise ValueError(f"slot shapes differ: {slot_a.shape} vs {slot_b.shape}")
        self.slot_a = slot_a
        self.slot_b = slot_b
        self._iteration = 0

    @property
    def iteration(self) -> int:
        return self._iteration

    def front(self) -> FieldPair:
        return self.slot_a if self._iteration % 2 == 0 else self.slot_b

    def back(self) -> FieldPair:
        return self.slot_b if self._iteration % 2 == 0 else self.slot_a

    def slots(self) -> Tuple[FieldPair, FieldPair]:
        return (self.slot_a, self.slot_b)

    def advance(self) -> None:
        # caller guarantees every write to front() has completed
        self._iteration += 1

    def reset(self) -> None:
        self._iteration = 0
