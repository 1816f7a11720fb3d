# wavegrid/tests/test_layers.py
"""
Double-buffer discipline: front/back roles are a function of the iteration
counter, and advance() is the only thing that flips them.
"""

import numpy as np
import pytest

from wavegrid.sim.layers import FieldPair, DoubleBuffer


def _pair(shape=(2, 6, 4)) -> FieldPair:
    return FieldPair(value=np.zeros(shape, dtype=np.float32),
                     derivative=np.zeros(shape, dtype=np.float32))


def test_front_back_swap_identity():
    a, b = _pair(), _pair()
    buf = DoubleBuffer(a, b)

    assert buf.iteration == 0
    assert buf.front() is a
    assert buf.back() is b

    for expected in range(1, 6):
        front_before, back_before = buf.front(), buf.back()
        buf.advance()
        assert buf.iteration == expected
        assert buf.back() is front_before
        assert buf.front() is back_before
        assert buf.front() is not buf.back()


def test_reset_restores_slot_a_as_front():
    a, b = _pair(), _pair()
    buf = DoubleBuffer(a, b)
    buf.advance()
    buf.advance()
    buf.advance()
    buf.reset()
    assert buf.iteration == 0
    assert buf.front() is a


def test_double_buffer_rejects_shared_or_mismatched_slots():
    a = _pair()
    with pytest.raises(ValueError):
        DoubleBuffer(a, a)
    with pytest.raises(ValueError):
        DoubleBuffer(a, _pair(shape=(3, 6, 4)))


def test_field_pair_shapes_must_match():
    with pytest.raises(ValueError):
        FieldPair(value=np.zeros((2, 4, 4)), derivative=np.zeros((2, 5, 4)))


def test_read_only_view_shares_memory_but_rejects_writes():
    p = _pair()
    ro = p.read_only()
    p.value[0, 0, 0] = 3.0
    assert ro.value[0, 0, 0] == 3.0
    with pytest.raises(ValueError):
        ro.value[0, 0, 0] = 1.0
    with pytest.raises(ValueError):
        ro.derivative[0, 0, 0] = 1.0
    # the original stays writeable
    p.derivative[0, 0, 0] = 2.0


def test_copy_is_independent():
    p = _pair()
    c = p.copy()
    p.value[...] = 1.0
    assert np.all(c.value == 0.0)
