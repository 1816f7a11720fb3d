# wavegrid/tests/test_grid.py
"""
Addressing sanity checks: packed (x, y) <-> logical (r, l, a) and periodic wrap.
"""

import itertools
import numpy as np
import pytest

from wavegrid.sim.grid import (
    GridDimensions, pack, unpack, wrap, wrap_jit, to_logical, from_logical,
)


def test_grid_dimensions_reject_non_positive_extents():
    for bad in [(0, 4, 4), (4, -1, 4), (4, 4, 0)]:
        with pytest.raises(ValueError):
            GridDimensions(angular=bad[0], radial=bad[1], section=bad[2])
    with pytest.raises(ValueError):
        GridDimensions(angular=2.5, radial=4, section=4)


def test_grid_dimensions_storage_layout():
    dims = GridDimensions(angular=6, radial=5, section=3)
    assert dims.width == 18
    assert dims.height == 5
    assert dims.storage_shape == (5, 18)
    assert dims.logical_shape == (5, 3, 6)
    assert dims.cells == 90
    assert dims.center == (2, 1, 3)


def test_pack_unpack_bijection():
    """Every logical cell maps to a distinct in-bounds storage coordinate and back."""
    dims = GridDimensions(angular=5, radial=4, section=3)
    seen = set()
    for r, l, a in itertools.product(range(dims.radial), range(dims.section), range(dims.angular)):
        x, y = pack(dims, r, l, a)
        assert 0 <= x < dims.width and 0 <= y < dims.height
        assert unpack(dims, x, y) == (r, l, a)
        seen.add((x, y))
    # bijection onto the whole buffer
    assert len(seen) == dims.width * dims.height


def test_wrap_range_and_periodicity():
    for extent in (1, 2, 3, 8, 13):
        for k in range(-5 * extent - 3, 5 * extent + 4):
            w = wrap(k, extent)
            assert 0 <= w < extent
            assert w == wrap(k + extent, extent)
            assert w == wrap(k - 7 * extent, extent)


def test_wrap_far_out_of_range():
    assert wrap(-1, 8) == 7
    assert wrap(-2, 8) == 6
    assert wrap(8, 8) == 0
    assert wrap(10**12 + 3, 8) == 3
    assert wrap(-(10**12) - 1, 10) == 9


def test_wrap_rejects_empty_extent():
    with pytest.raises(ValueError):
        wrap(3, 0)


def test_wrap_jit_matches_python_wrap():
    for extent in (1, 4, 7):
        for k in range(-20, 21):
            assert wrap_jit(k, extent) == wrap(k, extent)


def test_logical_view_follows_pack():
    """to_logical(buf)[r, l, a] must read the sample stored at pack(r, l, a)."""
    dims = GridDimensions(angular=4, radial=3, section=2)
    grid = np.arange(dims.cells, dtype=np.float64).reshape(dims.logical_shape)
    buf = np.zeros((dims.height, dims.width, 4), dtype=np.float32)
    from_logical(grid, dims, buf)

    for r, l, a in itertools.product(range(3), range(2), range(4)):
        x, y = pack(dims, r, l, a)
        # all four components carry the same value
        assert np.all(buf[y, x, :] == grid[r, l, a])

    assert np.array_equal(to_logical(buf, dims), grid)


def test_to_logical_rejects_wrong_shape():
    dims = GridDimensions(angular=4, radial=3, section=2)
    with pytest.raises(ValueError):
        to_logical(np.zeros((3, 7, 4)), dims)


def test_numpy_integer_extents_are_stored_as_int():
    dims = GridDimensions(angular=np.int64(6), radial=np.int32(5), section=np.int64(3))
    for v in dims.as_dict().values():
        assert type(v) is int
    assert dims == GridDimensions(angular=6, radial=5, section=3)
