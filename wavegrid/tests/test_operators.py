# wavegrid/tests/test_operators.py
"""
Basic tests for wavegrid.sim.operators (axis_term, laplacian, impulse_mask).

Small, fast sanity checks to catch sign / indexing / wrap bugs in the
reference stencil the kernels are compared against.
"""

import numpy as np

from wavegrid.sim.grid import GridDimensions
from wavegrid.sim.operators import (
    axis_term, laplacian, impulse_mask, mode_eigenvalue, SPECTRAL_RADIUS,
)


def test_laplacian_delta_center():
    """
    Stencil of a unit delta (periodic, 9^3) should:
    - be -90/12 at the center (three -30 terms, one /12)
    - be +16/12 at the 6 direct neighbours, -1/12 at distance 2
    - sum to ~0 over the whole grid
    """
    n = 9
    a = np.zeros((n, n, n))
    c = n // 2
    a[c, c, c] = 1.0

    L = laplacian(a)

    assert np.isclose(L[c, c, c], -90.0 / 12.0)
    for d in (+1, -1):
        assert np.isclose(L[c + d, c, c], 16.0 / 12.0)
        assert np.isclose(L[c, c + d, c], 16.0 / 12.0)
        assert np.isclose(L[c, c, c + d], 16.0 / 12.0)
    for d in (+2, -2):
        assert np.isclose(L[c + d, c, c], -1.0 / 12.0)
        assert np.isclose(L[c, c + d, c], -1.0 / 12.0)
        assert np.isclose(L[c, c, c + d], -1.0 / 12.0)
    # nothing beyond distance 2, nothing off-axis
    assert np.isclose(L[c + 3, c, c], 0.0)
    assert np.isclose(L[c + 1, c + 1, c], 0.0)

    assert np.isclose(L.sum(), 0.0)


def test_laplacian_wraps_at_edges():
    """A delta at index 0 must feed cells n-1 and n-2 on the other side."""
    n = 8
    a = np.zeros((n, n, n))
    a[0, 3, 3] = 1.0
    L = laplacian(a)
    assert np.isclose(L[n - 1, 3, 3], 16.0 / 12.0)
    assert np.isclose(L[n - 2, 3, 3], -1.0 / 12.0)


def test_laplacian_zero_for_constant_field():
    a = np.full((5, 4, 6), 3.14)
    assert np.allclose(laplacian(a), 0.0)


def test_axis_term_only_sees_its_axis():
    """A field varying only along axis 2 has zero terms on axes 0 and 1."""
    a = np.broadcast_to(np.sin(np.arange(7.0))[None, None, :], (4, 5, 7)).copy()
    assert np.allclose(axis_term(a, 0), 0.0)
    assert np.allclose(axis_term(a, 1), 0.0)
    assert not np.allclose(axis_term(a, 2), 0.0)


def test_mode_eigenvalue_matches_stencil():
    """A cosine mode along one axis is an eigenvector with the closed-form eigenvalue."""
    extent, mode = 16, 3
    idx = np.arange(extent)
    line = np.cos(2 * np.pi * mode * idx / extent)
    a = np.broadcast_to(line[None, None, :], (2, 3, extent)).copy()
    lam = mode_eigenvalue(mode, extent)
    assert np.allclose(laplacian(a), lam * a)


def test_spectral_radius_is_checkerboard_eigenvalue():
    n = 8
    i = np.arange(n)
    checker = ((-1.0) ** (i[:, None, None] + i[None, :, None] + i[None, None, :]))
    L = laplacian(checker)
    assert np.allclose(L, -SPECTRAL_RADIUS * checker)


def test_impulse_mask_counts():
    dims = GridDimensions(angular=10, radial=12, section=8)
    mask = impulse_mask(dims, 2)
    assert mask.shape == dims.logical_shape
    assert mask.sum() == 5 * 5 * 5
    assert mask[dims.center]
    # half_width 0 is the single center cell
    assert impulse_mask(dims, 0).sum() == 1
