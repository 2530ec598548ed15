# tests/test_modal.py
"""
Natural frequencies: cantilever against Euler-Bernoulli theory, the free
ring against the analytical (Blevins) values, dense against sparse solves.
"""

import numpy as np
import pytest

from flexstruct.benchmarks import ring_modal
from flexstruct.config import CONFIG
from flexstruct.kernel.dof import DOF_3D_FRAME
from flexstruct.kernel.modal import (
    effective_modal_mass, frequencies_from_eigenvalues, fundamental_frequency, natural_frequencies,
)
from flexstruct.kernel.assemble import reduce
from flexstruct.kernel.solve import MechanismError
from flexstruct.v3d import elements as beams
from flexstruct.v3d.elements import MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA
from flexstruct.v3d.model import BeamElement, CrossSectionCircle, Material

STEEL = Material(E=200e9, nu=0.3, rho=7850.0)


def _cantilever(n_elements=10, L=2.0):
    cs = CrossSectionCircle(radius=0.05)
    xyz = np.column_stack([np.linspace(0.0, L, n_elements + 1),
                           np.zeros(n_elements + 1), np.zeros(n_elements + 1)])
    elements = [BeamElement(i, i, i + 1, cs, STEEL) for i in range(n_elements)]
    K = beams.stiffness(xyz, elements)
    M = beams.mass(xyz, elements, MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA)
    return K, M, DOF_3D_FRAME.fixed_dofs([0]), cs


def test_cantilever_fundamental_frequency():
    L = 2.0
    K, M, fixed, cs = _cantilever(10, L)
    f1 = fundamental_frequency(K, M, fixed)
    expected = 1.875104 ** 2 / (2 * np.pi * L ** 2) * np.sqrt(STEEL.E * cs.I2 / (STEEL.rho * cs.A))
    assert np.isclose(f1, expected, rtol=1e-3)


def test_mode_shapes_are_mass_normalized():
    K, M, fixed, _ = _cantilever(6)
    _, vecs, free = natural_frequencies(K, M, fixed, n_modes=4)
    Mff = reduce(M, free)
    np.testing.assert_allclose(vecs.T @ (Mff @ vecs), np.eye(4), atol=1e-8)


def test_sparse_shift_invert_matches_dense(monkeypatch):
    K, M, fixed, _ = _cantilever(10)
    f_dense, _, _ = natural_frequencies(K, M, fixed, n_modes=6)
    monkeypatch.setattr(CONFIG, "dense_limit", 0)
    f_sparse, _, _ = natural_frequencies(K, M, fixed, n_modes=6)
    np.testing.assert_allclose(f_sparse, f_dense, rtol=1e-7)


def test_sparse_solve_with_unconnected_node_raises(monkeypatch):
    cs = CrossSectionCircle(radius=0.05)
    # Nodes 0-4 form a cantilever, node 5 belongs to no element
    xyz = np.column_stack([np.arange(6.0), np.zeros(6), np.zeros(6)])
    elements = [BeamElement(i, i, i + 1, cs, STEEL) for i in range(4)]
    K = beams.stiffness(xyz, elements)
    M = beams.mass(xyz, elements)
    monkeypatch.setattr(CONFIG, "dense_limit", 0)
    with pytest.raises(MechanismError, match="singular"):
        natural_frequencies(K, M, DOF_3D_FRAME.fixed_dofs([0]), n_modes=4, shift=1.0)


def test_effective_masses_add_up_to_total_mass():
    K, M, fixed, _ = _cantilever(4)
    n_free = K.shape[0] - len(fixed)
    _, vecs, free = natural_frequencies(K, M, fixed, n_modes=n_free)
    eff = effective_modal_mass(vecs, M, free, direction=2)
    r = (free % 6 == 2).astype(float)
    total = r @ (reduce(M, free) @ r)
    assert np.all(eff >= 0.0)
    assert np.isclose(eff.sum(), total, rtol=1e-8)


def test_non_positive_eigenvalues_map_to_zero_frequency():
    f = frequencies_from_eigenvalues(np.array([-1.0, 0.0, (2 * np.pi) ** 2]))
    np.testing.assert_allclose(f, [0.0, 0.0, 1.0])


def test_no_free_dofs_raises():
    K, M, _, _ = _cantilever(1)
    with pytest.raises(ValueError):
        natural_frequencies(K, M, range(12))


class TestFreeRing:
    def test_analytical_reference_values(self):
        assert np.isclose(ring_modal.out_of_plane_frequency(), 51.85, rtol=1e-3)
        assert np.isclose(ring_modal.in_plane_frequency(), 53.38, rtol=1e-3)

    def test_six_rigid_body_modes_then_flexible_pairs(self):
        f = ring_modal.solve(40)
        assert f.size == ring_modal.N_MODES
        assert np.all(f[:6] < 0.1)
        np.testing.assert_allclose(f[6:8], 51.85, rtol=0.03)
        np.testing.assert_allclose(f[8:10], 53.38, rtol=0.03)
        np.testing.assert_allclose(f[10:12], 148.8, rtol=0.03)

    def test_sparse_path_with_mass_shift(self, monkeypatch):
        f_dense = ring_modal.solve(20)
        monkeypatch.setattr(CONFIG, "dense_limit", 0)
        f_sparse = ring_modal.solve(20)
        np.testing.assert_allclose(f_sparse, f_dense, rtol=1e-6, atol=1e-3)
