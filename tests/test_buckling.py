# tests/test_buckling.py
"""
PRESTRESS AND BUCKLING TESTS
============================

- Euler column: the critical loading factor of a pinned column under a unit
  compressive reference load is π²EI/L².
- Argyris frame: the fundamental frequency falls to zero at the critical
  loading factors, in both senses of the load.
"""

import numpy as np
import pandas as pd
import pytest

from flexstruct.benchmarks import argyris_frame
from flexstruct.kernel.assemble import add_nodal_load
from flexstruct.kernel.buckling import (
    critical_buckling_factors, euler_buckling_load, frequency_sweep, prestressed_frequencies,
)
from flexstruct.kernel.dof import DOF_3D_FRAME
from flexstruct.kernel.modal import fundamental_frequency
from flexstruct.kernel.solve import solve_linear
from flexstruct.v3d import elements as beams
from flexstruct.v3d.model import BeamElement, CrossSectionCircle, Material

STEEL = Material(E=200e9, nu=0.3, rho=7850.0)


def _pinned_column(n=8, L=3.0):
    cs = CrossSectionCircle(radius=0.02)
    xyz = np.column_stack([np.linspace(0.0, L, n + 1), np.zeros(n + 1), np.zeros(n + 1)])
    elements = [BeamElement(i, i, i + 1, cs, STEEL) for i in range(n)]
    K = beams.stiffness(xyz, elements)
    M = beams.mass(xyz, elements)

    # Pin at x = 0 (translations + torsion), roller at x = L
    fixed = DOF_3D_FRAME.fixed_dofs([0], [0, 1, 2, 3]) + DOF_3D_FRAME.fixed_dofs([n], [1, 2])
    F = np.zeros(K.shape[0])
    add_nodal_load(F, n, [-1.0, 0.0, 0.0], 6)
    d, _, _ = solve_linear(K, F, fixed)
    Kg = beams.geostiffness(xyz, elements, d)
    return K, Kg, M, fixed, cs, L


def test_euler_formula():
    assert np.isclose(euler_buckling_load(1.0, 1.0, 1.0), np.pi ** 2)
    assert np.isclose(euler_buckling_load(1.0, 1.0, 1.0, k=2.0), np.pi ** 2 / 4)


def test_pinned_column_critical_factor():
    K, Kg, _, fixed, cs, L = _pinned_column()
    positive, negative = critical_buckling_factors(K, Kg, fixed, n_modes=2)
    P_cr = euler_buckling_load(STEEL.E, cs.I2, L)
    # Circular section: the two bending planes buckle at the same load
    np.testing.assert_allclose(positive, P_cr, rtol=0.03)
    # Tension never buckles the column at a comparable load
    if negative.size:
        assert abs(negative[0]) > 100.0 * positive[0]


def test_geometric_stiffness_is_symmetric():
    _, Kg, _, _, _, _ = _pinned_column(4)
    A = Kg.toarray()
    np.testing.assert_allclose(A, A.T, atol=1e-10 * np.abs(A).max())


def test_compression_lowers_frequency():
    K, Kg, M, fixed, _, _ = _pinned_column()
    positive, _ = critical_buckling_factors(K, Kg, fixed)
    f0 = fundamental_frequency(K, M, fixed)
    f_half, _, _ = prestressed_frequencies(K, Kg, M, fixed, 0.5 * positive[0], n_modes=1)
    # Lowest bending mode: f² falls linearly with the axial load
    assert np.isclose(f_half[0] ** 2, 0.5 * f0 ** 2, rtol=0.05)


def test_frequency_sweep_dataframe():
    K, Kg, M, fixed, _, _ = _pinned_column(4)
    df = frequency_sweep(K, Kg, M, fixed, [0.0, 100.0, 200.0])
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ['load_factor', 'frequency_hz']
    assert len(df) == 3
    assert np.isclose(df['frequency_hz'].iloc[0], fundamental_frequency(K, M, fixed))
    assert df['frequency_hz'].is_monotonic_decreasing


def test_sweep_beyond_buckling_reports_zero_frequency():
    K, Kg, M, fixed, _, _ = _pinned_column()
    positive, _ = critical_buckling_factors(K, Kg, fixed)
    # K + λ·Kg is indefinite past the critical factor
    df = frequency_sweep(K, Kg, M, fixed, [0.5 * positive[0], 1.05 * positive[0], 2.0 * positive[0]])
    f = df['frequency_hz'].to_numpy()
    assert f[0] > 0.0
    assert f[1] == 0.0
    assert f[2] == 0.0


class TestArgyrisFrame:
    @pytest.fixture(scope="class")
    def model(self):
        return argyris_frame.build(n=8)

    def test_model_matrices(self, model):
        n = DOF_3D_FRAME.ndof(model.mesh.n_nodes)
        assert model.mesh.n_nodes == 17
        assert model.K.shape == model.M.shape == model.Kg.shape == (n, n)
        assert len(model.fixed) == 6
        # The tip moves against the applied force
        assert model.d[DOF_3D_FRAME.idx(model.tip, 0)] < 0.0

    def test_rotation_field_of_prestress_state(self, model):
        R = model.rotations
        assert R.shape == (model.mesh.n_nodes, 3, 3)
        for Ri in R:
            np.testing.assert_allclose(Ri @ Ri.T, np.eye(3), atol=1e-12)
        clamp = model.fixed[0] // DOF_3D_FRAME.dof_per_node
        np.testing.assert_allclose(R[clamp], np.eye(3), atol=1e-15)

    def test_critical_factors_match_reference_ranges(self, model):
        positive, negative = argyris_frame.buckling_factors(model)
        assert positive.size == 1 and negative.size == 1
        # The reference sweep ranges end just past the critical factors
        assert np.isclose(positive[0], argyris_frame.POSITIVE_RANGE[1], rtol=0.01)
        assert np.isclose(negative[0], argyris_frame.NEGATIVE_RANGE[0], rtol=0.01)

    def test_frequency_vanishes_at_buckling(self, model):
        positive, negative = argyris_frame.buckling_factors(model)
        df = argyris_frame.sweep(model, [0.0, 0.999 * positive[0], 0.999 * negative[0]])
        f0, f_pos, f_neg = df['frequency_hz']
        assert f0 > 0.0
        assert f_pos < 0.2 * f0
        assert f_neg < 0.2 * f0

    def test_frequency_is_zero_past_buckling(self, model):
        positive, negative = argyris_frame.buckling_factors(model)
        df = argyris_frame.sweep(model, [1.02 * positive[0], 1.02 * negative[0]])
        np.testing.assert_array_equal(df['frequency_hz'].to_numpy(), [0.0, 0.0])

    def test_reference_load_factors(self):
        lf = argyris_frame.reference_load_factors(10)
        assert lf.size == 20
        assert lf.min() == -109000.0 and lf.max() == 68000.0
