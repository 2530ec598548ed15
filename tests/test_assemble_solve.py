# tests/test_assemble_solve.py
import numpy as np
import pytest
import scipy.sparse as sp

from flexstruct.config import CONFIG
from flexstruct.kernel.assemble import add_nodal_load, assemble_global_F, assemble_global_K, reduce
from flexstruct.kernel.dof import DOF_3D_FRAME
from flexstruct.kernel.solve import MechanismError, solve_linear
from flexstruct.v3d import elements as beams
from flexstruct.v3d.model import BeamElement, CrossSectionCircle, Material


def test_duplicate_entries_are_summed():
    ke = np.array([[1.0, -1.0], [-1.0, 1.0]])
    K = assemble_global_K(3, [([0, 1], ke), ([1, 2], ke)])
    assert sp.issparse(K)
    expected = np.array([
        [1.0, -1.0, 0.0],
        [-1.0, 2.0, -1.0],
        [0.0, -1.0, 1.0],
    ])
    np.testing.assert_allclose(K.toarray(), expected)


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        assemble_global_K(3, [([0, 1, 2], np.eye(2))])
    with pytest.raises(ValueError):
        assemble_global_F(3, [([0, 1], np.ones(3))])


def test_load_vector_assembly():
    F = assemble_global_F(3, [([0, 1], np.array([1.0, 2.0])), ([1, 2], np.array([3.0, 4.0]))])
    np.testing.assert_allclose(F, [1.0, 5.0, 4.0])

    F = np.zeros(12)
    add_nodal_load(F, 1, [0.0, 0.0, -5.0, 1.0], 6)
    assert F[8] == -5.0
    assert F[9] == 1.0


def test_reduce_dense_and_sparse():
    A = np.arange(16.0).reshape(4, 4)
    free = np.array([1, 3])
    expected = np.array([[5.0, 7.0], [13.0, 15.0]])
    np.testing.assert_allclose(reduce(A, free), expected)
    np.testing.assert_allclose(reduce(sp.csr_matrix(A), free).toarray(), expected)


def _cantilever(n_elements, L=2.0):
    xyz = np.column_stack([np.linspace(0.0, L, n_elements + 1),
                           np.zeros(n_elements + 1), np.zeros(n_elements + 1)])
    cs = CrossSectionCircle(radius=0.05)
    steel = Material(E=200e9, nu=0.3, rho=7850.0)
    elements = [BeamElement(i, i, i + 1, cs, steel) for i in range(n_elements)]
    return xyz, elements, cs, steel


def test_cantilever_tip_load_3d_beam():
    L, P = 2.0, 1000.0
    xyz, elements, cs, steel = _cantilever(4, L)
    K = beams.stiffness(xyz, elements)

    F = np.zeros(DOF_3D_FRAME.ndof(len(xyz)))
    tip = len(xyz) - 1
    add_nodal_load(F, tip, [0.0, 0.0, -P], 6)
    d, R, _ = solve_linear(K, F, DOF_3D_FRAME.fixed_dofs([0]))

    uz_expected = -P * L ** 3 / (3 * steel.E * cs.I2)
    assert np.isclose(d[DOF_3D_FRAME.idx(tip, 2)], uz_expected, rtol=1e-7)

    # Fixed-end reactions balance the load
    assert np.isclose(R[2], P, rtol=1e-7)
    assert np.isclose(R[4], -P * L, rtol=1e-7)


def test_sparse_path_matches_dense(monkeypatch):
    xyz, elements, _, _ = _cantilever(6)
    K = beams.stiffness(xyz, elements)
    F = np.zeros(K.shape[0])
    add_nodal_load(F, 6, [1.0, -2.0, 3.0, 0.1], 6)
    fixed = DOF_3D_FRAME.fixed_dofs([0])

    d_dense, _, _ = solve_linear(K, F, fixed)
    monkeypatch.setattr(CONFIG, "dense_limit", 0)
    d_sparse, _, _ = solve_linear(K, F, fixed)
    np.testing.assert_allclose(d_sparse, d_dense, rtol=1e-9, atol=1e-15)


def test_unsupported_structure_raises_mechanism_error():
    xyz, elements, _, _ = _cantilever(2)
    K = beams.stiffness(xyz, elements)
    F = np.zeros(K.shape[0])
    F[-4] = 1.0
    with pytest.raises(MechanismError):
        solve_linear(K, F, fixed_dofs=[])


def test_no_free_dofs_raises():
    xyz, elements, _, _ = _cantilever(1)
    K = beams.stiffness(xyz, elements)
    with pytest.raises(ValueError):
        solve_linear(K, np.zeros(12), fixed_dofs=range(12))
