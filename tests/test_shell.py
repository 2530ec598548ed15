# tests/test_shell.py
"""
T3 SHELL TESTS
==============

The flat facet combines a CST membrane, DKT bending and a drilling penalty.
A correct facet:
- has exactly six zero-energy modes, in any orientation
- produces no forces under a rigid rotation
- reproduces a uniform membrane stress exactly
- reproduces cantilever beam bending of a strip (ν = 0) closely
"""

import numpy as np
import pytest
import scipy.sparse as sp

from flexstruct.kernel.assemble import add_nodal_load
from flexstruct.kernel.dof import DOF_3D_FRAME
from flexstruct.kernel.solve import solve_linear
from flexstruct.mesh import select_nodes, t3_block
from flexstruct.v3d import shell
from flexstruct.v3d.model import Material, ShellElement
from flexstruct.v3d.shell import shell_global_stiffness, shell_local_frame, shell_lumped_mass

UNIT = Material(E=1.0, nu=0.3, rho=2.0)
TRI_3D = np.array([[0.2, 0.1, 0.3], [1.4, 0.4, 0.1], [0.5, 1.2, 0.9]])


def _count_zero_modes(k):
    w = np.linalg.eigvalsh(k)
    return int(np.sum(np.abs(w) < 1e-9 * w.max()))


def test_local_frame_of_oblique_facet():
    element = ShellElement(0, (0, 1, 2), 0.1, UNIT)
    F, xy, area = shell_local_frame(TRI_3D, element)
    np.testing.assert_allclose(F @ F.T, np.eye(3), atol=1e-14)
    expected_area = 0.5 * np.linalg.norm(np.cross(TRI_3D[1] - TRI_3D[0], TRI_3D[2] - TRI_3D[0]))
    assert np.isclose(area, expected_area)
    np.testing.assert_allclose(xy[0], [0.0, 0.0], atol=1e-15)
    assert np.isclose(xy[1, 1], 0.0, atol=1e-14)


def test_degenerate_triangle_raises():
    xyz = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
    with pytest.raises(ValueError, match="degenerate"):
        shell_global_stiffness(xyz, ShellElement(3, (0, 1, 2), 0.1, UNIT))


def test_facet_stiffness_symmetric_with_six_zero_modes():
    k = shell_global_stiffness(TRI_3D, ShellElement(0, (0, 1, 2), 0.1, UNIT))
    assert k.shape == (18, 18)
    np.testing.assert_allclose(k, k.T, atol=1e-12 * np.abs(k).max())
    assert _count_zero_modes(k) == 6


def test_rigid_rotation_produces_no_forces():
    k = shell_global_stiffness(TRI_3D, ShellElement(0, (0, 1, 2), 0.1, UNIT))
    omega = np.array([0.4, -0.3, 0.7])
    u = np.concatenate([np.concatenate([np.cross(omega, p), omega]) for p in TRI_3D])
    assert np.linalg.norm(k @ u) < 1e-10 * np.abs(k).max()


def test_free_flat_plate_has_six_zero_modes():
    block = t3_block(2.0, 2.0, 2, 2)
    elements = [ShellElement(i, tuple(int(n) for n in tri), 0.1, UNIT)
                for i, tri in enumerate(block.conn)]
    K = shell.stiffness(block.xyz, elements)
    assert sp.issparse(K)
    assert _count_zero_modes(K.toarray()) == 6


def test_lumped_mass():
    element = ShellElement(0, (0, 1, 2), 0.1, UNIT)
    _, _, area = shell_local_frame(TRI_3D, element)
    m = shell_lumped_mass(TRI_3D, element)
    assert m.shape == (18,)
    assert np.isclose(m[0::6].sum(), UNIT.rho * 0.1 * area)
    assert np.isclose(m[3], UNIT.rho * 0.1 ** 3 / 36.0 * area)

    block = t3_block(3.0, 2.0, 3, 2)
    elements = [ShellElement(i, tuple(int(n) for n in tri), 0.1, UNIT)
                for i, tri in enumerate(block.conn)]
    M_diag, M = shell.mass(block.xyz, elements)
    assert np.isclose(M_diag[2::6].sum(), UNIT.rho * 0.1 * 6.0)
    np.testing.assert_allclose(M.diagonal(), M_diag)


class TestCantileverStrip:
    """Strip L × W clamped at x = 0, loaded at the free edge; ν = 0 so it is a beam."""

    L, W, t = 1.0, 0.2, 0.01
    material = Material(E=1.0e9, nu=0.0)

    def _solve(self, load_direction):
        block = t3_block(self.L, self.W, 20, 2)
        elements = [ShellElement(i, tuple(int(n) for n in tri), self.t, self.material)
                    for i, tri in enumerate(block.conn)]
        K = shell.stiffness(block.xyz, elements)
        clamped = select_nodes(block.xyz, [0, 0, -np.inf, np.inf, -np.inf, np.inf], inflate=1e-6)
        tip = select_nodes(block.xyz, [self.L, self.L, -np.inf, np.inf, -np.inf, np.inf],
                           inflate=1e-6)
        tip = tip[np.argsort(block.xyz[tip, 1])]
        assert tip.size == 3

        P = 1.0
        F = np.zeros(K.shape[0])
        for node, share in zip(tip, [0.25, 0.5, 0.25]):
            load = np.zeros(3)
            load[load_direction] = share * P
            add_nodal_load(F, int(node), load, 6)
        d, _, _ = solve_linear(K, F, DOF_3D_FRAME.fixed_dofs(clamped))
        return np.array([d[DOF_3D_FRAME.idx(int(n), load_direction)] for n in tip])

    def test_uniform_tension_is_exact(self):
        u = self._solve(load_direction=0)
        expected = self.L / (self.material.E * self.W * self.t)
        np.testing.assert_allclose(u, expected, rtol=1e-6)

    def test_bending_matches_beam_theory(self):
        w = self._solve(load_direction=2)
        EI = self.material.E * self.W * self.t ** 3 / 12.0
        expected = self.L ** 3 / (3.0 * EI)
        assert np.isclose(w.mean(), expected, rtol=0.05)
