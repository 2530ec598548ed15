# tests/test_beam_elements.py
"""
3D BEAM ELEMENT TESTS
=====================

Checks the 12×12 element matrices against closed-form beam results:
- cantilever deflections (Bernoulli exact, Timoshenko adds the shear term)
- six rigid-body modes of a free element
- total mass for all four mass matrix types
- string terms of the geometric stiffness for an axially loaded element
"""

import numpy as np
import pytest

from flexstruct.kernel.assemble import add_nodal_load
from flexstruct.kernel.dof import DOF_3D_FRAME
from flexstruct.kernel.solve import solve_linear
from flexstruct.v3d import elements as beams
from flexstruct.v3d.elements import (
    MASS_TYPES,
    MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA,
    beam_geometric_stiffness,
    beam_global_mass,
    beam_global_stiffness,
    beam_local_frame,
)
from flexstruct.v3d.model import BeamElement, CrossSectionRectangle, Material
from flexstruct.v3d.rotations import (
    initial_rotation_field, rotation_from_vector, skew, update_rotation_field,
)

STEEL = Material(E=210e9, nu=0.3, rho=7850.0)


def _oblique_element(section):
    xyz = np.array([[0.1, -0.2, 0.3], [1.3, 0.7, 1.1]])
    return xyz, BeamElement(0, 0, 1, section, STEEL)


def _tip_deflection(section, load, n_elements, L=3.0):
    xyz = np.column_stack([np.linspace(0.0, L, n_elements + 1),
                           np.zeros(n_elements + 1), np.zeros(n_elements + 1)])
    elements = [BeamElement(i, i, i + 1, section, STEEL) for i in range(n_elements)]
    K = beams.stiffness(xyz, elements)
    F = np.zeros(K.shape[0])
    add_nodal_load(F, n_elements, load, 6)
    d, _, _ = solve_linear(K, F, DOF_3D_FRAME.fixed_dofs([0]))
    return d[6 * n_elements:6 * n_elements + 6]


class TestLocalFrame:
    def test_frame_is_orthonormal_and_follows_x1x2_vector(self):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz, element = _oblique_element(cs)
        L, F = beam_local_frame(xyz, element)
        assert np.isclose(L, np.linalg.norm(xyz[1] - xyz[0]))
        np.testing.assert_allclose(F @ F.T, np.eye(3), atol=1e-14)
        # e2 lies in the plane of e1 and the x1x2 vector
        assert np.isclose(np.dot(np.cross(F[0], [0.0, 0.0, 1.0]), F[1]), 0.0, atol=1e-14)
        assert np.dot(F[1], [0.0, 0.0, 1.0]) > 0.0

    def test_zero_length_raises(self):
        cs = CrossSectionRectangle(0.05, 0.1)
        xyz = np.array([[1.0, 1.0, 1.0], [1.0, 1.0, 1.0]])
        with pytest.raises(ValueError, match="zero length"):
            beam_local_frame(xyz, BeamElement(0, 0, 1, cs, STEEL))

    def test_parallel_orientation_vector_raises(self):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
        with pytest.raises(ValueError, match="parallel"):
            beam_local_frame(xyz, BeamElement(0, 0, 1, cs, STEEL))


class TestStiffness:
    def test_symmetric_with_six_rigid_body_modes(self):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz, element = _oblique_element(cs)
        k = beam_global_stiffness(xyz, element)
        np.testing.assert_allclose(k, k.T, rtol=0, atol=1e-6 * np.abs(k).max())
        w = np.linalg.eigvalsh(k)
        assert np.sum(np.abs(w) < 1e-9 * w.max()) == 6

    def test_rigid_rotation_produces_no_forces(self):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0), shear_correction=5 / 6)
        xyz, element = _oblique_element(cs)
        k = beam_global_stiffness(xyz, element)
        omega = np.array([0.3, -0.2, 0.5])
        u = np.concatenate([np.cross(omega, xyz[0]), omega, np.cross(omega, xyz[1]), omega])
        assert np.linalg.norm(k @ u) < 1e-9 * np.abs(k).max()

    @pytest.mark.parametrize("n_elements", [1, 4])
    def test_bernoulli_cantilever_is_exact(self, n_elements):
        L, P = 3.0, 1000.0
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 1.0, 0.0),
                                   shear_correction=float('inf'))
        # b along y, h along z: a load along z bends about the strong axis (I2)
        tip = _tip_deflection(cs, [0.0, 0.0, P], n_elements, L)
        assert np.isclose(tip[2], P * L ** 3 / (3 * STEEL.E * cs.I2), rtol=1e-7)
        assert np.isclose(tip[4], -P * L ** 2 / (2 * STEEL.E * cs.I2), rtol=1e-7)

        tip = _tip_deflection(cs, [0.0, P, 0.0], n_elements, L)
        assert np.isclose(tip[1], P * L ** 3 / (3 * STEEL.E * cs.I3), rtol=1e-7)
        assert np.isclose(tip[5], P * L ** 2 / (2 * STEEL.E * cs.I3), rtol=1e-7)

    def test_timoshenko_cantilever_adds_shear_deflection(self):
        L, P = 1.0, 1000.0
        cs = CrossSectionRectangle(0.1, 0.3, x1x2_vector=(0.0, 1.0, 0.0))
        tip = _tip_deflection(cs, [0.0, 0.0, P], 2, L)
        expected = P * L ** 3 / (3 * STEEL.E * cs.I2) + P * L / (cs.shear_correction * STEEL.G * cs.A)
        assert np.isclose(tip[2], expected, rtol=1e-7)

    def test_axial_and_torsion(self):
        L, P, T = 3.0, 5000.0, 200.0
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 1.0, 0.0))
        tip = _tip_deflection(cs, [P, 0.0, 0.0, T], 3, L)
        assert np.isclose(tip[0], P * L / (STEEL.E * cs.A), rtol=1e-7)
        assert np.isclose(tip[3], T * L / (STEEL.G * cs.J), rtol=1e-7)


class TestMass:
    @pytest.mark.parametrize("mass_type", MASS_TYPES)
    def test_total_translational_mass(self, mass_type):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz, element = _oblique_element(cs)
        L = np.linalg.norm(xyz[1] - xyz[0])
        m = beam_global_mass(xyz, element, mass_type)
        np.testing.assert_allclose(m, m.T, atol=1e-12 * np.abs(m).max())
        for direction in range(3):
            u = np.zeros(12)
            u[direction] = u[6 + direction] = 1.0
            assert np.isclose(u @ m @ u, STEEL.rho * cs.A * L, rtol=1e-12)

    def test_lumped_mass_is_diagonal_in_global_axes(self):
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz, element = _oblique_element(cs)
        m = beam_global_mass(xyz, element, MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA)
        off = m - np.diag(np.diag(m))
        assert np.abs(off).max() < 1e-12 * np.abs(m).max()
        assert np.all(np.diag(m) > 0.0)

    def test_unknown_mass_type_raises(self):
        cs = CrossSectionRectangle(0.05, 0.1)
        xyz, element = _oblique_element(cs)
        with pytest.raises(ValueError):
            beam_global_mass(xyz, element, 7)


class TestGeometricStiffness:
    def test_string_terms_of_axial_force(self):
        L, delta = 2.0, 1e-4
        cs = CrossSectionRectangle(0.05, 0.1, x1x2_vector=(0.0, 0.0, 1.0))
        xyz = np.array([[0.0, 0.0, 0.0], [L, 0.0, 0.0]])
        element = BeamElement(0, 0, 1, cs, STEEL)
        d = np.zeros(12)
        d[6] = delta
        N = STEEL.E * cs.A / L * delta

        kg = beam_geometric_stiffness(xyz, element, d)
        np.testing.assert_allclose(kg, kg.T, atol=1e-8 * N / L)
        assert np.isclose(kg[1, 1], N / L, rtol=1e-5)
        assert np.isclose(kg[2, 2], N / L, rtol=1e-5)
        assert np.isclose(kg[1, 7], -N / L, rtol=1e-5)
        assert abs(kg[0, 0]) < 1e-6 * N / L
        # No moments in the state: rotations carry no geometric stiffness
        assert np.abs(kg[3:6, 3:6]).max() < 1e-6 * N / L

    def test_zero_state_gives_zero_matrix(self):
        cs = CrossSectionRectangle(0.05, 0.1)
        xyz, element = _oblique_element(cs)
        kg = beam_geometric_stiffness(xyz, element, np.zeros(12))
        assert not np.any(kg)


class TestRotations:
    def test_skew_is_cross_product(self):
        a = np.array([0.3, -1.2, 2.0])
        b = np.array([1.5, 0.4, -0.7])
        np.testing.assert_allclose(skew(a) @ b, np.cross(a, b))

    def test_update_composes_spatial_rotations(self):
        R = initial_rotation_field(2)
        d = np.zeros(12)
        d[5] = np.pi / 2
        update_rotation_field(R, d)
        update_rotation_field(R, d)
        np.testing.assert_allclose(R[0], rotation_from_vector([0.0, 0.0, np.pi]), atol=1e-12)
        np.testing.assert_allclose(R[1], np.eye(3), atol=1e-15)
