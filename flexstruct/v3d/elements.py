# flexstruct/v3d/elements.py
"""
3D BEAM ELEMENT: Stiffness, Mass and Geometric Stiffness
========================================================

PURPOSE:
--------
This module computes the 12×12 element matrices of a two-node 3D beam with
six DOFs per node, and assembles them into sparse global matrices:

    stiffness()     elastic stiffness K (Timoshenko or Bernoulli)
    mass()          mass M, consistent or lumped, with or without rotary inertia
    geostiffness()  geometric (initial stress) stiffness Kg for a given state

LOCAL FRAME:
------------
    e1 = (xj - xi) / L
    e2 = part of the section's x1x2_vector orthogonal to e1, normalized
    e3 = e1 × e2

F = [e1; e2; e3] (rows) maps global vector components to local ones, and the
12×12 transformation is T = diag(F, F, F, F). Element matrices are formed in
local coordinates and rotated:

    k_global = Tᵀ × k_local × T

LOCAL DOF ORDER:
----------------
    [u1, v1, w1, θx1, θy1, θz1, u2, v2, w2, θx2, θy2, θz2]

u along x1 (axial), v along x2, w along x3. Bending in the x1-x2 plane (v, θz)
uses I3; bending in the x1-x3 plane (w, θy) uses I2.

GEOMETRIC STIFFNESS:
--------------------
The geometric stiffness follows the corotational description of the beam:
the element deformation d_l(u) (elongation and local end rotations, measured
in a frame that follows the element) is a nonlinear function of the global
displacements u. For internal forces f_l the internal virtual work is f_l·d_l,
and its Hessian at the undeformed geometry

    Kg = ∂²(f_l · d_l) / ∂u²

is the initial-stress stiffness. It contains the axial-force (string) terms
and the moment and torque terms that drive lateral-torsional buckling. The
Hessian is evaluated by central finite differences of the closed-form map
d_l(u).
"""

import logging
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from ..config import CONFIG
from ..kernel.assemble import assemble_global_K
from ..kernel.dof import DOF_3D_FRAME
from .model import BeamElement
from .rotations import rotation_from_vector, vector_from_rotation

logger = logging.getLogger(__name__)

MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA = 0
MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA = 1
MASS_TYPE_LUMPED_DIAGONAL_NO_ROTATION_INERTIA = 2
MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA = 3

MASS_TYPES = (
    MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA,
    MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA,
    MASS_TYPE_LUMPED_DIAGONAL_NO_ROTATION_INERTIA,
    MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA,
)


def beam_local_frame(xyz: np.ndarray, element: BeamElement) -> Tuple[float, np.ndarray]:
    """
    Length and local frame of a beam element.

    Parameters:
    -----------
    xyz : np.ndarray
        Node coordinates, shape (n_nodes, 3)
    element : BeamElement
        The beam element

    Returns:
    --------
    L : float
        Element length
    F : np.ndarray
        3×3 matrix with rows e1, e2, e3

    Raises:
    -------
    ValueError
        If the element has zero length, or its x1x2_vector is parallel to the axis
    """
    d = xyz[element.nj] - xyz[element.ni]
    L = float(np.linalg.norm(d))
    if L <= 0.0:
        raise ValueError(
            f"Element {element.id} has zero length (nodes {element.ni} and {element.nj} "
            f"at same location: {xyz[element.ni]})"
        )
    e1 = d / L

    v = np.asarray(element.section.x1x2_vector, dtype=float)
    e2 = v - np.dot(v, e1) * e1
    n2 = np.linalg.norm(e2)
    if n2 <= 1e-8 * np.linalg.norm(v):
        raise ValueError(
            f"Element {element.id}: x1x2_vector {tuple(v)} is parallel to the member axis"
        )
    e2 = e2 / n2
    e3 = np.cross(e1, e2)
    return L, np.vstack([e1, e2, e3])


def beam_transformation(F: np.ndarray) -> np.ndarray:
    """12×12 transform from global DOFs to local DOFs."""
    T = np.zeros((12, 12), dtype=float)
    for k in range(4):
        T[3 * k:3 * k + 3, 3 * k:3 * k + 3] = F
    return T


def _shear_parameter(EI: float, section, G: float, L: float) -> float:
    kappa = section.shear_correction
    if not np.isfinite(kappa):
        return 0.0
    return 12.0 * EI / (kappa * G * section.A * L * L)


def beam_local_stiffness(L: float, section, material) -> np.ndarray:
    """
    Local stiffness matrix in element coordinates.

    Shear deformation is included through Φ = 12EI/(κGAL²) for each bending
    plane; an infinite shear correction factor gives Φ = 0 (Bernoulli).
    """
    E, G = material.E, material.G
    A, J, _, I2, I3, _ = section.parameters()
    k = np.zeros((12, 12), dtype=float)

    # Axial
    EA_L = E * A / L
    for (a, b), s in zip([(0, 0), (0, 6), (6, 0), (6, 6)], [1, -1, -1, 1]):
        k[a, b] = s * EA_L

    # Torsion
    GJ_L = G * J / L
    for (a, b), s in zip([(3, 3), (3, 9), (9, 3), (9, 9)], [1, -1, -1, 1]):
        k[a, b] = s * GJ_L

    # Bending in the x1-x2 plane: DOFs v1, θz1, v2, θz2
    phi = _shear_parameter(E * I3, section, G, L)
    c = E * I3 / ((1.0 + phi) * L ** 3)
    kb = c * np.array([
        [12.0, 6 * L, -12.0, 6 * L],
        [6 * L, (4 + phi) * L * L, -6 * L, (2 - phi) * L * L],
        [-12.0, -6 * L, 12.0, -6 * L],
        [6 * L, (2 - phi) * L * L, -6 * L, (4 + phi) * L * L],
    ])
    idx = [1, 5, 7, 11]
    k[np.ix_(idx, idx)] += kb

    # Bending in the x1-x3 plane: DOFs w1, θy1, w2, θy2 (θy = -dw/dx)
    phi = _shear_parameter(E * I2, section, G, L)
    c = E * I2 / ((1.0 + phi) * L ** 3)
    kb = c * np.array([
        [12.0, -6 * L, -12.0, -6 * L],
        [-6 * L, (4 + phi) * L * L, 6 * L, (2 - phi) * L * L],
        [-12.0, 6 * L, 12.0, 6 * L],
        [-6 * L, (2 - phi) * L * L, 6 * L, (4 + phi) * L * L],
    ])
    idx = [2, 4, 8, 10]
    k[np.ix_(idx, idx)] += kb

    return k


def beam_global_stiffness(xyz: np.ndarray, element: BeamElement) -> np.ndarray:
    """12×12 elastic stiffness in global coordinates."""
    L, F = beam_local_frame(xyz, element)
    T = beam_transformation(F)
    return T.T @ beam_local_stiffness(L, element.section, element.material) @ T


def beam_local_mass(L: float, section, material, mass_type: int) -> np.ndarray:
    """
    Local mass matrix.

    Consistent types use the cubic (Hermitian) translational mass and the
    linear torsional inertia ρ·I1·L/6·[[2, 1], [1, 2]]; the WITH_ROTATION
    variant adds the rotary inertia of the bending rotations. Lumped types
    put ρAL/2 on each translation and, WITH_ROTATION, an isotropic rotary
    inertia ρ·L/2·(I1 + I2 + I3)/3 on each rotation, so that the matrix stays
    diagonal in any frame.
    """
    if mass_type not in MASS_TYPES:
        raise ValueError(f"Unknown mass type {mass_type}")

    rho = material.rho
    A, _, I1, I2, I3, _ = section.parameters()
    m = np.zeros((12, 12), dtype=float)
    rhoAL = rho * A * L

    if mass_type in (MASS_TYPE_LUMPED_DIAGONAL_NO_ROTATION_INERTIA,
                     MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA):
        for i in (0, 1, 2, 6, 7, 8):
            m[i, i] = rhoAL / 2.0
        if mass_type == MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA:
            rot = rho * L / 2.0 * (I1 + I2 + I3) / 3.0
            for i in (3, 4, 5, 9, 10, 11):
                m[i, i] = rot
        return m

    # Axial
    ma = rhoAL / 6.0 * np.array([[2.0, 1.0], [1.0, 2.0]])
    m[np.ix_([0, 6], [0, 6])] += ma

    # Torsion
    mt = rho * I1 * L / 6.0 * np.array([[2.0, 1.0], [1.0, 2.0]])
    m[np.ix_([3, 9], [3, 9])] += mt

    # Transverse, x1-x2 plane (v, θz)
    mb = rhoAL / 420.0 * np.array([
        [156.0, 22 * L, 54.0, -13 * L],
        [22 * L, 4 * L * L, 13 * L, -3 * L * L],
        [54.0, 13 * L, 156.0, -22 * L],
        [-13 * L, -3 * L * L, -22 * L, 4 * L * L],
    ])
    m[np.ix_([1, 5, 7, 11], [1, 5, 7, 11])] += mb

    # Transverse, x1-x3 plane (w, θy)
    mb = rhoAL / 420.0 * np.array([
        [156.0, -22 * L, 54.0, 13 * L],
        [-22 * L, 4 * L * L, -13 * L, -3 * L * L],
        [54.0, -13 * L, 156.0, 22 * L],
        [13 * L, -3 * L * L, 22 * L, 4 * L * L],
    ])
    m[np.ix_([2, 4, 8, 10], [2, 4, 8, 10])] += mb

    if mass_type == MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA:
        mr = rho * I3 / (30.0 * L) * np.array([
            [36.0, 3 * L, -36.0, 3 * L],
            [3 * L, 4 * L * L, -3 * L, -L * L],
            [-36.0, -3 * L, 36.0, -3 * L],
            [3 * L, -L * L, -3 * L, 4 * L * L],
        ])
        m[np.ix_([1, 5, 7, 11], [1, 5, 7, 11])] += mr
        mr = rho * I2 / (30.0 * L) * np.array([
            [36.0, -3 * L, -36.0, -3 * L],
            [-3 * L, 4 * L * L, 3 * L, -L * L],
            [-36.0, 3 * L, 36.0, 3 * L],
            [-3 * L, -L * L, 3 * L, 4 * L * L],
        ])
        m[np.ix_([2, 4, 8, 10], [2, 4, 8, 10])] += mr

    return m


def beam_global_mass(
    xyz: np.ndarray,
    element: BeamElement,
    mass_type: int = MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA
) -> np.ndarray:
    """12×12 mass matrix in global coordinates."""
    L, F = beam_local_frame(xyz, element)
    T = beam_transformation(F)
    return T.T @ beam_local_mass(L, element.section, element.material, mass_type) @ T


def beam_local_forces(xyz: np.ndarray, element: BeamElement, d: np.ndarray) -> np.ndarray:
    """
    End forces of the element in local coordinates.

    Parameters:
    -----------
    d : np.ndarray
        Global DOF vector (all nodes, 6 DOF per node)

    Returns:
    --------
    np.ndarray
        [N1, V2_1, V3_1, T1, M2_1, M3_1, N2, V2_2, V3_2, T2, M2_2, M3_2] acting on
        the element ends (the axial force in the member is f[6], tension positive)
    """
    L, F = beam_local_frame(xyz, element)
    T = beam_transformation(F)
    de = d[DOF_3D_FRAME.element_dof_map([element.ni, element.nj])]
    return beam_local_stiffness(L, element.section, element.material) @ (T @ de)


def _corotational_deformation(
    X1: np.ndarray, X2: np.ndarray, F0: np.ndarray, L0: float, u: np.ndarray
) -> np.ndarray:
    """
    Local deformation vector of a displaced element.

    The corotated frame has e1 along the current chord and e2 along the mean
    of the rotated initial e2 vectors of the two end triads. The returned
    12-vector has node 1 at the local origin, node 2 displaced axially by the
    elongation, and the end rotations measured relative to the corotated frame.
    """
    x1 = X1 + u[0:3]
    x2 = X2 + u[6:9]
    chord = x2 - x1
    l = np.linalg.norm(chord)
    e1 = chord / l

    R1 = rotation_from_vector(u[3:6])
    R2 = rotation_from_vector(u[9:12])
    q = 0.5 * (R1 @ F0[1] + R2 @ F0[1])
    e2 = q - np.dot(q, e1) * e1
    e2 = e2 / np.linalg.norm(e2)
    e3 = np.cross(e1, e2)
    Rr = np.column_stack([e1, e2, e3])

    C0 = F0.T
    dl = np.zeros(12)
    dl[3:6] = vector_from_rotation(Rr.T @ R1 @ C0)
    dl[6] = l - L0
    dl[9:12] = vector_from_rotation(Rr.T @ R2 @ C0)
    return dl


def beam_geometric_stiffness(
    xyz: np.ndarray,
    element: BeamElement,
    d: np.ndarray,
    step: Optional[float] = None
) -> np.ndarray:
    """
    12×12 geometric stiffness in global coordinates.

    Parameters:
    -----------
    xyz : np.ndarray
        Undeformed node coordinates
    element : BeamElement
        The beam element
    d : np.ndarray
        Global DOF vector of the prestressing (static) solution
    step : float, optional
        Relative finite-difference step (default CONFIG.hessian_step);
        translations are perturbed by step·L, rotations by step

    Returns:
    --------
    np.ndarray
        Symmetric 12×12 matrix Kg, linear in the internal forces produced by d
    """
    if step is None:
        step = CONFIG.hessian_step
    L0, F0 = beam_local_frame(xyz, element)
    fl = beam_local_forces(xyz, element, d)
    if not np.any(fl):
        return np.zeros((12, 12))

    X1 = xyz[element.ni].astype(float)
    X2 = xyz[element.nj].astype(float)

    h = np.array([step * L0] * 3 + [step] * 3 + [step * L0] * 3 + [step] * 3)

    def g(u):
        return float(fl @ _corotational_deformation(X1, X2, F0, L0, u))

    g0 = g(np.zeros(12))
    kg = np.zeros((12, 12), dtype=float)
    for i in range(12):
        ei = np.zeros(12)
        ei[i] = h[i]
        kg[i, i] = (g(2 * ei) - 2.0 * g0 + g(-2 * ei)) / (4.0 * h[i] * h[i])
        for j in range(i + 1, 12):
            ej = np.zeros(12)
            ej[j] = h[j]
            value = (g(ei + ej) - g(ei - ej) - g(-ei + ej) + g(-ei - ej)) / (4.0 * h[i] * h[j])
            kg[i, j] = value
            kg[j, i] = value
    return kg


def _contributions(elements: Iterable[BeamElement], matrix_func):
    for element in elements:
        dof_map = DOF_3D_FRAME.element_dof_map([element.ni, element.nj])
        yield dof_map, matrix_func(element)


def stiffness(xyz: np.ndarray, elements: Sequence[BeamElement]):
    """Global elastic stiffness (sparse) of a beam model."""
    ndof = DOF_3D_FRAME.ndof(xyz.shape[0])
    return assemble_global_K(ndof, _contributions(
        elements, lambda e: beam_global_stiffness(xyz, e)))


def mass(
    xyz: np.ndarray,
    elements: Sequence[BeamElement],
    mass_type: int = MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA
):
    """Global mass matrix (sparse) of a beam model."""
    ndof = DOF_3D_FRAME.ndof(xyz.shape[0])
    return assemble_global_K(ndof, _contributions(
        elements, lambda e: beam_global_mass(xyz, e, mass_type)))


def geostiffness(xyz: np.ndarray, elements: Sequence[BeamElement], d: np.ndarray):
    """Global geometric stiffness (sparse) for the internal forces of state d."""
    ndof = DOF_3D_FRAME.ndof(xyz.shape[0])
    logger.debug("Geometric stiffness of %d beam elements", len(elements))
    return assemble_global_K(ndof, _contributions(
        elements, lambda e: beam_geometric_stiffness(xyz, e, d)))
