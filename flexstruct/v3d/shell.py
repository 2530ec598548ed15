# flexstruct/v3d/shell.py
"""
FLAT-FACET T3 SHELL: Membrane + Discrete Kirchhoff Bending
==========================================================

PURPOSE:
--------
This module computes the 18×18 stiffness matrix and the lumped mass of a
three-node flat shell facet with six DOFs per node, and assembles them into
global matrices. Curved shells (the twisted beam) are approximated by facets.

FORMULATION (in the facet's local frame):
-----------------------------------------
- Membrane: constant strain triangle (CST), plane stress.
- Bending: discrete Kirchhoff triangle (DKT). The slope field ψ = ∇w is
  interpolated quadratically from the corner slopes and from midside slopes;
  the Kirchhoff hypothesis is imposed at the midsides (tangential slope from
  the cubic edge deflection, normal slope linear along the edge), which
  expresses all six ψ values through the nine corner DOFs (w, θx, θy).
- Drilling: the rotation θz about the facet normal has no membrane stiffness
  of its own; it is tied to the in-plane rigid rotation of the facet
  ω = ½(∂v/∂x − ∂u/∂y) with a small penalty α·E·t·A.

LOCAL FRAME:
------------
    e1 = (p2 − p1)/|p2 − p1|,  e3 = facet normal,  e2 = e3 × e1

and per node the local DOFs are [u, v, w, θx, θy, θz]. With rotation vectors
θ, the plate slopes are ∂w/∂x = −θy and ∂w/∂y = θx.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..config import CONFIG
from ..kernel.assemble import assemble_global_K
from ..kernel.dof import DOF_3D_FRAME
from .model import ShellElement

logger = logging.getLogger(__name__)

# Midside node k of the quadratic slope field sits on edge _EDGES[k]
_EDGES = ((1, 2), (2, 0), (0, 1))

# Three-point rule at the edge midpoints (area coordinates), weight 1/3 each;
# exact for the quadratic integrand of the DKT stiffness
_GAUSS_POINTS = ((0.5, 0.5, 0.0), (0.0, 0.5, 0.5), (0.5, 0.0, 0.5))


def shell_local_frame(xyz: np.ndarray, element: ShellElement) -> Tuple[np.ndarray, np.ndarray, float]:
    """
    Local frame and in-plane coordinates of a facet.

    Returns:
    --------
    F : np.ndarray
        3×3 matrix with rows e1, e2, e3
    xy : np.ndarray
        Local 2D corner coordinates, shape (3, 2); corner 0 at the origin
    area : float
        Facet area

    Raises:
    -------
    ValueError
        If the triangle is degenerate (zero area)
    """
    p = xyz[list(element.nodes)].astype(float)
    a = p[1] - p[0]
    b = p[2] - p[0]
    normal = np.cross(a, b)
    twice_area = np.linalg.norm(normal)
    if twice_area <= 1e-12 * max(np.dot(a, a), np.dot(b, b)):
        raise ValueError(f"Shell element {element.id} is degenerate (nodes {element.nodes})")

    e1 = a / np.linalg.norm(a)
    e3 = normal / twice_area
    e2 = np.cross(e3, e1)
    F = np.vstack([e1, e2, e3])
    xy = (p - p[0]) @ F[:2].T
    return F, xy, 0.5 * twice_area


def _area_derivatives(xy: np.ndarray, area: float) -> Tuple[np.ndarray, np.ndarray]:
    """dL_i/dx and dL_i/dy of the area coordinates."""
    x, y = xy[:, 0], xy[:, 1]
    b = np.array([y[1] - y[2], y[2] - y[0], y[0] - y[1]])
    c = np.array([x[2] - x[1], x[0] - x[2], x[1] - x[0]])
    return b / (2.0 * area), c / (2.0 * area)


def membrane_stiffness(xy: np.ndarray, area: float, thickness: float, material) -> np.ndarray:
    """6×6 CST stiffness for DOFs [u1, v1, u2, v2, u3, v3]."""
    dLdx, dLdy = _area_derivatives(xy, area)
    B = np.zeros((3, 6))
    B[0, 0::2] = dLdx
    B[1, 1::2] = dLdy
    B[2, 0::2] = dLdy
    B[2, 1::2] = dLdx
    E, nu = material.E, material.nu
    D = E / (1.0 - nu * nu) * np.array([
        [1.0, nu, 0.0],
        [nu, 1.0, 0.0],
        [0.0, 0.0, (1.0 - nu) / 2.0],
    ])
    return thickness * area * B.T @ D @ B


def _midside_slope_map(xy: np.ndarray) -> np.ndarray:
    """
    12×9 map from corner DOFs [w, ψx, ψy]×3 to the six nodal slope vectors
    [ψx, ψy] of the quadratic field (corners 0-2, midsides 3-5).
    """
    T = np.zeros((12, 9))
    for a in range(3):
        T[2 * a, 3 * a + 1] = 1.0
        T[2 * a + 1, 3 * a + 2] = 1.0

    for k, (i, j) in enumerate(_EDGES):
        edge = xy[j] - xy[i]
        l = np.linalg.norm(edge)
        s = edge / l
        n = np.array([-s[1], s[0]])
        # ψ_mid = s·[3/(2l)·(wj − wi) − ¼(ψi + ψj)·s] + n·[½(ψi + ψj)·n]
        slope = -0.25 * np.outer(s, s) + 0.5 * np.outer(n, n)
        rows = slice(2 * (3 + k), 2 * (3 + k) + 2)
        T[rows, 3 * i] = -1.5 / l * s
        T[rows, 3 * j] = 1.5 / l * s
        T[rows, 3 * i + 1:3 * i + 3] = slope
        T[rows, 3 * j + 1:3 * j + 3] = slope
    return T


def _curvature_matrix(Lc, dLdx: np.ndarray, dLdy: np.ndarray) -> np.ndarray:
    """3×12 curvature matrix of the quadratic slope field at area coordinates Lc."""
    Lc = np.asarray(Lc, dtype=float)
    dNdx = np.zeros(6)
    dNdy = np.zeros(6)
    for a in range(3):
        dNdx[a] = (4.0 * Lc[a] - 1.0) * dLdx[a]
        dNdy[a] = (4.0 * Lc[a] - 1.0) * dLdy[a]
    for k, (i, j) in enumerate(_EDGES):
        dNdx[3 + k] = 4.0 * (Lc[i] * dLdx[j] + Lc[j] * dLdx[i])
        dNdy[3 + k] = 4.0 * (Lc[i] * dLdy[j] + Lc[j] * dLdy[i])

    B = np.zeros((3, 12))
    B[0, 0::2] = dNdx
    B[1, 1::2] = dNdy
    B[2, 0::2] = dNdy
    B[2, 1::2] = dNdx
    return B


def bending_stiffness(xy: np.ndarray, area: float, thickness: float, material) -> np.ndarray:
    """9×9 DKT stiffness for DOFs [w, θx, θy] at the three corners."""
    dLdx, dLdy = _area_derivatives(xy, area)
    T = _midside_slope_map(xy)

    # Corner slopes from rotations: ψx = -θy, ψy = θx
    C = np.zeros((9, 9))
    for a in range(3):
        C[3 * a, 3 * a] = 1.0
        C[3 * a + 1, 3 * a + 2] = -1.0
        C[3 * a + 2, 3 * a + 1] = 1.0

    E, nu = material.E, material.nu
    Db = E * thickness ** 3 / (12.0 * (1.0 - nu * nu)) * np.array([
        [1.0, nu, 0.0],
        [nu, 1.0, 0.0],
        [0.0, 0.0, (1.0 - nu) / 2.0],
    ])

    k = np.zeros((9, 9))
    for Lc in _GAUSS_POINTS:
        B = _curvature_matrix(Lc, dLdx, dLdy) @ T @ C
        k += (area / 3.0) * B.T @ Db @ B
    return k


def drilling_stiffness(xy: np.ndarray, area: float, thickness: float, material) -> np.ndarray:
    """
    9×9 drilling penalty for DOFs [u1, v1, u2, v2, u3, v3, θz1, θz2, θz3].

    Energy ½·k·Σ(θz_i − ω)², ω the in-plane rotation of the facet.
    """
    dLdx, dLdy = _area_derivatives(xy, area)
    omega = np.zeros(9)
    omega[0:6:2] = -0.5 * dLdy
    omega[1:6:2] = 0.5 * dLdx

    kd = CONFIG.drilling_factor * material.E * thickness * area
    k = np.zeros((9, 9))
    for a in range(3):
        g = -omega.copy()
        g[6 + a] += 1.0
        k += kd * np.outer(g, g)
    return k


def shell_local_stiffness(xy: np.ndarray, area: float, thickness: float, material) -> np.ndarray:
    """18×18 facet stiffness in local coordinates, node DOFs [u, v, w, θx, θy, θz]."""
    k = np.zeros((18, 18))

    km = membrane_stiffness(xy, area, thickness, material)
    im = [6 * a + d for a in range(3) for d in (0, 1)]
    k[np.ix_(im, im)] += km

    kb = bending_stiffness(xy, area, thickness, material)
    ib = [6 * a + d for a in range(3) for d in (2, 3, 4)]
    k[np.ix_(ib, ib)] += kb

    kd = drilling_stiffness(xy, area, thickness, material)
    idr = im + [6 * a + 5 for a in range(3)]
    k[np.ix_(idr, idr)] += kd
    return k


def shell_transformation(F: np.ndarray) -> np.ndarray:
    """18×18 transform from global DOFs to local DOFs."""
    T = np.zeros((18, 18))
    for k in range(6):
        T[3 * k:3 * k + 3, 3 * k:3 * k + 3] = F
    return T


def shell_global_stiffness(xyz: np.ndarray, element: ShellElement) -> np.ndarray:
    """18×18 facet stiffness in global coordinates."""
    F, xy, area = shell_local_frame(xyz, element)
    T = shell_transformation(F)
    k = shell_local_stiffness(xy, area, element.thickness, element.material)
    return T.T @ k @ T


def shell_lumped_mass(xyz: np.ndarray, element: ShellElement) -> np.ndarray:
    """
    Diagonal of the lumped facet mass (18 entries).

    Each corner receives one third of the translational mass ρtA and one third
    of the rotary inertia ρt³A/12, the same on all three axes, so the matrix is
    diagonal in global coordinates as well.
    """
    _, _, area = shell_local_frame(xyz, element)
    rho, t = element.material.rho, element.thickness
    translational = rho * t * area / 3.0
    rotational = rho * t ** 3 / 12.0 * area / 3.0
    return np.tile([translational] * 3 + [rotational] * 3, 3)


def stiffness(xyz: np.ndarray, elements: Sequence[ShellElement]):
    """Global stiffness (sparse) of a shell model."""
    ndof = DOF_3D_FRAME.ndof(xyz.shape[0])
    contributions = (
        (DOF_3D_FRAME.element_dof_map(e.nodes), shell_global_stiffness(xyz, e))
        for e in elements
    )
    logger.debug("Shell stiffness: %d facets, %d DOFs", len(elements), ndof)
    return assemble_global_K(ndof, contributions)


def mass(xyz: np.ndarray, elements: Sequence[ShellElement]) -> Tuple[np.ndarray, sp.csr_matrix]:
    """
    Global lumped mass of a shell model.

    Returns:
    --------
    M_diag : np.ndarray
        Diagonal of the global mass matrix
    M : scipy.sparse.csr_matrix
        The same as a sparse diagonal matrix
    """
    M_diag = np.zeros(DOF_3D_FRAME.ndof(xyz.shape[0]))
    for e in elements:
        np.add.at(M_diag, DOF_3D_FRAME.element_dof_map(e.nodes), shell_lumped_mass(xyz, e))
    return M_diag, sp.diags(M_diag).tocsr()
