# flexstruct/v3d/rotations.py
"""
Finite rotations of nodal triads.

Each node of a beam or shell model carries a rotation matrix R (3×3) that
maps the initial orientation of the node's triad to the current one. The
rotational DOFs of an increment are rotation vectors θ expressed in global
axes (spatial), and are composed from the left: R ← exp(θ̃)·R.
"""

import numpy as np
from scipy.spatial.transform import Rotation


def skew(v) -> np.ndarray:
    """Skew-symmetric matrix ṽ such that ṽ·a = v × a."""
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0],
    ], dtype=float)


def rotation_from_vector(theta) -> np.ndarray:
    """Rotation matrix exp(θ̃) of a rotation vector (Rodrigues formula)."""
    return Rotation.from_rotvec(np.asarray(theta, dtype=float)).as_matrix()


def vector_from_rotation(R: np.ndarray) -> np.ndarray:
    """Rotation vector θ with exp(θ̃) = R, |θ| ≤ π."""
    return Rotation.from_matrix(R).as_rotvec()


def initial_rotation_field(n_nodes: int) -> np.ndarray:
    """Identity triads for all nodes, shape (n_nodes, 3, 3)."""
    return np.tile(np.eye(3), (n_nodes, 1, 1))


def update_rotation_field(R: np.ndarray, d: np.ndarray, dof_per_node: int = 6) -> np.ndarray:
    """
    Compose incremental rotations into the nodal triads (in place).

    Parameters:
    -----------
    R : np.ndarray
        Rotation field, shape (n_nodes, 3, 3)
    d : np.ndarray
        Global DOF vector; entries 3:6 of every node are rotation vectors
    dof_per_node : int
        DOFs per node (6)

    Returns:
    --------
    np.ndarray
        The updated field R (same object)
    """
    n_nodes = R.shape[0]
    thetas = np.asarray(d, dtype=float).reshape(n_nodes, dof_per_node)[:, 3:6]
    R[:] = np.einsum('nij,njk->nik', Rotation.from_rotvec(thetas).as_matrix(), R)
    return R
