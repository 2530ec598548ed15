# flexstruct/kernel/assemble.py
"""
ASSEMBLY: Sparse Global Matrix Assembly
=======================================

PURPOSE:
--------
This module handles the assembly of element contributions into global matrices.
This is the scatter-add operation that builds K, M, Kg and F from element data.

Assembly doesn't care about element TYPE. It just needs:
- Total number of DOFs
- For each element: its DOF map and its matrix (12×12 beam, 18×18 shell)

The benchmark meshes reach tens of thousands of DOFs (the NAFEMS plate), so the
global matrices are built in COO form and converted to CSR. Duplicate (i, j)
entries from neighbouring elements are summed by the conversion, which is
exactly the scatter-add.

USAGE:
------
    contributions = []
    for element in elements:
        dof_map = dof.element_dof_map([element.ni, element.nj])
        ke = beam_global_stiffness(xyz, element)
        contributions.append((dof_map, ke))

    K = assemble_global_K(ndof, contributions)
"""

import logging
from typing import Iterable, List, Tuple

import numpy as np
import scipy.sparse as sp

logger = logging.getLogger(__name__)


def assemble_global_K(
    ndof: int,
    contributions: Iterable[Tuple[List[int], np.ndarray]]
) -> sp.csr_matrix:
    """
    Assemble a global square matrix from element contributions.

    Used for stiffness, mass and geometric stiffness alike.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system
    contributions : Iterable[Tuple[List[int], np.ndarray]]
        (dof_map, ke) pairs; ke must be square with len(dof_map) rows

    Returns:
    --------
    scipy.sparse.csr_matrix
        Global matrix, shape (ndof, ndof)

    Raises:
    -------
    ValueError
        If an element matrix does not match its DOF map
    """
    rows = []
    cols = []
    vals = []
    n_elements = 0

    for dof_map, ke in contributions:
        dof_map = np.asarray(dof_map, dtype=int)
        n = dof_map.size
        if ke.shape != (n, n):
            raise ValueError(
                f"Element matrix shape {ke.shape} doesn't match dof_map length {n}"
            )
        rows.append(np.repeat(dof_map, n))
        cols.append(np.tile(dof_map, n))
        vals.append(np.asarray(ke, dtype=float).ravel())
        n_elements += 1

    if n_elements == 0:
        return sp.csr_matrix((ndof, ndof), dtype=float)

    A = sp.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), np.concatenate(cols))),
        shape=(ndof, ndof),
    ).tocsr()
    A.sum_duplicates()
    logger.debug("Assembled %d element matrices into %dx%d (nnz=%d)",
                 n_elements, ndof, ndof, A.nnz)
    return A


def assemble_global_F(
    ndof: int,
    contributions: Iterable[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble global load vector from element contributions.

    Same scatter-add logic as assemble_global_K, but for vectors.
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        dof_map = np.asarray(dof_map, dtype=int)
        if fe.shape != (dof_map.size,):
            raise ValueError(
                f"Element vector shape {fe.shape} doesn't match dof_map length {dof_map.size}"
            )
        np.add.at(F, dof_map, fe)

    return F


def add_nodal_load(
    F: np.ndarray,
    node_id: int,
    load_vector,
    dof_per_node: int
) -> None:
    """
    Add a nodal load to the global load vector (in-place).

    load_vector holds [Fx, Fy, Fz, Mx, My, Mz] (or a leading subset of it).

    Example:
    --------
    >>> F = np.zeros(12)
    >>> add_nodal_load(F, node_id=1, load_vector=[0, 0, -1.0], dof_per_node=6)
    >>> F[8]
    -1.0
    """
    base_dof = dof_per_node * node_id
    for i, val in enumerate(load_vector):
        F[base_dof + i] += val


def reduce(A, free: np.ndarray):
    """Rows and columns of A belonging to the free DOFs."""
    if sp.issparse(A):
        A = A.tocsr()
        return A[free][:, free]
    return A[np.ix_(free, free)]
