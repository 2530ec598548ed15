# flexstruct/kernel/solve.py
"""Linear system solver with boundary conditions and mechanism detection."""

import logging
from typing import Iterable, Optional

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from ..config import CONFIG
from .assemble import reduce
from .dof import free_dofs

logger = logging.getLogger(__name__)


class MechanismError(RuntimeError):
    """Raised when structure is unstable or ill-conditioned."""
    pass


class ConvergenceError(RuntimeError):
    """Raised when iterative solution does not converge."""
    pass


def factorize(A):
    """
    Sparse LU factorization of a reduced (free-DOF) matrix.

    Returns a callable b -> A^{-1} b.

    Raises:
        MechanismError: If the matrix is exactly singular
    """
    try:
        lu = spla.splu(sp.csc_matrix(A))
    except RuntimeError as e:
        raise MechanismError(f"Singular system: {e}. Check supports.") from e
    return lu.solve


def solve_linear(
    K,
    F: np.ndarray,
    fixed_dofs: Iterable[int],
    cond_limit: Optional[float] = None
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Solve K·d = F with fixed boundary conditions via partitioning.

    Args:
        K: Global stiffness matrix (ndof x ndof), dense or sparse
        F: Global load vector (ndof,)
        fixed_dofs: Constrained DOF indices (displacement = 0)
        cond_limit: Max condition number (dense path) before raising MechanismError

    Returns:
        d: Displacement vector (ndof,)
        R: Reaction vector (ndof,)
        free: Array of free DOF indices

    Raises:
        MechanismError: If structure is unstable
        ValueError: If no DOF is free
    """
    if cond_limit is None:
        cond_limit = CONFIG.cond_limit
    ndof = K.shape[0]

    free = free_dofs(ndof, fixed_dofs)
    if free.size == 0:
        raise ValueError("No free DOFs - nothing to solve")

    Kff = reduce(K, free)
    Ff = F[free]

    if free.size <= CONFIG.dense_limit:
        Kff = Kff.toarray() if sp.issparse(Kff) else Kff
        cond = np.linalg.cond(Kff)
        if not np.isfinite(cond) or cond > cond_limit:
            raise MechanismError(
                f"Unstable system (cond={cond:.2e}). Check supports. Need cond < {cond_limit:.0e}."
            )
        df = np.linalg.solve(Kff, Ff)
    else:
        df = factorize(Kff)(Ff)
        if not np.all(np.isfinite(df)):
            raise MechanismError("Sparse solve produced non-finite displacements. Check supports.")

    logger.debug("Static solve: %d free of %d DOFs", free.size, ndof)

    d = np.zeros(ndof, dtype=float)
    d[free] = df

    # Reactions: R = K·d - F
    R = K @ d - F

    return d, R, free
