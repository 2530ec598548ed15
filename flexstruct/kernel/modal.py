# flexstruct/kernel/modal.py
"""
Modal analysis: natural frequencies and mode shapes.

The generalized eigenproblem K·φ = ω²·M·φ is solved on the free DOFs. Two
features of the benchmark models shape the implementation:

- Free-floating structures (the NAFEMS ring, the free plate, the GARTEUR
  test-bed) have a singular K. A mass shift s is applied: the problem
  (K + s·M)·φ = (ω² + s)·M·φ is solved and s is subtracted afterwards.
- M may be only semi-definite (lumped masses without rotation inertia,
  massless connectors), so the dense path solves the reciprocal problem
  M·φ = μ·(K + s·M)·φ, where massless DOFs simply give μ = 0.
"""

import logging
from typing import Iterable, Tuple

import numpy as np
import scipy.linalg
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from ..config import CONFIG
from .assemble import reduce
from .dof import free_dofs
from .solve import ConvergenceError, MechanismError

logger = logging.getLogger(__name__)


def _dense(A) -> np.ndarray:
    return A.toarray() if sp.issparse(A) else np.asarray(A, dtype=float)


def _dense_eigen(Kff, Mff, n_modes: int, shift: float) -> Tuple[np.ndarray, np.ndarray]:
    Kff = _dense(Kff)
    Mff = _dense(Mff)
    n = Kff.shape[0]
    A = Kff + shift * Mff
    try:
        # eigh returns mu in ascending order; the largest mu are the lowest modes
        mu, vecs = scipy.linalg.eigh(Mff, A)
        mu = mu[::-1][:n_modes]
        vecs = vecs[:, ::-1][:, :n_modes]
        eigenvalues = np.full(mu.shape, np.inf)
        positive = mu > 0.0
        eigenvalues[positive] = 1.0 / mu[positive] - shift
    except np.linalg.LinAlgError:
        # K + s·M is not positive definite (prestress beyond a buckling load):
        # fall back to the general algorithm and keep the finite eigenvalues
        logger.debug("Shifted stiffness indefinite, using general eigensolver (n=%d)", n)
        w, v = scipy.linalg.eig(Kff, Mff)
        finite = np.isfinite(w)
        w = np.real(w[finite])
        v = np.real(v[:, finite])
        order = np.argsort(w)[:n_modes]
        eigenvalues = w[order]
        vecs = v[:, order]
    return eigenvalues, vecs


def _sparse_eigen(Kff, Mff, n_modes: int, shift: float) -> Tuple[np.ndarray, np.ndarray]:
    n = Kff.shape[0]
    ncv = min(n - 1, max(CONFIG.ncv_factor * n_modes, n_modes + 20))
    try:
        w, v = spla.eigsh(
            sp.csc_matrix(Kff), k=n_modes, M=sp.csc_matrix(Mff), sigma=-shift,
            which='LM', ncv=ncv, maxiter=CONFIG.eigen_maxiter, tol=CONFIG.eigen_tol,
        )
    except spla.ArpackNoConvergence as e:
        raise ConvergenceError(f"Eigenvalue iteration did not converge: {e}") from e
    except RuntimeError as e:
        raise MechanismError(
            f"Shifted stiffness K + {shift:g}·M is singular ({e}). "
            "Free-floating structures need a positive mass shift."
        ) from e
    order = np.argsort(w)
    return w[order], v[:, order]


def eigen_problem(
    K,
    M,
    fixed_dofs: Iterable[int],
    n_modes: int = 5,
    shift: float = 0.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Lowest eigenvalues ω² of K·φ = ω²·M·φ on the free DOFs.

    Args:
        K: Global stiffness matrix (dense or sparse)
        M: Global mass matrix (dense or sparse), positive semi-definite
        fixed_dofs: Constrained DOF indices
        n_modes: Number of modes to return
        shift: Mass shift (rad/s)², required for free-floating structures

    Returns:
        eigenvalues: ω² in ascending order
        mode_shapes: (n_free x n_modes), mass normalized where the modal mass is positive
        free: Free DOF indices

    Raises:
        ValueError: If no DOF is free
        MechanismError: If K + shift·M is singular
        ConvergenceError: If ARPACK fails to converge
    """
    ndof = K.shape[0]
    free = free_dofs(ndof, fixed_dofs)
    if free.size == 0:
        raise ValueError("No free DOFs - cannot compute modes")

    Kff = reduce(K, free)
    Mff = reduce(M, free)
    n_actual = min(n_modes, free.size)

    if free.size <= CONFIG.dense_limit or n_actual >= free.size - 1:
        logger.debug("Dense eigen solve: %d free DOFs, %d modes", free.size, n_actual)
        eigenvalues, vecs = _dense_eigen(Kff, Mff, n_actual, shift)
    else:
        logger.debug("Sparse shift-invert eigen solve: %d free DOFs, %d modes, shift %g",
                     free.size, n_actual, shift)
        eigenvalues, vecs = _sparse_eigen(Kff, Mff, n_actual, shift)

    # Mass normalization
    modal_mass = np.einsum('ij,ij->j', vecs, Mff @ vecs)
    scale = np.ones_like(modal_mass)
    positive = modal_mass > 0.0
    scale[positive] = 1.0 / np.sqrt(modal_mass[positive])
    vecs = vecs * scale

    return eigenvalues, vecs, free


def frequencies_from_eigenvalues(eigenvalues: np.ndarray) -> np.ndarray:
    """f = sqrt(ω²)/2π in Hz; non-positive ω² (rigid-body noise, instability) give 0."""
    omega = np.sqrt(np.maximum(np.real(eigenvalues), 0.0))
    return omega / (2.0 * np.pi)


def natural_frequencies(
    K,
    M,
    fixed_dofs: Iterable[int],
    n_modes: int = 5,
    shift: float = 0.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute natural frequencies and mode shapes.

    Args:
        K: Global stiffness matrix
        M: Global mass matrix
        fixed_dofs: Constrained DOF indices
        n_modes: Number of modes to return
        shift: Mass shift (rad/s)² for free-floating structures

    Returns:
        frequencies_hz: Natural frequencies in Hz, sorted ascending
        mode_shapes: Mode shape matrix (n_free_dofs x n_modes)
        free: Free DOF indices (rows of mode_shapes)
    """
    eigenvalues, vecs, free = eigen_problem(K, M, fixed_dofs, n_modes, shift)
    return frequencies_from_eigenvalues(eigenvalues), vecs, free


def fundamental_frequency(K, M, fixed_dofs: Iterable[int], shift: float = 0.0) -> float:
    """Lowest natural frequency in Hz (0 when the lowest ω² is not positive)."""
    frequencies, _, _ = natural_frequencies(K, M, fixed_dofs, n_modes=1, shift=shift)
    return float(frequencies[0])


def largest_eigenvalue(K, M_diag: np.ndarray, free: np.ndarray) -> float:
    """
    Largest ω² of K·φ = ω²·M·φ for a diagonal (lumped) mass matrix.

    Used to bound the stable time step of explicit integration.

    Raises:
        ValueError: If a free DOF has no mass
    """
    m = np.asarray(M_diag, dtype=float)[free]
    if np.any(m <= 0.0):
        raise ValueError("Lumped mass has non-positive entries on free DOFs")

    d = 1.0 / np.sqrt(m)
    Kff = reduce(K, free)
    if sp.issparse(Kff):
        A = sp.diags(d) @ Kff @ sp.diags(d)
    else:
        A = d[:, None] * Kff * d[None, :]

    if free.size <= CONFIG.dense_limit:
        return float(scipy.linalg.eigvalsh(_dense(A))[-1])
    try:
        w = spla.eigsh(sp.csr_matrix(A), k=1, which='LA', return_eigenvectors=False,
                       maxiter=CONFIG.eigen_maxiter)
    except spla.ArpackNoConvergence as e:
        raise ConvergenceError(f"Largest eigenvalue did not converge: {e}") from e
    return float(w[0])


def effective_modal_mass(
    mode_shapes: np.ndarray,
    M,
    free: np.ndarray,
    direction: int = 2,
    dof_per_node: int = 6
) -> np.ndarray:
    """
    Compute effective modal mass for each mode.

    Effective mass indicates what amount of the total mass is mobilized by each
    mode for a unit rigid translation in `direction` (0=X, 1=Y, 2=Z).

    Args:
        mode_shapes: Mode shape matrix (n_free x n_modes)
        M: Full mass matrix
        free: Free DOF indices
        direction: Translation direction
        dof_per_node: DOFs per node

    Returns:
        eff_mass: Effective mass for each mode
    """
    Mff = reduce(M, free)
    r = (np.asarray(free) % dof_per_node == direction).astype(float)

    Mphi = Mff @ mode_shapes
    m_star = np.einsum('ij,ij->j', mode_shapes, Mphi)
    L = r @ Mphi

    eff_mass = np.zeros(mode_shapes.shape[1])
    positive = m_star > 0
    eff_mass[positive] = L[positive] ** 2 / m_star[positive]
    return eff_mass
