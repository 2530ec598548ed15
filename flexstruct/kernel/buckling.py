# flexstruct/kernel/buckling.py
"""Prestress effects: vibration under load, linearized buckling, Euler loads."""

import logging
from typing import Iterable, Tuple

import numpy as np
import pandas as pd
import scipy.linalg
import scipy.sparse as sp
import scipy.sparse.linalg as spla
from tqdm import tqdm

from ..config import CONFIG
from .assemble import reduce
from .dof import free_dofs
from .modal import natural_frequencies
from .solve import ConvergenceError

logger = logging.getLogger(__name__)


def prestressed_frequencies(
    K,
    Kg,
    M,
    fixed_dofs: Iterable[int],
    load_factor: float,
    n_modes: int = 4,
    shift: float = 0.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Natural frequencies of the structure under a scaled prestress.

    Solves (K + λ·Kg)·φ = ω²·M·φ, where Kg is the geometric stiffness of the
    reference load and λ the loading factor.

    Returns:
        frequencies_hz, mode_shapes, free (see natural_frequencies)
    """
    return natural_frequencies(K + load_factor * Kg, M, fixed_dofs, n_modes, shift)


def frequency_sweep(
    K,
    Kg,
    M,
    fixed_dofs: Iterable[int],
    load_factors: Iterable[float],
    n_modes: int = 4,
    shift: float = 0.0,
    show_progress: bool = False
) -> pd.DataFrame:
    """
    Fundamental frequency as a function of the loading factor.

    Parameters:
    -----------
    K, Kg, M : matrices
        Elastic stiffness, geometric stiffness (reference load), mass
    fixed_dofs : Iterable[int]
        Constrained DOF indices
    load_factors : Iterable[float]
        Loading factors to evaluate (negative values reverse the load)
    n_modes : int
        Number of modes extracted at each step; the lowest is reported
    shift : float
        Mass shift (rad/s)²
    show_progress : bool
        Whether to show a progress bar

    Returns:
    --------
    pd.DataFrame
        Columns 'load_factor' and 'frequency_hz'. The frequency is 0 once the
        lowest eigenvalue is not positive (the structure has buckled).
    """
    fixed_dofs = list(fixed_dofs)
    load_factors = list(load_factors)
    iterator = tqdm(load_factors, desc="Load factors") if show_progress else load_factors

    rows = []
    for load_factor in iterator:
        frequencies, _, _ = prestressed_frequencies(
            K, Kg, M, fixed_dofs, load_factor, n_modes=n_modes, shift=shift
        )
        rows.append({'load_factor': float(load_factor), 'frequency_hz': float(frequencies[0])})

    logger.info("Frequency sweep over %d loading factors done", len(rows))
    return pd.DataFrame(rows, columns=['load_factor', 'frequency_hz'])


def critical_buckling_factors(
    K,
    Kg,
    fixed_dofs: Iterable[int],
    n_modes: int = 1
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Solve the linearized buckling problem (K + λ·Kg)·φ = 0.

    Args:
        K: Global elastic stiffness matrix
        Kg: Global geometric stiffness matrix for the reference load
        fixed_dofs: List of constrained DOF indices
        n_modes: How many factors to report on each side

    Returns:
        positive: Smallest positive factors, ascending (load as defined)
        negative: Negative factors closest to zero, descending (load reversed)
        Either array may be empty when no buckling mode exists on that side.
    """
    ndof = K.shape[0]
    free = free_dofs(ndof, fixed_dofs)
    if free.size == 0:
        return np.array([]), np.array([])

    Kff = reduce(K, free)
    Kgff = reduce(Kg, free)

    if free.size <= CONFIG.dense_limit:
        Kff = Kff.toarray() if sp.issparse(Kff) else np.asarray(Kff)
        Kgff = Kgff.toarray() if sp.issparse(Kgff) else np.asarray(Kgff)
        if np.allclose(Kgff, 0.0):
            return np.array([]), np.array([])
        # -Kg·φ = μ·K·φ with μ = 1/λ; K is positive definite on the free DOFs
        mu = scipy.linalg.eigh(-Kgff, Kff, eigvals_only=True)
    else:
        k = min(n_modes, free.size - 2)
        try:
            mu_top = spla.eigsh(-sp.csc_matrix(Kgff), k=k, M=sp.csc_matrix(Kff),
                                which='LA', return_eigenvectors=False,
                                maxiter=CONFIG.eigen_maxiter)
            mu_bottom = spla.eigsh(-sp.csc_matrix(Kgff), k=k, M=sp.csc_matrix(Kff),
                                   which='SA', return_eigenvectors=False,
                                   maxiter=CONFIG.eigen_maxiter)
        except spla.ArpackNoConvergence as e:
            raise ConvergenceError(f"Buckling eigenvalues did not converge: {e}") from e
        mu = np.concatenate([mu_top, mu_bottom])

    scale = np.max(np.abs(mu)) if mu.size else 0.0
    if scale == 0.0:
        return np.array([]), np.array([])
    significant = np.abs(mu) > 1e-10 * scale
    lam = 1.0 / mu[significant]

    positive = np.sort(lam[lam > 0])[:n_modes]
    negative = np.sort(lam[lam < 0])[::-1][:n_modes]
    return positive, negative


def euler_buckling_load(E: float, I: float, L: float, k: float = 1.0) -> float:
    """
    Euler critical buckling load for a column.

    P_cr = π²EI / (kL)²

    Args:
        E: Young's modulus
        I: Moment of inertia
        L: Member length
        k: Effective length factor (1.0 for pinned-pinned, 2.0 for a cantilever)

    Returns:
        Critical buckling load P_cr
    """
    Le = k * L
    return (np.pi ** 2 * E * I) / (Le ** 2)
