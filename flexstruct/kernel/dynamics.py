# flexstruct/kernel/dynamics.py
"""
EXPLICIT DYNAMICS: Central Difference Time Integration
======================================================

PURPOSE:
--------
Integrate M·ü + K·u = F(t) in time with a lumped (diagonal) mass matrix.
With a diagonal M the acceleration update needs no factorization, only a
division by the nodal masses, so every step costs one sparse matrix-vector
product.

ALGORITHM (velocity form of the central difference method):
------------------------------------------------------------
    U1 = U0 + dt·V0 + dt²/2·A0
    A1 = M⁻¹·(F − K·U1)
    V1 = V0 + dt/2·(A0 + A1)

STABILITY:
----------
The scheme is conditionally stable: dt < 2/ω_max, where ω_max is the highest
natural circular frequency of the discrete model. stable_time_step() computes
ω_max with a single extreme-eigenvalue solve and applies a safety factor.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import numpy as np

from ..config import CONFIG
from .assemble import reduce
from .modal import largest_eigenvalue

logger = logging.getLogger(__name__)


@dataclass
class TransientResult:
    """
    Output of central_difference().

    times : np.ndarray
        Time instants 0, dt, ..., nsteps·dt
    monitor : np.ndarray
        Displacement histories, shape (nsteps + 1, len(monitor_dofs))
    snapshots : List[np.ndarray]
        Full displacement vectors saved every `save_every` steps
    U, V : np.ndarray
        Final displacement and velocity (full length)
    """
    times: np.ndarray
    monitor: np.ndarray
    snapshots: List[np.ndarray] = field(default_factory=list)
    U: Optional[np.ndarray] = None
    V: Optional[np.ndarray] = None


def stable_time_step(K, M_diag: np.ndarray, free: np.ndarray, factor: Optional[float] = None) -> float:
    """
    Stable time step for central difference integration: factor · 2/ω_max.

    Args:
        K: Global stiffness matrix
        M_diag: Diagonal of the lumped global mass matrix
        free: Free DOF indices
        factor: Safety factor (default CONFIG.stable_step_factor)
    """
    if factor is None:
        factor = CONFIG.stable_step_factor
    omega_max = np.sqrt(largest_eigenvalue(K, M_diag, free))
    dt = factor * 2.0 / omega_max
    logger.info("omega_max = %.6e rad/s, stable time step = %.6e s", omega_max, dt)
    return float(dt)


def central_difference(
    K,
    M_diag: np.ndarray,
    free: np.ndarray,
    U0: np.ndarray,
    V0: np.ndarray,
    dt: float,
    nsteps: int,
    F: Optional[np.ndarray] = None,
    monitor_dofs: Iterable[int] = (),
    save_every: int = 0
) -> TransientResult:
    """
    Integrate the free DOFs over nsteps steps of size dt.

    Parameters:
    -----------
    K : matrix
        Global stiffness matrix (ndof x ndof)
    M_diag : np.ndarray
        Diagonal of the lumped global mass matrix (ndof,)
    free : np.ndarray
        Free DOF indices; fixed DOFs stay at zero
    U0, V0 : np.ndarray
        Initial displacement and velocity (ndof,)
    dt : float
        Time step
    nsteps : int
        Number of steps
    F : np.ndarray, optional
        Constant external load (ndof,); zero if omitted
    monitor_dofs : Iterable[int]
        Global DOFs whose displacement history is recorded at every step
    save_every : int
        Store the full displacement vector every this many steps (0 = never)

    Returns:
    --------
    TransientResult

    Raises:
    -------
    ValueError
        If a free DOF carries no mass
    """
    ndof = K.shape[0]
    m = np.asarray(M_diag, dtype=float)[free]
    if np.any(m <= 0.0):
        raise ValueError("Lumped mass has non-positive entries on free DOFs")
    invm = 1.0 / m

    Kff = reduce(K, free)
    Ff = np.zeros(free.size) if F is None else np.asarray(F, dtype=float)[free]

    U = np.asarray(U0, dtype=float)[free].copy()
    V = np.asarray(V0, dtype=float)[free].copy()
    A = invm * (Ff - Kff @ U)

    monitor_dofs = list(monitor_dofs)
    position = {int(g): i for i, g in enumerate(free)}
    monitor_idx = [position.get(int(g)) for g in monitor_dofs]
    monitor = np.zeros((nsteps + 1, len(monitor_dofs)))

    def record(step):
        for j, i in enumerate(monitor_idx):
            monitor[step, j] = U[i] if i is not None else 0.0

    def full(Uf):
        u = np.zeros(ndof)
        u[free] = Uf
        return u

    snapshots = []
    record(0)
    for step in range(1, nsteps + 1):
        U = U + dt * V + (dt * dt / 2.0) * A
        A1 = invm * (Ff - Kff @ U)
        V = V + (dt / 2.0) * (A + A1)
        A = A1
        record(step)
        if save_every and step % save_every == 0:
            snapshots.append(full(U))

    logger.info("Central difference: %d steps of %.3e s", nsteps, dt)
    return TransientResult(
        times=dt * np.arange(nsteps + 1),
        monitor=monitor,
        snapshots=snapshots,
        U=full(U),
        V=full(V),
    )
