# flexstruct/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Global numerical settings shared by the kernel and the elements."""

    # Largest number of free DOFs handled with dense LAPACK routines.
    # Above this the sparse LU / ARPACK paths are used.
    dense_limit: int = 600

    # Dense static solves: max condition number before MechanismError
    cond_limit: float = 1e14

    # ARPACK settings (eigsh)
    eigen_tol: float = 0.0  # 0 = machine precision
    eigen_maxiter: int = 2000
    ncv_factor: int = 3  # Lanczos basis size = ncv_factor * n_modes

    # Relative step for the finite-difference geometric stiffness
    hessian_step: float = 1e-4

    # Shell drilling stabilization (fraction of E*t*A)
    drilling_factor: float = 1e-4

    # Explicit dynamics: fraction of the critical time step 2/omega_max
    stable_step_factor: float = 0.99


# Global config instance
CONFIG = SolverConfig()
