# flexstruct/kernel - Element-agnostic structural analysis core
"""
KERNEL: THE ELEMENT-AGNOSTIC FOUNDATION
=======================================

This package contains the core numerical machinery shared by every benchmark:
beams and shells alike.

Assembly and solving don't care about element formulations. They just need:
- A way to map (node_id, local_dof) → global_dof_index
- Element matrices (any size)
- Fixed DOF lists
- Load vectors

    dof.py            DOF numbering and support partitioning
    assemble.py       Sparse scatter-add assembly
    solve.py          Static solve, MechanismError / ConvergenceError
    modal.py          Natural frequencies (with mass shift for free structures)
    buckling.py       Prestressed vibration, linearized buckling
    dynamics.py       Explicit central difference integration
    extrapolation.py  Richardson extrapolation of convergence studies
"""

from .dof import DOFManager, DOF_3D_FRAME, free_dofs
from .solve import solve_linear, MechanismError, ConvergenceError
from .modal import natural_frequencies, fundamental_frequency
from .buckling import frequency_sweep, critical_buckling_factors
from .dynamics import central_difference, stable_time_step, TransientResult
from .extrapolation import richardson_extrapolate

__all__ = [
    'DOFManager', 'DOF_3D_FRAME', 'free_dofs',
    'solve_linear', 'MechanismError', 'ConvergenceError',
    'natural_frequencies', 'fundamental_frequency',
    'frequency_sweep', 'critical_buckling_factors',
    'central_difference', 'stable_time_step', 'TransientResult',
    'richardson_extrapolate',
]
