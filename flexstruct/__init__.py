# flexstruct - Beam and shell benchmarks for flexible structures
"""
FLEXSTRUCT: Benchmarks for Flexible Beam and Shell Structures
=============================================================

This package reproduces textbook benchmarks of flexible structures:
- static response of shells (twisted cantilever beam)
- vibration of prestressed frames and linearized buckling (Argyris frame)
- modal convergence studies with Richardson extrapolation (NAFEMS ring)
- free vibration of multi-member assemblies (GARTEUR test-bed)
- explicit transient dynamics of plates (NAFEMS FV12)

ARCHITECTURE:
-------------
    kernel/          Element-agnostic core (DOFs, assembly, static, modal,
                     buckling, explicit dynamics, extrapolation)
    v3d/             3D beam and T3 shell elements
    mesh.py          Frame members, merging, triangle blocks, node selection
    units.py         Unit conversion factors (phun)
    config.py        Solver settings (CONFIG)
    logging_config.py
    benchmarks/      The benchmark problems
"""

# Re-export kernel components for convenience
from .kernel import DOFManager, DOF_3D_FRAME, solve_linear, MechanismError, ConvergenceError
from .units import phun

__version__ = "0.1.0"
