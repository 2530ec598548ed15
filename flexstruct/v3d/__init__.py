# flexstruct/v3d - 3D beam and shell elements
"""
V3D: 3D STRUCTURAL ELEMENTS
===========================

This package provides the element formulations used by the benchmarks:
- BeamElement: two-node 3D beam (12×12 matrices, 6 DOF/node), Timoshenko or
  Bernoulli, four mass matrix types, corotational geometric stiffness
- ShellElement: three-node flat facet (18×18 matrices, 6 DOF/node), CST
  membrane + DKT bending + drilling stabilization, lumped mass

Both work with the element-agnostic kernel for assembly and solving.

USAGE:
------
    from flexstruct.v3d import Material, CrossSectionRectangle, BeamElement
    from flexstruct.v3d import elements as beams
    from flexstruct.kernel import DOF_3D_FRAME, solve_linear

    steel = Material(E=200e9, nu=0.3, rho=7850.0)
    cs = CrossSectionRectangle(b=0.05, h=0.1, x1x2_vector=(0.0, 0.0, 1.0))
    bars = [BeamElement(id=0, ni=0, nj=1, section=cs, material=steel), ...]

    K = beams.stiffness(xyz, bars)                 # sparse, 6 DOF per node
    d, R, free = solve_linear(K, F, DOF_3D_FRAME.fixed_dofs([0]))
"""

from .model import (
    Material, CrossSectionRectangle, CrossSectionCircle, BeamElement, ShellElement
)
from .elements import (
    MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA,
    MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA,
    MASS_TYPE_LUMPED_DIAGONAL_NO_ROTATION_INERTIA,
    MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA,
    beam_global_stiffness, beam_global_mass, beam_geometric_stiffness,
)
from .shell import shell_global_stiffness, shell_lumped_mass
from .rotations import initial_rotation_field, update_rotation_field

__all__ = [
    'Material', 'CrossSectionRectangle', 'CrossSectionCircle', 'BeamElement', 'ShellElement',
    'MASS_TYPE_CONSISTENT_NO_ROTATION_INERTIA',
    'MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA',
    'MASS_TYPE_LUMPED_DIAGONAL_NO_ROTATION_INERTIA',
    'MASS_TYPE_LUMPED_DIAGONAL_WITH_ROTATION_INERTIA',
    'beam_global_stiffness', 'beam_global_mass', 'beam_geometric_stiffness',
    'shell_global_stiffness', 'shell_lumped_mass',
    'initial_rotation_field', 'update_rotation_field',
]
