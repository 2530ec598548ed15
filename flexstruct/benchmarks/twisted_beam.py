# flexstruct/benchmarks/twisted_beam.py
"""
TWISTED CANTILEVER BEAM (MacNeal-Harder)
========================================

PURPOSE:
--------
The initially twisted cantilever beam is a standard test of shell element
accuracy. The beam is clamped at one end and loaded by a unit in-plane or
out-of-plane force at the other. The centroidal axis is straight, while the
cross-sections twist about it from 0 at the clamped end to π/2 at the tip.

Reference deflections in the direction of the applied force:

    | Thickness   | Load along Z | Load along Y |
    | ----------- | ------------ | ------------ |
    | t = 0.32    | 0.005425     | 0.001753     |
    | t = 0.0032  | 0.005256     | 0.001294     |

REFERENCES:
-----------
- MacNeal R.H., Harder R.L., A proposed standard set of problems to test
  finite element accuracy. Finite Elements in Analysis and Design 11 (1985) 3-20.
- Zupan D., Saje M., On "A proposed standard set of problems to test finite
  element accuracy": the twisted beam. FEAD 40 (2004) 1445-1451.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..kernel.assemble import add_nodal_load
from ..kernel.dof import DOF_3D_FRAME
from ..kernel.solve import solve_linear
from ..mesh import Mesh, select_nodes, t3_block
from ..v3d import shell
from ..v3d.model import Material, ShellElement

logger = logging.getLogger(__name__)

E = 0.29e8
NU = 0.22
WIDTH = 1.1
LENGTH = 12.0


@dataclass(frozen=True)
class TwistedBeamCase:
    """Thickness, tip force, load direction (0=X, 1=Y, 2=Z) and reference deflection."""
    name: str
    thickness: float
    force: float
    direction: int
    reference: float


THICKER_DIR_3 = TwistedBeamCase("t=0.32, load Z", 0.32, 1.0, 2, 0.005424534868469)
THICKER_DIR_2 = TwistedBeamCase("t=0.32, load Y", 0.32, 1.0, 1, 0.001753248285256)
THINNER_DIR_3 = TwistedBeamCase("t=0.0032, load Z", 0.0032, 1.0e-6, 2, 0.005256)
THINNER_DIR_2 = TwistedBeamCase("t=0.0032, load Y", 0.0032, 1.0e-6, 1, 0.001294)

CASES = (THICKER_DIR_3, THICKER_DIR_2, THINNER_DIR_3, THINNER_DIR_2)


@dataclass(frozen=True)
class TwistedBeamResult:
    case: TwistedBeamCase
    deflection: float
    n_nodes: int
    n_elements: int

    @property
    def ratio(self) -> float:
        """Computed over reference deflection."""
        return self.deflection / self.case.reference

    @property
    def percent(self) -> float:
        return 100.0 * self.ratio


def twisted_mesh(nL: int = 48, nW: int = 8) -> Mesh:
    """
    Flat strip [0, L] × [0, W] twisted about the x axis.

    A section at x is rotated by a = x/L·π/2 about the centroidal axis, which
    ends up along the x axis (y measured from the strip centreline).
    """
    flat = t3_block(LENGTH, WIDTH, nL, nW)
    xyz = flat.xyz.copy()
    a = xyz[:, 0] / LENGTH * (np.pi / 2.0)
    y = xyz[:, 1] - WIDTH / 2.0
    z = xyz[:, 2]
    xyz[:, 1] = y * np.cos(a) - z * np.sin(a)
    xyz[:, 2] = y * np.sin(a) + z * np.cos(a)
    return Mesh(xyz=xyz, conn=flat.conn, labels=flat.labels)


def solve(params: TwistedBeamCase = THICKER_DIR_3, nL: int = 48, nW: int = 8) -> TwistedBeamResult:
    """
    Static deflection of the twisted beam at the loaded tip.

    Parameters:
    -----------
    params : TwistedBeamCase
        One of THICKER_DIR_3, THICKER_DIR_2, THINNER_DIR_3, THINNER_DIR_2
    nL, nW : int
        Number of element intervals along the length and across the width

    Returns:
    --------
    TwistedBeamResult
    """
    mesh = twisted_mesh(nL, nW)
    material = Material(E=E, nu=NU)
    elements = [
        ShellElement(id=i, nodes=tuple(int(n) for n in tri), thickness=params.thickness,
                     material=material)
        for i, tri in enumerate(mesh.conn)
    ]

    tolerance = min(WIDTH / nW, LENGTH / nL) / 100.0
    clamped = select_nodes(mesh.xyz, [0, 0, -np.inf, np.inf, -np.inf, np.inf], inflate=tolerance)
    fixed = DOF_3D_FRAME.fixed_dofs(clamped)

    tip = select_nodes(mesh.xyz, [LENGTH, LENGTH, 0, 0, 0, 0], inflate=tolerance)
    if tip.size != 1:
        raise ValueError(f"Expected one loaded node on the beam axis, found {tip.size}")
    tip = int(tip[0])

    K = shell.stiffness(mesh.xyz, elements)
    ndof = DOF_3D_FRAME.ndof(mesh.n_nodes)
    F = np.zeros(ndof)
    load = np.zeros(6)
    load[params.direction] = params.force
    add_nodal_load(F, tip, load, DOF_3D_FRAME.dof_per_node)

    d, _, _ = solve_linear(K, F, fixed)
    deflection = float(d[DOF_3D_FRAME.idx(tip, params.direction)])

    result = TwistedBeamResult(params, deflection, mesh.n_nodes, mesh.n_elements)
    logger.info("Twisted beam %s: %.6e (%.2f%% of reference)", params.name, deflection, result.percent)
    return result
