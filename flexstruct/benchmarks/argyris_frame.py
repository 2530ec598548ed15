# flexstruct/benchmarks/argyris_frame.py
"""
ARGYRIS FRAME: Vibration of a Prestressed L-Frame
=================================================

PURPOSE:
--------
A right-angle frame of thin rectangular strips is clamped at one end and
loaded by an in-plane force at the other. The load stresses the frame, and
the geometric stiffness of that stress changes the vibration frequencies.
As the loading factor approaches a critical value the fundamental frequency
drops to zero: the frame buckles out of its plane (lateral-torsional).

    clamp (0, 0, L) ──────────── (L, 0, L)
                                     │
                                     │
                                     ● (L, 0, 0)  ← force -P·x̂

The frequency is tracked over a range of loading factors in both senses of
the load, the same way as in the reference study.

REFERENCE:
----------
Argyris J.H. et al., On large displacement-small strain analysis of
structures with rotational degrees of freedom. CMAME 14 (1978) 401-451.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np
import pandas as pd

from ..kernel.assemble import add_nodal_load
from ..kernel.buckling import critical_buckling_factors, frequency_sweep
from ..kernel.dof import DOF_3D_FRAME
from ..kernel.solve import solve_linear
from ..mesh import Mesh, frame_member, merge_members, select_nodes
from ..units import phun
from ..v3d import elements as beams
from ..v3d.model import BeamElement, CrossSectionRectangle, Material
from ..v3d.rotations import (
    initial_rotation_field, update_rotation_field, vector_from_rotation,
)

logger = logging.getLogger(__name__)

E = 71240.0 * phun("MPa")
NU = 0.31
RHO = 5000.0 * phun("kg/m^3")
B = 0.6 * phun("mm")
H = 30.0 * phun("mm")
L = 240.0 * phun("mm")
MAGNITUDE = 1e-5 * phun("N")

# Loading factor ranges of the reference sweep
POSITIVE_RANGE = (0.0, 68000.0)
NEGATIVE_RANGE = (-109000.0, 0.0)
N_MODES = 4


@dataclass
class ArgyrisFrameModel:
    """
    Discrete model of the frame.

    K, M, Kg are sparse global matrices; Kg is the geometric stiffness of
    the reference load (loading factor 1). `d` is the static solution under
    that load and `rotations` the nodal triads it produces. The reference
    load is small enough that Kg is evaluated on the undeformed geometry.
    """
    mesh: Mesh
    elements: List[BeamElement]
    K: object
    M: object
    Kg: object
    fixed: List[int]
    tip: int
    d: np.ndarray
    rotations: np.ndarray


def build(n: int = 8) -> ArgyrisFrameModel:
    """
    Assemble K, M and Kg of the frame with n elements per member.
    """
    section = CrossSectionRectangle(b=B, h=H, x1x2_vector=(0.0, 1.0, 0.0))
    material = Material(E=E, nu=NU, rho=RHO)

    mesh, _ = merge_members([
        frame_member([[0, 0, L], [L, 0, L]], n),
        frame_member([[L, 0, L], [L, 0, 0]], n),
    ], tolerance=L / 10000)
    elements = [
        BeamElement(id=i, ni=int(c[0]), nj=int(c[1]), section=section, material=material)
        for i, c in enumerate(mesh.conn)
    ]

    clamped = select_nodes(mesh.xyz, [0, 0, 0, 0, L, L], inflate=L / 10000)
    fixed = DOF_3D_FRAME.fixed_dofs(clamped)
    tip = int(select_nodes(mesh.xyz, [L, L, 0, 0, 0, 0], inflate=L / n / 1000)[0])

    K = beams.stiffness(mesh.xyz, elements)
    M = beams.mass(mesh.xyz, elements)

    F = np.zeros(DOF_3D_FRAME.ndof(mesh.n_nodes))
    add_nodal_load(F, tip, [-MAGNITUDE, 0, 0, 0, 0, 0], DOF_3D_FRAME.dof_per_node)
    d, _, _ = solve_linear(K, F, fixed)

    Kg = beams.geostiffness(mesh.xyz, elements, d)
    rotations = update_rotation_field(initial_rotation_field(mesh.n_nodes), d)
    logger.info("Argyris frame: %d nodes, %d elements, tip rotation %.3e rad", mesh.n_nodes,
                len(elements), np.linalg.norm(vector_from_rotation(rotations[tip])))
    return ArgyrisFrameModel(mesh, elements, K, M, Kg, fixed, tip, d, rotations)


def sweep(
    model: ArgyrisFrameModel,
    load_factors: Iterable[float],
    n_modes: int = N_MODES,
    show_progress: bool = False
) -> pd.DataFrame:
    """Fundamental frequency for each loading factor (DataFrame)."""
    return frequency_sweep(model.K, model.Kg, model.M, model.fixed, load_factors,
                           n_modes=n_modes, show_progress=show_progress)


def reference_load_factors(n_points: int = 400) -> np.ndarray:
    """Loading factors of the reference study: negative range, then positive range."""
    return np.concatenate([
        np.linspace(NEGATIVE_RANGE[0], NEGATIVE_RANGE[1], n_points),
        np.linspace(POSITIVE_RANGE[0], POSITIVE_RANGE[1], n_points),
    ])


def buckling_factors(model: ArgyrisFrameModel, n_modes: int = 1):
    """
    Critical loading factors of the frame.

    Returns:
    --------
    positive, negative : np.ndarray
        Critical factors for the load as applied and for the reversed load
    """
    return critical_buckling_factors(model.K, model.Kg, model.fixed, n_modes=n_modes)
