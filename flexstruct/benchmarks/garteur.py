# flexstruct/benchmarks/garteur.py
"""
GARTEUR SM-AG19 TEST-BED: Geometry and Free Vibration
=====================================================

PURPOSE:
--------
The GARTEUR test-bed is a laboratory structure, built by ONERA, that
simulates the dynamics of an aeroplane: beams form a fuselage, wings and a
tail, and drums at the wing tips bring the bending and torsion frequencies
close together. Twelve European laboratories tested it in 1995-1997.

The model is assembled from many straight members (one frame_member per
part) that are glued together at coincident nodes. Section groups are
distinguished by their labels:

    1  body (fuselage)          7  connector wing - constraining plate
    2  wing beam                8  connector wing - drum (and tail)
    3  wing drums               9  connector body - wing
    4  tail, vertical part     10  connector body - tail
    5  tail, horizontal part   11  connector structure - sensors
    6  constraining plate

Connectors carry stiffness but no mass. All dimensions are multiples of the
characteristic length L = 0.1 m.

REFERENCES:
-----------
- Ground Vibration Test Techniques, compiled by A. Gravelle, GARTEUR SM-AG19
  Technical report TP-115, 1999.
- Balmes E., Wright J.R., GARTEUR group on ground vibration testing: results
  from the test of a single structure by 12 laboratories in Europe. DETC'97.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from ..kernel.modal import natural_frequencies
from ..mesh import Mesh, frame_member, merge_members
from ..units import phun
from ..v3d import elements as beams
from ..v3d.elements import MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA
from ..v3d.model import BeamElement, CrossSectionRectangle, Material

logger = logging.getLogger(__name__)

L = 0.1 * phun("m")
TOLERANCE = L / 10000

SECTIONS: Dict[int, CrossSectionRectangle] = {
    1: CrossSectionRectangle(1.5 * L, L / 2, (1.0, 0.0, 1.0), label=1),
    2: CrossSectionRectangle(L / 10, L, (0.0, 0.0, 1.0), label=2),
    3: CrossSectionRectangle(L / 10, L, (0.0, 0.0, 1.0), label=3),
    4: CrossSectionRectangle(L, L / 10, (1.0, 0.0, 1.0), label=4),
    5: CrossSectionRectangle(L / 10, L, (0.0, 0.0, 1.0), label=5),
    6: CrossSectionRectangle(L * (1.1 / 100), L * (76.2 / 100), (0.0, 0.0, 1.0), label=6),
    7: CrossSectionRectangle(L / 2, L / 2, (1.0, 0.0, 1.0), label=7),
    8: CrossSectionRectangle(L / 2, L / 2, (1.0, 0.0, 1.0), label=8),
    9: CrossSectionRectangle(L / 5, L, (0.0, 1.0, 0.0), label=9),
    10: CrossSectionRectangle(L, L / 3, (1.0, 0.0, 1.0), label=10),
    11: CrossSectionRectangle(L / 5, L / 5, (1.0, 0.0, 1.0), label=11),
}

SECTION_NAMES = {
    1: "body", 2: "wing", 3: "drum", 4: "tail vertical", 5: "tail horizontal",
    6: "constraining plate", 7: "connector wing-plate", 8: "connector wing-drum",
    9: "connector body-wing", 10: "connector body-tail", 11: "connector sensors",
}

CONNECTOR_LABELS = (7, 8, 9, 10, 11)

# Aluminium structure; connectors are massless
ALUMINIUM = Material(E=70000.0 * phun("MPa"), nu=0.31, rho=2700.0 * phun("kg/m^3"))
CONNECTOR = Material(E=70000.0 * phun("MPa"), nu=0.31, rho=0.0)

# Mass shift for the free-floating model (the first flexible modes are above 5 Hz)
SHIFT = (2.0 * np.pi * 0.5) ** 2


def _members(nc: int) -> List[Mesh]:
    def member(p, q, n, label):
        return frame_member(np.array([p, q], dtype=float) * L, n, label=label)

    m = []
    # Body
    m.append(member([-9, 0, 0], [-8.5, 0, 0], 1, 1))
    m.append(member([-8.5, 0, 0], [-8.0, 0, 0], 1, 1))
    m.append(member([-8.0, 0, 0], [-2.0, 0, 0], 2, 1))
    m.append(member([-2.0, 0, 0], [0, 0, 0], 1, 1))
    m.append(member([0, 0, 0], [6, 0, 0], 2, 1))

    # Wings
    for s in (1.0, -1.0):
        m.append(member([0, 0, 0.805], [0, s * 0.25, 0.805], 1, 2))
        m.append(member([0, s * 0.25, 0.805], [0, s * 8.5, 0.805], nc, 2))
        m.append(member([0, s * 8.5, 0.805], [0, s * 9.5, 0.805], 1, 2))
        m.append(member([0, s * 9.5, 0.805], [0, s * 10.0, 0.805], 1, 2))

    # Drums at the wing tips
    for s in (1.0, -1.0):
        m.append(member([0, s * 9.5, 0.91], [2, s * 9.5, 0.91], 1, 3))
        m.append(member([0, s * 9.5, 0.91], [-2, s * 9.5, 0.91], 1, 3))

    # Tail
    m.append(member([-8, 0, 0.75], [-8, 0, 3.35], 2, 4))
    m.append(member([-8, 0, 3.35], [-8, 0, 3.75], 2, 4))
    m.append(member([-8, 0, 3.8], [-8, 2, 3.8], 2, 5))
    m.append(member([-8, 0, 3.8], [-8, -2, 3.8], 2, 5))

    # Constraining plate on top of the viscoelastic tape
    for s in (1.0, -1.0):
        m.append(member([-0.119, 0, 0.8665], [-0.119, s * 0.25, 0.8665], 1, 6))
        m.append(member([-0.119, s * 0.25, 0.8665], [-0.119, s * 8.5, 0.8665], nc, 6))

    # Connectors: wing - drum, body - wing, body - tail, tail - tail drum
    for s in (1.0, -1.0):
        m.append(member([0, s * 9.5, 0.805], [0, s * 9.5, 0.91], 1, 8))
    for s in (1.0, -1.0):
        m.append(member([0, 0, 0], [0, s * 0.25, 0.805], 1, 9))
    m.append(member([-8, 0, 0], [-8, 0, 0.75], 1, 10))
    m.append(member([-8, 0, 3.75], [-8, 0, 3.8], 1, 8))

    # Connectors: wing - constraining plate
    m.append(member([0, 0, 0.805], [-0.119, 0, 0.8665], 1, 7))
    for i in range(nc + 1):
        y = 0.25 + i * 8.25 / nc
        for s in (1.0, -1.0):
            m.append(member([0, s * y, 0.805], [-0.119, s * y, 0.8665], 1, 7))

    # Sensor connectors on the tail and on the wing drums
    m.append(member([-8, 2, 3.8], [-153 / 20, 37 / 20, 3.85], 1, 11))
    m.append(member([-8, -2, 3.8], [-153 / 20, -37 / 20, 3.85], 1, 11))
    for s in (1.0, -1.0):
        m.append(member([0, s * 9.5, 0.91], [0, s * 9.8, 0.96], 1, 11))
        m.append(member([-2, s * 9.5, 0.91], [-1.8, s * 9.8, 0.96], 1, 11))
        m.append(member([2, s * 9.5, 0.91], [1.8, s * 9.8, 0.96], 1, 11))
    # Complementary masses on the drums
    for s in (1.0, -1.0):
        m.append(member([2, s * 9.5, 0.91], [1.8, s * 9.2, 0.96], 1, 11))
    return m


def build_geometry(nc: int = 8) -> Mesh:
    """
    Merged mesh of the test-bed.

    Parameters:
    -----------
    nc : int
        Number of intervals along the wing and the constraining plate between
        0.25·L and 8.5·L

    Returns:
    --------
    Mesh
        Element labels identify the section group (see SECTIONS)
    """
    members = _members(nc)
    mesh, _ = merge_members(members, TOLERANCE)
    logger.info("GARTEUR geometry: %d members, %d nodes, %d elements",
                len(members), mesh.n_nodes, mesh.n_elements)
    return mesh


def element_groups(mesh: Mesh) -> Dict[int, int]:
    """Number of elements in every labelled section group."""
    labels, counts = np.unique(mesh.labels, return_counts=True)
    return {int(k): int(c) for k, c in zip(labels, counts)}


@dataclass
class GarteurModel:
    mesh: Mesh
    elements: List[BeamElement]
    K: object
    M: object


def build_model(nc: int = 8) -> GarteurModel:
    """Beam model of the test-bed with massless connectors."""
    mesh = build_geometry(nc)
    elements = []
    for i, (c, label) in enumerate(zip(mesh.conn, mesh.labels)):
        material = CONNECTOR if label in CONNECTOR_LABELS else ALUMINIUM
        elements.append(BeamElement(id=i, ni=int(c[0]), nj=int(c[1]),
                                    section=SECTIONS[int(label)], material=material))
    K = beams.stiffness(mesh.xyz, elements)
    M = beams.mass(mesh.xyz, elements, MASS_TYPE_CONSISTENT_WITH_ROTATION_INERTIA)
    return GarteurModel(mesh, elements, K, M)


def modal(model: GarteurModel, n_modes: int = 20, shift: float = SHIFT):
    """
    Free-floating vibration of the test-bed.

    Returns:
    --------
    frequencies_hz, mode_shapes, free
        As natural_frequencies(); the first six frequencies are rigid-body modes
    """
    return natural_frequencies(model.K, model.M, fixed_dofs=[], n_modes=n_modes, shift=shift)
