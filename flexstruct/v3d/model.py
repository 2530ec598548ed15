# flexstruct/v3d/model.py
"""
3D MODEL DEFINITIONS: Materials, Cross Sections and Elements
============================================================

PURPOSE:
--------
This module defines the basic data structures for 3D beam and shell analysis:
- Material: isotropic linear elastic material with mass density
- CrossSectionRectangle / CrossSectionCircle: beam section properties
- BeamElement: two-node 3D beam (6 DOF per node)
- ShellElement: three-node flat shell facet (6 DOF per node)

Node coordinates are kept in a single (n_nodes, 3) array; elements refer to
rows of that array by index.

SECTION AXES:
-------------
Every beam carries a local frame (x1, x2, x3):
- x1 along the member axis, from node i to node j
- x2 set by the section's `x1x2_vector` (the part orthogonal to x1)
- x3 = x1 × x2

For a rectangle, `b` is the dimension along x2 and `h` along x3, so
I2 = b·h³/12 (bending about x2) and I3 = h·b³/12 (bending about x3).
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Material:
    """
    Isotropic linear elastic material.

    Parameters:
    -----------
    E : float
        Young's modulus (Pa)
    nu : float
        Poisson ratio
    rho : float
        Mass density (kg/m³); 0 for massless connectors

    Examples:
    ---------
    >>> steel = Material(E=200e9, nu=0.3, rho=8000.0)
    >>> round(steel.G / 1e9, 3)
    76.923
    """
    E: float
    nu: float
    rho: float = 0.0

    @property
    def G(self) -> float:
        """Shear modulus."""
        return self.E / (2.0 * (1.0 + self.nu))


@dataclass(frozen=True)
class CrossSectionRectangle:
    """
    Solid rectangular cross section.

    Parameters:
    -----------
    b : float
        Dimension along the local x2 axis
    h : float
        Dimension along the local x3 axis
    x1x2_vector : Tuple[float, float, float]
        Global vector in the x1-x2 plane that orients the section
    label : int
        Identifier used to group members (e.g. fuselage, wing, connector)
    shear_correction : float
        Timoshenko shear correction factor (5/6); float('inf') = Bernoulli
    """
    b: float
    h: float
    x1x2_vector: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    label: int = 0
    shear_correction: float = 5.0 / 6.0

    @property
    def A(self) -> float:
        return self.b * self.h

    @property
    def I2(self) -> float:
        """Second moment about x2 (bending in the x1-x3 plane)."""
        return self.b * self.h ** 3 / 12.0

    @property
    def I3(self) -> float:
        """Second moment about x3 (bending in the x1-x2 plane)."""
        return self.h * self.b ** 3 / 12.0

    @property
    def I1(self) -> float:
        """Polar second moment (rotary inertia about the axis)."""
        return self.I2 + self.I3

    @property
    def J(self) -> float:
        """
        Saint-Venant torsion constant.

        Approximation J = a·b³·(1/3 - 0.21·(b/a)·(1 - b⁴/(12a⁴))), a ≥ b.
        """
        a = max(self.b, self.h)
        t = min(self.b, self.h)
        return a * t ** 3 * (1.0 / 3.0 - 0.21 * (t / a) * (1.0 - t ** 4 / (12.0 * a ** 4)))

    def parameters(self):
        """(A, J, I1, I2, I3, x1x2_vector)"""
        return self.A, self.J, self.I1, self.I2, self.I3, np.asarray(self.x1x2_vector, dtype=float)


@dataclass(frozen=True)
class CrossSectionCircle:
    """
    Solid circular cross section.

    Parameters:
    -----------
    radius : float
        Section radius
    x1x2_vector : Tuple[float, float, float]
        Global vector in the x1-x2 plane (any vector not parallel to the axis)
    shear_correction : float
        Timoshenko shear correction factor (6/7 for a solid circle);
        float('inf') gives the shear-rigid Bernoulli model
    label : int
        Group identifier
    """
    radius: float
    x1x2_vector: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    shear_correction: float = float('inf')
    label: int = 0

    @property
    def A(self) -> float:
        return np.pi * self.radius ** 2

    @property
    def I2(self) -> float:
        return np.pi * self.radius ** 4 / 4.0

    @property
    def I3(self) -> float:
        return self.I2

    @property
    def I1(self) -> float:
        return self.I2 + self.I3

    @property
    def J(self) -> float:
        return self.I1

    def parameters(self):
        """(A, J, I1, I2, I3, x1x2_vector)"""
        return self.A, self.J, self.I1, self.I2, self.I3, np.asarray(self.x1x2_vector, dtype=float)


@dataclass(frozen=True)
class BeamElement:
    """
    A two-node 3D beam element.

    The element stiffness matrix is 12×12 (6 DOFs at each of 2 nodes):
        [ux_i, uy_i, uz_i, rx_i, ry_i, rz_i, ux_j, ..., rz_j]

    Parameters:
    -----------
    id : int
        Unique identifier for this element
    ni, nj : int
        Row indices of the end nodes in the coordinate array
    section : CrossSectionRectangle | CrossSectionCircle
        Cross-section properties and orientation
    material : Material
        Elastic properties and density
    """
    id: int
    ni: int
    nj: int
    section: object
    material: Material


@dataclass(frozen=True)
class ShellElement:
    """
    A three-node flat shell facet (membrane + plate bending).

    Parameters:
    -----------
    id : int
        Unique identifier for this element
    nodes : Tuple[int, int, int]
        Corner node indices, counter-clockwise about the facet normal
    thickness : float
        Shell thickness
    material : Material
        Elastic properties and density
    """
    id: int
    nodes: Tuple[int, int, int]
    thickness: float
    material: Material
