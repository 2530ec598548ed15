# flexstruct/kernel/dof.py
"""
DOF MANAGER: Degree of Freedom Indexing for Beams and Shells
============================================================

PURPOSE:
--------
This module handles the mapping from (node_id, local_dof) to global DOF indices,
and the partition of the global DOFs into fixed (supported) and free sets.

Both element families in this package carry the same six DOFs per node:

    Beam (2 nodes):   ux, uy, uz, rx, ry, rz at each end
    Shell T3 (3 nodes): ux, uy, uz, rx, ry, rz at each corner

so a single DOFManager(dof_per_node=6) serves every benchmark.

USAGE:
------
    dof = DOFManager(dof_per_node=6)

    # Global index for node 2, rotation about y
    dof.idx(node_id=2, local_dof=4)     # → 16

    # Clamp nodes 0 and 7 (all six DOFs)
    fixed = dof.fixed_dofs([0, 7])

    # Pin node 3 (translations only)
    fixed += dof.fixed_dofs([3], local_dofs=[0, 1, 2])
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np


@dataclass
class DOFManager:
    """
    Manages degree-of-freedom indexing for structural analysis.

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (6 for beams and shells: ux, uy, uz, rx, ry, rz)

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=6)
    >>> dof.idx(1, 0)
    6
    >>> dof.ndof(4)
    24
    """
    dof_per_node: int

    def idx(self, node_id: int, local_dof: int) -> int:
        """
        Get the global DOF index for a node's local DOF.

        Parameters:
        -----------
        node_id : int
            The node identifier (0-indexed)
        local_dof : int
            0=ux, 1=uy, 2=uz, 3=rx, 4=ry, 5=rz

        Returns:
        --------
        int
            Global DOF index in the system matrices
        """
        return self.dof_per_node * node_id + local_dof

    def ndof(self, n_nodes: int) -> int:
        """Total number of DOFs for a model with n_nodes."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        Get all global DOF indices for a single node.

        Examples:
        ---------
        >>> DOFManager(dof_per_node=6).node_dofs(1)
        [6, 7, 8, 9, 10, 11]
        """
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: Iterable[int]) -> List[int]:
        """
        Get the DOF map for an element connecting several nodes.

        The result is the flattened list of the nodes' global DOFs, in node
        order. It is used to scatter element matrices into global matrices.

        Examples:
        ---------
        >>> DOFManager(dof_per_node=6).element_dof_map([0, 2])
        [0, 1, 2, 3, 4, 5, 12, 13, 14, 15, 16, 17]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(int(node_id)))
        return result

    def fixed_dofs(
        self,
        node_ids: Iterable[int],
        local_dofs: Optional[Iterable[int]] = None
    ) -> List[int]:
        """
        Global indices of the DOFs to be held at zero.

        Parameters:
        -----------
        node_ids : Iterable[int]
            Supported nodes
        local_dofs : Iterable[int], optional
            Which local DOFs are restrained at each node (default: all of them,
            i.e. a clamp)

        Returns:
        --------
        List[int]
            Global DOF indices, in node order
        """
        if local_dofs is None:
            local_dofs = range(self.dof_per_node)
        local_dofs = list(local_dofs)
        for d in local_dofs:
            if not 0 <= d < self.dof_per_node:
                raise ValueError(
                    f"Local DOF {d} out of range for {self.dof_per_node} DOF per node"
                )
        return [self.idx(int(n), d) for n in node_ids for d in local_dofs]


def free_dofs(ndof: int, fixed_dofs: Iterable[int]) -> np.ndarray:
    """Sorted array of the DOFs that are not fixed."""
    mask = np.ones(ndof, dtype=bool)
    fixed = np.asarray(sorted(set(int(i) for i in fixed_dofs)), dtype=int)
    if fixed.size:
        mask[fixed] = False
    return np.flatnonzero(mask)


DOF_3D_FRAME = DOFManager(dof_per_node=6)   # ux, uy, uz, rx, ry, rz
