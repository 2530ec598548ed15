# flexstruct/mesh.py
"""
MODEL-BUILDING HELPERS
======================

PURPOSE:
--------
The few geometry helpers the benchmark problems need:

- frame_member():  a straight member split into two-node elements
- merge_members(): glue several members into one mesh (coincident nodes merged)
- merge_nodes():   merge coincident nodes within a candidate set (closing a ring)
- t3_block():      a structured rectangle of three-node triangles
- select_nodes(), nearest_node(), boundary_nodes(): node selection

A mesh is just node coordinates plus connectivity; element objects
(BeamElement, ShellElement) are created from it by the benchmark modules.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mesh:
    """
    Node coordinates and element connectivity.

    Parameters:
    -----------
    xyz : np.ndarray
        Node coordinates, shape (n_nodes, 3)
    conn : np.ndarray
        Element connectivity, shape (n_elements, nodes_per_element)
    labels : np.ndarray
        Integer label per element (member or section group)
    """
    xyz: np.ndarray
    conn: np.ndarray
    labels: np.ndarray

    @property
    def n_nodes(self) -> int:
        return self.xyz.shape[0]

    @property
    def n_elements(self) -> int:
        return self.conn.shape[0]


def frame_member(xyz_ends, n: int, label: int = 0) -> Mesh:
    """
    Straight member from xyz_ends[0] to xyz_ends[1] split into n elements.

    Examples:
    ---------
    >>> m = frame_member([[0, 0, 0], [1, 0, 0]], 4)
    >>> m.n_nodes, m.n_elements
    (5, 4)
    """
    if n < 1:
        raise ValueError(f"A member needs at least one element, got n={n}")
    ends = np.asarray(xyz_ends, dtype=float).reshape(2, 3)
    s = np.linspace(0.0, 1.0, n + 1)[:, None]
    xyz = (1.0 - s) * ends[0] + s * ends[1]
    conn = np.column_stack([np.arange(n), np.arange(1, n + 1)])
    return Mesh(xyz=xyz, conn=conn, labels=np.full(n, label, dtype=int))


def _coincident_groups(xyz: np.ndarray, tolerance: float, candidates: np.ndarray) -> np.ndarray:
    """Representative node (smallest index) for every node; union-find over close pairs."""
    parent = np.arange(xyz.shape[0])

    def root(i):
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    tree = cKDTree(xyz[candidates])
    for a, b in tree.query_pairs(tolerance):
        ra, rb = root(candidates[a]), root(candidates[b])
        if ra != rb:
            parent[max(ra, rb)] = min(ra, rb)
    return np.array([root(i) for i in range(xyz.shape[0])])


def merge_nodes(
    mesh: Mesh,
    tolerance: float,
    candidates: Optional[Iterable[int]] = None
) -> Tuple[Mesh, np.ndarray]:
    """
    Merge nodes closer than `tolerance` and renumber the connectivity.

    Parameters:
    -----------
    mesh : Mesh
        Mesh to clean up
    tolerance : float
        Distance below which two nodes are the same node
    candidates : Iterable[int], optional
        Only these nodes are considered for merging (default: all nodes)

    Returns:
    --------
    merged : Mesh
        Mesh with unique nodes; nodes keep their relative order
    new_index : np.ndarray
        New node number of every old node
    """
    if candidates is None:
        candidates = np.arange(mesh.n_nodes)
    candidates = np.unique(np.asarray(list(candidates), dtype=int))

    representative = _coincident_groups(mesh.xyz, tolerance, candidates)
    kept = np.unique(representative)
    renumber = np.full(mesh.n_nodes, -1, dtype=int)
    renumber[kept] = np.arange(kept.size)
    new_index = renumber[representative]

    merged = Mesh(xyz=mesh.xyz[kept].copy(), conn=new_index[mesh.conn], labels=mesh.labels.copy())
    logger.debug("Merged %d nodes into %d", mesh.n_nodes, merged.n_nodes)
    return merged, new_index


def merge_members(members: Sequence[Mesh], tolerance: float) -> Tuple[Mesh, np.ndarray]:
    """
    Concatenate members into one mesh and glue their coincident nodes.

    Returns:
    --------
    mesh : Mesh
        The merged mesh; element labels are those of the members
    member_of_element : np.ndarray
        Index into `members` of the member each element came from
    """
    if not members:
        raise ValueError("No members to merge")
    xyz: List[np.ndarray] = []
    conn: List[np.ndarray] = []
    labels: List[np.ndarray] = []
    member_of_element: List[np.ndarray] = []
    offset = 0
    for k, m in enumerate(members):
        xyz.append(m.xyz)
        conn.append(m.conn + offset)
        labels.append(m.labels)
        member_of_element.append(np.full(m.n_elements, k, dtype=int))
        offset += m.n_nodes

    mesh = Mesh(xyz=np.vstack(xyz), conn=np.vstack(conn), labels=np.concatenate(labels))
    merged, _ = merge_nodes(mesh, tolerance)
    return merged, np.concatenate(member_of_element)


def t3_block(Lx: float, Ly: float, nx: int, ny: int, label: int = 0) -> Mesh:
    """
    Rectangle [0, Lx] × [0, Ly] in the xy plane meshed with 2·nx·ny triangles.

    Triangles are counter-clockwise about +z. Node (i, j) has number
    j·(nx + 1) + i.
    """
    x = np.linspace(0.0, Lx, nx + 1)
    y = np.linspace(0.0, Ly, ny + 1)
    X, Y = np.meshgrid(x, y)
    xyz = np.column_stack([X.ravel(), Y.ravel(), np.zeros(X.size)])

    conn = []
    for j in range(ny):
        for i in range(nx):
            n00 = j * (nx + 1) + i
            n10 = n00 + 1
            n01 = n00 + nx + 1
            n11 = n01 + 1
            conn.append((n00, n10, n11))
            conn.append((n00, n11, n01))
    conn = np.array(conn, dtype=int)
    return Mesh(xyz=xyz, conn=conn, labels=np.full(conn.shape[0], label, dtype=int))


def select_nodes(xyz: np.ndarray, box: Sequence[float], inflate: float = 0.0) -> np.ndarray:
    """
    Nodes inside a box [xmin, xmax, ymin, ymax, zmin, zmax] grown by `inflate`.

    Infinite bounds are allowed.
    """
    b = np.asarray(box, dtype=float).reshape(3, 2)
    lo = b[:, 0] - inflate
    hi = b[:, 1] + inflate
    inside = np.all((xyz >= lo) & (xyz <= hi), axis=1)
    return np.flatnonzero(inside)


def nearest_node(xyz: np.ndarray, point: Sequence[float]) -> int:
    """Index of the node closest to `point`."""
    d = np.linalg.norm(xyz - np.asarray(point, dtype=float), axis=1)
    return int(np.argmin(d))


def boundary_nodes(conn: np.ndarray) -> np.ndarray:
    """Nodes on the edges that belong to exactly one triangle."""
    edges = {}
    for tri in conn:
        for a, b in ((tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])):
            key = (min(a, b), max(a, b))
            edges[key] = edges.get(key, 0) + 1
    nodes = {n for key, count in edges.items() if count == 1 for n in key}
    return np.array(sorted(nodes), dtype=int)
