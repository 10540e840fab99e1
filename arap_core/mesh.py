# arap_core/mesh.py
"""
MESH DEFINITION: Rest-Pose Simplicial Mesh
==========================================

PURPOSE:
--------
This module defines the mesh the ARAP operators are built from:
- V: rest-pose vertex positions, shape (n, dim), dim ∈ {2, 3}
- F: simplices, shape (m, simplex_size), simplex_size ∈ {3, 4}

Triangles may live in 2D or 3D. Tetrahedra only make sense in 3D.

All validation happens once, in Mesh.from_arrays, so the assembly code can
trust the arrays it receives. Indices are stored 0-based; 1-based input is
converted on construction.

LOCAL EDGE TABLES:
------------------
Each simplex type has a fixed list of local edges, each paired with the
local edge (triangle: corner) it faces. The cotangent weight of an edge is
measured at its opposite feature:

    Triangle (0,1,2):   edge (1,2) ↔ corner 0
                        edge (2,0) ↔ corner 1
                        edge (0,1) ↔ corner 2

    Tetrahedron (0,1,2,3):  edge (0,1) ↔ edge (2,3)
                            edge (0,2) ↔ edge (3,1)
                            ...
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import Energy
from .kernel.errors import InvalidTopology, UnsupportedDimension, UnsupportedSimplexSize

SUPPORTED_DIMS = (2, 3)
SUPPORTED_SIMPLEX_SIZES = (3, 4)

# (edge, opposite corner) for triangles
TRI_EDGES = np.array([[1, 2], [2, 0], [0, 1]], dtype=np.int64)
TRI_OPPOSITE = np.array([0, 1, 2], dtype=np.int64)

# (edge, opposite edge) for tetrahedra
TET_EDGES = np.array([[0, 1], [0, 2], [0, 3], [1, 2], [1, 3], [2, 3]], dtype=np.int64)
TET_OPPOSITE = np.array([[2, 3], [3, 1], [1, 2], [0, 3], [2, 0], [0, 1]], dtype=np.int64)


@dataclass(frozen=True, eq=False)
class Mesh:
    """
    A triangle or tetrahedral mesh in its rest pose.

    Parameters:
    -----------
    V : np.ndarray
        Vertex positions, shape (n, dim), float64, read-only

    F : np.ndarray
        Simplex vertex indices, shape (m, simplex_size), int64, 0-based,
        read-only

    Examples:
    ---------
    >>> mesh = Mesh.from_arrays([[0, 0], [1, 0], [0, 1]], [[0, 1, 2]])
    >>> mesh.n_vertices, mesh.n_simplices, mesh.dim, mesh.simplex_size
    (3, 1, 2, 3)

    Notes:
    ------
    - Build with from_arrays, which validates; the raw constructor does not
    - frozen=True plus read-only arrays: the mesh cannot change after the
      operators are built from it
    """
    V: np.ndarray
    F: np.ndarray

    @classmethod
    def from_arrays(cls, V, F, index_base: int = 0) -> "Mesh":
        """
        Validate and copy V and F into a Mesh.

        Parameters:
        -----------
        V : array_like
            Vertex positions, shape (n, dim)
        F : array_like
            Simplices, shape (m, simplex_size)
        index_base : int
            0 if F is 0-based (default), 1 if F is 1-based

        Raises:
        -------
        UnsupportedSimplexSize
            If F does not have 3 or 4 columns
        UnsupportedDimension
            If V is not (n, 2) or (n, 3), or tetrahedra are given in 2D
        InvalidTopology
            If an index is non-integer or falls outside [0, n)
        """
        V = np.array(V, dtype=float)
        try:
            F = np.array(F)
        except ValueError as e:
            # ragged rows: triangles mixed with tetrahedra
            raise UnsupportedSimplexSize(
                "All simplices in F must have the same size (3 or 4 vertices)"
            ) from e

        if F.size == 0 and F.ndim == 1:
            F = F.reshape(0, 3)
        if F.ndim != 2 or F.shape[1] not in SUPPORTED_SIMPLEX_SIZES:
            raise UnsupportedSimplexSize(
                f"F must have 3 (triangles) or 4 (tetrahedra) columns, got shape {F.shape}"
            )
        simplex_size = F.shape[1]

        if V.ndim != 2 or V.shape[1] not in SUPPORTED_DIMS:
            raise UnsupportedDimension(f"V must have shape (n, 2) or (n, 3), got {V.shape}")
        if simplex_size == 4 and V.shape[1] != 3:
            raise UnsupportedDimension(
                f"Tetrahedral meshes need 3D vertex positions, got dim={V.shape[1]}"
            )

        if index_base not in (0, 1):
            raise InvalidTopology(f"index_base must be 0 or 1, got {index_base}")

        if F.size and not np.issubdtype(F.dtype, np.integer):
            if not np.all(np.isfinite(F)) or not np.all(F == np.round(F)):
                raise InvalidTopology("F contains non-integer vertex indices")
        F = F.astype(np.int64) - index_base

        n = V.shape[0]
        if F.size:
            bad = (F < 0) | (F >= n)
            if bad.any():
                row, col = np.argwhere(bad)[0]
                raise InvalidTopology(
                    f"Simplex {row} references vertex {F[row, col] + index_base}, "
                    f"outside the valid range for {n} vertices (index_base={index_base})"
                )

        V.setflags(write=False)
        F.setflags(write=False)
        return cls(V=V, F=F)

    @property
    def n_vertices(self) -> int:
        return self.V.shape[0]

    @property
    def n_simplices(self) -> int:
        return self.F.shape[0]

    @property
    def dim(self) -> int:
        return self.V.shape[1]

    @property
    def simplex_size(self) -> int:
        return self.F.shape[1]

    def frame_count(self, energy: Energy) -> int:
        """Number of rotation frames nr the energy needs on this mesh."""
        return Energy.parse(energy).frame_count(self.n_vertices, self.n_simplices)

    @property
    def is_tetrahedral(self) -> bool:
        return self.simplex_size == 4

    def local_edges(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Local edge table and the opposite feature of each edge.

        Returns:
        --------
        (edges, opposite) : Tuple[np.ndarray, np.ndarray]
            edges: shape (n_edges, 2) local vertex pairs
            opposite: shape (n_edges,) opposite corner for triangles,
            shape (n_edges, 2) opposite edge for tetrahedra
        """
        if self.is_tetrahedral:
            return TET_EDGES, TET_OPPOSITE
        return TRI_EDGES, TRI_OPPOSITE

    def edge_vertices(self) -> np.ndarray:
        """
        Global vertex indices of every (simplex, local edge) pair.

        Returns:
        --------
        np.ndarray
            Shape (m, n_edges, 2); entry [f, e] = (j, k) for edge e of simplex f
        """
        edges, _ = self.local_edges()
        return self.F[:, edges]
