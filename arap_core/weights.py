# arap_core/weights.py
"""
EDGE WEIGHTS: Cotangent Weights per Simplex
===========================================

PURPOSE:
--------
This module computes the per-simplex edge weights c_f(j,k) that every ARAP
energy is built from. The total weight of an undirected edge is the sum over
the simplices that contain it:

    w_ij = Σ_f c_f(i,j)

GEOMETRY:
---------
Triangle (2D or 3D), edge (j,k) opposite corner a:

    c_f(j,k) = ½ cot(α_a)        cot α = (u·v) / |u × v|,  u = Vj - Va, v = Vk - Va

Summed over the two triangles sharing an edge this is the classic
½(cot α + cot β) weight of Pinkall & Polthier / Sorkine & Alexa.

Tetrahedron, edge (j,k) opposite edge (l,m):

    c_f(j,k) = (1/6) |Vl - Vm| cot(θ_lm)

where θ_lm is the interior dihedral angle at the opposite edge, i.e. the
angle between the half-planes (l,m,j) and (l,m,k). We measure it by
projecting Vj - Vl and Vk - Vl onto the plane orthogonal to the edge:

    p = u - (u·ê)ê,  q = v - (v·ê)ê,   cot θ = (p·q) / |p × q|

This keeps the sign right without relying on face orientation.

Both formulas can be negative for obtuse angles; that is correct and kept.
"""

import logging
from typing import Tuple

import numpy as np
import scipy.sparse as sp

from .config import Weighting
from .kernel.assemble import assemble_sparse
from .kernel.errors import DegenerateSimplex
from .mesh import TET_EDGES, TET_OPPOSITE, Mesh

logger = logging.getLogger(__name__)

# Relative tolerance on |u × v| below which a simplex counts as degenerate
DEGENERATE_TOL = 1e-14


def _cross_norm(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Row-wise |u × v| for 2D or 3D vectors."""
    if u.shape[-1] == 2:
        return np.abs(u[..., 0] * v[..., 1] - u[..., 1] * v[..., 0])
    return np.linalg.norm(np.cross(u, v), axis=-1)


def _cot(u: np.ndarray, v: np.ndarray, what: str) -> np.ndarray:
    """
    Row-wise cotangent of the angle between u and v.

    Raises DegenerateSimplex if any pair is (numerically) parallel.
    """
    dot = np.einsum('...i,...i->...', u, v)
    cross = _cross_norm(u, v)
    scale = np.linalg.norm(u, axis=-1) * np.linalg.norm(v, axis=-1)

    bad = ~(cross > DEGENERATE_TOL * scale)
    if bad.any():
        f = int(np.argwhere(bad)[0][0])
        raise DegenerateSimplex(
            f"Simplex {f} is degenerate ({what} has zero measure); cotangent weight undefined"
        )
    return dot / cross


def triangle_cotangent_weights(V: np.ndarray, F: np.ndarray) -> np.ndarray:
    """
    Half-cotangent weights of the three edges of every triangle.

    Parameters:
    -----------
    V : np.ndarray
        Vertex positions, shape (n, 2) or (n, 3)
    F : np.ndarray
        Triangles, shape (m, 3)

    Returns:
    --------
    np.ndarray
        Shape (m, 3); column e is the weight of local edge e of TRI_EDGES,
        i.e. edges (1,2), (2,0), (0,1)

    Example:
    --------
    >>> V = np.array([[0., 0.], [1., 0.], [0., 1.]])
    >>> triangle_cotangent_weights(V, np.array([[0, 1, 2]]))
    array([[0. , 0.5, 0.5]])
    """
    C = np.zeros((F.shape[0], 3))
    for e in range(3):
        a, j, k = F[:, e], F[:, (e + 1) % 3], F[:, (e + 2) % 3]
        u = V[j] - V[a]
        v = V[k] - V[a]
        C[:, e] = 0.5 * _cot(u, v, "triangle")
    return C


def tetrahedron_cotangent_weights(V: np.ndarray, F: np.ndarray) -> np.ndarray:
    """
    Cotangent weights of the six edges of every tetrahedron.

    Parameters:
    -----------
    V : np.ndarray
        Vertex positions, shape (n, 3)
    F : np.ndarray
        Tetrahedra, shape (m, 4)

    Returns:
    --------
    np.ndarray
        Shape (m, 6); column e is the weight of local edge e of TET_EDGES

    Notes:
    ------
    For a regular tetrahedron with edge length a every weight equals
    a / (12√2): cot(arccos(1/3)) = 1/(2√2).
    """
    C = np.zeros((F.shape[0], 6))
    for e in range(6):
        j, k = F[:, TET_EDGES[e, 0]], F[:, TET_EDGES[e, 1]]
        l, m = F[:, TET_OPPOSITE[e, 0]], F[:, TET_OPPOSITE[e, 1]]

        edge = V[m] - V[l]
        length = np.linalg.norm(edge, axis=1)
        if not np.all(length > 0.0):
            f = int(np.argwhere(~(length > 0.0))[0][0])
            raise DegenerateSimplex(f"Simplex {f} has a zero-length edge")
        e_hat = edge / length[:, None]

        u = V[j] - V[l]
        v = V[k] - V[l]
        p = u - np.einsum('ij,ij->i', u, e_hat)[:, None] * e_hat
        q = v - np.einsum('ij,ij->i', v, e_hat)[:, None] * e_hat
        C[:, e] = length * _cot(p, q, "tetrahedron") / 6.0
    return C


def simplex_edge_weights(mesh: Mesh, weighting: Weighting = Weighting.COTANGENT) -> np.ndarray:
    """
    Per-simplex edge weights c_f(j,k) for the given weighting scheme.

    Returns:
    --------
    np.ndarray
        Shape (m, n_edges), aligned with mesh.local_edges()
    """
    weighting = Weighting.parse(weighting)
    edges, _ = mesh.local_edges()

    if weighting is Weighting.UNIFORM:
        return np.ones((mesh.n_simplices, len(edges)))

    if mesh.is_tetrahedral:
        return tetrahedron_cotangent_weights(mesh.V, mesh.F)
    return triangle_cotangent_weights(mesh.V, mesh.F)


def cotmatrix(mesh: Mesh, weighting: Weighting = Weighting.COTANGENT) -> sp.csr_matrix:
    """
    Weighted graph Laplacian matching the linear blocks.

    L_ij = -w_ij for i ≠ j, L_ii = Σ_j w_ij, so L is positive semi-definite
    for non-obtuse meshes and L @ V is the right-hand side obtained with
    identity rotations. This is the matrix the global step factors.

    Parameters:
    -----------
    mesh : Mesh
        Rest-pose mesh
    weighting : Weighting
        Edge weight scheme (default: cotangent)

    Returns:
    --------
    sp.csr_matrix
        Symmetric (n, n) Laplacian
    """
    C = simplex_edge_weights(mesh, weighting)
    EV = mesh.edge_vertices()
    j = EV[..., 0].ravel()
    k = EV[..., 1].ravel()
    c = C.ravel()

    rows = np.concatenate([j, k, j, k])
    cols = np.concatenate([k, j, j, k])
    vals = np.concatenate([-c, -c, c, c])

    n = mesh.n_vertices
    L = assemble_sparse((n, n), rows, cols, vals)
    logger.debug("Built %s Laplacian: n=%d, nnz=%d", Weighting.parse(weighting).value, n, L.nnz)
    return L


def edge_weight_table(mesh: Mesh, weighting: Weighting = Weighting.COTANGENT) -> Tuple[np.ndarray, np.ndarray]:
    """
    Total weight w_ij of every undirected edge.

    Returns:
    --------
    (edges, weights) : Tuple[np.ndarray, np.ndarray]
        edges: shape (n_unique, 2), sorted pairs i < j
        weights: shape (n_unique,), summed over incident simplices
    """
    C = simplex_edge_weights(mesh, weighting)
    EV = mesh.edge_vertices().reshape(-1, 2)
    EV = np.sort(EV, axis=1)
    edges, inverse = np.unique(EV, axis=0, return_inverse=True)
    weights = np.bincount(np.ravel(inverse), weights=C.ravel(), minlength=len(edges))
    return edges, weights
