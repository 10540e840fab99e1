# arap_core/blocks.py
"""
LINEAR BLOCKS: Per-Axis Weighted Edge Operators
===============================================

PURPOSE:
--------
This module builds the per-axis sparse block KX_a (shape n × nr) that the
RHS composer stacks into the global operator K. Column r of KX_a collects
how rotation frame r acts on coordinate a of the rest-pose edge vectors.

For every simplex f and each of its edges (j, k), with per-simplex weight
c = c_f(j,k) and val = c · (Vj[a] - Vk[a]):

    spokes            row j: +val/2 at columns j, k
                      row k: -val/2 at columns j, k
                      → b_i = Σ_j w_ij · ½(R_i + R_j)(V_i - V_j)

    spokes-and-rims   row j: +val/s at the column of every vertex of f
                      row k: -val/s likewise            (s = simplex size)

    elements          row j: +val at column f
                      row k: -val at column f

Every entry added to row j is mirrored with the opposite sign in row k, so
the rows of b always sum to zero (no net force), and with identity
rotations every variant reduces to b = L @ V.

The builder is passed around as a plain callable, so weight schemes other
than cotangent can be swapped in without touching the composer:

    builder = make_block_builder(Weighting.UNIFORM)
    KX = builder(mesh, 0, Energy.SPOKES)
"""

import logging
from typing import Callable, Optional

import numpy as np
import scipy.sparse as sp

from .config import Energy, Weighting
from .kernel.assemble import assemble_sparse
from .kernel.errors import ShapeMismatch, UnsupportedDimension
from .mesh import Mesh
from .weights import simplex_edge_weights

logger = logging.getLogger(__name__)

# (mesh, axis, energy) → sparse block of shape (n, nr)
BlockBuilder = Callable[[Mesh, int, Energy], sp.spmatrix]


def arap_linear_block(
    mesh: Mesh,
    axis: int,
    energy: Energy = Energy.SPOKES,
    weighting: Weighting = Weighting.COTANGENT,
    C: Optional[np.ndarray] = None,
) -> sp.csr_matrix:
    """
    Build the sparse block KX_axis for one coordinate axis.

    Parameters:
    -----------
    mesh : Mesh
        Rest-pose mesh
    axis : int
        Coordinate of the edge vectors to encode (0 to dim-1)
    energy : Energy
        Energy definition; decides the columns (rotation frames)
    weighting : Weighting
        Edge weight scheme, ignored when C is given
    C : np.ndarray, optional
        Precomputed per-simplex edge weights, shape (m, n_edges), so that
        building all dim blocks only computes the weights once

    Returns:
    --------
    sp.csr_matrix
        KX_axis, shape (n, nr)

    Raises:
    -------
    UnsupportedDimension
        If axis is not in [0, dim)
    ShapeMismatch
        If C does not match the mesh's simplex and edge counts
    """
    energy = Energy.parse(energy)
    if not 0 <= axis < mesh.dim:
        raise UnsupportedDimension(f"Axis {axis} out of range for a {mesh.dim}D mesh")

    if C is None:
        C = simplex_edge_weights(mesh, weighting)
    edges, _ = mesh.local_edges()
    if C.shape != (mesh.n_simplices, len(edges)):
        raise ShapeMismatch(
            f"Edge weights have shape {C.shape}, expected {(mesh.n_simplices, len(edges))}"
        )

    n = mesh.n_vertices
    m = mesh.n_simplices
    nr = mesh.frame_count(energy)

    EV = mesh.edge_vertices()
    j = EV[..., 0]
    k = EV[..., 1]
    val = C * (mesh.V[j, axis] - mesh.V[k, axis])

    if energy is Energy.SPOKES:
        half = 0.5 * val
        rows = [j, j, k, k]
        cols = [j, k, j, k]
        vals = [half, half, -half, -half]

    elif energy is Energy.SPOKES_AND_RIMS:
        s = mesh.simplex_size
        share = val / s
        rows, cols, vals = [], [], []
        for corner in range(s):
            # rotation of this corner acts on every edge of the simplex
            col = np.broadcast_to(mesh.F[:, corner][:, None], j.shape)
            rows += [j, k]
            cols += [col, col]
            vals += [share, -share]

    else:  # Energy.ELEMENTS
        col = np.broadcast_to(np.arange(m)[:, None], j.shape)
        rows = [j, k]
        cols = [col, col]
        vals = [val, -val]

    KX = assemble_sparse(
        (n, nr),
        np.concatenate([r.ravel() for r in rows]),
        np.concatenate([c.ravel() for c in cols]),
        np.concatenate([v.ravel() for v in vals]),
    )
    logger.debug("Block axis=%d energy=%s shape=%s nnz=%d", axis, energy.value, KX.shape, KX.nnz)
    return KX


def make_block_builder(
    weighting: Weighting = Weighting.COTANGENT,
    C: Optional[np.ndarray] = None,
) -> BlockBuilder:
    """
    Bind a weighting scheme into a BlockBuilder callable.

    Pass C (from simplex_edge_weights) when all dim blocks of one mesh are
    built with the same builder, so the weights are computed only once.
    """
    weighting = Weighting.parse(weighting)

    def build(mesh: Mesh, axis: int, energy: Energy) -> sp.csr_matrix:
        return arap_linear_block(mesh, axis, energy, weighting, C=C)

    return build
