# arap_core/kernel/assemble.py
"""
ASSEMBLY: Sparse Scatter-Add and Block Composition
==================================================

PURPOSE:
--------
This module handles the assembly of simplex contributions into sparse
matrices, and the composition of the per-axis blocks into the global
ARAP operator K.

The key insight: assembly doesn't care about the ENERGY.
It just needs:
- The target shape
- For each contribution: a row index, a column index and a value

Whether the contributions come from spokes, spokes-and-rims or elements,
the scatter-add is identical. Duplicate (row, col) pairs are summed, which
is exactly the "+=" of a classic element assembly loop.

USAGE:
------
    # Collect (row, col, value) triplets (energy-specific code does this)
    rows, cols, vals = ..., ..., ...
    KX = assemble_sparse((n, nr), rows, cols, vals)

    # Compose the per-axis blocks (dimension-agnostic)
    K = assemble_block_operator([KX, KY, KZ], BlockLayout(dim=3))
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from .errors import ShapeMismatch
from .layout import BlockLayout

logger = logging.getLogger(__name__)


def assemble_sparse(
    shape: Tuple[int, int],
    rows: np.ndarray,
    cols: np.ndarray,
    vals: np.ndarray,
) -> sp.csr_matrix:
    """
    Scatter-add (row, col, value) triplets into a sparse matrix.

    ALGORITHM:
    ----------
    A = zeros(shape)
    for each triplet:
        A[row, col] += value

    The COO → CSR conversion sums duplicates, so no explicit loop is needed.

    Parameters:
    -----------
    shape : Tuple[int, int]
        Shape of the assembled matrix
    rows, cols : np.ndarray
        Integer index arrays, same length as vals
    vals : np.ndarray
        Values to accumulate

    Returns:
    --------
    sp.csr_matrix
        Assembled matrix with duplicates summed
    """
    rows = np.asarray(rows, dtype=np.int64).ravel()
    cols = np.asarray(cols, dtype=np.int64).ravel()
    vals = np.asarray(vals, dtype=float).ravel()

    assert rows.shape == cols.shape == vals.shape, \
        f"Triplet arrays differ in length: {rows.shape}, {cols.shape}, {vals.shape}"

    A = sp.coo_matrix((vals, (rows, cols)), shape=shape).tocsr()
    A.sum_duplicates()
    return A


def assemble_block_operator(
    blocks: Sequence[sp.spmatrix],
    layout: BlockLayout,
) -> sp.csr_matrix:
    """
    Compose per-axis blocks KX_y into the global operator K.

    Row-group x receives KX_y at column-group x + dim*y (see BlockLayout);
    every other block is zero.

    Parameters:
    -----------
    blocks : Sequence[sp.spmatrix]
        One block per axis, all of shape (n, nr)
    layout : BlockLayout
        Block structure for the mesh dimension

    Returns:
    --------
    sp.csr_matrix
        K of shape (n*dim, nr*dim*dim)
    """
    if len(blocks) != layout.dim:
        raise ShapeMismatch(f"Expected {layout.dim} axis blocks, got {len(blocks)}")

    n_vertices, n_frames = blocks[0].shape
    for y, block in enumerate(blocks):
        if block.shape != (n_vertices, n_frames):
            raise ShapeMismatch(
                f"Axis block {y} has shape {block.shape}, expected {(n_vertices, n_frames)}"
            )

    # bmat needs an explicit zero block when a whole block-column is None
    zero = sp.csr_matrix((n_vertices, n_frames))
    grid = [[zero] * layout.n_col_groups for _ in range(layout.n_row_groups)]
    for (x, col_group), y in layout.block_map().items():
        grid[x][col_group] = blocks[y]

    K = sp.bmat(grid, format='csr')
    logger.debug(
        "Composed K %s from %d blocks of shape %s (nnz=%d)",
        K.shape, len(blocks), (n_vertices, n_frames), K.nnz,
    )
    return K


def flatten_rotations(R: np.ndarray, layout: BlockLayout) -> np.ndarray:
    """
    Gather a (dim, dim, nr) rotation tensor into the column vector Rcol.

    Rcol[frame + nr*(x + dim*y)] = R[x, y, frame], the column ordering of K.

    Parameters:
    -----------
    R : np.ndarray
        Rotations, shape (dim, dim, nr)
    layout : BlockLayout
        Block structure for the mesh dimension

    Returns:
    --------
    np.ndarray
        Rcol, shape (nr*dim*dim,)
    """
    R = np.asarray(R, dtype=float)
    dim = layout.dim
    if R.ndim != 3 or R.shape[:2] != (dim, dim):
        raise ShapeMismatch(f"Rotations must have shape ({dim}, {dim}, nr), got {R.shape}")
    # (x, y, frame) → (y, x, frame), then C order puts frame fastest, y slowest
    return np.transpose(R, (1, 0, 2)).reshape(-1)


def unflatten_rhs(bcol: np.ndarray, n_vertices: int, layout: BlockLayout) -> np.ndarray:
    """
    Scatter the flat product K @ Rcol back to an (n, dim) right-hand side.

    bcol[vertex + n*x] is coordinate x of vertex.
    """
    bcol = np.asarray(bcol, dtype=float).ravel()
    if bcol.shape != (n_vertices * layout.dim,):
        raise ShapeMismatch(
            f"Flat right-hand side has length {bcol.size}, expected {n_vertices * layout.dim}"
        )
    return bcol.reshape(layout.dim, n_vertices).T.copy()
