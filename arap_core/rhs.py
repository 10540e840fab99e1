# arap_core/rhs.py
"""
ARAP RIGHT-HAND SIDE: Operator Composition and Rotation Contraction
===================================================================

PURPOSE:
--------
This module builds the right-hand side b of the global step of an
As-Rigid-As-Possible solve, and the linear operator K with

    b = K @ Rcol

where Rcol is the rotation tensor R (dim × dim × nr) flattened in the
column order of K. For the spokes energy (Sorkine & Alexa 2007, eq. 8-9):

    b_i = Σ_{j∈N(i)} w_ij · ½(R_i + R_j)(V_i - V_j)

ENGINEERING CONTEXT:
--------------------
The local/global iteration alternates:
    local   fit one rotation per vertex or simplex (SVD)        → R
    global  solve L @ U = b for the deformed positions U

K depends only on the rest pose, so it is built ONCE and reused:

    arap = ArapRhs.from_arrays(V, F, energy="spokes")
    for it in range(iterations):
        R = fit_rotations(...)            # local step (not here)
        b = arap.rhs(R)                   # cheap: one sparse mat-vec
        U = solve(L, b)                   # global step (not here)

DERIVATION (row-group x of K):
------------------------------
    b_i(x) = Σ_j w_ij · ½ Σ_y (V_i(y) - V_j(y)) · (R_i(x,y) + R_j(x,y))

so coordinate x of b is Σ_y KX_y @ R(x,y,:), the same geometric block KX_y
multiplying every row x of the rotations. See kernel.layout for the block
positions.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import scipy.sparse as sp

from .blocks import BlockBuilder, make_block_builder
from .config import ArapRhsOptions, Energy, Weighting
from .kernel.assemble import assemble_block_operator, flatten_rotations, unflatten_rhs
from .kernel.errors import ShapeMismatch
from .kernel.layout import BlockLayout
from .mesh import Mesh
from .weights import simplex_edge_weights

logger = logging.getLogger(__name__)


def _is_empty(R) -> bool:
    if R is None:
        return True
    return np.asarray(R).size == 0


@dataclass(frozen=True, eq=False)
class ArapRhs:
    """
    Reusable ARAP operator for one mesh and energy.

    Attributes:
    -----------
    mesh : Mesh
        Rest-pose mesh K was built from
    energy : Energy
        Energy definition
    layout : BlockLayout
        Block structure of K for the mesh dimension
    K : sp.csr_matrix
        Operator of shape (n*dim, nr*dim*dim)

    Example:
    --------
    >>> arap = ArapRhs.from_arrays([[0, 0], [1, 0], [0, 1]], [[0, 1, 2]])
    >>> arap.K.shape
    (6, 12)
    >>> R = np.repeat(np.eye(2)[:, :, None], 3, axis=2)
    >>> arap.rhs(R).shape
    (3, 2)
    """
    mesh: Mesh
    energy: Energy
    layout: BlockLayout
    K: sp.csr_matrix

    @classmethod
    def build(
        cls,
        mesh: Mesh,
        energy: Energy = Energy.SPOKES,
        block_builder: Optional[BlockBuilder] = None,
        weighting: Weighting = Weighting.COTANGENT,
    ) -> "ArapRhs":
        """
        Assemble K for a validated mesh.

        Parameters:
        -----------
        mesh : Mesh
            Rest-pose mesh
        energy : Energy
            Energy definition (default: spokes)
        block_builder : BlockBuilder, optional
            Callable (mesh, axis, energy) → (n, nr) block; defaults to
            blocks weighted by `weighting`
        weighting : Weighting
            Edge weight scheme of the default builder, computed once for
            all dim blocks; ignored when block_builder is given

        Returns:
        --------
        ArapRhs
            Operator holder; call .rhs(R) once per rotation update
        """
        energy = Energy.parse(energy)
        if block_builder is None:
            C = simplex_edge_weights(mesh, weighting)
            block_builder = make_block_builder(weighting, C=C)

        layout = BlockLayout(dim=mesh.dim)
        nr = mesh.frame_count(energy)

        blocks = []
        for axis in range(mesh.dim):
            KX = sp.csr_matrix(block_builder(mesh, axis, energy))
            if KX.shape != (mesh.n_vertices, nr):
                raise ShapeMismatch(
                    f"Block builder returned shape {KX.shape} for axis {axis}, "
                    f"expected {(mesh.n_vertices, nr)}"
                )
            blocks.append(KX)

        K = assemble_block_operator(blocks, layout)
        logger.debug(
            "ARAP operator: energy=%s n=%d m=%d dim=%d nr=%d K=%s",
            energy.value, mesh.n_vertices, mesh.n_simplices, mesh.dim, nr, K.shape,
        )
        return cls(mesh=mesh, energy=energy, layout=layout, K=K)

    @classmethod
    def from_arrays(cls, V, F, energy="spokes", weighting="cotangent", index_base: int = 0) -> "ArapRhs":
        """Validate V and F, then assemble K (see ArapRhsOptions for the options)."""
        options = ArapRhsOptions(energy=energy, weighting=weighting, index_base=index_base)
        mesh = Mesh.from_arrays(V, F, index_base=options.index_base)
        return cls.build(mesh, options.energy, weighting=options.weighting)

    @property
    def n_frames(self) -> int:
        """Number of rotation frames nr."""
        return self.mesh.frame_count(self.energy)

    def rotation_shape(self) -> Tuple[int, int, int]:
        dim = self.mesh.dim
        return (dim, dim, self.n_frames)

    def rhs(self, R) -> Optional[np.ndarray]:
        """
        Contract K with a rotation tensor.

        Parameters:
        -----------
        R : array_like or None
            Rotations, shape (dim, dim, nr). None or an empty array gives None.
            Orthogonality is not checked.

        Returns:
        --------
        np.ndarray or None
            b, shape (n, dim)

        Raises:
        -------
        ShapeMismatch
            If R does not have shape (dim, dim, nr)
        """
        if _is_empty(R):
            return None

        R = np.asarray(R, dtype=float)
        expected = self.rotation_shape()
        if R.shape != expected:
            raise ShapeMismatch(
                f"Rotations must have shape {expected} for energy "
                f"'{self.energy.value}', got {R.shape}"
            )

        Rcol = flatten_rotations(R, self.layout)
        bcol = self.K @ Rcol
        return unflatten_rhs(bcol, self.mesh.n_vertices, self.layout)


def arap_rhs(V, F, R=None, **options) -> Tuple[Optional[np.ndarray], sp.csr_matrix]:
    """
    Build the ARAP right-hand side b and the operator K.

    b = arap_rhs(V, F, R)[0]
    b, K = arap_rhs(V, F, R, energy="elements")

    Parameters:
    -----------
    V : array_like
        Rest-pose positions, shape (n, dim), dim ∈ {2, 3}
    F : array_like
        Triangles (m, 3) or tetrahedra (m, 4)
    R : array_like, optional
        Rotations, shape (dim, dim, nr); if None or empty only K is built
        and b is None
    **options
        energy : "spokes" (default), "spokes-and-rims" or "elements"
        weighting : "cotangent" (default) or "uniform"
        index_base : 0 (default) or 1

    Returns:
    --------
    (b, K) : Tuple[Optional[np.ndarray], sp.csr_matrix]
        b: shape (n, dim), or None when R is absent
        K: shape (n*dim, nr*dim*dim), with
           b.T.ravel() == K @ flatten_rotations(R, BlockLayout(dim))

    Raises:
    -------
    UnsupportedOption
        Unknown option name, energy or weighting
    UnsupportedSimplexSize, UnsupportedDimension, InvalidTopology
        Invalid mesh
    DegenerateSimplex
        Zero-area simplex under cotangent weighting
    ShapeMismatch
        R has the wrong shape
    """
    opts = ArapRhsOptions.from_mapping(options)
    arap = ArapRhs.from_arrays(V, F, opts.energy, opts.weighting, opts.index_base)
    return arap.rhs(R), arap.K
