# arap_core - As-Rigid-As-Possible right-hand side assembly
"""
ARAP-CORE: Right-Hand Side Assembly for ARAP Deformation
========================================================

This package provides:
- The ARAP operator K and right-hand side b = K @ Rcol for the global step
- Three energies: spokes, spokes-and-rims, elements
- Triangle meshes in 2D/3D and tetrahedral meshes in 3D
- Cotangent (default) or uniform edge weights

ARCHITECTURE:
-------------
    kernel/         Dimension-agnostic core (block layout, scatter-add, errors)
    mesh.py         Validated rest-pose mesh
    config.py       Energy / Weighting enums and assembly options
    weights.py      Per-simplex cotangent weights and the matching Laplacian
    blocks.py       Per-axis linear blocks KX_a for each energy
    rhs.py          Composition of K and contraction with rotations
    logging_config.py  Opt-in console/file logging

Rotation fitting (local step) and the sparse solve (global step) are not
part of this package.
"""

from .config import Energy, Weighting, ArapRhsOptions, DEFAULT_OPTIONS
from .mesh import Mesh
from .weights import cotmatrix, simplex_edge_weights, edge_weight_table
from .blocks import arap_linear_block, make_block_builder, BlockBuilder
from .rhs import ArapRhs, arap_rhs
from .kernel import (
    BlockLayout,
    flatten_rotations,
    unflatten_rhs,
    ArapError,
    UnsupportedSimplexSize,
    UnsupportedDimension,
    UnsupportedOption,
    ShapeMismatch,
    InvalidTopology,
    DegenerateSimplex,
)

__version__ = "0.1.0"
