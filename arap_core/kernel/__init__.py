# arap_core/kernel - Dimension-agnostic assembly core
"""
KERNEL: THE DIMENSION-AGNOSTIC FOUNDATION
==========================================

This package contains the plumbing that works for ANY ARAP energy:
spokes, spokes-and-rims, elements, in 2D or 3D.

The key insight: composition doesn't care about the energy.
It just needs:
- A way to map (row_group, column_group) → per-axis block
- The matching ordering of the flattened rotations
- Sparse scatter-add for the per-simplex contributions

The ENERGY implementations (blocks.py) decide what goes into each block,
but the kernel plumbing is universal.
"""

from .layout import BlockLayout, LAYOUT_2D, LAYOUT_3D
from .assemble import assemble_sparse, assemble_block_operator, flatten_rotations, unflatten_rhs
from .errors import (
    ArapError,
    UnsupportedSimplexSize,
    UnsupportedDimension,
    UnsupportedOption,
    ShapeMismatch,
    InvalidTopology,
    DegenerateSimplex,
)

__all__ = [
    'BlockLayout', 'LAYOUT_2D', 'LAYOUT_3D',
    'assemble_sparse', 'assemble_block_operator', 'flatten_rotations', 'unflatten_rhs',
    'ArapError', 'UnsupportedSimplexSize', 'UnsupportedDimension', 'UnsupportedOption',
    'ShapeMismatch', 'InvalidTopology', 'DegenerateSimplex',
]
