# arap_core/kernel/layout.py
"""
BLOCK LAYOUT: Dimension-Agnostic Index Map for the ARAP Operator
================================================================

PURPOSE:
--------
This module handles the mapping between the per-axis blocks KX_y and their
positions inside the global operator K, plus the matching entry ordering of
the flattened rotation vector Rcol. This is the ONE thing that changes
between 2D and 3D assembly:

    2D:  2 row-groups, 4 column-groups (one per rotation entry R(x,y))
    3D:  3 row-groups, 9 column-groups

Row-group x is the x-th coordinate of the right-hand side b. Column-group
x + dim*y holds the entries R(x,y) of every rotation frame. Row-group x
contains the block KX_y at column-group x + dim*y and zeros elsewhere:

    dim = 2:   K = [ KX  0   KY  0  ]
                   [ 0   KX  0   KY ]

    dim = 3:   K = [ KX  0   0   KY  0   0   KZ  0   0  ]
                   [ 0   KX  0   0   KY  0   0   KZ  0  ]
                   [ 0   0   KX  0   0   KY  0   0   KZ ]

The SAME ordering must be used when flattening R, otherwise K @ Rcol is
silently wrong. Both orderings live here so they cannot drift apart.

USAGE:
------
    layout = BlockLayout(dim=3)
    layout.column_group(x=1, y=2)          # → 7
    layout.rotation_index(frame=4, x=1, y=2, n_frames=10)   # → 74
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class BlockLayout:
    """
    Block structure of K for a given spatial dimension.

    Attributes:
    -----------
    dim : int
        Spatial dimension of the mesh (2 or 3)

    Examples:
    ---------
    >>> layout = BlockLayout(dim=2)
    >>> layout.column_group(0, 1)
    2
    >>> layout.block_map()
    {(0, 0): 0, (0, 2): 1, (1, 1): 0, (1, 3): 1}
    """
    dim: int

    @property
    def n_row_groups(self) -> int:
        return self.dim

    @property
    def n_col_groups(self) -> int:
        return self.dim * self.dim

    def column_group(self, x: int, y: int) -> int:
        """
        Column-group holding rotation entry R(x, y).

        Parameters:
        -----------
        x : int
            Row of the rotation matrix (= output coordinate of b)
        y : int
            Column of the rotation matrix (= source axis of the edge vector)

        Returns:
        --------
        int
            Index of the column-group in K (0 to dim*dim - 1)
        """
        return x + self.dim * y

    def row_group_slots(self, x: int) -> List[Tuple[int, int]]:
        """
        Non-zero slots of row-group x as (column_group, source_axis) pairs.

        Every row-group has exactly dim slots, one per source axis y.
        """
        return [(self.column_group(x, y), y) for y in range(self.dim)]

    def block_map(self) -> Dict[Tuple[int, int], int]:
        """
        Fixed map (row_group, column_group) → source axis y of the block KX_y.

        Pairs missing from the map are zero blocks.
        """
        result = {}
        for x in range(self.n_row_groups):
            for col_group, y in self.row_group_slots(x):
                result[(x, col_group)] = y
        return result

    def row_index(self, vertex: int, x: int, n_vertices: int) -> int:
        """Row of K (and entry of the flattened b) for coordinate x of a vertex."""
        return vertex + n_vertices * x

    def rotation_index(self, frame: int, x: int, y: int, n_frames: int) -> int:
        """
        Entry of Rcol holding R(x, y) of the given rotation frame.

        Frames run fastest inside each column-group, so this equals the
        column of K that multiplies that entry.
        """
        return frame + n_frames * self.column_group(x, y)

    def operator_shape(self, n_vertices: int, n_frames: int) -> Tuple[int, int]:
        """Shape of K: (n*dim, nr*dim*dim)."""
        return (n_vertices * self.n_row_groups, n_frames * self.n_col_groups)


# Convenience: pre-configured layouts for the supported dimensions
LAYOUT_2D = BlockLayout(dim=2)
LAYOUT_3D = BlockLayout(dim=3)
