# File: tests/test_errors.py
"""
Invalid inputs are rejected up front with a specific error type.
"""

import numpy as np
import pytest

from arap_core import (
    ArapError,
    ArapRhs,
    DegenerateSimplex,
    InvalidTopology,
    Mesh,
    ShapeMismatch,
    UnsupportedDimension,
    UnsupportedOption,
    UnsupportedSimplexSize,
    arap_linear_block,
    arap_rhs,
)

V = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
F = np.array([[0, 1, 2]])


def test_out_of_range_index():
    with pytest.raises(InvalidTopology, match="vertex 5"):
        arap_rhs(V, [[0, 1, 5]])


def test_negative_index():
    with pytest.raises(InvalidTopology):
        arap_rhs(V, [[0, -1, 2]])


def test_one_based_index_zero_is_invalid():
    with pytest.raises(InvalidTopology):
        arap_rhs(V, [[0, 1, 2]], index_base=1)


def test_non_integer_index():
    with pytest.raises(InvalidTopology, match="non-integer"):
        arap_rhs(V, [[0.0, 1.5, 2.0]])


def test_integral_float_indices_accepted():
    _, K = arap_rhs(V, np.array([[0.0, 1.0, 2.0]]))
    assert K.shape == (6, 12)


def test_unknown_energy():
    with pytest.raises(UnsupportedOption, match="bogus"):
        arap_rhs(V, F, energy="bogus")


def test_unknown_option_name():
    with pytest.raises(UnsupportedOption, match="Energy"):
        arap_rhs(V, F, Energy="spokes")


def test_unknown_weighting():
    with pytest.raises(UnsupportedOption):
        arap_rhs(V, F, weighting="mean-value")


@pytest.mark.parametrize("bad_F", [
    [[0, 1]],
    [[0, 1, 2, 0, 1]],
    [0, 1, 2],
    [[0, 1, 2], [1, 3, 2, 0]],  # triangles mixed with tetrahedra
])
def test_unsupported_simplex_size(bad_F):
    with pytest.raises(UnsupportedSimplexSize):
        arap_rhs(V, bad_F)


@pytest.mark.parametrize("bad_V", [np.zeros((3, 1)), np.zeros((3, 4)), np.zeros(3)])
def test_unsupported_dimension(bad_V):
    with pytest.raises(UnsupportedDimension):
        arap_rhs(bad_V, F)


def test_tetrahedra_need_three_dimensions():
    V4 = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    with pytest.raises(UnsupportedDimension, match="3D"):
        arap_rhs(V4, [[0, 1, 2, 3]])


def test_axis_out_of_range():
    mesh = Mesh.from_arrays(V, F)
    with pytest.raises(UnsupportedDimension):
        arap_linear_block(mesh, 2)


@pytest.mark.parametrize("R_shape", [(2, 2, 2), (3, 3, 3), (2, 2), (2, 3, 3)])
def test_rotation_shape_mismatch(R_shape):
    with pytest.raises(ShapeMismatch):
        arap_rhs(V, F, np.ones(R_shape))


def test_rotation_frames_follow_energy():
    """elements needs one frame per triangle, not per vertex."""
    R_vertex = np.repeat(np.eye(2)[:, :, None], 3, axis=2)
    with pytest.raises(ShapeMismatch, match="elements"):
        arap_rhs(V, F, R_vertex, energy="elements")


def test_degenerate_triangle():
    V_flat = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
    with pytest.raises(DegenerateSimplex):
        arap_rhs(V_flat, F)


def test_degenerate_triangle_fine_with_uniform_weights():
    V_flat = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
    _, K = arap_rhs(V_flat, F, weighting="uniform")
    assert K.shape == (6, 12)


def test_flat_tetrahedron():
    V_flat = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]])
    with pytest.raises(DegenerateSimplex):
        arap_rhs(V_flat, [[0, 1, 2, 3]])


def test_bad_block_builder_shape():
    mesh = Mesh.from_arrays(V, F)

    def wrong_builder(mesh, axis, energy):
        return np.zeros((mesh.n_vertices, mesh.n_vertices + 1))

    with pytest.raises(ShapeMismatch):
        ArapRhs.build(mesh, "spokes", wrong_builder)


def test_all_errors_are_value_errors():
    for exc in (UnsupportedSimplexSize, UnsupportedDimension, UnsupportedOption,
                ShapeMismatch, InvalidTopology, DegenerateSimplex):
        assert issubclass(exc, ArapError)
        assert issubclass(exc, ValueError)


def test_precomputed_weights_wrong_shape():
    """Weights for a tetrahedral mesh cannot drive a triangle mesh's blocks."""
    mesh = Mesh.from_arrays(V, F)
    with pytest.raises(ShapeMismatch, match="Edge weights"):
        arap_linear_block(mesh, 0, C=np.ones((1, 6)))
