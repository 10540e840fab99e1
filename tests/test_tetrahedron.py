# File: tests/test_tetrahedron.py
"""
TETRAHEDRON TEST: Validation of the Tetrahedral Cotangent Weights
=================================================================

A regular tetrahedron (alternate corners of a cube):

    (1,1,1), (1,-1,-1), (-1,1,-1), (-1,-1,1)     edge length a = 2√2

Every dihedral angle is arccos(1/3), so cot θ = 1/(2√2) and every edge gets
the same weight

    c = (1/6) · a · cot θ = a / (12√2) = 1/6

Expected behavior:
1. SYMMETRY: all six edge weights equal
2. SCALING: weights scale linearly with the mesh size (unlike triangles)
3. OPERATOR: K is (4*3) x (4*3*3) for vertex energies, (4*3) x 9 for elements
"""

import numpy as np
import pytest

from arap_core import ArapRhs, Mesh, arap_rhs, cotmatrix
from arap_core.weights import tetrahedron_cotangent_weights


def make_regular_tetrahedron(scale: float = 1.0):
    V = scale * np.array([
        [1.0, 1.0, 1.0],
        [1.0, -1.0, -1.0],
        [-1.0, 1.0, -1.0],
        [-1.0, -1.0, 1.0],
    ])
    F = np.array([[0, 1, 2, 3]])
    return V, F


def make_corner_tetrahedron():
    """Right-angled corner tet: three edges along the axes meet at the origin."""
    V = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    F = np.array([[0, 1, 2, 3]])
    return V, F


class TestCotangentWeights:

    def test_regular_tetrahedron_weights(self):
        V, F = make_regular_tetrahedron()
        C = tetrahedron_cotangent_weights(V, F)

        a = 2.0 * np.sqrt(2.0)
        np.testing.assert_allclose(C, np.full((1, 6), a / (12.0 * np.sqrt(2.0))), rtol=1e-12)
        np.testing.assert_allclose(C, np.full((1, 6), 1.0 / 6.0), rtol=1e-12)

    def test_weights_scale_linearly(self):
        V, F = make_regular_tetrahedron()
        C1 = tetrahedron_cotangent_weights(V, F)
        C3 = tetrahedron_cotangent_weights(3.0 * V, F)
        np.testing.assert_allclose(C3, 3.0 * C1, rtol=1e-12)

    def test_vertex_order_does_not_matter(self):
        """Reordering the tet's vertices (even inverting it) gives the same Laplacian."""
        V, F = make_corner_tetrahedron()
        L = cotmatrix(Mesh.from_arrays(V, F)).toarray()
        L_flipped = cotmatrix(Mesh.from_arrays(V, F[:, [1, 0, 2, 3]])).toarray()
        np.testing.assert_allclose(L_flipped, L, atol=1e-12)

    def test_corner_tetrahedron_right_dihedrals(self):
        """
        The dihedral angles at the three axis edges are 90°, so the edges
        opposite them (the slanted face edges) get zero weight.
        """
        V, F = make_corner_tetrahedron()
        L = cotmatrix(Mesh.from_arrays(V, F)).toarray()

        for i, j in [(1, 2), (1, 3), (2, 3)]:
            assert abs(L[i, j]) < 1e-12
        np.testing.assert_allclose(L.sum(axis=1), np.zeros(4), atol=1e-12)
        np.testing.assert_allclose(L, L.T, atol=1e-12)


class TestTetrahedralOperator:

    @pytest.mark.parametrize("energy,nr", [("spokes", 4), ("spokes-and-rims", 4), ("elements", 1)])
    def test_shape(self, energy, nr):
        V, F = make_regular_tetrahedron()
        _, K = arap_rhs(V, F, energy=energy)
        assert K.shape == (12, nr * 9)

    def test_identity_rotations_regular_tetrahedron(self):
        """Each vertex is pulled away from the centroid: b_i = (1/6) Σ_j (V_i - V_j) = (4/6) V_i."""
        V, F = make_regular_tetrahedron()
        R = np.repeat(np.eye(3)[:, :, None], 4, axis=2)

        b, _ = arap_rhs(V, F, R)
        np.testing.assert_allclose(b, (4.0 / 6.0) * V, atol=1e-12)

    def test_elements_rotation_about_z(self):
        V, F = make_corner_tetrahedron()
        t = 0.3
        Q = np.array([[np.cos(t), -np.sin(t), 0.0], [np.sin(t), np.cos(t), 0.0], [0.0, 0.0, 1.0]])

        arap = ArapRhs.from_arrays(V, F, energy="elements")
        b = arap.rhs(Q[:, :, None])
        LV = cotmatrix(arap.mesh) @ V
        np.testing.assert_allclose(b, LV @ Q.T, atol=1e-12)
