import logging

import numpy as np

from arap_core import arap_rhs
from arap_core.logging_config import setup_logging


def main():
    setup_logging(logging.DEBUG)

    # One right triangle, spokes energy: nr = 3 vertex rotations
    V = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    F = np.array([[0, 1, 2]])
    R = np.repeat(np.eye(2)[:, :, None], 3, axis=2)

    b, K = arap_rhs(V, F, R, energy="spokes")

    np.set_printoptions(precision=3, suppress=True)
    print("K shape:", K.shape)
    print(K.toarray())
    print("b (identity rotations):")
    print(b)
    print("Net force:", b.sum(axis=0))

    # Hand check: b = L @ V with half-cotangent weights 0, 0.5, 0.5
    expected = np.array([[-0.5, -0.5], [0.5, 0.0], [0.0, 0.5]])
    print("Expected b:")
    print(expected)


if __name__ == "__main__":
    main()
