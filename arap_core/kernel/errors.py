# arap_core/kernel/errors.py
"""Exceptions raised while validating inputs and assembling ARAP operators."""


class ArapError(ValueError):
    """Base class for all input errors raised by arap_core."""
    pass


class UnsupportedSimplexSize(ArapError):
    """Raised when F does not hold triangles (3 columns) or tetrahedra (4 columns)."""
    pass


class UnsupportedDimension(ArapError):
    """Raised when V is not 2D/3D, or an axis index falls outside the mesh dimension."""
    pass


class UnsupportedOption(ArapError):
    """Raised for an unknown option name or an unknown option value."""
    pass


class ShapeMismatch(ArapError):
    """Raised when the rotation tensor does not have shape (dim, dim, nr)."""
    pass


class InvalidTopology(ArapError):
    """Raised when F references a vertex outside [0, n)."""
    pass


class DegenerateSimplex(ArapError):
    """Raised when a simplex has zero area/volume and its cotangent weights are undefined."""
    pass
