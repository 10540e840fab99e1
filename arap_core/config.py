# arap_core/config.py
"""
Assembly options: energy definition, edge weighting and index base.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional

from .kernel.errors import UnsupportedOption


class Energy(str, Enum):
    """
    Which ARAP energy the operator is built for.

    SPOKES
        Sorkine & Alexa 2007: one rotation per vertex, acting on the edges
        incident to it. Default.
    SPOKES_AND_RIMS
        Chao et al. 2010, section 4.2: one rotation per vertex, acting on the
        incident edges and the edges opposite the vertex in each incident
        simplex.
    ELEMENTS
        Liu et al. 2008 / Chao et al. 2010: one rotation per triangle or
        tetrahedron, acting on that simplex's edges.
    """
    SPOKES = "spokes"
    SPOKES_AND_RIMS = "spokes-and-rims"
    ELEMENTS = "elements"

    @classmethod
    def parse(cls, value: Any) -> "Energy":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(e.value for e in cls)
            raise UnsupportedOption(f"Unknown energy {value!r}. Valid: {valid}") from None

    def frame_count(self, n_vertices: int, n_simplices: int) -> int:
        """Number of rotation frames nr: vertices for spokes variants, simplices for elements."""
        if self is Energy.ELEMENTS:
            return n_simplices
        return n_vertices


class Weighting(str, Enum):
    """Per-simplex edge weights fed to the linear blocks."""
    COTANGENT = "cotangent"
    UNIFORM = "uniform"

    @classmethod
    def parse(cls, value: Any) -> "Weighting":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(w.value for w in cls)
            raise UnsupportedOption(f"Unknown weighting {value!r}. Valid: {valid}") from None


@dataclass(frozen=True)
class ArapRhsOptions:
    """
    Options for building the ARAP right-hand side and operator.

    Attributes:
    -----------
    energy : Energy
        Energy definition (default: spokes)
    weighting : Weighting
        Edge weight scheme (default: cotangent)
    index_base : int
        0 if F is 0-based, 1 if F is 1-based
    """
    energy: Energy = Energy.SPOKES
    weighting: Weighting = Weighting.COTANGENT
    index_base: int = 0

    def __post_init__(self):
        # Accept plain strings, store enums
        object.__setattr__(self, "energy", Energy.parse(self.energy))
        object.__setattr__(self, "weighting", Weighting.parse(self.weighting))
        if self.index_base not in (0, 1):
            raise UnsupportedOption(f"index_base must be 0 or 1, got {self.index_base!r}")

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "ArapRhsOptions":
        """
        Build options from a {name: value} mapping.

        Raises UnsupportedOption for names that are not fields of this class.
        """
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise UnsupportedOption(
                f"Unsupported option(s): {', '.join(unknown)}. Valid: {', '.join(sorted(known))}"
            )
        return cls(**options)


# Global defaults
DEFAULT_OPTIONS = ArapRhsOptions()
