"""
Geometry module - Solid model interface and cross-section loop handling.
"""

from planesweep.geometry.loops import is_loop_ccw, orient_loops, simplify_loop
from planesweep.geometry.solid import (
    CANONICAL_PLANE,
    PlanarPolygon,
    Plane,
    SolidModel,
    TrimeshSolid,
    as_solid,
    load_solid,
)

__all__ = [
    "CANONICAL_PLANE",
    "PlanarPolygon",
    "Plane",
    "SolidModel",
    "TrimeshSolid",
    "as_solid",
    "load_solid",
    "is_loop_ccw",
    "orient_loops",
    "simplify_loop",
]
