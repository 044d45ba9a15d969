"""
planesweep - Plane-sweep slicing of solid models into manufacturing toolpaths.

Slices a solid at successive horizontal planes and returns the cross-section
boundary loops as 3D polylines, for additive (bottom-up layers) and
subtractive (top-down contour passes) manufacturing.
"""

__version__ = "0.1.0"
__author__ = "planesweep contributors"

from planesweep.core.config import AdditiveConfig, SubtractiveConfig
from planesweep.slicing.generators import generate_toolpaths
from planesweep.slicing.toolpath import ToolpathSegment, ToolpathSet

__all__ = [
    "__version__",
    "AdditiveConfig",
    "SubtractiveConfig",
    "generate_toolpaths",
    "ToolpathSegment",
    "ToolpathSet",
]
