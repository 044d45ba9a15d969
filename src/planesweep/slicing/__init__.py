"""
Slicing module - Plane-sweep toolpath generation.

- PlaneSweepSlicer: cross-section loops at one height
- AdditiveToolpathGenerator: layers from min_z upward
- SubtractiveToolpathGenerator: contour passes from max_z downward
- generate_toolpaths: single entry point dispatching on the config's mode
"""

from planesweep.slicing.toolpath import ToolpathSegment, ToolpathSet, ToolpathType
from planesweep.slicing.plane_sweep import PlaneSweepSlicer, SectionLoop, slice_at_height
from planesweep.slicing.generators import (
    EPSILON,
    GENERATOR_REGISTRY,
    AdditiveToolpathGenerator,
    SubtractiveToolpathGenerator,
    SweepGenerator,
    SweepPlan,
    generate_toolpaths,
    get_generator,
    sweep_count,
)

__all__ = [
    "ToolpathSegment",
    "ToolpathSet",
    "ToolpathType",
    "PlaneSweepSlicer",
    "SectionLoop",
    "slice_at_height",
    "EPSILON",
    "GENERATOR_REGISTRY",
    "AdditiveToolpathGenerator",
    "SubtractiveToolpathGenerator",
    "SweepGenerator",
    "SweepPlan",
    "generate_toolpaths",
    "get_generator",
    "sweep_count",
]
