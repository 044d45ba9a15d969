"""
Plane-sweep slicing at a single height.

The intersection primitive only cuts along the canonical plane (normal +Z,
offset 0). To cut at height ``z`` the model is moved down by ``z`` instead,
cut at z = 0, and the resulting 2D loops are lifted back to ``z``. A pure
translation keeps the cut free of the rounding an arbitrary plane
parameterisation would add.
"""

import math
from dataclasses import dataclass
from typing import List, Union

import numpy as np
import trimesh
from compas.datastructures import Mesh as CompasMesh
from compas.geometry import Point

from planesweep.core.exceptions import SlicingError
from planesweep.core.logging import get_logger
from planesweep.geometry.loops import orient_loops
from planesweep.geometry.solid import CANONICAL_PLANE, SolidModel, as_solid
from planesweep.slicing.toolpath import MIN_SEGMENT_POINTS, ToolpathSegment, ToolpathType

logger = get_logger(__name__)

ModelLike = Union[SolidModel, trimesh.Trimesh, CompasMesh]


@dataclass(frozen=True, eq=False)
class SectionLoop:
    """One boundary loop of a cross-section, as (n, 3) points at the cut height."""

    points: np.ndarray
    is_closed: bool = True

    def __len__(self) -> int:
        return len(self.points)


def slice_at_height(model: ModelLike, z: float, orient: bool = True) -> List[SectionLoop]:
    """
    Cut ``model`` with the horizontal plane at ``z``.

    Args:
        model: Solid to cut; it is never modified
        z: Cut height
        orient: Apply the winding convention (outer loops counter-clockwise,
            holes clockwise). Without it loops keep the order the
            intersection primitive produced.

    Returns:
        Boundary loops with every point at exactly ``z``, in the emission
        order of the intersection primitive. Loops with fewer than three
        vertices are dropped.

    Raises:
        SlicingError: If ``z`` is not finite
    """
    if not math.isfinite(z):
        raise SlicingError(f"Cut height must be finite, got {z!r}", z_height=z)

    z = float(z)
    solid = as_solid(model)
    shifted = solid.translate((0.0, 0.0, -z))

    loops_2d = []
    closed = []
    dropped = 0
    for polygon in shifted.intersect_with_plane(CANONICAL_PLANE):
        if len(polygon) < MIN_SEGMENT_POINTS:
            dropped += 1
            continue
        loops_2d.append(shifted.polygon_to_2d_loop(polygon))
        closed.append(polygon.is_closed)

    if dropped:
        logger.debug("degenerate_loops_dropped", z=z, dropped=dropped)

    if orient:
        loops_2d = orient_loops(loops_2d, closed)

    return [
        SectionLoop(
            points=np.column_stack((loop, np.full(len(loop), z))),
            is_closed=is_closed,
        )
        for loop, is_closed in zip(loops_2d, closed)
    ]


class PlaneSweepSlicer:
    """
    Turns the cross-section at one height into toolpath segments.

    Shared by the additive and subtractive generators; it holds no state
    between calls, so one instance may slice many heights concurrently.
    """

    def __init__(self, orient: bool = True):
        """
        Args:
            orient: Apply the winding convention to every cross-section
        """
        self.orient = orient

    def slice(
        self,
        model: ModelLike,
        z: float,
        layer_index: int = 0,
        segment_type: ToolpathType = ToolpathType.PERIMETER,
    ) -> List[ToolpathSegment]:
        """Slice ``model`` at ``z`` and wrap each loop as a segment."""
        segments = []
        for loop_index, loop in enumerate(slice_at_height(model, z, orient=self.orient)):
            segments.append(
                ToolpathSegment(
                    points=[Point(float(x), float(y), float(pz)) for x, y, pz in loop.points],
                    type=segment_type,
                    layer_index=layer_index,
                    z_height=float(z),
                    is_closed=loop.is_closed,
                    metadata={"loop_index": loop_index},
                )
            )
        return segments
