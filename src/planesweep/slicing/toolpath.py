"""
Toolpath data structures for representing sliced cross-sections.

A ``ToolpathSegment`` is one boundary loop harvested at one height; a
``ToolpathSet`` is everything one sweep produced, in sweep order.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from compas.geometry import Point
from shapely.geometry import LinearRing, Polygon

from planesweep.core.exceptions import SlicingError

MIN_SEGMENT_POINTS = 3


class ToolpathType(Enum):
    """Type of toolpath segment."""

    PERIMETER = "perimeter"  # Additive layer outline
    CONTOUR = "contour"  # Subtractive z-level pass


@dataclass(frozen=True)
class ToolpathSegment:
    """
    One continuous path traced at a single height.

    Attributes:
        points: Ordered 3D points; closed loops do not repeat the first point
        type: Type of toolpath segment
        layer_index: Position of the height in the sweep (0 = first sliced)
        z_height: Height the cross-section was taken at
        is_closed: Whether the last point connects back to the first
        metadata: Additional process-specific data
    """

    points: List[Point]
    type: ToolpathType
    layer_index: int
    z_height: float
    is_closed: bool = True
    metadata: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.points) < MIN_SEGMENT_POINTS:
            raise SlicingError(
                f"Toolpath segment needs at least {MIN_SEGMENT_POINTS} points, "
                f"got {len(self.points)}",
                z_height=self.z_height,
            )

    def get_length(self) -> float:
        """Total path length, including the closing edge of closed loops."""
        path = list(self.points)
        if self.is_closed:
            path.append(path[0])
        return sum(
            math.dist((a.x, a.y, a.z), (b.x, b.y, b.z)) for a, b in zip(path, path[1:])
        )

    def get_start_point(self) -> Point:
        return self.points[0]

    def get_end_point(self) -> Point:
        """Last point visited; the start point again for closed loops."""
        return self.points[0] if self.is_closed else self.points[-1]

    def signed_area(self) -> float:
        """Area of the xy projection; positive when counter-clockwise."""
        ring = LinearRing([(p.x, p.y) for p in self.points])
        area = Polygon(ring).area
        return area if ring.is_ccw else -area

    @property
    def winding(self) -> str:
        """'ccw' or 'cw' seen from +Z."""
        return "ccw" if self.signed_area() > 0 else "cw"

    def reverse(self) -> "ToolpathSegment":
        """Return a new segment with reversed point order."""
        return ToolpathSegment(
            points=list(reversed(self.points)),
            type=self.type,
            layer_index=self.layer_index,
            z_height=self.z_height,
            is_closed=self.is_closed,
            metadata=self.metadata.copy(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "layer": self.layer_index,
            "z": self.z_height,
            "closed": self.is_closed,
            "points": [[p.x, p.y, p.z] for p in self.points],
        }


@dataclass
class ToolpathSet:
    """
    All segments produced by one sweep.

    Attributes:
        segments: Segments in sweep order
        process_type: "additive" or "subtractive"
        step: Layer height or step-down used for the sweep
        heights: Every sampled height in sweep order, including empty ones
        metadata: Additional toolpath metadata
    """

    segments: List[ToolpathSegment] = field(default_factory=list)
    process_type: str = "additive"
    step: float = 1.0
    heights: List[float] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    @property
    def layer_count(self) -> int:
        """Number of heights sampled by the sweep."""
        return len(self.heights)

    def add_segment(self, segment: ToolpathSegment) -> None:
        """Add a segment to the toolpath."""
        self.segments.append(segment)

    def extend(self, segments: List[ToolpathSegment]) -> None:
        self.segments.extend(segments)

    def get_segments_by_layer(self, layer_index: int) -> List[ToolpathSegment]:
        """Get all segments for a specific layer."""
        return [seg for seg in self.segments if seg.layer_index == layer_index]

    def get_segments_at_height(
        self, z_height: float, tolerance: float = 1e-9
    ) -> List[ToolpathSegment]:
        """Get all segments cut within ``tolerance`` of ``z_height``."""
        return [seg for seg in self.segments if abs(seg.z_height - z_height) <= tolerance]

    def get_total_length(self) -> float:
        """Calculate total toolpath length."""
        return sum(seg.get_length() for seg in self.segments)

    def get_bounds(self) -> Tuple[Point, Point]:
        """
        Get bounding box of the toolpath.

        Returns:
            Tuple of (min_point, max_point)

        Raises:
            SlicingError: If the toolpath has no segments
        """
        if not self.segments:
            raise SlicingError("Toolpath has no segments")

        all_points = [p for seg in self.segments for p in seg.points]
        xs = [p.x for p in all_points]
        ys = [p.y for p in all_points]
        zs = [p.z for p in all_points]

        return Point(min(xs), min(ys), min(zs)), Point(max(xs), max(ys), max(zs))

    def to_dict(self, toolpath_id: Optional[str] = None) -> Dict[str, Any]:
        """JSON-ready payload for downstream path planning."""
        payload: Dict[str, Any] = {
            "processType": self.process_type,
            "step": self.step,
            "layerCount": self.layer_count,
            "heights": list(self.heights),
            "segments": [seg.to_dict() for seg in self.segments],
            "statistics": {
                "totalSegments": len(self.segments),
                "totalPoints": sum(len(seg.points) for seg in self.segments),
                "totalLength": self.get_total_length(),
            },
        }
        if toolpath_id is not None:
            payload["id"] = toolpath_id
        if self.metadata:
            payload["metadata"] = dict(self.metadata)
        return payload
