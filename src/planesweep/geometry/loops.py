"""
Boundary loop clean-up for planar cross-sections.

trimesh returns a cross-section as path entities, one per connected chain of
triangle/plane segments. The helpers here strip redundant vertices from
those chains and give the loops of one section a consistent winding so
downstream path planning can tell material side from air side.
"""

from typing import List, Optional

import numpy as np
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from trimesh.path.simplify import merge_colinear
from trimesh.util import is_ccw


def simplify_loop(points: np.ndarray, closed: bool = True, scale: float = 1.0) -> np.ndarray:
    """
    Drop duplicate and collinear vertices from a 2D chain.

    Args:
        points: (n, 2) vertices; closed chains may repeat their first vertex
            at the end, as ``trimesh`` path entities do
        closed: Whether the chain wraps around
        scale: Drawing scale passed to ``merge_colinear`` (``Path.scale``)

    Returns:
        Simplified vertices. Closed loops never repeat their first vertex;
        open chains keep both end points.
    """
    merged = merge_colinear(np.asarray(points, dtype=np.float64), scale=scale)
    if not closed:
        return merged

    if len(merged) > 1 and np.allclose(merged[0], merged[-1]):
        merged = merged[:-1]

    # merge_colinear always keeps the first vertex, so test it against its
    # wrap-around neighbours
    if len(merged) >= 3:
        corner = merge_colinear(np.array([merged[-1], merged[0], merged[1]]), scale=scale)
        if len(corner) < 3:
            merged = merged[1:]

    return merged


def is_loop_ccw(loop: np.ndarray) -> bool:
    """Whether a closed 2D loop (first vertex not repeated) runs counter-clockwise."""
    loop = np.asarray(loop, dtype=np.float64)
    return bool(is_ccw(np.vstack((loop, loop[:1]))))


def orient_loops(
    loops: List[np.ndarray],
    closed: Optional[List[bool]] = None,
) -> List[np.ndarray]:
    """
    Apply the winding convention to the loops of one cross-section.

    Closed loops nested an even number of times (outer boundaries) become
    counter-clockwise, those nested an odd number of times (holes) become
    clockwise. Open chains are returned untouched. Loop order is preserved.

    Args:
        loops: 2D loops, each (n, 2)
        closed: Per-loop closed flags (default: all closed)
    """
    if closed is None:
        closed = [True] * len(loops)

    candidates = [i for i, loop in enumerate(loops) if closed[i] and len(loop) >= 3]
    shapes = {i: ShapelyPolygon(loops[i]) for i in candidates}
    oriented = list(loops)

    for i in candidates:
        probe = ShapelyPoint(loops[i][0])
        depth = sum(1 for j in candidates if j != i and shapes[j].contains(probe))
        if is_loop_ccw(loops[i]) != (depth % 2 == 0):
            oriented[i] = loops[i][::-1].copy()

    return oriented
