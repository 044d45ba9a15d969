"""
Solid model abstraction used by the plane-sweep slicer.

The slicer only needs three things from a solid: a rigid translated copy,
the polygons where it meets a plane, and a 2D vertex loop for each of those
polygons. ``SolidModel`` names those capabilities; ``TrimeshSolid`` provides
them for triangle meshes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import numpy as np
import trimesh
from compas.datastructures import Mesh as CompasMesh

from planesweep.core.exceptions import GeometryError
from planesweep.core.geometry import GeometryConverter, GeometryLoader
from planesweep.geometry.loops import simplify_loop

Vector3 = Union[Sequence[float], np.ndarray]


@dataclass(frozen=True)
class Plane:
    """
    Infinite plane ``normal . p == offset``.

    The normal is normalised on construction.
    """

    normal: Tuple[float, float, float] = (0.0, 0.0, 1.0)
    offset: float = 0.0

    def __post_init__(self) -> None:
        normal = np.asarray(self.normal, dtype=np.float64)
        length = np.linalg.norm(normal)
        if normal.shape != (3,) or not np.isfinite(length) or length == 0.0:
            raise GeometryError(f"Plane normal must be a non-zero 3-vector, got {self.normal!r}")
        if not np.isfinite(self.offset):
            raise GeometryError(f"Plane offset must be finite, got {self.offset!r}")
        object.__setattr__(self, "normal", tuple(float(c) for c in normal / length))
        object.__setattr__(self, "offset", float(self.offset))

    @classmethod
    def horizontal(cls, z: float = 0.0) -> "Plane":
        """Plane with +Z normal at height ``z``."""
        return cls(normal=(0.0, 0.0, 1.0), offset=z)

    @property
    def origin(self) -> np.ndarray:
        """Point on the plane closest to the world origin."""
        return np.asarray(self.normal) * self.offset

    def basis(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        In-plane (u, v) axes, right-handed with the normal.

        For +Z planes this is exactly world X and Y, so 2D loops on a
        horizontal plane are plain (x, y) coordinates.
        """
        n = np.asarray(self.normal)
        if np.allclose(n, (0.0, 0.0, 1.0)):
            return np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])
        helper = np.array([0.0, 0.0, 1.0]) if abs(n[2]) < 0.9 else np.array([1.0, 0.0, 0.0])
        u = np.cross(helper, n)
        u /= np.linalg.norm(u)
        v = np.cross(n, u)
        return u, v


CANONICAL_PLANE = Plane.horizontal(0.0)


@dataclass(frozen=True, eq=False)
class PlanarPolygon:
    """Ordered vertex loop lying in ``plane``."""

    vertices: np.ndarray
    plane: Plane
    is_closed: bool = True

    def __len__(self) -> int:
        return len(self.vertices)


class SolidModel(ABC):
    """Capabilities the slicer requires from a solid."""

    @abstractmethod
    def translate(self, offset: Vector3) -> "SolidModel":
        """Return a rigidly translated copy; ``self`` must not change."""

    @abstractmethod
    def intersect_with_plane(self, plane: Plane) -> List[PlanarPolygon]:
        """Polygons where the solid meets ``plane``, each as a vertex loop."""

    @property
    @abstractmethod
    def bounds(self) -> np.ndarray:
        """Axis-aligned bounds as a (2, 3) array of min and max corners."""

    def polygon_to_2d_loop(self, polygon: PlanarPolygon) -> np.ndarray:
        """Project a planar polygon to its (n, 2) vertex loop in plane coordinates."""
        u, v = polygon.plane.basis()
        relative = np.asarray(polygon.vertices, dtype=np.float64) - polygon.plane.origin
        return np.column_stack((relative @ u, relative @ v))

    @property
    def z_extent(self) -> Tuple[float, float]:
        """Lowest and highest z of the solid."""
        low, high = self.bounds[:, 2]
        return float(low), float(high)


class TrimeshSolid(SolidModel):
    """
    Triangle-mesh solid backed by ``trimesh.Trimesh``.

    Plane intersection uses ``Trimesh.section``, which welds the
    triangle/plane segments into path entities; each entity becomes one
    loop with its collinear vertices merged.
    """

    def __init__(self, mesh: trimesh.Trimesh):
        if not isinstance(mesh, trimesh.Trimesh):
            raise GeometryError(f"Expected trimesh.Trimesh, got {type(mesh).__name__}")
        if len(mesh.faces) == 0:
            raise GeometryError("Cannot build a solid from a mesh without faces")
        self._mesh = mesh

    def __repr__(self) -> str:
        return f"TrimeshSolid(vertices={len(self._mesh.vertices)}, faces={len(self._mesh.faces)})"

    @property
    def mesh(self) -> trimesh.Trimesh:
        return self._mesh

    @classmethod
    def cube(
        cls,
        min_corner: Vector3 = (0.0, 0.0, 0.0),
        max_corner: Vector3 = (1.0, 1.0, 1.0),
    ) -> "TrimeshSolid":
        """Axis-aligned box spanning ``min_corner`` to ``max_corner``."""
        low = np.asarray(min_corner, dtype=np.float64)
        high = np.asarray(max_corner, dtype=np.float64)
        extents = high - low
        if np.any(extents <= 0):
            raise GeometryError(
                "Cube corners must span a positive volume",
                details={"min_corner": low.tolist(), "max_corner": high.tolist()},
            )
        center = trimesh.transformations.translation_matrix((low + high) / 2.0)
        return cls(trimesh.creation.box(extents=extents, transform=center))

    @property
    def bounds(self) -> np.ndarray:
        return np.array(self._mesh.bounds, dtype=np.float64)

    def translate(self, offset: Vector3) -> "TrimeshSolid":
        offset = np.asarray(offset, dtype=np.float64)
        if offset.shape != (3,):
            raise GeometryError(f"Translation must be a 3-vector, got shape {offset.shape}")
        moved = self._mesh.copy()
        moved.apply_translation(offset)
        return TrimeshSolid(moved)

    def intersect_with_plane(self, plane: Plane) -> List[PlanarPolygon]:
        section = self._mesh.section(plane_normal=plane.normal, plane_origin=plane.origin)
        if section is None:
            return []

        u, v = plane.basis()
        origin = plane.origin
        polygons = []
        for entity in section.entities:
            relative = entity.discrete(section.vertices) - origin
            loop = simplify_loop(
                np.column_stack((relative @ u, relative @ v)),
                closed=entity.closed,
                scale=section.scale,
            )
            vertices = origin + np.outer(loop[:, 0], u) + np.outer(loop[:, 1], v)
            polygons.append(PlanarPolygon(vertices=vertices, plane=plane, is_closed=entity.closed))
        return polygons

def as_solid(model: Union[SolidModel, trimesh.Trimesh, CompasMesh]) -> SolidModel:
    """
    Wrap a mesh in the solid interface the slicer expects.

    Accepts an existing ``SolidModel``, a ``trimesh.Trimesh`` or a COMPAS mesh.

    Raises:
        GeometryError: For any other input type
    """
    if isinstance(model, SolidModel):
        return model
    if isinstance(model, trimesh.Trimesh):
        return TrimeshSolid(model)
    if isinstance(model, CompasMesh):
        return TrimeshSolid(GeometryConverter.compas_to_trimesh(model))
    raise GeometryError(f"Unsupported model type: {type(model).__name__}")


def load_solid(file_path: Union[str, Path]) -> TrimeshSolid:
    """Load a mesh file (STL, OBJ, PLY, OFF) as a solid."""
    return TrimeshSolid(GeometryLoader.load_trimesh(file_path))
