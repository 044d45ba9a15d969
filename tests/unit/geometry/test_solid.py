"""
Tests for the solid model interface and its trimesh implementation.
"""

import numpy as np
import pytest
import trimesh

from planesweep.core.exceptions import GeometryError
from planesweep.core.geometry import GeometryConverter
from planesweep.geometry.solid import (
    CANONICAL_PLANE,
    PlanarPolygon,
    Plane,
    SolidModel,
    TrimeshSolid,
    as_solid,
    load_solid,
)


@pytest.mark.unit
class TestPlane:
    """Tests for Plane."""

    def test_canonical_plane(self):
        assert CANONICAL_PLANE.normal == (0.0, 0.0, 1.0)
        assert CANONICAL_PLANE.offset == 0.0

    def test_normal_is_normalised(self):
        plane = Plane(normal=(0.0, 0.0, 5.0), offset=2.0)
        assert plane.normal == pytest.approx((0.0, 0.0, 1.0))
        np.testing.assert_allclose(plane.origin, [0.0, 0.0, 2.0])

    def test_zero_normal_rejected(self):
        with pytest.raises(GeometryError, match="non-zero"):
            Plane(normal=(0.0, 0.0, 0.0))

    def test_infinite_offset_rejected(self):
        with pytest.raises(GeometryError):
            Plane(offset=float("inf"))

    def test_horizontal_basis_is_world_xy(self):
        u, v = Plane.horizontal(3.0).basis()
        np.testing.assert_array_equal(u, [1.0, 0.0, 0.0])
        np.testing.assert_array_equal(v, [0.0, 1.0, 0.0])

    @pytest.mark.parametrize("normal", [(1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (1.0, 1.0, 1.0)])
    def test_basis_is_orthonormal(self, normal):
        plane = Plane(normal=normal)
        u, v = plane.basis()
        n = np.asarray(plane.normal)

        assert np.dot(u, v) == pytest.approx(0.0, abs=1e-12)
        assert np.dot(u, n) == pytest.approx(0.0, abs=1e-12)
        assert np.linalg.norm(u) == pytest.approx(1.0)
        np.testing.assert_allclose(np.cross(u, v), n, atol=1e-12)


@pytest.mark.unit
class TestTrimeshSolid:
    """Tests for TrimeshSolid."""

    def test_cube_bounds(self, cube):
        np.testing.assert_allclose(cube.bounds, [[0, 0, 0], [10, 10, 10]])
        assert cube.z_extent == pytest.approx((0.0, 10.0))

    def test_cube_rejects_flat_box(self):
        with pytest.raises(GeometryError, match="positive volume"):
            TrimeshSolid.cube((0, 0, 0), (1, 1, 0))

    def test_rejects_non_mesh(self):
        with pytest.raises(GeometryError):
            TrimeshSolid("not a mesh")

    def test_translate_returns_copy(self, cube):
        moved = cube.translate((0.0, 0.0, -4.0))

        assert moved is not cube
        np.testing.assert_allclose(moved.bounds, [[0, 0, -4], [10, 10, 6]])
        np.testing.assert_allclose(cube.bounds, [[0, 0, 0], [10, 10, 10]])

    def test_translate_rejects_bad_vector(self, cube):
        with pytest.raises(GeometryError):
            cube.translate((1.0, 2.0))

    def test_intersect_cube_gives_square(self, cube):
        moved = cube.translate((0.0, 0.0, -5.0))
        polygons = moved.intersect_with_plane(CANONICAL_PLANE)

        assert len(polygons) == 1
        polygon = polygons[0]
        assert isinstance(polygon, PlanarPolygon)
        assert polygon.is_closed
        assert len(polygon) == 4
        np.testing.assert_allclose(polygon.vertices[:, 2], 0.0, atol=1e-12)

    def test_intersect_misses(self, cube):
        assert cube.intersect_with_plane(Plane.horizontal(25.0)) == []

    def test_intersect_off_axis_plane(self, cube):
        plane = Plane(normal=(1.0, 0.0, 0.0), offset=3.0)
        polygons = cube.intersect_with_plane(plane)

        assert len(polygons) == 1
        np.testing.assert_allclose(polygons[0].vertices[:, 0], 3.0, atol=1e-9)

    def test_polygon_to_2d_loop_canonical(self, cube):
        moved = cube.translate((0.0, 0.0, -5.0))
        (polygon,) = moved.intersect_with_plane(CANONICAL_PLANE)
        loop = moved.polygon_to_2d_loop(polygon)

        assert loop.shape == (4, 2)
        np.testing.assert_allclose(loop, polygon.vertices[:, :2])

    def test_is_solid_model(self, cube):
        assert isinstance(cube, SolidModel)


@pytest.mark.unit
class TestAsSolid:
    """Tests for as_solid and load_solid."""

    def test_passthrough(self, cube):
        assert as_solid(cube) is cube

    def test_from_trimesh(self):
        solid = as_solid(trimesh.creation.box(extents=[1, 2, 3]))
        assert isinstance(solid, TrimeshSolid)
        assert solid.z_extent == pytest.approx((-1.5, 1.5))

    def test_from_compas(self, cube):
        compas_mesh = GeometryConverter.trimesh_to_compas(cube.mesh)
        solid = as_solid(compas_mesh)
        np.testing.assert_allclose(solid.bounds, cube.bounds)

    def test_unsupported(self):
        with pytest.raises(GeometryError, match="Unsupported model type"):
            as_solid([1, 2, 3])

    def test_load_solid(self, cube_stl):
        solid = load_solid(cube_stl)
        assert isinstance(solid, TrimeshSolid)
        np.testing.assert_allclose(solid.bounds, [[0, 0, 0], [10, 10, 10]])
