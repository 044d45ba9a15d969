"""
Tests for the additive and subtractive sweep generators.
"""

import pytest
from compas.datastructures import Mesh as CompasMesh

from planesweep.core.config import AdditiveConfig, SubtractiveConfig
from planesweep.core.exceptions import ConfigurationError
from planesweep.core.geometry import GeometryConverter
from planesweep.geometry.solid import TrimeshSolid
from planesweep.slicing.generators import (
    EPSILON,
    GENERATOR_REGISTRY,
    AdditiveToolpathGenerator,
    SubtractiveToolpathGenerator,
    SweepPlan,
    generate_toolpaths,
    get_generator,
    sweep_count,
)
from planesweep.slicing.toolpath import ToolpathType

CUBE_CORNERS = {(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)}


def corners(segment):
    return {(round(p.x, 6), round(p.y, 6)) for p in segment.points}


@pytest.mark.unit
class TestSweepCount:
    """Tests for sweep_count and SweepPlan."""

    @pytest.mark.parametrize(
        "min_z, max_z, step, expected",
        [
            (0.0, 10.0, 1.0, 11),
            (0.0, 10.0, 2.0, 6),
            (0.0, 10.0, 3.0, 4),
            (0.0, 1.0, 0.1, 11),
            (0.0, 0.3, 0.1, 4),
            (2.0, 2.0, 0.5, 1),
            (5.0, 1.0, 1.0, 0),
        ],
    )
    def test_counts(self, min_z, max_z, step, expected):
        assert sweep_count(min_z, max_z, step) == expected

    def test_range_inverted_within_tolerance_still_samples(self):
        assert sweep_count(1.0 + EPSILON / 2, 1.0, 0.5) == 1

    @pytest.mark.parametrize("step", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_step(self, step):
        with pytest.raises(ConfigurationError, match="positive"):
            sweep_count(0.0, 1.0, step)

    def test_bad_bounds(self):
        with pytest.raises(ConfigurationError, match="finite"):
            sweep_count(0.0, float("inf"), 1.0)

    def test_ascending_plan(self):
        plan = SweepPlan.ascending(0.0, 1.0, 0.25)
        assert plan.heights() == [0.0, 0.25, 0.5, 0.75, 1.0]
        assert len(plan) == 5

    def test_descending_plan(self):
        plan = SweepPlan.descending(0.0, 10.0, 2.0)
        assert plan.heights() == [10.0, 8.0, 6.0, 4.0, 2.0, 0.0]

    def test_heights_by_index_do_not_drift(self):
        heights = SweepPlan.ascending(0.0, 1.0, 0.1).heights()
        assert heights[-1] == pytest.approx(1.0, abs=1e-12)
        assert heights[3] == pytest.approx(0.3, abs=1e-12)

    def test_plan_rejects_zero_step(self):
        with pytest.raises(ConfigurationError):
            SweepPlan(start=0.0, step=0.0, count=3)

    def test_plan_rejects_negative_count(self):
        with pytest.raises(ConfigurationError):
            SweepPlan(start=0.0, step=1.0, count=-1)


@pytest.mark.unit
@pytest.mark.slicing
class TestAdditiveGenerator:
    """Tests for AdditiveToolpathGenerator."""

    def test_cube_layers(self, cube):
        config = AdditiveConfig(layer_height=1.0, min_z=0.0, max_z=10.0)
        toolpath = AdditiveToolpathGenerator().generate(cube, config)

        assert toolpath.process_type == "additive"
        assert toolpath.step == 1.0
        assert toolpath.heights == [float(z) for z in range(11)]
        assert toolpath.layer_count == 11

        for layer_index in range(1, 10):
            (segment,) = toolpath.get_segments_by_layer(layer_index)
            assert segment.type == ToolpathType.PERIMETER
            assert segment.z_height == float(layer_index)
            assert corners(segment) == CUBE_CORNERS
            assert all(p.z == float(layer_index) for p in segment.points)

        (bottom,) = toolpath.get_segments_by_layer(0)
        assert corners(bottom) == CUBE_CORNERS
        assert toolpath.get_segments_by_layer(10) == []

    def test_segments_in_ascending_order(self, cube):
        toolpath = AdditiveToolpathGenerator().generate(
            cube, AdditiveConfig(layer_height=0.7, min_z=0.2, max_z=9.9)
        )
        z_values = [seg.z_height for seg in toolpath.segments]
        assert z_values == sorted(z_values)
        assert all(len(seg.points) >= 3 for seg in toolpath.segments)

    def test_no_forced_last_layer(self, cube):
        toolpath = AdditiveToolpathGenerator().generate(
            cube, AdditiveConfig(layer_height=3.0, min_z=0.5, max_z=9.0)
        )
        assert toolpath.heights == [0.5, 3.5, 6.5]

    def test_bounds_default_to_model_extent(self, cube):
        toolpath = AdditiveToolpathGenerator().generate(cube, AdditiveConfig(layer_height=2.5))
        assert toolpath.heights == [0.0, 2.5, 5.0, 7.5, 10.0]
        assert toolpath.metadata == {"min_z": 0.0, "max_z": 10.0}

    def test_inverted_range_is_empty(self, cube):
        toolpath = AdditiveToolpathGenerator().generate(
            cube, AdditiveConfig(layer_height=1.0, min_z=8.0, max_z=2.0)
        )
        assert toolpath.heights == []
        assert len(toolpath) == 0

    def test_rejects_wrong_config_type(self, cube):
        with pytest.raises(ConfigurationError, match="expects AdditiveConfig"):
            AdditiveToolpathGenerator().generate(cube, SubtractiveConfig(step_down=1.0))

    def test_rejects_unvalidated_zero_step(self, cube):
        config = AdditiveConfig.model_construct(layer_height=0.0, min_z=0.0, max_z=1.0)
        with pytest.raises(ConfigurationError, match="positive"):
            AdditiveToolpathGenerator().generate(cube, config)

    def test_accepts_compas_mesh(self, cube):
        compas_mesh = GeometryConverter.trimesh_to_compas(cube.mesh)
        assert isinstance(compas_mesh, CompasMesh)

        toolpath = AdditiveToolpathGenerator().generate(
            compas_mesh, AdditiveConfig(layer_height=5.0, min_z=2.5, max_z=7.5)
        )
        assert [seg.z_height for seg in toolpath] == [2.5, 7.5]


@pytest.mark.unit
@pytest.mark.slicing
class TestSubtractiveGenerator:
    """Tests for SubtractiveToolpathGenerator."""

    def test_cube_passes(self, cube):
        config = SubtractiveConfig(step_down=2.0, min_z=0.0, max_z=10.0)
        toolpath = SubtractiveToolpathGenerator().generate(cube, config)

        assert toolpath.process_type == "subtractive"
        assert toolpath.heights == [10.0, 8.0, 6.0, 4.0, 2.0, 0.0]

        for layer_index, z in enumerate([8.0, 6.0, 4.0, 2.0], start=1):
            (segment,) = toolpath.get_segments_by_layer(layer_index)
            assert segment.type == ToolpathType.CONTOUR
            assert segment.z_height == z
            assert corners(segment) == CUBE_CORNERS

    def test_segments_in_descending_order(self, cube):
        toolpath = SubtractiveToolpathGenerator().generate(
            cube, SubtractiveConfig(step_down=0.9, min_z=0.1, max_z=9.6)
        )
        z_values = [seg.z_height for seg in toolpath.segments]
        assert z_values == sorted(z_values, reverse=True)
        assert len(toolpath.heights) == sweep_count(0.1, 9.6, 0.9)

    def test_final_pass_not_forced_to_min_z(self, cube):
        toolpath = SubtractiveToolpathGenerator().generate(
            cube, SubtractiveConfig(step_down=4.0, min_z=1.0, max_z=9.5)
        )
        assert toolpath.heights == [9.5, 5.5, 1.5]


@pytest.mark.unit
@pytest.mark.slicing
class TestGenerateToolpaths:
    """Tests for the mode-dispatching entry point."""

    def test_registry(self):
        assert GENERATOR_REGISTRY["additive"] is AdditiveToolpathGenerator
        assert GENERATOR_REGISTRY["subtractive"] is SubtractiveToolpathGenerator

    def test_get_generator(self):
        assert isinstance(get_generator(" Additive "), AdditiveToolpathGenerator)
        generator = get_generator("subtractive", max_workers=3)
        assert generator.max_workers == 3

    def test_get_unknown_generator(self):
        with pytest.raises(ConfigurationError, match="Available modes: additive, subtractive"):
            get_generator("adaptive")

    def test_rejects_bad_worker_count(self):
        with pytest.raises(ConfigurationError):
            AdditiveToolpathGenerator(max_workers=0)

    def test_dispatch_additive(self, cube):
        toolpath = generate_toolpaths(cube, AdditiveConfig(layer_height=1.0, min_z=0.0, max_z=10.0))
        assert toolpath.process_type == "additive"
        assert toolpath.layer_count == 11

    def test_dispatch_subtractive(self, cube):
        toolpath = generate_toolpaths(cube, SubtractiveConfig(step_down=2.0, min_z=0.0, max_z=10.0))
        assert toolpath.process_type == "subtractive"
        assert toolpath.layer_count == 6

    def test_parallel_matches_sequential(self):
        solid = TrimeshSolid.cube((-2.0, -2.0, -1.0), (3.0, 4.0, 6.0))
        config = AdditiveConfig(layer_height=0.35)

        sequential = generate_toolpaths(solid, config)
        parallel = generate_toolpaths(solid, config, max_workers=4)

        assert parallel.heights == sequential.heights
        assert len(parallel) == len(sequential)
        for a, b in zip(sequential, parallel):
            assert a.layer_index == b.layer_index
            assert a.z_height == b.z_height
            assert [(p.x, p.y, p.z) for p in a.points] == [(p.x, p.y, p.z) for p in b.points]

    def test_deterministic(self, cube):
        config = SubtractiveConfig(step_down=1.5)
        first = generate_toolpaths(cube, config).to_dict()
        second = generate_toolpaths(cube, config).to_dict()
        assert first == second
