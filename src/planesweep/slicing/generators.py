"""
Height-sweep toolpath generators for additive and subtractive modes.

Both modes run the same plane-sweep slicer and differ only in where the sweep
starts and which way it steps:

- additive: from ``min_z`` up in ``layer_height`` increments
- subtractive: from ``max_z`` down in ``step_down`` increments

The number of heights is computed up front as
``floor((max_z - min_z + EPSILON) / step) + 1`` and heights are produced by
index, so repeated float addition never decides whether the last layer is
included.
"""

import math
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type, Union

from planesweep.core.config import AdditiveConfig, SubtractiveConfig
from planesweep.core.exceptions import ConfigurationError
from planesweep.core.logging import bind_sweep, get_logger
from planesweep.geometry.solid import SolidModel, as_solid
from planesweep.slicing.plane_sweep import ModelLike, PlaneSweepSlicer
from planesweep.slicing.toolpath import ToolpathSegment, ToolpathSet, ToolpathType

logger = get_logger(__name__)

# admits the final height despite rounding in (max_z - min_z) / step
EPSILON = 1e-7


def sweep_count(min_z: float, max_z: float, step: float) -> int:
    """
    Number of heights a sweep of ``step`` samples between ``min_z`` and ``max_z``.

    Raises:
        ConfigurationError: If ``step`` is not a positive finite number or a
            bound is not finite
    """
    if not (math.isfinite(step) and step > 0):
        raise ConfigurationError(f"Sweep step must be positive, got {step!r}")
    if not (math.isfinite(min_z) and math.isfinite(max_z)):
        raise ConfigurationError(
            "Sweep bounds must be finite",
            details={"min_z": min_z, "max_z": max_z},
        )

    span = max_z - min_z
    if span < -EPSILON:
        return 0
    return int(math.floor((span + EPSILON) / step)) + 1


@dataclass(frozen=True)
class SweepPlan:
    """Heights ``start + i * step`` for ``i`` in ``range(count)``; ``step`` is signed."""

    start: float
    step: float
    count: int

    def __post_init__(self) -> None:
        if not math.isfinite(self.start):
            raise ConfigurationError(f"Sweep start must be finite, got {self.start!r}")
        if not math.isfinite(self.step) or self.step == 0:
            raise ConfigurationError(f"Sweep step must be non-zero, got {self.step!r}")
        if self.count < 0:
            raise ConfigurationError(f"Sweep count must not be negative, got {self.count!r}")

    @classmethod
    def ascending(cls, min_z: float, max_z: float, step: float) -> "SweepPlan":
        return cls(start=min_z, step=step, count=sweep_count(min_z, max_z, step))

    @classmethod
    def descending(cls, min_z: float, max_z: float, step: float) -> "SweepPlan":
        return cls(start=max_z, step=-step, count=sweep_count(min_z, max_z, step))

    def heights(self) -> List[float]:
        return [self.start + i * self.step for i in range(self.count)]

    def __len__(self) -> int:
        return self.count


SweepConfig = Union[AdditiveConfig, SubtractiveConfig]


class SweepGenerator(ABC):
    """
    Drives the plane-sweep slicer over a planned sequence of heights.

    Subclasses only decide the plan and the segment type.
    """

    mode: str = ""
    config_type: Type[SweepConfig]
    segment_type: ToolpathType

    def __init__(
        self,
        slicer: Optional[PlaneSweepSlicer] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Args:
            slicer: Slicer to run at each height (default: new PlaneSweepSlicer)
            max_workers: Slice heights on this many threads; ``None`` or 1
                slices sequentially. Output is identical either way.
        """
        if max_workers is not None and max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        self.slicer = slicer or PlaneSweepSlicer()
        self.max_workers = max_workers

    @abstractmethod
    def plan(self, config: SweepConfig) -> SweepPlan:
        """Heights to slice for a config whose bounds are already resolved."""

    def resolve(self, config: SweepConfig, solid: SolidModel) -> SweepConfig:
        """Check the config matches this mode and fill missing bounds from the solid."""
        if not isinstance(config, self.config_type):
            raise ConfigurationError(
                f"{type(self).__name__} expects {self.config_type.__name__}, "
                f"got {type(config).__name__}"
            )
        if config.min_z is None or config.max_z is None:
            config = config.with_bounds(*solid.z_extent)
        return config

    def generate(self, model: ModelLike, config: SweepConfig) -> ToolpathSet:
        """
        Slice ``model`` at every planned height.

        Returns:
            ToolpathSet with segments grouped by height in sweep order

        Raises:
            ConfigurationError: If the config is invalid for this mode
        """
        solid = as_solid(model)
        config = self.resolve(config, solid)
        plan = self.plan(config)
        heights = plan.heights()

        toolpath = ToolpathSet(
            process_type=self.mode,
            step=config.step,
            heights=heights,
            metadata={"min_z": config.min_z, "max_z": config.max_z},
        )

        with bind_sweep(self.mode, config.step, len(heights)):
            logger.info("sweep_started", min_z=config.min_z, max_z=config.max_z)

            empty = 0
            for layer_index, (z, segments) in enumerate(zip(heights, self._slice_all(solid, heights))):
                logger.debug("height_sliced", layer=layer_index, z=z, loops=len(segments))
                if not segments:
                    empty += 1
                toolpath.extend(segments)

            logger.info(
                "sweep_complete",
                segments=len(toolpath.segments),
                empty_heights=empty,
            )

        return toolpath

    def _slice_one(self, solid: SolidModel, layer_index: int, z: float) -> List[ToolpathSegment]:
        return self.slicer.slice(solid, z, layer_index=layer_index, segment_type=self.segment_type)

    def _slice_all(self, solid: SolidModel, heights: List[float]) -> List[List[ToolpathSegment]]:
        # one bucket per height, in plan order
        if self.max_workers and self.max_workers > 1 and len(heights) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(
                    pool.map(self._slice_one, [solid] * len(heights), range(len(heights)), heights)
                )
        return [self._slice_one(solid, i, z) for i, z in enumerate(heights)]


class AdditiveToolpathGenerator(SweepGenerator):
    """One perimeter slice per layer, bottom to top."""

    mode = "additive"
    config_type = AdditiveConfig
    segment_type = ToolpathType.PERIMETER

    def plan(self, config: AdditiveConfig) -> SweepPlan:
        return SweepPlan.ascending(config.min_z, config.max_z, config.layer_height)


class SubtractiveToolpathGenerator(SweepGenerator):
    """
    One contour pass per cutting level, top to bottom.

    Passes are raw cross-section contours; no tool-radius offset is applied.
    """

    mode = "subtractive"
    config_type = SubtractiveConfig
    segment_type = ToolpathType.CONTOUR

    def plan(self, config: SubtractiveConfig) -> SweepPlan:
        return SweepPlan.descending(config.min_z, config.max_z, config.step_down)


# Mode name -> generator class mapping
GENERATOR_REGISTRY: Dict[str, Type[SweepGenerator]] = {
    "additive": AdditiveToolpathGenerator,
    "subtractive": SubtractiveToolpathGenerator,
}


def get_generator(mode: str, **kwargs: Any) -> SweepGenerator:
    """
    Create a generator instance for the given manufacturing mode.

    Args:
        mode: Key in ``GENERATOR_REGISTRY`` ('additive', 'subtractive')
        **kwargs: Keyword arguments forwarded to the generator constructor

    Raises:
        ConfigurationError: If ``mode`` is not registered

    Examples:
        >>> gen = get_generator("additive")
        >>> gen = get_generator("subtractive", max_workers=4)
    """
    mode_lower = mode.strip().lower()

    if mode_lower not in GENERATOR_REGISTRY:
        available = ", ".join(sorted(GENERATOR_REGISTRY.keys()))
        raise ConfigurationError(
            f"Unknown manufacturing mode '{mode}'. Available modes: {available}"
        )

    return GENERATOR_REGISTRY[mode_lower](**kwargs)


def generate_toolpaths(
    model: ModelLike,
    config: SweepConfig,
    max_workers: Optional[int] = None,
) -> ToolpathSet:
    """
    Generate toolpaths for ``model`` in the mode ``config`` selects.

    Args:
        model: Solid, trimesh or COMPAS mesh to slice
        config: AdditiveConfig or SubtractiveConfig
        max_workers: Optional thread count for slicing heights in parallel

    Returns:
        ToolpathSet ordered by height in sweep direction
    """
    generator = get_generator(config.mode, max_workers=max_workers)
    return generator.generate(model, config)
