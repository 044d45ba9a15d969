"""
Core module - Shared configuration, exceptions, geometry I/O and logging.
"""

from planesweep.core.config import (
    AdditiveConfig,
    ConfigManager,
    JobConfig,
    SlicingConfig,
    SubtractiveConfig,
    load_job_config,
    parse_slicing_config,
)
from planesweep.core.exceptions import (
    PlaneSweepError,
    ConfigurationError,
    GeometryError,
    SlicingError,
)
from planesweep.core.geometry import GeometryConverter, GeometryLoader

__all__ = [
    # Config
    "AdditiveConfig",
    "ConfigManager",
    "JobConfig",
    "SlicingConfig",
    "SubtractiveConfig",
    "load_job_config",
    "parse_slicing_config",
    # Exceptions
    "PlaneSweepError",
    "ConfigurationError",
    "GeometryError",
    "SlicingError",
    # Geometry I/O
    "GeometryConverter",
    "GeometryLoader",
]
