"""
Configuration management for planesweep.

Handles loading, validation, and access to slicing job configurations.
Each manufacturing mode has its own pydantic model; ``SlicingConfig`` is the
tagged union of them, keyed by ``mode``.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from planesweep.core.exceptions import ConfigurationError


class _SweepConfigBase(BaseModel):
    """Fields shared by every sweep mode."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_z: Optional[float] = None
    max_z: Optional[float] = None

    @field_validator("min_z", "max_z")
    @classmethod
    def _finite_bound(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not math.isfinite(value):
            raise ValueError("height bounds must be finite")
        return value

    @property
    def step(self) -> float:
        raise NotImplementedError

    def with_bounds(self, min_z: float, max_z: float) -> "_SweepConfigBase":
        """Return a copy with unset bounds filled in from the given extent."""
        return self.model_copy(
            update={
                "min_z": min_z if self.min_z is None else self.min_z,
                "max_z": max_z if self.max_z is None else self.max_z,
            }
        )


class AdditiveConfig(_SweepConfigBase):
    """Additive (bottom-up) slicing configuration."""

    mode: Literal["additive"] = "additive"
    layer_height: float = Field(gt=0, allow_inf_nan=False)

    @property
    def step(self) -> float:
        return self.layer_height


class SubtractiveConfig(_SweepConfigBase):
    """Subtractive (top-down) contour pass configuration."""

    mode: Literal["subtractive"] = "subtractive"
    step_down: float = Field(gt=0, allow_inf_nan=False)

    @property
    def step(self) -> float:
        return self.step_down


SlicingConfig = Annotated[
    Union[AdditiveConfig, SubtractiveConfig], Field(discriminator="mode")
]

_slicing_adapter: TypeAdapter = TypeAdapter(SlicingConfig)


class JobConfig(BaseModel):
    """A named slicing job: which model to slice and how."""

    name: str
    model: Optional[str] = None
    description: str = ""
    slicing: SlicingConfig


def parse_slicing_config(data: dict[str, Any]) -> Union[AdditiveConfig, SubtractiveConfig]:
    """
    Build the mode-specific configuration from a plain mapping.

    Args:
        data: Mapping with a ``mode`` key and the mode's parameters

    Returns:
        AdditiveConfig or SubtractiveConfig

    Raises:
        ConfigurationError: If the mapping does not validate
    """
    try:
        return _slicing_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid slicing configuration (mode={data.get('mode')!r})",
            details={"error": str(e)},
        ) from e


def load_job_config(path: str | Path) -> JobConfig:
    """
    Load a job configuration from a YAML file.

    Relative model paths are resolved against the job file's directory.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Job configuration not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse job config: {path}",
            details={"error": str(e)},
        ) from e

    if not data or "slicing" not in data:
        raise ConfigurationError(
            f"Job config has no 'slicing' section: {path}",
        )

    job_data = dict(data.get("job") or {})
    job_data.setdefault("name", path.stem)
    job_data["slicing"] = data["slicing"]

    model = job_data.get("model")
    if model and not Path(model).is_absolute():
        job_data["model"] = str(path.parent / model)

    try:
        return JobConfig(**job_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Failed to load job config: {path}",
            details={"error": str(e)},
        ) from e


@dataclass
class ConfigManager:
    """
    Central configuration manager for planesweep.

    Loads and validates job configurations from ``<config_dir>/jobs/*.yaml``.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> job = config.get_job("cube_additive")
        >>> job.slicing.layer_height
        1.0
    """

    config_dir: Path
    _jobs: dict[str, JobConfig] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all job configurations from disk."""
        jobs_dir = self.config_dir / "jobs"
        if jobs_dir.exists():
            for config_file in sorted(jobs_dir.glob("*.yaml")):
                self._jobs[config_file.stem] = load_job_config(config_file)
        self._loaded = True

    def get_job(self, name: str) -> JobConfig:
        """
        Get job configuration by name.

        Args:
            name: Job configuration name (without .yaml extension)

        Raises:
            ConfigurationError: If job not found
        """
        if not self._loaded:
            self.load()

        if name not in self._jobs:
            available = list(self._jobs.keys())
            raise ConfigurationError(
                f"Job configuration not found: {name}",
                details={"available": available},
            )
        return self._jobs[name]

    def list_jobs(self) -> list[str]:
        """List available job configurations."""
        if not self._loaded:
            self.load()
        return list(self._jobs.keys())
