"""
Custom exceptions for planesweep.

All planesweep exceptions inherit from PlaneSweepError for easy catching.
"""

from typing import Any


class PlaneSweepError(Exception):
    """Base exception for all planesweep errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(PlaneSweepError):
    """Raised when configuration is invalid or missing."""

    pass


class GeometryError(PlaneSweepError):
    """Raised when geometry loading, conversion or intersection fails."""

    pass


class SlicingError(PlaneSweepError):
    """Raised when slicing/toolpath generation fails."""

    def __init__(
        self,
        message: str,
        z_height: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.z_height = z_height
