"""
Input validation utilities for graph-scene.

Provides centralized validation functions for viewport sizes and numeric
configuration parameters. Raises descriptive exceptions on invalid input.
"""

from __future__ import annotations

import math
from typing import Sequence

from .errors import GraphSceneError


class ValidationError(GraphSceneError, ValueError):
    """Base exception for validation errors."""

    pass


class InvalidCanvasSizeError(ValidationError):
    """Raised when viewport dimensions are invalid."""

    pass


class InvalidParameterError(ValidationError):
    """Raised when a numeric parameter is out of its allowed range."""

    pass


def validate_canvas_size(size: Sequence[float]) -> tuple[float, float]:
    """
    Validate viewport size dimensions.

    Args:
        size: [width, height] sequence

    Returns:
        Validated (width, height) tuple

    Raises:
        InvalidCanvasSizeError: If dimensions are invalid
    """
    if len(size) < 2:
        raise InvalidCanvasSizeError(
            f"Canvas size must have 2 elements [width, height], got {len(size)}"
        )

    width, height = float(size[0]), float(size[1])

    if not math.isfinite(width) or width <= 0:
        raise InvalidCanvasSizeError(f"Canvas width must be positive, got {width}")
    if not math.isfinite(height) or height <= 0:
        raise InvalidCanvasSizeError(f"Canvas height must be positive, got {height}")

    return width, height


def validate_positive(value: float, name: str) -> float:
    """
    Validate that a parameter is strictly positive.

    Raises:
        InvalidParameterError: If value <= 0 or not finite
    """
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, name: str) -> float:
    """Validate that a parameter is zero or positive."""
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {value}")
    return value


def validate_in_range(value: float, name: str, low: float, high: float) -> float:
    """
    Validate that a parameter lies in the closed range [low, high].

    Raises:
        InvalidParameterError: If value is outside the range
    """
    value = float(value)
    if not (low <= value <= high):
        raise InvalidParameterError(f"{name} must be in [{low}, {high}], got {value}")
    return value


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is positive.

    Raises:
        InvalidParameterError: If iterations < 1
    """
    if int(iterations) < 1:
        raise InvalidParameterError(f"iterations must be >= 1, got {iterations}")
    return int(iterations)


__all__ = [
    "ValidationError",
    "InvalidCanvasSizeError",
    "InvalidParameterError",
    "validate_canvas_size",
    "validate_positive",
    "validate_non_negative",
    "validate_in_range",
    "validate_iterations",
]
