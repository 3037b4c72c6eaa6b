from __future__ import annotations

import math
from numbers import Real
from typing import Sequence

import numpy as np

from .errors import (
    InsufficientDataError,
    InvalidConfidenceLevelError,
    MissingDataError,
    NonFiniteDataError,
    RequestValidationError,
)


def to_pnl_array(pnl: Sequence[float] | np.ndarray | None) -> np.ndarray:
    """Return a private float copy of a P&L series, rejecting absent or malformed data.

    Accepts lists, tuples, numpy arrays and pandas Series. The caller's object is
    never modified; the returned array is a fresh copy safe to sort in place.
    """
    if pnl is None:
        raise MissingDataError()
    try:
        values = np.array(pnl, dtype=float)
    except (TypeError, ValueError, OverflowError) as exc:
        raise NonFiniteDataError() from exc
    if values.size == 0:
        raise MissingDataError()
    if values.ndim != 1 or not np.isfinite(values).all():
        raise NonFiniteDataError()
    return values


def validate_min_data_points(values: Sequence[float], min_data_points: int) -> None:
    if len(values) < min_data_points:
        raise InsufficientDataError(required=min_data_points, actual=len(values))


def validate_confidence_level(confidence_level: float) -> float:
    """Validate that the confidence level lies strictly inside (0, 1)."""
    if isinstance(confidence_level, bool) or not isinstance(
        confidence_level, (Real, np.floating, np.integer)
    ):
        raise InvalidConfidenceLevelError(confidence_level)
    level = float(confidence_level)
    if math.isnan(level) or not (0.0 < level < 1.0):
        raise InvalidConfidenceLevelError(confidence_level)
    return level


def validate_input(
    pnl: Sequence[float] | np.ndarray | None,
    confidence_level: float,
    min_data_points: int,
) -> tuple[np.ndarray, float]:
    """Run every precondition check in order and return the validated copy and level.

    Order: missing/empty data, malformed data, too few points, confidence level.
    """
    values = to_pnl_array(pnl)
    validate_min_data_points(values, min_data_points)
    level = validate_confidence_level(confidence_level)
    return values, level


def require_identifier(value: str | None, label: str) -> str:
    """Reject blank identifiers on service requests."""
    if value is None or not str(value).strip():
        raise RequestValidationError(f"{label} is required")
    return str(value).strip()
