# -*- coding: utf-8 -*-
"""pandas-ta dual -- pre-condition checks.

Called at the top of every batch / seed / step entry point, before any
output buffer is written.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

import math
import numbers

import numpy as np

from ._errors import (
    InsufficientData,
    InvalidData,
    InvalidParameter,
    LengthMismatch,
    NaNDetected,
)


def validate_period(period: Any, minimum: int = 2, name: str = "period") -> int:
    """Integer window length; an integral float such as 5.0 counts as 5."""
    if isinstance(period, (float, np.floating)) and float(period).is_integer():
        period = int(period)
    if isinstance(period, (bool, np.bool_)) or not isinstance(period, numbers.Integral):
        raise InvalidParameter(f"[X] {name} must be an integer, got {period!r}")
    period = int(period)
    if period < minimum:
        raise InvalidParameter(f"[X] {name}={period} is below the minimum of {minimum}")
    return period


def validate_range(
    name: str,
    value: Any,
    low: Optional[float] = None,
    high: Optional[float] = None,
    *,
    low_inclusive: bool = True,
    high_inclusive: bool = True,
) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise InvalidParameter(f"[X] {name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameter(f"[X] {name} must be finite, got {value!r}")
    if low is not None:
        if value < low or (value == low and not low_inclusive):
            raise InvalidParameter(f"[X] {name}={value} is out of range (low={low})")
    if high is not None:
        if value > high or (value == high and not high_inclusive):
            raise InvalidParameter(f"[X] {name}={value} is out of range (high={high})")
    return value


def validate_order(
    low_name: str, low: Any, high_name: str, high: Any, *, strict: bool = False
) -> None:
    """``low <= high`` (``low < high`` when *strict*)."""
    if low > high or (strict and low == high):
        op = "<" if strict else "<="
        raise InvalidParameter(
            f"[X] expected {low_name} {op} {high_name}, got {low_name}={low} {high_name}={high}"
        )


def validate_not_empty(input_len: int) -> None:
    if input_len == 0:
        raise InvalidData("[X] input series is empty")


def validate_lengths(input_len: int, output_len: int) -> None:
    if input_len != output_len:
        raise LengthMismatch(
            f"[X] length mismatch: expected {input_len}, got {output_len}"
        )


def validate_sufficient_data(input_len: int, lookback: int) -> None:
    if input_len <= lookback:
        raise InsufficientData(
            f"[X] need more than {lookback} samples, got {input_len}"
        )


def validate_no_nan(series: np.ndarray, name: str = "input") -> None:
    mask = np.isnan(series)
    if mask.any():
        raise NaNDetected(f"[X] NaN in '{name}' at index {int(np.argmax(mask))}")


def validate_no_nan_values(values: Iterable[Any]) -> None:
    """Scalar form for incremental entry points."""
    for v in values:
        if v is not None and isinstance(v, numbers.Real) and math.isnan(v):
            raise NaNDetected("[X] NaN in incremental input")


__all__ = [
    "validate_period",
    "validate_range",
    "validate_order",
    "validate_not_empty",
    "validate_lengths",
    "validate_sufficient_data",
    "validate_no_nan",
    "validate_no_nan_values",
]
