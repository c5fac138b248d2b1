# -*- coding: utf-8 -*-
"""pandas-ta dual -- working float precision.

All kernels compute in one float kind, chosen per call through
``KernelConfig.precision``.  Constants and incoming samples pass through
``Precision.const`` / ``Precision.cast`` so a float32 stream never picks up
float64 intermediates (numpy promotes ``float32 * int64`` to float64).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import math
import numbers

import numpy as np

from ._errors import ConversionError, InvalidData


@dataclass(frozen=True)
class Constants:
    zero: Any
    one: Any
    two: Any
    half: Any
    hundred: Any


def _is_real(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, numbers.Real)


@dataclass(frozen=True)
class Precision:
    """One floating-point kind plus checked conversions into it."""
    name: str
    dtype: np.dtype
    consts: Constants = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "consts", Constants(
            zero=self.const(0),
            one=self.const(1),
            two=self.const(2),
            half=self.const(0.5),
            hundred=self.const(100),
        ))

    def _convert(self, value: Any) -> Any:
        if not _is_real(value):
            raise ConversionError(
                f"[X] {value!r} ({type(value).__name__}) is not a real number"
            )
        try:
            with np.errstate(over="ignore"):
                converted = self.dtype.type(value)
            finite_in = math.isfinite(float(value))
        except (OverflowError, ValueError, TypeError) as ex:
            raise ConversionError(
                f"[X] {value!r} does not fit in {self.name}"
            ) from ex
        if finite_in and not np.isfinite(converted):
            raise ConversionError(f"[X] {value!r} overflows {self.name}")
        return converted

    def const(self, value: Any) -> Any:
        """Convert a numeric constant (period, factor, 100, ...).

        Integers must round-trip exactly; a ``period`` of 2**24 + 1 is
        rejected under float32 instead of silently becoming 2**24.
        """
        converted = self._convert(value)
        if isinstance(value, numbers.Integral) and int(converted) != int(value):
            raise ConversionError(
                f"[X] integer {value!r} is not exactly representable in {self.name}"
            )
        return converted

    def cast(self, value: Any) -> Any:
        """Convert one incoming sample.  NaN passes through."""
        if type(value) is self.dtype.type:
            return value
        return self._convert(value)

    def narrow(self, series: Any) -> np.ndarray:
        """Return *series* as a 1-D array of this precision.

        The caller's object is never written to; a copy is made only when
        the dtype differs.
        """
        try:
            source = np.asarray(series)
        except (TypeError, ValueError) as ex:
            raise ConversionError(f"[X] series is not numeric: {ex}") from ex
        if source.dtype.kind not in "fiu":
            raise ConversionError(f"[X] series is not numeric (dtype={source.dtype})")
        if source.ndim != 1:
            raise InvalidData(f"[X] expected a 1-D series, got ndim={source.ndim}")
        if source.dtype == self.dtype:
            return source
        with np.errstate(over="ignore", invalid="ignore"):
            result = source.astype(self.dtype)
        overflow = np.isfinite(source) & ~np.isfinite(result)
        if overflow.any():
            idx = int(np.argmax(overflow))
            raise ConversionError(
                f"[X] sample {idx} ({source[idx]!r}) overflows {self.name}"
            )
        return result

    def empty(self, n: int) -> np.ndarray:
        """Output buffer pre-filled with the undefined marker."""
        return np.full(n, np.nan, dtype=self.dtype)


FLOAT32 = Precision("float32", np.dtype(np.float32))
FLOAT64 = Precision("float64", np.dtype(np.float64))

_ALIASES = {
    "float32": FLOAT32, "f32": FLOAT32, "single": FLOAT32,
    "float64": FLOAT64, "f64": FLOAT64, "double": FLOAT64,
}


def resolve_precision(value: Union[str, Precision, Any, None]) -> Precision:
    """Accept a Precision, an alias string or a numpy float dtype."""
    if value is None:
        return FLOAT64
    if isinstance(value, Precision):
        return value
    if isinstance(value, str):
        found = _ALIASES.get(value.lower())
        if found is None:
            raise ConversionError(f"[X] unknown precision '{value}'")
        return found
    try:
        dtype = np.dtype(value)
    except TypeError as ex:
        raise ConversionError(f"[X] unknown precision {value!r}") from ex
    if dtype == FLOAT32.dtype:
        return FLOAT32
    if dtype == FLOAT64.dtype:
        return FLOAT64
    raise ConversionError(f"[X] unsupported precision {dtype}")


__all__ = [
    "Constants",
    "Precision",
    "FLOAT32",
    "FLOAT64",
    "resolve_precision",
]
