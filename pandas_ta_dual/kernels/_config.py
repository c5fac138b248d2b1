# -*- coding: utf-8 -*-
"""pandas-ta dual -- per-call kernel configuration.

There is no module-level switch: a frozen ``KernelConfig`` travels with
each call (``config=None`` means ``DEFAULT_CONFIG``).
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from ._precision import FLOAT64, Precision, resolve_precision


@dataclass(frozen=True)
class KernelConfig:
    """check_nan: reject NaN inputs with ``NaNDetected`` (off by default).
    precision: working float kind, ``FLOAT64`` or ``FLOAT32``.
    """
    check_nan: bool = False
    precision: Precision = FLOAT64

    def __post_init__(self) -> None:
        object.__setattr__(self, "check_nan", bool(self.check_nan))
        object.__setattr__(self, "precision", resolve_precision(self.precision))

    @classmethod
    def strict(cls, precision: Any = FLOAT64) -> "KernelConfig":
        return cls(check_nan=True, precision=precision)

    def with_precision(self, precision: Any) -> "KernelConfig":
        return replace(self, precision=resolve_precision(precision))


DEFAULT_CONFIG = KernelConfig()


def resolve_config(config: Optional[KernelConfig]) -> KernelConfig:
    return DEFAULT_CONFIG if config is None else config


__all__ = ["KernelConfig", "DEFAULT_CONFIG", "resolve_config"]
