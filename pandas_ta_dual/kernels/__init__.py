# -*- coding: utf-8 -*-
"""pandas-ta dual -- batch / incremental kernel package.

Category modules populate REGISTRY and PRIME_REGISTRY at import time.
This package re-exports them plus the shared base API and every named
batch wrapper and field-level ``*_inc`` function.
"""
from __future__ import annotations

# Base API (always available)
from ._base import (
    NAN,
    EMAState,
    Indicator,
    REGISTRY,
    PRIME_REGISTRY,
    SPEC_EXCLUDES,
    StateShape,
    batch,
    build_state_key,
    get_indicator,
    init_state,
    is_undefined,
    leading_undefined,
    lookback,
    prime,
    resolve_output_names,
    seed,
    series_equal,
    step,
    supported_kinds,
    undefined_mask,
)
from ._config import DEFAULT_CONFIG, KernelConfig
from ._errors import (
    ConversionError,
    InsufficientData,
    InvalidData,
    InvalidParameter,
    KernelError,
    LengthMismatch,
    NaNDetected,
)
from ._precision import FLOAT32, FLOAT64, Precision, resolve_precision
from ._window import MonotonicDeque, RingBuffer, RollingMoments, RollingSum

# ---------------------------------------------------------------------------
# Category modules – each populates the shared registries on import
# ---------------------------------------------------------------------------
from . import _overlap      # noqa: F401  sma, ema, wma, dema
from . import _statistics   # noqa: F401  var, stddev, max, min, correl
from . import _momentum     # noqa: F401  rsi, rocp
from . import _volatility   # noqa: F401  trange, atr, bbands, adr
from . import _trend        # noqa: F401  adx, psar
from . import _volume       # noqa: F401  ad, adosc
from . import _candle       # noqa: F401  ha, cdl_doji, cdl_dragonfly_doji, cdl_engulfing

from ._overlap import *
from ._statistics import *
from ._momentum import *
from ._volatility import *
from ._trend import *
from ._volume import *
from ._candle import *

__all__ = [
    # base
    "NAN",
    "EMAState",
    "Indicator",
    "REGISTRY",
    "PRIME_REGISTRY",
    "SPEC_EXCLUDES",
    "StateShape",
    "batch",
    "build_state_key",
    "get_indicator",
    "init_state",
    "is_undefined",
    "leading_undefined",
    "lookback",
    "prime",
    "resolve_output_names",
    "seed",
    "series_equal",
    "step",
    "supported_kinds",
    "undefined_mask",
    # config / precision
    "DEFAULT_CONFIG",
    "KernelConfig",
    "FLOAT32",
    "FLOAT64",
    "Precision",
    "resolve_precision",
    # errors
    "KernelError",
    "InvalidParameter",
    "LengthMismatch",
    "InsufficientData",
    "NaNDetected",
    "ConversionError",
    "InvalidData",
    # rolling primitives
    "RingBuffer",
    "RollingSum",
    "RollingMoments",
    "MonotonicDeque",
]
__all__ += _overlap.__all__
__all__ += _statistics.__all__
__all__ += _momentum.__all__
__all__ += _volatility.__all__
__all__ += _trend.__all__
__all__ += _volume.__all__
__all__ += _candle.__all__
