# -*- coding: utf-8 -*-
"""pandas-ta dual -- rolling statistics.

Registered kinds
----------------
output_only : max, min
replay_only : var, stddev, correl
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ._base import (
    Indicator,
    PRIME_REGISTRY,
    REGISTRY,
    StateShape,
    _as_float,
    _checked,
    _param,
    _period,
    batch,
)
from ._config import KernelConfig, resolve_config
from ._precision import Precision
from ._validate import validate_no_nan_values, validate_period, validate_range
from ._window import (
    MonotonicDeque,
    RingBuffer,
    RollingMoments,
    moments_variance,
    roll_sum,
    roll_sum_prod,
    roll_sum_sq,
)


# ===========================================================================
# VAR / STDDEV  (replay_only)
# ===========================================================================
# Population variance over the window from running sum / sum of squares:
#   var = sumsq / n - (sum / n)^2
# stddev = sqrt(var) * nbdev

@dataclass
class VARState:
    period: int
    n: Any
    zero: Any
    moments: RollingMoments
    nbdev: Any = None


def var_inc_raw(x: Any, old: Any, prev_sum: Any, prev_sum_sq: Any, n: Any,
                zero: Any) -> Tuple[Any, Any, Any]:
    total = roll_sum(prev_sum, x, old)
    total_sq = roll_sum_sq(prev_sum_sq, x, old)
    return moments_variance(total, total_sq, n, zero), total, total_sq


def _var_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 10) - 1


def _var_init(params: Dict[str, Any], precision: Precision) -> VARState:
    period = _period(params, 10)
    return VARState(
        period=period,
        n=precision.const(period),
        zero=precision.consts.zero,
        moments=RollingMoments.make(period, precision.consts.zero),
    )


def _var_update(
    state: VARState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], VARState]:
    total, total_sq = state.moments.push(bar["close"])
    if not state.moments.full:
        return [None], state
    return [moments_variance(total, total_sq, state.n, state.zero)], state


def _var_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"VAR_{_period(params, 10)}"]


REGISTRY["var"] = Indicator(
    kind="var",
    shape=StateShape.WINDOW,
    inputs=("close",),
    outputs=("var",),
    lookback=_var_lookback,
    init=_var_init,
    update=_var_update,
    output_names=_var_output_names,
)


def _nbdev(params: Dict[str, Any]) -> float:
    return validate_range("nbdev", _as_float(_param(params, "nbdev", 1.0), "nbdev"), 0.0)


def _stddev_lookback(params: Dict[str, Any]) -> int:
    _nbdev(params)
    return _period(params, 10) - 1


def _stddev_init(params: Dict[str, Any], precision: Precision) -> VARState:
    state = _var_init(params, precision)
    state.nbdev = precision.const(_nbdev(params))
    return state


def _stddev_update(
    state: VARState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], VARState]:
    (var,), state = _var_update(state, bar, params)
    if var is None:
        return [None], state
    return [np.sqrt(var) * state.nbdev], state


def _stddev_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"STDDEV_{_period(params, 10)}_{_nbdev(params)}"]


REGISTRY["stddev"] = Indicator(
    kind="stddev",
    shape=StateShape.WINDOW,
    inputs=("close",),
    outputs=("stddev",),
    lookback=_stddev_lookback,
    init=_stddev_init,
    update=_stddev_update,
    output_names=_stddev_output_names,
)


def var(close: Any, period: int = 10, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Rolling population variance.  Lookback: ``period - 1``."""
    return batch("var", {"close": close}, {"period": period}, out, config)


def var_inc(x: Any, old: Any, prev_sum: Any, prev_sum_sq: Any, period: int,
            config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any]:
    """Returns (var, sum, sum_sq)."""
    period = validate_period(period)
    precision, (x, old, prev_sum, prev_sum_sq) = _checked(config, x, old, prev_sum, prev_sum_sq)
    return var_inc_raw(x, old, prev_sum, prev_sum_sq, precision.const(period),
                       precision.consts.zero)


def stddev(close: Any, period: int = 10, nbdev: float = 1.0, out: Any = None,
           config: Optional[KernelConfig] = None) -> np.ndarray:
    """Rolling population standard deviation times *nbdev*."""
    return batch("stddev", {"close": close}, {"period": period, "nbdev": nbdev}, out, config)


def stddev_inc(x: Any, old: Any, prev_sum: Any, prev_sum_sq: Any, period: int,
               nbdev: float = 1.0,
               config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any]:
    """Returns (stddev, sum, sum_sq)."""
    nbdev = validate_range("nbdev", nbdev, 0.0)
    var_, total, total_sq = var_inc(x, old, prev_sum, prev_sum_sq, period, config)
    precision = resolve_config(config).precision
    return np.sqrt(var_) * precision.const(nbdev), total, total_sq


# ===========================================================================
# MAX / MIN  (output_only)
# ===========================================================================
# Monotonic deque of (index, value) candidates; see _window.MonotonicDeque.
# The deque is rebuilt exactly from the last `period` raw samples.

def _extrema_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 10) - 1


def _extrema_update(
    state: MonotonicDeque, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], MonotonicDeque]:
    val = state.push(bar["close"])
    if not state.full:
        return [None], state
    return [val], state


def _make_extrema(mode: str) -> None:
    def _init(params: Dict[str, Any], precision: Precision) -> MonotonicDeque:
        return MonotonicDeque(capacity=_period(params, 10), mode=mode)

    def _output_names(params: Dict[str, Any]) -> List[str]:
        return [f"{mode.upper()}_{_period(params, 10)}"]

    def _prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
               params: Dict[str, Any], precision: Precision) -> MonotonicDeque:
        period = _period(params, 10)
        return MonotonicDeque.from_tail(inputs["close"][-period:], period, mode)

    REGISTRY[mode] = Indicator(
        kind=mode,
        shape=StateShape.WINDOW,
        inputs=("close",),
        outputs=(mode,),
        lookback=_extrema_lookback,
        init=_init,
        update=_extrema_update,
        output_names=_output_names,
    )
    PRIME_REGISTRY[mode] = _prime


_make_extrema("max")
_make_extrema("min")


def rolling_max(close: Any, period: int = 10, out: Any = None,
                config: Optional[KernelConfig] = None) -> np.ndarray:
    """Highest value over the last *period* samples."""
    return batch("max", {"close": close}, {"period": period}, out, config)


def rolling_min(close: Any, period: int = 10, out: Any = None,
                config: Optional[KernelConfig] = None) -> np.ndarray:
    """Lowest value over the last *period* samples."""
    return batch("min", {"close": close}, {"period": period}, out, config)


def _extrema_inc(x: Any, window: MonotonicDeque,
                 config: Optional[KernelConfig]) -> Tuple[Any, MonotonicDeque]:
    config = resolve_config(config)
    if config.check_nan:
        validate_no_nan_values((x,))
    value = window.push(config.precision.cast(x))
    return (value if window.full else float("nan")), window


def max_inc(x: Any, window: MonotonicDeque,
            config: Optional[KernelConfig] = None) -> Tuple[Any, MonotonicDeque]:
    """Push *x* into a ``mode="max"`` deque; returns (max, window)."""
    return _extrema_inc(x, window, config)


def min_inc(x: Any, window: MonotonicDeque,
            config: Optional[KernelConfig] = None) -> Tuple[Any, MonotonicDeque]:
    """Push *x* into a ``mode="min"`` deque; returns (min, window)."""
    return _extrema_inc(x, window, config)


# ===========================================================================
# CORREL  (replay_only)  -- Pearson correlation of two series
# ===========================================================================
#   r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))
# r = 0 when either window is flat.

@dataclass
class CORRELState:
    period: int
    n: Any
    zero: Any
    window_x: RingBuffer
    window_y: RingBuffer
    sum_x: Any
    sum_y: Any
    sum_x_sq: Any
    sum_y_sq: Any
    sum_xy: Any


def correl_inc_raw(
    x: Any, y: Any, old_x: Any, old_y: Any,
    prev_sum_x: Any, prev_sum_y: Any, prev_sum_x_sq: Any, prev_sum_y_sq: Any,
    prev_sum_xy: Any, n: Any, zero: Any,
) -> Tuple[Any, Any, Any, Any, Any, Any]:
    sum_x = roll_sum(prev_sum_x, x, old_x)
    sum_y = roll_sum(prev_sum_y, y, old_y)
    sum_x_sq = roll_sum_sq(prev_sum_x_sq, x, old_x)
    sum_y_sq = roll_sum_sq(prev_sum_y_sq, y, old_y)
    sum_xy = roll_sum_prod(prev_sum_xy, x, y, old_x, old_y)

    numerator = n * sum_xy - sum_x * sum_y
    denom_sq = (n * sum_x_sq - sum_x * sum_x) * (n * sum_y_sq - sum_y * sum_y)
    r = numerator / np.sqrt(denom_sq) if denom_sq > zero else zero
    return r, sum_x, sum_y, sum_x_sq, sum_y_sq, sum_xy


def _correl_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 30) - 1


def _correl_init(params: Dict[str, Any], precision: Precision) -> CORRELState:
    period = _period(params, 30)
    zero = precision.consts.zero
    return CORRELState(
        period=period,
        n=precision.const(period),
        zero=zero,
        window_x=RingBuffer(period),
        window_y=RingBuffer(period),
        sum_x=zero, sum_y=zero, sum_x_sq=zero, sum_y_sq=zero, sum_xy=zero,
    )


def _correl_update(
    state: CORRELState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], CORRELState]:
    x, y = bar["x"], bar["y"]
    old_x = state.window_x.push(x)
    old_y = state.window_y.push(y)
    (r, state.sum_x, state.sum_y, state.sum_x_sq,
     state.sum_y_sq, state.sum_xy) = correl_inc_raw(
        x, y, old_x, old_y,
        state.sum_x, state.sum_y, state.sum_x_sq, state.sum_y_sq, state.sum_xy,
        state.n, state.zero,
    )
    if not state.window_x.full:
        return [None], state
    return [r], state


def _correl_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"CORREL_{_period(params, 30)}"]


REGISTRY["correl"] = Indicator(
    kind="correl",
    shape=StateShape.WINDOW,
    inputs=("x", "y"),
    outputs=("correl",),
    lookback=_correl_lookback,
    init=_correl_init,
    update=_correl_update,
    output_names=_correl_output_names,
)


def correl(x: Any, y: Any, period: int = 30, out: Any = None,
           config: Optional[KernelConfig] = None) -> np.ndarray:
    """Rolling Pearson correlation.  Lookback: ``period - 1``."""
    return batch("correl", {"x": x, "y": y}, {"period": period}, out, config)


def correl_inc(
    x: Any, y: Any, old_x: Any, old_y: Any,
    prev_sum_x: Any, prev_sum_y: Any, prev_sum_x_sq: Any, prev_sum_y_sq: Any,
    prev_sum_xy: Any, period: int, config: Optional[KernelConfig] = None,
) -> Tuple[Any, Any, Any, Any, Any, Any]:
    """Returns (correl, sum_x, sum_y, sum_x_sq, sum_y_sq, sum_xy)."""
    period = validate_period(period)
    precision, values = _checked(
        config, x, y, old_x, old_y,
        prev_sum_x, prev_sum_y, prev_sum_x_sq, prev_sum_y_sq, prev_sum_xy,
    )
    return correl_inc_raw(*values, precision.const(period), precision.consts.zero)


__all__ = [
    "VARState", "CORRELState",
    "var", "var_inc", "stddev", "stddev_inc",
    "rolling_max", "rolling_min", "max_inc", "min_inc",
    "correl", "correl_inc",
]
