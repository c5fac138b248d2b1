# -*- coding: utf-8 -*-
"""pandas-ta dual -- momentum indicators.

Registered kinds
----------------
output_only : rocp
replay_only : rsi
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
    _checked,
    _period,
    batch,
    wilder_inc_raw,
)
from ._config import KernelConfig
from ._precision import Precision
from ._validate import validate_period
from ._window import RingBuffer


# ===========================================================================
# RSI  (replay_only)
# ===========================================================================
# delta = close - prev_close; gain = max(delta, 0), loss = max(-delta, 0)
# First averages: plain mean of the first `period` gains / losses.
# Then Wilder smoothing: avg = (avg * (n - 1) + x) / n
# RSI = 100 * avg_gain / (avg_gain + avg_loss); 50 on a flat window.

@dataclass
class RSIState:
    period: int
    n: Any
    n_minus_1: Any
    zero: Any
    half_scale: Any
    hundred: Any
    prev_close: Optional[Any] = None
    avg_gain: Optional[Any] = None
    avg_loss: Optional[Any] = None
    _gain_sum: Any = 0.0
    _loss_sum: Any = 0.0
    _count: int = 0


def _gain_loss(x: Any, prev_close: Any, zero: Any) -> Tuple[Any, Any]:
    delta = x - prev_close
    if delta > zero:
        return delta, zero
    return zero, -delta


def _rsi_value(avg_gain: Any, avg_loss: Any, zero: Any, half_scale: Any,
               hundred: Any) -> Any:
    total = avg_gain + avg_loss
    if total == zero:
        return half_scale
    return hundred * avg_gain / total


def rsi_inc_raw(
    x: Any, prev_close: Any, prev_avg_gain: Any, prev_avg_loss: Any,
    n: Any, n_minus_1: Any, zero: Any, half_scale: Any, hundred: Any,
) -> Tuple[Any, Any, Any]:
    gain, loss = _gain_loss(x, prev_close, zero)
    avg_gain = wilder_inc_raw(prev_avg_gain, gain, n, n_minus_1)
    avg_loss = wilder_inc_raw(prev_avg_loss, loss, n, n_minus_1)
    return _rsi_value(avg_gain, avg_loss, zero, half_scale, hundred), avg_gain, avg_loss


def _rsi_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 14)


def _rsi_init(params: Dict[str, Any], precision: Precision) -> RSIState:
    period = _period(params, 14)
    c = precision.consts
    return RSIState(
        period=period,
        n=precision.const(period),
        n_minus_1=precision.const(period - 1),
        zero=c.zero,
        half_scale=c.hundred * c.half,
        hundred=c.hundred,
        _gain_sum=c.zero,
        _loss_sum=c.zero,
    )


def _rsi_update(
    state: RSIState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], RSIState]:
    x = bar["close"]
    prev = state.prev_close
    state.prev_close = x
    if prev is None:
        return [None], state

    if state.avg_gain is None:
        gain, loss = _gain_loss(x, prev, state.zero)
        state._gain_sum = state._gain_sum + gain
        state._loss_sum = state._loss_sum + loss
        state._count += 1
        if state._count < state.period:
            return [None], state
        state.avg_gain = state._gain_sum / state.n
        state.avg_loss = state._loss_sum / state.n
        return [_rsi_value(state.avg_gain, state.avg_loss, state.zero,
                           state.half_scale, state.hundred)], state

    value, state.avg_gain, state.avg_loss = rsi_inc_raw(
        x, prev, state.avg_gain, state.avg_loss,
        state.n, state.n_minus_1, state.zero, state.half_scale, state.hundred,
    )
    return [value], state


def _rsi_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"RSI_{_period(params, 14)}"]


REGISTRY["rsi"] = Indicator(
    kind="rsi",
    shape=StateShape.CHAIN,
    inputs=("close",),
    outputs=("rsi",),
    lookback=_rsi_lookback,
    init=_rsi_init,
    update=_rsi_update,
    output_names=_rsi_output_names,
)


def rsi(close: Any, period: int = 14, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Relative Strength Index with Wilder smoothing.

    Lookback: ``period`` (one bar is spent on the first price change).
    A window with no movement at all reads 50.
    """
    return batch("rsi", {"close": close}, {"period": period}, out, config)


def rsi_inc(x: Any, prev_close: Any, prev_avg_gain: Any, prev_avg_loss: Any,
            period: int = 14,
            config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any]:
    """Returns (rsi, avg_gain, avg_loss)."""
    period = validate_period(period)
    precision, (x, prev_close, prev_avg_gain, prev_avg_loss) = _checked(
        config, x, prev_close, prev_avg_gain, prev_avg_loss
    )
    c = precision.consts
    return rsi_inc_raw(
        x, prev_close, prev_avg_gain, prev_avg_loss,
        precision.const(period), precision.const(period - 1),
        c.zero, c.hundred * c.half, c.hundred,
    )


# ===========================================================================
# ROCP  (output_only)
# ===========================================================================
# rocp = (x - x[period ago]) / x[period ago]; 0 when the base is 0.
# State: the last `period` raw samples.

@dataclass
class ROCPState:
    period: int
    zero: Any
    window: RingBuffer


def rocp_inc_raw(x: Any, prev: Any, zero: Any) -> Any:
    if prev == zero:
        return zero
    return (x - prev) / prev


def _rocp_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 10, minimum=1)


def _rocp_init(params: Dict[str, Any], precision: Precision) -> ROCPState:
    period = _period(params, 10, minimum=1)
    return ROCPState(period=period, zero=precision.consts.zero, window=RingBuffer(period))


def _rocp_update(
    state: ROCPState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], ROCPState]:
    x = bar["close"]
    old = state.window.push(x)
    if old is None:
        return [None], state
    return [rocp_inc_raw(x, old, state.zero)], state


def _rocp_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"ROCP_{_period(params, 10, minimum=1)}"]


def _rocp_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
                params: Dict[str, Any], precision: Precision) -> ROCPState:
    state = _rocp_init(params, precision)
    for x in inputs["close"][-state.period:]:
        state.window.push(x)
    return state


REGISTRY["rocp"] = Indicator(
    kind="rocp",
    shape=StateShape.WINDOW,
    inputs=("close",),
    outputs=("rocp",),
    lookback=_rocp_lookback,
    init=_rocp_init,
    update=_rocp_update,
    output_names=_rocp_output_names,
)
PRIME_REGISTRY["rocp"] = _rocp_prime


def rocp(close: Any, period: int = 10, out: Any = None,
         config: Optional[KernelConfig] = None) -> np.ndarray:
    """Rate of change as a fraction.  Lookback: ``period``."""
    return batch("rocp", {"close": close}, {"period": period}, out, config)


def rocp_inc(x: Any, prev: Any, config: Optional[KernelConfig] = None) -> Any:
    """*prev* is the sample ``period`` bars back."""
    precision, (x, prev) = _checked(config, x, prev)
    return rocp_inc_raw(x, prev, precision.consts.zero)


__all__ = [
    "RSIState", "ROCPState",
    "rsi", "rsi_inc", "rocp", "rocp_inc",
]
