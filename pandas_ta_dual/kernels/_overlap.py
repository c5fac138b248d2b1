# -*- coding: utf-8 -*-
"""pandas-ta dual -- overlap indicators.

Registered kinds
----------------
sma, ema, wma, dema

Each section follows the pattern:
  1. State dataclass  (if beyond what _base already provides)
  2. ``*_inc_raw`` recurrence, init / update / output_names helpers
  3. REGISTRY["<kind>"] = Indicator(...)
  4. PRIME_REGISTRY["<kind>"] = prime_fn     (output_only kinds)
  5. public batch wrapper and field-level ``*_inc``

Seed-method legend used throughout:
  output_only -- prime_fn rebuilds the state from the last output value
                 plus the raw input tail.
  replay_only -- no prime_fn; state comes from replaying history
                 (``seed``), because intermediate sums cannot be
                 recovered bit-exactly from the outputs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ._base import (
    EMAState,
    Indicator,
    PRIME_REGISTRY,
    REGISTRY,
    StateShape,
    _checked,
    _fmt_num,
    _period,
    _param,
    batch,
    ema_alpha,
    ema_inc_raw,
    ema_make,
    ema_seeded,
    ema_update_raw,
)
from ._config import KernelConfig
from ._precision import Precision
from ._validate import validate_period, validate_range
from ._window import RingBuffer


# ===========================================================================
# SMA  (output_only)
# ===========================================================================
# First value: mean of the first `period` samples.  Then
#   sma = prev_sma + (x - x[period ago]) / period
# State: the last `period` raw samples (to know what leaves) + prev_sma.

@dataclass
class SMAState:
    period: int
    n: Any
    window: RingBuffer
    prev: Optional[Any] = None
    _warmup_sum: Any = 0.0


def sma_inc_raw(x: Any, old: Any, prev_sma: Any, n: Any) -> Any:
    return prev_sma + (x - old) / n


def sma_make(period: int, precision: Precision) -> SMAState:
    return SMAState(
        period=period,
        n=precision.const(period),
        window=RingBuffer(period),
        _warmup_sum=precision.consts.zero,
    )


def sma_update_raw(state: SMAState, x: Any) -> Tuple[Optional[Any], SMAState]:
    old = state.window.push(x)
    if state.prev is None:
        state._warmup_sum = state._warmup_sum + x
        if not state.window.full:
            return None, state
        state.prev = state._warmup_sum / state.n
        return state.prev, state
    state.prev = sma_inc_raw(x, old, state.prev, state.n)
    return state.prev, state


def sma_seeded(period: int, precision: Precision, last: Any, tail: Any) -> SMAState:
    """SMAState past warm-up from the last SMA and the last *period* samples."""
    state = sma_make(period, precision)
    for v in tail[-period:]:
        state.window.push(precision.cast(v))
    state.prev = precision.cast(last)
    return state


def _sma_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 10) - 1


def _sma_init(params: Dict[str, Any], precision: Precision) -> SMAState:
    return sma_make(_period(params, 10), precision)


def _sma_update(
    state: SMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], SMAState]:
    val, state = sma_update_raw(state, bar["close"])
    return [val], state


def _sma_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"SMA_{_period(params, 10)}"]


def _sma_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
               params: Dict[str, Any], precision: Precision) -> SMAState:
    return sma_seeded(_period(params, 10), precision, outputs[0][-1], inputs["close"])


REGISTRY["sma"] = Indicator(
    kind="sma",
    shape=StateShape.WINDOW,
    inputs=("close",),
    outputs=("sma",),
    lookback=_sma_lookback,
    init=_sma_init,
    update=_sma_update,
    output_names=_sma_output_names,
)
PRIME_REGISTRY["sma"] = _sma_prime


def sma(close: Any, period: int = 10, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Simple Moving Average.  Lookback: ``period - 1``."""
    return batch("sma", {"close": close}, {"period": period}, out, config)


def sma_inc(x: Any, old: Any, prev_sma: Any, period: int,
            config: Optional[KernelConfig] = None) -> Any:
    """Next SMA from the previous one and the sample leaving the window."""
    period = validate_period(period)
    precision, (x, old, prev_sma) = _checked(config, x, old, prev_sma)
    return sma_inc_raw(x, old, prev_sma, precision.const(period))


# ===========================================================================
# EMA  (output_only)
# ===========================================================================
# State: reuses EMAState.  k = 2/(period+1) unless `k` is given.

def _ema_k(params: Dict[str, Any]) -> Optional[float]:
    return _param(params, "k", None)


def _ema_lookback(params: Dict[str, Any]) -> int:
    period = _period(params, 10)
    k = _ema_k(params)
    if k is not None:
        validate_range("k", k, 0.0, 1.0, low_inclusive=False)
    return period - 1


def _ema_init(params: Dict[str, Any], precision: Precision) -> EMAState:
    return ema_make(_period(params, 10), precision, _ema_k(params))


def _ema_update(
    state: EMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], EMAState]:
    val, state = ema_update_raw(state, bar["close"])
    return [val], state


def _ema_output_names(params: Dict[str, Any]) -> List[str]:
    k = _ema_k(params)
    if k is None:
        return [f"EMA_{_period(params, 10)}"]
    return [f"EMA_{_period(params, 10)}_{_fmt_num(float(k))}"]


def _ema_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
               params: Dict[str, Any], precision: Precision) -> EMAState:
    return ema_seeded(_period(params, 10), precision, outputs[0][-1], _ema_k(params))


REGISTRY["ema"] = Indicator(
    kind="ema",
    shape=StateShape.SCALAR,
    inputs=("close",),
    outputs=("ema",),
    lookback=_ema_lookback,
    init=_ema_init,
    update=_ema_update,
    output_names=_ema_output_names,
)
PRIME_REGISTRY["ema"] = _ema_prime


def ema(close: Any, period: int = 10, k: Optional[float] = None, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Exponential Moving Average.  Lookback: ``period - 1``.

    The first value is the SMA of the first *period* samples smoothed once
    more with the sample at index ``period - 1``.
    """
    return batch("ema", {"close": close}, {"period": period, "k": k}, out, config)


def ema_inc(x: Any, prev_ema: Any, period: int, k: Optional[float] = None,
            config: Optional[KernelConfig] = None) -> Any:
    """Next EMA: ``x * k + prev_ema * (1 - k)``."""
    period = validate_period(period)
    precision, (x, prev_ema) = _checked(config, x, prev_ema)
    alpha = ema_alpha(period, k, precision)
    return ema_inc_raw(x, prev_ema, alpha, precision.consts.one - alpha)



# ===========================================================================
# WMA  (replay_only)
# ===========================================================================
# Linear weights 1..period (newest heaviest).  O(1) update with two sums:
#   numerator' = numerator - total + period * x
#   total'     = total - x[period ago] + x
#   wma        = numerator' / (period * (period + 1) / 2)
# During warm-up the i-th sample enters with weight i.

@dataclass
class WMAState:
    period: int
    n: Any
    one: Any
    denom: Any
    window: RingBuffer
    numerator: Any
    total: Any
    _weight: Any = 0.0


def wma_inc_raw(x: Any, old: Any, prev_numerator: Any, prev_total: Any,
                n: Any, denom: Any) -> Tuple[Any, Any, Any]:
    numerator = prev_numerator - prev_total + n * x
    total = prev_total - old + x
    return numerator / denom, numerator, total


def _wma_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 10) - 1


def _wma_init(params: Dict[str, Any], precision: Precision) -> WMAState:
    period = _period(params, 10)
    zero = precision.consts.zero
    return WMAState(
        period=period,
        n=precision.const(period),
        one=precision.consts.one,
        denom=precision.const(period * (period + 1) // 2),
        window=RingBuffer(period),
        numerator=zero,
        total=zero,
        _weight=zero,
    )


def _wma_update(
    state: WMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], WMAState]:
    x = bar["close"]
    old = state.window.push(x)
    if old is None:
        state._weight = state._weight + state.one
        state.numerator = state.numerator + state._weight * x
        state.total = state.total + x
        if not state.window.full:
            return [None], state
        return [state.numerator / state.denom], state
    val, state.numerator, state.total = wma_inc_raw(
        x, old, state.numerator, state.total, state.n, state.denom
    )
    return [val], state


def _wma_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"WMA_{_period(params, 10)}"]


REGISTRY["wma"] = Indicator(
    kind="wma",
    shape=StateShape.WINDOW,
    inputs=("close",),
    outputs=("wma",),
    lookback=_wma_lookback,
    init=_wma_init,
    update=_wma_update,
    output_names=_wma_output_names,
)


def wma(close: Any, period: int = 10, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Weighted Moving Average.  Lookback: ``period - 1``."""
    return batch("wma", {"close": close}, {"period": period}, out, config)


def wma_inc(x: Any, old: Any, prev_numerator: Any, prev_total: Any, period: int,
            config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any]:
    """Returns (wma, numerator, total)."""
    period = validate_period(period)
    precision, (x, old, prev_numerator, prev_total) = _checked(
        config, x, old, prev_numerator, prev_total
    )
    return wma_inc_raw(
        x, old, prev_numerator, prev_total,
        precision.const(period), precision.const(period * (period + 1) // 2),
    )


# ===========================================================================
# DEMA  (replay_only)  -- chain: EMA -> EMA of EMA
# ===========================================================================
# dema = 2 * ema1 - ema2,   ema2 = EMA(ema1).
# ema1 is defined from period-1, ema2 needs `period` ema1 values,
# so lookback = 2 * (period - 1).

@dataclass
class DEMAState:
    period: int
    two: Any
    ema1: EMAState
    ema2: EMAState


def dema_inc_raw(x: Any, prev_ema1: Any, prev_ema2: Any, k: Any, one_minus_k: Any,
                 two: Any) -> Tuple[Any, Any, Any]:
    ema1 = ema_inc_raw(x, prev_ema1, k, one_minus_k)
    ema2 = ema_inc_raw(ema1, prev_ema2, k, one_minus_k)
    return two * ema1 - ema2, ema1, ema2


def _dema_lookback(params: Dict[str, Any]) -> int:
    return 2 * (_period(params, 10) - 1)


def _dema_init(params: Dict[str, Any], precision: Precision) -> DEMAState:
    period = _period(params, 10)
    return DEMAState(
        period=period,
        two=precision.consts.two,
        ema1=ema_make(period, precision),
        ema2=ema_make(period, precision),
    )


def _dema_update(
    state: DEMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], DEMAState]:
    e1, state.ema1 = ema_update_raw(state.ema1, bar["close"])
    if e1 is None:
        return [None], state
    e2, state.ema2 = ema_update_raw(state.ema2, e1)
    if e2 is None:
        return [None], state
    return [state.two * e1 - e2], state


def _dema_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"DEMA_{_period(params, 10)}"]


REGISTRY["dema"] = Indicator(
    kind="dema",
    shape=StateShape.CHAIN,
    inputs=("close",),
    outputs=("dema",),
    lookback=_dema_lookback,
    init=_dema_init,
    update=_dema_update,
    output_names=_dema_output_names,
)


def dema(close: Any, period: int = 10, out: Any = None,
         config: Optional[KernelConfig] = None) -> np.ndarray:
    """Double Exponential Moving Average.  Lookback: ``2 * (period - 1)``."""
    return batch("dema", {"close": close}, {"period": period}, out, config)


def dema_inc(x: Any, prev_ema1: Any, prev_ema2: Any, period: int,
             config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any]:
    """Returns (dema, ema1, ema2)."""
    period = validate_period(period)
    precision, (x, prev_ema1, prev_ema2) = _checked(config, x, prev_ema1, prev_ema2)
    alpha = ema_alpha(period, None, precision)
    return dema_inc_raw(
        x, prev_ema1, prev_ema2, alpha, precision.consts.one - alpha, precision.consts.two
    )


__all__ = [
    "SMAState", "WMAState", "DEMAState",
    "sma", "sma_inc", "ema", "ema_inc", "wma", "wma_inc", "dema", "dema_inc",
]
