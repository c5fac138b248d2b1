# -*- coding: utf-8 -*-
"""pandas-ta dual -- volatility indicators.

Registered kinds
----------------
output_only : trange, adr
replay_only : atr, bbands
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
    wilder_inc_raw,
)
from ._config import KernelConfig
from ._overlap import SMAState, sma_inc_raw, sma_make, sma_seeded, sma_update_raw
from ._precision import Precision
from ._validate import validate_period, validate_range
from ._window import RollingMoments, moments_variance, roll_sum, roll_sum_sq


# ===========================================================================
# TRANGE  (output_only)
# ===========================================================================
# True range needs the previous close, so bar 0 is undefined (TA-Lib).
#   tr = max(high - low, |high - prev_close|, |low - prev_close|)

@dataclass
class TRANGEState:
    prev_close: Optional[Any] = None


def trange_inc_raw(high: Any, low: Any, prev_close: Any) -> Any:
    tr = high - low
    up = abs(high - prev_close)
    dn = abs(low - prev_close)
    if up > tr:
        tr = up
    if dn > tr:
        tr = dn
    return tr


def _trange_update(
    state: TRANGEState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], TRANGEState]:
    prev = state.prev_close
    state.prev_close = bar["close"]
    if prev is None:
        return [None], state
    return [trange_inc_raw(bar["high"], bar["low"], prev)], state


def _trange_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
                  params: Dict[str, Any], precision: Precision) -> TRANGEState:
    return TRANGEState(prev_close=inputs["close"][-1])


REGISTRY["trange"] = Indicator(
    kind="trange",
    shape=StateShape.SCALAR,
    inputs=("high", "low", "close"),
    outputs=("trange",),
    lookback=lambda params: 1,
    init=lambda params, precision: TRANGEState(),
    update=_trange_update,
    output_names=lambda params: ["TRUERANGE_1"],
)
PRIME_REGISTRY["trange"] = _trange_prime


def trange(high: Any, low: Any, close: Any, out: Any = None,
           config: Optional[KernelConfig] = None) -> np.ndarray:
    """True Range.  Lookback: 1."""
    return batch("trange", {"high": high, "low": low, "close": close}, None, out, config)


def trange_inc(high: Any, low: Any, prev_close: Any,
               config: Optional[KernelConfig] = None) -> Any:
    _, (high, low, prev_close) = _checked(config, high, low, prev_close)
    return trange_inc_raw(high, low, prev_close)


# ===========================================================================
# ATR  (replay_only)
# ===========================================================================
# TA-Lib convention: TR from bar 1; first ATR (bar `period`) is the mean
# of TR[1..period]; then Wilder smoothing.

@dataclass
class ATRState:
    period: int
    n: Any
    n_minus_1: Any
    prev_close: Optional[Any] = None
    atr: Optional[Any] = None
    _tr_sum: Any = 0.0
    _count: int = 0


def atr_inc_raw(high: Any, low: Any, prev_close: Any, prev_atr: Any,
                n: Any, n_minus_1: Any) -> Any:
    return wilder_inc_raw(prev_atr, trange_inc_raw(high, low, prev_close), n, n_minus_1)


def _atr_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 14)


def _atr_init(params: Dict[str, Any], precision: Precision) -> ATRState:
    period = _period(params, 14)
    return ATRState(
        period=period,
        n=precision.const(period),
        n_minus_1=precision.const(period - 1),
        _tr_sum=precision.consts.zero,
    )


def atr_update_raw(state: ATRState, high: Any, low: Any,
                   close: Any) -> Tuple[Optional[Any], ATRState]:
    """Shared by ATR and the ADX chain."""
    prev = state.prev_close
    state.prev_close = close
    if prev is None:
        return None, state
    if state.atr is None:
        state._tr_sum = state._tr_sum + trange_inc_raw(high, low, prev)
        state._count += 1
        if state._count < state.period:
            return None, state
        state.atr = state._tr_sum / state.n
        return state.atr, state
    state.atr = atr_inc_raw(high, low, prev, state.atr, state.n, state.n_minus_1)
    return state.atr, state


def _atr_update(
    state: ATRState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], ATRState]:
    val, state = atr_update_raw(state, bar["high"], bar["low"], bar["close"])
    return [val], state


def _atr_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"ATR_{_period(params, 14)}"]


REGISTRY["atr"] = Indicator(
    kind="atr",
    shape=StateShape.CHAIN,
    inputs=("high", "low", "close"),
    outputs=("atr",),
    lookback=_atr_lookback,
    init=_atr_init,
    update=_atr_update,
    output_names=_atr_output_names,
)


def atr(high: Any, low: Any, close: Any, period: int = 14, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Average True Range (Wilder).  Lookback: ``period``."""
    return batch("atr", {"high": high, "low": low, "close": close},
                 {"period": period}, out, config)


def atr_inc(high: Any, low: Any, prev_close: Any, prev_atr: Any, period: int = 14,
            config: Optional[KernelConfig] = None) -> Any:
    period = validate_period(period)
    precision, (high, low, prev_close, prev_atr) = _checked(
        config, high, low, prev_close, prev_atr
    )
    return atr_inc_raw(high, low, prev_close, prev_atr,
                       precision.const(period), precision.const(period - 1))


# ===========================================================================
# BBANDS  (replay_only)
# ===========================================================================
# middle = SMA(close, period)
# upper / lower = middle +/- nbdev_up / nbdev_dn * population stddev

@dataclass
class BBANDSState:
    period: int
    n: Any
    zero: Any
    nbdev_up: Any
    nbdev_dn: Any
    sma: SMAState
    moments: RollingMoments


def _bbands_params(params: Dict[str, Any]) -> Tuple[int, float, float]:
    period = _period(params, 20)
    up = validate_range("nbdev_up", _as_float(_param(params, "nbdev_up", 2.0), "nbdev_up"), 0.0)
    dn = validate_range("nbdev_dn", _as_float(_param(params, "nbdev_dn", 2.0), "nbdev_dn"), 0.0)
    return period, up, dn


def bbands_inc_raw(middle: Any, total: Any, total_sq: Any, n: Any, zero: Any,
                   nbdev_up: Any, nbdev_dn: Any) -> Tuple[Any, Any, Any]:
    sd = np.sqrt(moments_variance(total, total_sq, n, zero))
    return middle + nbdev_up * sd, middle, middle - nbdev_dn * sd


def _bbands_lookback(params: Dict[str, Any]) -> int:
    return _bbands_params(params)[0] - 1


def _bbands_init(params: Dict[str, Any], precision: Precision) -> BBANDSState:
    period, up, dn = _bbands_params(params)
    return BBANDSState(
        period=period,
        n=precision.const(period),
        zero=precision.consts.zero,
        nbdev_up=precision.const(up),
        nbdev_dn=precision.const(dn),
        sma=sma_make(period, precision),
        moments=RollingMoments.make(period, precision.consts.zero),
    )


def _bbands_update(
    state: BBANDSState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], BBANDSState]:
    x = bar["close"]
    middle, state.sma = sma_update_raw(state.sma, x)
    total, total_sq = state.moments.push(x)
    if middle is None:
        return [None, None, None], state
    upper, middle, lower = bbands_inc_raw(middle, total, total_sq, state.n, state.zero,
                                          state.nbdev_up, state.nbdev_dn)
    return [upper, middle, lower], state


def _bbands_output_names(params: Dict[str, Any]) -> List[str]:
    period, up, dn = _bbands_params(params)
    p = f"_{period}_{up}_{dn}"
    return [f"BBU{p}", f"BBM{p}", f"BBL{p}"]


REGISTRY["bbands"] = Indicator(
    kind="bbands",
    shape=StateShape.CHAIN,
    inputs=("close",),
    outputs=("upper", "middle", "lower"),
    lookback=_bbands_lookback,
    init=_bbands_init,
    update=_bbands_update,
    output_names=_bbands_output_names,
)


def bbands(close: Any, period: int = 20, nbdev_up: float = 2.0, nbdev_dn: float = 2.0,
           out: Any = None, config: Optional[KernelConfig] = None
           ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Bollinger Bands.  Returns (upper, middle, lower)."""
    return batch("bbands", {"close": close},
                 {"period": period, "nbdev_up": nbdev_up, "nbdev_dn": nbdev_dn},
                 out, config)


def bbands_inc(
    x: Any, old: Any, prev_sma: Any, prev_sum: Any, prev_sum_sq: Any, period: int = 20,
    nbdev_up: float = 2.0, nbdev_dn: float = 2.0, config: Optional[KernelConfig] = None,
) -> Tuple[Any, Any, Any, Any, Any]:
    """Returns (upper, middle, lower, sum, sum_sq)."""
    period, up, dn = _bbands_params(
        {"period": period, "nbdev_up": nbdev_up, "nbdev_dn": nbdev_dn}
    )
    precision, (x, old, prev_sma, prev_sum, prev_sum_sq) = _checked(
        config, x, old, prev_sma, prev_sum, prev_sum_sq
    )
    n = precision.const(period)
    middle = sma_inc_raw(x, old, prev_sma, n)
    total = roll_sum(prev_sum, x, old)
    total_sq = roll_sum_sq(prev_sum_sq, x, old)
    upper, middle, lower = bbands_inc_raw(
        middle, total, total_sq, n, precision.consts.zero,
        precision.const(up), precision.const(dn),
    )
    return upper, middle, lower, total, total_sq


# ===========================================================================
# ADR  (output_only)  -- Average Daily Range
# ===========================================================================
# SMA of (high - low).  State: SMAState over the ranges.

def _adr_lookback(params: Dict[str, Any]) -> int:
    return _period(params, 14) - 1


def _adr_init(params: Dict[str, Any], precision: Precision) -> SMAState:
    return sma_make(_period(params, 14), precision)


def _adr_update(
    state: SMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], SMAState]:
    val, state = sma_update_raw(state, bar["high"] - bar["low"])
    return [val], state


def _adr_output_names(params: Dict[str, Any]) -> List[str]:
    return [f"ADR_{_period(params, 14)}"]


def _adr_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
               params: Dict[str, Any], precision: Precision) -> SMAState:
    period = _period(params, 14)
    ranges = inputs["high"][-period:] - inputs["low"][-period:]
    return sma_seeded(period, precision, outputs[0][-1], ranges)


REGISTRY["adr"] = Indicator(
    kind="adr",
    shape=StateShape.WINDOW,
    inputs=("high", "low"),
    outputs=("adr",),
    lookback=_adr_lookback,
    init=_adr_init,
    update=_adr_update,
    output_names=_adr_output_names,
)
PRIME_REGISTRY["adr"] = _adr_prime


def adr(high: Any, low: Any, period: int = 14, out: Any = None,
        config: Optional[KernelConfig] = None) -> np.ndarray:
    """Average Daily Range: SMA of ``high - low``.  Lookback: ``period - 1``."""
    return batch("adr", {"high": high, "low": low}, {"period": period}, out, config)


def adr_inc(prev_adr: Any, new_high: Any, new_low: Any, old_high: Any, old_low: Any,
            period: int = 14, config: Optional[KernelConfig] = None) -> Any:
    period = validate_period(period)
    precision, (prev_adr, new_high, new_low, old_high, old_low) = _checked(
        config, prev_adr, new_high, new_low, old_high, old_low
    )
    return sma_inc_raw(new_high - new_low, old_high - old_low, prev_adr,
                       precision.const(period))


__all__ = [
    "TRANGEState", "ATRState", "BBANDSState",
    "trange", "trange_inc", "atr", "atr_inc", "atr_update_raw",
    "bbands", "bbands_inc", "adr", "adr_inc",
]
