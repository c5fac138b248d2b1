# -*- coding: utf-8 -*-
"""pandas-ta dual -- trend indicators.

Registered kinds
----------------
replay_only : adx, psar
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ._base import (
    Indicator,
    REGISTRY,
    StateShape,
    _as_float,
    _checked,
    _fmt_num,
    _param,
    _period,
    batch,
    wilder_inc_raw,
)
from ._config import KernelConfig
from ._precision import Precision
from ._validate import validate_order, validate_period, validate_range
from ._volatility import trange_inc_raw


# ===========================================================================
# ADX  (replay_only)
# ===========================================================================
# TA-Lib construction with Wilder running sums:
#   bar 0           : remember the bar
#   bars 1..p-1     : plain sums of +DM, -DM and TR
#   bars >= p       : sum' = sum - sum / n + new
#                     DI = 100 * dm_sum / tr_sum, DX = 100 * |DI+ - DI-| / (DI+ + DI-)
#   bars p..2p-1    : average of DX seeds ADX at bar 2p-1
#   afterwards      : ADX Wilder-smoothed
# All three outputs start at bar 2p-1.

@dataclass
class ADXState:
    period: int
    n: Any
    n_minus_1: Any
    zero: Any
    hundred: Any
    prev_high: Optional[Any] = None
    prev_low: Optional[Any] = None
    prev_close: Optional[Any] = None
    plus_dm_sum: Any = 0.0
    minus_dm_sum: Any = 0.0
    tr_sum: Any = 0.0
    adx: Optional[Any] = None
    _dx_sum: Any = 0.0
    _bars: int = 0


def directional_movement(high: Any, low: Any, prev_high: Any, prev_low: Any,
                         zero: Any) -> Tuple[Any, Any]:
    """(+DM, -DM) for one bar; at most one of them is non-zero."""
    up = high - prev_high
    dn = prev_low - low
    if up > zero and up > dn:
        return up, zero
    if dn > zero and dn > up:
        return zero, dn
    return zero, zero


def _di_dx(plus_dm_sum: Any, minus_dm_sum: Any, tr_sum: Any, zero: Any,
           hundred: Any) -> Tuple[Any, Any, Any]:
    if tr_sum == zero:
        plus_di = minus_di = zero
    else:
        plus_di = hundred * plus_dm_sum / tr_sum
        minus_di = hundred * minus_dm_sum / tr_sum
    total = plus_di + minus_di
    dx = zero if total == zero else hundred * abs(plus_di - minus_di) / total
    return plus_di, minus_di, dx


def adx_sums_raw(
    high: Any, low: Any, prev_high: Any, prev_low: Any, prev_close: Any,
    plus_dm_sum: Any, minus_dm_sum: Any, tr_sum: Any, n: Any, zero: Any, hundred: Any,
) -> Tuple[Any, Any, Any, Any, Any, Any]:
    """Wilder-sum step.  Returns (plus_di, minus_di, dx, +dm_sum, -dm_sum, tr_sum)."""
    plus_dm, minus_dm = directional_movement(high, low, prev_high, prev_low, zero)
    tr = trange_inc_raw(high, low, prev_close)
    plus_dm_sum = plus_dm_sum - plus_dm_sum / n + plus_dm
    minus_dm_sum = minus_dm_sum - minus_dm_sum / n + minus_dm
    tr_sum = tr_sum - tr_sum / n + tr
    plus_di, minus_di, dx = _di_dx(plus_dm_sum, minus_dm_sum, tr_sum, zero, hundred)
    return plus_di, minus_di, dx, plus_dm_sum, minus_dm_sum, tr_sum


def _adx_lookback(params: Dict[str, Any]) -> int:
    return 2 * _period(params, 14) - 1


def _adx_init(params: Dict[str, Any], precision: Precision) -> ADXState:
    period = _period(params, 14)
    zero = precision.consts.zero
    return ADXState(
        period=period,
        n=precision.const(period),
        n_minus_1=precision.const(period - 1),
        zero=zero,
        hundred=precision.consts.hundred,
        plus_dm_sum=zero,
        minus_dm_sum=zero,
        tr_sum=zero,
        _dx_sum=zero,
    )


def _adx_update(
    state: ADXState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], ADXState]:
    high, low, close = bar["high"], bar["low"], bar["close"]
    prev_high, prev_low, prev_close = state.prev_high, state.prev_low, state.prev_close
    state.prev_high, state.prev_low, state.prev_close = high, low, close
    i = state._bars
    state._bars += 1
    if i == 0:
        return [None, None, None], state

    p = state.period
    if i < p:
        plus_dm, minus_dm = directional_movement(high, low, prev_high, prev_low, state.zero)
        state.plus_dm_sum = state.plus_dm_sum + plus_dm
        state.minus_dm_sum = state.minus_dm_sum + minus_dm
        state.tr_sum = state.tr_sum + trange_inc_raw(high, low, prev_close)
        return [None, None, None], state

    (plus_di, minus_di, dx,
     state.plus_dm_sum, state.minus_dm_sum, state.tr_sum) = adx_sums_raw(
        high, low, prev_high, prev_low, prev_close,
        state.plus_dm_sum, state.minus_dm_sum, state.tr_sum,
        state.n, state.zero, state.hundred,
    )

    if state.adx is None:
        state._dx_sum = state._dx_sum + dx
        if i < 2 * p - 1:
            return [None, None, None], state
        state.adx = state._dx_sum / state.n
    else:
        state.adx = wilder_inc_raw(state.adx, dx, state.n, state.n_minus_1)
    return [state.adx, plus_di, minus_di], state


def _adx_output_names(params: Dict[str, Any]) -> List[str]:
    period = _period(params, 14)
    return [f"ADX_{period}", f"DMP_{period}", f"DMN_{period}"]


REGISTRY["adx"] = Indicator(
    kind="adx",
    shape=StateShape.CHAIN,
    inputs=("high", "low", "close"),
    outputs=("adx", "plus_di", "minus_di"),
    lookback=_adx_lookback,
    init=_adx_init,
    update=_adx_update,
    output_names=_adx_output_names,
)


def adx(high: Any, low: Any, close: Any, period: int = 14, out: Any = None,
        config: Optional[KernelConfig] = None
        ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Average Directional Index.  Returns (adx, plus_di, minus_di).

    Lookback: ``2 * period - 1``.
    """
    return batch("adx", {"high": high, "low": low, "close": close},
                 {"period": period}, out, config)


def adx_inc(
    high: Any, low: Any, prev_high: Any, prev_low: Any, prev_close: Any,
    prev_plus_dm_sum: Any, prev_minus_dm_sum: Any, prev_tr_sum: Any, prev_adx: Any,
    period: int = 14, config: Optional[KernelConfig] = None,
) -> Tuple[Any, Any, Any, Any, Any, Any]:
    """Returns (adx, plus_di, minus_di, plus_dm_sum, minus_dm_sum, tr_sum)."""
    period = validate_period(period)
    precision, values = _checked(
        config, high, low, prev_high, prev_low, prev_close,
        prev_plus_dm_sum, prev_minus_dm_sum, prev_tr_sum, prev_adx,
    )
    prev_adx = values.pop()
    n = precision.const(period)
    c = precision.consts
    plus_di, minus_di, dx, plus_dm_sum, minus_dm_sum, tr_sum = adx_sums_raw(
        *values, n, c.zero, c.hundred
    )
    adx_ = wilder_inc_raw(prev_adx, dx, n, precision.const(period - 1))
    return adx_, plus_di, minus_di, plus_dm_sum, minus_dm_sum, tr_sum


# ===========================================================================
# PSAR  (replay_only)
# ===========================================================================
# Wilder's Parabolic SAR as a two-state machine.
#   bar 0 : remember the bar
#   bar 1 : pick the trend from the first move (down only when the low
#           dropped more than the high rose), then process bar 1
# Each bar either continues the trend (EP may advance, AF steps up to
# max_af) or reverses (SAR jumps to the extreme, AF resets to af0).
# The next SAR never enters the last two bars' range.
# Outputs: psar, direction (+1 up / -1 down).

class Trend(Enum):
    UPTREND = 1
    DOWNTREND = -1


@dataclass
class PSARState:
    af0: Any
    af: Any
    max_af: Any
    one: Any
    trend: Optional[Trend] = None
    sar: Optional[Any] = None
    ep: Optional[Any] = None
    acc: Optional[Any] = None
    prev_high: Optional[Any] = None
    prev_low: Optional[Any] = None


def _psar_params(params: Dict[str, Any]) -> Tuple[float, float, float]:
    af0 = validate_range("af0", _as_float(_param(params, "af0", 0.02), "af0"),
                         0.0, 1.0, low_inclusive=False)
    af = validate_range("af", _as_float(_param(params, "af", 0.02), "af"),
                        0.0, 1.0, low_inclusive=False)
    max_af = validate_range("max_af", _as_float(_param(params, "max_af", 0.2), "max_af"),
                            0.0, 1.0, low_inclusive=False)
    validate_order("af0", af0, "max_af", max_af)
    return af0, af, max_af


def psar_inc_raw(
    high: Any, low: Any, prev_high: Any, prev_low: Any,
    trend: Trend, sar: Any, ep: Any, acc: Any, af0: Any, af: Any, max_af: Any,
) -> Tuple[Any, Trend, Any, Any, Any]:
    """One bar of the machine.  Returns (psar, trend, next_sar, ep, acc)."""
    if trend is Trend.UPTREND:
        if low <= sar:
            out = max(ep, prev_high, high)
            trend, ep, acc = Trend.DOWNTREND, low, af0
        else:
            out = sar
            if high > ep:
                ep = high
                acc = min(acc + af, max_af)
    else:
        if high >= sar:
            out = min(ep, prev_low, low)
            trend, ep, acc = Trend.UPTREND, high, af0
        else:
            out = sar
            if low < ep:
                ep = low
                acc = min(acc + af, max_af)

    next_sar = out + acc * (ep - out)
    if trend is Trend.UPTREND:
        next_sar = min(next_sar, prev_low, low)
    else:
        next_sar = max(next_sar, prev_high, high)
    return out, trend, next_sar, ep, acc


def _psar_lookback(params: Dict[str, Any]) -> int:
    _psar_params(params)
    return 1


def _psar_init(params: Dict[str, Any], precision: Precision) -> PSARState:
    af0, af, max_af = _psar_params(params)
    return PSARState(
        af0=precision.const(af0),
        af=precision.const(af),
        max_af=precision.const(max_af),
        one=precision.consts.one,
    )


def _psar_update(
    state: PSARState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], PSARState]:
    high, low = bar["high"], bar["low"]
    prev_high, prev_low = state.prev_high, state.prev_low
    state.prev_high, state.prev_low = high, low
    if prev_high is None:
        return [None, None], state

    if state.trend is None:
        up = high - prev_high
        dn = prev_low - low
        if dn > up and dn > 0:
            state.trend, state.sar, state.ep = Trend.DOWNTREND, prev_high, low
        else:
            state.trend, state.sar, state.ep = Trend.UPTREND, prev_low, high
        state.acc = state.af0

    out, state.trend, state.sar, state.ep, state.acc = psar_inc_raw(
        high, low, prev_high, prev_low,
        state.trend, state.sar, state.ep, state.acc,
        state.af0, state.af, state.max_af,
    )
    direction = state.one if state.trend is Trend.UPTREND else -state.one
    return [out, direction], state


def _psar_output_names(params: Dict[str, Any]) -> List[str]:
    af0, af, max_af = _psar_params(params)
    props = f"_{_fmt_num(af0)}_{_fmt_num(max_af)}"
    return [f"PSAR{props}", f"PSARd{props}"]


REGISTRY["psar"] = Indicator(
    kind="psar",
    shape=StateShape.MACHINE,
    inputs=("high", "low"),
    outputs=("psar", "direction"),
    lookback=_psar_lookback,
    init=_psar_init,
    update=_psar_update,
    output_names=_psar_output_names,
)


def psar(high: Any, low: Any, af0: float = 0.02, af: float = 0.02, max_af: float = 0.2,
         out: Any = None, config: Optional[KernelConfig] = None
         ) -> Tuple[np.ndarray, np.ndarray]:
    """Parabolic SAR.  Returns (psar, direction).  Lookback: 1."""
    return batch("psar", {"high": high, "low": low},
                 {"af0": af0, "af": af, "max_af": max_af}, out, config)


def psar_inc(
    high: Any, low: Any, prev_high: Any, prev_low: Any,
    trend: Trend, sar: Any, ep: Any, acc: Any,
    af0: float = 0.02, af: float = 0.02, max_af: float = 0.2,
    config: Optional[KernelConfig] = None,
) -> Tuple[Any, Trend, Any, Any, Any]:
    """Returns (psar, trend, next_sar, ep, acc)."""
    af0, af, max_af = _psar_params({"af0": af0, "af": af, "max_af": max_af})
    precision, (high, low, prev_high, prev_low, sar, ep, acc) = _checked(
        config, high, low, prev_high, prev_low, sar, ep, acc
    )
    return psar_inc_raw(
        high, low, prev_high, prev_low, Trend(trend), sar, ep, acc,
        precision.const(af0), precision.const(af), precision.const(max_af),
    )


__all__ = [
    "ADXState", "PSARState", "Trend",
    "adx", "adx_inc", "directional_movement",
    "psar", "psar_inc",
]
