# -*- coding: utf-8 -*-
"""pandas-ta dual -- candle transforms and patterns.

Registered kinds
----------------
output_only : ha, cdl_doji, cdl_dragonfly_doji, cdl_engulfing

Pattern kinds emit 100 (bullish / present), -100 (bearish) or 0.
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
    _fmt_num,
    _param,
    batch,
)
from ._config import KernelConfig
from ._precision import Precision
from ._validate import validate_range

OHLC = ("open", "high", "low", "close")


# ===========================================================================
# HA  (output_only)  -- Heikin-Ashi candles
# ===========================================================================
#   ha_close = (o + h + l + c) / 4
#   ha_open  = (prev_ha_open + prev_ha_close) / 2, or (o + c) / 2 on bar 0
#   ha_high  = max(h, ha_open, ha_close), ha_low = min(l, ha_open, ha_close)

@dataclass
class HAState:
    half: Any
    quarter: Any
    ha_open: Optional[Any] = None
    ha_close: Optional[Any] = None


def ha_inc_raw(open_: Any, high: Any, low: Any, close: Any, prev_ha_open: Any,
               prev_ha_close: Any, half: Any, quarter: Any) -> Tuple[Any, Any, Any, Any]:
    ha_close = (open_ + high + low + close) * quarter
    ha_open = (prev_ha_open + prev_ha_close) * half
    return ha_open, max(high, ha_open, ha_close), min(low, ha_open, ha_close), ha_close


def _ha_init(params: Dict[str, Any], precision: Precision) -> HAState:
    c = precision.consts
    return HAState(half=c.half, quarter=c.half * c.half)


def _ha_update(
    state: HAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], HAState]:
    o, h, l, c = bar["open"], bar["high"], bar["low"], bar["close"]
    if state.ha_open is None:
        ha_open = (o + c) * state.half
        ha_close = (o + h + l + c) * state.quarter
        ha_high, ha_low = h, l
    else:
        ha_open, ha_high, ha_low, ha_close = ha_inc_raw(
            o, h, l, c, state.ha_open, state.ha_close, state.half, state.quarter
        )
    state.ha_open, state.ha_close = ha_open, ha_close
    return [ha_open, ha_high, ha_low, ha_close], state


def _ha_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
              params: Dict[str, Any], precision: Precision) -> HAState:
    state = _ha_init(params, precision)
    state.ha_open = outputs[0][-1]
    state.ha_close = outputs[3][-1]
    return state


REGISTRY["ha"] = Indicator(
    kind="ha",
    shape=StateShape.SCALAR,
    inputs=OHLC,
    outputs=("open", "high", "low", "close"),
    lookback=lambda params: 0,
    init=_ha_init,
    update=_ha_update,
    output_names=lambda params: ["HA_open", "HA_high", "HA_low", "HA_close"],
)
PRIME_REGISTRY["ha"] = _ha_prime


def ha(open_: Any, high: Any, low: Any, close: Any, out: Any = None,
       config: Optional[KernelConfig] = None
       ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Heikin-Ashi.  Returns (open, high, low, close).  Lookback: 0."""
    return batch("ha", {"open": open_, "high": high, "low": low, "close": close},
                 None, out, config)


def ha_inc(open_: Any, high: Any, low: Any, close: Any, prev_ha_open: Any,
           prev_ha_close: Any,
           config: Optional[KernelConfig] = None) -> Tuple[Any, Any, Any, Any]:
    """Returns (ha_open, ha_high, ha_low, ha_close)."""
    precision, values = _checked(config, open_, high, low, close, prev_ha_open, prev_ha_close)
    c = precision.consts
    return ha_inc_raw(*values, c.half, c.half * c.half)


# ===========================================================================
# Pattern helpers
# ===========================================================================

@dataclass
class PatternState:
    factor: Any
    zero: Any
    bull: Any
    bear: Any
    prev_open: Optional[Any] = None
    prev_close: Optional[Any] = None


def _factor(params: Dict[str, Any]) -> float:
    return validate_range("factor", _as_float(_param(params, "factor", 0.1), "factor"),
                          0.0, 1.0)


def _pattern_lookback(params: Dict[str, Any]) -> int:
    _factor(params)
    return 0


def _pattern_init(params: Dict[str, Any], precision: Precision) -> PatternState:
    c = precision.consts
    return PatternState(factor=precision.const(_factor(params)), zero=c.zero,
                        bull=c.hundred, bear=-c.hundred)


def _pattern_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
                   params: Dict[str, Any], precision: Precision) -> PatternState:
    state = _pattern_init(params, precision)
    state.prev_open = inputs["open"][-1]
    state.prev_close = inputs["close"][-1]
    return state


def _pattern_inc(config: Optional[KernelConfig], factor: float,
                 *values: Any) -> Tuple[Precision, List[Any], Any]:
    factor = validate_range("factor", factor, 0.0, 1.0)
    precision, values = _checked(config, *values)
    return precision, values, precision.const(factor)


def _signal(hit: bool, zero: Any, hundred: Any) -> Any:
    return hundred if hit else zero


# ===========================================================================
# CDL_DOJI  (output_only)
# ===========================================================================
# Doji: body <= factor * range.

def cdl_doji_raw(open_: Any, high: Any, low: Any, close: Any, factor: Any) -> bool:
    return abs(close - open_) <= factor * (high - low)


def _doji_update(
    state: PatternState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], PatternState]:
    hit = cdl_doji_raw(bar["open"], bar["high"], bar["low"], bar["close"], state.factor)
    return [_signal(hit, state.zero, state.bull)], state


REGISTRY["cdl_doji"] = Indicator(
    kind="cdl_doji",
    shape=StateShape.PATTERN,
    inputs=OHLC,
    outputs=("cdl_doji",),
    lookback=_pattern_lookback,
    init=_pattern_init,
    update=_doji_update,
    output_names=lambda params: [f"CDL_DOJI_{_fmt_num(_factor(params))}"],
)
PRIME_REGISTRY["cdl_doji"] = _pattern_prime


def cdl_doji(open_: Any, high: Any, low: Any, close: Any, factor: float = 0.1,
             out: Any = None, config: Optional[KernelConfig] = None) -> np.ndarray:
    return batch("cdl_doji", {"open": open_, "high": high, "low": low, "close": close},
                 {"factor": factor}, out, config)


def cdl_doji_inc(open_: Any, high: Any, low: Any, close: Any, factor: float = 0.1,
                 config: Optional[KernelConfig] = None) -> Any:
    precision, (o, h, l, c), f = _pattern_inc(config, factor, open_, high, low, close)
    return _signal(cdl_doji_raw(o, h, l, c, f), precision.consts.zero,
                   precision.consts.hundred)


# ===========================================================================
# CDL_DRAGONFLY_DOJI  (output_only)
# ===========================================================================
# Doji whose body sits at the top: upper shadow <= factor * range and
# lower shadow > factor * range.

def cdl_dragonfly_doji_raw(open_: Any, high: Any, low: Any, close: Any,
                           factor: Any) -> bool:
    rng = factor * (high - low)
    if not abs(close - open_) <= rng:
        return False
    upper = high - max(open_, close)
    lower = min(open_, close) - low
    return upper <= rng and lower > rng


def _dragonfly_update(
    state: PatternState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], PatternState]:
    hit = cdl_dragonfly_doji_raw(bar["open"], bar["high"], bar["low"], bar["close"],
                                 state.factor)
    return [_signal(hit, state.zero, state.bull)], state


REGISTRY["cdl_dragonfly_doji"] = Indicator(
    kind="cdl_dragonfly_doji",
    shape=StateShape.PATTERN,
    inputs=OHLC,
    outputs=("cdl_dragonfly_doji",),
    lookback=_pattern_lookback,
    init=_pattern_init,
    update=_dragonfly_update,
    output_names=lambda params: [f"CDL_DRAGONFLYDOJI_{_fmt_num(_factor(params))}"],
)
PRIME_REGISTRY["cdl_dragonfly_doji"] = _pattern_prime


def cdl_dragonfly_doji(open_: Any, high: Any, low: Any, close: Any, factor: float = 0.1,
                       out: Any = None, config: Optional[KernelConfig] = None) -> np.ndarray:
    return batch("cdl_dragonfly_doji",
                 {"open": open_, "high": high, "low": low, "close": close},
                 {"factor": factor}, out, config)


def cdl_dragonfly_doji_inc(open_: Any, high: Any, low: Any, close: Any,
                           factor: float = 0.1,
                           config: Optional[KernelConfig] = None) -> Any:
    precision, (o, h, l, c), f = _pattern_inc(config, factor, open_, high, low, close)
    return _signal(cdl_dragonfly_doji_raw(o, h, l, c, f), precision.consts.zero,
                   precision.consts.hundred)


# ===========================================================================
# CDL_ENGULFING  (output_only)
# ===========================================================================
# Two-candle reversal (TA-Lib rules):
#   bullish: white candle whose body covers the previous black body
#   bearish: black candle whose body covers the previous white body
# Equal open or close on one side is allowed, not on both.

def cdl_engulfing_raw(open_: Any, close: Any, prev_open: Any, prev_close: Any) -> int:
    if close > open_ and prev_close < prev_open:
        if (close >= prev_open and open_ < prev_close) or \
                (close > prev_open and open_ <= prev_close):
            return 1
    elif close < open_ and prev_close > prev_open:
        if (open_ >= prev_close and close < prev_open) or \
                (open_ > prev_close and close <= prev_open):
            return -1
    return 0


def _engulfing_signal(direction: int, zero: Any, bull: Any, bear: Any) -> Any:
    if direction > 0:
        return bull
    if direction < 0:
        return bear
    return zero


def _engulfing_update(
    state: PatternState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], PatternState]:
    o, c = bar["open"], bar["close"]
    prev_open, prev_close = state.prev_open, state.prev_close
    state.prev_open, state.prev_close = o, c
    if prev_open is None:
        return [None], state
    direction = cdl_engulfing_raw(o, c, prev_open, prev_close)
    return [_engulfing_signal(direction, state.zero, state.bull, state.bear)], state


REGISTRY["cdl_engulfing"] = Indicator(
    kind="cdl_engulfing",
    shape=StateShape.PATTERN,
    inputs=OHLC,
    outputs=("cdl_engulfing",),
    lookback=lambda params: 1,
    init=_pattern_init,
    update=_engulfing_update,
    output_names=lambda params: ["CDL_ENGULFING"],
)
PRIME_REGISTRY["cdl_engulfing"] = _pattern_prime


def cdl_engulfing(open_: Any, high: Any, low: Any, close: Any, out: Any = None,
                  config: Optional[KernelConfig] = None) -> np.ndarray:
    """Engulfing pattern: 100 bullish, -100 bearish, else 0.  Lookback: 1."""
    return batch("cdl_engulfing",
                 {"open": open_, "high": high, "low": low, "close": close},
                 None, out, config)


def cdl_engulfing_inc(open_: Any, close: Any, prev_open: Any, prev_close: Any,
                      config: Optional[KernelConfig] = None) -> Any:
    precision, (o, c, po, pc) = _checked(config, open_, close, prev_open, prev_close)
    cs = precision.consts
    return _engulfing_signal(cdl_engulfing_raw(o, c, po, pc), cs.zero, cs.hundred,
                             -cs.hundred)


__all__ = [
    "HAState", "PatternState",
    "ha", "ha_inc",
    "cdl_doji", "cdl_doji_inc",
    "cdl_dragonfly_doji", "cdl_dragonfly_doji_inc",
    "cdl_engulfing", "cdl_engulfing_inc",
]
