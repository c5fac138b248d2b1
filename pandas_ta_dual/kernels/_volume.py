# -*- coding: utf-8 -*-
"""pandas-ta dual -- volume indicators.

Registered kinds
----------------
output_only : ad
replay_only : adosc
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
    _period,
    batch,
    ema_alpha,
    ema_inc_raw,
    ema_make,
    ema_update_raw,
)
from ._config import KernelConfig
from ._precision import Precision
from ._validate import validate_order, validate_period


# ===========================================================================
# AD  (output_only)  -- Chaikin Accumulation/Distribution line
# ===========================================================================
#   mfm = ((close - low) - (high - close)) / (high - low), 0 on a flat bar
#   ad  = prev_ad + mfm * volume

@dataclass
class ADState:
    zero: Any
    ad: Any


def ad_inc_raw(high: Any, low: Any, close: Any, volume: Any, prev_ad: Any,
               zero: Any) -> Any:
    hl = high - low
    if hl == zero:
        return prev_ad
    mfm = ((close - low) - (high - close)) / hl
    return prev_ad + mfm * volume


def _ad_init(params: Dict[str, Any], precision: Precision) -> ADState:
    return ADState(zero=precision.consts.zero, ad=precision.consts.zero)


def _ad_update(
    state: ADState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], ADState]:
    state.ad = ad_inc_raw(bar["high"], bar["low"], bar["close"], bar["volume"],
                          state.ad, state.zero)
    return [state.ad], state


def _ad_prime(inputs: Dict[str, np.ndarray], outputs: List[np.ndarray],
              params: Dict[str, Any], precision: Precision) -> ADState:
    return ADState(zero=precision.consts.zero, ad=outputs[0][-1])


REGISTRY["ad"] = Indicator(
    kind="ad",
    shape=StateShape.SCALAR,
    inputs=("high", "low", "close", "volume"),
    outputs=("ad",),
    lookback=lambda params: 0,
    init=_ad_init,
    update=_ad_update,
    output_names=lambda params: ["AD"],
)
PRIME_REGISTRY["ad"] = _ad_prime


def ad(high: Any, low: Any, close: Any, volume: Any, out: Any = None,
       config: Optional[KernelConfig] = None) -> np.ndarray:
    """Accumulation/Distribution line.  Lookback: 0."""
    return batch("ad", {"high": high, "low": low, "close": close, "volume": volume},
                 None, out, config)


def ad_inc(high: Any, low: Any, close: Any, volume: Any, prev_ad: Any,
           config: Optional[KernelConfig] = None) -> Any:
    precision, (high, low, close, volume, prev_ad) = _checked(
        config, high, low, close, volume, prev_ad
    )
    return ad_inc_raw(high, low, close, volume, prev_ad, precision.consts.zero)


# ===========================================================================
# ADOSC  (replay_only)  -- Chaikin A/D Oscillator
# ===========================================================================
# EMA(ad, fast) - EMA(ad, slow); defined once the slow EMA is.

@dataclass
class ADOSCState:
    ad: ADState
    ema_fast: EMAState
    ema_slow: EMAState


def _adosc_params(params: Dict[str, Any]) -> Tuple[int, int]:
    fast = _period(params, 3, key="fast")
    slow = _period(params, 10, key="slow")
    validate_order("fast", fast, "slow", slow, strict=True)
    return fast, slow


def _adosc_lookback(params: Dict[str, Any]) -> int:
    return _adosc_params(params)[1] - 1


def _adosc_init(params: Dict[str, Any], precision: Precision) -> ADOSCState:
    fast, slow = _adosc_params(params)
    return ADOSCState(
        ad=_ad_init(params, precision),
        ema_fast=ema_make(fast, precision),
        ema_slow=ema_make(slow, precision),
    )


def _adosc_update(
    state: ADOSCState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[List[Optional[Any]], ADOSCState]:
    (ad_val,), state.ad = _ad_update(state.ad, bar, params)
    fast_val, state.ema_fast = ema_update_raw(state.ema_fast, ad_val)
    slow_val, state.ema_slow = ema_update_raw(state.ema_slow, ad_val)
    if slow_val is None:
        return [None], state
    return [fast_val - slow_val], state


def _adosc_output_names(params: Dict[str, Any]) -> List[str]:
    fast, slow = _adosc_params(params)
    return [f"ADOSC_{fast}_{slow}"]


REGISTRY["adosc"] = Indicator(
    kind="adosc",
    shape=StateShape.CHAIN,
    inputs=("high", "low", "close", "volume"),
    outputs=("adosc",),
    lookback=_adosc_lookback,
    init=_adosc_init,
    update=_adosc_update,
    output_names=_adosc_output_names,
)


def adosc(high: Any, low: Any, close: Any, volume: Any, fast: int = 3, slow: int = 10,
          out: Any = None, config: Optional[KernelConfig] = None) -> np.ndarray:
    """Chaikin A/D Oscillator.  Lookback: ``slow - 1``."""
    return batch("adosc", {"high": high, "low": low, "close": close, "volume": volume},
                 {"fast": fast, "slow": slow}, out, config)


def adosc_inc(
    high: Any, low: Any, close: Any, volume: Any,
    prev_ad: Any, prev_fast_ema: Any, prev_slow_ema: Any,
    fast: int = 3, slow: int = 10, config: Optional[KernelConfig] = None,
) -> Tuple[Any, Any, Any, Any]:
    """Returns (adosc, ad, fast_ema, slow_ema)."""
    fast = validate_period(fast, name="fast")
    slow = validate_period(slow, name="slow")
    validate_order("fast", fast, "slow", slow, strict=True)
    precision, (high, low, close, volume, prev_ad, prev_fast_ema, prev_slow_ema) = _checked(
        config, high, low, close, volume, prev_ad, prev_fast_ema, prev_slow_ema
    )
    one = precision.consts.one
    ad_val = ad_inc_raw(high, low, close, volume, prev_ad, precision.consts.zero)
    k_fast = ema_alpha(fast, None, precision)
    k_slow = ema_alpha(slow, None, precision)
    fast_ema = ema_inc_raw(ad_val, prev_fast_ema, k_fast, one - k_fast)
    slow_ema = ema_inc_raw(ad_val, prev_slow_ema, k_slow, one - k_slow)
    return fast_ema - slow_ema, ad_val, fast_ema, slow_ema


__all__ = [
    "ADState", "ADOSCState",
    "ad", "ad_inc", "adosc", "adosc_inc",
]
