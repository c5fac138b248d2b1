# -*- coding: utf-8 -*-
"""pandas-ta dual -- shared base: descriptors, registries, drivers.

Category modules (``_overlap``, ``_momentum``, ...) build on the helpers
here and populate ``REGISTRY`` / ``PRIME_REGISTRY`` at import time.

One per-bar ``update`` function per indicator serves both modes:
``batch`` drives it left to right over whole arrays, ``step`` calls it
once per new bar.  ``seed`` replays history through ``batch`` and keeps
the final state; ``prime`` rebuilds the state from the last batch
outputs plus the input tail, for indicators whose state is recoverable
that way.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import logging
import math
import numbers
import warnings

import numpy as np

from ._config import KernelConfig, resolve_config
from ._errors import ConversionError, InvalidData, InvalidParameter, LengthMismatch
from ._precision import Precision
from ._validate import (
    validate_lengths,
    validate_no_nan,
    validate_no_nan_values,
    validate_not_empty,
    validate_period,
    validate_range,
    validate_sufficient_data,
)

logger = logging.getLogger(__name__)

NAN = float("nan")


# ---------------------------------------------------------------------------
# Undefined marker
# ---------------------------------------------------------------------------

def _is_nan(x: Any) -> bool:
    """True when *x* is None or a float NaN."""
    return x is None or (isinstance(x, numbers.Real) and math.isnan(x))


is_undefined = _is_nan


def undefined_mask(series: Any) -> np.ndarray:
    return np.isnan(np.asarray(series, dtype=np.float64))


def leading_undefined(series: Any) -> int:
    """Length of the leading run of undefined markers."""
    mask = undefined_mask(series)
    if mask.all():
        return int(mask.size)
    return int(np.argmin(mask))


def series_equal(a: Any, b: Any, atol: float = 0.0, rtol: float = 0.0) -> bool:
    """Equality for output series.

    The undefined marker equals itself only at the same position; it never
    equals a number.  Defined positions compare exactly unless a tolerance
    is given.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        return False
    mask_a, mask_b = np.isnan(a), np.isnan(b)
    if not np.array_equal(mask_a, mask_b):
        return False
    defined = ~mask_a
    if atol == 0.0 and rtol == 0.0:
        return bool(np.array_equal(a[defined], b[defined]))
    return bool(np.allclose(a[defined], b[defined], atol=atol, rtol=rtol))


# ---------------------------------------------------------------------------
# Parameter helpers
# ---------------------------------------------------------------------------

def _param(params: Optional[Mapping[str, Any]], key: str, default: Any) -> Any:
    """Pull *key* from *params*; treat None as missing -> default."""
    if not params:
        return default
    value = params.get(key, default)
    return default if value is None else value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise InvalidParameter(f"[X] {name} must be an integer, got {value!r}")
    return int(value)


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise InvalidParameter(f"[X] {name} must be a number, got {value!r}")
    return float(value)


def _period(params: Optional[Mapping[str, Any]], default: int, minimum: int = 2,
            key: str = "period") -> int:
    return validate_period(_as_int(_param(params, key, default), key), minimum, key)


def _checked(config: Optional[KernelConfig], *values: Any) -> Tuple[Precision, List[Any]]:
    """Field-level entry: resolve precision, apply the NaN policy, cast."""
    config = resolve_config(config)
    if config.check_nan:
        validate_no_nan_values(values)
    precision = config.precision
    return precision, [precision.cast(v) for v in values]


def _fmt_num(val: Any) -> Any:
    if isinstance(val, float) and float(val).is_integer():
        return int(val)
    return val


# ---------------------------------------------------------------------------
# State shapes
# ---------------------------------------------------------------------------

class StateShape(Enum):
    SCALAR = "scalar"     # one carried value
    WINDOW = "window"     # ring buffer + running aggregate
    CHAIN = "chain"       # sub-states updated in dependency order
    MACHINE = "machine"   # trend-reversal state machine
    PATTERN = "pattern"   # candlestick classifier, at most the previous bar


# ---------------------------------------------------------------------------
# Shared recurrences
# ---------------------------------------------------------------------------

def ema_alpha(period: int, k: Optional[float], precision: Precision) -> Any:
    """Smoothing factor: *k* when given, else 2 / (period + 1)."""
    if k is None:
        return precision.consts.two / precision.const(period + 1)
    validate_range("k", k, 0.0, 1.0, low_inclusive=False)
    return precision.const(float(k))


def ema_inc_raw(x: Any, prev: Any, k: Any, one_minus_k: Any) -> Any:
    return x * k + prev * one_minus_k


def wilder_inc_raw(prev: Any, x: Any, n: Any, n_minus_1: Any) -> Any:
    """Wilder smoothing: ``(prev * (n - 1) + x) / n``."""
    return (prev * n_minus_1 + x) / n


@dataclass
class EMAState:
    """Reusable EMA state (EMA, DEMA stages, ADOSC legs).

    First output, at index ``period - 1``: the SMA of the first *period*
    samples, smoothed once more with the sample at that index.  After
    that ``ema = x * k + prev * (1 - k)``.
    """
    period: int
    k: Any
    one_minus_k: Any
    n: Any
    last: Optional[Any] = None
    _warmup_sum: Any = 0.0
    _warmup_count: int = 0


def ema_make(period: int, precision: Precision, k: Optional[float] = None) -> EMAState:
    alpha = ema_alpha(period, k, precision)
    return EMAState(
        period=period,
        k=alpha,
        one_minus_k=precision.consts.one - alpha,
        n=precision.const(period),
        _warmup_sum=precision.consts.zero,
    )


def ema_update_raw(state: EMAState, x: Any) -> Tuple[Optional[Any], EMAState]:
    """Single-step EMA update.  Returns (value | None, state)."""
    if state.last is None:
        state._warmup_sum = state._warmup_sum + x
        state._warmup_count += 1
        if state._warmup_count < state.period:
            return None, state
        seed = state._warmup_sum / state.n
        state.last = ema_inc_raw(x, seed, state.k, state.one_minus_k)
        return state.last, state
    state.last = ema_inc_raw(x, state.last, state.k, state.one_minus_k)
    return state.last, state


def ema_seeded(period: int, precision: Precision, last: Any,
               k: Optional[float] = None) -> EMAState:
    """EMAState past warm-up, carrying *last*."""
    state = ema_make(period, precision, k)
    state.last = precision.cast(last)
    state._warmup_count = period
    return state


# ---------------------------------------------------------------------------
# Indicator descriptor & registries  (populated by category modules)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Indicator:
    """Immutable descriptor for a single dual-mode indicator."""
    kind:         str
    shape:        StateShape
    inputs:       Tuple[str, ...]
    outputs:      Tuple[str, ...]
    lookback:     Callable[[Dict[str, Any]], int]
    init:         Callable[[Dict[str, Any], Precision], Any]
    update:       Callable[[Any, Dict[str, Any], Dict[str, Any]],
                           Tuple[List[Optional[Any]], Any]]
    output_names: Callable[[Dict[str, Any]], List[str]]


Primer = Callable[[Dict[str, np.ndarray], List[np.ndarray], Dict[str, Any], Precision], Any]

REGISTRY:       Dict[str, Indicator] = {}
PRIME_REGISTRY: Dict[str, Primer] = {}   # kind -> prime_fn(inputs, outputs, params, precision)


def get_indicator(kind: str) -> Indicator:
    indicator = REGISTRY.get(kind)
    if indicator is None:
        raise ValueError(f"Indicator '{kind}' not found in REGISTRY")
    return indicator


def supported_kinds(shape: Optional[StateShape] = None) -> List[str]:
    """Sorted registered kinds, optionally filtered by state shape."""
    return sorted(
        kind for kind, ind in REGISTRY.items()
        if shape is None or ind.shape is shape
    )


def lookback(kind: str, params: Optional[Mapping[str, Any]] = None) -> int:
    """Leading undefined positions for *kind*; validates *params*."""
    return get_indicator(kind).lookback(dict(params or {}))


# ---------------------------------------------------------------------------
# Buffer preparation
# ---------------------------------------------------------------------------

Inputs = Union[Mapping[str, Any], Sequence[Any]]


def _prepare_inputs(
    indicator: Indicator, inputs: Inputs, precision: Precision
) -> Tuple[List[np.ndarray], int]:
    if isinstance(inputs, Mapping) or hasattr(inputs, "columns"):
        keys = inputs.columns if hasattr(inputs, "columns") else inputs
        missing = [name for name in indicator.inputs if name not in keys]
        if missing:
            raise InvalidData(f"[X] '{indicator.kind}' missing input(s): {', '.join(missing)}")
        raw = [inputs[name] for name in indicator.inputs]
    else:
        raw = list(inputs)
        if len(raw) != len(indicator.inputs):
            raise InvalidData(
                f"[X] '{indicator.kind}' expects {len(indicator.inputs)} input(s) "
                f"{indicator.inputs}, got {len(raw)}"
            )
    arrays = [precision.narrow(series) for series in raw]
    n = len(arrays[0])
    validate_not_empty(n)
    for arr in arrays[1:]:
        validate_lengths(n, len(arr))
    return arrays, n


def _prepare_outputs(
    indicator: Indicator, out: Any, n: int, precision: Precision
) -> List[np.ndarray]:
    if out is None:
        return [precision.empty(n) for _ in indicator.outputs]
    buffers = [out] if isinstance(out, np.ndarray) else list(out)
    if len(buffers) != len(indicator.outputs):
        raise LengthMismatch(
            f"[X] '{indicator.kind}' writes {len(indicator.outputs)} output(s), "
            f"got {len(buffers)} buffer(s)"
        )
    for buf in buffers:
        if not isinstance(buf, np.ndarray) or buf.ndim != 1 or buf.dtype.kind != "f":
            raise InvalidData("[X] output buffers must be 1-D float numpy arrays")
        if buf.dtype != precision.dtype:
            raise ConversionError(
                f"[X] output buffer is {buf.dtype}, working precision is {precision.name}"
            )
        if not buf.flags.writeable:
            raise InvalidData("[X] output buffer is read-only")
        validate_lengths(n, len(buf))
    return buffers


def _drive(
    indicator: Indicator,
    state: Any,
    arrays: List[np.ndarray],
    outputs: List[np.ndarray],
    params: Dict[str, Any],
) -> Any:
    names = indicator.inputs
    update = indicator.update
    for i in range(len(arrays[0])):
        bar = {name: arr[i] for name, arr in zip(names, arrays)}
        values, state = update(state, bar, params)
        for buf, v in zip(outputs, values):
            buf[i] = NAN if v is None else v
    return state


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def batch(
    kind: str,
    inputs: Inputs,
    params: Optional[Mapping[str, Any]] = None,
    out: Any = None,
    config: Optional[KernelConfig] = None,
    *,
    return_state: bool = False,
) -> Any:
    """Full-history transform.

    Returns one array (single-output kinds) or a tuple of arrays, each as
    long as the inputs with NaN in ``[0, lookback)``.  With *out*, the
    caller's buffer(s) are filled in place and returned.  All checks run
    before the first write.
    """
    indicator = get_indicator(kind)
    config = resolve_config(config)
    precision = config.precision
    params = dict(params or {})

    lb = indicator.lookback(params)
    arrays, n = _prepare_inputs(indicator, inputs, precision)
    validate_sufficient_data(n, lb)
    outputs = _prepare_outputs(indicator, out, n, precision)
    if config.check_nan:
        for name, arr in zip(indicator.inputs, arrays):
            validate_no_nan(arr, name)

    state = indicator.init(params, precision)
    state = _drive(indicator, state, arrays, outputs, params)

    result = outputs[0] if len(outputs) == 1 else tuple(outputs)
    if return_state:
        return result, state
    return result


def seed(
    kind: str,
    inputs: Inputs,
    params: Optional[Mapping[str, Any]] = None,
    config: Optional[KernelConfig] = None,
) -> Any:
    """Replay seed: run the batch kernel over history, keep the final state."""
    _, state = batch(kind, inputs, params, None, config, return_state=True)
    logger.debug("seeded %s by replay", kind)
    return state


def prime(
    kind: str,
    inputs: Inputs,
    outputs: Any = None,
    params: Optional[Mapping[str, Any]] = None,
    config: Optional[KernelConfig] = None,
) -> Any:
    """Prime from history: rebuild state from the last batch output(s)
    and the raw input tail, without replaying the recurrence.

    *outputs* are the batch results for *inputs* (computed here when
    omitted).  Kinds without a primer fall back to ``seed``.
    """
    indicator = get_indicator(kind)
    primer = PRIME_REGISTRY.get(kind)
    if primer is None:
        warnings.warn(
            f"'{kind}' has no primer; seeding by replay.",
            UserWarning,
            stacklevel=2,
        )
        return seed(kind, inputs, params, config)

    config = resolve_config(config)
    precision = config.precision
    params = dict(params or {})

    lb = indicator.lookback(params)
    arrays, n = _prepare_inputs(indicator, inputs, precision)
    validate_sufficient_data(n, lb)
    if config.check_nan:
        for name, arr in zip(indicator.inputs, arrays):
            validate_no_nan(arr, name)

    if outputs is None:
        result = batch(kind, arrays, params, None, config)
        out_list = [result] if isinstance(result, np.ndarray) else list(result)
    else:
        raw = [outputs] if isinstance(outputs, np.ndarray) else list(outputs)
        if len(raw) != len(indicator.outputs):
            raise LengthMismatch(
                f"[X] '{kind}' has {len(indicator.outputs)} output(s), got {len(raw)}"
            )
        out_list = [precision.narrow(o) for o in raw]
        for o in out_list:
            validate_lengths(n, len(o))

    logger.debug("primed %s from %d samples", kind, n)
    return primer(dict(zip(indicator.inputs, arrays)), out_list, params, precision)


def step(
    kind: str,
    state: Any,
    bar: Union[Mapping[str, Any], Sequence[Any]],
    params: Optional[Mapping[str, Any]] = None,
    config: Optional[KernelConfig] = None,
) -> Tuple[Tuple[Any, ...], Any]:
    """O(1) incremental update.  Returns (values, state).

    *bar* maps input names to the new sample (or lists them in the
    indicator's input order).  *state* must come from ``seed``, ``prime``,
    ``init_state`` or a previous ``step`` with the same parameters.
    """
    indicator = get_indicator(kind)
    config = resolve_config(config)
    precision = config.precision
    params = dict(params or {})
    indicator.lookback(params)

    if isinstance(bar, Mapping):
        try:
            raw = [bar[name] for name in indicator.inputs]
        except KeyError as ex:
            raise InvalidData(f"[X] '{kind}' bar is missing input {ex}") from ex
    else:
        raw = list(bar)
        if len(raw) != len(indicator.inputs):
            raise InvalidData(
                f"[X] '{kind}' expects {len(indicator.inputs)} value(s) per bar, got {len(raw)}"
            )
    if config.check_nan:
        validate_no_nan_values(raw)

    cast = {name: precision.cast(v) for name, v in zip(indicator.inputs, raw)}
    values, state = indicator.update(state, cast, params)
    return tuple(NAN if v is None else v for v in values), state


def init_state(
    kind: str,
    params: Optional[Mapping[str, Any]] = None,
    config: Optional[KernelConfig] = None,
) -> Any:
    """Fresh (cold) state; outputs stay undefined until lookback is met."""
    indicator = get_indicator(kind)
    config = resolve_config(config)
    params = dict(params or {})
    indicator.lookback(params)
    return indicator.init(params, config.precision)


# ---------------------------------------------------------------------------
# Output-name helpers
# ---------------------------------------------------------------------------

SPEC_EXCLUDES = frozenset({
    "kind", "append", "prefix", "suffix", "delimiter",
    "col_names", "returns_state", "config",
})


def build_state_key(kind: str, spec: Mapping[str, Any]) -> str:
    """Deterministic cache-key from *kind* + non-meta params."""
    parts = sorted(
        ((k, v) for k, v in spec.items() if k not in SPEC_EXCLUDES),
        key=lambda x: x[0],
    )
    payload = "|".join(f"{k}={repr(v)}" for k, v in parts)
    return f"{kind}|{payload}" if payload else kind


def resolve_output_names(
        base_names: List[str], spec: Mapping[str, Any]
) -> List[str]:
    """Apply prefix / suffix / col_names overrides from *spec*."""
    names = list(base_names)
    delimiter = spec.get("delimiter", "_")
    prefix = spec.get("prefix") or ""
    suffix = spec.get("suffix") or ""
    if prefix:
        prefix = f"{prefix}{delimiter}"
    if suffix:
        suffix = f"{delimiter}{suffix}"
    if prefix or suffix:
        names = [f"{prefix}{n}{suffix}" for n in names]
    col_names = spec.get("col_names")
    if col_names is not None:
        if not isinstance(col_names, tuple):
            col_names = (col_names,)
        if len(col_names) < len(names):
            raise InvalidParameter(f"[X] col_names too short: {len(col_names)} < {len(names)}")
        names = list(col_names[: len(names)])
    return names
