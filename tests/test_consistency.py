# -*- coding: utf-8 -*-
"""Batch / incremental consistency, run over every registered kind."""
import warnings

import numpy as np
import pytest

import pandas_ta_dual as ta
from pandas_ta_dual.kernels import FLOAT32, KernelConfig

from tests.conftest import KIND_PARAMS, as_list, inputs_for


def _slice(inputs, stop):
    return {k: v[:stop] for k, v in inputs.items()}


def _bar(inputs, i):
    return {k: v[i] for k, v in inputs.items()}


def _continue(kind, state, inputs, start, params, config=None):
    """Step from *start* to the end; returns one row of values per bar."""
    rows = []
    for i in range(start, len(next(iter(inputs.values())))):
        values, state = ta.step(kind, state, _bar(inputs, i), params, config)
        rows.append(values)
    return rows


def _assert_rows_match(full, rows, start, dtype=np.float64):
    for offset, values in enumerate(rows):
        i = start + offset
        got = np.asarray(values, dtype=dtype)
        want = np.array([out[i] for out in full], dtype=dtype)
        assert ta.series_equal(got, want), f"bar {i}: {got} != {want}"


class TestRegistry:

    def test_every_kind_is_covered(self):
        assert set(ta.supported_kinds()) == set(KIND_PARAMS)

    def test_shapes_are_tagged(self):
        assert ta.supported_kinds(ta.StateShape.MACHINE) == ["psar"]
        assert "ema" in ta.supported_kinds(ta.StateShape.SCALAR)
        assert "cdl_engulfing" in ta.supported_kinds(ta.StateShape.PATTERN)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="not found"):
            ta.batch("nope", {"close": [1.0, 2.0]})


class TestConsistencyLaw:

    def test_seed_then_step_matches_batch(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        inputs = inputs_for(kind, ohlcv)
        full = as_list(ta.batch(kind, inputs, params))
        lb = ta.lookback(kind, params)
        n = len(ohlcv)
        for split in sorted({lb + 1, lb + 2, n // 2, n - 1}):
            state = ta.seed(kind, _slice(inputs, split), params)
            rows = _continue(kind, state, inputs, split, params)
            _assert_rows_match(full, rows, split)

    def test_cold_state_matches_batch(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        inputs = inputs_for(kind, ohlcv)
        full = as_list(ta.batch(kind, inputs, params))
        state = ta.init_state(kind, params)
        rows = _continue(kind, state, inputs, 0, params)
        _assert_rows_match(full, rows, 0)

    def test_float32(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        config = KernelConfig(precision=FLOAT32)
        inputs = inputs_for(kind, ohlcv)
        full = as_list(ta.batch(kind, inputs, params, config=config))
        assert all(out.dtype == np.float32 for out in full)
        split = len(ohlcv) // 2
        state = ta.seed(kind, _slice(inputs, split), params, config)
        rows = _continue(kind, state, inputs, split, params, config)
        _assert_rows_match(full, rows, split, dtype=np.float32)

    def test_prime_matches_seed(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        inputs = inputs_for(kind, ohlcv)
        full = as_list(ta.batch(kind, inputs, params))
        split = len(ohlcv) - 10
        history = _slice(inputs, split)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            state = ta.prime(kind, history, None, params)
        rows = _continue(kind, state, inputs, split, params)
        _assert_rows_match(full, rows, split)

    def test_prime_warns_without_primer(self, ohlcv):
        inputs = inputs_for("rsi", ohlcv)
        with pytest.warns(UserWarning, match="replay"):
            ta.prime("rsi", inputs, None, {"period": 5})


class TestLookbackLaw:

    def test_leading_undefined(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        lb = ta.lookback(kind, params)
        for out in as_list(ta.batch(kind, inputs_for(kind, ohlcv), params)):
            assert ta.leading_undefined(out) == lb
            assert not np.isnan(out[lb:]).any()

    def test_idempotent(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        inputs = inputs_for(kind, ohlcv)
        first = as_list(ta.batch(kind, inputs, params))
        second = as_list(ta.batch(kind, inputs, params))
        for a, b in zip(first, second):
            assert ta.series_equal(a, b)

    def test_inputs_not_mutated(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        inputs = inputs_for(kind, ohlcv)
        copies = {k: v.copy() for k, v in inputs.items()}
        ta.batch(kind, inputs, params)
        for k in inputs:
            np.testing.assert_array_equal(inputs[k], copies[k])


class TestErrors:

    @pytest.mark.parametrize("kind_", [
        "sma", "ema", "wma", "dema", "var", "stddev", "max", "min", "correl",
        "rsi", "bbands", "atr", "adr", "adx",
    ])
    def test_period_below_minimum(self, kind_):
        with pytest.raises(ta.InvalidParameter):
            ta.lookback(kind_, {"period": 1})

    def test_rocp_allows_period_one(self):
        assert ta.lookback("rocp", {"period": 1}) == 1
        with pytest.raises(ta.InvalidParameter):
            ta.lookback("rocp", {"period": 0})

    def test_insufficient_data_leaves_output_untouched(self, kind, ohlcv):
        params = KIND_PARAMS[kind]
        lb = ta.lookback(kind, params)
        if lb == 0:
            pytest.skip("lookback 0: any non-empty input is enough")
        inputs = _slice(inputs_for(kind, ohlcv), lb)
        n_out = len(ta.get_indicator(kind).outputs)
        bufs = tuple(np.full(lb, 7.0) for _ in range(n_out))
        out = bufs[0] if n_out == 1 else bufs
        with pytest.raises(ta.InsufficientData):
            ta.batch(kind, inputs, params, out=out)
        for buf in bufs:
            assert (buf == 7.0).all()
        with pytest.raises(ta.InsufficientData):
            ta.seed(kind, inputs, params)

    def test_sma_length_two_period_five(self):
        out = np.full(2, 7.0)
        with pytest.raises(ta.InsufficientData):
            ta.sma([1.0, 2.0], period=5, out=out)
        assert (out == 7.0).all()

    def test_empty_input(self):
        with pytest.raises(ta.InvalidData):
            ta.batch("ad", {"high": [], "low": [], "close": [], "volume": []})

    def test_length_mismatch(self):
        with pytest.raises(ta.LengthMismatch):
            ta.sma(np.arange(10.0), period=3, out=np.empty(9))
        with pytest.raises(ta.LengthMismatch):
            ta.adr(np.arange(10.0), np.arange(9.0), period=3)

    def test_nan_rejected_only_when_enabled(self):
        close = np.array([1.0, 2.0, np.nan, 4.0, 5.0])
        ta.sma(close, period=2)
        with pytest.raises(ta.NaNDetected):
            ta.sma(close, period=2, config=KernelConfig.strict())
        with pytest.raises(ta.NaNDetected):
            ta.step("sma", ta.init_state("sma", {"period": 2}), [np.nan],
                    {"period": 2}, KernelConfig.strict())

    def test_errors_are_value_errors(self):
        for exc in (ta.InvalidParameter, ta.LengthMismatch, ta.InsufficientData,
                    ta.NaNDetected, ta.ConversionError, ta.InvalidData):
            assert issubclass(exc, ta.KernelError)
            assert issubclass(exc, ValueError)


class TestOutBuffers:

    def test_written_in_place(self, prices):
        out = np.empty(len(prices))
        result = ta.sma(prices, period=14, out=out)
        assert result is out
        assert ta.leading_undefined(out) == 13

    def test_multi_output_buffers(self, prices):
        bufs = tuple(np.empty(len(prices)) for _ in range(3))
        upper, middle, lower = ta.bbands(prices, period=5, out=bufs)
        assert upper is bufs[0] and lower is bufs[2]
        assert ta.series_equal(middle, ta.sma(prices, period=5))

    def test_read_only_buffer(self, prices):
        out = np.empty(len(prices))
        out.flags.writeable = False
        with pytest.raises(ta.InvalidData):
            ta.sma(prices, period=3, out=out)

    def test_buffer_dtype_must_match_precision(self):
        out = np.full(5, 7.0, dtype=np.float32)
        with pytest.raises(ta.ConversionError):
            ta.sma(np.full(5, 1e300), period=2, out=out)
        assert (out == 7.0).all()

    def test_float32_buffer_under_float32(self):
        out = np.empty(5, dtype=np.float32)
        result = ta.sma(np.arange(5.0), period=2, out=out,
                        config=KernelConfig(precision=FLOAT32))
        assert result is out
        assert out[1] == np.float32(0.5)
