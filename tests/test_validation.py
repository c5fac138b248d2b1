# -*- coding: utf-8 -*-
import numpy as np
import pytest

import pandas_ta_dual as ta
from pandas_ta_dual.kernels._validate import (
    validate_no_nan,
    validate_no_nan_values,
    validate_order,
    validate_period,
    validate_range,
    validate_sufficient_data,
)


class TestValidate:

    def test_period(self):
        assert validate_period(2) == 2
        assert validate_period(np.int64(5)) == 5
        assert validate_period(1, minimum=1) == 1
        for bad in (1, 0, -3, True, 2.5, "3"):
            with pytest.raises(ta.InvalidParameter):
                validate_period(bad)

    def test_range(self):
        assert validate_range("k", 0.5, 0.0, 1.0) == 0.5
        assert validate_range("k", 1.0, 0.0, 1.0) == 1.0
        with pytest.raises(ta.InvalidParameter):
            validate_range("k", 0.0, 0.0, 1.0, low_inclusive=False)
        with pytest.raises(ta.InvalidParameter):
            validate_range("k", 1.5, 0.0, 1.0)
        with pytest.raises(ta.InvalidParameter):
            validate_range("k", float("nan"), 0.0, 1.0)

    def test_order(self):
        validate_order("fast", 3, "slow", 3)
        with pytest.raises(ta.InvalidParameter):
            validate_order("fast", 3, "slow", 3, strict=True)
        with pytest.raises(ta.InvalidParameter):
            validate_order("af0", 0.3, "max_af", 0.2)

    def test_sufficient_data(self):
        validate_sufficient_data(5, 4)
        with pytest.raises(ta.InsufficientData):
            validate_sufficient_data(4, 4)

    def test_nan(self):
        validate_no_nan(np.arange(3.0))
        with pytest.raises(ta.NaNDetected, match="index 1"):
            validate_no_nan(np.array([0.0, np.nan]), "close")
        validate_no_nan_values([1.0, None])
        with pytest.raises(ta.NaNDetected):
            validate_no_nan_values([1.0, float("nan")])


class TestParams:

    def test_integral_float_period_accepted(self):
        assert ta.lookback("sma", {"period": 3.0}) == 2

    def test_bad_period_types(self):
        for bad in (2.5, "10", True):
            with pytest.raises(ta.InvalidParameter):
                ta.lookback("sma", {"period": bad})

    def test_none_means_default(self):
        assert ta.lookback("sma", {"period": None}) == 9
        assert ta.lookback("rsi") == 14

    def test_smoothing_factor(self):
        assert ta.lookback("ema", {"period": 3, "k": 1.0}) == 2
        for bad in (0.0, -0.1, 1.5):
            with pytest.raises(ta.InvalidParameter):
                ta.lookback("ema", {"period": 3, "k": bad})

    def test_adosc_order(self):
        with pytest.raises(ta.InvalidParameter):
            ta.lookback("adosc", {"fast": 10, "slow": 10})
        with pytest.raises(ta.InvalidParameter):
            ta.lookback("adosc", {"fast": 12, "slow": 10})

    def test_psar_bounds(self):
        for params in ({"af0": 0.0}, {"af": 1.5}, {"max_af": 0.0}, {"af0": 0.3, "max_af": 0.2}):
            with pytest.raises(ta.InvalidParameter):
                ta.lookback("psar", params)


class TestUndefined:

    def test_series_equal(self):
        a = np.array([np.nan, 1.0, 2.0])
        assert ta.series_equal(a, a.copy())
        assert not ta.series_equal(a, np.array([0.0, 1.0, 2.0]))
        assert not ta.series_equal(a, np.array([np.nan, np.nan, 2.0]))
        assert ta.series_equal(a, a + 1e-12, atol=1e-9)
        assert not ta.series_equal(a, a[:2])

    def test_markers(self):
        assert ta.is_undefined(None)
        assert ta.is_undefined(float("nan"))
        assert not ta.is_undefined(0.0)
        assert ta.leading_undefined([np.nan, np.nan, 1.0, np.nan]) == 2
        assert ta.leading_undefined([np.nan]) == 1
        np.testing.assert_array_equal(ta.undefined_mask([np.nan, 1.0]), [True, False])


class TestIntegralFloatPeriods:

    def test_same_rule_on_both_paths(self, prices):
        assert validate_period(5.0) == 5
        assert validate_period(np.float64(5.0)) == 5
        result = ta.sma(prices, period=5.0)
        np.testing.assert_array_equal(result, ta.sma(prices, period=5))
        assert ta.sma_inc(prices[5], prices[0], result[4], 5.0) == result[5]

    def test_fractional_rejected_on_both_paths(self, prices):
        with pytest.raises(ta.InvalidParameter):
            ta.sma(prices, period=5.5)
        with pytest.raises(ta.InvalidParameter):
            ta.sma_inc(1.0, 1.0, 1.0, 5.5)
