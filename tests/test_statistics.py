# -*- coding: utf-8 -*-
import numpy as np
import pytest

import pandas_ta_dual as ta


class TestVariance:

    def test_population_variance(self):
        result = ta.var([1.0, 2.0, 3.0, 4.0, 5.0], 5)
        assert np.isnan(result[:4]).all()
        assert result[4] == 2.0

    def test_flat_window_is_zero(self):
        result = ta.var([3.0] * 6, 3)
        assert (result[2:] == 0.0).all()

    def test_var_inc(self):
        value, total, total_sq = ta.var_inc(6.0, 1.0, 15.0, 55.0, 5)
        assert (total, total_sq) == (20.0, 90.0)
        assert value == 2.0

    def test_stddev(self, prices):
        result = ta.stddev(prices, 10, nbdev=2.0)
        expected = 2.0 * np.sqrt(ta.var(prices, 10))
        np.testing.assert_allclose(result[9:], expected[9:])

    def test_stddev_inc(self):
        value, _, _ = ta.stddev_inc(6.0, 1.0, 15.0, 55.0, 5, nbdev=2.0)
        assert value == pytest.approx(2.0 * np.sqrt(2.0))

    def test_negative_nbdev(self):
        with pytest.raises(ta.InvalidParameter):
            ta.stddev([1.0, 2.0, 3.0], 2, nbdev=-1.0)


class TestExtrema:

    def test_rolling_max_min(self):
        data = [5.0, 3.0, 8.0, 1.0, 9.0, 2.0]
        np.testing.assert_array_equal(ta.rolling_max(data, 3)[2:], [8.0, 8.0, 9.0, 9.0])
        np.testing.assert_array_equal(ta.rolling_min(data, 3)[2:], [3.0, 1.0, 1.0, 1.0])
        assert ta.leading_undefined(ta.rolling_max(data, 3)) == 2

    def test_max_inc(self):
        window = ta.MonotonicDeque(3, "max")
        values = []
        for x in (5.0, 3.0, 8.0, 1.0):
            value, window = ta.max_inc(x, window)
            values.append(value)
        assert np.isnan(values[0]) and np.isnan(values[1])
        assert values[2:] == [8.0, 8.0]

    def test_min_inc_strict_nan(self):
        window = ta.MonotonicDeque(2, "min")
        with pytest.raises(ta.NaNDetected):
            ta.min_inc(float("nan"), window, ta.KernelConfig.strict())

    def test_prime_rebuilds_window(self, prices):
        history = {"close": prices[:20]}
        primed = ta.prime("max", history, None, {"period": 6})
        replayed = ta.seed("max", history, {"period": 6})
        for x in prices[20:]:
            a, primed = ta.step("max", primed, [x], {"period": 6})
            b, replayed = ta.step("max", replayed, [x], {"period": 6})
            assert a == b


class TestCorrel:

    def test_perfect_correlation(self):
        x = np.arange(1.0, 11.0)
        result = ta.correl(x, 2 * x + 1, 5)
        assert np.isnan(result[:4]).all()
        np.testing.assert_allclose(result[4:], 1.0, atol=1e-9)
        np.testing.assert_allclose(ta.correl(x, -x, 5)[4:], -1.0, atol=1e-9)

    def test_flat_window_is_zero(self):
        x = np.arange(1.0, 11.0)
        result = ta.correl(x, np.full(10, 4.0), 5)
        assert (result[4:] == 0.0).all()

    def test_default_period(self):
        assert ta.lookback("correl") == 29

    def test_correl_inc(self):
        x = np.array([1.0, 2.0, 4.0, 3.0])
        y = np.array([2.0, 1.0, 5.0, 7.0])
        w_x, w_y = x[:3], y[:3]
        r, *sums = ta.correl_inc(
            x[3], y[3], x[0], y[0],
            w_x.sum(), w_y.sum(), (w_x ** 2).sum(), (w_y ** 2).sum(), (w_x * w_y).sum(), 3,
        )
        assert r == pytest.approx(np.corrcoef(x[1:], y[1:])[0, 1])
        assert sums[0] == x[1:].sum()

    def test_length_mismatch(self):
        with pytest.raises(ta.LengthMismatch):
            ta.correl([1.0, 2.0, 3.0], [1.0, 2.0], 2)
