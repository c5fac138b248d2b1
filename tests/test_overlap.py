# -*- coding: utf-8 -*-
import numpy as np
import pytest

import pandas_ta_dual as ta
from tests.conftest import PRICES


SMA_14 = [
    35203.53571428572, 35194.55, 35181.67857142857, 35168.00714285715,
    35156.821428571435, 35148.78571428572, 35132.357142857145, 35113.55,
    35092.17142857143, 35078.05714285715, 35067.85, 35061.05714285715,
    35052.81428571429,
]

WMA_30 = [
    35086.70666666667, 35084.86279569893, 35085.52451612904, 35085.073763440865,
    35085.998064516134, 35089.942150537645, 35096.82688172044, 35099.84129032258,
    35106.98, 35113.904946236566, 35117.354193548395,
]


class TestSMA:

    def test_reference_values(self, prices):
        result = ta.sma(prices, 14)
        assert np.isnan(result[:13]).all()
        np.testing.assert_allclose(result[13:26], SMA_14, rtol=0, atol=1e-8)

    def test_incremental_matches_batch(self, prices):
        result = ta.sma(prices, 14)
        prev = result[13]
        for i in range(14, len(prices)):
            prev = ta.sma_inc(prices[i], prices[i - 14], prev, 14)
            assert prev == pytest.approx(result[i], abs=1e-8)

    def test_bad_period(self):
        with pytest.raises(ta.InvalidParameter):
            ta.sma_inc(1.0, 1.0, 1.0, 1)


class TestEMA:

    def test_seed_is_smoothed_sma(self):
        result = ta.ema([10.0, 11.0, 12.0, 13.0, 14.0], 3)
        assert np.isnan(result[:2]).all()
        np.testing.assert_allclose(result[2:], [11.5, 12.25, 13.125])

    def test_ema_inc(self):
        assert ta.ema_inc(15.0, 13.5, 3) == 14.25

    def test_explicit_k(self):
        result = ta.ema([2.0, 4.0, 6.0, 8.0], 2, k=0.5)
        # seed: sma(2, 4) = 3, then 4 * 0.5 + 3 * 0.5
        assert result[1] == 3.5
        assert result[2] == 6.0 * 0.5 + 3.5 * 0.5
        assert ta.ema_inc(8.0, result[2], 2, k=0.5) == result[3]

    def test_prime_matches_replay(self, prices):
        history = {"close": prices[:30]}
        primed = ta.prime("ema", history, None, {"period": 7})
        replayed = ta.seed("ema", history, {"period": 7})
        for x in prices[30:]:
            a, primed = ta.step("ema", primed, [x], {"period": 7})
            b, replayed = ta.step("ema", replayed, [x], {"period": 7})
            assert a == b

    def test_column_name_carries_k(self):
        names = ta.get_indicator("ema").output_names
        assert names({"period": 10}) == ["EMA_10"]
        assert names({"period": 10, "k": 0.5}) == ["EMA_10_0.5"]
        assert names({"period": 10, "k": None}) == ["EMA_10"]


class TestWMA:

    def test_reference_values(self):
        data = np.array(PRICES + [35158.4])
        result = ta.wma(data, 30)
        assert np.isnan(result[:29]).all()
        np.testing.assert_allclose(result[29:], WMA_30, rtol=0, atol=1e-4)

    def test_weights(self):
        # (1*1 + 2*2 + 3*3) / 6, then (1*2 + 2*3 + 3*4) / 6
        result = ta.wma([1.0, 2.0, 3.0, 4.0], 3)
        np.testing.assert_allclose(result[2:], [14 / 6, 20 / 6])

    def test_wma_inc(self):
        data = np.array(PRICES + [35158.4])
        result = ta.wma(data, 30)
        window = data[:30]
        numerator = float(np.dot(np.arange(1, 31), window))
        total = float(window.sum())
        value, numerator, total = ta.wma_inc(data[30], data[0], numerator, total, 30)
        assert value == pytest.approx(result[30], abs=1e-6)
        assert total == pytest.approx(data[1:31].sum())


class TestDEMA:

    def test_lookback(self):
        assert ta.lookback("dema", {"period": 5}) == 8
        result = ta.dema(np.arange(1.0, 21.0), 5)
        assert ta.leading_undefined(result) == 8

    def test_linear_input_has_no_lag(self):
        data = np.arange(1.0, 41.0)
        result = ta.dema(data, 5)
        # DEMA removes the steady-state lag of a linear ramp
        assert result[-1] == pytest.approx(data[-1], abs=1e-3)

    def test_dema_inc(self):
        data = np.arange(1.0, 21.0)
        state = ta.seed("dema", {"close": data[:15]}, {"period": 5})
        value, ema1, ema2 = ta.dema_inc(data[15], state.ema1.last, state.ema2.last, 5)
        assert value == ta.dema(data[:16], 5)[-1]
        assert value == 2 * ema1 - ema2
