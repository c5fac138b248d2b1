# -*- coding: utf-8 -*-
import numpy as np
import pandas as pd
import pytest

import pandas_ta_dual as ta
from pandas_ta_dual import Category


class TestAccessor:

    def test_requires_dataframe(self):
        with pytest.raises(AttributeError):
            pd.Series([1.0, 2.0]).dual

    def test_indicators(self, ohlcv):
        assert ohlcv.dual.indicators() == ta.supported_kinds()
        assert ohlcv.dual.indicators("trend") == Category["trend"]
        assert sorted(k for kinds in Category.values() for k in kinds) == ta.supported_kinds()

    def test_single_output_is_series(self, ohlcv):
        result = ohlcv.dual.batch("sma", period=5)
        assert isinstance(result, pd.Series)
        assert result.name == "SMA_5"
        assert result.index.equals(ohlcv.index)
        np.testing.assert_array_equal(result.to_numpy(), ta.sma(ohlcv["close"].to_numpy(), 5))

    def test_multi_output_is_frame(self, ohlcv):
        result = ohlcv.dual.batch("bbands", period=5)
        assert list(result.columns) == ["BBU_5_2.0_2.0", "BBM_5_2.0_2.0", "BBL_5_2.0_2.0"]

    def test_case_insensitive_columns(self, ohlcv):
        upper = ohlcv.rename(columns=str.capitalize)
        result = upper.dual.batch("atr", period=5)
        expected = ohlcv.dual.batch("atr", period=5)
        pd.testing.assert_series_equal(result, expected)

    def test_missing_column(self, ohlcv):
        with pytest.raises(KeyError):
            ohlcv.drop(columns="volume").dual.batch("ad")

    def test_column_and_series_sources(self, ohlcv):
        by_name = ohlcv.dual.batch("correl", x="close", y="open", period=5)
        by_series = ohlcv.dual.batch("correl", x=ohlcv["close"], y=ohlcv["open"], period=5)
        pd.testing.assert_series_equal(by_name, by_series)
        assert by_name.name == "CORREL_5"

    def test_append(self, ohlcv):
        ohlcv.dual.batch("adx", period=5, append=True)
        assert {"ADX_5", "DMP_5", "DMN_5"} <= set(ohlcv.columns)

    def test_naming(self, ohlcv):
        result = ohlcv.dual.batch("sma", period=5, prefix="fast", suffix="x")
        assert result.name == "fast_SMA_5_x"
        result = ohlcv.dual.batch("ha", col_names=("o", "h", "l", "c"))
        assert list(result.columns) == ["o", "h", "l", "c"]
        with pytest.raises(ta.InvalidParameter):
            ohlcv.dual.batch("ha", col_names=("o", "h"))

    def test_unknown_kind(self, ohlcv):
        with pytest.raises(ValueError, match="not found in REGISTRY"):
            ohlcv.dual.batch("macd")


class TestAccessorIncremental:

    @pytest.mark.parametrize("kind, params", [
        ("ema", {"period": 5}),
        ("rsi", {"period": 5}),
        ("psar", {}),
        ("bbands", {"period": 5}),
        ("adosc", {"fast": 3, "slow": 6}),
    ])
    def test_seed_then_update_matches_batch(self, ohlcv, kind, params):
        head, tail = ohlcv.iloc[:80], ohlcv.iloc[80:]
        state = head.dual.seed(kind, **params)
        result, state = tail.dual.update(kind, state, **params)
        expected = ohlcv.dual.batch(kind, **params).iloc[80:]
        if isinstance(expected, pd.Series):
            pd.testing.assert_series_equal(result, expected)
        else:
            pd.testing.assert_frame_equal(result, expected)

    def test_prime(self, ohlcv):
        head, tail = ohlcv.iloc[:80], ohlcv.iloc[80:]
        state = head.dual.seed("sma", method="prime", period=5)
        result, _ = tail.dual.update("sma", state, period=5)
        pd.testing.assert_series_equal(result, ohlcv.dual.batch("sma", period=5).iloc[80:])

    def test_unknown_seed_method(self, ohlcv):
        with pytest.raises(ValueError):
            ohlcv.dual.seed("sma", method="guess")

    def test_update_append(self, ohlcv):
        head, tail = ohlcv.iloc[:80], ohlcv.iloc[80:].copy()
        state = head.dual.seed("ema", period=5)
        _, state = tail.dual.update("ema", state, append=True, period=5)
        assert "EMA_5" in tail.columns
        assert state.last == tail["EMA_5"].iloc[-1]
