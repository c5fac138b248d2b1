# -*- coding: utf-8 -*-
import numpy as np
import pytest

import pandas_ta_dual as ta


HA_OPEN = [10.0, 10.5, 11.2, 10.8, 11.5]
HA_HIGH = [11.0, 11.5, 11.8, 11.3, 12.0]
HA_LOW = [9.5, 10.2, 10.8, 10.5, 11.3]
HA_CLOSE = [10.8, 11.3, 11.5, 11.0, 11.8]


class TestHeikinAshi:

    def test_first_bars(self):
        o, h, l, c = ta.ha(HA_OPEN, HA_HIGH, HA_LOW, HA_CLOSE)
        assert (o[0], h[0], l[0]) == pytest.approx((10.4, 11.0, 9.5))
        assert c[0] == pytest.approx(10.325)
        assert o[1] == pytest.approx(10.3625)
        assert c[1] == pytest.approx(10.875)
        assert (h[1], l[1]) == (11.5, 10.2)

    def test_high_low_envelope(self):
        o, h, l, c = ta.ha(HA_OPEN, HA_HIGH, HA_LOW, HA_CLOSE)
        assert (h >= np.maximum(o, c)).all()
        assert (l <= np.minimum(o, c)).all()

    def test_ha_inc(self):
        o, h, l, c = ta.ha(HA_OPEN, HA_HIGH, HA_LOW, HA_CLOSE)
        for i in range(1, len(HA_OPEN)):
            values = ta.ha_inc(HA_OPEN[i], HA_HIGH[i], HA_LOW[i], HA_CLOSE[i], o[i - 1], c[i - 1])
            assert values == (o[i], h[i], l[i], c[i])


class TestDoji:

    def test_small_body(self):
        assert ta.cdl_doji_inc(10.0, 11.0, 9.0, 10.05) == 100.0
        assert ta.cdl_doji_inc(10.0, 11.0, 9.0, 10.5) == 0.0

    def test_factor_bounds(self):
        with pytest.raises(ta.InvalidParameter):
            ta.cdl_doji([1.0], [1.0], [1.0], [1.0], factor=1.5)

    def test_batch_signals(self):
        result = ta.cdl_doji([10.0, 10.0], [11.0, 11.0], [9.0, 9.0], [10.05, 10.9])
        np.testing.assert_array_equal(result, [100.0, 0.0])

    def test_float32_signal(self):
        result = ta.cdl_doji([10.0], [11.0], [9.0], [10.05], config=ta.KernelConfig(precision="f32"))
        assert result.dtype == np.float32
        assert result[0] == 100.0


class TestDragonflyDoji:

    def test_body_at_the_top(self):
        assert ta.cdl_dragonfly_doji_inc(10.95, 11.0, 9.0, 11.0) == 100.0

    def test_body_in_the_middle(self):
        assert ta.cdl_dragonfly_doji_inc(10.0, 11.0, 9.0, 10.05) == 0.0

    def test_not_a_doji(self):
        assert ta.cdl_dragonfly_doji_inc(10.0, 11.0, 9.0, 11.0) == 0.0

    def test_column_name(self):
        assert ta.get_indicator("cdl_dragonfly_doji").output_names({}) == ["CDL_DRAGONFLYDOJI_0.1"]


class TestEngulfing:

    def test_bullish(self):
        assert ta.cdl_engulfing_inc(8.5, 10.5, 10.0, 9.0) == 100.0

    def test_bearish(self):
        assert ta.cdl_engulfing_inc(10.5, 8.5, 9.0, 10.0) == -100.0

    def test_equal_on_both_sides_is_not_engulfing(self):
        assert ta.cdl_engulfing_inc(9.0, 10.0, 10.0, 9.0) == 0.0
        assert ta.cdl_engulfing_inc(9.0, 10.0, 10.0, 9.5) == 100.0

    def test_batch(self):
        result = ta.cdl_engulfing([10.0, 8.5, 10.6], [10.2, 10.7, 10.8],
                                  [8.9, 8.4, 8.0], [9.0, 10.5, 8.2])
        assert np.isnan(result[0])
        np.testing.assert_array_equal(result[1:], [100.0, -100.0])
