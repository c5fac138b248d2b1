#!/usr/bin/env python3
"""Compare batch outputs against TA-Lib.

Recursive indicators (EMA, DEMA, RSI, ATR, ADX, ADOSC) are seeded
differently in places, so only the last ``--tail`` rows are compared;
by then the seeding difference has decayed away.
"""
from __future__ import annotations

import argparse
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pandas as pd
import pandas_ta_dual as ta  # noqa: F401  registers df.dual
from pandas_ta_dual.maps import Imports

from _common import compare_frames, make_ohlcv, parse_list


def talib_reference(df: pd.DataFrame) -> pd.DataFrame:
    import talib

    o, h, l, c, v = (df[col].to_numpy() for col in ("open", "high", "low", "close", "volume"))
    upper, middle, lower = talib.BBANDS(c, timeperiod=20, nbdevup=2.0, nbdevdn=2.0, matype=0)
    ref = {
        "SMA_10": talib.SMA(c, timeperiod=10),
        "EMA_10": talib.EMA(c, timeperiod=10),
        "WMA_10": talib.WMA(c, timeperiod=10),
        "DEMA_10": talib.DEMA(c, timeperiod=10),
        "VAR_10": talib.VAR(c, timeperiod=10, nbdev=1.0),
        "STDDEV_10_1.0": talib.STDDEV(c, timeperiod=10, nbdev=1.0),
        "MAX_10": talib.MAX(c, timeperiod=10),
        "MIN_10": talib.MIN(c, timeperiod=10),
        "CORREL_30": talib.CORREL(c, o, timeperiod=30),
        "ROCP_10": talib.ROCP(c, timeperiod=10),
        "RSI_14": talib.RSI(c, timeperiod=14),
        "BBU_20_2.0_2.0": upper,
        "BBM_20_2.0_2.0": middle,
        "BBL_20_2.0_2.0": lower,
        "TRUERANGE_1": talib.TRANGE(h, l, c),
        "ATR_14": talib.ATR(h, l, c, timeperiod=14),
        "ADX_14": talib.ADX(h, l, c, timeperiod=14),
        "DMP_14": talib.PLUS_DI(h, l, c, timeperiod=14),
        "DMN_14": talib.MINUS_DI(h, l, c, timeperiod=14),
        "PSAR_0.02_0.2": talib.SAR(h, l, acceleration=0.02, maximum=0.2),
        "AD": talib.AD(h, l, c, v),
        "ADOSC_3_10": talib.ADOSC(h, l, c, v, fastperiod=3, slowperiod=10),
        "CDL_ENGULFING": talib.CDLENGULFING(o, h, l, c).astype(float),
    }
    return pd.DataFrame(ref, index=df.index)


def dual_outputs(df: pd.DataFrame) -> pd.DataFrame:
    frames = [
        df.dual.batch("sma", period=10),
        df.dual.batch("ema", period=10),
        df.dual.batch("wma", period=10),
        df.dual.batch("dema", period=10),
        df.dual.batch("var", period=10),
        df.dual.batch("stddev", period=10, nbdev=1.0),
        df.dual.batch("max", period=10),
        df.dual.batch("min", period=10),
        df.dual.batch("correl", period=30, x="close", y="open"),
        df.dual.batch("rocp", period=10),
        df.dual.batch("rsi", period=14),
        df.dual.batch("bbands", period=20, nbdev_up=2.0, nbdev_dn=2.0),
        df.dual.batch("trange"),
        df.dual.batch("atr", period=14),
        df.dual.batch("adx", period=14),
        df.dual.batch("psar").iloc[:, 0],
        df.dual.batch("ad"),
        df.dual.batch("adosc", fast=3, slow=10),
        df.dual.batch("cdl_engulfing"),
    ]
    return pd.concat(frames, axis=1)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=2000)
    ap.add_argument("--tail", type=int, default=500)
    ap.add_argument("--seed", type=int, default=11)
    ap.add_argument("--exclude", type=str, default="", help="comma-separated columns to skip")
    ap.add_argument("--eps", type=float, default=1e-12)
    args = ap.parse_args()

    if not Imports.get("talib", False):
        raise SystemExit("[X] TA-Lib not available. Install ta-lib to run this script.")

    df = make_ohlcv(args.rows, args.seed)
    ref = talib_reference(df)
    test = dual_outputs(df)

    cols = [c for c in ref.columns if c in test.columns and c not in parse_list(args.exclude)]
    missing = sorted(set(ref.columns) - set(test.columns))
    if missing:
        print("[i] missing columns (ignored):", ", ".join(missing))

    idx = df.index[-args.tail:]
    summary = compare_frames(ref.loc[idx, cols], test.loc[idx, cols], args.eps)

    print("[i] rows:", args.rows)
    print("[i] compare rows:", len(idx))
    print("[i] indicator columns:", len(cols))
    print("\nTop 15 by max_abs:")
    print(summary.sort_values("max_abs", ascending=False).head(15))
    print("\nTop 15 by mean_rel:")
    print(summary.sort_values("mean_rel", ascending=False).head(15))


if __name__ == "__main__":
    main()
