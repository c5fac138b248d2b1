# -*- coding: utf-8 -*-
"""Shared fixtures and reference data for the kernel tests."""
from typing import Any, Dict

import numpy as np
import pandas as pd
import pytest

import pandas_ta_dual as ta


# 1-minute closes, reused by the SMA / WMA / ROCP reference checks.
PRICES = [
    35216.1, 35221.4, 35190.7, 35170.0, 35181.5, 35254.6, 35202.8, 35251.9, 35197.6, 35184.7,
    35175.1, 35229.9, 35212.5, 35160.7, 35090.3, 35041.2, 34999.3, 35013.4, 35069.0, 35024.6,
    34939.5, 34952.6, 35000.0, 35041.8, 35080.0, 35114.5, 35097.2, 35092.0, 35073.2, 35139.3,
    35092.0, 35126.7, 35106.3, 35124.8, 35170.1, 35215.3, 35154.0, 35216.3, 35211.8,
]

# Small windows so every split point past the lookback is exercised.
KIND_PARAMS: Dict[str, Dict[str, Any]] = {
    "sma": {"period": 5},
    "ema": {"period": 5},
    "wma": {"period": 5},
    "dema": {"period": 5},
    "var": {"period": 5},
    "stddev": {"period": 5, "nbdev": 2.0},
    "max": {"period": 5},
    "min": {"period": 5},
    "correl": {"period": 5},
    "rocp": {"period": 3},
    "rsi": {"period": 5},
    "bbands": {"period": 5, "nbdev_up": 2.0, "nbdev_dn": 1.5},
    "trange": {},
    "atr": {"period": 5},
    "adr": {"period": 5},
    "adx": {"period": 4},
    "psar": {"af0": 0.02, "af": 0.02, "max_af": 0.2},
    "ad": {},
    "adosc": {"fast": 3, "slow": 6},
    "ha": {},
    "cdl_doji": {"factor": 0.1},
    "cdl_dragonfly_doji": {"factor": 0.1},
    "cdl_engulfing": {},
}

# Two-series kinds read these columns.
INPUT_COLUMNS = {"x": "close", "y": "open"}


def make_ohlcv(rows: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    idx = pd.date_range("2025-01-01", periods=rows, freq="1min")
    base = 100 + rng.standard_normal(rows).cumsum()
    close = base + rng.normal(0, 0.2, rows)
    open_ = base + rng.normal(0, 0.2, rows)
    high = np.maximum(open_, close) + rng.random(rows) * 0.5
    low = np.minimum(open_, close) - rng.random(rows) * 0.5
    volume = rng.integers(100, 1000, rows).astype(float)
    return pd.DataFrame(
        {
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        },
        index=idx,
    )


def inputs_for(kind: str, df: pd.DataFrame) -> Dict[str, np.ndarray]:
    names = ta.get_indicator(kind).inputs
    return {name: df[INPUT_COLUMNS.get(name, name)].to_numpy() for name in names}


def as_list(result: Any) -> list:
    return [result] if isinstance(result, np.ndarray) else list(result)


@pytest.fixture
def ohlcv() -> pd.DataFrame:
    return make_ohlcv(120, 7)


@pytest.fixture
def prices() -> np.ndarray:
    return np.array(PRICES)


@pytest.fixture(params=sorted(KIND_PARAMS))
def kind(request) -> str:
    return request.param
