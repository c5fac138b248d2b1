# -*- coding: utf-8 -*-
"""Shared helpers for the scripts in this directory."""
from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
import pandas as pd


# One spec per registered kind; column-name kwargs (x=, y=) pick inputs.
DEFAULT_SPECS: List[Dict[str, Any]] = [
    {"kind": "sma", "period": 10},
    {"kind": "ema", "period": 10},
    {"kind": "wma", "period": 10},
    {"kind": "dema", "period": 10},
    {"kind": "var", "period": 10},
    {"kind": "stddev", "period": 10, "nbdev": 1.0},
    {"kind": "max", "period": 10},
    {"kind": "min", "period": 10},
    {"kind": "correl", "period": 30, "x": "close", "y": "open"},
    {"kind": "rocp", "period": 10},
    {"kind": "rsi", "period": 14},
    {"kind": "bbands", "period": 20, "nbdev_up": 2.0, "nbdev_dn": 2.0},
    {"kind": "trange"},
    {"kind": "atr", "period": 14},
    {"kind": "adr", "period": 14},
    {"kind": "adx", "period": 14},
    {"kind": "psar", "af0": 0.02, "af": 0.02, "max_af": 0.2},
    {"kind": "ad"},
    {"kind": "adosc", "fast": 3, "slow": 10},
    {"kind": "ha"},
    {"kind": "cdl_doji", "factor": 0.1},
    {"kind": "cdl_dragonfly_doji", "factor": 0.1},
    {"kind": "cdl_engulfing"},
]


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


def parse_list(value: str | None) -> List[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def select_specs(include: List[str], exclude: List[str]) -> List[Dict[str, Any]]:
    specs = [s for s in DEFAULT_SPECS if not include or s["kind"] in include]
    return [s for s in specs if s["kind"] not in exclude]


def split_spec(spec: Dict[str, Any]) -> tuple:
    params = {k: v for k, v in spec.items() if k != "kind"}
    return spec["kind"], params


def compare_frames(ref: pd.DataFrame, test: pd.DataFrame, eps: float) -> pd.DataFrame:
    diff = (test - ref).abs()
    rel = diff / (ref.abs() + eps)
    return pd.DataFrame(
        {
            "nan_ref": ref.isna().sum(),
            "nan_test": test.isna().sum(),
            "max_abs": diff.max(),
            "mean_abs": diff.mean(),
            "mean_rel": rel.mean(),
        }
    )
