# -*- coding: utf-8 -*-
from importlib.util import find_spec


# Optional third-party libraries, checked once at import.
Imports = {
    "talib": find_spec("talib") is not None,
}


# Indicator kinds by category, the way they are grouped in the kernels.
Category = {
    "candles": ["cdl_doji", "cdl_dragonfly_doji", "cdl_engulfing", "ha"],
    "momentum": ["rocp", "rsi"],
    "overlap": ["dema", "ema", "sma", "wma"],
    "statistics": ["correl", "max", "min", "stddev", "var"],
    "trend": ["adx", "psar"],
    "volatility": ["adr", "atr", "bbands", "trange"],
    "volume": ["ad", "adosc"],
}


__all__ = ["Imports", "Category"]
