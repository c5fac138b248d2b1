# -*- coding: utf-8 -*-
"""pandas-ta dual -- DataFrame extension.

    df.dual.batch("sma", period=10, append=True)
    state = df.dual.seed("ema", period=10)
    out, state = new_rows.dual.update("ema", state, period=10)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from pandas_ta_dual.kernels import (
    KernelConfig,
    batch,
    build_state_key,
    get_indicator,
    prime,
    resolve_output_names,
    seed,
    step,
    supported_kinds,
)
from pandas_ta_dual.maps import Category

logger = logging.getLogger(__name__)

_NAME_KEYS = ("prefix", "suffix", "delimiter", "col_names")


@pd.api.extensions.register_dataframe_accessor("dual")
class DualIndicators(object):
    """Batch and incremental indicators on OHLCV DataFrames.

    Input series are taken from the columns named like the indicator's
    inputs (``open``, ``high``, ``low``, ``close``, ``volume``; matched
    case-insensitively).  Pass ``close="Adj Close"`` etc. to use another
    column, or ``x=`` / ``y=`` for two-series indicators such as
    ``correl``.
    """

    def __init__(self, pandas_obj: pd.DataFrame):
        self._validate(pandas_obj)
        self._df = pandas_obj

    @staticmethod
    def _validate(obj: Any) -> None:
        if not isinstance(obj, pd.DataFrame):
            raise AttributeError("[X] Must be a Pandas DataFrame.")

    # -----------------------------------------------------------------------
    # helpers
    # -----------------------------------------------------------------------

    def _get_column(self, name: str) -> pd.Series:
        df = self._df
        if name in df.columns:
            return df[name]
        lowered = {str(c).lower(): c for c in df.columns}
        key = lowered.get(name.lower())
        if key is None:
            raise KeyError(f"[X] Column '{name}' not found in DataFrame")
        return df[key]

    def _split_kwargs(
        self, kind: str, kwargs: Dict[str, Any]
    ) -> Tuple[Dict[str, pd.Series], Dict[str, Any], Dict[str, Any]]:
        """(input series, indicator params, naming options)."""
        indicator = get_indicator(kind)
        kwargs = dict(kwargs)
        naming = {k: kwargs.pop(k) for k in _NAME_KEYS if k in kwargs}
        inputs = {}
        for name in indicator.inputs:
            source = kwargs.pop(name, None)
            if isinstance(source, pd.Series):
                inputs[name] = source
            else:
                inputs[name] = self._get_column(source if source is not None else name)
        return inputs, kwargs, naming

    def _frame(self, kind: str, values: Any, params: Dict[str, Any],
               naming: Dict[str, Any], index: pd.Index) -> pd.DataFrame:
        base = get_indicator(kind).output_names(params)
        names = resolve_output_names(base, naming)
        arrays = [values] if isinstance(values, np.ndarray) else list(values)
        return pd.DataFrame(
            {name: arr for name, arr in zip(names, arrays)}, index=index
        )

    def _append(self, result: pd.DataFrame) -> None:
        for col in result.columns:
            self._df[col] = result[col]

    # -----------------------------------------------------------------------
    # public API
    # -----------------------------------------------------------------------

    def indicators(self, category: Optional[str] = None) -> List[str]:
        """Registered indicator kinds, optionally for one *category*."""
        if category is None:
            return supported_kinds()
        return list(Category[category])

    def batch(self, kind: str, append: bool = False,
              config: Optional[KernelConfig] = None, **kwargs) -> Any:
        """Full-history computation.

        Returns a Series for single-output kinds, else a DataFrame, with
        columns named like ``SMA_10`` (see ``prefix`` / ``suffix`` /
        ``col_names``).  ``append=True`` also adds the columns to the
        DataFrame.
        """
        kind = kind.lower()
        inputs, params, naming = self._split_kwargs(kind, kwargs)
        values = batch(kind, {k: v.to_numpy() for k, v in inputs.items()},
                       params, None, config)
        result = self._frame(kind, values, params, naming, self._df.index)
        if append:
            self._append(result)
        if result.shape[1] == 1:
            return result.iloc[:, 0]
        return result

    def seed(self, kind: str, method: str = "replay",
             config: Optional[KernelConfig] = None, **kwargs) -> Any:
        """Incremental state after the last row.

        ``method="prime"`` rebuilds the state from the batch output where
        the indicator supports it (falls back to replay otherwise).
        """
        kind = kind.lower()
        inputs, params, _ = self._split_kwargs(kind, kwargs)
        arrays = {k: v.to_numpy() for k, v in inputs.items()}
        if method == "replay":
            return seed(kind, arrays, params, config)
        if method == "prime":
            return prime(kind, arrays, None, params, config)
        raise ValueError(f"[X] Unknown seed method '{method}'")

    def update(self, kind: str, state: Any, append: bool = False,
               config: Optional[KernelConfig] = None, **kwargs) -> Tuple[Any, Any]:
        """Feed this DataFrame's rows, in order, to *state*.

        Returns ``(result, state)``; *result* has the same shape and
        column names ``batch`` would produce for these rows.
        """
        kind = kind.lower()
        inputs, params, naming = self._split_kwargs(kind, kwargs)
        indicator = get_indicator(kind)
        arrays = [inputs[name].to_numpy() for name in indicator.inputs]
        n_out = len(indicator.outputs)
        rows: List[Tuple[Any, ...]] = []
        for bar in zip(*arrays):
            values, state = step(kind, state, bar, params, config)
            rows.append(values)
        dtype = (config or KernelConfig()).precision.dtype
        columns = np.array(rows, dtype=dtype).reshape(len(rows), n_out).T
        result = self._frame(kind, tuple(columns), params, naming, self._df.index)
        logger.debug("updated %s over %d rows", build_state_key(kind, params), len(rows))
        if append:
            self._append(result)
        if n_out == 1:
            return result.iloc[:, 0], state
        return result, state
