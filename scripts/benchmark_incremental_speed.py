#!/usr/bin/env python3
"""Benchmark incremental update speed as history grows.

For each history size, seeds every indicator on the history (not timed)
and then times:
  - step : ``step()`` over the tail rows (should stay flat as history grows)
  - batch: recomputing ``batch()`` over history + tail (grows with history)
"""
from __future__ import annotations

import argparse
import copy
import os
import sys
import warnings
from time import perf_counter
from typing import List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pandas_ta_dual as ta

from _common import make_ohlcv, parse_list, select_specs, split_spec


def parse_sizes(value: str) -> List[int]:
    return [int(v) for v in parse_list(value)]


def time_call(fn, runs: int) -> float:
    times = []
    for _ in range(max(runs, 1)):
        start = perf_counter()
        fn()
        times.append(perf_counter() - start)
    return sum(times) / len(times)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--sizes",
        type=str,
        default="10000,50000,100000",
        help="comma-separated total row counts",
    )
    ap.add_argument("--tail", type=int, default=1, help="new rows per update")
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--include", type=str, default="", help="comma-separated kinds to run")
    ap.add_argument("--exclude", type=str, default="", help="comma-separated kinds to exclude")
    ap.add_argument("--warmup", type=int, default=1, help="warmup runs (not timed)")
    ap.add_argument("--runs", type=int, default=3, help="timed runs")
    ap.add_argument(
        "--mode",
        type=str,
        default="both",
        choices=("step", "batch", "both"),
        help="benchmark mode",
    )
    args = ap.parse_args()

    sizes = parse_sizes(args.sizes)
    specs = select_specs(parse_list(args.include), parse_list(args.exclude))

    print(f"[i] sizes: {sizes}")
    print(f"[i] tail: {args.tail}")
    print(f"[i] runs: {args.runs} (warmup: {args.warmup})")
    print(f"[i] indicators: {len(specs)}")
    print(f"[i] mode: {args.mode}")

    for rows in sizes:
        if rows <= args.tail + 1:
            print(f"[i] skip rows={rows} (need > tail+1)")
            continue

        df = make_ohlcv(rows, args.seed)
        split = rows - args.tail
        df_hist = df.iloc[:split]
        df_tail = df.iloc[split:]

        prepared = []
        for spec in specs:
            kind, params = split_spec(spec)
            inputs, params, _ = df_hist.dual._split_kwargs(kind, params)
            names = ta.get_indicator(kind).inputs
            hist = {k: v.to_numpy() for k, v in inputs.items()}
            tail_cols = [inputs[name].name for name in names]
            tail = list(zip(*(df_tail[col].to_numpy() for col in tail_cols)))
            full = {k: df[inputs[k].name].to_numpy() for k in names}
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", UserWarning)
                state = ta.seed(kind, hist, params)
            prepared.append((kind, params, state, tail, full))

        def run_step():
            for kind, params, state, tail, _ in prepared:
                state = copy.deepcopy(state)
                for bar in tail:
                    _, state = ta.step(kind, state, bar, params)

        def run_batch():
            for kind, params, _, _, full in prepared:
                ta.batch(kind, full, params)

        for _ in range(max(args.warmup, 0)):
            if args.mode in ("step", "both"):
                run_step()
            if args.mode in ("batch", "both"):
                run_batch()

        if args.mode in ("step", "both"):
            avg_step = time_call(run_step, args.runs)
            print(
                f"[step]  rows={rows} tail={args.tail} avg_s={avg_step:.6f} "
                f"s_per_tail={avg_step / max(args.tail, 1):.6f}"
            )
        if args.mode in ("batch", "both"):
            avg_batch = time_call(run_batch, args.runs)
            print(
                f"[batch] rows={rows} tail={args.tail} avg_s={avg_batch:.6f} "
                f"s_per_tail={avg_batch / max(args.tail, 1):.6f}"
            )


if __name__ == "__main__":
    main()
