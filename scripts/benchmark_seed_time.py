#!/usr/bin/env python3
"""Benchmark seed time: replay vs prime.

Replay seeding runs the batch kernel over the whole history; priming
rebuilds the state from the batch outputs and the input tail.  The batch
outputs are computed once up front, as a caller that already holds them
would, so the prime column is the reconstruction cost alone.
"""
from __future__ import annotations

import argparse
import os
import sys
from time import perf_counter

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pandas_ta_dual as ta

from _common import make_ohlcv, parse_list, select_specs, split_spec


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=100_000)
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--include", type=str, default="", help="comma-separated kinds to run")
    ap.add_argument("--exclude", type=str, default="", help="comma-separated kinds to exclude")
    ap.add_argument("--runs", type=int, default=3, help="timed runs")
    args = ap.parse_args()

    df = make_ohlcv(args.rows, args.seed)
    specs = select_specs(parse_list(args.include), parse_list(args.exclude))

    print(f"[i] rows: {args.rows}")
    print(f"[i] runs: {args.runs}")
    print(f"{'kind':<20}{'replay_s':>12}{'prime_s':>12}")
    for spec in specs:
        kind, params = split_spec(spec)
        if kind not in ta.PRIME_REGISTRY:
            continue
        inputs, params, _ = df.dual._split_kwargs(kind, params)
        arrays = {k: v.to_numpy() for k, v in inputs.items()}
        outputs = ta.batch(kind, arrays, params)

        replay, primed = [], []
        for _ in range(max(args.runs, 1)):
            start = perf_counter()
            ta.seed(kind, arrays, params)
            replay.append(perf_counter() - start)

            start = perf_counter()
            ta.prime(kind, arrays, outputs, params)
            primed.append(perf_counter() - start)

        print(f"{kind:<20}{sum(replay) / len(replay):>12.6f}{sum(primed) / len(primed):>12.6f}")


if __name__ == "__main__":
    main()
