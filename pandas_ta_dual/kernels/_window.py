# -*- coding: utf-8 -*-
"""pandas-ta dual -- rolling-window primitives.

Building blocks for the WINDOW and CHAIN state shapes.  Every push is
O(1) (amortised O(1) for ``MonotonicDeque``); nothing here ever rescans a
full window.

The ``roll_*`` helpers are the single definition of each running
aggregate: the primitives below and the field-level ``*_inc`` kernels both
call them, so batch and incremental arithmetic is the same sequence of
float operations.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Tuple

from ._errors import InvalidParameter


# ---------------------------------------------------------------------------
# Running aggregate updates
# ---------------------------------------------------------------------------

def roll_sum(prev: Any, new: Any, old: Optional[Any] = None) -> Any:
    """Add *new*, and evict *old* once the window is full."""
    total = prev + new
    if old is not None:
        total = total - old
    return total


def roll_sum_sq(prev: Any, new: Any, old: Optional[Any] = None) -> Any:
    total = prev + new * new
    if old is not None:
        total = total - old * old
    return total


def roll_sum_prod(prev: Any, new_a: Any, new_b: Any,
                  old_a: Optional[Any] = None, old_b: Optional[Any] = None) -> Any:
    total = prev + new_a * new_b
    if old_a is not None:
        total = total - old_a * old_b
    return total


def moments_variance(total: Any, total_sq: Any, n: Any, zero: Any) -> Any:
    """Population variance from window sums; clamps rounding noise at 0."""
    mean = total / n
    var = total_sq / n - mean * mean
    return zero if var < zero else var


# ---------------------------------------------------------------------------
# Ring buffer
# ---------------------------------------------------------------------------

@dataclass
class RingBuffer:
    """Fixed-capacity FIFO of raw samples."""
    capacity: int
    items: deque = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.items = deque(self.items, maxlen=self.capacity)

    def push(self, x: Any) -> Optional[Any]:
        """Append *x*; return the sample that fell out, if any."""
        evicted = self.items[0] if len(self.items) == self.capacity else None
        self.items.append(x)
        return evicted

    @property
    def full(self) -> bool:
        return len(self.items) == self.capacity

    @property
    def oldest(self) -> Optional[Any]:
        return self.items[0] if self.items else None

    @property
    def newest(self) -> Optional[Any]:
        return self.items[-1] if self.items else None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, i: int) -> Any:
        return self.items[i]


# ---------------------------------------------------------------------------
# Rolling sums
# ---------------------------------------------------------------------------

@dataclass
class RollingSum:
    window: RingBuffer
    total: Any

    @classmethod
    def make(cls, capacity: int, zero: Any) -> "RollingSum":
        return cls(window=RingBuffer(capacity), total=zero)

    def push(self, x: Any) -> Any:
        old = self.window.push(x)
        self.total = roll_sum(self.total, x, old)
        return self.total

    @property
    def full(self) -> bool:
        return self.window.full


@dataclass
class RollingMoments:
    """Window sum and sum of squares, for variance / stddev / bands."""
    window: RingBuffer
    total: Any
    total_sq: Any

    @classmethod
    def make(cls, capacity: int, zero: Any) -> "RollingMoments":
        return cls(window=RingBuffer(capacity), total=zero, total_sq=zero)

    def push(self, x: Any) -> Tuple[Any, Any]:
        old = self.window.push(x)
        self.total = roll_sum(self.total, x, old)
        self.total_sq = roll_sum_sq(self.total_sq, x, old)
        return self.total, self.total_sq

    @property
    def full(self) -> bool:
        return self.window.full


# ---------------------------------------------------------------------------
# Windowed extrema
# ---------------------------------------------------------------------------

@dataclass
class MonotonicDeque:
    """Rolling max (or min) over the last *capacity* samples.

    Holds ``(index, value)`` candidates in decreasing (max) or increasing
    (min) order.  A new sample drops every dominated candidate from the
    back; a candidate leaves from the front when its index slides out of
    the window.
    """
    capacity: int
    mode: str = "max"
    items: deque = field(default_factory=deque)
    count: int = 0

    def __post_init__(self) -> None:
        if self.mode not in ("max", "min"):
            raise InvalidParameter(f"[X] mode must be 'max' or 'min', got {self.mode!r}")

    def push(self, x: Any) -> Any:
        idx = self.count
        self.count += 1
        items = self.items
        if self.mode == "max":
            while items and items[-1][1] <= x:
                items.pop()
        else:
            while items and items[-1][1] >= x:
                items.pop()
        items.append((idx, x))
        if items[0][0] <= idx - self.capacity:
            items.popleft()
        return items[0][1]

    @property
    def full(self) -> bool:
        return self.count >= self.capacity

    @property
    def extreme(self) -> Optional[Any]:
        return self.items[0][1] if self.items else None

    @property
    def extreme_index(self) -> Optional[int]:
        """Absolute position (in pushes) of the current extreme."""
        return self.items[0][0] if self.items else None

    @classmethod
    def from_tail(cls, values: Iterable[Any], capacity: int, mode: str) -> "MonotonicDeque":
        dq = cls(capacity=capacity, mode=mode)
        for v in values:
            dq.push(v)
        return dq


__all__ = [
    "roll_sum",
    "roll_sum_sq",
    "roll_sum_prod",
    "moments_variance",
    "RingBuffer",
    "RollingSum",
    "RollingMoments",
    "MonotonicDeque",
]
