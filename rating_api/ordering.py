"""
Deterministic rating order.

Every player sees teammates in a shuffled order that is stable for the whole
day, so reloading the rating wizard never reshuffles the cards. The hash and
PRNG reproduce the web client's 32-bit integer arithmetic exactly, which lets
the server and the browser agree on the same order.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Iterable, Optional

_MASK = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def hash_str(value: str) -> int:
    """32-bit FNV-1a over UTF-16 code units."""
    h = _FNV_OFFSET
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) seeded with a 32-bit integer."""
    state = seed & _MASK

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    return next_float


def day_key(day: Optional[dt.date] = None) -> str:
    if day is None:
        day = dt.datetime.now(dt.timezone.utc).date()
    return day.strftime("%Y%m%d")


def parse_day_key(value: str) -> dt.date:
    """Parse ``YYYYMMDD``; raises ValueError on anything else."""
    if len(value) != 8 or not value.isdigit():
        raise ValueError(f"bad day key: {value!r}")
    return dt.datetime.strptime(value, "%Y%m%d").date()


def rating_order(players: Iterable[str], user: str, day: str) -> list[str]:
    """Teammates of ``user`` in Fisher-Yates order seeded by ``day + user``."""
    order = [p for p in players if p != user]
    rng = mulberry32(hash_str(day + user))
    for i in range(len(order) - 1, 0, -1):
        j = int(rng() * (i + 1))
        order[i], order[j] = order[j], order[i]
    return order
