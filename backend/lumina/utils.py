"""
Shared utility functions: clamping, timestamps, text trimming.
"""
from __future__ import annotations

import datetime as dt
from typing import Any


def clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def iso_ts(ts: float) -> str:
    return dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc).isoformat().replace("+00:00", "Z")


def trunc(s: Any, n: int = 1500) -> str:
    try:
        x = str(s or "")
    except Exception:
        return ""
    x = x.strip()
    return x[:n] + ("...(truncated)" if len(x) > n else "")
