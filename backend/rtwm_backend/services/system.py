from __future__ import annotations

import math
import time

import psutil


def process_uptime_seconds() -> float:
    """Seconds elapsed since this process was created."""
    started = psutil.Process().create_time()
    return max(0.0, time.time() - started)


def now_ms() -> int:
    return int(time.time() * 1000)


def format_uptime_seconds(seconds: float) -> str:
    """Render a duration as e.g. ``1h 12m 10s``.

    Hours appear only when non-zero, minutes when non-zero or when hours are
    shown, seconds always. Negative, non-finite or non-numeric input is ``0s``.
    """
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return "0s"
    if not math.isfinite(seconds) or seconds < 0:
        return "0s"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    parts: list[str] = []
    if hours:
        parts.append(f"{hours}h")
    if minutes or hours:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)
