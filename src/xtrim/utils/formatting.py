"""Human-readable formatting of sizes and durations."""

import math


def format_file_size(size: int) -> str:
    """Format a byte count, e.g. ``1536`` -> ``"1.5 KB"``."""
    if not size or size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(units) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 1):g} {units[unit]}"


def format_duration(seconds: float) -> str:
    """Format seconds as ``m:ss``. Unknown or invalid values give ``0:00``."""
    if not seconds or math.isnan(seconds) or seconds < 0:
        return "0:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
