from __future__ import annotations

import math

from dbar.core.types import Number, Range, clamp01


def round_half_up(x: float) -> int:
    # ties go towards +inf: 2.5 -> 3, -2.5 -> -2
    return int(math.floor(x + 0.5))


def to_value(position: float, rng: Range) -> Number:
    """
    Map a normalized position in [0, 1] onto the range.

    Linear interpolation, then round half up in integer mode. The endpoints
    are exact: 0.0 -> min, 1.0 -> max.
    """
    p = clamp01(position)
    if p >= 1.0:
        raw = rng.max
    else:
        raw = rng.min + p * rng.span

    if rng.is_integer:
        v = round_half_up(raw)
        lo, hi = math.ceil(rng.min), math.floor(rng.max)
        return max(lo, min(hi, v)) if lo <= hi else v

    return max(float(rng.min), min(float(rng.max), float(raw)))


def format_value(value: Number, rng: Range, precision: int = 2) -> str:
    if rng.is_integer:
        return str(int(value))
    return f"{float(value):.{precision}f}"
