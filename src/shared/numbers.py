from __future__ import annotations

import math


def finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def ceil_or_zero(value: float) -> int:
    return math.ceil(value) if math.isfinite(value) else 0


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator <= 0:
        return default
    return finite_or_zero(numerator / denominator)
