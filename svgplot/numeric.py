from __future__ import annotations

import math
import sys

from svgplot.errors import InvalidRangeError


# Shared tolerance for floating-point comparisons across ticks, bins and scales.
EPSILON = 1e-10

FLOAT_MAX = sys.float_info.max


def is_finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def nice_number(value: float, *, round_result: bool) -> float:
    """Snap ``value`` to {1, 2, 5, 10} x 10^k.

    With ``round_result`` the fraction goes to the nearest nice value, otherwise
    to the smallest nice value not below it. ``value`` must be positive and
    finite; callers substitute :data:`EPSILON` for degenerate ranges.
    """
    if not math.isfinite(value) or value <= 0:
        raise InvalidRangeError(f"nice_number requires a positive finite value, got {value!r}")
    exp = math.floor(math.log10(value))
    frac = value / (10.0**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10.0**exp))
