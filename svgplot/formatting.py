from __future__ import annotations

import math
import re


DEFAULT_FORMAT_STRING = "G3"

_GENERAL_RE = re.compile(r"^[Gg](\d*)$")


def format_value(value: float, format_string: str | None = DEFAULT_FORMAT_STRING) -> str:
    """Format a tick or bin value for display.

    ``G``/``Gn`` follow the general format with ``n`` significant digits; a bare
    ``G`` is the shortest round-trip form. Anything else is handed to
    :func:`format` as a Python format spec.
    """
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    if value == 0.0:
        # Collapses -0.0 as well.
        value = 0.0

    spec = DEFAULT_FORMAT_STRING if format_string is None else format_string
    match = _GENERAL_RE.match(spec)
    if match is None:
        out = format(value, spec)
    elif match.group(1):
        out = format(value, f".{int(match.group(1))}g")
    else:
        out = repr(value)
        if out.endswith(".0"):
            out = out[:-2]
    if out.lstrip("-").strip("0.") == "" and out.startswith("-"):
        out = out[1:]
    return out
