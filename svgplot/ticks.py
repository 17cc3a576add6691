from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable

import numpy as np

from svgplot.numeric import EPSILON


LOGGER = logging.getLogger(__name__)

MAX_TICK_ITERATIONS = 1000

TickFormatter = Callable[[float], str]


@dataclass(frozen=True)
class TickResult:
    positions: tuple[float, ...]
    labels: tuple[str, ...]
    actual_min: float
    actual_max: float

    def __post_init__(self) -> None:
        if len(self.positions) != len(self.labels):
            raise ValueError(
                f"tick positions and labels must have the same length: {len(self.positions)} != {len(self.labels)}"
            )
        if not self.positions:
            raise ValueError("tick result requires at least one tick")

    @classmethod
    def from_sequence(cls, positions: list[float], labels: list[str]) -> TickResult:
        return cls(
            positions=tuple(positions),
            labels=tuple(labels),
            actual_min=positions[0],
            actual_max=positions[-1],
        )

    @classmethod
    def single(cls, value: float, formatter: TickFormatter) -> TickResult:
        return cls(positions=(value,), labels=(formatter(value),), actual_min=value, actual_max=value)

    @property
    def step(self) -> float | None:
        if len(self.positions) < 2:
            return None
        return self.positions[1] - self.positions[0]

    def as_array(self) -> np.ndarray:
        return np.asarray(self.positions, dtype=np.float64)


def build_tick_sequence(
    tick_min: float,
    tick_max: float,
    step: float,
    formatter: TickFormatter,
) -> tuple[list[float], list[str]]:
    """Enumerate ``tick_min, tick_min + step, ...`` up to ``tick_max``.

    Never raises: an unusable step yields a single tick, and enumeration stops
    after :data:`MAX_TICK_ITERATIONS` steps or at the first non-finite position
    with a warning.
    """
    if not math.isfinite(step) or step <= 0:
        single = tick_min if math.isfinite(tick_min) else 0.0
        LOGGER.warning("invalid tick step %r; returning single tick at %r", step, single)
        return [single], [formatter(single)]

    tolerance = step * EPSILON
    end = tick_max + tolerance
    positions: list[float] = []
    index = 0
    current = tick_min
    while current <= end:
        if not math.isfinite(current):
            LOGGER.warning("tick position overflowed at index %d (start=%r, step=%r); stopping", index, tick_min, step)
            break
        if index >= MAX_TICK_ITERATIONS:
            LOGGER.warning(
                "tick generation exceeded %d iterations; stopping at %r (step=%r)",
                MAX_TICK_ITERATIONS,
                positions[-1] if positions else tick_min,
                step,
            )
            break
        # Snap drift like -4.4e-16 to an exact zero.
        if abs(current) < tolerance:
            current = 0.0
        if not positions or abs(current - positions[-1]) >= tolerance:
            positions.append(current)
        index += 1
        current = tick_min + index * step

    if not positions:
        if math.isfinite(tick_min):
            positions.append(tick_min)
        else:
            LOGGER.warning("tick range start %r is not finite; returning single tick at 0", tick_min)
            positions.append(0.0)

    if len(positions) == 1 and abs(tick_min - tick_max) > tolerance:
        if math.isfinite(tick_max) and tick_max - positions[-1] > tolerance:
            positions.append(tick_max)

    return positions, [formatter(value) for value in positions]
