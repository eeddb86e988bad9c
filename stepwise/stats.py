import math
import statistics
from typing import Iterable, Union

Number = Union[int, float]


def round_half_up(value: float, digits: int = 0) -> Number:
    """Rounds halves away from negative infinity (2.5 -> 3, -2.5 -> -2), returning an int for digits=0."""
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return statistics.fmean(values)


def population_stddev(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return statistics.pstdev(values)


def format_number(value: float, grouped: bool = False) -> str:
    """Prints whole numbers without a trailing '.0', optionally with thousands separators."""
    if float(value).is_integer():
        value = int(value)
    return f"{value:,}" if grouped else f"{value}"
