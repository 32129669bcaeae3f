# domain/units.py
import math


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Round with ties going toward +inf (2.5 -> 3, -2.5 -> -2)."""
    scale = 10**ndigits
    return math.floor(x * scale + 0.5) / scale


def round_minutes(x: float) -> int:
    return int(round_half_up(x))
