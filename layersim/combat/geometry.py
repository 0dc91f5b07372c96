"""Vector helpers for the 2D arena."""

import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds."""
    return lo if value < lo else hi if value > hi else value


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(bx - ax, by - ay)


def direction(ax: float, ay: float, bx: float, by: float) -> tuple[float, float]:
    """
    Unit vector from a to b.

    Zero-length vectors come back as (0, 0) rather than dividing by zero.
    """
    dx = bx - ax
    dy = by - ay
    length = math.hypot(dx, dy)
    if length == 0:
        return 0.0, 0.0
    return dx / length, dy / length


def rotate(x: float, y: float, angle: float) -> tuple[float, float]:
    """Rotate a vector by angle radians."""
    cos = math.cos(angle)
    sin = math.sin(angle)
    return x * cos - y * sin, x * sin + y * cos
