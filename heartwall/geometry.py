"""Heart curve sampled into normalized slot positions."""

import math

# Type alias for a normalized (x, y) point in [0, 1]²
Point = tuple[float, float]


def heart_point(t: float) -> Point:
    """Raw point on the classic heart curve, y pointing down."""
    x = 16 * math.sin(t) ** 3
    y = -(13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t))
    return (x, y)


def compute_heart_positions(num_points: int) -> list[Point]:
    """Sample the heart at `num_points` evenly spaced parameters and normalize.

    Each axis is scaled independently so its minimum lands on 0 and its
    maximum on 1. Points come back in curve order, which is what maps a card's
    slot index to a stable spot on the heart.
    """
    if num_points <= 0:
        raise ValueError(f"num_points must be positive, got {num_points}")

    raw = []
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for i in range(num_points):
        x, y = heart_point(i / num_points * 2 * math.pi)
        raw.append((x, y))
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)

    range_x = (max_x - min_x) or 1
    range_y = (max_y - min_y) or 1
    return [((x - min_x) / range_x, (y - min_y) / range_y) for x, y in raw]
