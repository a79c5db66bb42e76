import math
from .model import MAP_MAX, MAP_MIN, Point

def distance(p: Point, q: Point) -> float:
    """Calculate Euclidean distance between two points."""
    dx = q[0] - p[0]
    dy = q[1] - p[1]
    return math.sqrt(dx * dx + dy * dy)

def is_valid_point(p: Point) -> bool:
    """True if both coordinates lie inside the map."""
    return MAP_MIN <= p[0] <= MAP_MAX and MAP_MIN <= p[1] <= MAP_MAX

def clamp_coord(v: int) -> int:
    return max(MAP_MIN, min(MAP_MAX, v))

def clamp_point(p: Point) -> Point:
    return (clamp_coord(p[0]), clamp_coord(p[1]))

def step_toward(src: Point, dst: Point, max_distance: float) -> Point:
    """Move from src toward dst by at most max_distance.

    Returns dst unchanged when it is within reach. Otherwise scales the
    displacement down to max_distance, truncates each coordinate to an int
    and clamps it to the map independently, so a clamped step may bend away
    from the straight line.
    """
    dist = distance(src, dst)
    if dist <= max_distance:
        return dst

    ratio = max_distance / dist
    new_x = int(src[0] + (dst[0] - src[0]) * ratio)
    new_y = int(src[1] + (dst[1] - src[1]) * ratio)
    return (clamp_coord(new_x), clamp_coord(new_y))
