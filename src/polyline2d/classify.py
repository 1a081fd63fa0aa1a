"""Shape classification of point sequences."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from polyline2d.geom2d import Point, epsilon, is_closed, mag, sub, turn


class ShapeType(Enum):
    """Kind of figure described by a point sequence."""

    VOID = 0
    POINT = 1
    LINE = 2
    PATH = 3
    CONVEX = 4
    CONCAVE = 5


def classify(points: Sequence[Point], tol: float = epsilon) -> ShapeType:
    """Return the ``ShapeType`` of ``points``.

    Two points always make a line, even when they coincide; segment
    intersection treats a zero-length line as its point.  Longer chains
    whose points all coincide with the first are points.  Open chains are
    paths.  Closed chains are convex when every non-straight corner
    turns the same way and concave as soon as one turns the other way;
    a closed chain without any turn (a straight chain folding back on
    itself) is a path.  Straight corners never decide the type, so a
    rectangle with an extra colinear vertex is still convex.
    """

    count = len(points)
    if count == 0:
        return ShapeType.VOID
    if count == 1:
        return ShapeType.POINT

    if count == 2:
        return ShapeType.LINE
    first = points[0]
    if all(first.almost_equals(p, tol) for p in points[1:]):
        return ShapeType.POINT

    if not is_closed(points, tol):
        return ShapeType.PATH

    ## walk every corner of the ring, the one at the closing vertex
    ## included
    ring = points[:-1]
    n = len(ring)
    orientation = 0
    for i in range(n):
        prev = ring[i - 1]
        cur = ring[i]
        nxt = ring[(i + 1) % n]
        f = turn(prev, cur, nxt)
        if abs(f) <= tol * mag(sub(cur, prev)) * mag(sub(nxt, cur)):
            continue  # straight
        sign = 1 if f > 0 else -1
        if orientation == 0:
            orientation = sign
        elif sign != orientation:
            return ShapeType.CONCAVE

    if orientation == 0:
        return ShapeType.PATH
    return ShapeType.CONVEX


__all__ = ['ShapeType', 'classify']
