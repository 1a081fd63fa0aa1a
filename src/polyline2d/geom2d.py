## foundational planar geometry for polyline2d

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational planar geometry for **polyline2d**

====================
OVERVIEW
====================

The ``polyline2d.geom2d`` module provides the value types and the
small vector operations that the rest of the package is built from:
points, axis-aligned bounding boxes, and the point predicates used by
the intersection engine (point-on-segment and point-inside-convex).

constants
=========

``epsilon`` is the single tolerance used for coordinate comparisons.
Every function that compares coordinates takes a ``tol`` argument that
defaults to ``epsilon``, so callers working at a different scale can
thread their own tolerance through.  ``stitch_epsilon`` is the looser
tolerance used when joining intersection fragments end to end; it is
derived from ``epsilon``.  Redefine these at your peril.

points
======

A point is an immutable ``Point(x, y)`` named tuple.  Because it is a
tuple it unpacks, indexes and hashes like the ``(x, y)`` pairs used by
callers, and exact equality is plain tuple equality.  Tolerant
equality is ``Point.almost_equals()``, which compares the per-axis
difference against the tolerance rather than offsetting one value by
it, so it behaves the same for large coordinates.

bounding boxes
==============

``AABB(min_x, min_y, max_x, max_y)`` is an immutable axis-aligned
box.  Two boxes intersect unless one lies strictly to one side of the
other on some axis, boundaries included.

"""

from __future__ import annotations

from math import sqrt
from typing import Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple

## constants
epsilon = 0.0001
stitch_epsilon = 100.0 * epsilon


## operations on scalars
## ---------------------

def close(a: float, b: float, tol: float = epsilon) -> bool:
    """ are two scalars the same within ``tol``"""
    return abs(a - b) < tol


## points
## ------

class Point(NamedTuple):
    """Immutable 2D coordinate."""

    x: float
    y: float

    def almost_equals(self, other: Optional[Sequence[float]],
                      tol: float = epsilon) -> bool:
        """Are two points the same within ``tol`` on both axes?"""
        if other is None:
            return False
        dx = self.x - other[0]
        dy = self.y - other[1]
        return -tol < dx < tol and -tol < dy < tol

    def __str__(self) -> str:
        return '{!r},{!r}'.format(self.x, self.y)

    @classmethod
    def from_string(cls, text: str) -> "Point":
        """Parse a point previously written by ``str()``."""
        parts = text.split(',')
        if len(parts) != 2:
            raise ValueError('invalid point specification: {!r}'.format(text))
        return cls(float(parts[0]), float(parts[1]))


def point(x, y=None) -> Point:
    """Point creation from a point-like pair or from scalars"""
    if y is None:
        if isinstance(x, (tuple, list)) and len(x) >= 2:
            return Point(float(x[0]), float(x[1]))
        raise ValueError('bad argument to point(): {!r}'.format(x))
    return Point(float(x), float(y))


## vector operations, points doubling as vectors
def add(a: Point, b: Point) -> Point:
    """ `a + b`"""
    return Point(a[0] + b[0], a[1] + b[1])

def sub(a: Point, b: Point) -> Point:
    """ `a - b`"""
    return Point(a[0] - b[0], a[1] - b[1])

def scale(a: Point, c: float) -> Point:
    """ vector ``a`` times scalar ``c``"""
    return Point(a[0] * c, a[1] * c)

def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]

## z component of the 3D cross product of two vectors in the XY plane
def cross(a: Point, b: Point) -> float:
    return a[0] * b[1] - a[1] * b[0]

def mag(a: Point) -> float:
    """ compute the magnitude of vector ``a``"""
    return sqrt(a[0] * a[0] + a[1] * a[1])

def dist(a: Point, b: Point) -> float:
    """ euclidean distance between points ``a`` and ``b``"""
    return mag(sub(a, b))

## turn indicator for the corner at ``b`` on the way from ``a`` to
## ``c``: positive for a left (counter-clockwise) turn, negative for a
## right turn, zero when the three points are colinear
def turn(a: Point, b: Point, c: Point) -> float:
    return cross(sub(b, a), sub(c, b))


## bounding boxes
## --------------

class AABB(NamedTuple):
    """Immutable axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def intersects(self, other: "AABB", tol: float = 0.0) -> bool:
        """Inclusive overlap test, optionally grown by ``tol``."""
        return not (self.max_x + tol < other.min_x or
                    other.max_x + tol < self.min_x or
                    self.max_y + tol < other.min_y or
                    other.max_y + tol < self.min_y)

    def contains_point(self, p: Sequence[float], tol: float = 0.0) -> bool:
        return (self.min_x - tol <= p[0] <= self.max_x + tol and
                self.min_y - tol <= p[1] <= self.max_y + tol)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> Optional["AABB"]:
        """Box around ``points``, or ``None`` if there are none."""
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            return None
        minx = maxx = first[0]
        miny = maxy = first[1]
        for p in it:
            x = p[0]
            y = p[1]
            if x < minx:
                minx = x
            elif x > maxx:
                maxx = x
            if y < miny:
                miny = y
            elif y > maxy:
                maxy = y
        return cls(minx, miny, maxx, maxy)


## point sequences
## ---------------

def segments(points: Sequence[Point]) -> Iterator[Tuple[Point, Point]]:
    """Consecutive point pairs of an open or closed point sequence."""
    for i in range(len(points) - 1):
        yield points[i], points[i + 1]


## edges of a ring: consecutive pairs, plus the closing edge when the
## last point does not already repeat the first
def ring_edges(points: Sequence[Point],
               tol: float = epsilon) -> Iterator[Tuple[Point, Point]]:
    yield from segments(points)
    if len(points) > 2 and not points[-1].almost_equals(points[0], tol):
        yield points[-1], points[0]


def is_closed(points: Sequence[Point], tol: float = epsilon) -> bool:
    """A chain of at least three points whose ends meet within ``tol``."""
    return len(points) > 2 and points[0].almost_equals(points[-1], tol)


## point predicates
## ----------------

def point_on_segment(p: Point, a: Point, b: Point, tol: float = epsilon) -> bool:
    """
    Does ``p`` lie on the segment from ``a`` to ``b``?  The point must
    fall inside the segment's bounding box (grown by ``tol``) and lie
    within ``tol`` of the supporting line.  A zero-length segment is
    treated as the point ``a``.
    """
    if not (min(a[0], b[0]) - tol <= p[0] <= max(a[0], b[0]) + tol and
            min(a[1], b[1]) - tol <= p[1] <= max(a[1], b[1]) + tol):
        return False
    d = sub(b, a)
    length = mag(d)
    if length < tol:
        return p.almost_equals(a, tol)
    return abs(cross(d, sub(p, a))) <= tol * length


## given a convex polygon and a test point, determine whether the
## point is inside (or on the boundary of) the polygon by checking that
## it is on the same side of every edge.  Edges the point is colinear
## with do not count for either side.  This is not a winding test: a
## single side flip means outside, which is only meaningful for convex,
## consistently oriented polygons.

def point_in_convex(p: Point, polygon: Sequence[Point], tol: float = epsilon) -> bool:
    """
    Consistent-side inside test for convex ``polygon``.  Points on the
    boundary count as inside.
    """
    has_side = False
    is_left = False
    for a, b in ring_edges(polygon, tol):
        d = sub(b, a)
        length = mag(d)
        if length < tol:
            continue
        f = cross(d, sub(p, a))
        if abs(f) <= tol * length:
            continue
        left = f > 0
        if has_side and left != is_left:
            return False
        has_side = True
        is_left = left
    return has_side


__all__ = [
    'epsilon',
    'stitch_epsilon',
    'close',
    'Point',
    'point',
    'add',
    'sub',
    'scale',
    'dot',
    'cross',
    'mag',
    'dist',
    'turn',
    'AABB',
    'segments',
    'ring_edges',
    'is_closed',
    'point_on_segment',
    'point_in_convex',
]
