## line segment intersection for polyline2d

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

"""Intersection of two line segments.

Segments are parameterized over ``0 <= u <= 1`` from their first to
their second point.  Two segments meet in nothing, in a single point,
or, when they are colinear and overlap, in a sub-segment.  The result
is always a pair ``(first, second)``:

* ``(None, None)``: no intersection
* ``(p, None)``: a single point
* ``(p, q)``: the overlapping sub-segment, ordered in the direction of
  the first segment

A single tolerance is used for both the parallel/coincident decision
and for accepting parameters just outside ``[0, 1]``, so boundary
touches are found reliably under floating point error.  The flip side
is that near-parallel, near-touching segments may fall either way when
they are within the tolerance of the threshold.
"""

from __future__ import annotations

from typing import Optional, Tuple

from polyline2d.geom2d import Point, epsilon, mag, point_on_segment, sub

SegmentHit = Tuple[Optional[Point], Optional[Point]]

_MISS: SegmentHit = (None, None)


def intersect_segments(p1: Point, p2: Point, p3: Point, p4: Point,
                       tol: float = epsilon) -> SegmentHit:
    """Compute the intersection of segment ``p1-p2`` with segment
    ``p3-p4``.  See the module docstring for the shape of the result.
    """

    len1 = mag(sub(p2, p1))
    len2 = mag(sub(p4, p3))

    ## zero-length segments are points
    if len1 < tol and len2 < tol:
        return (p1, None) if p1.almost_equals(p3, tol) else _MISS
    if len2 < tol:
        return (p3, None) if point_on_segment(p3, p1, p2, tol) else _MISS
    if len1 < tol:
        return (p1, None) if point_on_segment(p1, p3, p4, tol) else _MISS

    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    n1 = (x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)
    d = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)

    ## parallel when the sine of the angle between the segments is
    ## within tolerance, coincident when p1 is also within tolerance of
    ## the second segment's line
    if abs(d) <= tol * len1 * len2:
        if abs(n1) <= tol * len2:
            return _overlap(p1, p2, p3, p4, tol)
        if d == 0:
            return _MISS

    ua = n1 / d
    if ua < -tol or ua > 1.0 + tol:
        return _MISS

    n2 = (x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)
    ub = n2 / d
    if ub < -tol or ub > 1.0 + tol:
        return _MISS

    return (Point(x1 + ua * (x2 - x1), y1 + ua * (y2 - y1)), None)


## overlap of two colinear segments. Work along the axis where the
## first segment has the larger extent so we never divide by a
## vanishing coordinate difference, then map the clipped interval back
## onto the first segment.

def _overlap(p1: Point, p2: Point, p3: Point, p4: Point, tol: float) -> SegmentHit:
    axis = 0 if abs(p2[0] - p1[0]) >= abs(p2[1] - p1[1]) else 1

    a1 = p1[axis]
    a2 = p2[axis]
    b1 = p3[axis]
    b2 = p4[axis]

    low = max(min(a1, a2), min(b1, b2))
    high = min(max(a1, a2), max(b1, b2))

    if low > high + tol:
        return _MISS

    span = a2 - a1

    def _at(value: float) -> Point:
        u = (value - a1) / span
        return Point(p1[0] + u * (p2[0] - p1[0]), p1[1] + u * (p2[1] - p1[1]))

    if abs(high - low) <= tol:
        return (_at(0.5 * (low + high)), None)

    if span > 0:
        return (_at(low), _at(high))
    return (_at(high), _at(low))


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point,
                       tol: float = epsilon) -> bool:
    """Do segments ``p1-p2`` and ``p3-p4`` meet at all?"""
    return intersect_segments(p1, p2, p3, p4, tol)[0] is not None


__all__ = [
    'SegmentHit',
    'intersect_segments',
    'segments_intersect',
]
