## Polyline shape class for polyline2d

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

"""
Polyline Class
==============

A ``Polyline`` is an ordered sequence of points.  Depending on its
contents it describes nothing, a point, a line segment, an open path,
or (when its last point repeats its first) a convex or concave
polygon; ``get_type()`` reports which.

Derived properties (shape type, bounding box, enclosed rectangle) are
computed on demand and cached.  Every method that changes the points
drops the caches, so a polyline that is no longer mutated can be
queried repeatedly at no extra cost.

Intersection queries delegate to ``polyline2d.intersect``.
"""

from __future__ import annotations

import logging
from math import sqrt
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from polyline2d.classify import ShapeType, classify
from polyline2d.errors import GeometryError, PreconditionError
from polyline2d.geom2d import AABB, Point, dist, dot, epsilon, mag, point, point_in_convex, sub
from polyline2d import intersect

logger = logging.getLogger(__name__)

## step fraction of the bounds used by the enclosed rectangle search
_ENCLOSE_STEPS = 30.0

## adjust_segment thresholds, in model units and cosine
_MIN_ADJUST = 0.001
_MIN_LENGTH = 0.001
_MAX_COS = 0.999

_RECTANGLE_COS = 0.1


class Polyline:
    """Ordered sequence of points with cached shape properties."""

    def __init__(self, points: Optional[Iterable] = None, tol: float = epsilon):
        self.tol = tol
        self._points: List[Point] = []
        self._invalidate()
        if points is not None:
            self.extend(points)

    @classmethod
    def rectangle(cls, dx: float, dy: float) -> "Polyline":
        """Axis-aligned rectangle with one corner at the origin.

        Degenerates to a line when one of ``dx``, ``dy`` is zero and to
        the origin point when both are.
        """
        result = cls([(0.0, 0.0)])
        if dx != 0.0:
            result.append(dx, 0.0)
            if dy != 0.0:
                result.append(dx, dy)
                result.append(0.0, dy)
                result.close()
        elif dy != 0.0:
            result.append(0.0, dy)
        return result

    def _invalidate(self):
        self._type: Optional[ShapeType] = None
        self._bounds: Optional[AABB] = None
        self._enclosed: Optional[AABB] = None

    ## point list management
    ## ---------------------

    def append(self, x, y=None):
        """Add a point, given as a pair or as two scalars"""
        self._points.append(point(x, y))
        self._invalidate()

    def extend(self, points: Iterable):
        added = [point(p) for p in points]
        if added:
            self._points.extend(added)
            self._invalidate()

    def close(self):
        """Close the polyline by repeating its first point.

        Nothing happens for two points or fewer or when the polyline is
        already closed.
        """
        if len(self._points) > 2 and not self.is_closed():
            self._points.append(self._points[0])
            self._invalidate()

    def clear(self):
        self._points = []
        self._invalidate()

    def copy(self) -> "Polyline":
        result = Polyline(tol=self.tol)
        result.copy_from(self)
        return result

    def copy_from(self, other: "Polyline"):
        """Replace the contents of this polyline with those of
        ``other``, cached properties included."""
        self._points = list(other._points)
        self.tol = other.tol
        self._type = other._type
        self._bounds = other._bounds
        self._enclosed = other._enclosed

    def get_point(self, i: int) -> Point:
        return self._points[i]

    def set_point(self, i: int, p):
        self._points[i] = point(p)
        self._invalidate()

    @property
    def point_count(self) -> int:
        return len(self._points)

    @property
    def points(self) -> tuple:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __getitem__(self, i):
        return self._points[i]

    def __eq__(self, other):
        if not isinstance(other, Polyline):
            return NotImplemented
        return self._points == other._points

    __hash__ = None

    def __str__(self) -> str:
        return '|'.join(str(p) for p in self._points)

    def __repr__(self) -> str:
        return 'Polyline({})'.format([tuple(p) for p in self._points])

    @classmethod
    def from_string(cls, text: str) -> "Polyline":
        """Parse a polyline previously written by ``str()``"""
        text = text.strip()
        if not text:
            return cls()
        return cls(Point.from_string(part) for part in text.split('|'))

    ## derived properties
    ## ------------------

    def is_closed(self) -> bool:
        pts = self._points
        return len(pts) > 2 and pts[0].almost_equals(pts[-1], self.tol)

    def get_type(self) -> ShapeType:
        if self._type is None:
            self._type = classify(self._points, self.tol)
        return self._type

    def get_bounds(self) -> Optional[AABB]:
        """Bounding box, or ``None`` for an empty polyline"""
        if self._bounds is None:
            self._bounds = AABB.from_points(self._points)
        return self._bounds

    def get_width(self) -> float:
        bounds = self.get_bounds()
        return 0.0 if bounds is None else bounds.width

    def get_height(self) -> float:
        bounds = self.get_bounds()
        return 0.0 if bounds is None else bounds.height

    ## length of the segment starting at point ``i``, or -1.0 when
    ## there is no such segment
    def get_length(self, i: int) -> float:
        if i < 0 or i >= len(self._points) - 1:
            return -1.0
        return dist(self._points[i], self._points[i + 1])

    def is_rectangle(self) -> bool:
        """Is this a closed four-sided figure with right-angled corners?"""
        if len(self._points) != 5 or not self.is_closed():
            return False
        ring = self._points[:4]
        for i in range(4):
            a = sub(ring[i - 1], ring[i])
            b = sub(ring[(i + 1) % 4], ring[i])
            la = mag(a)
            lb = mag(b)
            if la < self.tol or lb < self.tol:
                return False
            if abs(dot(a, b) / (la * lb)) > _RECTANGLE_COS:
                return False
        return True

    ## shape queries
    ## -------------

    def contains(self, x, y=None) -> bool:
        """Does the shape contain the point, on its outline or, for a
        convex polygon, inside it?"""
        return intersect.contains_point(self, point(x, y), self.tol)

    def is_intersecting(self, other: "Polyline") -> bool:
        return intersect.is_intersecting(self, other, self.tol)

    def get_intersection(self, other: "Polyline") -> Optional[intersect.Intersection]:
        return intersect.get_intersection(self, other, self.tol)

    ## geometry edits
    ## --------------

    def adjust_segment(self, index: int, offset: float) -> bool:
        """
        Move the segment starting at point ``index`` perpendicular to
        itself by ``offset`` (positive is to the left of the segment
        direction).  The segment's end points slide along the adjacent
        segments so the polyline keeps its shape; at an open end they
        move straight out.

        Returns ``False`` and leaves the polyline untouched when the
        index is bad, a segment involved has no length, a neighbour is
        (nearly) parallel to the segment, or the shift would run past
        the end of a neighbouring segment.
        """
        if -_MIN_ADJUST < offset < _MIN_ADJUST:
            return True

        pts = self._points
        closed = self.is_closed()
        last = len(pts) - 1
        if index < 0 or index >= last:
            return False

        end_index = index + 1
        start = pts[index]
        end = pts[end_index]

        if index > 0:
            prev = pts[index - 1]
        elif closed:
            prev = pts[last - 1]
        else:
            prev = None

        if end_index < last:
            nxt = pts[end_index + 1]
        elif closed:
            nxt = pts[1]
        else:
            nxt = None

        seg = sub(end, start)
        length = mag(seg)
        if length < _MIN_LENGTH:
            return False
        base = Point(seg.x / length, seg.y / length)

        new_start = self._slide(start, prev, base, offset)
        if new_start is None:
            return False
        new_end = self._slide(end, nxt, base, offset)
        if new_end is None:
            return False

        pts[index] = new_start
        pts[end_index] = new_end
        if closed:
            if index == 0:
                pts[last] = new_start
            if end_index == last:
                pts[0] = new_end
        self._invalidate()
        return True

    @staticmethod
    def _slide(vertex: Point, neighbour: Optional[Point], base: Point,
               offset: float) -> Optional[Point]:
        """New position of ``vertex`` for a segment with unit direction
        ``base`` moved by ``offset``, or ``None`` if it cannot move."""
        if neighbour is None:
            return Point(vertex.x - offset * base.y, vertex.y + offset * base.x)

        v = sub(neighbour, vertex)
        length = mag(v)
        if length < _MIN_LENGTH:
            return None
        d = Point(v.x / length, v.y / length)

        cos = dot(d, base)
        if cos < -_MAX_COS or cos > _MAX_COS:
            return None

        hyp = sqrt(offset * offset / (1.0 - cos * cos))
        if hyp > length:
            return None

        f = d.x * (base.y + d.y) - d.y * (base.x + d.x)
        if (f < -0.001) != (offset > 0):
            hyp = -hyp
        return Point(vertex.x + hyp * d.x, vertex.y + hyp * d.y)

    def get_enclosed_rectangle(self) -> AABB:
        """
        Find an axis-aligned rectangle that lies inside this convex
        polygon.  The search starts from the bounding box and moves
        each side inward by 1/30 of the box size for as long as one of
        its corners is outside the polygon.  The result is a usable
        rectangle, not the largest one.
        """
        if self.get_type() is not ShapeType.CONVEX:
            raise PreconditionError(
                'enclosed rectangle requires a convex polygon, not {}'.format(self.get_type().name))

        if self._enclosed is not None:
            return self._enclosed

        bounds = self.get_bounds()
        min_x, min_y, max_x, max_y = bounds
        step_x = bounds.width / _ENCLOSE_STEPS
        step_y = bounds.height / _ENCLOSE_STEPS
        polygon = self._points

        def inside(x, y):
            return point_in_convex(Point(x, y), polygon, self.tol)

        steps = 0
        while True:
            if (min_x > bounds.max_x or max_x < bounds.min_x or
                    min_y > bounds.max_y or max_y < bounds.min_y or
                    min_x > max_x or min_y > max_y):
                raise GeometryError('no enclosed rectangle found')

            lower_left = inside(min_x, min_y)
            upper_left = inside(min_x, max_y)
            lower_right = inside(max_x, min_y)
            upper_right = inside(max_x, max_y)
            if lower_left and upper_left and lower_right and upper_right:
                break

            if not (lower_left and upper_left):
                min_x += step_x
            if not (lower_left and lower_right):
                min_y += step_y
            if not (lower_right and upper_right):
                max_x -= step_x
            if not (upper_left and upper_right):
                max_y -= step_y
            steps += 1

        logger.debug('enclosed rectangle found after %d steps', steps)
        self._enclosed = AABB(min_x, min_y, max_x, max_y)
        return self._enclosed

    ## conversion
    ## ----------

    def transform(self, matrix, reverse_points: bool = False) -> "Polyline":
        """
        Apply the affine ``matrix`` (2x3, or 3x3 with a ``[0, 0, 1]``
        bottom row) to every point, optionally reversing the point
        order.  A new polyline is returned, except that ``self`` comes
        back unchanged when the matrix is the identity and no reversal
        is asked for.
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape not in ((2, 3), (3, 3)):
            raise ValueError('expected a 2x3 or 3x3 matrix, got shape {}'.format(m.shape))
        m = m[:2]

        if not reverse_points and np.array_equal(m, np.eye(2, 3)):
            return self

        pts = self.to_array()
        if reverse_points:
            pts = pts[::-1]
        if len(pts) == 0:
            return Polyline(tol=self.tol)
        out = pts @ m[:, :2].T + m[:, 2]
        return Polyline.from_array(out, tol=self.tol)

    def to_array(self) -> np.ndarray:
        """Points as an ``(n, 2)`` float array"""
        return np.array(self._points, dtype=float).reshape(-1, 2)

    @classmethod
    def from_array(cls, a: Sequence, tol: float = epsilon) -> "Polyline":
        arr = np.asarray(a, dtype=float)
        if arr.size == 0:
            return cls(tol=tol)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError('expected an (n, 2) array, got shape {}'.format(arr.shape))
        return cls(((float(x), float(y)) for x, y in arr), tol=tol)


__all__ = ['Polyline']
