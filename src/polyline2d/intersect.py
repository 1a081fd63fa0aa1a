## shape-pair intersection engine for polyline2d

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

"""intersection testing and computation for classified shapes

===============
Overview
===============

``is_intersecting()`` and ``get_intersection()`` take two shapes (any
object with ``get_type()``, ``get_bounds()``, ``get_point()`` and a
``points`` sequence, in practice ``polyline2d.polyline.Polyline``) and
answer whether they meet and where.

Both functions first reject void shapes and shapes whose bounding
boxes are disjoint; that test is the only shortcut, everything after
it is exact to within the tolerance.  The pair of shape types is then
put in a canonical order (convex before path before line before
point) and looked up in a dispatch table, so ``f(a, b)`` and
``f(b, a)`` run the same code.

Concave polygons are not handled and raise ``UnsupportedShapeError``;
decompose them into convex pieces first.

intersection results
====================

``get_intersection()`` returns ``None`` or an ``Intersection``: a
single point, a segment, or a polyline (closed for the overlap of two
convex polygons).  Results are always one connected piece; when the
shapes meet in several disjoint places ``MultiComponentError`` is
raised.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from polyline2d.classify import ShapeType
from polyline2d.errors import MultiComponentError, UnsupportedShapeError
from polyline2d.geom2d import (
    Point,
    cross,
    dist,
    dot,
    epsilon,
    mag,
    point_in_convex,
    point_on_segment,
    ring_edges,
    segments,
    stitch_epsilon,
    sub,
)
from polyline2d.segment import intersect_segments, segments_intersect
from polyline2d.stitch import Fragment, StitchStatus, stitch

if TYPE_CHECKING:  # pragma: no cover
    from polyline2d.polyline import Polyline

logger = logging.getLogger(__name__)

_STITCH_FACTOR = stitch_epsilon / epsilon


class IntersectionKind(Enum):
    POINT = 'point'
    SEGMENT = 'segment'
    POLYLINE = 'polyline'


@dataclass(frozen=True)
class Intersection:
    """Connected intersection of two shapes."""

    kind: IntersectionKind
    points: Tuple[Point, ...]
    closed: bool = False
    complete: bool = True  # False when stitching left fragments over

    @classmethod
    def of(cls, points: Iterable[Point], closed: bool = False,
           complete: bool = True) -> Optional["Intersection"]:
        """Wrap ``points`` by count, or return ``None`` when empty."""
        pts = tuple(points)
        if not pts:
            return None
        if len(pts) == 1:
            kind = IntersectionKind.POINT
        elif len(pts) == 2:
            kind = IntersectionKind.SEGMENT
        else:
            kind = IntersectionKind.POLYLINE
        return cls(kind, pts, closed, complete)

    @property
    def point(self) -> Point:
        return self.points[0]

    def __len__(self) -> int:
        return len(self.points)

    def to_polyline(self) -> "Polyline":
        from polyline2d.polyline import Polyline
        return Polyline(self.points)


## helpers
## -------

def _dedupe(points: Iterable[Point], tol: float) -> List[Point]:
    unique: List[Point] = []
    for p in points:
        if not any(p.almost_equals(q, tol) for q in unique):
            unique.append(p)
    return unique


def _on_chain(p: Point, chain: Sequence[Point], tol: float) -> bool:
    if len(chain) == 1:
        return p.almost_equals(chain[0], tol)
    return any(point_on_segment(p, a, b, tol) for a, b in segments(chain))


def _whole(shape) -> Optional[Intersection]:
    pts = shape.points
    kind = shape.get_type()
    if kind is ShapeType.POINT:
        return Intersection.of(pts[:1])
    if kind is ShapeType.LINE:
        return Intersection.of(pts)
    return Intersection.of(pts, closed=kind in (ShapeType.CONVEX, ShapeType.CONCAVE))


def _same_piece(f: Fragment, g: Fragment, tol: float) -> bool:
    return ((f[0].almost_equals(g[0], tol) and f[1].almost_equals(g[1], tol)) or
            (f[0].almost_equals(g[1], tol) and f[1].almost_equals(g[0], tol)))


## union of two colinear pieces whose extents overlap or touch, ordered
## like ``f``, or None when they do not form one straight piece
def _union(f: Fragment, g: Fragment, tol: float) -> Optional[Fragment]:
    a, b = f
    d = sub(b, a)
    length = mag(d)
    if any(abs(cross(d, sub(p, a))) > tol * length for p in g):
        return None

    def _t(p):
        return dot(sub(p, a), d) / (length * length)

    slack = tol / length
    g_lo = min(_t(g[0]), _t(g[1]))
    g_hi = max(_t(g[0]), _t(g[1]))
    if g_lo > 1.0 + slack or g_hi < -slack:
        return None
    ends = (a, b, g[0], g[1])
    return (min(ends, key=_t), max(ends, key=_t))


def _merge_colinear(pieces: List[Fragment], tol: float) -> List[Fragment]:
    merged = list(pieces)
    i = 0
    while i < len(merged):
        for j in range(i + 1, len(merged)):
            union = _union(merged[i], merged[j], tol)
            if union is not None:
                merged[i] = union
                del merged[j]
                break
        else:
            i += 1
    return merged


## drop repeated pieces, join colinear pieces that overlap and drop
## points that are already covered by a piece, keeping first-seen order
def _unique_fragments(fragments: Sequence[Fragment], tol: float) -> List[Fragment]:
    pieces: List[Fragment] = []
    singles: List[Point] = []
    for frag in fragments:
        if len(frag) == 2 and not frag[0].almost_equals(frag[1], tol):
            if not any(_same_piece(frag, g, tol) for g in pieces):
                pieces.append(frag)
    pieces = _merge_colinear(pieces, tol)
    for frag in fragments:
        if len(frag) == 2 and not frag[0].almost_equals(frag[1], tol):
            continue
        p = frag[0]
        if any(point_on_segment(p, g[0], g[1], tol) for g in pieces):
            continue
        if any(p.almost_equals(q, tol) for q in singles):
            continue
        singles.append(p)
    return pieces + [(p,) for p in singles]


def _assemble(fragments: Sequence[Fragment], tol: float) -> Optional[Intersection]:
    fragments = _unique_fragments(fragments, tol)
    if not fragments:
        return None
    join_tol = tol * _STITCH_FACTOR
    stitched = stitch(fragments, join_tol)
    stray = [frag for frag in stitched.leftover
             if not all(_on_chain(p, stitched.points, join_tol) for p in frag)]
    if stray:
        raise MultiComponentError(
            'intersection falls apart into {} disconnected piece(s)'.format(len(stray) + 1))
    return Intersection.of(stitched.points, closed=stitched.closed,
                           complete=stitched.status is not StitchStatus.PARTIAL)


## clip the segment a-b against a convex polygon.  Candidates are the
## crossings with every polygon edge plus whichever endpoints lie
## inside.  With more than two candidates (polygon vertices colinear
## with the segment) keep the ones closest to a and to b, which are
## the extremes along the segment.  The result is ordered from a to b.

def _clip(polygon: Sequence[Point], a: Point, b: Point, tol: float) -> Tuple[Point, ...]:
    a_in = point_in_convex(a, polygon, tol)
    b_in = point_in_convex(b, polygon, tol)
    if a_in and b_in:
        return (a,) if a.almost_equals(b, tol) else (a, b)

    found: List[Point] = []
    for c, d in ring_edges(polygon, tol):
        first, second = intersect_segments(a, b, c, d, tol)
        if first is not None:
            found.append(first)
            if second is not None:
                found.append(second)
    if a_in:
        found.append(a)
    if b_in:
        found.append(b)

    found = _dedupe(found, tol)
    if not found:
        return ()
    if len(found) == 1:
        return (found[0],)
    near_a = min(found, key=lambda p: dist(p, a))
    near_b = min(found, key=lambda p: dist(p, b))
    if near_a.almost_equals(near_b, tol):
        return (near_a,)
    return (near_a, near_b)


## intersection computation, one function per canonical type pair
## ----------------------------------------------------------------

def _point_point(a, b, tol):
    p = a.get_point(0)
    return Intersection.of([p]) if p.almost_equals(b.get_point(0), tol) else None


def _chain_point(chain, pnt, tol):
    p = pnt.get_point(0)
    return Intersection.of([p]) if _on_chain(p, chain.points, tol) else None


def _convex_point(convex, pnt, tol):
    p = pnt.get_point(0)
    return Intersection.of([p]) if point_in_convex(p, convex.points, tol) else None


def _line_line(a, b, tol):
    first, second = intersect_segments(a.get_point(0), a.get_point(1),
                                       b.get_point(0), b.get_point(1), tol)
    return Intersection.of(p for p in (first, second) if p is not None)


def _chain_chain(a, b, tol):
    """Lines and paths: every segment pair, then stitch the pieces."""
    fragments: List[Fragment] = []
    other = list(segments(b.points))
    for p1, p2 in segments(a.points):
        for p3, p4 in other:
            first, second = intersect_segments(p1, p2, p3, p4, tol)
            if first is None:
                continue
            fragments.append((first,) if second is None else (first, second))
    return _assemble(fragments, tol)


def _convex_line(convex, line, tol):
    return Intersection.of(_clip(convex.points, line.get_point(0), line.get_point(1), tol))


def _convex_path(convex, path, tol):
    """
    Walk the path segment by segment, clipping each against the
    polygon.  ``inside`` tracks whether the walk is currently inside
    the polygon at the start of the next segment; a clipped piece
    either continues the current run from its last point or starts the
    only run there may be.
    """
    polygon = convex.points
    run: List[Point] = []
    inside = False
    for a, b in segments(path.points):
        piece = _clip(polygon, a, b, tol)
        if not piece:
            inside = False
            continue
        if inside and piece[0].almost_equals(run[-1], tol):
            for p in piece[1:]:
                if not p.almost_equals(run[-1], tol):
                    run.append(p)
        elif run:
            raise MultiComponentError('path enters the convex polygon more than once')
        else:
            run = list(piece)
        inside = piece[-1].almost_equals(b, tol)
    return Intersection.of(run)


def _convex_convex(a, b, tol):
    """
    Overlap of two convex polygons.  When one polygon lies entirely
    inside the other it is the answer.  Otherwise every edge of each
    polygon is clipped against the other polygon and the pieces are
    stitched into the boundary of the overlap.
    """
    pa = a.points
    pb = b.points
    if point_in_convex(pa[0], pb, tol) and all(point_in_convex(p, pb, tol) for p in pa):
        return _whole(a)
    if point_in_convex(pb[0], pa, tol) and all(point_in_convex(p, pa, tol) for p in pb):
        return _whole(b)

    fragments: List[Fragment] = []
    for c, d in ring_edges(pa, tol):
        piece = _clip(pb, c, d, tol)
        if piece:
            fragments.append(piece)
    for c, d in ring_edges(pb, tol):
        piece = _clip(pa, c, d, tol)
        if piece:
            fragments.append(piece)
    return _assemble(fragments, tol)


## boolean tests, one function per canonical type pair
## ---------------------------------------------------

def _crosses(a_edges, b_edges, tol) -> bool:
    b_edges = list(b_edges)
    for p1, p2 in a_edges:
        for p3, p4 in b_edges:
            if segments_intersect(p1, p2, p3, p4, tol):
                return True
    return False


def _test_point_point(a, b, tol):
    return a.get_point(0).almost_equals(b.get_point(0), tol)


def _test_chain_point(chain, pnt, tol):
    return _on_chain(pnt.get_point(0), chain.points, tol)


def _test_convex_point(convex, pnt, tol):
    return point_in_convex(pnt.get_point(0), convex.points, tol)


def _test_chain_chain(a, b, tol):
    return _crosses(segments(a.points), segments(b.points), tol)


## a chain that does not cross the polygon boundary is either entirely
## inside or entirely outside, so its first point decides
def _test_convex_chain(convex, chain, tol):
    if point_in_convex(chain.get_point(0), convex.points, tol):
        return True
    return _crosses(ring_edges(convex.points, tol), segments(chain.points), tol)


def _test_convex_convex(a, b, tol):
    if point_in_convex(a.get_point(0), b.points, tol):
        return True
    if point_in_convex(b.get_point(0), a.points, tol):
        return True
    return _crosses(ring_edges(a.points, tol), ring_edges(b.points, tol), tol)


## dispatch
## --------

_RANK = {
    ShapeType.POINT: 1,
    ShapeType.LINE: 2,
    ShapeType.PATH: 3,
    ShapeType.CONVEX: 4,
}

Handler = Callable[..., object]

_INTERSECTION: Dict[Tuple[ShapeType, ShapeType], Handler] = {
    (ShapeType.POINT, ShapeType.POINT): _point_point,
    (ShapeType.LINE, ShapeType.POINT): _chain_point,
    (ShapeType.PATH, ShapeType.POINT): _chain_point,
    (ShapeType.CONVEX, ShapeType.POINT): _convex_point,
    (ShapeType.LINE, ShapeType.LINE): _line_line,
    (ShapeType.PATH, ShapeType.LINE): _chain_chain,
    (ShapeType.PATH, ShapeType.PATH): _chain_chain,
    (ShapeType.CONVEX, ShapeType.LINE): _convex_line,
    (ShapeType.CONVEX, ShapeType.PATH): _convex_path,
    (ShapeType.CONVEX, ShapeType.CONVEX): _convex_convex,
}

_TEST: Dict[Tuple[ShapeType, ShapeType], Handler] = {
    (ShapeType.POINT, ShapeType.POINT): _test_point_point,
    (ShapeType.LINE, ShapeType.POINT): _test_chain_point,
    (ShapeType.PATH, ShapeType.POINT): _test_chain_point,
    (ShapeType.CONVEX, ShapeType.POINT): _test_convex_point,
    (ShapeType.LINE, ShapeType.LINE): _test_chain_chain,
    (ShapeType.PATH, ShapeType.LINE): _test_chain_chain,
    (ShapeType.PATH, ShapeType.PATH): _test_chain_chain,
    (ShapeType.CONVEX, ShapeType.LINE): _test_convex_chain,
    (ShapeType.CONVEX, ShapeType.PATH): _test_convex_chain,
    (ShapeType.CONVEX, ShapeType.CONVEX): _test_convex_convex,
}


def _canonical(a, b, tol):
    """Return ``(a, b, key)`` in dispatch order, or ``None`` when the
    shapes cannot meet."""
    ta = a.get_type()
    tb = b.get_type()
    if ta is ShapeType.VOID or tb is ShapeType.VOID:
        return None
    if not a.get_bounds().intersects(b.get_bounds(), tol):
        logger.debug('bounds of %s and %s are disjoint', ta.name, tb.name)
        return None
    if ta is ShapeType.CONCAVE or tb is ShapeType.CONCAVE:
        raise UnsupportedShapeError(
            'cannot intersect {} with {}; decompose concave shapes first'.format(ta.name, tb.name))
    if _RANK[ta] < _RANK[tb]:
        a, b, ta, tb = b, a, tb, ta
    logger.debug('dispatching %s x %s', ta.name, tb.name)
    return a, b, (ta, tb)


def is_intersecting(a: "Polyline", b: "Polyline", tol: float = epsilon) -> bool:
    """Do shapes ``a`` and ``b`` have any point in common?"""
    if a is b:
        return a.get_type() is not ShapeType.VOID
    canon = _canonical(a, b, tol)
    if canon is None:
        return False
    first, second, key = canon
    return _TEST[key](first, second, tol)


def get_intersection(a: "Polyline", b: "Polyline",
                     tol: float = epsilon) -> Optional[Intersection]:
    """Compute the connected intersection of shapes ``a`` and ``b``.

    Returns ``None`` when they do not meet.  Raises
    ``UnsupportedShapeError`` for concave input and
    ``MultiComponentError`` when the result would have several pieces.
    """
    if a is b:
        return _whole(a)
    canon = _canonical(a, b, tol)
    if canon is None:
        return None
    first, second, key = canon
    return _INTERSECTION[key](first, second, tol)


def contains_point(shape: "Polyline", p: Point, tol: float = epsilon) -> bool:
    """Does ``shape`` contain ``p``, on its outline or, for convex
    polygons, anywhere inside?"""
    kind = shape.get_type()
    if kind is ShapeType.VOID:
        return False
    if kind is ShapeType.POINT:
        return p.almost_equals(shape.get_point(0), tol)
    if kind in (ShapeType.LINE, ShapeType.PATH):
        return _on_chain(p, shape.points, tol)
    if kind is ShapeType.CONVEX:
        return point_in_convex(p, shape.points, tol)
    raise UnsupportedShapeError('containment is not defined for {} shapes'.format(kind.name))


__all__ = [
    'IntersectionKind',
    'Intersection',
    'is_intersecting',
    'get_intersection',
    'contains_point',
]
