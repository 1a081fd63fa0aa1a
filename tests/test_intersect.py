import itertools

import pytest

import polyline2d.intersect as intersect_module
from polyline2d.classify import ShapeType
from polyline2d.errors import MultiComponentError, UnsupportedShapeError
from polyline2d.geom2d import Point
from polyline2d.intersect import (
    Intersection,
    IntersectionKind,
    contains_point,
    get_intersection,
    is_intersecting,
)
from polyline2d.polyline import Polyline


def _shape(*coords):
    return Polyline(coords)


def _square(x0, y0, x1, y1):
    return _shape((x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0))


def _same_points(actual, expected):
    actual = list(actual)
    assert len(actual) == len(expected)
    for p, q in zip(actual, expected):
        assert p.almost_equals(q), '{} != {}'.format(p, q)


def _distinct(points):
    distinct = []
    for p in points:
        if not any(p.almost_equals(q) for q in distinct):
            distinct.append(p)
    return distinct


def _same_point_set(actual, expected):
    distinct = _distinct(actual)
    expected = _distinct(expected)
    assert len(distinct) == len(expected)
    for q in expected:
        assert any(p.almost_equals(q) for p in distinct), '{} missing'.format(q)


class TestIntersectionValue:
    def test_kinds(self):
        assert Intersection.of([]) is None
        assert Intersection.of([Point(0, 0)]).kind is IntersectionKind.POINT
        assert Intersection.of([Point(0, 0), Point(1, 0)]).kind is IntersectionKind.SEGMENT
        three = Intersection.of([Point(0, 0), Point(1, 0), Point(1, 1)])
        assert three.kind is IntersectionKind.POLYLINE
        assert len(three) == 3

    def test_to_polyline(self):
        result = Intersection.of([Point(0, 0), Point(1, 0)])
        line = result.to_polyline()
        assert isinstance(line, Polyline)
        assert line.get_type() is ShapeType.LINE
        assert line.points == result.points


class TestPoints:
    def test_equal_points(self):
        result = get_intersection(_shape((1, 1)), _shape((1.00001, 1)))
        assert result.kind is IntersectionKind.POINT
        assert result.point.almost_equals(Point(1, 1))

    def test_distinct_points(self):
        assert get_intersection(_shape((1, 1)), _shape((1.001, 1))) is None

    def test_point_on_path(self):
        path = _shape((0, 0), (2, 0), (2, 2))
        pnt = _shape((2, 1))
        assert is_intersecting(path, pnt)
        assert get_intersection(pnt, path).point == Point(2, 1)

    def test_point_off_path(self):
        path = _shape((0, 0), (2, 0), (2, 2))
        assert not is_intersecting(path, _shape((1, 1)))
        assert get_intersection(path, _shape((1, 1))) is None

    def test_point_in_square(self):
        square = _square(-1, -1, 1, 1)
        assert is_intersecting(square, _shape((0, 0)))
        assert get_intersection(_shape((0, 0)), square).point == Point(0, 0)

    def test_point_outside_square(self):
        square = _square(-1, -1, 1, 1)
        assert not is_intersecting(square, _shape((2, 2)))
        assert not is_intersecting(square, _shape((0.5, 1.2)))


class TestLines:
    def test_crossing(self):
        result = get_intersection(_shape((-1, -1), (1, 1)), _shape((-1, 1), (1, -1)))
        assert result.kind is IntersectionKind.POINT
        assert result.point.almost_equals(Point(0, 0))

    def test_overlap(self):
        result = get_intersection(_shape((0, 0), (4, 0)), _shape((2, 0), (6, 0)))
        assert result.kind is IntersectionKind.SEGMENT
        assert result.points == (Point(2, 0), Point(4, 0))

    def test_miss(self):
        assert get_intersection(_shape((0, 0), (4, 0)), _shape((0, 1), (4, 1))) is None

    def test_line_on_path(self):
        path = _shape((0, 2), (1, 1), (2, 2))
        line = _shape((0, 0), (2, 2))
        result = get_intersection(line, path)
        assert result.kind is IntersectionKind.SEGMENT
        _same_points(result.points, [Point(1, 1), Point(2, 2)])

    def test_paths_sharing_a_run(self):
        a = _shape((0, 0), (2, 0), (2, 2), (4, 2))
        b = _shape((1, -1), (1, 0), (2, 0), (2, 2), (3, 3))
        result = get_intersection(a, b)
        assert result.kind is IntersectionKind.POLYLINE
        _same_points(result.points, [Point(1, 0), Point(2, 0), Point(2, 2)])

    def test_overlap_found_out_of_order(self):
        # one connected overlap, covered by two colinear runs of the path
        path = _shape((2, 0), (4, 0), (4, 1), (-1, 1), (-1, 0), (2.5, 0))
        line = _shape((0, 0), (4, 0))
        assert path.get_type() is ShapeType.PATH
        result = get_intersection(path, line)
        assert result.kind is IntersectionKind.SEGMENT
        assert result.complete
        _same_points(result.points, [Point(0, 0), Point(4, 0)])
        _same_point_set(get_intersection(line, path).points, [Point(0, 0), Point(4, 0)])

    def test_bent_overlap_found_out_of_order(self):
        a = _shape((2, -1), (2, 2), (4, 4), (-1, 4), (-1, 0), (2, 0))
        b = _shape((0, 0), (2, 0), (2, 2))
        result = get_intersection(a, b)
        assert result.kind is IntersectionKind.POLYLINE
        _same_points(result.points, [Point(0, 0), Point(2, 0), Point(2, 2)])

    def test_paths_crossing_twice(self):
        a = _shape((0, 0), (4, 0), (4, 4))
        b = _shape((1, -1), (1, 1), (5, 1))
        assert is_intersecting(a, b)
        with pytest.raises(MultiComponentError):
            get_intersection(a, b)


class TestConvexLine:
    square = Polyline.rectangle(4, 4)

    def test_through(self):
        result = get_intersection(self.square, _shape((-1, 2), (5, 2)))
        assert result.kind is IntersectionKind.SEGMENT
        _same_points(result.points, [Point(0, 2), Point(4, 2)])

    def test_ordered_along_line(self):
        result = get_intersection(_shape((5, 2), (-1, 2)), self.square)
        _same_points(result.points, [Point(4, 2), Point(0, 2)])

    def test_half_inside(self):
        result = get_intersection(self.square, _shape((2, 2), (6, 2)))
        _same_points(result.points, [Point(2, 2), Point(4, 2)])

    def test_inside(self):
        result = get_intersection(self.square, _shape((1, 1), (3, 3)))
        _same_points(result.points, [Point(1, 1), Point(3, 3)])

    def test_along_edge(self):
        result = get_intersection(self.square, _shape((-1, 0), (5, 0)))
        _same_points(result.points, [Point(0, 0), Point(4, 0)])

    def test_touching_corner(self):
        result = get_intersection(self.square, _shape((4, 4), (5, 5)))
        assert result.kind is IntersectionKind.POINT
        assert result.point.almost_equals(Point(4, 4))

    def test_bounds_overlap_without_contact(self):
        line = _shape((4, 6), (6, 4))
        assert not is_intersecting(self.square, line)
        assert get_intersection(self.square, line) is None


class TestConvexPath:
    square = Polyline.rectangle(4, 4)

    def test_single_run(self):
        path = _shape((-1, 1), (2, 1), (2, 5))
        result = get_intersection(self.square, path)
        assert result.kind is IntersectionKind.POLYLINE
        assert not result.closed
        _same_points(result.points, [Point(0, 1), Point(2, 1), Point(2, 4)])

    def test_path_inside(self):
        path = _shape((1, 1), (3, 1), (3, 3))
        result = get_intersection(path, self.square)
        _same_points(result.points, list(path.points))

    def test_two_runs(self):
        path = _shape((-1, 1), (5, 1), (5, 3), (-1, 3))
        assert is_intersecting(self.square, path)
        with pytest.raises(MultiComponentError):
            get_intersection(self.square, path)

    def test_path_around_square(self):
        path = _shape((-1, -1), (5, -1), (5, 5))
        assert not is_intersecting(self.square, path)
        assert get_intersection(self.square, path) is None


class TestConvexConvex:
    def test_overlap(self):
        a = _square(0, 0, 2, 2)
        b = _square(1, 1, 3, 3)
        result = get_intersection(a, b)
        assert result.kind is IntersectionKind.POLYLINE
        assert result.closed
        assert result.complete
        assert result.points[0] == result.points[-1]
        _same_point_set(result.points,
                        [Point(1, 1), Point(2, 1), Point(2, 2), Point(1, 2)])

    def test_enclosed(self):
        outer = Polyline.rectangle(4, 4)
        inner = _square(1, 1, 2, 2)
        for result in (get_intersection(outer, inner), get_intersection(inner, outer)):
            assert result.closed
            assert result.points == inner.points

    def test_self(self):
        square = Polyline.rectangle(4, 4)
        result = get_intersection(square, square)
        assert result.points == square.points
        assert result.closed
        assert is_intersecting(square, square)

    def test_equal_copies(self):
        square = Polyline.rectangle(4, 4)
        flipped = Polyline(reversed(square.points))
        for other in (square.copy(), flipped):
            for result in (get_intersection(square, other), get_intersection(other, square)):
                assert result.closed
                _same_point_set(result.points, list(square.points))

    def test_shared_edge(self):
        a = _square(0, 0, 1, 1)
        b = _square(1, 0, 2, 1)
        result = get_intersection(a, b)
        assert result.kind is IntersectionKind.SEGMENT
        _same_point_set(result.points, [Point(1, 0), Point(1, 1)])

    def test_shared_corner(self):
        a = _square(0, 0, 1, 1)
        b = _square(1, 1, 2, 2)
        result = get_intersection(a, b)
        assert result.kind is IntersectionKind.POINT
        assert result.point.almost_equals(Point(1, 1))

    def test_triangles(self):
        a = _shape((0, 0), (4, 0), (0, 4), (0, 0))
        b = _shape((1, 1), (5, 1), (1, 5), (1, 1))
        result = get_intersection(a, b)
        assert result.closed
        _same_point_set(result.points, [Point(1, 1), Point(3, 1), Point(1, 3)])

    def test_rectangles_one_unit_apart(self):
        a = _square(0, 0, 100, 50)
        b = _square(101, 0, 200, 50)
        assert not is_intersecting(a, b)
        assert get_intersection(a, b) is None

    def test_long_rectangles(self):
        a = _square(0, 0, 4000, 10)
        b = _square(1000, -5, 2047, 5)
        assert is_intersecting(a, b)
        assert is_intersecting(b, a)
        result = get_intersection(a, b)
        assert result.closed
        _same_point_set(result.points,
                        [Point(1000, 0), Point(2047, 0), Point(2047, 5), Point(1000, 5)])


class TestGuards:
    def test_void(self):
        empty = Polyline()
        square = Polyline.rectangle(1, 1)
        assert not is_intersecting(empty, square)
        assert not is_intersecting(empty, empty)
        assert get_intersection(square, empty) is None

    def test_concave(self):
        dart = _shape((0, 0), (2, 2), (4, 0), (2, 4), (0, 0))
        square = Polyline.rectangle(3, 3)
        with pytest.raises(UnsupportedShapeError):
            is_intersecting(dart, square)
        with pytest.raises(UnsupportedShapeError):
            get_intersection(square, dart)

    def test_concave_outside_bounds(self):
        dart = _shape((0, 0), (2, 2), (4, 0), (2, 4), (0, 0))
        far = _square(10, 10, 11, 11)
        assert not is_intersecting(dart, far)
        assert get_intersection(dart, far) is None

    def test_disjoint_bounds_skip_segment_tests(self, monkeypatch):
        calls = []

        def counting_hit(*args, **kwargs):
            calls.append(args)
            return (None, None)

        def counting_test(*args, **kwargs):
            calls.append(args)
            return False

        monkeypatch.setattr(intersect_module, 'intersect_segments', counting_hit)
        monkeypatch.setattr(intersect_module, 'segments_intersect', counting_test)

        a = _shape((0, 0), (1, 1), (2, 0))
        b = _shape((5, 5), (6, 6), (7, 5))
        assert not is_intersecting(a, b)
        assert get_intersection(a, b) is None
        assert calls == []

        # the same shapes with overlapping bounds do reach the segment tests
        c = _shape((0, 1), (1, 0), (2, 1))
        is_intersecting(a, c)
        get_intersection(a, c)
        assert calls


def _samples():
    return [
        _shape((1, 1)),
        _shape((0, 0), (2, 2)),
        _shape((0, 2), (1, 1), (2, 2)),
        Polyline.rectangle(2, 2),
        _square(1, 1, 3, 3),
    ]


def test_dispatch_tables_cover_every_pair():
    ranked = [ShapeType.CONVEX, ShapeType.PATH, ShapeType.LINE, ShapeType.POINT]
    expected = {(a, b) for i, a in enumerate(ranked) for b in ranked[i:]}
    assert set(intersect_module._TEST) == expected
    assert set(intersect_module._INTERSECTION) == expected


def test_is_intersecting_is_symmetric():
    shapes = _samples() + [_shape((5, 5)), _shape((3, 0), (4, 1)), _square(2.5, -1, 4, 0.5)]
    for a, b in itertools.product(shapes, repeat=2):
        assert is_intersecting(a, b) == is_intersecting(b, a), (a, b)


def test_get_intersection_is_symmetric():
    for a, b in itertools.combinations(_samples(), 2):
        ab = get_intersection(a, b)
        ba = get_intersection(b, a)
        assert (ab is None) == (ba is None), (a, b)
        if ab is not None:
            assert ab.kind is ba.kind
            _same_point_set(ab.points, ba.points)


def test_contains_point():
    square = _square(-1, -1, 1, 1)
    assert contains_point(square, Point(0, 0))
    assert not contains_point(square, Point(2, 2))
    assert contains_point(_shape((0, 0), (2, 0)), Point(1, 0))
    assert contains_point(_shape((3, 3)), Point(3, 3))
    assert not contains_point(Polyline(), Point(0, 0))
    with pytest.raises(UnsupportedShapeError):
        contains_point(_shape((0, 0), (2, 2), (4, 0), (2, 4), (0, 0)), Point(2, 3))
