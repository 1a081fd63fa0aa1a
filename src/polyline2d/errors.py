"""Exceptions raised by polyline2d."""


class GeometryError(Exception):
    """Base class for polyline2d errors."""


class PreconditionError(GeometryError, ValueError):
    """An operation was called on a shape it is not defined for."""


class UnsupportedShapeError(GeometryError):
    """The intersection engine does not handle this shape type.

    Concave polygons must be decomposed into convex pieces by the
    caller before they are intersected.
    """


class MultiComponentError(GeometryError):
    """An intersection would consist of more than one disjoint piece.

    Results are always a single connected point, segment or polyline;
    inputs whose intersection falls apart into several pieces are not
    supported.
    """


__all__ = [
    'GeometryError',
    'PreconditionError',
    'UnsupportedShapeError',
    'MultiComponentError',
]
