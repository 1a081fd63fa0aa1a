"""Head-to-tail reassembly of intersection fragments.

Intersection tests produce their result as a bag of fragments: single
points where shapes touch and two-point pieces where they overlap or
where one shape runs inside the other.  ``stitch()`` lays those
fragments end to end into one ordered chain.

The chain is seeded with the first fragment and grows at its tail.  A
fragment joins when its head (or, reversed, its tail) matches the
current tail within the stitching tolerance and its far end does not
simply walk back along the edge that was just added.  When nothing fits
the tail any more the chain is turned around once and grows on from
the seed head; the final chain keeps the direction of the seed.  Stitching
stops in one of three ways, reported as ``StitchStatus``:

* ``CLOSED``: the tail came back to the seed head; the chain is closed
  by repeating its first point.
* ``OPEN``: every fragment was used without closing.
* ``PARTIAL``: fragments remain but none of them connects to the tail.
  The chain built so far is still returned together with the leftover
  fragments, and the event is logged, so callers can decide whether the
  leftovers matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from polyline2d.geom2d import Point, stitch_epsilon

logger = logging.getLogger(__name__)

Fragment = Tuple[Point, ...]


class StitchStatus(Enum):
    CLOSED = 'closed'
    OPEN = 'open'
    PARTIAL = 'partial'


@dataclass
class Stitched:
    """Outcome of ``stitch()``."""

    points: List[Point]
    status: StitchStatus
    leftover: List[Fragment] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return self.status is StitchStatus.CLOSED

    def __bool__(self) -> bool:
        return len(self.points) > 0


def _normalize(fragments: Iterable[Sequence[Point]], tol: float) -> List[Fragment]:
    pool: List[Fragment] = []
    for frag in fragments:
        if len(frag) == 0:
            continue
        if len(frag) > 2:
            raise ValueError('fragments have one or two points, got {}'.format(len(frag)))
        if len(frag) == 2 and frag[0].almost_equals(frag[1], tol):
            pool.append((frag[0],))
        else:
            pool.append(tuple(frag))
    return pool


def stitch(fragments: Iterable[Sequence[Point]], tol: float = stitch_epsilon) -> Stitched:
    """Lay ``fragments`` head to tail.  See the module docstring."""

    pool = _normalize(fragments, tol)
    if not pool:
        return Stitched([], StitchStatus.OPEN)

    seed = pool.pop(0)
    chain: List[Point] = list(seed)
    first_head = seed[0]
    last_head = seed[0]
    last_tail = seed[-1]
    flipped = False

    while pool:
        found = -1
        head = tail = None
        for i, frag in enumerate(pool):
            head = frag[0]
            tail = frag[-1]
            if last_tail.almost_equals(head, tol):
                if len(frag) == 1:
                    tail = None
                elif last_head.almost_equals(tail, tol):
                    continue  # would walk back along the last edge
            elif len(frag) > 1 and last_tail.almost_equals(tail, tol):
                head, tail = tail, head
                if last_head.almost_equals(tail, tol):
                    continue
            else:
                continue
            found = i
            break

        if found < 0:
            if not flipped:
                ## continue from the other end of the chain
                flipped = True
                chain.reverse()
                first_head = chain[0]
                last_head = chain[-2] if len(chain) > 1 else chain[-1]
                last_tail = chain[-1]
                continue
            chain.reverse()
            logger.warning('stitching stopped after %d points with %d fragment(s) left over',
                           len(chain), len(pool))
            return Stitched(chain, StitchStatus.PARTIAL, pool)

        del pool[found]

        if tail is not None:
            if len(chain) > 1 and tail.almost_equals(first_head, tol):
                chain.append(chain[0])
                if flipped:
                    chain.reverse()
                return Stitched(chain, StitchStatus.CLOSED, pool)
            chain.append(tail)
            last_head = head
            last_tail = tail

    if flipped:
        chain.reverse()
    return Stitched(chain, StitchStatus.OPEN)


__all__ = ['Fragment', 'StitchStatus', 'Stitched', 'stitch']
