"""Reconstruct polygons from the flat, role-tagged ring list of a legacy polygon record.

Shapefile polygon records carry no grouping field: rings are stored in order and
their role comes from winding. An inner ring belongs to the most recent outer
ring before it, so grouping is a single left-to-right fold.

Known limitation: inner rings that precede every outer ring have no owner. They
are dropped with a warning, or rejected with ``strict=True``.

Rings become shapely polygon shells and holes, so each needs at least three
distinct vertices. Shorter rings raise shapely's ``ValueError``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from functools import reduce
from typing import NamedTuple

from shapely.geometry import Polygon

from .convert import coords
from .errors import OrphanRingError
from .models import Role, TaggedRing
from .parallel import ordered_map

logger = logging.getLogger(__name__)

Ring = list[tuple[float, float]]


class RingFold(NamedTuple):
    """Accumulator for :func:`assemble_polygons`."""

    outer: Ring | None = None
    holes: tuple[Ring, ...] = ()
    polygons: tuple[Polygon, ...] = ()
    orphans: tuple[int, ...] = ()
    position: int = 0


def step(state: RingFold, ring: TaggedRing) -> RingFold:
    """Advance the fold by one ring."""
    points = coords(ring.points)
    position = state.position + 1

    if ring.role is Role.OUTER:
        if state.outer is None:
            return state._replace(outer=points, position=position)
        closed = Polygon(state.outer, list(state.holes))
        return state._replace(
            outer=points,
            holes=(),
            polygons=state.polygons + (closed,),
            position=position,
        )

    if state.outer is None:
        return state._replace(orphans=state.orphans + (state.position,), position=position)
    return state._replace(holes=state.holes + (points,), position=position)


def finish(state: RingFold) -> list[Polygon]:
    """Emit the trailing polygon, if any, and return every polygon in order."""
    polygons = list(state.polygons)
    if state.outer is not None:
        polygons.append(Polygon(state.outer, list(state.holes)))
    return polygons


def assemble_polygons(rings: Iterable[TaggedRing], *, strict: bool = False) -> list[Polygon]:
    """Group role-tagged rings into shapely polygons.

    Every outer ring starts a polygon; inner rings become holes of the nearest
    preceding outer ring. Output order follows the outer rings' order.

    Args:
        rings: Rings in file order.
        strict: Raise :class:`OrphanRingError` instead of dropping inner rings
            that appear before any outer ring.
    """
    state = reduce(step, rings, RingFold())
    if state.orphans:
        if strict:
            raise OrphanRingError(state.orphans[0])
        logger.warning("Dropped %d inner ring(s) with no preceding outer ring", len(state.orphans))
    return finish(state)


def polygons_from_ring_lists(
    ring_lists: Sequence[Iterable[TaggedRing]],
    *,
    strict: bool = False,
    max_workers: int | None = None,
) -> list[list[Polygon]]:
    """Assemble many independent ring lists on the worker pool, keeping their order."""
    return ordered_map(lambda rings: assemble_polygons(rings, strict=strict), ring_lists, max_workers)
