"""Ear clipping triangulation for simple rings in lon/lat space."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

Point2 = Tuple[float, float]
Triangle = Tuple[int, int, int]

EPSILON = 1e-12


class TriangulationError(ValueError):
    """Raised for degenerate or self-intersecting rings."""


def _cross(a: Point2, b: Point2, c: Point2) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def signed_area(points: Sequence[Point2]) -> float:
    """Shoelace area; positive for counter-clockwise rings."""

    total = 0.0
    count = len(points)
    for index in range(count):
        x1, y1 = points[index]
        x2, y2 = points[(index + 1) % count]
        total += x1 * y2 - x2 * y1
    return total * 0.5


def _blocks(a: Point2, b: Point2, c: Point2, p: Point2, strict: bool) -> bool:
    d1 = _cross(a, b, p)
    d2 = _cross(b, c, p)
    d3 = _cross(c, a, p)
    if strict:
        # Points touching the diagonal also block, so collinear runs survive.
        return d1 >= -EPSILON and d2 >= -EPSILON and d3 >= -EPSILON
    return d1 > EPSILON and d2 > EPSILON and d3 > EPSILON


def _find_ear(coords: Sequence[Point2], ring: List[int], start: int, strict: bool) -> Optional[int]:
    count = len(ring)
    concave = [
        ring[i]
        for i in range(count)
        if _cross(coords[ring[i - 1]], coords[ring[i]], coords[ring[(i + 1) % count]]) <= EPSILON
    ]
    for offset in range(count):
        i = (start + offset) % count
        prev_idx, cur_idx, next_idx = ring[i - 1], ring[i], ring[(i + 1) % count]
        a, b, c = coords[prev_idx], coords[cur_idx], coords[next_idx]
        if _cross(a, b, c) <= EPSILON:
            continue
        if any(
            _blocks(a, b, c, coords[other], strict)
            for other in concave
            if other not in (prev_idx, cur_idx, next_idx)
        ):
            continue
        return i
    return None


def triangulate(points: Sequence[Sequence[float]]) -> List[Triangle]:
    """Return index triples covering the ring ``points``.

    A closing duplicate point is ignored. Triangles are counter-clockwise in
    lon/lat space and index into ``points``.
    """

    coords = [(float(p[0]), float(p[1])) for p in points]
    count = len(coords)
    if count > 1 and coords[0] == coords[-1]:
        count -= 1
        coords = coords[:count]
    if count < 3:
        raise TriangulationError(f"ring needs at least 3 points, got {count}")
    if len(set(coords)) != count:
        raise TriangulationError("ring contains duplicate points")
    area = signed_area(coords)
    if abs(area) <= EPSILON:
        raise TriangulationError("ring has zero area")

    ring = list(range(count))
    if area < 0.0:
        ring.reverse()

    triangles: List[Triangle] = []
    start = 0
    while len(ring) > 3:
        ear = _find_ear(coords, ring, start, strict=True)
        if ear is None:
            ear = _find_ear(coords, ring, start, strict=False)
        if ear is None:
            raise TriangulationError(
                f"no ear found with {len(ring)} vertices left; ring is not simple"
            )
        triangles.append((ring[ear - 1], ring[ear], ring[(ear + 1) % len(ring)]))
        del ring[ear]
        start = ear % len(ring)
    a, b, c = ring
    if _cross(coords[a], coords[b], coords[c]) > EPSILON:
        triangles.append((a, b, c))
    return triangles


__all__ = ["TriangulationError", "signed_area", "triangulate"]
