"""Curvature-following sphere meshes for lon/lat polygon rings."""
from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from pygame.math import Vector3

from globe.geo.projection import project
from globe.geo.resample import normalize_ring, resample_ring
from globe.geo.triangulate import triangulate

SphereTriangle = Tuple[Vector3, Vector3, Vector3]

# (exclusive chord limit, subdivisions); longer chords fall through to 8.
SUBDIVISION_STEPS: Tuple[Tuple[float, int], ...] = (
    (0.05, 1),
    (0.1, 2),
    (0.2, 3),
    (0.3, 4),
    (0.5, 6),
)
MAX_SUBDIVISIONS = 8


def _vertex_key(vector: Vector3) -> Tuple[float, float, float]:
    return (round(vector.x, 6), round(vector.y, 6), round(vector.z, 6))


@dataclass
class SphereMesh:
    """Flat triangle list whose vertices all sit on a sphere of ``radius``."""

    radius: float
    triangles: List[SphereTriangle] = field(default_factory=list)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def vertices(self) -> List[Vector3]:
        return [vertex for triangle in self.triangles for vertex in triangle]

    def normals(self) -> List[Vector3]:
        # The outward radial direction is the exact normal on a sphere.
        return [vertex.normalize() for vertex in self.vertices()]

    def indexed(self) -> Tuple[List[Vector3], List[Tuple[int, int, int]]]:
        """Deduplicate shared vertices for indexed drawing."""

        vertex_map: Dict[Tuple[float, float, float], int] = {}
        vertices: List[Vector3] = []
        indices: List[Tuple[int, int, int]] = []
        for triangle in self.triangles:
            corner_ids = []
            for vertex in triangle:
                key = _vertex_key(vertex)
                if key not in vertex_map:
                    vertex_map[key] = len(vertices)
                    vertices.append(Vector3(vertex))
                corner_ids.append(vertex_map[key])
            indices.append((corner_ids[0], corner_ids[1], corner_ids[2]))
        return vertices, indices

    def to_bytes(self) -> bytes:
        """Pack positions as float32 ``xyz`` triples for a vertex buffer."""

        packed = array("f")
        for vertex in self.vertices():
            packed.extend((vertex.x, vertex.y, vertex.z))
        return packed.tobytes()


def subdivision_level(longest_chord: float, min_subdivisions: int = 1) -> int:
    """Monotone step mapping from a triangle's longest chord to a grid size."""

    level = MAX_SUBDIVISIONS
    for limit, subdivisions in SUBDIVISION_STEPS:
        if longest_chord < limit:
            level = subdivisions
            break
    return max(level, min_subdivisions)


def longest_chord(a: Vector3, b: Vector3, c: Vector3) -> float:
    return max(a.distance_to(b), b.distance_to(c), c.distance_to(a))


def subdivide_triangle(
    a: Vector3,
    b: Vector3,
    c: Vector3,
    radius: float,
    subdivisions: int,
) -> List[SphereTriangle]:
    """Split a spherical triangle on a barycentric grid lifted to the sphere."""

    n = subdivisions
    if n <= 1:
        return [(a, b, c)]

    corners = {(0, 0): a, (n, 0): b, (0, n): c}
    grid: Dict[Tuple[int, int], Vector3] = {}
    for i in range(n + 1):
        for j in range(n + 1 - i):
            corner = corners.get((i, j))
            if corner is not None:
                grid[(i, j)] = corner
                continue
            wb = i / n
            wc = j / n
            wa = 1.0 - wb - wc
            blended = a * wa + b * wb + c * wc
            grid[(i, j)] = blended.normalize() * radius

    triangles: List[SphereTriangle] = []
    for i in range(n):
        for j in range(n - i):
            triangles.append((grid[(i, j)], grid[(i + 1, j)], grid[(i, j + 1)]))
            if j < n - 1 - i:
                triangles.append((grid[(i + 1, j)], grid[(i + 1, j + 1)], grid[(i, j + 1)]))
    return triangles


def tessellate(
    ring: Sequence[Sequence[float]],
    radius: float,
    min_subdivisions: int = 1,
    max_step_degrees: Optional[float] = None,
) -> SphereMesh:
    """Triangulate a lon/lat ring and lift it onto the sphere.

    Raises ``RingError`` or ``TriangulationError`` for unusable rings.
    """

    if min_subdivisions < 1:
        raise ValueError("min_subdivisions must be at least 1")
    points = normalize_ring(ring)
    if max_step_degrees is not None:
        points = resample_ring(points, max_step_degrees)
    # Drop the closing vertex so each boundary point projects once.
    points = points[:-1]
    projected = [project(lat, lon, radius) for lon, lat in points]

    mesh = SphereMesh(radius=radius)
    for ia, ib, ic in triangulate(points):
        a, b, c = projected[ia], projected[ib], projected[ic]
        level = subdivision_level(longest_chord(a, b, c), min_subdivisions)
        mesh.triangles.extend(subdivide_triangle(a, b, c, radius, level))
    return mesh


__all__ = [
    "MAX_SUBDIVISIONS",
    "SphereMesh",
    "SUBDIVISION_STEPS",
    "longest_chord",
    "subdivide_triangle",
    "subdivision_level",
    "tessellate",
]
