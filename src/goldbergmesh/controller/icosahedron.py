"""
Base icosahedron, 12 vertices and 20 counter-clockwise triangles.
"""
from __future__ import annotations

import math

from goldbergmesh.model.geometry_primitives import Vector3, Triangle
from goldbergmesh.model.polyhedron import Polyhedron

GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0

# Unnormalized corners, the subdivider projects them onto the sphere
ICOSAHEDRON_VERTICES: tuple[tuple[float, float, float], ...] = (
    (-1.0, GOLDEN_RATIO, 0.0),
    (1.0, GOLDEN_RATIO, 0.0),
    (-1.0, -GOLDEN_RATIO, 0.0),
    (1.0, -GOLDEN_RATIO, 0.0),
    (0.0, -1.0, GOLDEN_RATIO),
    (0.0, 1.0, GOLDEN_RATIO),
    (0.0, -1.0, -GOLDEN_RATIO),
    (0.0, 1.0, -GOLDEN_RATIO),
    (GOLDEN_RATIO, 0.0, -1.0),
    (GOLDEN_RATIO, 0.0, 1.0),
    (-GOLDEN_RATIO, 0.0, -1.0),
    (-GOLDEN_RATIO, 0.0, 1.0),
)

# Order matters: every later stage inherits this winding
ICOSAHEDRON_CELLS: tuple[tuple[int, int, int], ...] = (
    # 5 faces around vertex 0
    (0, 11, 5),
    (0, 5, 1),
    (0, 1, 7),
    (0, 7, 10),
    (0, 10, 11),
    # 5 adjacent faces
    (1, 5, 9),
    (5, 11, 4),
    (11, 10, 2),
    (10, 7, 6),
    (7, 1, 8),
    # 5 faces around vertex 3
    (3, 9, 4),
    (3, 4, 2),
    (3, 2, 6),
    (3, 6, 8),
    (3, 8, 9),
    # 5 adjacent faces
    (4, 9, 5),
    (2, 4, 11),
    (6, 2, 10),
    (8, 6, 7),
    (9, 8, 1),
)


def build_base_icosahedron() -> Polyhedron:
    """Returns the unsubdivided, unnormalized icosahedron. It is not finalized."""
    poly = Polyhedron()
    for x, y, z in ICOSAHEDRON_VERTICES:
        poly.add_position(Vector3(x, y, z))
    for a, b, c in ICOSAHEDRON_CELLS:
        poly.add_cell(Triangle(a, b, c))
    return poly
