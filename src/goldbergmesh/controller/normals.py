"""
Face and vertex normals with winding correction.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from goldbergmesh.model.geometry_primitives import Triangle, ZERO
from goldbergmesh.model.polyhedron import Polyhedron

logger = logging.getLogger(__name__)


def compute_triangle_normals(polyhedron: Polyhedron) -> int:
    """
    Accumulates outward face normals into the vertex normals and fixes inverted windings.

    The solid is assumed to be star-shaped around the origin, so a face normal
    is outward when it points away from the origin. Vertex normals are the
    normalized sum of the raw (unnormalized) face cross products. No explicit
    area or angle weighting is applied on top.

    Returns:
        Number of cells whose winding was reversed.
    """
    cells = polyhedron.cells
    windings_to_fix: List[Tuple[int, Triangle]] = []

    # 1. Analysis pass, cells are not modified here
    for index, cell in enumerate(cells):
        vertex_a = polyhedron.position(cell.a)
        vertex_b = polyhedron.position(cell.b)
        vertex_c = polyhedron.position(cell.c)

        e1 = vertex_a - vertex_b
        e2 = vertex_c - vertex_b
        normal = e1.cross(e2)

        # (A-B) x (C-B) points inward for a correctly wound cell
        dist = vertex_b - ZERO
        if normal.dot(dist) < 0.0:
            normal = -normal
        else:
            windings_to_fix.append((index, cell.reversed()))

        polyhedron.accumulate_normal(cell.a, normal)
        polyhedron.accumulate_normal(cell.b, normal)
        polyhedron.accumulate_normal(cell.c, normal)

    # 2. Apply pass
    for index, triangle in windings_to_fix:
        polyhedron.set_winding(index, triangle)

    polyhedron.normalize_normals()

    if windings_to_fix:
        logger.debug(f"Reversed winding of {len(windings_to_fix)} of {len(cells)} cells.")
    return len(windings_to_fix)
