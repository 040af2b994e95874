"""
Geodesic Subdivision
====================
Splits every triangle of a source polyhedron into a triangular grid and
projects the grid onto a sphere.

With `cols = 2**detail` each source triangle (a, b, c) yields a grid of rows
running from the edge a-b towards the apex c:

        c              row cols (single apex point)
       / \\
      /___\\           row 1
     / \\ / \\
    /___V___\\         row 0
   a         b

Each row i is tiled left to right with alternating "up" and "down" triangles.
All grid points go through the target's vertex cache, so points on a shared
edge of two source triangles become one vertex.
"""
from __future__ import annotations

import logging
from typing import List

from goldbergmesh.model.geometry_primitives import Vector3, Triangle
from goldbergmesh.model.polyhedron import Polyhedron

logger = logging.getLogger(__name__)


def subdivide(target: Polyhedron, source: Polyhedron, radius: float, detail: int) -> int:
    """
    Subdivides every triangle of `source` into `target`.

    Args:
        target: Polyhedron receiving the new vertices and triangles.
        source: Polyhedron whose cells are subdivided. It is only read.
        radius: Radius of the sphere all new vertices are projected onto.
        detail: Subdivision level; each level multiplies the triangle count by 4.

    Returns:
        Number of triangles added to `target`.
    """
    added = 0
    for triangle in source.cells:
        a = source.position(triangle.a)
        b = source.position(triangle.b)
        c = source.position(triangle.c)
        added += _subdivide_triangle(target, a, b, c, radius, detail)

    logger.debug(
        f"Subdivided {source.cell_count} triangles at detail {detail}: "
        f"{added} triangles, {target.position_count} vertices."
    )
    return added


def _subdivide_triangle(
    target: Polyhedron,
    a: Vector3,
    b: Vector3,
    c: Vector3,
    radius: float,
    detail: int,
) -> int:
    cols = 2 ** detail
    grid = _build_grid(a, b, c, radius, cols)

    added = 0
    for i in range(cols):
        for j in range(2 * (cols - i) - 1):
            k = j // 2

            if j % 2 == 0:
                corners = (grid[i][k + 1], grid[i + 1][k], grid[i][k])
            else:
                corners = (grid[i][k + 1], grid[i + 1][k + 1], grid[i + 1][k])

            triangle = Triangle(*(target.add_position(v) for v in corners))
            target.add_cell(triangle)
            added += 1
    return added


def _build_grid(a: Vector3, b: Vector3, c: Vector3, radius: float, cols: int) -> List[List[Vector3]]:
    grid: List[List[Vector3]] = []
    for i in range(cols + 1):
        aj = a.lerp(c, i / cols)
        bj = b.lerp(c, i / cols)
        rows = cols - i

        row: List[Vector3] = []
        for j in range(rows + 1):
            if j == 0 and i == cols:
                point = aj
            else:
                point = aj.lerp(bj, j / rows)
            row.append(point.normalize() * radius)
        grid.append(row)
    return grid
