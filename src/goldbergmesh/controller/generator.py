"""
Polyhedron Generation Pipelines
===============================
This module chains the construction stages into the two public builders.

Why is this file needed?
------------------------
1. Validation: Parameters are rejected before any construction starts.
2. Ordering: Base -> Subdivision -> (Truncation) -> Normals -> Finalize.
3. Atomicity: Each stage writes into a local Polyhedron. If a stage fails the
   exception propagates and nothing partially built is returned.
"""
from __future__ import annotations

import logging
import math
import numbers

from goldbergmesh import config
from goldbergmesh.controller.icosahedron import build_base_icosahedron
from goldbergmesh.controller.normals import compute_triangle_normals
from goldbergmesh.controller.subdivision import subdivide
from goldbergmesh.controller.truncation import truncate
from goldbergmesh.model.polyhedron import Polyhedron, TopologyError
from goldbergmesh.utils import timer

logger = logging.getLogger(__name__)


def validate_parameters(radius: float, detail: int) -> None:
    """Raises TypeError / ValueError for unusable radius or detail values."""
    if isinstance(radius, bool) or not isinstance(radius, numbers.Real):
        raise TypeError(f"Radius must be a real number, got {type(radius).__name__}.")
    if not math.isfinite(radius) or radius <= 0.0:
        raise ValueError(f"Radius must be a finite positive number, got {radius}.")

    if isinstance(detail, bool) or not isinstance(detail, numbers.Integral):
        raise TypeError(f"Detail must be an integer, got {type(detail).__name__}.")
    if detail < 0:
        raise ValueError(f"Detail must be non-negative, got {detail}.")


@timer
def build_icosahedron(
    radius: float = config.DEFAULT_RADIUS,
    detail: int = config.DEFAULT_DETAIL,
) -> Polyhedron:
    """
    Builds a geodesic sphere by subdividing an icosahedron.

    Args:
        radius: Radius of the sphere every vertex lies on.
        detail: Subdivision level. 0 gives the plain icosahedron (20 triangles),
            each further level multiplies the triangle count by 4.

    Returns:
        Finalized polyhedron with one face group per triangle and unit vertex normals.
    """
    validate_parameters(radius, detail)
    radius = float(radius)
    detail = int(detail)

    base = build_base_icosahedron()
    polyhedron = Polyhedron()
    subdivide(polyhedron, base, radius, detail)
    polyhedron.triangles_to_faces()
    compute_triangle_normals(polyhedron)
    polyhedron.finalize()

    logger.info(
        f"Icosahedron (r={radius}, detail={detail}): "
        f"{polyhedron.position_count} vertices, {polyhedron.cell_count} triangles."
    )
    return polyhedron


@timer
def build_truncated_icosahedron(
    radius: float = config.DEFAULT_RADIUS,
    detail: int = config.DEFAULT_DETAIL,
) -> Polyhedron:
    """
    Builds the Goldberg polyhedron dual to the geodesic sphere of the same detail.

    Every vertex of the geodesic sphere becomes one face group (a pentagon or
    hexagon fan of triangles).

    Args:
        radius: Radius of the underlying geodesic sphere.
        detail: Subdivision level of the underlying geodesic sphere.

    Returns:
        Finalized polyhedron with one face group per hub polygon.

    Raises:
        TopologyError: If the subdivided sphere is not a closed surface.
    """
    validate_parameters(radius, detail)

    icosahedron = build_icosahedron(radius, detail)
    polyhedron = Polyhedron()
    try:
        stats = truncate(polyhedron, icosahedron)
    except TopologyError as e:
        logger.error(
            f"Truncation failed (vertex={e.vertex}, triangle={e.triangle}, edge={e.edge}): {e}"
        )
        raise
    compute_triangle_normals(polyhedron)
    polyhedron.finalize()

    logger.info(
        f"Truncated icosahedron (r={radius}, detail={detail}): "
        f"{stats.pentagons} pentagons, {stats.hexagons} hexagons, "
        f"{polyhedron.position_count} vertices, {polyhedron.cell_count} triangles."
    )
    return polyhedron
