"""
Vertex Truncation (Goldberg Operator)
=====================================
Replaces every vertex of a closed triangulated solid with a flat polygon
(hub) and shrinks every original triangle towards its centroid.

Why is this file needed?
------------------------
A geodesic sphere is made of triangles. Its dual, the Goldberg polyhedron, is
made of pentagons (at the 12 original icosahedron corners) and hexagons
(everywhere else). This module builds that dual as a triangle mesh whose
polygon structure is kept in `Polyhedron.faces`.

Construction per original vertex v with incident triangles F(v):
1. The hub center is the mean of the centroids of F(v).
2. For each triangle f in F(v) with other corners p and q, the edges v-p and
   v-q each have one neighbouring triangle g in F(v). The midpoint of the
   centroids of f and g lies on the hub boundary.
3. Two triangles per f fan out from the hub center:
   (center, mid(v-q), centroid(f)) and (center, centroid(f), mid(v-p)).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from goldbergmesh.model.geometry_primitives import Vector3, Triangle
from goldbergmesh.model.polyhedron import Polyhedron, TopologyError

logger = logging.getLogger(__name__)

EdgeFaceKey = Tuple[int, int, int, int]


@dataclass
class TruncationStats:
    """Return object describing the generated hub polygons."""
    pentagons: int = 0
    hexagons: int = 0
    others: int = 0
    faces: int = 0
    triangles: int = 0


class MidCentroidCache:
    """
    Midpoints between the centroids of two triangles sharing an edge.

    The key is order independent: (v, p, f, g) and (p, v, g, f) address the
    same entry, and the value is always interpolated from the lower triangle
    id towards the higher one. Both sides of an edge therefore receive the
    identical point, whichever side asks first.
    """
    def __init__(self, centroids: Sequence[Vector3]):
        self.cache: Dict[EdgeFaceKey, Vector3] = {}
        self.centroids = centroids

    @staticmethod
    def key(vertex_1: int, vertex_2: int, face_1: int, face_2: int) -> EdgeFaceKey:
        v_lo, v_hi = min(vertex_1, vertex_2), max(vertex_1, vertex_2)
        f_lo, f_hi = min(face_1, face_2), max(face_1, face_2)
        return v_lo, v_hi, f_lo, f_hi

    def get_or_create(self, vertex_1: int, vertex_2: int, face_1: int, face_2: int) -> Vector3:
        key = self.key(vertex_1, vertex_2, face_1, face_2)
        if key in self.cache:
            return self.cache[key]

        _, _, f_lo, f_hi = key
        mid = self.centroids[f_lo].lerp(self.centroids[f_hi], 0.5)
        self.cache[key] = mid
        return mid

    def __len__(self) -> int:
        return len(self.cache)


def truncate(output: Polyhedron, source: Polyhedron) -> TruncationStats:
    """
    Writes the vertex-truncated form of `source` into `output`.

    Args:
        output: Polyhedron receiving the hub triangles and one face group per hub.
        source: Closed triangulated polyhedron. It is only read.

    Returns:
        Counts of the generated hub polygons by side count.

    Raises:
        TopologyError: If a vertex has no incident triangles or a spoke edge has
            no neighbouring triangle.
    """
    vertex_faces = vertex_to_faces(source)
    centroids = triangle_centroids(source)
    mid_centroids = MidCentroidCache(centroids)
    stats = TruncationStats()

    for vertex in range(source.position_count):
        faces = vertex_faces.get(vertex)
        if not faces:
            raise TopologyError(f"Vertex {vertex} has no incident triangles.", vertex=vertex)

        if len(faces) == 6:
            stats.hexagons += 1
        elif len(faces) == 5:
            stats.pentagons += 1
        else:
            stats.others += 1

        center_point = center_of_triangles(faces, centroids)
        hub: List[int] = []

        for face_index in faces:
            triangle = source.cell(face_index)
            others = triangle.others(vertex)
            if len(others) != 2:
                raise TopologyError(
                    f"Triangle {face_index} {triangle.indices} is degenerate at vertex {vertex}.",
                    vertex=vertex,
                    triangle=face_index,
                )
            vertex_p, vertex_q = others
            centroid = centroids[face_index]

            mid_p = _mid_centroid(source, vertex, vertex_p, faces, face_index, mid_centroids)
            mid_q = _mid_centroid(source, vertex, vertex_q, faces, face_index, mid_centroids)

            center_index = output.add_position(center_point)
            centroid_index = output.add_position(centroid)
            mid_p_index = output.add_position(mid_p)
            mid_q_index = output.add_position(mid_q)

            hub.append(output.add_cell(Triangle(center_index, mid_q_index, centroid_index)))
            hub.append(output.add_cell(Triangle(center_index, centroid_index, mid_p_index)))

        output.add_face(hub)
        stats.faces += 1
        stats.triangles += len(hub)

    logger.debug(
        f"Truncated {source.position_count} vertices: {stats.pentagons} pentagons, "
        f"{stats.hexagons} hexagons, {stats.others} other hubs."
    )
    return stats


def _mid_centroid(
    source: Polyhedron,
    spoke_vertex: int,
    far_vertex: int,
    faces: Sequence[int],
    current_face: int,
    cache: MidCentroidCache,
) -> Vector3:
    adjacent = find_adjacent_face(source, spoke_vertex, far_vertex, faces, current_face)
    if adjacent is None:
        raise TopologyError(
            f"No triangle adjacent to triangle {current_face} across edge "
            f"({spoke_vertex}, {far_vertex}).",
            vertex=spoke_vertex,
            triangle=current_face,
            edge=(spoke_vertex, far_vertex),
        )
    return cache.get_or_create(spoke_vertex, far_vertex, current_face, adjacent)


def find_adjacent_face(
    source: Polyhedron,
    spoke_vertex: int,
    far_vertex: int,
    faces: Sequence[int],
    current_face: int,
) -> Optional[int]:
    """First triangle of `faces`, other than `current_face`, containing the edge (spoke, far)."""
    for face_index in faces:
        if face_index == current_face:
            continue
        triangle = source.cell(face_index)
        if triangle.contains(spoke_vertex) and triangle.contains(far_vertex):
            return face_index
    return None


def vertex_to_faces(source: Polyhedron) -> Dict[int, List[int]]:
    """Triangle ids touching each vertex, in ascending order."""
    result: Dict[int, List[int]] = {}
    for index, triangle in enumerate(source.cells):
        for vertex in triangle.indices:
            result.setdefault(vertex, []).append(index)
    return result


def triangle_centroids(source: Polyhedron) -> List[Vector3]:
    return [
        calculate_centroid(source.position(t.a), source.position(t.b), source.position(t.c))
        for t in source.cells
    ]


def calculate_centroid(pa: Vector3, pb: Vector3, pc: Vector3) -> Vector3:
    # One third of the way from the midpoint of AB towards C
    ab_half = pa + (pb - pa) / 2.0
    return (pc - ab_half) * (1.0 / 3.0) + ab_half


def center_of_triangles(triangle_indices: Sequence[int], centroids: Sequence[Vector3]) -> Vector3:
    center = Vector3(0.0, 0.0, 0.0)
    for index in triangle_indices:
        center = center + centroids[index]
    return center / len(triangle_indices)
