"""
GPU Buffer Packing
Interleaves position, normal and color attributes into a float32 vertex
buffer plus an index buffer ready for upload.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from goldbergmesh import config
from goldbergmesh.model.polyhedron import Polyhedron

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# position(3) + normal(3) + color(3) -> 9 floats per vertex
COMPONENTS_PER_VERTEX = 9
MAX_USHORT_VERTICES = np.iinfo(np.uint16).max + 1


@dataclass
class VertexBuffer:
    """Packed buffers and the attribute layout describing them."""
    vertices: npt.NDArray[np.float32]
    indices: npt.NDArray[np.unsignedinteger]
    stride_bytes: int = COMPONENTS_PER_VERTEX * 4
    attribute_layout: List[Tuple[str, int, int]] = field(default_factory=lambda: [
        ("a_pos", 3, 0),
        ("a_norm", 3, 12),
        ("a_col", 3, 24),
    ])

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def index_count(self) -> int:
        return len(self.indices)


def _index_dtype(vertex_count: int) -> type:
    return np.uint16 if vertex_count <= MAX_USHORT_VERTICES else np.uint32


def pack_vertex_buffer(
    poly: Polyhedron,
    rng: Optional[np.random.Generator] = None,
    per_face_colors: bool = False,
) -> VertexBuffer:
    """
    Packs a finished polyhedron into interleaved GPU buffers.

    Args:
        poly: The polyhedron to pack.
        rng: Source of the random colors. Defaults to a generator seeded with
            `config.DEFAULT_COLOR_SEED`, so packing is reproducible.
        per_face_colors: If False, every shared vertex gets its own random color.
            If True, vertices are duplicated per triangle and every triangle of a
            face group gets the group's color, so hubs render as flat patches.

    Returns:
        VertexBuffer with a float32 (N, 9) vertex array and a flat index array.
        Triangle winding (counter-clockwise) defines the front face.
    """
    if rng is None:
        rng = np.random.default_rng(config.DEFAULT_COLOR_SEED)

    positions = poly.positions_array()
    normals = poly.normals_array()
    cells = poly.cells_array()

    if not per_face_colors:
        colors = rng.random((len(positions), 3))
        vertices = np.concatenate([positions, normals, colors], axis=1).astype(np.float32)
        indices = cells.ravel().astype(_index_dtype(len(vertices)))
    else:
        # One vertex per triangle corner
        corner_ids = cells.ravel()
        group_colors = rng.random((len(poly.faces), 3))
        triangle_colors = np.zeros((len(cells), 3))
        for group, triangles in enumerate(poly.faces):
            triangle_colors[list(triangles)] = group_colors[group]
        corner_colors = np.repeat(triangle_colors, 3, axis=0)

        vertices = np.concatenate(
            [positions[corner_ids], normals[corner_ids], corner_colors], axis=1
        ).astype(np.float32)
        indices = np.arange(len(vertices), dtype=_index_dtype(len(vertices)))

    logger.debug(
        f"Packed {len(vertices)} vertices and {len(indices)} indices ({indices.dtype})."
    )
    return VertexBuffer(vertices=vertices, indices=indices)
