"""
Polyhedron (Data Model)
=======================
This module defines the mesh aggregate that every generation stage writes into.

Why is this file needed?
------------------------
1. Deduplication: Independent computations (two subdivided triangles sharing
   an edge, two truncated hubs sharing a centroid) produce the same point with
   slightly different floating point values. The VertexCache collapses them
   onto one position index.
2. Invariants: All mutation goes through a small set of methods so that
   normals stay parallel to positions and indices stay in bounds.
3. Hand-off: Once `finalize()` is called the mesh is read-only and ready for
   the export and buffer collaborators.

Classes:
    TopologyError: Raised when the input mesh cannot be truncated.
    VertexCache: Maps quantized coordinates to position indices.
    Polyhedron: Positions, normals, triangles and polygon face groups.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from goldbergmesh import config
from goldbergmesh.model.geometry_primitives import Vector3, Triangle, ZERO

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

VertexKey = Tuple[int, int, int]


class TopologyError(RuntimeError):
    """
    The source mesh is not a closed triangulated surface.
    Carries the identifiers of the failing vertex, triangle and edge when known.
    """
    def __init__(
        self,
        message: str,
        vertex: Optional[int] = None,
        triangle: Optional[int] = None,
        edge: Optional[Tuple[int, int]] = None,
    ) -> None:
        super().__init__(message)
        self.vertex = vertex
        self.triangle = triangle
        self.edge = edge


class VertexCache:
    """
    Helper to prevent duplicate vertices.
    Maps quantized (x, y, z) coordinates to position indices.
    """
    def __init__(self, precision: float = config.VERT_CACHE_PRECISION):
        self.cache: Dict[VertexKey, int] = {}
        self.precision = precision

    def key(self, vertex: Vector3) -> VertexKey:
        # Round half up, Python's round() would round half to even
        p = self.precision
        return (
            math.floor(vertex.x * p + 0.5),
            math.floor(vertex.y * p + 0.5),
            math.floor(vertex.z * p + 0.5),
        )

    def get(self, vertex: Vector3) -> Optional[int]:
        return self.cache.get(self.key(vertex))

    def store(self, vertex: Vector3, index: int) -> None:
        self.cache[self.key(vertex)] = index

    def __len__(self) -> int:
        return len(self.cache)


class Polyhedron:
    def __init__(self, precision: float = config.VERT_CACHE_PRECISION) -> None:
        self._positions: List[Vector3] = []
        self._normals: List[Vector3] = []
        self._cells: List[Triangle] = []
        self._faces: List[Tuple[int, ...]] = []
        self._vertex_cache: Optional[VertexCache] = VertexCache(precision)
        self._finalized = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(positions={len(self._positions)}, "
            f"cells={len(self._cells)}, faces={len(self._faces)})"
        )

    # ---- READ ACCESSORS ----
    @property
    def positions(self) -> Tuple[Vector3, ...]:
        return tuple(self._positions)

    @property
    def normals(self) -> Tuple[Vector3, ...]:
        return tuple(self._normals)

    @property
    def cells(self) -> Tuple[Triangle, ...]:
        return tuple(self._cells)

    @property
    def faces(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(self._faces)

    @property
    def position_count(self) -> int:
        return len(self._positions)

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def position(self, index: int) -> Vector3:
        return self._positions[index]

    def cell(self, index: int) -> Triangle:
        return self._cells[index]

    def positions_array(self) -> npt.NDArray[np.float64]:
        return np.array([p.to_array() for p in self._positions], dtype=np.float64).reshape(-1, 3)

    def normals_array(self) -> npt.NDArray[np.float64]:
        return np.array([n.to_array() for n in self._normals], dtype=np.float64).reshape(-1, 3)

    def cells_array(self) -> npt.NDArray[np.int64]:
        return np.array([c.indices for c in self._cells], dtype=np.int64).reshape(-1, 3)

    # ---- MUTATION ----
    def _check_mutable(self) -> None:
        if self._finalized:
            raise RuntimeError("Polyhedron is finalized and can no longer be modified.")

    def add_position(self, vertex: Vector3) -> int:
        """
        Registers a vertex and returns its index.
        A vertex that quantizes to an already known key returns the existing index.
        """
        self._check_mutable()
        if self._vertex_cache is None:
            raise RuntimeError("Vertex cache was dropped; positions can no longer be added.")

        existing = self._vertex_cache.get(vertex)
        if existing is not None:
            return existing

        self._positions.append(vertex)
        self._normals.append(ZERO)
        index = len(self._positions) - 1
        self._vertex_cache.store(vertex, index)
        return index

    def add_cell(self, triangle: Triangle) -> int:
        self._check_mutable()
        self._cells.append(triangle)
        return len(self._cells) - 1

    def add_face(self, triangle_ids: Sequence[int]) -> int:
        self._check_mutable()
        self._faces.append(tuple(triangle_ids))
        return len(self._faces) - 1

    def triangles_to_faces(self) -> None:
        """One face group per triangle."""
        for index in range(len(self._cells)):
            self.add_face([index])

    def set_winding(self, index: int, triangle: Triangle) -> None:
        """Reorders the vertices of an existing cell. The set of indices must not change."""
        self._check_mutable()
        current = self._cells[index]
        if sorted(current.indices) != sorted(triangle.indices):
            raise ValueError(
                f"Winding rewrite of cell {index} must keep its vertices: {current} -> {triangle}"
            )
        self._cells[index] = triangle

    def accumulate_normal(self, index: int, normal: Vector3) -> None:
        self._check_mutable()
        self._normals[index] = self._normals[index] + normal

    def normalize_normals(self) -> None:
        self._check_mutable()
        self._normals = [n.normalize() for n in self._normals]

    # ---- LIFECYCLE ----
    def validate(self) -> None:
        """Raises ValueError if any structural invariant is broken."""
        n_positions = len(self._positions)
        n_cells = len(self._cells)

        if len(self._normals) != n_positions:
            raise ValueError(
                f"Normal count {len(self._normals)} does not match position count {n_positions}."
            )
        for i, cell in enumerate(self._cells):
            for v in cell.indices:
                if not 0 <= v < n_positions:
                    raise ValueError(f"Cell {i} references missing position {v}.")
            # Collapsed vertices (radius below the cache resolution) end up here
            if len(set(cell.indices)) != 3:
                raise ValueError(f"Cell {i} is degenerate, it repeats a vertex: {cell}.")
        for i, face in enumerate(self._faces):
            for t in face:
                if not 0 <= t < n_cells:
                    raise ValueError(f"Face {i} references missing triangle {t}.")

    def finalize(self) -> Polyhedron:
        """Validates the mesh, drops the construction cache and makes it read-only."""
        if self._finalized:
            return self
        self.validate()
        self._vertex_cache = None
        self._finalized = True
        logger.debug(f"Finalized {self!r}")
        return self

    @classmethod
    def from_arrays(
        cls,
        positions: npt.ArrayLike,
        normals: npt.ArrayLike,
        cells: npt.ArrayLike,
        faces: Sequence[Sequence[int]],
    ) -> Polyhedron:
        """
        Rebuilds a finalized polyhedron from plain arrays, e.g. read back from disk.
        Positions are taken as stored, without deduplication.
        """
        poly = cls()
        pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        nrm = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
        tri = np.asarray(cells, dtype=np.int64).reshape(-1, 3)

        poly._positions = [Vector3(float(x), float(y), float(z)) for x, y, z in pos]
        poly._normals = [Vector3(float(x), float(y), float(z)) for x, y, z in nrm]
        poly._cells = [Triangle(int(a), int(b), int(c)) for a, b, c in tri]
        poly._faces = [tuple(int(t) for t in face) for face in faces]
        return poly.finalize()
