"""
Geodesic and Goldberg polyhedron mesh generation.

Typical use:

    from goldbergmesh import build_truncated_icosahedron, IOManager

    poly = build_truncated_icosahedron(radius=1.0, detail=1)
    IOManager.export_mesh(poly, "goldberg.vtk")
"""
from goldbergmesh.controller.generator import build_icosahedron, build_truncated_icosahedron
from goldbergmesh.logging_config import setup_logging
from goldbergmesh.model.buffers import VertexBuffer, pack_vertex_buffer
from goldbergmesh.model.geometry_primitives import Triangle, Vector3
from goldbergmesh.model.io import IOManager
from goldbergmesh.model.polyhedron import Polyhedron, TopologyError

__all__ = [
    "build_icosahedron",
    "build_truncated_icosahedron",
    "setup_logging",
    "VertexBuffer",
    "pack_vertex_buffer",
    "Triangle",
    "Vector3",
    "IOManager",
    "Polyhedron",
    "TopologyError",
]
