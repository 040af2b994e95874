"""
Configuration & Constants
=========================
This module serves as the central registry for global constants used during
mesh generation and export.

Why is this file needed?
------------------------
1. Tuning: The vertex cache precision decides which floating point coordinates
   are merged into one vertex. Every stage that relies on deduplication reads
   it from here instead of repeating a literal.
2. Defaults: Export and packing helpers share the same default ids and seeds.

Exports:
    VERT_CACHE_PRECISION (float): Quantization factor for vertex deduplication.
    DEFAULT_RADIUS (float): Default sphere radius for generated solids.
    DEFAULT_DETAIL (int): Default subdivision level.
    DEFAULT_MESH_ID (str): Geometry id written into COLLADA documents.
    DEFAULT_COLOR_SEED (int): Seed for vertex colors when no generator is given.
    SUPPORTED_MESH_EXTENSIONS (tuple[str, ...]): File types accepted by the mesh exporter.
    LOG_FORMAT (str), LOG_DATE_FORMAT (str): Formatting used by setup_logging.
"""

# Coordinates are multiplied by this value and rounded to build the cache key.
# Two vertices computed from adjacent triangles must land on the same key.
VERT_CACHE_PRECISION: float = 10000.0

DEFAULT_RADIUS: float = 1.0
DEFAULT_DETAIL: int = 1

DEFAULT_MESH_ID: str = "Chapin"
DEFAULT_COLOR_SEED: int = 0

SUPPORTED_MESH_EXTENSIONS: tuple[str, ...] = (".vtk", ".vtp", ".ply", ".stl")

# Format: Time - Module - Level - Message
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%H:%M:%S'
