"""
Input/Output Manager
Handles exporting finished polyhedra to mesh interchange formats and
saving/loading them to .h5 files.
"""
import logging
import os
from typing import Any, List
from xml.sax.saxutils import escape

import h5py
import numpy as np
import pyvista as pv
from importlib.metadata import version, PackageNotFoundError

from goldbergmesh import config
from goldbergmesh.model.polyhedron import Polyhedron

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("goldbergmesh")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

REQUIRED_DATASETS = ("positions", "normals", "cells", "face_offsets", "face_triangles")


class IOManager:

    # ---- PYVISTA ----
    @staticmethod
    def face_group_ids(poly: Polyhedron) -> np.ndarray:
        """Face group id of every triangle, -1 for triangles outside any group."""
        group_ids = np.full(poly.cell_count, -1, dtype=np.int64)
        for group, triangles in enumerate(poly.faces):
            group_ids[list(triangles)] = group
        return group_ids

    @staticmethod
    def to_polydata(poly: Polyhedron) -> pv.PolyData:
        """Converts the polyhedron into a triangle PolyData with normals and face groups."""
        cells = poly.cells_array()
        # VTK cell layout: [3, a, b, c, 3, a, b, c, ...]
        vtk_faces = np.hstack(
            [np.full((len(cells), 1), 3, dtype=np.int64), cells]
        ).ravel()

        mesh = pv.PolyData(poly.positions_array(), vtk_faces)
        mesh.point_data["Normals"] = poly.normals_array()
        mesh.cell_data["FaceGroup"] = IOManager.face_group_ids(poly)
        return mesh

    @staticmethod
    def export_mesh(poly: Polyhedron, filepath: str) -> None:
        """
        Saves the polyhedron through PyVista. The format follows the file extension.
        """
        ext = os.path.splitext(filepath)[1].lower()
        if ext not in config.SUPPORTED_MESH_EXTENSIONS:
            raise ValueError(
                f"Unsupported mesh format '{ext}'. "
                f"Expected one of: {', '.join(config.SUPPORTED_MESH_EXTENSIONS)}"
            )

        try:
            mesh = IOManager.to_polydata(poly)
            mesh.save(filepath)
            logger.info(f"Mesh exported to: {filepath}")
        except Exception:
            logger.exception(f"Failed to export mesh to '{filepath}'")
            raise

    # ---- COLLADA ----
    @staticmethod
    def _float_source(mesh_id: str, name: str, values: np.ndarray, params: str) -> List[str]:
        flat = " ".join(f"{v:.9g}" for v in values.ravel())
        count = values.shape[0]
        lines = [
            f'      <source id="{mesh_id}-mesh-{name}">',
            f'        <float_array id="{mesh_id}-mesh-{name}-array" count="{values.size}">{flat}</float_array>',
            '        <technique_common>',
            f'          <accessor source="#{mesh_id}-mesh-{name}-array" count="{count}" stride="3">',
        ]
        for param in params:
            lines.append(f'            <param name="{param}" type="float"/>')
        lines += [
            '          </accessor>',
            '        </technique_common>',
            '      </source>',
        ]
        return lines

    @staticmethod
    def export_collada(poly: Polyhedron, filepath: str, mesh_id: str = config.DEFAULT_MESH_ID) -> None:
        """
        Writes a COLLADA 1.4.1 document with positions, normals and triangles.
        """
        logger.info(f"Exporting COLLADA mesh '{mesh_id}' to: {filepath}")
        # The id is only ever written inside attribute values
        mesh_id = escape(mesh_id, {'"': "&quot;"})

        indices = " ".join(str(i) for i in poly.cells_array().ravel())

        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            '<COLLADA xmlns="http://www.collada.org/2005/11/COLLADASchema" version="1.4.1">',
            '  <library_geometries>',
            f'    <geometry id="{mesh_id}-mesh" name="{mesh_id}">',
            '    <mesh>',
        ]
        lines += IOManager._float_source(mesh_id, "positions", poly.positions_array(), "XYZ")
        lines += IOManager._float_source(mesh_id, "normals", poly.normals_array(), "XYZ")
        lines += [
            f'      <vertices id="{mesh_id}-mesh-vertices">',
            f'        <input semantic="POSITION" source="#{mesh_id}-mesh-positions"/>',
            f'        <input semantic="NORMAL" source="#{mesh_id}-mesh-normals"/>',
            '      </vertices>',
            f'      <triangles count="{poly.cell_count}">',
            f'        <input semantic="VERTEX" source="#{mesh_id}-mesh-vertices" offset="0"/>',
            f'        <p>{indices}</p>',
            '      </triangles>',
            '    </mesh>',
            '    </geometry>',
            '  </library_geometries>',
            '  <library_visual_scenes>',
            '    <visual_scene id="scene" name="scene">',
            f'      <node type="NODE" id="{mesh_id}" name="{mesh_id}">',
            f'        <instance_geometry url="#{mesh_id}-mesh" name="{mesh_id}"/>',
            '      </node>',
            '    </visual_scene>',
            '  </library_visual_scenes>',
            '  <scene>',
            '    <instance_visual_scene url="#scene"/>',
            '  </scene>',
            '</COLLADA>',
        ]

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write("\n".join(lines))
        except Exception:
            logger.exception("Failed to export COLLADA file")
            raise

    # ---- HDF5 ----
    @staticmethod
    def save_polyhedron(poly: Polyhedron, filepath: str, **attrs: Any) -> None:
        """
        Saves the polyhedron arrays to an HDF5 file.
        Face groups are stored flattened (face_triangles) with start offsets (face_offsets).
        Extra keyword arguments are stored as file attributes.
        """
        logger.info(f"Saving polyhedron to: {filepath}")

        face_sizes = [len(face) for face in poly.faces]
        face_offsets = np.concatenate([[0], np.cumsum(face_sizes)]).astype(np.int64)
        face_triangles = np.array(
            [t for face in poly.faces for t in face], dtype=np.int64
        )

        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                for key, val in attrs.items():
                    f.attrs[key] = val

                f.create_dataset("positions", data=poly.positions_array(), compression="gzip")
                f.create_dataset("normals", data=poly.normals_array(), compression="gzip")
                f.create_dataset("cells", data=poly.cells_array(), compression="gzip")
                f.create_dataset("face_offsets", data=face_offsets)
                f.create_dataset("face_triangles", data=face_triangles)

            logger.debug(
                f"Saved {poly.position_count} positions, {poly.cell_count} cells, "
                f"{len(face_sizes)} faces."
            )
        except Exception:
            logger.exception("Failed to save polyhedron")
            raise

    @staticmethod
    def load_polyhedron(filepath: str) -> Polyhedron:
        """Loads a finalized polyhedron previously written by `save_polyhedron`."""
        logger.info(f"Loading polyhedron from: {filepath}")
        if not os.path.exists(filepath):
            msg = f"Polyhedron file not found: {filepath}"
            logger.error(msg)
            raise FileNotFoundError(msg)

        with h5py.File(filepath, "r") as f:
            missing = [name for name in REQUIRED_DATASETS if name not in f]
            if missing:
                msg = f"File '{filepath}' is missing datasets: {', '.join(missing)}"
                logger.error(msg)
                raise ValueError(msg)

            file_version = f.attrs.get("version", "unknown")
            if file_version != APP_VERSION:
                logger.warning(f"File version {file_version} differs from {APP_VERSION}.")

            positions = f["positions"][:]
            normals = f["normals"][:]
            cells = f["cells"][:]
            offsets = f["face_offsets"][:]
            flat_faces = f["face_triangles"][:]

        faces = [flat_faces[start:end].tolist() for start, end in zip(offsets[:-1], offsets[1:])]
        poly = Polyhedron.from_arrays(positions, normals, cells, faces)
        logger.debug(f"Loaded {poly!r}")
        return poly
