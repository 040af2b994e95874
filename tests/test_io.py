import os
import shutil
import tempfile
import unittest
import xml.etree.ElementTree as ET

import h5py
import numpy as np
import pyvista as pv

from goldbergmesh import build_icosahedron, build_truncated_icosahedron
from goldbergmesh.model.io import IOManager

COLLADA_NS = {"c": "http://www.collada.org/2005/11/COLLADASchema"}


class TestIOManager(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.mkdtemp()
        self.poly = build_truncated_icosahedron(1.0, 1)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmpdir)

    def test_face_group_ids(self) -> None:
        poly = build_icosahedron(1.0, 0)
        self.assertEqual(IOManager.face_group_ids(poly).tolist(), list(range(20)))

        ids = IOManager.face_group_ids(self.poly)
        self.assertEqual(len(ids), self.poly.cell_count)
        self.assertEqual(ids.min(), 0)
        self.assertEqual(ids.max(), len(self.poly.faces) - 1)

    def test_to_polydata(self) -> None:
        mesh = IOManager.to_polydata(self.poly)
        self.assertEqual(mesh.n_points, self.poly.position_count)
        self.assertEqual(mesh.n_cells, self.poly.cell_count)
        self.assertTrue(mesh.is_all_triangles)
        self.assertEqual(mesh.point_data["Normals"].shape, (self.poly.position_count, 3))
        self.assertEqual(len(mesh.cell_data["FaceGroup"]), self.poly.cell_count)

    def test_export_mesh_vtk(self) -> None:
        path = os.path.join(self.tmpdir, "goldberg.vtk")
        IOManager.export_mesh(self.poly, path)

        mesh = pv.read(path)
        self.assertEqual(mesh.n_points, self.poly.position_count)
        self.assertEqual(mesh.n_cells, self.poly.cell_count)
        self.assertIn("FaceGroup", mesh.cell_data)

    def test_export_mesh_rejects_unknown_extension(self) -> None:
        with self.assertRaises(ValueError):
            IOManager.export_mesh(self.poly, os.path.join(self.tmpdir, "goldberg.xyz"))

    def test_export_collada(self) -> None:
        path = os.path.join(self.tmpdir, "goldberg.dae")
        IOManager.export_collada(self.poly, path, mesh_id="Ball")

        root = ET.parse(path).getroot()
        self.assertEqual(root.attrib["version"], "1.4.1")

        arrays = root.findall(".//c:float_array", COLLADA_NS)
        self.assertEqual(
            [a.attrib["id"] for a in arrays],
            ["Ball-mesh-positions-array", "Ball-mesh-normals-array"],
        )
        positions = np.array(arrays[0].text.split(), dtype=float).reshape(-1, 3)
        np.testing.assert_allclose(positions, self.poly.positions_array(), rtol=1e-7, atol=1e-9)

        triangles = root.find(".//c:triangles", COLLADA_NS)
        self.assertEqual(int(triangles.attrib["count"]), self.poly.cell_count)
        indices = np.array(triangles.find("c:p", COLLADA_NS).text.split(), dtype=int)
        self.assertEqual(indices.reshape(-1, 3).tolist(), self.poly.cells_array().tolist())

    def test_export_collada_escapes_mesh_id(self) -> None:
        path = os.path.join(self.tmpdir, "quoted.dae")
        mesh_id = 'Ball "<1>" & co'
        IOManager.export_collada(self.poly, path, mesh_id=mesh_id)

        root = ET.parse(path).getroot()
        geometry = root.find(".//c:geometry", COLLADA_NS)
        self.assertEqual(geometry.attrib["name"], mesh_id)
        self.assertEqual(geometry.attrib["id"], f"{mesh_id}-mesh")
        node = root.find(".//c:node", COLLADA_NS)
        self.assertEqual(node.attrib["id"], mesh_id)

    def test_save_and_load_polyhedron(self) -> None:
        path = os.path.join(self.tmpdir, "goldberg.h5")
        IOManager.save_polyhedron(self.poly, path, radius=1.0, detail=1)

        with h5py.File(path, "r") as f:
            self.assertEqual(f.attrs["detail"], 1)

        loaded = IOManager.load_polyhedron(path)
        self.assertTrue(loaded.finalized)
        self.assertEqual(loaded.positions, self.poly.positions)
        self.assertEqual(loaded.normals, self.poly.normals)
        self.assertEqual(loaded.cells, self.poly.cells)
        self.assertEqual(loaded.faces, self.poly.faces)

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            IOManager.load_polyhedron(os.path.join(self.tmpdir, "missing.h5"))

    def test_load_incomplete_file(self) -> None:
        path = os.path.join(self.tmpdir, "broken.h5")
        with h5py.File(path, "w") as f:
            f.create_dataset("positions", data=np.zeros((3, 3)))

        with self.assertRaises(ValueError):
            IOManager.load_polyhedron(path)


if __name__ == "__main__":
    unittest.main()
