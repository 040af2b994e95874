import math
import unittest

from goldbergmesh.controller.icosahedron import build_base_icosahedron
from goldbergmesh.controller.normals import compute_triangle_normals
from goldbergmesh.controller.subdivision import subdivide
from goldbergmesh.model.geometry_primitives import Vector3, Triangle
from goldbergmesh.model.polyhedron import Polyhedron


def face_normal(poly: Polyhedron, cell: Triangle) -> Vector3:
    a, b, c = (poly.position(i) for i in cell.indices)
    return (b - a).cross(c - a)


def centroid(poly: Polyhedron, cell: Triangle) -> Vector3:
    a, b, c = (poly.position(i) for i in cell.indices)
    return (a + b + c) / 3.0


class TestComputeTriangleNormals(unittest.TestCase):
    def test_base_icosahedron_is_already_counter_clockwise(self) -> None:
        poly = build_base_icosahedron()
        fixed = compute_triangle_normals(poly)

        self.assertEqual(fixed, 0)
        for cell in poly.cells:
            self.assertGreater(face_normal(poly, cell).dot(centroid(poly, cell)), 0.0)

    def test_inverted_winding_is_repaired(self) -> None:
        poly = build_base_icosahedron()
        original = poly.cell(3)
        poly.set_winding(3, original.reversed())
        poly.set_winding(17, poly.cell(17).reversed())

        fixed = compute_triangle_normals(poly)

        self.assertEqual(fixed, 2)
        self.assertEqual(poly.cell(3), original)
        for cell in poly.cells:
            self.assertGreater(face_normal(poly, cell).dot(centroid(poly, cell)), 0.0)

    def test_vertex_normals_are_unit_and_outward(self) -> None:
        poly = Polyhedron()
        subdivide(poly, build_base_icosahedron(), 3.0, 2)
        compute_triangle_normals(poly)

        self.assertEqual(len(poly.normals), len(poly.positions))
        for position, normal in zip(poly.positions, poly.normals):
            self.assertTrue(math.isclose(normal.magnitude, 1.0, rel_tol=1e-9))
            self.assertGreater(normal.dot(position), 0.0)

    def test_flipped_cell_gets_outward_normal_not_both(self) -> None:
        # Icosahedron corners: the vertex normal points along the position
        poly = build_base_icosahedron()
        poly.set_winding(0, poly.cell(0).reversed())
        compute_triangle_normals(poly)

        for position, normal in zip(poly.positions, poly.normals):
            direction = position.normalize()
            self.assertAlmostEqual(normal.dot(direction), 1.0, places=9)

    def test_vertex_normal_is_sum_of_raw_face_normals(self) -> None:
        # Two triangles sharing vertex 0, one much larger than the other.
        # No extra weighting is applied on top of the raw cross products.
        poly = Polyhedron()
        v0 = poly.add_position(Vector3(0.0, 0.0, 1.0))
        v1 = poly.add_position(Vector3(1.0, 0.0, 1.0))
        v2 = poly.add_position(Vector3(0.0, 1.0, 1.0))
        v3 = poly.add_position(Vector3(-10.0, 0.0, 1.0))
        v4 = poly.add_position(Vector3(0.0, -10.0, 11.0))
        poly.add_cell(Triangle(v0, v1, v2))
        poly.add_cell(Triangle(v0, v3, v4))
        compute_triangle_normals(poly)

        n1 = face_normal(poly, poly.cell(0))
        n2 = face_normal(poly, poly.cell(1))
        expected = (n1 + n2).normalize()
        result = poly.normals[v0]
        self.assertAlmostEqual(result.x, expected.x)
        self.assertAlmostEqual(result.y, expected.y)
        self.assertAlmostEqual(result.z, expected.z)


if __name__ == "__main__":
    unittest.main()
