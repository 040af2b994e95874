import math
import unittest

from goldbergmesh.controller.icosahedron import (
    build_base_icosahedron, ICOSAHEDRON_CELLS, GOLDEN_RATIO
)
from goldbergmesh.controller.subdivision import subdivide
from goldbergmesh.model.geometry_primitives import Vector3, Triangle
from goldbergmesh.model.polyhedron import Polyhedron


class TestBaseIcosahedron(unittest.TestCase):
    def test_counts(self) -> None:
        base = build_base_icosahedron()
        self.assertEqual(base.position_count, 12)
        self.assertEqual(base.cell_count, 20)
        self.assertFalse(base.finalized)

    def test_connectivity_table(self) -> None:
        base = build_base_icosahedron()
        self.assertEqual(base.cell(0), Triangle(0, 11, 5))
        self.assertEqual(base.cell(19), Triangle(9, 8, 1))
        self.assertEqual([c.indices for c in base.cells], list(ICOSAHEDRON_CELLS))

    def test_vertices_are_unnormalized_golden_rectangles(self) -> None:
        base = build_base_icosahedron()
        self.assertEqual(base.position(0), Vector3(-1.0, GOLDEN_RATIO, 0.0))
        self.assertEqual(base.position(11), Vector3(-GOLDEN_RATIO, 0.0, 1.0))
        for p in base.positions:
            self.assertAlmostEqual(p.length_squared, 1.0 + GOLDEN_RATIO ** 2)

    def test_every_vertex_has_five_triangles(self) -> None:
        degree = [0] * 12
        for a, b, c in ICOSAHEDRON_CELLS:
            degree[a] += 1
            degree[b] += 1
            degree[c] += 1
        self.assertEqual(degree, [5] * 12)


class TestSubdivide(unittest.TestCase):
    def test_detail_zero_keeps_each_triangle(self) -> None:
        target = Polyhedron()
        added = subdivide(target, build_base_icosahedron(), 1.0, 0)

        self.assertEqual(added, 20)
        self.assertEqual(target.cell_count, 20)
        self.assertEqual(target.position_count, 12)

    def test_detail_one_counts(self) -> None:
        target = Polyhedron()
        subdivide(target, build_base_icosahedron(), 1.0, 1)

        self.assertEqual(target.cell_count, 80)
        # 12 corners + 30 edge midpoints, shared edges collapse through the cache
        self.assertEqual(target.position_count, 42)

    def test_growth_per_level(self) -> None:
        for detail in range(4):
            target = Polyhedron()
            subdivide(target, build_base_icosahedron(), 1.0, detail)
            self.assertEqual(target.cell_count, 20 * 4 ** detail)
            self.assertEqual(target.position_count, 10 * 4 ** detail + 2)

    def test_vertices_lie_on_sphere(self) -> None:
        radius = 2.5
        target = Polyhedron()
        subdivide(target, build_base_icosahedron(), radius, 2)
        for p in target.positions:
            self.assertTrue(math.isclose(p.magnitude, radius, rel_tol=1e-9))

    def test_single_triangle_grid(self) -> None:
        source = Polyhedron()
        a = source.add_position(Vector3(1.0, 0.0, 0.0))
        b = source.add_position(Vector3(0.0, 1.0, 0.0))
        c = source.add_position(Vector3(0.0, 0.0, 1.0))
        source.add_cell(Triangle(a, b, c))

        target = Polyhedron()
        added = subdivide(target, source, 1.0, 1)

        # 3 corners + 3 edge midpoints, 4 triangles
        self.assertEqual(added, 4)
        self.assertEqual(target.position_count, 6)
        first = target.cells[0]
        # First emitted triangle: (grid[0][1], grid[1][0], grid[0][0])
        self.assertEqual(target.position(first.c), Vector3(1.0, 0.0, 0.0))

    def test_source_is_not_modified(self) -> None:
        source = build_base_icosahedron()
        cells_before = source.cells
        subdivide(Polyhedron(), source, 1.0, 1)
        self.assertEqual(source.cells, cells_before)
        self.assertEqual(source.position_count, 12)


if __name__ == "__main__":
    unittest.main()
