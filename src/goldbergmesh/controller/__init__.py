"""
The CONTROLLER layer builds polyhedra: base solid, subdivision, truncation
and normals. It should be pure Python and only write through the Polyhedron API.
"""
