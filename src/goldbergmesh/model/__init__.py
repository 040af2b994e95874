"""
The MODEL layer contains the mesh data structures and their I/O.
It has NO knowledge of how the geometry is constructed.
"""
