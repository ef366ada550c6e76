"""Mesh data containers, geometric primitives, mesh transforms, materials and SSAO sample data."""

__version__ = "0.1.0"

__all__ = [
    "builder",
    "flat",
    "materials",
    "mesh_data",
    "pixels",
    "shapes",
    "solids",
    "ssao",
    "transforms",
]