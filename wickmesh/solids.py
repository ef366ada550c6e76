"""Solid primitives: arrows, triads, capsules, cones, cylinders and UV spheres."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from wickmesh.builder import ConeCylinderBuilder
from wickmesh.mesh_data import MeshData, PrimitiveType
from wickmesh.transforms import apply_3d_transform_in_place, axis_angle


def _arrow_builder(
    shaft_length: float,
    shaft_radius: float,
    head_length: float,
    head_radius: float,
    segments: int,
) -> ConeCylinderBuilder:
    if segments < 1:
        raise ValueError("segments must be at least 1")
    builder = ConeCylinderBuilder()
    step = 2.0 * math.pi / float(segments)
    for i in range(segments + 1):
        a = i * step
        x, y = math.cos(a), math.sin(a)
        builder.add((x * shaft_radius, y * shaft_radius, 0.0), (x, y, 0.0))
        builder.add((x * shaft_radius, y * shaft_radius, shaft_length), (x, y, 0.0))
    for i in range(0, 2 * segments, 2):
        builder.add_face((i, i + 1, i + 2))
        builder.add_face((i + 1, i + 3, i + 2))
    builder.add_cone(segments, head_radius, shaft_length, head_length)
    return builder


def load_arrow_solid(
    include_normals: bool = False,
    shaft_length: float = 0.4,
    shaft_radius: float = 0.01,
    head_length: float = 0.1,
    head_radius: float = 0.02,
    segments: int = 32,
) -> MeshData:
    """Solid z-up arrow; vertices are 16 bytes (position) or 32 (position and normal)."""
    builder = _arrow_builder(shaft_length, shaft_radius, head_length, head_radius, segments)
    names, formats, offsets = ["pos"], [("<f4", (3,))], [0]
    if include_normals:
        names.append("normal")
        formats.append(("<f4", (3,)))
        offsets.append(16)
    dtype = np.dtype(
        {
            "names": names,
            "formats": formats,
            "offsets": offsets,
            "itemsize": 32 if include_normals else 16,
        }
    )
    vertices = np.zeros(builder.current_vertices, dtype=dtype)
    vertices["pos"] = np.asarray(builder.positions, dtype=np.float32)
    if include_normals:
        vertices["normal"] = np.asarray(builder.normals, dtype=np.float32)
    return MeshData.from_vertices(PrimitiveType.TRIANGLE_LIST, vertices, builder.indices)


def load_triad_solid(
    shaft_length: float = 0.4,
    shaft_radius: float = 0.01,
    head_length: float = 0.1,
    head_radius: float = 0.02,
    segments: int = 32,
) -> Tuple[MeshData, MeshData, MeshData]:
    """Red, green and blue arrows along the x, y and z axes."""
    z_axis = load_arrow_solid(
        False, shaft_length, shaft_radius, head_length, head_radius, segments
    )
    x_axis = z_axis.copy()
    y_axis = z_axis.copy()
    x_axis.material.base_color = (1.0, 0.0, 0.0, 1.0)
    y_axis.material.base_color = (0.0, 1.0, 0.0, 1.0)
    z_axis.material.base_color = (0.0, 0.0, 1.0, 1.0)
    apply_3d_transform_in_place(x_axis, axis_angle(0.5 * math.pi, (0.0, 1.0, 0.0)))
    apply_3d_transform_in_place(y_axis, axis_angle(0.5 * math.pi, (-1.0, 0.0, 0.0)))
    return x_axis, y_axis, z_axis


def _close_top(builder: ConeCylinderBuilder, segments: int, z: float) -> None:
    builder.add((0.0, 0.0, z), (0.0, 0.0, 1.0))
    count = builder.current_vertices
    start = count - segments - 1
    for i in range(segments):
        j = start + i
        builder.add_face((j, j + 1 if i != segments - 1 else start, count - 1))


def _open_bottom(builder: ConeCylinderBuilder, segments: int, z: float) -> None:
    builder.add((0.0, 0.0, z), (0.0, 0.0, -1.0))
    for j in range(segments):
        builder.add_face((0, j + 2 if j != segments - 1 else 1, j + 1))


def load_capsule_solid(hemisphere_rings: int, segments: int, length: float) -> MeshData:
    """Unit-radius capsule whose cylindrical part has the given length along z."""
    hemisphere_rings = max(2, hemisphere_rings)
    segments = max(3, segments)
    if length < 0.0:
        raise ValueError("capsule length must be non-negative")
    half = 0.5 * length
    ring_increment = math.pi / float(hemisphere_rings)

    builder = ConeCylinderBuilder()
    _open_bottom(builder, segments, -1.0 - half)
    builder.add_hemisphere_vertices(
        hemisphere_rings - 1, segments, -half, ring_increment - 0.5 * math.pi, ring_increment, 1
    )
    builder.add_cylinder_floors(
        2, segments, (1.0, -half), (0.0, length), builder.current_vertices
    )
    builder.add_hemisphere_vertices(
        hemisphere_rings - 1, segments, half, 0.0, ring_increment, builder.current_vertices
    )
    _close_top(builder, segments, 1.0 + half)
    return builder.to_mesh()


def load_cone_solid(segments: int, radius: float, length: float) -> MeshData:
    """Cone centred on the origin along z, tip pointing up."""
    builder = ConeCylinderBuilder()
    builder.add_cone(segments, radius, -0.5 * length, length)
    return builder.to_mesh()


def load_cylinder_solid(rings: int, segments: int, radius: float, height: float) -> MeshData:
    """Closed cylinder centred on the origin along z."""
    if rings < 1:
        raise ValueError("rings must be at least 1")
    half = 0.5 * height
    builder = ConeCylinderBuilder()
    builder.add_bottom_disk(segments, radius, -half)
    builder.add_cylinder_floors(rings, segments, (radius, -half), (0.0, height), 1)
    builder.add_top_disk(segments, radius, half)
    return builder.to_mesh()


def load_uv_sphere_solid(rings: int, segments: int) -> MeshData:
    """Unit sphere organized in bottom-up rings and segments around z."""
    if rings < 2:
        raise ValueError("rings must be at least 2")
    if segments < 1:
        raise ValueError("segments must be at least 1")
    ring_increment = math.pi / float(rings)
    builder = ConeCylinderBuilder()
    _open_bottom(builder, segments, -1.0)
    builder.add_hemisphere_vertices(
        rings - 1, segments, 0.0, ring_increment - 0.5 * math.pi, ring_increment, 1
    )
    _close_top(builder, segments, 1.0)
    return builder.to_mesh()