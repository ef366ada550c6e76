"""Affine transforms and whole-mesh operations: transform, index generation, merging."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np

from wickmesh.mesh_data import INDEX_DTYPE, MeshData, PrimitiveType, VertexAttrib

_EPS = 1e-6


def _as_affine(transform) -> np.ndarray:
    m = np.asarray(transform, dtype=np.float64)
    if m.shape == (3, 3):
        out = np.eye(4)
        out[:3, :3] = m
        return out
    if m.shape != (4, 4):
        raise ValueError("transform must be a 3x3 or 4x4 matrix")
    return m


def _vec3(v) -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError("expected a 3-vector")
    return arr


def translation(offset) -> np.ndarray:
    """4x4 affine translation matrix."""
    m = np.eye(4)
    m[:3, 3] = _vec3(offset)
    return m


def scaling(factors) -> np.ndarray:
    """4x4 scaling matrix from a scalar or a 3-vector of factors."""
    f = np.broadcast_to(np.asarray(factors, dtype=np.float64), (3,))
    return np.diag([f[0], f[1], f[2], 1.0])


def _rotation_from_quaternion(w: float, v: np.ndarray) -> np.ndarray:
    x, y, z = v
    r = np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )
    m = np.eye(4)
    m[:3, :3] = r
    return m


def axis_angle(angle: float, axis) -> np.ndarray:
    """4x4 rotation of ``angle`` radians about ``axis``."""
    a = _vec3(axis)
    norm = np.linalg.norm(a)
    if norm == 0:
        raise ValueError("rotation axis must be non-zero")
    a = a / norm
    half = 0.5 * angle
    return _rotation_from_quaternion(np.cos(half), np.sin(half) * a)


def rotation_from_two_vectors(a, b) -> np.ndarray:
    """4x4 rotation taking the direction of ``a`` onto the direction of ``b``."""
    v0, v1 = _vec3(a), _vec3(b)
    n0, n1 = np.linalg.norm(v0), np.linalg.norm(v1)
    if n0 == 0 or n1 == 0:
        raise ValueError("vectors must be non-zero")
    v0, v1 = v0 / n0, v1 / n1
    c = float(np.dot(v0, v1))
    if c < -1.0 + _EPS:
        c = max(c, -1.0)
        _, _, vt = np.linalg.svd(np.vstack([v0, v1]))
        axis = vt[2]
        w2 = (1.0 + c) * 0.5
        return _rotation_from_quaternion(np.sqrt(w2), axis * np.sqrt(1.0 - w2))
    axis = np.cross(v0, v1)
    s = np.sqrt((1.0 + c) * 2.0)
    return _rotation_from_quaternion(0.5 * s, axis / s)


def apply_3d_transform_in_place(mesh: MeshData, transform) -> None:
    """Transform positions by ``transform`` and normals/tangents by its normal matrix."""
    m = _as_affine(transform)
    linear, offset = m[:3, :3], m[:3, 3]
    if mesh.num_vertices == 0:
        return
    vertices = mesh.view_as(mesh.layout.dtype)

    def _xyz(attr):
        if attr.components < 3:
            raise ValueError(f"attribute {attr.location.name} has fewer than 3 components")
        return vertices[attr.location.field_name][:, :3]

    pos_attr = mesh.layout.get_attribute(VertexAttrib.POSITION)
    if pos_attr is not None:
        xyz = _xyz(pos_attr)
        xyz[...] = xyz.astype(np.float64) @ linear.T + offset

    dir_attrs = [
        a
        for a in (
            mesh.layout.get_attribute(VertexAttrib.NORMAL),
            mesh.layout.get_attribute(VertexAttrib.TANGENT),
        )
        if a is not None
    ]
    if dir_attrs:
        normal_matrix = np.linalg.inv(linear).T
        for attr in dir_attrs:
            xyz = _xyz(attr)
            xyz[...] = xyz.astype(np.float64) @ normal_matrix.T


def triangle_strip_indices(vertex_count: int) -> np.ndarray:
    """Triangle-list indices equivalent to a triangle strip of ``vertex_count`` vertices."""
    if vertex_count < 0:
        raise ValueError("vertex count must be non-negative")
    n = max(vertex_count, 2) - 2
    i = np.arange(n, dtype=INDEX_DTYPE)
    odd = (i % 2) == 1
    out = np.empty((n, 3), dtype=INDEX_DTYPE)
    out[:, 0] = np.where(odd, i + 1, i)
    out[:, 1] = np.where(odd, i, i + 1)
    out[:, 2] = i + 2
    return out.reshape(-1)


def generate_indices(mesh: MeshData) -> MeshData:
    """Convert an unindexed triangle strip into an indexed triangle list."""
    if mesh.primitive_type != PrimitiveType.TRIANGLE_STRIP:
        raise ValueError("only triangle strips are supported")
    if mesh.is_indexed:
        raise ValueError("mesh is already indexed")
    return MeshData(
        PrimitiveType.TRIANGLE_LIST,
        mesh.layout,
        mesh.vertex_data,
        triangle_strip_indices(mesh.num_vertices),
    )


def merge_index_vertex_count(meshes: Iterable[MeshData]) -> Tuple[int, int]:
    """Number of indices and vertices of the merged mesh."""
    index_count = vertex_count = 0
    for m in meshes:
        if m.is_indexed:
            if not index_count:
                index_count = vertex_count
            index_count += m.num_indices
        elif index_count:
            index_count += m.num_vertices
        vertex_count += m.num_vertices
    return index_count, vertex_count


def merge_meshes(meshes: Sequence[MeshData]) -> MeshData:
    """Merge meshes sharing a primitive type and layout into one consistently indexed mesh."""
    meshes = list(meshes)
    if not meshes:
        raise ValueError("cannot merge an empty list of meshes")
    primitive_type = meshes[0].primitive_type
    layout = meshes[0].layout
    for m in meshes:
        if m.primitive_type != primitive_type:
            raise ValueError("meshes have different primitive types")
        if m.layout != layout:
            raise ValueError("meshes have different layouts")

    index_count, _ = merge_index_vertex_count(meshes)
    pieces = []
    vtx_offset = 0
    for m in meshes:
        if m.is_indexed:
            pieces.append(m.indices.astype(np.int64) + vtx_offset)
        elif index_count:
            pieces.append(np.arange(vtx_offset, vtx_offset + m.num_vertices, dtype=np.int64))
        vtx_offset += m.num_vertices

    indices = (
        np.concatenate(pieces).astype(INDEX_DTYPE) if index_count else np.zeros(0, INDEX_DTYPE)
    )
    vertex_data = b"".join(m.vertex_data for m in meshes)
    return MeshData(primitive_type, layout, vertex_data, indices)