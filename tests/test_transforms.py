import numpy as np
import pytest

from wickmesh.mesh_data import DEFAULT_VERTEX, MeshData, PrimitiveType, VertexAttrib
from wickmesh.transforms import (
    apply_3d_transform_in_place,
    axis_angle,
    generate_indices,
    merge_index_vertex_count,
    merge_meshes,
    rotation_from_two_vectors,
    scaling,
    translation,
    triangle_strip_indices,
)


def _mesh(n, indices=None, primitive=PrimitiveType.TRIANGLE_LIST, seed=0):
    rng = np.random.default_rng(seed)
    verts = np.zeros(n, dtype=DEFAULT_VERTEX)
    verts["pos"] = rng.uniform(-1, 1, (n, 3))
    verts["normal"] = (0.0, 0.0, 1.0)
    verts["tangent"] = (1.0, 0.0, 0.0)
    return MeshData.from_vertices(primitive, verts, indices)


def test_translation_moves_positions_only():
    mesh = _mesh(5)
    before = mesh.view_as(DEFAULT_VERTEX).copy()
    offset = np.array([0.5, -2.0, 3.0])
    apply_3d_transform_in_place(mesh, translation(offset))
    after = mesh.view_as(DEFAULT_VERTEX)
    assert np.allclose(after["pos"], before["pos"] + offset, atol=1e-6)
    assert np.array_equal(after["normal"], before["normal"])
    assert np.array_equal(after["color"], before["color"])


def test_nonuniform_scaling_keeps_normals_perpendicular():
    mesh = _mesh(4)
    apply_3d_transform_in_place(mesh, scaling([2.0, 3.0, 0.5]))
    normals = mesh.view_as(DEFAULT_VERTEX)["normal"]
    tangents = mesh.view_as(DEFAULT_VERTEX)["tangent"]
    assert np.allclose(normals[:, :2], 0.0)
    assert np.all(normals[:, 2] > 0)
    assert np.allclose(np.einsum("ij,ij->i", normals, tangents), 0.0)


def test_rotation_preserves_unit_normals():
    mesh = _mesh(6)
    apply_3d_transform_in_place(mesh, axis_angle(0.7, [1.0, 1.0, 0.0]))
    normals = mesh.view_as(DEFAULT_VERTEX)["normal"]
    assert np.allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-6)


def test_axis_angle_quarter_turn():
    r = axis_angle(np.pi / 2, [0.0, 0.0, 1.0])
    assert np.allclose(r[:3, :3] @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
    assert np.allclose(r[:3, :3] @ [0.0, 0.0, 1.0], [0.0, 0.0, 1.0])


@pytest.mark.parametrize(
    "a,b",
    [
        ([0, 0, 1], [1, 0, 0]),
        ([0, 0, 1], [0.3, -0.4, 2.0]),
        ([1, 2, 3], [1, 2, 3]),
        ([0, 0, 1], [0, 0, -1]),
        ([1, 1, 0], [-2, -2, 0]),
    ],
)
def test_rotation_from_two_vectors(a, b):
    r = rotation_from_two_vectors(a, b)[:3, :3]
    a = np.asarray(a, float) / np.linalg.norm(a)
    b = np.asarray(b, float) / np.linalg.norm(b)
    assert np.allclose(r @ a, b, atol=1e-6)
    assert np.allclose(r @ r.T, np.eye(3), atol=1e-9)
    assert np.isclose(np.linalg.det(r), 1.0)


def test_invalid_transform_inputs():
    with pytest.raises(ValueError):
        axis_angle(1.0, [0, 0, 0])
    with pytest.raises(ValueError):
        scaling([1.0, 2.0])
    with pytest.raises(ValueError):
        apply_3d_transform_in_place(_mesh(2), np.eye(2))


def test_triangle_strip_indices_pinned():
    assert triangle_strip_indices(4).tolist() == [0, 1, 2, 2, 1, 3]


@pytest.mark.parametrize("n", [0, 1, 2, 3, 7, 10])
def test_triangle_strip_indices_invariants(n):
    idx = triangle_strip_indices(n)
    tris = idx.reshape(-1, 3)
    assert len(tris) == max(n, 2) - 2
    for i, tri in enumerate(tris):
        assert set(tri.tolist()) == {i, i + 1, i + 2}


def test_generate_indices():
    strip = _mesh(6, primitive=PrimitiveType.TRIANGLE_STRIP)
    out = generate_indices(strip)
    assert out.primitive_type == PrimitiveType.TRIANGLE_LIST
    assert out.vertex_data == strip.vertex_data
    assert np.array_equal(out.indices, triangle_strip_indices(6))


def test_generate_indices_errors():
    with pytest.raises(ValueError):
        generate_indices(_mesh(4))
    with pytest.raises(ValueError):
        generate_indices(_mesh(3, [0, 1, 2], primitive=PrimitiveType.TRIANGLE_STRIP))


def test_merge_counts():
    a, b = _mesh(3), _mesh(5)
    assert merge_index_vertex_count([a, b]) == (0, 8)
    c, d = _mesh(3, [0, 1, 2]), _mesh(4, [0, 1, 2, 2, 1, 3])
    assert merge_index_vertex_count([c, d]) == (c.num_indices + d.num_indices, 7)


def test_merge_indexed_meshes():
    a = _mesh(3, [0, 1, 2], seed=1)
    b = _mesh(4, [0, 1, 2, 2, 1, 3], seed=2)
    merged = merge_meshes([a, b])
    assert merged.num_vertices == a.num_vertices + b.num_vertices
    assert merged.vertex_data == a.vertex_data + b.vertex_data
    assert np.array_equal(merged.indices[: a.num_indices], a.indices)
    assert np.array_equal(merged.indices[a.num_indices:], b.indices + a.num_vertices)


def test_merge_unindexed_meshes_stays_unindexed():
    merged = merge_meshes([_mesh(3, seed=1), _mesh(3, seed=2)])
    assert not merged.is_indexed
    assert merged.num_vertices == 6


def test_merge_mixed_meshes_generates_trivial_indices():
    a = _mesh(3, seed=1)
    b = _mesh(3, [2, 1, 0], seed=2)
    merged = merge_meshes([a, b])
    count, _ = merge_index_vertex_count([a, b])
    assert merged.num_indices == count
    assert np.array_equal(merged.indices[:3], np.arange(3))
    assert np.array_equal(merged.indices[3:], b.indices + 3)


def test_merge_errors():
    with pytest.raises(ValueError):
        merge_meshes([])
    with pytest.raises(ValueError):
        merge_meshes([_mesh(3), _mesh(3, primitive=PrimitiveType.LINE_LIST)])


def test_positions_stay_attribute_accessible():
    mesh = _mesh(2)
    apply_3d_transform_in_place(mesh, translation([1.0, 0.0, 0.0]))
    assert np.allclose(
        mesh.get_attribute(1, VertexAttrib.POSITION), mesh.view_as(DEFAULT_VERTEX)[1]["pos"]
    )