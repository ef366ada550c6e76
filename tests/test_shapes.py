import numpy as np
import pytest

from wickmesh import shapes
from wickmesh.flat import load_heightfield
from wickmesh.shapes import (
    Box,
    Capsule,
    Cone,
    Cylinder,
    Halfspace,
    HeightField,
    Plane,
    Sphere,
    load_geometry_object,
    load_heightfield_shape,
    load_primitive,
    plane_normal_offset,
)
from wickmesh.solids import load_cone_solid, load_cylinder_solid, load_uv_sphere_solid

COLOR = (0.2, 0.4, 0.6, 1.0)


def positions(mesh):
    return mesh.view_as(mesh.layout.dtype)["position"].astype(np.float64)


def test_plane_normal_offset_returns_fields():
    n, d = plane_normal_offset(Plane((0, 1, 0), 2.5))
    assert n == (0.0, 1.0, 0.0)
    assert d == 2.5
    n, d = plane_normal_offset(Halfspace((1, 0, 0), -1))
    assert n == (1.0, 0.0, 0.0)
    assert d == -1.0


def test_plane_normal_offset_rejects_other_shapes():
    with pytest.raises(TypeError):
        plane_normal_offset(Box((1, 1, 1)))


def test_box_extent_and_color():
    half = (1.0, 2.0, 3.0)
    mesh = load_primitive(Box(half), COLOR)
    pos = positions(mesh)
    assert np.allclose(pos.max(axis=0), 2.0 * np.array(half))
    assert np.allclose(pos.min(axis=0), -2.0 * np.array(half))
    assert mesh.material.base_color == COLOR
    assert mesh.num_indices == 36


def test_sphere_radius_scaling():
    radius = 2.0
    mesh = load_primitive(Sphere(radius), COLOR)
    norms = np.linalg.norm(positions(mesh), axis=1)
    assert np.allclose(norms, radius, atol=1e-5)
    assert mesh.num_vertices == load_uv_sphere_solid(8, 16).num_vertices


def test_capsule_extent():
    radius, half_length = 0.5, 1.0
    mesh = load_primitive(Capsule(radius, half_length), COLOR)
    z = positions(mesh)[:, 2]
    assert np.isclose(z.max(), radius * (1.0 + half_length), atol=1e-5)
    assert np.isclose(z.min(), -radius * (1.0 + half_length), atol=1e-5)


def test_cone_matches_solid_loader():
    mesh = load_primitive(Cone(0.3, 0.7), COLOR)
    ref = load_cone_solid(16, 0.3, 1.4)
    assert mesh.vertex_data == ref.vertex_data
    assert np.array_equal(mesh.indices, ref.indices)


def test_cylinder_matches_solid_loader():
    mesh = load_primitive(Cylinder(0.3, 0.7), COLOR)
    ref = load_cylinder_solid(6, 16, 0.3, 1.4)
    assert mesh.vertex_data == ref.vertex_data
    assert mesh.material.base_color == COLOR


def test_plane_z_up_is_scaled():
    mesh = load_primitive(Plane((0, 0, 1), 0.0), COLOR)
    pos = positions(mesh)
    assert np.allclose(pos[:, 2], 0.0)
    assert np.isclose(np.abs(pos[:, :2]).max(), shapes.PLANE_SCALE)


def test_plane_rotated_and_offset():
    d = 0.5
    mesh = load_primitive(Plane((1, 0, 0), d), COLOR)
    pos = positions(mesh)
    assert np.allclose(pos[:, 0], shapes.PLANE_SCALE * d, atol=1e-5)


def test_halfspace_same_as_plane():
    a = load_primitive(Plane((0, 1, 1), 0.2), COLOR)
    b = load_primitive(Halfspace((0, 1, 1), 0.2), COLOR)
    assert a.vertex_data == b.vertex_data


def test_load_primitive_rejects_unsupported():
    with pytest.raises(TypeError):
        load_primitive(HeightField(np.zeros((2, 2)), [0, 1], [0, 1]), COLOR)
    with pytest.raises(ValueError):
        load_primitive(Sphere(1.0), (1.0, 0.0))


def test_heightfield_shape_matches_loader():
    heights = np.arange(6, dtype=float).reshape(3, 2)
    xs, ys = [0.0, 1.0, 2.0], [0.0, 1.0]
    mesh = load_heightfield_shape(HeightField(heights, xs, ys))
    ref = load_heightfield(heights, xs, ys)
    assert mesh.vertex_data == ref.vertex_data
    assert np.array_equal(mesh.indices, ref.indices)


def test_heightfield_shape_mismatch():
    with pytest.raises(ValueError):
        load_heightfield_shape(HeightField(np.zeros((3, 2)), [0, 1], [0, 1]))


def test_geometry_object_scaled_sphere():
    meshes = load_geometry_object(Sphere(1.0), COLOR, (2.0, 2.0, 2.0))
    assert len(meshes) == 1
    norms = np.linalg.norm(positions(meshes[0]), axis=1)
    assert np.allclose(norms, 2.0, atol=1e-5)
    assert meshes[0].material.base_color == COLOR


def test_geometry_object_heightfield_colored():
    field = HeightField(np.ones((2, 2)), [0.0, 1.0], [0.0, 1.0])
    (mesh,) = load_geometry_object(field, COLOR, (1.0, 1.0, 3.0))
    assert mesh.material.base_color == COLOR
    assert np.allclose(positions(mesh)[:, 2], 3.0)


def test_geometry_object_unsupported():
    with pytest.raises(TypeError):
        load_geometry_object("mesh.obj", COLOR)