"""Meshes for collision-geometry shapes: boxes, spheres, capsules, cones, cylinders,
planes, halfspaces and heightfields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

import numpy as np

from wickmesh.flat import load_cube_solid, load_heightfield, load_plane
from wickmesh.mesh_data import MeshData
from wickmesh.solids import (
    load_capsule_solid,
    load_cone_solid,
    load_cylinder_solid,
    load_uv_sphere_solid,
)
from wickmesh.transforms import (
    apply_3d_transform_in_place,
    rotation_from_two_vectors,
    scaling,
    translation,
)

PLANE_SCALE = 10.0

Vec3 = Tuple[float, float, float]


def _vec3(values: Sequence[float]) -> Vec3:
    v = tuple(float(c) for c in values)
    if len(v) != 3:
        raise ValueError("expected 3 components")
    return v


@dataclass(frozen=True)
class Box:
    """Axis-aligned box given by its half side lengths."""

    half_side: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "half_side", _vec3(self.half_side))


@dataclass(frozen=True)
class Sphere:
    radius: float


@dataclass(frozen=True)
class Capsule:
    """Capsule along z: a cylinder of ``2 * half_length`` capped by hemispheres."""

    radius: float
    half_length: float


@dataclass(frozen=True)
class Cone:
    radius: float
    half_length: float


@dataclass(frozen=True)
class Cylinder:
    radius: float
    half_length: float


@dataclass(frozen=True)
class Plane:
    """Plane ``n . x = d``."""

    n: Vec3
    d: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "n", _vec3(self.n))
        object.__setattr__(self, "d", float(self.d))


@dataclass(frozen=True)
class Halfspace:
    """Halfspace ``n . x <= d``."""

    n: Vec3
    d: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "n", _vec3(self.n))
        object.__setattr__(self, "d", float(self.d))


@dataclass(frozen=True, eq=False)
class HeightField:
    """Heights sampled on a grid; ``heights[i, j]`` sits at ``(x_grid[i], y_grid[j])``."""

    heights: np.ndarray
    x_grid: np.ndarray = field(default_factory=lambda: np.zeros(0))
    y_grid: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self) -> None:
        object.__setattr__(self, "heights", np.asarray(self.heights, dtype=np.float64))
        object.__setattr__(self, "x_grid", np.asarray(self.x_grid, dtype=np.float64).reshape(-1))
        object.__setattr__(self, "y_grid", np.asarray(self.y_grid, dtype=np.float64).reshape(-1))


Primitive = Union[Box, Sphere, Capsule, Cone, Cylinder, Plane, Halfspace]


def _color(color: Sequence[float]) -> Tuple[float, float, float, float]:
    c = tuple(float(v) for v in color)
    if len(c) != 4:
        raise ValueError("color must have 4 components")
    return c


def plane_normal_offset(geometry) -> Tuple[Vec3, float]:
    """Normal and offset of a plane or halfspace."""
    if isinstance(geometry, (Plane, Halfspace)):
        return geometry.n, geometry.d
    raise TypeError("expected a Plane or a Halfspace geometry")


def load_primitive(geometry: Primitive, color: Sequence[float]) -> MeshData:
    """Mesh for a primitive shape, with the given base color."""
    transform = np.eye(4)
    if isinstance(geometry, Box):
        transform = transform @ scaling(2.0 * np.asarray(geometry.half_side))
        mesh = load_cube_solid().to_owned()
    elif isinstance(geometry, Sphere):
        # the sphere loader has no radius argument, so scale instead
        transform = transform @ scaling(float(geometry.radius))
        mesh = load_uv_sphere_solid(8, 16)
    elif isinstance(geometry, Capsule):
        length = 2.0 * float(geometry.half_length)
        transform = transform @ scaling(float(geometry.radius))
        mesh = load_capsule_solid(6, 16, length)
    elif isinstance(geometry, Cone):
        mesh = load_cone_solid(16, float(geometry.radius), 2.0 * float(geometry.half_length))
    elif isinstance(geometry, Cylinder):
        mesh = load_cylinder_solid(
            6, 16, float(geometry.radius), 2.0 * float(geometry.half_length)
        )
    elif isinstance(geometry, (Plane, Halfspace)):
        mesh = load_plane().to_owned()
        n, d = plane_normal_offset(geometry)
        transform = (
            scaling(PLANE_SCALE)
            @ rotation_from_two_vectors((0.0, 0.0, 1.0), n)
            @ translation((0.0, 0.0, d))
        )
    else:
        raise TypeError("Unsupported geometry type.")
    mesh.material.base_color = _color(color)
    apply_3d_transform_in_place(mesh, transform)
    return mesh


def load_heightfield_shape(field: HeightField) -> MeshData:
    """Line mesh of a heightfield shape."""
    if not isinstance(field, HeightField):
        raise TypeError("expected a HeightField")
    return load_heightfield(field.heights, field.x_grid, field.y_grid)


def load_geometry_object(
    geometry, color: Sequence[float], scale: Sequence[float] = (1.0, 1.0, 1.0)
) -> List[MeshData]:
    """Meshes of one geometry object, colored and scaled by ``scale``."""
    if isinstance(geometry, HeightField):
        mesh = load_heightfield_shape(geometry)
        mesh.material.base_color = _color(color)
        meshes = [mesh]
    elif isinstance(geometry, (Box, Sphere, Capsule, Cone, Cylinder, Plane, Halfspace)):
        meshes = [load_primitive(geometry, color)]
    else:
        raise TypeError("Unsupported object type.")
    transform = scaling(np.asarray(_vec3(scale)))
    for mesh in meshes:
        apply_3d_transform_in_place(mesh, transform)
    return meshes