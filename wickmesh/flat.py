"""Flat and line primitives: cube, plane, tiled plane, line grid and heightfield."""

from __future__ import annotations

import numpy as np

from wickmesh.mesh_data import (
    DEFAULT_VERTEX,
    INDEX_DTYPE,
    MeshData,
    MeshDataView,
    PrimitiveType,
    layout_for,
)
from wickmesh.transforms import apply_3d_transform_in_place, merge_meshes, scaling, translation

POS_ONLY_VERTEX = np.dtype(
    {"names": ["pos"], "formats": [("<f4", (3,))], "offsets": [0], "itemsize": 16}
)


def _frozen_indices(values) -> np.ndarray:
    arr = np.array(values, dtype=INDEX_DTYPE)
    arr.setflags(write=False)
    return arr


_CUBE_INDICES = _frozen_indices(
    [
        0, 1, 2, 0, 2, 3,  # +Z
        4, 5, 6, 4, 6, 7,  # +X
        8, 9, 10, 8, 10, 11,  # +Y
        12, 13, 14, 12, 14, 15,  # -Z
        16, 17, 18, 16, 18, 19,  # -Y
        20, 21, 22, 20, 22, 23,  # -X
    ]
)

_CUBE_FACES = [
    ((0.0, 0.0, 1.0), [(-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1)]),
    ((1.0, 0.0, 0.0), [(1, -1, 1), (1, -1, -1), (1, 1, -1), (1, 1, 1)]),
    ((0.0, 1.0, 0.0), [(-1, 1, 1), (1, 1, 1), (1, 1, -1), (-1, 1, -1)]),
    ((0.0, 0.0, -1.0), [(1, -1, -1), (-1, -1, -1), (-1, 1, -1), (1, 1, -1)]),
    ((0.0, -1.0, 0.0), [(-1, -1, -1), (1, -1, -1), (1, -1, 1), (-1, -1, 1)]),
    ((-1.0, 0.0, 0.0), [(-1, -1, -1), (-1, -1, 1), (-1, 1, 1), (-1, 1, -1)]),
]


def _cube_vertex_bytes() -> bytes:
    vertices = np.zeros(24, dtype=DEFAULT_VERTEX)
    vertices["pos"] = [p for _, corners in _CUBE_FACES for p in corners]
    vertices["normal"] = [n for n, corners in _CUBE_FACES for _ in corners]
    return vertices.tobytes()


_CUBE_VERTICES = _cube_vertex_bytes()

# 3--1
# | /|
# |/ |
# 2--0
_PLANE_INDICES = _frozen_indices([0, 1, 2, 2, 1, 3])


def _plane_vertex_bytes() -> bytes:
    vertices = np.zeros(4, dtype=DEFAULT_VERTEX)
    vertices["pos"] = [(1, -1, 0), (1, 1, 0), (-1, -1, 0), (-1, 1, 0)]
    vertices["normal"] = (0.0, 0.0, 1.0)
    vertices["tangent"] = [(1, 0, 0), (0, 1, 0), (-1, 0, 0), (0, 1, 0)]
    return vertices.tobytes()


_PLANE_VERTICES = _plane_vertex_bytes()
_DEFAULT_LAYOUT = layout_for(DEFAULT_VERTEX)


def load_cube_solid() -> MeshDataView:
    """View of a cube spanning [-1, 1] on each axis, with per-face normals."""
    return MeshDataView(PrimitiveType.TRIANGLE_LIST, _DEFAULT_LAYOUT, _CUBE_VERTICES, _CUBE_INDICES)


def load_plane() -> MeshDataView:
    """View of a z-up square spanning [-1, 1] in x and y."""
    return MeshDataView(
        PrimitiveType.TRIANGLE_LIST, _DEFAULT_LAYOUT, _PLANE_VERTICES, _PLANE_INDICES
    )


def load_plane_tiled(scale: float, xrepeat: int, yrepeat: int, centered: bool = True) -> MeshData:
    """Plane made of ``xrepeat`` by ``yrepeat`` square tiles of side ``scale``."""
    if xrepeat < 1 or yrepeat < 1:
        raise ValueError("repeat counts must be at least 1")
    unit = load_plane().to_owned()
    # normalize to the unit square (0,0) -- (1,1)
    apply_3d_transform_in_place(unit, translation((0.5, 0.5, 0.0)) @ scaling(0.5))
    tiles = []
    for i in range(xrepeat):
        for j in range(yrepeat):
            tile = unit.copy()
            offset = translation((float(i) * scale, float(j) * scale, 0.0))
            apply_3d_transform_in_place(tile, offset @ scaling(scale))
            tiles.append(tile)
    out = merge_meshes(tiles)
    if centered:
        xc = 0.5 * scale * float(xrepeat)
        yc = 0.5 * scale * float(yrepeat)
        apply_3d_transform_in_place(out, translation((-xc, -yc, 0.0)))
    return out


def load_grid(xy_half_size: int, scale: float = 0.5) -> MeshData:
    """Square line grid in the xy plane, offset by ``xy_half_size * scale``."""
    if xy_half_size < 0:
        raise ValueError("grid half size must be non-negative")
    size = max(2 * xy_half_size, 1) - 1
    center = float(xy_half_size) * scale

    vertices = np.zeros(size * size, dtype=POS_ONLY_VERTEX)
    jj, ii = np.divmod(np.arange(size * size), size) if size else (np.zeros(0), np.zeros(0))
    vertices["pos"][:, 0] = ii * scale - center
    vertices["pos"][:, 1] = jj * scale - center

    indices = []
    for j in range(size):
        for i in range(size):
            k = j * size + i
            if i != size - 1:
                indices.extend((k, k + 1))
            if j != size - 1:
                indices.extend((k, k + size))
    return MeshData.from_vertices(PrimitiveType.LINE_LIST, vertices, indices)


def load_heightfield(heights, xgrid, ygrid) -> MeshData:
    """Line mesh of a heightfield; ``heights[i, j]`` sits at ``(xgrid[i], ygrid[j])``."""
    h = np.asarray(heights, dtype=np.float32)
    xs = np.asarray(xgrid, dtype=np.float32).reshape(-1)
    ys = np.asarray(ygrid, dtype=np.float32).reshape(-1)
    if h.ndim != 2:
        raise ValueError("heights must be a 2D array")
    nx, ny = h.shape
    if nx != xs.size or ny != ys.size:
        raise ValueError("heights shape does not match the grid sizes")
    if nx == 0 or ny == 0:
        raise ValueError("heightfield must not be empty")

    vertices = np.zeros(nx * ny, dtype=POS_ONLY_VERTEX)
    vertices["pos"][:, 0] = np.tile(xs, ny)
    vertices["pos"][:, 1] = np.repeat(ys, nx)
    vertices["pos"][:, 2] = h.T.reshape(-1)

    indices = []
    for jh in range(ny):
        for ih in range(nx):
            k = jh * nx + ih
            if ih != nx - 1:
                indices.extend((k, k + 1))
            if jh != ny - 1:
                indices.extend((k, k + nx))
    return MeshData.from_vertices(PrimitiveType.LINE_LIST, vertices, indices)