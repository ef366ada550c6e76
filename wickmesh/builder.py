"""Incremental builder for revolved solids: disks, cylinder floors, cones and hemispheres."""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

from wickmesh.mesh_data import DEFAULT_VERTEX, MeshData, PrimitiveType

Vec3 = Tuple[float, float, float]


def _normalized(v: Sequence[float]) -> tuple:
    """Unit vector along ``v``; a zero vector is returned unchanged."""
    n = math.sqrt(sum(c * c for c in v))
    if n == 0.0:
        return tuple(float(c) for c in v)
    return tuple(float(c) / n for c in v)


def _angle_step(segments: int) -> float:
    if segments < 1:
        raise ValueError("segments must be at least 1")
    return 2.0 * math.pi / float(segments)


class ConeCylinderBuilder:
    """Accumulates positions, unit normals and triangle indices of a solid."""

    def __init__(self) -> None:
        self.positions: List[Vec3] = []
        self.normals: List[Vec3] = []
        self.indices: List[int] = []

    @property
    def current_vertices(self) -> int:
        return len(self.positions)

    def add(self, pos: Sequence[float], normal: Sequence[float]) -> None:
        """Append a vertex; the normal is normalized."""
        p = tuple(float(c) for c in pos)
        if len(p) != 3 or len(normal) != 3:
            raise ValueError("position and normal must have 3 components")
        self.positions.append(p)
        self.normals.append(_normalized(normal))

    def add_face(self, face: Sequence[int]) -> None:
        """Append one triangle given by three vertex indices."""
        if len(face) != 3:
            raise ValueError("a face has exactly 3 indices")
        self.indices.extend(int(i) for i in face)

    def previous_pos(self, offset: int) -> Vec3:
        """Position ``offset`` vertices back from the end (1 is the last)."""
        if not 1 <= offset <= len(self.positions):
            raise IndexError(f"offset {offset} out of range")
        return self.positions[-offset]

    def previous_normal(self, offset: int) -> Vec3:
        """Normal ``offset`` vertices back from the end (1 is the last)."""
        if not 1 <= offset <= len(self.normals):
            raise IndexError(f"offset {offset} out of range")
        return self.normals[-offset]

    def add_bottom_disk(self, segments: int, radius: float, z: float) -> None:
        """Downward-facing disk: a centre vertex followed by a ring."""
        step = _angle_step(segments)
        cap_idx = self.current_vertices
        self.add((0.0, 0.0, z), (0.0, 0.0, -1.0))
        for i in range(segments):
            a = i * step
            self.add((math.cos(a) * radius, math.sin(a) * radius, z), (0.0, 0.0, -1.0))
        last = cap_idx + segments - 1
        for i in range(cap_idx, cap_idx + segments):
            self.add_face((cap_idx, i + 2 if i != last else 1, i + 1))

    def add_top_disk(self, segments: int, radius: float, z: float) -> None:
        """Upward-facing disk: a ring followed by a centre vertex."""
        step = _angle_step(segments)
        for i in range(segments):
            a = i * step
            self.add((math.cos(a) * radius, math.sin(a) * radius, z), (0.0, 0.0, 1.0))
        self.add((0.0, 0.0, z), (0.0, 0.0, 1.0))

        count = self.current_vertices
        start = count - segments - 1
        for i in range(segments):
            j = start + i
            self.add_face((j, j + 1 if i != segments - 1 else start, count - 1))

    def add_cylinder_floors(
        self,
        num_floors: int,
        segments: int,
        base_point: Sequence[float],
        up_dir: Sequence[float],
        start_idx: int,
    ) -> None:
        """Stack rings of a surface of revolution, lacing each to the previous ring.

        ``base_point`` is (radius, z) of the first ring and ``up_dir`` the total
        (d_radius, d_z) spanned by all floors.
        """
        if num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        step = _angle_step(segments)
        du = float(up_dir[0]) / (num_floors - 1)
        dz = float(up_dir[1]) / (num_floors - 1)
        nr, nz = _normalized((dz, -du))
        radius, z = float(base_point[0]), float(base_point[1])

        for _ in range(num_floors):
            next_start = self.current_vertices
            for j in range(segments):
                a = j * step
                c, s = math.cos(a), math.sin(a)
                self.add((c * radius, s * radius, z), (c * nr, s * nr, nz))
            self._lace(segments, start_idx, next_start)
            start_idx = next_start
            radius += du
            z += dz

    def add_cone(self, segments: int, radius: float, z_bottom: float, length: float) -> None:
        """Cone with its base disk at ``z_bottom`` and its tip ``length`` above."""
        base_centre = self.current_vertices
        self.add_bottom_disk(segments, radius, z_bottom)
        self.add_cylinder_floors(
            2, segments, (radius, z_bottom), (-radius, length), base_centre + 1
        )

    def add_hemisphere_vertices(
        self,
        count: int,
        segments: int,
        z_center: float,
        ring_start: float,
        ring_increment: float,
        start_idx: int,
    ) -> None:
        """Add ``count`` unit-sphere rings at successive latitudes, lacing each to the previous."""
        step = _angle_step(segments)
        for i in range(count):
            ring_angle = ring_start + i * ring_increment
            x = math.cos(ring_angle)
            z = math.sin(ring_angle)
            next_start = self.current_vertices
            for j in range(segments):
                a = j * step
                c, s = math.cos(a), math.sin(a)
                self.add((x * c, x * s, z + z_center), (x * c, x * s, z))
            self._lace(segments, start_idx, next_start)
            start_idx = next_start

    def _lace(self, segments: int, bottom_start: int, top_start: int) -> None:
        for j in range(segments):
            last = j == segments - 1
            bl = j + bottom_start
            br = bottom_start if last else bl + 1
            tl = j + top_start
            tr = top_start if last else tl + 1
            self.add_face((bl, br, tl))
            self.add_face((tl, br, tr))

    def to_mesh(self) -> MeshData:
        """Triangle-list mesh of default vertices holding positions and normals."""
        vertices = np.zeros(self.current_vertices, dtype=DEFAULT_VERTEX)
        vertices["pos"] = np.asarray(self.positions, dtype=np.float32).reshape(-1, 3)
        vertices["normal"] = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        return MeshData.from_vertices(PrimitiveType.TRIANGLE_LIST, vertices, self.indices)