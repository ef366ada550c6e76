"""CPU-side mesh storage: vertex layouts, type-erased vertex blobs and read-only views."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

import numpy as np

INDEX_DTYPE = np.dtype("<u4")


class VertexAttrib(enum.IntEnum):
    """Semantic location of a vertex attribute."""

    POSITION = 0
    NORMAL = 1
    TANGENT = 2
    BITANGENT = 3
    COLOR0 = 4
    TEXCOORD0 = 5

    @property
    def field_name(self) -> str:
        return self.name.lower()


_FIELD_ALIASES = {
    "pos": VertexAttrib.POSITION,
    "position": VertexAttrib.POSITION,
    "normal": VertexAttrib.NORMAL,
    "tangent": VertexAttrib.TANGENT,
    "bitangent": VertexAttrib.BITANGENT,
    "color": VertexAttrib.COLOR0,
    "color0": VertexAttrib.COLOR0,
    "uv": VertexAttrib.TEXCOORD0,
    "texcoord": VertexAttrib.TEXCOORD0,
    "texcoord0": VertexAttrib.TEXCOORD0,
}


class PrimitiveType(enum.Enum):
    """Geometry primitive used to assemble vertices."""

    TRIANGLE_LIST = "triangle_list"
    TRIANGLE_STRIP = "triangle_strip"
    LINE_LIST = "line_list"
    LINE_STRIP = "line_strip"
    POINT_LIST = "point_list"


@dataclass
class PbrMaterial:
    """Physically based material parameters attached to a mesh."""

    base_color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    metalness: float = 0.0
    roughness: float = 1.0
    ao: float = 1.0

    def __post_init__(self) -> None:
        color = tuple(float(c) for c in self.base_color)
        if len(color) != 4:
            raise ValueError("base_color must have 4 components")
        self.base_color = color


@dataclass(frozen=True)
class VertexAttribute:
    """One attribute inside an interleaved vertex."""

    location: VertexAttrib
    offset: int
    components: int
    scalar: str = "<f4"

    def __post_init__(self) -> None:
        object.__setattr__(self, "location", VertexAttrib(self.location))
        if self.offset < 0 or self.components <= 0:
            raise ValueError("invalid attribute offset or component count")

    @property
    def size(self) -> int:
        return np.dtype(self.scalar).itemsize * self.components


@dataclass(frozen=True)
class MeshLayout:
    """Interleaved vertex layout: vertex stride and attribute descriptions."""

    vertex_size: int
    attributes: Tuple[VertexAttribute, ...] = ()

    def __post_init__(self) -> None:
        attrs = tuple(self.attributes)
        object.__setattr__(self, "attributes", attrs)
        if self.vertex_size <= 0:
            raise ValueError("vertex size must be positive")
        locations = [a.location for a in attrs]
        if len(set(locations)) != len(locations):
            raise ValueError("duplicate attribute locations in layout")
        for attr in attrs:
            if attr.offset + attr.size > self.vertex_size:
                raise ValueError(f"attribute {attr.location.name} exceeds vertex size")

    @property
    def index_size(self) -> int:
        return INDEX_DTYPE.itemsize

    @property
    def dtype(self) -> np.dtype:
        """Structured dtype describing one vertex of this layout."""
        return np.dtype(
            {
                "names": [a.location.field_name for a in self.attributes],
                "formats": [(a.scalar, (a.components,)) for a in self.attributes],
                "offsets": [a.offset for a in self.attributes],
                "itemsize": self.vertex_size,
            }
        )

    def get_attribute(self, attrib) -> Optional[VertexAttribute]:
        location = VertexAttrib(attrib)
        return next((a for a in self.attributes if a.location == location), None)

    def has_attribute(self, attrib) -> bool:
        return self.get_attribute(attrib) is not None


def layout_for(dtype) -> MeshLayout:
    """Build a layout from a structured numpy vertex dtype."""
    dt = np.dtype(dtype)
    if dt.names is None:
        raise TypeError("vertex dtype must be a structured dtype")
    attributes = []
    for name in dt.names:
        location = _FIELD_ALIASES.get(name.lower())
        if location is None:
            raise ValueError(f"unknown vertex field name: {name!r}")
        field_dtype, offset = dt.fields[name][:2]
        if field_dtype.subdtype is not None:
            base, shape = field_dtype.subdtype
            components = int(np.prod(shape))
        else:
            base, components = field_dtype, 1
        attributes.append(VertexAttribute(location, int(offset), components, base.str))
    return MeshLayout(dt.itemsize, tuple(attributes))


DEFAULT_VERTEX = np.dtype(
    {
        "names": ["pos", "normal", "color", "tangent"],
        "formats": [("<f4", (3,)), ("<f4", (3,)), ("<f4", (4,)), ("<f4", (3,))],
        "offsets": [0, 16, 32, 48],
        "itemsize": 64,
    }
)


def _as_indices(indices) -> np.ndarray:
    if indices is None:
        return np.zeros(0, dtype=INDEX_DTYPE)
    return np.array(indices, dtype=INDEX_DTYPE).reshape(-1)


class MeshData:
    """Owned mesh: raw interleaved vertex bytes, a layout, indices and a material."""

    def __init__(
        self,
        primitive_type,
        layout: MeshLayout,
        vertex_data=b"",
        indices=None,
        material: Optional[PbrMaterial] = None,
    ) -> None:
        data = bytearray(vertex_data)
        if len(data) % layout.vertex_size:
            raise ValueError("vertex data size is not a multiple of the vertex size")
        self.primitive_type = PrimitiveType(primitive_type)
        self.layout = layout
        self._vertex_data = data
        self.indices = _as_indices(indices)
        self.material = material if material is not None else PbrMaterial()

    @classmethod
    def from_vertices(cls, primitive_type, vertices, indices=None) -> "MeshData":
        """Build a mesh from a structured numpy array of vertices."""
        arr = np.ascontiguousarray(vertices)
        layout = layout_for(arr.dtype)
        return cls(primitive_type, layout, arr.tobytes(), indices)

    @property
    def num_vertices(self) -> int:
        return len(self._vertex_data) // self.layout.vertex_size

    @property
    def vertex_size(self) -> int:
        return self.layout.vertex_size

    @property
    def vertex_bytes(self) -> int:
        return len(self._vertex_data)

    @property
    def vertex_data(self) -> bytes:
        return bytes(self._vertex_data)

    @property
    def num_indices(self) -> int:
        return int(self.indices.size)

    @property
    def is_indexed(self) -> bool:
        return self.num_indices > 0

    def copy(self) -> "MeshData":
        return MeshData(
            self.primitive_type,
            self.layout,
            self._vertex_data,
            self.indices,
            dataclasses.replace(self.material),
        )

    def view_as(self, dtype) -> np.ndarray:
        """Writable view of the vertex bytes as an array of ``dtype``."""
        dt = np.dtype(dtype)
        if dt.itemsize != self.vertex_size:
            raise ValueError("dtype item size does not match the vertex size")
        if not self._vertex_data:
            return np.zeros(0, dtype=dt)
        return np.frombuffer(self._vertex_data, dtype=dt, count=self.num_vertices)

    def get_attribute(self, vertex_id: int, attrib) -> np.ndarray:
        """Writable view of one attribute of one vertex."""
        attr = self.layout.get_attribute(attrib)
        if attr is None:
            raise KeyError(f"Vertex attribute {int(attrib)} not found.")
        if not 0 <= vertex_id < self.num_vertices:
            raise IndexError(f"vertex index {vertex_id} out of range")
        return np.frombuffer(
            self._vertex_data,
            dtype=np.dtype(attr.scalar),
            count=attr.components,
            offset=vertex_id * self.vertex_size + attr.offset,
        )

    def __repr__(self) -> str:
        return (
            f"MeshData({self.primitive_type.name}, vertices={self.num_vertices}, "
            f"indices={self.num_indices})"
        )


class MeshDataView:
    """Read-only view onto mesh data owned elsewhere."""

    def __init__(self, primitive_type, layout: MeshLayout, vertex_data, indices=()) -> None:
        if isinstance(vertex_data, np.ndarray):
            vertex_data = np.ascontiguousarray(vertex_data).view(np.uint8).reshape(-1)
        view = memoryview(vertex_data)
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        if len(view) % layout.vertex_size:
            raise ValueError("vertex data size is not a multiple of the vertex size")
        idx = np.asarray(indices, dtype=INDEX_DTYPE).reshape(-1)
        idx.flags.writeable = False
        self.primitive_type = PrimitiveType(primitive_type)
        self.layout = layout
        self.vertex_data = view.toreadonly()
        self.indices = idx

    @classmethod
    def from_mesh(cls, mesh: MeshData) -> "MeshDataView":
        return cls(mesh.primitive_type, mesh.layout, memoryview(mesh._vertex_data), mesh.indices)

    @property
    def num_vertices(self) -> int:
        return len(self.vertex_data) // self.layout.vertex_size

    @property
    def num_indices(self) -> int:
        return int(self.indices.size)

    @property
    def is_indexed(self) -> bool:
        return self.num_indices > 0

    def to_owned(self) -> MeshData:
        return MeshData(
            self.primitive_type, self.layout, bytes(self.vertex_data), np.array(self.indices)
        )


def extract_materials(meshes: Iterable[MeshData]) -> list:
    """Copies of the materials of the given meshes, in order."""
    return [dataclasses.replace(m.material) for m in meshes]