# wickmesh

wickmesh prepares mesh data on the CPU for real-time renderers. It is built on numpy.

## What is in it

- `wickmesh.mesh_data` holds the mesh containers.
  - `MeshData` owns the vertex bytes. A `MeshLayout` describes those bytes as a vertex stride plus attributes keyed by `VertexAttrib`. A `MeshData` also carries a `PrimitiveType`, `uint32` indices and a `PbrMaterial`.
  - `MeshData.from_vertices` builds a mesh from a structured numpy array. The field names map to attributes: `pos`, `normal`, `tangent`, `color`, `uv` and so on.
  - `MeshData.view_as` and `MeshData.get_attribute` return writable numpy views into the vertex bytes.
  - `MeshData.copy` gives an independent copy.
  - `MeshDataView` is a read-only view. Build one with `MeshDataView.from_mesh` and turn it back into an owned mesh with `to_owned()`.
  - `layout_for(dtype)` derives a layout from a structured dtype.
  - `extract_materials` copies the materials of a list of meshes.
- `wickmesh.transforms` works on whole meshes.
  - `translation`, `scaling`, `axis_angle` and `rotation_from_two_vectors` build 4×4 matrices.
  - `apply_3d_transform_in_place` transforms positions by the matrix. It transforms normals and tangents by the inverse-transpose of the matrix's linear part.
  - `triangle_strip_indices` and `generate_indices` turn an unindexed triangle strip into an indexed triangle list.
  - `merge_meshes` joins meshes that share a primitive type and layout into one consistently indexed mesh. `merge_index_vertex_count` gives the index and vertex counts of the merged mesh.
- `wickmesh.solids` builds solid primitives.
  - `load_arrow_solid` and `load_triad_solid` build arrows. The triad is three arrows: x in red, y in green and z in blue.
  - `load_capsule_solid`, `load_cone_solid`, `load_cylinder_solid` and `load_uv_sphere_solid` build the other solids.
  - All of them are made with `wickmesh.builder.ConeCylinderBuilder`.
- `wickmesh.flat` builds flat and line primitives.
  - `load_cube_solid` and `load_plane` return read-only `MeshDataView`s.
  - `load_plane_tiled` returns a plane made of tiles.
  - `load_grid` and `load_heightfield` return line-list meshes.
- `wickmesh.materials` reads materials from property maps keyed like assimp's, such as `"$clr.base"`, `"$clr.diffuse"` and `"$mat.shininess"`.
  - `load_material` tries to read PBR properties first.
  - If that fails, it reads Phong properties and approximates PBR with `pbr_from_phong`.
  - When neither can be read it raises `MaterialLoadError`. The error's `code` attribute names the reason.
- `wickmesh.shapes` turns collision-shape descriptions into meshes.
  - The shapes are `Box`, `Sphere`, `Capsule`, `Cone`, `Cylinder`, `Plane`, `Halfspace` and `HeightField`.
  - `load_primitive` meshes one of the primitive shapes; `load_heightfield_shape` meshes a `HeightField`. `load_geometry_object` applies a color and a per-axis scale and returns a list of meshes.
  - Planes and half-spaces become a square of side 20, rotated to face the shape's normal.
- `wickmesh.ssao` generates data for screen-space ambient occlusion.
  - `generate_ssao_kernel` builds the sample kernel and `generate_noise_values` builds half-float noise vectors.
  - Both take an optional `rng`, which can be a numpy Generator or a seed.
- `wickmesh.pixels.bgra_to_rgba` swaps the red and blue channels of packed 32-bit pixels. It accepts bytes or integer arrays.

## Installation

```
pip install wickmesh
```

## Examples

Build two primitives and merge them:

```python
from wickmesh.solids import load_uv_sphere_solid, load_cone_solid
from wickmesh.transforms import apply_3d_transform_in_place, translation, merge_meshes

sphere = load_uv_sphere_solid(8, 16)
cone = load_cone_solid(16, 0.5, 1.0)
apply_3d_transform_in_place(cone, translation([0.0, 0.0, 2.0]))

merged = merge_meshes([sphere, cone])
print(merged.num_vertices, merged.num_indices)
```

Read a vertex attribute back as a numpy view:

```python
from wickmesh.mesh_data import VertexAttrib

position = merged.get_attribute(0, VertexAttrib.POSITION)
```

Turn a collision shape into a mesh:

```python
from wickmesh.shapes import Box, load_primitive

mesh = load_primitive(Box(half_side=(0.5, 0.5, 1.0)), color=(1.0, 0.0, 0.0, 1.0))
```

Approximate a PBR material from Phong properties:

```python
from wickmesh.materials import load_material

material = load_material({"$clr.diffuse": (0.8, 0.2, 0.2), "$mat.shininess": 32.0})
```

Swap the channels of packed BGRA pixels to get RGBA:

```python
from wickmesh.pixels import bgra_to_rgba

rgba = bgra_to_rgba([0xFF0000FF])
```

## What it does not do

wickmesh only produces and changes mesh data in memory.

- It does not read model files. Material loading works on property maps you supply.
- It does not create GPU buffers, upload meshes or draw anything.
- It does not open windows or record images or video.
- It has no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```