"""Material loading from assimp-style property maps, with Phong to PBR approximation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from wickmesh.mesh_data import PbrMaterial

Color4 = Tuple[float, float, float, float]

COLOR_DIFFUSE = "$clr.diffuse"
COLOR_AMBIENT = "$clr.ambient"
COLOR_SPECULAR = "$clr.specular"
COLOR_EMISSIVE = "$clr.emissive"
SHININESS = "$mat.shininess"
REFLECTIVITY = "$mat.reflectivity"
BASE_COLOR = "$clr.base"
METALLIC_FACTOR = "$mat.metallicFactor"
ROUGHNESS_FACTOR = "$mat.roughnessFactor"

_METALLIC_THRESHOLD = 0.2


def _color(value: Sequence[float]) -> Color4:
    c = tuple(float(v) for v in value)
    if len(c) == 3:
        return c + (1.0,)
    if len(c) != 4:
        raise ValueError("a color has 3 or 4 components")
    return c


@dataclass
class PhongMaterial:
    """Classic Phong material parameters."""

    diffuse: Color4 = (1.0, 1.0, 1.0, 1.0)
    ambient: Color4 = (0.0, 0.0, 0.0, 1.0)
    specular: Color4 = (0.0, 0.0, 0.0, 1.0)
    emissive: Color4 = (0.0, 0.0, 0.0, 1.0)
    shininess: float = 0.0
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        self.diffuse = _color(self.diffuse)
        self.ambient = _color(self.ambient)
        self.specular = _color(self.specular)
        self.emissive = _color(self.emissive)


class MaterialLoadError(RuntimeError):
    """Raised when a material cannot be read; ``code`` names the reason."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Failed to load material: return code {code}")
        self.code = code


def load_pbr_material(properties: Optional[Mapping]) -> PbrMaterial:
    """Read a PBR material; the base color is required."""
    if properties is None:
        raise MaterialLoadError("INVALID")
    if BASE_COLOR not in properties:
        raise MaterialLoadError("PBR_MISSING_BASE_COLOR")
    out = PbrMaterial(base_color=_color(properties[BASE_COLOR]))
    if METALLIC_FACTOR in properties:
        out.metalness = float(properties[METALLIC_FACTOR])
    if ROUGHNESS_FACTOR in properties:
        out.roughness = float(properties[ROUGHNESS_FACTOR])
    return out


def load_phong_material(properties: Optional[Mapping]) -> PhongMaterial:
    """Read a Phong material; the diffuse color is required."""
    if properties is None:
        raise MaterialLoadError("INVALID")
    if COLOR_DIFFUSE not in properties:
        raise MaterialLoadError("PHONG_MISSING_DIFFUSE")
    out = PhongMaterial(diffuse=properties[COLOR_DIFFUSE])
    if COLOR_AMBIENT in properties:
        out.ambient = _color(properties[COLOR_AMBIENT])
    if COLOR_SPECULAR in properties:
        out.specular = _color(properties[COLOR_SPECULAR])
    if COLOR_EMISSIVE in properties:
        out.emissive = _color(properties[COLOR_EMISSIVE])
    if SHININESS in properties:
        out.shininess = float(properties[SHININESS])
    if REFLECTIVITY in properties:
        out.reflectivity = float(properties[REFLECTIVITY])
    return out


def pbr_from_phong(phong: PhongMaterial) -> PbrMaterial:
    """Approximate a PBR material from a Phong one."""
    spec_rgb = phong.specular[:3]
    spec_avg = sum(spec_rgb) / 3.0
    spec_var = sum((s - spec_avg) ** 2 for s in spec_rgb)

    out = PbrMaterial()
    if spec_var > _METALLIC_THRESHOLD:
        out.metalness = 0.5
        out.base_color = tuple(phong.specular)
    else:
        out.metalness = 0.0
        out.base_color = tuple(c * (1.0 + spec_avg) for c in phong.diffuse)

    shininess = min(max(phong.shininess, 1.0), 1e3)
    out.roughness = math.sqrt(2.0 / (shininess + 2.0))
    out.ao = max(0.1, sum(phong.ambient[:3]) / 3.0)
    return out


def load_material(properties: Optional[Mapping]) -> PbrMaterial:
    """Load a PBR material, falling back to approximating one from Phong data."""
    try:
        return load_pbr_material(properties)
    except MaterialLoadError:
        pass
    return pbr_from_phong(load_phong_material(properties))