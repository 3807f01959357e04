"""Surface materials: how rays scatter off and light leaves a surface."""

from __future__ import annotations

import enum
import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from runic.geometry import HitRecord, Ray, Vec3

logger = logging.getLogger(__name__)

_BLACK = Vec3(0.0, 0.0, 0.0)


class MaterialType(enum.Enum):
    """Kinds of material a scene description can name."""

    DIELECTRIC = "DIELECTRIC"
    METAL = "METAL"
    LAMBERTIAN = "LAMBERTIAN"
    DIFFUSE_EMITTER = "DIFFUSE_EMITTER"
    MISSING = "MISSING"


@dataclass(frozen=True)
class Scatter:
    """The outcome of a ray scattering off a surface."""

    attenuation: Vec3
    ray: Ray


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror ``v`` about the plane with normal ``n``."""
    return v - n * (2.0 * v.dot(n))


def refract(v: Vec3, n: Vec3, ni_over_nt: float) -> Optional[Vec3]:
    """Snell refraction of ``v`` through normal ``n``; None on total internal reflection."""
    uv = v.normalized()
    dt = uv.dot(n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant > 0:
        return (uv - n * dt) * ni_over_nt - n * math.sqrt(discriminant)
    return None


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation of the reflection probability."""
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


def random_in_unit_sphere(rng: random.Random) -> Vec3:
    """A uniformly distributed point strictly inside the unit sphere."""
    while True:
        p = Vec3(rng.random(), rng.random(), rng.random()) * 2.0 - Vec3(1.0, 1.0, 1.0)
        if p.dot(p) < 1.0:
            return p


class Material(ABC):
    """Base of all materials; ``albedo`` is the surface's base colour."""

    material_type: MaterialType

    def __init__(self, albedo: Vec3, rng: Optional[random.Random] = None) -> None:
        self.albedo = albedo
        self.rng = rng if rng is not None else random.Random()

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        """The scattered ray and its attenuation, or None if the ray is absorbed."""

    def emitted(self, u: float, v: float, p: Vec3) -> Vec3:
        """Light given off at surface coordinates (u, v); black by default."""
        return _BLACK

    def __repr__(self) -> str:
        return f"{type(self).__name__}(albedo={self.albedo!r})"


class Lambertian(Material):
    """Ideal diffuse surface."""

    material_type = MaterialType.LAMBERTIAN

    def __init__(self, r: float, g: float, b: float, rng: Optional[random.Random] = None) -> None:
        super().__init__(Vec3(r, g, b), rng)

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        target = hit.p + hit.normal + random_in_unit_sphere(self.rng)
        return Scatter(self.albedo, Ray(hit.p, target - hit.p))


class Metal(Material):
    """Reflective surface; roughness fuzzes the reflection and is capped at 1."""

    material_type = MaterialType.METAL

    def __init__(
        self,
        r: float,
        g: float,
        b: float,
        roughness: float,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(Vec3(r, g, b), rng)
        self.roughness = roughness if roughness < 1 else 1.0

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        reflected = reflect(ray_in.direction.normalized(), hit.normal)
        direction = reflected + random_in_unit_sphere(self.rng) * self.roughness
        if direction.dot(hit.normal) > 0:
            return Scatter(self.albedo, Ray(hit.p, direction))
        return None


class Dielectric(Material):
    """Transparent surface such as glass, which reflects or refracts."""

    material_type = MaterialType.DIELECTRIC

    def __init__(self, ref_idx: float, rng: Optional[random.Random] = None) -> None:
        super().__init__(Vec3(0.1, 0.1, 0.1), rng)
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        direction = ray_in.direction
        reflected = reflect(direction, hit.normal)
        d_dot_n = direction.dot(hit.normal)

        if d_dot_n > 0:
            outward_normal = -hit.normal
            ni_over_nt = self.ref_idx
            cosine = self.ref_idx * d_dot_n / direction.length()
        else:
            outward_normal = hit.normal
            ni_over_nt = 1.0 / self.ref_idx
            cosine = -d_dot_n / direction.length()

        refracted = refract(direction, outward_normal, ni_over_nt)
        reflect_probability = schlick(cosine, self.ref_idx) if refracted is not None else 1.0

        if refracted is None or self.rng.random() < reflect_probability:
            out = Ray(hit.p, reflected)
        else:
            out = Ray(hit.p, refracted)
        return Scatter(Vec3(1.0, 1.0, 1.0), out)


class DiffuseEmitter(Material):
    """Light source that emits its albedo and scatters nothing."""

    material_type = MaterialType.DIFFUSE_EMITTER

    def __init__(self, r: float, g: float, b: float) -> None:
        super().__init__(Vec3(r, g, b))

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        return None

    def emitted(self, u: float, v: float, p: Vec3) -> Vec3:
        return self.albedo


class MissingMaterial(Material):
    """Hot-pink stand-in for a material that could not be recognised."""

    material_type = MaterialType.MISSING

    def __init__(self) -> None:
        super().__init__(Vec3(1.0, 0.078, 0.576))

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[Scatter]:
        target = hit.p + hit.normal
        return Scatter(self.albedo, Ray(hit.p, target - hit.p))

    def emitted(self, u: float, v: float, p: Vec3) -> Vec3:
        return self.albedo


def _take_floats(tokens: Iterable[str], count: int, kind: str) -> list[float]:
    values = []
    for token in tokens:
        values.append(float(token))
        if len(values) == count:
            return values
    raise ValueError(f"{kind} needs {count} numeric parameters, got {len(values)}")


def make_material(tokens: Iterable[str]) -> Material:
    """Build a material from its name followed by its numeric parameters.

    Unknown names give a MissingMaterial; missing or malformed numbers raise ValueError.
    """
    it = iter(tokens)
    try:
        name = next(it)
    except StopIteration:
        raise ValueError("material description is empty") from None

    if name == MaterialType.LAMBERTIAN.value:
        return Lambertian(*_take_floats(it, 3, name))
    if name == MaterialType.METAL.value:
        return Metal(*_take_floats(it, 4, name))
    if name == MaterialType.DIELECTRIC.value:
        return Dielectric(*_take_floats(it, 1, name))
    if name == MaterialType.DIFFUSE_EMITTER.value:
        return DiffuseEmitter(*_take_floats(it, 3, name))

    logger.error("Missing material detected")
    return MissingMaterial()


def random_material(rng: Optional[random.Random] = None) -> Material:
    """Pick a random material: mostly diffuse, some metal, a little glass."""
    rng = rng if rng is not None else random.Random()
    choice = rng.random()
    if choice < 0.8:
        return Lambertian(
            rng.random() * rng.random(),
            rng.random() * rng.random(),
            rng.random() * rng.random(),
        )
    if choice < 0.95:
        return Metal(
            0.5 * (1 + rng.random()),
            0.5 * (1 + rng.random()),
            0.5 * (1 + rng.random()),
            0.5 * rng.random(),
        )
    return Dielectric(1.5)