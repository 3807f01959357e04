"""Per-ray shading: turning a primary ray into a colour, and colours into pixels."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from runic.geometry import HitRecord, Ray, Vec3
from runic.settings import RenderSettings

if TYPE_CHECKING:
    from runic.scene import Scene

_BLACK = Vec3(0.0, 0.0, 0.0)
_WHITE = Vec3(1.0, 1.0, 1.0)

RECURSIVE_T_MIN = 0.001
ITERATIVE_T_MIN = 0.01


@dataclass(frozen=True)
class RayGenerator:
    """Maps screen coordinates (u, v) in [0, 1] to rays through an image plane.

    The plane spans ``lower_left`` to ``lower_left + horizontal + vertical``.
    """

    origin: Vec3 = field(default_factory=Vec3)
    lower_left: Vec3 = field(default_factory=lambda: Vec3(-1.0, -1.0, -1.0))
    horizontal: Vec3 = field(default_factory=lambda: Vec3(2.0, 0.0, 0.0))
    vertical: Vec3 = field(default_factory=lambda: Vec3(0.0, 2.0, 0.0))

    def get_ray(self, u: float, v: float) -> Ray:
        """The ray from the origin through the image-plane point at (u, v)."""
        target = self.lower_left + self.horizontal * u + self.vertical * v
        return Ray(self.origin, target - self.origin)


def _material_of(hit: HitRecord):
    if hit.material is None:
        raise ValueError("a shape without a material was hit")
    return hit.material


def shoot_ray(
    scene: "Scene", ray: Ray, settings: RenderSettings, depth: int = 0
) -> Vec3:
    """Colour seen along ``ray``, following scattered rays recursively.

    Rays that hit nothing are black; there is no ambient light.
    """
    hit = scene.hit(ray, RECURSIVE_T_MIN, math.inf)
    if hit is None:
        return _BLACK

    material = _material_of(hit)
    emitted = material.emitted(hit.u, hit.v, hit.p)

    if settings.disable_shading:
        return material.albedo

    if depth < settings.number_of_bounces:
        scattered = material.scatter(ray, hit)
        if scattered is not None:
            if settings.flat_shading:
                return emitted + scattered.attenuation
            return emitted + scattered.attenuation * shoot_ray(
                scene, scattered.ray, settings, depth + 1
            )
    return emitted


def iterative_shoot_ray(scene: "Scene", ray: Ray, settings: RenderSettings) -> Vec3:
    """Colour seen along ``ray``, following up to ``number_of_bounces`` hits in a loop."""
    color = _BLACK
    total_attenuation = _WHITE
    for _ in range(settings.number_of_bounces):
        hit = scene.hit(ray, ITERATIVE_T_MIN, sys.float_info.max)
        if hit is None:
            break
        material = _material_of(hit)
        color = color + material.emitted(hit.u, hit.v, hit.p) * total_attenuation
        scattered = material.scatter(ray, hit)
        if scattered is None:
            return color
        total_attenuation = total_attenuation * scattered.attenuation
        ray = scattered.ray
    return color


def _to_channel(value: float) -> int:
    gamma = math.sqrt(value) if value > 0 else 0.0
    return max(0, min(int(255.99 * gamma), 255))


def tone_map(color: Vec3, samples: int) -> Vec3:
    """Average ``color`` over ``samples``, gamma-correct it and clamp to 0..255."""
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    averaged = color / float(samples)
    return Vec3(*(_to_channel(channel) for channel in averaged))