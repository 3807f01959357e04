"""Renderable surfaces: spheres, axis-aligned rectangles and triangles."""

from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from typing import Optional

from runic.geometry import HitRecord, Ray, Vec3
from runic.materials import Material

EPSILON = 1e-8


class Shape(ABC):
    """A surface a ray can hit; ``material`` decides how it is shaded."""

    def __init__(self, material: Optional[Material] = None) -> None:
        self.material = material

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """The nearest intersection with ``t`` in range, or None."""


class Sphere(Shape):
    """A sphere given by its centre and radius."""

    def __init__(self, center: Vec3, radius: float, material: Optional[Material] = None) -> None:
        super().__init__(material)
        self.center = center
        self.radius = radius

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        oc = ray.origin - self.center
        a = ray.direction.dot(ray.direction)
        b = oc.dot(ray.direction)
        c = oc.dot(oc) - self.radius * self.radius
        discriminant = b * b - a * c
        if discriminant <= 0:
            return None
        root = math.sqrt(discriminant)
        for t in ((-b - root) / a, (-b + root) / a):
            if t_min < t < t_max:
                p = ray.point_at(t)
                return HitRecord(
                    t=t,
                    p=p,
                    normal=(p - self.center) / self.radius,
                    material=self.material,
                )
        return None

    def __str__(self) -> str:
        return f"[SPHERE] Position: {self.center.x:f} Radius: {int(self.radius)}"


class RectType(enum.Enum):
    """The plane an axis-aligned rectangle lies in."""

    XY = "XY"
    XZ = "XZ"
    YZ = "YZ"


class Rect(Shape):
    """An axis-aligned rectangle centred on ``position``.

    The normal points along the positive axis unless ``normal_direction`` is negative.
    """

    def __init__(
        self,
        rect_type: RectType,
        position: Vec3,
        length: float,
        width: float,
        normal_direction: int,
        material: Optional[Material] = None,
    ) -> None:
        super().__init__(material)
        self.rect_type = rect_type
        self.position = position
        self.length = length
        self.width = width
        self.normal_direction = normal_direction
        sign = -1.0 if normal_direction < 0 else 1.0
        half_l, half_w = length / 2, width / 2

        if rect_type is RectType.XY:
            self._span1 = (position.x - half_w, position.x + half_w)
            self._span2 = (position.y - half_l, position.y + half_l)
            self._depth = position.z
            self.normal = Vec3(0.0, 0.0, sign)
        elif rect_type is RectType.XZ:
            self._span1 = (position.x - half_l, position.x + half_l)
            self._span2 = (position.z - half_w, position.z + half_w)
            self._depth = position.y
            self.normal = Vec3(0.0, sign, 0.0)
        else:
            self._span1 = (position.y - half_w, position.y + half_w)
            self._span2 = (position.z - half_l, position.z + half_l)
            self._depth = position.x
            self.normal = Vec3(sign, 0.0, 0.0)

    def _axes(self, v: Vec3) -> tuple[float, float, float]:
        """(depth axis, first in-plane axis, second in-plane axis) of ``v``."""
        if self.rect_type is RectType.XY:
            return v.z, v.x, v.y
        if self.rect_type is RectType.XZ:
            return v.y, v.x, v.z
        return v.x, v.y, v.z

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        o_depth, o1, o2 = self._axes(ray.origin)
        d_depth, d1, d2 = self._axes(ray.direction)
        if d_depth == 0.0:
            return None
        t = (self._depth - o_depth) / d_depth
        if t < t_min or t > t_max:
            return None
        dim1 = o1 + t * d1
        dim2 = o2 + t * d2
        lo1, hi1 = self._span1
        lo2, hi2 = self._span2
        if dim1 < lo1 or dim1 > hi1 or dim2 < lo2 or dim2 > hi2:
            return None
        return HitRecord(
            t=t,
            p=ray.point_at(t),
            normal=self.normal,
            material=self.material,
            u=(dim1 - lo1) / (hi1 - lo1),
            v=(dim2 - lo2) / (hi2 - lo2),
        )

    def __str__(self) -> str:
        p = self.position
        return (
            f"[RECT] Length: {int(self.length)} Width: {int(self.width)} "
            f"Position: {p.x:f} {p.y:f} {p.z:f}"
        )


class Triangle(Shape):
    """A triangle whose vertices are scaled by ``size``; hit with Möller–Trumbore."""

    def __init__(
        self,
        v0: Vec3,
        v1: Vec3,
        v2: Vec3,
        size: float,
        material: Optional[Material] = None,
    ) -> None:
        super().__init__(material)
        self.v0 = v0 * size
        self.v1 = v1 * size
        self.v2 = v2 * size
        self.size = size
        self._edge_a = self.v1 - self.v0
        self._edge_b = self.v2 - self.v0
        self.normal = -self._edge_a.cross(self._edge_b).normalized()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        pvec = ray.direction.cross(self._edge_b)
        determinant = pvec.dot(self._edge_a)
        if abs(determinant) < EPSILON:
            return None
        inv = 1.0 / determinant

        tvec = ray.origin - self.v0
        u = tvec.dot(pvec) * inv
        if u < 0 or u > 1:
            return None

        qvec = tvec.cross(self._edge_a)
        v = ray.direction.dot(qvec) * inv
        if v < 0 or u + v > 1:
            return None

        t = self._edge_b.dot(qvec) * inv
        if t < t_min or t > t_max:
            return None

        return HitRecord(
            t=t,
            p=ray.point_at(t),
            normal=self.normal,
            material=self.material,
            u=u,
            v=v,
        )

    def __str__(self) -> str:
        return (
            f"Vertices: {self.v0.x:f},{self.v1.x:f},{self.v2.x:f}"
            f"Size: {self.size:g}"
        )