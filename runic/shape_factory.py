"""Build shapes, with their materials, from scene-description tokens."""

from __future__ import annotations

import random
from typing import Iterable, Iterator, Optional

from runic.geometry import Vec3
from runic.materials import make_material, random_material
from runic.shapes import Rect, RectType, Shape, Sphere, Triangle

_RECT_TYPES = {"XY": RectType.XY, "XZ": RectType.XZ}


def _take_floats(tokens: Iterator[str], count: int, kind: str) -> list[float]:
    values: list[float] = []
    for token in tokens:
        try:
            values.append(float(token))
        except ValueError:
            raise ValueError(f"{kind}: {token!r} is not a number") from None
        if len(values) == count:
            return values
    raise ValueError(f"{kind} needs {count} numeric parameters, got {len(values)}")


def make_shape(tokens: Iterable[str]) -> Shape:
    """Build a shape from a description such as ``SPHERE x y z size MATERIAL ...``.

    The shape's parameters come first, then the material description.
    Rectangle types other than XY and XZ are taken as YZ.
    Raises ValueError for unknown shapes and missing or malformed numbers.
    """
    it = iter(tokens)
    name = next(it, None)
    if name is None:
        raise ValueError("shape description is empty")

    shape: Shape
    if name == "SPHERE":
        x, y, z, size = _take_floats(it, 4, name)
        shape = Sphere(Vec3(x, y, z), size)
    elif name == "RECT":
        kind = next(it, None)
        if kind is None:
            raise ValueError("RECT needs a rectangle type")
        rect_type = _RECT_TYPES.get(kind, RectType.YZ)
        x, y, z, length, width, normal = _take_floats(it, 6, name)
        shape = Rect(rect_type, Vec3(x, y, z), length, width, int(normal))
    elif name == "TRIANGLE":
        v = _take_floats(it, 10, name)
        shape = Triangle(
            Vec3(v[0], v[1], v[2]),
            Vec3(v[3], v[4], v[5]),
            Vec3(v[6], v[7], v[8]),
            v[9],
        )
    else:
        raise ValueError(f"unknown shape {name!r}")

    shape.material = make_material(it)
    return shape


def random_shape(
    seed_a: int, seed_b: int, rng: Optional[random.Random] = None
) -> Optional[Sphere]:
    """A small sphere with a random material jittered within the grid cell (seed_a, seed_b).

    Returns None when the sphere would sit within 0.9 of the point (4, 0, 0).
    """
    rng = rng if rng is not None else random.Random()
    center = Vec3(seed_a + 0.9 * rng.random(), 0.2, seed_b + 0.9 * rng.random())
    if (center - Vec3(4.0, 0.0, 0.0)).length() > 0.9:
        return Sphere(center, 0.2, random_material(rng))
    return None