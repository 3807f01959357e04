import random

import pytest

from runic.materials import Dielectric, DiffuseEmitter, Lambertian, Metal, MissingMaterial
from runic.geometry import Vec3
from runic.shape_factory import make_shape, random_shape
from runic.shapes import Rect, RectType, Sphere, Triangle


class _FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_sphere_with_lambertian():
    shape = make_shape("SPHERE 1 2 3 4 LAMBERTIAN 0.5 0.25 0.75".split())
    assert isinstance(shape, Sphere)
    assert shape.center == Vec3(1.0, 2.0, 3.0)
    assert shape.radius == 4.0
    assert isinstance(shape.material, Lambertian)
    assert shape.material.albedo == Vec3(0.5, 0.25, 0.75)


@pytest.mark.parametrize(
    "kind, expected",
    [("XY", RectType.XY), ("XZ", RectType.XZ), ("YZ", RectType.YZ), ("QQ", RectType.YZ)],
)
def test_rect_types(kind, expected):
    shape = make_shape(f"RECT {kind} 0 1 2 10 20 1 DIELECTRIC 1.5".split())
    assert isinstance(shape, Rect)
    assert shape.rect_type is expected
    assert shape.position == Vec3(0.0, 1.0, 2.0)
    assert shape.length == 10.0
    assert shape.width == 20.0
    assert isinstance(shape.material, Dielectric)
    assert shape.material.ref_idx == 1.5


def test_rect_negative_normal_direction():
    shape = make_shape("RECT XY 0 0 5 2 2 -1 DIFFUSE_EMITTER 4 4 4".split())
    assert shape.normal_direction == -1
    assert shape.normal == Vec3(0.0, 0.0, -1.0)
    assert isinstance(shape.material, DiffuseEmitter)


def test_triangle_vertices_scaled_by_size():
    shape = make_shape("TRIANGLE 0 0 0 1 0 0 0 1 0 2 METAL 0.8 0.8 0.8 0.1".split())
    assert isinstance(shape, Triangle)
    assert shape.v0 == Vec3(0.0, 0.0, 0.0)
    assert shape.v1 == Vec3(2.0, 0.0, 0.0)
    assert shape.v2 == Vec3(0.0, 2.0, 0.0)
    assert isinstance(shape.material, Metal)


def test_unknown_material_gives_missing_material():
    shape = make_shape("SPHERE 0 0 0 1 PLASTIC".split())
    assert isinstance(shape.material, MissingMaterial)
    assert shape.material.albedo == Vec3(1.0, 0.078, 0.576)
    assert shape.radius == 1.0


@pytest.mark.parametrize(
    "description",
    [
        "",
        "CUBE 0 0 0 1 LAMBERTIAN 1 1 1",
        "SPHERE 0 0 0",
        "SPHERE 0 zero 0 1 LAMBERTIAN 1 1 1",
        "RECT",
        "TRIANGLE 0 0 0 1 0 0 LAMBERTIAN 1 1 1",
        "SPHERE 0 0 0 1",
    ],
)
def test_bad_descriptions_raise(description):
    with pytest.raises(ValueError):
        make_shape(description.split())


def test_random_shape_too_close_is_none():
    assert random_shape(4, 0, _FixedRandom(0.0)) is None


def test_random_shape_far_away_is_small_sphere():
    shape = random_shape(-10, -10, _FixedRandom(0.0))
    assert isinstance(shape, Sphere)
    assert shape.radius == pytest.approx(0.2)
    assert shape.center == Vec3(-10.0, 0.2, -10.0)
    assert isinstance(shape.material, Lambertian)


def test_random_shape_stays_in_its_cell():
    rng = random.Random(7)
    for a in range(-3, 3):
        for b in range(-3, 3):
            shape = random_shape(a, b, rng)
            if shape is None:
                continue
            assert a <= shape.center.x <= a + 0.9
            assert b <= shape.center.z <= b + 0.9
            assert shape.material is not None