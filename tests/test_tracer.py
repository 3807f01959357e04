import random

import pytest

from runic.geometry import Vec3
from runic.materials import DiffuseEmitter
from runic.scene import Scene
from runic.settings import RenderingMode, RenderSettings
from runic.shading import RayGenerator
from runic.shapes import Rect, RectType
from runic.tracer import RayTracer

BLACK = Vec3(0.0, 0.0, 0.0)


def emitter_wall():
    return Scene([
        Rect(RectType.XY, Vec3(0.0, 0.0, -2.0), 100.0, 100.0, 1, DiffuseEmitter(1.0, 1.0, 1.0))
    ])


def right_half_wall():
    return Scene([
        Rect(RectType.XY, Vec3(50.0, 0.0, -2.0), 100.0, 100.0, 1, DiffuseEmitter(1.0, 1.0, 1.0))
    ])


def make_tracer(scene, **kwargs):
    settings = RenderSettings(**kwargs)
    return RayTracer(scene, RayGenerator(), settings, random.Random(7))


def all_pixels(tracer):
    t = tracer.render_target
    return [t.get(j, i) for j in range(t.height) for i in range(t.width)]


def test_draw_scanline_sums_samples():
    tracer = make_tracer(emitter_wall(), width=4, height=3, samples_per_pixel=3)
    line = tracer.draw_scanline(3, 1)
    assert line == [Vec3(3.0, 3.0, 3.0)] * 4


def test_draw_scanline_with_zero_samples_fires_one_ray():
    tracer = make_tracer(emitter_wall(), width=5, height=2)
    line = tracer.draw_scanline(0, 0)
    assert line == [Vec3(1.0, 1.0, 1.0)] * 5


def test_draw_scanline_empty_scene_is_black():
    tracer = make_tracer(Scene(), width=3, height=2)
    assert tracer.draw_scanline(4, 1) == [BLACK] * 3


@pytest.mark.parametrize("threads", [1, 3])
def test_render_scanlines_fills_white(threads):
    tracer = make_tracer(
        emitter_wall(), width=4, height=3, samples_per_pixel=2, number_of_threads=threads
    )
    elapsed = tracer.render_scanlines()
    assert elapsed >= 0
    assert all_pixels(tracer) == [Vec3(255, 255, 255)] * 12


def test_render_scanlines_half_lit():
    tracer = make_tracer(right_half_wall(), width=4, height=2, samples_per_pixel=1,
                         number_of_threads=1)
    tracer.render_scanlines()
    target = tracer.render_target
    for j in range(2):
        assert target.get(j, 0) == BLACK
        assert target.get(j, 3) == Vec3(255, 255, 255)


@pytest.mark.parametrize("threads", [1, 2])
def test_render_split_samples_fills_white(threads):
    tracer = make_tracer(
        emitter_wall(), width=3, height=2, samples_per_pixel=4, number_of_threads=threads
    )
    tracer.render_split_samples()
    assert all_pixels(tracer) == [Vec3(255, 255, 255)] * 6


def test_render_split_samples_empty_scene_black():
    tracer = make_tracer(Scene(), width=3, height=2, samples_per_pixel=2, number_of_threads=2)
    tracer.render_split_samples()
    assert all_pixels(tracer) == [BLACK] * 6


def test_render_split_samples_zero_samples_raises():
    tracer = make_tracer(emitter_wall(), width=2, height=2, samples_per_pixel=0,
                         number_of_threads=1)
    with pytest.raises(ValueError):
        tracer.render_split_samples()


def test_render_writes_png_and_clears(tmp_path):
    tracer = make_tracer(emitter_wall(), width=3, height=2, samples_per_pixel=2,
                         number_of_threads=1)
    written = tracer.render(tmp_path / "frame")
    assert written == tmp_path / "frame.png"
    assert written.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert all_pixels(tracer) == [BLACK] * 6


def test_render_scan_line_mode(tmp_path):
    tracer = make_tracer(
        emitter_wall(), width=2, height=2, samples_per_pixel=1, number_of_threads=2,
        rendering_mode=RenderingMode.SCAN_LINE_INTERLEAVE,
    )
    written = tracer.render(tmp_path / "sli")
    assert written.name == "sli.png"
    assert written.exists()


def test_render_resizes_target(tmp_path):
    tracer = make_tracer(emitter_wall(), width=3, height=2, samples_per_pixel=1,
                         number_of_threads=1)
    tracer.settings.width = 5
    tracer.settings.height = 4
    tracer.render(tmp_path / "out")
    assert (tracer.render_target.width, tracer.render_target.height) == (5, 4)


def test_render_without_scene_raises(tmp_path):
    tracer = RayTracer(None, RayGenerator(), RenderSettings(width=2, height=2))
    with pytest.raises(RuntimeError):
        tracer.render(tmp_path / "x")


def test_render_without_camera_raises():
    tracer = RayTracer(emitter_wall(), None, RenderSettings(width=2, height=2))
    with pytest.raises(RuntimeError):
        tracer.render_scanlines()