"""Whole-image rendering: dividing the work between threads and writing the frame."""

from __future__ import annotations

import logging
import os
import random
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from runic.geometry import Vec3
from runic.render_target import RenderTarget
from runic.scene import Scene
from runic.settings import RenderingMode, RenderSettings
from runic.shading import RayGenerator, iterative_shoot_ray, shoot_ray, tone_map

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_BLACK = Vec3(0.0, 0.0, 0.0)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RayTracer:
    """Renders a scene seen through a ray generator into a render target."""

    def __init__(
        self,
        scene: Optional[Scene] = None,
        camera: Optional[RayGenerator] = None,
        settings: Optional[RenderSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.scene = scene
        self.camera = camera
        self.settings = settings if settings is not None else RenderSettings()
        self.rng = rng if rng is not None else random.Random()
        self.render_target = RenderTarget(self.settings.width, self.settings.height)
        logger.info("Init completed successfully!")

    def _require_ready(self) -> tuple[Scene, RayGenerator]:
        if self.camera is None:
            raise RuntimeError("Camera was not set. Rendering will not continue")
        if self.scene is None:
            raise RuntimeError("Scene was not set. Rendering will not continue")
        return self.scene, self.camera

    def _sync_resolution(self) -> None:
        wanted = (self.settings.width, self.settings.height)
        if (self.render_target.width, self.render_target.height) != wanted:
            self.render_target.resize(*wanted)

    def _render_pass(self, samples: int, seed: int) -> list[list[Vec3]]:
        """One full-frame pass of ``samples`` jittered rays per pixel, rows bottom-up."""
        scene, camera = self._require_ready()
        rng = random.Random(seed)
        width, height = self.settings.width, self.settings.height
        buffer = [[_BLACK] * width for _ in range(height)]
        for j in range(height - 1, -1, -1):
            row = buffer[j]
            for i in range(width):
                color = _BLACK
                if samples < 2:
                    ray = camera.get_ray(i / width, j / height)
                    color = color + shoot_ray(scene, ray, self.settings, 0)
                else:
                    for _ in range(samples):
                        u = (i + rng.uniform(-0.5, 0.5)) / width
                        v = (j + rng.uniform(-0.5, 0.5)) / height
                        ray = camera.get_ray(u, v)
                        color = color + shoot_ray(scene, ray, self.settings, 0)
                row[i] = color
        return buffer

    def _tone_map_into_target(self, buffer: list[list[Vec3]], samples: int) -> None:
        for j in range(self.settings.height - 1, -1, -1):
            for i in range(self.settings.width):
                self.render_target.draw(j, i, tone_map(buffer[j][i], samples))

    def render_split_samples(self) -> int:
        """Split the per-pixel samples between threads; returns elapsed milliseconds."""
        self._require_ready()
        self._sync_resolution()
        threads = self.settings.number_of_threads
        samples_per_thread = self.settings.samples_per_pixel // threads
        seeds = [self.rng.getrandbits(64) for _ in range(threads)]

        start = time.perf_counter()
        if threads == 1:
            buffers = [self._render_pass(samples_per_thread, seeds[0])]
        else:
            with ThreadPoolExecutor(max_workers=threads) as pool:
                futures = [
                    pool.submit(self._render_pass, samples_per_thread, seed)
                    for seed in seeds
                ]
                buffers = [future.result() for future in futures]
        elapsed = _elapsed_ms(start)

        for buffer in buffers:
            for j, row in enumerate(buffer):
                for i, color in enumerate(row):
                    self.render_target.accumulate(j, i, color)

        accumulated = [
            [self.render_target.get(j, i) for i in range(self.settings.width)]
            for j in range(self.settings.height)
        ]
        self._tone_map_into_target(accumulated, self.settings.samples_per_pixel)
        return elapsed

    def draw_scanline(self, samples: int, scan_line: int) -> list[Vec3]:
        """Summed colours of every pixel on row ``scan_line``, left to right."""
        scene, camera = self._require_ready()
        width = float(self.settings.width)
        height = float(self.settings.height)
        v = scan_line / height
        line = []
        for i in range(self.settings.width):
            u = i / width
            rays = 1 if samples < 2 else samples
            color = _BLACK
            for _ in range(rays):
                ray = camera.get_ray(u, v)
                color = color + iterative_shoot_ray(scene, ray, self.settings)
            line.append(color)
        return line

    def render_scanlines(self) -> int:
        """Hand whole rows to threads as they come free; returns elapsed milliseconds."""
        self._require_ready()
        self._sync_resolution()
        samples = self.settings.samples_per_pixel
        height = self.settings.height
        threads = self.settings.number_of_threads

        start = time.perf_counter()
        if threads == 1:
            buffer = [self.draw_scanline(samples, line) for line in range(height)]
        else:
            with ThreadPoolExecutor(max_workers=threads) as pool:
                buffer = list(
                    pool.map(lambda line: self.draw_scanline(samples, line), range(height))
                )
        elapsed = _elapsed_ms(start)

        self._tone_map_into_target(buffer, samples)
        return elapsed

    def render(self, path: PathLike = "frame") -> Path:
        """Render the scene and write it as ``<path>.png``; returns the file written."""
        self._require_ready()
        self._sync_resolution()
        s = self.settings
        logger.info("================ [Rendering] ================")
        logger.info("Resolution       : %dx%d", s.width, s.height)
        logger.info("Samples per Pixel: %d", s.samples_per_pixel)
        logger.info("Number of Bounces: %d", s.number_of_bounces)
        logger.info("Rendering Mode   : %s", s.rendering_mode_name())
        logger.info("Number of Threads: %d", s.number_of_threads)
        logger.info("=============================================")

        if s.rendering_mode == RenderingMode.SAMPLE_DISTRIBUTION:
            elapsed = self.render_split_samples()
        else:
            elapsed = self.render_scanlines()

        logger.info("Number of Threads    : %d", s.number_of_threads)
        logger.info("Total Elapsed Time   : %d [ms]", elapsed)
        return self.render_target.write_frame(path)