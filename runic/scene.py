"""A collection of shapes that rays are traced against."""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from runic.geometry import HitRecord, Ray
from runic.shape_factory import make_shape, random_shape
from runic.shapes import Shape

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class Scene:
    """Shapes to render, loadable from a text file with one shape per line."""

    def __init__(self, shapes: Optional[Iterable[Shape]] = None) -> None:
        self._shapes: list[Shape] = list(shapes) if shapes is not None else []

    def add(self, shape: Shape) -> None:
        """Add a shape to the scene."""
        self._shapes.append(shape)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """The closest hit along ``ray`` with ``t`` in range, or None."""
        closest = t_max
        result: Optional[HitRecord] = None
        for shape in self._shapes:
            record = shape.hit(ray, t_min, closest)
            if record is not None:
                closest = record.t
                result = record
        return result

    def load(self, path: PathLike) -> int:
        """Add the shapes described in the file at ``path``; returns how many were added.

        Blank lines are skipped; a malformed line raises ValueError.
        """
        logger.info("[SCENE] Opening Scene From %s...", os.fspath(path))
        count = 0
        with Path(path).open() as handle:
            for line in handle:
                tokens = line.split()
                if not tokens:
                    continue
                shape = make_shape(tokens)
                self._shapes.append(shape)
                logger.debug("%s", shape)
                count += 1
        logger.info("Done")
        return count

    def generate_random(self, rng: Optional[random.Random] = None) -> None:
        """Scatter small random spheres over a 20 x 20 grid of cells."""
        rng = rng if rng is not None else random.Random()
        for a in range(-10, 10):
            for b in range(-10, 10):
                shape = random_shape(a, b, rng)
                if shape is not None:
                    self._shapes.append(shape)

    def reset(self, path: PathLike = "") -> None:
        """Remove every shape, then load ``path`` if one is given."""
        self._shapes.clear()
        if os.fspath(path):
            self.load(path)
        else:
            logger.error("Scene was reset, but no new scene was loaded")

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self._shapes)