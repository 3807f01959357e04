"""An in-memory frame buffer that can be written out as PPM or PNG."""

from __future__ import annotations

import logging
import os
import struct
import zlib
from pathlib import Path
from typing import Union

from runic.geometry import Vec3

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_BLACK = Vec3(0.0, 0.0, 0.0)


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def encode_png(width: int, height: int, pixels: bytes) -> bytes:
    """Encode 8-bit RGB ``pixels`` (rows top to bottom) as a PNG file image."""
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    stride = width * 3
    if len(pixels) != stride * height:
        raise ValueError(
            f"expected {stride * height} bytes of RGB data, got {len(pixels)}"
        )
    raw = b"".join(
        b"\x00" + bytes(pixels[row * stride:(row + 1) * stride])
        for row in range(height)
    )
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        _PNG_SIGNATURE
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(raw))
        + _png_chunk(b"IEND", b"")
    )


def _to_byte(channel: float) -> int:
    return max(0, min(255, int(channel)))


class RenderTarget:
    """A height x width grid of colours, indexed as (y, x) with row 0 at the bottom."""

    DEFAULT_WIDTH = 200
    DEFAULT_HEIGHT = 100

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._setup(width, height)

    def _setup(self, width: int, height: int) -> None:
        if width == 0 or height == 0:
            width, height = self.DEFAULT_WIDTH, self.DEFAULT_HEIGHT
        if width < 0 or height < 0:
            raise ValueError(f"render target size must not be negative: {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._data = [[_BLACK] * self.width for _ in range(self.height)]

    @property
    def aspect_ratio(self) -> float:
        """Width over height, computed in whole numbers."""
        return float(self.width // self.height)

    def _check(self, y: int, x: int) -> None:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(
                f"pixel ({y}, {x}) outside {self.width}x{self.height} target"
            )

    def resize(self, width: int, height: int) -> None:
        """Reallocate the grid at a new size; all pixels become black."""
        logger.info("Resizing RenderTarget to: %d x %d", width, height)
        self._setup(width, height)

    def draw(self, y: int, x: int, color: Vec3) -> None:
        """Set the pixel at row ``y``, column ``x``."""
        self._check(y, x)
        self._data[y][x] = Vec3(*color)

    def get(self, y: int, x: int) -> Vec3:
        """The colour at row ``y``, column ``x``."""
        self._check(y, x)
        return self._data[y][x]

    def accumulate(self, y: int, x: int, color: Vec3) -> None:
        """Add ``color`` to the pixel at row ``y``, column ``x``."""
        self._check(y, x)
        self._data[y][x] = self._data[y][x] + color

    def clear(self) -> None:
        """Set every pixel to black."""
        for row in self._data:
            row[:] = [_BLACK] * self.width

    def _rows_top_down(self):
        return reversed(self._data)

    def write_ppm(self, path: PathLike) -> Path:
        """Write the frame as a plain-text PPM; an empty path means ``frame.ppm``."""
        target = Path(path) if str(path) else Path("frame.ppm")
        lines = [f"P3\n{self.width} {self.height}\n255\n"]
        for row in self._rows_top_down():
            lines.extend(f"{c.x:g} {c.y:g} {c.z:g}\n" for c in row)
        target.write_text("".join(lines))
        return target

    def write_png(self, path: PathLike) -> Path:
        """Write the frame as ``<path>.png`` and return the file written."""
        target = Path(f"{os.fspath(path)}.png")
        pixels = bytes(
            _to_byte(channel)
            for row in self._rows_top_down()
            for color in row
            for channel in color
        )
        target.write_bytes(encode_png(self.width, self.height, pixels))
        logger.info("File written to disk: %s", target)
        return target

    def write_frame(self, path: PathLike) -> Path:
        """Write the frame as PNG, then clear it."""
        written = self.write_png(path)
        self.clear()
        return written

    def __iadd__(self, other: "RenderTarget") -> "RenderTarget":
        if (other.width, other.height) != (self.width, self.height):
            raise ValueError(
                f"cannot add a {other.width}x{other.height} target "
                f"to a {self.width}x{self.height} target"
            )
        for mine, theirs in zip(self._data, other._data):
            mine[:] = [a + b for a, b in zip(mine, theirs)]
        return self