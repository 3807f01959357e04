"""Tunable rendering parameters."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class RenderingMode(enum.IntEnum):
    """How work is divided between threads."""

    SAMPLE_DISTRIBUTION = 1
    SCAN_LINE_INTERLEAVE = 2


_MODE_NAMES = {
    RenderingMode.SAMPLE_DISTRIBUTION: "Sample Distribution",
    RenderingMode.SCAN_LINE_INTERLEAVE: "Scan Line Interleave",
}


def _setting(default, description: str):
    return field(default=default, metadata={"description": description})


@dataclass
class RenderSettings:
    """Resolution, sampling and shading options for a render."""

    width: int = _setting(256, "Internal width to render at e.g. 1024")
    height: int = _setting(256, "Internal height to render at e.g. 1024")
    samples_per_pixel: int = _setting(
        256, "Change the number of samples taken per pixel e.g. 32 64 128 256"
    )
    number_of_bounces: int = _setting(
        2, "Change the number of bounces allowed per ray e.g. 2 4 8 16"
    )
    flat_shading: bool = _setting(False, "Enable flat shading for debugging purposes")
    number_of_threads: int = _setting(
        8, "Change the number of threads to use while rendering e.g. 2 4 8 16"
    )
    rendering_mode: int = _setting(
        RenderingMode.SAMPLE_DISTRIBUTION, "Choose Rendering Mode 1) Normal 2) SLI"
    )
    disable_shading: bool = _setting(False, "Disable light transport shading")
    tracing_mode: int = _setting(0, "Toggle between recursive and iterative raytracing")

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"resolution must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel < 0:
            raise ValueError("samples_per_pixel must not be negative")
        if self.number_of_bounces < 0:
            raise ValueError("number_of_bounces must not be negative")
        if self.number_of_threads < 1:
            raise ValueError("number_of_threads must be at least 1")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def rendering_mode_name(self) -> str:
        """Human-readable name of the rendering mode, or ``UNKNOWN``."""
        try:
            return _MODE_NAMES[RenderingMode(self.rendering_mode)]
        except ValueError:
            return "UNKNOWN"