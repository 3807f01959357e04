"""A small path tracer that renders text-described scenes of spheres,
rectangles and triangles to PNG or PPM images."""

__version__ = "0.1.0"