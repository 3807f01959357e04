# runic

A small path tracer with no third-party dependencies. Scenes are described
one shape per line in a plain text file; the tracer fires rays through a
simple camera, bounces them off diffuse, metallic, glass and light-emitting
surfaces, and writes the tone-mapped result as a PNG image. The frame
buffer can also be written as a plain-text PPM.

## Modules

- `runic.geometry` – `Vec3` (with `dot`, `cross`, `length`, `normalized`
  and the usual arithmetic), `Ray` (with `point_at`) and `HitRecord`.
- `runic.materials` – `Lambertian`, `Metal`, `Dielectric`,
  `DiffuseEmitter` and `MissingMaterial`, each with `scatter(ray_in, hit)`
  returning a `Scatter` or `None`, and `emitted(u, v, p)`. Also `reflect`,
  `refract`, `schlick`, `random_in_unit_sphere`, `make_material`,
  `random_material` and the `MaterialType` enum.
- `runic.shapes` – `Sphere`, axis-aligned `Rect` (`RectType.XY`, `XZ`,
  `YZ`) and `Triangle`, each with `hit(ray, t_min, t_max)` returning a
  `HitRecord` or `None`.
- `runic.shape_factory` – `make_shape(tokens)` turns one scene line into a
  shape with its material; `random_shape(seed_a, seed_b, rng)` makes a
  small random sphere in a grid cell.
- `runic.scene` – `Scene`, a list of shapes with `add`, `hit`, `load`,
  `reset`, `generate_random`, `len()` and iteration.
- `runic.render_target` – `RenderTarget`, the pixel buffer indexed
  `(y, x)` with row 0 at the bottom, with `draw`, `get`, `accumulate`,
  `clear`, `resize`, `+=`, `write_ppm`, `write_png` and `write_frame`;
  `encode_png` builds PNG bytes from raw RGB data.
- `runic.settings` – `RenderSettings` and `RenderingMode`.
- `runic.shading` – `RayGenerator` (the camera), `shoot_ray`,
  `iterative_shoot_ray` and `tone_map`.
- `runic.tracer` – `RayTracer`, which renders a whole image.

## Scene files

Each non-blank line names a shape, its geometry and then its material,
separated by whitespace:

```
SPHERE   x y z radius                         MATERIAL...
RECT     XY|XZ|YZ x y z length width normal   MATERIAL...
TRIANGLE x0 y0 z0 x1 y1 z1 x2 y2 z2 size      MATERIAL...
```

A rectangle is centred on `x y z`; its normal points along the positive
axis unless `normal` is negative. Any rectangle type other than `XY` or
`XZ` is taken as `YZ`. Triangle vertices are multiplied by `size`.

Materials:

```
LAMBERTIAN       r g b
METAL            r g b roughness      (roughness is capped at 1)
DIELECTRIC       refractive_index
DIFFUSE_EMITTER  r g b
```

Any other material name produces the hot-pink `MissingMaterial` (and an
error is logged), so a typo shows up in the image. An unknown shape name,
a missing material, or missing or malformed numbers raise `ValueError`.

## Rendering

The default `RayGenerator` sits at the origin and looks down the negative
z axis through a 2 × 2 image plane at z = -1. Given a file `scene.txt`:

```
RECT XZ 0 -0.5 -2 10 10 1 LAMBERTIAN 0.73 0.73 0.73
RECT XZ 0 1.5 -2 2 2 -1 DIFFUSE_EMITTER 4 4 4
SPHERE 0 0 -2 0.5 LAMBERTIAN 0.8 0.3 0.3
SPHERE 1 0 -2 0.4 METAL 0.8 0.85 0.88 0.1
```

render it with:

```python
from runic.scene import Scene
from runic.settings import RenderSettings
from runic.shading import RayGenerator
from runic.tracer import RayTracer

scene = Scene()
scene.load("scene.txt")

settings = RenderSettings(width=128, height=128, samples_per_pixel=32, number_of_threads=4)
tracer = RayTracer(scene, RayGenerator(), settings)
tracer.render("frame")  # writes frame.png and returns its path
```

`render` raises `RuntimeError` if the scene or camera is missing. It logs
the render parameters and the elapsed time through the standard `logging`
module, writes `<path>.png`, then clears the frame buffer.

There is no sky light: rays that miss every shape contribute black, so a
scene needs an emitter to show anything.

## Render settings

`RenderSettings` is a dataclass; invalid sizes, negative sample or bounce
counts and fewer than one thread raise `ValueError`.

| field               | default | meaning                                       |
|---------------------|---------|-----------------------------------------------|
| `width`, `height`   | 256     | resolution in pixels                          |
| `samples_per_pixel` | 256     | rays averaged into each pixel                 |
| `number_of_bounces` | 2       | maximum scattering depth per ray              |
| `number_of_threads` | 8       | worker threads                                |
| `rendering_mode`    | 1       | 1 = sample distribution, otherwise scanlines  |
| `flat_shading`      | False   | debug: stop after the first scatter           |
| `disable_shading`   | False   | debug: show material albedo only              |
| `tracing_mode`      | 0       | stored, not read by the tracer                |

In sample-distribution mode (`RayTracer.render_split_samples`) each thread
traces `samples_per_pixel // number_of_threads` jittered rays per pixel
with the recursive `shoot_ray`, and the passes are summed. In scanline mode
(`RayTracer.render_scanlines`) whole rows are handed to threads and traced
with `iterative_shoot_ray`, with no jitter; the two debug switches apply
only to the recursive tracer.

`tone_map` divides the summed colour by the sample count, takes the square
root as gamma correction and clamps each channel to 0–255.

## What this package does not do

- There is no command-line program or interactive shell; everything is
  driven from Python.
- There is no window or live preview; output goes to image files only.
- There is no configuration-file or console-variable system; settings are
  passed as a `RenderSettings` object.
- The camera is a fixed image plane (`RayGenerator`), with no look-at,
  field-of-view, aperture or focus controls.
- Mesh files such as Wavefront OBJ are not loaded; only the scene-line
  format above is read.