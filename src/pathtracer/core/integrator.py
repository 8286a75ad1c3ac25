"""Path tracing integrator for Monte Carlo light transport.

This module resolves the color seen along a ray by following scatter events
through the world:

    1. Intersect the world over (T_MIN, T_MAX); T_MIN > 0 avoids a scattered
       ray re-hitting the surface it left.
    2. On a miss, the ray sees the sky: a vertical gradient from white at
       the horizon-down to sky blue straight up.
    3. On a hit, the material scatters the ray. An absorbed ray, or a hit at
       the bounce limit, contributes black. Otherwise the path continues with
       its throughput multiplied by the material's attenuation.

The recursion color(r) = attenuation * color(scattered) is evaluated as a
loop carrying the attenuation product, bounded by max_depth.

Each pixel averages jittered samples, is gamma corrected with a square root,
and is quantized to 8 bits as int(c * 255.99), with a constant alpha of 255.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.camera.camera import Camera, setup_camera
    >>> from pathtracer.core.integrator import (
    ...     accumulate_samples, resolve_pixels, setup_render_target
    ... )
    >>> setup_camera(Camera.default())
    >>> setup_render_target(400, 200)
    >>> accumulate_samples(num_samples=50)
    >>> pixels = resolve_pixels()  # 400 * 200 * 4 bytes
"""

import taichi as ti

from pathtracer.camera.camera import get_ray_jittered, is_camera_initialized
from pathtracer.core.ray import Ray
from pathtracer.core.vector import unit_vector, vec3
from pathtracer.materials.lambertian import get_lambertian_albedo, scatter_lambertian
from pathtracer.materials.metal import get_metal_albedo, get_metal_fuzz, scatter_metal
from pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)
from pathtracer.scene.world import T_INFINITY, intersect_world

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum number of scatter events along a path
DEFAULT_MAX_DEPTH = 50

# t_min and t_max for ray intersection
T_MIN = 1e-4
T_MAX = T_INFINITY

# Sky gradient endpoints
WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# 8-bit quantization scale
QUANTIZE_SCALE = 255.99

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color sum, indexed [i, j] with j = 0 at the bottom row
_color_sum = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# RGBA output, indexed [row, column, channel] with row 0 at the top
_pixels = ti.field(dtype=ti.u8, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, 4))

# Samples accumulated into every pixel so far
_samples_taken = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target for an image size and clear it.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulated samples and pixels."""
    _color_sum.fill(0.0)
    _pixels.fill(0)
    _samples_taken[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Raise if the render target has not been set up."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_total_samples() -> int:
    """Get the number of samples accumulated into every pixel so far."""
    _check_render_target_initialized()
    return int(_samples_taken[None])


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    """Sky color for a ray that escapes the world.

    Blends white and sky blue by t = 0.5 * (unit(direction).y + 1), so a
    ray straight up sees pure sky blue and a horizontal ray sees the midpoint.
    """
    t = 0.5 * (unit_vector(direction).y + 1.0)
    return (1.0 - t) * WHITE + t * SKY_BLUE


@ti.func
def _scatter_material(material_id: ti.i32, incident_direction: vec3, normal: vec3):
    """Dispatch to the scatter function of the hit material.

    Args:
        material_id: The unified material ID.
        incident_direction: The incoming ray direction.
        normal: The unit outward normal at the hit point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is 0 when the ray is absorbed.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = get_lambertian_albedo(type_index)
        scattered_direction, attenuation = scatter_lambertian(albedo, normal)
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        albedo = get_metal_albedo(type_index)
        fuzz = get_metal_fuzz(type_index)
        scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, fuzz, incident_direction, normal
        )

    return scattered_direction, attenuation, did_scatter


@ti.func
def radiance(ray: Ray, max_depth: ti.i32) -> vec3:
    """Estimate the color arriving along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of scatter events. A hit when max_depth
            scatters have already happened contributes black; max_depth = 0
            means any hit is black and only sky is visible.

    Returns:
        The estimated color (RGB).
    """
    origin = ray.origin
    direction = ray.direction

    color = vec3(0.0, 0.0, 0.0)
    # Product of attenuations along the path so far
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation
    active = 1

    for depth in range(max_depth + 1):
        if active == 1:
            rec = intersect_world(origin, direction, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = _scatter_material(
                    rec.material_id, direction, rec.normal
                )

                if did_scatter == 0 or depth >= max_depth:
                    # Absorbed or out of bounces: the path carries no light
                    active = 0
                else:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction

    return color


@ti.func
def gamma_correct(color: vec3) -> vec3:
    """Apply gamma 2 correction (square root per channel)."""
    return vec3(ti.sqrt(color.x), ti.sqrt(color.y), ti.sqrt(color.z))


@ti.func
def quantize_channel(value: ti.f64) -> ti.i32:
    """Map a gamma-corrected channel in [0, 1] to [0, 255], truncating."""
    return ti.cast(value * QUANTIZE_SCALE, ti.i32)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _accumulate_kernel(width: ti.i32, height: ti.i32, num_samples: ti.i32, max_depth: ti.i32):
    """Add num_samples jittered samples to every pixel's color sum."""
    for i, j in ti.ndrange(width, height):
        color = vec3(0.0, 0.0, 0.0)
        for _ in range(num_samples):
            ray = get_ray_jittered(i, j, width, height)
            color += radiance(ray, max_depth)
        _color_sum[i, j] += color


@ti.kernel
def _resolve_kernel(width: ti.i32, height: ti.i32, total_samples: ti.i32):
    """Average, gamma correct, and quantize the color sums into RGBA bytes."""
    for i, j in ti.ndrange(width, height):
        color = gamma_correct(_color_sum[i, j] / ti.cast(total_samples, ti.f64))
        row = height - 1 - j
        _pixels[row, i, 0] = ti.cast(quantize_channel(color.x), ti.u8)
        _pixels[row, i, 1] = ti.cast(quantize_channel(color.y), ti.u8)
        _pixels[row, i, 2] = ti.cast(quantize_channel(color.z), ti.u8)
        _pixels[row, i, 3] = ti.cast(255, ti.u8)


_single_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_single_rgba = ti.Vector.field(4, dtype=ti.u8, shape=())


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32):
    # Single-iteration outer loop keeps the bounce loop serial
    for _ in range(1):
        _single_color[None] = radiance(Ray(origin=origin, direction=direction), max_depth)


@ti.kernel
def _encode_single_color(color: vec3):
    for _ in range(1):
        corrected = gamma_correct(color)
        # Same narrowing as _resolve_kernel
        _single_rgba[None][0] = ti.cast(quantize_channel(corrected.x), ti.u8)
        _single_rgba[None][1] = ti.cast(quantize_channel(corrected.y), ti.u8)
        _single_rgba[None][2] = ti.cast(quantize_channel(corrected.z), ti.u8)
        _single_rgba[None][3] = ti.cast(255, ti.u8)


# =============================================================================
# Public Rendering API
# =============================================================================


def accumulate_samples(num_samples: int = 1, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Add samples to every pixel of the render target.

    Can be called repeatedly; samples from all calls are averaged together.

    Args:
        num_samples: Number of jittered samples to add per pixel.
        max_depth: Maximum number of scatter events per path.

    Raises:
        ValueError: If num_samples is not positive or max_depth is negative.
        RuntimeError: If the render target or camera has not been set up.
    """
    _check_render_target_initialized()
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    if num_samples <= 0:
        raise ValueError(f"num_samples must be positive, got {num_samples}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    width, height = get_image_dimensions()
    _accumulate_kernel(width, height, num_samples, max_depth)
    _samples_taken[None] += num_samples


def resolve_pixels() -> bytes:
    """Convert the accumulated samples into an RGBA byte buffer.

    Returns:
        width * height * 4 bytes, row-major from the top row, each pixel
        [R, G, B, 255].

    Raises:
        RuntimeError: If the render target is not set up or no samples
            have been accumulated.
    """
    _check_render_target_initialized()
    total = int(_samples_taken[None])
    if total == 0:
        raise RuntimeError("No samples accumulated. Call accumulate_samples() first.")

    width, height = get_image_dimensions()
    _resolve_kernel(width, height, total)
    return _pixels.to_numpy()[:height, :width, :].tobytes()


def trace_radiance(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace a single ray through the current world from Python.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z).
        max_depth: Maximum number of scatter events.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    _trace_single_ray(vec3(*origin), vec3(*direction), max_depth)
    color = _single_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def encode_color(color: tuple[float, float, float]) -> tuple[int, int, int, int]:
    """Gamma correct and quantize one linear color exactly as pixels are.

    Args:
        color: Averaged linear color (R, G, B), channels in [0, 1].

    Returns:
        Tuple of (R, G, B, 255) 8-bit values.
    """
    _encode_single_color(vec3(*color))
    rgba = _single_rgba[None]
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))
