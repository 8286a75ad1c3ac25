"""Vector utilities for path tracing in double precision.

Vectors double as points, directions, normals, and RGB colors. Component-wise
arithmetic (add, negate, subtract, scalar multiply and divide, and the
component-wise product used for color attenuation) is native to the Taichi
vector type; this module adds the operations built on top of it.

No operation guards against degenerate input: normalizing a zero vector
divides by zero and yields NaN/Inf, which propagates silently.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.core.vector import vec3, unit_vector
    >>> @ti.kernel
    ... def f() -> vec3:
    ...     return unit_vector(vec3(3.0, 0.0, 4.0))  # (0.6, 0.0, 0.8)
"""

import taichi as ti

# Three 64-bit floats: (x, y, z) or (r, g, b)
vec3 = ti.types.vector(3, ti.f64)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Args:
        v: The input vector. Must have nonzero length; a zero vector
            produces NaN components.

    Returns:
        v / length(v).
    """
    return v / length(v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect a direction about a normal.

    Computes d - 2 (d . n) n. The normal should be unit length.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The mirrored direction.
    """
    return incident - 2.0 * dot(incident, normal) * normal


@ti.func
def random_in_unit_sphere() -> vec3:
    """Draw a random point strictly inside the unit sphere.

    Rejection sampling: each axis is drawn as 2 * U[0, 1) - 1 and the triple
    is redrawn while its squared length is >= 1. The loop has no iteration
    bound; it accepts after about two draws on average.

    Returns:
        A point p with |p|^2 < 1.
    """
    # Starts outside the sphere so the loop draws at least once
    p = vec3(1.0, 1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = vec3(
            2.0 * ti.random(ti.f64) - 1.0,
            2.0 * ti.random(ti.f64) - 1.0,
            2.0 * ti.random(ti.f64) - 1.0,
        )
    return p
