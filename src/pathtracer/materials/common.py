"""Parameter checks shared by the material registries."""

import math


def check_albedo(albedo: tuple[float, float, float]) -> tuple[float, float, float]:
    """Return albedo as three floats, each required to lie in [0, 1].

    An albedo above 1 would let a bounce add energy.

    Raises:
        ValueError: If albedo does not have three components or one is out of range.
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have three components, got {len(albedo)}")
    values = (float(albedo[0]), float(albedo[1]), float(albedo[2]))
    for channel, value in zip("RGB", values):
        if not (0.0 <= value <= 1.0):
            raise ValueError(f"Albedo {channel} = {value} is outside [0, 1]")
    return values


def check_fuzz(fuzz: float) -> float:
    """Return fuzz as a float; it must be finite and non-negative.

    Values above 1 are kept as given.

    Raises:
        ValueError: If fuzz is negative, infinite, or NaN.
    """
    value = float(fuzz)
    if not math.isfinite(value) or value < 0.0:
        raise ValueError(f"Fuzz must be a non-negative finite number, got {fuzz}")
    return value
