"""Taichi backend initialization.

All field-declaring modules of this package must be imported after
init_taichi() has run, since ti.init() resets previously declared fields.

Example:
    >>> from pathtracer.runtime import init_taichi
    >>> init_taichi(seed=7, threads=1)
    >>> from pathtracer.render import render
"""

from __future__ import annotations

import logging

import numpy as np
import taichi as ti

logger = logging.getLogger(__name__)


def init_taichi(
    seed: int | None = None,
    threads: int | None = None,
    debug: bool = False,
) -> int:
    """Initialize the Taichi CPU backend with 64-bit IEEE floating point.

    Args:
        seed: Seed for Taichi's random number generator. When None, a seed is
            drawn from NumPy's default generator so runs differ.
        threads: Maximum number of CPU threads. Use 1 for a reproducible,
            single-threaded run. None lets Taichi choose.
        debug: Enable Taichi debug mode (bounds checking).

    Fast math is disabled so NaN and infinity follow IEEE rules.

    Returns:
        The seed that was used.

    Raises:
        ValueError: If threads is not positive.
    """
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**31 - 1))
    if threads is not None and threads <= 0:
        raise ValueError(f"threads must be positive, got {threads}")

    kwargs = {}
    if threads is not None:
        kwargs["cpu_max_num_threads"] = threads

    ti.init(
        arch=ti.cpu,
        default_fp=ti.f64,
        fast_math=False,
        random_seed=seed,
        debug=debug,
        **kwargs,
    )
    logger.debug("Taichi initialized: seed=%d threads=%s debug=%s", seed, threads, debug)
    return seed
