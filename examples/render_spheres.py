#!/usr/bin/env python3
"""Render the reference sphere scene (or a JSON-configured one).

The image is saved twice: once under a name stamped with the current Unix
time, and once under a fixed name that is overwritten on every run.

Usage:
    python -m examples.render_spheres [options]

Options:
    --config PATH       JSON render configuration (default: built-in scene)
    --width WIDTH       Image width in pixels (overrides config)
    --height HEIGHT     Image height in pixels (overrides config)
    --samples SAMPLES   Samples per pixel (overrides config)
    --max-depth DEPTH   Maximum scatter events per path (overrides config)
    --seed SEED         Random seed (overrides config)
    --threads N         CPU threads (1 gives a reproducible image)
    --output-prefix P   Output name prefix (default: spheres)
    --batch-size SIZE   Samples per progress update (default: 5)
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 200 --height 100 --samples 20
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render spheres with Lambertian and metal materials.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None, help="JSON render configuration")
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum scatter events")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--threads", type=int, default=None, help="CPU threads")
    parser.add_argument(
        "--output-prefix",
        type=str,
        default="spheres",
        help="Output name prefix (default: spheres)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=5,
        help="Samples per progress update (default: 5)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def build_config(args: argparse.Namespace):
    """Load the base configuration and apply command-line overrides."""
    from pathtracer.config import default_config, load_config

    config = load_config(args.config) if args.config else default_config()
    overrides = {
        "image_width": args.width,
        "image_height": args.height,
        "samples_per_pixel": args.samples,
        "max_depth": args.max_depth,
        "seed": args.seed,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(config, **overrides)


def render_spheres(args: argparse.Namespace) -> list[Path]:
    """Render and save the scene described by the arguments.

    Returns:
        Paths of the saved image files.
    """
    from pathtracer.runtime import init_taichi

    config = build_config(args)
    seed = init_taichi(seed=config.seed, threads=args.threads)

    # Lazy imports: these modules declare Taichi fields
    from pathtracer.preview.export import timestamped_filename
    from pathtracer.render import render

    if not args.quiet:
        print(
            f"Rendering {config.image_width}x{config.image_height}, "
            f"{config.samples_per_pixel} spp, seed {seed}..."
        )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    image = render(config, batch_size=args.batch_size, callback=progress_callback)

    if not args.quiet:
        print()

    outputs = [
        image.save(timestamped_filename(args.output_prefix)),
        image.save(f"{args.output_prefix}.png"),
    ]
    if not args.quiet:
        for path in outputs:
            print(f"saved {path}")
        print(f"Total time: {time.time() - start_time:.2f}s")
    return outputs


def main() -> int:
    """Main entry point."""
    args = parse_args()
    try:
        render_spheres(args)
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
