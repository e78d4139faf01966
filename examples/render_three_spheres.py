#!/usr/bin/env python3
"""Render the three-spheres scene.

Builds the demo scene (diffuse ground and center sphere, hollow glass sphere
on the left, gold metal sphere on the right), renders it progressively and
writes the result as PPM or PNG depending on the output extension.

Usage:
    python -m examples.render_three_spheres [options]

Options:
    --width WIDTH         Image width in pixels; height follows 16:9 (default: 400)
    --samples SAMPLES     Samples per pixel (default: 100)
    --max-depth DEPTH     Scattering depth budget per ray (default: 20)
    --output OUTPUT       Output path, .ppm or .png (default: image.ppm)
    --seed SEED           Random seed (default: 0)
    --batch-size SIZE     Samples per progress update (default: 10)
    --scene SCENE         Load the scene from a JSON file instead
    --quiet               Suppress progress output

Example:
    python -m examples.render_three_spheres --width 200 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the three-spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels; height follows the 16:9 aspect ratio (default: 400)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=20,
        help="Scattering depth budget per ray (default: 20)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path, .ppm or .png (default: image.ppm)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file to render instead of the built-in scene",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_three_spheres(
    width: int = 400,
    num_samples: int = 100,
    max_depth: int = 20,
    output_path: str = "image.ppm",
    batch_size: int = 10,
    scene_path: str | None = None,
    quiet: bool = False,
) -> Path:
    """Render the scene and save it to output_path.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so ti.init() runs before any field is created
    from spheretrace.camera.pinhole import DEFAULT_ASPECT_RATIO, setup_camera
    from spheretrace.core.progressive import ProgressiveRenderer
    from spheretrace.output.export import save_image
    from spheretrace.scene.three_spheres import create_three_spheres_scene

    height = int(width / DEFAULT_ASPECT_RATIO)

    scene, camera = create_three_spheres_scene()
    if scene_path is not None:
        scene.load_json(scene_path)
    setup_camera(camera)

    if not quiet:
        print(
            f"Rendering {scene.get_sphere_count()} spheres at {width}x{height}, "
            f"{num_samples} samples per pixel..."
        )

    renderer = ProgressiveRenderer(width, height, max_depth)
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples ({progress_pct:.1f}%) "
                f"- {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(num_samples=num_samples, batch_size=batch_size, callback=progress_callback)

    if not quiet:
        print()

    output_file = Path(output_path)
    save_image(renderer.get_image_numpy(), output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=args.seed)

    try:
        render_three_spheres(
            width=args.width,
            num_samples=args.samples,
            max_depth=args.max_depth,
            output_path=args.output,
            batch_size=args.batch_size,
            scene_path=args.scene,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
