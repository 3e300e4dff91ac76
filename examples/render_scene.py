#!/usr/bin/env python3
"""Render the reference sphere scene to a PPM file.

This script renders the four-sphere scene (or a scene loaded from JSON) with
the Whitted ray tracer. It builds the scene, sets up the camera, renders the
image band by band while reporting progress, and writes a binary PPM.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH             Image width in pixels (default: 1024)
    --height HEIGHT           Image height in pixels (default: 768)
    --fov DEGREES             Horizontal field of view (default: 90)
    --output OUTPUT           Output file path (default: out.ppm)
    --scene SCENE             JSON scene file from SceneManager.to_dict
    --rows-per-batch ROWS     Rows per progress update (default: 64)
    --tone-map METHOD         max, reinhard, exposure or none (default: max)
    --exposure EXPOSURE       Exposure for --tone-map exposure (default: 1.0)
    --arch {gpu,cpu}          Taichi backend (default: gpu, falls back to cpu)
    --preview                 Show the result in a Matplotlib window
    --quiet                   Suppress progress output

Example:
    python -m examples.render_scene --width 512 --height 384 --output small.ppm
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Whitted sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Horizontal field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path; .png writes PNG, anything else PPM (default: out.ppm)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in reference scene)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=64,
        help="Rows rendered per progress update (default: 64)",
    )
    parser.add_argument(
        "--tone-map",
        choices=["max", "reinhard", "exposure", "none"],
        default="max",
        help="Tone mapping applied before quantization (default: max)",
    )
    parser.add_argument(
        "--exposure",
        type=float,
        default=1.0,
        help="Exposure for --tone-map exposure (default: 1.0)",
    )
    parser.add_argument(
        "--arch",
        choices=["gpu", "cpu"],
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_scene(
    width: int = 1024,
    height: int = 768,
    fov: float = 90.0,
    output_path: str = "out.ppm",
    scene_path: str | None = None,
    rows_per_batch: int = 64,
    tone_map: str = "max",
    exposure: float = 1.0,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Horizontal field of view in degrees.
        output_path: Output file path (PPM, or PNG for a .png suffix).
        scene_path: Optional JSON scene file. None renders the reference scene.
        rows_per_batch: Number of rows to render between progress updates.
        tone_map: Tone mapping method ("max", "reinhard", "exposure", "none").
        exposure: Exposure value for exposure tone mapping.
        preview: If True, show the image after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.camera.pinhole import PinholeCamera, setup_camera
    from src.whitted.core.renderer import Renderer
    from src.whitted.scene.default_scene import create_default_scene
    from src.whitted.scene.manager import SceneManager

    if scene_path is None:
        if not quiet:
            print(f"Creating reference scene ({width}x{height})...")
        scene, camera = create_default_scene(fov=fov)
    else:
        if not quiet:
            print(f"Loading scene from {scene_path} ({width}x{height})...")
        with open(scene_path) as f:
            data = json.load(f)
        scene = SceneManager()
        scene.from_dict(data)
        camera = PinholeCamera(fov=fov)

    if not quiet:
        print(
            f"  {scene.get_sphere_count()} spheres, "
            f"{scene.get_material_count()} materials, "
            f"{scene.get_light_count()} lights"
        )

    setup_camera(camera)
    renderer = Renderer(width, height)

    if not quiet:
        print("Rendering...")

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            rows_per_sec = rows_done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    if output_file.suffix.lower() == ".png":
        renderer.save_png(str(output_file), tone_map=tone_map, exposure=exposure)
    else:
        renderer.save_ppm(str(output_file), tone_map=tone_map, exposure=exposure)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from src.whitted.preview.display import show_preview

        show_preview(renderer, tone_map=tone_map, exposure=exposure, title=output_file.name)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Initialize Taichi
    if args.arch == "gpu":
        # Use GPU if available, fall back to CPU
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")
    else:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            scene_path=args.scene,
            rows_per_batch=args.rows_per_batch,
            tone_map=args.tone_map,
            exposure=args.exposure,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
