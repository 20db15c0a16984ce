#!/usr/bin/env python3
"""
sketch.py
Turn RGBA images into pencil or charcoal sketches.

Usage:
  python sketch.py INPUT --filter [pencil|charcoal] --intensity F --max-dim N --resample [nearest|bilinear|bicubic|lanczos] --seed N --no-noise --debug

Filters:
  pencil   : fine edge layer x broad shading layer, contrast curve, light grain.
  charcoal : one wide dodge layer, stronger contrast, darkened shadows.

Input:
  Any Pillow-readable image, or a folder of png/jpg/jpeg/webp. Alpha is preserved.

Output:
  PNG. Writes <stem>_sketch.png next to INPUT, or into --outdir.

Notes:
  Images larger than --max-dim on either side are downscaled first.
  CPU bound. Blur passes use --workers threads; folders use --jobs files at once.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from PIL import Image

from sketch_map.constants import (
    DEFAULT_FILTER,
    DEFAULT_INTENSITY,
    DEFAULT_RESAMPLE,
    FILTER_TYPES,
    IMAGE_EXTS,
    MAX_DIMENSION,
    OUTPUT_SUFFIX,
)
from sketch_map.core_types import FilterConfig, image_size
from sketch_map.errors import SketchError
from sketch_map.image_io import load_image_rgba, save_png_rgba
from sketch_map.pipeline import render
from sketch_map.utils import (
    capture_output,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        filter: "pencil" | "charcoal"
        intensity: float, clamped to [0,1] later
        max_dim: int cap on the larger side
        resample: downscale filter name
        seed: optional grain seed
        no_noise: bool, disable pencil grain
        jobs: parallel file workers
        workers: internal threads for blur passes
        debug: bool for per-stage details
    """
    parser = argparse.ArgumentParser(
        prog="sketch",
        description="Render image(s) as pencil or charcoal sketches.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--filter",
        choices=list(FILTER_TYPES),
        default=DEFAULT_FILTER,
        help="Sketch style.",
    )
    parser.add_argument(
        "--intensity",
        type=float,
        default=DEFAULT_INTENSITY,
        help="Effect strength 0..1 (values outside are clamped).",
    )
    parser.add_argument(
        "--max-dim",
        type=int,
        default=MAX_DIMENSION,
        help="Downscale so neither side exceeds this.",
    )
    parser.add_argument(
        "--resample",
        choices=["nearest", "bilinear", "bicubic", "lanczos"],
        default=DEFAULT_RESAMPLE,
        help="Scaling filter used when downscaling.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for pencil grain (reproducible)"
    )
    parser.add_argument(
        "--no-noise", action="store_true", help="Disable pencil grain"
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--workers", type=int, default=_default_workers(), help="Internal workers"
    )
    parser.add_argument("--debug", action="store_true", help="Per-stage details")
    args = parser.parse_args(argv)
    if args.max_dim <= 0:
        parser.error("--max-dim must be positive")
    return args


def output_path_for(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


def _is_output_artifact(path: Path) -> bool:
    return path.stem.endswith(OUTPUT_SUFFIX)


# Per-file processing


def _process_single_image(
    src_path: Path,
    out_path: Path,
    config: FilterConfig,
    max_dim: int,
    resample: str,
    workers: int,
    debug: bool,
) -> None:
    """
    Process a single image path end-to-end:
      load -> render -> save -> report.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    source = load_image_rgba(src_path)
    width0, height0 = image_size(source)
    t_loaded = time.perf_counter()
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width0}x{height0}"),
                    ("Load time", format_seconds_compact(t_loaded - t_start)),
                ]
            )
        )

    out = render(
        source,
        config,
        max_dimension=max_dim,
        resample=resample,
        workers=workers,
        debug=debug,
    )
    t_rendered = time.perf_counter()

    written = save_png_rgba(out_path, out)
    t_saved = time.perf_counter()

    width, height = image_size(out)
    log(f"Filter: {config.filter_type}  Intensity: {config.intensity:g}")
    log(f"Wrote {written.name} | size={width}x{height}")

    if debug:
        mpx = (width * height) / 1e6
        render_secs = t_rendered - t_loaded
        if render_secs > 0:
            debug_log(
                f"throughput {mpx / render_secs:.2f} MPx/s  ({mpx:.2f} MPx in {format_seconds_compact(render_secs)})"
            )
        debug_log(
            f"Total {format_seconds_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"render={format_seconds_compact(render_secs)}, "
            f"save={format_seconds_compact(t_saved - t_rendered)})"
        )
    else:
        log(f"Total time {format_seconds_compact(t_saved - t_start)}")


def _process_one_live(
    path: Path,
    config: FilterConfig,
    max_dim: int,
    resample: str,
    workers: int,
    debug: bool,
    outdir: Optional[Path],
) -> bool:
    """Process a single file and stream logs to stdout. Returns success."""
    if _is_output_artifact(path):
        print_banner(path.name)
        debug_log(f"skipped output artifact ({OUTPUT_SUFFIX})")
        return True
    try:
        _process_single_image(
            path,
            output_path_for(path, outdir),
            config,
            max_dim,
            resample,
            workers,
            debug,
        )
    except (SketchError, OSError, ValueError, Image.DecompressionBombError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def _process_one_captured(
    path: Path,
    config: FilterConfig,
    max_dim: int,
    resample: str,
    workers: int,
    debug: bool,
    outdir: Optional[Path],
) -> tuple:
    """
    Process a single file with its log lines collected in a buffer.

    The capture is per thread, so several of these can run side by side and
    the caller prints each block in file order.
    """
    with capture_output() as buf:
        ok = _process_one_live(path, config, max_dim, resample, workers, debug, outdir)
    return ok, buf.getvalue()


def list_input_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not _is_output_artifact(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the process exit code.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    config = FilterConfig(
        filter_type=args.filter,
        intensity=args.intensity,
        noise=not args.no_noise,
        seed=args.seed,
    )

    cpu_cores = os.cpu_count() or 1
    # Always show a concise run configuration up-front.
    print_config_line(
        "run",
        [("CPU cores", cpu_cores), ("Workers", args.workers), ("Jobs", args.jobs)],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Filter", config.filter_type),
                    ("Intensity", config.intensity),
                    ("Noise", config.noise),
                    ("Seed", "-" if config.seed is None else config.seed),
                    ("Max dim", args.max_dim),
                    ("Resample", args.resample),
                ]
            )
        )

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    if src.is_dir():
        files = list_input_images(src)
        if args.debug:
            debug_log(
                key_value_pairs_to_string(
                    [("Images", len(files)), ("Jobs", args.jobs), ("Workers", args.workers)]
                )
            )

        if args.jobs <= 1:
            results = [
                _process_one_live(
                    p, config, args.max_dim, args.resample, args.workers,
                    args.debug, args.outdir,
                )
                for p in files
            ]
        else:
            with ThreadPoolExecutor(max_workers=args.jobs) as ex:
                futures = [
                    ex.submit(
                        _process_one_captured,
                        p,
                        config,
                        args.max_dim,
                        args.resample,
                        args.workers,
                        args.debug,
                        args.outdir,
                    )
                    for p in files
                ]
                blocks = [f.result() for f in futures]
            print("".join(text for _ok, text in blocks), end="", flush=True)
            results = [ok for ok, _text in blocks]
    else:
        results = [
            _process_one_live(
                src, config, args.max_dim, args.resample, args.workers,
                args.debug, args.outdir,
            )
        ]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
