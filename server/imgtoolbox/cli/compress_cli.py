#!/usr/bin/env python3
"""
Command-line interface for compressing images to JPEG.

Usage:
    python -m imgtoolbox.cli.compress_cli <image> [<image> ...] [--quality Q] [--output DIR]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.errors import ToolboxError
from ..services.compression import (
    DEFAULT_QUALITY,
    QUALITY_CEILING,
    QUALITY_FLOOR,
    clamp_quality,
    compress_image,
    format_file_size,
)

logger = logging.getLogger(__name__)


def output_path_for(source: Path, output_dir: Optional[Path]) -> Path:
    """``photo.png`` -> ``<output_dir or source dir>/photo_compressed.jpg``."""
    directory = output_dir if output_dir is not None else source.parent
    return directory / f"{source.stem}_compressed.jpg"


def compress_file(source: Path, quality: int, output_dir: Optional[Path]) -> dict:
    """Compress one file and write the JPEG next to it (or into output_dir)."""
    data = source.read_bytes()
    result = compress_image(data, quality)
    target = output_path_for(source, output_dir)
    target.write_bytes(result.data)
    return {
        "source": str(source),
        "output": str(target),
        "original_size": result.original_size,
        "compressed_size": result.compressed_size,
        "saved_percent": result.saved_percent,
        "width": result.width,
        "height": result.height,
    }


def print_summary(results: List[dict], failures: List[dict]) -> None:
    print("\n" + "=" * 70)
    print("  COMPRESSION SUMMARY")
    print("=" * 70)
    print(f"{'File':<30} {'Original':<12} {'Compressed':<12} {'Saved':<8}")
    print("-" * 70)
    for r in results:
        name = Path(r["source"]).name
        print(
            f"{name[:29]:<30} {format_file_size(r['original_size']):<12} "
            f"{format_file_size(r['compressed_size']):<12} {r['saved_percent']:.1f}%"
        )
    if failures:
        print(f"\n⚠️  {len(failures)} file(s) failed:")
        for f in failures:
            print(f"  - {f['source']}: {f['error']}")
    print("=" * 70 + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compress images to JPEG at a given quality",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m imgtoolbox.cli.compress_cli photo.png
  python -m imgtoolbox.cli.compress_cli *.png --quality 60 --output ./compressed
        """,
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Image files to compress")
    parser.add_argument(
        "--quality", "-q", type=int, default=DEFAULT_QUALITY,
        help=f"JPEG quality, clamped to {QUALITY_FLOOR}-{QUALITY_CEILING} (default: {DEFAULT_QUALITY})",
    )
    parser.add_argument(
        "--output", "-o", type=Path, default=None,
        help="Output directory (default: next to each input)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    args = build_parser().parse_args(argv)
    quality = clamp_quality(args.quality)

    if args.output is not None:
        args.output.mkdir(parents=True, exist_ok=True)

    results: List[dict] = []
    failures: List[dict] = []
    try:
        for source in args.inputs:
            try:
                results.append(compress_file(source, quality, args.output))
            except (OSError, ToolboxError) as e:
                logger.error(f"❌ Failed to compress {source}: {e}")
                failures.append({"source": str(source), "error": str(e)})
    except KeyboardInterrupt:
        logger.warning("\n⚠️  Compression interrupted by user")
        return 130

    print_summary(results, failures)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
