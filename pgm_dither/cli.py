"""Command-line interface for pgm_dither.

Supports human-readable output and a JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pgm_dither.core.dither import DitherMethod
from pgm_dither.core.image import Image

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgm-dither",
        description="Dither binary grayscale (P5) images to pure black and white.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug messages to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither a P5 image.",
    )
    convert.add_argument("input", help="Input P5 image path.")
    convert.add_argument(
        "-o", "--output",
        help="Output file path (.pgm, .png, .bmp, .gif, .tif). "
        "Defaults to <input>_<method>.pgm.",
    )
    convert.add_argument(
        "--method",
        choices=[m.value for m in DitherMethod],
        default=DitherMethod.FLOYD_STEINBERG.value,
        help="Dithering algorithm (default: floyd-steinberg).",
    )
    convert.add_argument(
        "--threshold",
        type=int,
        default=127,
        help="Cutoff for --method threshold, 0 to 255 (default: 127).",
    )
    convert.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for --method random.",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON.",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on decode and processing errors (with --json).",
    )

    # --- info subcommand ---
    info = subparsers.add_parser(
        "info",
        help="Print dimensions and pixel statistics of a P5 image.",
    )
    info.add_argument("input", help="Input P5 image path.")
    info.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON.",
    )

    return parser


def _auto_output_path(input_path: Path, method: str) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_{method}.pgm"


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(message: str, code: str, is_json: bool, debug: bool = False) -> None:
    if is_json:
        if debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load(
    raw_input: str, is_json: bool, debug: bool = False
) -> tuple[Path, Image]:
    from pgm_dither.core.reader import DecodeError, open_image

    input_path = Path(raw_input).resolve()
    try:
        return input_path, open_image(input_path)
    except FileNotFoundError:
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)
    except (DecodeError, OSError) as e:
        _fail(str(e), "INVALID_INPUT", is_json, debug)


def _run_convert(args: argparse.Namespace) -> None:
    """Decode, dither and save one image."""
    from pgm_dither.core.processor import Settings, process_image
    from pgm_dither.core.writer import save_output

    is_json = args.json
    input_path, image = _load(args.input, is_json, args.debug)

    settings = Settings(
        method=args.method,
        threshold=args.threshold,
        seed=args.seed,
    )

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path, settings.method.value)

    try:
        result = process_image(image, settings)
        save_output(result, output_path)
    except Exception as e:
        logger.debug("Conversion of %s failed", input_path, exc_info=True)
        if is_json:
            if args.debug:
                import traceback
                traceback.print_exc(file=sys.stderr)
            _json_error(str(e), "PROCESSING_ERROR")
        else:
            print(f"Error during processing: {e}", file=sys.stderr)
            sys.exit(1)

    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
    else:
        white = result.pixels.count(255)
        report = {
            "status": "success",
            "input": str(input_path),
            "output": str(output_path),
            "settings": settings.describe(),
            "settings_hash": settings.hash(),
            "metadata": {
                "width": result.width,
                "height": result.height,
                "white_pixels": white,
                "black_pixels": len(result.pixels) - white,
            },
        }
        print(json.dumps(report, indent=2))


def _run_info(args: argparse.Namespace) -> None:
    input_path, image = _load(args.input, args.json)
    arr = image.to_array()
    stats = {
        "width": image.width,
        "height": image.height,
        "min": int(arr.min()),
        "max": int(arr.max()),
        "mean": round(float(arr.mean()), 2),
    }
    if args.json:
        print(json.dumps({"status": "success", "input": str(input_path), **stats}, indent=2))
    else:
        print(
            f"{input_path.name}: {stats['width']}x{stats['height']}  "
            f"min {stats['min']}  max {stats['max']}  mean {stats['mean']}"
        )


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Routing:
      pgm-dither convert <file> [opts]  → dither and save
      pgm-dither info <file>            → dimensions and statistics
    """
    from pgm_dither.utils.logs import configure_logging

    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "convert":
        _run_convert(args)
    else:
        _run_info(args)


if __name__ == "__main__":
    main()
