"""
CLI entry point for the glitch pipeline.

Usage:
    tapeglitch [options] <input.png> <output.png>
    tapeglitch [options] -            (stdin -> stdout)
    python -m tapeglitch [options] ...
"""

import argparse
import io
import json
import sys
import time
from pathlib import Path

from tapeglitch.core.errors import GlitchError, InvalidParameter
from tapeglitch.core.params import DistortionParameters
from tapeglitch.core.rng import TIME_SEED
from tapeglitch.pipeline import GlitchPipeline

DEFAULTS = DistortionParameters()

# (flag, field, type, help)
PARAM_FLAGS = [
    ("--mag", "blur_magnitude", float, "dissolve blur strength"),
    ("--bheight", "block_height", int, "average distorted block height"),
    ("--boffset", "block_offset_strength", float, "distorted block offset strength"),
    ("--stride", "stride_magnitude", float, "distorted block stride strength"),
    ("--lag", "scan_lag_strength", float, "per-channel scanline lag strength"),
    ("--lr", "initial_lag_r", float, "initial red scanline lag"),
    ("--lg", "initial_lag_g", float, "initial green scanline lag"),
    ("--lb", "initial_lag_b", float, "initial blue scanline lag"),
    ("--stdoffset", "nondestructive_offset_stddev", float,
     "std. dev. of red-blue channel offset (non-destructive)"),
    ("--add", "brighten_amount", int, "additional brightness control (0-255)"),
    ("--meanabber", "aberration_mean", int, "mean chromatic aberration offset"),
    ("--stdabber", "aberration_stddev", float,
     "std. dev. of chromatic aberration offset (lower values induce longer trails)"),
]


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stderr."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stderr.isatty():
        sys.stderr.write(f"\r[{bar}] {pct:5.1f}%  row {current}/{total}")
        sys.stderr.flush()
        if current >= total:
            sys.stderr.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  row {current}/{total}", file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tapeglitch",
        description="Analog-video style glitching for PNG images",
        usage="%(prog)s [options] input output\n   or: %(prog)s [options] - (for stdin+stdout processing)",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Input and output PNG paths, or a single '-' for stdin/stdout",
    )

    # Distortion knobs; None means "not given" so a params file can fill them in
    for flag, field, ftype, text in PARAM_FLAGS:
        parser.add_argument(
            flag, dest=field, type=ftype, default=None,
            help=f"{text} (default: {getattr(DEFAULTS, field)})",
        )

    parser.add_argument(
        "--seed", type=int, default=TIME_SEED,
        help="Random seed. -1 derives it from the current time (default: -1)",
    )
    parser.add_argument(
        "--params", type=Path, default=None,
        help="JSON file with distortion parameters; explicit flags override it",
    )
    parser.add_argument(
        "--dump-params", action="store_true",
        help="Print the effective parameters as JSON and exit",
    )
    parser.add_argument(
        "--convert", action="store_true",
        help="Convert non-RGBA images (grayscale, palette, ...) instead of failing",
    )
    parser.add_argument(
        "--compress", type=int, default=0, choices=range(10), metavar="0-9",
        help="PNG compression level (default: 0, uncompressed)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="No status output")
    return parser


def resolve_params(args: argparse.Namespace) -> DistortionParameters:
    """
    Merge defaults, an optional params file and explicit flags.

    Raises:
        InvalidParameter: If the merged values are out of range.
        OSError, ValueError: If the params file cannot be read or parsed.
    """
    values = {}
    if args.params is not None:
        with open(args.params, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise InvalidParameter(f"{args.params} must contain a JSON object")
        values.update(loaded)

    for _, field, _, _ in PARAM_FLAGS:
        given = getattr(args, field)
        if given is not None:
            values[field] = given

    return DistortionParameters.from_dict(values)


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        params = resolve_params(args)
    except (GlitchError, OSError, ValueError) as e:
        _fail(str(e))

    if args.dump_params:
        print(json.dumps(params.to_dict(), indent=2))
        return

    streaming = args.files == ["-"]
    if not streaming and len(args.files) != 2:
        parser.print_usage(sys.stderr)
        sys.exit(2)

    if streaming:
        source = io.BytesIO(sys.stdin.buffer.read())
        target = sys.stdout.buffer
    else:
        source, target = Path(args.files[0]), Path(args.files[1])
        if not source.exists():
            _fail(f"Input file not found: {source}")

    def status(msg: str):
        if not args.quiet:
            print(msg, file=sys.stderr)

    pipeline = GlitchPipeline(params, seed=args.seed)
    status(f"Seed: {pipeline.seed}")

    t0 = time.time()
    try:
        result = pipeline.process_file(
            source,
            target,
            convert=args.convert,
            compress_level=args.compress,
            progress_callback=None if args.quiet else _progress_bar,
        )
    except (GlitchError, OSError) as e:
        _fail(str(e))

    if streaming:
        sys.stdout.buffer.flush()

    status(f"Glitched {result.width}x{result.height} in {time.time() - t0:.1f}s")
    if not streaming:
        status(f"  Output: {target}")


if __name__ == "__main__":
    main()
