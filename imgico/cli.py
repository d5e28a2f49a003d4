"""Command line interface: convert one image into per-size ICO or SVG files."""

import argparse
import logging
import shutil
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from imgico import __version__
from imgico.config import DATA_DIR, LOG_FILE, Config
from imgico.converter import to_ico, to_svg
from imgico.errors import ImgicoError, IoError
from imgico.ico import read_ico
from imgico.sizes import DEFAULT_SIZES, validate_sizes

logger = logging.getLogger(__name__)

FORMATS = ("ico", "svg")


def setup_logging(verbose: bool = False, log_file: Path | None = None):
    """Configure logging to file and console."""
    log_file = log_file or LOG_FILE
    console = logging.StreamHandler()
    console.setLevel(logging.INFO if verbose else logging.WARNING)
    handlers: list[logging.Handler] = [console]

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as e:
        print(f"Warning: cannot open log file {log_file}: {e}", file=sys.stderr)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def timestamp(now: datetime | None = None) -> str:
    """UTC timestamp safe for directory names: YYYY-MM-DDTHH-MM-SS-mmmZ."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgico",
        description="Convert images to ICO or SVG",
    )
    parser.add_argument("input", type=Path, help="Input file path")
    parser.add_argument("-f", "--format", type=str.lower, choices=FORMATS,
                        default=None, help="Output format: 'ico' or 'svg' (default: ico)")
    parser.add_argument("-o", "--output-root", type=Path, default=None,
                        help="Directory in which the timestamped output directory is created")
    parser.add_argument("--config", type=Path, default=None,
                        help=f"Config file (default: {DATA_DIR / 'config.json'})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress to the console")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def convert(input_path: Path, fmt: str, sizes: list[int], output_root: Path,
            prefix: str = "imgico", resample: str = "lanczos",
            workers: int = 1) -> Path:
    """
    Write one {size}.{fmt} file per size into a fresh timestamped directory.

    Every output is produced in memory and written to a staging
    directory first, so a failure at any step leaves nothing on disk.

    Returns:
        The created output directory.
    """
    sizes = validate_sizes(sizes)

    try:
        input_data = input_path.read_bytes()
    except OSError as e:
        raise IoError("Failed to read input file", input_path) from e
    logger.info("Read %s (%d bytes)", input_path, len(input_data))

    outputs = []
    for size in sizes:
        if fmt == "svg":
            buffer = to_svg(input_data, size, resample=resample)
        else:
            # One single-size ICO per requested size
            buffer = to_ico(input_data, [size], resample=resample, workers=workers)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%d.ico directory: %s", size, read_ico(buffer))
        outputs.append((f"{size}.{fmt}", buffer))

    out_dir = output_root / f"{prefix}-{timestamp()}"
    if out_dir.exists():
        raise IoError("Output directory already exists", out_dir)

    # Files go into a hidden staging directory that is renamed into place
    # only once every file has been written
    try:
        output_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{out_dir.name}-", dir=output_root))
        staging.chmod(0o755)
    except OSError as e:
        raise IoError("Failed to create output directory", out_dir) from e

    try:
        for name, buffer in outputs:
            path = staging / name
            try:
                path.write_bytes(buffer)
            except OSError as e:
                raise IoError("Failed to write output file", out_dir / name) from e
            logger.info("Wrote %s (%d bytes)", out_dir / name, len(buffer))
        try:
            staging.rename(out_dir)
        except OSError as e:
            raise IoError("Failed to create output directory", out_dir) from e
    except IoError:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    return out_dir


def _setting(config: Config, *keys: str, kind: type, default):
    """Read a config value, raising ValueError if it has the wrong type."""
    value = config.get(*keys, default=default)
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(
            f"Config value {'.'.join(keys)} must be {kind.__name__}, not {value!r}"
        )
    return value


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = Config(args.config)
    try:
        fmt = args.format or _setting(config, "format", kind=str, default="ico").lower()
        if fmt not in FORMATS:
            raise ValueError(f"unsupported format {fmt!r}")
        root = _setting(config, "output", "root", kind=str, default="")
        output_root = args.output_root or Path(root or ".")

        out_dir = convert(
            args.input,
            fmt,
            config.get("sizes", default=list(DEFAULT_SIZES)),
            output_root,
            prefix=_setting(config, "output", "prefix", kind=str, default="imgico"),
            resample=_setting(config, "resample", kind=str, default="lanczos"),
            workers=_setting(config, "workers", kind=int, default=1),
        )
    except (ImgicoError, ValueError) as e:
        logger.info("Conversion failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Extracted {fmt.upper()} images to {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
