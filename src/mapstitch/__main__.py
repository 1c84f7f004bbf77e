import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_CONCURRENCY, DEFAULT_OUTFILE
from .services.stitcher import run


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mapstitch",
        description="Download a static map larger than the provider's size limit",
    )
    parser.add_argument("config", type=Path, help="Path to JSON configuration file")
    parser.add_argument(
        "-o",
        "--outfile",
        type=Path,
        default=Path(DEFAULT_OUTFILE),
        help="Output file location (format follows the extension)",
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help="Maximum number of parallel tile requests",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args.config, args.outfile, concurrency=args.concurrency)))


if __name__ == "__main__":
    main()
