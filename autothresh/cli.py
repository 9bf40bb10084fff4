# autothresh/cli.py
import argparse
import logging
import pathlib
from typing import Optional, Sequence

from .config import DEFAULT_METHOD, HISTOGRAM_WORKERS, OUT_DIR
from .errors import ThresholdingError
from .image_io import load_pixel_buffer
from .pipeline import run_pipeline, save_results
from .thresholds import ThresholdMethod

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Binarize an image at an automatically selected global threshold"
    )
    parser.add_argument("path", nargs="?", help="Input image file")
    parser.add_argument(
        "--method",
        choices=[m.value for m in ThresholdMethod],
        default=DEFAULT_METHOD,
        help="Threshold used for the binary image (default: %(default)s)",
    )
    parser.add_argument(
        "--out-dir",
        type=pathlib.Path,
        default=OUT_DIR,
        help="Directory for the grayscale and binary images",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=HISTOGRAM_WORKERS,
        help="Threads used to build the histogram",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.path:
        parser.print_usage()
        print("Please enter a path.")
        return 0

    input_path = pathlib.Path(args.path)
    if not input_path.is_file():
        log.error("Path not found: %s", input_path)
        return 0

    try:
        result = run_pipeline(
            load_pixel_buffer(input_path), method=args.method, workers=args.workers
        )
        # mean, otsu, yen
        for threshold in result.thresholds.values():
            print(threshold)
        save_results(result, args.out_dir)
    except ThresholdingError as e:
        log.error("Error processing %s: %s", input_path.name, e)
        return 1

    log.info("Saved %s and %s", result.gray_path, result.binary_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
