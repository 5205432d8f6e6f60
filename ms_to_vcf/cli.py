"""Command-line entrypoint for the ms to VCF conversion."""
from __future__ import annotations

import argparse
import datetime
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import VERSION_TEXT
from .config import build_config, load_config_file
from .driver import ReplicateDriver
from .logging_utils import (
    MsToVCFError,
    configure_logging,
    log_message,
    logger,
)


def _non_negative_int(arg: str) -> int:
    try:
        value = int(arg)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {arg!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError("seed must be non-negative")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the converter."""
    parser = argparse.ArgumentParser(
        prog="ms-to-vcf",
        description=(
            "Convert ms-style simulation output into one VCF file per replicate. "
            "Consecutive haplotypes are paired into diploid samples."
        ),
    )
    parser.add_argument("input", help="ms output file (plain or .gz).")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=VERSION_TEXT,
    )
    parser.add_argument(
        "-p",
        "--ploidy",
        type=int,
        default=None,
        help="Ploidy of samples. Default 2.",
    )
    parser.add_argument(
        "-l",
        "--length",
        dest="segment_length",
        type=int,
        default=None,
        help="Length of the segment in base pairs. Default 1,000,000.",
    )
    parser.add_argument(
        "-u",
        "--unphased",
        action="store_true",
        default=None,
        help="Remove phase from genotypes.",
    )
    parser.add_argument(
        "-m",
        "--missing",
        dest="missing_probability",
        type=float,
        default=None,
        help="Probability that each allele is reported missing. Default 0.",
    )
    parser.add_argument(
        "-c",
        "--compress",
        action="store_true",
        default=None,
        help="Write BGZF-compressed .vcf.gz files.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        help="Directory for the replicate VCFs. Defaults to the input file's directory.",
    )
    parser.add_argument(
        "--seed",
        type=_non_negative_int,
        default=None,
        help="Seed for phase and missing-data draws. Random when omitted.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help="YAML file with default settings; command-line options take precedence.",
    )
    parser.add_argument(
        "--validate",
        dest="validate_output",
        action="store_true",
        default=None,
        help="Re-read every written VCF and check it against its replicate.",
    )
    parser.add_argument("--log-file", dest="log_file", help="Also write the log to this file.")
    parser.add_argument("--verbose", action="store_true", help="Echo progress messages to stdout.")
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI args for the converter."""
    args = build_parser().parse_args(argv)
    args.input = str(Path(args.input))
    if args.output_dir:
        args.output_dir = str(Path(args.output_dir))
    return args


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        build_parser().print_help()
        return 1

    args = parse_arguments(argv)
    verbose = args.verbose

    # Verbose output is echoed by log_message, so no console handler here.
    configure_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        log_file=args.log_file,
        enable_file_logging=bool(args.log_file),
        enable_console=False,
    )

    try:
        file_values = load_config_file(args.config_path) if args.config_path else {}
        config = build_config(
            file_values,
            {
                "segment_length": args.segment_length,
                "ploidy": args.ploidy,
                "unphased": args.unphased,
                "missing_probability": args.missing_probability,
                "compress": args.compress,
                "seed": args.seed,
                "validate_output": args.validate_output,
            },
        )

        log_message(
            "Conversion Log - " + datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            verbose,
        )
        log_message(
            f"Settings: length={config.segment_length}, unphased={config.unphased}, "
            f"missing={config.missing_probability}, compress={config.compress}, seed={config.seed}",
            verbose,
        )

        driver = ReplicateDriver(config, verbose=verbose)
        written = driver.convert_file(args.input, args.output_dir)
    except MsToVCFError as exc:
        logger.critical(str(exc))
        print(f"ERROR: {type(exc).__name__}: {exc}")
        return 1
    except OSError as exc:
        logger.critical(f"I/O error: {exc}")
        print(f"ERROR: IOError: {exc}")
        return 1

    log_message(f"Conversion completed successfully. Replicates written: {len(written)}", verbose)
    print(f"Wrote: {written[0]} x {len(written)}.")
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point
    sys.exit(main())
