"""Command-line entry point for the ms_to_vcf package."""

import sys

from ms_to_vcf.cli import main


if __name__ == "__main__":  # pragma: no cover - entry point
    sys.exit(main())
