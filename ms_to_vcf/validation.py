"""Post-write validation of replicate VCF files."""

from __future__ import annotations

import warnings
from typing import List, Optional

from . import vcfpy
from .logging_utils import ValidationError, handle_critical_error, log_message
from .writer import CHROM, VCF_FILEFORMAT, sample_names


def _header_value(header, key: str) -> Optional[str]:
    lines = header.get_lines(key)
    for line in lines:
        return getattr(line, "value", None)
    return None


def _contig_length(header) -> Optional[int]:
    for line in header.get_lines("contig"):
        if getattr(line, "id", None) != CHROM:
            continue
        length = getattr(line, "length", None)
        if length is None:
            length = line.mapping.get("length")
        return None if length is None else int(length)
    return None


def validate_replicate_vcf(
    path: str,
    expected_sites: int,
    expected_samples: int,
    segment_length: int,
    verbose: bool = False,
) -> bool:
    """Re-read *path* with vcfpy and confirm it matches the replicate it came from.

    Checks the fileformat and contig lines, the ``sN`` sample columns, the
    number of records and that no two consecutive records share a position.
    Any mismatch is fatal and raises :class:`ValidationError`.
    """
    problems: List[str] = []

    with warnings.catch_warnings():
        # The FORMAT column is a placeholder without a ##FORMAT definition.
        warnings.simplefilter("ignore")
        with vcfpy.Reader.from_path(path) as reader:
            header = reader.header

            fileformat = _header_value(header, "fileformat")
            if fileformat != VCF_FILEFORMAT:
                problems.append(f"fileformat is {fileformat!r}, expected {VCF_FILEFORMAT!r}")

            contig_length = _contig_length(header)
            if contig_length != segment_length:
                problems.append(f"contig length is {contig_length}, expected {segment_length}")

            names = list(header.samples.names)
            if names != sample_names(expected_samples):
                problems.append(f"sample columns are {names}, expected {expected_samples} diploid samples")

            count = 0
            previous = None
            for record in reader:
                count += 1
                if record.CHROM != CHROM:
                    problems.append(f"record {count} is on contig {record.CHROM!r}")
                if previous is not None and record.POS == previous:
                    problems.append(f"records {count - 1} and {count} share position {previous}")
                previous = record.POS

    if count != expected_sites:
        problems.append(f"found {count} records, expected {expected_sites}")

    if problems:
        handle_critical_error(
            f"Validation failed for {path}: " + "; ".join(problems),
            exc_cls=ValidationError,
        )

    log_message(f"Validated {path}: {count} record(s), {expected_samples} sample(s)", verbose)
    return True


__all__ = ["validate_replicate_vcf"]
