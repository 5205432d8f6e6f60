"""Serialization of one replicate as a VCF text stream.

The alleles in ms output are ancestral/derived indices rather than bases, so
REF and ALT are fixed placeholders and every record sits on one synthetic
contig whose length is the simulated segment length.
"""

from __future__ import annotations

import random
from typing import List, Sequence, TextIO

from .genotypes import emit_genotype

VCF_FILEFORMAT = "VCFv4.2"
CHROM = "chr1"
REF_ALLELE = "A"
ALT_ALLELE = "T"
PLACEHOLDER = "."

FIXED_COLUMNS = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT"]


def sample_names(diploid_count: int) -> List[str]:
    return [f"s{index}" for index in range(diploid_count)]


def header_lines(segment_length: int, diploid_count: int) -> List[str]:
    """Return the meta-information and column header lines, without newlines."""
    return [
        f"##fileformat={VCF_FILEFORMAT}",
        f"##contig=<ID={CHROM},length={segment_length}>",
        "\t".join(FIXED_COLUMNS + sample_names(diploid_count)),
    ]


def _record_prefix(position: int) -> str:
    return "\t".join(
        [
            CHROM,
            str(position),
            PLACEHOLDER,
            REF_ALLELE,
            ALT_ALLELE,
            PLACEHOLDER,
            PLACEHOLDER,
            PLACEHOLDER,
            PLACEHOLDER,
        ]
    )


def write_replicate(
    sink: TextIO,
    segment_length: int,
    resolved_positions: Sequence[int],
    haplotypes: Sequence[str],
    unphased: bool,
    missing_probability: float,
    rng: random.Random,
) -> int:
    """Write a complete VCF for one replicate to *sink* and return its record count.

    Haplotypes ``2k`` and ``2k + 1`` form diploid sample ``s<k>``; at site ``i``
    the left allele is ``haplotypes[2k][i]`` and the right one
    ``haplotypes[2k + 1][i]``. Genotypes are drawn site by site, sample by
    sample, so a seeded *rng* reproduces the same output.
    """
    diploid_count = len(haplotypes) // 2
    for line in header_lines(segment_length, diploid_count):
        sink.write(line + "\n")

    written = 0
    for site, position in enumerate(resolved_positions):
        fields = [_record_prefix(position)]
        for k in range(diploid_count):
            fields.append(
                emit_genotype(
                    haplotypes[2 * k][site],
                    haplotypes[2 * k + 1][site],
                    unphased,
                    missing_probability,
                    rng,
                )
            )
        sink.write("\t".join(fields) + "\n")
        written += 1
    return written


__all__ = [
    "ALT_ALLELE",
    "CHROM",
    "REF_ALLELE",
    "VCF_FILEFORMAT",
    "header_lines",
    "sample_names",
    "write_replicate",
]
