"""Rendering of haplotype allele pairs into VCF genotype fields."""

from __future__ import annotations

import random
from typing import Optional

MISSING_ALLELE = "."
PHASED_SEPARATOR = "|"
UNPHASED_SEPARATOR = "/"


def make_random_source(seed: Optional[int] = None) -> random.Random:
    """Return the random source shared by one conversion run.

    ``seed=None`` seeds from the operating system, so repeated runs differ.
    """
    return random.Random(seed)


def emit_genotype(
    left: str,
    right: str,
    unphased: bool,
    missing_probability: float,
    rng: random.Random,
) -> str:
    """Return the genotype text for one diploid sample at one site.

    Unphased output draws once to decide whether the alleles swap places.
    When *missing_probability* is positive the left and then the right allele
    each draw once more and become ``.`` below the threshold. With no
    missingness and phased output no randomness is consumed.
    """
    if unphased:
        if rng.random() < 0.5:
            left, right = right, left
        separator = UNPHASED_SEPARATOR
    else:
        separator = PHASED_SEPARATOR

    if missing_probability > 0:
        if rng.random() < missing_probability:
            left = MISSING_ALLELE
        if rng.random() < missing_probability:
            right = MISSING_ALLELE

    return f"{left}{separator}{right}"


__all__ = [
    "MISSING_ALLELE",
    "PHASED_SEPARATOR",
    "UNPHASED_SEPARATOR",
    "emit_genotype",
    "make_random_source",
]
