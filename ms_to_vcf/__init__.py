"""Convert ms-style coalescent simulation output into per-replicate VCF files.

The package streams an ms output file replicate by replicate. Each block of
``segsites:``/``positions:``/haplotype lines is turned into one VCF file in
which consecutive haplotypes are paired into diploid samples. Importing the
package verifies that the runtime dependencies :mod:`pysam` (BGZF output) and
:mod:`vcfpy` (output validation) are available so later operations can rely on
them without deferred import errors.
"""

from __future__ import annotations


def _import_dependency(name: str):
    try:
        module = __import__(name)
    except ImportError as exc:  # pragma: no cover - exercised when dependency missing
        raise ModuleNotFoundError(
            f"The '{name}' package is required for ms_to_vcf. "
            f"Please install it with 'pip install {name}'."
        ) from exc
    return module


vcfpy = _import_dependency("vcfpy")
pysam = _import_dependency("pysam")

__version__ = "1.0.0"
VERSION_TEXT = "Version 1.0 December 2024."

__all__ = ["vcfpy", "pysam", "__version__", "VERSION_TEXT"]
