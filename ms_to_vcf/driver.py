"""Replicate-by-replicate conversion of an ms stream into VCF files.

:class:`ReplicateDriver` runs a small state machine over the input::

    SeekingReplicate -> CountingSites -> ReadingPositions -> ReadingSamples
        -> EmittingOutput -> SeekingReplicate | Done

Every replicate is checked before its output file is opened, written, and
discarded before the next one is read. Files written for earlier replicates
stay on disk if a later replicate turns out to be malformed.
"""

from __future__ import annotations

import os
import random
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

from . import pysam
from .config import ConversionConfig
from .genotypes import make_random_source
from .line_source import LineSource, open_line_source
from .logging_utils import FormatError, log_message
from .positions import resolve_positions
from .scanner import SEGSITES_TOKEN, HaplotypeBuffer, Replicate, ReplicateScanner
from .validation import validate_replicate_vcf
from .writer import write_replicate

KNOWN_SUFFIXES = (".ms.gz", ".ms")


def strip_known_suffix(name: str) -> str:
    """Drop a trailing ``.ms.gz`` or ``.ms`` from *name*; other names are kept whole."""
    for suffix in KNOWN_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def replicate_output_path(
    input_path: str,
    ordinal: int,
    compress: bool,
    output_dir: Optional[str] = None,
) -> str:
    """Return ``<dir>/<basename>_rep<ordinal>.vcf`` (``.vcf.gz`` when compressing)."""
    directory = output_dir if output_dir is not None else os.path.dirname(input_path)
    base = strip_known_suffix(os.path.basename(input_path))
    extension = ".vcf.gz" if compress else ".vcf"
    return os.path.join(directory, f"{base}_rep{ordinal}{extension}")


@contextmanager
def open_output_sink(path: str, compress: bool) -> Iterator[TextIO]:
    """Yield a text sink for *path*.

    Compressed output is staged as plain text beside the target and turned
    into BGZF with :func:`pysam.tabix_compress` once the block completes.
    """
    if not compress:
        with open(path, "w", encoding="utf-8") as handle:
            yield handle
        return

    staging_path = path + ".tmp"
    try:
        with open(staging_path, "w", encoding="utf-8") as handle:
            yield handle
        pysam.tabix_compress(staging_path, path, force=True)
    finally:
        if os.path.exists(staging_path):
            os.remove(staging_path)


class ReplicateDriver:
    """Convert every replicate of an ms stream into its own VCF file."""

    def __init__(
        self,
        config: ConversionConfig,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else make_random_source(config.seed)
        self.verbose = verbose
        self._haplotypes = HaplotypeBuffer()

    def _check_replicate(self, replicate: Replicate) -> None:
        count = len(replicate.haplotypes)
        if replicate.segsites == 0:
            return
        if count == 0:
            raise FormatError(
                f"Replicate {replicate.ordinal} declares {replicate.segsites} sites but has no haplotypes"
            )
        if count % 2:
            raise FormatError(
                f"Replicate {replicate.ordinal} has {count} haplotypes; "
                "an even number is required to form diploid samples"
            )
        for index, haplotype in enumerate(replicate.haplotypes):
            if len(haplotype) < replicate.segsites:
                raise FormatError(
                    f"Replicate {replicate.ordinal} haplotype {index} has {len(haplotype)} "
                    f"alleles but {replicate.segsites} sites were declared"
                )

    def emit_replicate(self, replicate: Replicate, output_path: str) -> int:
        """Write *replicate* to *output_path* and return the number of records."""
        positions = resolve_positions(replicate.positions, self.config.segment_length)
        with open_output_sink(output_path, self.config.compress) as sink:
            written = write_replicate(
                sink,
                self.config.segment_length,
                positions,
                replicate.haplotypes,
                self.config.unphased,
                self.config.missing_probability,
                self.rng,
            )
        if self.config.validate_output:
            validate_replicate_vcf(
                output_path,
                expected_sites=replicate.segsites,
                expected_samples=replicate.diploid_count,
                segment_length=self.config.segment_length,
                verbose=self.verbose,
            )
        return written

    def convert_stream(
        self,
        source: LineSource,
        input_path: str,
        output_dir: Optional[str] = None,
    ) -> List[str]:
        """Convert all replicates in *source*; return the paths written in order.

        *input_path* only names the outputs. A stream without any replicate is
        a :class:`FormatError`.
        """
        scanner = ReplicateScanner(source)
        written_paths: List[str] = []
        ordinal = 0
        while True:
            replicate = scanner.next_replicate(ordinal, self._haplotypes)
            if replicate is None:
                break
            self._check_replicate(replicate)

            output_path = replicate_output_path(
                input_path, ordinal, self.config.compress, output_dir
            )
            records = self.emit_replicate(replicate, output_path)
            log_message(
                f"Replicate {ordinal}: wrote {records} site(s) for "
                f"{replicate.diploid_count} sample(s) to {output_path}",
                self.verbose,
            )
            written_paths.append(output_path)
            ordinal += 1

        if not written_paths:
            raise FormatError(f"No '{SEGSITES_TOKEN}' block found in {input_path}")
        return written_paths

    def convert_file(self, input_path: str, output_dir: Optional[str] = None) -> List[str]:
        """Open *input_path* (plain or gzip) and convert every replicate in it."""
        if output_dir is not None:
            os.makedirs(output_dir, exist_ok=True)
        log_message(f"Reading ms output from {input_path}", self.verbose)
        with open_line_source(input_path) as source:
            return self.convert_stream(source, input_path, output_dir)


__all__ = [
    "KNOWN_SUFFIXES",
    "ReplicateDriver",
    "open_output_sink",
    "replicate_output_path",
    "strip_known_suffix",
]
