"""Post-write checks of replicate VCFs via vcfpy."""

from __future__ import annotations

import io

import pytest

from ms_to_vcf.genotypes import make_random_source
from ms_to_vcf.logging_utils import ValidationError
from ms_to_vcf.validation import validate_replicate_vcf
from ms_to_vcf.writer import write_replicate


def _write(tmp_path, name, positions, haplotypes, segment_length=10_000):
    sink = io.StringIO()
    write_replicate(sink, segment_length, positions, haplotypes, False, 0.0, make_random_source(0))
    path = tmp_path / name
    path.write_text(sink.getvalue(), encoding="utf-8")
    return path


def test_matching_file_passes(tmp_path):
    path = _write(tmp_path, "ok.vcf", [10, 20, 30], ["010", "111", "000", "100"])
    assert validate_replicate_vcf(str(path), 3, 2, 10_000)


def test_record_count_mismatch_is_fatal(tmp_path):
    path = _write(tmp_path, "short.vcf", [10, 20], ["01", "11"])
    with pytest.raises(ValidationError, match="found 2 records, expected 3"):
        validate_replicate_vcf(str(path), 3, 1, 10_000)


def test_contig_length_mismatch_is_fatal(tmp_path):
    path = _write(tmp_path, "contig.vcf", [10], ["0", "1"], segment_length=5000)
    with pytest.raises(ValidationError, match="contig length is 5000, expected 10000"):
        validate_replicate_vcf(str(path), 1, 1, 10_000)


def test_sample_column_mismatch_is_fatal(tmp_path):
    path = _write(tmp_path, "samples.vcf", [10], ["0", "1"])
    with pytest.raises(ValidationError, match="sample columns"):
        validate_replicate_vcf(str(path), 1, 2, 10_000)


def test_repeated_position_is_fatal(tmp_path):
    path = _write(tmp_path, "repeat.vcf", [10, 10], ["01", "10"])
    with pytest.raises(ValidationError, match="share position 10"):
        validate_replicate_vcf(str(path), 2, 1, 10_000)
