"""Shared pytest fixtures for the ms_to_vcf test suite."""

import gzip
import io
import logging
from pathlib import Path
from typing import Callable

import pytest

from ms_to_vcf import logging_utils
from ms_to_vcf.config import ConversionConfig
from ms_to_vcf.line_source import LineSource

EXAMPLE_MS = "segsites: 2\npositions: 0.1 0.5\n01\n10\n"

TWO_REPLICATE_MS = (
    "ms 4 2 -t 5.0\n"
    "27473 36154 10290\n"
    "\n"
    "//\n"
    "segsites: 3\n"
    "positions: 0.1250 0.5000 0.7500\n"
    "010\n"
    "110\n"
    "001\n"
    "000\n"
    "\n"
    "//\n"
    "segsites: 2\n"
    "positions: 0.2500 0.8750\n"
    "11\n"
    "01\n"
)


class ScriptedRandom:
    """Stand-in random source returning predetermined values in order."""

    def __init__(self, values=()):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture
def line_source_from() -> Callable[[str], LineSource]:
    def _build(text: str) -> LineSource:
        return LineSource(io.StringIO(text))

    return _build


@pytest.fixture
def write_ms(tmp_path: Path) -> Callable[..., Path]:
    """Write ms text to ``tmp_path/name``, gzip-compressed when the name ends in ``.gz``."""

    def _write(text: str, name: str = "sim.ms") -> Path:
        path = tmp_path / name
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as handle:
                handle.write(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def phased_config() -> ConversionConfig:
    return ConversionConfig(segment_length=1_000_000, unphased=False, missing_probability=0.0)


@pytest.fixture
def captured_log(caplog):
    """Route the non-propagating ``ms_to_vcf`` logger into ``caplog``."""
    logger = logging_utils.logger
    logger.addHandler(caplog.handler)
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    try:
        yield caplog
    finally:
        logger.setLevel(previous)
        logger.removeHandler(caplog.handler)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop file handlers and level changes left behind by a test."""
    yield
    logging_utils.configure_logging(enable_file_logging=False)
