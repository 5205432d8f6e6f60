"""Conversion settings and their validation.

Settings can come from a YAML file (``--config``) and from the command line.
:func:`build_config` merges both, with command-line values taking precedence,
and :meth:`ConversionConfig.validate` rejects out-of-range values before any
stream processing begins.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .logging_utils import ConfigError

DEFAULT_SEGMENT_LENGTH = 1_000_000
MIN_SEGMENT_LENGTH = 1000
SUPPORTED_PLOIDY = 2

_KEY_ALIASES = {
    "length": "segment_length",
    "segment-length": "segment_length",
    "missing": "missing_probability",
    "missing-probability": "missing_probability",
    "validate": "validate_output",
    "validate-output": "validate_output",
}


@dataclass(frozen=True)
class ConversionConfig:
    """Validated settings consumed by the replicate driver."""

    segment_length: int = DEFAULT_SEGMENT_LENGTH
    ploidy: int = SUPPORTED_PLOIDY
    unphased: bool = False
    missing_probability: float = 0.0
    compress: bool = False
    seed: Optional[int] = None
    validate_output: bool = False

    def validate(self) -> "ConversionConfig":
        """Raise :class:`ConfigError` for out-of-range values, else return self."""
        if self.ploidy < 2:
            raise ConfigError("Ploidy must be 2 or greater.")
        if self.ploidy != SUPPORTED_PLOIDY:
            raise ConfigError(
                f"Ploidy {self.ploidy} is not supported; haplotypes are paired into diploid samples."
            )
        if self.segment_length < MIN_SEGMENT_LENGTH:
            raise ConfigError(
                "Length must be 1000 or greater to avoid multiple records at the same locus."
            )
        if not 0 <= self.missing_probability < 1:
            raise ConfigError("The probability of a missing genotype must be in [0, 1).")
        return self


def _field_names() -> set[str]:
    return {f.name for f in fields(ConversionConfig)}


def _normalize_keys(raw: Mapping[str, Any], source: str) -> Dict[str, Any]:
    known = _field_names()
    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        name = _KEY_ALIASES.get(str(key), str(key).replace("-", "_"))
        if name not in known:
            raise ConfigError(f"Unknown configuration key in {source}: {key}")
        normalized[name] = value
    return normalized


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load conversion settings from a YAML mapping on disk."""

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse configuration file {path}: {exc}") from exc

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration file must be a mapping at the top level.")

    return _normalize_keys(raw_config, str(path))


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"Invalid value for {name}: {value!r} (expected an integer)")
    return int(value)


def _coerce(name: str, value: Any) -> Any:
    try:
        if name in {"segment_length", "ploidy", "seed"}:
            return _as_int(name, value)
        if name == "missing_probability":
            return float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid value for {name}: {value!r} (expected true or false)")
    return value


def build_config(
    file_values: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ConversionConfig:
    """Merge file values with command-line overrides and validate the result.

    ``None`` entries in *overrides* mean "not given on the command line" and
    leave the file value (or the default) in place.
    """
    merged: Dict[str, Any] = {}
    for source in (file_values or {}, overrides or {}):
        for name, value in _normalize_keys(source, "arguments").items():
            if value is None:
                continue
            merged[name] = _coerce(name, value)
    return ConversionConfig(**merged).validate()


__all__ = [
    "ConversionConfig",
    "DEFAULT_SEGMENT_LENGTH",
    "MIN_SEGMENT_LENGTH",
    "build_config",
    "load_config_file",
]
