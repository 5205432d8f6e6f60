"""Shared logging helpers and the error taxonomy for the ms to VCF converter.

The module wires the ``ms_to_vcf`` logger to emit timestamped messages. At
import time only a console handler is attached; callers that want a persistent
trail call :func:`configure_logging` with ``log_file`` (the CLI does so for
``--log-file``). Repeated invocations clear previous handlers so no duplicate
outputs are accumulated.

Errors are grouped under :class:`MsToVCFError`. :class:`FormatError` covers
input streams that do not follow the ms block structure, :class:`ConfigError`
covers out-of-range settings and :class:`ValidationError` covers written files
that fail the post-write check. Stream failures stay plain :class:`OSError`.
:func:`handle_critical_error` records fatal failures at ``CRITICAL`` level
before raising, while :func:`handle_non_critical_error` only warns.
"""
from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("ms_to_vcf")
logger.propagate = False


def _normalize_level(level: int | str) -> int:
    """Return a numeric logging level for *level*."""
    if isinstance(level, str):
        name = level.upper()
        try:
            return logging._nameToLevel[name]  # type: ignore[attr-defined]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {level}") from exc
    return int(level)


def _clear_handlers(existing: Iterable[logging.Handler]) -> None:
    for h in list(existing):
        try:
            h.close()
        finally:
            logger.removeHandler(h)


def configure_logging(
    *,
    log_level: int | str = logging.INFO,
    log_file: str | os.PathLike[str] | None = None,
    enable_file_logging: bool = True,
    enable_console: bool = True,
    create_dirs: bool = True,
) -> None:
    """Idempotent logger setup for the converter.

    A file handler is only attached when *log_file* is given and
    *enable_file_logging* is true.
    """
    level = _normalize_level(log_level)
    _clear_handlers(logger.handlers)
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if enable_file_logging and log_file:
        path = os.fspath(log_file)
        if create_dirs:
            d = os.path.dirname(path)
            if d:
                os.makedirs(d, exist_ok=True)
        fh = logging.FileHandler(path)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    if enable_console:
        sh = logging.StreamHandler()
        sh.setFormatter(fmt)
        logger.addHandler(sh)


class MsToVCFError(RuntimeError):
    """Base exception for unrecoverable errors in the conversion workflow."""


class FormatError(MsToVCFError):
    """Raised when the input stream does not match the ms block structure."""

    def __init__(self, message: str, *, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class ConfigError(MsToVCFError):
    """Raised when configuration values are out of range or unreadable."""


class ValidationError(MsToVCFError):
    """Raised when a written VCF does not match the replicate it came from."""


def log_message(
    message: str,
    verbose: bool = False,
    level: int = logging.INFO,
    *,
    exc_info: BaseException | bool | None = None,
) -> None:
    """Log *message* at the requested level and optionally echo it to stdout."""

    logger.log(level, message, exc_info=exc_info)
    if verbose:
        print(message)


def handle_critical_error(
    message: str,
    exc_cls=None,
    *,
    exc_info: BaseException | bool | None = None,
) -> None:
    """Log and raise a fatal error."""

    log_message(message, level=logging.ERROR)
    logger.critical(message, exc_info=exc_info)
    exception_class = exc_cls or MsToVCFError
    if isinstance(exc_info, BaseException):
        raise exception_class(message) from exc_info
    raise exception_class(message)


def handle_non_critical_error(message: str) -> None:
    """Log and print a recoverable error."""

    log_message(message, level=logging.WARNING)
    print(message)


__all__ = [
    "configure_logging",
    "logger",
    "log_message",
    "handle_critical_error",
    "handle_non_critical_error",
    "MsToVCFError",
    "FormatError",
    "ConfigError",
    "ValidationError",
]

# Default configuration: console only at INFO level.
configure_logging(enable_file_logging=False)
