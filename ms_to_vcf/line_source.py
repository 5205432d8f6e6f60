"""Line-oriented access to plain or gzip-compressed ms output."""

from __future__ import annotations

import gzip
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional


class LineSource:
    """Hand out successive lines of a text stream without their newline.

    ``next_line`` returns ``None`` once the stream is exhausted. One line can
    be handed back with :meth:`push_back` so that the following call returns
    it again.
    """

    def __init__(self, handle: Iterable[str]) -> None:
        self._lines = iter(handle)
        self._pending: Optional[str] = None
        self.line_number = 0

    def next_line(self) -> Optional[str]:
        if self._pending is not None:
            line, self._pending = self._pending, None
            self.line_number += 1
            return line
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        except (EOFError, UnicodeDecodeError) as exc:
            raise OSError(
                f"Failed to read input after line {self.line_number}: {exc}"
            ) from exc
        self.line_number += 1
        return raw.rstrip("\r\n")

    def push_back(self, line: str) -> None:
        if self._pending is not None:
            raise RuntimeError("Only one line can be pushed back at a time")
        self._pending = line
        self.line_number -= 1

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line


@contextmanager
def open_line_source(path: str) -> Iterator[LineSource]:
    """Open *path* (``.gz`` is decompressed transparently) as a :class:`LineSource`."""
    opener = gzip.open if str(path).endswith(".gz") else open
    mode = "rt" if opener is gzip.open else "r"
    with opener(path, mode, encoding="utf-8") as handle:
        yield LineSource(handle)


__all__ = ["LineSource", "open_line_source"]
