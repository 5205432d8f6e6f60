"""Streaming recognition of replicate blocks in ms output.

An ms stream is a free-form preamble (command echo, seeds, ``//`` separators
and blank lines) followed by repeating blocks::

    segsites: <S>
    positions: <S fractional positions>
    <haplotype>
    <haplotype>
    ...

The scanner walks a :class:`~ms_to_vcf.line_source.LineSource` one line at a
time and never holds more than the current replicate in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .line_source import LineSource
from .logging_utils import FormatError, handle_non_critical_error

SEGSITES_TOKEN = "segsites:"
POSITIONS_TOKEN = "positions:"


class HaplotypeBuffer(Sequence[str]):
    """Reusable storage for the haplotype lines of one replicate.

    The underlying list keeps its allocated slots between replicates; only the
    first ``count`` entries belong to the current replicate and only those are
    visible through ``len``, indexing and iteration.
    """

    def __init__(self) -> None:
        self._slots: List[str] = []
        self.count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def reset(self) -> None:
        self.count = 0

    def append(self, haplotype: str) -> None:
        if self.count < len(self._slots):
            self._slots[self.count] = haplotype
        else:
            self._slots.append(haplotype)
        self.count += 1

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._slots[: self.count][index]
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            raise IndexError("haplotype index out of range")
        return self._slots[index]

    def __iter__(self) -> Iterator[str]:
        for index in range(self.count):
            yield self._slots[index]


@dataclass
class Replicate:
    """One simulated segment: its site count, positions and haplotypes."""

    ordinal: int
    segsites: int
    positions: List[float]
    haplotypes: Sequence[str]

    @property
    def diploid_count(self) -> int:
        return len(self.haplotypes) // 2


class ReplicateScanner:
    """Locate replicate blocks inside a line stream."""

    def __init__(self, source: LineSource) -> None:
        self.source = source

    def skip_to_segsites(self) -> Optional[int]:
        """Consume lines up to the next ``segsites:`` marker and return its count.

        Returns ``None`` when the stream ends first.
        """
        while True:
            line = self.source.next_line()
            if line is None:
                return None
            if not line.startswith(SEGSITES_TOKEN):
                continue
            remainder = line[len(SEGSITES_TOKEN):].split()
            try:
                segsites = int(remainder[0])
            except (IndexError, ValueError):
                raise FormatError(
                    f"Expected an integer after '{SEGSITES_TOKEN}', found {line!r}",
                    line_number=self.source.line_number,
                ) from None
            if segsites < 0:
                raise FormatError(
                    f"Negative segregating site count: {segsites}",
                    line_number=self.source.line_number,
                )
            return segsites

    def read_positions_line(self, segsites: int) -> List[float]:
        """Consume lines up to ``positions:`` and return the first *segsites* values."""
        while True:
            line = self.source.next_line()
            if line is None:
                raise FormatError(
                    f"Reached end of input before the '{POSITIONS_TOKEN}' line"
                )
            if line.startswith(SEGSITES_TOKEN):
                raise FormatError(
                    f"Found '{SEGSITES_TOKEN}' before the '{POSITIONS_TOKEN}' line of the previous replicate",
                    line_number=self.source.line_number,
                )
            if line.startswith(POSITIONS_TOKEN):
                break

        tokens = line[len(POSITIONS_TOKEN):].split()
        if len(tokens) < segsites:
            raise FormatError(
                f"Expected {segsites} positions but found {len(tokens)}",
                line_number=self.source.line_number,
            )
        if len(tokens) > segsites:
            handle_non_critical_error(
                f"Ignoring {len(tokens) - segsites} extra position(s) on line {self.source.line_number}"
            )
        try:
            return [float(token) for token in tokens[:segsites]]
        except ValueError as exc:
            raise FormatError(
                f"Invalid position value: {exc}", line_number=self.source.line_number
            ) from exc

    def read_samples(self, buffer: HaplotypeBuffer) -> int:
        """Read haplotype lines into *buffer* until a blank line, EOF or ``segsites:``."""
        buffer.reset()
        while True:
            line = self.source.next_line()
            if line is None or not line.strip():
                break
            if line.startswith(SEGSITES_TOKEN):
                self.source.push_back(line)
                break
            buffer.append(line)
        return len(buffer)

    def next_replicate(self, ordinal: int, buffer: HaplotypeBuffer) -> Optional[Replicate]:
        """Return the next complete replicate, or ``None`` at end of stream."""
        segsites = self.skip_to_segsites()
        if segsites is None:
            return None
        if segsites == 0:
            # ms prints neither positions nor haplotypes for an empty segment.
            buffer.reset()
            return Replicate(ordinal, 0, [], buffer)
        positions = self.read_positions_line(segsites)
        self.read_samples(buffer)
        return Replicate(ordinal, segsites, positions, buffer)


__all__ = [
    "HaplotypeBuffer",
    "POSITIONS_TOKEN",
    "Replicate",
    "ReplicateScanner",
    "SEGSITES_TOKEN",
]
