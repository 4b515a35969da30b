#  whereami - Shared Types
#
#  Line records, the immutable line table produced by analyze(), warning
#  records, error classes, and the abstract base class for renderers.
#
#  Depends on: (none)
#  Used by:    whereami/*.py, cli.py, server.py

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Tab stops used when measuring indentation
TAB_WIDTH = 8

# Ancestors closer than this many lines to the queried line are omitted
PROXIMITY_WINDOW = 20


class InputTooLarge(ValueError):
    """Raised when a buffer or its line count exceeds the supported range."""


class IndexOutOfRange(IndexError):
    """Raised when a queried line is not a valid line of the buffer."""


@dataclass(frozen=True)
class MalformedByte:
    """A non-printable control byte found outside comments and strings."""

    line: int  # 1-based
    offset: int  # byte offset into the buffer
    value: int


@dataclass(frozen=True)
class LineRecord:
    """One logical line of the buffer and its place in the indentation hierarchy."""

    index: int
    indentation: int
    outer_index: int | None
    start: int  # offset of the first non-indentation byte
    length: int
    eligible: bool

    @property
    def line(self) -> int:
        return self.index + 1

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class LineTable:
    """The result of one analysis: a read-only buffer plus its line records.

    Behaves as a read-only sequence of LineRecord. Spans are validated at
    construction time by the scanner and never re-derived.
    """

    buffer: bytes
    records: tuple[LineRecord, ...]
    warnings: tuple[MalformedByte, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> LineRecord:
        return self.records[index]

    def __iter__(self):
        return iter(self.records)

    def text(self, index: int) -> bytes:
        """Content of a line after its indentation, without the terminator."""
        record = self.records[index]
        return self.buffer[record.start : record.end]


class BaseRenderer(ABC):
    """Abstract base class for output renderers.

    A renderer turns an analyzed table into the text printed for a query.
    query_line is 1-based; 0 means every line of the buffer.
    """

    @abstractmethod
    def render(self, table: LineTable, query_line: int, proximity_window: int = PROXIMITY_WINDOW) -> str:
        """Render the context information for one line or for all lines.

        Args:
            table: Analyzed buffer.
            query_line: 1-based line number, or 0 for all lines.
            proximity_window: Ancestors closer than this are omitted.

        Returns:
            The text to print, exactly as it should appear on stdout.

        Raises:
            IndexOutOfRange: query_line is not a line of the buffer.
        """
        ...
