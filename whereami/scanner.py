#  whereami - Line Scanner
#
#  Splits a raw byte buffer into line spans and measures each line's
#  indentation. Tracks /* */ block comments across lines with a small state
#  machine and marks comment-only, preprocessor-like and label lines as not
#  eligible to become scope contexts. Non-printable control bytes outside
#  comments and strings are reported as warnings.
#
#  Depends on: whereami/base.py
#  Used by:    whereami/resolver.py

import enum
import logging
import re
from dataclasses import dataclass

from whereami.base import TAB_WIDTH, MalformedByte

log = logging.getLogger("whereami")

_SPACE = ord(" ")
_TAB = ord("\t")
_CR = ord("\r")
_SLASH = ord("/")
_STAR = ord("*")
_HASH = ord("#")
_BACKSLASH = ord("\\")
_QUOTES = frozenset(b"\"'")
_WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")

# 0x00-0x1F except tab, LF and CR, plus DEL
CONTROL_BYTES = frozenset(set(range(0x20)) - set(b"\t\n\r")) | {0x7F}

# A single identifier followed by a colon, e.g. "public:" or "retry:"
_LABEL_RE = re.compile(rb"([A-Za-z_]\w*)\s*:\s*\Z")

# Block headers that look like labels but open a scope
_NOT_LABELS = {b"case", b"default", b"else", b"try", b"except", b"finally"}


class ScanState(enum.Enum):
    """Where the scanner stands relative to the current line."""

    AT_LINE_START = "at_line_start"
    NORMAL = "normal"
    IN_BLOCK_COMMENT = "in_block_comment"


@dataclass(frozen=True)
class ScannedLine:
    """Scanner output for one line, before hierarchy resolution.

    indentation is None for blank lines; the resolver fills in its
    current indentation level for those.
    """

    start: int
    length: int
    indentation: int | None
    eligible: bool


def _embedded_terminator(buffer: bytes) -> int:
    """Return the offset where the opaque tail starts, or -1 if there is no NUL.

    The line containing the first NUL byte and everything after it are
    treated as one final line.
    """
    nul = buffer.find(b"\x00")
    if nul < 0:
        return -1
    return buffer.rfind(b"\n", 0, nul) + 1


def line_spans(buffer: bytes) -> list[tuple[int, int]]:
    """Return (start, end) byte offsets for every line, excluding line feeds."""
    tail = _embedded_terminator(buffer)
    limit = len(buffer) if tail < 0 else tail

    spans = []
    start = 0
    while start < limit:
        end = buffer.find(b"\n", start, limit)
        if end < 0:
            # Last line has no terminator
            spans.append((start, limit))
            break
        spans.append((start, end))
        start = end + 1

    if tail >= 0:
        spans.append((tail, len(buffer)))
    return spans


def count_lines(buffer: bytes) -> int:
    """Count lines without building spans, using the same rules as line_spans()."""
    tail = _embedded_terminator(buffer)
    limit = len(buffer) if tail < 0 else tail
    n_lines = buffer.count(b"\n", 0, limit)
    if limit > 0 and buffer[limit - 1] != ord("\n"):
        n_lines += 1
    if tail >= 0:
        n_lines += 1
    return n_lines


def is_label(text: bytes) -> bool:
    """Check whether a line is a lone "identifier:" label such as "public:".

    Block headers that can stand alone with a colon (case, default, else,
    try, except, finally) are not labels, so they still open a scope.
    """
    m = _LABEL_RE.match(text)
    return m is not None and m.group(1) not in _NOT_LABELS


class LineScanner:
    """Scans a buffer line by line.

    The only state carried from one line to the next is whether a block
    comment is still open, held in self.state at the end of each line.
    """

    def __init__(self, buffer: bytes, tab_width: int = TAB_WIDTH, source_name: str = "<buffer>"):
        if tab_width <= 0:
            raise ValueError(f"tab_width must be positive, got {tab_width}")
        self.buffer = buffer
        self.tab_width = tab_width
        self.source_name = source_name
        self.state = ScanState.AT_LINE_START
        self.warnings: list[MalformedByte] = []

    def __iter__(self):
        tail = _embedded_terminator(self.buffer)
        for line_no, (start, end) in enumerate(line_spans(self.buffer), start=1):
            if start == tail:
                log.warning(
                    f"{self.source_name}:{line_no}: embedded NUL byte; "
                    f"remaining {end - start} bytes treated as one line"
                )
                yield self._opaque_line(start, end)
            else:
                yield self._scan_line(line_no, start, end)

    def scan(self) -> list[ScannedLine]:
        return list(self)

    # ------------------------------------------------------------------
    # Per-line scanning
    # ------------------------------------------------------------------

    def _scan_line(self, line_no: int, start: int, end: int) -> ScannedLine:
        buf = self.buffer

        column, pos = self._measure_indentation(start, end)

        content_end = end
        if content_end > pos and buf[content_end - 1] == _CR:
            content_end -= 1

        if pos >= content_end:
            # Whitespace-only line
            return ScannedLine(start=content_end, length=0, indentation=None, eligible=False)

        has_code = self._scan_content(line_no, pos, content_end)
        text = buf[pos:content_end]
        eligible = has_code and text[0] != _HASH and not is_label(text)

        return ScannedLine(start=pos, length=content_end - pos, indentation=column, eligible=eligible)

    def _opaque_line(self, start: int, end: int) -> ScannedLine:
        column, pos = self._measure_indentation(start, end)
        self.state = ScanState.AT_LINE_START
        if pos >= end:
            return ScannedLine(start=end, length=0, indentation=None, eligible=False)
        return ScannedLine(start=pos, length=end - pos, indentation=column, eligible=False)

    def _measure_indentation(self, start: int, end: int) -> tuple[int, int]:
        """Return (column, offset of first non-indentation byte)."""
        buf = self.buffer
        column = 0
        pos = start
        while pos < end:
            ch = buf[pos]
            if ch == _SPACE:
                column += 1
            elif ch == _TAB:
                column = (column // self.tab_width + 1) * self.tab_width
            elif ch != _CR:
                break
            pos += 1
        return column, pos

    def _scan_content(self, line_no: int, pos: int, end: int) -> bool:
        """Run the state machine over a line's content.

        Returns whether the line holds anything besides comments.
        """
        state = ScanState.NORMAL if self.state is ScanState.AT_LINE_START else self.state
        has_code = False

        while pos < end:
            if state is ScanState.IN_BLOCK_COMMENT:
                state, pos = self._step_block_comment(pos, end)
                continue

            state, pos, is_code = self._step_normal(line_no, pos, end)
            has_code = has_code or is_code

        self.state = ScanState.IN_BLOCK_COMMENT if state is ScanState.IN_BLOCK_COMMENT else ScanState.AT_LINE_START
        return has_code

    def _step_block_comment(self, pos: int, end: int) -> tuple[ScanState, int]:
        close = self.buffer.find(b"*/", pos, end)
        if close < 0:
            return ScanState.IN_BLOCK_COMMENT, end
        return ScanState.NORMAL, close + 2

    def _step_normal(self, line_no: int, pos: int, end: int) -> tuple[ScanState, int, bool]:
        """Consume one token in normal state. Returns (state, next_pos, is_code)."""
        buf = self.buffer
        ch = buf[pos]

        if ch == _SLASH and pos + 1 < end:
            nxt = buf[pos + 1]
            # Line comment, rest of line is ignored
            if nxt == _SLASH:
                return ScanState.NORMAL, end, False
            if nxt == _STAR:
                return ScanState.IN_BLOCK_COMMENT, pos + 2, False

        if ch in _QUOTES:
            return ScanState.NORMAL, self._skip_string(pos, end), True

        if ch in CONTROL_BYTES:
            self._warn(line_no, pos, ch)

        return ScanState.NORMAL, pos + 1, ch not in _WHITESPACE

    def _skip_string(self, pos: int, end: int) -> int:
        """Skip a quoted literal starting at pos. Unclosed literals end at the line end."""
        buf = self.buffer
        quote = buf[pos]
        pos += 1
        while pos < end:
            ch = buf[pos]
            if ch == _BACKSLASH:
                pos += 2  # skip escape sequence
                continue
            pos += 1
            if ch == quote:
                break
        return min(pos, end)

    def _warn(self, line_no: int, offset: int, value: int):
        self.warnings.append(MalformedByte(line=line_no, offset=offset, value=value))
        log.warning(f"{self.source_name}:{line_no}: unexpected non-printable character 0x{value:02x} encountered")
