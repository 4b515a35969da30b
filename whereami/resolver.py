#  whereami - Indentation Stack Resolver
#
#  Single left-to-right fold over scanned lines that assigns every line the
#  index of its nearest preceding eligible line with strictly less
#  indentation. The stack of open scopes is implicit: it is the chain of
#  outer references starting at the current outer line.
#
#  Depends on: whereami/base.py, whereami/scanner.py
#  Used by:    cli.py, server.py, whereami/chain.py (via LineTable)

import logging
from dataclasses import dataclass

from whereami.base import TAB_WIDTH, InputTooLarge, LineRecord, LineTable
from whereami.scanner import LineScanner, ScannedLine, count_lines

log = logging.getLogger("whereami")

# Largest buffer whose offsets fit in an unsigned 32-bit integer
MAX_BUFFER_SIZE = 0xFFFFFFFF

# Largest line count whose indices fit in a signed 32-bit integer
MAX_LINES = 0x7FFFFFFF


@dataclass
class ResolverState:
    """Cursor carried from one line to the next during a single analysis."""

    current_outer: int | None = None
    previous_indentation: int = 0
    last_eligible_index: int | None = None

    def resolve(self, records: list[LineRecord], line: ScannedLine) -> LineRecord:
        """Compute the record for the next line and advance the cursor.

        records holds every record produced so far; the new line's index is
        len(records).
        """
        index = len(records)

        if line.indentation is None:
            # Blank lines sit at the current level without moving it
            return LineRecord(
                index=index,
                indentation=self.previous_indentation,
                outer_index=self.current_outer,
                start=line.start,
                length=line.length,
                eligible=False,
            )

        indentation = line.indentation
        if line.eligible:
            if indentation < self.previous_indentation:
                # Close every scope whose header is indented at least as deep
                while self.current_outer is not None and indentation <= records[self.current_outer].indentation:
                    self.current_outer = records[self.current_outer].outer_index
                    if self.current_outer is None:
                        self.previous_indentation = 0
                    else:
                        self.previous_indentation = records[self.current_outer].indentation
            elif index > 0 and indentation > self.previous_indentation:
                self.current_outer = self.last_eligible_index

        record = LineRecord(
            index=index,
            indentation=indentation,
            outer_index=self.current_outer,
            start=line.start,
            length=line.length,
            eligible=line.eligible,
        )

        if line.eligible:
            self.previous_indentation = indentation
            self.last_eligible_index = index

        return record


def analyze(buffer: bytes, tab_width: int = TAB_WIDTH, source_name: str = "<buffer>") -> LineTable:
    """Scan a buffer and resolve the indentation hierarchy of every line.

    Args:
        buffer: Complete file contents.
        tab_width: Tab stop distance used when measuring indentation.
        source_name: Name used in warning messages (usually the file path).

    Returns:
        An immutable LineTable with one record per line.

    Raises:
        InputTooLarge: The buffer or its line count exceeds the supported range.
    """
    if len(buffer) > MAX_BUFFER_SIZE:
        raise InputTooLarge(f"File size {len(buffer)} > {MAX_BUFFER_SIZE} bytes is not supported.")

    n_lines = count_lines(buffer)
    if n_lines > MAX_LINES:
        raise InputTooLarge(f"file has more lines ({n_lines}) than supported ({MAX_LINES})")

    scanner = LineScanner(buffer, tab_width, source_name)
    state = ResolverState()
    records: list[LineRecord] = []
    for line in scanner:
        records.append(state.resolve(records, line))

    log.debug(f"{source_name}: {len(records)} lines, {len(scanner.warnings)} warnings")
    return LineTable(buffer=buffer, records=tuple(records), warnings=tuple(scanner.warnings))
