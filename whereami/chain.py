#  whereami - Context Chain Builder
#
#  Follows outer references from a queried line back to the top level and
#  returns the ancestors worth showing: bare "{" lines are replaced by the
#  header line above them, and ancestors close enough to the query to be
#  visible on screen are dropped.
#
#  Depends on: whereami/base.py
#  Used by:    whereami/formatter.py, whereami/text.py, whereami/json_lines.py

from dataclasses import dataclass

from whereami.base import PROXIMITY_WINDOW, IndexOutOfRange, LineRecord, LineTable


@dataclass(frozen=True)
class ContextChain:
    """Ancestors of one line, outermost first.

    truncated_prefix is set when the innermost ancestor was omitted for
    being within the proximity window; renderers print a trailing "..."
    in that case.
    """

    entries: tuple[LineRecord, ...]
    truncated_prefix: bool = False


def line_is_boring(table: LineTable, index: int) -> bool:
    """A line is boring when its whole content is an opening brace."""
    return table.text(index).rstrip() == b"{"


def _skip_boring(table: LineTable, index: int) -> int:
    """Replace a bare "{" ancestor with the nearest header line above it.

    Walks backward by line order to the closest line indented no deeper
    than the brace, repeating while the result is itself a brace. Never
    walks past line 0.
    """
    while index > 0 and line_is_boring(table, index):
        indent = table[index].indentation
        index -= 1
        while index > 0 and table[index].indentation > indent:
            index -= 1
    return index


def ancestor_indices(table: LineTable, target_index: int) -> list[int]:
    """Indices of every reported ancestor of a line, outermost first, before proximity filtering."""
    ancestors = []
    outer = table[target_index].outer_index
    while outer is not None:
        ancestors.append(_skip_boring(table, outer))
        outer = table[outer].outer_index
    ancestors.reverse()
    return ancestors


def context_chain(table: LineTable, target_index: int, proximity_window: int = PROXIMITY_WINDOW) -> ContextChain:
    """Build the chain of enclosing contexts for one line.

    Args:
        table: Analyzed buffer.
        target_index: 0-based index of the queried line.
        proximity_window: Ancestors fewer than this many lines above the
            target are omitted.

    Raises:
        IndexOutOfRange: target_index is not a line of the table.
    """
    if not 0 <= target_index < len(table):
        raise IndexOutOfRange(f"line {target_index + 1} is out of range (file has {len(table)} lines)")

    entries = []
    skipped_previous = False
    for index in ancestor_indices(table, target_index):
        if target_index - index < proximity_window:
            skipped_previous = True
            continue
        entries.append(table[index])
        skipped_previous = False

    return ContextChain(entries=tuple(entries), truncated_prefix=skipped_previous)


def query_indices(table: LineTable, query_line: int) -> range:
    """Map a 1-based query line (0 = all lines) to the range of indices to report.

    Raises:
        IndexOutOfRange: query_line is negative or past the last line.
    """
    if query_line == 0:
        return range(len(table))
    if not 1 <= query_line <= len(table):
        raise IndexOutOfRange(f"line {query_line} is out of range (file has {len(table)} lines)")
    return range(query_line - 1, query_line)
