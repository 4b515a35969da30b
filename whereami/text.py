#  whereami - Text Renderer
#
#  The classic whereami output. A single query prints its context chain on
#  one line with no trailing newline, so editors can show it in a status
#  bar. Query 0 prints every line of the file, each prefixed with its line
#  number, outer line and indentation.
#
#  Depends on: whereami/base.py, whereami/chain.py, whereami/formatter.py
#  Used by:    cli.py, server.py (via renderer registry)

from whereami import register_renderer
from whereami.base import PROXIMITY_WINDOW, BaseRenderer, LineTable
from whereami.chain import context_chain, query_indices
from whereami.formatter import render_chain


def line_prefix(table: LineTable, index: int) -> str:
    """Return the "<line>: <outer>: <indentation>: " prefix used in all-lines mode."""
    record = table[index]
    outer = 0 if record.outer_index is None else record.outer_index + 1
    return f"{record.line:5d}: {outer:5d}: {record.indentation:2d}: "


class TextRenderer(BaseRenderer):
    """Renders context chains as "..LINE: snippet" tokens."""

    def render(self, table: LineTable, query_line: int, proximity_window: int = PROXIMITY_WINDOW) -> str:
        indices = query_indices(table, query_line)

        if query_line:
            chain = context_chain(table, indices[0], proximity_window)
            return render_chain(chain, table.buffer)

        parts = []
        for index in indices:
            chain = context_chain(table, index, proximity_window)
            parts.append(line_prefix(table, index) + render_chain(chain, table.buffer) + "\n")
        return "".join(parts)


register_renderer("text", TextRenderer)
