#  whereami - JSON Lines Renderer
#
#  Emits one JSON object per reported line, for tools that would rather not
#  parse the "..LINE: snippet" text format.
#
#  Depends on: whereami/base.py, whereami/chain.py, whereami/formatter.py
#  Used by:    cli.py, server.py (via renderer registry)

import json

from whereami import register_renderer
from whereami.base import PROXIMITY_WINDOW, BaseRenderer, LineTable
from whereami.chain import context_chain, query_indices
from whereami.formatter import snippet


def _line_object(table: LineTable, index: int, proximity_window: int) -> dict:
    record = table[index]
    chain = context_chain(table, index, proximity_window)
    return {
        "line": record.line,
        "outer": 0 if record.outer_index is None else record.outer_index + 1,
        "indentation": record.indentation,
        "contexts": [{"line": entry.line, "snippet": snippet(table.text(entry.index))} for entry in chain.entries],
        "truncated": chain.truncated_prefix,
    }


class JsonLinesRenderer(BaseRenderer):
    """Renders one JSON object per line, newline-terminated."""

    def render(self, table: LineTable, query_line: int, proximity_window: int = PROXIMITY_WINDOW) -> str:
        lines = []
        for index in query_indices(table, query_line):
            obj = _line_object(table, index, proximity_window)
            lines.append(json.dumps(obj, ensure_ascii=False) + "\n")
        return "".join(lines)


register_renderer("json", JsonLinesRenderer)
