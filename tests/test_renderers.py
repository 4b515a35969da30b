#  whereami - Renderer Tests
#
#  Tests for the text and JSON-lines renderers.

import json

import pytest

from whereami.base import IndexOutOfRange
from whereami.json_lines import JsonLinesRenderer
from whereami.resolver import analyze
from whereami.text import TextRenderer, line_prefix

FIVE_LINES = b"a {\n  b\n  c\n}\nd\n"

# ---------------------------------------------------------------------------
# Text renderer
# ---------------------------------------------------------------------------


def test_single_query_has_no_trailing_newline(nested_source):
    """A single-line query prints one line of tokens without a newline."""
    output = TextRenderer().render(analyze(nested_source), 4, proximity_window=0)
    assert output == "..1: Foo{..2: void bar(..3: while(x){"


def test_single_query_all_nearby(nested_source):
    """With the default window, nearby ancestors collapse to exactly '...'."""
    assert TextRenderer().render(analyze(nested_source), 4) == "..."


def test_single_query_without_ancestors():
    """A top-level line prints nothing at all."""
    assert TextRenderer().render(analyze(b"a;\nb;\nc;\n"), 2) == ""


def test_long_function_query(long_c_source):
    """Distant headers are shown, the nearby innermost one becomes '...'."""
    output = TextRenderer().render(analyze(long_c_source), 33)
    assert output == "..3: static int process_items(..6: for(int index=0;inde..."


def test_all_lines_mode():
    """Query 0 prints every line with its line/outer/indentation prefix."""
    output = TextRenderer().render(analyze(FIVE_LINES), 0, proximity_window=0)
    lines = output.split("\n")
    assert lines[-1] == ""
    assert lines[:-1] == [
        "    1:     0:  0: ",
        "    2:     1:  2: ..1: a{",
        "    3:     1:  2: ..1: a{",
        "    4:     0:  0: ",
        "    5:     0:  0: ",
    ]


def test_line_prefix_for_top_level_line():
    """Lines without an outer line report 0 as their outer line."""
    assert line_prefix(analyze(b"x\n"), 0) == "    1:     0:  0: "


def test_text_renderer_rejects_out_of_range(nested_source):
    """Queries past the end of the buffer are rejected before any output."""
    with pytest.raises(IndexOutOfRange):
        TextRenderer().render(analyze(nested_source), 8)


def test_rendering_is_deterministic(long_c_source):
    """Rendering the same buffer twice gives identical output."""
    first = TextRenderer().render(analyze(long_c_source), 0)
    second = TextRenderer().render(analyze(long_c_source), 0)
    assert first == second


# ---------------------------------------------------------------------------
# JSON-lines renderer
# ---------------------------------------------------------------------------


def test_json_single_query(nested_source):
    """A single query produces one JSON object with its contexts."""
    output = JsonLinesRenderer().render(analyze(nested_source), 4, proximity_window=0)
    assert output.endswith("\n")
    obj = json.loads(output)
    assert obj["line"] == 4
    assert obj["outer"] == 3
    assert obj["indentation"] == 12
    assert obj["contexts"] == [
        {"line": 1, "snippet": "Foo{"},
        {"line": 2, "snippet": "void bar("},
        {"line": 3, "snippet": "while(x){"},
    ]
    assert obj["truncated"] is False


def test_json_all_lines():
    """Query 0 produces one JSON object per line."""
    output = JsonLinesRenderer().render(analyze(FIVE_LINES), 0)
    objects = [json.loads(line) for line in output.splitlines()]
    assert [o["line"] for o in objects] == [1, 2, 3, 4, 5]
    assert objects[1]["truncated"] is True
    assert objects[1]["contexts"] == []
