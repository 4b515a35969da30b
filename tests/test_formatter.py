#  whereami - Context Formatter Tests
#
#  Tests for snippet abbreviation heuristics and entry rendering in
#  whereami/formatter.py.

from whereami.chain import ContextChain, context_chain
from whereami.formatter import (
    MAX_CONTROL_LEN,
    format_entry,
    is_control_flow,
    render_chain,
    snippet,
    strip_namespace,
)
from whereami.resolver import analyze

# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def test_control_flow_keywords():
    """Control-flow keywords must be followed by whitespace."""
    for text in (b"if (x)", b"do {", b"for (;;)", b"case 1:", b"while (x)", b"switch (y)", b"if\t(x)"):
        assert is_control_flow(text)
    for text in (b"if(x)", b"iffy()", b"format(a)", b"void f()"):
        assert not is_control_flow(text)


def test_strip_namespace_repeats():
    """Every leading namespace keyword is removed."""
    assert strip_namespace(b"namespace Foo {") == b"Foo {"
    assert strip_namespace(b"namespace namespace Foo") == b"Foo"
    assert strip_namespace(b"namespaces x") == b"namespaces x"


# ---------------------------------------------------------------------------
# Snippets
# ---------------------------------------------------------------------------


def test_declaration_stops_at_open_paren():
    """A function declaration is shown up to and including its parenthesis."""
    assert snippet(b"void bar() {") == "void bar("
    assert snippet(b"static int process_items(struct item *items, int count)") == "static int process_items("


def test_declaration_with_namespace_separators():
    """Qualified names and pointer return types still stop at the parenthesis."""
    assert snippet(b"std::vector<int> Widget::layout(int width)") == "std::vector<int>Widget::layout("
    assert snippet(b"char *copy_string(const char *s)") == "char*copy_string("


def test_expression_line_not_cut_at_paren():
    """Once non-name punctuation is seen, a later parenthesis does not stop the snippet."""
    assert snippet(b"result = compute_value(a, b);") == "result=compute_value(a,b);"


def test_declaration_identifiers_not_truncated():
    """Declaration lines keep long identifiers intact."""
    assert snippet(b"static void render_everything_now(int frame)") == "static void render_everything_now("


def test_control_flow_identifier_truncation():
    """Long identifiers on control-flow lines end in a single $ marker."""
    assert snippet(b"while (remaining_count > 0) {") == "while(remain$>0){"


def test_control_flow_length_cap():
    """Control-flow snippets stop at the length budget."""
    text = snippet(b"if (a && b && c && d && e && f && g)")
    assert text == "if(a&&b&&c&&d&&e&&f&"
    assert len(text) == MAX_CONTROL_LEN


def test_namespace_line():
    """The namespace keyword is dropped from namespace headers."""
    assert snippet(b"namespace Foo {") == "Foo{"


def test_whitespace_collapses_between_words():
    """Runs of whitespace between words become one space; other whitespace disappears."""
    assert snippet(b"struct\t\t   Widget   {") == "struct Widget{"


def test_line_comment_stops_snippet():
    """Text after // is never shown."""
    assert snippet(b"struct Widget // the widget") == "struct Widget"


def test_undecodable_bytes_degrade_gracefully():
    """Invalid UTF-8 is rendered with replacement characters instead of failing."""
    text = snippet(b"void \xff\xfe(")
    assert text.startswith("void")
    assert "\ufffd" in text


def test_empty_text():
    """An empty line renders as an empty snippet."""
    assert snippet(b"") == ""


# ---------------------------------------------------------------------------
# Entries and chains
# ---------------------------------------------------------------------------


def test_format_entry_uses_one_based_line(nested_source):
    """Entries are prefixed with the 1-based line number."""
    table = analyze(nested_source)
    assert format_entry(table[1], table.buffer) == "..2: void bar("


def test_render_nested_chain(nested_source):
    """The nested scenario renders namespace, function and loop in order."""
    table = analyze(nested_source)
    chain = context_chain(table, 3, proximity_window=0)
    assert render_chain(chain, table.buffer) == "..1: Foo{..2: void bar(..3: while(x){"


def test_render_chain_ellipsis_only():
    """A fully omitted chain renders as just the ellipsis."""
    assert render_chain(ContextChain(entries=(), truncated_prefix=True), b"") == "..."
    assert render_chain(ContextChain(entries=()), b"") == ""
