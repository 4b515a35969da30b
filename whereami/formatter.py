#  whereami - Context Formatter
#
#  Renders an ancestor line as a short "..LINE: snippet" token. Control-flow
#  headers (if/for/while/...) are abbreviated hard: long identifiers are cut
#  to a "$" and the snippet is capped at a fixed length. Declarations are
#  kept up to the opening parenthesis so the function name stays readable.
#
#  Depends on: whereami/base.py, whereami/chain.py
#  Used by:    whereami/text.py, whereami/json_lines.py

import re

from whereami.base import LineRecord
from whereami.chain import ContextChain

# Identifier or number runs longer than this are truncated on control-flow lines
MAX_IDENT_OR_NUM_LEN = 6

# Control-flow snippets stop once they reach this many characters
MAX_CONTROL_LEN = 20

TRUNCATION_MARKER = ord("$")
ELLIPSIS = "..."

CONTROL_FLOW_RE = re.compile(rb"(?:if|do|for|case|while|switch)\s")
NAMESPACE_RE = re.compile(rb"namespace\s")

_IDENT_BYTES = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_")
_WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")
_SLASH = ord("/")
_LPAREN = ord("(")
_SPACE = ord(" ")

# Punctuation that can appear in a declaration before the function name:
# namespace separators, pointer/reference markers, destructors, templates
_NAME_PUNCTUATION = frozenset(b":.*&~<>,")


def is_control_flow(text: bytes) -> bool:
    return CONTROL_FLOW_RE.match(text) is not None


def strip_namespace(text: bytes) -> bytes:
    """Drop leading "namespace " keywords, however many there are."""
    m = NAMESPACE_RE.match(text)
    while m:
        text = text[m.end() :]
        m = NAMESPACE_RE.match(text)
    return text


def snippet(text: bytes) -> str:
    """Abbreviate one line of source text for display.

    Works on raw bytes and never fails; anything that does not decode as
    UTF-8 is shown with replacement characters.
    """
    is_control = is_control_flow(text)
    could_be_name = not is_control
    text = strip_namespace(text)

    out = bytearray()
    ident_len = 0
    before_space = 0
    prev_was_space = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        i += 1

        if ch in _WHITESPACE:
            ident_len = 0
            prev_was_space = True
            continue

        if ch == _SLASH and i < n and text[i] == _SLASH:
            break

        if ch in _IDENT_BYTES:
            if prev_was_space and before_space in _IDENT_BYTES:
                out.append(_SPACE)
            if is_control and ident_len >= MAX_IDENT_OR_NUM_LEN:
                if ident_len == MAX_IDENT_OR_NUM_LEN:
                    out.append(TRUNCATION_MARKER)
                ch = TRUNCATION_MARKER
            else:
                out.append(ch)
            ident_len += 1
        else:
            out.append(ch)
            ident_len = 0
            if ch == _LPAREN and could_be_name:
                break
            if ch not in _NAME_PUNCTUATION:
                could_be_name = False

        prev_was_space = False
        before_space = ch
        if is_control and len(out) >= MAX_CONTROL_LEN:
            break

    return out.decode("utf-8", errors="replace")


def format_entry(record: LineRecord, buffer: bytes) -> str:
    """Render one context line as "..LINE: snippet"."""
    return f"..{record.line}: {snippet(buffer[record.start : record.end])}"


def render_chain(chain: ContextChain, buffer: bytes) -> str:
    """Concatenate a chain's entries, adding "..." when nearby ancestors were omitted."""
    parts = [format_entry(record, buffer) for record in chain.entries]
    if chain.truncated_prefix:
        parts.append(ELLIPSIS)
    return "".join(parts)
