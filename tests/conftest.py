#  whereami - Test Fixtures
#
#  Shared pytest fixtures for scanner, resolver, chain and CLI tests.
#  Uses tmp_path (pytest built-in) for all temporary files.
#
#  Depends on: (none)
#  Used by:    all test files

import pytest

NESTED_SOURCE = (
    b"namespace Foo {\n"
    b"    void bar() {\n"
    b"        while (x) {\n"
    b"            y();\n"
    b"        }\n"
    b"    }\n"
    b"}\n"
)


@pytest.fixture
def nested_source():
    """A namespace, a function and a loop, each one level deeper."""
    return NESTED_SOURCE


@pytest.fixture
def long_c_source():
    """A C function whose body is long enough to exercise the proximity window."""
    lines = [
        "#include <stdio.h>",
        "",
        "static int process_items(struct item *items, int count)",
        "{",
        "    int total = 0;",
        "    for (int index = 0; index < count; index++) {",
    ]
    lines += [f"        total += items[index].weight * {i};" for i in range(25)]
    lines += [
        "        if (items[index].weight > maximum_weight) {",
        "            report_overweight(items[index]);",
        "        }",
        "    }",
        "    return total;",
        "}",
    ]
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def tmp_source_file(tmp_path, nested_source):
    """The nested source written to a .cpp file."""
    f = tmp_path / "nested.cpp"
    f.write_bytes(nested_source)
    return f


@pytest.fixture
def tmp_config():
    """A minimal valid config dict for testing."""
    return {
        "tab_width": 8,
        "proximity_window": 0,
        "format": "text",
        "mcp": {
            "server_name": "whereami-test",
            "whereami_tool": {"name": "whereami", "description": "test tool"},
        },
    }
