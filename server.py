#!/usr/bin/env python3
#  whereami - MCP Server
#
#  Exposes whereami over the Model Context Protocol (MCP) so that any MCP
#  client can ask which scopes enclose a given line of a file.
#
#  Each call reads the file fresh and analyzes that snapshot; nothing is
#  cached between calls, so edits between requests are always seen.
#
#  Tool name, description, and server identity are config-driven.
#
#  Depends on: config.json (optional), whereami/, mcp
#  Used by:    MCP clients (registered in the client's MCP server config)

import logging
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from whereami import get_renderer
from whereami.base import IndexOutOfRange, InputTooLarge
from whereami.config import ConfigError, load_config
from whereami.resolver import analyze

SCRIPT_DIR = Path(__file__).parent

log = logging.getLogger("whereami-server")


def describe_file(path: Path, line: int, config: dict) -> str:
    """Analyze a file and render the context for one line (or all lines if 0).

    Returns the rendered text, or an "Error: ..." message instead of raising.
    """
    if line < 0:
        return f"Error: line must be 0 or a positive line number, got {line}."

    try:
        buffer = path.read_bytes()
    except OSError as e:
        return f"Error: could not read file '{path}': {e.strerror}"

    try:
        renderer = get_renderer(config["format"])
        table = analyze(buffer, config["tab_width"], source_name=str(path))
        output = renderer.render(table, line, config["proximity_window"])
    except (InputTooLarge, IndexOutOfRange, ValueError) as e:
        return f"Error: {e}"

    if not output:
        return "No enclosing context."
    return output


def create_server(config_path: Path | None = None) -> FastMCP:
    """Create and configure the MCP server from a config file.

    Loads config and registers the whereami tool. Returns the FastMCP instance.
    """
    if config_path is None:
        config_path = SCRIPT_DIR / "config.json"

    try:
        config = load_config(config_path)
    except ConfigError as e:
        log.error(str(e))
        sys.exit(1)

    mcp_config = config["mcp"]
    server_name = mcp_config.get("server_name", "whereami")

    logging.basicConfig(
        level=logging.INFO,
        format=f"[{server_name}] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    whereami_tool = mcp_config.get("whereami_tool", {})
    tool_name = whereami_tool.get("name", "whereami")
    tool_desc = whereami_tool.get("description", "Show the enclosing scopes of a line in a source file.")

    mcp_server = FastMCP(server_name)

    @mcp_server.tool(name=tool_name, description=tool_desc)
    async def whereami(path: str, line: int = 0) -> str:
        """Show the chain of enclosing scopes for a line.

        Args:
            path: Path to the source file.
            line: 1-based line number, or 0 to describe every line.
        """
        log.info(f"{tool_name}: {path}:{line}")
        return describe_file(Path(path), line, config)

    return mcp_server


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
