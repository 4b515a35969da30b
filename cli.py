#!/usr/bin/env python3
#  whereami - Command Line Interface
#
#  Prints the chain of enclosing scopes for one line of a source file, or
#  for every line when LINE is 0. Meant to be called from an editor with the
#  current file and cursor line.
#
#  Depends on: config.json (optional), whereami/
#  Used by:    Manual CLI invocation (python cli.py <file> <line>), editor integrations

import logging
import sys
from pathlib import Path

from whereami import get_renderer
from whereami.base import IndexOutOfRange, InputTooLarge
from whereami.config import ConfigError, load_config
from whereami.resolver import analyze

SCRIPT_DIR = Path(__file__).parent
CONFIG_PATH = SCRIPT_DIR / "config.json"

USAGE = (
    "Usage: {prog} <SOURCEFILENAME> <LINE> [--format=NAME]\n\n"
    "LINE...line number for which to print whereami information, 0 means print all"
)

HELP_FLAGS = {"--help", "/?", "/help"}

log = logging.getLogger("whereami")


def _fail(message: str):
    log.error(message)
    sys.exit(1)


def parse_args(argv: list[str]) -> tuple[str, int, str | None]:
    """Split argv into (filename, query_line, format).

    Exits with status 1 on malformed arguments.
    """
    fmt = None
    positional = []
    for arg in argv:
        if arg.startswith("--format="):
            fmt = arg.split("=", 1)[1]
        else:
            positional.append(arg)

    if len(positional) != 2:
        _fail("expected two arguments on the command line (see usage)")

    filename, line_arg = positional
    if not line_arg.isdecimal():
        _fail(f"expected a line number as the second command-line argument but got: {line_arg}")

    return filename, int(line_arg), fmt


def read_source(filename: str) -> bytes:
    """Read the whole file as bytes. Exits with status 1 if it cannot be read."""
    try:
        return Path(filename).read_bytes()
    except OSError as e:
        _fail(f"could not read file '{filename}': ({e.errno}) {e.strerror}")


def main(argv: list[str] | None = None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if argv is None:
        argv = sys.argv[1:]
    prog = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "whereami"

    if any(arg in HELP_FLAGS for arg in argv):
        sys.stdout.write(USAGE.format(prog=prog))
        return

    filename, query_line, fmt = parse_args(argv)

    try:
        config = load_config(CONFIG_PATH)
    except ConfigError as e:
        _fail(str(e))

    try:
        renderer = get_renderer(fmt or config["format"])
    except ValueError as e:
        _fail(str(e))

    buffer = read_source(filename)

    try:
        table = analyze(buffer, config["tab_width"], source_name=filename)
        output = renderer.render(table, query_line, config["proximity_window"])
    except (InputTooLarge, IndexOutOfRange) as e:
        _fail(str(e))

    sys.stdout.write(output)
    sys.stdout.flush()


if __name__ == "__main__":
    main()
