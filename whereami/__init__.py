#  whereami - Renderer Registry
#
#  Maps output format names (from config.json or --format) to renderer
#  classes. Built-in renderers self-register on import.
#
#  Depends on: whereami/base.py
#  Used by:    cli.py, server.py

from whereami.base import BaseRenderer

RENDERER_REGISTRY: dict[str, type[BaseRenderer]] = {}


def register_renderer(name: str, cls: type[BaseRenderer]):
    """Register a renderer class under the given format name."""
    RENDERER_REGISTRY[name] = cls


def get_renderer(name: str) -> BaseRenderer:
    """Get an instance of the renderer registered under the given format name."""
    if name not in RENDERER_REGISTRY:
        available = ", ".join(sorted(RENDERER_REGISTRY.keys()))
        raise ValueError(f"Unknown output format: '{name}'. Available: {available}")
    return RENDERER_REGISTRY[name]()


# Import built-in renderers to trigger self-registration
from whereami import json_lines as _json_lines  # noqa: F401, E402
from whereami import text as _text  # noqa: F401, E402
