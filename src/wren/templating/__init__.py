"""Template support (kida)."""

from wren.templating.integration import create_environment

__all__ = ["create_environment"]
