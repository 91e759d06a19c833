"""Kida environment setup.

Creates a kida Environment from wren's AppConfig. The environment is
created once when the app freezes and reused by ``wren.responses.render``.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from wren.config import AppConfig


def create_environment(
    config: AppConfig,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment from app configuration.

    Templates are loaded from ``config.template_dir`` and reloaded on
    change in debug mode.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )
    if filters:
        env.update_filters(dict(filters))
    for name, value in (globals_ or {}).items():
        env.add_global(name, value)
    return env
