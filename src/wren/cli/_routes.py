"""``wren routes`` — list the compiled route table.

Routes are printed in declaration order, which is also match priority.
Diagnostics (duplicate names or patterns) follow on stderr.
"""

import argparse
import sys

from wren.cli._resolve import resolve_app
from wren.errors import ConfigurationError


def _handler_names(handlers: tuple[object, ...]) -> str:
    return " -> ".join(getattr(h, "__name__", type(h).__name__) for h in handlers)


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATTERN, NAME, and HANDLERS."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        table = app.table
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not table.routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for route in table.routes:
        pattern = route.pattern
        if route.trailing_slash:
            pattern += " [/]"
        handlers = _handler_names(route.handlers)
        if route.fall_through:
            handlers += " (fall-through)"
        rows.append((route.method, pattern, route.name or "-", handlers))

    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    widths = [max(w, len(h)) for w, h in zip(widths, ("METHOD", "PATTERN", "NAME"), strict=True)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"

    print(fmt.format("METHOD", "PATTERN", "NAME", "HANDLERS"))
    print("-" * min(sum(widths) + 6 + max(len(r[3]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))

    for diagnostic in table.diagnostics:
        print(f"warning: {diagnostic.message}", file=sys.stderr)
