"""Route pattern compilation.

Turns a route template such as ``/users/:id`` or ``/files/:path*`` into
a compiled regular expression plus the ordered list of placeholder names.

Grammar::

    :name    named capture  — one path segment, never crosses ``/``
    :name*   named wildcard — everything that remains, ``/`` included

Everything else is literal and is escaped before it reaches ``re``.
"""

import re
from dataclasses import dataclass

from wren.errors import DuplicatePlaceholderError, PatternCompileError

SEGMENT = r"([^/]+)"
WILDCARD = r"(.*)"

# A placeholder runs from ':' up to the next '/' or the end of the pattern.
_PLACEHOLDER_RE = re.compile(r":([^/]*)")


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A pattern compiled once at startup and reused for every request."""

    raw: str
    source: str
    regex: re.Pattern[str]
    keys: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Apply the matcher to the full *path*.

        Returns the captured values keyed by placeholder name, in
        declaration order, or ``None`` when the path does not match.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return dict(zip(self.keys, m.groups(), strict=True))


def compile_pattern(raw: str, trailing_slash: bool = False) -> CompiledPattern:
    """Compile a route template into a ``CompiledPattern``.

    Examples::

        "/users"          -> ^/users$                 keys=()
        "/users/:id"      -> ^/users/([^/]+)$         keys=("id",)
        "/files/:path*"   -> ^/files/(.*)$            keys=("path",)
        "/users" + slash  -> ^/users/?$               keys=()

    Raises ``DuplicatePlaceholderError`` if a placeholder name repeats and
    ``PatternCompileError`` if the resulting expression is invalid. Both
    are startup-fatal.
    """
    parts: list[str] = ["^"]
    keys: list[str] = []
    pos = 0

    for m in _PLACEHOLDER_RE.finditer(raw):
        token = m.group(1)
        is_wildcard = token.endswith("*")
        key = token[:-1] if is_wildcard else token
        if not key:
            # A bare ':' is literal text
            continue

        if key in keys:
            raise DuplicatePlaceholderError(raw, key, keys.index(key) + 1)

        parts.append(re.escape(raw[pos : m.start()]))
        parts.append(WILDCARD if is_wildcard else SEGMENT)
        keys.append(key)
        pos = m.end()

    parts.append(re.escape(raw[pos:]))
    parts.append("/?$" if trailing_slash else "$")
    source = "".join(parts)

    try:
        regex = re.compile(source)
    except re.error as exc:
        msg = f"Unsupported URI pattern {raw!r}: {exc}"
        raise PatternCompileError(msg, pattern=raw) from exc

    return CompiledPattern(raw=raw, source=source, regex=regex, keys=tuple(keys))
