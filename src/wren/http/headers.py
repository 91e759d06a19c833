"""Case-insensitive HTTP headers.

``Headers`` is the immutable request side, decoded once from the ASGI
scope. ``MutableHeaders`` is the response side, edited by handlers
until the response is committed.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    """

    __slots__ = ("_items",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        items = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )
        object.__setattr__(self, "_items", items)

    def __getitem__(self, key: str) -> str:
        key = key.lower()
        for name, value in self._items:
            if name == key:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key = key.lower()
        return any(name == key for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._items))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._items))

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key = key.lower()
        return [value for name, value in self._items if name == key]


class MutableHeaders:
    """Response headers, editable until the response starts.

    Preserves insertion order and allows repeated names (``Set-Cookie``).
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._items: list[tuple[str, str]] = list(items)

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: str) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        lowered = key.lower()
        self._items = [(n, v) for n, v in self._items if n.lower() != lowered]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MutableHeaders({self._items!r})"

    def get(self, key: str, default: str | None = None) -> str | None:
        lowered = key.lower()
        for name, value in self._items:
            if name.lower() == lowered:
                return value
        return default

    def set(self, key: str, value: str) -> None:
        """Replace every value of *key* with *value*."""
        del self[key]
        self._items.append((key, value))

    def add(self, key: str, value: str) -> None:
        """Append a value without removing existing ones."""
        self._items.append((key, value))

    def setdefault(self, key: str, value: str) -> str:
        existing = self.get(key)
        if existing is not None:
            return existing
        self._items.append((key, value))
        return value

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Encode as ASGI header pairs (lower-cased names)."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in self._items
        ]
