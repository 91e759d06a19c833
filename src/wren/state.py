"""Application-wide key/value store with typed keys.

Values are addressed by ``StateKey`` objects that carry the value type,
so lookups come back typed and writes are checked::

    DB = StateKey("db", Database)

    app.state[DB] = Database(...)
    db = app.state[DB]          # typed as Database

The store is shared by every request. It is meant to be filled during
setup and read while serving; wren does not lock it, so concurrent
writers must bring their own synchronisation.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, overload


@dataclass(frozen=True, slots=True)
class StateKey[T]:
    """A typed handle for one entry in ``AppState``."""

    name: str
    value_type: type[T]

    def __repr__(self) -> str:
        return f"StateKey({self.name!r}, {self.value_type.__name__})"


class AppState:
    """Typed, read-mostly application state."""

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: dict[StateKey[Any], Any] = {}

    def __getitem__[T](self, key: StateKey[T]) -> T:
        try:
            return self._values[key]
        except KeyError:
            msg = f"No value set for {key!r}"
            raise KeyError(msg) from None

    def __setitem__[T](self, key: StateKey[T], value: T) -> None:
        if not isinstance(value, key.value_type):
            msg = f"{key!r} expects {key.value_type.__name__}, got {type(value).__name__}"
            raise TypeError(msg)
        self._values[key] = value

    def __delitem__(self, key: StateKey[Any]) -> None:
        del self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[StateKey[Any]]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"<AppState {sorted(k.name for k in self._values)!r}>"

    @overload
    def get[T](self, key: StateKey[T]) -> T | None: ...

    @overload
    def get[T, D](self, key: StateKey[T], default: D) -> T | D: ...

    def get(self, key: StateKey[Any], default: Any = None) -> Any:
        """Return the value for *key*, or *default* if unset."""
        return self._values.get(key, default)
