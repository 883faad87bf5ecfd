"""Case-insensitive, validating header container."""

import re
from collections.abc import Iterable, Iterator, Mapping

from ..errors import InvalidHeaderError

HEADER_NAME_RE = re.compile(r"^[a-z0-9-]+$")


def normalize_header_name(name: str) -> str:
    """Lowercase a header name and reject anything outside ``[a-z0-9-]``."""
    if not isinstance(name, str):
        raise InvalidHeaderError(f"Header name must be a string, got {type(name).__name__}")
    key = name.lower()
    if not HEADER_NAME_RE.match(key):
        raise InvalidHeaderError(f"Invalid header name: {name!r}")
    return key


class Headers:
    """Ordered header store keyed by lowercase name.

    Setting an existing name overwrites its value in place, so the original
    insertion order is kept. Every lookup and mutation validates the name.
    """

    __slots__ = ("_items",)

    def __init__(self, init: "HeadersInit" = None):
        self._items: dict[str, str] = {}
        if init is None:
            return
        if isinstance(init, Headers):
            self._items = dict(init._items)
        elif isinstance(init, Mapping):
            for name, value in init.items():
                self.set(name, value)
        else:
            for pair in init:
                name, value = pair
                self.set(name, value)

    def get(self, name: str) -> str | None:
        """Return the value for *name*, or None if absent."""
        return self._items.get(normalize_header_name(name))

    def set(self, name: str, value) -> None:
        self._items[normalize_header_name(name)] = str(value)

    def has(self, name: str) -> bool:
        return normalize_header_name(name) in self._items

    def delete(self, name: str) -> bool:
        """Remove *name*. Returns False if it was not present."""
        return self._items.pop(normalize_header_name(name), None) is not None

    def clear(self) -> None:
        self._items.clear()

    def assign(self, other: "HeadersInit") -> None:
        """Set every entry of *other* on this container."""
        for name, value in Headers(other).items():
            self._items[name] = value

    def keys(self) -> list[str]:
        return list(self._items)

    def values(self) -> list[str]:
        return list(self._items.values())

    def items(self) -> list[tuple[str, str]]:
        return list(self._items.items())

    @property
    def size(self) -> int:
        return len(self._items)

    def to_dict(self) -> dict[str, str]:
        """Plain dict snapshot of the headers."""
        return dict(self._items)

    def copy(self) -> "Headers":
        return Headers(self)

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            return self.has(name)
        except InvalidHeaderError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == {k.lower(): str(v) for k, v in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


HeadersInit = Headers | Mapping[str, str] | Iterable[tuple[str, str]] | None
