"""Case-insensitive HTTP headers.

``Headers`` is the immutable request side: it wraps the raw byte pairs
from the ASGI scope and decodes on access. ``ResponseHeaders`` is the
mutable, ordered list a RequestContext builds up before it replies.
"""

from collections.abc import Iterator, Mapping

from wren.errors import InvalidArgument


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Set-Cookie``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (e.g. multiple ``Set-Cookie``)."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw


def _check_latin1(name: str, value: str) -> None:
    """Raise ``InvalidArgument`` unless *name* and *value* fit on the wire."""
    try:
        name.encode("latin-1")
        value.encode("latin-1")
    except UnicodeEncodeError as exc:
        msg = f"Header {name!r} cannot be encoded as Latin-1: {value!r}"
        raise InvalidArgument(msg) from exc


class ResponseHeaders:
    """Ordered, mutable response headers.

    Insertion order is preserved and is the order headers go out on the
    wire. ``set`` replaces every existing value in place of the first
    one; ``add`` appends another value. Both reject names and values that
    are not Latin-1, so a bad header fails where it is set rather than
    when the response is sent.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[tuple[str, str]] = []

    def set(self, name: str, value: str) -> None:
        """Set *name* to *value*, dropping any other values it had."""
        _check_latin1(name, value)
        lower = name.lower()
        for i, (existing, _) in enumerate(self._items):
            if existing.lower() == lower:
                self._items[i] = (name, value)
                self._items[i + 1 :] = [
                    item for item in self._items[i + 1 :] if item[0].lower() != lower
                ]
                return
        self._items.append((name, value))

    def add(self, name: str, value: str) -> None:
        """Append another value for *name*."""
        _check_latin1(name, value)
        self._items.append((name, value))

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for *name*, or *default* if missing."""
        lower = name.lower()
        for existing, value in self._items:
            if existing.lower() == lower:
                return value
        return default

    def get_list(self, name: str) -> list[str]:
        """Return all values for *name*, in order."""
        lower = name.lower()
        return [value for existing, value in self._items if existing.lower() == lower]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ResponseHeaders({self._items!r})"

    def to_asgi(self) -> list[tuple[bytes, bytes]]:
        """Encode as ASGI ``(name, value)`` byte pairs, names lower-cased."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in self._items
        ]
