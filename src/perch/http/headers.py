"""Request headers as a read-only, case-insensitive mapping."""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only view over the header pairs of an ASGI scope.

    Names are lower-cased once, at construction. Lookup returns the
    first value sent under a name; ``get_list`` returns all of them, in
    the order the client sent them.
    """

    __slots__ = ("_index", "_pairs")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        pairs = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )
        index: dict[str, list[str]] = {}
        for name, value in pairs:
            index.setdefault(name, []).append(value)
        self._pairs = pairs
        self._index = index

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Headers({self._pairs!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent under *key*, possibly empty."""
        return list(self._index.get(key.lower(), ()))
