"""Query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Parsed query string; a key maps to the first value given for it.

    Blank values are kept (``?message=`` yields ``""``), and the raw
    query string stays available as ``raw`` for logging and URLs.
    """

    __slots__ = ("_values", "raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self.raw = query_string
        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
            values.setdefault(key, []).append(value)
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self.raw.decode('latin-1')!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value given for *key*, possibly empty."""
        return list(self._values.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """The first value for *key* as an int; *default* when absent or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
