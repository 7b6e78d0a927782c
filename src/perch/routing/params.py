"""Converters for typed path placeholders such as ``{page:int}``."""

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Converter:
    """What a placeholder accepts, and how early it is tried.

    Lower ``rank`` is tried first among placeholders at the same depth;
    ``path`` ranks last and may span several segments.
    """

    name: str
    pattern: re.Pattern[str]
    rank: int

    def accepts(self, text: str) -> bool:
        return self.pattern.fullmatch(text) is not None


CONVERTERS: dict[str, Converter] = {
    converter.name: converter
    for converter in (
        Converter("int", re.compile(r"\d+"), 0),
        Converter("float", re.compile(r"\d+(?:\.\d+)?"), 1),
        Converter("str", re.compile(r"[^/]+"), 2),
        Converter("path", re.compile(r".+"), 3),
    )
}

CATCH_ALL = "path"
