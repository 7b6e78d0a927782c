"""Form bodies: ``application/x-www-form-urlencoded`` and ``multipart/form-data``.

URL-encoded bodies are split with ``urllib.parse``; multipart bodies are
fed to ``python-multipart``'s streaming parser in one write, with the
parts collected in memory.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qsl

from python_multipart.multipart import MultipartParser, parse_options_header

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file part of a multipart submission, held in memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    async def read(self) -> bytes:
        return self.content

    async def save(self, path: Path) -> None:
        """Write the content to *path*. The parent directory must exist."""
        path.write_bytes(self.content)


class FormData(Mapping[str, str]):
    """Submitted form fields; a name maps to its first value.

    Repeated fields (checkboxes, multi-selects) are available through
    ``get_list``. Uploaded files are kept apart, in ``files``.
    """

    __slots__ = ("_fields", "files")

    def __init__(
        self,
        fields: dict[str, list[str]],
        files: Mapping[str, UploadFile] | None = None,
    ) -> None:
        self._fields = fields
        self.files: Mapping[str, UploadFile] = files or {}

    def __getitem__(self, key: str) -> str:
        return self._fields[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FormData({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._fields.get(key, ()))


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def is_form_content_type(content_type: str | None) -> bool:
    """Whether *content_type* is one of the two HTML form encodings."""
    if not content_type:
        return False
    return _media_type(content_type) in (FORM_URLENCODED, FORM_MULTIPART)


async def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse *body* according to *content_type*.

    Raises:
        ValueError: For any other content type, a multipart type without
            a boundary, or a URL-encoded body that is not UTF-8.
    """
    media_type = _media_type(content_type)
    if media_type == FORM_URLENCODED:
        fields: dict[str, list[str]] = {}
        for key, value in parse_qsl(body.decode("utf-8"), keep_blank_values=True):
            fields.setdefault(key, []).append(value)
        return FormData(fields)
    if media_type == FORM_MULTIPART:
        return _MultipartCollector(content_type).parse(body)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


class _MultipartCollector:
    """Receives ``MultipartParser`` callbacks and builds a ``FormData``."""

    def __init__(self, content_type: str) -> None:
        _, options = parse_options_header(content_type)
        boundary = options.get(b"boundary")
        if not boundary:
            msg = "Multipart form data missing boundary parameter"
            raise ValueError(msg)
        self.boundary = boundary
        self.fields: dict[str, list[str]] = {}
        self.files: dict[str, UploadFile] = {}
        self._header_name = ""
        self._reset()

    def _reset(self) -> None:
        self.headers: dict[str, str] = {}
        self.data = bytearray()

    def parse(self, body: bytes) -> FormData:
        parser = MultipartParser(
            self.boundary,
            {
                "on_part_begin": self._reset,
                "on_part_data": self.on_part_data,
                "on_part_end": self.on_part_end,
                "on_header_field": self.on_header_field,
                "on_header_value": self.on_header_value,
            },
        )
        parser.write(body)
        parser.finalize()
        return FormData(self.fields, self.files)

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name = data[start:end].decode("latin-1").lower()

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self.headers[self._header_name] = data[start:end].decode("latin-1")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self.data += data[start:end]

    def on_part_end(self) -> None:
        _, params = parse_options_header(self.headers.get("content-disposition", ""))
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            self.files[field_name] = UploadFile(
                filename=filename.decode("utf-8"),
                content_type=self.headers.get("content-type", "application/octet-stream"),
                content=bytes(self.data),
            )
        else:
            self.fields.setdefault(field_name, []).append(
                self.data.decode("utf-8", errors="replace")
            )
