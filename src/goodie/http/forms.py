"""Form body parsing: URL-encoded and multipart.

``FormData`` behaves like ``QueryParams`` for text fields, so a posted
form binds onto a record the same way a query string does. Multipart
bodies are parsed with ``python-multipart``; uploads are kept in memory.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import parse_qsl

from python_multipart.multipart import MultipartParser, parse_options_header

from goodie._internal.multimap import PairMap

URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(PairMap):
    """Text fields of a submitted form, plus any uploaded files by field name."""

    __slots__ = ("_files",)

    def __init__(
        self,
        fields: Iterable[tuple[str, str]] = (),
        files: Mapping[str, UploadFile] | None = None,
    ) -> None:
        super().__init__(fields)
        self._files = MappingProxyType(dict(files or {}))

    @property
    def files(self) -> Mapping[str, UploadFile]:
        return self._files


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def is_form_content_type(content_type: str | None) -> bool:
    return bool(content_type) and _media_type(content_type) in (URLENCODED, MULTIPART)


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a request body sent as *content_type*.

    Raises:
        ValueError: For any other media type, or multipart without a boundary.
    """
    media_type = _media_type(content_type)
    if media_type == URLENCODED:
        return FormData(parse_qsl(body.decode("utf-8"), keep_blank_values=True))
    if media_type == MULTIPART:
        return _parse_multipart(body, content_type)
    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


class _PartCollector:
    """Receives ``MultipartParser`` callbacks and sorts parts into fields and files."""

    def __init__(self) -> None:
        self.fields: list[tuple[str, str]] = []
        self.files: dict[str, UploadFile] = {}
        self._headers: dict[str, str] = {}
        self._header_name = ""
        self._content = bytearray()

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._content = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name = data[start:end].decode("latin-1").lower()

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._headers[self._header_name] = data[start:end].decode("latin-1")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._content.extend(data[start:end])

    def on_part_end(self) -> None:
        _, params = parse_options_header(self._headers.get("content-disposition", ""))
        name = params.get(b"name")
        if name is None:
            return
        filename = params.get(b"filename")
        if filename is None:
            self.fields.append((name.decode(), self._content.decode("utf-8", errors="replace")))
            return
        self.files[name.decode()] = UploadFile(
            filename=filename.decode(),
            content_type=self._headers.get("content-type", "application/octet-stream"),
            content=bytes(self._content),
        )


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    parser.write(body)
    parser.finalize()
    return FormData(collector.fields, collector.files)
