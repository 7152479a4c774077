# bitacora/app/security/upload.py
"""
Upload policies for multipart endpoints.

An ``UploadPolicy`` is used as a FastAPI dependency. It streams the request
body through python-multipart's parser, enforces ``{allowed types, max
size, one file, expected field}`` part by part and hands the handler an
``AcceptedUpload`` whose bytes live in memory. Nothing is spooled to disk:
the body is cut off as soon as it crosses the policy's ceiling, and any
violation raises before the handler body runs, so a rejected upload never
reaches persistence.
"""
import base64
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from fastapi import Request
from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header

from bitacora.app.core.config import Settings
from bitacora.app.core.exceptions import (
    PayloadTooLarge,
    TooManyFiles,
    UnexpectedField,
    UnsupportedMediaType,
    ValidationError,
)

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("image/png", "image/jpeg", "image/jpg")
DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
)

# Room for boundaries, part headers and the small text fields
MULTIPART_OVERHEAD = 64 * 1024


def to_data_uri(mime_type: str, payload: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


@dataclass
class AcceptedUpload:
    filename: str
    content_type: str
    data: bytes
    # Non-file form fields sent alongside the file
    fields: Dict[str, str] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_uri(self) -> str:
        return to_data_uri(self.content_type, self.data)


class _PartCollector:
    """Multipart parser callbacks that check each part as it arrives."""

    def __init__(self, policy: "UploadPolicy", charset: str):
        self.policy = policy
        self.charset = charset
        self.fields: Dict[str, str] = {}
        self.upload: Optional[AcceptedUpload] = None
        self.finished = False
        self.file_count = 0

        self._header_name = b""
        self._header_value = b""
        self._headers: Dict[bytes, bytes] = {}
        self._name = ""
        self._filename: Optional[str] = None
        self._content_type = ""
        self._buffer = bytearray()

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_end": self.on_end,
        }

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self.charset, errors="replace")

    def on_part_begin(self) -> None:
        self._headers = {}
        self._buffer = bytearray()
        self._filename = None

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_name.lower()] = self._header_value
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        self._name = self._decode(options.get(b"name", b""))
        if b"filename" not in options:
            return

        self._filename = self._decode(options[b"filename"]) or "upload"
        raw_type = self._headers.get(b"content-type", b"").decode("latin-1")
        self._content_type = raw_type.split(";", 1)[0].strip().lower()
        self.file_count += 1
        self.policy.check_part(self._name, self.file_count, self._content_type)

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._buffer.extend(data[start:end])
        if self._filename is not None and len(self._buffer) > self.policy.max_size:
            raise PayloadTooLarge(self.policy.max_size)

    def on_part_end(self) -> None:
        if self._filename is None:
            self.fields[self._name] = self._decode(bytes(self._buffer))
        else:
            self.upload = AcceptedUpload(
                filename=self._filename,
                content_type=self._content_type,
                data=bytes(self._buffer),
            )
        self._buffer = bytearray()

    def on_end(self) -> None:
        self.finished = True


class UploadPolicy:
    def __init__(self, name: str, allowed_types: Sequence[str], max_size: int, field_name: str = "file"):
        self.name = name
        self.allowed_types = tuple(allowed_types)
        self.max_size = max_size
        self.field_name = field_name

    def __repr__(self) -> str:
        return f"UploadPolicy({self.name!r}, max_size={self.max_size}, field={self.field_name!r})"

    @property
    def body_limit(self) -> int:
        return self.max_size + MULTIPART_OVERHEAD

    def check_part(self, field_name: str, position: int, mime_type: str) -> None:
        """Called once per file part, before any of its bytes are kept."""
        if field_name != self.field_name:
            raise UnexpectedField()
        if position > 1:
            raise TooManyFiles()
        if mime_type not in self.allowed_types:
            raise UnsupportedMediaType(list(self.allowed_types))

    async def __call__(self, request: Request) -> AcceptedUpload:
        content_type, params = parse_options_header(request.headers.get("content-type", ""))
        if content_type != b"multipart/form-data":
            raise ValidationError("No file was provided")
        boundary = params.get(b"boundary")
        if not boundary:
            raise ValidationError("Invalid multipart body")

        content_length = request.headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > self.body_limit:
            raise PayloadTooLarge(self.max_size)

        collector = _PartCollector(self, params.get(b"charset", b"utf-8").decode("latin-1"))
        received = 0
        try:
            parser = MultipartParser(boundary, collector.callbacks())
            async for chunk in request.stream():
                received += len(chunk)
                if received > self.body_limit:
                    raise PayloadTooLarge(self.max_size)
                parser.write(chunk)
            parser.finalize()
        except FormParserError as exc:
            raise ValidationError("Invalid multipart body") from exc

        if not collector.finished:
            raise ValidationError("Invalid multipart body")
        if collector.upload is None:
            raise ValidationError("No file was provided")

        upload = collector.upload
        upload.fields = collector.fields
        logger.debug("Accepted %s upload %r (%d bytes)", self.name, upload.filename, upload.size)
        return upload


class UploadPolicies:
    """The three policies used by the API, sized from settings."""

    def __init__(self, settings: Settings):
        self.character_image = UploadPolicy(
            "character-image", IMAGE_TYPES, settings.MAX_IMAGE_SIZE, field_name="image"
        )
        self.document = UploadPolicy(
            "document", DOCUMENT_TYPES, settings.MAX_DOCUMENT_SIZE, field_name="document"
        )
        self.general = UploadPolicy(
            "general",
            IMAGE_TYPES + DOCUMENT_TYPES,
            max(settings.MAX_IMAGE_SIZE, settings.MAX_DOCUMENT_SIZE),
            field_name="file",
        )
