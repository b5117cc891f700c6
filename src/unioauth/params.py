"""Request parameter encoding.

Parameters travel either in the query string (GET) or in the body. Bodies
are URL-encoded unless a file upload is present, in which case they are
sent as multipart form data.

Files are referenced either with a ``FileUpload`` value or with the legacy
convention where both key and value start with ``@``::

    {"@photo": "@/tmp/a.png", "note": "hi"}

becomes a multipart body with a ``photo`` file part and a ``note`` field.
"""

from __future__ import annotations

import mimetypes
import os
import urllib.parse
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import IO, Any

from .constants import FileUploadConvention

Params = Mapping[str, Any]


@dataclass(frozen=True)
class FileUpload:
    """A local file to be streamed as a multipart part.

    Attributes:
        path: Local filesystem path
        filename: Filename announced to the server (defaults to the basename)
        content_type: MIME type (guessed from the filename when omitted)
    """

    path: str
    filename: str | None = None
    content_type: str | None = None

    @classmethod
    def from_marker(cls, value: str) -> FileUpload:
        """Build from a legacy ``@/path/to/file`` value."""
        marker = FileUploadConvention.MARKER
        return cls(value[len(marker) :] if value.startswith(marker) else value)

    @property
    def effective_filename(self) -> str:
        return self.filename or os.path.basename(self.path)

    @property
    def effective_content_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.effective_filename)
        return self.content_type or guessed or "application/octet-stream"

    def as_part(self, stream: IO[bytes]) -> tuple[str, IO[bytes], str]:
        """Return the ``(filename, stream, content_type)`` triple httpx expects."""
        return (self.effective_filename, stream, self.effective_content_type)


def _is_marked(text: object) -> bool:
    return isinstance(text, str) and text.startswith(FileUploadConvention.MARKER)


@dataclass
class EncodedBody:
    """Parameters of a body-bearing request and the encoding chosen for them.

    Attributes:
        params: Parameters after file-marker processing (a converted key has
            lost its ``@``; its value keeps it)
        multipart: True if the body must be sent as multipart form data
        file_keys: Keys whose values are files
    """

    params: dict[str, Any]
    multipart: bool = False
    file_keys: frozenset[str] = field(default_factory=frozenset)

    def form_fields(self) -> dict[str, str | list[str]]:
        """Non-file parameters as multipart form fields."""
        result: dict[str, str | list[str]] = {}
        for key, value in _flatten(
            (k, v) for k, v in self.params.items() if k not in self.file_keys
        ):
            existing = result.get(key)
            if existing is None:
                result[key] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                result[key] = [existing, value]
        return result

    def file_fields(self) -> dict[str, FileUpload]:
        """File parameters keyed by part name."""
        files: dict[str, FileUpload] = {}
        for key in self.file_keys:
            value = self.params[key]
            files[key] = value if isinstance(value, FileUpload) else FileUpload.from_marker(value)
        return files

    def urlencode(self) -> str:
        """The parameters as an ``application/x-www-form-urlencoded`` string."""
        return encode_params(self.params)


def _flatten(items: Iterable[tuple[str, Any]]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _stringify(v)) for v in value if v is not None)
        else:
            pairs.append((key, _stringify(value)))
    return pairs


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def encode_params(params: Params | None) -> str:
    """URL-encode parameters; ``None`` values are dropped, sequences repeat the key."""
    if not params:
        return ""
    return urllib.parse.urlencode(_flatten(params.items()))


def append_query(url: str, params: Params | None) -> str:
    """Append parameters to a URL's query string.

    Joins with ``&`` when the URL already has a query string, ``?`` otherwise.
    The URL is returned untouched when there is nothing to append.
    """
    query = encode_params(params)
    if not query:
        return url
    return url + ("&" if "?" in url else "?") + query


def encode_body(params: Params | None) -> EncodedBody:
    """Decide how a request body is encoded.

    The first parameter whose key and value both start with ``@`` is taken as
    a file reference; scanning stops there, so any later ``@`` pairs are sent
    as ordinary fields. ``FileUpload`` values are always files. The presence
    of any file makes the whole body multipart.
    """
    encoded = dict(params or {})
    file_keys: set[str] = set()

    for key, value in encoded.items():
        if _is_marked(key) and _is_marked(value):
            stripped = key[len(FileUploadConvention.MARKER) :]
            encoded = {(stripped if k == key else k): v for k, v in encoded.items()}
            file_keys.add(stripped)
            break

    file_keys.update(k for k, v in encoded.items() if isinstance(v, FileUpload))

    return EncodedBody(params=encoded, multipart=bool(file_keys), file_keys=frozenset(file_keys))


__all__ = [
    "FileUpload",
    "EncodedBody",
    "Params",
    "append_query",
    "encode_body",
    "encode_params",
]
