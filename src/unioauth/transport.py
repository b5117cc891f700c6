"""
HTTP transport abstraction for unioauth.

Provides a testable interface for sending one HTTP request, using httpx as
the default implementation. Each call makes exactly one attempt: no retries.
"""

from __future__ import annotations

import abc
import contextlib
import json
import logging
import time
import typing
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import httpx

from .config import TransportConfig
from .constants import HttpProtocol
from .exceptions import TransportError, ValidationError
from .params import EncodedBody, Params, append_query, encode_body

_logger = logging.getLogger(__name__)

Headers = Mapping[str, str] | Iterable[str]


# =============================================================================
# Request
# =============================================================================


@dataclass
class PreparedRequest:
    """A request with its URL, headers and body encoding fully decided.

    Attributes:
        method: Upper-cased HTTP method
        url: Final URL (query string included for GET)
        headers: Outgoing headers (signers may add to them)
        body: Encoded body, or None for GET
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: EncodedBody | None = None

    @property
    def is_multipart(self) -> bool:
        return self.body is not None and self.body.multipart

    @property
    def content(self) -> str | None:
        """URL-encoded body text, or None for GET and multipart requests."""
        if self.body is None or self.body.multipart:
            return None
        return self.body.urlencode()


def _normalize_headers(headers: Headers | None) -> dict[str, str]:
    if not headers:
        return {}
    if isinstance(headers, Mapping):
        return {str(k): str(v) for k, v in headers.items()}

    # "Name: value" lines
    result: dict[str, str] = {}
    for line in headers:
        name, sep, value = line.partition(":")
        if not sep:
            raise ValidationError("headers", line, "header lines must look like 'Name: value'")
        result[name.strip()] = value.strip()
    return result


def _without(headers: dict[str, str], name: str) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != name.lower()}


def prepare_request(
    url: str,
    params: Params | None = None,
    method: str = HttpProtocol.METHOD_POST,
    headers: Headers | None = None,
) -> PreparedRequest:
    """Apply the encoding rules to a request.

    GET (compared case-insensitively) puts every parameter in the query
    string. Any other method carries them in a URL-encoded body, or a
    multipart body when a file is attached. ``Expect`` headers are always
    removed so providers without 100-continue support don't stall the call.
    """
    method = method.upper()
    outgoing = _without(_normalize_headers(headers), "Expect")

    if method == HttpProtocol.METHOD_GET:
        return PreparedRequest(method=method, url=append_query(url, params), headers=outgoing)

    body = encode_body(params)
    if body.multipart:
        # httpx sets the boundary itself
        outgoing = _without(outgoing, "Content-Type")
    elif not any(k.lower() == "content-type" for k in outgoing):
        outgoing["Content-Type"] = HttpProtocol.CONTENT_TYPE_FORM

    return PreparedRequest(method=method, url=url, headers=outgoing, body=body)


# =============================================================================
# Response
# =============================================================================


@dataclass(frozen=True)
class ResponseInfo:
    """Metadata about the last completed HTTP exchange.

    Attributes:
        http_code: Final HTTP status code
        url: Effective URL after redirects
        method: HTTP method sent
        total_time: Seconds from sending the request to reading the body
        content_type: Response Content-Type (empty if absent)
        request_headers: Headers that were sent
    """

    http_code: int
    url: str
    method: str
    total_time: float
    content_type: str = ""
    request_headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RawResponse:
    """Raw result of one HTTP exchange, header block and body kept apart."""

    status_code: int
    headers: Mapping[str, str]
    header_block: str
    body: str
    info: ResponseInfo

    @classmethod
    def from_httpx(
        cls,
        response: httpx.Response,
        total_time: float,
    ) -> RawResponse:
        request = response.request
        status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}"
        header_lines = [f"{name}: {value}" for name, value in response.headers.multi_items()]

        return cls(
            status_code=response.status_code,
            headers=dict(response.headers),
            header_block="\r\n".join([status_line, *header_lines]),
            body=response.text,
            info=ResponseInfo(
                http_code=response.status_code,
                url=str(response.url),
                method=request.method,
                total_time=total_time,
                content_type=response.headers.get("content-type", ""),
                request_headers=dict(request.headers),
            ),
        )


# =============================================================================
# Abstract Transport
# =============================================================================


class HttpTransport(abc.ABC):
    """Abstract HTTP transport.

    Implementations send a PreparedRequest once and return the RawResponse,
    whatever its status code. Only connection-level failures raise.
    """

    @abc.abstractmethod
    def send(self, request: PreparedRequest) -> RawResponse:
        """Send the request.

        Raises:
            TransportError: If no response could be obtained
        """

    def close(self) -> None:
        """Release pooled connections (no-op by default)."""

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# =============================================================================
# httpx Implementation
# =============================================================================


class HttpxTransport(HttpTransport):
    """Default transport using a pooled httpx.Client.

    Example:
        >>> with HttpxTransport() as transport:
        ...     raw = transport.send(prepare_request("https://example.com", {"a": "1"}, "GET"))
        ...     print(raw.status_code)
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            config: Transport configuration (uses defaults if None)
            client: Pre-built httpx client (per-operation timeouts and TLS settings
                then come from it; the total timeout still comes from config)
        """
        self.config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(self.config.timeout, connect=self.config.connect_timeout),
            verify=self.config.verify_ssl,
            headers={"User-Agent": self.config.user_agent},
        )

    def send(self, request: PreparedRequest) -> RawResponse:
        _logger.debug("HTTP %s %s (headers=%s)", request.method, request.url, list(request.headers))

        with contextlib.ExitStack() as stack:
            kwargs: dict[str, typing.Any] = {}
            if request.is_multipart:
                assert request.body is not None
                kwargs["data"] = request.body.form_fields()
                kwargs["files"] = {
                    name: upload.as_part(stack.enter_context(self._open(name, upload.path)))
                    for name, upload in request.body.file_fields().items()
                }
            elif request.content is not None:
                kwargs["content"] = request.content.encode()

            started = time.monotonic()
            try:
                with self._client.stream(
                    request.method,
                    request.url,
                    headers=request.headers,
                    **kwargs,
                ) as streamed:
                    raw_body = self._read_until_deadline(streamed, started, request.url)
            except httpx.TransportError as e:
                _logger.debug("HTTP %s %s failed: %r", request.method, request.url, e)
                raise TransportError(str(e) or type(e).__name__, url=request.url) from e
            elapsed = time.monotonic() - started

        # raw_body is still content-encoded; the rebuilt response decodes it
        response = httpx.Response(
            status_code=streamed.status_code,
            headers=streamed.headers,
            content=raw_body,
            request=streamed.request,
            extensions=streamed.extensions,
        )

        _logger.debug(
            "HTTP %s from %s (body=%d bytes, %.3fs)",
            response.status_code,
            request.url,
            len(response.content),
            elapsed,
        )
        return RawResponse.from_httpx(response, elapsed)

    def _read_until_deadline(self, response: httpx.Response, started: float, url: str) -> bytes:
        """Read the raw body, failing once the total timeout has elapsed.

        httpx timeouts apply per network operation, so a server trickling
        bytes could otherwise hold the call open indefinitely.
        """
        limit = self.config.timeout
        chunks: list[bytes] = []
        for chunk in response.iter_raw():
            chunks.append(chunk)
            if time.monotonic() - started > limit:
                _logger.debug("HTTP %s exceeded total timeout of %ss", url, limit)
                raise TransportError(f"Total timeout of {limit}s exceeded", url=url)
        if time.monotonic() - started > limit:
            raise TransportError(f"Total timeout of {limit}s exceeded", url=url)
        return b"".join(chunks)

    @staticmethod
    def _open(name: str, path: str) -> typing.IO[bytes]:
        try:
            return open(path, "rb")
        except OSError as e:
            raise ValidationError(name, path, f"cannot read upload file: {e.strerror}") from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


# =============================================================================
# Mock Transport for Testing
# =============================================================================


class MockTransport(HttpTransport):
    """Mock transport for testing.

    Returns predefined responses without making network requests.
    Tracks all requests made for test assertions. Queued ``responses`` are
    returned first, one per call; afterwards the static response is used.

    Example:
        >>> mock = MockTransport(json_response={"access_token": "test"})
        >>> raw = mock.send(prepare_request("https://example.com/token"))
        >>> assert raw.status_code == 200
        >>> assert len(mock.requests) == 1
    """

    def __init__(
        self,
        status_code: int = 200,
        json_response: typing.Any = None,
        text_response: str = "",
        headers: Mapping[str, str] | None = None,
        raise_error: BaseException | type[BaseException] | None = None,
        responses: Iterable[httpx.Response] | None = None,
    ) -> None:
        self.status_code = status_code
        self.json_response = json_response
        self.text_response = text_response
        self.headers = dict(headers or {})
        self.raise_error = raise_error
        self.responses = list(responses or [])

        self.requests: list[PreparedRequest] = []

    def send(self, request: PreparedRequest) -> RawResponse:
        """Record request and return mock response."""
        self.requests.append(request)

        if self.raise_error:
            raise self.raise_error

        httpx_request = httpx.Request(request.method, request.url, headers=request.headers)
        if self.responses:
            response = self.responses.pop(0)
            response.request = httpx_request
            return RawResponse.from_httpx(response, 0.0)

        if self.json_response is not None:
            body = json.dumps(self.json_response).encode()
            headers = {"Content-Type": "application/json", **self.headers}
        else:
            body = self.text_response.encode()
            headers = self.headers

        response = httpx.Response(
            status_code=self.status_code,
            content=body,
            headers=headers,
            request=httpx_request,
        )
        return RawResponse.from_httpx(response, 0.0)


__all__ = [
    "PreparedRequest",
    "RawResponse",
    "ResponseInfo",
    "HttpTransport",
    "HttpxTransport",
    "MockTransport",
    "prepare_request",
]
