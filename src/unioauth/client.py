"""Protocol-independent OAuth client interface.

``OAuthClient`` defines the capability set shared by every protocol
variant and implements the request pipeline they have in common:
prepare, authorize (variant hook), send, classify.

A client is single-flight: every request overwrites the last-response
state read by ``get_last_response*()``. Use one client per concurrent
caller, or ``fetch_response()`` which returns the response explicitly.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from .classifier import classify_response
from .config import ClientConfig, OAuth1Config, OAuth2Config, ProtocolVersion, TransportConfig
from .constants import HttpProtocol
from .decoder import DecodedBody
from .exceptions import OAuthError, OAuthFlowError, ValidationError
from .logging import LogLevel, LogSink, as_log_sink
from .models import AccessCredential, ApiResponse, AuthorizationRequest, TokenResult
from .params import Params
from .transport import (
    Headers,
    HttpTransport,
    HttpxTransport,
    PreparedRequest,
    RawResponse,
    ResponseInfo,
)


LoggerArg = LogSink | Callable[[str, str], object] | None


class OAuthClient(abc.ABC):
    """Common interface of OAuth 1.0 and OAuth 2.0 clients.

    Example:
        >>> client = create_client(config)
        >>> url = client.get_authorization_url({"state": "xyz"})
        >>> # ... user authorizes, provider redirects back with ?code=...
        >>> client.exchange_access_token(code)
        >>> me = client.fetch("/me", method="GET")
    """

    version: ClassVar[ProtocolVersion]
    config_type: ClassVar[type[OAuth1Config] | type[OAuth2Config]]

    def __init__(
        self,
        config: Mapping[str, Any] | ClientConfig,
        transport: HttpTransport | None = None,
        logger: LoggerArg = None,
        transport_config: TransportConfig | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: Configuration mapping or typed configuration for this protocol
            transport: HTTP transport (an HttpxTransport is created if None)
            logger: LogSink, ``func(message, level)`` callable or stdlib logger
            transport_config: Settings for the default transport

        Raises:
            ConfigError: If a key required by this protocol is missing or empty
            ValidationError: If config is a typed configuration of another protocol
        """
        self.config = self._coerce_config(config)
        self.transport = transport or HttpxTransport(transport_config)
        self._log_sink = as_log_sink(logger)
        self._credential: AccessCredential | None = None
        self._last_response: RawResponse | None = None

    @classmethod
    def _coerce_config(cls, config: Mapping[str, Any] | ClientConfig) -> Any:
        if isinstance(config, (OAuth1Config, OAuth2Config)):
            if not isinstance(config, cls.config_type):
                raise ValidationError(
                    "config",
                    type(config).__name__,
                    f"{cls.__name__} requires {cls.config_type.__name__}",
                )
            return config
        return cls.config_type.from_mapping(config)

    # =========================================================================
    # Variant operations
    # =========================================================================

    @abc.abstractmethod
    def get_authorization_url(
        self, request: AuthorizationRequest | Mapping[str, Any] | None = None
    ) -> str | tuple[str, str]:
        """Build the URL the user must be redirected to.

        OAuth 2.0 returns the URL. OAuth 1.0 first obtains a request token
        and returns ``(token_secret, url)``; keep the secret (usually in the
        session) for exchange_access_token().
        """

    @abc.abstractmethod
    def exchange_access_token(
        self,
        token: str,
        secret_or_redirect: str = "",
        verifier: str | None = None,
    ) -> TokenResult:
        """Exchange an authorization code (2.0) or request token (1.0) for an access token.

        On success the new credential is held for subsequent fetch() calls.

        Raises:
            OAuthFlowError: If the exchange fails for any reason
        """

    @abc.abstractmethod
    def _prepare_resource_request(
        self,
        url: str,
        params: Params | None,
        method: str,
        headers: Headers | None,
    ) -> PreparedRequest:
        """Prepare a resource request carrying the held credential."""

    # =========================================================================
    # Credential
    # =========================================================================

    def set_token(self, token: str, secret: str = "") -> None:
        """Replace the held credential. No validation is performed."""
        self._credential = AccessCredential(token, secret)

    @property
    def token(self) -> AccessCredential | None:
        return self._credential

    def set_logger(self, logger: LoggerArg) -> None:
        """Replace the advisory log sink (None disables logging)."""
        self._log_sink = as_log_sink(logger)

    # =========================================================================
    # Resources
    # =========================================================================

    def resolve_url(self, resource: str) -> str:
        """Prefix ``api_url`` unless the resource is already absolute.

        No normalisation is done: ``"https://api.example.com/"`` and ``"/me"``
        give ``"https://api.example.com//me"``.
        """
        if resource[:4].lower() == "http":
            return resource
        return self.config.api_url + resource

    def fetch(
        self,
        resource: str,
        params: Params | None = None,
        method: str = HttpProtocol.METHOD_POST,
        headers: Headers | None = None,
    ) -> DecodedBody:
        """Call a protected resource with the held credential.

        Returns:
            The decoded body: dict/list for structured responses, "" for empty ones

        Raises:
            TransportError: If the provider could not be reached
            ProtocolError: If the response was classified as an error
        """
        return self.fetch_response(resource, params, method, headers).data

    def fetch_response(
        self,
        resource: str,
        params: Params | None = None,
        method: str = HttpProtocol.METHOD_POST,
        headers: Headers | None = None,
    ) -> ApiResponse:
        """Like fetch(), but return the decoded body together with its raw response."""
        url = self.resolve_url(resource)
        return self._send(self._prepare_resource_request(url, params, method, headers))

    # =========================================================================
    # Last response
    # =========================================================================

    @property
    def last_response(self) -> RawResponse | None:
        return self._last_response

    def get_last_response(self) -> str | None:
        """Body of the last response, or None if none was received."""
        return self._last_response.body if self._last_response else None

    def get_last_response_headers(self) -> str | None:
        """Status line and headers of the last response as raw text."""
        return self._last_response.header_block if self._last_response else None

    def get_last_response_info(self) -> ResponseInfo | None:
        """Metadata (status, effective URL, timing) of the last response."""
        return self._last_response.info if self._last_response else None

    # =========================================================================
    # Pipeline
    # =========================================================================

    def _send(self, request: PreparedRequest) -> ApiResponse:
        self._last_response = None
        self._log(LogLevel.DEBUG, f"{request.method} {request.url}")

        raw = self.transport.send(request)
        self._last_response = raw

        return ApiResponse(classify_response(raw, request.url), raw)

    def _flow_error(self, action: str, url: str, err: OAuthError) -> OAuthFlowError:
        """Log a failed flow step and re-stamp it with the endpoint and last response."""
        self._log(LogLevel.ERROR, f"Failed to {action} from {url}. Error: {err.message or err}")

        raw = self._last_response
        return OAuthFlowError(
            err.message,
            url=url,
            response_body=raw.body if raw else "",
            status_code=raw.status_code if raw else 0,
        )

    def _log(self, level: LogLevel, message: str) -> None:
        self._log_sink.log(level, message)

    # =========================================================================
    # Resource management
    # =========================================================================

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> OAuthClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self.config!r})"


__all__ = ["OAuthClient"]
