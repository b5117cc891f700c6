"""
Custom exception hierarchy for unioauth.

All exceptions inherit from OAuthError, allowing users to
catch all library-specific errors with a single except clause.
Every OAuthError carries the requesting URL, the raw body of the last
response and its HTTP status code (0 when no response was received).

Example:
    >>> try:
    ...     client.exchange_access_token(code)
    ... except OAuthError as e:
    ...     print(f"Exchange failed: HTTP {e.status_code} {e.message}")
"""

from __future__ import annotations


class OAuthError(Exception):
    """Base exception for all unioauth errors.

    Attributes:
        message: Extracted error text (may be empty)
        url: URL of the request that failed (empty if not request-related)
        response_body: Raw body of the last response (empty if none)
        status_code: HTTP status code of the last response (0 if none)

    Example:
        >>> try:
        ...     client.fetch("/me")
        ... except OAuthError as e:
        ...     print(e.status_code, e.response_body)
    """

    def __init__(
        self,
        message: str = "",
        url: str = "",
        response_body: str = "",
        status_code: int = 0,
    ) -> None:
        self.message = message
        self.url = url
        self.response_body = response_body
        self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, url={self.url!r}, "
            f"status_code={self.status_code!r})"
        )


class ValidationError(OAuthError):
    """Raised when input validation fails.

    Attributes:
        field: Name of the field that failed validation
        value: The invalid value that was provided
        reason: Human-readable explanation of the validation error

    Example:
        >>> TransportConfig(connect_timeout=-1)
        ValidationError: Invalid 'connect_timeout': must be at least 0.1 (got -1)
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field!r}: {reason} (got {value!r})")

    def __repr__(self) -> str:
        return f"ValidationError(field={self.field!r}, value={self.value!r}, reason={self.reason!r})"


class ConfigError(OAuthError):
    """Raised when a required configuration key is missing or empty.

    This is fatal and raised at construction time; retrying cannot help.

    Attributes:
        key: Name of the missing configuration key

    Example:
        >>> OAuth2Config.from_mapping({"client_id": "abc"})
        ConfigError: client_secret is required.
    """

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"{key} is required.")


class TransportError(OAuthError):
    """Raised when the HTTP exchange could not be completed.

    Covers DNS failures, refused connections, TLS errors and timeouts.
    No response was received, so status_code is always 0.

    Example:
        >>> client.fetch("https://unreachable.invalid/")
        TransportError: [Errno -2] Name or service not known
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message, url=url, response_body="", status_code=0)


class ProtocolError(OAuthError):
    """Raised when a completed HTTP exchange was classified as an error.

    Either the status code was >= 400, the body carried a non-empty
    ``error`` field, or the body was a non-empty unstructured string.

    Example:
        >>> client.fetch("/missing")
        ProtocolError: HTTP 404 for https://api.example.com/missing
    """

    def __str__(self) -> str:
        if self.message:
            return self.message
        return f"HTTP {self.status_code} for {self.url}"


class OAuthFlowError(OAuthError):
    """Raised when an authorization flow step fails.

    Wraps the underlying TransportError/ProtocolError (available as
    ``__cause__``) for request-token acquisition and token exchange,
    re-stamped with the endpoint URL and the last response.

    Example:
        >>> client.exchange_access_token("expired-code")
        OAuthFlowError: invalid_grant
    """

    pass


__all__ = [
    "OAuthError",
    "ValidationError",
    "ConfigError",
    "TransportError",
    "ProtocolError",
    "OAuthFlowError",
]
