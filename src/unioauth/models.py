"""Value types exchanged with OAuth clients."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any

from .decoder import DecodedBody
from .exceptions import ValidationError
from .transport import RawResponse


@dataclass(frozen=True)
class AuthorizationRequest:
    """Optional parameters for building an authorization URL.

    Attributes:
        redirect: Redirect target overriding the configured one (OAuth 2.0)
        scope: Requested scope, a string or a sequence joined with spaces (OAuth 2.0)
        state: Opaque value echoed back by the provider (OAuth 2.0)
        callback: Callback URL overriding the configured one (OAuth 1.0)
    """

    redirect: str | None = None
    scope: str | Sequence[str] | None = None
    state: str | None = None
    callback: str | None = None

    @classmethod
    def coerce(cls, value: AuthorizationRequest | Mapping[str, Any] | None) -> AuthorizationRequest:
        """Accept an AuthorizationRequest, a mapping with the same keys, or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            allowed = {f.name for f in fields(cls)}
            unknown = sorted(set(value) - allowed)
            if unknown:
                raise ValidationError(
                    "params",
                    unknown,
                    f"unknown field(s): {', '.join(unknown)}. "
                    f"Valid fields are: {', '.join(sorted(allowed))}",
                )
            return cls(**value)
        raise ValidationError("params", value, "must be AuthorizationRequest or a mapping")


@dataclass(frozen=True)
class AccessCredential:
    """The credential currently held by a client."""

    token: str
    secret: str = ""

    def __repr__(self) -> str:
        return "AccessCredential(token='***', secret='***')"


@dataclass(frozen=True)
class BearerTokenResult:
    """Result of an OAuth 2.0 token exchange.

    Attributes:
        access_token: The bearer token
        payload: The full decoded response (expiry, refresh token, ...), untouched
    """

    access_token: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def credential(self) -> AccessCredential:
        return AccessCredential(self.access_token)


@dataclass(frozen=True)
class SignedTokenResult:
    """Result of an OAuth 1.0 token exchange.

    Attributes:
        token: The access token
        secret: The access token secret
        payload: The full decoded response, untouched
    """

    token: str
    secret: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def credential(self) -> AccessCredential:
        return AccessCredential(self.token, self.secret)


TokenResult = BearerTokenResult | SignedTokenResult


@dataclass(frozen=True)
class ApiResponse:
    """A decoded body bundled with the raw response it came from."""

    data: DecodedBody
    raw: RawResponse

    @property
    def status_code(self) -> int:
        return self.raw.status_code


__all__ = [
    "AuthorizationRequest",
    "AccessCredential",
    "BearerTokenResult",
    "SignedTokenResult",
    "TokenResult",
    "ApiResponse",
]
