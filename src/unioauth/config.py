"""Client and transport configuration.

Configurations are immutable once built. The protocol variant is decided
from the shape of the supplied mapping: an explicit ``version`` key wins,
otherwise ``consumer_key`` means OAuth 1.0 and ``client_id`` OAuth 2.0.
"""

from __future__ import annotations

import enum
import types
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from .constants import OAuth1Protocol, OAuthVersion, TransportDefaults, ValidationLimits
from .exceptions import ConfigError
from .validation import (
    validate_choice,
    validate_range,
    validate_required_keys,
    validate_string,
    validate_type,
)


class ProtocolVersion(str, enum.Enum):
    """OAuth protocol variant a client implements."""

    OAUTH1 = OAuthVersion.V1
    OAUTH2 = OAuthVersion.V2


def _freeze(extra: Mapping[str, Any]) -> Mapping[str, Any]:
    return types.MappingProxyType(dict(extra))


@dataclass(frozen=True)
class _ClientConfigBase:
    """Shared behaviour of the per-protocol configurations."""

    version: ClassVar[ProtocolVersion]
    required_keys: ClassVar[tuple[str, ...]]

    def __post_init__(self) -> None:
        validate_required_keys(self.as_dict(), self.required_keys)
        object.__setattr__(self, "extra", _freeze(getattr(self, "extra", {})))

    def as_dict(self) -> dict[str, Any]:
        """Return the known keys as a plain dict (``extra`` excluded)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}

    def get(self, key: str, default: Any = None) -> Any:
        """Mapping-style lookup across known and extra keys."""
        known = self.as_dict()
        if key in known:
            return known[key]
        return self.extra.get(key, default)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]):  # type: ignore[no-untyped-def]
        """Build a configuration from a plain mapping.

        Args:
            config: Mapping of configuration keys to values

        Returns:
            The validated, immutable configuration

        Raises:
            ConfigError: If a key required by this protocol is missing or empty
            ValidationError: If a value has the wrong type
        """
        validate_type(config, Mapping, "config")
        validate_required_keys(config, cls.required_keys)

        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs = {k: v for k, v in config.items() if k in known and v is not None}
        extra = {k: v for k, v in config.items() if k not in known and k != "version"}
        for key, value in kwargs.items():
            validate_string(value, key, allow_empty=key not in cls.required_keys)
        return cls(**kwargs, extra=extra)


@dataclass(frozen=True)
class OAuth2Config(_ClientConfigBase):
    """Configuration of an OAuth 2.0 (bearer token) client.

    Attributes:
        client_id: Client identifier issued by the provider
        client_secret: Client secret issued by the provider
        redirect_url: Default redirect target after authorization
        authorization_url: Provider authorization endpoint
        access_token_url: Provider token endpoint
        api_url: Base URL prefixed to relative resources in fetch()
        extra: Unknown keys, kept read-only for the caller's convenience

    Raises:
        ConfigError: If a required key is missing or empty
    """

    version: ClassVar[ProtocolVersion] = ProtocolVersion.OAUTH2
    required_keys: ClassVar[tuple[str, ...]] = (
        "client_id",
        "client_secret",
        "redirect_url",
        "authorization_url",
        "access_token_url",
        "api_url",
    )

    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = ""
    authorization_url: str = ""
    access_token_url: str = ""
    api_url: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __repr__(self) -> str:
        return (
            f"OAuth2Config(client_id={self.client_id!r}, client_secret='***', "
            f"authorization_url={self.authorization_url!r}, api_url={self.api_url!r})"
        )


@dataclass(frozen=True)
class OAuth1Config(_ClientConfigBase):
    """Configuration of an OAuth 1.0 (signed request) client.

    Attributes:
        consumer_key: Consumer key issued by the provider
        consumer_secret: Consumer secret issued by the provider
        request_token_url: Endpoint issuing temporary request tokens
        authorization_url: Endpoint the user is redirected to
        access_token_url: Endpoint exchanging request tokens for access tokens
        api_url: Base URL prefixed to relative resources in fetch()
        callback_url: Default callback sent with the request token request
        signature_method: HMAC-SHA1 (default) or PLAINTEXT
        extra: Unknown keys, kept read-only for the caller's convenience

    Raises:
        ConfigError: If a required key is missing or empty
        ValidationError: If signature_method is not supported
    """

    version: ClassVar[ProtocolVersion] = ProtocolVersion.OAUTH1
    required_keys: ClassVar[tuple[str, ...]] = (
        "consumer_key",
        "consumer_secret",
        "request_token_url",
        "authorization_url",
        "access_token_url",
        "api_url",
    )

    consumer_key: str = ""
    consumer_secret: str = ""
    request_token_url: str = ""
    authorization_url: str = ""
    access_token_url: str = ""
    api_url: str = ""
    callback_url: str = ""
    signature_method: str = OAuth1Protocol.SIGNATURE_HMAC_SHA1
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        validate_choice(
            self.signature_method,
            "signature_method",
            OAuth1Protocol.SUPPORTED_SIGNATURE_METHODS,
        )

    def __repr__(self) -> str:
        return (
            f"OAuth1Config(consumer_key={self.consumer_key!r}, consumer_secret='***', "
            f"authorization_url={self.authorization_url!r}, api_url={self.api_url!r})"
        )


ClientConfig = OAuth1Config | OAuth2Config

_CONFIG_TYPES: dict[ProtocolVersion, type[OAuth1Config] | type[OAuth2Config]] = {
    ProtocolVersion.OAUTH1: OAuth1Config,
    ProtocolVersion.OAUTH2: OAuth2Config,
}


def detect_protocol(config: Mapping[str, Any]) -> ProtocolVersion:
    """Decide the protocol variant from the shape of a configuration mapping.

    Raises:
        ConfigError: If the mapping names an unknown version or has
            neither ``consumer_key`` nor ``client_id``
    """
    explicit = config.get("version")
    if explicit:
        try:
            return ProtocolVersion(str(explicit))
        except ValueError:
            raise ConfigError(
                "version",
                f"version must be one of {', '.join(v.value for v in ProtocolVersion)} "
                f"(got {explicit!r}).",
            ) from None

    if "consumer_key" in config:
        return ProtocolVersion.OAUTH1
    if "client_id" in config:
        return ProtocolVersion.OAUTH2

    raise ConfigError(
        "client_id",
        "client_id is required (or consumer_key for OAuth 1.0).",
    )


def build_config(config: Mapping[str, Any] | ClientConfig) -> ClientConfig:
    """Validate a configuration mapping into the matching typed configuration."""
    if isinstance(config, (OAuth1Config, OAuth2Config)):
        return config
    return _CONFIG_TYPES[detect_protocol(config)].from_mapping(config)


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for HTTP transport behavior.

    Attributes:
        connect_timeout: Seconds allowed to establish the connection
        timeout: Total seconds allowed for the whole request
        verify_ssl: Verify provider TLS certificates
        user_agent: User-Agent header sent unless the caller overrides it
    """

    connect_timeout: float = TransportDefaults.CONNECT_TIMEOUT
    timeout: float = TransportDefaults.TOTAL_TIMEOUT
    verify_ssl: bool = TransportDefaults.VERIFY_SSL
    user_agent: str = TransportDefaults.USER_AGENT

    def __post_init__(self) -> None:
        for name in ("connect_timeout", "timeout"):
            validate_range(
                getattr(self, name),
                name,
                min_value=ValidationLimits.MIN_TIMEOUT_SECONDS,
                max_value=ValidationLimits.MAX_TIMEOUT_SECONDS,
            )
        validate_type(self.verify_ssl, bool, "verify_ssl")
        validate_string(self.user_agent, "user_agent")


__all__ = [
    "ProtocolVersion",
    "OAuth1Config",
    "OAuth2Config",
    "ClientConfig",
    "TransportConfig",
    "detect_protocol",
    "build_config",
]
