"""Declarative schema for environment variable configuration.

Client credentials, endpoints and transport settings can be supplied via
``UNIOAUTH_*`` environment variables or a ``.env`` file. The schema is the
single source of truth: each entry carries its default, type, description
and an optional validator, and values are coerced from strings on load.
Process environment variables take precedence over the ``.env`` file.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from dotenv import dotenv_values

from .config import TransportConfig
from .constants import TransportDefaults, ValidationLimits
from .exceptions import ValidationError
from .logging import VALID_LOG_LEVELS

ENV_PREFIX = "UNIOAUTH_"


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "UNIOAUTH_CLIENT_ID")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        config_key: Client configuration key this variable fills, if any
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    config_key: str | None = None


def _client_var(key: str, description: str) -> EnvVarSpec:
    return EnvVarSpec(
        name=f"{ENV_PREFIX}{key.upper()}",
        default=None,
        type_hint=str,
        description=description,
        config_key=key,
    )


def _timeout_ok(value: float) -> bool:
    return ValidationLimits.MIN_TIMEOUT_SECONDS <= value <= ValidationLimits.MAX_TIMEOUT_SECONDS


class SettingsSchema:
    """Registry of all configuration environment variables."""

    # === Protocol selection ===

    VERSION = _client_var("version", "OAuth version ('1.0' or '2.0'); inferred when unset")

    # === OAuth 2.0 ===

    CLIENT_ID = _client_var("client_id", "OAuth 2.0 client identifier")
    CLIENT_SECRET = _client_var("client_secret", "OAuth 2.0 client secret")
    REDIRECT_URL = _client_var("redirect_url", "Default redirect target after authorization")

    # === OAuth 1.0 ===

    CONSUMER_KEY = _client_var("consumer_key", "OAuth 1.0 consumer key")
    CONSUMER_SECRET = _client_var("consumer_secret", "OAuth 1.0 consumer secret")
    REQUEST_TOKEN_URL = _client_var("request_token_url", "OAuth 1.0 request token endpoint")
    CALLBACK_URL = _client_var("callback_url", "OAuth 1.0 default callback URL")
    SIGNATURE_METHOD = _client_var("signature_method", "OAuth 1.0 signature method")

    # === Shared endpoints ===

    AUTHORIZATION_URL = _client_var("authorization_url", "Provider authorization endpoint")
    ACCESS_TOKEN_URL = _client_var("access_token_url", "Provider access token endpoint")
    API_URL = _client_var("api_url", "Base URL for relative resources")

    # === Transport ===

    CONNECT_TIMEOUT = EnvVarSpec(
        name=f"{ENV_PREFIX}CONNECT_TIMEOUT",
        default=TransportDefaults.CONNECT_TIMEOUT,
        type_hint=float,
        description="Seconds allowed to establish a connection",
        validator=_timeout_ok,
    )

    TIMEOUT = EnvVarSpec(
        name=f"{ENV_PREFIX}TIMEOUT",
        default=TransportDefaults.TOTAL_TIMEOUT,
        type_hint=float,
        description="Total seconds allowed per request",
        validator=_timeout_ok,
    )

    VERIFY_SSL = EnvVarSpec(
        name=f"{ENV_PREFIX}VERIFY_SSL",
        default=TransportDefaults.VERIFY_SSL,
        type_hint=bool,
        description="Verify provider TLS certificates",
    )

    USER_AGENT = EnvVarSpec(
        name=f"{ENV_PREFIX}USER_AGENT",
        default=TransportDefaults.USER_AGENT,
        type_hint=str,
        description="User-Agent header sent with every request",
        validator=lambda x: bool(x),
    )

    # === Logging ===

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.split()[0].upper() in VALID_LOG_LEVELS if x.split() else False,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Get all environment variable specifications, keyed by attribute name."""
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if isinstance(getattr(cls, name), EnvVarSpec)
        }

    @classmethod
    def client_specs(cls) -> list[EnvVarSpec]:
        return [spec for spec in cls.all_specs().values() if spec.config_key]

    @classmethod
    def generate_markdown_docs(cls) -> str:
        """Generate Markdown documentation for all environment variables."""
        lines = [
            "# Configuration Options\n\n",
            "| Variable | Type | Default | Description |\n",
            "|---|---|---|---|\n",
        ]
        for spec in sorted(cls.all_specs().values(), key=lambda s: s.name):
            default = "" if spec.default is None else f"`{spec.default}`"
            lines.append(
                f"| `{spec.name}` | {spec.type_hint.__name__} | {default} | {spec.description} |\n"
            )
        return "".join(lines)


# =============================================================================
# Loading
# =============================================================================


def _parse_bool(value: str) -> bool:
    """True if value is "true", "1", "yes", or "on" (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def load_env_var(spec: EnvVarSpec, environ: Mapping[str, str | None]) -> Any:
    """Load, coerce and validate a single environment variable.

    Raises:
        ValidationError: If type conversion or validation fails
    """
    raw_value = environ.get(spec.name)

    if raw_value is None or raw_value == "":
        return spec.default

    try:
        if spec.type_hint is bool:
            value: Any = _parse_bool(raw_value)
        elif spec.type_hint is int:
            value = int(raw_value)
        elif spec.type_hint is float:
            value = float(raw_value)
        else:
            value = raw_value
    except (ValueError, TypeError) as e:
        raise ValidationError(
            spec.name, raw_value, f"cannot convert to {spec.type_hint.__name__}"
        ) from e

    if spec.validator is not None and not spec.validator(value):
        raise ValidationError(spec.name, raw_value, f"validation failed for {spec.description}")

    return value


def read_environment(env_file: str | os.PathLike[str] | None = None) -> dict[str, str | None]:
    """Merge a .env file (if any) with the process environment, which wins."""
    environ: dict[str, str | None] = {}
    if env_file is not None:
        environ.update(dotenv_values(env_file))
    environ.update(os.environ)
    return environ


@dataclass(frozen=True)
class Settings:
    """Everything needed to build a client from the environment.

    Attributes:
        client_config: Client configuration mapping (only variables that are set)
        transport: Transport configuration
        log_level: Logging level name
    """

    client_config: Mapping[str, str]
    transport: TransportConfig
    log_level: str

    @classmethod
    def load(
        cls,
        env_file: str | os.PathLike[str] | None = None,
        environ: Mapping[str, str | None] | None = None,
    ) -> Settings:
        """Load settings from the environment and an optional .env file.

        Args:
            env_file: Path of a .env file to read
            environ: Explicit variables (replaces os.environ and env_file)

        Raises:
            ValidationError: If a variable cannot be coerced or fails validation
        """
        source = dict(environ) if environ is not None else read_environment(env_file)

        client_config = {}
        for spec in SettingsSchema.client_specs():
            value = load_env_var(spec, source)
            if value is not None and spec.config_key:
                client_config[spec.config_key] = value

        transport = TransportConfig(
            connect_timeout=load_env_var(SettingsSchema.CONNECT_TIMEOUT, source),
            timeout=load_env_var(SettingsSchema.TIMEOUT, source),
            verify_ssl=load_env_var(SettingsSchema.VERIFY_SSL, source),
            user_agent=load_env_var(SettingsSchema.USER_AGENT, source),
        )

        return cls(
            client_config=client_config,
            transport=transport,
            log_level=load_env_var(SettingsSchema.LOG_LEVEL, source),
        )


def load_client_config(env_file: str | os.PathLike[str] | None = None) -> Mapping[str, str]:
    """Shortcut returning only the client configuration mapping."""
    return Settings.load(env_file).client_config


__all__ = [
    "ENV_PREFIX",
    "EnvVarSpec",
    "SettingsSchema",
    "Settings",
    "load_env_var",
    "load_client_config",
    "read_environment",
]
