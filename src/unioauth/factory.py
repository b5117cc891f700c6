"""Client construction with protocol selection by configuration shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .client import LoggerArg, OAuthClient
from .config import ClientConfig, ProtocolVersion, TransportConfig, build_config
from .oauth1 import OAuth1Client
from .oauth2 import OAuth2Client
from .transport import HttpTransport

CLIENT_TYPES: dict[ProtocolVersion, type[OAuthClient]] = {
    ProtocolVersion.OAUTH1: OAuth1Client,
    ProtocolVersion.OAUTH2: OAuth2Client,
}


def create_client(
    config: Mapping[str, Any] | ClientConfig,
    *,
    transport: HttpTransport | None = None,
    transport_config: TransportConfig | None = None,
    logger: LoggerArg = None,
) -> OAuthClient:
    """Create the client matching a configuration.

    The protocol comes from the ``version`` key when present, otherwise from
    the keys supplied: ``consumer_key`` selects OAuth 1.0, ``client_id``
    OAuth 2.0.

    Example:
        >>> client = create_client({"client_id": "...", "client_secret": "...", ...})
        >>> isinstance(client, OAuth2Client)
        True

    Raises:
        ConfigError: If the protocol cannot be determined or a required key is missing
    """
    typed = build_config(config)
    return CLIENT_TYPES[typed.version](
        typed,
        transport=transport,
        logger=logger,
        transport_config=transport_config,
    )


__all__ = ["CLIENT_TYPES", "create_client"]
