"""
unioauth

One client interface for the OAuth 1.0 and OAuth 2.0 authorization-code
flows: build the authorization URL, exchange the code or request token for
an access token, and call protected resources with it.

This library provides:
- OAuth 2.0 bearer token and OAuth 1.0a signed request clients
- Protocol selection from the configuration shape
- Uniform classification of provider errors (JSON, form-encoded or text bodies)
- URL-encoded and multipart (file upload) request bodies

Basic Usage:
    >>> from unioauth import create_client
    >>>
    >>> client = create_client({
    ...     "client_id": "YOUR CLIENT ID",
    ...     "client_secret": "YOUR CLIENT SECRET",
    ...     "redirect_url": "https://app.example.com/callback",
    ...     "authorization_url": "https://provider.example.com/oauth/authorize",
    ...     "access_token_url": "https://provider.example.com/oauth/token",
    ...     "api_url": "https://api.provider.example.com",
    ... })
    >>> url = client.get_authorization_url({"scope": "email", "state": "xyz"})
    >>> # redirect the user to url, then on the callback:
    >>> client.exchange_access_token(code)
    >>> me = client.fetch("/me", method="GET")

For Testing:
    >>> from unioauth import MockTransport
    >>> transport = MockTransport(json_response={"access_token": "test"})
    >>> client = create_client(config, transport=transport)
"""

__version__ = "0.1.0"

from .classifier import classify_response
from .client import OAuthClient
from .config import (
    OAuth1Config,
    OAuth2Config,
    ProtocolVersion,
    TransportConfig,
    build_config,
    detect_protocol,
)
from .decoder import decode_body
from .exceptions import (
    ConfigError,
    OAuthError,
    OAuthFlowError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from .factory import create_client
from .logging import CallbackLogSink, LoggerLogSink, LogLevel, LogSink, NullLogSink
from .models import (
    AccessCredential,
    ApiResponse,
    AuthorizationRequest,
    BearerTokenResult,
    SignedTokenResult,
)
from .oauth1 import OAuth1Client
from .oauth2 import OAuth2Client
from .params import FileUpload
from .settings import Settings, load_client_config
from .transport import (
    HttpTransport,
    HttpxTransport,
    MockTransport,
    PreparedRequest,
    RawResponse,
    ResponseInfo,
    prepare_request,
)

__all__ = [
    # Clients
    "OAuthClient",
    "OAuth1Client",
    "OAuth2Client",
    "create_client",
    # Configuration
    "OAuth1Config",
    "OAuth2Config",
    "ProtocolVersion",
    "TransportConfig",
    "Settings",
    "build_config",
    "detect_protocol",
    "load_client_config",
    # Models
    "AccessCredential",
    "ApiResponse",
    "AuthorizationRequest",
    "BearerTokenResult",
    "SignedTokenResult",
    "FileUpload",
    # Transport
    "HttpTransport",
    "HttpxTransport",
    "MockTransport",
    "PreparedRequest",
    "RawResponse",
    "ResponseInfo",
    "prepare_request",
    # Decoding
    "decode_body",
    "classify_response",
    # Logging
    "LogLevel",
    "LogSink",
    "NullLogSink",
    "LoggerLogSink",
    "CallbackLogSink",
    # Exceptions
    "OAuthError",
    "ValidationError",
    "ConfigError",
    "TransportError",
    "ProtocolError",
    "OAuthFlowError",
]
