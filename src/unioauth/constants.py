"""
Centralized constants for unioauth.

Constants are grouped by:
- Configurable defaults: Values users may want to override
- Protocol constants: Fixed by the OAuth 1.0 / 2.0 specifications
- Internal constants: Implementation details
- Validation limits: Valid ranges for parameters
"""

from __future__ import annotations

# =============================================================================
# CONFIGURABLE DEFAULTS
# =============================================================================
# These values can be overridden via TransportConfig or environment variables.


class TransportDefaults:
    """Default values for the HTTP transport.

    Providers that hang on the TCP handshake are cut off quickly, while slow
    API calls (large uploads) still get a full minute.
    """

    CONNECT_TIMEOUT = 10.0  # seconds
    TOTAL_TIMEOUT = 60.0  # seconds

    VERIFY_SSL = True

    USER_AGENT = "unioauth"


# =============================================================================
# PROTOCOL CONSTANTS (Fixed by Standards)
# =============================================================================


class OAuthVersion:
    """Version strings accepted in the ``version`` configuration key."""

    V1 = "1.0"
    V2 = "2.0"


class OAuth2Protocol:
    """Constants defined by OAuth 2.0 (RFC 6749)."""

    RESPONSE_TYPE_CODE = "code"
    GRANT_TYPE_AUTH_CODE = "authorization_code"

    # Field names in the token endpoint response
    ACCESS_TOKEN = "access_token"
    ERROR = "error"


class OAuth1Protocol:
    """Constants defined by OAuth 1.0 (RFC 5849)."""

    TOKEN = "oauth_token"
    TOKEN_SECRET = "oauth_token_secret"

    SIGNATURE_HMAC_SHA1 = "HMAC-SHA1"
    SIGNATURE_PLAINTEXT = "PLAINTEXT"
    SUPPORTED_SIGNATURE_METHODS = (SIGNATURE_HMAC_SHA1, SIGNATURE_PLAINTEXT)


class HttpProtocol:
    """HTTP constants used by the transport."""

    METHOD_GET = "GET"
    METHOD_POST = "POST"

    CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

    # First status code classified as a failure
    ERROR_STATUS_THRESHOLD = 400


# =============================================================================
# INTERNAL CONSTANTS
# =============================================================================


class FileUploadConvention:
    """Legacy file upload marker.

    A parameter whose key and value both start with ``MARKER`` is a file
    reference: the key loses the marker, the value (minus marker) is a path.
    """

    MARKER = "@"


# =============================================================================
# VALIDATION RANGES
# =============================================================================


class ValidationLimits:
    """Valid ranges for user-configurable parameters."""

    MIN_TIMEOUT_SECONDS = 0.1
    MAX_TIMEOUT_SECONDS = 3600.0  # 1 hour


__all__ = [
    "TransportDefaults",
    "OAuthVersion",
    "OAuth2Protocol",
    "OAuth1Protocol",
    "HttpProtocol",
    "FileUploadConvention",
    "ValidationLimits",
]
