"""Success/failure classification of completed HTTP exchanges."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .constants import HttpProtocol, OAuth2Protocol
from .decoder import DecodedBody, decode_body
from .exceptions import ProtocolError
from .transport import RawResponse


def _error_text(error: Any) -> str:
    if isinstance(error, Mapping):
        # {"error": {"message": ...}} as returned by many JSON APIs
        for key in ("message", "error_description", "type"):
            if error.get(key):
                return str(error[key])
    return str(error)


def extract_error(decoded: DecodedBody) -> str:
    """Return the error text carried by a decoded body, or "" if it carries none.

    A non-empty unstructured body is itself the error text.
    """
    if isinstance(decoded, str):
        return decoded
    if isinstance(decoded, Mapping) and decoded.get(OAuth2Protocol.ERROR):
        return _error_text(decoded[OAuth2Protocol.ERROR])
    return ""


def classify_response(raw: RawResponse, url: str) -> DecodedBody:
    """Decode a response body and decide whether the exchange failed.

    The exchange is an error when the body is a non-empty string the decoder
    could not structure, when it is a mapping with a non-empty ``error`` key,
    or when the status code is 400 or above.

    Args:
        raw: The response to classify
        url: The requesting URL, reported in the error

    Returns:
        The decoded body (dict, list or, for an empty body, "")

    Raises:
        ProtocolError: If the exchange is classified as an error
    """
    decoded = decode_body(raw.body)
    error = extract_error(decoded)

    if error or raw.status_code >= HttpProtocol.ERROR_STATUS_THRESHOLD:
        raise ProtocolError(error, url=url, response_body=raw.body, status_code=raw.status_code)

    return decoded


__all__ = ["classify_response", "extract_error"]
