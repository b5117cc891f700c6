"""Response body decoding.

Providers answer token and API requests with JSON, with form-encoded
key/value pairs, or with plain text (often error messages). Bodies are
decoded in that order of preference.
"""

from __future__ import annotations

import json
import urllib.parse
from typing import Any

DecodedBody = dict[str, Any] | list[Any] | str


def decode_body(body: str) -> DecodedBody:
    """Decode a response body.

    JSON objects and arrays are returned as dict/list. Anything else that
    contains ``=`` is parsed as URL-encoded pairs into a dict of strings
    (for repeated keys the last value wins). Keys are kept flat: bracketed
    names such as ``a[b]=1`` become ``{"a[b]": "1"}``, not nested dicts.
    Everything else, including the empty string and JSON scalars, is
    returned unchanged.

    Example:
        >>> decode_body('{"a": 1}')
        {'a': 1}
        >>> decode_body("a=1&b=2")
        {'a': '1', 'b': '2'}
        >>> decode_body("not json or kv")
        'not json or kv'
    """
    try:
        decoded = json.loads(body)
    except ValueError:
        decoded = None

    if isinstance(decoded, (dict, list)):
        return decoded

    if "=" in body:
        return dict(urllib.parse.parse_qsl(body, keep_blank_values=True))

    return body


__all__ = ["DecodedBody", "decode_body"]
