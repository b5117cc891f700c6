"""OAuth 1.0 client (signed request semantics).

Requests are signed with oauthlib and authenticated through an
``Authorization: OAuth ...`` header. Form-encoded body parameters are part
of the signature base string; multipart bodies and bodies sent under any
other Content-Type are not (RFC 5849 3.4.1.3.1).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from oauthlib import oauth1

from .client import OAuthClient
from .config import OAuth1Config, ProtocolVersion
from .constants import HttpProtocol, OAuth1Protocol
from .decoder import DecodedBody
from .exceptions import OAuthError, ProtocolError, ValidationError
from .models import AuthorizationRequest, SignedTokenResult
from .params import Params, append_query
from .transport import Headers, PreparedRequest, RawResponse, prepare_request


class OAuth1Client(OAuthClient):
    """OAuth 1.0a client.

    Example:
        >>> client = OAuth1Client({
        ...     "consumer_key": "YOUR CONSUMER KEY",
        ...     "consumer_secret": "YOUR CONSUMER SECRET",
        ...     "request_token_url": "https://provider.example.com/oauth/request_token",
        ...     "authorization_url": "https://provider.example.com/oauth/authorize",
        ...     "access_token_url": "https://provider.example.com/oauth/access_token",
        ...     "api_url": "https://api.provider.example.com/1.1",
        ...     "callback_url": "https://app.example.com/callback",
        ... })
        >>> secret, url = client.get_authorization_url()
        >>> # store secret in the session, redirect the user to url
        >>> client.exchange_access_token(oauth_token, secret, oauth_verifier)
    """

    version: ClassVar[ProtocolVersion] = ProtocolVersion.OAUTH1
    config_type: ClassVar[type[OAuth1Config]] = OAuth1Config

    config: OAuth1Config

    def get_authorization_url(
        self, request: AuthorizationRequest | Mapping[str, Any] | None = None
    ) -> tuple[str, str]:
        """Obtain a request token and build the provider authorization URL.

        Args:
            request: Only ``callback`` is used; it overrides ``callback_url``

        Returns:
            ``(request_token_secret, authorization_url)``

        Raises:
            OAuthFlowError: If the request token could not be obtained
        """
        req = AuthorizationRequest.coerce(request)
        callback = req.callback or self.config.callback_url or None
        url = self.config.request_token_url

        try:
            prepared = self._sign(
                prepare_request(url, None, HttpProtocol.METHOD_POST),
                self._signer(callback_uri=callback),
            )
            response = self._send(prepared)
            result = self._token_result(response.data, response.raw, url)
        except OAuthError as e:
            raise self._flow_error("get request token", url, e) from e

        authorization_url = append_query(
            self.config.authorization_url, {OAuth1Protocol.TOKEN: result.token}
        )
        return result.secret, authorization_url

    def exchange_access_token(
        self,
        token: str,
        secret_or_redirect: str = "",
        verifier: str | None = None,
    ) -> SignedTokenResult:
        """Exchange an authorized request token for an access token.

        Args:
            token: ``oauth_token`` returned on the callback
            secret_or_redirect: Request token secret from get_authorization_url()
            verifier: ``oauth_verifier`` returned on the callback (OAuth 1.0a)

        Returns:
            SignedTokenResult with token, secret and the full response payload

        Raises:
            OAuthFlowError: If the exchange fails or the response lacks the token pair
        """
        url = self.config.access_token_url

        try:
            prepared = self._sign(
                prepare_request(url, None, HttpProtocol.METHOD_POST),
                self._signer(token, secret_or_redirect, verifier=verifier),
            )
            response = self._send(prepared)
            result = self._token_result(response.data, response.raw, url)
        except OAuthError as e:
            raise self._flow_error("get access token", url, e) from e

        self._credential = result.credential
        return result

    @staticmethod
    def _token_result(data: DecodedBody, raw: RawResponse, url: str) -> SignedTokenResult:
        if (
            not isinstance(data, Mapping)
            or not data.get(OAuth1Protocol.TOKEN)
            or not data.get(OAuth1Protocol.TOKEN_SECRET)
        ):
            raise ProtocolError(
                "response did not include oauth_token and oauth_token_secret",
                url=url,
                response_body=raw.body,
                status_code=raw.status_code,
            )
        return SignedTokenResult(
            token=str(data[OAuth1Protocol.TOKEN]),
            secret=str(data[OAuth1Protocol.TOKEN_SECRET]),
            payload=data,
        )

    def _prepare_resource_request(
        self,
        url: str,
        params: Params | None,
        method: str,
        headers: Headers | None,
    ) -> PreparedRequest:
        credential = self._credential
        signer = (
            self._signer(credential.token, credential.secret) if credential else self._signer()
        )
        return self._sign(prepare_request(url, params, method, headers), signer)

    # =========================================================================
    # Signing
    # =========================================================================

    def _signer(
        self,
        token: str | None = None,
        secret: str | None = None,
        verifier: str | None = None,
        callback_uri: str | None = None,
    ) -> oauth1.Client:
        return oauth1.Client(
            self.config.consumer_key,
            client_secret=self.config.consumer_secret,
            resource_owner_key=token or None,
            resource_owner_secret=secret or None,
            verifier=verifier or None,
            callback_uri=callback_uri,
            signature_method=self.config.signature_method,
        )

    @staticmethod
    def _sign(request: PreparedRequest, signer: oauth1.Client) -> PreparedRequest:
        """Add the OAuth Authorization header to a prepared request.

        The body joins the signature base string only when it is sent as
        ``application/x-www-form-urlencoded`` (parameters on the media type
        such as ``charset`` are ignored). A caller-chosen Content-Type like
        ``application/json`` is left on the request, and its body is unsigned.
        """
        body = request.content or None
        sign_headers = _without_content_type(request.headers)
        if body is not None and _is_form(request.headers):
            sign_headers["Content-Type"] = HttpProtocol.CONTENT_TYPE_FORM
        else:
            body = None

        try:
            _, signed_headers, _ = signer.sign(
                request.url,
                http_method=request.method,
                body=body,
                headers=sign_headers,
            )
        except ValueError as e:
            raise ValidationError("request", request.url, f"cannot sign request: {e}") from e

        request.headers["Authorization"] = signed_headers["Authorization"]
        return request


def _without_content_type(headers: Mapping[str, str]) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != "content-type"}


def _is_form(headers: Mapping[str, str]) -> bool:
    content_type = next((v for k, v in headers.items() if k.lower() == "content-type"), "")
    return content_type.split(";", 1)[0].strip().lower() == HttpProtocol.CONTENT_TYPE_FORM


__all__ = ["OAuth1Client"]
