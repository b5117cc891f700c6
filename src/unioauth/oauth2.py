"""OAuth 2.0 authorization-code client (bearer token semantics)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from .client import OAuthClient
from .config import OAuth2Config, ProtocolVersion
from .constants import HttpProtocol, OAuth2Protocol
from .decoder import DecodedBody
from .exceptions import OAuthError, ProtocolError
from .models import AuthorizationRequest, BearerTokenResult
from .params import Params, append_query
from .transport import Headers, PreparedRequest, RawResponse, prepare_request


class OAuth2Client(OAuthClient):
    """OAuth 2.0 client.

    The access token is sent as ``access_token`` (with ``client_id``) in the
    query string or body of every resource request.

    Example:
        >>> client = OAuth2Client({
        ...     "client_id": "YOUR CLIENT ID",
        ...     "client_secret": "YOUR CLIENT SECRET",
        ...     "redirect_url": "https://app.example.com/callback",
        ...     "authorization_url": "https://provider.example.com/oauth/authorize",
        ...     "access_token_url": "https://provider.example.com/oauth/token",
        ...     "api_url": "https://api.provider.example.com",
        ... })
        >>> client.get_authorization_url({"scope": "email", "state": "xyz"})
        'https://provider.example.com/oauth/authorize?client_id=...&response_type=code&...'
    """

    version: ClassVar[ProtocolVersion] = ProtocolVersion.OAUTH2
    config_type: ClassVar[type[OAuth2Config]] = OAuth2Config

    config: OAuth2Config

    def get_authorization_url(
        self, request: AuthorizationRequest | Mapping[str, Any] | None = None
    ) -> str:
        """Build the provider authorization URL.

        ``client_id``, ``response_type=code`` and ``redirect_uri`` are always
        present; ``state`` and ``scope`` only when supplied. A supplied
        redirect overrides the configured ``redirect_url``. A scope given as
        a sequence is joined with spaces.
        """
        req = AuthorizationRequest.coerce(request)

        query: dict[str, str] = {
            "client_id": self.config.client_id,
            "response_type": OAuth2Protocol.RESPONSE_TYPE_CODE,
            "redirect_uri": req.redirect if req.redirect is not None else self.config.redirect_url,
        }
        if req.state is not None:
            query["state"] = req.state
        if req.scope is not None:
            scope: str | Sequence[str] = req.scope
            query["scope"] = scope if isinstance(scope, str) else " ".join(scope)

        return append_query(self.config.authorization_url, query)

    def exchange_access_token(
        self,
        token: str,
        secret_or_redirect: str = "",
        verifier: str | None = None,
    ) -> BearerTokenResult:
        """Exchange an authorization code for an access token.

        Args:
            token: Authorization code returned by the provider
            secret_or_redirect: Redirect URI used for the authorization URL
                (defaults to the configured ``redirect_url``)
            verifier: Unused by OAuth 2.0

        Returns:
            BearerTokenResult with the token and the full response payload

        Raises:
            OAuthFlowError: If the request fails or no access_token is returned
        """
        url = self.config.access_token_url
        data = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": secret_or_redirect or self.config.redirect_url,
            "grant_type": OAuth2Protocol.GRANT_TYPE_AUTH_CODE,
            "code": token,
        }

        try:
            response = self._send(prepare_request(url, data, HttpProtocol.METHOD_POST))
            result = self._token_result(response.data, response.raw, url)
        except OAuthError as e:
            raise self._flow_error("get access token", url, e) from e

        self._credential = result.credential
        return result

    @staticmethod
    def _token_result(data: DecodedBody, raw: RawResponse, url: str) -> BearerTokenResult:
        if not isinstance(data, Mapping) or not data.get(OAuth2Protocol.ACCESS_TOKEN):
            raise ProtocolError(
                "response did not include access_token",
                url=url,
                response_body=raw.body,
                status_code=raw.status_code,
            )
        return BearerTokenResult(access_token=str(data[OAuth2Protocol.ACCESS_TOKEN]), payload=data)

    def _prepare_resource_request(
        self,
        url: str,
        params: Params | None,
        method: str,
        headers: Headers | None,
    ) -> PreparedRequest:
        authorized = dict(params or {})
        authorized["client_id"] = self.config.client_id
        # None is dropped by the encoder, so no token means no parameter
        authorized["access_token"] = self._credential.token if self._credential else None
        return prepare_request(url, authorized, method, headers)


__all__ = ["OAuth2Client"]
