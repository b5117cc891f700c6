"""Unit tests for OAuth2Client using MockTransport."""

from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest

from tests.config import TEST_ENDPOINTS, TEST_OAUTH1_CONFIG, TEST_OAUTH2_CONFIG
from unioauth import (
    AuthorizationRequest,
    MockTransport,
    OAuth1Config,
    OAuth2Client,
    OAuthFlowError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from unioauth.exceptions import ConfigError


def query_pairs(url):
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


@pytest.mark.unit
class TestConstruction:
    """Test cases for client construction."""

    def test_missing_key(self):
        config = {k: v for k, v in TEST_OAUTH2_CONFIG.items() if k != "api_url"}

        with pytest.raises(ConfigError) as exc_info:
            OAuth2Client(config, transport=MockTransport())

        assert exc_info.value.key == "api_url"

    def test_wrong_typed_config(self):
        with pytest.raises(ValidationError):
            OAuth2Client(OAuth1Config.from_mapping(TEST_OAUTH1_CONFIG), transport=MockTransport())

    def test_no_credential_initially(self, oauth2_client):
        assert oauth2_client.token is None
        assert oauth2_client.last_response is None
        assert oauth2_client.get_last_response() is None
        assert oauth2_client.get_last_response_headers() is None
        assert oauth2_client.get_last_response_info() is None


@pytest.mark.unit
class TestAuthorizationUrl:
    """Test cases for get_authorization_url."""

    def test_defaults(self, oauth2_client):
        url = oauth2_client.get_authorization_url()

        assert url.startswith(TEST_ENDPOINTS["authorize"] + "?")
        assert query_pairs(url) == [
            ("client_id", "test-client-id"),
            ("response_type", "code"),
            ("redirect_uri", "https://app.example.com/callback"),
        ]

    def test_state_scope_and_redirect_appear_once(self, oauth2_client):
        url = oauth2_client.get_authorization_url(
            {"state": "xyz", "scope": "email", "redirect": "https://other.example.com/cb"}
        )

        pairs = query_pairs(url)
        keys = [k for k, _ in pairs]
        assert sorted(keys) == sorted(set(keys))
        assert dict(pairs) == {
            "client_id": "test-client-id",
            "response_type": "code",
            "redirect_uri": "https://other.example.com/cb",
            "state": "xyz",
            "scope": "email",
        }

    def test_scope_sequence_joined_with_spaces(self, oauth2_client):
        url = oauth2_client.get_authorization_url(
            AuthorizationRequest(scope=["email", "profile"])
        )

        assert dict(query_pairs(url))["scope"] == "email profile"
        assert "scope=email+profile" in url

    def test_existing_query_joined_with_ampersand(self, oauth2_config):
        oauth2_config["authorization_url"] = TEST_ENDPOINTS["authorize"] + "?tenant=acme"
        client = OAuth2Client(oauth2_config, transport=MockTransport())

        url = client.get_authorization_url()

        assert url.startswith(TEST_ENDPOINTS["authorize"] + "?tenant=acme&client_id=")

    def test_unknown_option(self, oauth2_client):
        with pytest.raises(ValidationError):
            oauth2_client.get_authorization_url({"scopes": "email"})

    def test_no_network_call(self, oauth2_client, mock_transport):
        oauth2_client.get_authorization_url()

        assert mock_transport.requests == []


@pytest.mark.unit
class TestExchangeAccessToken:
    """Test cases for exchange_access_token."""

    def test_success_sets_credential(self, oauth2_config):
        transport = MockTransport(
            json_response={"access_token": "tok", "expires_in": 3600, "token_type": "bearer"}
        )
        client = OAuth2Client(oauth2_config, transport=transport)

        result = client.exchange_access_token("auth-code")

        assert result.access_token == "tok"
        assert result.payload["expires_in"] == 3600
        assert client.token.token == "tok"

        sent = transport.requests[0]
        assert sent.method == "POST"
        assert sent.url == TEST_ENDPOINTS["token"]
        assert dict(parse_qsl(sent.content)) == {
            "client_id": "test-client-id",
            "client_secret": "test-client-secret",
            "redirect_uri": "https://app.example.com/callback",
            "grant_type": "authorization_code",
            "code": "auth-code",
        }

    def test_redirect_override(self, oauth2_config):
        transport = MockTransport(json_response={"access_token": "tok"})
        client = OAuth2Client(oauth2_config, transport=transport)

        client.exchange_access_token("auth-code", "https://other.example.com/cb")

        assert dict(parse_qsl(transport.requests[0].content))["redirect_uri"] == (
            "https://other.example.com/cb"
        )

    def test_form_encoded_token_response(self, oauth2_config):
        transport = MockTransport(text_response="access_token=tok&expires=5183999")
        client = OAuth2Client(oauth2_config, transport=transport)

        result = client.exchange_access_token("auth-code")

        assert result.access_token == "tok"
        assert result.payload == {"access_token": "tok", "expires": "5183999"}

    def test_provider_error(self, oauth2_config):
        logged = []
        transport = MockTransport(status_code=400, json_response={"error": "invalid_grant"})
        client = OAuth2Client(
            oauth2_config,
            transport=transport,
            logger=lambda message, level: logged.append((level, message)),
        )

        with pytest.raises(OAuthFlowError) as exc_info:
            client.exchange_access_token("expired-code")

        err = exc_info.value
        assert err.message == "invalid_grant"
        assert err.url == TEST_ENDPOINTS["token"]
        assert err.status_code == 400
        assert err.response_body == '{"error": "invalid_grant"}'
        assert isinstance(err.__cause__, ProtocolError)
        assert client.token is None
        assert (
            "error",
            f"Failed to get access token from {TEST_ENDPOINTS['token']}. Error: invalid_grant",
        ) in logged

    def test_error_key_with_200(self, oauth2_config):
        transport = MockTransport(json_response={"error": "bad"})
        client = OAuth2Client(oauth2_config, transport=transport)

        with pytest.raises(OAuthFlowError) as exc_info:
            client.exchange_access_token("code")

        assert exc_info.value.message == "bad"
        assert exc_info.value.status_code == 200

    def test_transport_failure_has_status_zero(self, oauth2_client, mock_transport):
        mock_transport.raise_error = TransportError("Connection refused", url="x")

        with pytest.raises(OAuthFlowError) as exc_info:
            oauth2_client.exchange_access_token("code")

        assert exc_info.value.status_code == 0
        assert exc_info.value.response_body == ""
        assert isinstance(exc_info.value.__cause__, TransportError)
        assert oauth2_client.get_last_response() is None

    def test_missing_access_token(self, oauth2_client):
        with pytest.raises(OAuthFlowError) as exc_info:
            oauth2_client.exchange_access_token("code")

        assert "access_token" in exc_info.value.message
        assert exc_info.value.response_body == "{}"
        assert oauth2_client.token is None


@pytest.mark.unit
class TestFetch:
    """Test cases for fetch and resource URL resolution."""

    def test_relative_resource_is_prefixed_verbatim(self, oauth2_client, mock_transport):
        oauth2_client.set_token("tok")

        oauth2_client.fetch("/me", method="GET")

        assert mock_transport.requests[0].url == (
            "https://api.example.com//me?client_id=test-client-id&access_token=tok"
        )

    def test_absolute_resource_passthrough(self, oauth2_client):
        assert oauth2_client.resolve_url("https://other.example.com/x") == (
            "https://other.example.com/x"
        )
        assert oauth2_client.resolve_url("HTTP://other.example.com/x") == (
            "HTTP://other.example.com/x"
        )

    def test_http_prefix_check_is_textual(self, oauth2_client):
        assert oauth2_client.resolve_url("httpbin") == "httpbin"

    def test_default_method_is_post(self, oauth2_client, mock_transport):
        oauth2_client.set_token("tok")

        oauth2_client.fetch("me", {"fields": "id,name"})

        sent = mock_transport.requests[0]
        assert sent.method == "POST"
        assert sent.url == "https://api.example.com/me"
        assert sent.content == "fields=id%2Cname&client_id=test-client-id&access_token=tok"

    def test_no_credential_omits_access_token(self, oauth2_client, mock_transport):
        oauth2_client.fetch("me", method="GET")

        assert "access_token" not in mock_transport.requests[0].url

    def test_returns_decoded_body(self, oauth2_config):
        client = OAuth2Client(oauth2_config, transport=MockTransport(json_response={"id": "1"}))

        assert client.fetch("me") == {"id": "1"}

    def test_error_status_raises_and_keeps_last_response(self, oauth2_config):
        client = OAuth2Client(
            oauth2_config, transport=MockTransport(status_code=404, text_response="")
        )

        with pytest.raises(ProtocolError) as exc_info:
            client.fetch("missing")

        assert exc_info.value.status_code == 404
        assert client.get_last_response_info().http_code == 404

    def test_last_response_accessors(self, oauth2_config):
        transport = MockTransport(
            json_response={"id": "1"}, headers={"X-RateLimit-Remaining": "10"}
        )
        client = OAuth2Client(oauth2_config, transport=transport)

        client.fetch("me", method="GET")

        assert client.get_last_response() == '{"id": "1"}'
        assert client.get_last_response() == client.get_last_response()
        headers = client.get_last_response_headers()
        assert headers.startswith("HTTP/1.1 200 OK")
        assert "x-ratelimit-remaining: 10" in headers.lower()
        info = client.get_last_response_info()
        assert info.http_code == 200
        assert info.method == "GET"

    def test_fetch_response(self, oauth2_config):
        transport = MockTransport(responses=[httpx.Response(201, json={"id": "9"})])
        client = OAuth2Client(oauth2_config, transport=transport)

        response = client.fetch_response("items", {"name": "x"})

        assert response.status_code == 201
        assert response.data == {"id": "9"}
        assert response.raw is client.last_response

    def test_set_token_replaces_credential(self, oauth2_client):
        oauth2_client.set_token("a")
        oauth2_client.set_token("b")

        assert oauth2_client.token.token == "b"

    def test_set_logger(self, oauth2_client):
        logged = []
        oauth2_client.set_logger(lambda message, level: logged.append(level))

        oauth2_client.fetch("me")

        assert logged == ["debug"]

    def test_context_manager_closes_transport(self, oauth2_config):
        closed = []
        transport = MockTransport()
        transport.close = lambda: closed.append(True)

        with OAuth2Client(oauth2_config, transport=transport):
            pass

        assert closed == [True]
