"""Command-line interface for unioauth.

Machine-readable results (URLs, JSON) go to stdout; diagnostics are
rendered with rich on stderr.

Example:
    unioauth --env-file .env authorize-url --scope email --state xyz
    unioauth exchange CODE
    unioauth fetch /me --method GET --token ACCESS_TOKEN
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .client import OAuthClient
from .exceptions import OAuthError
from .factory import create_client
from .logging import LoggerLogSink, configure_logging
from .models import AuthorizationRequest
from .settings import Settings

app = typer.Typer(
    name="unioauth",
    help="OAuth 1.0 / 2.0 authorization-code client",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

err_console = Console(stderr=True)


def _client(ctx: typer.Context) -> OAuthClient:
    settings: Settings = ctx.obj["settings"]
    return create_client(
        settings.client_config,
        transport_config=settings.transport,
        logger=LoggerLogSink(),
    )


def _fail(e: OAuthError) -> typer.Exit:
    details = [f"[red]{type(e).__name__}:[/red] {escape(str(e))}"]
    if e.url:
        details.append(f"URL: {escape(e.url)}")
    if e.status_code:
        details.append(f"HTTP status: {e.status_code}")
    if e.response_body:
        details.append(f"Response: {escape(e.response_body[:500])}")
    err_console.print(Panel("\n".join(details), title="OAuth Error", border_style="red"))
    return typer.Exit(1)


def _parse_pairs(pairs: list[str], option: str, sep: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for pair in pairs:
        key, found, value = pair.partition(sep)
        if not found or not key:
            raise typer.BadParameter(f"expected KEY{sep}VALUE, got {pair!r}", param_hint=option)
        result[key.strip()] = value.strip() if sep == ":" else value
    return result


def _echo_json(data: Any) -> None:
    if isinstance(data, str):
        typer.echo(data)
    else:
        typer.echo(json.dumps(data, indent=2, sort_keys=True))


@app.callback()
def main(
    ctx: typer.Context,
    env_file: str = typer.Option(None, "--env-file", "-e", help="Read settings from a .env file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Build authorization URLs, exchange tokens and call protected resources."""
    try:
        settings = Settings.load(env_file)
    except OAuthError as e:
        raise _fail(e) from None

    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = {"settings": settings}


@app.command("authorize-url")
def authorize_url(
    ctx: typer.Context,
    scope: str = typer.Option(None, "--scope", help="Requested scope (OAuth 2.0)"),
    state: str = typer.Option(None, "--state", help="Opaque state value (OAuth 2.0)"),
    redirect: str = typer.Option(None, "--redirect", help="Redirect URI override (OAuth 2.0)"),
    callback: str = typer.Option(None, "--callback", help="Callback URL override (OAuth 1.0)"),
) -> None:
    """Print the URL the user must visit to authorize the application.

    For OAuth 1.0 the request token secret is printed on stderr; pass it
    to ``exchange --secret``.
    """
    request = AuthorizationRequest(redirect=redirect, scope=scope, state=state, callback=callback)
    try:
        with _client(ctx) as client:
            result = client.get_authorization_url(request)
    except OAuthError as e:
        raise _fail(e) from None

    if isinstance(result, tuple):
        secret, url = result
        err_console.print(f"[yellow]Request token secret:[/yellow] {secret}")
        typer.echo(url)
    else:
        typer.echo(result)


@app.command()
def exchange(
    ctx: typer.Context,
    token: str = typer.Argument(..., help="Authorization code (2.0) or oauth_token (1.0)"),
    secret_or_redirect: str = typer.Option(
        "",
        "--secret",
        "--redirect",
        help="Request token secret (1.0) or redirect URI used for authorization (2.0)",
    ),
    verifier: str = typer.Option(None, "--verifier", help="oauth_verifier (OAuth 1.0a)"),
) -> None:
    """Exchange an authorization code or request token for an access token."""
    try:
        with _client(ctx) as client:
            result = client.exchange_access_token(token, secret_or_redirect, verifier)
    except OAuthError as e:
        raise _fail(e) from None

    _echo_json(dict(result.payload))


@app.command()
def fetch(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Path relative to api_url, or an absolute URL"),
    param: list[str] = typer.Option([], "--param", "-p", help="Parameter KEY=VALUE (repeatable)"),
    header: list[str] = typer.Option([], "--header", "-H", help="Header 'Name: value' (repeatable)"),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method"),
    token: str = typer.Option(None, "--token", help="Access token"),
    secret: str = typer.Option("", "--secret", help="Access token secret (OAuth 1.0)"),
    show_headers: bool = typer.Option(False, "--include", "-i", help="Print response headers"),
) -> None:
    """Call a protected resource and print the decoded response."""
    params = _parse_pairs(param, "--param", "=")
    headers = _parse_pairs(header, "--header", ":")

    try:
        with _client(ctx) as client:
            if token:
                client.set_token(token, secret)
            response = client.fetch_response(resource, params, method, headers)
    except OAuthError as e:
        raise _fail(e) from None

    if show_headers:
        err_console.print(response.raw.header_block, markup=False, highlight=False)
    _echo_json(response.data)


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"unioauth {__version__}")


if __name__ == "__main__":
    app()
