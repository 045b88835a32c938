from __future__ import annotations

from typing import Any, Callable

import typer
from yourls_client import TransportError, YourlsClient, YourlsClientError

from .. import console
from ..config import load_config
from ..http import MissingApiUrl, make_client

EXIT_API = 2
EXIT_TRANSPORT = 3

_API_URL_OPT = typer.Option(None, "--api-url", help="Override the yourls-api.php URL.")
_PROFILE_OPT = typer.Option(None, "--profile", help="Settings profile to use.")
_LAST_RESPONSE_OPT = typer.Option(False, "--last-response", help="Also print the raw API response.")


def _run(
        api_url: str | None,
        profile: str | None,
        what: str,
        fn: Callable[[YourlsClient], Any],
        *,
        show_raw: bool = False,
) -> Any:
    cfg = load_config()
    try:
        client = make_client(cfg, profile=profile, api_url_override=api_url)
    except MissingApiUrl as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    try:
        return fn(client)
    except TransportError as e:
        console.err(f"Failed to {what}: {e}")
        raise typer.Exit(code=EXIT_TRANSPORT)
    except YourlsClientError as e:
        console.err(f"Failed to {what}: {e}")
        raise typer.Exit(code=EXIT_API)
    finally:
        if show_raw and client.get_last_response() is not None:
            console.raw(client.get_last_response())
        client.close()


def shorten(
        url: str = typer.Argument(..., help="Long URL to shorten."),
        keyword: str | None = typer.Option(None, "--keyword", "-k", help="Custom short keyword."),
        api_url: str | None = _API_URL_OPT,
        profile: str | None = _PROFILE_OPT,
        last_response: bool = _LAST_RESPONSE_OPT,
):
    """Create a short URL."""
    short = _run(api_url, profile, "shorten url", lambda c: c.shorten(url, keyword), show_raw=last_response)
    console.out(short)


def expand(
        short_url: str = typer.Argument(..., help="Short URL or keyword."),
        api_url: str | None = _API_URL_OPT,
        profile: str | None = _PROFILE_OPT,
        last_response: bool = _LAST_RESPONSE_OPT,
):
    """Print the long URL behind a short URL."""
    long_url = _run(api_url, profile, "expand url", lambda c: c.expand(short_url), show_raw=last_response)
    console.out(long_url)


def stats(
        short_url: str = typer.Argument(..., help="Short URL or keyword."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
        api_url: str | None = _API_URL_OPT,
        profile: str | None = _PROFILE_OPT,
        last_response: bool = _LAST_RESPONSE_OPT,
):
    """Show click stats for a short URL."""
    data = _run(api_url, profile, "fetch stats", lambda c: c.get_url_stats(short_url), show_raw=last_response)
    if json_out:
        console.print_json(data)
        return
    link = data.get("link") if isinstance(data.get("link"), dict) else data
    for key, value in link.items():
        console.out(f"{key}: {value}")
