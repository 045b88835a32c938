from __future__ import annotations

from urllib.parse import urlencode

import httpx

from .errors import TransportError

USER_AGENT = "yourls-client/0.1.0"


def build_url(api_url: str, params: dict[str, str]) -> str:
    query = urlencode(params)
    if not query:
        return api_url
    sep = "&" if "?" in api_url else "?"
    return f"{api_url}{sep}{query}"


def _errno_of(exc: BaseException) -> int | None:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        code = getattr(current, "errno", None)
        if isinstance(code, int):
            return code
        current = current.__cause__ or current.__context__
    return None


class Transport:
    def __init__(self, transport: httpx.BaseTransport | None = None):
        # Empty Expect suppresses 100-continue handshakes on some servers.
        headers = {"User-Agent": USER_AGENT, "Expect": ""}
        self._client = httpx.Client(
            headers=headers,
            verify=False,
            follow_redirects=True,
            timeout=None,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def get(self, url: str) -> httpx.Response:
        try:
            return self._client.get(url)
        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__, _errno_of(e)) from e
