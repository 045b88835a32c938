from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable

import httpx

from .auth import auth_params
from .config_types import ClientConfig
from .errors import ApiError, DecodeError, HttpStatusError, MalformedResponseError
from .status import status_phrase
from .transport import Transport, build_url

logger = logging.getLogger(__name__)

ACTION_SHORTURL = "shorturl"
ACTION_URL_STATS = "url-stats"
ACTION_EXPAND = "expand"


class YourlsClient:
    """Client for the YOURLS ``yourls-api.php`` endpoint.

    Authenticates with a username/password pair when a username is given,
    otherwise with a time-based signature derived from ``token``.
    Construction never touches the network; bad credentials only show up
    on the first call.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            transport: httpx.BaseTransport | None = None,
            clock: Callable[[], float] = time.time,
    ):
        self._cfg = cfg
        self._clock = clock
        self._t = Transport(transport)
        self._lock = threading.Lock()
        self._last_response: str | None = None

    @classmethod
    def from_credentials(
            cls,
            api_url: str,
            username: str | None = None,
            password: str | None = None,
            token: str | None = None,
            *,
            echo_username: bool = False,
            transport: httpx.BaseTransport | None = None,
            clock: Callable[[], float] = time.time,
    ) -> "YourlsClient":
        cfg = ClientConfig.from_credentials(
            api_url, username, password, token, echo_username=echo_username
        )
        return cls(cfg, transport=transport, clock=clock)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    @property
    def last_response(self) -> str | None:
        return self._last_response

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "YourlsClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # --- API methods ---
    def shorten(self, url: str, keyword: str | None = None) -> str:
        result = self.call(ACTION_SHORTURL, {"url": url, "keyword": keyword})
        status = result.get("status")
        if not status or status == "fail":
            message = result.get("message")
            if not message:
                message = f"Could not shorten url address {url} [{keyword or ''}]"
            raise ApiError(str(message), _int_or_none(result.get("errorCode")), result)
        return _require(result, "shorturl")

    def get_url_stats(self, short_url: str) -> dict[str, Any]:
        return self.call(ACTION_URL_STATS, {"shorturl": short_url})

    def expand(self, short_url: str) -> str:
        result = self.call(ACTION_EXPAND, {"shorturl": short_url})
        return _require(result, "longurl")

    def get_last_response(self) -> str | None:
        """Raw body of the most recent response, or None before any call."""
        return self._last_response

    def call(self, action: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        query: dict[str, str] = {k: str(v) for k, v in (params or {}).items() if v is not None}
        query["action"] = action
        query.update(auth_params(self._cfg.auth, clock=self._clock))
        query["format"] = "json"

        url = build_url(self._cfg.api_url, query)
        logger.debug("yourls %s -> %s", action, self._cfg.api_url)

        with self._lock:
            r = self._t.get(url)
            body = r.text
            self._last_response = body

        if r.status_code != 200:
            message = _error_message(body) or status_phrase(r.status_code)
            logger.warning("yourls %s failed with %s: %s", action, r.status_code, message)
            raise HttpStatusError(message, r.status_code, body[:1000] or None)

        try:
            result = json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError("JSON decode error", e.pos) from e
        if result is None:
            raise DecodeError("JSON decode error")
        if not isinstance(result, dict):
            raise MalformedResponseError(
                f"expected a JSON object from {action}, got {type(result).__name__}"
            )
        return result


def _error_message(body: str) -> str | None:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _require(result: dict[str, Any], field: str) -> str:
    value = result.get(field)
    if value is None:
        raise MalformedResponseError(f"response has no '{field}' field", field)
    return str(value)


def _int_or_none(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
