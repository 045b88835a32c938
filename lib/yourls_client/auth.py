from __future__ import annotations

import hashlib
import time
from typing import Callable

from .config_types import Auth, PasswordAuth


def make_signature(token: str | None, timestamp: int) -> str:
    """md5 of the token followed by the decimal timestamp, as YOURLS expects."""
    raw = f"{token or ''}{timestamp}"
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def auth_params(auth: Auth, *, clock: Callable[[], float] = time.time) -> dict[str, str]:
    if isinstance(auth, PasswordAuth):
        password = auth.username if auth.echo_username else (auth.password or "")
        return {"username": auth.username, "password": password}
    timestamp = int(clock())
    return {"timestamp": str(timestamp), "signature": make_signature(auth.token, timestamp)}
