from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PasswordAuth:
    username: str
    password: str | None = None
    # Legacy servers were fed the username in the password slot.
    echo_username: bool = False


@dataclass(frozen=True)
class SignatureAuth:
    token: str | None = None


Auth = Union[PasswordAuth, SignatureAuth]


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    auth: Auth

    @classmethod
    def from_credentials(
            cls,
            api_url: str,
            username: str | None = None,
            password: str | None = None,
            token: str | None = None,
            *,
            echo_username: bool = False,
    ) -> "ClientConfig":
        if username:
            return cls(api_url=api_url, auth=PasswordAuth(username, password, echo_username))
        return cls(api_url=api_url, auth=SignatureAuth(token))
