from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from . import console

APP_NAME = "yourls"
CONFIG_FILENAME = "config.toml"

ENV_API_URL = "YOURLS_API_URL"
ENV_USERNAME = "YOURLS_USERNAME"
ENV_PASSWORD = "YOURLS_PASSWORD"
ENV_TOKEN = "YOURLS_TOKEN"

_WARNED_API_URL_SCHEME = False


@dataclass
class AuthConfig:
    username: str = ""
    password: str = ""
    token: str = ""
    echo_username: bool = False


@dataclass
class AppConfig:
    api_url: str
    auth: AuthConfig
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(api_url="", auth=AuthConfig(), profiles={})


def normalize_api_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_API_URL_SCHEME
    if _WARNED_API_URL_SCHEME:
        return
    console.warn(f"api_url missing scheme, assuming {normalized}")
    _WARNED_API_URL_SCHEME = True


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def overlay_auth(
        base: AuthConfig,
        *,
        username: str = "",
        password: str = "",
        token: str = "",
        echo_username: bool | None = None,
) -> AuthConfig:
    """Layer credentials on top of ``base``.

    A username or a token replaces the whole inherited credential set, so a
    profile or the environment can switch between password and signature
    auth. A lone password only updates the inherited one.
    """
    echo = base.echo_username if echo_username is None else echo_username
    if username:
        return AuthConfig(username=username, password=password, echo_username=echo)
    if token:
        return AuthConfig(token=token, echo_username=echo)
    return AuthConfig(
        username=base.username,
        password=password or base.password,
        token=base.token,
        echo_username=echo,
    )


def _auth_from(raw: Any, base: AuthConfig | None = None) -> AuthConfig:
    base = base or AuthConfig()
    if not isinstance(raw, dict):
        return replace(base)
    echo = raw.get("echo_username")
    # a single table may carry both sets; keep them side by side as given
    if raw.get("username") and raw.get("token"):
        return AuthConfig(
            username=str(raw["username"]),
            password=str(raw.get("password") or ""),
            token=str(raw["token"]),
            echo_username=echo if isinstance(echo, bool) else base.echo_username,
        )
    return overlay_auth(
        base,
        username=str(raw.get("username") or ""),
        password=str(raw.get("password") or ""),
        token=str(raw.get("token") or ""),
        echo_username=echo if isinstance(echo, bool) else None,
    )


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "api_url": cfg.api_url,
        "auth": {
            "username": cfg.auth.username,
            "password": cfg.auth.password,
            "token": cfg.auth.token,
            "echo_username": cfg.auth.echo_username,
        },
    }
    if cfg.profiles:
        data["profiles"] = cfg.profiles
    return data


def from_toml(data: dict[str, Any]) -> AppConfig:
    api_url = normalize_api_url(str(data.get("api_url") or ""), warn=True)
    auth = _auth_from(data.get("auth"))
    profiles_raw = data.get("profiles") or {}
    profiles: dict[str, dict[str, Any]] = {}
    if isinstance(profiles_raw, dict):
        for name, prof in profiles_raw.items():
            if isinstance(prof, dict):
                profiles[str(name)] = dict(prof)
    return AppConfig(api_url=api_url, auth=auth, profiles=profiles)


def apply_env(cfg: AppConfig) -> AppConfig:
    api_url = os.getenv(ENV_API_URL, "").strip()
    username = os.getenv(ENV_USERNAME, "").strip()
    password = os.getenv(ENV_PASSWORD, "")
    token = os.getenv(ENV_TOKEN, "").strip()
    return AppConfig(
        api_url=normalize_api_url(api_url, warn=True) if api_url else cfg.api_url,
        auth=overlay_auth(cfg.auth, username=username, password=password, token=token),
        profiles=cfg.profiles,
    )


def load_config(*, env: bool = True) -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except FileNotFoundError:
        cfg = default_config()
    return apply_env(cfg) if env else cfg


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if not isinstance(prof, dict):
        return cfg

    api_url = normalize_api_url(str(prof.get("api_url") or ""), warn=True)
    # auth keys may sit directly in the profile table or under [profiles.x.auth]
    auth_raw = prof.get("auth") if isinstance(prof.get("auth"), dict) else prof
    return AppConfig(
        api_url=api_url or cfg.api_url,
        auth=_auth_from(auth_raw, cfg.auth),
        profiles=cfg.profiles,
    )


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
