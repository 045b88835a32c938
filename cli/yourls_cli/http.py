from __future__ import annotations

from yourls_client import YourlsClient
from yourls_client.config_types import ClientConfig

from .config import AppConfig, apply_profile, normalize_api_url


class MissingApiUrl(ValueError):
    pass


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    api_url_override: str | None,
) -> YourlsClient:
    effective_cfg = apply_profile(cfg, profile)
    api_url = normalize_api_url(api_url_override or effective_cfg.api_url, warn=True)
    if not api_url:
        raise MissingApiUrl("API URL is not configured. Run `yourls settings init` or pass --api-url.")

    auth = effective_cfg.auth
    return YourlsClient(
        ClientConfig.from_credentials(
            api_url,
            username=auth.username or None,
            password=auth.password or None,
            token=auth.token or None,
            echo_username=auth.echo_username,
        )
    )
