from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_api_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/yourls/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        api_url: str = typer.Option(
            ...,
            "--api-url",
            prompt="YOURLS API URL",
            help="API URL like https://sho.rt/yourls-api.php",
        ),
        token: str | None = typer.Option(None, "--token", help="Signature token."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.api_url = normalize_api_url(api_url, warn=True)
    if not cfg.api_url:
        console.err("API URL cannot be empty.")
        raise typer.Exit(code=2)
    if token:
        cfg.auth.token = token.strip()
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config(env=False)
    if cfg.auth.username:
        mode = f"password (username={cfg.auth.username})"
    elif cfg.auth.token:
        mode = "signature (token set)"
    else:
        mode = "(no credentials)"
    console.out(f"api_url={cfg.api_url or '(empty)'} auth={mode}")
    for name in sorted(cfg.profiles):
        console.out(f"profile: {name}")


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (api_url, username)."),
):
    cfg = load_config(env=False)
    k = key.strip().lower()
    if k == "api_url":
        console.out(cfg.api_url)
        return
    if k == "username":
        console.out(cfg.auth.username)
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        api_url: str | None = typer.Option(None, "--api-url", help="Set API URL."),
        username: str | None = typer.Option(None, "--username", help="Set username (password auth)."),
        password: str | None = typer.Option(None, "--password", help="Set password."),
        token: str | None = typer.Option(None, "--token", help="Set signature token."),
        echo_username: bool | None = typer.Option(
            None,
            "--echo-username/--no-echo-username",
            help="Send the username in the password field (old servers).",
        ),
):
    cfg = load_config(env=False)
    if api_url is not None:
        cfg.api_url = normalize_api_url(api_url, warn=True)
    if username is not None:
        cfg.auth.username = username.strip()
    if password is not None:
        cfg.auth.password = password
    if token is not None:
        cfg.auth.token = token.strip()
    if echo_username is not None:
        cfg.auth.echo_username = echo_username
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
