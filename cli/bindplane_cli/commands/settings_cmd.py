from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_remote_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/bindplane/config.toml).")


def _secret_state(value: str) -> str:
    return "(set)" if (value or "").strip() else "(empty)"


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        remote_url: str = typer.Option(
            ...,
            "--remote-url",
            prompt="BindPlane remote URL",
            help="Control plane URL like https://bindplane.example.com",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.remote_url = normalize_remote_url(remote_url, warn=True)
    if not cfg.remote_url:
        console.err("Remote URL cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    console.print(
        f"remote_url={cfg.remote_url} username={cfg.auth.username or '-'} "
        f"password={_secret_state(cfg.auth.password)} api_key={_secret_state(cfg.auth.api_key)} "
        f"ca_files={len(cfg.ca_files)} timeout_s={cfg.timeout_s or 'default'}",
        soft_wrap=True,
        highlight=False,
    )


@app.command("set")
def set_setting(
        remote_url: str | None = typer.Option(None, "--remote-url", help="Set control plane URL."),
        username: str | None = typer.Option(None, "--username", help="Set basic auth username."),
        password: str | None = typer.Option(None, "--password", help="Set basic auth password."),
        api_key: str | None = typer.Option(None, "--api-key", help="Set API key."),
        ca_file: list[str] | None = typer.Option(None, "--ca-file", help="Trust this CA (repeatable, replaces the list)."),
        timeout_s: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds (0 = default)."),
):
    cfg = load_config()
    if remote_url is not None:
        cfg.remote_url = normalize_remote_url(remote_url, warn=True)
    if username is not None:
        cfg.auth.username = username
    if password is not None:
        cfg.auth.password = password
    if api_key is not None:
        cfg.auth.api_key = api_key
    if ca_file:
        cfg.ca_files = [path for path in ca_file if path.strip()]
    if timeout_s is not None:
        if timeout_s < 0:
            console.err("Timeout cannot be negative.")
            raise typer.Exit(code=2)
        cfg.timeout_s = timeout_s
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
