from __future__ import annotations

import logging

import typer
from bindplane_client import ApiError, BindPlane, ConstructionError
from bindplane_client.errors_utils import parse_api_error_detail

from . import console
from .config import AppConfig, ConfigError, apply_env, apply_profile, normalize_remote_url, to_client_config

logger = logging.getLogger("bindplane_cli")


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    remote_url_override: str | None,
) -> BindPlane:
    effective_cfg = apply_env(apply_profile(cfg, profile))
    if remote_url_override:
        effective_cfg.remote_url = normalize_remote_url(remote_url_override, warn=True)
    return BindPlane(to_client_config(effective_cfg), logger.getChild("client"))


def make_client_or_exit(
    cfg: AppConfig,
    *,
    profile: str | None,
    remote_url_override: str | None,
) -> BindPlane:
    try:
        return make_client(cfg, profile=profile, remote_url_override=remote_url_override)
    except (ConfigError, ConstructionError) as e:
        console.err(f"Invalid client configuration: {e}")
        raise typer.Exit(code=2)


def exit_with_api_error(action: str, exc: Exception) -> None:
    if isinstance(exc, ApiError):
        if exc.status_code in (401, 403):
            console.err(f"Unauthorized ({exc.status_code}). Check username/password or API key.")
        else:
            console.err(f"Failed to {action}: BindPlane API returned status {exc.status_code}.")
        detail = parse_api_error_detail(exc.details)
        if detail is not None:
            console.print_json(detail)
        elif exc.details:
            console.info(exc.details)
    else:
        console.err(f"Failed to {action}: {exc}")
    raise typer.Exit(code=2)
