from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from bindplane_client.config_types import AuthConfig as ClientAuthConfig
from bindplane_client.config_types import ClientConfig

from . import console

APP_NAME = "bindplane"
CONFIG_FILENAME = "config.toml"
REMOTE_URL_DEFAULT = "http://127.0.0.1:3001"

ENV_REMOTE_URL = "BINDPLANE_REMOTE_URL"
ENV_USERNAME = "BINDPLANE_USERNAME"
ENV_PASSWORD = "BINDPLANE_PASSWORD"
ENV_API_KEY = "BINDPLANE_API_KEY"
ENV_TIMEOUT = "BINDPLANE_TIMEOUT"
ENV_PROFILE = "BINDPLANE_PROFILE"

_WARNED_REMOTE_URL_SCHEME = False


class ConfigError(Exception):
    """Configuration could not be turned into a client config."""


@dataclass
class AuthConfig:
    username: str = ""
    password: str = ""
    api_key: str = ""


@dataclass
class AppConfig:
    remote_url: str
    auth: AuthConfig
    ca_files: list[str] = field(default_factory=list)
    timeout_s: float = 0.0


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        remote_url=REMOTE_URL_DEFAULT,
        auth=AuthConfig(),
        ca_files=[],
        timeout_s=0.0,
    )


def normalize_remote_url(raw: str | None, *, warn: bool = False) -> str:
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
    global _WARNED_REMOTE_URL_SCHEME
    if _WARNED_REMOTE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"remote_url missing scheme, assuming {normalized}")
    _WARNED_REMOTE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def _coerce_timeout(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        timeout = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return timeout if timeout > 0 else 0.0


def _coerce_ca_files(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, str) and item.strip()]


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "remote_url": cfg.remote_url,
        "ca_files": list(cfg.ca_files),
        "timeout_s": cfg.timeout_s,
        "auth": {
            "username": cfg.auth.username,
            "password": cfg.auth.password,
            "api_key": cfg.auth.api_key,
        },
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    return _merge_section(cfg, data)


def _merge_section(cfg: AppConfig, section: dict[str, Any]) -> AppConfig:
    remote_url = normalize_remote_url(str(section.get("remote_url") or ""), warn=True)
    auth_raw = section.get("auth") if isinstance(section.get("auth"), dict) else {}
    username = section.get("username") or auth_raw.get("username")
    password = section.get("password") or auth_raw.get("password")
    api_key = section.get("api_key") or auth_raw.get("api_key")
    ca_files = _coerce_ca_files(section.get("ca_files"))
    timeout_s = _coerce_timeout(section.get("timeout_s"))
    return AppConfig(
        remote_url=remote_url or cfg.remote_url,
        auth=AuthConfig(
            username=str(username) if username else cfg.auth.username,
            password=str(password) if password else cfg.auth.password,
            api_key=str(api_key) if api_key else cfg.auth.api_key,
        ),
        ca_files=ca_files or list(cfg.ca_files),
        timeout_s=timeout_s or cfg.timeout_s,
    )


def _read_toml() -> dict[str, Any] | None:
    try:
        with open(config_path(), "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return None


def load_config() -> AppConfig:
    data = _read_toml()
    if data is None:
        return default_config()
    return from_toml(data)


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    profile = profile or os.getenv(ENV_PROFILE, "").strip() or None
    if not profile:
        return cfg
    data = _read_toml()
    if data is None:
        return cfg

    profiles_raw = data.get("profiles") or {}
    if not isinstance(profiles_raw, dict):
        return cfg
    prof = profiles_raw.get(profile)
    if not isinstance(prof, dict):
        console.warn(f"Profile '{profile}' not found in {config_path()}, using defaults.")
        return cfg
    return _merge_section(cfg, prof)


def apply_env(cfg: AppConfig) -> AppConfig:
    remote_url = normalize_remote_url(os.getenv(ENV_REMOTE_URL), warn=True)
    timeout_s = _coerce_timeout(os.getenv(ENV_TIMEOUT))
    return AppConfig(
        remote_url=remote_url or cfg.remote_url,
        auth=AuthConfig(
            username=os.getenv(ENV_USERNAME) or cfg.auth.username,
            password=os.getenv(ENV_PASSWORD) or cfg.auth.password,
            api_key=os.getenv(ENV_API_KEY) or cfg.auth.api_key,
        ),
        ca_files=list(cfg.ca_files),
        timeout_s=timeout_s or cfg.timeout_s,
    )


def to_client_config(cfg: AppConfig) -> ClientConfig:
    cas: list[str] = []
    for path in cfg.ca_files:
        try:
            with open(os.path.expanduser(path), encoding="utf-8") as f:
                cas.append(f.read())
        except OSError as e:
            raise ConfigError(f"failed to read certificate authority {path}: {e}") from e
    return ClientConfig(
        remote_url=cfg.remote_url,
        auth=ClientAuthConfig(
            username=cfg.auth.username,
            password=cfg.auth.password,
            api_key=cfg.auth.api_key,
        ),
        certificate_authorities=tuple(cas),
        timeout_s=cfg.timeout_s,
    )


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    data = _read_toml() or {}
    data.update(to_toml(cfg))
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(data).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
