from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthConfig:
    username: str = ""
    password: str = ""
    api_key: str = ""


@dataclass(frozen=True)
class ClientConfig:
    remote_url: str
    auth: AuthConfig = field(default_factory=AuthConfig)
    certificate_authorities: tuple[str | bytes, ...] = ()
    timeout_s: float = 0.0
