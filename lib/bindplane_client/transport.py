from __future__ import annotations

import ssl
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import ApiError, AuthError, ConstructionError, NetworkError

API_KEY_HEADER = "X-Bindplane-Api-Key"
DEFAULT_TIMEOUT_S = 60.0
USER_AGENT = "bindplane-client/0.1.0"


def build_ssl_context(certificate_authorities: tuple[str | bytes, ...] | list[str | bytes]) -> ssl.SSLContext:
    """Build the TLS context for the control plane connection.

    With no CAs the OS default verify paths are trusted. CAs are PEM text;
    bytes are decoded as ASCII PEM, never read as DER.
    """
    if certificate_authorities:
        # Only the configured CAs are trusted, the default store is not loaded.
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        for ca in certificate_authorities:
            try:
                if isinstance(ca, bytes):
                    ca = ca.decode("ascii")
                ctx.load_verify_locations(cadata=ca)
            except (ssl.SSLError, ValueError, TypeError) as e:
                raise ConstructionError("failed to append certificate authority") from e
    else:
        ctx = ssl.create_default_context()
    ctx.minimum_version = ssl.TLSVersion.TLSv1_3
    return ctx


def status_error(r: httpx.Response) -> ApiError:
    body = r.text
    msg = f"BindPlane API returned status {r.status_code}: {body}"
    if r.status_code in (401, 403):
        return AuthError(r.status_code, msg, body)
    return ApiError(r.status_code, msg, body)


class Transport:
    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg

        headers = {"User-Agent": USER_AGENT}
        if cfg.auth.api_key:
            headers[API_KEY_HEADER] = cfg.auth.api_key

        self.ssl_context = build_ssl_context(cfg.certificate_authorities)
        self._client_kwargs: dict[str, Any] = {
            "base_url": f"{cfg.remote_url}/v1",
            "timeout": cfg.timeout_s or DEFAULT_TIMEOUT_S,
            "headers": headers,
            "auth": httpx.BasicAuth(cfg.auth.username, cfg.auth.password),
            "verify": self.ssl_context,
            "follow_redirects": True,
        }
        self._client = httpx.Client(**self._client_kwargs)

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    def set_timeout(self, timeout_s: float) -> None:
        self._client_kwargs["timeout"] = timeout_s
        self._client.timeout = httpx.Timeout(timeout_s)

    def use_transport(self, transport: httpx.BaseTransport) -> None:
        self._client.close()
        self._client = httpx.Client(**self._client_kwargs, transport=transport)

    def close(self) -> None:
        self._client.close()

    def request(
            self,
            method: str,
            path: str,
            *,
            content: bytes | None = None,
            json_body: Any | None = None,
            headers: dict[str, str] | None = None,
            check_status: bool = True,
            timeout: float | None = None,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            r = self._client.request(method, path, content=content, json=json_body, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if check_status and r.status_code > 399:
            raise status_error(r)
        return r


def decode_json(r: httpx.Response) -> Any:
    """Decode a response body, treating an empty body as ``None``."""
    if not r.content.strip():
        return None
    try:
        return r.json()
    except ValueError as e:
        raise ApiError(
            r.status_code,
            f"BindPlane API returned invalid JSON (status {r.status_code}): {r.text}",
            r.text,
        ) from e
