from __future__ import annotations

import json
import logging
from typing import Callable, Iterable

import httpx

from .config_types import ClientConfig
from .errors import ApiError, ConstructionError, SerializationError
from .models import (
    Configuration,
    ConfigurationResponse,
    Resource,
    ResourceStatus,
    RolloutOptions,
    Version,
    apply_payload,
    start_rollout_payload,
)
from .transport import Transport, decode_json

Option = Callable[["BindPlane"], None]


def with_timeout(timeout_s: float) -> Option:
    """Override the request timeout. A zero value leaves the default in place."""

    def _apply(c: BindPlane) -> None:
        if not timeout_s:
            return
        if timeout_s < 0:
            raise ValueError(f"timeout must be positive, got {timeout_s}")
        c._t.set_timeout(timeout_s)

    return _apply


def with_http_transport(transport: httpx.BaseTransport) -> Option:
    """Send requests through ``transport`` instead of the default network transport."""

    def _apply(c: BindPlane) -> None:
        c._t.use_transport(transport)

    return _apply


class BindPlane:
    """Client for the BindPlane control plane API.

    Every operation is a single request. Failures are raised immediately
    and never retried; retry policy belongs to the caller.
    """

    def __init__(self, cfg: ClientConfig, logger: logging.Logger | None = None, *options: Option):
        self.config = cfg
        self.logger = logger or logging.getLogger("bindplane_client")
        self._t = Transport(cfg)

        for opt in options:
            try:
                opt(self)
            except Exception as e:
                self._t.close()
                raise ConstructionError(f"apply option: {e}") from e

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "BindPlane":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def version(self, *, timeout: float | None = None) -> Version:
        r = self._t.request("GET", "/version", check_status=False, timeout=timeout)
        if not r.is_success:
            self.logger.debug("version request returned status %d", r.status_code)
            return Version()
        try:
            data = decode_json(r)
        except ApiError:
            self.logger.debug("version response is not JSON (status %d)", r.status_code)
            return Version()
        return Version.from_dict(data)

    def apply(self, resources: Iterable[Resource], *, timeout: float | None = None) -> list[ResourceStatus]:
        payload = apply_payload(resources)
        try:
            data = json.dumps(payload, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"client apply: {e}") from e

        self.logger.debug("applying %d resources", len(payload["resources"]))
        r = self._t.request(
            "POST",
            "/apply",
            content=data.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        body = decode_json(r)
        if not isinstance(body, dict):
            return []
        updates = body.get("updates")
        return updates if isinstance(updates, list) else []

    def configuration(self, name: str, *, timeout: float | None = None) -> Configuration:
        return self._configuration(name, timeout=timeout).configuration

    def raw_configuration(self, name: str, *, timeout: float | None = None) -> str:
        return self._configuration(name, timeout=timeout).raw

    def _configuration(self, name: str, *, timeout: float | None) -> ConfigurationResponse:
        r = self._t.request("GET", f"/configurations/{name}", timeout=timeout)
        return ConfigurationResponse.from_dict(decode_json(r))

    def start_rollout(self, name: str, *, timeout: float | None = None) -> None:
        self.logger.debug("starting rollout for configuration %s", name)
        self._t.request(
            "POST",
            f"/rollouts/{name}/start",
            json_body=start_rollout_payload(RolloutOptions()),
            timeout=timeout,
        )

    def rollout_status(self, name: str, *, timeout: float | None = None) -> Configuration:
        r = self._t.request("GET", f"/rollouts/{name}/status", timeout=timeout)
        return ConfigurationResponse.from_dict(decode_json(r)).configuration
