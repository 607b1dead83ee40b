from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable

# Resources and their apply results are passed through untouched.
Resource = dict[str, Any]
ResourceStatus = dict[str, Any]


class RolloutState(IntEnum):
    PENDING = 0
    STARTED = 1
    PAUSED = 2
    ERROR = 3
    STABLE = 4
    REPLACED = 5

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({RolloutState.ERROR, RolloutState.STABLE, RolloutState.REPLACED})


def _as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Version:
    tag: str = ""
    commit: str = ""
    date: str = ""
    document: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Version":
        if not isinstance(data, dict):
            return cls()
        return cls(
            tag=_as_str(data.get("tag")),
            commit=_as_str(data.get("commit")),
            date=_as_str(data.get("date")),
            document=dict(data),
        )


@dataclass(frozen=True)
class Configuration:
    """A named configuration as reported by the control plane.

    ``document`` holds the full received JSON so fields the client does not
    model are still reachable.
    """

    name: str = ""
    api_version: str = ""
    kind: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    spec: dict[str, Any] = field(default_factory=dict)
    status: dict[str, Any] = field(default_factory=dict)
    document: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Configuration":
        if not isinstance(data, dict):
            return cls()
        metadata = _as_dict(data.get("metadata"))
        name = _as_str(data.get("name")) or _as_str(metadata.get("name"))
        return cls(
            name=name,
            api_version=_as_str(data.get("apiVersion")),
            kind=_as_str(data.get("kind")),
            metadata=metadata,
            spec=_as_dict(data.get("spec")),
            status=_as_dict(data.get("status")),
            document=dict(data),
        )

    @property
    def rollout(self) -> dict[str, Any]:
        return _as_dict(self.status.get("rollout"))

    @property
    def rollout_state(self) -> RolloutState | None:
        value = self.rollout.get("status")
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return RolloutState(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ConfigurationResponse:
    configuration: Configuration = field(default_factory=Configuration)
    raw: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigurationResponse":
        if not isinstance(data, dict):
            return cls()
        return cls(
            configuration=Configuration.from_dict(data.get("configuration")),
            raw=_as_str(data.get("raw")),
        )


@dataclass(frozen=True)
class RolloutOptions:
    def to_dict(self) -> dict[str, Any]:
        return {}


def apply_payload(resources: Iterable[Resource]) -> dict[str, Any]:
    return {"resources": list(resources)}


def start_rollout_payload(options: RolloutOptions | None = None) -> dict[str, Any]:
    return {"options": (options or RolloutOptions()).to_dict()}
