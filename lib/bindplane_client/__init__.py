from .client import BindPlane, Option, with_http_transport, with_timeout
from .config_types import AuthConfig, ClientConfig
from .errors import (
    ApiError,
    AuthError,
    BindPlaneClientError,
    ConstructionError,
    NetworkError,
    SerializationError,
)
from .models import Configuration, Resource, ResourceStatus, RolloutOptions, RolloutState, Version

__all__ = [
    "BindPlane",
    "Option",
    "with_http_transport",
    "with_timeout",
    "AuthConfig",
    "ClientConfig",
    "ApiError",
    "AuthError",
    "BindPlaneClientError",
    "ConstructionError",
    "NetworkError",
    "SerializationError",
    "Configuration",
    "Resource",
    "ResourceStatus",
    "RolloutOptions",
    "RolloutState",
    "Version",
]
