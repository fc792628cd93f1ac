"""TencentCloud credential handling for the provider."""

from .models import AssumeRoleSpec, Credential, Protocol, ProviderConfig
from .assume_role import (
    AssumeRoleRequest,
    build_assume_role_request,
    resolve_session_duration
)

__all__ = [
    "AssumeRoleRequest",
    "AssumeRoleSpec",
    "Credential",
    "Protocol",
    "ProviderConfig",
    "build_assume_role_request",
    "resolve_session_duration"
]
