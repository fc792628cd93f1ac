"""Credential and provider configuration value objects."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Credential:
    """TencentCloud credentials container.

    A long-lived credential has an empty token; a temporary one obtained
    through AssumeRole carries a session token. Instances are never mutated,
    a new exchange produces a new Credential.
    """
    secret_id: str
    secret_key: str = field(repr=False)
    token: str = field(default="", repr=False)

    @property
    def is_temporary(self) -> bool:
        return bool(self.token)

    @property
    def is_usable(self) -> bool:
        return bool(self.secret_id and self.secret_key)

    def masked_id(self) -> str:
        """Secret id safe for logs and terminal output."""
        if len(self.secret_id) <= 8:
            return "*" * len(self.secret_id)
        return f"{self.secret_id[:4]}{'*' * (len(self.secret_id) - 8)}{self.secret_id[-4:]}"


class Protocol(str, Enum):
    """API request protocol."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"


class AssumeRoleSpec(BaseModel):
    """The assume_role block of the provider configuration."""

    model_config = ConfigDict(frozen=True)

    role_arn: str = Field(description="ARN of the role to assume")
    session_name: str = Field(description="Session name for the AssumeRole call")
    session_duration: int = Field(
        default=7200, ge=0, le=43200,
        description="Session validity in seconds, 0 means use the environment or 7200"
    )
    policy: str = Field(default="", description="Optional restrictive policy document")


class ProviderConfig(BaseModel):
    """Provider configuration resolved once per run."""

    model_config = ConfigDict(frozen=True)

    credential: Credential
    region: str = Field(min_length=1)
    protocol: Protocol = Protocol.HTTPS
    domain: Optional[str] = None
    assume_role: Optional[AssumeRoleSpec] = None
