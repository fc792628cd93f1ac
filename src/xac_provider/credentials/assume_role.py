"""Build AssumeRole requests from the assume_role configuration block."""

import logging
import re
from typing import Any, ClassVar, Dict, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..environment import EnvironmentProvider, OSEnvironment
from ..errors import ConfigurationError, ValidationError
from ..schema import PROVIDER_ASSUME_ROLE_SESSION_DURATION
from .models import AssumeRoleSpec


logger = logging.getLogger(__name__)

DEFAULT_SESSION_DURATION = 7200
MAX_SESSION_DURATION = 43200

_INTEGER = re.compile(r"[+-]?[0-9]+")


class AssumeRoleRequest(BaseModel):
    """A well-formed STS AssumeRole request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: ClassVar[str] = "AssumeRole"

    role_arn: str = Field(alias="RoleArn", min_length=1)
    role_session_name: str = Field(alias="RoleSessionName", min_length=1)
    duration_seconds: int = Field(alias="DurationSeconds", ge=1, le=MAX_SESSION_DURATION)
    policy: Optional[str] = Field(default=None, alias="Policy")

    def to_params(self) -> Dict[str, Any]:
        """Render the API parameters; an unset policy is left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


def resolve_session_duration(
    duration: int,
    environment: Optional[EnvironmentProvider] = None
) -> int:
    """Resolve the effective session duration.

    A non-zero ``duration`` is used as is. Zero falls back to the
    TENCENTCLOUD_ASSUME_ROLE_SESSION_DURATION variable and then to 7200
    when the variable is unset or zero.

    Raises:
        ConfigurationError: If the variable is set but not an integer
    """
    if duration != 0:
        return duration

    environment = environment or OSEnvironment()
    raw = environment.get(PROVIDER_ASSUME_ROLE_SESSION_DURATION)
    if raw is None:
        return DEFAULT_SESSION_DURATION

    # digits with an optional sign, no underscores or padding
    if not _INTEGER.fullmatch(raw):
        raise ConfigurationError(
            f"{PROVIDER_ASSUME_ROLE_SESSION_DURATION} must be an integer, got: {raw!r}",
            key="assume_role.session_duration",
        )

    value = int(raw)
    if value == 0:
        return DEFAULT_SESSION_DURATION

    logger.debug(f"Session duration {value}s sourced from {PROVIDER_ASSUME_ROLE_SESSION_DURATION}")
    return value


def build_assume_role_request(
    spec: AssumeRoleSpec,
    environment: Optional[EnvironmentProvider] = None
) -> AssumeRoleRequest:
    """Validate and normalize an assume_role block into a request.

    Args:
        spec: The assume_role block
        environment: Environment used for the session duration fallback

    Returns:
        Request ready for the token exchange client

    Raises:
        ConfigurationError: If role_arn or session_name is empty, or the
            duration override cannot be parsed
        ValidationError: If the effective duration is out of range
    """
    if not spec.role_arn:
        raise ConfigurationError("assume_role.role_arn must not be empty", key="assume_role.role_arn")
    if not spec.session_name:
        raise ConfigurationError(
            "assume_role.session_name must not be empty", key="assume_role.session_name"
        )

    duration = resolve_session_duration(spec.session_duration, environment)
    policy = quote_plus(spec.policy) if spec.policy else None

    try:
        return AssumeRoleRequest(
            role_arn=spec.role_arn,
            role_session_name=spec.session_name,
            duration_seconds=duration,
            policy=policy,
        )
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid AssumeRole request: effective session duration {duration} "
            f"must be in range [1, {MAX_SESSION_DURATION}]",
            key="assume_role.session_duration",
        ) from e
