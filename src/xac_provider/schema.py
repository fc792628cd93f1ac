"""Provider option schema and the configuration source built on it."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from .environment import EnvironmentProvider, OSEnvironment
from .errors import ConfigurationError, ValidationError


logger = logging.getLogger(__name__)

PROVIDER_SECRET_ID = "TENCENTCLOUD_SECRET_ID"
PROVIDER_SECRET_KEY = "TENCENTCLOUD_SECRET_KEY"
PROVIDER_SECURITY_TOKEN = "TENCENTCLOUD_SECURITY_TOKEN"
PROVIDER_REGION = "TENCENTCLOUD_REGION"
PROVIDER_PROTOCOL = "TENCENTCLOUD_PROTOCOL"
PROVIDER_DOMAIN = "TENCENTCLOUD_DOMAIN"
PROVIDER_ASSUME_ROLE_ARN = "TENCENTCLOUD_ASSUME_ROLE_ARN"
PROVIDER_ASSUME_ROLE_SESSION_NAME = "TENCENTCLOUD_ASSUME_ROLE_SESSION_NAME"
PROVIDER_ASSUME_ROLE_SESSION_DURATION = "TENCENTCLOUD_ASSUME_ROLE_SESSION_DURATION"

Validator = Callable[[Any, str], None]


def validate_allowed_string_value(allowed: Sequence[str]) -> Validator:
    """Build a validator accepting only the given string values."""
    def validator(value: Any, key: str) -> None:
        if value not in allowed:
            raise ValidationError(
                f"{key} must be one of {list(allowed)}, got: {value!r}", key=key
            )
    return validator


def validate_integer_in_range(low: int, high: int) -> Validator:
    """Build a validator accepting integers in [low, high]."""
    def validator(value: Any, key: str) -> None:
        if value < low or value > high:
            raise ValidationError(
                f"{key} must be in range [{low}, {high}], got: {value}", key=key
            )
    return validator


@dataclass(frozen=True)
class Option:
    """A single provider option."""
    name: str
    type: type = str
    required: bool = False
    env_var: Optional[str] = None
    default: Any = None
    input_default: Optional[str] = None
    sensitive: bool = False
    description: str = ""
    validator: Optional[Validator] = None


PROVIDER_SCHEMA: Dict[str, Option] = {
    option.name: option for option in [
        Option(
            name="secret_id",
            required=True,
            env_var=PROVIDER_SECRET_ID,
            description="This is the TencentCloud access key. It must be provided, "
                        "but it can also be sourced from the `TENCENTCLOUD_SECRET_ID` "
                        "environment variable.",
        ),
        Option(
            name="secret_key",
            required=True,
            env_var=PROVIDER_SECRET_KEY,
            sensitive=True,
            description="This is the TencentCloud secret key. It must be provided, "
                        "but it can also be sourced from the `TENCENTCLOUD_SECRET_KEY` "
                        "environment variable.",
        ),
        Option(
            name="security_token",
            env_var=PROVIDER_SECURITY_TOKEN,
            default="",
            sensitive=True,
            description="TencentCloud Security Token of temporary access credentials. "
                        "It can be sourced from the `TENCENTCLOUD_SECURITY_TOKEN` "
                        "environment variable.",
        ),
        Option(
            name="region",
            required=True,
            env_var=PROVIDER_REGION,
            input_default="ap-guangzhou",
            description="This is the TencentCloud region. It must be provided, but it "
                        "can also be sourced from the `TENCENTCLOUD_REGION` environment "
                        "variables. The default input value is ap-guangzhou.",
        ),
        Option(
            name="protocol",
            env_var=PROVIDER_PROTOCOL,
            default="HTTPS",
            validator=validate_allowed_string_value(["HTTP", "HTTPS"]),
            description="The protocol of the API request. Valid values: `HTTP` and "
                        "`HTTPS`. Default is `HTTPS`.",
        ),
        Option(
            name="domain",
            env_var=PROVIDER_DOMAIN,
            default="",
            description="The root domain of the API request, Default is "
                        "`tencentcloudapi.com`.",
        ),
    ]
}

ASSUME_ROLE_SCHEMA: Dict[str, Option] = {
    option.name: option for option in [
        Option(
            name="role_arn",
            required=True,
            env_var=PROVIDER_ASSUME_ROLE_ARN,
            description="The ARN of the role to assume. It can be sourced from the "
                        "`TENCENTCLOUD_ASSUME_ROLE_ARN`.",
        ),
        Option(
            name="session_name",
            required=True,
            env_var=PROVIDER_ASSUME_ROLE_SESSION_NAME,
            description="The session name to use when making the AssumeRole call. It "
                        "can be sourced from the `TENCENTCLOUD_ASSUME_ROLE_SESSION_NAME`.",
        ),
        Option(
            name="session_duration",
            type=int,
            required=True,
            input_default="7200",
            validator=validate_integer_in_range(0, 43200),
            description="The duration of the session when making the AssumeRole call. "
                        "Its value ranges from 0 to 43200(seconds), and default is 7200 "
                        "seconds. It can be sourced from the "
                        "`TENCENTCLOUD_ASSUME_ROLE_SESSION_DURATION`.",
        ),
        Option(
            name="policy",
            default="",
            description="A more restrictive policy when making the AssumeRole call. "
                        "Its content must not contains `principal` elements.",
        ),
    ]
}

ASSUME_ROLE_BLOCK = "assume_role"


class ConfigurationSource(ABC):
    """Supplies resolved option values by name."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Get the resolved value of an option."""
        pass


def _resolve_option(
    option: Option,
    values: Mapping[str, Any],
    environment: EnvironmentProvider,
    path: str
) -> Any:
    """Resolve one option: explicit value, then environment, then default."""
    key = f"{path}{option.name}"
    value = values.get(option.name)

    if value is None and option.env_var:
        value = environment.get(option.env_var)
        if value is not None:
            logger.debug(f"Option '{key}' sourced from {option.env_var}")

    if value is None:
        value = option.default

    if value is None or value == "":
        if option.required:
            hint = f" or set {option.env_var}" if option.env_var else ""
            raise ConfigurationError(f"Missing required option '{key}'{hint}", key=key)
        return value

    if option.type is int:
        if isinstance(value, bool):
            raise ConfigurationError(f"Option '{key}' must be an integer, got: {value!r}", key=key)
        try:
            value = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Option '{key}' must be an integer, got: {value!r}", key=key
            ) from e
    elif not isinstance(value, str):
        raise ConfigurationError(f"Option '{key}' must be a string, got: {value!r}", key=key)

    if option.validator:
        option.validator(value, key)

    return value


def _check_unknown(values: Mapping[str, Any], known: Sequence[str], path: str) -> None:
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ConfigurationError(
            f"Unsupported option '{path}{unknown[0]}'", key=f"{path}{unknown[0]}"
        )


def _single_block(value: Any) -> Optional[Mapping[str, Any]]:
    """Normalize the assume_role block to at most one mapping."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            return None
        if len(value) > 1:
            raise ConfigurationError(
                f"At most one '{ASSUME_ROLE_BLOCK}' block is allowed, got {len(value)}",
                key=ASSUME_ROLE_BLOCK,
            )
        block = value[0]
        if isinstance(block, Mapping):
            return block
    raise ConfigurationError(
        f"Option '{ASSUME_ROLE_BLOCK}' must be a mapping", key=ASSUME_ROLE_BLOCK
    )


class SchemaConfigurationSource(ConfigurationSource):
    """Configuration source that resolves options against the provider schema.

    All options are resolved and validated eagerly, so an invalid value is
    reported before anything reads the configuration.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        environment: Optional[EnvironmentProvider] = None
    ):
        values = dict(values or {})
        self.environment = environment or OSEnvironment()

        _check_unknown(values, list(PROVIDER_SCHEMA) + [ASSUME_ROLE_BLOCK], "")

        self._resolved: Dict[str, Any] = {}
        # validated options first so a bad value fails before credentials are read
        for option in sorted(PROVIDER_SCHEMA.values(), key=lambda o: o.validator is None):
            self._resolved[option.name] = _resolve_option(option, values, self.environment, "")

        block = _single_block(values.get(ASSUME_ROLE_BLOCK))
        if block is not None:
            path = f"{ASSUME_ROLE_BLOCK}."
            _check_unknown(block, list(ASSUME_ROLE_SCHEMA), path)
            block = {
                option.name: _resolve_option(option, block, self.environment, path)
                for option in ASSUME_ROLE_SCHEMA.values()
            }
        self._resolved[ASSUME_ROLE_BLOCK] = block

    def get(self, key: str) -> Any:
        if key not in self._resolved:
            raise ConfigurationError(f"Unknown option '{key}'", key=key)
        return self._resolved[key]


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load provider options from a YAML file.

    The options may live under a top-level ``provider`` key or at the root.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary of option values

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse config file {path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    options = config.get("provider", config)
    if not isinstance(options, dict):
        raise ConfigurationError(f"'provider' section of {path} must be a mapping")

    logger.info(f"Loaded provider options from {path}")
    return options


def describe_schema() -> List[Dict[str, Any]]:
    """Describe every option, nested ones prefixed with their block name."""
    rows = []
    for path, schema in (("", PROVIDER_SCHEMA), (f"{ASSUME_ROLE_BLOCK}.", ASSUME_ROLE_SCHEMA)):
        for option in schema.values():
            rows.append({
                "name": f"{path}{option.name}",
                "type": option.type.__name__,
                "required": option.required,
                "env_var": option.env_var,
                "default": option.default if option.default != "" else None,
                "input_default": option.input_default,
                "sensitive": option.sensitive,
                "description": option.description,
            })
    return rows
