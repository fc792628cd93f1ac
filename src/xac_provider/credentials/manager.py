"""Provider client assembly: credentials in, configured client out."""

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .. import ratelimit
from ..connectivity.client import ClientHandle
from ..connectivity.sts import TokenExchangeClient
from ..environment import EnvironmentProvider, OSEnvironment
from ..errors import ExchangeError, ProviderError, ValidationError
from ..schema import ASSUME_ROLE_BLOCK, ConfigurationSource, SchemaConfigurationSource
from ..settings import RuntimeSettings, get_settings
from .assume_role import AssumeRoleRequest, build_assume_role_request
from .models import AssumeRoleSpec, Credential, ProviderConfig


logger = logging.getLogger(__name__)

ExchangeClientFactory = Callable[[ClientHandle], TokenExchangeClient]


class AssemblerState(Enum):
    """Progress of a provider configuration run."""

    UNCONFIGURED = "unconfigured"
    BASE_CREDENTIAL_LOADED = "base_credential_loaded"
    ASSUME_ROLE_REQUESTED = "assume_role_requested"
    ASSUME_ROLE_GRANTED = "assume_role_granted"
    READY = "ready"
    FAILED = "failed"


def _default_exchange_client(handle: ClientHandle) -> TokenExchangeClient:
    return handle.use_sts_client()


class ProviderClientAssembler:
    """Builds the ClientHandle of a provider run."""

    def __init__(
        self,
        source: ConfigurationSource,
        environment: Optional[EnvironmentProvider] = None,
        exchange_client_factory: Optional[ExchangeClientFactory] = None,
        settings: Optional[RuntimeSettings] = None
    ):
        """Initialize the assembler.

        Args:
            source: Resolved provider options
            environment: Environment for the session duration fallback
            exchange_client_factory: Builds the token exchange client from the
                base handle (defaults to the handle's STS client)
            settings: Runtime settings (timeouts, language)
        """
        self.source = source
        self.environment = environment or OSEnvironment()
        self.exchange_client_factory = exchange_client_factory or _default_exchange_client
        self.settings = settings or get_settings()
        self.state = AssemblerState.UNCONFIGURED

    def load_config(self) -> ProviderConfig:
        """Read the provider options into a ProviderConfig."""
        protocol = self.source.get("protocol")
        credential = Credential(
            secret_id=self.source.get("secret_id"),
            secret_key=self.source.get("secret_key"),
            token=self.source.get("security_token") or "",
        )

        # at most one block is admitted by the source
        block: Optional[Mapping[str, Any]] = self.source.get(ASSUME_ROLE_BLOCK)

        try:
            return ProviderConfig(
                credential=credential,
                region=self.source.get("region"),
                protocol=protocol,
                domain=self.source.get("domain") or None,
                assume_role=AssumeRoleSpec(**block) if block is not None else None,
            )
        except PydanticValidationError as e:
            error = e.errors()[0]
            key = ".".join(str(part) for part in error["loc"])
            raise ValidationError(f"Invalid provider option '{key}': {error['msg']}", key=key) from e

    def _exchange(self, handle: ClientHandle, request: AssumeRoleRequest) -> Credential:
        try:
            exchange_client = self.exchange_client_factory(handle)
            return exchange_client.exchange(request, timeout=self.settings.sts_timeout)
        except ProviderError:
            raise
        except Exception as e:
            raise ExchangeError(f"AssumeRole failed: {e}") from e

    def assemble(self) -> ClientHandle:
        """Resolve credentials and return the configured client.

        Returns:
            A fully credentialed ClientHandle

        Raises:
            ConfigurationError: If an option is missing or unparsable
            ValidationError: If an option is out of range
            ExchangeError: If the AssumeRole exchange fails
        """
        self.state = AssemblerState.UNCONFIGURED
        ratelimit.set_default_config(ratelimit.RateLimiterConfig(
            requests_per_second=self.settings.rate_limit_per_second,
            burst_size=self.settings.rate_limit_burst,
            wait_timeout=self.settings.rate_limit_wait_timeout,
        ))
        handle = None
        try:
            config = self.load_config()
            handle = ClientHandle(
                credential=config.credential,
                region=config.region,
                protocol=config.protocol,
                domain=config.domain,
                timeout=self.settings.sts_timeout,
                language=self.settings.language,
            )
            self.state = AssemblerState.BASE_CREDENTIAL_LOADED
            logger.info(
                f"Loaded credential {config.credential.masked_id()} for region {config.region}"
            )

            if config.assume_role is not None:
                self.state = AssemblerState.ASSUME_ROLE_REQUESTED
                request = build_assume_role_request(config.assume_role, self.environment)
                logger.info(
                    f"Assuming role {request.role_arn} as session '{request.role_session_name}' "
                    f"for {request.duration_seconds}s"
                )
                temporary = self._exchange(handle, request)
                handle.replace_credential(temporary)
                self.state = AssemblerState.ASSUME_ROLE_GRANTED

            self.state = AssemblerState.READY
            return handle
        except Exception as e:
            self.state = AssemblerState.FAILED
            if handle is not None:
                handle.close()
            logger.error(f"Provider configuration failed: {e}")
            raise


def configure_provider(
    values: Optional[Mapping[str, Any]] = None,
    environment: Optional[EnvironmentProvider] = None,
    exchange_client_factory: Optional[ExchangeClientFactory] = None,
    settings: Optional[RuntimeSettings] = None
) -> ClientHandle:
    """Resolve provider options and build the ClientHandle.

    Args:
        values: Explicit option values; unset options fall back to the environment
        environment: Environment provider (defaults to the process environment)
        exchange_client_factory: Token exchange client factory
        settings: Runtime settings

    Returns:
        Configured client handle
    """
    environment = environment or OSEnvironment()
    source = SchemaConfigurationSource(values, environment)
    assembler = ProviderClientAssembler(
        source,
        environment=environment,
        exchange_client_factory=exchange_client_factory,
        settings=settings,
    )
    return assembler.assemble()
