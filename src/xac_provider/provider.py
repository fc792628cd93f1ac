"""The xac provider: option schema, catalog and the configure entry point."""

import logging
from typing import Any, Dict, List, Mapping, Optional


from .connectivity.client import ClientHandle
from .credentials.manager import ExchangeClientFactory, ProviderClientAssembler
from .environment import EnvironmentProvider, OSEnvironment
from .schema import ASSUME_ROLE_SCHEMA, PROVIDER_SCHEMA, SchemaConfigurationSource, describe_schema
from .settings import RuntimeSettings


logger = logging.getLogger(__name__)

DATA_SOURCES = [
    "tencentcloud_cos_bucket_object",
    "tencentcloud_cos_buckets",
    "tencentcloud_audit_cos_regions",
]

RESOURCES = [
    "tencentcloud_cos_bucket",
    "tencentcloud_cos_bucket_object",
    "tencentcloud_cos_bucket_policy",
]


class Provider:
    """Provider definition handed to the host process.

    ``configure`` runs once per run; the resulting ClientHandle is kept as
    ``meta`` and shared read-only by every resource and data source.
    """

    def __init__(
        self,
        exchange_client_factory: Optional[ExchangeClientFactory] = None,
        settings: Optional[RuntimeSettings] = None
    ):
        self.schema = PROVIDER_SCHEMA
        self.assume_role_schema = ASSUME_ROLE_SCHEMA
        self.data_sources: List[str] = list(DATA_SOURCES)
        self.resources: List[str] = list(RESOURCES)
        self.exchange_client_factory = exchange_client_factory
        self.settings = settings
        self.meta: Optional[ClientHandle] = None

    def configure(
        self,
        values: Optional[Mapping[str, Any]] = None,
        environment: Optional[EnvironmentProvider] = None
    ) -> ClientHandle:
        """Configure the provider and return its client.

        Args:
            values: Explicit provider options
            environment: Environment provider for option fallbacks

        Returns:
            The configured client handle
        """
        environment = environment or OSEnvironment()
        source = SchemaConfigurationSource(values, environment)
        assembler = ProviderClientAssembler(
            source,
            environment=environment,
            exchange_client_factory=self.exchange_client_factory,
            settings=self.settings,
        )
        self.meta = assembler.assemble()
        logger.info(
            f"Provider configured with {len(self.resources)} resources "
            f"and {len(self.data_sources)} data sources"
        )
        return self.meta

    def describe(self) -> Dict[str, Any]:
        """Serializable description of the provider."""
        return {
            "options": describe_schema(),
            "resources": sorted(self.resources),
            "data_sources": sorted(self.data_sources),
        }


def provider(**kwargs) -> Provider:
    """Create the provider."""
    return Provider(**kwargs)
