"""xac provider - TencentCloud credential resolution and client configuration."""

__version__ = "0.1.0"

from .credentials import Credential, Protocol, ProviderConfig
from .connectivity import ClientHandle
from .credentials.manager import AssemblerState, ProviderClientAssembler, configure_provider
from .errors import ConfigurationError, ExchangeError, ProviderError, ValidationError
from .provider import Provider, provider

__all__ = [
    "AssemblerState",
    "ClientHandle",
    "ConfigurationError",
    "Credential",
    "ExchangeError",
    "Protocol",
    "Provider",
    "ProviderClientAssembler",
    "ProviderConfig",
    "ProviderError",
    "ValidationError",
    "configure_provider",
    "provider",
]
