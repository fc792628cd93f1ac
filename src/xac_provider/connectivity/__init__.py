"""TencentCloud API clients built on a configured ClientHandle."""

from .client import ClientHandle, ServiceClient
from .sts import StsClient, TokenExchangeClient

__all__ = ["ClientHandle", "ServiceClient", "StsClient", "TokenExchangeClient"]
