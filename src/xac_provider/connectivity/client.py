"""Configured API client shared by every resource and data source."""

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from tencentcloud.common import credential as tc_credential
from tencentcloud.common.abstract_client import AbstractClient
from tencentcloud.common.common_client import CommonClient
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile

from .. import ratelimit
from ..credentials.models import Credential, Protocol
from ..errors import ApiError


logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "tencentcloudapi.com"
DEFAULT_TIMEOUT = 30.0
SIGN_METHOD = "TC3-HMAC-SHA256"


class ServiceClient:
    """Client for a single TencentCloud service.

    The SDK client is built per call from the handle's current credential,
    so a credential swap on the handle is picked up by the next call.
    """

    def __init__(self, handle: "ClientHandle", service: str, version: str):
        self.handle = handle
        self.service = service
        self.version = version

    @property
    def host(self) -> str:
        return self.handle.host(self.service)

    def sdk_client(self, timeout: Optional[float] = None) -> AbstractClient:
        """Build the SDK client for this service."""
        return CommonClient(
            self.service,
            self.version,
            self.handle.sdk_credential(),
            self.handle.region,
            profile=self.handle.client_profile(self.service, timeout),
        )

    def call(
        self,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """Dispatch an API action.

        The rate limiter is consulted before anything is sent.

        Args:
            action: API action name
            params: Request parameters
            timeout: Request timeout in seconds (defaults to the handle's)

        Returns:
            The ``Response`` object of the reply

        Raises:
            RateLimitExceeded: If the action is throttled
            ApiError: If the SDK reports an API or network error
        """
        ratelimit.check(action)

        logger.debug(f"Calling {self.service}:{action} at {self.host}")
        try:
            body = self.sdk_client(timeout).call_json(action, params or {})
        except TencentCloudSDKException as e:
            raise ApiError(e.get_code(), e.get_message(), e.get_request_id()) from e

        result = body.get("Response") if isinstance(body, dict) else None
        if not isinstance(result, dict):
            raise ApiError("InvalidResponse", "Response envelope is missing")
        return result


class ClientHandle:
    """The finished API client of one provider run.

    The credential is held as a single reference and is only ever replaced
    as a whole under the lock, so concurrent readers never see a mix of two
    credentials.
    """

    def __init__(
        self,
        credential: Credential,
        region: str,
        protocol: Protocol = Protocol.HTTPS,
        domain: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        language: Optional[str] = None
    ):
        self._credential = credential
        self.region = region
        self.protocol = Protocol(protocol)
        self.domain = domain or None
        self.timeout = timeout
        self.language = language
        self._clients: Dict[Tuple[str, str], ServiceClient] = {}
        self._lock = threading.Lock()

    @property
    def credential(self) -> Credential:
        with self._lock:
            return self._credential

    def replace_credential(self, credential: Credential) -> None:
        """Swap in a new credential atomically."""
        with self._lock:
            self._credential = credential
        logger.debug(f"Credential replaced with {credential.masked_id()}")

    def sdk_credential(self) -> tc_credential.Credential:
        """SDK credential for a snapshot of the current credential."""
        current = self.credential
        return tc_credential.Credential(current.secret_id, current.secret_key, current.token or None)

    def client_profile(self, service: str, timeout: Optional[float] = None) -> ClientProfile:
        """SDK profile carrying protocol, endpoint, timeout and language."""
        http_profile = HttpProfile(
            protocol=self.protocol.value.lower(),
            endpoint=self.host(service),
            reqTimeout=timeout if timeout is not None else self.timeout,
        )
        options = {"signMethod": SIGN_METHOD, "httpProfile": http_profile}
        if self.language:
            options["language"] = self.language
        return ClientProfile(**options)

    def host(self, service: str) -> str:
        return f"{service}.{self.domain or DEFAULT_DOMAIN}"

    def endpoint(self, service: str) -> str:
        return f"{self.protocol.value.lower()}://{self.host(service)}"

    def client(self, service: str, version: str) -> ServiceClient:
        """Get the client of a service, creating it on first use."""
        key = (service, version)
        with self._lock:
            if key not in self._clients:
                self._clients[key] = ServiceClient(self, service, version)
            return self._clients[key]

    def use_sts_client(self) -> "StsClient":
        """Get the STS client used for token exchange."""
        # imported here to avoid a circular import
        from .sts import StsClient, STS_SERVICE, STS_VERSION

        key = (STS_SERVICE, STS_VERSION)
        with self._lock:
            client = self._clients.get(key)
            if not isinstance(client, StsClient):
                client = StsClient(self)
                self._clients[key] = client
            return client

    def close(self) -> None:
        """Drop the cached service clients."""
        with self._lock:
            self._clients.clear()

    def _fields(self) -> tuple:
        return (self.credential, self.region, self.protocol, self.domain)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClientHandle):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"ClientHandle(credential={self.credential!r}, region={self.region!r}, "
            f"protocol={self.protocol.value!r}, domain={self.domain!r})"
        )
