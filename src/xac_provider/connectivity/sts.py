"""STS token exchange client."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Optional

from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.sts.v20180813 import models, sts_client

from .. import ratelimit
from ..credentials.assume_role import AssumeRoleRequest
from ..credentials.models import Credential
from ..errors import ExchangeError
from .client import ClientHandle, ServiceClient


logger = logging.getLogger(__name__)

STS_SERVICE = "sts"
STS_VERSION = "2018-08-13"


class TokenExchangeClient(ABC):
    """Exchanges an AssumeRole request for temporary credentials."""

    @abstractmethod
    def exchange(self, request: AssumeRoleRequest, timeout: Optional[float] = None) -> Credential:
        """Perform the exchange.

        Raises:
            ExchangeError: If the exchange fails for any reason
        """
        pass


class StsClient(ServiceClient, TokenExchangeClient):
    """Client for the STS service."""

    def __init__(self, handle: ClientHandle):
        super().__init__(handle, STS_SERVICE, STS_VERSION)

    def sdk_client(self, timeout: Optional[float] = None) -> sts_client.StsClient:
        return sts_client.StsClient(
            self.handle.sdk_credential(),
            self.handle.region,
            self.handle.client_profile(self.service, timeout),
        )

    def assume_role(self, request: AssumeRoleRequest, timeout: Optional[float] = None) -> Credential:
        """Call AssumeRole and return the temporary credential.

        Args:
            request: The AssumeRole request
            timeout: Seconds to wait for the reply

        Returns:
            A new credential built from TmpSecretId, TmpSecretKey and Token

        Raises:
            RateLimitExceeded: If AssumeRole is throttled locally
            ExchangeError: On SDK, network, API or response errors
        """
        ratelimit.check(request.action)

        sdk_request = models.AssumeRoleRequest()
        sdk_request.from_json_string(json.dumps(request.to_params()))

        try:
            response = self.sdk_client(timeout).AssumeRole(sdk_request)
        except TencentCloudSDKException as e:
            raise ExchangeError(
                f"AssumeRole failed: [{e.get_code()}] {e.get_message()} "
                f"(RequestId: {e.get_request_id()})"
            ) from e

        credentials = response.Credentials
        if credentials is None:
            raise ExchangeError(
                f"AssumeRole response is missing credentials (RequestId: {response.RequestId})"
            )

        credential = Credential(
            secret_id=credentials.TmpSecretId or "",
            secret_key=credentials.TmpSecretKey or "",
            token=credentials.Token or "",
        )
        if not credential.is_usable or not credential.is_temporary:
            raise ExchangeError(
                f"AssumeRole returned empty credentials (RequestId: {response.RequestId})"
            )

        logger.info(
            f"Assumed role {request.role_arn}, temporary credential {credential.masked_id()} "
            f"expires {response.Expiration or 'unknown'}"
        )
        return credential

    def exchange(self, request: AssumeRoleRequest, timeout: Optional[float] = None) -> Credential:
        return self.assume_role(request, timeout=timeout)
