"""
tests/conftest.py - shared fixtures

Provides isolated environments, runtime settings and a fake token exchange
client so tests never touch the process environment or the network.
"""

import json
import os
from typing import Dict, List, Optional
from unittest import mock

import pytest
from tencentcloud.sts.v20180813 import sts_client

from xac_provider import ratelimit
from xac_provider.connectivity.sts import TokenExchangeClient
from xac_provider.credentials.assume_role import AssumeRoleRequest
from xac_provider.credentials.models import Credential
from xac_provider.environment import MappingEnvironment
from xac_provider.settings import RuntimeSettings


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove TENCENTCLOUD_* and XAC_* variables from the process environment"""
    for name in list(os.environ):
        if name.startswith("TENCENTCLOUD_") or name.startswith("XAC_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_limiters():
    """Isolate the rate limiter registry between tests"""
    ratelimit.reset_rate_limiters()
    yield
    ratelimit.reset_rate_limiters()


@pytest.fixture
def empty_env():
    return MappingEnvironment({})


@pytest.fixture
def settings():
    """Runtime settings independent of .env files"""
    return RuntimeSettings(
        _env_file=None,
        sts_timeout=5.0,
        rate_limit_wait_timeout=1.0,
    )


@pytest.fixture
def base_values() -> Dict[str, str]:
    return {
        "secret_id": "AKIDbase0000000000000000",
        "secret_key": "base-secret-key",
        "region": "ap-guangzhou",
    }


@pytest.fixture
def assume_role_values(base_values) -> Dict:
    values = dict(base_values)
    values["assume_role"] = {
        "role_arn": "qcs::cam::uin/100000000001:roleName/deployer",
        "session_name": "xac-test",
        "session_duration": 3600,
    }
    return values


@pytest.fixture
def temporary_credential() -> Credential:
    return Credential(
        secret_id="AKIDtemp1111111111111111",
        secret_key="temp-secret-key",
        token="temp-session-token",
    )


# =============================================================================
# Token exchange fakes
# =============================================================================


class FakeExchangeClient(TokenExchangeClient):
    """Records requests and returns a fixed credential or raises an error"""

    def __init__(self, credential: Optional[Credential] = None, error: Optional[Exception] = None):
        self.credential = credential
        self.error = error
        self.requests: List[AssumeRoleRequest] = []
        self.timeouts: List[Optional[float]] = []

    def exchange(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.error:
            raise self.error
        return self.credential


@pytest.fixture
def fake_exchange(temporary_credential):
    return FakeExchangeClient(credential=temporary_credential)


# =============================================================================
# SDK transport fakes
# =============================================================================


def sts_success_body(credential: Credential) -> Dict:
    return {
        "Response": {
            "Credentials": {
                "TmpSecretId": credential.secret_id,
                "TmpSecretKey": credential.secret_key,
                "Token": credential.token,
            },
            "ExpiredTime": 1700000000,
            "Expiration": "2023-11-14T22:13:20Z",
            "RequestId": "req-0001",
        }
    }


def sent_params(call: mock.MagicMock, index: int = 0) -> Dict:
    """Parameters the SDK client passed to its transport"""
    return call.call_args_list[index][0][1]


@pytest.fixture
def sts_call(temporary_credential):
    """Replace the STS SDK transport with a canned AssumeRole reply"""
    body = json.dumps(sts_success_body(temporary_credential))
    with mock.patch.object(sts_client.StsClient, "call", return_value=body) as call:
        yield call
