"""
tests/test_provider.py - Provider definition
"""

import pytest

from xac_provider import provider
from xac_provider.errors import ConfigurationError
from xac_provider.provider import DATA_SOURCES, RESOURCES, Provider

from tests.conftest import FakeExchangeClient


class TestProvider:
    """Provider"""

    def test_catalog(self):
        xac = provider()

        assert isinstance(xac, Provider)
        assert "tencentcloud_cos_bucket" in xac.resources
        assert "tencentcloud_cos_buckets" in xac.data_sources
        assert xac.meta is None

    def test_configure_sets_meta(self, assume_role_values, empty_env, settings, temporary_credential):
        exchange = FakeExchangeClient(credential=temporary_credential)
        xac = provider(exchange_client_factory=lambda handle: exchange, settings=settings)

        handle = xac.configure(assume_role_values, empty_env)

        assert xac.meta is handle
        assert handle.credential == temporary_credential

    def test_configure_failure_leaves_meta_unset(self, empty_env, settings):
        xac = provider(settings=settings)

        with pytest.raises(ConfigurationError):
            xac.configure({}, empty_env)
        assert xac.meta is None

    def test_describe(self):
        description = provider().describe()

        assert description["resources"] == sorted(RESOURCES)
        assert description["data_sources"] == sorted(DATA_SOURCES)
        names = [row["name"] for row in description["options"]]
        assert "secret_id" in names
        assert "assume_role.role_arn" in names
