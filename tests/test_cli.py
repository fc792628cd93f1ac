"""
tests/test_cli.py - command-line interface
"""

import json

import pytest
from click.testing import CliRunner

from xac_provider.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestSchemaCommand:
    """schema"""

    def test_json(self, runner):
        result = runner.invoke(main, ["schema", "--json"])

        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert {row["name"] for row in rows} >= {"secret_id", "region", "assume_role.policy"}

    def test_table(self, runner):
        result = runner.invoke(main, ["schema"])

        assert result.exit_code == 0
        assert "secret_id" in result.output


class TestResourcesCommand:
    """resources"""

    def test_lists_catalog(self, runner):
        result = runner.invoke(main, ["resources"])

        assert result.exit_code == 0
        assert "tencentcloud_cos_bucket_policy" in result.output
        assert "tencentcloud_audit_cos_regions" in result.output


class TestConfigTemplateCommand:
    """config-template"""

    def test_template(self, runner):
        result = runner.invoke(main, ["config-template"])

        assert result.exit_code == 0
        assert "provider:" in result.output
        assert "assume_role" in result.output


class TestConfigureCommand:
    """configure"""

    def test_configure_from_files(self, runner, tmp_path):
        config = tmp_path / "provider.yml"
        config.write_text("provider:\n  region: ap-beijing\n  protocol: HTTP\n")
        env_file = tmp_path / ".env"
        env_file.write_text(
            "TENCENTCLOUD_SECRET_ID=AKID1234567890WXYZ\n"
            "TENCENTCLOUD_SECRET_KEY=cli-secret-key\n"
        )

        result = runner.invoke(main, ["configure", "--config", str(config), "--env-file", str(env_file)])

        assert result.exit_code == 0
        assert "ap-beijing" in result.output
        assert "http://sts.tencentcloudapi.com" in result.output
        assert "AKID**********WXYZ" in result.output
        assert "cli-secret-key" not in result.output

    def test_configure_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("TENCENTCLOUD_SECRET_ID", "AKIDenv")
        monkeypatch.setenv("TENCENTCLOUD_SECRET_KEY", "env-key")
        monkeypatch.setenv("TENCENTCLOUD_REGION", "ap-shanghai")

        result = runner.invoke(main, ["configure"])

        assert result.exit_code == 0
        assert "ap-shanghai" in result.output

    def test_invalid_protocol(self, runner, tmp_path):
        config = tmp_path / "provider.yml"
        config.write_text("provider:\n  protocol: FTP\n")

        result = runner.invoke(main, ["configure", "--config", str(config)])

        assert result.exit_code == 1
        assert "protocol" in result.output

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(main, ["configure", "--config", str(tmp_path / "missing.yml")])

        assert result.exit_code == 1
