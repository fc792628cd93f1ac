"""Command-line interface for the xac provider."""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .environment import DotEnvEnvironment, OSEnvironment
from .errors import ProviderError
from .provider import provider
from .schema import describe_schema, load_config_file
from .settings import get_settings


logger = logging.getLogger(__name__)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(debug: bool):
    """xac provider - TencentCloud credential resolution."""
    level = logging.DEBUG if debug else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@main.command()
@click.option('--config', '-c', type=Path, default=None, help='Provider config file (YAML)')
@click.option('--env-file', '-e', type=Path, default=None, help='.env file with TENCENTCLOUD_* variables')
def configure(config: Optional[Path], env_file: Optional[Path]):
    """Resolve credentials and show the configured client."""
    try:
        values = load_config_file(config) if config else {}
        environment = DotEnvEnvironment(env_file) if env_file else OSEnvironment()

        xac = provider()
        handle = xac.configure(values, environment)
        credential = handle.credential

        click.echo("✓ Provider configured")
        click.echo(f"  Region:    {handle.region}")
        click.echo(f"  Protocol:  {handle.protocol.value}")
        click.echo(f"  Endpoint:  {handle.endpoint('sts')}")
        click.echo(f"  Secret ID: {credential.masked_id()}")
        click.echo(f"  Temporary: {'yes' if credential.is_temporary else 'no'}")
        handle.close()

    except ProviderError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the schema as JSON')
def schema(as_json: bool):
    """Show the provider options."""
    rows = describe_schema()
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="xac provider options")
    table.add_column("Option")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Environment")
    table.add_column("Default")

    for row in rows:
        default = row["default"] or row["input_default"] or ""
        table.add_row(
            row["name"],
            row["type"],
            "yes" if row["required"] else "no",
            row["env_var"] or "",
            "(sensitive)" if row["sensitive"] else str(default),
        )

    Console().print(table)


@main.command()
def resources():
    """List resources and data sources."""
    description = provider().describe()

    click.echo("Data sources:")
    for name in description["data_sources"]:
        click.echo(f"  {name}")

    click.echo("Resources:")
    for name in description["resources"]:
        click.echo(f"  {name}")


@main.command()
def config_template():
    """Generate a config file template."""
    template = """# xac provider configuration
provider:
  secret_id: YOUR_SECRET_ID
  secret_key: YOUR_SECRET_KEY
  region: ap-guangzhou
  # protocol: HTTPS
  # domain: tencentcloudapi.com

  # Optional: exchange the credentials above for a role's temporary credentials
  # assume_role:
  #   role_arn: qcs::cam::uin/100000000001:roleName/my-role
  #   session_name: xac-session
  #   session_duration: 7200
  #   policy: ""
"""
    click.echo(template)


if __name__ == "__main__":
    main()
