"""CLI entry point for peerbind."""

import json
import sys
import traceback
from pathlib import Path
from typing import Optional

import click
import structlog

from .bindings import Bindings
from .config import Config
from .exceptions import BindingsError, EnumerationError
from .utils.log_setup import configure_logging

logger = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--config-file", "-c",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Path to a JSON configuration file.",
    envvar="PEERBIND_CONFIG_FILE"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the logging level (e.g., DEBUG, INFO)."
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Override logging format."
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: Optional[str], log_format: Optional[str]) -> None:
    """peerbind - resolve which local addresses a peer-to-peer node should bind."""
    try:
        if config_file:
            cfg = Config.from_file(Path(config_file))
        else:
            cfg = Config()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)

    if log_level:
        cfg.logging.level = log_level.upper()
    if log_format:
        cfg.logging.format = log_format.lower()

    configure_logging(cfg.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command()
@click.option("--interface", "-i", "interfaces", multiple=True, help="Restrict discovery to this interface. Can be used multiple times.")
@click.option("--protocol", "-p", "protocols", multiple=True, type=click.Choice(["IPv4", "IPv6"], case_sensitive=False), help="Accept only this protocol family. Can be used multiple times.")
@click.pass_context
def discover(ctx: click.Context, interfaces: tuple, protocols: tuple) -> None:
    """Resolve the configured hints against this host's interfaces."""
    config: Config = ctx.obj["config"]
    log = logger.bind(node_name=config.node_name)

    try:
        bindings = Bindings.from_config(config.bindings)
        for name in interfaces:
            bindings.add_interface(name)
        for protocol in protocols:
            bindings.add_protocol(protocol)
        status = bindings.discover_local_interfaces()
    except EnumerationError as e:
        log.error("Interface enumeration failed", error=str(e), interface=e.interface)
        click.echo(f"Could not enumerate network interfaces: {e}", err=True)
        sys.exit(1)
    except BindingsError as e:
        click.echo(f"Invalid bindings configuration: {e}", err=True)
        sys.exit(2)

    snapshot = bindings.snapshot()
    click.echo(status)
    click.echo("\n--- Addresses ---")
    for address in snapshot.addresses:
        click.echo(f"  {address}")
    if snapshot.listen_broadcast:
        click.echo("\n--- Broadcast Addresses ---")
        for address in snapshot.broadcast_addresses:
            click.echo(f"  {address}")
    if snapshot.outside:
        click.echo("\n--- Outside Endpoint ---")
        click.echo(f"  {snapshot.outside.address} tcp={snapshot.outside.tcp_port} udp={snapshot.outside.udp_port}")


@cli.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    click.echo(f"peerbind v{__version__}")


@cli.command()
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(mode="json"), indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
