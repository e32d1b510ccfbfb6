"""Main CLI entry point for smartdns-web management commands."""

import click

from smartdns_web.cli.commands import acl, server
from smartdns_web.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="smartdns-web")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """smartdns-web CLI - ACL and DNS forwarding policy management.

    \b
    Commands:
      serve      Run the HTTP API
      acl        Submit, list and delete ACL policy blocks

    \b
    Quick Start:
      smartdns-web serve
      smartdns-web acl submit 10.0.0.0/24 --netmask 24 --master-dns 114.114.114.114
      smartdns-web acl hosts 10.0.0.0/30
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(acl.acl)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
