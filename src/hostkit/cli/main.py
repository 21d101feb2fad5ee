#!/usr/bin/env python3
"""hostkit CLI - Main entry point"""

from pathlib import Path

import click
from rich.console import Console

from hostkit.config.manager import DEFAULT_CONFIG_PATH, ConfigManager
from hostkit.log import setup_logging
from hostkit.privilege import CredentialStore, PrivilegedExecutor

console = Console()


@click.group()
@click.option("--config", type=click.Path(dir_okay=False), help="Config file path")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, config, verbose):
    """hostkit - provision this machine"""
    ctx.ensure_object(dict)

    # Load configuration
    config_path = Path(config) if config else DEFAULT_CONFIG_PATH
    cfg = ConfigManager(config_path).load()

    level = "debug" if verbose else cfg["logging"]["level"]
    setup_logging(level, cfg["logging"].get("file"))

    ctx.obj["config"] = cfg
    ctx.obj["verbose"] = verbose

    # one credential cache per process, shared by every command
    if "executor" not in ctx.obj:
        credentials = CredentialStore(
            Path(cfg["credential"]["path"]),
            max_attempts=int(cfg["credential"]["max_attempts"]),
        )
        ctx.obj["executor"] = PrivilegedExecutor(credentials)


@cli.command()
def version():
    """Show version information"""
    from hostkit import __version__

    console.print(f"hostkit version {__version__}")


# Import subcommands
from hostkit.cli import access, bashrc, install, learn, menu

cli.add_command(install.install)
cli.add_command(bashrc.bashrc)
cli.add_command(access.access)
cli.add_command(learn.learn)
cli.add_command(menu.menu)


if __name__ == "__main__":
    cli()
