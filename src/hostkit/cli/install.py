"""Installation commands"""

from pathlib import Path
from typing import Any, Dict, Sequence

import click
from rich.console import Console

from hostkit.errors import HostkitError
from hostkit.installer.compose import SERVICES, deploy_service
from hostkit.installer.docker import DockerInstaller
from hostkit.installer.packages import PackageInstaller
from hostkit.privilege.executor import PrivilegedExecutor
from hostkit.system.runner import invoking_user

console = Console()

# custom list entries that are not apt packages
SPECIAL_ITEMS = ("docker", "n8n-docker", "wazuh-docker")


@click.group()
def install():
    """Install tools and services"""
    pass


@install.command("recommended")
@click.pass_context
def recommended(ctx):
    """Install the recommended set and Docker"""
    _run(install_recommended, ctx.obj["executor"], ctx.obj["config"])


@install.command("all")
@click.pass_context
def install_all_cmd(ctx):
    """Install everything, including n8n and Wazuh"""
    _run(install_all, ctx.obj["executor"], ctx.obj["config"])


@install.command("custom")
@click.argument("items", nargs=-1)
@click.pass_context
def custom(ctx, items):
    """Install a custom list of packages and services"""
    if not items:
        console.print("Pick what you want, space separated.")
        console.print(f"Options: {' '.join(ctx.obj['config']['install']['recommended'] + list(SPECIAL_ITEMS))}")
        items = click.prompt("Your list").split()
    _run(install_custom, ctx.obj["executor"], ctx.obj["config"], items)


@install.command("docker")
@click.pass_context
def docker(ctx):
    """Install Docker Engine and compose"""
    executor = ctx.obj["executor"]
    _run(lambda: DockerInstaller(executor, PackageInstaller(executor)).install(invoking_user()))


@install.command("n8n")
@click.pass_context
def n8n(ctx):
    """Deploy n8n with docker compose"""
    _run(deploy, ctx.obj["executor"], ctx.obj["config"], "n8n")


@install.command("wazuh")
@click.pass_context
def wazuh(ctx):
    """Deploy the Wazuh manager with docker compose"""
    _run(deploy, ctx.obj["executor"], ctx.obj["config"], "wazuh")


def install_recommended(executor: PrivilegedExecutor, config: Dict[str, Any]):
    """Recommended packages, an SSH server and Docker"""
    console.print("[cyan]Installing recommended set[/cyan]")
    packages = PackageInstaller(executor)
    packages.update()
    packages.install(config["install"]["recommended"])

    if not executor.run(["systemctl", "enable", "--now", "ssh"], check=False).ok:
        executor.run(["systemctl", "enable", "--now", "sshd"], check=False)

    DockerInstaller(executor, packages).install(invoking_user())
    console.print("[green]✓ Recommended install complete[/green]")


def install_all(executor: PrivilegedExecutor, config: Dict[str, Any]):
    """Recommended set plus every compose service"""
    install_recommended(executor, config)
    deploy(executor, config, "n8n")
    deploy(executor, config, "wazuh")
    console.print("[green]✓ All installs complete[/green]")


def install_custom(executor: PrivilegedExecutor, config: Dict[str, Any], items: Sequence[str]):
    """apt packages plus the special docker/n8n-docker/wazuh-docker items"""
    packages = PackageInstaller(executor)
    packages.update()

    apt_packages = []
    for item in items:
        if item == "docker":
            DockerInstaller(executor, packages).install(invoking_user())
        elif item == "n8n-docker":
            deploy(executor, config, "n8n")
        elif item == "wazuh-docker":
            deploy(executor, config, "wazuh")
        else:
            apt_packages.append(item)

    packages.install(apt_packages)
    console.print("[green]✓ Custom install complete[/green]")


def deploy(executor: PrivilegedExecutor, config: Dict[str, Any], name: str):
    """Deploy one compose service"""
    summary = deploy_service(executor, SERVICES[name], Path(config["install"]["compose_root"]))
    if summary:
        console.print(summary)
    console.print(f"[green]✓[/green] {SERVICES[name].ready_message}")


def _run(func, *args):
    try:
        func(*args)
    except HostkitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()
