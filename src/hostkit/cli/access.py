"""Tailscale SSH access command"""

import click
from rich.console import Console

from hostkit.access.device import TailscaleDevice
from hostkit.access.provisioner import AccessProvisioner
from hostkit.api.client import PolicyClient
from hostkit.api.models import normalize_tag
from hostkit.errors import HostkitError, ProvisioningFailed
from hostkit.installer.packages import PackageInstaller
from hostkit.installer.tailscale import TailscaleInstaller

console = Console()


@click.command()
@click.option("--tailnet", help="Tailnet name, for example example.com")
@click.option("--token", help="Tailscale API access token")
@click.option("--tag", help="Tag to use for this device")
@click.option("--grantee", help="Tailnet user allowed to SSH in")
@click.pass_context
def access(ctx, tailnet, token, tag, grantee):
    """Enroll this device and grant Tailscale SSH access to it"""
    cfg = ctx.obj["config"]
    ts_cfg = cfg["tailscale"]
    access_cfg = cfg["access"]

    tailnet = tailnet or ts_cfg["tailnet"] or click.prompt("Tailnet name, for example example.com")
    token = token or ts_cfg["token"] or click.prompt(
        f"Tailscale API access token for {tailnet}", hide_input=True
    )
    tag = tag or click.prompt("Tag to use for this device", default=access_cfg["tag"])
    grantee = grantee or access_cfg["grantee"] or click.prompt("Tailnet user to grant SSH access")

    try:
        tag = normalize_tag(tag)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--tag")

    executor = ctx.obj["executor"]
    client = PolicyClient(
        tailnet,
        token,
        base_url=ts_cfg["api_url"],
        timeout=float(ts_cfg["timeout"]),
    )
    provisioner = AccessProvisioner(
        client,
        TailscaleDevice(executor),
        PackageInstaller(executor),
        TailscaleInstaller(executor, ts_cfg["install_script_url"]),
        tag=tag,
        grantee=grantee,
        owners=access_cfg["owners"],
        users=access_cfg["users"],
        required_tools=access_cfg["required_tools"],
        push_policy=access_cfg["push_policy"],
    )

    console.print(f"[bold]Tailscale access setup for {tag} in {tailnet}[/bold]")
    try:
        result = provisioner.run()
        if not result.ok:
            raise ProvisioningFailed(result.failed_step.value, result.error)
    except HostkitError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise click.Abort()

    for step in result.completed:
        console.print(f"  ✓ {step.value}")
    if not result.policy_changed:
        console.print("[dim]Policy already up to date[/dim]")
    console.print(
        f"\n[green]✓ Done.[/green] {grantee} can Tailscale SSH to devices with {tag} in {tailnet}."
    )
