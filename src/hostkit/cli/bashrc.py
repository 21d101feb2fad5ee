"""Shell profile command"""

import click
from rich.console import Console

from hostkit.installer.bashrc import bashrc_path, patch_bashrc
from hostkit.system.runner import invoking_user

console = Console()


@click.command()
@click.option("--user", help="User whose .bashrc is patched (default: invoking user)")
@click.pass_context
def bashrc(ctx, user):
    """Add the hostkit aliases and prompt to .bashrc"""
    user = user or invoking_user()
    target = bashrc_path(user)

    try:
        changed = patch_bashrc(target, owner=user, executor=ctx.obj["executor"])
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot update {target}: {e}")
        raise click.Abort()

    if changed:
        console.print(f"[green]✓[/green] Updated {target}")
    else:
        console.print(f"[yellow].bashrc already patched:[/yellow] {target}")
