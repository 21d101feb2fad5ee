"""Interactive main menu"""

import click
from rich.console import Console

from hostkit.cli import access, bashrc, install, learn
from hostkit.lessons import LESSONS

console = Console()


def _invoke(ctx, command, **kwargs):
    """Run a command and come back to the menu even if it aborts"""
    try:
        ctx.invoke(command, **kwargs)
    except click.Abort:
        console.print("[yellow]Step aborted, back to menu[/yellow]")
    except click.BadParameter as e:
        console.print(f"[red]Error:[/red] {e.format_message()}")


def install_menu(ctx):
    console.print(
        "\n[bold]Install options[/bold]\n"
        "  1) Recommended\n"
        "  2) All\n"
        "  3) Custom\n"
        "  4) Back"
    )
    choice = click.prompt("Choose 1-4", type=click.IntRange(1, 4))
    commands = {1: install.recommended, 2: install.install_all_cmd, 3: install.custom}
    if choice in commands:
        _invoke(ctx, commands[choice])


def learn_menu(ctx):
    back = len(LESSONS) + 1
    while True:
        _invoke(ctx, learn.learn, chapter=None)
        console.print(f"  {back}) Back")
        chapter = click.prompt(f"Choose 1-{back}", type=click.IntRange(1, back))
        if chapter == back:
            return
        _invoke(ctx, learn.learn, chapter=chapter)
        click.prompt("Press Enter to continue", default="", show_default=False)


@click.command()
@click.pass_context
def menu(ctx):
    """Interactive menu"""
    while True:
        console.print(
            "\n[bold]What would you like to do[/bold]\n"
            "  1) Install tools\n"
            "  2) Add custom .bashrc\n"
            "  3) Tailscale access\n"
            "  4) Learn Linux commands\n"
            "  5) Exit"
        )
        choice = click.prompt("Choose 1-5", type=click.IntRange(1, 5))

        if choice == 1:
            install_menu(ctx)
        elif choice == 2:
            _invoke(ctx, bashrc.bashrc)
        elif choice == 3:
            _invoke(ctx, access.access)
        elif choice == 4:
            learn_menu(ctx)
        else:
            return
