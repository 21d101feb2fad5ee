"""Linux lessons"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hostkit.lessons import LESSONS, get_lesson

console = Console()


@click.command()
@click.argument("chapter", type=int, required=False)
def learn(chapter):
    """Learn Linux commands, list chapters or show one"""
    if chapter is None:
        table = Table(title="Learn Linux, pick a chapter")
        table.add_column("#", style="cyan")
        table.add_column("Chapter")
        for number, lesson in enumerate(LESSONS, start=1):
            table.add_row(str(number), lesson.title)
        console.print(table)
        return

    lesson = get_lesson(chapter)
    if lesson is None:
        raise click.BadParameter(f"choose 1-{len(LESSONS)}", param_hint="CHAPTER")

    console.print(Panel(lesson.body, title=lesson.title, expand=False))
