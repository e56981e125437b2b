"""Setup command for TradeJournal CLI.

Creates the configuration file on first use.
"""

import click
from rich.console import Console
from rich.panel import Panel

from tradejournal.config import create_template_config, get_config_path, get_db_path, load_config

console = Console()


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create the configuration file.

    Writes a template config.toml with the journal database path and
    an empty OpenAI section. The API key can also come from the
    OPENAI_API_KEY environment variable.
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        config = load_config()
        console.print(Panel(
            f"[yellow]Configuration already exists:[/yellow]\n"
            f"[cyan]{config_path}[/cyan]\n\n"
            f"[dim]Journal database: {get_db_path(config)}\n"
            "Use --force to overwrite it.[/dim]",
            title="[bold]Configuration[/bold]",
            border_style="yellow",
        ))
        return

    config_path = create_template_config()
    console.print(Panel(
        f"[green]✓[/green] Configuration file created at:\n"
        f"[cyan]{config_path}[/cyan]\n\n"
        "[dim]Add your OpenAI API key to use [cyan]tradejournal ask[/cyan] "
        "and [cyan]tradejournal sweeps[/cyan].[/dim]",
        title="[bold green]Configuration Created[/bold green]",
        border_style="green",
    ))
