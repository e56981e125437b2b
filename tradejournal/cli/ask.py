"""AI analysis commands for TradeJournal CLI.

Sends the journal to the Journal Analyst Agent and shows its answer.
"""

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from tradejournal.config import get_config_path, get_db_path, load_config

console = Console()


def _config_error(message: str) -> None:
    console.print(Panel(
        f"[red]{message}[/red]\n\n"
        "Add your OpenAI API key to:\n"
        f"[cyan]{get_config_path()}[/cyan]\n"
        "or set the [cyan]OPENAI_API_KEY[/cyan] environment variable.",
        title="[bold red]Configuration Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def _load_records():
    from tradejournal.db.store import JournalStore

    store = JournalStore(get_db_path(load_config()))
    return store.get_trades()


@click.command()
@click.argument("question")
def ask(question: str) -> None:
    """Ask the AI analyst a question about your trading history.

    QUESTION is your natural language question. The analyst receives
    every journal entry, including attached images.

    \b
    Examples:
      tradejournal ask "Why do I lose more on Mondays?"
      tradejournal ask "Are my stop losses too tight?"
    """
    from tradejournal.agents.analyst import JournalAnalystAgent
    from tradejournal.agents.base import ConfigurationError

    records = _load_records()
    analyst = JournalAnalystAgent(load_config())

    console.print(f"[dim]Analyzing {len(records)} journal entries...[/dim]\n")

    try:
        response = analyst.ask(question, records)
    except ConfigurationError as e:
        _config_error(str(e))

    console.print(Panel(
        Markdown(response),
        title="[bold cyan]AI Analysis[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
def sweeps() -> None:
    """Find recurring patterns in your stop-sweep notes.

    Needs at least three trades with stop-sweep notes.

    \b
    Examples:
      tradejournal sweeps
    """
    from tradejournal.agents.analyst import JournalAnalystAgent
    from tradejournal.agents.base import ConfigurationError

    records = _load_records()
    analyst = JournalAnalystAgent(load_config())

    console.print("[dim]Analyzing stop-sweep notes...[/dim]\n")

    try:
        response = analyst.analyze_sweeps(records)
    except ConfigurationError as e:
        _config_error(str(e))

    console.print(Panel(
        Markdown(response),
        title="[bold cyan]SL Sweep Analysis[/bold cyan]",
        border_style="cyan",
    ))
