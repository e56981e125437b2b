"""Statistics commands for TradeJournal CLI.

Summary statistics and time series over the whole journal. Filters
used by ``tradejournal list`` never apply here.
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradejournal.analytics.dashboard import Dashboard, dashboard_for

console = Console()


def _get_dashboard() -> Dashboard:
    """Load the journal and build its dashboard."""
    from tradejournal.config import get_db_path, load_config
    from tradejournal.db.store import JournalStore

    store = JournalStore(get_db_path(load_config()))
    return dashboard_for(store.get_trades())


def _signed(value: float, suffix: str = "R") -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else ""
    return f"[{color}]{sign}{value:.2f}{suffix}[/{color}]"


def _empty(title: str) -> None:
    console.print(Panel(
        "[dim]No trades in the journal yet[/dim]",
        title=f"[bold]{title}[/bold]",
        border_style="dim",
    ))


@click.command()
def stats() -> None:
    """Show summary statistics and outcome distribution.

    \b
    Examples:
      tradejournal stats
    """
    dashboard = _get_dashboard()
    summary = dashboard.summary

    win_color = "green" if summary.win_rate >= 50 else "red"
    stats_text = (
        f"Total Trades:     [bold]{summary.total_trades}[/bold]\n"
        f"Win Rate:         [{win_color}]{summary.win_rate:.1f}%[/{win_color}]\n"
        f"Total R/R Earned: {_signed(summary.total_risk_earned)}\n"
        f"Average R/R:      {_signed(summary.average_risk)} [dim]per trade[/dim]\n"
        f"{'─' * 30}\n"
        f"[green]Wins: {summary.wins}[/green] | "
        f"[red]Losses: {summary.losses}[/red] | "
        f"[yellow]Break Even: {summary.break_evens}[/yellow] | "
        f"[dim]No Trade Days: {summary.no_trade_days}[/dim]"
    )

    console.print(Panel(
        stats_text,
        title="[bold cyan]Performance[/bold cyan]",
        border_style="cyan",
    ))

    if not dashboard.outcomes:
        return

    table = Table(title="Outcome Distribution", show_header=True, header_style="bold cyan")
    table.add_column("Outcome", style="bold")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")

    total = sum(item.value for item in dashboard.outcomes)
    for item in dashboard.outcomes:
        table.add_row(item.name, str(item.value), f"{item.value / total * 100:.1f}%")

    console.print(table)


@click.command()
def weekly() -> None:
    """Show win rate per week (weeks start on Sunday).

    Only take profit and stop loss trades count.
    """
    rows = _get_dashboard().weekly
    if not rows:
        _empty("Weekly Win Rate")
        return

    table = Table(title="Weekly Win Rate", show_header=True, header_style="bold cyan")
    table.add_column("Week Of", style="bold")
    table.add_column("Wins", justify="right")
    table.add_column("Losses", justify="right")
    table.add_column("Win Rate", justify="right")

    for row in rows:
        color = "green" if row.win_rate >= 50 else "red"
        table.add_row(
            row.name,
            str(row.wins),
            str(row.losses),
            f"[{color}]{row.win_rate:.1f}%[/{color}]",
        )

    console.print(table)


@click.command()
def daily() -> None:
    """Show take profit and stop loss counts per day."""
    rows = _get_dashboard().daily
    if not rows:
        _empty("TP & SL Frequency")
        return

    table = Table(title="TP & SL Frequency", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold")
    table.add_column("Take Profit", justify="right", style="green")
    table.add_column("Stop Loss", justify="right", style="red")

    for row in rows:
        table.add_row(row.name, str(row.take_profits), str(row.stop_losses))

    console.print(table)


@click.command()
def equity() -> None:
    """Show the cumulative R/R equity curve by day."""
    points = _get_dashboard().equity

    table = Table(title="Cumulative R/R", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold")
    table.add_column("Day R/R", justify="right")
    table.add_column("Cumulative R/R", justify="right")

    previous = 0.0
    for point in points:
        table.add_row(point.name, _signed(point.value - previous), _signed(point.value))
        previous = point.value

    console.print(table)


@click.command()
def weekdays() -> None:
    """Show performance by weekday, Monday to Friday."""
    rows = _get_dashboard().weekdays

    table = Table(title="Performance by Day of Week", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Wins", justify="right", style="green")
    table.add_column("Losses", justify="right", style="red")
    table.add_column("Win Rate", justify="right")

    for row in rows:
        table.add_row(
            row.name,
            str(row.trades),
            str(row.wins),
            str(row.losses),
            f"{row.win_rate:.1f}%",
        )

    console.print(table)
