"""Journal commands for TradeJournal CLI.

Handles adding, deleting and listing journal entries.
"""

import base64
import binascii
import mimetypes
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradejournal.analytics.calendar import DAY_NAMES, calendar_day, weekday_index
from tradejournal.analytics.risk import resolve_risk_multiple
from tradejournal.analytics.view import (
    RANGE_BUCKETS,
    SORTABLE_FIELDS,
    RangeBucket,
    SortDirection,
    SortState,
    ViewFilters,
    apply_view,
)
from tradejournal.models import (
    AttachmentLabel,
    Direction,
    Outcome,
    TradeRecord,
    parse_data_uri,
    parse_record,
)

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]

RANGE_CHOICES = ", ".join(bucket.label for bucket in RANGE_BUCKETS)

# Options that only make sense when a position was opened
DIRECTIONAL_OPTIONS = {
    "direction": "--direction",
    "stop_loss_distance": "--sl",
    "take_profit_distance": "--tp",
    "realized_risk_multiple": "--rr",
    "activation_time": "--time",
    "stop_sweep_notes": "--sweep",
}


def _get_store():
    """Get the journal store instance."""
    from tradejournal.config import get_db_path, load_config
    from tradejournal.db.store import JournalStore

    return JournalStore(get_db_path(load_config()))


def _error(message: str, title: str = "Error") -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def _resolve_id(store, trade_id: str) -> str:
    """Expand a full ID or unique ID prefix into the stored ID."""
    matches = [r.id for r in store.get_trades() if r.id.startswith(trade_id)]
    if trade_id in matches:
        return trade_id
    if not matches:
        _error(f"No entry with ID {trade_id}", title="Not Found")
    if len(matches) > 1:
        _error(f"ID prefix {trade_id} matches {len(matches)} entries", title="Ambiguous ID")
    return matches[0]


def read_image(path: Path) -> str:
    """Read an image file as a base64 data URI."""
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise click.BadParameter(f"{path} does not look like an image", param_hint="--image")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_image_option(value: str) -> tuple[AttachmentLabel, Path]:
    """Parse ``LABEL=PATH`` into an attachment label and file path."""
    label, sep, path = value.partition("=")
    if not sep or not path:
        raise click.BadParameter(
            f"expected LABEL=PATH, got {value!r}", param_hint="--image"
        )
    try:
        attachment_label = AttachmentLabel(label.strip().lower())
    except ValueError:
        choices = ", ".join(item.value for item in AttachmentLabel)
        raise click.BadParameter(
            f"unknown image label {label!r} (choose from {choices})", param_hint="--image"
        )
    image_path = Path(path).expanduser()
    if not image_path.is_file():
        raise click.BadParameter(f"{image_path} does not exist", param_hint="--image")
    return attachment_label, image_path


def build_record(trade_id: str, **fields) -> TradeRecord:
    """Build a validated record from CLI option values.

    Unset options are dropped. For no-trade days the directional
    options are discarded.

    Raises:
        pydantic.ValidationError: If the values do not form a valid record.
    """
    data = {key: value for key, value in fields.items() if value is not None}
    data["id"] = trade_id
    if data.get("outcome") == Outcome.NO_TRADE.value:
        for key in DIRECTIONAL_OPTIONS:
            data.pop(key, None)
    return parse_record(data)


def format_multiple(value: float) -> str:
    color = "green" if value > 0 else "red" if value < 0 else "dim"
    return f"[{color}]{value:+.2f}R[/{color}]"


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


@click.command()
@click.option(
    "--date", "trade_date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Trade date (YYYY-MM-DD, optionally with HH:MM). Defaults to today.",
)
@click.option(
    "--outcome",
    type=click.Choice([o.value for o in Outcome], case_sensitive=False),
    required=True,
    help="TP, SL, BE or NO_TRADE.",
)
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction], case_sensitive=False),
    default=None,
    help="Position direction (defaults to LONG for taken trades).",
)
@click.option("--sl", "stop_loss", type=float, default=None, help="Stop loss distance.")
@click.option("--tp", "take_profit", type=float, default=None, help="Take profit distance.")
@click.option("--rr", "risk_multiple", type=float, default=None, help="R/R taken (overrides TP/SL ratio).")
@click.option("--range", "range_size", type=float, default=None, help="Consolidation range size.")
@click.option("--time", "activation_time", default=None, help="Activation time, e.g. 10:30.")
@click.option("--sweep", "sweep_notes", default=None, help="Notes on the candle that swept the stop.")
@click.option("--notes", default="", help="General notes.")
@click.option(
    "--image", "images",
    multiple=True,
    help="Attach an image as LABEL=PATH (labels: before, after, broker-screen).",
)
def add(
    trade_date: Optional[datetime],
    outcome: str,
    direction: Optional[str],
    stop_loss: Optional[float],
    take_profit: Optional[float],
    risk_multiple: Optional[float],
    range_size: Optional[float],
    activation_time: Optional[str],
    sweep_notes: Optional[str],
    notes: str,
    images: tuple[str, ...],
) -> None:
    """Add a journal entry.

    \b
    Examples:
      tradejournal add --outcome TP --sl 10 --tp 20 --notes "clean breakout"
      tradejournal add --outcome SL --sweep "long wick into London open"
      tradejournal add --outcome NO_TRADE --date 2024-06-05
      tradejournal add --outcome TP --rr 2.5 --image before=chart.png
    """
    from tradejournal.db.store import new_trade_id

    outcome = outcome.upper()
    is_no_trade = outcome == Outcome.NO_TRADE.value

    fields = {
        "date": trade_date or datetime.combine(date.today(), time()),
        "outcome": outcome,
        "direction": direction.upper() if direction else None,
        "stop_loss_distance": stop_loss,
        "take_profit_distance": take_profit,
        "realized_risk_multiple": risk_multiple,
        "consolidation_range_size": range_size,
        "activation_time": activation_time,
        "stop_sweep_notes": sweep_notes,
        "general_notes": notes,
    }

    if is_no_trade:
        ignored = [flag for key, flag in DIRECTIONAL_OPTIONS.items() if fields[key] is not None]
        if ignored:
            console.print(
                f"[yellow]Ignoring {', '.join(ignored)} for a no-trade day.[/yellow]"
            )
    elif fields["direction"] is None:
        fields["direction"] = Direction.LONG.value

    attachments = {}
    for value in images:
        label, path = parse_image_option(value)
        attachments[label.value] = read_image(path)
    fields["attachments"] = attachments

    try:
        record = build_record(new_trade_id(), **fields)
    except ValidationError as e:
        messages = "\n".join(
            f"• {'.'.join(str(p) for p in err['loc'][1:]) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        _error(messages, title="Invalid Entry")

    from tradejournal.db.store import StorageError

    store = _get_store()
    try:
        store.add_trade(record)
    except StorageError as e:
        _error(str(e), title="Database Error")

    summary = f"{calendar_day(record).isoformat()} | {record.outcome.value}"
    if record.outcome is not Outcome.NO_TRADE:
        summary += f" | {format_multiple(resolve_risk_multiple(record))}"
    if record.has_attachments:
        summary += f" | {len(record.attachments)} image(s)"

    console.print(Panel(
        f"[green]✓[/green] Entry saved\n\n{summary}\n[dim]ID: {record.id}[/dim]",
        title="[bold green]Journal[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("trade_id")
def delete(trade_id: str) -> None:
    """Delete a journal entry by ID.

    TRADE_ID can be the full ID or any unique prefix of it, as shown
    in the ID column of ``tradejournal list``.

    \b
    Examples:
      tradejournal delete 3f2a9c1b
    """
    from tradejournal.db.store import StorageError

    store = _get_store()
    full_id = _resolve_id(store, trade_id)

    try:
        store.delete_trade(full_id)
    except StorageError as e:
        _error(str(e), title="Database Error")
    console.print(
        f"[green]✓[/green] Deleted entry [cyan]{full_id}[/cyan] "
        f"[dim]({store.count()} remaining)[/dim]"
    )


def save_images(record: TradeRecord, directory: Path) -> list[Path]:
    """Decode a record's attachments into image files.

    Files are named ``<id prefix>-<label><ext>``. Attachments that are
    not valid base64 data URIs are skipped with a warning.
    """
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for label, uri in record.attachments.items():
        parsed = parse_data_uri(uri)
        if parsed is None:
            console.print(f"[yellow]Skipping {label.value} image: not a data URI[/yellow]")
            continue
        mime_type, data = parsed
        try:
            payload = base64.b64decode(data, validate=True)
        except binascii.Error:
            console.print(f"[yellow]Skipping {label.value} image: invalid base64 data[/yellow]")
            continue
        extension = mimetypes.guess_extension(mime_type) or ".bin"
        path = directory / f"{record.id[:8]}-{label.value}{extension}"
        path.write_bytes(payload)
        written.append(path)
    return written


@click.command()
@click.argument("trade_id")
@click.option(
    "--save-images", "save_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write the entry's images into this directory.",
)
def show(trade_id: str, save_dir: Optional[Path]) -> None:
    """Show every field of one journal entry.

    TRADE_ID can be the full ID or any unique prefix of it.

    \b
    Examples:
      tradejournal show 3f2a9c1b
      tradejournal show 3f2a9c1b --save-images ./charts
    """
    store = _get_store()
    record = store.get_trade(_resolve_id(store, trade_id))

    day = calendar_day(record)
    lines = [
        f"Date:        [bold]{record.date.isoformat(sep=' ', timespec='minutes')}[/bold] "
        f"({DAY_NAMES[weekday_index(day)]})",
        f"Outcome:     {record.outcome.value}",
    ]
    if record.outcome is not Outcome.NO_TRADE:
        direction_value = record.direction.value if record.direction else "-"
        lines += [
            f"Direction:   {direction_value}",
            f"Stop Loss:   {_fmt(record.stop_loss_distance)}",
            f"Take Profit: {_fmt(record.take_profit_distance)}",
            f"R/R Entered: {_fmt(record.realized_risk_multiple)}",
            f"R/R Result:  {format_multiple(resolve_risk_multiple(record))}",
            f"Activation:  {_fmt(record.activation_time)}",
        ]
    lines.append(f"Range Size:  {_fmt(record.consolidation_range_size)}")

    sweep_notes = getattr(record, "stop_sweep_notes", None)
    if sweep_notes:
        lines += ["", "[bold]SL Sweep Notes[/bold]", sweep_notes]
    if record.general_notes:
        lines += ["", "[bold]Notes[/bold]", record.general_notes]

    if record.has_attachments:
        labels = ", ".join(label.display_name for label in record.attachments)
        lines += ["", f"Images:      {labels}"]
    else:
        lines += ["", "[dim]No images[/dim]"]

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold cyan]Entry {record.id}[/bold cyan]",
        border_style="cyan",
    ))

    if save_dir is not None:
        for path in save_images(record, save_dir):
            console.print(f"[green]✓[/green] Saved [cyan]{path}[/cyan]")


@click.command(name="list")
@click.option("--from", "start_date", type=click.DateTime(formats=["%Y-%m-%d"]), help="Start date (inclusive).")
@click.option("--to", "end_date", type=click.DateTime(formats=["%Y-%m-%d"]), help="End date (inclusive).")
@click.option(
    "--outcome",
    type=click.Choice([o.value for o in Outcome], case_sensitive=False),
    help="Only this outcome.",
)
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction], case_sensitive=False),
    help="Only this direction.",
)
@click.option("--range", "range_bucket", help=f"Consolidation range bucket: {RANGE_CHOICES}.")
@click.option("--weekday", type=click.IntRange(1, 5), help="Weekday, 1=Monday .. 5=Friday.")
@click.option("--sort", "sort_key", type=click.Choice(SORTABLE_FIELDS), help="Field to sort by.")
@click.option("--asc/--desc", "ascending", default=None, help="Sort direction.")
def list_trades(
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    outcome: Optional[str],
    direction: Optional[str],
    range_bucket: Optional[str],
    weekday: Optional[int],
    sort_key: Optional[str],
    ascending: Optional[bool],
) -> None:
    """List journal entries.

    Entries are newest first by default. Sorting by a field starts
    ascending; sorting by date again flips to oldest first.

    \b
    Examples:
      tradejournal list
      tradejournal list --outcome SL --weekday 1
      tradejournal list --from 2024-06-01 --to 2024-06-30 --range 5-10
      tradejournal list --sort realized_risk_multiple --desc
    """
    try:
        bucket = RangeBucket.parse(range_bucket) if range_bucket else None
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--range")

    filters = ViewFilters(
        start_date=start_date.date() if start_date else None,
        end_date=end_date.date() if end_date else None,
        outcome=outcome.upper() if outcome else None,
        direction=direction.upper() if direction else None,
        range_bucket=bucket,
        weekday=weekday,
    )

    state = SortState()
    if sort_key:
        state = state.request(sort_key)
    if ascending is not None:
        state = SortState(
            key=state.key,
            direction=SortDirection.ASCENDING if ascending else SortDirection.DESCENDING,
        )

    store = _get_store()
    records = store.get_trades()
    shown = apply_view(records, filters, state.key, state.direction)

    if not shown:
        console.print(Panel(
            "[dim]No journal entries match[/dim]",
            title="[bold]Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title=f"Journal ({len(shown)} of {len(records)})",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date", style="bold")
    table.add_column("Day")
    table.add_column("Outcome")
    table.add_column("Dir")
    table.add_column("SL", justify="right")
    table.add_column("TP", justify="right")
    table.add_column("R/R", justify="right")
    table.add_column("Range", justify="right")
    table.add_column("Time")
    table.add_column("Img", justify="right")
    table.add_column("Notes", max_width=30)
    table.add_column("ID", style="dim")

    outcome_colors = {
        Outcome.TAKE_PROFIT: "green",
        Outcome.STOP_LOSS: "red",
        Outcome.BREAK_EVEN: "yellow",
        Outcome.NO_TRADE: "dim",
    }

    for record in shown:
        day = calendar_day(record)
        color = outcome_colors[record.outcome]
        direction_value = getattr(record, "direction", None)
        notes = record.general_notes
        table.add_row(
            day.isoformat(),
            DAY_NAMES[weekday_index(day)][:3],
            f"[{color}]{record.outcome.value}[/{color}]",
            direction_value.value if direction_value else "-",
            _fmt(getattr(record, "stop_loss_distance", None)),
            _fmt(getattr(record, "take_profit_distance", None)),
            "-" if record.outcome is Outcome.NO_TRADE else format_multiple(resolve_risk_multiple(record)),
            _fmt(record.consolidation_range_size),
            _fmt(getattr(record, "activation_time", None)),
            str(len(record.attachments)) if record.has_attachments else "-",
            (notes[:27] + "...") if len(notes) > 30 else (notes or "-"),
            record.id[:8],
        )

    console.print(table)
