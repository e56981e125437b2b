"""TradeJournal command line entry point."""

import logging

import click

LOG_FMT = "%(asctime)s │ %(levelname)-7s │ %(name)s │ %(message)s"


class LazyGroup(click.Group):
    """Command group that imports a command's module on first use.

    ``tradejournal stats`` never pays for importing the Agents SDK, and
    ``tradejournal ask`` never builds the statistics tables.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._module_for = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self._module_for))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = self.commands.get(cmd_name)
        if command is None and cmd_name in self._module_for:
            command = self._import_command(cmd_name)
            self.add_command(command)
        return command

    def _import_command(self, cmd_name: str) -> click.Command:
        """Find the command called ``cmd_name`` in its module.

        Matches on the click name, so ``list`` resolves to ``list_trades``.
        """
        import importlib

        module_path = self._module_for[cmd_name]
        module = importlib.import_module(module_path)
        for attr in vars(module).values():
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                return attr
        raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")


LAZY_SUBCOMMANDS = {
    "init": "tradejournal.cli.configure",
    # Journal entries
    "add": "tradejournal.cli.journal",
    "delete": "tradejournal.cli.journal",
    "list": "tradejournal.cli.journal",
    "show": "tradejournal.cli.journal",
    # Statistics
    "stats": "tradejournal.cli.stats",
    "weekly": "tradejournal.cli.stats",
    "daily": "tradejournal.cli.stats",
    "equity": "tradejournal.cli.stats",
    "weekdays": "tradejournal.cli.stats",
    # AI Features
    "ask": "tradejournal.cli.ask",
    "sweeps": "tradejournal.cli.ask",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TradeJournal - log your trades and review your performance.

    Record each trading day, then review win rate, R/R earned, equity
    curve and weekday performance, or ask an AI analyst about your
    history.

    \b
    Quick Start:
      tradejournal init                      # Create config file
      tradejournal add --outcome TP --sl 10 --tp 20
      tradejournal stats                     # Summary statistics
      tradejournal ask "question"            # Ask AI about your trades
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FMT,
        datefmt="%H:%M:%S",
    )
    # Ensure context object exists for passing data between commands
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
