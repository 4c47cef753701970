"""CLI commands for Chesster."""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from chesster import __logo__, __version__

app = typer.Typer(
    name="chesster",
    help=f"{__logo__} Chesster - Lichess4545 Slack bot",
    no_args_is_help=True,
)

console = Console()

TEST_BOT_ID = "UCHESSTER"
TEST_CHANNEL = "CTEST"


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} Chesster v{__version__}")
        raise typer.Exit()


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Send log output to stderr at the requested level."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else level)


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """Chesster - Lichess4545 Slack bot."""
    pass


# ============================================================================
# Run
# ============================================================================


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
):
    """Connect to Slack and start answering commands."""
    from slack_sdk.web.async_client import AsyncWebClient

    from chesster.auto_reply import DispatchEngine, EventHandler, ListenerRegistry, ReplyDispatcher
    from chesster.channels import ChannelResolver
    from chesster.channels.slack import SlackChannel
    from chesster.commands import register_default_commands
    from chesster.config.loader import load_config
    from chesster.routing.leagues import LeagueDirectory
    from chesster.storage import ChessterStore, StoreError

    config = load_config()
    setup_logging(config.log_level, verbose)

    if not config.has_slack_tokens:
        console.print("[red]Error: Slack bot_token and app_token are required.[/red]")
        console.print("Set them in ~/.chesster/config.json or CHESSTER_SLACK__BOT_TOKEN / CHESSTER_SLACK__APP_TOKEN")
        raise typer.Exit(1)

    try:
        store = ChessterStore.from_config(config.database)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    async def start():
        await store.connect()

        registry = ListenerRegistry()
        register_default_commands(registry, config, store)
        engine = DispatchEngine(registry, LeagueDirectory.from_config(config))

        client = AsyncWebClient(token=config.slack.bot_token)
        handler = EventHandler(
            engine,
            ChannelResolver(client).resolve,
            ReplyDispatcher(thread_replies=config.bot.reply_in_thread),
            apology_text=config.bot.apology_text,
        )
        channel = SlackChannel(config.slack, handler)

        console.print(f"[green]✓[/green] {len(registry)} listeners registered")
        try:
            await channel.start()
        finally:
            await channel.stop()
            await store.close()

    console.print(f"{__logo__} Starting Chesster...")
    try:
        asyncio.run(start())
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\nShutting down...")


# ============================================================================
# Status / Introspection
# ============================================================================


@app.command()
def status():
    """Show Chesster status."""
    from chesster.config.loader import get_config_path, load_config

    config_path = get_config_path()
    console.print(f"{__logo__} Chesster Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")

    config = load_config()
    console.print(f"\n[bold]Slack:[/bold]")
    console.print(f"  Bot token: {'[green]✓[/green]' if config.slack.bot_token else '[dim]not set[/dim]'}")
    console.print(f"  App token: {'[green]✓[/green]' if config.slack.app_token else '[dim]not set[/dim]'}")
    console.print(f"  Threaded replies: {config.bot.reply_in_thread}")

    console.print(f"\n[bold]Database:[/bold] {config.database.dialect} {config.database.db_path}")

    console.print(f"\n[bold]Leagues:[/bold]")
    if not config.leagues:
        console.print("  [dim]none configured[/dim]")
    for name, league in config.leagues.items():
        marker = " (default)" if name == config.default_league else ""
        channels = ", ".join(league.channels) or "-"
        console.print(f"  {name}{marker}: {channels}")


def _build_registry(config):
    from chesster.auto_reply import ListenerRegistry
    from chesster.commands import register_default_commands
    from chesster.storage import ChessterStore

    store = ChessterStore.from_config(config.database)
    registry = ListenerRegistry()
    register_default_commands(registry, config, store)
    return registry, store


@app.command("commands")
def list_commands():
    """List registered listeners in priority order."""
    from chesster.config.loader import load_config

    registry, _ = _build_registry(load_config())

    table = Table(title="Listeners")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Patterns")
    table.add_column("Categories")

    for index, listener in enumerate(registry, start=1):
        table.add_row(
            str(index),
            listener.label,
            listener.kind,
            "\n".join(p.pattern for p in listener.patterns),
            ", ".join(sorted(c.value for c in listener.categories)),
        )

    console.print(table)


@app.command("test")
def test_message(
    text: str = typer.Argument(..., help="Message text"),
    dm: bool = typer.Option(False, "--dm", help="Send as a direct message"),
    mention: bool = typer.Option(False, "--mention", help="Deliver as an app mention"),
    bot: bool = typer.Option(False, "--bot", help="Send as another bot"),
    channel_name: str = typer.Option(
        "general", "--league", "-l", help="Channel name used to pick the league"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
):
    """Run one message through classification and dispatch."""
    from chesster.auto_reply import DispatchEngine, EventHandler, ReplyDispatcher
    from chesster.bus.events import ChannelInfo, EventKind, InboundEvent
    from chesster.channels import StaticChannelResolver
    from chesster.config.loader import load_config
    from chesster.routing.leagues import LeagueDirectory

    config = load_config()
    setup_logging("WARNING", verbose)

    registry, store = _build_registry(config)
    engine = DispatchEngine(registry, LeagueDirectory.from_config(config))
    resolver = StaticChannelResolver({
        TEST_CHANNEL: ChannelInfo(id=TEST_CHANNEL, name=channel_name, is_im=dm),
    })
    handler = EventHandler(
        engine,
        resolver.resolve,
        ReplyDispatcher(thread_replies=False),
        apology_text=config.bot.apology_text,
    )
    text = text.replace("@chesster", f"<@{TEST_BOT_ID}>")
    # Slack delivers channel mentions of the bot as app_mention events
    if not dm and f"<@{TEST_BOT_ID}>" in text:
        mention = True

    event = InboundEvent(
        kind=EventKind.MENTION if mention else EventKind.MESSAGE,
        channel_id=TEST_CHANNEL,
        text=text,
        user="UTESTER",
        ts=None,
        bot_id="BTEST" if bot else None,
    )

    replies: list[str] = []

    async def say(text: str = "", **kwargs) -> None:
        replies.append(text)

    async def run_once():
        await store.connect()
        try:
            classified = await handler.handle(event, say, TEST_BOT_ID)
        finally:
            await store.close()
        return classified

    classified = asyncio.run(run_once())

    if classified is None:
        console.print("[yellow]Event dropped[/yellow]")
        return
    console.print(f"Category: [cyan]{classified.category.value}[/cyan]")
    console.print(f"Text: {classified.text!r}", markup=False)
    if not replies:
        console.print("[dim]No match[/dim]")
    for reply in replies:
        console.print(f"\n{__logo__} {reply}", markup=False)
