"""CLI commands for slackbone."""

import asyncio
import sys

import typer
from rich.console import Console
from rich.table import Table

from slackbone import __logo__, __version__

app = typer.Typer(
    name="slackbone",
    help=f"{__logo__} slackbone - Slack connector for bot dispatch",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} slackbone v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """slackbone - Slack connector for bot dispatch."""
    pass


def _setup_logging(level: str) -> None:
    from loguru import logger

    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@app.command()
def onboard():
    """Write a default configuration file."""
    from slackbone.config.loader import get_config_path, save_config
    from slackbone.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")
    console.print("\nNext steps:")
    console.print("  1. Add your botToken and appToken to [cyan]~/.slackbone/config.json[/cyan]")
    console.print("  2. Start: [cyan]slackbone run --echo[/cyan]")


@app.command()
def run(
    echo: bool = typer.Option(False, "--echo", help="Reply to messages addressed to the bot with their text"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Connect to Slack and publish resolved messages on the bus."""
    from loguru import logger

    from slackbone.bus.events import OutboundMessage
    from slackbone.bus.queue import MessageBus
    from slackbone.channels.slack import SlackChannel
    from slackbone.config.loader import load_config
    from slackbone.slack.errors import SessionInitError

    config = load_config()
    _setup_logging("DEBUG" if verbose else config.logging.level)

    bus = MessageBus()
    channel = SlackChannel(config.slack, bus)
    bus.subscribe_outbound(channel.name, channel.send)

    async def consume() -> None:
        while True:
            msg = await bus.consume_inbound()
            logger.info(f"{msg.session_key} <{msg.sender_id}> {msg.content}")
            if echo and (msg.addressed or msg.chat_id == msg.sender_id):
                await bus.publish_outbound(OutboundMessage(
                    channel=msg.channel,
                    chat_id=msg.chat_id,
                    content=msg.content,
                ))

    async def serve() -> None:
        tasks = [
            asyncio.create_task(bus.dispatch_outbound()),
            asyncio.create_task(consume()),
        ]
        try:
            await channel.start()
        finally:
            bus.stop()
            for task in tasks:
                task.cancel()
            await channel.stop()

    if not config.slack.enabled:
        console.print("[yellow]Slack is disabled in config[/yellow]")
        raise typer.Exit(1)

    console.print(f"{__logo__} Starting slackbone...")
    try:
        asyncio.run(serve())
    except SessionInitError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\nShutting down...")


@app.command()
def status():
    """Show slackbone configuration status."""
    from slackbone.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()
    slack = config.slack

    console.print(f"{__logo__} slackbone Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")

    table = Table(title="Slack")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_row("Enabled", "✓" if slack.enabled else "✗")
    table.add_row("Bot token", f"{slack.bot_token[:10]}..." if slack.bot_token else "[dim]not configured[/dim]")
    table.add_row("App token", f"{slack.app_token[:10]}..." if slack.app_token else "[dim]not configured[/dim]")
    table.add_row("Cache TTL", f"{slack.cache_ttl_s:g}s")
    table.add_row("Mark read interval", f"{slack.mark_read_interval_s:g}s")
    table.add_row("Join groups", ", ".join(slack.join_groups) or "[dim]none[/dim]")
    table.add_row("Allow from", ", ".join(slack.allow_from) or "[dim]everyone[/dim]")
    console.print(table)
