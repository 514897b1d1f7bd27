"""CLI commands for driving the chat simulator from a terminal."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
import structlog
from rich import get_console
from rich.prompt import Confirm

from chatsim.lib.exceptions import ChatSimError
from chatsim.lib.personas import PERSONAS
from chatsim.schemas import Theme
from chatsim.utils.sync_tools import run_

if TYPE_CHECKING:
    from rich.console import Console

    from chatsim.schemas import ChatView
    from chatsim.services.chat import ChatService


logger = structlog.get_logger()

MAX_IMAGE_REF_DISPLAY = 32


async def _start(data_dir: Path | None) -> ChatService:
    from chatsim.server.deps import build_chat_service

    return await build_chat_service(data_dir=data_dir)


def _display_view(console: Console, view: ChatView) -> None:
    """Print the conversation as a table."""
    from rich.table import Table

    console.print(f"[bold]{view.persona.display_name}[/bold] [dim]{view.persona.description}[/dim]")
    if view.warning:
        console.print(f"[yellow]⚠ {view.warning}[/yellow]")

    table = Table(show_header=True, header_style="bold blue", expand=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Time", width=6)
    table.add_column("From", width=6)
    table.add_column("Message", ratio=4)
    table.add_column("Reactions", ratio=1)

    for item in view.messages:
        sender = "[green]you[/green]" if item.side.value == "right" else "[cyan]bot[/cyan]"
        if item.image_ref is not None:
            body = f"[dim]🖼 {item.image_ref[:MAX_IMAGE_REF_DISPLAY]}...[/dim]"
        else:
            body = item.text or ""
        table.add_row(str(item.index), item.timestamp, sender, body, " ".join(item.reactions))

    console.print(table)
    if view.typing:
        console.print(f"[dim italic]{view.typing}[/dim italic]")


@click.group(name="chat", help="Talk to the scripted bots from the terminal.")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory holding the conversation store (defaults to CHAT_DATA_DIR).",
)
@click.pass_context
def chat_group(ctx: click.Context, data_dir: Path | None) -> None:
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


@chat_group.command(name="personas", help="List the available bots.")
def personas_cmd() -> None:
    from rich.table import Table

    console = get_console()
    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Description", style="dim")
    table.add_column("Replies", justify="right")
    for persona in PERSONAS.values():
        table.add_row(persona.id, persona.display_name, persona.description, str(len(persona.reply_pool)))
    console.print(table)


@chat_group.command(name="history", help="Show the stored conversation.")
@click.pass_context
def history_cmd(ctx: click.Context) -> None:
    async def _history() -> None:
        service = await _start(ctx.obj["data_dir"])
        _display_view(get_console(), service.snapshot())

    run_(_history)()


@chat_group.command(name="send", help="Send a text message and wait for the bot to answer.")
@click.argument("text")
@click.option("--persona", "-p", type=click.Choice(sorted(PERSONAS)), default=None, help="Bot that should answer.")
@click.option("--no-wait", is_flag=True, help="Skip the bot reply.")
@click.pass_context
def send_cmd(ctx: click.Context, text: str, persona: str | None, no_wait: bool) -> None:
    console = get_console()

    async def _send() -> None:
        service = await _start(ctx.obj["data_dir"])
        if persona is not None:
            service.select_persona(persona)
        message = await service.submit_text(text)
        if message is None:
            console.print("[yellow]Nothing to send[/yellow]")
            return
        if no_wait:
            await service.responder.aclose()
        else:
            with console.status(f"[bold yellow]{service.active_persona.display_name} is typing...", spinner="dots"):
                await service.responder.wait_idle()
        _display_view(console, service.snapshot())

    run_(_send)()


@chat_group.command(name="react", help="Add a reaction to the last message.")
@click.argument("token")
@click.pass_context
def react_cmd(ctx: click.Context, token: str) -> None:
    console = get_console()

    async def _react() -> None:
        service = await _start(ctx.obj["data_dir"])
        if await service.add_reaction_to_last(token) is None:
            console.print("[yellow]No message to react to[/yellow]")
            return
        console.print(f"[green]✓[/green] Reacted with {token}")

    run_(_react)()


@chat_group.command(name="delete", help="Delete the message at a position shown by 'history'.")
@click.argument("index", type=int)
@click.pass_context
def delete_cmd(ctx: click.Context, index: int) -> None:
    console = get_console()

    async def _delete() -> None:
        service = await _start(ctx.obj["data_dir"])
        removed = await service.delete_message(index)
        if removed is None:
            msg = f"No message at position {index}"
            raise click.ClickException(msg)
        console.print(f"[green]✓[/green] Deleted message {removed.id}")

    run_(_delete)()


@chat_group.command(name="clear", help="Clear the chat history.")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def clear_cmd(ctx: click.Context, yes: bool) -> None:
    console = get_console()
    if not yes and not Confirm.ask("Clear chat history? This cannot be undone."):
        console.print("[dim]Cancelled[/dim]")
        return

    async def _clear() -> None:
        service = await _start(ctx.obj["data_dir"])
        await service.clear_all()
        console.print("[green]✓[/green] Chat history cleared")

    run_(_clear)()


@chat_group.command(name="upload", help="Send an image file.")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def upload_cmd(ctx: click.Context, path: Path) -> None:
    import mimetypes

    from chatsim.lib.media import to_data_url

    console = get_console()
    content = path.read_bytes()
    content_type = mimetypes.guess_type(path.name)[0] or ""
    if not content_type.startswith("image/"):
        msg = f"{path.name} is not an image"
        raise click.ClickException(msg)

    async def _upload() -> None:
        service = await _start(ctx.obj["data_dir"])
        try:
            await service.upload_image(to_data_url(content, content_type), len(content))
        except ChatSimError as e:
            raise click.ClickException(e.detail) from e
        with console.status("[bold yellow]Waiting for a reply...", spinner="dots"):
            await service.responder.wait_idle()
        _display_view(console, service.snapshot())

    run_(_upload)()


@chat_group.command(name="theme", help="Show or set the theme preference.")
@click.argument("theme", required=False, type=click.Choice([t.value for t in Theme]))
@click.pass_context
def theme_cmd(ctx: click.Context, theme: str | None) -> None:
    console = get_console()

    async def _theme() -> None:
        from chatsim.lib.settings import get_settings
        from chatsim.server.deps import create_storage
        from chatsim.services.theme import ThemeService

        service = ThemeService(create_storage(ctx.obj["data_dir"]), key=get_settings().storage.THEME_KEY)
        current = await service.set_theme(Theme(theme)) if theme else await service.get_theme()
        console.print(f"Theme: [bold]{current.value}[/bold]")

    run_(_theme)()
