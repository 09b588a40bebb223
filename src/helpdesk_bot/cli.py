"""Interactive console for chatting with the bot without a messaging channel."""

from __future__ import annotations

import argparse
import asyncio
import uuid
from typing import Sequence

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.config import settings
from helpdesk_bot.schemas import Attachment, BotReply

console = Console()

QUIT_COMMANDS = {":quit", ":exit"}


def _render_card(attachment: Attachment) -> None:
    table = Table(show_header=False, box=None)
    for block in attachment.content.get("body", []):
        for column in block.get("columns", []):
            for item in column.get("items", []):
                if item.get("type") == "TextBlock":
                    table.add_row(f"[bold]{escape(item.get('text', ''))}[/bold]")
                for fact in item.get("facts", []):
                    table.add_row(escape(f"{fact.get('title', '')} {fact.get('value', '')}"))
        if block.get("type") == "TextBlock":
            table.add_row(escape(block.get("text", "")))
    console.print(Panel(table, title="Ticket", border_style="green"))


def render_reply(reply: BotReply) -> None:
    if reply.text:
        console.print(f"[bold cyan]bot[/bold cyan] {escape(reply.text)}")
    if reply.buttons:
        options = "  ".join(
            f"[bold]{index}[/bold]. {escape(label)}" for index, label in enumerate(reply.buttons, start=1)
        )
        console.print(f"    {options}")
    for attachment in reply.attachments:
        _render_card(attachment)


async def chat(bot: HelpDeskBot, conversation_id: str) -> None:
    session: PromptSession = PromptSession()
    while True:
        try:
            text = await session.prompt_async("you> ")
        except (EOFError, KeyboardInterrupt):
            break
        if text.strip().lower() in QUIT_COMMANDS:
            break

        with console.status("[cyan]…[/cyan]", spinner="dots"):
            replies = await bot.on_message(conversation_id, text)
        for reply in replies:
            render_reply(reply)

        # Ticket submissions finish after the dialog has ended.
        if bot.has_pending:
            with console.status("[cyan]Saving ticket …[/cyan]", spinner="dots"):
                await bot.wait_for_pending()
            for reply in bot.pending_replies(conversation_id):
                render_reply(reply)

    await bot.wait_for_pending()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the help desk bot in the terminal.")
    parser.add_argument(
        "--conversation-id",
        default=None,
        help="Conversation id to use. Defaults to a random one.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    conversation_id = args.conversation_id or f"console-{uuid.uuid4().hex[:8]}"
    console.print(
        Panel(
            "Type a message to talk to the bot, e.g. [bold]I cannot print[/bold] or "
            "[bold]help[/bold].\nType [bold]:quit[/bold] or press CTRL+D to leave.",
            title=f"Help Desk Bot · {conversation_id}",
            border_style="cyan",
        )
    )
    bot = HelpDeskBot.from_settings(settings)
    asyncio.run(chat(bot, conversation_id))
    console.print("Bye.")


if __name__ == "__main__":
    main()
