"""Play scripted conversations against a running help desk bot API."""

from __future__ import annotations

import asyncio
import sys
from typing import Iterable

import httpx
from rich.console import Console

console = Console()

BASE_URL = "http://localhost:3978"

CONVERSATIONS: dict[str, list[str]] = {
    "ticket_prompted": ["I cannot print", "normal", "hardware", "yes"],
    "ticket_declined": ["I need to reset my password", "high", "software", "no"],
    "knowledge_base": ["explore hardware"],
    "knowledge_base_usage": ["explore"],
    "help": ["help"],
    "not_understood": ["what is the airspeed of an unladen swallow"],
}


def _print_replies(replies: list[dict]) -> None:
    for reply in replies:
        if reply.get("text"):
            console.print(f"  [cyan]bot[/cyan] {reply['text']}")
        if reply.get("buttons"):
            console.print(f"      [dim]{' | '.join(reply['buttons'])}[/dim]")
        for attachment in reply.get("attachments", []):
            console.print(f"      [green]{attachment['content_type']}[/green]")


async def run_conversation(client: httpx.AsyncClient, conversation_id: str, turns: list[str]) -> None:
    console.rule(f"[bold blue]{conversation_id}")
    for text in turns:
        console.print(f"  [bold]user[/bold] {text}")
        response = await client.post(
            "/api/chat", json={"conversation_id": conversation_id, "text": text}
        )
        response.raise_for_status()
        _print_replies(response.json()["replies"])

    # Ticket confirmations arrive after the dialog has ended.
    await asyncio.sleep(1)
    response = await client.get(f"/api/chat/{conversation_id}")
    response.raise_for_status()
    _print_replies(response.json()["replies"])


async def main(names: Iterable[str] | None = None, base_url: str = BASE_URL) -> None:
    async with httpx.AsyncClient(base_url=base_url, timeout=30) as client:
        for name in names or CONVERSATIONS.keys():
            await run_conversation(client, f"sample-{name}", CONVERSATIONS[name])


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or None))
