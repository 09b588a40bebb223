from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx

from helpdesk_bot.cards import ADAPTIVE_CARD_CONTENT_TYPE, TICKET_TEMPLATE_PATH, render_ticket_card
from helpdesk_bot.schemas import Attachment, BotReply, TicketRequest
from helpdesk_bot.state import ConversationChannel
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)

FAILED_TICKET_ID = -1


class TicketGateway:
    """Posts confirmed tickets to the ticket creation endpoint."""

    _FAILURE_MESSAGE = (
        "Something went wrong while I was saving your ticket. Please try again later."
    )

    def __init__(
        self,
        submission_url: str,
        *,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
        template_path: Path = TICKET_TEMPLATE_PATH,
    ) -> None:
        self.submission_url = submission_url.rstrip("/")
        self.timeout = timeout
        self.template_path = template_path
        self._transport = transport

    async def create_ticket(self, request: TicketRequest) -> Any:
        """Send a single create-ticket call and return the identifier from the body."""
        async with httpx.AsyncClient(
            base_url=self.submission_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post("/api/tickets", json=request.to_payload())
            response.raise_for_status()
            return response.json()

    @staticmethod
    def is_failed(ticket_id: Any) -> bool:
        if not ticket_id:
            return True
        try:
            return int(ticket_id) == FAILED_TICKET_ID
        except (TypeError, ValueError):
            return False

    async def submit(self, request: TicketRequest, channel: ConversationChannel) -> Any:
        """Create the ticket and report the outcome to the conversation.

        Exactly one attempt is made. Returns the ticket id, or ``None`` when
        the attempt failed.
        """
        try:
            ticket_id = await self.create_ticket(request)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Ticket submission to {self.submission_url} failed: {exc}")
            channel.send(self._FAILURE_MESSAGE)
            return None

        if self.is_failed(ticket_id):
            logger.warning(f"Ticket service rejected ticket: returned {ticket_id!r}")
            channel.send(self._FAILURE_MESSAGE)
            return None

        logger.info(f"Ticket {ticket_id} created for conversation {channel.conversation_id}")
        channel.send(f"Awesome! Your ticket has been created with the number {ticket_id}.")
        channel.send(
            BotReply(
                attachments=[
                    Attachment(
                        content_type=ADAPTIVE_CARD_CONTENT_TYPE,
                        content=render_ticket_card(ticket_id, request, self.template_path),
                    )
                ]
            )
        )
        return ticket_id
