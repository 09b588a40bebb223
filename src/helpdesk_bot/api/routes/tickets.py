"""Local ticket creation endpoint."""

from __future__ import annotations

import itertools
import threading
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)
router = APIRouter()


class TicketModel(BaseModel):
    """Ticket body posted by the bot once the user confirmed it."""

    category: str = Field(..., examples=["hardware"])
    severity: str = Field(..., examples=["normal"])
    description: str = Field(..., examples=["I cannot print"])


class TicketRepository:
    """In-memory ticket storage with incrementing ids starting at 1."""

    def __init__(self) -> None:
        self._tickets: dict[int, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, ticket: dict[str, Any]) -> int:
        with self._lock:
            ticket_id = next(self._ids)
            self._tickets[ticket_id] = {**ticket, "id": ticket_id}
            return ticket_id

    def get(self, ticket_id: int) -> dict[str, Any] | None:
        with self._lock:
            return self._tickets.get(ticket_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickets)


@router.post("/tickets", status_code=201, summary="Create a ticket")
async def create_ticket(ticket: TicketModel, request: Request) -> JSONResponse:
    """Store the ticket and answer with its bare numeric id."""
    logger.info(f"Ticket received: {ticket.model_dump()}")
    ticket_id = request.app.state.tickets.add(ticket.model_dump())
    return JSONResponse(status_code=201, content=ticket_id)
