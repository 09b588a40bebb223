"""Adaptive card rendering for created tickets."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from helpdesk_bot.schemas import TicketRequest

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
TICKET_TEMPLATE_PATH = Path(__file__).with_name("ticket.json")


def _escape(value: Any) -> str:
    # Placeholders sit inside JSON string literals.
    return json.dumps(str(value), ensure_ascii=False)[1:-1]


def render_ticket_card(
    ticket_id: Any, request: TicketRequest, template_path: Path = TICKET_TEMPLATE_PATH
) -> dict[str, Any]:
    """Fill the ticket card template and parse it.

    Raises ``OSError`` if the template cannot be read and
    ``json.JSONDecodeError`` if the filled template is not valid JSON.
    """
    card_text = template_path.read_text(encoding="utf-8")

    replacements = {
        "{ticketId}": ticket_id,
        "{severity}": request.severity,
        "{category}": request.category,
        "{description}": request.description,
    }
    for placeholder, value in replacements.items():
        card_text = card_text.replace(placeholder, _escape(value))

    return json.loads(card_text)
