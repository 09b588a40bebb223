from __future__ import annotations

import httpx

from helpdesk_bot.dialogs.base import Dialog, TurnContext
from helpdesk_bot.entities import find_entity
from helpdesk_bot.schemas import DialogState, IntentName, RecognizedIntent
from helpdesk_bot.search import AzureSearchClient
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


class KnowledgeBaseDialog(Dialog):
    """Lists knowledge base articles for the category named in the message."""

    id = IntentName.EXPLORE_KNOWLEDGE_BASE.value

    USAGE_HINT = "Try typing something like _explore hardware_."
    FAILURE_MESSAGE = (
        "Ooops! Something went wrong while contacting Azure Search. Please try again later."
    )

    def __init__(self, search: AzureSearchClient) -> None:
        self.search = search

    async def begin(self, turn: TurnContext, intent: RecognizedIntent) -> DialogState | None:
        category = find_entity(intent.entities, "category")
        if category is None:
            turn.send(self.USAGE_HINT)
            return None

        try:
            result = await self.search.query(f"category eq {category.entity}")
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Knowledge base search for {category.entity!r} failed: {exc}")
            turn.send(self.FAILURE_MESSAGE)
            return None

        message = (
            "These are some articles I've found in the knowledge base for the "
            f"_'{category.entity}'_ category:"
        )
        for article in result.get("value", []):
            message += f"\n * {article.get('title', '')}"
        turn.send(message)
        return None
