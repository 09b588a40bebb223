from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from helpdesk_bot.schemas import EntityMatch, RecognizedIntent
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


def parse_luis_response(data: dict[str, Any]) -> RecognizedIntent:
    """Map a LUIS v2 prediction into a RecognizedIntent."""
    top = data.get("topScoringIntent")
    if not top:
        intents = data.get("intents") or []
        top = intents[0] if intents else None
    if not top or not top.get("intent"):
        return RecognizedIntent.none()

    entities = []
    for raw in data.get("entities") or []:
        resolution = raw.get("resolution") or {}
        values = resolution.get("values") or []
        entities.append(
            EntityMatch(
                type=raw.get("type", ""),
                entity=raw.get("entity", ""),
                resolution_values=tuple(str(value) for value in values),
            )
        )

    return RecognizedIntent(
        name=top["intent"],
        score=float(top.get("score") or 0.0),
        entities=tuple(entities),
    )


class LuisRecognizer:
    """Classifies messages with a hosted language-understanding model.

    ``model_url`` is the published endpoint URL ending in ``q=``; the
    utterance is appended to it.
    """

    def __init__(
        self,
        model_url: str,
        *,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model_url = model_url
        self.timeout = timeout
        self._transport = transport

    async def recognize(self, text: str) -> RecognizedIntent:
        """Return the top intent for ``text``; the None intent if the call fails."""
        url = self.model_url + quote(text, safe="")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Language understanding request failed: {exc}")
            return RecognizedIntent.none()

        intent = parse_luis_response(data)
        logger.debug(f"Recognized intent {intent.name} ({intent.score:.2f}) for {text[:100]!r}")
        return intent
