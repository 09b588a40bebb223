import os

import pytest

# Provide required configuration before importing the package.
os.environ.setdefault("LUIS_MODEL_URL", "https://luis.example.com/luis/v2.0/apps/app-id?verbose=true&q=")
os.environ.setdefault("AZURE_SEARCH_ACCOUNT", "helpdesk-search")
os.environ.setdefault("AZURE_SEARCH_INDEX", "knowledge-base")
os.environ.setdefault("AZURE_SEARCH_KEY", "search-key")

from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.schemas import EntityMatch, RecognizedIntent
from helpdesk_bot.state import ConversationStore


class FakeRecognizer:
    """Returns pre-defined intents by message text; the None intent otherwise."""

    def __init__(self, intents: dict[str, RecognizedIntent] | None = None):
        self.intents = dict(intents or {})
        self.calls: list[str] = []

    async def recognize(self, text: str) -> RecognizedIntent:
        self.calls.append(text)
        return self.intents.get(text, RecognizedIntent.none())


class FakeSearch:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result if result is not None else {"value": []}
        self.error = error
        self.filters: list[str] = []

    async def query(self, filter_expression: str):
        self.filters.append(filter_expression)
        if self.error:
            raise self.error
        return self.result


class FakeGateway:
    """Records submitted tickets and answers like a successful submission."""

    def __init__(self):
        self.requests = []

    async def submit(self, request, channel):
        self.requests.append(request)
        channel.send("Awesome! Your ticket has been created with the number 7.")
        return 7


def _intent(name: str, **entities: list[str]) -> RecognizedIntent:
    """Build an intent; each keyword is an entity type with its resolution values."""
    matches = tuple(
        EntityMatch(type=entity_type, entity=values[0] if values else entity_type, resolution_values=tuple(values))
        for entity_type, values in entities.items()
    )
    return RecognizedIntent(name=name, score=0.9, entities=matches)


@pytest.fixture
def make_intent():
    return _intent


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def search():
    return FakeSearch()


@pytest.fixture
def make_search():
    return FakeSearch


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def bot(recognizer, search, gateway):
    return HelpDeskBot(recognizer, search, gateway, store=ConversationStore())
