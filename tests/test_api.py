import asyncio
import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from helpdesk_bot.api.main import create_app
from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.cards import ADAPTIVE_CARD_CONTENT_TYPE
from helpdesk_bot.dialogs import HelpDialog, SubmitTicketDialog
from helpdesk_bot.gateway import TicketGateway
from helpdesk_bot.schemas import BotReply


@pytest.fixture
def client(bot):
    app = create_app(bot=bot, app_id="", app_password="")
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_message_turns_follow_the_dialog(client, recognizer, make_intent):
    recognizer.intents["I cannot print"] = make_intent("SubmitTicket")

    response = client.post("/api/chat", json={"conversation_id": "c1", "text": "I cannot print"})
    assert response.status_code == 200
    data = response.json()
    assert data["conversation_id"] == "c1"
    assert data["replies"] == [
        {"text": SubmitTicketDialog.SEVERITY_PROMPT, "buttons": ["high", "normal", "low"], "attachments": []}
    ]

    response = client.post("/api/chat", json={"conversation_id": "c1", "text": "normal"})
    assert response.json()["replies"][0]["text"] == SubmitTicketDialog.CATEGORY_PROMPT

    response = client.post("/api/chat", json={"conversation_id": "c1", "text": "hardware"})
    assert response.json()["replies"][0]["buttons"] == ["Yes", "No"]

    response = client.post("/api/chat", json={"conversation_id": "c1", "text": "no"})
    assert response.json()["replies"][0]["text"] == SubmitTicketDialog.DECLINED_MESSAGE


def test_help_message(client, recognizer, make_intent):
    recognizer.intents["help"] = make_intent("Help")

    response = client.post("/api/chat", json={"conversation_id": "c1", "text": "help"})

    assert response.json()["replies"][0]["text"] == HelpDialog.MESSAGE


def test_follow_up_messages_are_drained(client, bot):
    bot.store.send("c1", BotReply(text="Awesome! Your ticket has been created with the number 3."))

    first = client.get("/api/chat/c1").json()
    second = client.get("/api/chat/c1").json()

    assert [reply["text"] for reply in first["replies"]] == [
        "Awesome! Your ticket has been created with the number 3."
    ]
    assert second["replies"] == []


def test_message_requires_conversation_id(client):
    response = client.post("/api/chat", json={"text": "hi"})

    assert response.status_code == 422


def test_tickets_endpoint_returns_incrementing_ids(client):
    ticket = {"category": "hardware", "severity": "normal", "description": "I cannot print"}

    first = client.post("/api/tickets", json=ticket)
    second = client.post("/api/tickets", json=ticket)

    assert first.status_code == 201
    assert first.json() == 1
    assert second.json() == 2
    assert client.app.state.tickets.get(1) == {**ticket, "id": 1}


def test_tickets_endpoint_validates_body(client):
    response = client.post("/api/tickets", json={"category": "hardware"})

    assert response.status_code == 422


def test_confirmed_ticket_is_stored_and_shown_as_card(recognizer, search, make_intent):
    recognizer.intents["no wifi"] = make_intent("SubmitTicket", category=["network"], severity=["high"])
    gateway = TicketGateway("http://testserver")
    bot = HelpDeskBot(recognizer, search, gateway)
    app = create_app(bot=bot, app_id="", app_password="")
    gateway._transport = httpx.ASGITransport(app=app)

    async def scenario():
        await bot.on_message("c1", "no wifi")
        assert await bot.on_message("c1", "yes") == []
        await bot.wait_for_pending()
        return bot.pending_replies("c1")

    replies = asyncio.run(scenario())

    assert replies[0].text == "Awesome! Your ticket has been created with the number 1."
    card = replies[1].attachments[0]
    assert card.content_type == ADAPTIVE_CARD_CONTENT_TYPE
    assert card.content["body"][-1]["text"] == "no wifi"
    assert app.state.tickets.get(1) == {
        "category": "network",
        "severity": "high",
        "description": "no wifi",
        "id": 1,
    }


ACTIVITY = {
    "type": "message",
    "id": "activity-1",
    "text": "help",
    "channelId": "emulator",
    "serviceUrl": "http://localhost:50000",
    "from": {"id": "user-1"},
    "recipient": {"id": "bot"},
    "conversation": {"id": "c1"},
}


class _RecordingAdapter:
    """Stands in for the Bot Framework adapter and records what it was given."""

    def __init__(self):
        self.calls = []

    async def process_activity(self, activity, auth_header, logic):
        self.calls.append((activity, auth_header, logic))
        return None


def test_chat_is_disabled_with_credentials(bot):
    app = create_app(bot=bot, app_id="app-id", app_password="s3cret")
    with TestClient(app) as test_client:
        response = test_client.post("/api/chat", json={"conversation_id": "c1", "text": "help"})
        assert response.status_code == 403
        assert test_client.get("/api/chat/c1").status_code == 403


def test_activity_is_handed_to_the_adapter(bot):
    adapter = _RecordingAdapter()
    app = create_app(bot=bot, app_id="app-id", app_password="s3cret", adapter=adapter)
    with TestClient(app) as test_client:
        response = test_client.post(
            "/api/messages", json=ACTIVITY, headers={"Authorization": "Bearer signed-token"}
        )

    assert response.status_code == 201
    activity, auth_header, logic = adapter.calls[0]
    assert activity.text == "help"
    assert activity.conversation.id == "c1"
    assert auth_header == "Bearer signed-token"
    assert logic == app.state.bridge.on_turn


def test_activity_without_token_is_rejected_when_credentials_are_set(bot, recognizer):
    app = create_app(bot=bot, app_id="app-id", app_password="s3cret")
    with TestClient(app) as test_client:
        response = test_client.post("/api/messages", json=ACTIVITY)

    assert response.status_code == 401
    assert recognizer.calls == []


def test_activity_requires_json(client):
    response = client.post("/api/messages", content="hello", headers={"Content-Type": "text/plain"})

    assert response.status_code == 415


def _app_with_failing_route(bot):
    app = create_app(bot=bot, app_id="", app_password="")

    async def fail():
        raise RuntimeError("ticket store is offline")

    app.add_api_route("/fail", fail)
    return app


def test_unhandled_error_details_are_shown_in_debug(bot, caplog):
    caplog.set_level(logging.DEBUG, logger="helpdesk_bot.api.main")
    with TestClient(_app_with_failing_route(bot), raise_server_exceptions=False) as test_client:
        response = test_client.get("/fail")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "message": "ticket store is offline"}


def test_unhandled_error_details_are_hidden_by_default(bot, caplog):
    caplog.set_level(logging.INFO, logger="helpdesk_bot.api.main")
    with TestClient(_app_with_failing_route(bot), raise_server_exceptions=False) as test_client:
        response = test_client.get("/fail")

    assert response.status_code == 500
    assert response.json()["message"] == "An error occurred"
