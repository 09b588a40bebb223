from __future__ import annotations

import asyncio
import functools
from typing import Any, Awaitable, Callable, Protocol

from helpdesk_bot.config import Settings
from helpdesk_bot.dialogs import (
    Dialog,
    HelpDialog,
    KnowledgeBaseDialog,
    NotUnderstoodDialog,
    SubmitTicketDialog,
    TurnContext,
)
from helpdesk_bot.gateway import TicketGateway
from helpdesk_bot.recognizer import LuisRecognizer
from helpdesk_bot.schemas import BotReply, RecognizedIntent
from helpdesk_bot.search import AzureSearchClient
from helpdesk_bot.state import ConversationChannel, ConversationStore
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)

FollowUpListener = Callable[[str], Awaitable[Any]]


class Recognizer(Protocol):
    async def recognize(self, text: str) -> RecognizedIntent: ...


class HelpDeskBot:
    """Routes messages to dialogs and keeps per-conversation state.

    The recognizer is only consulted while a conversation has no active
    dialog; otherwise the message answers the dialog's pending prompt.
    """

    def __init__(
        self,
        recognizer: Recognizer,
        search: AzureSearchClient,
        gateway: TicketGateway,
        store: ConversationStore | None = None,
    ) -> None:
        self.recognizer = recognizer
        self.store = store or ConversationStore()
        self._pending: set[asyncio.Task[Any]] = set()
        self._follow_up_listeners: list[FollowUpListener] = []

        dialogs: list[Dialog] = [
            SubmitTicketDialog(gateway, spawn=self.spawn),
            KnowledgeBaseDialog(search),
            HelpDialog(),
        ]
        self.dialogs: dict[str, Dialog] = {dialog.id: dialog for dialog in dialogs}
        self.default_dialog: Dialog = NotUnderstoodDialog()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HelpDeskBot":
        timeout = settings.http_timeout_seconds
        return cls(
            recognizer=LuisRecognizer(settings.luis_model_url, timeout=timeout),
            search=AzureSearchClient(
                settings.azure_search_account,
                settings.azure_search_index,
                settings.azure_search_key,
                timeout=timeout,
            ),
            gateway=TicketGateway(settings.ticket_submission_url, timeout=timeout),
            store=ConversationStore(ttl_seconds=settings.conversation_ttl_seconds),
        )

    def channel(self, conversation_id: str) -> ConversationChannel:
        return ConversationChannel(self.store, conversation_id)

    async def on_message(self, conversation_id: str, text: str) -> list[BotReply]:
        """Handle one user message and return the replies queued so far.

        Turns of the same conversation run one at a time.
        """
        async with self.store.turn_lock(conversation_id):
            turn = TurnContext(
                conversation_id=conversation_id, text=text, channel=self.channel(conversation_id)
            )
            active = self.store.get_dialog(conversation_id)

            if active is not None and active.dialog in self.dialogs:
                dialog = self.dialogs[active.dialog]
                logger.debug(f"Resuming {dialog.id} at {active.step} for {conversation_id}")
                state = await dialog.resume(turn, active)
            else:
                intent = await self.recognizer.recognize(text)
                dialog = self.dialogs.get(intent.name, self.default_dialog)
                logger.info(f"Conversation {conversation_id}: intent {intent.name} -> {dialog.id}")
                state = await dialog.begin(turn, intent)

            self.store.set_dialog(conversation_id, state)
            return self.store.drain(conversation_id)

    def pending_replies(self, conversation_id: str) -> list[BotReply]:
        return self.store.drain(conversation_id)

    def add_follow_up_listener(self, listener: FollowUpListener) -> None:
        """Call ``listener(conversation_id)`` whenever a background task of that
        conversation has finished and may have queued replies."""
        self._follow_up_listeners.append(listener)

    def spawn(self, coro: Awaitable[Any], conversation_id: str | None = None) -> asyncio.Task[Any]:
        """Run ``coro`` in the background, independent of the current turn."""
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(functools.partial(self._on_task_done, conversation_id))
        return task

    def _on_task_done(self, conversation_id: str | None, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if not task.cancelled():
            exc = task.exception()
            if exc is not None:
                logger.error("Background task failed", exc_info=exc)
        if conversation_id is not None:
            for listener in self._follow_up_listeners:
                self.spawn(listener(conversation_id))

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    async def wait_for_pending(self) -> None:
        """Wait until every background submission has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
