from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from helpdesk_bot.schemas import BotReply, DialogState
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class _ConversationRecord:
    dialog: DialogState | None = None
    outbox: list[BotReply] = field(default_factory=list)
    reference: Any = None
    turn_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    touched_at: float = 0.0


class ConversationStore:
    """Conversation-scoped dialog state and pending replies.

    Maps conversation_id -> active dialog state, an outbox of replies
    waiting to be delivered, the channel's conversation reference and the
    lock that serializes the conversation's turns. Records idle for longer
    than ``ttl_seconds`` are evicted on the next access.
    """

    def __init__(
        self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._records: dict[str, _ConversationRecord] = {}
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        expired = [
            conversation_id
            for conversation_id, record in self._records.items()
            if now - record.touched_at > self.ttl_seconds and not record.turn_lock.locked()
        ]
        for conversation_id in expired:
            logger.debug(f"Evicting idle conversation {conversation_id}")
            del self._records[conversation_id]

    def _record(self, conversation_id: str) -> _ConversationRecord:
        now = self._clock()
        self._evict_expired(now)
        record = self._records.setdefault(conversation_id, _ConversationRecord())
        record.touched_at = now
        return record

    def _lookup(self, conversation_id: str) -> _ConversationRecord | None:
        """Return the live record without creating one."""
        now = self._clock()
        self._evict_expired(now)
        record = self._records.get(conversation_id)
        if record is not None:
            record.touched_at = now
        return record

    def turn_lock(self, conversation_id: str) -> asyncio.Lock:
        """Lock held while one turn of the conversation runs."""
        with self._lock:
            return self._record(conversation_id).turn_lock

    def get_dialog(self, conversation_id: str) -> DialogState | None:
        with self._lock:
            record = self._lookup(conversation_id)
            return record.dialog if record else None

    def set_dialog(self, conversation_id: str, dialog: DialogState | None) -> None:
        """Store the active dialog, or discard it when ``dialog`` is None."""
        with self._lock:
            self._record(conversation_id).dialog = dialog

    def get_reference(self, conversation_id: str) -> Any:
        with self._lock:
            record = self._lookup(conversation_id)
            return record.reference if record else None

    def set_reference(self, conversation_id: str, reference: Any) -> None:
        with self._lock:
            self._record(conversation_id).reference = reference

    def send(self, conversation_id: str, reply: BotReply) -> None:
        with self._lock:
            self._record(conversation_id).outbox.append(reply)

    def drain(self, conversation_id: str) -> list[BotReply]:
        """Return and clear the replies queued for a conversation."""
        with self._lock:
            record = self._lookup(conversation_id)
            if record is None:
                return []
            replies, record.outbox = record.outbox, []
            return replies

    def __contains__(self, conversation_id: str) -> bool:
        with self._lock:
            return self._lookup(conversation_id) is not None

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired(self._clock())
            return len(self._records)


class ConversationChannel:
    """Sends replies to a single conversation."""

    def __init__(self, store: ConversationStore, conversation_id: str) -> None:
        self.store = store
        self.conversation_id = conversation_id

    def send(self, reply: BotReply | str) -> None:
        if isinstance(reply, str):
            reply = BotReply(text=reply)
        self.store.send(self.conversation_id, reply)
