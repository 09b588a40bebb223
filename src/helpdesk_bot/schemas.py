from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class IntentName(str, Enum):
    SUBMIT_TICKET = "SubmitTicket"
    EXPLORE_KNOWLEDGE_BASE = "ExploreKnowledgeBase"
    HELP = "Help"
    NONE = "None"


class Severity(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass(slots=True, frozen=True)
class EntityMatch:
    """A typed value recognized in a message."""

    type: str
    entity: str
    resolution_values: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class RecognizedIntent:
    """Classified purpose of a message with its entities."""

    name: str
    score: float = 0.0
    entities: tuple[EntityMatch, ...] = ()

    @classmethod
    def none(cls) -> "RecognizedIntent":
        return cls(name=IntentName.NONE.value)


@dataclass(slots=True)
class SlotSet:
    """Ticket fields collected while the submit dialog is active."""

    description: str
    category: Optional[str] = None
    severity: Optional[str] = None

    def to_request(self) -> "TicketRequest":
        return TicketRequest(
            category=self.category or "",
            severity=self.severity or "",
            description=self.description,
        )


@dataclass(slots=True, frozen=True)
class TicketRequest:
    """Immutable projection of a completed slot set."""

    category: str
    severity: str
    description: str

    def to_payload(self) -> dict[str, str]:
        return {
            "category": self.category,
            "severity": self.severity,
            "description": self.description,
        }


@dataclass(slots=True)
class Attachment:
    content_type: str
    content: dict[str, Any]


@dataclass(slots=True)
class BotReply:
    """Message sent from the bot to a conversation."""

    text: Optional[str] = None
    buttons: list[str] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)


class PromptKind(str, Enum):
    CHOICE = "choice"
    TEXT = "text"
    CONFIRM = "confirm"


@dataclass(slots=True)
class PendingPrompt:
    """Prompt the conversation is waiting on."""

    kind: PromptKind
    text: str
    choices: list[str] = field(default_factory=list)


@dataclass(slots=True)
class DialogState:
    """Per-conversation dialog context carried between turns."""

    dialog: str
    step: str
    slots: SlotSet
    prompt: Optional[PendingPrompt] = None
