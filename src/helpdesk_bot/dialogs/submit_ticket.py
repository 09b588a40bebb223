from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable

from helpdesk_bot import prompts
from helpdesk_bot.dialogs.base import Dialog, TurnContext
from helpdesk_bot.entities import resolve_entity
from helpdesk_bot.gateway import TicketGateway
from helpdesk_bot.schemas import DialogState, IntentName, RecognizedIntent, Severity, SlotSet
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)

Spawn = Callable[[Awaitable[Any], str], Any]


class SubmitStep(str, Enum):
    COLLECT_SEVERITY = "collect_severity"
    COLLECT_CATEGORY = "collect_category"
    CONFIRM = "confirm"


class SubmitTicketDialog(Dialog):
    """Collects category, severity and description, then files a ticket.

    Category and severity are taken from the intent's entities when the
    classifier resolved them; otherwise the user is prompted. The ticket is
    submitted in the background and the dialog ends without waiting for it.
    """

    id = IntentName.SUBMIT_TICKET.value

    SEVERITY_PROMPT = "which is the severity of this problem?"
    CATEGORY_PROMPT = (
        "Which would be the category for this ticket (software, hardware, network, and so on)?"
    )
    DECLINED_MESSAGE = "Ok. The ticket was not created. You can start again if you want."

    def __init__(self, gateway: TicketGateway, spawn: Spawn) -> None:
        self.gateway = gateway
        self.spawn = spawn

    async def begin(self, turn: TurnContext, intent: RecognizedIntent) -> DialogState | None:
        slots = SlotSet(
            description=turn.text,
            category=resolve_entity(intent, "category"),
            severity=resolve_entity(intent, "severity"),
        )
        state = DialogState(dialog=self.id, step="", slots=slots)
        logger.debug(f"Starting ticket dialog for {turn.conversation_id}: {slots}")

        if not slots.severity:
            choices = [severity.value for severity in Severity]
            return self.ask(
                turn, state, SubmitStep.COLLECT_SEVERITY, prompts.choice(self.SEVERITY_PROMPT, choices)
            )
        return await self._collect_severity(turn, state, None)

    async def on_reply(
        self, turn: TurnContext, state: DialogState, answer: str | bool
    ) -> DialogState | None:
        if state.step == SubmitStep.COLLECT_SEVERITY:
            return await self._collect_severity(turn, state, answer)
        if state.step == SubmitStep.COLLECT_CATEGORY:
            return await self._collect_category(turn, state, answer)
        if state.step == SubmitStep.CONFIRM:
            return await self._confirm(turn, state, bool(answer))
        logger.warning(f"Unknown ticket dialog step {state.step!r}; ending dialog")
        return None

    async def _collect_severity(
        self, turn: TurnContext, state: DialogState, severity: Any
    ) -> DialogState | None:
        if not state.slots.severity:
            state.slots.severity = severity

        if not state.slots.category:
            return self.ask(
                turn, state, SubmitStep.COLLECT_CATEGORY, prompts.text(self.CATEGORY_PROMPT)
            )
        return await self._collect_category(turn, state, None)

    async def _collect_category(
        self, turn: TurnContext, state: DialogState, category: Any
    ) -> DialogState | None:
        slots = state.slots
        if not slots.category:
            slots.category = category

        message = (
            f'Great! I\'m going to create a "{slots.severity}" severity ticket in the '
            f'"{slots.category}" category. The description I will use is '
            f'"{slots.description}". Can you please confirm that this information is correct?'
        )
        return self.ask(turn, state, SubmitStep.CONFIRM, prompts.confirm(message))

    async def _confirm(
        self, turn: TurnContext, state: DialogState, confirmed: bool
    ) -> DialogState | None:
        if not confirmed:
            logger.debug(f"Ticket declined in conversation {turn.conversation_id}")
            turn.send(self.DECLINED_MESSAGE)
            return None

        request = state.slots.to_request()
        logger.info(f"Submitting ticket for conversation {turn.conversation_id}: {request}")
        self.spawn(self.gateway.submit(request, turn.channel), turn.conversation_id)
        return None
