from __future__ import annotations

from helpdesk_bot.dialogs.base import Dialog, TurnContext
from helpdesk_bot.schemas import DialogState, IntentName, RecognizedIntent


class HelpDialog(Dialog):
    id = IntentName.HELP.value

    MESSAGE = (
        "I'm the help desk bot and I can help you create a ticket.\n"
        "You can tell me things like _I need to reset my password_ or _I cannot print_."
    )

    async def begin(self, turn: TurnContext, intent: RecognizedIntent) -> DialogState | None:
        turn.send(self.MESSAGE)
        return None


class NotUnderstoodDialog(Dialog):
    """Fallback for messages that match no intent."""

    id = IntentName.NONE.value

    async def begin(self, turn: TurnContext, intent: RecognizedIntent) -> DialogState | None:
        turn.send(
            f"I'm sorry, I did not understand '{turn.text}'. Type 'help' to know more about me :)"
        )
        return None
