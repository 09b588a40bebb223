from __future__ import annotations

from dataclasses import dataclass

from helpdesk_bot import prompts
from helpdesk_bot.schemas import BotReply, DialogState, PendingPrompt, RecognizedIntent
from helpdesk_bot.state import ConversationChannel
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class TurnContext:
    """The message being handled and the channel to answer on."""

    conversation_id: str
    text: str
    channel: ConversationChannel

    def send(self, reply: BotReply | str) -> None:
        self.channel.send(reply)


class Dialog:
    """A conversation flow triggered by an intent.

    ``begin`` and ``resume`` return the state to keep for the next turn, or
    ``None`` once the dialog has ended.
    """

    id: str = "dialog"

    async def begin(self, turn: TurnContext, intent: RecognizedIntent) -> DialogState | None:
        raise NotImplementedError

    async def resume(self, turn: TurnContext, state: DialogState) -> DialogState | None:
        """Answer the pending prompt with the user's reply and continue."""
        if state.prompt is None:
            logger.warning(f"Dialog {self.id} resumed without a pending prompt")
            return None
        try:
            answer = prompts.parse(state.prompt, turn.text)
        except prompts.NoMatch:
            logger.debug(f"Reply {turn.text!r} does not answer {state.prompt.kind.value} prompt")
            turn.send(prompts.render(state.prompt, retry=True))
            return state
        return await self.on_reply(turn, state, answer)

    async def on_reply(
        self, turn: TurnContext, state: DialogState, answer: str | bool
    ) -> DialogState | None:
        raise NotImplementedError

    @staticmethod
    def ask(
        turn: TurnContext, state: DialogState, step: str, prompt: PendingPrompt
    ) -> DialogState:
        """Send ``prompt`` and suspend the dialog at ``step``."""
        state.step = step
        state.prompt = prompt
        turn.send(prompts.render(prompt))
        return state
