"""Bot Framework channel: activities in, activities out."""

from __future__ import annotations

from botbuilder.core import BotAdapter, BotFrameworkAdapter, BotFrameworkAdapterSettings, TurnContext
from botbuilder.schema import (
    ActionTypes,
    Activity,
    ActivityTypes,
    Attachment as ActivityAttachment,
    CardAction,
    SuggestedActions,
)

from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.schemas import BotReply
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


def create_adapter(app_id: str, app_password: str) -> BotFrameworkAdapter:
    """Adapter that authenticates inbound activities with the app credentials.

    With an empty id and password authentication is disabled (emulator mode).
    """
    return BotFrameworkAdapter(BotFrameworkAdapterSettings(app_id, app_password))


def to_activity(reply: BotReply) -> Activity:
    """Convert a bot reply to a message activity; prompt options become buttons."""
    activity = Activity(type=ActivityTypes.message, text=reply.text)
    if reply.buttons:
        activity.suggested_actions = SuggestedActions(
            actions=[
                CardAction(type=ActionTypes.im_back, title=label, value=label)
                for label in reply.buttons
            ]
        )
    if reply.attachments:
        activity.attachments = [
            ActivityAttachment(content_type=attachment.content_type, content=attachment.content)
            for attachment in reply.attachments
        ]
    return activity


class BotFrameworkBridge:
    """Runs HelpDeskBot turns for Bot Framework conversations.

    Replies produced after a turn (ticket created notice and card) are sent
    proactively through the conversation reference saved on the last turn.
    """

    def __init__(self, bot: HelpDeskBot, adapter: BotAdapter, app_id: str = "") -> None:
        self.bot = bot
        self.adapter = adapter
        self.app_id = app_id
        bot.add_follow_up_listener(self.deliver_follow_ups)

    async def on_turn(self, turn_context: TurnContext) -> None:
        activity = turn_context.activity
        if activity.type != ActivityTypes.message:
            logger.debug(f"Ignoring {activity.type} activity")
            return

        conversation_id = activity.conversation.id
        self.bot.store.set_reference(
            conversation_id, TurnContext.get_conversation_reference(activity)
        )
        replies = await self.bot.on_message(conversation_id, activity.text or "")
        for reply in replies:
            await turn_context.send_activity(to_activity(reply))

    async def deliver_follow_ups(self, conversation_id: str) -> None:
        """Send queued replies of a Bot Framework conversation proactively.

        Conversations that never came through this channel keep their
        replies in the outbox. Proactive messages need the bot's app id, so
        without one (emulator mode) they stay there too.
        """
        reference = self.bot.store.get_reference(conversation_id)
        if reference is None:
            return
        if not self.app_id:
            logger.warning(
                f"MICROSOFT_APP_ID not set; follow-ups for {conversation_id} stay in the outbox"
            )
            return
        replies = self.bot.pending_replies(conversation_id)
        if not replies:
            return

        async def _send(turn_context: TurnContext) -> None:
            for reply in replies:
                await turn_context.send_activity(to_activity(reply))

        logger.debug(f"Sending {len(replies)} follow-up replies to {conversation_id}")
        await self.adapter.continue_conversation(reference, _send, bot_id=self.app_id)
