"""Plain JSON conversation endpoints for local development and scripts.

They carry no channel authentication, so they are only served while the
bot runs without Bot Framework credentials.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.schemas import BotReply
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)
router = APIRouter()


class ChatRequest(BaseModel):
    """Inbound user message."""

    conversation_id: str = Field(
        ...,
        min_length=1,
        description="Identifies the conversation; dialog state is kept per conversation.",
        examples=["conv-123"],
    )
    text: str = Field(
        ...,
        description="The user's message text.",
        examples=["I cannot print"],
    )


class AttachmentModel(BaseModel):
    content_type: str
    content: dict[str, Any]


class ReplyModel(BaseModel):
    """Message from the bot. ``buttons`` lists the options of a pending prompt."""

    text: str | None = None
    buttons: list[str] = Field(default_factory=list)
    attachments: list[AttachmentModel] = Field(default_factory=list)


class ChatResponse(BaseModel):
    conversation_id: str
    replies: list[ReplyModel] = Field(default_factory=list)


def _to_models(replies: list[BotReply]) -> list[ReplyModel]:
    return [ReplyModel.model_validate(asdict(reply)) for reply in replies]


def get_bot(request: Request) -> HelpDeskBot:
    return request.app.state.bot


async def require_local_mode(request: Request) -> None:
    if request.app.state.app_password:
        raise HTTPException(
            status_code=403,
            detail="Direct chat is disabled while Bot Framework credentials are configured",
        )


@router.post(
    "/chat",
    response_model=ChatResponse,
    dependencies=[Depends(require_local_mode)],
    summary="Send a user message to the bot",
)
async def post_chat(message: ChatRequest, bot: HelpDeskBot = Depends(get_bot)) -> ChatResponse:
    """Run one conversation turn and return the bot's replies.

    Replies produced after the turn ended (for example the ticket created
    notice and its card) are fetched with ``GET /api/chat/{conversation_id}``.
    """
    try:
        logger.info(f"Message for {message.conversation_id}: {message.text[:100]!r}")
        replies = await bot.on_message(message.conversation_id, message.text)
    except Exception as e:
        logger.exception(f"Error handling message: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Error handling message: {str(e)}"
        ) from e

    return ChatResponse(conversation_id=message.conversation_id, replies=_to_models(replies))


@router.get(
    "/chat/{conversation_id}",
    response_model=ChatResponse,
    dependencies=[Depends(require_local_mode)],
    summary="Fetch follow-up messages for a conversation",
)
async def get_chat(conversation_id: str, bot: HelpDeskBot = Depends(get_bot)) -> ChatResponse:
    return ChatResponse(
        conversation_id=conversation_id, replies=_to_models(bot.pending_replies(conversation_id))
    )
