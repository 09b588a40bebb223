"""Bot Framework messaging endpoint."""

from __future__ import annotations

from botbuilder.schema import Activity
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/messages", summary="Receive a Bot Framework activity")
async def post_activity(request: Request) -> Response:
    """Authenticate the activity with the bot's app credentials and run the turn.

    Replies go back to the channel through the Bot Framework connector.
    """
    if "application/json" not in (request.headers.get("Content-Type") or ""):
        return Response(status_code=415, content="Content-Type must be application/json")

    body = await request.json()
    activity = Activity().deserialize(body)
    auth_header = request.headers.get("Authorization", "")

    adapter = request.app.state.adapter
    bridge = request.app.state.bridge
    try:
        response = await adapter.process_activity(activity, auth_header, bridge.on_turn)
    except PermissionError as e:
        logger.warning(f"Rejected activity: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized") from e

    if response:
        return JSONResponse(status_code=response.status, content=response.body)
    return Response(status_code=201)
