"""FastAPI application entry point for the help desk bot."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from helpdesk_bot.api.routes import chat, health, messages, tickets
from helpdesk_bot.bot import HelpDeskBot
from helpdesk_bot.bot_framework import BotFrameworkBridge, create_adapter
from helpdesk_bot.config import settings
from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting Help Desk Bot API")
    logger.info(f"Ticket submission URL: {settings.ticket_submission_url}")
    logger.info(f"Knowledge base index: {settings.azure_search_account}/{settings.azure_search_index}")
    if not app.state.app_password:
        logger.warning(
            "Bot Framework credentials not set; channel authentication is disabled "
            "and /api/chat is enabled"
        )

    yield

    # Shutdown
    await app.state.bot.wait_for_pending()
    logger.info("Shutting down Help Desk Bot API")


def create_app(
    bot: HelpDeskBot | None = None,
    *,
    app_id: str | None = None,
    app_password: str | None = None,
    adapter: Any = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Help Desk Bot API",
        description="Chat bot that files help desk tickets and searches the knowledge base",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.bot = bot or HelpDeskBot.from_settings(settings)
    app.state.tickets = tickets.TicketRepository()
    app.state.app_id = settings.microsoft_app_id if app_id is None else app_id
    app.state.app_password = (
        settings.microsoft_app_password if app_password is None else app_password
    )
    app.state.adapter = adapter or create_adapter(app.state.app_id, app.state.app_password)
    app.state.bridge = BotFrameworkBridge(app.state.bot, app.state.adapter, app.state.app_id)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(messages.router, prefix="/api", tags=["Messages"])
    app.include_router(chat.router, prefix="/api", tags=["Chat"])
    app.include_router(tickets.router, prefix="/api", tags=["Tickets"])

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if logger.isEnabledFor(logging.DEBUG) else "An error occurred",
            },
        )

    return app


# Create app instance
app = create_app()
