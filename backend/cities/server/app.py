"""Assemble and run the Telegram bot."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from cities.logic.catalog import CityCatalog
from cities.logic.types import Player
from cities.messaging.router import CommandRouter
from cities.server.settings import BotSettings
from cities.server.telegram import TelegramTransport
from cities.session.achievements import AchievementTracker
from cities.session.manager import SessionManager
from shared.db import Database, SqliteAchievementRepository
from shared.logging import setup_logging

if TYPE_CHECKING:
    from telegram import Update

logger = structlog.get_logger()

ANONYMOUS_NAME = "Аноним"


def player_from_update(update: Update) -> Player | None:
    user = update.effective_user
    if user is None:
        return None
    return Player(user_id=str(user.id), name=user.first_name or user.username or ANONYMOUS_NAME)


def create_application(
    settings: BotSettings,
    catalog: CityCatalog,
    tracker: AchievementTracker | None = None,
    database: Database | None = None,
) -> Application:
    """Build the bot application. ``database`` is closed on shutdown when given."""

    async def on_shutdown(app: Application) -> None:
        await app.bot_data["session_manager"].shutdown()
        if database is not None:
            database.close()

    application = ApplicationBuilder().token(settings.bot_token).post_shutdown(on_shutdown).build()

    transport = TelegramTransport(
        application.bot,
        edit_retry_attempts=settings.edit_retry_attempts,
        backoff_seconds=settings.edit_backoff_seconds,
    )
    session_manager = SessionManager(
        catalog,
        transport,
        settings=settings.to_game_settings(),
        achievements=tracker,
    )
    router = CommandRouter(session_manager, transport, tracker=tracker)

    async def on_message(update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        chat = update.effective_chat
        player = player_from_update(update)
        if message is None or chat is None or player is None or not message.text:
            return
        await router.handle_message(str(chat.id), player, message.text)

    application.add_handler(MessageHandler(filters.TEXT, on_message))
    application.bot_data["session_manager"] = session_manager

    logger.info("bot ready", win_score=settings.win_score, catalog_size=len(catalog))
    return application


def main() -> None:  # pragma: no cover
    settings = BotSettings()  # ty: ignore[missing-argument]
    setup_logging(settings.log_dir)

    # A missing city dictionary is fatal: CatalogUnavailableError propagates.
    catalog = CityCatalog.from_json(settings.catalog_path)

    database = Database(settings.database_path)
    database.connect()
    tracker = AchievementTracker(SqliteAchievementRepository(database))

    application = create_application(settings, catalog, tracker=tracker, database=database)
    application.run_polling()
