"""TelegramClient — photo in, route analysis out, via python-telegram-bot."""
import asyncio
import logging
from typing import Callable, Optional

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from routecam.config import Config
from routecam.constants import (
    CMD_CANCEL,
    CMD_HELP,
    CMD_START,
    CMD_STATUS,
    MSG_BLOCKED_CHAT,
    MSG_BUSY,
    MSG_CANCELLING,
    MSG_HELP,
    MSG_NOTHING_TO_CANCEL,
    MSG_SEND_FAIL,
    MSG_STATUS,
)
from routecam.errors import CaptureBusyError
from routecam.pipeline import CaptureCycle
from routecam.telegram.media import TelegramPhotoSource, TelegramReplySink
from routecam.telegram.typing import typing_action

logger = logging.getLogger(__name__)

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], object]


def _digits(s: str) -> str:
    return "".join(c for c in s if c.isdigit())


class TelegramClient:

    def __init__(self, config: Config, cycle: CaptureCycle) -> None:
        self._config = config
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._cycle = cycle
        self._app: Optional[Application] = None

    def run(self) -> None:
        # Concurrent updates let /cancel and /status through while a cycle is awaited.
        self._app = (
            Application.builder().token(self._token).concurrent_updates(True).build()
        )
        self._app.add_handler(CommandHandler(CMD_START, self._make_text_handler(lambda: MSG_HELP)))
        self._app.add_handler(CommandHandler(CMD_HELP, self._make_text_handler(lambda: MSG_HELP)))
        self._app.add_handler(CommandHandler(CMD_STATUS, self._make_text_handler(self.status_text)))
        self._app.add_handler(CommandHandler(CMD_CANCEL, self._make_text_handler(self.cancel_text)))
        self._app.add_handler(
            TGMessageHandler(filters.PHOTO | filters.Document.IMAGE, self._make_photo_handler())
        )
        self._app.run_polling()

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        incoming = _digits(str(update.effective_chat.id))
        allowed = _digits(self._allowed_chat_id)
        return incoming == allowed

    def status_text(self) -> str:
        return MSG_STATUS % (
            self._cycle.state.value,
            self._config.analysis_model,
            self._config.target_width,
            self._config.jpeg_quality,
            self._config.route_color,
        )

    def cancel_text(self) -> str:
        match self._cycle.cancel():
            case True:
                return MSG_CANCELLING
            case False:
                return MSG_NOTHING_TO_CANCEL

    @staticmethod
    def _photo_source(update: Update) -> Optional[TelegramPhotoSource]:
        """Largest photo size, or an image document; None if the update carries neither."""
        message = update.message
        if message is None:
            return None
        match (message.photo, message.document):
            case ([*_, largest], _):
                return TelegramPhotoSource(largest)
            case (_, document) if document is not None:
                return TelegramPhotoSource(document)
            case _:
                return None

    async def _reply(self, update: Update, text: str) -> None:
        try:
            await update.effective_message.reply_text(text)
        except TelegramError as exc:
            logger.error(MSG_SEND_FAIL, exc)

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_text_handler(self, callback: Callable[[], str]) -> Handler:
        """Handler for commands that need no arguments — just call callback and reply."""
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass
            await self._reply(update, callback())

        return _handler

    def _make_photo_handler(self) -> Handler:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._is_allowed(update):
                case False:
                    chat_id = update.effective_chat.id if update.effective_chat else "?"
                    logger.warning(MSG_BLOCKED_CHAT, chat_id)
                    return
                case True:
                    pass

            source = self._photo_source(update)
            match source:
                case None:
                    return
                case _:
                    pass

            chat_id = update.effective_chat.id
            sink = TelegramReplySink(context.bot, chat_id)
            caption = update.message.caption if update.message else None
            try:
                task = self._cycle.start(source, sink, caption)
            except CaptureBusyError:
                logger.info("Capture rejected: %s", self._cycle.state.value)
                await self._reply(update, MSG_BUSY)
                return

            async with typing_action(context.bot, chat_id):
                await asyncio.wait([task])
            if not task.cancelled() and task.exception() is not None:
                logger.error("Capture cycle crashed", exc_info=task.exception())

        return _handler
