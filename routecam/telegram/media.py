"""Telegram adapters for the capture cycle edges."""
import logging

from telegram import Bot, Document, PhotoSize
from telegram.error import TelegramError

from routecam.constants import MSG_SEND_FAIL
from routecam.errors import CaptureError
from routecam.ports import CaptureSource, ResultSink

logger = logging.getLogger(__name__)


class TelegramPhotoSource(CaptureSource):
    """Downloads a photo (or an image document) the user sent to the bot."""

    def __init__(self, media: PhotoSize | Document) -> None:
        self._media = media

    async def capture(self) -> bytes:
        try:
            tg_file = await self._media.get_file()
            data = bytes(await tg_file.download_as_bytearray())
        except (TelegramError, OSError) as exc:
            raise CaptureError(str(exc) or type(exc).__name__) from exc
        match data:
            case b"":
                raise CaptureError("downloaded photo is empty")
            case _:
                return data


class TelegramReplySink(ResultSink):

    def __init__(self, bot: Bot, chat_id: int) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def show(self, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=self._chat_id, text=text)
        except TelegramError as exc:
            logger.error(MSG_SEND_FAIL, exc)
