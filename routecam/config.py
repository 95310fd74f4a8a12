from dataclasses import dataclass
from typing import Callable, Optional, TypeVar
import os
from dotenv import load_dotenv

from routecam.constants import (
    CLAUDE_ANALYSIS_MODEL,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_ROUTE_COLOR,
    DEFAULT_TARGET_WIDTH,
    MAX_JPEG_QUALITY,
    MIN_JPEG_QUALITY,
    OPENAI_ANALYSIS_MODEL,
)

T = TypeVar("T")


def _number(name: str, raw: str, cast: Callable[[str], T]) -> T:
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    openai_api_key: Optional[str]
    anthropic_api_key: Optional[str]
    analysis_model: str
    target_width: int
    jpeg_quality: int
    route_color: str
    request_timeout: Optional[float]

    @property
    def provider(self) -> str:
        """'openai' when an OpenAI key is configured, otherwise 'claude'."""
        return "openai" if self.openai_api_key else "claude"

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        analysis_model = os.getenv("ANALYSIS_MODEL") or None
        target_width = os.getenv("TARGET_WIDTH", str(DEFAULT_TARGET_WIDTH))
        jpeg_quality = os.getenv("JPEG_QUALITY", str(DEFAULT_JPEG_QUALITY))
        route_color = os.getenv("ROUTE_COLOR", "").strip() or DEFAULT_ROUTE_COLOR
        raw_timeout = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))

        timeout = _number("REQUEST_TIMEOUT", raw_timeout, float)
        match analysis_model:
            case None if openai_api_key:
                analysis_model = OPENAI_ANALYSIS_MODEL
            case None:
                analysis_model = CLAUDE_ANALYSIS_MODEL
            case _:
                pass

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            analysis_model=analysis_model,
            target_width=_number("TARGET_WIDTH", target_width, int),
            jpeg_quality=_number("JPEG_QUALITY", jpeg_quality, int),
            route_color=route_color,
            request_timeout=timeout if timeout > 0 else None,
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
        log_level: str,
        openai_api_key: Optional[str],
        anthropic_api_key: Optional[str],
        analysis_model: str,
        target_width: int,
        jpeg_quality: int,
        route_color: str,
        request_timeout: Optional[float],
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match (openai_api_key, anthropic_api_key):
            case (None, None):
                raise ValueError("OPENAI_API_KEY or ANTHROPIC_API_KEY must be set in .env")
            case _:
                pass

        if target_width <= 0:
            raise ValueError("TARGET_WIDTH must be a positive number of pixels")
        if not MIN_JPEG_QUALITY <= jpeg_quality <= MAX_JPEG_QUALITY:
            raise ValueError("JPEG_QUALITY must be between 1 and 95")

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            analysis_model=analysis_model,
            target_width=target_width,
            jpeg_quality=jpeg_quality,
            route_color=route_color,
            request_timeout=request_timeout,
        )
