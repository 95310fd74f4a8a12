"""ClaudeAnalysisClient — Anthropic Claude backend fed with chat-completion messages."""
import logging
from typing import Any

from anthropic import AnthropicError, AsyncAnthropic

from routecam.analysis.client import AnalysisClient
from routecam.constants import (
    CLAUDE_ANALYSIS_MODEL,
    CLAUDE_MAX_TOKENS,
    MSG_NO_DESCRIPTION,
)
from routecam.errors import RemoteCallError
from routecam.prompt import ChatMessage

logger = logging.getLogger(__name__)


def _image_block(url: str) -> dict[str, Any]:
    """data:<media>;base64,<payload> → Anthropic base64 image block."""
    header, sep, payload = url.partition(",")
    match (header.removeprefix("data:").split(";"), sep):
        case ([media_type, "base64"], ","):
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": media_type, "data": payload},
            }
        case _:
            raise ValueError(f"unsupported image url: {url[:32]}…")


def _to_anthropic(messages: list[ChatMessage]) -> tuple[str, list[dict[str, Any]]]:
    """Split chat-completion messages into (system, messages) for the Messages API."""
    system_parts: list[str] = []
    converted: list[dict[str, Any]] = []
    for message in messages:
        match message:
            case {"role": "system", "content": str() as text}:
                system_parts.append(text)
            case {"role": role, "content": str() as text}:
                converted.append({"role": role, "content": text})
            case {"role": role, "content": list() as parts}:
                blocks = []
                for part in parts:
                    match part:
                        case {"type": "text", "text": text}:
                            blocks.append({"type": "text", "text": text})
                        case {"type": "image_url", "image_url": {"url": url}}:
                            blocks.append(_image_block(url))
                        case _:
                            raise ValueError(f"unsupported content part: {part!r}")
                converted.append({"role": role, "content": blocks})
            case _:
                raise ValueError(f"unsupported message: {message!r}")
    return "\n\n".join(system_parts), converted


class ClaudeAnalysisClient(AnalysisClient):

    def __init__(
        self,
        client: AsyncAnthropic,
        model: str = CLAUDE_ANALYSIS_MODEL,
        max_tokens: int = CLAUDE_MAX_TOKENS,
    ) -> None:
        self._client = client
        self.model = model
        self._max_tokens = max_tokens

    async def analyze(self, messages: list[ChatMessage]) -> str:
        system, converted = _to_anthropic(messages)
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=self._max_tokens,
                system=system,
                messages=converted,
            )
        except (AnthropicError, OSError) as exc:
            raise RemoteCallError(str(exc) or type(exc).__name__) from exc

        try:
            texts = [block.text for block in message.content if block.type == "text"]
        except (AttributeError, TypeError) as exc:
            raise RemoteCallError(f"malformed response: {exc}") from exc

        match texts[0].strip() if texts else "":
            case "":
                logger.warning("Model %s returned no content", self.model)
                return MSG_NO_DESCRIPTION
            case text:
                return text
