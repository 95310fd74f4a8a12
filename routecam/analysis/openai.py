"""OpenAIAnalysisClient — OpenAI chat-completions backend."""
import logging

from openai import AsyncOpenAI, OpenAIError

from routecam.analysis.client import AnalysisClient
from routecam.constants import MSG_NO_DESCRIPTION, OPENAI_ANALYSIS_MODEL
from routecam.errors import RemoteCallError
from routecam.prompt import ChatMessage

logger = logging.getLogger(__name__)


class OpenAIAnalysisClient(AnalysisClient):

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = OPENAI_ANALYSIS_MODEL,
    ) -> None:
        self._client = client
        self.model = model

    async def analyze(self, messages: list[ChatMessage]) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except (OpenAIError, OSError) as exc:
            raise RemoteCallError(str(exc) or type(exc).__name__) from exc

        try:
            choices = response.choices or []
            content = choices[0].message.content if choices else None
        except (AttributeError, TypeError) as exc:
            raise RemoteCallError(f"malformed response: {exc}") from exc

        match content.strip() if isinstance(content, str) else "":
            case "":
                logger.warning("Model %s returned no content", self.model)
                return MSG_NO_DESCRIPTION
            case text:
                return text
